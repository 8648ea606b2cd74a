"""Pytest configuration and fixtures for xsdgraph tests."""

import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from src.xsdgraph.cache import SchemaCache, clear_loaded_schemas_cache
from src.xsdgraph.config import Config
from src.xsdgraph.loader import SchemaLoader
from src.xsdgraph.logger import LogLevel


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as temp_path:
        yield Path(temp_path)


@pytest.fixture(autouse=True)
def clean_default_cache() -> Generator[None, None, None]:
    """Keep the process-wide cache from leaking between tests."""
    clear_loaded_schemas_cache()
    yield
    clear_loaded_schemas_cache()


@pytest.fixture
def write_xsd(temp_dir: Path) -> Callable[[str, str], str]:
    """Write an XSD file under the temp directory and return its file:// URI."""
    def _write(relative_path: str, content: str) -> str:
        xsd_file = temp_dir / relative_path
        xsd_file.parent.mkdir(parents=True, exist_ok=True)
        xsd_file.write_text(content, encoding='utf-8')
        return xsd_file.as_uri()
    return _write


@pytest.fixture
def config(temp_dir: Path) -> Config:
    """Configuration with a mirror directory under the temp dir."""
    config = Config(cache_dir=temp_dir / "mirror")
    config.logging.level = LogLevel.ERROR  # Suppress logs in tests
    return config


@pytest.fixture
def cache() -> SchemaCache:
    return SchemaCache()


@pytest.fixture
def loader(config: Config, cache: SchemaCache) -> SchemaLoader:
    return SchemaLoader(config=config, cache=cache)


@pytest.fixture
def simple_xsd_content() -> str:
    """Simple XSD content for testing."""
    return '''<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           targetNamespace="http://example.com/test"
           xmlns:tns="http://example.com/test"
           elementFormDefault="qualified"
           version="1.2">

    <xs:annotation>
        <xs:documentation>Test schema</xs:documentation>
    </xs:annotation>

    <xs:element name="person" type="tns:PersonType">
        <xs:annotation>
            <xs:documentation>A person element</xs:documentation>
        </xs:annotation>
    </xs:element>

    <xs:complexType name="PersonType">
        <xs:annotation>
            <xs:documentation>Person complex type</xs:documentation>
        </xs:annotation>
        <xs:sequence>
            <xs:element name="name" type="xs:string"/>
            <xs:element name="age" type="xs:int" minOccurs="0"/>
            <xs:element name="email" type="tns:EmailType" maxOccurs="unbounded"/>
        </xs:sequence>
        <xs:attribute name="id" type="xs:ID" use="required"/>
        <xs:attributeGroup ref="tns:commonAttributes"/>
    </xs:complexType>

    <xs:simpleType name="EmailType">
        <xs:restriction base="xs:string">
            <xs:pattern value="[^@]+@[^@]+\\.[^@]+"/>
            <xs:maxLength value="254"/>
        </xs:restriction>
    </xs:simpleType>

    <xs:simpleType name="Color">
        <xs:restriction base="xs:string">
            <xs:enumeration value="red"/>
            <xs:enumeration value="green"/>
        </xs:restriction>
    </xs:simpleType>

    <xs:attribute name="lang" type="xs:language"/>

    <xs:attributeGroup name="commonAttributes">
        <xs:attribute name="created" type="xs:dateTime"/>
        <xs:anyAttribute namespace="##other"/>
    </xs:attributeGroup>

    <xs:group name="contactGroup">
        <xs:choice>
            <xs:element name="phone" type="xs:string"/>
            <xs:element name="fax" type="xs:string"/>
        </xs:choice>
    </xs:group>

    <xs:notation name="gif" public="image/gif"/>

</xs:schema>'''


@pytest.fixture
def simple_xsd_uri(write_xsd, simple_xsd_content: str) -> str:
    return write_xsd("test.xsd", simple_xsd_content)


@pytest.fixture
def substitution_graph(write_xsd) -> str:
    """root.xsd (prefix tns) includes lib.xsd (prefix x), both in urn:a."""
    write_xsd("lib.xsd", '''<?xml version="1.0"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           xmlns:x="urn:a" targetNamespace="urn:a">
    <xs:element name="Base" type="x:BaseType" abstract="true"/>
    <xs:complexType name="BaseType"/>
    <xs:complexType name="Shared"/>
</xs:schema>''')
    return write_xsd("root.xsd", '''<?xml version="1.0"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           xmlns:tns="urn:a" targetNamespace="urn:a">
    <xs:include schemaLocation="lib.xsd"/>
    <xs:element name="Derived" substitutionGroup="x:Base"/>
    <xs:complexType name="Shared"/>
</xs:schema>''')
