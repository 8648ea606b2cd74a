"""Namespace prefix mapping and qualified-name resolution for schemas."""

from enum import Enum
from typing import Iterable, NamedTuple

from xmlschema.names import XML_NAMESPACE, XSD_NAMESPACE

from .schema_model import QName, Schema

XMLNS_SPACE = "xmlns"


class RawAttribute(NamedTuple):
    """An attribute of the root element as seen by the token scan.

    ``xmlns:p="u"`` is ``("xmlns", "p", "u")``, ``xmlns="u"`` is
    ``("", "xmlns", "u")`` and ``{ns}name`` attributes carry their namespace
    URI in ``space``.
    """
    space: str
    local: str
    value: str


class QNameKind(str, Enum):
    """How a bare (unprefixed) name is interpreted."""
    DECLARATION = "declaration"  # belongs to the schema's target namespace
    REFERENCE = "reference"      # belongs to the default namespace, if any


def resolve_namespaces(schema: Schema, root_attributes: Iterable[RawAttribute]) -> None:
    """Populate the prefix map of a schema from its root element attributes."""
    namespaces = {}
    for attr in root_attributes:
        if attr.space == XMLNS_SPACE:
            namespaces[attr.local] = attr.value
        elif not attr.space and attr.local == XMLNS_SPACE:
            namespaces[""] = attr.value

    schema.xsd_prefix = None
    schema.namespace_prefix = None
    for prefix, uri in namespaces.items():
        if uri == XSD_NAMESPACE:
            if schema.xsd_prefix is None:
                schema.xsd_prefix = prefix
        elif schema.target_namespace and uri == schema.target_namespace:
            if schema.namespace_prefix is None:
                schema.namespace_prefix = prefix

    if not namespaces.get("xml"):
        namespaces["xml"] = XML_NAMESPACE
    schema.namespaces = namespaces


def split_qname(name: str):
    """Split a prefixed name into (prefix, local name); prefix is None if absent."""
    prefix, sep, local = name.partition(":")
    if not sep:
        return None, name
    return prefix, local


def local_name(name: str) -> str:
    return name.rpartition(":")[2]


def resolve_qname(name: str, schema: Schema, kind: QNameKind = QNameKind.REFERENCE) -> QName:
    """Resolve a possibly prefixed name in the lexical context of ``schema``.

    Prefixes are looked up in the prefix map of ``schema``, the schema where
    the name is written, never in the map of the schema declaring the target.
    """
    prefix, local = split_qname(name)

    if prefix is None:
        if kind == QNameKind.DECLARATION:
            namespace = schema.target_namespace or ""
        else:
            namespace = schema.namespaces.get("", "")
        return QName(local, namespace)

    namespace = schema.namespaces.get(prefix)
    alias = None
    if namespace is not None and namespace not in (
            schema.target_namespace or "", XSD_NAMESPACE, XML_NAMESPACE):
        alias = prefix
    return QName(local, namespace, prefix, alias)


def qname_key(name: str, schema: Schema, kind: QNameKind = QNameKind.REFERENCE) -> str:
    """Normalized string key of a name, equal across schemas for the same QName."""
    return resolve_qname(name, schema, kind).expanded_name
