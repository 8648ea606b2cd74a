"""XSD document parser producing the schema model."""

from io import BytesIO
from typing import Callable, Dict, List, Optional, Union
from xml.etree import ElementTree

import xmlschema
from xmlschema.names import XML_NAMESPACE, XSD_NAMESPACE

from .exceptions import SchemaParseError
from .logger import XSDLogger, create_logger
from .namespaces import XMLNS_SPACE, RawAttribute, resolve_namespaces
from .schema_model import (
    Annotation, Any, Attribute, AttributeGroup, AttributeUse, ComplexType, Compositor,
    DerivationMethod, Element, ElementOccurrence, Facet, Group, Import, Include,
    ModelGroup, Notation, Redefine, Schema, SimpleType,
)

XSD_SCHEMA_TAG = f"{{{XSD_NAMESPACE}}}schema"

FACET_NAMES = {
    "enumeration", "pattern", "length", "minLength", "maxLength", "whiteSpace",
    "totalDigits", "fractionDigits", "minInclusive", "maxInclusive",
    "minExclusive", "maxExclusive", "assertion", "explicitTimezone",
}


def xsd_local_name(elem: ElementTree.Element) -> Optional[str]:
    """Local name of an element in the XSD namespace, None for other elements."""
    tag = elem.tag
    if not isinstance(tag, str) or not tag.startswith(f"{{{XSD_NAMESPACE}}}"):
        return None
    return tag.split("}", 1)[1]


def _other_attributes(elem: ElementTree.Element, known: set) -> Dict[str, str]:
    return {k: v for k, v in elem.attrib.items() if k not in known}


def _is_true(value: Optional[str]) -> bool:
    return value in ("true", "1")


def _attribute_use(value: Optional[str]) -> AttributeUse:
    try:
        return AttributeUse(value or "optional")
    except ValueError:
        return AttributeUse.OPTIONAL


class SchemaParser:
    """Parser turning XSD document bytes into a namespace-resolved Schema."""

    def __init__(self, logger: Optional[XSDLogger] = None):
        self.logger = logger or create_logger(component="parser")

    def parse(self, data: bytes, load_uri: str, local_path: Optional[str] = None) -> Schema:
        """Parse an XSD document and resolve its namespace prefixes.

        Raises SchemaParseError if the data is not well-formed XML or its root
        is not an XSD schema element.
        """
        root_attributes = self.scan_root_attributes(data, load_uri)

        try:
            resource = xmlschema.XMLResource(BytesIO(data))
        except (ElementTree.ParseError, xmlschema.XMLSchemaException) as e:
            self.logger.error("XML parsing error", schema=load_uri, error=str(e), errorType=type(e).__name__)
            raise SchemaParseError(f"malformed schema document: {e}", load_uri) from e

        root = resource.root
        if root.tag != XSD_SCHEMA_TAG:
            self.logger.error("Not an XSD document", schema=load_uri, rootTag=root.tag)
            raise SchemaParseError(f"root element {root.tag!r} is not an XSD schema", load_uri)

        try:
            schema = self._convert_schema(root)
        except ValueError as e:
            self.logger.error("Invalid schema content", schema=load_uri, error=str(e))
            raise SchemaParseError(f"invalid schema content: {e}", load_uri) from e

        schema.load_uri = load_uri
        schema.local_path = str(local_path) if local_path is not None else None
        resolve_namespaces(schema, root_attributes)

        self.logger.schema_event(
            "parsed", load_uri,
            targetNamespace=schema.target_namespace,
            elements=len(schema.elements),
            complexTypes=len(schema.complex_types),
            simpleTypes=len(schema.simple_types),
            directives=len(schema.directives),
        )
        return schema

    def scan_root_attributes(self, data: bytes, load_uri: str = "") -> List[RawAttribute]:
        """Collect the raw attributes of the root element, namespace declarations included.

        Only the document prolog and the root start tag are tokenized.
        """
        attributes: List[RawAttribute] = []
        try:
            for event, item in ElementTree.iterparse(BytesIO(data), events=("start-ns", "start")):
                if event == "start-ns":
                    prefix, uri = item
                    if prefix:
                        attributes.append(RawAttribute(XMLNS_SPACE, prefix, uri))
                    else:
                        attributes.append(RawAttribute("", XMLNS_SPACE, uri))
                else:
                    for name, value in item.attrib.items():
                        if name.startswith("{"):
                            space, local = name[1:].split("}", 1)
                        else:
                            space, local = "", name
                        attributes.append(RawAttribute(space, local, value))
                    break
        except ElementTree.ParseError as e:
            self.logger.error("XML parsing error", schema=load_uri, error=str(e))
            raise SchemaParseError(f"malformed schema document: {e}", load_uri) from e

        return attributes

    def _convert_schema(self, root: ElementTree.Element) -> Schema:
        """Convert the schema root element to our Schema model."""
        attrib = root.attrib
        schema = Schema(
            target_namespace=attrib.get("targetNamespace"),
            element_form_default=attrib.get("elementFormDefault", "unqualified"),
            attribute_form_default=attrib.get("attributeFormDefault", "unqualified"),
            block_default=attrib.get("blockDefault"),
            final_default=attrib.get("finalDefault"),
            version=attrib.get("version"),
            id=attrib.get("id"),
            lang=attrib.get(f"{{{XML_NAMESPACE}}}lang"),
            other_attributes=_other_attributes(root, {
                "targetNamespace", "elementFormDefault", "attributeFormDefault",
                "blockDefault", "finalDefault", "version", "id", f"{{{XML_NAMESPACE}}}lang",
            }),
        )

        converters: Dict[str, Callable] = {
            "annotation": lambda e: schema.annotations.append(self._convert_annotation(e)),
            "attribute": lambda e: schema.attributes.append(self._convert_attribute(e)),
            "attributeGroup": lambda e: schema.attribute_groups.append(self._convert_attribute_group(e)),
            "complexType": lambda e: schema.complex_types.append(self._convert_complex_type(e)),
            "simpleType": lambda e: schema.simple_types.append(self._convert_simple_type(e)),
            "element": lambda e: schema.elements.append(self._convert_element(e)),
            "group": lambda e: schema.groups.append(self._convert_group(e)),
            "notation": lambda e: schema.notations.append(self._convert_notation(e)),
            "include": lambda e: self._add_directive(schema, schema.includes, self._convert_include(e)),
            "import": lambda e: self._add_directive(schema, schema.imports, self._convert_import(e)),
            "redefine": lambda e: self._add_directive(schema, schema.redefines, self._convert_redefine(e)),
        }

        for child in root:
            name = xsd_local_name(child)
            if name in converters:
                converters[name](child)
            elif name is not None:
                self.logger.debug("Skipping unsupported schema child", tag=name)

        return schema

    @staticmethod
    def _add_directive(schema: Schema, bucket: list, directive) -> None:
        bucket.append(directive)
        schema.directives.append(directive)

    def _convert_annotation(self, elem: ElementTree.Element) -> Annotation:
        annotation = Annotation()
        for child in elem:
            name = xsd_local_name(child)
            text = "".join(child.itertext())
            if name == "documentation":
                annotation.add_documentation(text)
            elif name == "appinfo":
                annotation.add_appinfo(text)
        return annotation

    def _child_annotation(self, elem: ElementTree.Element) -> Optional[Annotation]:
        for child in elem:
            if xsd_local_name(child) == "annotation":
                return self._convert_annotation(child)
        return None

    def _convert_element(self, elem: ElementTree.Element) -> Element:
        attrib = elem.attrib
        element = Element(
            name=attrib.get("name"),
            ref=attrib.get("ref"),
            type=attrib.get("type"),
            substitution_group=attrib.get("substitutionGroup"),
            abstract=_is_true(attrib.get("abstract")),
            nillable=_is_true(attrib.get("nillable")),
            default_value=attrib.get("default"),
            fixed_value=attrib.get("fixed"),
            form=attrib.get("form"),
            block=attrib.get("block"),
            final=attrib.get("final"),
            occurs=ElementOccurrence.from_attributes(attrib),
            annotation=self._child_annotation(elem),
            other_attributes=_other_attributes(elem, {
                "name", "ref", "type", "substitutionGroup", "abstract", "nillable", "default",
                "fixed", "form", "block", "final", "minOccurs", "maxOccurs",
            }),
        )

        for child in elem:
            name = xsd_local_name(child)
            if name == "complexType":
                element.complex_type = self._convert_complex_type(child)
            elif name == "simpleType":
                element.simple_type = self._convert_simple_type(child)

        return element

    def _convert_attribute(self, elem: ElementTree.Element) -> Attribute:
        attrib = elem.attrib
        attribute = Attribute(
            name=attrib.get("name"),
            ref=attrib.get("ref"),
            type=attrib.get("type"),
            use=_attribute_use(attrib.get("use")),
            default_value=attrib.get("default"),
            fixed_value=attrib.get("fixed"),
            form=attrib.get("form"),
            annotation=self._child_annotation(elem),
            other_attributes=_other_attributes(elem, {
                "name", "ref", "type", "use", "default", "fixed", "form",
            }),
        )

        for child in elem:
            if xsd_local_name(child) == "simpleType":
                attribute.simple_type = self._convert_simple_type(child)

        return attribute

    def _convert_attribute_uses(self, elem: ElementTree.Element,
                                target: Union[ComplexType, AttributeGroup]) -> None:
        """Collect attribute, attributeGroup and anyAttribute children into ``target``."""
        for child in elem:
            name = xsd_local_name(child)
            if name == "attribute":
                target.attributes.append(self._convert_attribute(child))
            elif name == "attributeGroup":
                target.attribute_groups.append(self._convert_attribute_group(child))
            elif name == "anyAttribute":
                target.has_any_attribute = True

    def _convert_attribute_group(self, elem: ElementTree.Element) -> AttributeGroup:
        attr_group = AttributeGroup(
            name=elem.get("name"),
            ref=elem.get("ref"),
            annotation=self._child_annotation(elem),
            other_attributes=_other_attributes(elem, {"name", "ref"}),
        )
        self._convert_attribute_uses(elem, attr_group)
        return attr_group

    def _convert_model_group(self, elem: ElementTree.Element) -> ModelGroup:
        """Convert a sequence, choice or all compositor and its particles."""
        model_group = ModelGroup(
            compositor=Compositor(xsd_local_name(elem)),
            occurs=ElementOccurrence.from_attributes(elem.attrib),
            annotation=self._child_annotation(elem),
        )

        for child in elem:
            name = xsd_local_name(child)
            if name == "element":
                model_group.particles.append(self._convert_element(child))
            elif name in ("sequence", "choice", "all"):
                model_group.particles.append(self._convert_model_group(child))
            elif name == "group":
                model_group.particles.append(self._convert_group(child))
            elif name == "any":
                model_group.particles.append(Any(
                    namespace_constraint=child.get("namespace", "##any"),
                    process_contents=child.get("processContents", "strict"),
                    occurs=ElementOccurrence.from_attributes(child.attrib),
                ))

        return model_group

    def _convert_group(self, elem: ElementTree.Element) -> Group:
        group = Group(
            name=elem.get("name"),
            ref=elem.get("ref"),
            occurs=ElementOccurrence.from_attributes(elem.attrib),
            annotation=self._child_annotation(elem),
            other_attributes=_other_attributes(elem, {"name", "ref", "minOccurs", "maxOccurs"}),
        )
        for child in elem:
            if xsd_local_name(child) in ("sequence", "choice", "all"):
                group.model_group = self._convert_model_group(child)
        return group

    def _convert_complex_type(self, elem: ElementTree.Element) -> ComplexType:
        attrib = elem.attrib
        complex_type = ComplexType(
            name=attrib.get("name"),
            abstract=_is_true(attrib.get("abstract")),
            mixed=_is_true(attrib.get("mixed")),
            block=attrib.get("block"),
            final=attrib.get("final"),
            annotation=self._child_annotation(elem),
            other_attributes=_other_attributes(elem, {"name", "abstract", "mixed", "block", "final"}),
        )

        content = elem
        for child in elem:
            name = xsd_local_name(child)
            if name in ("simpleContent", "complexContent"):
                complex_type.content_kind = name
                if _is_true(child.get("mixed")):
                    complex_type.mixed = True
                for derivation in child:
                    method = xsd_local_name(derivation)
                    if method in ("extension", "restriction"):
                        complex_type.derivation = DerivationMethod(method)
                        complex_type.base = derivation.get("base")
                        content = derivation

        for child in content:
            name = xsd_local_name(child)
            if name in ("sequence", "choice", "all"):
                complex_type.model_group = self._convert_model_group(child)
            elif name == "group":
                complex_type.model_group = ModelGroup(particles=[self._convert_group(child)])

        self._convert_attribute_uses(content, complex_type)
        return complex_type

    def _convert_simple_type(self, elem: ElementTree.Element) -> SimpleType:
        simple_type = SimpleType(
            name=elem.get("name"),
            final=elem.get("final"),
            annotation=self._child_annotation(elem),
            other_attributes=_other_attributes(elem, {"name", "final"}),
        )

        for child in elem:
            name = xsd_local_name(child)
            if name == "restriction":
                simple_type.variety = "atomic"
                simple_type.base = child.get("base")
                for facet in child:
                    facet_name = xsd_local_name(facet)
                    if facet_name in FACET_NAMES:
                        simple_type.facets.append(Facet(
                            facet_name, facet.get("value", ""), _is_true(facet.get("fixed"))
                        ))
                    elif facet_name == "simpleType":
                        simple_type.inline_types.append(self._convert_simple_type(facet))
            elif name == "list":
                simple_type.variety = "list"
                simple_type.item_type = child.get("itemType")
                simple_type.inline_types.extend(
                    self._convert_simple_type(c) for c in child if xsd_local_name(c) == "simpleType"
                )
            elif name == "union":
                simple_type.variety = "union"
                simple_type.member_types = child.get("memberTypes", "").split()
                simple_type.inline_types.extend(
                    self._convert_simple_type(c) for c in child if xsd_local_name(c) == "simpleType"
                )

        return simple_type

    def _convert_notation(self, elem: ElementTree.Element) -> Notation:
        return Notation(
            name=elem.get("name", ""),
            public=elem.get("public"),
            system=elem.get("system"),
            annotation=self._child_annotation(elem),
        )

    def _convert_include(self, elem: ElementTree.Element) -> Include:
        return Include(schema_location=elem.get("schemaLocation"),
                       annotation=self._child_annotation(elem))

    def _convert_import(self, elem: ElementTree.Element) -> Import:
        return Import(namespace=elem.get("namespace"),
                      schema_location=elem.get("schemaLocation"),
                      annotation=self._child_annotation(elem))

    def _convert_redefine(self, elem: ElementTree.Element) -> Redefine:
        redefine = Redefine(schema_location=elem.get("schemaLocation"))
        for child in elem:
            name = xsd_local_name(child)
            if name == "complexType":
                redefine.complex_types.append(self._convert_complex_type(child))
            elif name == "simpleType":
                redefine.simple_types.append(self._convert_simple_type(child))
            elif name == "group":
                redefine.groups.append(self._convert_group(child))
            elif name == "attributeGroup":
                redefine.attribute_groups.append(self._convert_attribute_group(child))
        return redefine
