"""Lookup of global declarations across a schema graph.

Every lookup searches the schema's own declarations first and then its
included schemas in declaration order, depth first; the first match wins.
A name that matches nothing gives None, which callers use to detect
references to types defined outside the graph.
"""

from typing import List, Optional, Union

from .collector import PkgBag
from .namespaces import QNameKind, local_name, qname_key
from .schema_model import (
    Attribute, AttributeGroup, ComplexType, Element, Group, Schema, SimpleType,
)

Declaration = Union[Attribute, AttributeGroup, ComplexType, Element, Group, SimpleType]


def _find_global(schema: Schema, bag: PkgBag, name: str, kind: str) -> Optional[Declaration]:
    if not name:
        return None
    context = bag.schema if bag.schema is not None else schema
    return _search(schema, qname_key(name, context, QNameKind.REFERENCE), kind)


def _search(schema: Schema, key: str, kind: str) -> Optional[Declaration]:
    for declaration in getattr(schema, kind):
        if declaration.name and qname_key(declaration.name, schema, QNameKind.DECLARATION) == key:
            return declaration
    for included in schema.included_schemas:
        found = _search(included, key, kind)
        if found is not None:
            return found
    return None


def global_complex_type(schema: Schema, bag: PkgBag, name: str) -> Optional[ComplexType]:
    """Find the global complex type a (possibly prefixed) type name refers to."""
    return _find_global(schema, bag, name, "complex_types")


def global_simple_type(schema: Schema, bag: PkgBag, name: str) -> Optional[SimpleType]:
    return _find_global(schema, bag, name, "simple_types")


def global_element(schema: Schema, bag: PkgBag, name: str) -> Optional[Element]:
    """Find the global element a (possibly prefixed) element name refers to."""
    return _find_global(schema, bag, name, "elements")


def global_attribute(schema: Schema, bag: PkgBag, name: str) -> Optional[Attribute]:
    return _find_global(schema, bag, name, "attributes")


def global_attribute_group(schema: Schema, bag: PkgBag, name: str) -> Optional[AttributeGroup]:
    return _find_global(schema, bag, name, "attribute_groups")


def global_group(schema: Schema, bag: PkgBag, name: str) -> Optional[Group]:
    return _find_global(schema, bag, name, "groups")


def find_type(schema: Schema, bag: PkgBag, name: str) -> Optional[Union[ComplexType, SimpleType]]:
    """Find a global complex type, or failing that a global simple type."""
    found = global_complex_type(schema, bag, name)
    if found is None:
        found = global_simple_type(schema, bag, name)
    return found


def global_substitution_elements(schema: Schema, head: Element) -> List[Element]:
    """Direct members of the substitution group headed by ``head``, in graph order.

    Members are matched on the local part of their substitutionGroup value
    against the head's ref (or name). The head itself is never a member and
    members of members are not followed.
    """
    head_name = head.ref or head.name
    if not head_name:
        return []
    return _substitution_members(schema, head, local_name(head_name))


def _substitution_members(schema: Schema, head: Element, head_local: str) -> List[Element]:
    members = [
        element for element in schema.elements
        if element is not head and element.substitution_group
        and local_name(element.substitution_group) == head_local
    ]
    for included in schema.included_schemas:
        members.extend(_substitution_members(included, head, head_local))
    return members
