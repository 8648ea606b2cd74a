"""Aggregation of global declarations across a schema graph."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .namespaces import QNameKind, resolve_qname
from .schema_model import Attribute, AttributeGroup, Element, Group, Notation, QName, Schema


@dataclass(eq=False)
class PkgBag:
    """Context shared by the emission backend during one generation run.

    Holds the schema currently being processed, which is the lexical context
    for name resolution, and the flattened global declarations.
    """
    schema: Optional[Schema] = None
    all_attributes: List[Attribute] = field(default_factory=list)
    all_attribute_groups: List[AttributeGroup] = field(default_factory=list)
    all_elements: List[Element] = field(default_factory=list)
    all_groups: List[Group] = field(default_factory=list)
    all_notations: List[Notation] = field(default_factory=list)

    def resolve_qname_ref(self, name: str, kind: QNameKind = QNameKind.REFERENCE) -> QName:
        """Resolve ``name`` in the context of the current schema."""
        if self.schema is None:
            raise ValueError("PkgBag has no current schema to resolve names against")
        return resolve_qname(name, self.schema, kind)

    def statistics(self) -> Dict[str, int]:
        return {
            "attributes": len(self.all_attributes),
            "attributeGroups": len(self.all_attribute_groups),
            "elements": len(self.all_elements),
            "groups": len(self.all_groups),
            "notations": len(self.all_notations),
        }


def new_pkg_bag(schema: Schema) -> PkgBag:
    return PkgBag(schema=schema)


def collect_globals(schema: Schema, bag: PkgBag) -> PkgBag:
    """Append the global declarations of ``schema`` and its includes to ``bag``.

    Traversal is self first, then included schemas in declaration order. A
    schema reached through two include edges contributes once per edge.
    """
    bag.all_attributes.extend(schema.attributes)
    bag.all_attribute_groups.extend(schema.attribute_groups)
    bag.all_elements.extend(schema.elements)
    bag.all_groups.extend(schema.groups)
    bag.all_notations.extend(schema.notations)
    for included in schema.included_schemas:
        collect_globals(included, bag)
    return bag
