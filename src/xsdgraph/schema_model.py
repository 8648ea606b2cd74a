"""Schema model for parsed XSD documents and their include graph.

Components are plain dataclasses composed from a small set of shared shapes
(occurrence, annotation, attribute lists, other attributes) rather than a
class hierarchy. Instances compare by identity.
"""

import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


class ElementOccurrence:
    """Represents minOccurs/maxOccurs for particles."""

    def __init__(self, min_occurs: int = 1, max_occurs: Union[int, str] = 1):
        self.min = max(0, int(min_occurs))
        self.max = max_occurs if max_occurs == "unbounded" else max(0, int(max_occurs))

    @classmethod
    def from_attributes(cls, attrib: Dict[str, str]) -> "ElementOccurrence":
        return cls(int(attrib.get("minOccurs", 1)), attrib.get("maxOccurs", 1))

    @property
    def is_optional(self) -> bool:
        """Whether the particle is optional (minOccurs = 0)."""
        return self.min == 0

    @property
    def is_array(self) -> bool:
        """Whether the particle can occur multiple times."""
        return self.max == "unbounded" or (isinstance(self.max, int) and self.max > 1)

    def __str__(self) -> str:
        return f"[{self.min}..{self.max}]"


class AttributeUse(str, Enum):
    """Attribute usage types."""
    REQUIRED = "required"
    OPTIONAL = "optional"
    PROHIBITED = "prohibited"


class DerivationMethod(str, Enum):
    """Type derivation methods."""
    EXTENSION = "extension"
    RESTRICTION = "restriction"


class Compositor(str, Enum):
    """Model group compositors."""
    SEQUENCE = "sequence"
    CHOICE = "choice"
    ALL = "all"


@dataclass
class Annotation:
    """XSD annotation (documentation and appinfo)."""
    documentation: List[str] = field(default_factory=list)
    appinfo: List[str] = field(default_factory=list)

    def add_documentation(self, text: Optional[str]) -> None:
        """Add documentation text, ignoring blank content."""
        if text and text.strip():
            self.documentation.append(text.strip())

    def add_appinfo(self, text: Optional[str]) -> None:
        if text and text.strip():
            self.appinfo.append(text.strip())


@dataclass
class QName:
    """Qualified name with namespace support.

    ``expanded_name`` is the canonical key used to compare names coming from
    schemas that bind different prefixes to the same namespace. When the
    prefix of a reference could not be resolved ``namespace_uri`` is None
    and the key keeps the prefixed form, so it never equals a resolved key.
    """
    local_name: str
    namespace_uri: Optional[str] = None
    prefix: Optional[str] = None
    alias: Optional[str] = None

    @property
    def expanded_name(self) -> str:
        """Get expanded name format: {namespace}localname."""
        if self.namespace_uri:
            return f"{{{self.namespace_uri}}}{self.local_name}"
        if self.namespace_uri is None and self.prefix:
            return f"{self.prefix}:{self.local_name}"
        return self.local_name

    @property
    def is_resolved(self) -> bool:
        return self.namespace_uri is not None

    def __str__(self) -> str:
        if self.prefix:
            return f"{self.prefix}:{self.local_name}"
        return self.local_name


@dataclass
class Facet:
    """XSD facet constraint."""
    name: str
    value: str
    fixed: bool = False


@dataclass(eq=False)
class SimpleType:
    name: Optional[str] = None
    variety: str = "atomic"
    base: Optional[str] = None
    item_type: Optional[str] = None
    member_types: List[str] = field(default_factory=list)
    inline_types: List["SimpleType"] = field(default_factory=list)
    facets: List[Facet] = field(default_factory=list)
    final: Optional[str] = None
    annotation: Optional[Annotation] = None
    other_attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def enumeration_values(self) -> List[str]:
        return [f.value for f in self.facets if f.name == "enumeration"]


@dataclass(eq=False)
class Attribute:
    name: Optional[str] = None
    ref: Optional[str] = None
    type: Optional[str] = None
    use: AttributeUse = AttributeUse.OPTIONAL
    default_value: Optional[str] = None
    fixed_value: Optional[str] = None
    form: Optional[str] = None
    simple_type: Optional[SimpleType] = None
    annotation: Optional[Annotation] = None
    other_attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def is_required(self) -> bool:
        return self.use == AttributeUse.REQUIRED


@dataclass(eq=False)
class AttributeGroup:
    name: Optional[str] = None
    ref: Optional[str] = None
    attributes: List[Attribute] = field(default_factory=list)
    attribute_groups: List["AttributeGroup"] = field(default_factory=list)
    has_any_attribute: bool = False
    annotation: Optional[Annotation] = None
    other_attributes: Dict[str, str] = field(default_factory=dict)


@dataclass(eq=False)
class Any:
    """XSD any element wildcard."""
    namespace_constraint: str = "##any"
    process_contents: str = "strict"
    occurs: ElementOccurrence = field(default_factory=ElementOccurrence)


@dataclass(eq=False)
class ModelGroup:
    """A sequence, choice or all compositor and its ordered particles."""
    compositor: Compositor = Compositor.SEQUENCE
    particles: List[object] = field(default_factory=list)
    occurs: ElementOccurrence = field(default_factory=ElementOccurrence)
    annotation: Optional[Annotation] = None

    def iter_elements(self):
        """Yield the element particles, descending into nested model groups."""
        for particle in self.particles:
            if isinstance(particle, Element):
                yield particle
            elif isinstance(particle, ModelGroup):
                yield from particle.iter_elements()


@dataclass(eq=False)
class Group:
    name: Optional[str] = None
    ref: Optional[str] = None
    model_group: Optional[ModelGroup] = None
    occurs: ElementOccurrence = field(default_factory=ElementOccurrence)
    annotation: Optional[Annotation] = None
    other_attributes: Dict[str, str] = field(default_factory=dict)


@dataclass(eq=False)
class ComplexType:
    name: Optional[str] = None
    abstract: bool = False
    mixed: bool = False
    content_kind: Optional[str] = None  # simpleContent | complexContent
    base: Optional[str] = None
    derivation: Optional[DerivationMethod] = None
    model_group: Optional[ModelGroup] = None
    attributes: List[Attribute] = field(default_factory=list)
    attribute_groups: List[AttributeGroup] = field(default_factory=list)
    has_any_attribute: bool = False
    block: Optional[str] = None
    final: Optional[str] = None
    annotation: Optional[Annotation] = None
    other_attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def is_derived(self) -> bool:
        return self.base is not None


@dataclass(eq=False)
class Element:
    name: Optional[str] = None
    ref: Optional[str] = None
    type: Optional[str] = None
    substitution_group: Optional[str] = None
    abstract: bool = False
    nillable: bool = False
    default_value: Optional[str] = None
    fixed_value: Optional[str] = None
    form: Optional[str] = None
    block: Optional[str] = None
    final: Optional[str] = None
    occurs: ElementOccurrence = field(default_factory=ElementOccurrence)
    complex_type: Optional[ComplexType] = None
    simple_type: Optional[SimpleType] = None
    annotation: Optional[Annotation] = None
    other_attributes: Dict[str, str] = field(default_factory=dict)


@dataclass(eq=False)
class Notation:
    name: str
    public: Optional[str] = None
    system: Optional[str] = None
    annotation: Optional[Annotation] = None


@dataclass(eq=False)
class Include:
    schema_location: Optional[str] = None
    annotation: Optional[Annotation] = None


@dataclass(eq=False)
class Import:
    namespace: Optional[str] = None
    schema_location: Optional[str] = None
    annotation: Optional[Annotation] = None


@dataclass(eq=False)
class Redefine:
    schema_location: Optional[str] = None
    complex_types: List[ComplexType] = field(default_factory=list)
    simple_types: List[SimpleType] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
    attribute_groups: List[AttributeGroup] = field(default_factory=list)


Directive = Union[Include, Import, Redefine]


@dataclass(eq=False)
class Schema:
    """Root XSD schema document and its place in the include graph."""

    load_uri: str = ""
    local_path: Optional[str] = None

    # Root attributes
    target_namespace: Optional[str] = None
    element_form_default: str = "unqualified"
    attribute_form_default: str = "unqualified"
    block_default: Optional[str] = None
    final_default: Optional[str] = None
    version: Optional[str] = None
    id: Optional[str] = None
    lang: Optional[str] = None
    other_attributes: Dict[str, str] = field(default_factory=dict)

    # Namespace state, filled by resolve_namespaces() before any lookup
    namespaces: Dict[str, str] = field(default_factory=dict)
    xsd_prefix: Optional[str] = None
    namespace_prefix: Optional[str] = None

    annotations: List[Annotation] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)
    attribute_groups: List[AttributeGroup] = field(default_factory=list)
    complex_types: List[ComplexType] = field(default_factory=list)
    simple_types: List[SimpleType] = field(default_factory=list)
    elements: List[Element] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
    notations: List[Notation] = field(default_factory=list)
    includes: List[Include] = field(default_factory=list)
    imports: List[Import] = field(default_factory=list)
    redefines: List[Redefine] = field(default_factory=list)
    directives: List[Directive] = field(default_factory=list)

    included_schemas: List["Schema"] = field(default_factory=list, repr=False)
    _parent_ref: Optional[weakref.ref] = field(default=None, repr=False)

    @property
    def parent(self) -> Optional["Schema"]:
        """The schema that pulled this one in, if it is still alive."""
        return self._parent_ref() if self._parent_ref is not None else None

    @parent.setter
    def parent(self, schema: Optional["Schema"]) -> None:
        self._parent_ref = weakref.ref(schema) if schema is not None else None

    def root_schema(self) -> "Schema":
        """Ascend parent links to the document that started the load."""
        schema = self
        while schema.parent is not None:
            schema = schema.parent
        return schema

    def all_schemas(self) -> List["Schema"]:
        """Self followed by every transitively included schema, depth first."""
        schemas = [self]
        for included in self.included_schemas:
            schemas.extend(included.all_schemas())
        return schemas

    def __repr__(self) -> str:
        return f"Schema(load_uri={self.load_uri!r}, target_namespace={self.target_namespace!r})"
