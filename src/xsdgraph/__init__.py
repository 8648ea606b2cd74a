"""xsdgraph: load XSD documents into a resolved include/import graph."""

__version__ = "0.1.0"

from .cache import SchemaCache, clear_loaded_schemas_cache, default_cache
from .collector import PkgBag, collect_globals
from .config import Config
from .exceptions import (
    IncludeCycleError, SchemaCacheWriteError, SchemaFetchError, SchemaLoadError, SchemaParseError,
)
from .loader import SchemaLoader, load_schema
from .namespaces import QNameKind, qname_key, resolve_qname
from .resolver import (
    find_type, global_complex_type, global_element, global_substitution_elements,
)
from .schema_model import Schema

__all__ = [
    "Config", "IncludeCycleError", "PkgBag", "QNameKind", "Schema", "SchemaCache",
    "SchemaCacheWriteError", "SchemaFetchError", "SchemaLoadError", "SchemaLoader",
    "SchemaParseError", "clear_loaded_schemas_cache", "collect_globals", "default_cache",
    "find_type", "global_complex_type", "global_element", "global_substitution_elements",
    "load_schema", "qname_key", "resolve_qname",
]
