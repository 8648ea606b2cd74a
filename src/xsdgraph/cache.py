"""Cache of loaded schemas keyed by load URI."""

from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from .exceptions import IncludeCycleError
from .schema_model import Schema


class SchemaCache:
    """Mapping from load URI to the schema loaded from it.

    Besides the loaded schemas the cache tracks the URIs whose load is in
    progress, in load order, so that a document reached again before its own
    load has finished is reported as an include cycle.
    """

    def __init__(self):
        self._schemas: Dict[str, Schema] = {}
        self._loading: List[str] = []

    def get(self, uri: str) -> Optional[Schema]:
        return self._schemas.get(uri)

    def put(self, uri: str, schema: Schema) -> None:
        self._schemas[uri] = schema

    def discard(self, uri: str) -> None:
        self._schemas.pop(uri, None)

    def is_loading(self, uri: str) -> bool:
        return uri in self._loading

    @contextmanager
    def loading(self, uri: str) -> Iterator[None]:
        """Mark ``uri`` as loading for the duration of the block."""
        if uri in self._loading:
            raise IncludeCycleError(self._loading[self._loading.index(uri):] + [uri])
        self._loading.append(uri)
        try:
            yield
        finally:
            self._loading.remove(uri)

    def clear(self) -> None:
        """Forget every loaded schema, starting a fresh generation run."""
        self._schemas.clear()
        self._loading.clear()

    @property
    def uris(self) -> List[str]:
        return list(self._schemas)

    def __contains__(self, uri: str) -> bool:
        return uri in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)


default_cache = SchemaCache()


def clear_loaded_schemas_cache() -> None:
    """Reset the process-wide schema cache."""
    default_cache.clear()
