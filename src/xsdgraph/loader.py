"""Loading of schema documents into a linked include/import graph."""

import time
from typing import Optional

from .cache import SchemaCache, default_cache
from .config import Config
from .exceptions import SchemaLoadError
from .fetcher import DocumentFetcher, normalize_uri, resolve_location
from .logger import create_logger
from .parser import SchemaParser
from .schema_model import Import, Schema


class SchemaLoader:
    """Loads a schema and, recursively, every schema it includes or imports.

    Each distinct load URI is fetched and parsed at most once per cache
    lifetime; schemas reached through several directives are shared.
    """

    def __init__(self, config: Optional[Config] = None, cache: Optional[SchemaCache] = None,
                 fetcher: Optional[DocumentFetcher] = None, parser: Optional[SchemaParser] = None):
        self.config = config or Config()
        self.cache = cache if cache is not None else default_cache
        self.logger = create_logger(
            level=self.config.logging.level,
            component="loader",
            destination=self.config.logging.destination,
        )
        self.fetcher = fetcher or DocumentFetcher(
            cache_dir=self.config.cache_dir,
            timeout=self.config.timeout,
            logger=self.logger.child("fetcher"),
        )
        self.parser = parser or SchemaParser(logger=self.logger.child("parser"))

    def load(self, uri: str, local_copy: Optional[bool] = None) -> Schema:
        """Load the schema graph rooted at ``uri``.

        Raises a SchemaLoadError subclass if any document of the graph can't
        be fetched or parsed, or if the includes form a cycle.
        """
        if local_copy is None:
            local_copy = self.config.local_copy

        start_time = time.time()
        schema = self._load(normalize_uri(uri), local_copy)
        self.logger.info(
            "Schema graph loaded",
            schema=schema.load_uri,
            schemas=len(schema.all_schemas()),
            cached=len(self.cache),
        )
        self.logger.performance_metric("graph_load_time", time.time() - start_time, "seconds",
                                       schema=schema.load_uri)
        return schema

    def _load(self, load_uri: str, local_copy: bool) -> Schema:
        if not self.cache.is_loading(load_uri):
            cached = self.cache.get(load_uri)
            if cached is not None:
                self.logger.schema_event("reused", load_uri)
                return cached

        # Re-entering a URI whose load is in progress raises IncludeCycleError
        with self.cache.loading(load_uri):
            data, local_path = self.fetcher.read(load_uri, local_copy)
            schema = self.parser.parse(data, load_uri, local_path)
            self.cache.put(load_uri, schema)
            self.logger.schema_event("cached", load_uri)

            try:
                self._link_directives(schema, local_copy)
            except SchemaLoadError as e:
                self.cache.discard(load_uri)
                self.logger.schema_event("evicted", load_uri)
                self.logger.error("Schema load aborted", schema=load_uri, error=str(e),
                                  errorType=type(e).__name__)
                raise

        return schema

    def _link_directives(self, schema: Schema, local_copy: bool) -> None:
        """Resolve include, import and redefine directives into child schemas, in order."""
        schema.included_schemas = []
        for directive in schema.directives:
            if not directive.schema_location:
                if isinstance(directive, Import):
                    self.logger.debug("Import without schemaLocation skipped",
                                      schema=schema.load_uri, namespace=directive.namespace)
                continue

            child_uri = resolve_location(directive.schema_location, schema.load_uri)
            child = self._load(child_uri, local_copy)
            child.parent = schema
            schema.included_schemas.append(child)


def load_schema(uri: str, local_copy: bool = False, *, config: Optional[Config] = None,
                cache: Optional[SchemaCache] = None) -> Schema:
    """Load a schema graph with a one-off loader."""
    return SchemaLoader(config=config, cache=cache).load(uri, local_copy)
