"""Exception classes raised while loading a schema graph."""

from typing import List, Optional


class SchemaLoadError(Exception):
    """Base class for every failure that aborts a schema load."""

    def __init__(self, message: str, uri: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.uri = uri

    def __str__(self) -> str:
        if self.uri:
            return f"{self.message} (uri: {self.uri})"
        return self.message


class SchemaFetchError(SchemaLoadError):
    """Raised when a schema document can't be read from a file or the network."""


class SchemaCacheWriteError(SchemaLoadError):
    """Raised when the local mirror of a fetched document can't be written."""


class SchemaParseError(SchemaLoadError):
    """Raised when a document is not well-formed XML or not an XSD schema."""


class IncludeCycleError(SchemaLoadError):
    """Raised when a schema includes itself, directly or through other schemas.

    Mutual includes (a.xsd includes b.xsd, b.xsd includes a.xsd) are rejected
    as well, although XSD allows them: the lookups and the collector walk the
    include graph without a visited set and need it to be acyclic.
    """

    def __init__(self, cycle: List[str]):
        super().__init__("include cycle detected: " + " -> ".join(cycle), cycle[-1])
        self.cycle = cycle
