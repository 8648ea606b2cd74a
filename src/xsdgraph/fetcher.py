"""Fetching of schema documents from remote resources or a local mirror."""

from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Union
from urllib.parse import urljoin
from urllib.request import urlopen

from .exceptions import SchemaCacheWriteError, SchemaFetchError
from .logger import XSDLogger, create_logger

PROTOCOL_SEPARATOR = "://"
DEFAULT_SCHEME = "http" + PROTOCOL_SEPARATOR


def split_scheme(uri: str) -> Tuple[str, str]:
    """Split a URI into its scheme (with separator) and the rest.

    A URI without an explicit scheme is assumed to be http.
    """
    pos = uri.find(PROTOCOL_SEPARATOR)
    if pos < 0:
        return DEFAULT_SCHEME, uri
    end = pos + len(PROTOCOL_SEPARATOR)
    return uri[:end], uri[end:]


def normalize_uri(uri: str) -> str:
    scheme, rest = split_scheme(uri)
    return scheme + rest


def resolve_location(location: str, base_uri: str) -> str:
    """Resolve a schemaLocation against the URI of the schema declaring it.

    Relative paths, host-absolute paths and ``..`` segments follow RFC 3986,
    so the host of the base URI is never taken for a path segment.
    """
    if PROTOCOL_SEPARATOR in location:
        return normalize_uri(location)
    return urljoin(normalize_uri(base_uri), location)


class DocumentFetcher:
    """Opens schema documents, optionally through a local mirror directory."""

    def __init__(self, cache_dir: Union[str, Path] = "./xsd-cache", timeout: int = 30,
                 logger: Optional[XSDLogger] = None):
        self.cache_dir = Path(cache_dir)
        self.timeout = timeout
        self.logger = logger or create_logger(component="fetcher")

    def local_path_for(self, uri: str) -> Path:
        """Mirror path of a URI; the scheme is not part of the layout."""
        _, rest = split_scheme(uri)
        return self.cache_dir.joinpath(*[part for part in rest.split("/") if part])

    def open(self, uri: str, local_copy: bool = False) -> Tuple[BinaryIO, Optional[Path]]:
        """Return a binary stream on the document and the mirror path used, if any."""
        uri = normalize_uri(uri)
        if not local_copy:
            return self._open_remote(uri), None

        local_path = self.local_path_for(uri)
        if not local_path.exists():
            self._download(uri, local_path)
        else:
            self.logger.schema_event("read from mirror", uri, localPath=str(local_path))

        try:
            return local_path.open("rb"), local_path
        except OSError as e:
            raise SchemaFetchError(f"cannot read mirror file {local_path}: {e}", uri) from e

    def _open_remote(self, uri: str) -> BinaryIO:
        self.logger.schema_event("fetched", uri)
        try:
            return urlopen(uri, timeout=self.timeout)
        except (OSError, ValueError) as e:
            self.logger.error("Fetch failed", schema=uri, error=str(e))
            raise SchemaFetchError(f"cannot open remote resource: {e}", uri) from e

    def _download(self, uri: str, local_path: Path) -> None:
        with self._open_remote(uri) as stream:
            try:
                data = stream.read()
            except OSError as e:
                raise SchemaFetchError(f"cannot read remote resource: {e}", uri) from e

        try:
            local_path.parent.mkdir(parents=True, exist_ok=True)
            local_path.write_bytes(data)
        except OSError as e:
            self.logger.error("Mirror write failed", schema=uri, localPath=str(local_path), error=str(e))
            raise SchemaCacheWriteError(f"cannot write mirror file {local_path}: {e}", uri) from e

        self.logger.schema_event("mirrored", uri, localPath=str(local_path), size=len(data))

    def read(self, uri: str, local_copy: bool = False) -> Tuple[bytes, Optional[Path]]:
        """Read the whole document, returning its bytes and the mirror path used."""
        stream, local_path = self.open(uri, local_copy)
        with stream:
            try:
                return stream.read(), local_path
            except OSError as e:
                raise SchemaFetchError(f"cannot read document: {e}", uri) from e
