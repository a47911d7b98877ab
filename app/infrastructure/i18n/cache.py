"""Catalog cache stores.

Persist raw catalog bytes per CacheDescriptor and CDN validation tokens per
CdnEtagDescriptor. Entries are grouped per source endpoint so catalogs from
different sources never collide.
"""

import hashlib
import os
import shutil
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union
from urllib.parse import quote

from infrastructure.i18n.exceptions import CacheIOFailure
from infrastructure.i18n.models import CacheDescriptor, CdnEtagDescriptor
from infrastructure.logging import get_module_logger

logger = get_module_logger()

BASE_TABLE_FILE_NAME = "base"
NAMESPACE_FILE_PREFIX = "ns-"


class CacheStore(ABC):
    """Abstract base class for catalog cache implementations.

    Implementations raise CacheIOFailure when the underlying storage cannot
    be read or written; a missing entry is not an error.
    """

    @abstractmethod
    def load(self, descriptor: CacheDescriptor) -> Optional[bytes]:
        """Return the cached catalog bytes, or None if nothing is stored."""
        pass

    @abstractmethod
    def save(self, descriptor: CacheDescriptor, data: bytes) -> None:
        """Store catalog bytes, replacing any previous value."""
        pass

    @abstractmethod
    def load_etag(self, descriptor: CdnEtagDescriptor) -> Optional[str]:
        """Return the last validation token stored for a remote file."""
        pass

    @abstractmethod
    def save_etag(self, descriptor: CdnEtagDescriptor, etag: str) -> None:
        """Store the validation token of a remote file."""
        pass

    @abstractmethod
    def clear_all(self, source_endpoint: Optional[str] = None) -> None:
        """Remove every entry under ``source_endpoint``, or all entries."""
        pass


def source_directory_name(source_endpoint: str) -> str:
    """Filesystem-safe directory name for a source endpoint."""
    return hashlib.sha256(source_endpoint.encode("utf-8")).hexdigest()


def _quote_part(value: str) -> str:
    # "_" separates the parts of a file name
    return quote(value, safe="").replace("_", "%5F")


def _file_stem(table: str, language: str) -> str:
    name = (
        f"{NAMESPACE_FILE_PREFIX}{_quote_part(table)}"
        if table
        else BASE_TABLE_FILE_NAME
    )
    return f"{name}_{_quote_part(language)}"


class FileCacheStore(CacheStore):
    """File-backed cache store.

    Layout:
        <root>/<sha256(source)>/base_<language>[_<signature>].json
        <root>/<sha256(source)>/ns-<namespace>_<language>[_<signature>].json
        <root>/<sha256(source)>/<base or ns-namespace>_<language>.etag

    Name parts are percent-encoded, "_" included, so no two descriptors
    share a file.

    Writes go to a temporary file in the target directory and are moved
    into place with os.replace, so readers never observe a torn file.

    Attributes:
        root: Root directory shared by all sources.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).expanduser()
        logger.debug("initialized_file_cache_store", root=str(self.root))

    def _source_dir(self, source_endpoint: str) -> Path:
        return self.root / source_directory_name(source_endpoint)

    def catalog_path(self, descriptor: CacheDescriptor) -> Path:
        stem = _file_stem(descriptor.table, descriptor.language)
        if descriptor.app_version_signature:
            stem = f"{stem}_{_quote_part(descriptor.app_version_signature)}"
        return self._source_dir(descriptor.source_endpoint) / f"{stem}.json"

    def etag_path(self, descriptor: CdnEtagDescriptor) -> Path:
        stem = _file_stem(descriptor.table, descriptor.language)
        return self._source_dir(descriptor.source_endpoint) / f"{stem}.etag"

    def _read(self, path: Path) -> Optional[bytes]:
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheIOFailure(f"Failed to read {path}: {e}") from e

    def _write(self, path: Path, data: bytes) -> None:
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CacheIOFailure(f"Failed to write {path}: {e}") from e

    def load(self, descriptor: CacheDescriptor) -> Optional[bytes]:
        return self._read(self.catalog_path(descriptor))

    def save(self, descriptor: CacheDescriptor, data: bytes) -> None:
        path = self.catalog_path(descriptor)
        self._write(path, data)
        logger.debug("cache_catalog_saved", path=str(path), size=len(data))

    def load_etag(self, descriptor: CdnEtagDescriptor) -> Optional[str]:
        data = self._read(self.etag_path(descriptor))
        if data is None:
            return None
        etag = data.decode("utf-8", errors="replace").strip()
        return etag or None

    def save_etag(self, descriptor: CdnEtagDescriptor, etag: str) -> None:
        self._write(self.etag_path(descriptor), etag.encode("utf-8"))

    def clear_all(self, source_endpoint: Optional[str] = None) -> None:
        target = (
            self._source_dir(source_endpoint)
            if source_endpoint is not None
            else self.root
        )
        try:
            shutil.rmtree(target)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise CacheIOFailure(f"Failed to clear {target}: {e}") from e
        logger.info("cache_cleared", path=str(target))


class InMemoryCacheStore(CacheStore):
    """In-process cache store.

    Suitable for tests and hosts without a writable disk. Contents do not
    survive the process.
    """

    def __init__(self):
        self._catalogs: Dict[CacheDescriptor, bytes] = {}
        self._etags: Dict[CdnEtagDescriptor, str] = {}
        self._lock = threading.Lock()

    def load(self, descriptor: CacheDescriptor) -> Optional[bytes]:
        with self._lock:
            return self._catalogs.get(descriptor)

    def save(self, descriptor: CacheDescriptor, data: bytes) -> None:
        with self._lock:
            self._catalogs[descriptor] = bytes(data)

    def load_etag(self, descriptor: CdnEtagDescriptor) -> Optional[str]:
        with self._lock:
            return self._etags.get(descriptor)

    def save_etag(self, descriptor: CdnEtagDescriptor, etag: str) -> None:
        with self._lock:
            self._etags[descriptor] = etag

    def clear_all(self, source_endpoint: Optional[str] = None) -> None:
        with self._lock:
            if source_endpoint is None:
                self._catalogs.clear()
                self._etags.clear()
                return
            self._catalogs = {
                d: v
                for d, v in self._catalogs.items()
                if d.source_endpoint != source_endpoint
            }
            self._etags = {
                d: v
                for d, v in self._etags.items()
                if d.source_endpoint != source_endpoint
            }

    def get_stats(self):
        """Return entry counts (for tests and debugging)."""
        with self._lock:
            return {"catalogs": len(self._catalogs), "etags": len(self._etags)}
