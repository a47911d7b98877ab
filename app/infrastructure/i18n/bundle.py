"""Bundle lookups used when a key is missing from the synchronized catalog.

Implementations must always return a string and never raise; returning the
key itself is the conventional last resort.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Tuple, Union

import yaml

from infrastructure.i18n.plurals import language_code
from infrastructure.i18n.resolvers import to_cdn_language
from infrastructure.logging import get_module_logger

logger = get_module_logger()

DEFAULT_BUNDLE_TABLE = "Localizable"


class BundleLookup(ABC):
    """Abstract base for fallback string lookups."""

    @abstractmethod
    def lookup(
        self,
        key: str,
        table: Optional[str] = None,
        locale: Optional[str] = None,
        default: Optional[str] = None,
    ) -> str:
        """Return the bundled text for ``key``, or ``default``, or ``key``."""
        pass


class KeyEchoBundle(BundleLookup):
    """Bundle without content: returns ``default`` or the key."""

    def lookup(
        self,
        key: str,
        table: Optional[str] = None,
        locale: Optional[str] = None,
        default: Optional[str] = None,
    ) -> str:
        return default if default is not None else key


class YAMLBundleLookup(BundleLookup):
    """Lookup over YAML bundle files.

    Expects flat key/value files named ``<table>.<language>.yml`` in the
    bundle directory, with ``Localizable`` used for the base table. Files are
    read on first use and kept per (table, language).

    Attributes:
        directory: Directory holding the YAML bundles.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)
        self._bundles: Dict[Tuple[str, str], Dict[str, str]] = {}
        self._lock = Lock()
        logger.info("initialized_yaml_bundle_lookup", directory=str(self.directory))

    def _load(self, table: str, language: str) -> Dict[str, str]:
        path = self.directory / f"{table}.{language}.yml"
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            logger.debug("bundle_file_missing", file=str(path))
            return {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning("bundle_file_unreadable", file=str(path), error=str(e))
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.warning("invalid_bundle_format", file=str(path), expected="dict")
            return {}

        return {
            str(k): v if isinstance(v, str) else str(v)
            for k, v in data.items()
            if v is not None
        }

    def _bundle(self, table: str, language: str) -> Dict[str, str]:
        cache_key = (table, language)
        with self._lock:
            bundle = self._bundles.get(cache_key)
            if bundle is None:
                bundle = self._load(table, language)
                self._bundles[cache_key] = bundle
            return bundle

    def lookup(
        self,
        key: str,
        table: Optional[str] = None,
        locale: Optional[str] = None,
        default: Optional[str] = None,
    ) -> str:
        table_name = table or DEFAULT_BUNDLE_TABLE
        for language in self._candidate_languages(locale):
            value = self._bundle(table_name, language).get(key)
            if value is not None:
                return value
        return default if default is not None else key

    @staticmethod
    def _candidate_languages(locale: Optional[str]) -> list:
        """Full tag first ("pt-BR"), then the primary language ("pt")."""
        if not locale:
            return []
        try:
            full = to_cdn_language(locale)
        except ValueError:
            return []
        return list(dict.fromkeys([full, language_code(locale)]))

    def clear_cache(self) -> None:
        """Forget every loaded bundle file."""
        with self._lock:
            self._bundles.clear()
