"""Translation service for dependency injection.

Provides a class-based interface to the i18n system for easier DI and testing.
"""

from concurrent.futures import Future
from typing import Any, Optional, Union

from infrastructure.i18n.factory import create_translator
from infrastructure.i18n.models import BASE_TABLE, SyncResult
from infrastructure.i18n.translator import Translator


class TranslationService:
    """Class-based translation service.

    Wraps the Translator instance with a service interface to support
    dependency injection and easier testing with mocks.

    This is a thin facade - all actual work is delegated to the underlying
    Translator instance created by the factory.

    Usage:
        from infrastructure.i18n import TranslationService

        service = TranslationService()
        message = service.translate("apples", 3, table="fruit")
    """

    def __init__(self, translator: Optional[Translator] = None):
        """Initialize translation service.

        Args:
            translator: Optional pre-configured Translator instance.
                       If not provided, creates default via factory.
        """
        self._translator = translator or create_translator()

    def translate(
        self,
        key: str,
        *args: Any,
        table: Optional[str] = None,
        locale: Optional[str] = None,
        default: Optional[str] = None,
    ) -> str:
        """Translate a key with positional formatting arguments.

        Args:
            key: Catalog key
            *args: Formatting arguments; the first one is the plural count
            table: Namespace table, or None for the base table
            locale: Locale override for plural rules and bundle lookup
            default: Text used when neither catalog nor bundle has the key

        Returns:
            Formatted text
        """
        return self._translator.translate(
            key, *args, table=table, locale=locale, default=default
        )

    def fetch(self) -> "Future[Optional[SyncResult]]":
        """Start a CDN sync (dropped while one is running)."""
        return self._translator.fetch()

    def load_translations(
        self, raw: Union[bytes, str], table: str = BASE_TABLE
    ) -> None:
        """Load a catalog document into ``table``.

        Raises:
            MalformedCatalog: If the document cannot be parsed
        """
        self._translator.load_translations(raw, table=table)

    def clear_caches(self) -> None:
        """Remove persisted catalogs and validation tokens."""
        self._translator.clear_caches()

    @property
    def is_initialized(self) -> bool:
        return self._translator.is_initialized

    @property
    def translator(self) -> Translator:
        """Access underlying Translator instance.

        Provided for advanced use cases that need direct access
        to the Translator API.

        Returns:
            The underlying Translator instance
        """
        return self._translator
