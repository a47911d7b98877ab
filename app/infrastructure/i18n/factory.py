"""Factory functions for creating i18n components.

Provides convenience functions for building translators from the
application settings.
"""

from typing import Optional

from infrastructure.configuration import settings
from infrastructure.configuration.infrastructure.i18n import I18nSettings
from infrastructure.i18n.bundle import BundleLookup, KeyEchoBundle, YAMLBundleLookup
from infrastructure.i18n.cache import CacheStore, FileCacheStore, InMemoryCacheStore
from infrastructure.i18n.cdn import CdnClient, CdnSyncEngine
from infrastructure.i18n.translator import Translator
from infrastructure.logging import get_module_logger

logger = get_module_logger()


def create_cache_store(config: I18nSettings) -> CacheStore:
    """Build the cache store selected by ``I18N_CACHE_BACKEND``."""
    if config.cache_backend == "memory":
        return InMemoryCacheStore()
    return FileCacheStore(config.cache_dir)


def create_bundle(config: I18nSettings) -> BundleLookup:
    """YAML bundles when ``I18N_BUNDLE_DIR`` is set, otherwise key echo."""
    if config.bundle_dir is not None:
        return YAMLBundleLookup(config.bundle_dir)
    return KeyEchoBundle()


def create_translator(
    config: Optional[I18nSettings] = None,
    initialize: bool = True,
) -> Translator:
    """Create and configure a Translator instance.

    Args:
        config: i18n settings (default: ``settings.i18n``).
        initialize: Whether to call ``initialize`` with the configured CDN
            URL, languages and namespaces.

    Returns:
        Translator: Configured translator instance

    Usage:
        # Use defaults from the environment
        translator = create_translator()

        # Build now, initialize later
        translator = create_translator(initialize=False)
        translator.initialize(source_endpoint=url, language="cs")
    """
    config = config or settings.i18n
    cache = create_cache_store(config)
    engine = CdnSyncEngine(
        CdnClient(timeout=config.request_timeout_seconds), cache=cache
    )
    translator = Translator(
        cache=cache,
        engine=engine,
        bundle=create_bundle(config),
        default_language=config.default_language,
        sync_on_initialize=config.sync_on_initialize,
    )

    if initialize:
        translator.initialize(
            source_endpoint=config.cdn_url,
            namespaces=config.namespaces,
            app_version_signature=config.app_version_signature,
            preferred_languages=config.preferred_languages,
            available_languages=config.available_languages,
        )
        logger.info(
            "translator_created_with_initialize",
            cdn_url=config.cdn_url,
            language=translator.language,
            cache_backend=config.cache_backend,
        )
    else:
        logger.info("translator_created_lazy", cache_backend=config.cache_backend)

    return translator
