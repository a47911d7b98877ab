"""i18n system - CDN-synchronized translation catalogs.

Provides plural category resolution, catalog parsing and formatting, a
versioned catalog cache, and the CDN synchronization engine behind a
thread-confined Translator.

Main components:
- plurals: CLDR plural category resolver
- parser / formatter: catalog documents and message formatting
- cache: FileCacheStore and InMemoryCacheStore
- cdn: CdnClient and CdnSyncEngine
- translator: Translator orchestrator
- service: TranslationService facade
"""

from infrastructure.i18n.bundle import BundleLookup, KeyEchoBundle, YAMLBundleLookup
from infrastructure.i18n.cache import CacheStore, FileCacheStore, InMemoryCacheStore
from infrastructure.i18n.cdn import CdnClient, CdnResponse, CdnSyncEngine
from infrastructure.i18n.exceptions import (
    CacheIOFailure,
    I18nError,
    MalformedCatalog,
    TransportFailure,
)
from infrastructure.i18n.factory import create_translator
from infrastructure.i18n.formatter import format_entry, substitute_placeholders
from infrastructure.i18n.lifecycle import LifecycleObserver
from infrastructure.i18n.models import (
    CacheDescriptor,
    CdnEtagDescriptor,
    LanguageTag,
    PluralCategory,
    PluralEntry,
    PluralVariants,
    SimpleEntry,
    SyncResult,
    TranslatorState,
)
from infrastructure.i18n.parser import parse_catalog
from infrastructure.i18n.plurals import category
from infrastructure.i18n.resolvers import (
    LanguageNegotiator,
    locale_matches_language,
    to_cdn_language,
)
from infrastructure.i18n.service import TranslationService
from infrastructure.i18n.translator import Translator

__all__ = [
    "BundleLookup",
    "CacheDescriptor",
    "CacheIOFailure",
    "CacheStore",
    "CdnClient",
    "CdnEtagDescriptor",
    "CdnResponse",
    "CdnSyncEngine",
    "FileCacheStore",
    "I18nError",
    "InMemoryCacheStore",
    "KeyEchoBundle",
    "LanguageNegotiator",
    "LanguageTag",
    "LifecycleObserver",
    "MalformedCatalog",
    "PluralCategory",
    "PluralEntry",
    "PluralVariants",
    "SimpleEntry",
    "SyncResult",
    "TranslationService",
    "Translator",
    "TranslatorState",
    "TransportFailure",
    "YAMLBundleLookup",
    "category",
    "create_translator",
    "format_entry",
    "locale_matches_language",
    "parse_catalog",
    "substitute_placeholders",
    "to_cdn_language",
]
