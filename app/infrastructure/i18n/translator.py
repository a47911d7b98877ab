"""Translation orchestrator.

Owns the in-memory catalog of the active language and sequences cache
preload, CDN synchronization and lookups.

All state changes run on a single owner thread; callers either wait for
the owner (``initialize``, ``load_translations``, ``clear_caches``) or get a
Future back (``fetch``). ``translate`` never waits: it reads the current
catalog reference, which the owner replaces as a whole on every merge.

Usage:
    translator = Translator(cache=FileCacheStore("/tmp/i18n"))
    translator.initialize(
        source_endpoint="https://cdn.example.com/abc123",
        language="cs",
        namespaces=["buttons"],
    )
    translator.translate("apples", 3)
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from typing import (
    Any,
    Callable,
    Dict,
    FrozenSet,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from infrastructure.i18n.bundle import BundleLookup, KeyEchoBundle
from infrastructure.i18n.cache import CacheStore, InMemoryCacheStore
from infrastructure.i18n.cdn import CdnClient, CdnSyncEngine, load_etags
from infrastructure.i18n.exceptions import (
    CacheIOFailure,
    MalformedCatalog,
    TransportFailure,
)
from infrastructure.i18n.formatter import format_entry, substitute_placeholders
from infrastructure.i18n.lifecycle import LifecycleObserver
from infrastructure.i18n.models import (
    BASE_TABLE,
    CacheDescriptor,
    Catalog,
    SyncResult,
    TranslatorState,
)
from infrastructure.i18n.parser import parse_catalog
from infrastructure.i18n.resolvers import resolve_language, to_cdn_language
from infrastructure.logging import get_module_logger

logger = get_module_logger()

TranslationsListener = Callable[[FrozenSet[str]], Any]


class Translator:
    """Orchestrates catalog loading, synchronization and translation.

    Attributes:
        cache: Store used for catalog preload and sync writes.
        engine: CDN synchronization engine.
        bundle: Fallback lookup used on catalog misses.
        default_language: Language used when none is given or resolved.
        sync_on_initialize: Start a sync at the end of ``initialize``.
    """

    def __init__(
        self,
        cache: Optional[CacheStore] = None,
        engine: Optional[CdnSyncEngine] = None,
        bundle: Optional[BundleLookup] = None,
        default_language: str = "en",
        sync_on_initialize: bool = True,
    ):
        self.cache = cache if cache is not None else InMemoryCacheStore()
        self.engine = engine or CdnSyncEngine(CdnClient(), self.cache)
        self.bundle = bundle or KeyEchoBundle()
        self.default_language = default_language
        self.sync_on_initialize = sync_on_initialize

        self._state = TranslatorState.UNINITIALIZED
        self._source_endpoint: Optional[str] = None
        self._language: Optional[str] = None
        self._namespaces: Tuple[str, ...] = ()
        self._app_version_signature: Optional[str] = None
        self._catalog: Catalog = {}
        self._etags: Dict[str, str] = {}
        self._last_fetch_at: Optional[datetime] = None
        self._generation = 0
        self._resync_requested = False
        self._listeners: List[TranslationsListener] = []

        self._owner_ident: Optional[int] = None
        self._owner = ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="i18n-owner",
            initializer=self._claim_owner_thread,
        )
        self._io = ThreadPoolExecutor(max_workers=1, thread_name_prefix="i18n-sync")

    # Owner thread plumbing -------------------------------------------------

    def _claim_owner_thread(self) -> None:
        self._owner_ident = threading.get_ident()

    def _on_owner(self) -> bool:
        return threading.get_ident() == self._owner_ident

    def _call_on_owner(self, fn: Callable, *args, **kwargs):
        if self._on_owner():
            return fn(*args, **kwargs)
        return self._owner.submit(fn, *args, **kwargs).result()

    # Read-only state ------------------------------------------------------

    @property
    def state(self) -> TranslatorState:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return self._state != TranslatorState.UNINITIALIZED

    @property
    def language(self) -> Optional[str]:
        return self._language

    @property
    def namespaces(self) -> Tuple[str, ...]:
        return self._namespaces

    @property
    def source_endpoint(self) -> Optional[str]:
        return self._source_endpoint

    @property
    def last_fetch_at(self) -> Optional[datetime]:
        """UTC time of the last completed sync, or None."""
        return self._last_fetch_at

    @property
    def catalog(self) -> Catalog:
        """Snapshot of the in-memory catalog (do not mutate)."""
        return self._catalog

    # Initialization --------------------------------------------------------

    def initialize(
        self,
        source_endpoint: Optional[str] = None,
        language: Optional[str] = None,
        namespaces: Sequence[str] = (),
        app_version_signature: Optional[str] = None,
        preferred_languages: Sequence[str] = (),
        available_languages: Sequence[str] = (),
    ) -> Optional["Future[Optional[SyncResult]]"]:
        """Configure the translator and preload cached catalogs.

        Only the first call has an effect; later calls log a warning.

        Args:
            source_endpoint: CDN base URL; without it no sync or cache
                preload happens.
            language: Catalog language. If omitted it is negotiated from
                ``preferred_languages`` and ``available_languages``.
            namespaces: Namespace tables next to the base table.
            app_version_signature: Build identifier; cached catalogs of
                other builds are discarded.
            preferred_languages: Host language preferences, best first.
            available_languages: Languages the catalog is delivered in.

        Returns:
            Future of the initial sync, or None when no sync was started.
        """
        if language:
            resolved = to_cdn_language(language)
        else:
            resolved = resolve_language(
                preferred_languages, available_languages, self.default_language
            )

        initialized = self._call_on_owner(
            self._initialize,
            source_endpoint,
            resolved,
            tuple(dict.fromkeys(ns for ns in namespaces if ns)),
            app_version_signature,
        )
        if initialized and self.sync_on_initialize and source_endpoint:
            return self.fetch()
        return None

    def _initialize(
        self,
        source_endpoint: Optional[str],
        language: str,
        namespaces: Tuple[str, ...],
        app_version_signature: Optional[str],
    ) -> bool:
        if self._state != TranslatorState.UNINITIALIZED:
            logger.warning(
                "translator_already_initialized",
                language=self._language,
                requested_language=language,
            )
            return False

        self._source_endpoint = source_endpoint
        self._language = language
        self._namespaces = namespaces
        self._app_version_signature = app_version_signature

        if source_endpoint:
            self._invalidate_stale_cache()
            self._preload()

        self._state = TranslatorState.IDLE
        logger.info(
            "translator_initialized",
            source_endpoint=source_endpoint,
            language=language,
            namespaces=list(namespaces),
            cached_tables=sorted(self._catalog),
        )
        return True

    def _descriptor(self, table: str) -> CacheDescriptor:
        return CacheDescriptor(
            language=self._language,
            namespace=table or None,
            app_version_signature=self._app_version_signature,
            source_endpoint=self._source_endpoint or "",
        )

    def _invalidate_stale_cache(self) -> None:
        """Drop cached data written by another build of the host app."""
        if not self._app_version_signature:
            return
        try:
            if self.cache.load(self._descriptor(BASE_TABLE)) is not None:
                return
            self.cache.clear_all(self._source_endpoint)
        except CacheIOFailure as e:
            logger.warning("cache_invalidation_failed", error=str(e))
            return
        logger.info(
            "cache_invalidated_for_app_version",
            app_version_signature=self._app_version_signature,
        )

    def _preload(self) -> None:
        self._catalog = self._load_cached_catalog()
        # A token without its catalog would keep the table from ever being fetched
        etags = load_etags(
            self.cache, self._source_endpoint, self._language, self._namespaces
        )
        self._etags = {t: e for t, e in etags.items() if t in self._catalog}

    def _load_cached_catalog(self) -> Catalog:
        catalog: Catalog = {}
        for table in (BASE_TABLE,) + self._namespaces:
            try:
                raw = self.cache.load(self._descriptor(table))
            except CacheIOFailure as e:
                logger.warning("cache_read_failed", table=table, error=str(e))
                continue
            if raw is None:
                continue
            try:
                catalog[table] = parse_catalog(raw, table=table)
            except MalformedCatalog as e:
                logger.warning("cache_catalog_malformed", table=table, error=str(e))
        return catalog

    # Synchronization -------------------------------------------------------

    def fetch(self) -> "Future[Optional[SyncResult]]":
        """Start a CDN sync unless one is already running.

        Returns:
            Future resolving to the merged SyncResult, or to None when the
            call was dropped, superseded or failed.
        """
        future: "Future[Optional[SyncResult]]" = Future()
        try:
            self._owner.submit(self._start_sync, future)
        except RuntimeError:
            logger.warning("fetch_after_shutdown")
            future.set_result(None)
        return future

    def _start_sync(self, future: "Future[Optional[SyncResult]]") -> None:
        if self._state == TranslatorState.UNINITIALIZED or not self._source_endpoint:
            logger.debug("sync_skipped_not_configured", state=self._state.value)
            future.set_result(None)
            return
        if self._state == TranslatorState.SYNCING:
            logger.info("sync_dropped_already_syncing", language=self._language)
            future.set_result(None)
            return

        self._state = TranslatorState.SYNCING
        generation = self._generation
        try:
            sync_future = self._io.submit(
                self.engine.sync,
                self._source_endpoint,
                self._language,
                self._namespaces,
                dict(self._etags),
                self._catalog,
                self._app_version_signature,
            )
        except RuntimeError:
            self._state = TranslatorState.IDLE
            future.set_result(None)
            return

        sync_future.add_done_callback(
            lambda done: self._hand_back(done, future, generation)
        )

    def _hand_back(
        self,
        sync_future: "Future[SyncResult]",
        future: "Future[Optional[SyncResult]]",
        generation: int,
    ) -> None:
        try:
            self._owner.submit(self._finish_sync, sync_future, future, generation)
        except RuntimeError:
            logger.debug("sync_result_dropped_after_shutdown")
            if not future.done():
                future.set_result(None)

    def _finish_sync(
        self,
        sync_future: "Future[SyncResult]",
        future: "Future[Optional[SyncResult]]",
        generation: int,
    ) -> None:
        self._state = TranslatorState.IDLE
        try:
            result = sync_future.result()
        except TransportFailure as e:
            logger.warning("sync_failed", error=str(e), url=e.url)
            result = None
        except Exception as e:  # pylint: disable=broad-except
            logger.exception("sync_unexpected_error", error=str(e))
            result = None

        if result is not None and generation != self._generation:
            logger.info(
                "sync_result_discarded",
                result_language=result.language,
                language=self._language,
            )
            result = None
        elif result is not None:
            self._merge(result)

        if self._resync_requested:
            self._resync_requested = False
            self._start_sync(Future())

        future.set_result(result)

    def _merge(self, result: SyncResult) -> None:
        self._etags.update(result.updated_etags)
        if result.translations:
            catalog = dict(self._catalog)
            catalog.update(result.translations)
            self._catalog = catalog
            self._notify(result.changed_tables)
        self._last_fetch_at = datetime.now(timezone.utc)
        logger.info(
            "sync_merged",
            language=self._language,
            changed_tables=sorted(result.translations),
        )

    def change_language(
        self, language: str
    ) -> Optional["Future[Optional[SyncResult]]"]:
        """Switch the active language.

        Drops the in-memory catalog, preloads cached tables of the new
        language and starts a sync. A sync still running for the previous
        language finishes but its result is discarded.
        """
        return self._call_on_owner(
            self._change_language, to_cdn_language(language)
        )

    def _change_language(
        self, language: str
    ) -> Optional["Future[Optional[SyncResult]]"]:
        if self._state == TranslatorState.UNINITIALIZED:
            raise RuntimeError("Translator is not initialized")
        if language == self._language:
            return None

        logger.info("language_changed", previous=self._language, language=language)
        self._language = language
        self._generation += 1
        self._etags = {}
        self._catalog = {}
        if self._source_endpoint:
            self._preload()
        self._notify(frozenset(self._catalog) | {BASE_TABLE})

        if not self._source_endpoint:
            return None
        if self._state == TranslatorState.SYNCING:
            self._resync_requested = True
            return None
        future: "Future[Optional[SyncResult]]" = Future()
        self._start_sync(future)
        return future

    # Explicit loading and cache control ------------------------------------

    def load_translations(
        self, raw: Union[bytes, str], table: str = BASE_TABLE
    ) -> None:
        """Parse ``raw`` and replace ``table`` in the in-memory catalog.

        Raises:
            MalformedCatalog: If the document cannot be parsed.
        """
        entries = parse_catalog(raw, table=table)
        self._call_on_owner(self._replace_table, table, entries)

    def _replace_table(self, table: str, entries) -> None:
        catalog = dict(self._catalog)
        catalog[table] = entries
        self._catalog = catalog
        logger.info("translations_loaded", table=table, key_count=len(entries))
        self._notify(frozenset({table}))

    def clear_caches(self) -> None:
        """Remove persisted catalogs and ETags; the in-memory catalog stays."""
        self._call_on_owner(self._clear_caches)

    def _clear_caches(self) -> None:
        self._etags = {}
        if self._source_endpoint is None:
            logger.debug("cache_clear_skipped_no_source")
            return
        try:
            self.cache.clear_all(self._source_endpoint)
        except CacheIOFailure as e:
            logger.warning("cache_clear_failed", error=str(e))
            return
        logger.info("caches_cleared", source_endpoint=self._source_endpoint)

    # Listeners and lifecycle -----------------------------------------------

    def on_translations_updated(
        self, callback: TranslationsListener
    ) -> Callable[[], None]:
        """Register a listener for catalog changes.

        The listener receives the names of the changed tables and runs on
        the owner thread.

        Returns:
            Function that removes the listener.
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, tables: FrozenSet[str]) -> None:
        for listener in list(self._listeners):
            try:
                listener(tables)
            except Exception as e:  # pylint: disable=broad-except
                logger.error(
                    "translations_listener_failed",
                    listener=getattr(listener, "__name__", "unknown"),
                    error=str(e),
                )

    def attach_lifecycle(self, observer: LifecycleObserver) -> Callable[[], None]:
        """Refresh the catalog whenever the host returns to the foreground."""
        return observer.subscribe(self.fetch)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the owner and sync threads. Further fetches resolve to None.

        With ``wait`` set, syncs already requested run to completion and are
        merged before the threads stop.
        """
        if wait and not self._on_owner():
            try:
                # Lets queued fetches hand their sync to the io executor
                self._owner.submit(lambda: None).result()
            except RuntimeError:
                pass
        self._io.shutdown(wait=wait)
        self._owner.shutdown(wait=wait)
        logger.debug("translator_shut_down", wait=wait)

    # Lookup ----------------------------------------------------------------

    def translate(
        self,
        key: str,
        *args: Any,
        table: Optional[str] = None,
        locale: Optional[str] = None,
        default: Optional[str] = None,
    ) -> str:
        """Translate ``key`` with positional ``args``.

        Args:
            key: Catalog key.
            *args: Formatting arguments; the first one is the plural count.
            table: Namespace table, or None for the base table.
            locale: Locale used for plural rules and the bundle lookup
                (default: the active language).
            default: Text the bundle returns when it has no entry either.

        Returns:
            Formatted text. Never raises for missing keys.
        """
        catalog = self._catalog
        locale = locale or self._language or self.default_language
        entry = catalog.get(table or BASE_TABLE, {}).get(key)
        if entry is not None:
            return format_entry(entry, args, locale)

        text = self.bundle.lookup(key, table=table, locale=locale, default=default)
        return substitute_placeholders(text, args) if args else text
