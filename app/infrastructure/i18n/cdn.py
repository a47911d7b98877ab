"""CDN transport and synchronization engine.

The CdnClient issues conditional GET requests for catalog files and never
raises; the CdnSyncEngine fans the requests for one language out to a
thread pool, parses what changed and persists it to the cache store.

Remote layout:
    {endpoint}/{language}.json              base table
    {endpoint}/{namespace}/{language}.json  namespace tables
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

import requests

from infrastructure.i18n.cache import CacheStore
from infrastructure.i18n.exceptions import (
    CacheIOFailure,
    MalformedCatalog,
    TransportFailure,
)
from infrastructure.i18n.models import (
    BASE_TABLE,
    CacheDescriptor,
    Catalog,
    CdnEtagDescriptor,
    SyncResult,
    TranslationEntry,
)
from infrastructure.i18n.parser import parse_catalog
from infrastructure.logging import get_module_logger
from infrastructure.operations import (
    OperationResult,
    classify_request_exception,
    classify_status_code,
)

logger = get_module_logger()

USER_AGENT = "i18n-cdn-sync/1.0"


@dataclass(frozen=True)
class CdnResponse:
    """HTTP answer for one catalog file."""

    status_code: int
    body: bytes = b""
    etag: Optional[str] = None


@dataclass(frozen=True)
class CatalogFile:
    """One remote catalog file scheduled for a sync pass."""

    table: str
    url: str
    etag: Optional[str] = None


def catalog_url(
    source_endpoint: str, language: str, namespace: Optional[str] = None
) -> str:
    """Build the remote URL of a catalog file."""
    base = source_endpoint.rstrip("/")
    if namespace:
        return f"{base}/{namespace}/{language}.json"
    return f"{base}/{language}.json"


def build_file_list(
    source_endpoint: str,
    language: str,
    namespaces: Sequence[str],
    etags: Optional[Mapping[str, str]] = None,
) -> List[CatalogFile]:
    """Base table first, then one file per namespace, each with its known ETag."""
    etags = etags or {}
    tables = [BASE_TABLE] + [ns for ns in dict.fromkeys(namespaces) if ns]
    return [
        CatalogFile(
            table=table,
            url=catalog_url(source_endpoint, language, table or None),
            etag=etags.get(table),
        )
        for table in tables
    ]


class CdnClient:
    """Conditional-GET client for catalog files.

    Every call returns an OperationResult: HTTP answers are classified by
    status code and carry a CdnResponse in ``data``; transport exceptions
    yield an error result without data.

    Attributes:
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": USER_AGENT,
                "Accept": "application/json",
            }
        )

    def get(self, url: str, etag: Optional[str] = None) -> OperationResult:
        """Fetch a catalog file.

        Args:
            url: Absolute file URL.
            etag: Last known validation token, sent as If-None-Match.

        Returns:
            OperationResult; ``data`` is a CdnResponse when the server answered.
        """
        log = logger.bind(url=url)
        headers = {"If-None-Match": etag} if etag else {}

        try:
            response = self._session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning("cdn_request_failed", error=str(e))
            return classify_request_exception(e)

        cdn_response = CdnResponse(
            status_code=response.status_code,
            body=response.content or b"",
            etag=response.headers.get("ETag"),
        )
        retry_after = response.headers.get("Retry-After")
        try:
            retry_after_seconds = int(retry_after) if retry_after else None
        except ValueError:
            retry_after_seconds = None

        log.debug("cdn_response_received", status_code=response.status_code)
        return classify_status_code(
            response.status_code, data=cdn_response, retry_after=retry_after_seconds
        )

    def close(self) -> None:
        self._session.close()


@dataclass
class _FileOutcome:
    table: str
    entries: Optional[Dict[str, TranslationEntry]] = None
    etag: Optional[str] = None
    transport_failed: bool = False


class CdnSyncEngine:
    """Fetches all tables of a language concurrently and builds a SyncResult.

    Per-file failures (HTTP errors, malformed documents, cache write errors)
    are logged and leave the table out of the result. Only when no file
    could be requested at all does ``sync`` raise TransportFailure.

    Attributes:
        client: Transport used for the requests.
        cache: Optional store receiving fetched bytes and ETags.
    """

    def __init__(self, client: CdnClient, cache: Optional[CacheStore] = None):
        self.client = client
        self.cache = cache

    def sync(
        self,
        source_endpoint: str,
        language: str,
        namespaces: Sequence[str],
        etags: Optional[Mapping[str, str]] = None,
        current: Optional[Catalog] = None,
        app_version_signature: Optional[str] = None,
    ) -> SyncResult:
        """Run one synchronization pass.

        Args:
            source_endpoint: CDN base URL.
            language: CDN language code.
            namespaces: Namespace tables to fetch next to the base table.
            etags: Known validation tokens by table name.
            current: Catalog currently held in memory; unchanged tables are
                left out of the result.
            app_version_signature: Signature used for cache writes.

        Returns:
            SyncResult with changed tables and the tokens returned for them.

        Raises:
            TransportFailure: If every file failed at the transport level.
        """
        files = build_file_list(source_endpoint, language, namespaces, etags)
        current = current or {}
        log = logger.bind(
            source_endpoint=source_endpoint, language=language, file_count=len(files)
        )
        log.info("cdn_sync_started")

        outcomes: List[_FileOutcome] = []
        with ThreadPoolExecutor(
            max_workers=len(files), thread_name_prefix="cdn-sync"
        ) as executor:
            future_to_file = {
                executor.submit(
                    self._sync_file,
                    catalog_file,
                    source_endpoint,
                    language,
                    current.get(catalog_file.table),
                    app_version_signature,
                ): catalog_file
                for catalog_file in files
            }

            for future in as_completed(future_to_file):
                catalog_file = future_to_file[future]
                try:
                    outcomes.append(future.result())
                except Exception as exc:  # pylint: disable=broad-except
                    log.exception(
                        "cdn_file_sync_exception", table=catalog_file.table, exc=exc
                    )
                    outcomes.append(_FileOutcome(table=catalog_file.table))

        if outcomes and all(outcome.transport_failed for outcome in outcomes):
            log.error("cdn_sync_transport_failure")
            raise TransportFailure(
                f"No catalog file could be fetched from {source_endpoint}",
                url=source_endpoint,
            )

        result = SyncResult(language=language)
        for outcome in outcomes:
            if outcome.etag is not None:
                result.updated_etags[outcome.table] = outcome.etag
            if outcome.entries is not None:
                result.translations[outcome.table] = outcome.entries

        log.info(
            "cdn_sync_completed",
            changed_tables=sorted(result.translations),
            updated_etags=len(result.updated_etags),
        )
        return result

    def _sync_file(
        self,
        catalog_file: CatalogFile,
        source_endpoint: str,
        language: str,
        current_table: Optional[Dict[str, TranslationEntry]],
        app_version_signature: Optional[str],
    ) -> _FileOutcome:
        log = logger.bind(table=catalog_file.table, url=catalog_file.url)
        outcome = _FileOutcome(table=catalog_file.table)
        result = self.client.get(catalog_file.url, etag=catalog_file.etag)

        if not result.has_response:
            log.warning("cdn_file_transport_failed", error=result.message)
            outcome.transport_failed = True
            return outcome

        response: CdnResponse = result.data
        if result.is_not_modified or (
            catalog_file.etag is not None and response.etag == catalog_file.etag
        ):
            log.debug("cdn_file_unchanged")
            return outcome

        if not result.is_success:
            log.warning(
                "cdn_file_skipped",
                status_code=response.status_code,
                status=result.status.value,
                retry_after=result.retry_after,
            )
            return outcome

        try:
            entries = parse_catalog(response.body, table=catalog_file.table)
        except MalformedCatalog as e:
            log.warning("cdn_file_malformed", error=str(e))
            return outcome

        outcome.etag = response.etag
        if current_table is not None and entries == current_table:
            log.debug("cdn_file_content_unchanged")
        else:
            outcome.entries = entries
            self._persist_catalog(
                CacheDescriptor(
                    language=language,
                    namespace=catalog_file.table or None,
                    app_version_signature=app_version_signature,
                    source_endpoint=source_endpoint,
                ),
                response.body,
            )

        if response.etag:
            self._persist_etag(
                CdnEtagDescriptor(
                    language=language,
                    namespace=catalog_file.table or None,
                    source_endpoint=source_endpoint,
                ),
                response.etag,
            )
        log.info("cdn_file_fetched", changed=outcome.entries is not None)
        return outcome

    def _persist_catalog(self, descriptor: CacheDescriptor, body: bytes) -> None:
        if self.cache is None:
            return
        try:
            self.cache.save(descriptor, body)
        except CacheIOFailure as e:
            logger.warning("cache_write_failed", table=descriptor.table, error=str(e))

    def _persist_etag(self, descriptor: CdnEtagDescriptor, etag: str) -> None:
        if self.cache is None:
            return
        try:
            self.cache.save_etag(descriptor, etag)
        except CacheIOFailure as e:
            logger.warning(
                "cache_etag_write_failed", table=descriptor.table, error=str(e)
            )


def load_etags(
    cache: CacheStore,
    source_endpoint: str,
    language: str,
    namespaces: Sequence[str],
) -> Dict[str, str]:
    """Read the stored validation tokens for every table of a language."""
    etags: Dict[str, str] = {}
    for table in [BASE_TABLE] + list(namespaces):
        descriptor = CdnEtagDescriptor(
            language=language,
            namespace=table or None,
            source_endpoint=source_endpoint,
        )
        try:
            etag = cache.load_etag(descriptor)
        except CacheIOFailure as e:
            logger.warning("cache_etag_read_failed", table=table, error=str(e))
            continue
        if etag:
            etags[table] = etag
    return etags
