"""Tests for infrastructure.i18n.cdn module."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from infrastructure.i18n.cache import CacheStore
from infrastructure.i18n.cdn import (
    CdnClient,
    CdnResponse,
    CdnSyncEngine,
    build_file_list,
    catalog_url,
    load_etags,
)
from infrastructure.i18n.exceptions import CacheIOFailure, TransportFailure
from infrastructure.i18n.models import SimpleEntry
from infrastructure.operations import OperationStatus
from tests.factories.i18n import (
    CDN_URL,
    make_cache_descriptor,
    make_catalog_document,
    make_etag_descriptor,
)

BASE_URL = f"{CDN_URL}/cs.json"
BUTTONS_URL = f"{CDN_URL}/buttons/cs.json"


@pytest.mark.unit
class TestFileList:
    """Tests for remote file naming."""

    def test_catalog_url(self):
        assert catalog_url(CDN_URL + "/", "cs") == BASE_URL
        assert catalog_url(CDN_URL, "cs", "buttons") == BUTTONS_URL

    def test_build_file_list(self):
        files = build_file_list(
            CDN_URL, "cs", ["buttons", "buttons", ""], etags={"buttons": "e1"}
        )
        assert [(f.table, f.url, f.etag) for f in files] == [
            ("", BASE_URL, None),
            ("buttons", BUTTONS_URL, "e1"),
        ]


@pytest.mark.unit
class TestCdnClient:
    """Tests for the conditional-GET transport."""

    def test_success_carries_response(self, fake_cdn, cdn_client):
        fake_cdn.get(BASE_URL, content=b"{}", headers={"ETag": '"v1"'})
        result = cdn_client.get(BASE_URL)
        assert result.is_success
        assert result.data == CdnResponse(status_code=200, body=b"{}", etag='"v1"')

    def test_sends_if_none_match(self, fake_cdn, cdn_client):
        fake_cdn.get(BASE_URL, status_code=304)
        result = cdn_client.get(BASE_URL, etag='"v1"')
        assert result.is_not_modified
        assert fake_cdn.last_request.headers["If-None-Match"] == '"v1"'

    def test_session_defaults(self, fake_cdn, cdn_client):
        fake_cdn.get(BASE_URL, content=b"{}")
        cdn_client.get(BASE_URL)
        assert fake_cdn.session.headers["User-Agent"] == "i18n-cdn-sync/1.0"
        assert fake_cdn.last_request.timeout == 1.0

    def test_no_conditional_header_without_etag(self, fake_cdn, cdn_client):
        fake_cdn.get(BASE_URL, content=b"{}")
        cdn_client.get(BASE_URL)
        assert "If-None-Match" not in fake_cdn.last_request.headers

    def test_http_errors_are_classified(self, fake_cdn, cdn_client):
        fake_cdn.get(BASE_URL, status_code=503, headers={"Retry-After": "30"})
        result = cdn_client.get(BASE_URL)
        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.retry_after == 30
        assert result.data.status_code == 503

    def test_not_found(self, fake_cdn, cdn_client):
        fake_cdn.get(BASE_URL, status_code=404)
        result = cdn_client.get(BASE_URL)
        assert result.status == OperationStatus.NOT_FOUND
        assert result.has_response

    def test_transport_exception_has_no_response(self, fake_cdn, cdn_client):
        fake_cdn.get(BASE_URL, exc=requests.exceptions.ConnectionError)
        result = cdn_client.get(BASE_URL)
        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "CONNECTION_ERROR"
        assert not result.has_response

    def test_timeout(self, fake_cdn, cdn_client):
        fake_cdn.get(BASE_URL, exc=requests.exceptions.ReadTimeout)
        result = cdn_client.get(BASE_URL)
        assert result.error_code == "TIMEOUT"


@pytest.mark.unit
class TestCdnSyncEngine:
    """Tests for one synchronization pass."""

    def test_fetches_base_and_namespaces(self, fake_cdn, cdn_engine, memory_cache):
        base = make_catalog_document({"greeting": "Ahoj"})
        buttons = make_catalog_document({"save": "Uložit"})
        fake_cdn.get(BASE_URL, content=base, headers={"ETag": '"b1"'})
        fake_cdn.get(BUTTONS_URL, content=buttons, headers={"ETag": '"n1"'})

        result = cdn_engine.sync(CDN_URL, "cs", ["buttons"])

        assert result.translations == {
            "": {"greeting": SimpleEntry("Ahoj")},
            "buttons": {"save": SimpleEntry("Uložit")},
        }
        assert result.updated_etags == {"": '"b1"', "buttons": '"n1"'}
        assert result.language == "cs"
        assert memory_cache.load(make_cache_descriptor()) == base
        assert memory_cache.load(make_cache_descriptor(namespace="buttons")) == buttons
        assert memory_cache.load_etag(make_etag_descriptor()) == '"b1"'

    def test_cache_writes_use_app_signature(
        self, fake_cdn, cdn_engine, memory_cache
    ):
        fake_cdn.get(BASE_URL, content=b"{}")
        cdn_engine.sync(CDN_URL, "cs", [], app_version_signature="2.0")
        signed = make_cache_descriptor(app_version_signature="2.0")
        assert memory_cache.load(signed) == b"{}"
        assert memory_cache.load(make_cache_descriptor()) is None

    def test_not_modified_is_skipped(self, fake_cdn, cdn_engine):
        fake_cdn.get(BASE_URL, status_code=304)
        result = cdn_engine.sync(CDN_URL, "cs", [], etags={"": '"b1"'})
        assert result.is_empty()

    def test_same_etag_is_unchanged(self, fake_cdn, cdn_engine):
        """A 200 carrying the token that was sent is treated as unchanged."""
        fake_cdn.get(
            BASE_URL, content=make_catalog_document(), headers={"ETag": '"b1"'}
        )
        result = cdn_engine.sync(CDN_URL, "cs", [], etags={"": '"b1"'})
        assert result.translations == {}

    def test_second_sync_with_cached_etag_changes_nothing(
        self, fake_cdn, cdn_engine
    ):
        fake_cdn.get(
            BASE_URL, content=make_catalog_document(), headers={"ETag": '"b1"'}
        )
        first = cdn_engine.sync(CDN_URL, "cs", [])
        second = cdn_engine.sync(
            CDN_URL, "cs", [], etags=first.updated_etags, current=first.translations
        )
        assert first.translations
        assert second.translations == {}
        assert fake_cdn.last_request.headers["If-None-Match"] == '"b1"'

    def test_identical_content_is_not_reported(
        self, fake_cdn, cdn_engine, memory_cache
    ):
        """Content equal to the held table only refreshes the token."""
        fake_cdn.get(
            BASE_URL,
            content=make_catalog_document({"greeting": "Ahoj"}),
            headers={"ETag": '"b2"'},
        )
        current = {"": {"greeting": SimpleEntry("Ahoj")}}
        result = cdn_engine.sync(CDN_URL, "cs", [], etags={"": '"b1"'}, current=current)
        assert result.translations == {}
        assert result.updated_etags == {"": '"b2"'}
        assert memory_cache.load(make_cache_descriptor()) is None
        assert memory_cache.load_etag(make_etag_descriptor()) == '"b2"'

    @pytest.mark.parametrize("status_code", [404, 403, 500])
    def test_failed_namespace_leaves_base_update(
        self, fake_cdn, cdn_engine, status_code
    ):
        fake_cdn.get(BASE_URL, content=make_catalog_document({"a": "b"}))
        fake_cdn.get(BUTTONS_URL, status_code=status_code)
        result = cdn_engine.sync(CDN_URL, "cs", ["buttons"])
        assert set(result.translations) == {""}

    @patch("infrastructure.i18n.cdn.logger")
    def test_skipped_file_logs_retry_after(self, mock_logger, fake_cdn, cdn_engine):
        fake_cdn.get(BASE_URL, status_code=503, headers={"Retry-After": "30"})
        cdn_engine.sync(CDN_URL, "cs", [])
        mock_logger.bind.return_value.warning.assert_any_call(
            "cdn_file_skipped",
            status_code=503,
            status=OperationStatus.TRANSIENT_ERROR.value,
            retry_after=30,
        )

    def test_transport_failure_of_one_file_is_absorbed(self, fake_cdn, cdn_engine):
        fake_cdn.get(BASE_URL, content=make_catalog_document({"a": "b"}))
        fake_cdn.get(BUTTONS_URL, exc=requests.exceptions.ConnectionError)
        result = cdn_engine.sync(CDN_URL, "cs", ["buttons"])
        assert set(result.translations) == {""}

    def test_malformed_file_is_skipped(self, fake_cdn, cdn_engine, memory_cache):
        fake_cdn.get(BASE_URL, content=b"[not json", headers={"ETag": '"x"'})
        result = cdn_engine.sync(CDN_URL, "cs", [])
        assert result.is_empty()
        assert memory_cache.load(make_cache_descriptor()) is None

    def test_all_files_failing_in_transport_raises(self, fake_cdn, cdn_engine):
        fake_cdn.get(BASE_URL, exc=requests.exceptions.ConnectionError)
        fake_cdn.get(BUTTONS_URL, exc=requests.exceptions.ConnectTimeout)
        with pytest.raises(TransportFailure) as exc_info:
            cdn_engine.sync(CDN_URL, "cs", ["buttons"])
        assert exc_info.value.url == CDN_URL

    def test_all_files_missing_is_not_a_transport_failure(
        self, fake_cdn, cdn_engine
    ):
        fake_cdn.get(BASE_URL, status_code=404)
        assert cdn_engine.sync(CDN_URL, "cs", []).is_empty()

    def test_cache_write_failure_does_not_fail_sync(self, fake_cdn, cdn_client):
        cache = MagicMock(spec=CacheStore)
        cache.save.side_effect = CacheIOFailure("disk full")
        cache.save_etag.side_effect = CacheIOFailure("disk full")
        engine = CdnSyncEngine(cdn_client, cache=cache)
        fake_cdn.get(
            BASE_URL, content=make_catalog_document({"a": "b"}), headers={"ETag": "e"}
        )

        result = engine.sync(CDN_URL, "cs", [])

        assert result.translations == {"": {"a": SimpleEntry("b")}}
        cache.save.assert_called_once()

    def test_without_cache(self, fake_cdn, cdn_client):
        fake_cdn.get(BASE_URL, content=b"{}")
        result = CdnSyncEngine(cdn_client).sync(CDN_URL, "cs", [])
        assert result.translations == {"": {}}


@pytest.mark.unit
class TestLoadEtags:
    def test_reads_tokens_per_table(self, memory_cache):
        memory_cache.save_etag(make_etag_descriptor(), "b")
        memory_cache.save_etag(make_etag_descriptor(namespace="buttons"), "n")
        etags = load_etags(memory_cache, CDN_URL, "cs", ["buttons", "menu"])
        assert etags == {"": "b", "buttons": "n"}

    def test_read_failure_is_skipped(self):
        cache = MagicMock(spec=CacheStore)
        cache.load_etag.side_effect = CacheIOFailure("broken")
        assert load_etags(cache, CDN_URL, "cs", []) == {}
