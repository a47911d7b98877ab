"""Test data factories for deterministic test data generation."""

from tests.factories.i18n import (
    CDN_URL,
    FakeCdn,
    make_cache_descriptor,
    make_catalog_document,
    make_etag_descriptor,
    make_plural_entry,
    make_plural_value,
    make_simple_entry,
    make_sync_result,
)

__all__ = [
    "CDN_URL",
    "make_cache_descriptor",
    "make_catalog_document",
    "make_etag_descriptor",
    "make_plural_entry",
    "make_plural_value",
    "make_simple_entry",
    "make_sync_result",
    "FakeCdn",
]
