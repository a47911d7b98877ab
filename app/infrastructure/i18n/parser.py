"""Catalog document parsing.

Decodes a per-language JSON catalog into a mapping of key to entry. Values
are either plain strings or plural containers:

    {
        "greeting": "Hello",
        "apples": {"variations": {"plural": {"one": "# apple", "other": "# apples"}}},
        "pears": {"one": "# pear", "other": "# pears"}
    }
"""

import json
from typing import Any, Dict, Mapping, Optional, Union

from infrastructure.i18n.exceptions import MalformedCatalog
from infrastructure.i18n.models import (
    PLURAL_CATEGORY_NAMES,
    PluralEntry,
    PluralVariants,
    SimpleEntry,
    TranslationEntry,
)
from infrastructure.logging import get_module_logger

logger = get_module_logger()


def _plural_container(value: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    """Locate the category mapping inside a structured value, if any."""
    variations = value.get("variations")
    if isinstance(variations, dict):
        plural = variations.get("plural")
        if isinstance(plural, dict):
            return plural
    if any(name in PLURAL_CATEGORY_NAMES for name in value):
        return value
    return None


def parse_entry(
    key: str, value: Any, table: Optional[str] = None
) -> Optional[TranslationEntry]:
    """Convert one catalog value into an entry.

    Returns None for structured values that carry no recognized plural
    container; those are skipped rather than rejected.

    Raises:
        MalformedCatalog: If the value is neither a string nor an object.
    """
    if isinstance(value, str):
        return SimpleEntry(value)

    if isinstance(value, dict):
        container = _plural_container(value)
        if container is None:
            logger.debug("catalog_value_skipped", key=key, table=table)
            return None
        variants = PluralVariants.from_mapping(container)
        if variants.is_empty():
            logger.debug("catalog_plural_without_variants", key=key, table=table)
            return None
        if variants.other is None:
            logger.warning("catalog_plural_missing_other", key=key, table=table)
        return PluralEntry(variants)

    raise MalformedCatalog(
        f"Unsupported value type {type(value).__name__} for key {key!r}",
        table=table,
    )


def parse_catalog(
    raw: Union[bytes, str], table: Optional[str] = None
) -> Dict[str, TranslationEntry]:
    """Parse a raw catalog document.

    Args:
        raw: JSON document as bytes (UTF-8) or text.
        table: Table name, used for error context only.

    Returns:
        Mapping of key to TranslationEntry. An empty object yields an empty
        mapping.

    Raises:
        MalformedCatalog: If the document is not valid JSON, the top level
            is not an object, or a value has an unsupported type.
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
        document = json.loads(text)
    except (UnicodeDecodeError, ValueError) as e:
        raise MalformedCatalog(f"Invalid catalog document: {e}", table=table) from e

    if not isinstance(document, dict):
        raise MalformedCatalog(
            f"Catalog top level must be an object, got {type(document).__name__}",
            table=table,
        )

    entries: Dict[str, TranslationEntry] = {}
    for key, value in document.items():
        entry = parse_entry(key, value, table=table)
        if entry is not None:
            entries[key] = entry

    return entries
