"""Message formatting.

Turns a catalog entry plus positional arguments into display text. Plural
entries select their variant from the first argument; placeholders are
substituted in a single pass and never re-scanned.

Recognized placeholders:
    {0}, {1}, ...     zero-based positional argument
    %@ %d %i %u %f %s %ld %lu %lld %llu %lf (optionally prefixed by an
                      extra %) the first argument
    #                 the plural count (plural entries only)
"""

import re
from decimal import Decimal
from typing import Any, Optional, Sequence

from infrastructure.i18n.models import PluralCategory, PluralEntry, TranslationEntry
from infrastructure.i18n.plurals import category as plural_category

_MARKERS = r"%%?(?:lld|llu|ld|lu|lf|@|d|i|u|f|s)"
_PLACEHOLDER_RE = re.compile(r"\{(\d+)\}|" + _MARKERS)
_PLURAL_PLACEHOLDER_RE = re.compile(r"#|\{(\d+)\}|" + _MARKERS)


def _render(value: Any) -> str:
    return str(value)


def _substitute(pattern: "re.Pattern[str]", text: str, args: Sequence[Any]) -> str:
    def replace(match: "re.Match[str]") -> str:
        index = match.group(1)
        if index is None:
            return _render(args[0])
        position = int(index)
        if position < len(args):
            return _render(args[position])
        return match.group(0)

    return pattern.sub(replace, text)


def substitute_placeholders(text: str, args: Sequence[Any]) -> str:
    """Replace positional and printf-style placeholders in ``text``.

    Missing indices and unknown markers are left as they are.
    """
    if not args:
        return text
    return _substitute(_PLACEHOLDER_RE, text, args)


def plural_category_for(count: Any, language: str) -> PluralCategory:
    """Resolve the category for a formatting argument.

    Booleans and strings that do not parse as numbers resolve to ``other``.
    """
    if isinstance(count, bool):
        return PluralCategory.OTHER
    if isinstance(count, (int, float, Decimal)):
        return plural_category(language, count)
    if isinstance(count, str):
        try:
            number = float(count.strip())
        except ValueError:
            return PluralCategory.OTHER
        return plural_category(language, number)
    return PluralCategory.OTHER


def format_entry(
    entry: TranslationEntry, args: Sequence[Any] = (), locale: Optional[str] = None
) -> str:
    """Format a catalog entry.

    Args:
        entry: SimpleEntry or PluralEntry.
        args: Positional arguments; the first one is the plural count.
        locale: Locale or language code used for plural selection
            (default: English rules).

    Returns:
        Formatted text.
    """
    if not isinstance(entry, PluralEntry):
        return substitute_placeholders(entry.text, args)

    variants = entry.variants
    if not args:
        return variants.fallback

    selected = plural_category_for(args[0], locale or "en")
    return _substitute(_PLURAL_PLACEHOLDER_RE, variants.get(selected), args)
