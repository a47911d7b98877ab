"""Language resolution helpers.

Normalizes host locale identifiers to the language codes used by the CDN
and picks the catalog language from the host's preferences.
"""

from typing import Optional, Sequence

from infrastructure.i18n.models import LanguageTag
from infrastructure.logging import get_module_logger

logger = get_module_logger()


def to_cdn_language(tag: str) -> str:
    """Convert a host locale identifier to the CDN language code.

    Example:
        to_cdn_language("pt_br")       # "pt-BR"
        to_cdn_language("zh-hans-cn")  # "zh-Hans-CN"

    Raises:
        ValueError: If the tag is empty.
    """
    return LanguageTag.parse(tag).cdn_code


def locale_matches_language(locale: str, language: str) -> bool:
    """True when ``locale`` and ``language`` share the primary language subtag."""
    try:
        locale_tag = LanguageTag.parse(locale)
        language_tag = LanguageTag.parse(language)
    except ValueError:
        return False
    return locale_tag.language == language_tag.language


class LanguageNegotiator:
    """Performs language negotiation for multilingual content.

    Matches requested tags against the languages the catalog is delivered
    in (e.g. when the host requests "pt-BR" but only "pt" is available).
    """

    @staticmethod
    def matches_language(
        requested: str,
        available: str,
        strict: bool = False,
    ) -> bool:
        """Check if available language matches requested language.

        Args:
            requested: Requested language tag (e.g., "en-US" or "en_US").
            available: Available language tag (e.g., "en").
            strict: If True, requires the same normalized tag. If False,
                allows a language-only match.

        Returns:
            True if languages match.
        """
        try:
            requested_tag = LanguageTag.parse(requested)
            available_tag = LanguageTag.parse(available)
        except ValueError:
            return False

        if requested_tag.cdn_code.lower() == available_tag.cdn_code.lower():
            return True

        if strict:
            return False

        return requested_tag.language == available_tag.language

    @staticmethod
    def find_best_match(
        requested: Sequence[str],
        available: Sequence[str],
        default: Optional[str] = None,
    ) -> Optional[str]:
        """Find best matching language from available options.

        Args:
            requested: Requested language tags in preference order.
            available: Available language tags.
            default: Default if no match found.

        Returns:
            Best matching language from available, or default if no match.
        """
        for req_lang in requested:
            # Try exact match first
            for avail_lang in available:
                if LanguageNegotiator.matches_language(
                    req_lang, avail_lang, strict=True
                ):
                    return avail_lang

            # Try language-only match
            for avail_lang in available:
                if LanguageNegotiator.matches_language(
                    req_lang, avail_lang, strict=False
                ):
                    return avail_lang

        return default


def resolve_language(
    preferred: Sequence[str],
    available: Sequence[str],
    default: str,
) -> str:
    """Pick the CDN language for a catalog.

    Without a list of available languages the first preference wins; with
    one, the best negotiated match wins. Falls back to ``default``.
    """
    if not available:
        chosen = preferred[0] if preferred else default
    else:
        chosen = LanguageNegotiator.find_best_match(preferred, available, default)

    try:
        language = to_cdn_language(chosen)
    except ValueError:
        language = to_cdn_language(default)

    logger.debug(
        "resolved_language",
        language=language,
        preferred=list(preferred),
        available=list(available),
    )
    return language
