"""Tests for infrastructure.i18n.resolvers module."""

import pytest

from infrastructure.i18n.resolvers import (
    LanguageNegotiator,
    locale_matches_language,
    resolve_language,
    to_cdn_language,
)


@pytest.mark.unit
class TestToCdnLanguage:
    """Tests for host locale to CDN language conversion."""

    @pytest.mark.parametrize(
        "locale,expected",
        [
            ("en", "en"),
            ("en_US", "en-US"),
            ("pt_br", "pt-BR"),
            ("zh-hans", "zh-Hans"),
            ("zh_Hans_CN", "zh-Hans-CN"),
        ],
    )
    def test_conversion(self, locale, expected):
        assert to_cdn_language(locale) == expected

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            to_cdn_language("")


@pytest.mark.unit
class TestLocaleMatchesLanguage:
    """Tests for primary-subtag matching."""

    def test_matches_on_primary_language(self):
        assert locale_matches_language("cs_CZ", "cs")
        assert locale_matches_language("pt-BR", "pt_PT")

    def test_different_languages_do_not_match(self):
        assert not locale_matches_language("sk", "cs")

    def test_empty_never_matches(self):
        assert not locale_matches_language("", "cs")


@pytest.mark.unit
class TestLanguageNegotiator:
    """Tests for LanguageNegotiator service."""

    def test_matches_language_exact(self):
        """matches_language() matches exact language tags."""
        assert LanguageNegotiator.matches_language("en-US", "en-US")

    def test_matches_language_ignores_separator_and_case(self):
        assert LanguageNegotiator.matches_language("en_us", "en-US", strict=True)

    def test_matches_language_language_only(self):
        """matches_language() matches language without region (non-strict)."""
        assert LanguageNegotiator.matches_language("en-US", "en")

    def test_matches_language_strict_mode(self):
        """matches_language() requires exact match in strict mode."""
        assert not LanguageNegotiator.matches_language("en-US", "en", strict=True)

    def test_find_best_match_exact(self):
        """find_best_match() prefers exact match."""
        result = LanguageNegotiator.find_best_match(
            ["pt-BR", "en"], ["pt", "pt-BR", "en"]
        )
        assert result == "pt-BR"

    def test_find_best_match_language_only(self):
        """find_best_match() falls back to language-only match."""
        result = LanguageNegotiator.find_best_match(["fr-CA"], ["en", "fr"])
        assert result == "fr"

    def test_find_best_match_respects_preference_order(self):
        result = LanguageNegotiator.find_best_match(["de", "cs"], ["cs", "en"])
        assert result == "cs"

    def test_find_best_match_default(self):
        """find_best_match() returns default when no match."""
        result = LanguageNegotiator.find_best_match(["ja"], ["en", "fr"], "en")
        assert result == "en"


@pytest.mark.unit
class TestResolveLanguage:
    """Tests for catalog language selection."""

    def test_first_preference_without_available_list(self):
        assert resolve_language(["cs_CZ", "en"], [], "en") == "cs-CZ"

    def test_negotiated_against_available(self):
        assert resolve_language(["cs_CZ", "en"], ["en", "cs"], "en") == "cs"

    def test_default_when_nothing_matches(self):
        assert resolve_language(["ja"], ["en", "cs"], "en") == "en"

    def test_default_without_preferences(self):
        assert resolve_language([], [], "de") == "de"
