"""Plural category resolution.

Maps a (language, number) pair onto one of the CLDR grammatical-number
categories. Numbers are first reduced to CLDR operands, then dispatched to
the rule registered for the language. Unregistered languages use the
English rule.

Usage:
    from infrastructure.i18n.plurals import category

    category("cs", 3)      # PluralCategory.FEW
    category("ru", 21)     # PluralCategory.ONE
    category("ar", 50)     # PluralCategory.MANY
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, Union

from infrastructure.i18n.models import LanguageTag, PluralCategory, PluralOperands

Number = Union[int, float, Decimal]
PluralRule = Callable[[PluralOperands], PluralCategory]

ZERO = PluralCategory.ZERO
ONE = PluralCategory.ONE
TWO = PluralCategory.TWO
FEW = PluralCategory.FEW
MANY = PluralCategory.MANY
OTHER = PluralCategory.OTHER

# Legacy or macro-language codes mapped to the code the registry uses
LANGUAGE_ALIASES = {
    "iw": "he",
    "in": "id",
    "ji": "yi",
    "jw": "jv",
    "tl": "fil",
    "no": "nb",
    "mo": "ro",
}


def compute_operands(number: Number) -> PluralOperands:
    """Derive CLDR operands from a number.

    Floats are reduced through their shortest repr, so ``1.0`` has no
    visible fraction digits. Decimals keep their exponent, so
    ``Decimal("1.50")`` has ``v == 2``.

    Args:
        number: Non-negative int, float or Decimal.

    Returns:
        PluralOperands for the absolute value of ``number``.

    Raises:
        ValueError: If ``number`` is not finite.
    """
    if isinstance(number, bool):
        raise ValueError("Booleans are not plural operands")

    if isinstance(number, int):
        value = abs(number)
        return PluralOperands(n=float(value), i=value)

    if isinstance(number, float):
        if not math.isfinite(number):
            raise ValueError(f"Non-finite number: {number}")
        decimal_value = Decimal(repr(abs(number)))
        keep_trailing_zeros = False
    else:
        decimal_value = abs(Decimal(number))
        if not decimal_value.is_finite():
            raise ValueError(f"Non-finite number: {number}")
        keep_trailing_zeros = True

    text = format(decimal_value, "f")
    integer_part, _, fraction = text.partition(".")
    trimmed = fraction.rstrip("0")
    visible = fraction if keep_trailing_zeros else trimmed

    return PluralOperands(
        n=float(decimal_value),
        i=int(integer_part),
        v=len(visible),
        w=len(trimmed),
        f=int(visible) if visible else 0,
        t=int(trimmed) if trimmed else 0,
    )


def _is_int_in(value: float, low: int, high: int) -> bool:
    """CLDR range test: value is a whole number within [low, high]."""
    return value == int(value) and low <= value <= high


def _many_millions(o: PluralOperands) -> bool:
    return (o.e == 0 and o.i != 0 and o.i % 1_000_000 == 0 and o.v == 0) or not (
        0 <= o.e <= 5
    )


# Rule families ---------------------------------------------------------------


def _other_only(o: PluralOperands) -> PluralCategory:
    return OTHER


def _english(o: PluralOperands) -> PluralCategory:
    if o.i == 1 and o.v == 0:
        return ONE
    return OTHER


def _one_by_value(o: PluralOperands) -> PluralCategory:
    if o.n == 1:
        return ONE
    return OTHER


def _zero_or_one_integer(o: PluralOperands) -> PluralCategory:
    # ff, kab: i = 0,1
    if o.i in (0, 1):
        return ONE
    return OTHER


def _french(o: PluralOperands) -> PluralCategory:
    if o.i in (0, 1):
        return ONE
    if _many_millions(o):
        return MANY
    return OTHER


def _spanish(o: PluralOperands) -> PluralCategory:
    if o.n == 1:
        return ONE
    if _many_millions(o):
        return MANY
    return OTHER


def _portuguese(o: PluralOperands) -> PluralCategory:
    if 0 <= o.i <= 1:
        return ONE
    if _many_millions(o):
        return MANY
    return OTHER


def _italian(o: PluralOperands) -> PluralCategory:
    if o.i == 1 and o.v == 0:
        return ONE
    if _many_millions(o):
        return MANY
    return OTHER


def _czech_slovak(o: PluralOperands) -> PluralCategory:
    if o.i == 1 and o.v == 0:
        return ONE
    if 2 <= o.i <= 4 and o.v == 0:
        return FEW
    if o.v != 0:
        return MANY
    return OTHER


def _polish(o: PluralOperands) -> PluralCategory:
    if o.v != 0:
        return OTHER
    if o.i == 1:
        return ONE
    if 2 <= o.i % 10 <= 4 and not 12 <= o.i % 100 <= 14:
        return FEW
    return MANY


def _russian_ukrainian(o: PluralOperands) -> PluralCategory:
    if o.v != 0:
        return OTHER
    if o.i % 10 == 1 and o.i % 100 != 11:
        return ONE
    if 2 <= o.i % 10 <= 4 and not 12 <= o.i % 100 <= 14:
        return FEW
    return MANY


def _belarusian(o: PluralOperands) -> PluralCategory:
    n10 = o.n % 10
    n100 = o.n % 100
    if n10 == 1 and n100 != 11:
        return ONE
    if _is_int_in(n10, 2, 4) and not _is_int_in(n100, 12, 14):
        return FEW
    if n10 == 0 or _is_int_in(n10, 5, 9) or _is_int_in(n100, 11, 14):
        return MANY
    return OTHER


def _bosnian_croatian_serbian(o: PluralOperands) -> PluralCategory:
    if (o.v == 0 and o.i % 10 == 1 and o.i % 100 != 11) or (
        o.f % 10 == 1 and o.f % 100 != 11
    ):
        return ONE
    if (o.v == 0 and 2 <= o.i % 10 <= 4 and not 12 <= o.i % 100 <= 14) or (
        2 <= o.f % 10 <= 4 and not 12 <= o.f % 100 <= 14
    ):
        return FEW
    return OTHER


def _slovenian(o: PluralOperands) -> PluralCategory:
    if o.v == 0 and o.i % 100 == 1:
        return ONE
    if o.v == 0 and o.i % 100 == 2:
        return TWO
    if (o.v == 0 and 3 <= o.i % 100 <= 4) or o.v != 0:
        return FEW
    return OTHER


def _sorbian(o: PluralOperands) -> PluralCategory:
    if (o.v == 0 and o.i % 100 == 1) or o.f % 100 == 1:
        return ONE
    if (o.v == 0 and o.i % 100 == 2) or o.f % 100 == 2:
        return TWO
    if (o.v == 0 and 3 <= o.i % 100 <= 4) or 3 <= o.f % 100 <= 4:
        return FEW
    return OTHER


def _lithuanian(o: PluralOperands) -> PluralCategory:
    n10 = o.n % 10
    n100 = o.n % 100
    if n10 == 1 and not _is_int_in(n100, 11, 19):
        return ONE
    if _is_int_in(n10, 2, 9) and not _is_int_in(n100, 11, 19):
        return FEW
    if o.f != 0:
        return MANY
    return OTHER


def _latvian(o: PluralOperands) -> PluralCategory:
    n10 = o.n % 10
    n100 = o.n % 100
    if (
        n10 == 0
        or _is_int_in(n100, 11, 19)
        or (o.v == 2 and 11 <= o.f % 100 <= 19)
    ):
        return ZERO
    if (
        (n10 == 1 and n100 != 11)
        or (o.v == 2 and o.f % 10 == 1 and o.f % 100 != 11)
        or (o.v != 2 and o.f % 10 == 1)
    ):
        return ONE
    return OTHER


def _hebrew(o: PluralOperands) -> PluralCategory:
    if (o.i == 1 and o.v == 0) or (o.i == 0 and o.v != 0):
        return ONE
    if o.i == 2 and o.v == 0:
        return TWO
    return OTHER


def _arabic(o: PluralOperands) -> PluralCategory:
    if o.n == 0:
        return ZERO
    if o.n == 1:
        return ONE
    if o.n == 2:
        return TWO
    if 3 <= o.i % 100 <= 10:
        return FEW
    if 11 <= o.i % 100 <= 99:
        return MANY
    return OTHER


def _welsh(o: PluralOperands) -> PluralCategory:
    exact = {0: ZERO, 1: ONE, 2: TWO, 3: FEW, 6: MANY}
    if o.n == int(o.n):
        return exact.get(int(o.n), OTHER)
    return OTHER


def _romanian(o: PluralOperands) -> PluralCategory:
    if o.i == 1 and o.v == 0:
        return ONE
    if o.v != 0 or o.n == 0 or (o.n != 1 and _is_int_in(o.n % 100, 1, 19)):
        return FEW
    return OTHER


def _macedonian(o: PluralOperands) -> PluralCategory:
    if (o.v == 0 and o.i % 10 == 1 and o.i % 100 != 11) or (
        o.f % 10 == 1 and o.f % 100 != 11
    ):
        return ONE
    return OTHER


def _maltese(o: PluralOperands) -> PluralCategory:
    if o.n == 1:
        return ONE
    if o.n == 2:
        return TWO
    if o.n == 0 or _is_int_in(o.n % 100, 3, 10):
        return FEW
    if _is_int_in(o.n % 100, 11, 19):
        return MANY
    return OTHER


def _irish(o: PluralOperands) -> PluralCategory:
    if o.n == 1:
        return ONE
    if o.n == 2:
        return TWO
    if _is_int_in(o.n, 3, 6):
        return FEW
    if _is_int_in(o.n, 7, 10):
        return MANY
    return OTHER


def _scottish_gaelic(o: PluralOperands) -> PluralCategory:
    if o.n in (1, 11):
        return ONE
    if o.n in (2, 12):
        return TWO
    if _is_int_in(o.n, 3, 10) or _is_int_in(o.n, 13, 19):
        return FEW
    return OTHER


def _breton(o: PluralOperands) -> PluralCategory:
    n10 = o.n % 10
    n100 = o.n % 100
    if n10 == 1 and n100 not in (11, 71, 91):
        return ONE
    if n10 == 2 and n100 not in (12, 72, 92):
        return TWO
    if n10 in (3, 4, 9) and not (
        _is_int_in(n100, 10, 19) or _is_int_in(n100, 70, 79) or _is_int_in(n100, 90, 99)
    ):
        return FEW
    if o.n != 0 and o.n % 1_000_000 == 0:
        return MANY
    return OTHER


def _hindi(o: PluralOperands) -> PluralCategory:
    if o.i == 0 or o.n == 1:
        return ONE
    return OTHER


def _punjabi(o: PluralOperands) -> PluralCategory:
    if _is_int_in(o.n, 0, 1):
        return ONE
    return OTHER


def _sinhala(o: PluralOperands) -> PluralCategory:
    if o.n in (0, 1) or (o.i == 0 and o.f == 1):
        return ONE
    return OTHER


def _icelandic(o: PluralOperands) -> PluralCategory:
    if (o.t == 0 and o.i % 10 == 1 and o.i % 100 != 11) or (
        o.t % 10 == 1 and o.t % 100 != 11
    ):
        return ONE
    return OTHER


def _filipino(o: PluralOperands) -> PluralCategory:
    if (
        (o.v == 0 and o.i in (1, 2, 3))
        or (o.v == 0 and o.i % 10 not in (4, 6, 9))
        or (o.v != 0 and o.f % 10 not in (4, 6, 9))
    ):
        return ONE
    return OTHER


def _one_two_other(o: PluralOperands) -> PluralCategory:
    if o.n == 1:
        return ONE
    if o.n == 2:
        return TWO
    return OTHER


# Registry --------------------------------------------------------------------

PLURAL_RULES: Dict[str, PluralRule] = {}


def register_plural_rule(rule: PluralRule, *languages: str) -> None:
    """Register ``rule`` for each of ``languages`` (ISO 639 codes)."""
    for language in languages:
        PLURAL_RULES[language] = rule


register_plural_rule(
    _other_only,
    "ja", "ko", "zh", "th", "vi", "id", "ms", "my", "km", "lo", "bo", "dz",
    "ig", "ii", "jbo", "jv", "kde", "kea", "lkt", "osa", "sah", "ses", "sg",
    "to", "wo", "yo", "yue",
)  # fmt: skip
register_plural_rule(
    _english,
    "en", "de", "nl", "sv", "da", "nb", "nn", "fi", "et", "eu", "gl", "el",
    "bg", "sq", "ta", "te", "ml", "mr", "ur", "ne", "sw", "af", "ast", "fy",
    "ia", "io", "lij", "sc", "scn", "yi",
)  # fmt: skip
register_plural_rule(
    _one_by_value,
    "hu", "tr", "az", "ka", "hy", "ckb", "ee", "eo", "ha", "haw", "kk", "ky",
    "lb", "mn", "om", "or", "ps", "so", "tk", "ug", "uz",
)  # fmt: skip
register_plural_rule(_zero_or_one_integer, "ff", "kab")
register_plural_rule(_french, "fr")
register_plural_rule(_spanish, "es")
register_plural_rule(_portuguese, "pt")
register_plural_rule(_italian, "it", "ca")
register_plural_rule(_czech_slovak, "cs", "sk")
register_plural_rule(_polish, "pl")
register_plural_rule(_russian_ukrainian, "ru", "uk")
register_plural_rule(_belarusian, "be")
register_plural_rule(_bosnian_croatian_serbian, "hr", "sr", "bs", "sh")
register_plural_rule(_slovenian, "sl")
register_plural_rule(_sorbian, "dsb", "hsb")
register_plural_rule(_lithuanian, "lt")
register_plural_rule(_latvian, "lv", "prg")
register_plural_rule(_hebrew, "he")
register_plural_rule(_arabic, "ar", "ars")
register_plural_rule(_welsh, "cy")
register_plural_rule(_romanian, "ro")
register_plural_rule(_macedonian, "mk")
register_plural_rule(_maltese, "mt")
register_plural_rule(_irish, "ga")
register_plural_rule(_scottish_gaelic, "gd")
register_plural_rule(_breton, "br")
register_plural_rule(_hindi, "hi", "bn", "gu", "kn", "fa", "am", "as", "zu")
register_plural_rule(
    _punjabi, "pa", "ak", "bho", "guw", "ln", "mg", "nso", "ti", "wa"
)
register_plural_rule(_sinhala, "si")
register_plural_rule(_icelandic, "is")
register_plural_rule(_filipino, "fil")
register_plural_rule(
    _one_two_other,
    "iu", "naq", "sat", "se", "sma", "smi", "smj", "smn", "sms",
)  # fmt: skip


def language_code(language: str) -> str:
    """Reduce a locale or language tag to the registry's language code."""
    try:
        code = LanguageTag.parse(language).language
    except ValueError:
        return ""
    return LANGUAGE_ALIASES.get(code, code)


def plural_rule_for(language: str) -> PluralRule:
    """Return the rule for ``language``, defaulting to the English rule."""
    return PLURAL_RULES.get(language_code(language), _english)


def category_for_operands(language: str, operands: PluralOperands) -> PluralCategory:
    """Resolve the category for already computed operands."""
    return plural_rule_for(language)(operands)


def category(language: str, number: Number) -> PluralCategory:
    """Resolve the plural category of ``number`` in ``language``.

    Negative and non-finite values resolve to ``other`` for every language.

    Args:
        language: Language code or locale tag (e.g. "cs", "pt_BR").
        number: The count being pluralized.

    Returns:
        PluralCategory for the number.
    """
    try:
        if number < 0:
            return OTHER
        operands = compute_operands(number)
    except (ValueError, TypeError, InvalidOperation):
        return OTHER
    return category_for_operands(language, operands)


def supported_languages() -> frozenset:
    """Language codes with an explicitly registered rule."""
    return frozenset(PLURAL_RULES)
