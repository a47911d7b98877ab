"""Translation models for i18n system.

Defines core data structures for catalog entries, plural categories,
cache identities and synchronization results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Union


class PluralCategory(str, Enum):
    """CLDR grammatical-number categories."""

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


PLURAL_CATEGORY_NAMES = frozenset(category.value for category in PluralCategory)


@dataclass(frozen=True)
class PluralOperands:
    """CLDR plural operands derived from a numeric value.

    Attributes:
        n: Absolute value of the source number.
        i: Integer digits of n.
        v: Number of visible fraction digits, with trailing zeros.
        w: Number of visible fraction digits, without trailing zeros.
        f: Visible fraction digits, with trailing zeros, as an integer.
        t: Visible fraction digits, without trailing zeros, as an integer.
        e: Compact decimal exponent (0 for plain numbers).
    """

    n: float
    i: int
    v: int = 0
    w: int = 0
    f: int = 0
    t: int = 0
    e: int = 0


@dataclass(frozen=True)
class PluralVariants:
    """Per-category texts of a plural entry.

    Any category may be missing; lookups fall back to ``other`` and, for
    payloads that omit ``other``, to the first variant present.
    """

    zero: Optional[str] = None
    one: Optional[str] = None
    two: Optional[str] = None
    few: Optional[str] = None
    many: Optional[str] = None
    other: Optional[str] = None

    @classmethod
    def from_mapping(cls, variants: Mapping[str, object]) -> "PluralVariants":
        """Build variants from a mapping, keeping only string category values."""
        return cls(
            **{
                name: value
                for name, value in variants.items()
                if name in PLURAL_CATEGORY_NAMES and isinstance(value, str)
            }
        )

    @property
    def fallback(self) -> str:
        """Text used when the resolved category has no variant."""
        if self.other is not None:
            return self.other
        for category in PluralCategory:
            value = getattr(self, category.value)
            if value is not None:
                return value
        return ""

    def get(self, category: PluralCategory) -> str:
        """Return the text for ``category``, falling back to ``other``."""
        value = getattr(self, category.value)
        return value if value is not None else self.fallback

    def is_empty(self) -> bool:
        return all(getattr(self, c.value) is None for c in PluralCategory)


@dataclass(frozen=True)
class SimpleEntry:
    """Catalog entry holding a literal string."""

    text: str


@dataclass(frozen=True)
class PluralEntry:
    """Catalog entry holding plural-category variants."""

    variants: PluralVariants


TranslationEntry = Union[SimpleEntry, PluralEntry]

# table name ("" = base table) -> key -> entry
Catalog = Dict[str, Dict[str, TranslationEntry]]

BASE_TABLE = ""


@dataclass(frozen=True)
class CacheDescriptor:
    """Cache identity of one catalog file.

    Frozen to ensure immutability and hashability; equality covers all four
    fields so two app builds or two sources never share a cache slot.

    Attributes:
        language: CDN language code (e.g. "cs", "pt-BR").
        namespace: Namespace table, or None for the base table.
        app_version_signature: Build identifier of the consuming app.
        source_endpoint: Remote source the payload came from.
    """

    language: str
    namespace: Optional[str] = None
    app_version_signature: Optional[str] = None
    source_endpoint: str = ""

    @property
    def table(self) -> str:
        return self.namespace or BASE_TABLE


@dataclass(frozen=True)
class CdnEtagDescriptor:
    """Identity of the validation token stored for one remote file."""

    language: str
    namespace: Optional[str] = None
    source_endpoint: str = ""

    @property
    def table(self) -> str:
        return self.namespace or BASE_TABLE


@dataclass
class SyncResult:
    """Outcome of one synchronization pass.

    Attributes:
        translations: Tables that changed, keyed by table name.
        updated_etags: Validation tokens returned for files that were fetched.
        language: Language the pass was run for.
    """

    translations: Catalog = field(default_factory=dict)
    updated_etags: Dict[str, str] = field(default_factory=dict)
    language: Optional[str] = None

    @property
    def changed_tables(self) -> frozenset:
        return frozenset(self.translations)

    def is_empty(self) -> bool:
        return not self.translations and not self.updated_etags


class TranslatorState(str, Enum):
    """Lifecycle states of the translation orchestrator."""

    UNINITIALIZED = "uninitialized"
    IDLE = "idle"
    SYNCING = "syncing"


@dataclass(frozen=True)
class LanguageTag:
    """Parsed language tag (language, optional script, optional region).

    Accepts both BCP 47 (``pt-BR``) and POSIX style (``pt_BR``) separators
    and any letter case.
    """

    language: str
    script: Optional[str] = None
    region: Optional[str] = None
    extra: tuple = ()

    @classmethod
    def parse(cls, tag: str) -> "LanguageTag":
        """Parse a locale or language string.

        Args:
            tag: Language tag (e.g. "cs", "cs_CZ", "zh-hans-cn").

        Returns:
            LanguageTag instance.

        Raises:
            ValueError: If the tag is empty.
        """
        parts = [p for p in tag.replace("_", "-").split("-") if p]
        if not parts:
            raise ValueError(f"Invalid language tag: {tag!r}")
        language = parts[0].lower()
        script = None
        region = None
        extra = []
        for part in parts[1:]:
            if script is None and region is None and len(part) == 4 and part.isalpha():
                script = part.title()
            elif region is None and (
                (len(part) == 2 and part.isalpha())
                or (len(part) == 3 and part.isdigit())
            ):
                region = part.upper()
            else:
                extra.append(part)
        return cls(language=language, script=script, region=region, extra=tuple(extra))

    @property
    def cdn_code(self) -> str:
        """Tag rendered the way the CDN names its files (e.g. "zh-Hans-CN")."""
        parts = [self.language]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        parts.extend(p.title() for p in self.extra)
        return "-".join(parts)

    def __str__(self) -> str:
        return self.cdn_code
