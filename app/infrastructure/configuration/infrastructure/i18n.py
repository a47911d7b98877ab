"""Translation catalog synchronization settings."""

import json
from pathlib import Path
from typing import Annotated, Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import NoDecode

from infrastructure.configuration.base import InfrastructureSettings


class I18nSettings(InfrastructureSettings):
    """Configuration for the CDN-backed translation catalog.

    Environment Variables:
        I18N_CDN_URL: Base URL of the CDN serving catalog files (optional)
        I18N_DEFAULT_LANGUAGE: Language used when none can be resolved (default: en)
        I18N_PREFERRED_LANGUAGES: Ordered language preferences of the host
        I18N_AVAILABLE_LANGUAGES: Languages the catalog is delivered in
        I18N_NAMESPACES: Namespace tables fetched next to the base table
        I18N_APP_VERSION_SIGNATURE: Build identifier used to invalidate caches
        I18N_CACHE_DIR: Root directory of the on-disk catalog cache
        I18N_CACHE_BACKEND: 'file' or 'memory'
        I18N_REQUEST_TIMEOUT_SECONDS: Per-request transport timeout
        I18N_BUNDLE_DIR: Directory with YAML fallback bundles (optional)
        I18N_SYNC_ON_INITIALIZE: Trigger a CDN sync right after initialize

    List values accept either a JSON array or a comma-separated string.

    Example:
        ```python
        from infrastructure.configuration import settings

        cdn_url = settings.i18n.cdn_url
        namespaces = settings.i18n.namespaces
        ```
    """

    cdn_url: Optional[str] = Field(
        default=None,
        alias="I18N_CDN_URL",
        description="Base URL of the CDN serving catalog files",
    )
    default_language: str = Field(
        default="en",
        alias="I18N_DEFAULT_LANGUAGE",
        description="Fallback language when no preference matches",
    )
    preferred_languages: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        alias="I18N_PREFERRED_LANGUAGES",
        description="Ordered language preferences of the host application",
    )
    available_languages: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        alias="I18N_AVAILABLE_LANGUAGES",
        description="Languages the catalog is delivered in",
    )
    namespaces: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        alias="I18N_NAMESPACES",
        description="Namespace tables fetched in addition to the base table",
    )
    app_version_signature: Optional[str] = Field(
        default=None,
        alias="I18N_APP_VERSION_SIGNATURE",
        description="Build identifier; a new value invalidates cached catalogs",
    )
    cache_dir: Path = Field(
        default=Path.home() / ".cache" / "i18n-cdn-sync",
        alias="I18N_CACHE_DIR",
        description="Root directory of the on-disk catalog cache",
    )
    cache_backend: str = Field(
        default="file",
        alias="I18N_CACHE_BACKEND",
        description="Cache backend: 'file' or 'memory'",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        alias="I18N_REQUEST_TIMEOUT_SECONDS",
        description="Transport timeout for a single catalog request (seconds)",
    )
    bundle_dir: Optional[Path] = Field(
        default=None,
        alias="I18N_BUNDLE_DIR",
        description="Directory with YAML bundles used on catalog misses",
    )
    sync_on_initialize: bool = Field(
        default=True,
        alias="I18N_SYNC_ON_INITIALIZE",
        description="Start a CDN sync as part of initialize()",
    )

    @field_validator(
        "preferred_languages", "available_languages", "namespaces", mode="before"
    )
    @classmethod
    def _parse_string_list(cls, v: Any) -> Any:
        """Parse list settings from JSON arrays or comma-separated strings."""
        if v is None:
            return []
        if isinstance(v, str):
            stripped = v.strip()
            if not stripped:
                return []
            if stripped.startswith("["):
                return json.loads(stripped)
            return [part.strip() for part in stripped.split(",") if part.strip()]
        return v

    @field_validator("cache_backend")
    @classmethod
    def _validate_cache_backend(cls, v: str) -> str:
        """Validate the cache backend name."""
        backend = v.lower()
        if backend not in ("file", "memory"):
            raise ValueError(f"Unsupported cache backend: {v}")
        return backend
