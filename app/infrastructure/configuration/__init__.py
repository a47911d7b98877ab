"""Infrastructure configuration module - public API.

Centralized configuration management using Pydantic BaseSettings with
domain-based organization.

Exports:
    settings: Singleton Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    I18nSettings: Catalog sync settings class (for testing)

Example:
    ```python
    from infrastructure.configuration import settings

    cdn_url = settings.i18n.cdn_url
    namespaces = settings.i18n.namespaces
    ```
"""

from infrastructure.configuration.infrastructure.i18n import I18nSettings
from infrastructure.configuration.settings import Settings, settings

__all__ = ["Settings", "I18nSettings", "settings"]
