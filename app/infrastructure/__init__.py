"""Infrastructure modules for the i18n CDN sync engine.

Centralized infrastructure components:
- configuration: Settings management (settings, I18nSettings)
- logging: Structured logging (configure_logging, get_module_logger)
- operations: Operation results and error classification
- i18n: Plural rules, catalogs, cache, CDN sync and the Translator
"""

# Configuration
from infrastructure.configuration import settings

# Logging
from infrastructure.logging import get_module_logger

# Operations
from infrastructure.operations import OperationResult, OperationStatus

__all__ = [
    "settings",
    "get_module_logger",
    "OperationResult",
    "OperationStatus",
]
