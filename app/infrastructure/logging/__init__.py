"""Structured logging infrastructure.

Centralized logging configuration using structlog.

Public API:
    - configure_logging(): Initialize logging for the application
    - get_module_logger(): Get a logger for the calling module

Formatters:
    - add_app_info(): Processor to add app name/version
    - mask_url_credentials(): Processor to hide tokens in logged URLs
    - truncate_large_values(): Processor to limit string lengths

Example:
    from infrastructure.logging import configure_logging, get_module_logger

    # At application startup
    configure_logging()

    # In a module
    logger = get_module_logger()
    logger.info("module_initialized")
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
)

from infrastructure.logging.formatters import (
    add_app_info,
    mask_url_credentials,
    truncate_large_values,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "add_app_info",
    "mask_url_credentials",
    "truncate_large_values",
]
