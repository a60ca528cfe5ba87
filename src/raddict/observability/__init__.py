"""Public observability primitives: diagnostic logging setup and context binding."""

from raddict.observability.logging import (
    LoggingConfig,
    LoggingHandle,
    get_active_logging_handle,
    get_log_context,
    log_context,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)

__all__ = [
    "LoggingConfig",
    "LoggingHandle",
    "get_active_logging_handle",
    "get_log_context",
    "log_context",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
