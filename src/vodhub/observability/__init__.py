"""Observability module for vodhub.

Provides structured logging with request correlation IDs.
"""

from vodhub.observability.logging import (
    ConsoleFormatter,
    JsonFormatter,
    configure_logging,
    correlation_id_var,
    request_id_var,
)

__all__ = [
    "configure_logging",
    "ConsoleFormatter",
    "JsonFormatter",
    "request_id_var",
    "correlation_id_var",
]
