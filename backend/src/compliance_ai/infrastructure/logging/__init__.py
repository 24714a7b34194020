"""Centralized logging for the service.

Usage:
    ```python
    from compliance_ai.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Document stored", extra={"document_id": 3, "stage": "stored"})
    ```

Records carry the request correlation ID set by ``CorrelationIdMiddleware``.
"""

from .config import (
    configure_testing_logging,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
    setup_logging_configuration,
)
from .factory import bind_context, configure_logging, get_logger

__all__ = [
    "bind_context",
    "configure_logging",
    "configure_testing_logging",
    "generate_correlation_id",
    "get_correlation_id",
    "get_logger",
    "reset_correlation_id",
    "set_correlation_id",
    "setup_logging_configuration",
]
