"""Logger factory with lazy, one-time configuration."""

import logging
from threading import Lock
from typing import Any, MutableMapping, Optional, Tuple, Union

from ..config.settings import get_settings
from .config import setup_logging_configuration

_logging_configured = False
_configuration_lock = Lock()


def get_logger(name: Optional[str] = None, **extra_context: Any) -> Union[logging.Logger, logging.LoggerAdapter]:
    """Get a logger, configuring logging on first use.

    Args:
        name: Logger name, usually ``__name__``.
        **extra_context: Fields added to every record of the returned logger.

    Returns:
        A plain ``Logger``, or a ``ContextLogger`` when context is given.

    Example:
        ```python
        logger = get_logger(__name__)
        logger.info("Stored upload", extra={"document_id": 12, "stage": "stored"})

        run_logger = get_logger(__name__, document_id=12)
        run_logger.info("Analysis parsed")
        ```
    """
    _ensure_logging_configured()

    base_logger = logging.getLogger(name or "compliance_ai")
    if extra_context:
        return ContextLogger(base_logger, extra_context)
    return base_logger


def bind_context(logger: Union[logging.Logger, logging.LoggerAdapter], **extra_context: Any) -> "ContextLogger":
    """Return an adapter of ``logger`` carrying additional context fields."""
    if isinstance(logger, logging.LoggerAdapter):
        base_context = dict(logger.extra or {})
        base_logger = logger.logger
    else:
        base_context = {}
        base_logger = logger
    return ContextLogger(base_logger, {**base_context, **extra_context})


def configure_logging(force: bool = False) -> None:
    """Configure logging now instead of on the first ``get_logger`` call."""
    global _logging_configured

    with _configuration_lock:
        if _logging_configured and not force:
            return
        setup_logging_configuration()
        _logging_configured = True

        settings = get_settings()
        logging.getLogger(__name__).debug(
            f"Logging configured for {settings.ENVIRONMENT.value} environment",
            extra={"log_level": settings.LOG_LEVEL, "file_enabled": settings.LOG_FILE_ENABLED},
        )


def _ensure_logging_configured() -> None:
    if not _logging_configured:
        configure_logging()


class ContextLogger(logging.LoggerAdapter):
    """Adapter that merges its context with the ``extra`` of each call."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = kwargs.get("extra") or {}
        kwargs["extra"] = {**(self.extra or {}), **extra}
        return msg, kwargs
