from typing import Optional

from cineverse.domain.ports.services.logger import LoggerPort
from cineverse.infrastructure.logging.logger import Logger

# Attribute the record to the service that called the adapter.
CALLER_STACKLEVEL = 2


def describe_failure(exc: BaseException) -> str:
    """Short reason for a failed upstream call, preferring the domain error's detail."""
    detail = getattr(exc, "detail", None) or getattr(exc, "message", None) or str(exc)
    return f"{type(exc).__name__}: {detail}" if detail else type(exc).__name__


class StdLoggerAdapter(LoggerPort):
    def __init__(self, name: Optional[str] = None):
        self._logger = Logger.get_logger(name)

    def info(self, msg: str) -> None:
        self._logger.info(msg, stacklevel=CALLER_STACKLEVEL)

    def warning(self, msg: str) -> None:
        self._logger.warning(msg, stacklevel=CALLER_STACKLEVEL)

    def error(self, msg: str) -> None:
        self._logger.error(msg, stacklevel=CALLER_STACKLEVEL)

    def source_degraded(self, operation: str, source: str, exc: BaseException) -> None:
        self._logger.warning(
            f"{operation}: {source} skipped ({describe_failure(exc)})",
            stacklevel=CALLER_STACKLEVEL,
        )
