from abc import ABC, abstractmethod


class LoggerPort(ABC):
    """Logging seam for services and adapters that stay free of the logging stack.

    Messages arrive pre-formatted. ``source_degraded`` records an upstream source
    that was skipped while the caller still served a partial result.
    """

    @abstractmethod
    def info(self, msg: str) -> None:
        pass

    @abstractmethod
    def warning(self, msg: str) -> None:
        pass

    @abstractmethod
    def error(self, msg: str) -> None:
        pass

    @abstractmethod
    def source_degraded(self, operation: str, source: str, exc: BaseException) -> None:
        pass
