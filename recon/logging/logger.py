import logging
import sys


class Log:
    """Structured logger bound to a component and an optional context.

    Instances are passed explicitly into components instead of sharing
    one process-wide logger, so each document run can carry its own context.
    """

    ROOT_NAME = "recon"

    def __init__(self, component: str = "", **context: object) -> None:
        name = f"{self.ROOT_NAME}.{component}" if component else self.ROOT_NAME
        self._component = component
        self._logger = logging.getLogger(name)
        self._context = context

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Configure the root logger with the specified level and stdout handler."""
        root = logging.getLogger(cls.ROOT_NAME)
        root.setLevel(log_level.upper())
        if not root.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            root.addHandler(handler)

    @property
    def context(self) -> dict[str, object]:
        return dict(self._context)

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, **context: object) -> "Log":
        """Return a logger for the same component with extra context merged in."""
        return Log(self._component, **{**self._context, **context})

    def child(self, component: str) -> "Log":
        """Return a logger for a sub-component that keeps the current context."""
        name = f"{self._component}.{component}" if self._component else component
        return Log(name, **self._context)

    def info(self, message: str, **kwargs: object) -> None:
        """Log an info message."""
        self._logger.info(self._format(message), extra=self._extra(kwargs))

    def error(self, message: str, **kwargs: object) -> None:
        """Log an error message."""
        self._logger.error(self._format(message), extra=self._extra(kwargs))

    def warning(self, message: str, **kwargs: object) -> None:
        """Log a warning message."""
        self._logger.warning(self._format(message), extra=self._extra(kwargs))

    def debug(self, message: str, **kwargs: object) -> None:
        """Log a debug message."""
        self._logger.debug(self._format(message), extra=self._extra(kwargs))

    def _format(self, message: str) -> str:
        if not self._context:
            return message
        prefix = " ".join(f"{key}={value}" for key, value in self._context.items())
        return f"[{prefix}] {message}"

    def _extra(self, kwargs: dict[str, object]) -> dict[str, object]:
        return {"context": {**self._context, **kwargs}}
