import contextvars
from enum import Enum
from typing import Literal, Tuple

from swarm_quorum.logging.models import LogLevel, LogLevelName


LogOutput = Literal['stdout', 'stderr']


class StreamType(Enum):
    STDOUT = "stdout"
    STDERR = "stderr"


_global_log_level = contextvars.ContextVar("_global_log_level", default=LogLevel.INFO)
_global_log_output_type = contextvars.ContextVar("_global_log_output_type", default=StreamType.STDERR)
_global_disabled_loggers: contextvars.ContextVar[Tuple[str, ...]] = contextvars.ContextVar(
    "_global_disabled_loggers",
    default=(),
)


class LoggingConfig:
    """Level, console stream and disabled loggers, scoped to the current context."""

    def update(
        self,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
    ):
        if log_level:
            _global_log_level.set(LogLevel.to_level(log_level))

        if log_output:
            _global_log_output_type.set(StreamType(log_output))

    def disable(self, logger_name: str):
        disabled_loggers = _global_disabled_loggers.get()
        if logger_name not in disabled_loggers:
            _global_disabled_loggers.set(disabled_loggers + (logger_name,))

    def enabled(self, logger_name: str, log_level: LogLevel) -> bool:
        return (
            logger_name not in _global_disabled_loggers.get()
            and log_level.severity >= _global_log_level.get().severity
        )

    @property
    def level(self) -> LogLevel:
        return _global_log_level.get()

    @property
    def output(self) -> StreamType:
        return _global_log_output_type.get()
