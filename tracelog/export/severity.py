"""Log level to OTLP severity number mapping."""

from enum import Enum


class LogLevel(str, Enum):
    """Level names understood by the severity table."""

    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    HTTP = "http"
    VERBOSE = "verbose"
    DEBUG = "debug"
    SILLY = "silly"
    TRACE = "trace"
    # Names emitted by structlog / the stdlib
    WARNING = "warning"
    CRITICAL = "critical"
    FATAL = "fatal"
    EXCEPTION = "exception"


# OTLP severity numbers: TRACE=1, DEBUG=5, INFO=9, WARN=13, ERROR=17, FATAL=21
SEVERITY_NUMBERS: dict[LogLevel, int] = {
    LogLevel.ERROR: 17,
    LogLevel.WARN: 13,
    LogLevel.INFO: 9,
    LogLevel.HTTP: 9,
    LogLevel.VERBOSE: 5,
    LogLevel.DEBUG: 5,
    LogLevel.SILLY: 1,
    LogLevel.TRACE: 1,
    LogLevel.WARNING: 13,
    LogLevel.CRITICAL: 21,
    LogLevel.FATAL: 21,
    LogLevel.EXCEPTION: 17,
}

DEFAULT_SEVERITY_NUMBER = 9


def severity_number(level: LogLevel | str | None) -> int:
    """Map a log level to its OTLP severity number.

    Unknown levels map to INFO (9) rather than failing, since upstream
    taxonomies may grow levels this table does not know.
    """
    if isinstance(level, LogLevel):
        return SEVERITY_NUMBERS[level]
    if not level:
        return DEFAULT_SEVERITY_NUMBER
    try:
        return SEVERITY_NUMBERS[LogLevel(level.lower())]
    except ValueError:
        return DEFAULT_SEVERITY_NUMBER
