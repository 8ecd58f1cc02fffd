from internal.logging import get_logger, LogLevel, StructuredLogger
from utils.timestamp import now_micros, format_timestamp

__all__ = [
    "get_logger",
    "LogLevel",
    "StructuredLogger",
    "now_micros",
    "format_timestamp",
]
