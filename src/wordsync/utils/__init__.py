from .redact import redact
from .timestamps import format_timestamp, parse_timestamp

__all__ = [
    "format_timestamp",
    "parse_timestamp",
    "redact",
]
