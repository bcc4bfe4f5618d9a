"""
Error kinds for the scoring job.
- CONFIG and CONNECTION are fatal for the whole run.
- TRANSPORT is handled per row, PARSE per scoring call.
"""
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    CONFIG = "config"
    CONNECTION = "connection"
    TRANSPORT = "transport"
    PARSE = "parse"


class SentimentError(Exception):
    kind: ErrorKind

    @property
    def fatal(self) -> bool:
        return self.kind in (ErrorKind.CONFIG, ErrorKind.CONNECTION)


class ConfigError(SentimentError):
    kind = ErrorKind.CONFIG


class DatastoreConnectionError(SentimentError):
    kind = ErrorKind.CONNECTION


class TransportError(SentimentError):
    kind = ErrorKind.TRANSPORT


class ParseError(SentimentError):
    kind = ErrorKind.PARSE
