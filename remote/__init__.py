"""Remote fetch module: text and JSON over HTTP with bounded retry."""

from .exceptions import (
    BodyReadError,
    FetchError,
    HttpStatusError,
    JsonParseError,
    TransportExhaustedError,
)
from .fetcher import Fetcher

__all__ = [
    "Fetcher",
    "FetchError",
    "TransportExhaustedError",
    "HttpStatusError",
    "BodyReadError",
    "JsonParseError",
]
