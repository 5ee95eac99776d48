"""Custom exceptions for the remote fetch module."""

from __future__ import annotations


class FetchError(Exception):
    """Fetching a URL failed."""

    def __init__(self, message: str, url: str):
        self.url = url
        super().__init__(message)


class TransportExhaustedError(FetchError):
    """Every attempt failed before a response was received."""

    def __init__(self, url: str, attempts: int, last_error: Exception):
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"Request to {url} failed after {attempts} attempts: {last_error}",
            url=url,
        )


class HttpStatusError(FetchError):
    """A response was received but its status was not 2xx."""

    def __init__(self, url: str, status_code: int, reason: str):
        self.status_code = status_code
        self.reason = reason
        super().__init__(
            f"Failed to fetch from {url}: HTTP {status_code} ({reason})", url=url
        )


class BodyReadError(FetchError):
    """The response body could not be read as text."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"Failed to read response from {url}: {cause}", url=url)


class JsonParseError(FetchError):
    """The response body was not valid JSON."""

    def __init__(self, url: str, cause: Exception):
        super().__init__(f"Failed to parse JSON from {url}: {cause}", url=url)
