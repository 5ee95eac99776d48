"""Fetcher: GET text or JSON over a shared requests session with bounded retry."""

from __future__ import annotations

import time
from http import HTTPStatus
from typing import Any, Callable

import requests
from loguru import logger
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import (
    BodyReadError,
    HttpStatusError,
    JsonParseError,
    TransportExhaustedError,
)

USER_AGENT = "gitcraft-fetcher"
REQUEST_TIMEOUT = 30.0
MAX_ATTEMPTS = 3
BACKOFF_BASE_MS = 100


def canonical_reason(status_code: int) -> str:
    """Return the standard reason phrase for *status_code*, or "Unknown"."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown"


class Fetcher:
    """Fetches remote content, retrying transport failures with exponential backoff.

    Only transport errors are retried. Requests are streamed, so the retry
    covers connecting and receiving the status line and headers; the body is
    read once afterwards and a failure there is never retried. A response
    with a non-2xx status is returned by the retry loop as-is and rejected
    afterwards.

    REQUEST_TIMEOUT is handed to requests, which applies it to connecting
    and to each socket read rather than to the request as a whole. A server
    that keeps trickling bytes can hold a call past 30 seconds.
    """

    def __init__(self) -> None:
        self.timeout = REQUEST_TIMEOUT
        self._session = requests.Session()
        self._session.headers["User-Agent"] = USER_AGENT

    def __enter__(self) -> Fetcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    def fetch_content(self, url: str) -> str:
        """Fetch *url* and return the body as text.

        Raises TransportExhaustedError, HttpStatusError or BodyReadError.
        """
        with self._get(url) as response:
            try:
                return response.text
            except requests.RequestException as exc:
                raise BodyReadError(url, exc) from exc

    def fetch_json(self, url: str) -> Any:
        """Fetch *url* and return the body parsed as JSON.

        Raises TransportExhaustedError, HttpStatusError, BodyReadError or
        JsonParseError.
        """
        with self._get(url) as response:
            try:
                return response.json()
            # requests.JSONDecodeError is itself a RequestException
            except requests.JSONDecodeError as exc:
                raise JsonParseError(url, exc) from exc
            except requests.RequestException as exc:
                raise BodyReadError(url, exc) from exc

    def _get(self, url: str) -> requests.Response:
        """Issue a streamed GET through the retry loop and reject non-2xx responses."""

        def send() -> requests.Response:
            logger.debug(f"GET {url}")
            return self._session.get(url, timeout=self.timeout, stream=True)

        response = self._retry(url, send)
        if not 200 <= response.status_code < 300:
            response.close()
            raise HttpStatusError(
                url, response.status_code, canonical_reason(response.status_code)
            )
        return response

    def _retry(
        self, url: str, operation: Callable[[], requests.Response]
    ) -> requests.Response:
        """Call *operation* up to MAX_ATTEMPTS times, sleeping 100ms, 200ms, ... between failures."""

        def log_retry(retry_state: RetryCallState) -> None:
            logger.warning(
                f"Attempt {retry_state.attempt_number} for {url} failed: "
                f"{retry_state.outcome.exception()}; "
                f"retrying in {retry_state.next_action.sleep:.1f}s"
            )

        retrying = Retrying(
            retry=retry_if_exception_type(requests.RequestException),
            stop=stop_after_attempt(MAX_ATTEMPTS),
            wait=wait_exponential(multiplier=BACKOFF_BASE_MS / 1000),
            before_sleep=log_retry,
            sleep=time.sleep,
        )
        try:
            return retrying(operation)
        except RetryError as exc:
            last_attempt = exc.last_attempt
            last_error = last_attempt.exception()
            logger.error(
                f"Giving up on {url} after {last_attempt.attempt_number} attempts: {last_error}"
            )
            raise TransportExhaustedError(
                url, last_attempt.attempt_number, last_error
            ) from last_error
