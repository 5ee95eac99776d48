import pytest
import requests
from urllib3.exceptions import ProtocolError

from remote.fetcher import Fetcher


class TruncatedBody:
    """Stand-in for urllib3's raw response when the connection drops mid-body."""

    def __init__(self):
        self.closed = False

    def stream(self, *args, **kwargs):
        raise ProtocolError(
            "Connection broken: IncompleteRead(5 bytes read, 95 more expected)"
        )

    def read(self, *args, **kwargs):
        return self.stream()

    def close(self):
        self.closed = True


def build_response(status_code: int = 200, body: str = "") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response._content = body.encode("utf-8")
    response._content_consumed = True
    response.encoding = "utf-8"
    return response


def build_truncated_response(status_code: int = 200) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.raw = TruncatedBody()
    response.encoding = "utf-8"
    return response


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def make_truncated_response():
    return build_truncated_response


@pytest.fixture
def sleeps(monkeypatch):
    """Record the backoff sleeps handed to tenacity instead of blocking."""
    recorded = []
    monkeypatch.setattr("remote.fetcher.time.sleep", recorded.append)
    return recorded


@pytest.fixture
def fetcher():
    with Fetcher() as f:
        yield f
