from typing import Callable, Dict, List, Optional
import pytest


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200):
        self.text = text
        self.status_code = status_code

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class FakeSession:
    """Stands in for requests.Session; ``handler(url, params)`` returns a response or an exception."""

    def __init__(self, handler: Callable[[str, Dict[str, str]], object]):
        self.handler = handler
        self.calls: List[tuple] = []

    def get(self, url: str, params: Optional[Dict[str, str]] = None, headers=None, timeout=None):
        params = dict(params or {})
        self.calls.append((url, params))
        result = self.handler(url, params)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def make_session():
    return FakeSession


@pytest.fixture
def response():
    return FakeResponse
