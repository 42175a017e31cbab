# tests/conftest.py
import sys
from pathlib import Path

import httpx
import pytest

# add repo root to sys.path so tests can import the "nearcare" package
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from nearcare.core.store import LocalStore  # noqa: E402


@pytest.fixture
def store():
    s = LocalStore(":memory:")
    yield s
    s.close()


@pytest.fixture
def make_transport():
    """
    Build an httpx.MockTransport answering every request with `payload`.
    Requests are recorded in the returned transport's `.requests` list.
    Pass `error=` to raise a transport exception instead.
    """
    def factory(payload=None, status=200, error=None, text=None):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if error is not None:
                raise error(f"simulated {error.__name__}", request=request)
            if text is not None:
                return httpx.Response(status, text=text)
            return httpx.Response(status, json=payload)

        transport = httpx.MockTransport(handler)
        transport.requests = seen
        return transport

    return factory
