# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/
"""

import gzip
import json
import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest
from hypothesis import Phase, Verbosity, settings

from socvfinder.store import UserStore, users_table

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Helpers
# =============================================================================


def gzip_json_response(
    payload: Any, status_code: int = 200, *, compress: bool = True
) -> httpx.Response:
    """Build an API-style response: gzip-compressed UTF-8 JSON."""
    body = json.dumps(payload).encode("utf-8")
    headers = {"Content-Type": "application/json; charset=utf-8"}
    if compress:
        body = gzip.compress(body)
        headers["Content-Encoding"] = "gzip"
    return raw_response(status_code, body, headers)


def raw_response(
    status_code: int, body: bytes, headers: dict[str, str] | None = None
) -> httpx.Response:
    """Build a response whose body is left undecoded, as on the wire.

    Passing ``stream`` (not ``content``) keeps httpx from reading and
    decoding the body up front, so the fetcher sees the raw bytes.
    """
    return httpx.Response(status_code, headers=headers, stream=httpx.ByteStream(body))


def insert_users(store: UserStore, rows: list[dict[str, Any]]) -> None:
    """Write rows to the users table, standing in for the user DAO."""
    with store.connection() as conn:
        conn.execute(users_table.insert(), rows)


def delete_user(store: UserStore, user_id: int) -> None:
    with store.connection() as conn:
        conn.execute(users_table.delete().where(users_table.c.user_id == user_id))


class RecordingNotifier:
    """Notifier that keeps every message."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def message(self, text: str) -> None:
        self.messages.append(text)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def store_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'users.db'}"


@pytest.fixture
def store(store_url: str) -> Iterator[UserStore]:
    with UserStore(store_url, create_tables=True) as s:
        yield s


@pytest.fixture
def json_transport() -> Callable[..., httpx.MockTransport]:
    """Factory for a MockTransport answering every request with ``payload``.

    Requests are recorded on ``transport.requests``.
    """

    def factory(payload: Any = None, status_code: int = 200) -> httpx.MockTransport:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return gzip_json_response(
                {"items": [], "has_more": False, "quota_remaining": 299}
                if payload is None
                else payload,
                status_code,
            )

        transport = httpx.MockTransport(handler)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return factory


@pytest.fixture
def api_response() -> Callable[..., httpx.Response]:
    """The ``gzip_json_response`` builder, for tests with custom handlers."""
    return gzip_json_response


@pytest.fixture
def wire_response() -> Callable[..., httpx.Response]:
    """The ``raw_response`` builder, for bodies that are not API JSON."""
    return raw_response


@pytest.fixture
def add_users(store: UserStore) -> Callable[[list[dict[str, Any]]], None]:
    return lambda rows: insert_users(store, rows)


@pytest.fixture
def remove_user(store: UserStore) -> Callable[[int], None]:
    return lambda user_id: delete_user(store, user_id)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()

