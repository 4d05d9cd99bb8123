"""Shared fixtures: a mocked HttpClient and siteverify reply builders."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from schemas.models.guard_config import GuardConfig


def siteverify_reply(status_code: int = 200, body=None, text: str = "") -> MagicMock:
    """Build a fake httpx.Response for the siteverify endpoint.

    ``body=None`` makes ``.json()`` raise, like a non-JSON payload.
    """
    resp = MagicMock(status_code=status_code, text=text)
    if body is None:
        resp.json.side_effect = ValueError("Expecting value")
    else:
        resp.json.return_value = body
    return resp


@pytest.fixture
def http():
    """Mock HttpClient whose post() answers {"success": true} by default."""
    client = MagicMock()
    client.post = AsyncMock(return_value=siteverify_reply(body={"success": True}))
    return client


@pytest.fixture
def config():
    return GuardConfig(site_key="site", secret_key="s")


@pytest.fixture
def reply():
    """The siteverify_reply builder, for tests that need a specific reply."""
    return siteverify_reply
