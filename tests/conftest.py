"""Shared fixtures for the Phrase sync tests."""
from contextlib import asynccontextmanager
import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from phrase_sync.config import SyncConfig
from phrase_sync.models import Project


class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse."""

    def __init__(self, status: int, body: Any = "") -> None:
        self.status = status
        self._body = body if isinstance(body, str) else json.dumps(body)

    async def text(self) -> str:
        return self._body

    async def json(self, content_type: str | None = "application/json") -> Any:
        return json.loads(self._body)


class FakeSession:
    """Replays queued responses and records every request."""

    def __init__(self, *responses: FakeResponse | Exception) -> None:
        self.responses = list(responses)
        self.calls: list[SimpleNamespace] = []

    @asynccontextmanager
    async def request(self, method: str, url: str, **kwargs: Any):
        self.calls.append(SimpleNamespace(method=method, url=url, kwargs=kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        yield response


@pytest.fixture
def locale_payload() -> dict[str, Any]:
    return {
        "id": "loc-en",
        "name": "en",
        "code": "en-US",
        "default": True,
        "main": False,
        "rtl": False,
        "plural_forms": ["zero", "one", "other"],
        "source_locale": {"id": "loc-src", "name": "source", "code": "en"},
        "created_at": "2024-01-02T03:04:05Z",
        "updated_at": "2024-02-03T04:05:06Z",
    }


@pytest.fixture
def project(tmp_path: Path) -> Project:
    locale_path = tmp_path / "i18n"
    locale_path.mkdir()
    return Project(
        name="web",
        project_id="P1",
        locale_path=locale_path,
        default_locale="en",
    )


@pytest.fixture
def make_config(tmp_path: Path, project: Project):
    def _make_config(**overrides: Any) -> SyncConfig:
        settings = {
            "phrase_token": "phrase-token",
            "sync_direction": "push",
            "projects": (project,),
            "repo_path": tmp_path,
            "poll_interval": 1,
            "poll_attempts": 2,
        }
        settings.update(overrides)
        return SyncConfig(**settings)

    return _make_config
