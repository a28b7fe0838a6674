"""Shared fixtures for Q&A integration tests: an app wired to a fake moderation provider."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import httpx
import pytest
from starlette.testclient import TestClient

from qna.server.app import create_app
from qna.server.settings import QnaServerSettings
from shared.auth.settings import AuthSettings
from shared.moderation.settings import ModerationSettings

if TYPE_CHECKING:
    from collections.abc import Callable

PASSWORD = "securepass123"


class FakeModerationProvider:
    """Mask listed words the way the bad-words provider does.

    Set ``fail_status`` to answer every request with that status instead.
    """

    def __init__(self, bad_words: tuple[str, ...] = ("shitty",)) -> None:
        self._pattern = re.compile("|".join(re.escape(w) for w in bad_words), re.IGNORECASE)
        self.fail_status: int | None = None
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_status is not None:
            return httpx.Response(self.fail_status, json={"message": "provider exploded: internal detail"})

        content = request.content.decode("utf-8")
        mask = request.url.params.get("censor_character", "*")
        matches = list(self._pattern.finditer(content))
        return httpx.Response(
            200,
            json={
                "content": content,
                "bad_words_total": len(matches),
                "bad_words_list": [
                    {
                        "original": m.group(),
                        "word": m.group().lower(),
                        "deviations": 0,
                        "info": 2,
                        "start": m.start(),
                        "end": m.end(),
                        "replacedLen": len(m.group()),
                    }
                    for m in matches
                ],
                "censored_content": self._pattern.sub(lambda m: mask * len(m.group()), content),
            },
        )


async def _no_sleep(_delay: float) -> None:
    return None


@pytest.fixture
def moderation() -> FakeModerationProvider:
    return FakeModerationProvider()


@pytest.fixture
def app(tmp_path, moderation):
    app = create_app(
        settings=QnaServerSettings(),
        auth_settings=AuthSettings(database_path=str(tmp_path / "qna.db"), password_hasher="simple"),
        moderation_settings=ModerationSettings(api_key="test-key", base_url="https://moderation.test/bad_words"),
        moderation_transport=httpx.MockTransport(moderation),
        moderation_sleep=_no_sleep,
    )
    yield app
    app.state.db.close()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login_as(client) -> Callable[[str], dict[str, str]]:
    """Register (if needed) and log in an account; return its Authorization header."""

    def _login_as(email: str) -> dict[str, str]:
        client.post("/registration", json={"email": email, "password": PASSWORD})
        response = client.post("/login", json={"email": email, "password": PASSWORD})
        assert response.status_code == 200
        return {"Authorization": response.json()}

    return _login_as
