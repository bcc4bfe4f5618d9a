from __future__ import annotations

import json

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from backend.sentiment.core.config import Settings
from backend.sentiment.engine.llm import ScoreClient
from backend.sentiment.models import Base

LLM_URL = "http://llm.test/generate"
TEMPLATE = "Rate sentiment toward {keyword}: {text}"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        db={"url": "sqlite://"},
        llm={"url": LLM_URL, "timeout_s": 5.0},
        prompt=TEMPLATE,
    )


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


class RecordingLLM:
    """Fake scoring endpoint: replies with `reply(prompt)` and records prompts."""

    def __init__(self, reply):
        self.reply = reply
        self.prompts: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        prompt = json.loads(request.content)["prompt"]
        self.prompts.append(prompt)
        result = self.reply(prompt)
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, text=result)


@pytest.fixture
def make_client(settings):
    clients: list[ScoreClient] = []

    def _make(reply) -> tuple[ScoreClient, RecordingLLM]:
        llm = RecordingLLM(reply)
        client = ScoreClient(settings.llm, settings.prompt, transport=httpx.MockTransport(llm))
        clients.append(client)
        return client, llm

    yield _make
    for c in clients:
        c.close()
