import json

import httpx
import pytest
from fastapi.testclient import TestClient

from proscons.core.settings import Settings, get_settings
from proscons.main import app
from proscons.routes.analyze import get_agent
from proscons.services.agent import ProsConsAgent

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
MISTRAL_URL = "https://api.mistral.ai/v1/chat/completions"


def make_settings(**overrides) -> Settings:
    base = {
        "OPENROUTER_API_KEY": "or-key",
        "MISTRAL_API_KEY": "mi-key",
        "llm_stream": False,
        "llm_models": [
            {"provider": "openrouter", "model": "or-model"},
            {"provider": "mistral", "model": "mi-model"},
        ],
    }
    base.update(overrides)
    return Settings(**base)


def sse_event(content: str) -> str:
    return "data: " + json.dumps({"choices": [{"delta": {"content": content}}]}) + "\n\n"


def sse_body(*deltas: str) -> bytes:
    return ("".join(sse_event(d) for d in deltas) + "data: [DONE]\n\n").encode("utf-8")


def completion_body(content: str) -> dict:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


class ChunkedStream(httpx.AsyncByteStream):
    def __init__(self, chunks, fail_with=None):
        self.chunks = chunks
        self.fail_with = fail_with
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.fail_with is not None:
            raise self.fail_with

    async def aclose(self):
        self.closed = True


class Upstream:
    """Fake provider side: answers per URL and records every outbound request."""

    def __init__(self):
        self.calls: list[httpx.Request] = []
        self.routes = {}

    def on(self, url, responder):
        self.routes[url] = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return self.routes[str(request.url)](request)

    @property
    def urls(self) -> list[str]:
        return [str(r.url) for r in self.calls]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def upstream():
    return Upstream()


@pytest.fixture
def make_client(upstream):
    def _make(**overrides) -> TestClient:
        settings = make_settings(**overrides)
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_agent] = lambda: ProsConsAgent(settings, transport=upstream.transport)
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
