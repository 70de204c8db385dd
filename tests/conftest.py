import json
from types import SimpleNamespace

import pytest

from part_finder.app import create_app
from part_finder.services.ai_service import AIService


SAMPLE_PART = {
    "part_number": "1756-IB16",
    "brand": "Allen-Bradley",
    "description": "16pt input module",
    "specs": ["24VDC"],
    "application": "PLC I/O",
    "stock": "In Stock",
    "alternatives": [],
}


def completion(content):
    """Chat-completion envelope shaped like the OpenAI SDK response"""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(role="assistant", content=content))]
    )


class FakeCompletions:
    def __init__(self):
        self.calls = []
        self.content = json.dumps(SAMPLE_PART)
        self.error = None
        self.response = None

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        return completion(self.content)


class FakeClient:
    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.delenv("JSON_EXTRACTION_STRATEGY", raising=False)
    return "sk-test"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def ai_service(fake_client):
    return AIService(client=fake_client)


@pytest.fixture
def app(ai_service):
    app = create_app(ai_service=ai_service, search_log_enabled=False, configure_logging=False)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
