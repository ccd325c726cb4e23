# tests/conftest.py
"""
Pytest configuration and shared fakes.
Adds the project root to sys.path so `import strategist` works without install.
"""

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


class FakeHTTPResponse:
    """Minimal stand-in for `requests.Response`."""

    def __init__(self, status_code=200, body=None, reason="OK"):
        self.status_code = status_code
        self.reason = reason
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class RecordingPost:
    """Replacement for `requests.post` that records each call."""

    def __init__(self, response=None, exc=None):
        self.response = response if response is not None else FakeHTTPResponse()
        self.exc = exc
        self.calls = []

    def __call__(self, url, headers=None, json=None, **kwargs):
        self.calls.append({"url": url, "headers": headers, "json": json, "kwargs": kwargs})
        if self.exc is not None:
            raise self.exc
        return self.response


class FakeGeminiModels:
    def __init__(self, text="Gemini report", exc=None):
        self.text = text
        self.exc = exc
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc is not None:
            raise self.exc
        return SimpleNamespace(text=self.text)


class FakeGeminiFactory:
    """Callable `api_key -> client` recording the keys it was given."""

    def __init__(self, text="Gemini report", exc=None):
        self.models = FakeGeminiModels(text=text, exc=exc)
        self.api_keys = []

    def __call__(self, api_key):
        self.api_keys.append(api_key)
        return SimpleNamespace(models=self.models)


@pytest.fixture
def fake_post(monkeypatch):
    """Patch `requests.post` in the transport module and return the recorder."""

    def _install(response=None, exc=None):
        recorder = RecordingPost(response=response, exc=exc)
        monkeypatch.setattr("strategist.llm.client.requests.post", recorder)
        return recorder

    return _install


@pytest.fixture
def http_response():
    """Factory for fake HTTP responses."""
    return FakeHTTPResponse


@pytest.fixture
def gemini_factory():
    """Factory for fake Gemini client factories."""
    return FakeGeminiFactory
