"""
Shared pytest fixtures for the quiz generator test suite.
The upstream Gemini service is replaced with httpx.MockTransport; no network.
"""

import os
import sys
import json
import tempfile

import httpx
import pytest

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Keep test logs out of the working tree
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "ai_quiz_tests", "app.log"))

from agents.quiz_agent import QuizAgent
from clients.gemini_client import GeminiClient
from utils.config import Settings


TEST_API_URL = "https://gemini.test/v1beta/models/test-model:generateContent"


def _envelope(text: str) -> dict:
    return {
        "candidates": [{"content": {"parts": [{"text": text}], "role": "model"}, "finishReason": "STOP"}],
        "usageMetadata": {"totalTokenCount": 42},
    }


class RecordingHandler:
    """MockTransport handler that records every outbound request."""

    def __init__(self, respond):
        self.respond = respond
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.respond(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        gemini_api_key="test-key",
        gemini_api_url=TEST_API_URL,
        gemini_timeout_seconds=5,
        log_file=str(tmp_path / "app.log"),
    )


@pytest.fixture
def gemini_reply():
    """Return a responder that answers with the given model text."""
    def _reply(text: str, status_code: int = 200):
        return lambda request: httpx.Response(status_code, json=_envelope(text))
    return _reply


@pytest.fixture
def questions_reply(gemini_reply):
    """Return a responder whose model text is the JSON encoding of `questions`."""
    def _reply(questions):
        return gemini_reply(json.dumps(questions))
    return _reply


@pytest.fixture
def make_agent(settings):
    """Build a QuizAgent whose upstream replies come from `respond(request)`."""
    def _make(respond):
        handler = RecordingHandler(respond)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        agent = QuizAgent(settings, client=GeminiClient(settings, http_client=http_client))
        return agent, handler
    return _make


@pytest.fixture
def sample_question():
    return {"question": "Q1", "options": ["A", "B", "C", "D"], "correctAnswer": "B"}
