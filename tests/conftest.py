"""Shared fixtures for the feedback pipeline tests."""

import json

import pytest
from langchain_core.messages import AIMessage

from feedback_insights.services.categorizer_client import ExternalCategorizerClient
from feedback_insights.services.rate_limiter import RateLimiter


class ScriptedChatModel:
    """Chat model stand-in that replays scripted replies and records calls.

    A scripted Exception is raised instead of returned.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if not self.responses:
            raise RuntimeError("No scripted response left")
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return AIMessage(content=response)


def single_reply(category="bug_report", confidence=0.9, reasoning="Test reasoning"):
    return json.dumps({"category": category, "confidence": confidence, "reasoning": reasoning})


def batch_reply(count, category="bug_report", confidence=0.9):
    return json.dumps([
        {"index": i, "category": category, "confidence": confidence, "reasoning": f"item {i}"}
        for i in range(1, count + 1)
    ])


@pytest.fixture
def rate_limiter():
    """Create an isolated limiter with plenty of headroom."""
    return RateLimiter(max_requests=100, window_seconds=60)


@pytest.fixture
def make_client(rate_limiter):
    """Build a categorizer client around scripted replies."""

    def _make(*responses, limiter=None, timeout_seconds=5.0):
        llm = ScriptedChatModel(responses)
        client = ExternalCategorizerClient(
            llm=llm,
            rate_limiter=limiter or rate_limiter,
            model="test-model",
            timeout_seconds=timeout_seconds,
        )
        return client, llm

    return _make
