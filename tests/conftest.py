"""Shared fixtures for the parley test suite.

The platform is always built over a Mock transport so tests exercise the
core against plain dict payloads, the same shape OpenAITransport returns.
"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from parley.adapters.openai_assistants import OpenAIPlatform
from parley.config import PlatformConfig

FIXED_NOW = datetime(2026, 1, 26, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def transport():
    return Mock()


@pytest.fixture
def platform(transport):
    return OpenAIPlatform(transport, config=PlatformConfig(), clock=lambda: FIXED_NOW)


@pytest.fixture
def make_assistant_resource():
    def _make(
        id="asst_1",
        action="summarize",
        model="gpt-3.5-turbo",
        metadata_model=None,
        name="Summarizer",
        instructions="Summarize things",
        description="Summaries",
        created_at=1700000000,
    ):
        metadata = {"action": action}
        if metadata_model is not None:
            metadata["model"] = metadata_model
        return {
            "id": id,
            "object": "assistant",
            "model": model,
            "name": name,
            "instructions": instructions,
            "description": description,
            "metadata": metadata,
            "created_at": created_at,
            "tools": [],
        }
    return _make


@pytest.fixture
def make_run():
    def _make(
        id="run_1",
        thread_id="thread_1",
        status="queued",
        started_at=None,
        completed_at=None,
        expires_at=1700000600,
    ):
        return {
            "id": id,
            "object": "thread.run",
            "thread_id": thread_id,
            "assistant_id": "asst_1",
            "status": status,
            "started_at": started_at,
            "completed_at": completed_at,
            "expires_at": expires_at,
            "created_at": 1700000000,
        }
    return _make


@pytest.fixture
def make_message():
    def _make(id="msg_1", role="assistant", text="hello", created_at=1700000100, content=None):
        if content is None:
            content = [{"type": "text", "text": {"value": text, "annotations": []}}]
        return {
            "id": id,
            "object": "thread.message",
            "created_at": created_at,
            "thread_id": "thread_1",
            "role": role,
            "content": content,
        }
    return _make
