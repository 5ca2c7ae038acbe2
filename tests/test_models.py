from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from parley.models import Assistant, File, Json, Medium, Message, MessageList, Role, Text, Thread


def _message(*content):
    return Message(id="msg_1", created_at=datetime(2026, 1, 26, tzinfo=timezone.utc), role=Role.USER, content=content)


def test_message_is_immutable():
    message = _message(Text("hi"))

    with pytest.raises(FrozenInstanceError):
        message.id = "other"


def test_message_text_skips_files():
    message = _message(Text("a"), File("file_1", Medium.IMAGE), Json('{"b": 1}'))
    assert message.text == 'a\n{"b": 1}'


def test_content_tags():
    assert Text("x").type == "text"
    assert Json("{}").type == "json"
    assert File("f", Medium.IMAGE).type == "file"


def test_json_data():
    assert Json('[1, 2]').data == [1, 2]


def test_message_list_defaults():
    messages = MessageList()

    assert len(messages) == 0
    assert messages.has_more is False
    assert messages.last_id is None


def test_message_list_keeps_insertion_order():
    messages = MessageList()
    first, second = _message(Text("1")), _message(Text("2"))
    messages.add(first)
    messages.add(second)

    assert list(messages) == [first, second]


def test_thread_is_started():
    assert not Thread(action="a").is_started
    assert not Thread(action="a", service_id="thread_1").is_started
    assert Thread(action="a", service_id="thread_1", run_id="run_1").is_started


def test_assistant_defaults():
    assistant = Assistant(action="summarize")

    assert assistant.medium is Medium.TEXT
    assert assistant.service_id is None
    assert assistant.language_model_name is None
