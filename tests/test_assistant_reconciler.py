from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from parley.adapters.openai_assistants import OpenAIPlatform
from parley.config import PlatformConfig
from parley.errors import RemoteNotFoundError
from parley.models import Assistant, LanguageModelLevel, Medium


def _page(*resources):
    return {"data": list(resources), "has_more": False}


def test_find_lists_with_configured_limit(platform, transport):
    transport.list_assistants.return_value = _page()

    platform.find_assistant(Assistant(action="summarize"))

    transport.list_assistants.assert_called_once_with(limit=50)


def test_find_no_match_leaves_assistant_untouched(platform, transport, make_assistant_resource):
    transport.list_assistants.return_value = _page(
        make_assistant_resource(action="translate"),
        make_assistant_resource(action="summarize", model="gpt-4o"),
    )
    assistant = Assistant(action="summarize", name="Local")

    assert platform.find_assistant(assistant) is False
    assert assistant == Assistant(action="summarize", name="Local")


def test_find_matches_action_and_fallback_model(platform, transport, make_assistant_resource):
    transport.list_assistants.return_value = _page(make_assistant_resource(id="asst_42"))
    assistant = Assistant(action="summarize")

    assert platform.find_assistant(assistant) is True
    assert assistant.service_id == "asst_42"
    assert assistant.name == "Summarizer"
    assert assistant.instructions == "Summarize things"
    assert assistant.description == "Summaries"
    assert assistant.created_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


def test_find_uses_metadata_model_over_bound_model(platform, transport, make_assistant_resource):
    transport.list_assistants.return_value = _page(
        make_assistant_resource(id="asst_1", model="gpt-4o-2024-08-06", metadata_model="gpt-4o-mini"),
    )
    assistant = Assistant(action="summarize", language_model_name="gpt-4o-mini")

    assert platform.find_assistant(assistant) is True
    assert assistant.service_id == "asst_1"


def test_find_model_variants_coexist(platform, transport, make_assistant_resource):
    """Same action on different models are different assistants."""
    transport.list_assistants.return_value = _page(
        make_assistant_resource(id="asst_mini", model="gpt-4o-mini"),
        make_assistant_resource(id="asst_top", model="gpt-4o"),
    )
    assistant = Assistant(action="summarize", language_model_name="gpt-4o")

    assert platform.find_assistant(assistant) is True
    assert assistant.service_id == "asst_top"


def test_find_first_match_wins_in_listed_order(platform, transport, make_assistant_resource):
    transport.list_assistants.return_value = _page(
        make_assistant_resource(id="asst_newer", created_at=1700000500),
        make_assistant_resource(id="asst_older", created_at=1700000000),
    )
    assistant = Assistant(action="summarize")

    platform.find_assistant(assistant)

    assert assistant.service_id == "asst_newer"


def test_find_keeps_local_values_when_remote_null(platform, transport, make_assistant_resource):
    transport.list_assistants.return_value = _page(
        make_assistant_resource(name=None, instructions=None, description=None)
    )
    assistant = Assistant(action="summarize", name="Local", instructions="Local rules", description="Local desc")

    platform.find_assistant(assistant)

    assert assistant.name == "Local"
    assert assistant.instructions == "Local rules"
    # description is always copied, even when null
    assert assistant.description is None


def test_find_respects_configured_fallback(transport, make_assistant_resource):
    transport.list_assistants.return_value = _page(make_assistant_resource(model="gpt-4o-mini"))
    platform = OpenAIPlatform(
        transport, config=PlatformConfig(fallback_model="gpt-4o-mini", assistant_list_limit=10)
    )

    assert platform.find_assistant(Assistant(action="summarize")) is True
    transport.list_assistants.assert_called_once_with(limit=10)


def test_create_assistant(platform, transport, now):
    transport.create_assistant.return_value = {"id": "asst_new", "model": "gpt-3.5-turbo"}
    assistant = Assistant(action="summarize", name="Summarizer", instructions="Be brief")

    platform.create_assistant(assistant)

    transport.create_assistant.assert_called_once_with(
        name="Summarizer",
        instructions="Be brief",
        description=None,
        model="gpt-3.5-turbo",
        response_format="auto",
        metadata={"action": "summarize", "model": "gpt-3.5-turbo"},
    )
    assert assistant.service_id == "asst_new"
    assert assistant.created_at == now
    assert assistant.updated_at == now


def test_create_json_assistant_uses_json_response_format(platform, transport):
    transport.create_assistant.return_value = {"id": "asst_json", "model": "gpt-4o"}
    assistant = Assistant(action="extract", medium=Medium.JSON, language_model_name="gpt-4o")

    platform.create_assistant(assistant)

    kwargs = transport.create_assistant.call_args.kwargs
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["metadata"] == {"action": "extract", "model": "gpt-4o"}


def test_update_requires_service_id(platform, transport):
    assert platform.update_assistant(Assistant(action="summarize")) is False
    assert transport.method_calls == []


def test_update_reads_model_back(platform, transport, now):
    transport.modify_assistant.return_value = {"id": "asst_1", "model": "gpt-4o-2024-08-06"}
    assistant = Assistant(action="summarize", name="S", service_id="asst_1", language_model_name="gpt-4o")

    assert platform.update_assistant(assistant) is True

    transport.modify_assistant.assert_called_once_with(
        "asst_1",
        name="S",
        instructions=None,
        description="",
        model="gpt-4o",
        metadata={"action": "summarize", "model": "gpt-4o"},
    )
    assert assistant.language_model_name == "gpt-4o-2024-08-06"
    assert assistant.updated_at == now


def test_delete_requires_service_id(platform, transport):
    assert platform.delete_assistant(Assistant(action="summarize")) is False
    assert transport.method_calls == []


def test_delete_returns_remote_flag(platform, transport):
    transport.delete_assistant.return_value = {"id": "asst_1", "deleted": True, "object": "assistant.deleted"}

    assert platform.delete_assistant(Assistant(action="a", service_id="asst_1")) is True
    transport.delete_assistant.assert_called_once_with("asst_1")


def test_delete_not_found_is_success(platform, transport):
    transport.delete_assistant.side_effect = RemoteNotFoundError("No assistant found with id 'asst_1'.")

    assert platform.delete_assistant(Assistant(action="a", service_id="asst_1")) is True


def test_delete_other_errors_propagate(platform, transport):
    transport.delete_assistant.side_effect = RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        platform.delete_assistant(Assistant(action="a", service_id="asst_1"))


def test_reconcile_creates_when_missing(platform, transport):
    transport.list_assistants.return_value = _page()
    transport.create_assistant.return_value = {"id": "asst_new", "model": "gpt-3.5-turbo"}
    assistant = Assistant(action="summarize")

    assert platform.reconcile_assistant(assistant) is True
    assert assistant.service_id == "asst_new"
    transport.modify_assistant.assert_not_called()


def test_reconcile_migrates_old_model(platform, transport, make_assistant_resource):
    transport.list_assistants.return_value = _page(make_assistant_resource(id="asst_old"))
    transport.modify_assistant.return_value = {"id": "asst_old", "model": "gpt-4o-mini"}
    assistant = Assistant(action="summarize")

    assert platform.reconcile_assistant(assistant) is True

    assert transport.modify_assistant.call_args.kwargs["model"] == "gpt-4o-mini"
    assert assistant.language_model_name == "gpt-4o-mini"


def test_reconcile_keeps_top_tier(platform, transport, make_assistant_resource):
    transport.list_assistants.return_value = _page(make_assistant_resource(model="gpt-4o"))
    assistant = Assistant(action="summarize", language_model_name="gpt-4o")

    assert platform.reconcile_assistant(assistant, LanguageModelLevel.BASIC) is False
    transport.modify_assistant.assert_not_called()


def test_reconcile_never_moves_image_assistant_to_image_model(platform, transport, make_assistant_resource):
    transport.list_assistants.return_value = _page(make_assistant_resource(id="asst_img"))
    assistant = Assistant(action="summarize", medium=Medium.IMAGE)

    assert platform.reconcile_assistant(assistant, LanguageModelLevel.ADVANCED) is False

    assert assistant.service_id == "asst_img"
    assert assistant.language_model_name is None
    transport.modify_assistant.assert_not_called()


def test_reconcile_uses_injected_policy(transport, make_assistant_resource):
    transport.list_assistants.return_value = _page(make_assistant_resource())
    policy = Mock(return_value=False)
    platform = OpenAIPlatform(transport, model_policy=policy)

    assert platform.reconcile_assistant(Assistant(action="summarize")) is False
    policy.assert_called_once()
    transport.modify_assistant.assert_not_called()
