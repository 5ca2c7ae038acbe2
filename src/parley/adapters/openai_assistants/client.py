# src/parley/adapters/openai_assistants/client.py
from __future__ import annotations

import logging
from typing import Any, Callable, Protocol

import openai
from openai import OpenAI

from ...config import PlatformConfig
from ...errors import ConfigError, RemoteNotFoundError
from ...metrics import REMOTE_CALLS

log = logging.getLogger(__name__)

Payload = dict[str, Any]


class Transport(Protocol):
    """Remote calls the platform needs. Every method returns a plain dict."""

    def list_assistants(self, limit: int) -> Payload: ...

    def create_assistant(self, **fields: Any) -> Payload: ...

    def modify_assistant(self, assistant_id: str, **fields: Any) -> Payload: ...

    def delete_assistant(self, assistant_id: str) -> Payload: ...

    def create_thread_and_run(self, **fields: Any) -> Payload: ...

    def delete_thread(self, thread_id: str) -> Payload: ...

    def retrieve_run(self, thread_id: str, run_id: str) -> Payload: ...

    def create_run(self, thread_id: str, **fields: Any) -> Payload: ...

    def cancel_run(self, thread_id: str, run_id: str) -> Payload: ...

    def list_messages(self, thread_id: str, **params: Any) -> Payload: ...

    def create_message(self, thread_id: str, **fields: Any) -> Payload: ...


def _compact(fields: dict[str, Any]) -> dict[str, Any]:
    # The SDK treats an explicit None as "send null"; omit instead
    return {k: v for k, v in fields.items() if v is not None}


def _page_to_payload(page: Any) -> Payload:
    data = [item.model_dump() for item in page.data]
    return {
        "data": data,
        "has_more": bool(getattr(page, "has_more", False)),
        "first_id": data[0]["id"] if data else None,
        "last_id": data[-1]["id"] if data else None,
    }


class OpenAITransport:
    """Thin wrapper over the OpenAI SDK assistants (beta) endpoints.

    Retries, auth and timeouts belong to the SDK client. This class only
    converts SDK objects to dicts and turns 404s into RemoteNotFoundError.
    """

    def __init__(self, client: OpenAI) -> None:
        self.client = client

    @classmethod
    def from_config(cls, config: PlatformConfig) -> OpenAITransport:
        if not config.api_key:
            raise ConfigError("OpenAI API key required. Set OPENAI_API_KEY environment variable.")
        client = OpenAI(
            api_key=config.api_key,
            organization=config.organization,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )
        return cls(client)

    def _call(self, operation: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        log.debug(f"OpenAI {operation}")
        try:
            result = fn(*args, **kwargs)
        except openai.NotFoundError as exc:
            REMOTE_CALLS.labels(operation=operation, outcome="not_found").inc()
            raise RemoteNotFoundError(str(exc), resource=operation) from exc
        except openai.OpenAIError:
            REMOTE_CALLS.labels(operation=operation, outcome="error").inc()
            raise
        REMOTE_CALLS.labels(operation=operation, outcome="ok").inc()
        return result

    def list_assistants(self, limit: int) -> Payload:
        page = self._call("assistants.list", self.client.beta.assistants.list, limit=limit)
        return _page_to_payload(page)

    def create_assistant(self, **fields: Any) -> Payload:
        result = self._call("assistants.create", self.client.beta.assistants.create, **_compact(fields))
        return result.model_dump()

    def modify_assistant(self, assistant_id: str, **fields: Any) -> Payload:
        result = self._call(
            "assistants.update", self.client.beta.assistants.update, assistant_id, **_compact(fields)
        )
        return result.model_dump()

    def delete_assistant(self, assistant_id: str) -> Payload:
        result = self._call("assistants.delete", self.client.beta.assistants.delete, assistant_id)
        return result.model_dump()

    def create_thread_and_run(self, **fields: Any) -> Payload:
        fields = _compact(fields)
        # Not a named SDK parameter on this endpoint, send it raw
        additional_instructions = fields.pop("additional_instructions", None)
        if additional_instructions is not None:
            fields["extra_body"] = {"additional_instructions": additional_instructions}
        result = self._call("threads.create_and_run", self.client.beta.threads.create_and_run, **fields)
        return result.model_dump()

    def delete_thread(self, thread_id: str) -> Payload:
        result = self._call("threads.delete", self.client.beta.threads.delete, thread_id)
        return result.model_dump()

    def retrieve_run(self, thread_id: str, run_id: str) -> Payload:
        result = self._call(
            "runs.retrieve", self.client.beta.threads.runs.retrieve, run_id, thread_id=thread_id
        )
        return result.model_dump()

    def create_run(self, thread_id: str, **fields: Any) -> Payload:
        result = self._call(
            "runs.create", self.client.beta.threads.runs.create, thread_id=thread_id, **_compact(fields)
        )
        return result.model_dump()

    def cancel_run(self, thread_id: str, run_id: str) -> Payload:
        result = self._call(
            "runs.cancel", self.client.beta.threads.runs.cancel, run_id, thread_id=thread_id
        )
        return result.model_dump()

    def list_messages(self, thread_id: str, **params: Any) -> Payload:
        page = self._call(
            "messages.list", self.client.beta.threads.messages.list, thread_id, **_compact(params)
        )
        return _page_to_payload(page)

    def create_message(self, thread_id: str, **fields: Any) -> Payload:
        result = self._call(
            "messages.create", self.client.beta.threads.messages.create, thread_id, **_compact(fields)
        )
        return result.model_dump()
