# src/parley/adapters/openai_assistants/platform.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable

from ... import capabilities
from ...capabilities import ModelUpdatePolicy
from ...config import PlatformConfig
from ...errors import AssistantNotBoundError, RemoteNotFoundError, ThreadNotStartedError
from ...models import (
    Assistant,
    Feature,
    LanguageModelLevel,
    Medium,
    Message,
    MessageList,
    Thread,
)
from ...status import normalize_status
from .client import OpenAITransport, Transport
from .schemas import AssistantPage, AssistantResource, DeletionStatus, MessagePage, MessageResource, RunResource
from .translate import create_message, from_timestamp

log = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OpenAIPlatform:
    """Platform backed by the OpenAI assistants API.

    Holds no reference to the entities it is given: every call reads and
    mutates the passed Assistant/Thread and returns. Callers serialize
    concurrent work on the same entity.
    """

    NAME = "OpenAi"

    def __init__(
        self,
        transport: Transport,
        *,
        config: PlatformConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        model_policy: ModelUpdatePolicy | None = None,
    ) -> None:
        self.transport = transport
        self.config = config or PlatformConfig()
        self.clock = clock or _utc_now
        self.model_policy = model_policy or capabilities.default_model_policy

    @classmethod
    def from_config(cls, config: PlatformConfig, **kwargs) -> OpenAIPlatform:
        return cls(OpenAITransport.from_config(config), config=config, **kwargs)

    # Capabilities

    def get_name(self) -> str:
        return self.NAME

    def supports_medium(self, medium: Medium) -> bool:
        return capabilities.supports_medium(medium)

    def supports_feature(self, medium: Medium, feature: Feature) -> bool:
        return capabilities.supports_feature(medium, feature)

    def suggest_model(
        self,
        medium: Medium,
        level: LanguageModelLevel = LanguageModelLevel.STANDARD,
        features: Iterable[Feature] = (),
    ) -> str:
        return capabilities.suggest_model(medium, level, features)

    def should_update_model(
        self,
        old_model: str,
        new_model: str,
        medium: Medium,
        level: LanguageModelLevel = LanguageModelLevel.STANDARD,
        features: Iterable[Feature] = (),
    ) -> bool:
        return capabilities.should_update_model(
            old_model, new_model, medium, level, features, policy=self.model_policy
        )

    # Assistants

    def target_model(self, assistant: Assistant) -> str:
        return assistant.language_model_name or self.config.fallback_model

    def find_assistant(self, assistant: Assistant) -> bool:
        """Bind `assistant` to the first remote resource with the same action and model.

        Remote resources are scanned in the order the service lists them and
        the first match wins. Returns False, leaving the assistant untouched,
        when nothing matches; that means "go ahead and create".
        """
        page = AssistantPage.model_validate(
            self.transport.list_assistants(limit=self.config.assistant_list_limit)
        )
        model = self.target_model(assistant)

        for resource in page.data:
            if resource.action != assistant.action or resource.effective_model != model:
                continue

            self._bind_assistant(assistant, resource)
            log.debug(f"Matched assistant '{assistant.action}' ({model}) to {resource.id}")
            return True

        return False

    def _bind_assistant(self, assistant: Assistant, resource: AssistantResource) -> None:
        # Never replace local values with a remote null
        if resource.name is not None:
            assistant.name = resource.name
        if resource.instructions is not None:
            assistant.instructions = resource.instructions

        assistant.service_id = resource.id
        assistant.description = resource.description
        assistant.created_at = from_timestamp(resource.created_at)

    def create_assistant(self, assistant: Assistant) -> None:
        """Create the remote resource. Not idempotent: call find_assistant first."""
        model = self.target_model(assistant)
        response = self.transport.create_assistant(
            name=assistant.name,
            instructions=assistant.instructions,
            description=assistant.description,
            model=model,
            response_format=self._response_format(assistant.medium),
            metadata={"action": assistant.action, "model": model},
        )

        now = self.clock()
        assistant.service_id = response["id"]
        assistant.created_at = now
        assistant.updated_at = now
        log.info(f"Created assistant '{assistant.action}' ({model}) as {assistant.service_id}")

    def update_assistant(self, assistant: Assistant) -> bool:
        if assistant.service_id is None:
            return False

        model = self.target_model(assistant)
        response = self.transport.modify_assistant(
            assistant.service_id,
            name=assistant.name,
            instructions=assistant.instructions,
            description=assistant.description or "",
            model=model,
            metadata={"action": assistant.action, "model": model},
        )

        # The service may alias model ids; keep what it actually bound
        assistant.language_model_name = response["model"]
        assistant.updated_at = self.clock()
        log.info(f"Updated assistant {assistant.service_id} ({assistant.language_model_name})")
        return True

    def delete_assistant(self, assistant: Assistant) -> bool:
        if assistant.service_id is None:
            return False

        try:
            response = self.transport.delete_assistant(assistant.service_id)
        except RemoteNotFoundError:
            log.warning(f"Assistant {assistant.service_id} already gone, treating as deleted")
            return True

        deleted = DeletionStatus.model_validate(response).deleted
        log.info(f"Deleted assistant {assistant.service_id}: {deleted}")
        return deleted

    def reconcile_assistant(
        self,
        assistant: Assistant,
        level: LanguageModelLevel = LanguageModelLevel.STANDARD,
        features: Iterable[Feature] = (),
    ) -> bool:
        """Find-or-create, then migrate the model if the policy asks for it.

        Returns True when a remote write happened.
        """
        if not self.find_assistant(assistant):
            self.create_assistant(assistant)
            return True

        # Image generation models cannot back a conversation
        medium = assistant.medium
        if self.supports_medium(medium) and not self.supports_feature(medium, Feature.THREAD):
            log.debug(f"Not migrating assistant {assistant.service_id}: {medium.value} has no threads")
            return False

        features = tuple(features)
        current = self.target_model(assistant)
        suggested = self.suggest_model(assistant.medium, level, features)
        if suggested == current:
            return False
        if not self.should_update_model(current, suggested, assistant.medium, level, features):
            return False

        assistant.language_model_name = suggested
        return self.update_assistant(assistant)

    @staticmethod
    def _response_format(medium: Medium) -> dict[str, str] | str:
        if medium == Medium.JSON:
            return {"type": "json_object"}
        return "auto"

    # Threads and runs

    def start_thread(
        self,
        assistant: Assistant,
        thread: Thread,
        additional_instructions: str | None = None,
    ) -> None:
        """Create the remote thread and its first run in one request."""
        if assistant.service_id is None:
            raise AssistantNotBoundError(assistant.action)

        run = RunResource.model_validate(
            self.transport.create_thread_and_run(
                assistant_id=assistant.service_id,
                additional_instructions=additional_instructions,
                thread={"metadata": {"action": thread.action}},
            )
        )

        now = self.clock()
        thread.service_id = run.thread_id
        thread.run_id = run.id
        thread.created_at = now
        thread.updated_at = now
        self._apply_run(thread, run)
        log.info(f"Started thread {thread.service_id} run {thread.run_id}: {thread.raw_status}")

    def refresh_thread(self, thread: Thread) -> None:
        """Re-read the current run. Does nothing until the thread is started."""
        if thread.service_id is None or thread.run_id is None:
            return

        run = RunResource.model_validate(
            self.transport.retrieve_run(thread.service_id, thread.run_id)
        )
        thread.updated_at = self.clock()
        self._apply_run(thread, run)
        log.debug(f"Refreshed thread {thread.service_id} run {thread.run_id}: {thread.raw_status}")

    def _apply_run(self, thread: Thread, run: RunResource) -> None:
        thread.started_at = from_timestamp(run.started_at)
        thread.completed_at = from_timestamp(run.completed_at)
        thread.expires_at = from_timestamp(run.expires_at)
        thread.raw_status = run.status
        thread.status = normalize_status(run.status)

    def reply(self, assistant: Assistant, thread: Thread, text: str) -> Message:
        """Append a user message and start a new run for it.

        Returns the user message as stored remotely, not the assistant's
        answer; poll refresh_thread / fetch_messages for that.
        """
        if thread.service_id is None:
            raise ThreadNotStartedError()
        if assistant.service_id is None:
            raise AssistantNotBoundError(assistant.action)

        message = MessageResource.model_validate(
            self.transport.create_message(thread.service_id, role="user", content=text)
        )
        run = RunResource.model_validate(
            self.transport.create_run(thread.service_id, assistant_id=assistant.service_id)
        )

        thread.run_id = run.id
        thread.updated_at = self.clock()
        thread.completed_at = from_timestamp(run.completed_at)
        thread.raw_status = run.status
        thread.status = normalize_status(run.status)
        log.debug(f"Replied on thread {thread.service_id}, new run {thread.run_id}")

        return create_message(message, thread.medium)

    def cancel_run(self, thread: Thread) -> bool:
        if not thread.is_started:
            return False

        run = RunResource.model_validate(
            self.transport.cancel_run(thread.service_id, thread.run_id)
        )
        thread.updated_at = self.clock()
        self._apply_run(thread, run)
        log.info(f"Cancel requested for thread {thread.service_id} run {thread.run_id}: {thread.raw_status}")
        return True

    def fetch_messages(
        self,
        thread: Thread,
        limit: int = 20,
        after: str | None = None,
    ) -> MessageList:
        """Fetch one page of messages, oldest first.

        `after` is a message id cursor and is sent to the service as `before`.
        The service lists newest first, so `before` walks towards newer
        messages: passing the returned `last_id` back yields messages created
        after it, not older history.
        """
        if thread.service_id is None:
            return MessageList()

        page = MessagePage.model_validate(
            self.transport.list_messages(thread.service_id, before=after, limit=limit)
        )

        messages = MessageList(has_more=page.has_more, last_id=page.last_id)
        for resource in reversed(page.data):
            messages.add(create_message(resource, thread.medium))
        return messages

    def delete_thread(self, thread: Thread) -> bool:
        if thread.service_id is None:
            return False

        try:
            response = self.transport.delete_thread(thread.service_id)
        except RemoteNotFoundError:
            log.warning(f"Thread {thread.service_id} already gone, treating as deleted")
            return True

        deleted = DeletionStatus.model_validate(response).deleted
        log.info(f"Deleted thread {thread.service_id}: {deleted}")
        return deleted
