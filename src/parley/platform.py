from __future__ import annotations

from typing import Iterable, Protocol

from .models import (
    Assistant,
    Feature,
    LanguageModelLevel,
    Medium,
    Message,
    MessageList,
    Thread,
)


class Platform(Protocol):
    """Contract every conversational-AI backend implements.

    Implementations never hold on to the Assistant or Thread passed in; each
    call reads and mutates the given instance and returns.
    """

    def get_name(self) -> str:
        ...

    def supports_medium(self, medium: Medium) -> bool:
        ...

    def supports_feature(self, medium: Medium, feature: Feature) -> bool:
        ...

    def suggest_model(
        self,
        medium: Medium,
        level: LanguageModelLevel = LanguageModelLevel.STANDARD,
        features: Iterable[Feature] = (),
    ) -> str:
        ...

    def should_update_model(
        self,
        old_model: str,
        new_model: str,
        medium: Medium,
        level: LanguageModelLevel = LanguageModelLevel.STANDARD,
        features: Iterable[Feature] = (),
    ) -> bool:
        ...

    def find_assistant(self, assistant: Assistant) -> bool:
        """Bind `assistant` to a matching remote resource. False if none matches."""
        ...

    def create_assistant(self, assistant: Assistant) -> None:
        ...

    def update_assistant(self, assistant: Assistant) -> bool:
        ...

    def delete_assistant(self, assistant: Assistant) -> bool:
        ...

    def start_thread(
        self,
        assistant: Assistant,
        thread: Thread,
        additional_instructions: str | None = None,
    ) -> None:
        ...

    def refresh_thread(self, thread: Thread) -> None:
        ...

    def delete_thread(self, thread: Thread) -> bool:
        ...

    def fetch_messages(
        self,
        thread: Thread,
        limit: int = 20,
        after: str | None = None,
    ) -> MessageList:
        ...

    def reply(self, assistant: Assistant, thread: Thread, text: str) -> Message:
        ...
