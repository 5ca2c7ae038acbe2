from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterator, Literal, Union


class Medium(str, Enum):
    TEXT = "text"
    CODE = "code"
    IMAGE = "image"
    JSON = "json"
    TEXT_FILE = "text_file"
    PDF_FILE = "pdf_file"
    IMAGE_FILE = "image_file"
    VIDEO_FILE = "video_file"
    AUDIO_FILE = "audio_file"


class Feature(str, Enum):
    CODE_COMPLETION = "code_completion"
    CHAT = "chat"
    THREAD = "thread"
    FUNCTION = "function"
    TEXT_FILE = "text_file"
    PDF_FILE = "pdf_file"
    IMAGE_FILE = "image_file"
    VIDEO_FILE = "video_file"
    AUDIO_FILE = "audio_file"


class LanguageModelLevel(str, Enum):
    BASIC = "basic"
    STANDARD = "standard"
    ADVANCED = "advanced"


class Role(str, Enum):
    ASSISTANT = "assistant"
    SYSTEM = "system"
    USER = "user"


class RunStatus(str, Enum):
    """Normalized run state. Values are the vendor status tokens."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES


_TERMINAL_STATUSES = frozenset(
    {RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.CANCELLED, RunStatus.EXPIRED}
)


@dataclass
class Assistant:
    """Application-side assistant record.

    `action` is the reconciliation key and is never rewritten by a platform.
    `service_id` stays None until the remote resource is found or created.
    """

    action: str
    name: str | None = None
    instructions: str | None = None
    description: str | None = None
    language_model_name: str | None = None
    medium: Medium = Medium.TEXT
    service_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Thread:
    """A conversation bound to one assistant.

    `raw_status` keeps the vendor string verbatim; `status` is its normalized
    form and is None when the vendor string is not recognized.
    """

    action: str
    medium: Medium = Medium.TEXT
    service_id: str | None = None
    run_id: str | None = None
    raw_status: str | None = None
    status: RunStatus | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    expires_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_started(self) -> bool:
        return self.service_id is not None and self.run_id is not None


@dataclass(frozen=True)
class Text:
    value: str
    type: Literal["text"] = "text"


@dataclass(frozen=True)
class Json:
    value: str
    type: Literal["json"] = "json"

    @property
    def data(self) -> Any:
        return json.loads(self.value)


@dataclass(frozen=True)
class File:
    file_id: str
    medium: Medium
    type: Literal["file"] = "file"


Content = Union[Text, Json, File]


@dataclass(frozen=True)
class Message:
    id: str
    created_at: datetime
    role: Role
    content: tuple[Content, ...] = ()

    @property
    def text(self) -> str:
        return "\n".join(c.value for c in self.content if not isinstance(c, File))


@dataclass
class MessageList:
    """One page of messages, oldest first."""

    messages: list[Message] = field(default_factory=list)
    has_more: bool = False
    last_id: str | None = None

    def add(self, message: Message) -> None:
        self.messages.append(message)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.messages)

    def __len__(self) -> int:
        return len(self.messages)
