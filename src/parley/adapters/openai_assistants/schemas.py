# src/parley/adapters/openai_assistants/schemas.py
from __future__ import annotations

from pydantic import BaseModel, Field


class AssistantResource(BaseModel):
    """Assistant object from /assistants."""
    id: str
    model: str
    name: str | None = None
    instructions: str | None = None
    description: str | None = None
    metadata: dict[str, str] | None = None
    created_at: int

    @property
    def effective_model(self) -> str:
        """Model pinned in metadata wins over the bound model."""
        pinned = (self.metadata or {}).get("model")
        return pinned if pinned is not None else self.model

    @property
    def action(self) -> str | None:
        return (self.metadata or {}).get("action")


class RunResource(BaseModel):
    """Run object from /threads/runs and /threads/{id}/runs."""
    id: str
    thread_id: str | None = None
    assistant_id: str | None = None
    status: str | None = None
    started_at: int | None = None
    completed_at: int | None = None
    expires_at: int | None = None


class TextPart(BaseModel):
    value: str
    annotations: list[dict] = Field(default_factory=list)


class ImageFilePart(BaseModel):
    file_id: str
    detail: str | None = None


class ContentBlock(BaseModel):
    type: str  # text|image_file|image_url|refusal
    text: TextPart | None = None
    image_file: ImageFilePart | None = None


class MessageResource(BaseModel):
    """Message object from /threads/{id}/messages."""
    id: str
    created_at: int
    role: str  # user|assistant, system is accepted for forward compatibility
    content: list[ContentBlock] = Field(default_factory=list)
    run_id: str | None = None


class MessagePage(BaseModel):
    data: list[MessageResource] = Field(default_factory=list)
    has_more: bool = False
    first_id: str | None = None
    last_id: str | None = None


class AssistantPage(BaseModel):
    data: list[AssistantResource] = Field(default_factory=list)
    has_more: bool = False


class DeletionStatus(BaseModel):
    id: str
    deleted: bool
