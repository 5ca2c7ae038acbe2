# src/parley/adapters/openai_assistants/translate.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from ...errors import UnsupportedContentError, UnsupportedRoleError
from ...models import Content, File, Json, Medium, Message, Role, Text
from .schemas import ContentBlock, MessageResource

_ROLES = {
    "assistant": Role.ASSISTANT,
    "system": Role.SYSTEM,
    "user": Role.USER,
}

# "image" is the tag older API versions used for image_file blocks
_IMAGE_TAGS = {"image_file", "image"}


def from_timestamp(value: int | None) -> datetime | None:
    """Unix seconds to an aware UTC datetime. 0 and None mean "not reported"."""
    if not value:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def translate_role(role: str) -> Role:
    try:
        return _ROLES[role]
    except KeyError:
        raise UnsupportedRoleError(role) from None


def translate_content(block: ContentBlock, medium: Medium) -> Content:
    """Map one vendor content block to a Content variant.

    Exhaustive on purpose: an unknown tag is an integration failure, not
    something to drop.
    """
    if block.type == "text":
        if block.text is None:
            raise UnsupportedContentError("text block without text")
        if medium == Medium.JSON:
            return Json(block.text.value)
        return Text(block.text.value)

    if block.type in _IMAGE_TAGS:
        if block.image_file is None:
            raise UnsupportedContentError(f"{block.type} block without image_file")
        return File(block.image_file.file_id, Medium.IMAGE)

    raise UnsupportedContentError(block.type)


def create_message(payload: Mapping[str, Any] | MessageResource, medium: Medium) -> Message:
    """Translate a vendor message payload into a Message.

    Args:
        payload: Message dict as returned by the transport (or already validated)
        medium: Medium of the owning thread; Json turns text blocks into Json content

    Raises:
        UnsupportedRoleError: role outside assistant/system/user
        UnsupportedContentError: content block with an unknown tag
    """
    resource = payload if isinstance(payload, MessageResource) else MessageResource.model_validate(payload)

    role = translate_role(resource.role)
    content = tuple(translate_content(block, medium) for block in resource.content)

    return Message(
        id=resource.id,
        created_at=datetime.fromtimestamp(resource.created_at, tz=timezone.utc),
        role=role,
        content=content,
    )
