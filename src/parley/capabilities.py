from __future__ import annotations

from typing import Callable, Iterable

from .errors import UnsupportedMediumError
from .models import Feature, LanguageModelLevel, Medium

SUPPORTED_MEDIA = frozenset({Medium.TEXT, Medium.CODE, Medium.IMAGE})

LIGHT_MODEL = "gpt-4o-mini"
TOP_MODEL = "gpt-4o"
IMAGE_MODEL = "dall-e-3"

_LANGUAGE_MEDIA = frozenset({Medium.TEXT, Medium.JSON, Medium.CODE})

# (old_model, new_model, medium, level, features) -> should migrate
ModelUpdatePolicy = Callable[
    [str, str, Medium, LanguageModelLevel, tuple[Feature, ...]], bool
]


def supports_medium(medium: Medium) -> bool:
    return medium in SUPPORTED_MEDIA


def supports_feature(medium: Medium, feature: Feature) -> bool:
    if not supports_medium(medium):
        return False

    # Image generation is single-shot, nothing conversational applies
    if medium == Medium.IMAGE:
        return False

    if feature == Feature.CODE_COMPLETION:
        return medium == Medium.CODE
    # Function calling is reserved, file attachments are not wired up
    return feature in (Feature.CHAT, Feature.THREAD)


def suggest_model(
    medium: Medium,
    level: LanguageModelLevel = LanguageModelLevel.STANDARD,
    features: Iterable[Feature] = (),
) -> str:
    if medium in _LANGUAGE_MEDIA:
        if level == LanguageModelLevel.ADVANCED:
            return TOP_MODEL
        return LIGHT_MODEL
    if medium == Medium.IMAGE:
        return IMAGE_MODEL
    raise UnsupportedMediumError(medium)


def default_model_policy(
    old_model: str,
    new_model: str,
    medium: Medium,
    level: LanguageModelLevel,
    features: tuple[Feature, ...],
) -> bool:
    """Update unless the assistant is already on the top tier."""
    return old_model != TOP_MODEL


def should_update_model(
    old_model: str,
    new_model: str,
    medium: Medium,
    level: LanguageModelLevel = LanguageModelLevel.STANDARD,
    features: Iterable[Feature] = (),
    policy: ModelUpdatePolicy | None = None,
) -> bool:
    policy = policy or default_model_policy
    return policy(old_model, new_model, medium, level, tuple(features))
