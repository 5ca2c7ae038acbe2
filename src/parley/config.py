from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError

DEFAULT_FALLBACK_MODEL = "gpt-3.5-turbo"
DEFAULT_ASSISTANT_LIST_LIMIT = 50
MAX_ASSISTANT_LIST_LIMIT = 100


@dataclass(frozen=True)
class PlatformConfig:
    api_key: str | None = None
    organization: str | None = None
    base_url: str | None = None
    fallback_model: str = DEFAULT_FALLBACK_MODEL
    assistant_list_limit: int = DEFAULT_ASSISTANT_LIST_LIMIT
    timeout: float = 60.0
    max_retries: int = 2


def _expect_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Config '{key}' must be a non-empty string.")
    return value.strip()


def _expect_int(key: str, value: Any, *, low: int, high: int | None = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Config '{key}' must be an integer, got {value!r}.") from exc
    if number < low or (high is not None and number > high):
        bound = f"between {low} and {high}" if high is not None else f">= {low}"
        raise ConfigError(f"Config '{key}' must be {bound}, got {number}.")
    return number


def _expect_float(key: str, value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Config '{key}' must be a number, got {value!r}.") from exc
    if number <= 0:
        raise ConfigError(f"Config '{key}' must be positive, got {number}.")
    return number


def _from_file(path: Path) -> PlatformConfig:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file is not valid JSON: {path}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("Config must be a JSON object.")

    config = PlatformConfig(
        api_key=_expect_str(raw, "api_key"),
        organization=_expect_str(raw, "organization"),
        base_url=_expect_str(raw, "base_url"),
    )
    fallback_model = _expect_str(raw, "fallback_model")
    if fallback_model:
        config = replace(config, fallback_model=fallback_model)
    if raw.get("assistant_list_limit") is not None:
        config = replace(
            config,
            assistant_list_limit=_expect_int(
                "assistant_list_limit", raw["assistant_list_limit"], low=1, high=MAX_ASSISTANT_LIST_LIMIT
            ),
        )
    if raw.get("timeout") is not None:
        config = replace(config, timeout=_expect_float("timeout", raw["timeout"]))
    if raw.get("max_retries") is not None:
        config = replace(config, max_retries=_expect_int("max_retries", raw["max_retries"], low=0))
    return config


def load_config(path: Path | None = None) -> PlatformConfig:
    """Load platform config from an optional JSON file, then env overrides.

    Environment wins over the file:
        OPENAI_API_KEY, OPENAI_ORG_ID, OPENAI_BASE_URL,
        PARLEY_FALLBACK_MODEL, PARLEY_ASSISTANT_LIST_LIMIT,
        PARLEY_TIMEOUT, PARLEY_MAX_RETRIES
    """
    config = _from_file(path) if path is not None else PlatformConfig()

    overrides: dict[str, Any] = {}
    if os.getenv("OPENAI_API_KEY"):
        overrides["api_key"] = os.environ["OPENAI_API_KEY"]
    if os.getenv("OPENAI_ORG_ID"):
        overrides["organization"] = os.environ["OPENAI_ORG_ID"]
    if os.getenv("OPENAI_BASE_URL"):
        overrides["base_url"] = os.environ["OPENAI_BASE_URL"]
    if os.getenv("PARLEY_FALLBACK_MODEL"):
        overrides["fallback_model"] = os.environ["PARLEY_FALLBACK_MODEL"]
    if os.getenv("PARLEY_ASSISTANT_LIST_LIMIT"):
        overrides["assistant_list_limit"] = _expect_int(
            "PARLEY_ASSISTANT_LIST_LIMIT",
            os.environ["PARLEY_ASSISTANT_LIST_LIMIT"],
            low=1,
            high=MAX_ASSISTANT_LIST_LIMIT,
        )
    if os.getenv("PARLEY_TIMEOUT"):
        overrides["timeout"] = _expect_float("PARLEY_TIMEOUT", os.environ["PARLEY_TIMEOUT"])
    if os.getenv("PARLEY_MAX_RETRIES"):
        overrides["max_retries"] = _expect_int("PARLEY_MAX_RETRIES", os.environ["PARLEY_MAX_RETRIES"], low=0)

    return replace(config, **overrides)
