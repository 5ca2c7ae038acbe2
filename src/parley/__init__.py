"""parley: one Platform contract over remote assistant/thread/run services."""

from .adapters.openai_assistants import OpenAIPlatform, OpenAITransport
from .capabilities import should_update_model, suggest_model, supports_feature, supports_medium
from .config import PlatformConfig, load_config
from .errors import (
    AssistantNotBoundError,
    ConfigError,
    ConfigurationError,
    ParleyError,
    RemoteNotFoundError,
    ThreadNotStartedError,
    UnsupportedContentError,
    UnsupportedMediumError,
    UnsupportedRoleError,
    UsageError,
)
from .models import (
    Assistant,
    Content,
    Feature,
    File,
    Json,
    LanguageModelLevel,
    Medium,
    Message,
    MessageList,
    Role,
    RunStatus,
    Text,
    Thread,
)
from .platform import Platform
from .status import normalize_status

__all__ = [
    # Platform
    "Platform", "OpenAIPlatform", "OpenAITransport", "PlatformConfig", "load_config",
    # Models
    "Assistant", "Thread", "Message", "MessageList", "Content", "Text", "Json", "File",
    "Medium", "Feature", "LanguageModelLevel", "Role", "RunStatus",
    # Pure functions
    "supports_medium", "supports_feature", "suggest_model", "should_update_model", "normalize_status",
    # Errors
    "ParleyError", "ConfigurationError", "ConfigError", "UnsupportedMediumError",
    "UnsupportedRoleError", "UnsupportedContentError", "UsageError", "ThreadNotStartedError",
    "AssistantNotBoundError", "RemoteNotFoundError",
]
