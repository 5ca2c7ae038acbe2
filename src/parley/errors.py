from __future__ import annotations


class ParleyError(Exception):
    pass


class ConfigurationError(ParleyError, ValueError):
    """Caller or integration mistake. Never retryable."""


class ConfigError(ConfigurationError):
    pass


class UnsupportedMediumError(ConfigurationError):
    def __init__(self, medium: object) -> None:
        super().__init__(f"Unsupported medium: {getattr(medium, 'value', medium)}")
        self.medium = medium


class UnsupportedRoleError(ConfigurationError):
    def __init__(self, role: object) -> None:
        super().__init__(f"Unsupported role: {role}")
        self.role = role


class UnsupportedContentError(ConfigurationError):
    def __init__(self, content_type: object) -> None:
        super().__init__(f"Unsupported content type: {content_type}")
        self.content_type = content_type


class UsageError(ParleyError):
    """Operation called on an entity that is missing required linkage."""


class ThreadNotStartedError(UsageError):
    def __init__(self, message: str = "Thread has not been started") -> None:
        super().__init__(message)


class AssistantNotBoundError(UsageError):
    def __init__(self, action: str) -> None:
        super().__init__(f"Assistant '{action}' has no service id. Find or create it first.")
        self.action = action


class RemoteNotFoundError(ParleyError):
    """Remote resource does not exist (vendor 404)."""

    def __init__(self, message: str, resource: str | None = None) -> None:
        super().__init__(message)
        self.resource = resource
