from .client import OpenAITransport, Transport
from .platform import OpenAIPlatform
from .translate import create_message

__all__ = ["OpenAIPlatform", "OpenAITransport", "Transport", "create_message"]
