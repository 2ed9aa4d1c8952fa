"""
LLM Provider abstraction layer.

Supports multiple AI providers (Anthropic, OpenAI, Google) behind one
message-list + structured-output interface.
"""

from .base import (
    LLMProvider,
    LLMResponse,
    Message,
    ModelTier,
    ProviderCapabilities,
    ResponseSchema,
)
from .anthropic import AnthropicProvider
from .openai import OpenAIProvider
from .google import GoogleProvider
from .factory import create_provider, get_provider_from_env, ProviderType

__all__ = [
    "LLMProvider",
    "LLMResponse",
    "Message",
    "ModelTier",
    "ProviderCapabilities",
    "ResponseSchema",
    "AnthropicProvider",
    "OpenAIProvider",
    "GoogleProvider",
    "create_provider",
    "get_provider_from_env",
    "ProviderType",
]
