"""
Base LLM provider interface.

Defines the abstract interface that all provider implementations must follow:
an ordered message list (system + user turns) plus an optional structured-output
schema in, the first choice's content out (plain text or a pre-parsed payload).
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ModelTier(Enum):
    """Model capability tiers for automatic selection."""
    FAST = "fast"      # Quick, cheap models (Haiku, GPT mini, Gemini Flash)
    STANDARD = "standard"  # Balanced models (Sonnet, GPT, Gemini Pro)
    ADVANCED = "advanced"  # Most capable models


@dataclass
class ProviderCapabilities:
    """Describes what features a provider supports."""
    supports_system_prompt: bool = True
    supports_structured_output: bool = False
    max_context_tokens: int = 128000


@dataclass
class Message:
    """One turn of a conversation sent to the model."""
    role: str  # "system", "user" or "assistant"
    content: str


@dataclass
class ResponseSchema:
    """A named JSON schema the response must conform to."""
    name: str
    schema: dict[str, Any]
    strict: bool = True


@dataclass
class LLMResponse:
    """Standardized response from any LLM provider."""
    text: str
    model: str
    parsed: Any = None  # Pre-parsed structured payload, when the backend returns one
    input_tokens: int = 0
    output_tokens: int = 0
    metadata: dict = field(default_factory=dict)


def split_system_prompt(messages: list[Message]) -> tuple[str | None, list[Message]]:
    """Separate system messages (joined) from the conversation turns."""
    system_parts = [m.content for m in messages if m.role == "system"]
    turns = [m for m in messages if m.role != "system"]
    return ("\n\n".join(system_parts) if system_parts else None), turns


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    All provider implementations must inherit from this class and implement
    the required methods. This ensures a consistent interface across
    Anthropic, OpenAI, Google, and test doubles.
    """

    TIER_MODELS: dict[ModelTier, str] = {}

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider name (e.g., 'anthropic', 'openai', 'google')."""
        pass

    @property
    @abstractmethod
    def capabilities(self) -> ProviderCapabilities:
        """Return the provider's capabilities."""
        pass

    def get_model_for_tier(self, tier: ModelTier) -> str:
        """Get the model ID for a capability tier."""
        return self.TIER_MODELS[tier]

    @abstractmethod
    def complete(
        self,
        messages: list[Message],
        response_schema: ResponseSchema | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
    ) -> LLMResponse:
        """
        Generate a completion from the model.

        Args:
            messages: Ordered conversation (system messages first)
            response_schema: Optional JSON schema for structured output
            model: Specific model to use (defaults to provider's default)
            max_tokens: Maximum tokens in response
            temperature: Sampling temperature (0.0 = deterministic)

        Returns:
            LLMResponse with the generated text and, for structured
            requests, the parsed payload when available
        """
        pass

    async def complete_async(
        self,
        messages: list[Message],
        response_schema: ResponseSchema | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
    ) -> LLMResponse:
        """
        Async version of complete.

        Default implementation wraps sync call in executor.
        Providers with native async support should override this.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            lambda: self.complete(
                messages=messages,
                response_schema=response_schema,
                model=model,
                max_tokens=max_tokens,
                temperature=temperature,
            )
        )
