"""
OpenAI provider implementation.

Supports GPT models with strict JSON-schema structured outputs.
"""

from openai import OpenAI

from .base import (
    LLMProvider,
    LLMResponse,
    Message,
    ModelTier,
    ProviderCapabilities,
    ResponseSchema,
)


class OpenAIProvider(LLMProvider):
    """
    OpenAI GPT provider with structured output support.
    """

    # Model mappings for each tier
    TIER_MODELS = {
        ModelTier.FAST: "gpt-4o-mini",
        ModelTier.STANDARD: "gpt-4o",
        ModelTier.ADVANCED: "gpt-4o",
    }

    # Model aliases for convenience
    MODEL_ALIASES = {
        "gpt4": "gpt-4o",
        "gpt4-mini": "gpt-4o-mini",
        "gpt-4": "gpt-4o",
        "fast": "gpt-4o-mini",
        "standard": "gpt-4o",
    }

    def __init__(
        self,
        api_key: str,
        default_model: str = "gpt-4o-mini",
        organization: str | None = None,
        timeout: float = 10.0,
        max_retries: int = 1,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            default_model: Default model to use
            organization: Optional organization ID
            timeout: Per-request timeout in seconds
            max_retries: SDK retries for connection errors and 429/5xx
        """
        self.client = OpenAI(
            api_key=api_key,
            organization=organization,
            timeout=timeout,
            max_retries=max_retries,
        )
        self._default_model = self._resolve_model(default_model)

    def _resolve_model(self, model: str) -> str:
        """Resolve model alias to full model ID."""
        return self.MODEL_ALIASES.get(model, model)

    @property
    def name(self) -> str:
        return "openai"

    @property
    def capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_system_prompt=True,
            supports_structured_output=True,
            max_context_tokens=128000,
        )

    def complete(
        self,
        messages: list[Message],
        response_schema: ResponseSchema | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
    ) -> LLMResponse:
        """
        Generate a completion using GPT.

        Args:
            messages: Conversation turns, system prompt first
            response_schema: Optional JSON schema enforced via strict json_schema mode
            model: Model override (alias or full ID)
            max_tokens: Maximum tokens in the response
            temperature: Sampling temperature

        Returns:
            LLMResponse with the first choice's text
        """
        resolved_model = self._resolve_model(model) if model else self._default_model

        kwargs = {
            "model": resolved_model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        if response_schema:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": response_schema.name,
                    "strict": response_schema.strict,
                    "schema": response_schema.schema,
                },
            }

        response = self.client.chat.completions.create(**kwargs)

        # Extract response data
        choice = response.choices[0]
        usage = response.usage

        return LLMResponse(
            text=choice.message.content or "",
            model=resolved_model,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            metadata={
                "finish_reason": choice.finish_reason,
                "provider": "openai",
            }
        )
