"""
Anthropic Claude provider implementation.

Structured output is requested through a forced tool call whose input
schema is the response schema; the tool input is returned pre-parsed.
"""

import json

import anthropic

from .base import (
    LLMProvider,
    LLMResponse,
    Message,
    ModelTier,
    ProviderCapabilities,
    ResponseSchema,
    split_system_prompt,
)


class AnthropicProvider(LLMProvider):
    """
    Anthropic Claude provider with tool-based structured output.
    """

    # Model mappings for each tier
    TIER_MODELS = {
        ModelTier.FAST: "claude-haiku-4-5",
        ModelTier.STANDARD: "claude-sonnet-4-5",
        ModelTier.ADVANCED: "claude-opus-4-1",
    }

    # Model aliases for convenience
    MODEL_ALIASES = {
        "haiku": "claude-haiku-4-5",
        "sonnet": "claude-sonnet-4-5",
        "opus": "claude-opus-4-1",
    }

    def __init__(
        self,
        api_key: str,
        default_model: str = "claude-haiku-4-5",
        timeout: float = 10.0,
        max_retries: int = 1,
    ):
        """
        Initialize Anthropic provider.

        Args:
            api_key: Anthropic API key
            default_model: Default model to use
            timeout: Per-request timeout in seconds
            max_retries: SDK retries for connection errors and 429/5xx
        """
        self.client = anthropic.Anthropic(
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
        )
        self._default_model = self._resolve_model(default_model)

    def _resolve_model(self, model: str) -> str:
        """Resolve model alias to full model ID."""
        return self.MODEL_ALIASES.get(model, model)

    @property
    def name(self) -> str:
        return "anthropic"

    @property
    def capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_system_prompt=True,
            supports_structured_output=True,  # via forced tool use
            max_context_tokens=200000,
        )

    def complete(
        self,
        messages: list[Message],
        response_schema: ResponseSchema | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
    ) -> LLMResponse:
        """Generate a completion using Claude."""
        resolved_model = self._resolve_model(model) if model else self._default_model
        system_prompt, turns = split_system_prompt(messages)

        kwargs = {
            "model": resolved_model,
            "max_tokens": max_tokens,
            "messages": [{"role": m.role, "content": m.content} for m in turns],
        }
        if temperature > 0:
            kwargs["temperature"] = temperature
        if system_prompt:
            kwargs["system"] = system_prompt
        if response_schema:
            kwargs["tools"] = [{
                "name": response_schema.name,
                "description": "Record the structured result.",
                "input_schema": response_schema.schema,
            }]
            kwargs["tool_choice"] = {"type": "tool", "name": response_schema.name}

        response = self.client.messages.create(**kwargs)

        text = ""
        parsed = None
        for block in response.content:
            if block.type == "tool_use":
                parsed = block.input
                text = json.dumps(parsed)
                break
            if block.type == "text" and not text:
                text = block.text

        usage = response.usage
        return LLMResponse(
            text=text,
            model=resolved_model,
            parsed=parsed,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            metadata={
                "stop_reason": response.stop_reason,
                "provider": "anthropic",
            }
        )
