"""
Google Gemini provider implementation.

Supports Gemini models with JSON-schema structured outputs.
Uses the google-genai SDK.
"""

from google import genai
from google.genai import types

from .base import (
    LLMProvider,
    LLMResponse,
    Message,
    ModelTier,
    ProviderCapabilities,
    ResponseSchema,
    split_system_prompt,
)


class GoogleProvider(LLMProvider):
    """
    Google Gemini provider with structured output support.
    """

    # Model mappings for each tier
    TIER_MODELS = {
        ModelTier.FAST: "gemini-2.5-flash",
        ModelTier.STANDARD: "gemini-2.5-pro",
        ModelTier.ADVANCED: "gemini-2.5-pro",
    }

    # Model aliases for convenience
    MODEL_ALIASES = {
        "flash": "gemini-2.5-flash",
        "pro": "gemini-2.5-pro",
        "fast": "gemini-2.5-flash",
        "standard": "gemini-2.5-pro",
    }

    def __init__(
        self,
        api_key: str,
        default_model: str = "gemini-2.5-flash",
        timeout: float = 10.0,
    ):
        """
        Initialize Google Gemini provider.

        Args:
            api_key: Google AI API key
            default_model: Default model to use
            timeout: Per-request timeout in seconds
        """
        # HttpOptions takes milliseconds
        self.client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )
        self._default_model = self._resolve_model(default_model)

    def _resolve_model(self, model: str) -> str:
        """Resolve model alias to full model ID."""
        return self.MODEL_ALIASES.get(model, model)

    @property
    def name(self) -> str:
        return "google"

    @property
    def capabilities(self) -> ProviderCapabilities:
        return ProviderCapabilities(
            supports_system_prompt=True,
            supports_structured_output=True,
            max_context_tokens=1000000,  # Gemini has very large context
        )

    def complete(
        self,
        messages: list[Message],
        response_schema: ResponseSchema | None = None,
        model: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.0,
    ) -> LLMResponse:
        """Generate a completion using Gemini."""
        resolved_model = self._resolve_model(model) if model else self._default_model
        system_prompt, turns = split_system_prompt(messages)

        # Build generation config
        config_kwargs = {
            "max_output_tokens": max_tokens,
            "temperature": temperature,
        }
        if system_prompt:
            config_kwargs["system_instruction"] = system_prompt
        if response_schema:
            config_kwargs["response_mime_type"] = "application/json"
            config_kwargs["response_json_schema"] = response_schema.schema

        contents = [
            types.Content(
                role="model" if m.role == "assistant" else "user",
                parts=[types.Part(text=m.content)],
            )
            for m in turns
        ]

        response = self.client.models.generate_content(
            model=resolved_model,
            contents=contents,
            config=types.GenerateContentConfig(**config_kwargs),
        )

        # Extract usage metadata
        input_tokens = 0
        output_tokens = 0
        if getattr(response, "usage_metadata", None):
            input_tokens = response.usage_metadata.prompt_token_count or 0
            output_tokens = response.usage_metadata.candidates_token_count or 0

        return LLMResponse(
            text=response.text or "",
            model=resolved_model,
            parsed=getattr(response, "parsed", None),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            metadata={
                "provider": "google",
            }
        )
