"""
Provider factory for creating LLM provider instances.

Selects the backend used by the classifier and summarizer from the
configured API keys.
"""

import logging
from enum import Enum

from .base import LLMProvider
from .anthropic import AnthropicProvider
from .openai import OpenAIProvider
from .google import GoogleProvider

logger = logging.getLogger(__name__)


class ProviderType(Enum):
    """Available LLM provider types."""
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    GOOGLE = "google"


DEFAULT_MODELS = {
    ProviderType.ANTHROPIC: "claude-haiku-4-5",
    ProviderType.OPENAI: "gpt-4o-mini",
    ProviderType.GOOGLE: "gemini-2.5-flash",
}


def create_provider(
    provider_type: ProviderType | str,
    api_key: str,
    default_model: str | None = None,
    timeout: float = 10.0,
    max_retries: int = 1,
    **kwargs,
) -> LLMProvider:
    """
    Create an LLM provider instance.

    Args:
        provider_type: Provider type (enum or string like "anthropic")
        api_key: API key for the provider
        default_model: Model override; falls back to DEFAULT_MODELS
        timeout: Per-request timeout in seconds
        max_retries: SDK retry count (ignored by Google)
        **kwargs: Provider-specific options (e.g. organization for OpenAI)

    Returns:
        Configured LLMProvider instance

    Raises:
        ValueError: If provider_type is unknown
    """
    if isinstance(provider_type, str):
        try:
            provider_type = ProviderType(provider_type.lower())
        except ValueError:
            raise ValueError(
                f"Unknown provider: {provider_type}. "
                f"Available: {[p.value for p in ProviderType]}"
            )

    model = default_model or DEFAULT_MODELS[provider_type]

    if provider_type == ProviderType.ANTHROPIC:
        return AnthropicProvider(
            api_key=api_key,
            default_model=model,
            timeout=timeout,
            max_retries=max_retries,
        )
    if provider_type == ProviderType.OPENAI:
        return OpenAIProvider(
            api_key=api_key,
            default_model=model,
            organization=kwargs.get("organization"),
            timeout=timeout,
            max_retries=max_retries,
        )
    return GoogleProvider(api_key=api_key, default_model=model, timeout=timeout)


def get_provider_from_env(
    anthropic_key: str | None = None,
    openai_key: str | None = None,
    google_key: str | None = None,
    preferred_provider: str | None = None,
    default_model: str | None = None,
    timeout: float = 10.0,
    max_retries: int = 1,
) -> LLMProvider | None:
    """
    Create a provider from available environment keys.

    Uses the preferred provider when its key is set, otherwise the first
    configured key in order Anthropic > OpenAI > Google.

    Args:
        anthropic_key: Anthropic API key
        openai_key: OpenAI API key
        google_key: Google API key
        preferred_provider: "anthropic", "openai" or "google"
        default_model: Model override for the chosen provider
        timeout: Per-request timeout in seconds
        max_retries: SDK retry count

    Returns:
        Configured LLMProvider or None if no keys available
    """
    providers = {
        ProviderType.ANTHROPIC: anthropic_key,
        ProviderType.OPENAI: openai_key,
        ProviderType.GOOGLE: google_key,
    }
    options = {"default_model": default_model, "timeout": timeout, "max_retries": max_retries}

    if preferred_provider:
        try:
            pref_type = ProviderType(preferred_provider.lower())
        except ValueError:
            logger.warning(f"Unknown LLM_PROVIDER '{preferred_provider}', using first configured key")
        else:
            if providers.get(pref_type):
                return create_provider(pref_type, providers[pref_type], **options)
            logger.warning(f"LLM_PROVIDER is '{preferred_provider}' but its API key is not set")

    for provider_type, api_key in providers.items():
        if api_key:
            return create_provider(provider_type, api_key, **options)

    return None
