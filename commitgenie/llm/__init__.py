"""AI description providers for commitgenie.

Provides a unified async interface to the supported providers and the
best-effort augment_description() entry point. AI output is optional: any
failure is logged and reported as None.
"""

import asyncio
import logging
from typing import Optional

from dotenv import load_dotenv

from commitgenie.config import AIConfig
from commitgenie.llm.base import (
    API_KEY_ENV_VARS,
    DEFAULT_MODELS,
    AIRequest,
    AIResponse,
    BaseAIProvider,
    build_prompt,
)
from commitgenie.llm.exceptions import AIError, MissingAPIKeyError

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


def get_provider(ai_config: AIConfig | None = None) -> BaseAIProvider:
    """Get an AI provider instance.

    Args:
        ai_config: AI configuration. Defaults to OpenAI with its default model.

    Returns:
        An instance of the configured provider.

    Raises:
        ValueError: If the provider is not supported.
    """
    if ai_config is None:
        ai_config = AIConfig()

    provider = ai_config.provider

    if provider == "openai":
        from commitgenie.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(model=ai_config.model, api_key=ai_config.api_key)

    elif provider == "anthropic":
        from commitgenie.llm.anthropic_provider import AnthropicProvider

        return AnthropicProvider(model=ai_config.model, api_key=ai_config.api_key)

    elif provider == "google":
        from commitgenie.llm.google_provider import GoogleProvider

        return GoogleProvider(model=ai_config.model, api_key=ai_config.api_key)

    else:
        raise ValueError(f"Unsupported provider: {provider}")


async def augment_description(
    request: AIRequest,
    ai_config: AIConfig,
    timeout: Optional[float] = None,
) -> Optional[str]:
    """Ask the configured provider for a description, best effort.

    Args:
        request: The AI request.
        ai_config: AI configuration.
        timeout: Seconds to wait; defaults to ai_config.timeout.

    Returns:
        The description, or None when AI is disabled, fails or times out.
    """
    if not ai_config.enabled:
        return None

    timeout = ai_config.timeout if timeout is None else timeout
    try:
        provider = get_provider(ai_config)
    except Exception as e:
        # e.g. the provider SDK is not installed
        logger.warning("AI provider %s unavailable: %s", ai_config.provider, e)
        return None

    try:
        response = await asyncio.wait_for(provider.generate_description(request), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("AI description timed out after %.1fs; using rule-based suggestions", timeout)
        return None
    except (AIError, ValueError) as e:
        logger.warning("AI description unavailable: %s", e)
        return None

    logger.debug("AI provider %s suggested %r", ai_config.provider, response.description)
    return response.description


__all__ = [
    "API_KEY_ENV_VARS",
    "DEFAULT_MODELS",
    "AIError",
    "AIRequest",
    "AIResponse",
    "BaseAIProvider",
    "MissingAPIKeyError",
    "augment_description",
    "build_prompt",
    "get_provider",
]
