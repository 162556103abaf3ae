"""Anthropic Claude provider implementation."""

from typing import Optional

from anthropic import AsyncAnthropic

from commitgenie.llm.base import MAX_TOKENS, TEMPERATURE, BaseAIProvider


class AnthropicProvider(BaseAIProvider):
    """Anthropic Claude provider."""

    name = "anthropic"

    async def _complete(self, prompt: str, api_key: str) -> Optional[str]:
        async with AsyncAnthropic(api_key=api_key) as client:
            message = await client.messages.create(
                model=self.model,
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
                messages=[{"role": "user", "content": prompt}],
            )
        # First text block of the reply
        for block in message.content:
            if getattr(block, "type", None) == "text":
                return block.text
        return None
