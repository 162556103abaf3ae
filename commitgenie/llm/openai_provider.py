"""OpenAI provider implementation."""

from typing import Optional

from openai import AsyncOpenAI

from commitgenie.llm.base import MAX_TOKENS, TEMPERATURE, BaseAIProvider


class OpenAIProvider(BaseAIProvider):
    """OpenAI chat completions provider."""

    name = "openai"

    async def _complete(self, prompt: str, api_key: str) -> Optional[str]:
        async with AsyncOpenAI(api_key=api_key) as client:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
            )
        if not response.choices:
            return None
        return response.choices[0].message.content
