"""Google Gemini provider implementation."""

from typing import Optional

from google import genai
from google.genai import types

from commitgenie.llm.base import MAX_TOKENS, TEMPERATURE, BaseAIProvider
from commitgenie.llm.exceptions import AIError


class GoogleProvider(BaseAIProvider):
    """Google Gemini provider."""

    name = "google"

    async def _complete(self, prompt: str, api_key: str) -> Optional[str]:
        client = genai.Client(api_key=api_key)
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                max_output_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
            ),
        )

        if not response.candidates:
            raise AIError("Google Gemini returned no candidates in response")

        finish_reason = str(getattr(response.candidates[0], "finish_reason", ""))
        if "SAFETY" in finish_reason:
            raise AIError(f"Google Gemini blocked response due to safety filters: {finish_reason}")

        return response.text
