"""Base classes and shared utilities for AI description providers."""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, field_validator

from commitgenie.diff_utils import truncate_diff
from commitgenie.llm.exceptions import AIError, MissingAPIKeyError
from commitgenie.models import ClassificationResult, GroupedFileChanges

MAX_TOKENS = 100
TEMPERATURE = 0.3

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-haiku-20240307",
    "google": "gemini-1.5-flash",
}

API_KEY_ENV_VARS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GOOGLE_API_KEY",
}

PROMPT_TEMPLATE = """You are a helpful assistant that generates concise, professional git commit messages following the Conventional Commits specification.

Given the following git diff and file changes, generate a commit message description (NOT the full message, just the description after the type: prefix).

FILE CHANGES:
{file_changes}

DETECTED COMMIT TYPE: {commit_type}
{scope_line}
{breaking_line}

GIT DIFF:
{diff}

RULES:
1. Write a clear, concise description (max 50 characters ideal, 72 max)
2. Use lowercase and imperative mood (e.g., "add", "fix", "update", not "added", "fixes", "updated")
3. Don't end with a period
4. Focus on WHAT changed and WHY, not HOW
5. Be specific but brief

Respond with ONLY the description text, nothing else. No quotes, no type prefix, just the description."""


@dataclass(frozen=True)
class AIRequest:
    """Everything sent to an AI provider: the truncated diff and a summary."""

    diff: str
    commit_type: str
    scope: Optional[str] = None
    is_breaking: bool = False
    file_changes: GroupedFileChanges = field(default_factory=GroupedFileChanges)

    @classmethod
    def from_classification(cls, classification: ClassificationResult, diff_text: str) -> "AIRequest":
        return cls(
            diff=truncate_diff(diff_text),
            commit_type=classification.commit_type.value,
            scope=classification.scope,
            is_breaking=classification.is_breaking_change,
            file_changes=classification.file_changes,
        )


class AIResponse(BaseModel):
    """A provider's answer, normalised to a single lowercase line."""

    description: str

    @field_validator("description", mode="before")
    @classmethod
    def normalize_description(cls, v):
        """Keep the first line, drop wrapping quotes and a trailing period."""
        text = str(v or "").strip().split("\n")[0].strip()
        text = text.strip("\"'`").strip().rstrip(".").strip()
        if not text:
            raise ValueError("description must not be empty")
        return text.lower()


def build_prompt(request: AIRequest) -> str:
    """Build the provider prompt for a request.

    Args:
        request: The AI request.

    Returns:
        The formatted prompt.
    """
    changes = request.file_changes
    file_lines = [
        *(f"+ {path} (added)" for path in changes.added),
        *(f"~ {path} (modified)" for path in changes.modified),
        *(f"- {path} (deleted)" for path in changes.deleted),
        *(f"-> {path} (renamed)" for path in changes.renamed),
    ]
    return PROMPT_TEMPLATE.format(
        file_changes="\n".join(file_lines),
        commit_type=request.commit_type,
        scope_line=f"DETECTED SCOPE: {request.scope}" if request.scope else "",
        breaking_line="THIS IS A BREAKING CHANGE" if request.is_breaking else "",
        diff=request.diff,
    )


class BaseAIProvider(ABC):
    """Abstract base class for AI description providers."""

    name: str = ""

    def __init__(self, model: str | None = None, api_key: str | None = None):
        """Initialize the provider.

        Args:
            model: The model to use. Defaults to the provider's default model.
            api_key: Explicit API key; falls back to the environment.
        """
        self.model = model or DEFAULT_MODELS[self.name]
        self._api_key = api_key

    def get_api_key(self) -> str:
        """Get the API key from configuration or the environment.

        Returns:
            The API key string.

        Raises:
            MissingAPIKeyError: If the API key is not found.
        """
        if self._api_key:
            return self._api_key
        env_var_name = API_KEY_ENV_VARS[self.name]
        api_key = os.getenv(env_var_name)
        if api_key:
            return api_key
        raise MissingAPIKeyError(
            f"{self.name} API key not found. Set ai.apiKey in the config file "
            f"or export {env_var_name}=your_key_here"
        )

    @abstractmethod
    async def _complete(self, prompt: str, api_key: str) -> Optional[str]:
        """Send the prompt and return the raw text answer, if any."""
        pass

    async def generate_description(self, request: AIRequest) -> AIResponse:
        """Generate a commit description for the request.

        Args:
            request: The AI request.

        Returns:
            The normalised AIResponse.

        Raises:
            MissingAPIKeyError: If the API key is not set.
            AIError: For API failures or empty answers.
        """
        api_key = self.get_api_key()
        prompt = build_prompt(request)

        try:
            raw_response = await self._complete(prompt, api_key)
        except AIError:
            raise
        except Exception as e:
            raise AIError(f"{self.name} API call failed: {e}")

        try:
            return AIResponse(description=raw_response)
        except ValueError:
            raise AIError(f"{self.name} returned an empty response")
