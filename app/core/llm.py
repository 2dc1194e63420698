"""LLM capability used by the generation pipeline.

The pipeline only needs "given a model, messages and a token bound, return
text plus usage". ``PydanticAIChatClient`` provides that through a plain-text
pydantic-ai ``Agent``; provider imports stay lazy so a missing optional
provider package only fails when that provider is selected.
"""

from __future__ import annotations

from typing import Any, Callable, Literal, Optional, Protocol

from pydantic import BaseModel, Field
from pydantic_ai import Agent

from app.core.config import settings
from app.core.errors import UpstreamFailure
from app.core.logging import get_logger

logger = get_logger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class ChatMessage(BaseModel):
    role: Literal["system", "user"]
    content: str


class PromptSpec(BaseModel):
    """Everything needed for one model call."""

    model: str
    max_tokens: int
    messages: list[ChatMessage] = Field(default_factory=list)

    @property
    def system_prompts(self) -> list[str]:
        return [m.content for m in self.messages if m.role == "system"]

    @property
    def user_prompt(self) -> str:
        return "\n\n".join(m.content for m in self.messages if m.role == "user")


class TokenUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class Completion(BaseModel):
    text: str
    usage: TokenUsage = Field(default_factory=TokenUsage)


class ChatClient(Protocol):
    async def complete(self, prompt: PromptSpec) -> Completion: ...


def _build_groq_model(model_name: str):
    """Build the Groq model provider (lazy import)."""
    from pydantic_ai.models.groq import GroqModel
    from pydantic_ai.providers.groq import GroqProvider

    if not settings.groq_api_key:
        raise RuntimeError(
            "Groq API key not configured. Set GROQ_API_KEY in your environment."
        )
    provider = GroqProvider(api_key=settings.groq_api_key)
    return GroqModel(model_name, provider=provider)


def _build_google_model(model_name: str):
    """Build the Google Gemini model provider (lazy import)."""
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    provider = GoogleProvider(api_key=settings.gemini_api_key)
    return GoogleModel(model_name, provider=provider)


def _build_openrouter_model(model_name: str):
    """Build an OpenRouter model via the OpenAI-compatible provider (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not settings.openrouter_api_key:
        raise RuntimeError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    provider = OpenAIProvider(
        api_key=settings.openrouter_api_key,
        base_url=OPENROUTER_BASE_URL,
    )
    return OpenAIChatModel(settings.openrouter_model or model_name, provider=provider)


def build_model_by_settings(model_name: str):
    """Return a pydantic-ai Model for ``model_name`` on the configured provider."""
    provider = (settings.llm.provider or "groq").lower()
    if provider == "google":
        return _build_google_model(model_name)
    if provider == "openrouter":
        return _build_openrouter_model(model_name)
    return _build_groq_model(model_name)


def _usage_from_run(result: Any) -> TokenUsage:
    # A method on pydantic-ai 1.x, a property on later releases
    usage = result.usage
    if callable(usage):
        usage = usage()
    prompt_tokens = usage.input_tokens or 0
    completion_tokens = usage.output_tokens or 0
    return TokenUsage(
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        total_tokens=prompt_tokens + completion_tokens,
    )


class PydanticAIChatClient:
    """Runs one prompt through a text-output pydantic-ai agent."""

    def __init__(self, model_factory: Optional[Callable[[str], Any]] = None) -> None:
        self._model_factory = model_factory or build_model_by_settings

    async def complete(self, prompt: PromptSpec) -> Completion:
        try:
            model = self._model_factory(prompt.model)
            agent: Agent[None, str] = Agent[None, str](
                model,
                output_type=str,
                system_prompt=prompt.system_prompts,
            )
            res = await agent.run(
                prompt.user_prompt,
                model_settings={"max_tokens": prompt.max_tokens},
            )
            usage = _usage_from_run(res)
        except Exception as e:
            logger.error(f"Model call to {prompt.model} failed: {e}")
            raise UpstreamFailure("Model request failed", details=str(e)) from e

        return Completion(text=res.output or "", usage=usage)
