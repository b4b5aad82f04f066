from dataclasses import dataclass
from typing import Any, Dict, Tuple, Union

import httpx
from openai import AsyncOpenAI, APIStatusError

from .config import Settings
from .logger import logger
from .tag_parser import MAX_TAGS

SYSTEM_PROMPT = (
    "You are an assistant that returns a JSON array of short keyword tags for videos. "
    'Return ONLY a JSON object like: {"tags": ["tag1","tag2",...] } . No extra explanation.'
)

MAX_TOKENS = 400
TEMPERATURE = 0.35

Prompt = Tuple[Dict[str, str], ...]


@dataclass(frozen=True)
class CompletionOk:
    content: str


@dataclass(frozen=True)
class CompletionFailed:
    status_code: int
    detail: str


CompletionResult = Union[CompletionOk, CompletionFailed]


def build_prompt(q: str, mode: str) -> Prompt:
    user = (
        f'Generate up to {MAX_TAGS} unique short tags for this query: "{q}". Mode: {mode}. '
        "Tags should be short (1-4 words), comma-free, and lowercase. "
        "Prefer long-tail tags for better targeting. Return only JSON as described."
    )
    return (
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user},
    )


def _first_choice_content(completion: Any) -> str:
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ""
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None) or ""


class TagCompletionClient:
    """
    Single-shot chat completion against OpenAI or an OpenAI-compatible
    base_url (Groq, OpenRouter, Ollama, etc.). SDK retries are disabled.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        kwargs: Dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if base_url:
            kwargs["base_url"] = base_url
        if http_client is not None:
            kwargs["http_client"] = http_client
        self.model = model
        self._client = AsyncOpenAI(**kwargs)

    @classmethod
    def from_settings(cls, settings: Settings, http_client: httpx.AsyncClient | None = None) -> "TagCompletionClient":
        return cls(
            api_key=settings.OPENAI_API_KEY or "",
            model=settings.OPENAI_MODEL,
            base_url=settings.OPENAI_BASE_URL,
            http_client=http_client,
        )

    async def complete(self, prompt: Prompt) -> CompletionResult:
        try:
            completion = await self._client.chat.completions.create(
                model=self.model,
                messages=list(prompt),
                max_tokens=MAX_TOKENS,
                temperature=TEMPERATURE,
                n=1,
            )
        except APIStatusError as e:
            logger.warning(f"Upstream completion API returned {e.status_code}")
            return CompletionFailed(status_code=e.status_code, detail=e.response.text)
        return CompletionOk(content=_first_choice_content(completion))

    async def aclose(self) -> None:
        await self._client.close()
