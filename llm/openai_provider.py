# llm/openai_provider.py
from functools import lru_cache

import openai
from openai import OpenAI

from core.config import get_settings
from core.errors import UpstreamError
from core.logger import get_logger

logger = get_logger("llm.openai")

_COMPLETIONS_SUFFIX = "/chat/completions"


def base_url_from_endpoint(endpoint: str) -> str:
    """The SDK wants the API root; AI_API_URL may point at the full completions route."""
    url = endpoint.rstrip("/")
    if url.endswith(_COMPLETIONS_SUFFIX):
        url = url[: -len(_COMPLETIONS_SUFFIX)]
    return url


@lru_cache(maxsize=1)
def get_client() -> OpenAI:
    settings = get_settings()
    # no retries: a failed call is the caller's cue to fall back, not to resubmit
    return OpenAI(
        api_key=settings.ai_api_key,
        base_url=base_url_from_endpoint(settings.ai_api_url),
        max_retries=0,
    )


def openai_generate(messages, model=None, max_tokens=None, temperature=0.7, client=None):
    # messages: list of {"role":"system"/"user"/"assistant","content": "..."}
    client = client or get_client()
    model = model or get_settings().ai_model

    request = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
        "stream": False,
    }
    # None, -1 and "unbounded" mean "let the server decide"
    if isinstance(max_tokens, int) and max_tokens >= 0:
        request["max_tokens"] = max_tokens

    try:
        resp = client.chat.completions.create(**request)
    except openai.OpenAIError as exc:
        logger.error("Completion request failed: %s", exc)
        raise UpstreamError(f"completion request failed: {exc}") from exc

    try:
        content = resp.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as exc:
        raise UpstreamError("completion response has no choices[0].message.content") from exc
    if content is None:
        raise UpstreamError("completion response has no choices[0].message.content")
    return content
