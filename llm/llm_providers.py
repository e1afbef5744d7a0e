# llm/llm_providers.py
import os
from typing import Dict, List, Optional, Union

from llm.openai_provider import openai_generate

# "openai" covers any server speaking the chat completions protocol (OpenAI, LM Studio, vLLM...)
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")


def generate_response(messages, **kwargs):
    if LLM_PROVIDER == "openai":
        return openai_generate(messages, **kwargs)
    raise ValueError(f"Unknown LLM_PROVIDER: {LLM_PROVIDER}")


def build_messages(
    system_prompt: str,
    user_prompt: str,
    prior_turns: Optional[List[Dict[str, str]]] = None,
) -> List[Dict[str, str]]:
    """System message first, then earlier turns in order, then the new user turn."""
    messages = [{"role": "system", "content": system_prompt}]
    for turn in prior_turns or []:
        messages.append({"role": turn["role"], "content": turn["content"]})
    messages.append({"role": "user", "content": user_prompt})
    return messages


def complete(
    system_prompt: str,
    user_prompt: str,
    prior_turns: Optional[List[Dict[str, str]]] = None,
    temperature: float = 0.7,
    max_tokens: Optional[Union[int, str]] = None,
    **_ignored,
) -> str:
    """
    Single completion for a system prompt + user prompt.

    Sampling options other than temperature/max_tokens (e.g. ``stream``) are
    accepted and ignored; responses are never streamed.
    Raises UpstreamError when the service fails or returns no content.
    """
    messages = build_messages(system_prompt, user_prompt, prior_turns)
    return generate_response(messages, temperature=temperature, max_tokens=max_tokens)
