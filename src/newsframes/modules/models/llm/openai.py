"""OpenAI-compatible chat-completions provider over httpx.

Works against api.openai.com and any server exposing the same
`/chat/completions` endpoint (vLLM, Ollama, OpenRouter, ...).
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from langchain_core.messages import BaseMessage

from newsframes.core import Config

from ..base import BaseLLM
from ..registry import model_registry
from ..types import (
    GenerationOptions,
    ModelConfigurationError,
    ModelContentError,
    message_role,
    message_text,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"


def to_openai_messages(messages: Sequence[BaseMessage]) -> list[dict[str, str]]:
    """Developer instructions travel as system messages for compatibility."""
    out = []
    for msg in messages:
        role = message_role(msg)
        if role == "developer":
            role = "system"
        elif role not in {"system", "user", "assistant"}:
            role = "user"
        out.append({"role": role, "content": message_text(msg)})
    return out


@model_registry.register_llm("openai", "*")
class OpenAICompatLLM(BaseLLM):
    def __init__(
        self,
        config: Config,
        *,
        model_name: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        **_: object,
    ) -> None:
        self._cfg = config
        self._model_name = (model_name or DEFAULT_MODEL).strip() or DEFAULT_MODEL
        self._base_url = config.openai.base_url.rstrip("/")
        self._transport = transport

    @property
    def model_key(self) -> str:
        return f"openai/{self._model_name}"

    async def generate(
        self,
        messages: Sequence[BaseMessage],
        options: GenerationOptions,
    ) -> str:
        api_key = self._cfg.openai.api_key
        if not api_key:
            raise ModelConfigurationError("Missing OPENAI_API_KEY")

        llm = self._cfg.llm
        payload: dict[str, Any] = {
            "model": self._model_name,
            "messages": to_openai_messages(messages),
            "temperature": llm.temperature if options.temperature is None else options.temperature,
            "max_tokens": options.max_output_tokens or llm.max_output_tokens,
        }
        json_output = llm.json_output if options.json_output is None else options.json_output
        if json_output:
            payload["response_format"] = {"type": "json_object"}

        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        if self._cfg.openai.organization:
            headers["OpenAI-Organization"] = self._cfg.openai.organization

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                f"{self._base_url}/chat/completions",
                headers=headers,
                json=payload,
                timeout=options.timeout_sec or llm.timeout_sec,
            )
            response.raise_for_status()
            body_text = response.text

        try:
            data = response.json()
            content = data["choices"][0]["message"].get("content")
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise ModelContentError(
                f"Unexpected chat-completions envelope: {e}", raw_content=body_text
            ) from e

        if not isinstance(content, str) or not content.strip():
            raise ModelContentError("Model returned empty or invalid content", raw_content="")
        return content


__all__ = ["OpenAICompatLLM", "to_openai_messages"]
