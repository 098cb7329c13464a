"""Gemini provider (Generative Language REST API over httpx)."""

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

DEFAULT_MODEL = "gemini-1.5-flash-latest"

# Finish reasons that still carry a usable reply.
_OK_FINISH_REASONS = {"STOP", "MAX_TOKENS"}


def to_gemini_contents(messages: Sequence[BaseMessage]) -> list[dict[str, Any]]:
    """Map role-tagged messages onto Gemini `contents`.

    Gemini only knows "user" and "model": system and developer instructions
    are sent as user turns, assistant turns become "model".
    """
    contents = []
    for msg in messages:
        role = message_role(msg)
        gemini_role = "model" if role in {"assistant", "ai", "model"} else "user"
        contents.append({"role": gemini_role, "parts": [{"text": message_text(msg)}]})
    return contents


@model_registry.register_llm("gemini", "*")
class GeminiLLM(BaseLLM):
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
        self._base_url = config.gemini.base_url.rstrip("/")
        self._transport = transport

    @property
    def model_key(self) -> str:
        return f"gemini/{self._model_name}"

    def build_payload(
        self, messages: Sequence[BaseMessage], options: GenerationOptions
    ) -> dict[str, Any]:
        llm = self._cfg.llm
        generation_config: dict[str, Any] = {
            "temperature": llm.temperature if options.temperature is None else options.temperature,
            "maxOutputTokens": options.max_output_tokens or llm.max_output_tokens,
        }
        json_output = llm.json_output if options.json_output is None else options.json_output
        if json_output:
            generation_config["responseMimeType"] = "application/json"
        return {"contents": to_gemini_contents(messages), "generationConfig": generation_config}

    async def generate(
        self,
        messages: Sequence[BaseMessage],
        options: GenerationOptions,
    ) -> str:
        api_key = self._cfg.gemini.api_key
        if not api_key:
            raise ModelConfigurationError("Missing GEMINI_API_KEY")

        payload = self.build_payload(messages, options)
        url = f"{self._base_url}/models/{self._model_name}:generateContent"
        timeout = options.timeout_sec or self._cfg.llm.timeout_sec

        logger.debug("Gemini request: model=%s, messages=%d", self._model_name, len(messages))

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                url,
                headers={"Content-Type": "application/json", "x-goog-api-key": api_key},
                json=payload,
                timeout=timeout,
            )
            response.raise_for_status()
            body_text = response.text

        return self._extract_text(response, body_text)

    def _extract_text(self, response: httpx.Response, body_text: str) -> str:
        try:
            data = response.json()
            candidate = (data.get("candidates") or [{}])[0]
            parts = (candidate.get("content") or {}).get("parts") or [{}]
            finish_reason = candidate.get("finishReason")
        except (ValueError, AttributeError, IndexError, TypeError) as e:
            raise ModelContentError(
                f"Gemini returned an unexpected envelope: {e}", raw_content=body_text
            ) from e

        raw = parts[0].get("text") if isinstance(parts[0], dict) else None

        if finish_reason and finish_reason not in _OK_FINISH_REASONS:
            logger.warning("Gemini %s finished with reason: %s", self._model_name, finish_reason)
            if finish_reason == "SAFETY":
                message = "Content generation stopped due to safety settings."
            elif finish_reason == "RECITATION":
                message = "Content generation stopped due to recitation policy."
            else:
                message = f"Content generation stopped due to: {finish_reason}."
            raise ModelContentError(message, raw_content=raw or f"Blocked by {finish_reason}.")

        if not isinstance(raw, str) or not raw.strip():
            raise ModelContentError(
                "Model returned empty or invalid content", raw_content=raw or ""
            )
        return raw


__all__ = ["GeminiLLM", "to_gemini_contents"]
