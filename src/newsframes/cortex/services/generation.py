"""Generation client: one structured-output call to a text-generation service.

Every failure the service can produce is normalized into a ``FailureResult``
so callers need a single ``is_failure`` branch:

- transport: timeouts, connection resets, DNS errors, bad encodings, redirect loops
- status: the service answered with a non-success HTTP status
- parse: the reply was blocked, empty, or has no JSON object in it
- configuration: the provider cannot be called at all (missing API key)
- internal: anything else the provider raised (invalid URL, provider bug)
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import httpx
from langchain_core.messages import BaseMessage

from newsframes.core import Config, get_core_config
from newsframes.modules.models import BaseLLM, ModelRegistry, model_registry
from newsframes.modules.models.types import (
    FailureResult,
    GenerationOptions,
    ModelConfigurationError,
    ModelContentError,
    failure_result,
)

from ..utils.json import extract_json_object

logger = logging.getLogger(__name__)

_MAX_ERROR_BODY = 500


class GenerationClient:
    """Calls the configured provider and parses its reply as a JSON object."""

    def __init__(
        self,
        config: Config | None = None,
        *,
        registry: ModelRegistry | None = None,
    ) -> None:
        self._cfg = config or get_core_config()
        self._registry = registry or model_registry
        self._providers: dict[str, BaseLLM] = {}

    @property
    def default_model(self) -> str:
        return self._cfg.models.default_llm

    def provider(self, model_key: str | None = None) -> BaseLLM:
        """Return (and cache) the provider for ``model_key``.

        Raises ``ConfigurationError`` for unknown keys, which is why the
        pipeline builder resolves every configured model up front.
        """
        key = model_key or self.default_model
        llm = self._providers.get(key)
        if llm is None:
            llm = self._registry.get_llm(key, config=self._cfg)
            self._providers[key] = llm
        return llm

    async def call(
        self,
        messages: Sequence[BaseMessage],
        model_key: str | None = None,
        options: GenerationOptions | None = None,
    ) -> dict[str, Any] | FailureResult:
        llm = self.provider(model_key)
        opts = options or GenerationOptions()

        try:
            text = await llm.generate(messages, opts)
        except httpx.TimeoutException as e:
            logger.warning("%s: request timed out: %s", llm.model_key, e)
            return failure_result(
                f"Model API request timed out: {e}", kind="transport"
            )
        except httpx.HTTPStatusError as e:
            body = e.response.text[:_MAX_ERROR_BODY]
            logger.warning(
                "%s: API error %s: %s", llm.model_key, e.response.status_code, body
            )
            return failure_result(
                f"Model API error: {e.response.status_code}. Details: {body}",
                raw_content=e.response.text,
                kind="status",
            )
        except httpx.RequestError as e:
            # Connection errors plus decoding and redirect failures.
            logger.warning("%s: transport failure: %s", llm.model_key, e)
            return failure_result(f"Model API unreachable: {e}", kind="transport")
        except ModelConfigurationError as e:
            logger.warning("%s: %s", llm.model_key, e)
            return failure_result(str(e), kind="configuration")
        except ModelContentError as e:
            logger.warning("%s: %s", llm.model_key, e)
            return failure_result(str(e), raw_content=e.raw_content, kind="parse")
        except Exception as e:
            logger.exception("%s: unexpected provider failure", llm.model_key)
            return failure_result(
                f"Unexpected model API failure: {type(e).__name__}: {e}", kind="internal"
            )

        parsed = extract_json_object(text)
        if parsed is None:
            logger.warning(
                "%s: reply is not a JSON object: %s", llm.model_key, text[:200]
            )
            return failure_result(
                "Failed to parse JSON from model response", raw_content=text, kind="parse"
            )
        return parsed


__all__ = ["GenerationClient"]
