"""Request/response types shared by the model layer.

Providers speak in role-tagged langchain-core messages and return raw text.
Failures that callers must handle as data are described by ``FailureResult``.
"""

from __future__ import annotations

from typing import Any, Literal, TypedDict

from langchain_core.messages import BaseMessage, ChatMessage
from pydantic import BaseModel, ConfigDict

from newsframes.core.exceptions import NewsframesError

FailureKind = Literal["transport", "status", "parse", "configuration", "input", "internal"]


class FailureResult(TypedDict, total=False):
    """Tagged failure carried through the pipeline as ordinary data."""

    error: str
    raw_content: str
    failure_kind: FailureKind


def failure_result(
    error: str,
    *,
    raw_content: str = "",
    kind: FailureKind = "parse",
) -> FailureResult:
    return {"error": error, "raw_content": raw_content, "failure_kind": kind}


def is_failure(value: Any) -> bool:
    """True when ``value`` is a ``FailureResult`` (or the legacy ``{error: ...}`` shape)."""
    return isinstance(value, dict) and isinstance(value.get("error"), str)


class GenerationOptions(BaseModel):
    """Per-call generation controls. ``None`` means "use the config default"."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    temperature: float | None = None
    max_output_tokens: int | None = None
    timeout_sec: float | None = None
    json_output: bool | None = None


class ModelError(NewsframesError):
    """Provider-level failure. Never escapes the generation client."""

    code = "MODEL_ERROR"


class ModelContentError(ModelError):
    """The service answered but the content is empty, blocked or unusable."""

    def __init__(self, message: str, *, raw_content: str = "") -> None:
        super().__init__(message)
        self.raw_content = raw_content


class ModelConfigurationError(ModelError):
    """Provider cannot be called (missing API key, bad base URL)."""

    code = "MODEL_CONFIGURATION_ERROR"


_ROLE_BY_TYPE = {"system": "system", "human": "user", "ai": "assistant"}


def message_role(message: BaseMessage) -> str:
    """Return the chat role of a message ("system", "developer", "user", ...)."""
    if isinstance(message, ChatMessage):
        return message.role.lower()
    return _ROLE_BY_TYPE.get(message.type, "user")


def message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    # Multimodal content lists: keep the text parts only.
    parts: list[str] = []
    for item in content:
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, dict) and item.get("type") == "text":
            parts.append(str(item.get("text", "")))
    return "".join(parts)


__all__ = [
    "FailureKind",
    "FailureResult",
    "failure_result",
    "is_failure",
    "GenerationOptions",
    "ModelError",
    "ModelContentError",
    "ModelConfigurationError",
    "message_role",
    "message_text",
]
