"""Placeholder codec: hide proper nouns behind bracketed tokens and restore them.

``anonymize`` is best-effort. Whatever goes wrong (service failure, malformed
reply), the caller gets the original text back with an empty map, so later
steps simply analyze the unmodified headline.

``revert`` is pure and synchronous.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from newsframes.modules.models.types import (
    FailureResult,
    GenerationOptions,
    failure_result,
    is_failure,
)

from .generation import GenerationClient

logger = logging.getLogger(__name__)

STATUS_COMPLETED = "Completed"
STATUS_NO_INPUT = "Skipped - no input text"
STATUS_NO_MAP = "Skipped - no placeholder map"

_TOKEN_RE = re.compile(r"^\[[^\[\]]+\]$")

ANONYMIZE_SYSTEM = (
    "You replace every proper noun in a news headline with a unique bracketed "
    "placeholder such as [PERSON_1], [ORG_1] or [PLACE_1]. Use a fresh token for "
    "each distinct proper noun and reuse it for repeated mentions. Respond with a "
    'JSON object: {"text_with_placeholders": "...", "properNoun_map": '
    '{"[TOKEN]": "original"}}. If there are no proper nouns, return the headline '
    "unchanged and an empty map."
)


@dataclass
class AnonymizationResult:
    text_with_placeholders: str
    mapping: dict[str, str] = field(default_factory=dict)
    raw_result: dict[str, Any] | FailureResult | None = None

    @property
    def failed(self) -> bool:
        return is_failure(self.raw_result)


@dataclass
class ReversionResult:
    status: str
    original_text_with_placeholders: str | None
    final_text: str | None
    replacements_made: dict[str, int] = field(default_factory=dict)
    map_used: dict[str, str] = field(default_factory=dict)


def _validate_reply(reply: Mapping[str, Any]) -> tuple[str, dict[str, str]] | None:
    text = reply.get("text_with_placeholders")
    mapping = reply.get("properNoun_map", {})
    if not isinstance(text, str) or not text.strip():
        return None
    if mapping is None:
        mapping = {}
    if not isinstance(mapping, dict):
        return None
    for token, original in mapping.items():
        if not isinstance(token, str) or not _TOKEN_RE.match(token):
            return None
        if not isinstance(original, str):
            return None
    return text, dict(mapping)


class PlaceholderCodec:
    """Reversible proper-noun anonymization backed by a generation call."""

    def __init__(
        self,
        client: GenerationClient,
        *,
        model_key: str | None = None,
        options: GenerationOptions | None = None,
    ) -> None:
        self._client = client
        self._model_key = model_key
        self._options = options

    @staticmethod
    def default_messages(text: str) -> list[BaseMessage]:
        return [SystemMessage(content=ANONYMIZE_SYSTEM), HumanMessage(content=text)]

    async def anonymize(
        self,
        text: str | None,
        *,
        messages: Sequence[BaseMessage] | None = None,
        model_key: str | None = None,
        options: GenerationOptions | None = None,
    ) -> AnonymizationResult:
        """Return ``text`` with proper nouns tokenized, plus the token map.

        ``messages`` overrides the built-in instruction (the headline graph
        passes its configured prompt here).
        """
        if not isinstance(text, str) or not text.strip():
            return AnonymizationResult(
                text_with_placeholders=text or "",
                raw_result=failure_result("No input text to anonymize", kind="input"),
            )

        reply = await self._client.call(
            list(messages) if messages else self.default_messages(text),
            model_key or self._model_key,
            options or self._options,
        )
        if is_failure(reply):
            logger.warning(
                "anonymize failed, using original text: %s", reply.get("error")
            )
            return AnonymizationResult(text_with_placeholders=text, raw_result=reply)

        validated = _validate_reply(reply)
        if validated is None:
            logger.warning("anonymize returned a malformed result: %s", str(reply)[:200])
            return AnonymizationResult(
                text_with_placeholders=text,
                raw_result=failure_result(
                    "Malformed anonymization result", raw_content=str(reply), kind="parse"
                ),
            )

        anonymized, mapping = validated
        logger.debug(
            "anonymize: %d placeholder(s), len=%d->%d", len(mapping), len(text), len(anonymized)
        )
        return AnonymizationResult(
            text_with_placeholders=anonymized, mapping=mapping, raw_result=reply
        )

    @staticmethod
    def revert(text: str | None, mapping: Mapping[str, str] | None) -> ReversionResult:
        """Replace every mapped token found in ``text`` with its original."""
        if not isinstance(text, str):
            return ReversionResult(
                status=STATUS_NO_INPUT,
                original_text_with_placeholders=None,
                final_text=None,
            )
        if not mapping:
            return ReversionResult(
                status=STATUS_NO_MAP,
                original_text_with_placeholders=text,
                final_text=text,
            )

        used = {str(k): str(v) for k, v in mapping.items() if k}
        # Longest first so one token can never shadow a longer one sharing its prefix.
        tokens = sorted(used, key=len, reverse=True)
        pattern = re.compile("|".join(re.escape(t) for t in tokens))

        counts: dict[str, int] = {}

        def _replace(match: re.Match[str]) -> str:
            token = match.group(0)
            counts[token] = counts.get(token, 0) + 1
            return used[token]

        final_text = pattern.sub(_replace, text)
        return ReversionResult(
            status=STATUS_COMPLETED,
            original_text_with_placeholders=text,
            final_text=final_text,
            replacements_made=counts,
            map_used=used,
        )


__all__ = [
    "AnonymizationResult",
    "ReversionResult",
    "PlaceholderCodec",
    "STATUS_COMPLETED",
    "STATUS_NO_INPUT",
    "STATUS_NO_MAP",
]
