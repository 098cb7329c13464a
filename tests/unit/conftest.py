"""Shared fakes for unit tests.

Providers are faked at the `BaseLLM` seam so the real `GenerationClient`
(JSON extraction, failure normalization) is exercised by every test.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable

import pytest
from langchain_core.messages import BaseMessage

from newsframes.core.config import Config
from newsframes.core.exceptions import StorageError
from newsframes.cortex.services.generation import GenerationClient
from newsframes.modules.models.base import BaseLLM
from newsframes.modules.models.registry import ModelRegistry
from newsframes.modules.models.types import GenerationOptions, message_text
from newsframes.modules.providers.storage.base import HeadlineRecord, HeadlineStore

Responder = Callable[[list[BaseMessage]], Any]


class ScriptedLLM(BaseLLM):
    """Replies via a responder: dict -> JSON text, str -> as-is, exception -> raised."""

    def __init__(self, config: Config, *, model_name: str | None = None, responder: Responder) -> None:
        self._name = model_name or "test"
        self._responder = responder
        self.calls: list[list[BaseMessage]] = []
        self.options: list[GenerationOptions] = []

    @property
    def model_key(self) -> str:
        return f"fake/{self._name}"

    async def generate(self, messages, options) -> str:
        self.calls.append(list(messages))
        self.options.append(options)
        reply = self._responder(list(messages))
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, dict):
            return json.dumps(reply)
        return reply


class FailingStore(HeadlineStore):
    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or StorageError("database unavailable")
        self.attempts = 0

    async def save(self, record: HeadlineRecord) -> str:
        self.attempts += 1
        raise self.exc

    async def get(self, headline_id: str) -> HeadlineRecord | None:
        return None


def _cfg() -> Config:
    return Config.model_validate({"models": {"default_llm": "fake/test"}})


def make_client(responder: Responder, config: Config | None = None) -> GenerationClient:
    registry = ModelRegistry(builtin_map={})

    @registry.register_llm("fake", "*")
    class _Scripted(ScriptedLLM):
        def __init__(self, cfg: Config, *, model_name: str | None = None, **_: object) -> None:
            super().__init__(cfg, model_name=model_name, responder=responder)

    return GenerationClient(config or _cfg(), registry=registry)


def all_text(messages: list[BaseMessage]) -> str:
    return "\n".join(message_text(m) for m in messages)


# Markers that identify each bundled prompt (checked in order).
_ROUTES = [
    ("synthesizer", "Compare the analyses"),
    ("anonymizer", "properNoun_map"),
    ("cognitive_frames", "cognitive frames"),
    ("speculative_reframing", "speculative reinterpretation"),
    ("euphemism", "euphemistic"),
    ("episodic_thematic", "episodic or thematic"),
    ("violence_type", "type of violence"),
]

_QUOTED = re.compile(r'"([^"]*)"\s*$')


def route(messages: list[BaseMessage]) -> str:
    text = all_text(messages)
    for name, marker in _ROUTES:
        if marker in text:
            return name
    raise AssertionError(f"unrouted prompt: {text[:200]}")


def _default_reply(name: str, messages: list[BaseMessage]) -> dict[str, Any]:
    user = message_text(messages[-1])
    match = _QUOTED.search(user)
    headline = match.group(1) if match else user
    if name == "anonymizer":
        return {"original_text": headline, "text_with_placeholders": headline, "properNoun_map": {}}
    if name == "synthesizer":
        return {
            "headline": headline,
            "comparison": "The analyses agree the headline is episodic and direct.",
            "flipped_headline": "Unleashed dog injures child as owners face questions",
        }
    if name == "speculative_reframing":
        return {
            "headline": headline,
            "frame_type": "speculative",
            "reframed": f"{headline} (because the dog was a spy)",
            "explanation": "Espionage.",
        }
    if name in ("episodic_thematic", "violence_type"):
        return {
            "headline": headline,
            "frame_type": "episodic" if name == "episodic_thematic" else "direct",
            "explanation": "Single incident.",
            "alternative_headline": f"Alternative to: {headline}",
        }
    if name == "euphemism":
        return {"headline": headline, "frame_type": "euphemism", "euphemisms": []}
    return {"headline": headline, "frames": [{"frame_type": "Conflict", "summary": "..."}]}


def headline_responder(overrides: dict[str, Any] | None = None) -> Responder:
    """Responder for the bundled headline graph; ``overrides`` maps prompt -> reply."""
    overrides = overrides or {}

    def respond(messages: list[BaseMessage]) -> Any:
        name = route(messages)
        if name in overrides:
            reply = overrides[name]
            return reply(messages) if callable(reply) else reply
        return _default_reply(name, messages)

    return respond


@pytest.fixture
def test_config() -> Config:
    return _cfg()


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


@pytest.fixture
def client_factory() -> Callable[..., GenerationClient]:
    """``client_factory(responder, config=None)`` -> GenerationClient over a ScriptedLLM."""
    return make_client


@pytest.fixture
def responder_factory() -> Callable[..., Responder]:
    """``responder_factory(overrides=None)`` -> responder for the bundled headline graph."""
    return headline_responder


@pytest.fixture
def prompt_router() -> Callable[[list[BaseMessage]], str]:
    return route
