"""Model registry for LLM providers."""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import Callable, cast

from newsframes.core import Config, get_core_config
from newsframes.core.exceptions import ConfigurationError

from .base import BaseLLM

logger = logging.getLogger(__name__)

# Built-in model mappings (lazy imports keep startup fast).
BUILTIN_LLMS: dict[str, str] = {
    "gemini/*": "newsframes.modules.models.llm.gemini.GeminiLLM",
    # Any OpenAI-compatible chat-completions server (OpenAI, vLLM, Ollama, ...)
    "openai/*": "newsframes.modules.models.llm.openai.OpenAICompatLLM",
}


@dataclass(frozen=True)
class ModelKey:
    provider: str
    name: str

    @classmethod
    def parse(cls, key: str) -> "ModelKey":
        k = (key or "").strip()
        if "/" not in k:
            raise ConfigurationError(
                f"LLM key must be 'provider/name' (e.g. 'gemini/gemini-1.5-flash'), got {key!r}"
            )
        provider, name = k.split("/", 1)
        return cls(provider=provider, name=name)

    def as_str(self) -> str:
        return f"{self.provider}/{self.name}"


class ModelRegistry:
    def __init__(self, *, builtin_map: dict[str, str] | None = None) -> None:
        self._items: dict[str, type[BaseLLM]] = {}
        self._builtin_map = dict(BUILTIN_LLMS if builtin_map is None else builtin_map)

    def register_llm(self, provider: str, name: str) -> Callable[[type[BaseLLM]], type[BaseLLM]]:
        key = ModelKey(provider=provider, name=name).as_str()

        def decorator(cls: type[BaseLLM]) -> type[BaseLLM]:
            self._items[key] = cls
            return cls

        return decorator

    def resolve(self, key: str) -> type[BaseLLM]:
        """Find the provider class for `provider/name`, importing builtins lazily."""
        mk = ModelKey.parse(key)
        wildcard = f"{mk.provider}/*"
        for candidate in (mk.as_str(), wildcard):
            if candidate in self._items:
                return self._items[candidate]
        for candidate in (mk.as_str(), wildcard):
            raw = self._builtin_map.get(candidate)
            if raw is None:
                continue
            mod_name, attr = raw.rsplit(".", 1)
            mod = importlib.import_module(mod_name)
            cls = cast(type[BaseLLM], getattr(mod, attr))
            self._items[candidate] = cls
            return cls
        raise ConfigurationError(f"llms: unknown model key '{mk.as_str()}'")

    def get_llm(self, key: str | None = None, *, config: Config | None = None) -> BaseLLM:
        cfg = config or get_core_config()
        k = key or cfg.models.default_llm
        cls = self.resolve(k)
        name = ModelKey.parse(k).name
        ctor = cast(Callable[..., BaseLLM], cls)
        return ctor(cfg, model_name=name)


model_registry = ModelRegistry()

__all__ = ["BUILTIN_LLMS", "ModelKey", "ModelRegistry", "model_registry"]
