"""Base interface for text-generation providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from langchain_core.messages import BaseMessage

from .types import GenerationOptions


class BaseLLM(ABC):
    """Text-generation provider.

    Providers must implement `generate()`, which returns the raw reply text.
    They raise on failure (httpx errors or `ModelError` subclasses); turning
    failures into data is the generation client's job, not theirs.
    """

    @property
    @abstractmethod
    def model_key(self) -> str:
        """`provider/model` key this instance serves."""
        raise NotImplementedError

    @abstractmethod
    async def generate(
        self,
        messages: Sequence[BaseMessage],
        options: GenerationOptions,
    ) -> str:
        """Send the messages and return the reply text."""
        raise NotImplementedError


__all__ = ["BaseLLM"]
