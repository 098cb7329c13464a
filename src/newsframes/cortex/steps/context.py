"""Runtime dependencies shared by step executors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..services.generation import GenerationClient
from ..services.placeholders import PlaceholderCodec
from ..state import ChannelRegistry

if TYPE_CHECKING:
    from newsframes.modules.providers.storage.base import HeadlineStore

    from ..engine.definition import PromptTemplate


@dataclass
class StepContext:
    client: GenerationClient
    channels: ChannelRegistry
    store: "HeadlineStore | None" = None
    codec: PlaceholderCodec | None = None
    prompts: "dict[str, PromptTemplate]" = field(default_factory=dict)
    max_concurrency: int = 5
    errors_channel: str | None = "error_messages"

    def __post_init__(self) -> None:
        if self.codec is None:
            self.codec = PlaceholderCodec(self.client)

    def report_errors(self, update: dict[str, Any], messages: list[str]) -> dict[str, Any]:
        """Add ``messages`` to the error channel (when the graph registers one)."""
        if messages and self.errors_channel and self.errors_channel in self.channels:
            update[self.errors_channel] = list(messages)
        return update


__all__ = ["StepContext"]
