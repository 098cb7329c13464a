"""Exception hierarchy for newsframes.

Usage:
    from newsframes.core.exceptions import ConfigurationError, PipelineRunError

Upstream service failures are deliberately absent here: the generation
client turns them into ``FailureResult`` values instead of raising.
"""

from __future__ import annotations

from typing import Any


class NewsframesError(Exception):
    """Base exception for newsframes."""

    code: str = "INTERNAL_ERROR"


class ConfigurationError(NewsframesError):
    """Graph definition, prompt, function or model reference is invalid.

    Raised while building the pipeline; a run never starts with a broken graph.
    """

    code = "CONFIGURATION_ERROR"


class ChannelError(ConfigurationError):
    """A step tried to read or write a field that has no registered channel."""

    code = "CHANNEL_ERROR"


class StorageError(NewsframesError):
    """Persistence store failed to write or read a record."""

    code = "STORAGE_ERROR"


class PipelineRunError(NewsframesError):
    """A run failed as a whole.

    Carries the last fully-applied state so callers can diagnose how far
    the run got.
    """

    code = "PIPELINE_RUN_ERROR"

    def __init__(
        self,
        message: str,
        *,
        partial_state: dict[str, Any] | None = None,
        step_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.partial_state: dict[str, Any] = dict(partial_state or {})
        self.step_id = step_id


class StepLimitExceededError(PipelineRunError):
    """The run executed more steps than the configured ceiling allows."""

    code = "STEP_LIMIT_EXCEEDED"

    def __init__(
        self,
        limit: int,
        *,
        partial_state: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            f"Step limit of {limit} exceeded before reaching END "
            "(check the graph for cycles)",
            partial_state=partial_state,
        )
        self.limit = limit


__all__ = [
    "NewsframesError",
    "ConfigurationError",
    "ChannelError",
    "StorageError",
    "PipelineRunError",
    "StepLimitExceededError",
]
