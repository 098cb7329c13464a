"""Drive a compiled pipeline from its entry step to END."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from langgraph.errors import GraphRecursionError

from newsframes.core.exceptions import PipelineRunError, StepLimitExceededError

from .builder import Pipeline

logger = logging.getLogger(__name__)

DEFAULT_STEP_LIMIT = 25


class PipelineRunner:
    """Runs one pipeline; every run starts from a fresh state record.

    The step limit is LangGraph's recursion limit. A run that exceeds it,
    or a step that raises, fails as a whole with the last fully-applied
    state attached to the exception.
    """

    def __init__(self, pipeline: Pipeline, *, step_limit: int = DEFAULT_STEP_LIMIT) -> None:
        if step_limit < 1:
            raise ValueError("step_limit must be >= 1")
        self._pipeline = pipeline
        self._step_limit = step_limit

    @property
    def step_limit(self) -> int:
        return self._step_limit

    async def run(self, initial: Mapping[str, Any]) -> dict[str, Any]:
        channels = self._pipeline.channels
        state = channels.initial(initial)
        last: dict[str, Any] = dict(state)

        try:
            async for snapshot in self._pipeline.graph.astream(
                state,
                config={"recursion_limit": self._step_limit},
                stream_mode="values",
            ):
                last = dict(snapshot)
        except GraphRecursionError as e:
            logger.error("Pipeline exceeded step limit %d", self._step_limit)
            raise StepLimitExceededError(
                self._step_limit, partial_state=channels.materialize(last)
            ) from e
        except PipelineRunError as e:
            logger.error("Pipeline run failed at step %s: %s", e.step_id, e)
            raise PipelineRunError(
                str(e), partial_state=channels.materialize(last), step_id=e.step_id
            ) from e.__cause__
        except Exception as e:
            logger.exception("Pipeline run failed")
            raise PipelineRunError(
                f"Pipeline run failed: {e}", partial_state=channels.materialize(last)
            ) from e

        return channels.materialize(last)


__all__ = ["PipelineRunner", "DEFAULT_STEP_LIMIT"]
