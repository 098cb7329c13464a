"""Parallel analysis group: fan out N generation calls, wait for all to settle."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from newsframes.modules.models.types import failure_result, is_failure

from ..engine.definition import AnalysisTask, ParallelGroupStep
from .context import StepContext
from .generation import StepFn
from .prompts import build_messages

logger = logging.getLogger(__name__)


def pick_input(state: Mapping[str, Any], fields: list[str]) -> str | None:
    """First non-empty string among ``fields``."""
    for name in fields:
        value = state.get(name)
        if isinstance(value, str) and value.strip():
            return value
    return None


def make_parallel_group_step(step: ParallelGroupStep, ctx: StepContext) -> StepFn:
    limit = step.max_concurrency or ctx.max_concurrency

    async def run(state):
        text = pick_input(state, step.input_fields)
        update: dict[str, Any] = {step.target_key: text}

        if text is None:
            logger.warning("%s: no text to analyze in %s", step.id, step.input_fields)
            for task in step.tasks:
                update[task.output_key] = failure_result(
                    "No headline available for analysis", kind="input"
                )
            return ctx.report_errors(
                update, [f"{step.display_name}: no headline available for analysis"]
            )

        data = {**state, step.target_key: text}
        semaphore = asyncio.Semaphore(limit)

        async def run_task(task: AnalysisTask) -> Any:
            prompt = ctx.prompts[task.prompt]
            async with semaphore:
                return await ctx.client.call(
                    build_messages(prompt, data), prompt.model, prompt.options()
                )

        logger.info("%s: running %d analyses (max %d at once)", step.id, len(step.tasks), limit)
        results = await asyncio.gather(
            *(run_task(task) for task in step.tasks),
            return_exceptions=True,
        )

        errors: list[str] = []
        for task, result in zip(step.tasks, results):
            if isinstance(result, BaseException):
                logger.error("%s: analysis %s raised: %s", step.id, task.name, result)
                result = failure_result(f"Unexpected error: {result}", kind="internal")
            if is_failure(result):
                errors.append(f"{task.name} analysis failed: {result['error']}")
            update[task.output_key] = result

        if errors:
            logger.warning("%s: %d of %d analyses failed", step.id, len(errors), len(step.tasks))
        return ctx.report_errors(update, errors)

    return run


__all__ = ["make_parallel_group_step", "pick_input"]
