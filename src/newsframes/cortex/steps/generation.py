"""Generation step executor."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping

from newsframes.modules.models.types import is_failure

from ..engine.definition import GenerationStep
from ..utils.templates import render_template, resolve_path
from .context import StepContext
from .prompts import build_messages

logger = logging.getLogger(__name__)

StepFn = Callable[[Mapping[str, Any]], Awaitable[dict[str, Any]]]


def upstream_error_flags(state: Mapping[str, Any], upstream: Mapping[str, str]) -> dict[str, bool]:
    """``<name>_had_error`` for every upstream field; missing counts as failed."""
    flags: dict[str, bool] = {}
    for name, field_name in upstream.items():
        value = state.get(field_name)
        flags[f"{name}_had_error"] = value is None or is_failure(value)
    return flags


def make_generation_step(step: GenerationStep, ctx: StepContext) -> StepFn:
    prompt = ctx.prompts[step.prompt]
    options = prompt.options()

    async def run(state):
        data: dict[str, Any] = dict(state)
        flags: dict[str, bool] = {}
        if step.upstream:
            flags = upstream_error_flags(state, step.upstream)
            failed_count = sum(flags.values())
            if failed_count:
                logger.info(
                    "%s: %d of %d upstream analyses failed", step.id, failed_count, len(flags)
                )
            data.update(flags)
            if step.flags_key:
                data[step.flags_key] = flags

        result = await ctx.client.call(build_messages(prompt, data), prompt.model, options)
        failed = is_failure(result)

        update: dict[str, Any] = {step.output_key: result}
        if step.flags_key:
            update[step.flags_key] = flags

        errors: list[str] = []
        if failed:
            logger.warning("%s failed: %s", step.id, result.get("error"))
            errors.append(f"{step.display_name}: {result.get('error')}")

        for target, path in step.output_mapping.items():
            value = None
            if not failed:
                value = result if path == "." else resolve_path(result, path)
            if value is None and target in step.fallback:
                reason = result.get("error") if failed else f"'{path}' missing from result"
                value = render_template(step.fallback[target], {**data, "error": reason})
            update[target] = value

        return ctx.report_errors(update, errors)

    return run


__all__ = ["make_generation_step", "upstream_error_flags"]
