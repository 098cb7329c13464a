"""Deterministic function steps and their registry.

A function step is ``fn(state, ctx, params) -> update``; ``params`` comes
from the step definition, so one function can back several steps (the
per-analyzer reverters all use ``revert_placeholders``). Functions may be
sync or async.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Awaitable, Callable, Mapping, Union

from newsframes.core.exceptions import ConfigurationError, StorageError
from newsframes.modules.models.types import is_failure
from newsframes.modules.providers.storage.base import HeadlineRecord

from ..utils.templates import resolve_path
from .context import StepContext
from .prompts import build_messages

logger = logging.getLogger(__name__)

MISSING_MARKER = "N/A"
NOT_APPLICABLE_MARKER = "Not applicable (analysis failed)"
UNAVAILABLE_PREFIX = "Alternative perspective unavailable"

StepFunction = Callable[
    [Mapping[str, Any], StepContext, Mapping[str, Any]],
    Union[dict[str, Any], Awaitable[dict[str, Any]]],
]


class FunctionRegistry:
    def __init__(self) -> None:
        self._items: dict[str, StepFunction] = {}

    def register(self, name: str) -> Callable[[StepFunction], StepFunction]:
        def decorator(fn: StepFunction) -> StepFunction:
            self._items[name] = fn
            return fn

        return decorator

    def get(self, name: str) -> StepFunction:
        try:
            return self._items[name]
        except KeyError:
            raise ConfigurationError(f"Local function '{name}' is not registered") from None

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def names(self) -> list[str]:
        return sorted(self._items)


function_registry = FunctionRegistry()
register_function = function_registry.register


@register_function("anonymize_headline")
async def anonymize_headline(state, ctx: StepContext, params):
    """Replace proper nouns with placeholders; falls back to the original text."""
    source = params.get("source", "input_headline")
    target = params.get("target", "headline_with_placeholders")
    map_key = params.get("map_key", "properNoun_map")
    result_key = params.get("result_key", "anonymization_result")

    text = state.get(source)
    messages = model_key = options = None
    prompt_name = params.get("prompt")
    if prompt_name:
        prompt = ctx.prompts[prompt_name]
        model_key, options = prompt.model, prompt.options()
        if isinstance(text, str):
            messages = build_messages(prompt, {**state, "text": text})

    result = await ctx.codec.anonymize(
        text, messages=messages, model_key=model_key, options=options
    )

    update = {
        target: result.text_with_placeholders,
        map_key: result.mapping,
        result_key: result.raw_result,
    }
    errors = []
    if result.failed:
        errors.append(f"Anonymization: {result.raw_result.get('error')}")
    logger.info("anonymize_headline: %d placeholder(s)", len(result.mapping))
    return ctx.report_errors(update, errors)


@register_function("revert_placeholders")
def revert_placeholders(state, ctx: StepContext, params):
    """Restore proper nouns in one text field.

    When ``analysis`` names a field holding a failure, the target gets the
    not-applicable marker instead.
    """
    source = params.get("source", "main_flipped_headline_with_placeholders")
    target = params.get("target", "flipped_headline")
    details_key = params.get("details")
    analysis = params.get("analysis")
    map_key = params.get("map_key", "properNoun_map")

    update: dict[str, Any] = {}
    if analysis and is_failure(state.get(analysis)):
        logger.info("revert_placeholders: %s failed, skipping %s", analysis, target)
        update[target] = NOT_APPLICABLE_MARKER
        if details_key:
            update[details_key] = {
                "status": f"Skipped - {analysis} failed",
                "original_text_with_placeholders": None,
                "final_text": NOT_APPLICABLE_MARKER,
                "replacements_made": {},
                "map_used": {},
            }
        return update

    text = resolve_path(state, source)
    mapping = state.get(map_key) or {}
    result = ctx.codec.revert(text, mapping)
    logger.info(
        "revert_placeholders: %s -> %s (%s, %d replacement(s))",
        source,
        target,
        result.status,
        sum(result.replacements_made.values()),
    )

    update[target] = result.final_text
    if details_key:
        update[details_key] = asdict(result)
    return update


@register_function("collect_for_storage")
def collect_for_storage(state, ctx: StepContext, params):
    """Gather the fields to persist into one flat package."""
    fields: Mapping[str, str] = params.get("fields", {})
    required = params.get("required", [])
    target = params.get("target", "data_package_for_saver")

    package: dict[str, Any] = {}
    for key, path in fields.items():
        value = resolve_path(state, path)
        package[key] = MISSING_MARKER if value is None else value

    missing = [key for key in required if package.get(key, MISSING_MARKER) == MISSING_MARKER]
    if missing:
        logger.warning("collect_for_storage: required field(s) missing: %s", missing)
    return {target: package}


def clean_flipped_headline(text: str) -> str:
    if text.startswith(UNAVAILABLE_PREFIX):
        return UNAVAILABLE_PREFIX
    return text


@register_function("save_record")
async def save_record(state, ctx: StepContext, params):
    """Persist the collected package; failures become a status object."""
    source = params.get("source", "data_package_for_saver")
    target = params.get("target", "db_save_status")

    package = dict(state.get(source) or {})
    input_headline = package.pop("input_headline", None)
    flipped = package.pop("flipped_headline", None)

    if not isinstance(input_headline, str) or input_headline in ("", MISSING_MARKER):
        return {target: {"success": False, "message": "Missing input headline; nothing saved"}}
    if not isinstance(flipped, str) or flipped in ("", MISSING_MARKER):
        return {target: {"success": False, "message": "Missing flipped headline; nothing saved"}}
    if ctx.store is None:
        return {target: {"success": False, "message": "No persistence store configured"}}

    record = HeadlineRecord(
        input_headline=input_headline,
        flipped_headline=clean_flipped_headline(flipped),
        snapshots=package,
    )
    try:
        headline_id = await ctx.store.save(record)
    except StorageError as e:
        logger.error("save_record: store rejected the record: %s", e)
        return {target: {"success": False, "message": f"Failed to save: {e}"}}
    except Exception as e:
        logger.exception("save_record: unexpected store failure")
        return {target: {"success": False, "message": f"Failed to save: {e}"}}

    logger.info("save_record: stored %s", headline_id)
    return {
        target: {
            "success": True,
            "headline_id": headline_id,
            "saved_item_keys": sorted(record.model_dump(exclude={"snapshots"}))
            + sorted(f"snapshots.{k}" for k in package),
        }
    }


__all__ = [
    "FunctionRegistry",
    "function_registry",
    "register_function",
    "anonymize_headline",
    "revert_placeholders",
    "collect_for_storage",
    "save_record",
    "clean_flipped_headline",
    "MISSING_MARKER",
    "NOT_APPLICABLE_MARKER",
    "UNAVAILABLE_PREFIX",
]
