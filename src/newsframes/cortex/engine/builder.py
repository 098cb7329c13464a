"""Compile a `GraphDefinition` into an executable LangGraph.

Structural checks happen here, once, so that a run never starts with a
broken graph:

- step ids are unique and do not collide with state field names
- the entry step and every edge endpoint exist (``END`` is the terminal)
- a step has at most one outgoing edge; fan-out is a ``parallel-group`` step
- every referenced prompt, local function and model key resolves
- every field a step declares it writes is a registered channel
"""

from __future__ import annotations

import inspect
import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Mapping

from langgraph.graph import END, StateGraph

from newsframes.core.exceptions import ChannelError, ConfigurationError, PipelineRunError

from ..state import ChannelRegistry
from ..steps.context import StepContext
from ..steps.functions import FunctionRegistry, function_registry
from ..steps.generation import StepFn, make_generation_step
from ..steps.parallel import make_parallel_group_step
from .definition import (
    FunctionStep,
    GenerationStep,
    GraphDefinition,
    ParallelGroupStep,
    StepDefinition,
    is_terminal,
)

logger = logging.getLogger(__name__)

_RESERVED_IDS = frozenset({"END", "__end__", "__start__"})

# Function-step params that name state fields the function writes.
_FIELD_PARAMS = ("target", "details", "map_key", "result_key")


@dataclass
class Pipeline:
    """A compiled graph plus what it was built from."""

    graph: Any
    definition: GraphDefinition
    channels: ChannelRegistry
    context: StepContext

    def describe(self) -> dict[str, Any]:
        """Graph structure for clients (steps in definition order, edges, entry)."""
        steps = []
        for step in self.definition.steps:
            info: dict[str, Any] = {
                "id": step.id,
                "name": step.display_name,
                "kind": step.kind,
                "output_key": _primary_output(step),
            }
            if isinstance(step, ParallelGroupStep):
                info["tasks"] = [
                    {"name": t.name, "output_key": t.output_key} for t in step.tasks
                ]
            steps.append(info)
        return {
            "name": self.definition.name,
            "entry": self.definition.entry,
            "steps": steps,
            "edges": [
                {"source": e.source, "target": "END" if is_terminal(e.target) else e.target}
                for e in self.definition.edges
            ],
        }


def _primary_output(step: StepDefinition) -> str | None:
    if isinstance(step, GenerationStep):
        return step.output_key
    if isinstance(step, ParallelGroupStep):
        return step.target_key
    return step.output_key or step.params.get("target")


def _written_fields(step: StepDefinition) -> list[str]:
    if isinstance(step, GenerationStep):
        fields = [step.output_key, *step.output_mapping]
        if step.flags_key:
            fields.append(step.flags_key)
        return fields
    if isinstance(step, ParallelGroupStep):
        return [step.target_key, *(t.output_key for t in step.tasks)]
    fields = [step.output_key] if step.output_key else []
    for name in _FIELD_PARAMS:
        value = step.params.get(name)
        if isinstance(value, str) and value:
            fields.append(value)
    return fields


def _prompt_names(step: StepDefinition) -> list[str]:
    if isinstance(step, GenerationStep):
        return [step.prompt]
    if isinstance(step, ParallelGroupStep):
        return [t.prompt for t in step.tasks]
    prompt = step.params.get("prompt")
    return [prompt] if prompt else []


def validate_definition(
    definition: GraphDefinition,
    channels: ChannelRegistry,
    functions: FunctionRegistry,
) -> None:
    ids = [s.id for s in definition.steps]
    seen: set[str] = set()
    for step_id in ids:
        if step_id in seen:
            raise ConfigurationError(f"Duplicate step id '{step_id}'")
        if step_id in _RESERVED_IDS:
            raise ConfigurationError(f"Step id '{step_id}' is reserved")
        if step_id in channels:
            raise ConfigurationError(
                f"Step id '{step_id}' collides with a state field of the same name"
            )
        seen.add(step_id)

    if definition.entry not in seen:
        raise ConfigurationError(f"Entry step '{definition.entry}' is not defined")

    outgoing: dict[str, str] = {}
    for edge in definition.edges:
        if edge.source not in seen:
            raise ConfigurationError(f"Edge source '{edge.source}' is not a defined step")
        if not is_terminal(edge.target) and edge.target not in seen:
            raise ConfigurationError(
                f"Edge target '{edge.target}' (from '{edge.source}') is not a defined step or END"
            )
        if edge.source in outgoing:
            raise ConfigurationError(
                f"Step '{edge.source}' has more than one outgoing edge; "
                "use a parallel-group step for fan-out"
            )
        outgoing[edge.source] = edge.target

    for step in definition.steps:
        for name in _prompt_names(step):
            if name not in definition.prompts:
                raise ConfigurationError(
                    f"Step '{step.id}' references undefined prompt template '{name}'"
                )
        if isinstance(step, FunctionStep) and step.function not in functions:
            raise ConfigurationError(
                f"Step '{step.id}' references unregistered local function '{step.function}'"
            )
        unknown = [f for f in _written_fields(step) if f not in channels]
        if unknown:
            raise ChannelError(f"Step '{step.id}' writes unregistered state field(s): {unknown}")


def _make_function_step(step: FunctionStep, ctx: StepContext, functions: FunctionRegistry) -> StepFn:
    fn = functions.get(step.function)
    params = dict(step.params)

    async def run(state):
        result = fn(state, ctx, params)
        if inspect.isawaitable(result):
            result = await result
        return dict(result or {})

    return run


def _make_executor(step: StepDefinition, ctx: StepContext, functions: FunctionRegistry) -> StepFn:
    if isinstance(step, GenerationStep):
        return make_generation_step(step, ctx)
    if isinstance(step, ParallelGroupStep):
        return make_parallel_group_step(step, ctx)
    if isinstance(step, FunctionStep):
        return _make_function_step(step, ctx, functions)
    raise ConfigurationError(f"Unsupported step kind for '{step.id}'")


def _as_node(step: StepDefinition, executor: StepFn, channels: ChannelRegistry):
    async def node(state):
        logger.info("Step %s (%s) started", step.id, step.kind)
        started = time.monotonic()
        try:
            update = await executor(state)
            channels.validate_update(update)
        except PipelineRunError:
            raise
        except Exception as e:
            logger.error("Step %s failed: %s", step.id, e)
            raise PipelineRunError(f"Step '{step.id}' failed: {e}", step_id=step.id) from e
        logger.debug(
            "Step %s finished in %.2fs, wrote %s",
            step.id,
            time.monotonic() - started,
            sorted(update),
        )
        return update

    return node


def build_pipeline(
    definition: GraphDefinition | Mapping[str, Any],
    context: StepContext,
    *,
    functions: FunctionRegistry | None = None,
) -> Pipeline:
    """Validate ``definition`` and compile it against ``context``."""
    if not isinstance(definition, GraphDefinition):
        definition = GraphDefinition.from_dict(definition)
    functions = functions or function_registry
    channels = context.channels

    validate_definition(definition, channels, functions)

    # Unknown model keys fail here rather than on the first request.
    for name, prompt in definition.prompts.items():
        if prompt.model:
            context.client.provider(prompt.model)

    ctx = replace(context, prompts=dict(definition.prompts))

    workflow = StateGraph(channels.state_schema())
    for step in definition.steps:
        workflow.add_node(step.id, _as_node(step, _make_executor(step, ctx, functions), channels))

    workflow.set_entry_point(definition.entry)
    for edge in definition.edges:
        workflow.add_edge(edge.source, END if is_terminal(edge.target) else edge.target)

    graph = workflow.compile()
    logger.info(
        "Built pipeline '%s': %d steps, entry=%s",
        definition.name,
        len(definition.steps),
        definition.entry,
    )
    return Pipeline(graph=graph, definition=definition, channels=channels, context=ctx)


__all__ = ["Pipeline", "build_pipeline", "validate_definition"]
