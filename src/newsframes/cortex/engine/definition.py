"""Declarative pipeline definition (steps, edges, prompts).

The definition is data: a JSON document validated by pydantic. Step kinds
form a closed union discriminated on ``kind``; anything else is rejected
when the definition is parsed, long before a run starts.
"""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from newsframes.core.exceptions import ConfigurationError
from newsframes.modules.models.types import GenerationOptions

logger = logging.getLogger(__name__)

TERMINAL_MARKERS = frozenset({"END", "__end__"})

DEFAULT_GRAPH_PACKAGE = "newsframes.cortex.graphs.headline_analyzer"
DEFAULT_GRAPH_RESOURCE = "graph_config.json"


def is_terminal(target: str) -> bool:
    return target in TERMINAL_MARKERS


class PromptTemplate(BaseModel):
    """Message templates for one generation call plus per-prompt options."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    system: str = ""
    developer: str = ""
    user: str = ""
    model: str | None = None
    temperature: float | None = None
    max_output_tokens: int | None = None

    def options(self) -> GenerationOptions:
        return GenerationOptions(
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )


class _StepBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: str = Field(min_length=1)
    name: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.id.replace("_", " ").title()


class GenerationStep(_StepBase):
    """One generation call whose result lands in ``output_key``.

    ``output_mapping`` copies parts of the result into other fields
    (``"."`` means the whole result). ``fallback`` holds templates used
    for a mapped field when the call failed or the key is missing.
    ``upstream`` names analysis fields whose failure is reported as
    ``<name>_had_error`` flags, stored under ``flags_key``.
    """

    kind: Literal["generation"]
    prompt: str
    output_key: str
    output_mapping: dict[str, str] = Field(default_factory=dict)
    fallback: dict[str, str] = Field(default_factory=dict)
    upstream: dict[str, str] = Field(default_factory=dict)
    flags_key: str | None = None


class FunctionStep(_StepBase):
    """Deterministic local function looked up by name in the function registry."""

    kind: Literal["function"]
    function: str
    params: dict[str, Any] = Field(default_factory=dict)
    output_key: str | None = None


class AnalysisTask(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    prompt: str
    output_key: str


class ParallelGroupStep(_StepBase):
    """Independent analyses run concurrently; every task settles before the step ends."""

    kind: Literal["parallel-group"]
    tasks: list[AnalysisTask] = Field(min_length=1)
    input_fields: list[str] = Field(
        default_factory=lambda: ["headline_with_placeholders", "input_headline"]
    )
    target_key: str = "headline_to_analyze"
    max_concurrency: int | None = Field(default=None, ge=1)


StepDefinition = Annotated[
    Union[GenerationStep, FunctionStep, ParallelGroupStep],
    Field(discriminator="kind"),
]


class Edge(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    source: str
    target: str


class GraphDefinition(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str = "pipeline"
    entry: str
    steps: list[StepDefinition] = Field(min_length=1)
    edges: list[Edge] = Field(default_factory=list)
    prompts: dict[str, PromptTemplate] = Field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GraphDefinition":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid graph definition: {e}") from e

    def step(self, step_id: str) -> StepDefinition:
        for s in self.steps:
            if s.id == step_id:
                return s
        raise ConfigurationError(f"Unknown step '{step_id}'")

    def prompt(self, name: str) -> PromptTemplate:
        try:
            return self.prompts[name]
        except KeyError:
            raise ConfigurationError(f"Prompt template '{name}' is not defined") from None


def load_graph_definition(path: str | Path | None = None) -> GraphDefinition:
    """Load a graph definition from ``path`` or the bundled default graph."""
    try:
        if path:
            raw = Path(path).read_text(encoding="utf-8")
            source = str(path)
        else:
            raw = (
                resources.files(DEFAULT_GRAPH_PACKAGE)
                .joinpath(DEFAULT_GRAPH_RESOURCE)
                .read_text(encoding="utf-8")
            )
            source = f"{DEFAULT_GRAPH_PACKAGE}/{DEFAULT_GRAPH_RESOURCE}"
        data = json.loads(raw)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Cannot load graph definition from {path or 'package'}: {e}"
        ) from e

    logger.debug("Loaded graph definition from %s", source)
    return GraphDefinition.from_dict(data)


__all__ = [
    "TERMINAL_MARKERS",
    "is_terminal",
    "PromptTemplate",
    "GenerationStep",
    "FunctionStep",
    "AnalysisTask",
    "ParallelGroupStep",
    "StepDefinition",
    "Edge",
    "GraphDefinition",
    "load_graph_definition",
]
