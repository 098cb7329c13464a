"""Pipeline engine: definition, builder, runner.

Import the builder and runner from their modules; this package only
re-exports the definition models.
"""

from .definition import (
    Edge,
    GraphDefinition,
    PromptTemplate,
    StepDefinition,
    load_graph_definition,
)

__all__ = ["Edge", "GraphDefinition", "PromptTemplate", "StepDefinition", "load_graph_definition"]
