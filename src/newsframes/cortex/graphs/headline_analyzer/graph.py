"""Headline analyzer pipeline assembly.

Usage:
    analyzer = build_headline_pipeline()
    state = await analyzer.analyze("Dog attacks 4-year-old causing injuries")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from newsframes.core import Config, get_core_config
from newsframes.cortex.engine.builder import Pipeline, build_pipeline
from newsframes.cortex.engine.definition import GraphDefinition, load_graph_definition
from newsframes.cortex.engine.runner import PipelineRunner
from newsframes.cortex.services.generation import GenerationClient
from newsframes.cortex.steps.context import StepContext
from newsframes.modules.providers.storage import HeadlineStore, create_store

from .state import HEADLINE_CHANNELS

logger = logging.getLogger(__name__)


class HeadlineAnalyzer:
    """A built headline pipeline bound to its runner and store."""

    def __init__(self, pipeline: Pipeline, runner: PipelineRunner) -> None:
        self.pipeline = pipeline
        self.runner = runner

    @property
    def store(self) -> HeadlineStore | None:
        return self.pipeline.context.store

    @property
    def graph_structure(self) -> dict[str, Any]:
        return self.pipeline.describe()

    async def analyze(self, headline: str) -> dict[str, Any]:
        logger.info("Analyzing headline: %s", headline[:120])
        return await self.runner.run({"input_headline": headline})

    async def close(self) -> None:
        if self.store is not None:
            await self.store.close()


def build_headline_pipeline(
    config: Config | None = None,
    *,
    client: GenerationClient | None = None,
    store: HeadlineStore | None = None,
    definition: GraphDefinition | None = None,
) -> HeadlineAnalyzer:
    """Build the headline analyzer from config (graph file, model, store, limits)."""
    cfg = config or get_core_config()
    if definition is None:
        path = cfg.pipeline.graph_config_path
        definition = load_graph_definition(Path(path) if path else None)

    context = StepContext(
        client=client or GenerationClient(cfg),
        channels=HEADLINE_CHANNELS,
        store=store if store is not None else create_store(cfg),
        max_concurrency=cfg.pipeline.max_concurrency,
    )
    pipeline = build_pipeline(definition, context)
    return HeadlineAnalyzer(pipeline, PipelineRunner(pipeline, step_limit=cfg.pipeline.step_limit))


__all__ = ["HeadlineAnalyzer", "build_headline_pipeline"]
