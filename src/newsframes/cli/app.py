"""Main Click application root."""

from __future__ import annotations

import asyncio
import json
import logging

import click

from newsframes.core.config import get_core_config, set_core_config
from newsframes.core.config.main import Config
from newsframes.core.exceptions import NewsframesError
from newsframes.cortex.graphs.headline_analyzer import build_headline_pipeline
from newsframes.modules.providers.storage import create_store
from newsframes.service.handler import handle_request

logger = logging.getLogger(__name__)


def _echo_json(data) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to settings.toml",
)
@click.pass_context
def cli(ctx, verbose, config_path):
    """newsframes - headline framing analysis pipeline."""
    ctx.ensure_object(dict)

    # Defaults < TOML < env; `.env` is auto-detected in the working directory.
    config = Config.load(config_path)
    set_core_config(config)

    level = logging.DEBUG if verbose or config.debug else config.log_level.upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@cli.command()
@click.argument("headline")
def analyze(headline):
    """Run the full pipeline on HEADLINE and print the response document."""

    async def _run():
        analyzer = build_headline_pipeline(get_core_config())
        try:
            return await handle_request(
                "POST", {"headline": headline}, analyzer=analyzer
            )
        finally:
            await analyzer.close()

    try:
        response = asyncio.run(_run())
    except NewsframesError as e:
        raise click.ClickException(str(e)) from e

    _echo_json(response.body)
    if response.status_code >= 400:
        raise SystemExit(1)


@cli.command()
@click.argument("headline_id")
def show(headline_id):
    """Print a stored record by id (needs a persistent storage backend)."""
    if get_core_config().storage.backend == "memory":
        raise click.ClickException(
            "The memory storage backend keeps nothing between runs; "
            "set storage.backend = \"postgres\" (or NEWSFRAMES_STORAGE_BACKEND) to look up records"
        )

    async def _get():
        store = create_store(get_core_config())
        try:
            return await store.get(headline_id)
        finally:
            await store.close()

    try:
        record = asyncio.run(_get())
    except NewsframesError as e:
        raise click.ClickException(str(e)) from e

    if record is None:
        raise click.ClickException(f"No record with id {headline_id}")
    _echo_json(record.model_dump(mode="json"))


@cli.command()
def graph():
    """Print the pipeline structure (steps, edges, entry)."""
    try:
        analyzer = build_headline_pipeline(get_core_config())
    except NewsframesError as e:
        raise click.ClickException(str(e)) from e
    _echo_json(analyzer.graph_structure)


__all__ = ["cli"]
