"""Command-line interface for logicgraph."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import click

from logicgraph.errors import LogicGraphError
from logicgraph.logging_utils import setup_logging
from logicgraph.logic import run
from logicgraph.nodes import NodeGraph, get_node_templates
from logicgraph.storage import WorkspaceStore, get_preset, get_presets

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """logicgraph: run node graphs built in the visual editor."""
    setup_logging()


@cli.command("run")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--dump", is_flag=True, default=False, help="Print final node data as JSON")
@click.option("--max-steps", type=click.IntRange(min=1), default=None, help="Exec edge budget")
def run_command(path: Path, dump: bool, max_steps: Optional[int]) -> None:
    """Load a graph snapshot from PATH and run it."""
    store = WorkspaceStore()
    try:
        graph = store.load_graph(path)
    except (LogicGraphError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc
    _run_graph(graph, max_steps=max_steps, dump=dump)


@cli.command("example")
@click.option(
    "--preset",
    "preset_id",
    default="vector-demo",
    type=click.Choice([preset.id for preset in get_presets()]),
    help="Example graph to use",
)
@click.option(
    "--save",
    "save_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the example snapshot instead of running it",
)
@click.option("--dump", is_flag=True, default=False, help="Print final node data as JSON")
def example_command(preset_id: str, save_path: Optional[Path], dump: bool) -> None:
    """Run (or save) one of the bundled example graphs."""
    graph = get_preset(preset_id).build()
    if save_path is not None:
        try:
            WorkspaceStore().save_graph(save_path, graph)
        except OSError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Saved {preset_id} to {save_path}")
        return
    _run_graph(graph, max_steps=None, dump=dump)


@cli.command("kinds")
def kinds_command() -> None:
    """List the node kinds the factory can create."""
    for template in get_node_templates():
        click.echo(f"{template.kind:<8} {template.description}")


def _run_graph(graph: NodeGraph, *, max_steps: Optional[int], dump: bool) -> None:
    try:
        asyncio.run(run(graph, click.echo, max_steps=max_steps))
    except LogicGraphError as exc:
        logger.debug("Run aborted", exc_info=True)
        raise click.ClickException(str(exc)) from exc

    if dump:
        payload = {node.id: node.data for node in graph.nodes() if not node.is_group}
        click.echo(json.dumps(payload, indent=2, default=str))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
