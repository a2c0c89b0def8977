from __future__ import annotations

import asyncio
from typing import Callable, List, Tuple

import pytest

from logicgraph.logic import RunResult, run
from logicgraph.nodes import EXEC_IN, EXEC_OUT, NodeGraph, make_ref


@pytest.fixture
def run_graph() -> Callable[..., Tuple[List[str], RunResult]]:
    def _run(graph: NodeGraph, **kwargs) -> Tuple[List[str], RunResult]:
        lines: List[str] = []
        result = asyncio.run(run(graph, lines.append, **kwargs))
        return lines, result

    return _run


@pytest.fixture
def wire() -> Callable[..., None]:
    """Connect exec ports between consecutive nodes, asserting each edge is accepted."""

    def _wire(graph: NodeGraph, *nodes) -> None:
        for source, target in zip(nodes, nodes[1:]):
            edge = graph.connect(make_ref(source.id, EXEC_OUT), make_ref(target.id, EXEC_IN))
            assert edge is not None

    return _wire
