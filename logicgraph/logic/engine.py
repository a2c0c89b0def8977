from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from logicgraph.config import get_settings
from logicgraph.errors import ExecutionBudgetExceeded, GraphExecutionError, NodeEvaluationError
from logicgraph.nodes import Edge, Node, NodeGraph, make_ref, parse_ref

from .base import EvaluationContext, LogSink, Outputs
from .registry import EvaluatorRegistry
from .registry import registry as default_registry

logger = logging.getLogger(__name__)

START_KIND = "start"
RUN_BANNER = "> Running graph..."


@dataclass
class RunResult:
    """
    Summary of a finished run. The observable effects are the log lines and
    the node ``data`` maps; this only records how the run got there.
    """

    steps: int = 0
    visited: List[str] = field(default_factory=list)


@dataclass
class _GraphIndex:
    nodes: Dict[str, Node]
    exec_out: Dict[str, List[Edge]]
    data_in: Dict[str, List[Edge]]

    @classmethod
    def build(cls, graph: NodeGraph) -> "_GraphIndex":
        exec_out: Dict[str, List[Edge]] = defaultdict(list)
        data_in: Dict[str, List[Edge]] = defaultdict(list)
        for edge in graph.edges():
            if not edge.is_committed:
                continue
            if edge.is_exec:
                exec_out[parse_ref(edge.source)[0]].append(edge)
            else:
                data_in[edge.target].append(edge)
        return cls(
            nodes={node.id: node for node in graph.nodes()},
            exec_out=dict(exec_out),
            data_in=dict(data_in),
        )


class LogicEngine:
    """
    Walk the control-flow edges of a graph from every start node, evaluating
    each node it reaches.

    Traversal is depth-first and strictly sequential: every exec branch
    completes before its next sibling starts. A node may be reached more than
    once. Each followed exec edge counts against ``max_steps`` so a control
    cycle aborts the run instead of running forever.
    """

    def __init__(
        self,
        registry: Optional[EvaluatorRegistry] = None,
        max_steps: Optional[int] = None,
    ) -> None:
        self._registry = registry if registry is not None else default_registry
        self._max_steps = max_steps if max_steps is not None else get_settings().max_exec_steps

    @property
    def registry(self) -> EvaluatorRegistry:
        return self._registry

    @property
    def max_steps(self) -> int:
        return self._max_steps

    async def run(self, graph: NodeGraph, log: LogSink) -> RunResult:
        log(RUN_BANNER)
        index = _GraphIndex.build(graph)
        result = RunResult()

        roots = [node for node in graph.nodes() if node.kind == START_KIND]
        if not roots:
            logger.debug("Graph has no %s nodes; nothing to run.", START_KIND)

        for root in roots:
            await self._walk(root.id, index, log, result)
        return result

    async def _walk(
        self,
        root_id: str,
        index: _GraphIndex,
        log: LogSink,
        result: RunResult,
    ) -> None:
        # (node id, reached through an exec edge)
        stack: List[Tuple[str, bool]] = [(root_id, False)]
        while stack:
            node_id, via_edge = stack.pop()
            if via_edge:
                result.steps += 1
                if result.steps > self._max_steps:
                    error = ExecutionBudgetExceeded(self._max_steps, node_id)
                    log(f"! {error}")
                    raise error

            node = index.nodes.get(node_id)
            if node is None:
                logger.debug("Skipping dangling reference to node %s", node_id)
                continue

            result.visited.append(node_id)
            await self._step(node, index, log)

            targets = [parse_ref(edge.target)[0] for edge in index.exec_out.get(node_id, [])]
            stack.extend((target, True) for target in reversed(targets))

    async def _step(self, node: Node, index: _GraphIndex, log: LogSink) -> Outputs:
        inputs = self._resolve_inputs(node, index)
        outputs = await self._evaluate(node, inputs, log)
        for port in node.output_ports():
            if port.name in outputs:
                node.data[port.name] = outputs[port.name]
        return outputs

    def _resolve_inputs(self, node: Node, index: _GraphIndex) -> Dict[str, Any]:
        inputs: Dict[str, Any] = {}
        for port in node.input_ports():
            incoming = index.data_in.get(make_ref(node.id, port.name))
            if not incoming:
                inputs[port.name] = node.data.get(port.name)
                continue
            # The most recently added edge shadows earlier ones.
            source_id, source_port = parse_ref(incoming[-1].source)
            source = index.nodes.get(source_id)
            inputs[port.name] = source.data.get(source_port) if source is not None else None
        return inputs

    async def _evaluate(self, node: Node, inputs: Dict[str, Any], log: LogSink) -> Mapping[str, Any]:
        evaluator = self._registry.get(node.kind)
        if evaluator is None:
            logger.debug("No evaluator registered for node kind %s", node.kind)
            return {}

        context = EvaluationContext(node_id=node.id, sink=log)
        try:
            outputs = evaluator(node, MappingProxyType(inputs), context)
            if inspect.isawaitable(outputs):
                outputs = await outputs
        except GraphExecutionError:
            raise
        except Exception as exc:
            logger.exception("Evaluator failed for node %s (%s)", node.id, node.kind)
            raise NodeEvaluationError(node.id, node.kind, exc) from exc
        return outputs or {}


async def run(
    graph: NodeGraph,
    log: LogSink,
    *,
    registry: Optional[EvaluatorRegistry] = None,
    max_steps: Optional[int] = None,
) -> RunResult:
    """
    Execute ``graph`` once, writing evaluator messages to ``log``.
    """

    engine = LogicEngine(registry=registry, max_steps=max_steps)
    return await engine.run(graph, log)
