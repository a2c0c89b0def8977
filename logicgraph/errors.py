"""
Exceptions raised by logicgraph.

Missing nodes, dangling edges and absent inputs are not errors: the engine
degrades them to defaults. The exceptions below cover the conditions a
caller has to act on.
"""

from __future__ import annotations


class LogicGraphError(Exception):
    """Base class for all logicgraph errors."""


class UnknownNodeKind(LogicGraphError, KeyError):
    """Raised by the node factory for a kind it has no template for."""

    def __init__(self, kind: str) -> None:
        super().__init__(kind)
        self.kind = kind

    def __str__(self) -> str:
        return f"Unknown node kind: {self.kind!r}"


class SnapshotError(LogicGraphError, ValueError):
    """Raised when a graph snapshot cannot be decoded."""


class DuplicateNodeId(LogicGraphError, ValueError):
    """Raised when a node is added under an id the graph already holds."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Graph already has a node with id {node_id!r}")
        self.node_id = node_id


class GraphExecutionError(LogicGraphError):
    """Base class for errors that abort a run."""


class ExecutionBudgetExceeded(GraphExecutionError):
    """Raised when a run follows more exec edges than its budget allows."""

    def __init__(self, max_steps: int, node_id: str) -> None:
        super().__init__(
            f"Run aborted after {max_steps} exec steps at node {node_id!r}; "
            "the control flow probably contains a cycle."
        )
        self.max_steps = max_steps
        self.node_id = node_id


class NodeEvaluationError(GraphExecutionError):
    """Raised when an evaluator fails while a node is being evaluated."""

    def __init__(self, node_id: str, kind: str, cause: BaseException) -> None:
        super().__init__(f"Evaluator for {kind!r} failed on node {node_id!r}: {cause}")
        self.node_id = node_id
        self.kind = kind
        self.cause = cause
