"""
logicgraph package.

A node graph with typed data and control-flow ports, plus the engine that
runs it. Editors build and mutate a :class:`NodeGraph` and call :func:`run`.
"""

from .logic import EvaluatorRegistry, LogicEngine, RunResult, define, registry, run
from .nodes import (
    Edge,
    Node,
    NodeGraph,
    Port,
    PortDirection,
    PortType,
    can_connect,
    create_node,
    create_shape,
)
from .storage import WorkspaceStore

__all__ = [
    "Edge",
    "EvaluatorRegistry",
    "LogicEngine",
    "Node",
    "NodeGraph",
    "Port",
    "PortDirection",
    "PortType",
    "RunResult",
    "WorkspaceStore",
    "can_connect",
    "create_node",
    "create_shape",
    "define",
    "registry",
    "run",
]
