"""
Node graph primitives and utilities.
"""

from .base import Edge, Node, Port, PortDirection, PortType, make_ref, parse_ref
from .builtin import (
    EXEC_IN,
    EXEC_OUT,
    NodeTemplate,
    create_node,
    create_shape,
    get_node_template,
    get_node_templates,
)
from .graph import NodeGraph
from .validation import can_connect, connection_error

__all__ = [
    "EXEC_IN",
    "EXEC_OUT",
    "Edge",
    "Node",
    "NodeGraph",
    "NodeTemplate",
    "Port",
    "PortDirection",
    "PortType",
    "can_connect",
    "connection_error",
    "create_node",
    "create_shape",
    "get_node_template",
    "get_node_templates",
    "make_ref",
    "parse_ref",
]
