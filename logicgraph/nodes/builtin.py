from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from logicgraph.errors import UnknownNodeKind

from .base import Node, Port, PortDirection, PortType, uid

EXEC_IN = "execIn"
EXEC_OUT = "execOut"

SHAPE_KINDS: Tuple[str, ...] = ("rect", "roundRect", "ellipse", "circle")


@dataclass(frozen=True)
class NodeTemplate:
    """
    Describes how to instantiate a logic node for the editor.
    """

    kind: str
    title: str
    description: str
    exec_in: bool = False
    exec_out: bool = False
    input_ports: Sequence[Tuple[str, PortType]] = field(default_factory=list)
    output_ports: Sequence[Tuple[str, PortType]] = field(default_factory=list)
    default_data: Dict[str, Any] = field(default_factory=dict)

    def instantiate(self, x: float = 0.0, y: float = 0.0) -> Node:
        node = Node(kind=self.kind, x=float(x), y=float(y), w=170.0, h=100.0, label=self.kind)
        ports: List[Port] = []
        if self.exec_in:
            ports.append(_port(node.id, EXEC_IN, PortType.EXEC, PortDirection.IN, is_exec=True))
        if self.exec_out:
            ports.append(_port(node.id, EXEC_OUT, PortType.EXEC, PortDirection.OUT, is_exec=True))
        ports.extend(
            _port(node.id, name, data_type, PortDirection.IN)
            for name, data_type in self.input_ports
        )
        ports.extend(
            _port(node.id, name, data_type, PortDirection.OUT)
            for name, data_type in self.output_ports
        )
        node.ports = ports
        node.data = copy.deepcopy(dict(self.default_data))
        return node


def _port(
    node_id: str,
    name: str,
    data_type: PortType,
    direction: PortDirection,
    is_exec: bool = False,
) -> Port:
    return Port(
        id=uid("p"),
        node_id=node_id,
        name=name,
        type=data_type,
        direction=direction,
        is_exec=is_exec,
    )


_TEMPLATES: List[NodeTemplate] = [
    NodeTemplate(
        kind="start",
        title="Start",
        description="Traversal root; every run begins at each start node.",
        exec_out=True,
    ),
    NodeTemplate(
        kind="add",
        title="Add",
        description="Adds two numbers.",
        exec_in=True,
        exec_out=True,
        input_ports=[("a", PortType.NUMBER), ("b", PortType.NUMBER)],
        output_ports=[("out", PortType.NUMBER)],
        default_data={"a": 1, "b": 1},
    ),
    NodeTemplate(
        kind="mul",
        title="Multiply",
        description="Multiplies two numbers.",
        exec_in=True,
        exec_out=True,
        input_ports=[("a", PortType.NUMBER), ("b", PortType.NUMBER)],
        output_ports=[("out", PortType.NUMBER)],
        default_data={"a": 1, "b": 1},
    ),
    NodeTemplate(
        kind="vec3",
        title="Vec3",
        description="Builds a 3-component vector.",
        input_ports=[("x", PortType.NUMBER), ("y", PortType.NUMBER), ("z", PortType.NUMBER)],
        output_ports=[("v", PortType.VECTOR3)],
        default_data={"x": 0, "y": 0, "z": 0, "v": {"x": 0, "y": 0, "z": 0}},
    ),
    NodeTemplate(
        kind="number",
        title="Number",
        description="Exposes a stored number, or its connected input.",
        input_ports=[("num", PortType.NUMBER)],
        output_ports=[("v", PortType.NUMBER)],
        default_data={"num": 0, "v": 0},
    ),
    NodeTemplate(
        kind="dot",
        title="Dot",
        description="Dot product of two vectors.",
        exec_in=True,
        exec_out=True,
        input_ports=[("a", PortType.VECTOR3), ("b", PortType.VECTOR3)],
        output_ports=[("out", PortType.NUMBER)],
    ),
    NodeTemplate(
        kind="length",
        title="Length",
        description="Euclidean length of a vector.",
        input_ports=[("a", PortType.VECTOR3)],
        output_ports=[("out", PortType.NUMBER)],
    ),
    NodeTemplate(
        kind="print",
        title="Print",
        description="Writes its input to the run log.",
        exec_in=True,
        input_ports=[("in", PortType.ANY)],
    ),
]

_TEMPLATE_MAP: Dict[str, NodeTemplate] = {template.kind: template for template in _TEMPLATES}


def get_node_templates() -> Iterable[NodeTemplate]:
    """
    Return an iterable of all logic node templates.
    """

    return tuple(_TEMPLATES)


def get_node_template(kind: str) -> NodeTemplate:
    """
    Look up a node template by kind.
    """

    try:
        return _TEMPLATE_MAP[kind]
    except KeyError:
        raise UnknownNodeKind(kind) from None


def create_node(kind: str, x: float = 0.0, y: float = 0.0) -> Node:
    return get_node_template(kind).instantiate(x, y)


def create_shape(kind: str = "rect", x: float = 0.0, y: float = 0.0) -> Node:
    """
    Build a plain editor shape with one numeric input and output.
    """

    if kind not in SHAPE_KINDS:
        raise UnknownNodeKind(kind)
    node = Node(kind=kind, x=float(x), y=float(y), w=160.0, h=80.0, label=kind)
    node.ports = [
        _port(node.id, "in", PortType.NUMBER, PortDirection.IN),
        _port(node.id, "out", PortType.NUMBER, PortDirection.OUT),
    ]
    return node
