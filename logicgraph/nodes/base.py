from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

Point = Tuple[float, float]
Endpoint = Union[str, Point]

_last_id = 0


def uid(prefix: str = "id") -> str:
    """
    Return a process-unique identifier such as ``node_12``.
    """

    global _last_id
    _last_id += 1
    return f"{prefix}_{_last_id}"


def reserve_id(identifier: str) -> None:
    """
    Move the ``uid`` counter past the numeric suffix of ``identifier`` so a
    restored id is never handed out again.
    """

    global _last_id
    _, _, suffix = identifier.rpartition("_")
    if suffix.isdigit():
        _last_id = max(_last_id, int(suffix))


class PortDirection(str, Enum):
    IN = "in"
    OUT = "out"


class PortType(str, Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    COLOR = "color"
    OBJECT = "object"
    VECTOR3 = "vector3"
    ANY = "any"
    EXEC = "exec"


@dataclass
class Port:
    """
    A named, typed attachment point on a node.
    """

    id: str
    node_id: Optional[str]
    name: str
    type: PortType = PortType.NUMBER
    direction: PortDirection = PortDirection.IN
    is_exec: bool = False


@dataclass
class Node:
    """
    A graph vertex. ``data`` holds default input values and the outputs
    written by the engine.
    """

    id: str = field(default_factory=lambda: uid("node"))
    x: float = 0.0
    y: float = 0.0
    w: float = 160.0
    h: float = 70.0
    r: float = 8.0
    kind: str = "rect"
    label: str = "Node"
    fill: str = "#1e2636"
    stroke: str = "#2f3a52"
    ports: List[Port] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)
    is_group: bool = False
    members: List[str] = field(default_factory=list)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.w, self.h

    def port(self, name: str, direction: Optional[PortDirection] = None) -> Optional[Port]:
        for port in self.ports:
            if port.name != name:
                continue
            if direction is not None and port.direction != direction:
                continue
            return port
        return None

    def input_ports(self) -> List[Port]:
        return [p for p in self.ports if p.direction == PortDirection.IN and not p.is_exec]

    def output_ports(self) -> List[Port]:
        return [p for p in self.ports if p.direction == PortDirection.OUT and not p.is_exec]


@dataclass
class Edge:
    """
    A connection between two port references. While the user is dragging,
    one endpoint may be a raw world-space point instead.
    """

    source: Endpoint
    target: Endpoint
    is_exec: bool = False
    id: str = field(default_factory=lambda: uid("edge"))

    @property
    def is_committed(self) -> bool:
        return is_ref(self.source) and is_ref(self.target)

    def touches(self, node_id: str) -> bool:
        for endpoint in (self.source, self.target):
            if is_ref(endpoint) and parse_ref(endpoint)[0] == node_id:
                return True
        return False


def make_ref(node_id: str, port_name: str) -> str:
    return f"{node_id}:{port_name}"


def is_ref(endpoint: object) -> bool:
    return isinstance(endpoint, str)


def parse_ref(ref: str) -> Tuple[str, str]:
    """
    Split ``"node:port"`` into its parts. A reference without a colon names
    the node only and yields an empty port name.
    """

    node_id, _, port_name = ref.partition(":")
    return node_id, port_name
