from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from logicgraph.errors import LogicGraphError
from logicgraph.nodes import EXEC_IN, EXEC_OUT, NodeGraph, create_node, make_ref


@dataclass(frozen=True)
class GraphPreset:
    id: str
    name: str
    description: str
    build: Callable[[], NodeGraph]


def build_vector_demo() -> NodeGraph:
    graph = NodeGraph()
    start = graph.add_node(create_node("start", 80, 60))
    v1 = graph.add_node(create_node("vec3", 280, 40))
    v2 = graph.add_node(create_node("vec3", 280, 140))
    dot = graph.add_node(create_node("dot", 520, 90))
    prt = graph.add_node(create_node("print", 740, 90))

    for node, values in ((v1, (1, 2, 3)), (v2, (4, 5, 6))):
        for axis, value in zip(("x", "y", "z"), values):
            graph.set_value(node.id, axis, value)

    graph.connect(make_ref(start.id, EXEC_OUT), make_ref(dot.id, EXEC_IN))
    graph.connect(make_ref(v1.id, "v"), make_ref(dot.id, "a"))
    graph.connect(make_ref(v2.id, "v"), make_ref(dot.id, "b"))
    graph.connect(make_ref(dot.id, "out"), make_ref(prt.id, "in"))
    graph.connect(make_ref(dot.id, EXEC_OUT), make_ref(prt.id, EXEC_IN))

    graph.group_nodes([start.id, v1.id, v2.id, dot.id, prt.id], label="Vector Demo")
    return graph


def build_arithmetic_demo() -> NodeGraph:
    graph = NodeGraph()
    start = graph.add_node(create_node("start", 80, 60))
    add = graph.add_node(create_node("add", 280, 60))
    mul = graph.add_node(create_node("mul", 500, 60))
    prt = graph.add_node(create_node("print", 720, 60))

    graph.set_value(add.id, "a", 2)
    graph.set_value(add.id, "b", 3)
    graph.set_value(mul.id, "b", 4)

    graph.connect(make_ref(start.id, EXEC_OUT), make_ref(add.id, EXEC_IN))
    graph.connect(make_ref(add.id, EXEC_OUT), make_ref(mul.id, EXEC_IN))
    graph.connect(make_ref(mul.id, EXEC_OUT), make_ref(prt.id, EXEC_IN))
    graph.connect(make_ref(add.id, "out"), make_ref(mul.id, "a"))
    graph.connect(make_ref(mul.id, "out"), make_ref(prt.id, "in"))
    return graph


_PRESETS: Tuple[GraphPreset, ...] = (
    GraphPreset(
        id="vector-demo",
        name="Vector Demo",
        description="Dot product of two vectors, printed after the run.",
        build=build_vector_demo,
    ),
    GraphPreset(
        id="arithmetic-demo",
        name="Arithmetic Demo",
        description="(2 + 3) * 4, printed after the run.",
        build=build_arithmetic_demo,
    ),
)

_PRESET_MAP: Dict[str, GraphPreset] = {preset.id: preset for preset in _PRESETS}


def get_presets() -> Tuple[GraphPreset, ...]:
    return _PRESETS


def get_preset(preset_id: str) -> GraphPreset:
    try:
        return _PRESET_MAP[preset_id]
    except KeyError:
        raise LogicGraphError(f"Unknown preset: {preset_id!r}") from None
