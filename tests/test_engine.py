from __future__ import annotations

import asyncio
import copy

import pytest

from logicgraph.errors import ExecutionBudgetExceeded, NodeEvaluationError
from logicgraph.logic import LogicEngine, registry
from logicgraph.nodes import (
    EXEC_IN,
    EXEC_OUT,
    Edge,
    Node,
    NodeGraph,
    Port,
    PortDirection,
    PortType,
    create_node,
    make_ref,
)

BANNER = "> Running graph..."


def _add_chain(a=2, b=3):
    graph = NodeGraph()
    start = graph.add_node(create_node("start"))
    add = graph.add_node(create_node("add"))
    prt = graph.add_node(create_node("print"))
    graph.set_value(add.id, "a", a)
    graph.set_value(add.id, "b", b)
    return graph, start, add, prt


def test_start_add_print_chain(run_graph, wire) -> None:
    graph, start, add, prt = _add_chain()
    wire(graph, start, add, prt)
    graph.connect(make_ref(add.id, "out"), make_ref(prt.id, "in"))

    lines, result = run_graph(graph)

    assert lines == [BANNER, "Add: 2+3=5", "Print: 5"]
    assert add.data["out"] == 5
    assert result.visited == [start.id, add.id, prt.id]
    assert result.steps == 2


def test_self_dot_product(run_graph, wire) -> None:
    graph = NodeGraph()
    start = graph.add_node(create_node("start"))
    vec = graph.add_node(create_node("vec3"))
    dot = graph.add_node(create_node("dot"))
    for axis, value in zip("xyz", (1, 2, 3)):
        graph.set_value(vec.id, axis, value)
    wire(graph, start, dot)
    graph.connect(make_ref(vec.id, "v"), make_ref(dot.id, "a"))
    graph.connect(make_ref(vec.id, "v"), make_ref(dot.id, "b"))

    lines, _ = run_graph(graph)

    assert dot.data["out"] == 14
    assert lines[-1] == "Dot: ⟨a,b⟩=14"


def test_unconnected_print_reports_missing_input(run_graph, wire) -> None:
    graph = NodeGraph()
    start = graph.add_node(create_node("start"))
    prt = graph.add_node(create_node("print"))
    wire(graph, start, prt)

    lines, _ = run_graph(graph)

    assert lines == [BANNER, "Print: <no input connected or undefined>"]


def test_latest_data_edge_wins(run_graph, wire) -> None:
    graph, start, add, _ = _add_chain()
    early = graph.add_node(create_node("number", x=500, y=500))
    late = graph.add_node(create_node("number", x=0, y=0))
    graph.set_value(early.id, "num", 7)
    graph.set_value(late.id, "num", 9)
    wire(graph, start, add)
    graph.connect(make_ref(early.id, "v"), make_ref(add.id, "a"))
    graph.connect(make_ref(late.id, "v"), make_ref(add.id, "a"))

    lines, _ = run_graph(graph)

    assert "Add: 9+3=12" in lines

    graph.remove_node(late.id)
    lines, _ = run_graph(graph)

    assert "Add: 7+3=10" in lines


def test_deleting_a_source_falls_back_to_defaults(run_graph, wire) -> None:
    graph, start, add, prt = _add_chain()
    wire(graph, start, add, prt)
    graph.connect(make_ref(add.id, "out"), make_ref(prt.id, "in"))

    graph.remove_node(add.id)
    lines, result = run_graph(graph)

    assert lines == [BANNER]
    assert result.visited == [start.id]


def test_dangling_edges_are_tolerated(run_graph, wire) -> None:
    graph, start, add, _ = _add_chain()
    wire(graph, start, add)
    graph.add_edge(Edge(source="ghost:v", target=make_ref(add.id, "a")))
    graph.add_edge(Edge(source=make_ref(add.id, EXEC_OUT), target="ghost:execIn", is_exec=True))

    lines, result = run_graph(graph)

    assert lines == [BANNER, "Add: 0+3=3"]
    assert result.visited == [start.id, add.id]


def test_transient_edges_are_ignored(run_graph, wire) -> None:
    graph, start, add, _ = _add_chain()
    other = graph.add_node(create_node("number"))
    wire(graph, start, add)
    graph.add_edge(Edge(source=make_ref(other.id, "v"), target=(120.0, 48.0)))
    graph.add_edge(Edge(source=(3.0, 4.0), target=make_ref(add.id, "a")))

    lines, _ = run_graph(graph)

    assert lines == [BANNER, "Add: 2+3=5"]


def test_branches_run_depth_first_in_edge_order(run_graph) -> None:
    graph = NodeGraph()
    start = graph.add_node(create_node("start"))
    a, b, c, d = (graph.add_node(create_node("add")) for _ in range(4))
    for source, target in ((start, a), (a, b), (a, c), (b, d)):
        graph.connect(make_ref(source.id, EXEC_OUT), make_ref(target.id, EXEC_IN))

    _, result = run_graph(graph)

    assert result.visited == [start.id, a.id, b.id, d.id, c.id]


def test_converging_paths_revisit_nodes(run_graph) -> None:
    graph = NodeGraph()
    start = graph.add_node(create_node("start"))
    left = graph.add_node(create_node("add"))
    right = graph.add_node(create_node("mul"))
    prt = graph.add_node(create_node("print"))
    for source, target in ((start, left), (start, right), (left, prt), (right, prt)):
        graph.connect(make_ref(source.id, EXEC_OUT), make_ref(target.id, EXEC_IN))
    graph.connect(make_ref(left.id, "out"), make_ref(prt.id, "in"))

    lines, _ = run_graph(graph)

    assert lines == [BANNER, "Add: 1+1=2", "Print: 2", "Mul: 1*1=1", "Print: 2"]


def test_every_start_node_is_a_root_in_graph_order(run_graph, wire) -> None:
    graph = NodeGraph()
    first = graph.add_node(create_node("start"))
    mul = graph.add_node(create_node("mul"))
    second = graph.add_node(create_node("start"))
    add = graph.add_node(create_node("add"))
    wire(graph, second, add)
    wire(graph, first, mul)

    lines, _ = run_graph(graph)

    assert lines == [BANNER, "Mul: 1*1=1", "Add: 1+1=2"]


def test_graph_without_start_only_logs_banner(run_graph) -> None:
    graph = NodeGraph()
    graph.add_node(create_node("add"))

    lines, result = run_graph(graph)

    assert lines == [BANNER]
    assert result.visited == []


def test_unknown_kind_is_a_no_op(run_graph) -> None:
    graph = NodeGraph()
    start = graph.add_node(create_node("start"))
    mystery = graph.add_node(
        Node(
            kind="mystery",
            ports=[
                Port(id="p-in", node_id=None, name=EXEC_IN, type=PortType.EXEC, direction=PortDirection.IN, is_exec=True),
                Port(id="p-out", node_id=None, name="out", type=PortType.NUMBER, direction=PortDirection.OUT),
            ],
            data={"out": 3},
        )
    )
    graph.connect(make_ref(start.id, EXEC_OUT), make_ref(mystery.id, EXEC_IN))

    _, result = run_graph(graph)

    assert mystery.data == {"out": 3}
    assert result.visited == [start.id, mystery.id]


def test_only_declared_outputs_are_written(run_graph, wire) -> None:
    custom = registry.copy()
    custom.define("add", lambda node, inputs, context: {"extra": 1})
    graph, start, add, _ = _add_chain()
    add.data["out"] = "stale"
    wire(graph, start, add)

    run_graph(graph, registry=custom)

    assert add.data["out"] == "stale"
    assert "extra" not in add.data


def test_evaluators_receive_read_only_inputs(run_graph, wire) -> None:
    seen = {}

    def mutate_inputs(node, inputs, context):
        try:
            inputs["a"] = 100
        except TypeError:
            seen["read_only"] = True
        seen["node_id"] = context.node_id
        return {}

    custom = registry.copy()
    custom.define("add", mutate_inputs)
    graph, start, add, _ = _add_chain()
    wire(graph, start, add)

    run_graph(graph, registry=custom)

    assert seen == {"read_only": True, "node_id": add.id}
    assert add.data["a"] == 2


def test_async_evaluators_complete_before_siblings(run_graph) -> None:
    async def slow_add(node, inputs, context):
        await asyncio.sleep(0)
        context.log(f"tick {node.data['tag']}")
        return {"out": node.data["tag"]}

    custom = registry.copy()
    custom.define("add", slow_add)
    graph = NodeGraph()
    start = graph.add_node(create_node("start"))
    first = graph.add_node(create_node("add"))
    second = graph.add_node(create_node("add"))
    prt = graph.add_node(create_node("print"))
    first.data["tag"], second.data["tag"] = "first", "second"
    for source, target in ((start, first), (start, second), (first, prt)):
        graph.connect(make_ref(source.id, EXEC_OUT), make_ref(target.id, EXEC_IN))
    graph.connect(make_ref(first.id, "out"), make_ref(prt.id, "in"))

    lines, _ = run_graph(graph, registry=custom)

    assert lines == [BANNER, "tick first", "Print: first", "tick second"]


def test_control_cycle_is_stopped_by_the_step_budget() -> None:
    graph = NodeGraph()
    start = graph.add_node(create_node("start"))
    ping = graph.add_node(create_node("add"))
    pong = graph.add_node(create_node("mul"))
    for source, target in ((start, ping), (ping, pong), (pong, ping)):
        assert graph.connect(make_ref(source.id, EXEC_OUT), make_ref(target.id, EXEC_IN))

    lines = []
    engine = LogicEngine(max_steps=10)
    with pytest.raises(ExecutionBudgetExceeded) as excinfo:
        asyncio.run(engine.run(graph, lines.append))

    assert excinfo.value.max_steps == 10
    assert len([line for line in lines if line.startswith(("Add:", "Mul:"))]) == 10
    assert lines[-1].startswith("! Run aborted after 10 exec steps")
    assert ping.data["out"] == 2


def test_failing_evaluator_is_reported_with_its_node(run_graph, wire) -> None:
    def broken(node, inputs, context):
        raise ZeroDivisionError("boom")

    custom = registry.copy()
    custom.define("add", broken)
    graph, start, add, _ = _add_chain()
    wire(graph, start, add)

    with pytest.raises(NodeEvaluationError) as excinfo:
        run_graph(graph, registry=custom)

    assert excinfo.value.node_id == add.id
    assert excinfo.value.kind == "add"
    assert isinstance(excinfo.value.cause, ZeroDivisionError)


def test_running_twice_is_idempotent(run_graph, wire) -> None:
    graph, start, add, prt = _add_chain(4, 5)
    mul = graph.add_node(create_node("mul"))
    wire(graph, start, add, mul, prt)
    graph.connect(make_ref(add.id, "out"), make_ref(mul.id, "a"))
    graph.connect(make_ref(mul.id, "out"), make_ref(prt.id, "in"))

    first_lines, _ = run_graph(graph)
    first_data = copy.deepcopy({node.id: node.data for node in graph.nodes()})
    second_lines, _ = run_graph(graph)
    second_data = {node.id: node.data for node in graph.nodes()}

    assert first_lines == second_lines == [BANNER, "Add: 4+5=9", "Mul: 9*1=9", "Print: 9"]
    assert first_data == second_data


def test_budget_defaults_to_settings(monkeypatch) -> None:
    monkeypatch.setenv("LOGICGRAPH_MAX_EXEC_STEPS", "3")

    assert LogicEngine().max_steps == 3
    assert LogicEngine(max_steps=50).max_steps == 50
