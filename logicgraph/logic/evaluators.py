"""
Built-in evaluators for the logic node kinds.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Mapping

from logicgraph.nodes import Node
from logicgraph.values import format_number, format_value, to_number, to_vector

from .base import EvaluationContext
from .registry import EvaluatorRegistry, registry


def evaluate_start(node: Node, inputs: Mapping[str, Any], context: EvaluationContext) -> Dict[str, Any]:
    return {}


def evaluate_add(node: Node, inputs: Mapping[str, Any], context: EvaluationContext) -> Dict[str, Any]:
    a = to_number(inputs.get("a"))
    b = to_number(inputs.get("b"))
    out = a + b
    context.log(f"Add: {format_number(a)}+{format_number(b)}={format_number(out)}")
    return {"out": out}


def evaluate_mul(node: Node, inputs: Mapping[str, Any], context: EvaluationContext) -> Dict[str, Any]:
    a = to_number(inputs.get("a"))
    b = to_number(inputs.get("b"))
    out = a * b
    context.log(f"Mul: {format_number(a)}*{format_number(b)}={format_number(out)}")
    return {"out": out}


def evaluate_vec3(node: Node, inputs: Mapping[str, Any], context: EvaluationContext) -> Dict[str, Any]:
    v = {axis: to_number(inputs.get(axis)) for axis in ("x", "y", "z")}
    context.log(
        "Vec3: ({}, {}, {})".format(*(format_number(v[axis]) for axis in ("x", "y", "z")))
    )
    return {"v": v}


def evaluate_number(node: Node, inputs: Mapping[str, Any], context: EvaluationContext) -> Dict[str, Any]:
    # A connected input wins over the stored field.
    num = inputs.get("num")
    if num is None:
        num = node.data.get("num")
    return {"v": to_number(num)}


def evaluate_dot(node: Node, inputs: Mapping[str, Any], context: EvaluationContext) -> Dict[str, Any]:
    a = to_vector(inputs.get("a"))
    b = to_vector(inputs.get("b"))
    out = a["x"] * b["x"] + a["y"] * b["y"] + a["z"] * b["z"]
    context.log(f"Dot: ⟨a,b⟩={format_number(out)}")
    return {"out": out}


def evaluate_length(node: Node, inputs: Mapping[str, Any], context: EvaluationContext) -> Dict[str, Any]:
    a = to_vector(inputs.get("a"))
    out = math.hypot(a["x"], a["y"], a["z"])
    context.log(f"Length: ∥a∥={format_number(out)}")
    return {"out": out}


def evaluate_print(node: Node, inputs: Mapping[str, Any], context: EvaluationContext) -> Dict[str, Any]:
    value = inputs.get("in")
    if value is None:
        context.log("Print: <no input connected or undefined>")
    else:
        context.log(f"Print: {format_value(value)}")
    return {}


BUILTIN_EVALUATORS = {
    "start": evaluate_start,
    "add": evaluate_add,
    "mul": evaluate_mul,
    "vec3": evaluate_vec3,
    "number": evaluate_number,
    "dot": evaluate_dot,
    "length": evaluate_length,
    "print": evaluate_print,
}


def register_builtins(target: EvaluatorRegistry) -> EvaluatorRegistry:
    for kind, fn in BUILTIN_EVALUATORS.items():
        target.define(kind, fn)
    return target


register_builtins(registry)
