"""
Logic runtime: evaluator registry, built-in evaluators and the engine that
walks a graph's control flow.
"""

from .base import EvaluationContext, Evaluator, LogSink
from .engine import LogicEngine, RunResult, run
from .evaluators import BUILTIN_EVALUATORS, register_builtins
from .registry import EvaluatorRegistry, define, registry

__all__ = [
    "BUILTIN_EVALUATORS",
    "EvaluationContext",
    "Evaluator",
    "EvaluatorRegistry",
    "LogSink",
    "LogicEngine",
    "RunResult",
    "define",
    "register_builtins",
    "registry",
    "run",
]
