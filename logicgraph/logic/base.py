from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping, Protocol, Union

if TYPE_CHECKING:  # pragma: no cover - type checking imports
    from logicgraph.nodes import Node

LogSink = Callable[[str], None]
Outputs = Mapping[str, Any]


@dataclass(frozen=True)
class EvaluationContext:
    """
    Capabilities handed to an evaluator. Logging is the only side effect an
    evaluator may have.
    """

    node_id: str
    sink: LogSink

    def log(self, message: str) -> None:
        self.sink(message)


class Evaluator(Protocol):
    """
    Protocol that all node evaluators must follow. Evaluators may be plain
    functions or coroutines; they must not mutate ``node`` or ``inputs``.
    """

    def __call__(
        self,
        node: "Node",
        inputs: Mapping[str, Any],
        context: EvaluationContext,
    ) -> Union[Outputs, Awaitable[Outputs], None]:  # pragma: no cover - interface
        ...
