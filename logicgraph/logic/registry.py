from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, Optional, Tuple

from .base import Evaluator

logger = logging.getLogger(__name__)


class EvaluatorRegistry:
    """
    Maps a node kind to the evaluator that computes its outputs.
    """

    def __init__(self) -> None:
        self._evaluators: Dict[str, Evaluator] = {}

    def define(
        self, kind: str, fn: Optional[Evaluator] = None
    ) -> Evaluator | Callable[[Evaluator], Evaluator]:
        """
        Register ``fn`` for ``kind``; a later registration replaces an
        earlier one. Without ``fn`` this returns a decorator.
        """

        if fn is None:

            def decorator(func: Evaluator) -> Evaluator:
                self.define(kind, func)
                return func

            return decorator

        if kind in self._evaluators:
            logger.debug("Replacing evaluator for node kind %s", kind)
        self._evaluators[kind] = fn
        return fn

    def get(self, kind: str) -> Optional[Evaluator]:
        return self._evaluators.get(kind)

    def kinds(self) -> Tuple[str, ...]:
        return tuple(self._evaluators)

    def copy(self) -> "EvaluatorRegistry":
        clone = EvaluatorRegistry()
        clone._evaluators = dict(self._evaluators)
        return clone

    def __contains__(self, kind: object) -> bool:
        return kind in self._evaluators

    def __iter__(self) -> Iterator[str]:
        return iter(self._evaluators)

    def __len__(self) -> int:
        return len(self._evaluators)


registry = EvaluatorRegistry()
define = registry.define
