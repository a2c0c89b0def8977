from __future__ import annotations

from typing import Optional

from .base import Port, PortDirection, PortType


def connection_error(source: Port, target: Port) -> Optional[str]:
    """
    Return why an edge from ``source`` to ``target`` would be illegal, or
    ``None`` when it may be committed.

    Only direction, exec-ness and type tag are consulted; node identity and
    geometry play no part.
    """

    if source.direction != PortDirection.OUT:
        return "Source port must be an output."
    if target.direction != PortDirection.IN:
        return "Target port must be an input."
    if source.is_exec != target.is_exec:
        return "Exec ports can only connect to exec ports."
    if source.is_exec:
        return None
    if not _is_compatible(source, target):
        return "Incompatible port data types."
    return None


def can_connect(source: Port, target: Port) -> bool:
    return connection_error(source, target) is None


def _is_compatible(source: Port, target: Port) -> bool:
    if source.type == PortType.ANY or target.type == PortType.ANY:
        return True
    return source.type == target.type
