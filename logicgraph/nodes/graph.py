from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from logicgraph.errors import DuplicateNodeId
from logicgraph.values import to_number, to_vector

from .base import Edge, Node, Port, PortDirection, make_ref, parse_ref, reserve_id
from .validation import connection_error

logger = logging.getLogger(__name__)

GROUP_PADDING = 16.0


class NodeGraph:
    """
    In-memory graph shared by the editor and the logic engine.

    Nodes are addressed by id and kept in z-order (groups first); edges are
    kept in insertion order, which decides which of several data edges into
    the same input wins.
    """

    def __init__(self) -> None:
        self._nodes: Dict[str, Node] = {}
        self._edges: List[Edge] = []

    def add_node(self, node: Node) -> Node:
        if node.id in self._nodes:
            raise DuplicateNodeId(node.id)
        reserve_id(node.id)
        for port in node.ports:
            reserve_id(port.id)
            if port.node_id is None:
                port.node_id = node.id
        self._nodes[node.id] = node
        return node

    def remove_node(self, node_id: str) -> None:
        self.remove_nodes([node_id])

    def remove_nodes(self, node_ids: Iterable[str]) -> None:
        doomed = set(node_ids)
        for node_id in doomed:
            self._nodes.pop(node_id, None)
        self._edges = [
            edge
            for edge in self._edges
            if not any(edge.touches(node_id) for node_id in doomed)
        ]

        groups_to_remove: List[str] = []
        for group in self.groups():
            if doomed.isdisjoint(group.members):
                continue
            group.members = [nid for nid in group.members if nid not in doomed]
            if not group.members:
                groups_to_remove.append(group.id)
        for group_id in groups_to_remove:
            self._nodes.pop(group_id, None)

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_port(
        self, ref: str, direction: Optional[PortDirection] = None
    ) -> Optional[Port]:
        node_id, port_name = parse_ref(ref)
        node = self._nodes.get(node_id)
        if node is None:
            return None
        if direction is not None:
            port = node.port(port_name, direction)
            if port is not None:
                return port
        return node.port(port_name)

    def nodes(self) -> Tuple[Node, ...]:
        return tuple(self._nodes.values())

    def edges(self) -> Tuple[Edge, ...]:
        return tuple(self._edges)

    def can_connect(self, source_ref: str, target_ref: str) -> Tuple[bool, Optional[str]]:
        source = self.get_port(source_ref, PortDirection.OUT)
        target = self.get_port(target_ref, PortDirection.IN)

        if source is None or target is None:
            return False, "One of the ports does not exist."

        reason = connection_error(source, target)
        return reason is None, reason

    def connect(self, source_ref: str, target_ref: str) -> Optional[Edge]:
        """
        Commit an edge if the validator accepts it. Rejected edges are simply
        not added.
        """

        ok, reason = self.can_connect(source_ref, target_ref)
        if not ok:
            logger.debug("Rejected edge %s -> %s: %s", source_ref, target_ref, reason)
            return None

        source = self.get_port(source_ref, PortDirection.OUT)
        edge = Edge(
            source=source_ref,
            target=target_ref,
            is_exec=source.is_exec,
        )
        self._edges.append(edge)
        return edge

    def add_edge(self, edge: Edge) -> Edge:
        """
        Append an edge without validation, e.g. when restoring a snapshot.
        """

        reserve_id(edge.id)
        self._edges.append(edge)
        return edge

    def disconnect(self, edge_id: str) -> None:
        self._edges = [edge for edge in self._edges if edge.id != edge_id]

    def edges_into(self, ref: str) -> Tuple[Edge, ...]:
        return tuple(edge for edge in self._edges if edge.target == ref)

    def is_data_connected(self, node_id: str, port_name: str) -> bool:
        ref = make_ref(node_id, port_name)
        return any(not edge.is_exec and edge.target == ref for edge in self._edges)

    def move_node(self, node_id: str, x: float, y: float) -> None:
        node = self._nodes.get(node_id)
        if node is not None:
            node.x, node.y = float(x), float(y)

    def set_value(self, node_id: str, name: str, value: Any) -> None:
        """
        Store a user-edited value in a node's ``data``. Data-only nodes keep
        their output in step with the edited field: a number node's ``v``
        follows ``num`` and a vec3 node's ``v`` follows ``x``, ``y``, ``z``.
        """

        node = self._nodes.get(node_id)
        if node is None:
            return
        node.data[name] = value
        if node.kind == "number" and name == "num":
            node.data["v"] = to_number(value)
        elif node.kind == "vec3" and name in ("x", "y", "z"):
            node.data["v"] = to_vector(node.data)

    def groups(self) -> Tuple[Node, ...]:
        return tuple(node for node in self._nodes.values() if node.is_group)

    def groups_containing(self, node_id: str) -> Tuple[Node, ...]:
        return tuple(group for group in self.groups() if node_id in group.members)

    def group_nodes(self, node_ids: Iterable[str], label: str = "Group") -> Optional[Node]:
        """
        Wrap the given nodes in a group sized to their bounds. Groups are
        placed first so they render behind their members.
        """

        members = [
            node
            for node in (self._nodes.get(str(node_id)) for node_id in dict.fromkeys(node_ids))
            if node is not None and not node.is_group
        ]
        if not members:
            return None

        min_x = min(node.x for node in members) - GROUP_PADDING
        min_y = min(node.y for node in members) - GROUP_PADDING
        max_x = max(node.x + node.w for node in members) + GROUP_PADDING
        max_y = max(node.y + node.h for node in members) + GROUP_PADDING

        group = Node(
            kind="group",
            label=label,
            x=min_x,
            y=min_y,
            w=max_x - min_x,
            h=max_y - min_y,
            is_group=True,
            members=[node.id for node in members],
        )
        self._nodes = {group.id: group, **self._nodes}
        return group

    def ungroup(self, group_id: str) -> bool:
        group = self._nodes.get(group_id)
        if group is None or not group.is_group:
            return False
        del self._nodes[group_id]
        return True

    def is_empty(self) -> bool:
        return not self._nodes

    def clear(self) -> None:
        self._nodes.clear()
        self._edges.clear()

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __repr__(self) -> str:
        return f"NodeGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"

