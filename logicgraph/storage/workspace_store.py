from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Optional

from logicgraph.errors import DuplicateNodeId, SnapshotError
from logicgraph.nodes import Edge, Node, NodeGraph, Port, PortDirection, PortType

logger = logging.getLogger(__name__)


class WorkspaceStore:
    """
    Persistence helper for saving and loading graph snapshots.

    A snapshot is ``{"version": 1, "nodes": [...], "edges": [...]}`` where
    every record mirrors the fields of its dataclass. Ports are restored as
    plain records and edges are restored without validation.
    """

    VERSION = 1

    def save(self, path: Path, payload: Dict[str, Any]) -> None:
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def load(self, path: Path) -> Dict[str, Any]:
        contents = path.read_text(encoding="utf-8")
        try:
            return json.loads(contents)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"{path} is not valid JSON: {exc}") from exc

    def dumps(self, graph: NodeGraph) -> str:
        return json.dumps(self.export_graph(graph), indent=2)

    def loads(self, text: str) -> NodeGraph:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Snapshot is not valid JSON: {exc}") from exc
        graph = NodeGraph()
        self.import_graph(graph, payload)
        return graph

    def export_graph(self, graph: NodeGraph) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "version": self.VERSION,
            "nodes": [],
            "edges": [],
        }

        for node in graph.nodes():
            record = asdict(node)
            record["ports"] = [self._export_port(port) for port in node.ports]
            data["nodes"].append(record)

        for edge in graph.edges():
            data["edges"].append(
                {
                    "id": edge.id,
                    "source": self._export_endpoint(edge.source),
                    "target": self._export_endpoint(edge.target),
                    "is_exec": edge.is_exec,
                }
            )

        return data

    def import_graph(self, graph: NodeGraph, payload: Dict[str, Any]) -> None:
        if not isinstance(payload, dict):
            raise SnapshotError("Snapshot must be a JSON object.")
        nodes_data = payload.get("nodes", [])
        edges_data = payload.get("edges", [])
        if not isinstance(nodes_data, list) or not isinstance(edges_data, list):
            raise SnapshotError("Snapshot 'nodes' and 'edges' must be lists.")

        graph.clear()

        for node_payload in nodes_data:
            try:
                node = self._import_node(node_payload)
            except (TypeError, ValueError) as exc:
                raise SnapshotError(f"Invalid node record {node_payload!r}: {exc}") from exc
            if node is None:
                logger.debug("Skipping malformed node record: %r", node_payload)
                continue
            try:
                graph.add_node(node)
            except DuplicateNodeId as exc:
                raise SnapshotError(str(exc)) from exc

        for edge_payload in edges_data:
            try:
                edge = self._import_edge(edge_payload)
            except (TypeError, ValueError) as exc:
                raise SnapshotError(f"Invalid edge record {edge_payload!r}: {exc}") from exc
            if edge is None:
                logger.debug("Skipping malformed edge record: %r", edge_payload)
                continue
            graph.add_edge(edge)

    def save_graph(self, path: Path, graph: NodeGraph) -> None:
        payload = self.export_graph(graph)
        self.save(path, payload)

    def load_graph(self, path: Path, graph: Optional[NodeGraph] = None) -> NodeGraph:
        payload = self.load(path)
        graph = graph if graph is not None else NodeGraph()
        self.import_graph(graph, payload)
        return graph

    @staticmethod
    def _export_port(port: Port) -> Dict[str, Any]:
        return {
            "id": port.id,
            "node_id": port.node_id,
            "name": port.name,
            "type": _enum_value(port.type),
            "direction": _enum_value(port.direction),
            "is_exec": port.is_exec,
        }

    @staticmethod
    def _export_endpoint(endpoint: Any) -> Any:
        if isinstance(endpoint, str):
            return endpoint
        return [float(endpoint[0]), float(endpoint[1])]

    def _import_node(self, payload: Any) -> Optional[Node]:
        if not isinstance(payload, dict):
            return None
        node_id = payload.get("id")
        if not node_id:
            return None

        node = Node(id=str(node_id))
        for name in ("x", "y", "w", "h", "r"):
            if name in payload:
                setattr(node, name, float(payload[name]))
        for name in ("kind", "label", "fill", "stroke"):
            if name in payload:
                setattr(node, name, str(payload[name]))
        node.is_group = bool(payload.get("is_group", False))
        node.members = [str(member) for member in payload.get("members", [])]

        data = payload.get("data", {})
        if isinstance(data, dict):
            node.data = dict(data)

        node.ports = [
            port
            for port in (self._import_port(item, node.id) for item in payload.get("ports", []))
            if port is not None
        ]
        return node

    @staticmethod
    def _import_port(payload: Any, node_id: str) -> Optional[Port]:
        if not isinstance(payload, dict) or not payload.get("name"):
            return None
        return Port(
            id=str(payload.get("id", "")),
            node_id=payload.get("node_id", node_id),
            name=str(payload["name"]),
            type=_coerce(PortType, payload.get("type"), PortType.NUMBER),
            direction=_coerce(PortDirection, payload.get("direction"), PortDirection.IN),
            is_exec=bool(payload.get("is_exec", False)),
        )

    def _import_edge(self, payload: Any) -> Optional[Edge]:
        if not isinstance(payload, dict):
            return None
        source = self._import_endpoint(payload.get("source"))
        target = self._import_endpoint(payload.get("target"))
        if source is None or target is None:
            return None
        edge = Edge(source=source, target=target, is_exec=bool(payload.get("is_exec", False)))
        if payload.get("id"):
            edge.id = str(payload["id"])
        return edge

    @staticmethod
    def _import_endpoint(value: Any) -> Any:
        if isinstance(value, str) and value:
            return value
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return float(value[0]), float(value[1])
        return None


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


def _coerce(enum_type, value: Any, default):
    if value is None:
        return default
    try:
        return enum_type(value)
    except ValueError:
        # Unknown tags are kept as-is; snapshots are not re-validated.
        return value

