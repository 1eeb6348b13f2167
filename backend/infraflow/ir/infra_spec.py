# backend/infraflow/ir/infra_spec.py
"""
Infrastructure spec IR - the editable topology graph.

Nodes keep insertion order (path-building heuristics depend on it),
connections are directed. Dangling connections are tolerated and can
be filtered out with without_dangling_connections().
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set
import copy


TIER_TYPES = ("external", "dmz", "internal", "data")

FLOW_TYPES = (
    "request",
    "response",
    "sync",
    "blocked",
    "encrypted",
    "wan-link",
    "wireless",
    "tunnel",
)


@dataclass
class InfraNode:
    id: str
    type: str
    label: str
    tier: Optional[str] = None
    zone: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "type": self.type, "label": self.label}
        if self.tier is not None:
            data["tier"] = self.tier
        if self.zone is not None:
            data["zone"] = self.zone
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InfraNode":
        return cls(
            id=str(data["id"]),
            type=str(data.get("type", "")),
            label=str(data.get("label") or data.get("id")),
            tier=data.get("tier"),
            zone=data.get("zone"),
            description=data.get("description"),
        )


@dataclass
class Connection:
    source: str
    target: str
    flow_type: Optional[str] = None
    label: Optional[str] = None

    @property
    def key(self) -> str:
        return f"{self.source}->{self.target}"

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"source": self.source, "target": self.target}
        if self.flow_type is not None:
            data["flowType"] = self.flow_type
        if self.label is not None:
            data["label"] = self.label
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Connection":
        return cls(
            source=str(data["source"]),
            target=str(data["target"]),
            flow_type=data.get("flowType", data.get("flow_type")),
            label=data.get("label"),
        )


@dataclass
class Zone:
    id: str
    label: str
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "type": self.type}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Zone":
        return cls(id=str(data["id"]), label=str(data.get("label", data["id"])), type=str(data.get("type", "internal")))


@dataclass
class InfraSpec:
    """
    The infrastructure graph.

    Usage:
        spec = InfraSpec.from_dict(payload)
        for node in spec.nodes_of_type("firewall"):
            ...
    """
    nodes: List[InfraNode] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    zones: List[Zone] = field(default_factory=list)

    # ------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------

    def node_ids(self) -> Set[str]:
        return {n.id for n in self.nodes}

    def type_set(self) -> Set[str]:
        return {n.type for n in self.nodes}

    def find_node(self, node_id: str) -> Optional[InfraNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def first_of_type(self, node_type: str) -> Optional[InfraNode]:
        for node in self.nodes:
            if node.type == node_type:
                return node
        return None

    def nodes_of_type(self, node_type: str) -> List[InfraNode]:
        return [n for n in self.nodes if n.type == node_type]

    def count_type(self, node_type: str) -> int:
        return sum(1 for n in self.nodes if n.type == node_type)

    def has_type(self, node_type: str) -> bool:
        return any(n.type == node_type for n in self.nodes)

    def has_any_type(self, node_types: Iterable[str]) -> bool:
        wanted = set(node_types)
        return any(n.type in wanted for n in self.nodes)

    def has_connection(self, source: str, target: str) -> bool:
        return any(c.source == source and c.target == target for c in self.connections)

    def connection_keys(self) -> Set[str]:
        return {c.key for c in self.connections}

    # ------------------------------------------------------------
    # Mutation helpers (in place)
    # ------------------------------------------------------------

    def remove_nodes(self, node_ids: Iterable[str]) -> None:
        doomed = set(node_ids)
        self.nodes = [n for n in self.nodes if n.id not in doomed]
        self.connections = [
            c for c in self.connections
            if c.source not in doomed and c.target not in doomed
        ]

    def is_empty(self) -> bool:
        return not self.nodes

    def without_dangling_connections(self) -> "InfraSpec":
        ids = self.node_ids()
        cleaned = self.copy()
        cleaned.connections = [
            c for c in cleaned.connections if c.source in ids and c.target in ids
        ]
        return cleaned

    def copy(self) -> "InfraSpec":
        return copy.deepcopy(self)

    # ------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "nodes": [n.to_dict() for n in self.nodes],
            "connections": [c.to_dict() for c in self.connections],
        }
        if self.zones:
            data["zones"] = [z.to_dict() for z in self.zones]
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "InfraSpec":
        if not data:
            return cls()
        return cls(
            nodes=[InfraNode.from_dict(n) for n in data.get("nodes") or []],
            connections=[Connection.from_dict(c) for c in data.get("connections") or []],
            zones=[Zone.from_dict(z) for z in data.get("zones") or []],
        )
