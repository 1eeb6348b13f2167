# backend/infraflow/parser/diff_applier.py
"""
Diff Applier - applies typed operations (replace/add/remove/modify/
connect/disconnect) to a graph.

Best effort: operations run in order on a deep copy, a failing
operation is recorded in `errors` and the rest still run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from infraflow.catalog import get_label_for_type, get_tier_for_type
from infraflow.config import debug_log
from infraflow.ir import Connection, InfraNode, InfraSpec
from infraflow.ir.errors import OperationError
from infraflow.parser.detector import generate_node_id
from infraflow.schemas import (
    AddOperation,
    ConnectOperation,
    DisconnectOperation,
    ModifyOperation,
    OPERATION_TYPES,
    RemoveOperation,
    ReplaceOperation,
    operation_adapter,
)

OperationInput = Union[
    ReplaceOperation,
    AddOperation,
    RemoveOperation,
    ModifyOperation,
    ConnectOperation,
    DisconnectOperation,
    Dict[str, Any],
]


@dataclass
class ApplyResult:
    spec: InfraSpec
    applied_ops: int = 0
    errors: List[str] = field(default_factory=list)
    id_remap: Dict[str, str] = field(default_factory=dict)  # old id -> new id

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "spec": self.spec.to_dict(),
            "appliedOps": self.applied_ops,
            "errors": list(self.errors),
            "idRemap": dict(self.id_remap),
        }


def find_node(spec: InfraSpec, target: str) -> Optional[InfraNode]:
    """Resolve a target by exact id, then by type, then by id/type substring. Blank never resolves."""
    if not target or not target.strip():
        return None
    for node in spec.nodes:
        if node.id == target:
            return node
    for node in spec.nodes:
        if node.type == target:
            return node
    for node in spec.nodes:
        if target in node.id or target in node.type:
            return node
    return None


def _require_target(target: str) -> None:
    if not target or not target.strip():
        raise OperationError("대상 노드가 지정되지 않았습니다")


def _require_node(spec: InfraSpec, target: str, message: str = "노드를 찾을 수 없습니다") -> InfraNode:
    _require_target(target)
    node = find_node(spec, target)
    if node is None:
        raise OperationError(f"{message}: {target}")
    return node


def _coerce(op: OperationInput):
    if isinstance(op, dict):
        op_type = op.get("type")
        if op_type not in OPERATION_TYPES:
            raise OperationError(f"Unknown operation type: {op_type}")
        try:
            return operation_adapter.validate_python(op)
        except ValidationError as e:
            raise OperationError(f"Invalid {op_type} operation: {e.error_count()} error(s)") from e
    return op


class DiffApplier:
    """
    Usage:
        result = DiffApplier().apply(spec, operations)
        if result.errors:
            ...
    """

    def apply(self, spec: InfraSpec, operations: Sequence[OperationInput]) -> ApplyResult:
        result = ApplyResult(spec=spec.copy())

        for raw in operations:
            try:
                op = _coerce(raw)
                self._dispatch(result, op)
                result.applied_ops += 1
            except OperationError as e:
                result.errors.append(str(e))

        debug_log("DIFF", f"Applied {result.applied_ops}/{len(operations)} ops, {len(result.errors)} error(s)")
        return result

    def _dispatch(self, result: ApplyResult, op) -> None:
        if isinstance(op, ReplaceOperation):
            self._replace(result, op)
        elif isinstance(op, AddOperation):
            self._add(result.spec, op)
        elif isinstance(op, RemoveOperation):
            self._remove(result.spec, op)
        elif isinstance(op, ModifyOperation):
            self._modify(result.spec, op)
        elif isinstance(op, ConnectOperation):
            self._connect(result.spec, op)
        elif isinstance(op, DisconnectOperation):
            self._disconnect(result.spec, op)
        else:
            raise OperationError(f"Unknown operation type: {getattr(op, 'type', type(op).__name__)}")

    # ============================================================
    # OPERATIONS
    # ============================================================

    def _replace(self, result: ApplyResult, op: ReplaceOperation) -> None:
        spec = result.spec
        old = _require_node(spec, op.target)
        new_type = op.data.new_type
        new_node = InfraNode(
            id=generate_node_id(new_type),
            type=new_type,
            label=op.data.label or get_label_for_type(new_type),
            tier=old.tier or get_tier_for_type(new_type),
            zone=old.zone,
            description=op.data.description or old.description,
        )

        index = spec.nodes.index(old)
        spec.nodes[index] = new_node
        result.id_remap[old.id] = new_node.id

        if op.data.preserve_connections:
            for conn in spec.connections:
                if conn.source == old.id:
                    conn.source = new_node.id
                if conn.target == old.id:
                    conn.target = new_node.id
        else:
            spec.connections = [c for c in spec.connections if not c.touches(old.id)]

    def _add(self, spec: InfraSpec, op: AddOperation) -> None:
        data = op.data
        between = None
        if data.between_nodes:
            # Resolve before touching the graph so a bad reference leaves it unchanged
            between = (
                _require_node(spec, data.between_nodes[0]).id,
                _require_node(spec, data.between_nodes[1]).id,
            )

        node = InfraNode(
            id=generate_node_id(op.target),
            type=op.target,
            label=data.label or get_label_for_type(op.target),
            tier=data.tier or get_tier_for_type(op.target),
            description=data.description,
        )
        spec.nodes.append(node)

        if between:
            source_id, target_id = between
            spec.connections = [
                c for c in spec.connections
                if not (c.source == source_id and c.target == target_id)
            ]
            spec.connections.append(Connection(source=source_id, target=node.id, flow_type="request"))
            spec.connections.append(Connection(source=node.id, target=target_id, flow_type="request"))
            return

        if data.after_node:
            after = find_node(spec, data.after_node)
            if after is not None and after.id != node.id:
                spec.connections.append(Connection(source=after.id, target=node.id, flow_type="request"))
        elif data.before_node:
            before = find_node(spec, data.before_node)
            if before is not None and before.id != node.id:
                spec.connections.append(Connection(source=node.id, target=before.id, flow_type="request"))

    def _remove(self, spec: InfraSpec, op: RemoveOperation) -> None:
        node = _require_node(spec, op.target)
        spec.remove_nodes([node.id])

    def _modify(self, spec: InfraSpec, op: ModifyOperation) -> None:
        node = _require_node(spec, op.target)
        if op.data.label:
            node.label = op.data.label
        if op.data.description:
            node.description = op.data.description
        if op.data.tier:
            node.tier = op.data.tier

    def _connect(self, spec: InfraSpec, op: ConnectOperation) -> None:
        source = _require_node(spec, op.data.source, "소스 노드를 찾을 수 없습니다")
        target = _require_node(spec, op.data.target, "타겟 노드를 찾을 수 없습니다")

        # Same (source, target) pair counts as existing regardless of flow type
        if spec.has_connection(source.id, target.id):
            return
        spec.connections.append(Connection(
            source=source.id,
            target=target.id,
            flow_type=op.data.flow_type or "request",
            label=op.data.label,
        ))

    def _disconnect(self, spec: InfraSpec, op: DisconnectOperation) -> None:
        _require_target(op.data.source)
        _require_target(op.data.target)
        source = find_node(spec, op.data.source)
        target = find_node(spec, op.data.target)

        if source is None or target is None:
            raw_source, raw_target = op.data.source, op.data.target
            spec.connections = [
                c for c in spec.connections
                if not (
                    (c.source == raw_source or raw_source in c.source)
                    and (c.target == raw_target or raw_target in c.target)
                )
            ]
            return

        spec.connections = [
            c for c in spec.connections
            if not (c.source == source.id and c.target == target.id)
        ]


def apply_operations(spec: InfraSpec, operations: Sequence[OperationInput]) -> ApplyResult:
    return DiffApplier().apply(spec, operations)
