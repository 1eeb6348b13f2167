# backend/infraflow/parser/spec_builder.py
"""
Spec Builder - applies a classified natural-language command to a graph.

One handler per command kind. Every handler except create requires a
current graph and works on a copy of it; the caller's graph is never
mutated. Failures are returned as results, never raised.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from infraflow.catalog import get_tier_for_type
from infraflow.config import debug_log
from infraflow.ir import Connection, InfraNode, InfraSpec
from infraflow.ir.errors import (
    CONFIDENCE_FALLBACK,
    CONFIDENCE_PRECONDITION,
    CONFIDENCE_QUERY,
    CONFIDENCE_TEMPLATE,
    MSG_ADD_NOT_RECOGNIZED,
    MSG_COMPONENT_NOT_FOUND,
    MSG_CONNECT_NEED_TWO,
    MSG_CREATE_FIRST,
    MSG_DISCONNECT_NEED_TWO,
    MSG_MODIFY_NOT_FOUND,
    MSG_MODIFY_NOT_RECOGNIZED,
    MSG_REMOVE_NOT_FOUND,
)
from infraflow.knowledge import KnowledgeValidator
from infraflow.parser.detector import ComponentDetector, find_insertion_point, generate_node_id
from infraflow.parser.matcher import ParseResult, TemplateMatcher
from infraflow.parser.patterns import CommandType


# Confidence of a successful mutating command
CONFIDENCE_APPLIED = CONFIDENCE_TEMPLATE


@dataclass
class SpecModification:
    type: str  # add-node | remove-node | add-connection | remove-connection | modify-node
    target: Optional[str] = None
    data: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type}
        if self.target is not None:
            result["target"] = self.target
        if self.data is not None:
            result["data"] = self.data
        return result


@dataclass
class SmartParseResult(ParseResult):
    command_type: CommandType = CommandType.CREATE
    modifications: Optional[List[SpecModification]] = None
    warnings: Optional[list] = None
    suggestions: Optional[list] = None
    query: Optional[str] = None

    @classmethod
    def from_parse_result(cls, result: ParseResult, command_type: CommandType) -> "SmartParseResult":
        return cls(
            success=result.success,
            confidence=result.confidence,
            spec=result.spec,
            template_used=result.template_used,
            error=result.error,
            is_fallback=result.is_fallback,
            explanation=result.explanation,
            command_type=command_type,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["commandType"] = self.command_type.value
        if self.modifications is not None:
            data["modifications"] = [m.to_dict() for m in self.modifications]
        if self.warnings:
            data["warnings"] = [w.to_dict() for w in self.warnings]
        if self.suggestions:
            data["suggestions"] = [s.to_dict() for s in self.suggestions]
        if self.query is not None:
            data["query"] = self.query
        return data


def _failure(command: CommandType, confidence: float, error: str) -> SmartParseResult:
    return SmartParseResult(success=False, confidence=confidence, error=error, command_type=command)


class SpecBuilder:
    """
    Usage:
        builder = SpecBuilder()
        result = builder.build(CommandType.ADD, "방화벽 뒤에 WAF 추가해줘", current_spec)
    """

    def __init__(
        self,
        detector: Optional[ComponentDetector] = None,
        matcher: Optional[TemplateMatcher] = None,
        validator: Optional[KnowledgeValidator] = None,
    ):
        self.detector = detector or ComponentDetector()
        self.matcher = matcher or TemplateMatcher(self.detector)
        self.validator = validator or KnowledgeValidator()

    def build(
        self,
        command: CommandType,
        prompt: str,
        current_spec: Optional[InfraSpec],
        use_templates: bool = True,
        use_component_detection: bool = True,
    ) -> SmartParseResult:
        if command == CommandType.CREATE:
            return self.handle_create(prompt, use_templates, use_component_detection)

        handlers = {
            CommandType.ADD: self.handle_add,
            CommandType.REMOVE: self.handle_remove,
            CommandType.MODIFY: self.handle_modify,
            CommandType.CONNECT: self.handle_connect,
            CommandType.DISCONNECT: self.handle_disconnect,
            CommandType.QUERY: self.handle_query,
        }
        result = handlers[command](prompt, current_spec)
        debug_log("SPEC BUILDER", f"{command.value}: success={result.success} confidence={result.confidence}")
        return result

    def _attach_knowledge(self, result: SmartParseResult) -> SmartParseResult:
        if result.success and result.spec is not None:
            validation = self.validator.validate(result.spec)
            result.warnings = validation.warnings or None
            result.suggestions = validation.suggestions or None
        return result

    # ============================================================
    # HANDLERS
    # ============================================================

    def handle_create(
        self,
        prompt: str,
        use_templates: bool = True,
        use_component_detection: bool = True,
    ) -> SmartParseResult:
        matched = self.matcher.match(prompt, use_templates, use_component_detection)
        return self._attach_knowledge(SmartParseResult.from_parse_result(matched, CommandType.CREATE))

    def handle_add(self, prompt: str, current_spec: Optional[InfraSpec]) -> SmartParseResult:
        if current_spec is None:
            return _failure(CommandType.ADD, CONFIDENCE_PRECONDITION, MSG_CREATE_FIRST)

        detected = self.detector.detect_all(prompt)
        if not detected:
            return _failure(CommandType.ADD, CONFIDENCE_FALLBACK, MSG_ADD_NOT_RECOGNIZED)

        spec = current_spec.copy()
        explicit = find_insertion_point(prompt, spec, fallback_to_last=False, registry=self.detector.registry)
        anchor = spec.find_node(next(iter(explicit.values()))) if explicit else None
        insertion = explicit or find_insertion_point(prompt, spec, registry=self.detector.registry) or {}

        # The node named as the position reference is not itself added
        wanted = [r for r in detected if anchor is None or r.type != anchor.type] or detected

        modifications: List[SpecModification] = []
        added_types = set()

        for rule in wanted:
            if rule.type in added_types:
                continue
            added_types.add(rule.type)

            node = InfraNode(
                id=generate_node_id(rule.type),
                type=rule.type,
                label=rule.label,
                tier=get_tier_for_type(rule.type),
            )
            spec.nodes.append(node)
            modifications.append(SpecModification(type="add-node", target=node.id, data=node.to_dict()))

            if "before_node" in insertion:
                conn = Connection(source=node.id, target=insertion["before_node"], flow_type="request")
            elif "after_node" in insertion:
                conn = Connection(source=insertion["after_node"], target=node.id, flow_type="request")
            else:
                continue
            spec.connections.append(conn)
            modifications.append(SpecModification(type="add-connection", data=conn.to_dict()))

        result = SmartParseResult(
            success=True,
            confidence=CONFIDENCE_APPLIED,
            spec=spec,
            command_type=CommandType.ADD,
            modifications=modifications,
        )
        return self._attach_knowledge(result)

    def handle_remove(self, prompt: str, current_spec: Optional[InfraSpec]) -> SmartParseResult:
        if current_spec is None:
            return _failure(CommandType.REMOVE, CONFIDENCE_PRECONDITION, MSG_CREATE_FIRST)

        doomed: List[str] = []
        for node_type in self.detector.detect_types(prompt):
            for node in current_spec.nodes_of_type(node_type):
                if node.id not in doomed:
                    doomed.append(node.id)

        if not doomed:
            return _failure(CommandType.REMOVE, CONFIDENCE_FALLBACK, MSG_REMOVE_NOT_FOUND)

        spec = current_spec.copy()
        spec.remove_nodes(doomed)
        return SmartParseResult(
            success=True,
            confidence=CONFIDENCE_APPLIED,
            spec=spec,
            command_type=CommandType.REMOVE,
            modifications=[SpecModification(type="remove-node", target=node_id) for node_id in doomed],
        )

    def handle_modify(self, prompt: str, current_spec: Optional[InfraSpec]) -> SmartParseResult:
        if current_spec is None:
            return _failure(CommandType.MODIFY, CONFIDENCE_PRECONDITION, MSG_CREATE_FIRST)

        detected = self.detector.detect_all(prompt)
        if not detected:
            return _failure(CommandType.MODIFY, CONFIDENCE_FALLBACK, MSG_MODIFY_NOT_RECOGNIZED)

        spec = current_spec.copy()
        modifications: List[SpecModification] = []
        touched = set()
        for rule in detected:
            node = spec.first_of_type(rule.type)
            if node is None or node.id in touched:
                continue
            touched.add(node.id)
            # Only display fields change; id and type are fixed for the node's lifetime
            node.label = rule.label or node.label
            modifications.append(SpecModification(type="modify-node", target=node.id, data=node.to_dict()))

        if not modifications:
            return _failure(CommandType.MODIFY, CONFIDENCE_FALLBACK, MSG_MODIFY_NOT_FOUND)

        return SmartParseResult(
            success=True,
            confidence=CONFIDENCE_APPLIED,
            spec=spec,
            command_type=CommandType.MODIFY,
            modifications=modifications,
        )

    def _resolve_pair(self, prompt: str, spec: InfraSpec, command: CommandType, need_two_msg: str):
        types = self.detector.detect_types(prompt)
        if len(types) < 2:
            return None, _failure(command, CONFIDENCE_FALLBACK, need_two_msg)

        source = spec.first_of_type(types[0])
        if source is None:
            return None, _failure(command, CONFIDENCE_FALLBACK, MSG_COMPONENT_NOT_FOUND.format(target=types[0]))
        target = spec.first_of_type(types[1])
        if target is None:
            return None, _failure(command, CONFIDENCE_FALLBACK, MSG_COMPONENT_NOT_FOUND.format(target=types[1]))
        return (source, target), None

    def handle_connect(self, prompt: str, current_spec: Optional[InfraSpec]) -> SmartParseResult:
        if current_spec is None:
            return _failure(CommandType.CONNECT, CONFIDENCE_PRECONDITION, MSG_CREATE_FIRST)

        pair, failure = self._resolve_pair(prompt, current_spec, CommandType.CONNECT, MSG_CONNECT_NEED_TWO)
        if failure:
            return failure
        source, target = pair

        spec = current_spec.copy()
        modifications: List[SpecModification] = []
        if not spec.has_connection(source.id, target.id):
            conn = Connection(source=source.id, target=target.id, flow_type="request")
            spec.connections.append(conn)
            modifications.append(SpecModification(type="add-connection", data=conn.to_dict()))

        return SmartParseResult(
            success=True,
            confidence=CONFIDENCE_APPLIED,
            spec=spec,
            command_type=CommandType.CONNECT,
            modifications=modifications,
        )

    def handle_disconnect(self, prompt: str, current_spec: Optional[InfraSpec]) -> SmartParseResult:
        if current_spec is None:
            return _failure(CommandType.DISCONNECT, CONFIDENCE_PRECONDITION, MSG_CREATE_FIRST)

        pair, failure = self._resolve_pair(prompt, current_spec, CommandType.DISCONNECT, MSG_DISCONNECT_NEED_TWO)
        if failure:
            return failure
        source, target = pair
        ends = {source.id, target.id}

        spec = current_spec.copy()
        kept: List[Connection] = []
        modifications: List[SpecModification] = []
        for conn in spec.connections:
            if {conn.source, conn.target} == ends and conn.source != conn.target:
                modifications.append(SpecModification(type="remove-connection", target=conn.key))
            else:
                kept.append(conn)
        spec.connections = kept

        return SmartParseResult(
            success=True,
            confidence=CONFIDENCE_APPLIED,
            spec=spec,
            command_type=CommandType.DISCONNECT,
            modifications=modifications,
        )

    def handle_query(self, prompt: str, current_spec: Optional[InfraSpec]) -> SmartParseResult:
        if current_spec is None:
            return _failure(CommandType.QUERY, CONFIDENCE_PRECONDITION, MSG_CREATE_FIRST)
        return SmartParseResult(
            success=True,
            confidence=CONFIDENCE_QUERY,
            spec=current_spec,
            command_type=CommandType.QUERY,
            query=prompt,
        )
