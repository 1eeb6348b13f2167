# backend/infraflow/knowledge/validator.py
"""
Knowledge Validator - checks a generated graph against the knowledge base.

Produces:
- warnings: conflicting component pairs, active antipatterns
- suggestions: missing mandatory dependencies
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from infraflow.catalog import get_label_for_type
from infraflow.config import debug_log
from infraflow.ir import InfraSpec
from infraflow.knowledge.base import KnowledgeBase, get_knowledge_base


@dataclass
class KnowledgeWarning:
    type: str       # conflict | antipattern
    severity: str   # critical | high | medium
    message: str
    components: List[str] = field(default_factory=list)
    antipattern_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "severity": self.severity,
            "message": self.message,
            "components": list(self.components),
        }
        if self.antipattern_id:
            data["antipatternId"] = self.antipattern_id
        return data


@dataclass
class KnowledgeSuggestion:
    type: str       # mandatory
    component: str  # type that has the dependency
    missing: str    # type that should be added
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "component": self.component,
            "missing": self.missing,
            "message": self.message,
        }


@dataclass
class KnowledgeValidationResult:
    warnings: List[KnowledgeWarning] = field(default_factory=list)
    suggestions: List[KnowledgeSuggestion] = field(default_factory=list)

    @property
    def conflict_count(self) -> int:
        return sum(1 for w in self.warnings if w.type == "conflict")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "warnings": [w.to_dict() for w in self.warnings],
            "suggestions": [s.to_dict() for s in self.suggestions],
        }

    def get_summary(self) -> str:
        return (
            f"Conflicts: {self.conflict_count}, "
            f"Antipatterns: {len(self.warnings) - self.conflict_count}, "
            f"Suggestions: {len(self.suggestions)}"
        )


class KnowledgeValidator:
    """
    Usage:
        result = KnowledgeValidator().validate(spec)
        for w in result.warnings:
            print(f"[{w.severity}] {w.message}")
    """

    def __init__(self, knowledge_base: Optional[KnowledgeBase] = None, include_antipatterns: bool = True):
        self.kb = knowledge_base or get_knowledge_base()
        self.include_antipatterns = include_antipatterns

    def validate(self, spec: InfraSpec) -> KnowledgeValidationResult:
        result = KnowledgeValidationResult()
        # Distinct types in first-appearance order
        types: List[str] = []
        for node in spec.nodes:
            if node.type not in types:
                types.append(node.type)
        present = set(types)

        result.warnings.extend(self._check_conflicts(types, present))
        if self.include_antipatterns:
            result.warnings.extend(self._check_antipatterns(spec))
        result.suggestions.extend(self._check_dependencies(types, present))

        debug_log("KNOWLEDGE", result.get_summary())
        return result

    def _check_conflicts(self, types: List[str], present: set) -> List[KnowledgeWarning]:
        warnings = []
        seen_pairs = set()
        for component_type in types:
            for other in self.kb.conflicting_types(component_type):
                if other not in present:
                    continue
                pair = frozenset((component_type, other))
                if pair in seen_pairs:
                    continue
                seen_pairs.add(pair)
                warnings.append(KnowledgeWarning(
                    type="conflict",
                    severity="high",
                    message=(
                        f"{get_label_for_type(component_type)}와(과) "
                        f"{get_label_for_type(other)}은(는) 함께 구성하면 안 됩니다."
                    ),
                    components=[component_type, other],
                ))
        return warnings

    def _check_antipatterns(self, spec: InfraSpec) -> List[KnowledgeWarning]:
        return [
            KnowledgeWarning(
                type="antipattern",
                severity=ap.severity,
                message=f"{ap.name_ko}: {ap.problem_ko}" if ap.problem_ko else ap.name_ko,
                antipattern_id=ap.id,
            )
            for ap in self.kb.detect_antipatterns(spec)
        ]

    def _check_dependencies(self, types: List[str], present: set) -> List[KnowledgeSuggestion]:
        suggestions = []
        for component_type in types:
            for required in self.kb.mandatory_dependencies(component_type):
                if required in present:
                    continue
                suggestions.append(KnowledgeSuggestion(
                    type="mandatory",
                    component=component_type,
                    missing=required,
                    message=(
                        f"{get_label_for_type(component_type)}에는 "
                        f"{get_label_for_type(required)}이(가) 필요합니다."
                    ),
                ))
        return suggestions


def validate_with_knowledge(spec: InfraSpec) -> KnowledgeValidationResult:
    """Convenience function to validate a graph with the global knowledge base"""
    return KnowledgeValidator().validate(spec)
