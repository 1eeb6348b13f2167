# backend/infraflow/parser/risk.py
"""
Change Risk Assessor - compares a graph before and after a change and
collects every risk factor that applies.

All checks are independent; the overall level is the highest factor
level and the recommendation follows from the level alone.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from infraflow.config import debug_log
from infraflow.ir import InfraSpec
from infraflow.knowledge.base import KnowledgeBase, get_knowledge_base


class RiskLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER[self]


_LEVEL_ORDER = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}

SECURITY_TYPES = ("firewall", "waf", "ids-ips", "vpn-gateway", "nac", "dlp")
AUTH_TYPES = ("ldap-ad", "sso", "mfa", "iam")
INTERNAL_ONLY_TYPES = ("db-server", "ldap-ad", "san-nas", "backup", "cache", "app-server")

MASSIVE_CHANGE_RATIO = 0.5
LARGE_CHANGE_RATIO = 0.3
MODERATE_CHANGE_COUNT = 5

_RECOMMENDATIONS: Dict[RiskLevel, Tuple[str, str]] = {
    RiskLevel.CRITICAL: ("review-required", "중대한 변경입니다. 반드시 검토 후 적용하세요."),
    RiskLevel.HIGH: ("review-required", "보안 또는 가용성에 영향을 줄 수 있습니다. 검토를 권장합니다."),
    RiskLevel.MEDIUM: ("confirm", "변경 범위가 넓습니다. 확인 후 적용하세요."),
    RiskLevel.LOW: ("auto-apply", "안전한 변경입니다. 자동 적용 가능합니다."),
}


def get_recommendation(level: RiskLevel) -> Tuple[str, str]:
    """(recommendation, recommendation_ko) for a risk level"""
    return _RECOMMENDATIONS[level]


@dataclass
class RiskFactor:
    code: str
    level: RiskLevel
    description_ko: str
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "code": self.code,
            "level": self.level.value,
            "descriptionKo": self.description_ko,
        }
        if self.details is not None:
            data["details"] = self.details
        return data


@dataclass
class RiskAssessment:
    level: RiskLevel
    factors: List[RiskFactor] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=dict)

    @property
    def recommendation(self) -> str:
        return get_recommendation(self.level)[0]

    @property
    def recommendation_ko(self) -> str:
        return get_recommendation(self.level)[1]

    @property
    def codes(self) -> List[str]:
        return [f.code for f in self.factors]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "factors": [f.to_dict() for f in self.factors],
            "summary": dict(self.summary),
            "recommendation": self.recommendation,
            "recommendationKo": self.recommendation_ko,
        }

    def get_summary(self) -> str:
        lines = [f"Risk: {self.level.value} ({self.recommendation})"]
        for factor in self.factors:
            lines.append(f"  [{factor.level.value}] {factor.code}: {factor.description_ko}")
        return "\n".join(lines)


def highest_level(factors: List[RiskFactor]) -> RiskLevel:
    level = RiskLevel.LOW
    for factor in factors:
        if factor.level.rank > level.rank:
            level = factor.level
    return level


class ChangeRiskAssessor:
    """
    Usage:
        assessment = ChangeRiskAssessor().assess(before, after)
        if assessment.recommendation != "auto-apply":
            ...
    """

    def __init__(self, knowledge_base: Optional[KnowledgeBase] = None):
        self.knowledge_base = knowledge_base or get_knowledge_base()

    def assess(self, before: InfraSpec, after: InfraSpec) -> RiskAssessment:
        factors = self.risk_factors(before, after)
        level = highest_level(factors)

        before_ids, after_ids = before.node_ids(), after.node_ids()
        before_keys, after_keys = before.connection_keys(), after.connection_keys()
        summary = {
            "addedNodes": len(after_ids - before_ids),
            "removedNodes": len(before_ids - after_ids),
            "addedConnections": len(after_keys - before_keys),
            "removedConnections": len(before_keys - after_keys),
        }
        summary["totalChanges"] = sum(summary.values())

        debug_log("RISK", f"{level.value}: {[f.code for f in factors]}")
        return RiskAssessment(level=level, factors=factors, summary=summary)

    def risk_factors(self, before: InfraSpec, after: InfraSpec) -> List[RiskFactor]:
        factors: List[RiskFactor] = []
        factors.extend(self._removal_factors(before, after))
        factors.extend(self._volume_factors(before, after))
        factors.extend(self._antipattern_factors(before, after))
        factors.extend(self._dependency_factors(before, after))
        factors.extend(self._redundancy_factors(before, after))
        factors.extend(self._exposure_factors(before, after))

        if not factors:
            factors.append(RiskFactor("NO_RISK", RiskLevel.LOW, "위험 요소가 감지되지 않았습니다."))
        return factors

    # ============================================================
    # CHECKS
    # ============================================================

    def _removal_factors(self, before: InfraSpec, after: InfraSpec) -> List[RiskFactor]:
        factors = []
        if before.nodes and not after.nodes:
            factors.append(RiskFactor(
                "ALL_NODES_REMOVED", RiskLevel.CRITICAL,
                "모든 노드가 제거되었습니다. 다이어그램이 비어 있습니다.",
            ))

        after_ids = after.node_ids()
        removed = [n for n in before.nodes if n.id not in after_ids]

        for node in removed:
            if node.type in SECURITY_TYPES:
                factors.append(RiskFactor(
                    "SECURITY_NODE_REMOVED", RiskLevel.HIGH,
                    f"보안 노드가 제거되었습니다: {node.label} ({node.type})",
                    details=node.type,
                ))
        for node in removed:
            if node.type in AUTH_TYPES:
                factors.append(RiskFactor(
                    "AUTH_NODE_REMOVED", RiskLevel.HIGH,
                    f"인증 노드가 제거되었습니다: {node.label} ({node.type})",
                    details=node.type,
                ))
        for node in removed:
            if node.type == "backup":
                factors.append(RiskFactor(
                    "BACKUP_REMOVED", RiskLevel.HIGH,
                    f"백업 노드가 제거되었습니다: {node.label}",
                    details=node.id,
                ))
        return factors

    def _volume_factors(self, before: InfraSpec, after: InfraSpec) -> List[RiskFactor]:
        before_ids, after_ids = before.node_ids(), after.node_ids()
        added = len(after_ids - before_ids)
        removed = len(before_ids - after_ids)
        total = added + removed
        counts = f"(추가: {added}, 제거: {removed})"

        if before.nodes:
            ratio = total / len(before.nodes)
            percent = round(ratio * 100)
            if ratio > MASSIVE_CHANGE_RATIO:
                return [RiskFactor(
                    "MASSIVE_CHANGE", RiskLevel.CRITICAL,
                    f"노드의 {percent}% 이상이 변경되었습니다 {counts}.",
                )]
            if ratio > LARGE_CHANGE_RATIO:
                return [RiskFactor(
                    "LARGE_CHANGE", RiskLevel.HIGH,
                    f"노드의 {percent}%가 변경되었습니다 {counts}.",
                )]

        if total >= MODERATE_CHANGE_COUNT:
            return [RiskFactor(
                "MODERATE_CHANGE", RiskLevel.MEDIUM,
                f"{total}개의 노드가 변경되었습니다 {counts}.",
            )]
        return []

    def _antipattern_factors(self, before: InfraSpec, after: InfraSpec) -> List[RiskFactor]:
        factors = []
        for ap in self.knowledge_base.antipatterns():
            try:
                introduced = not ap.detect(before) and ap.detect(after)
            except Exception as e:
                print(f"[RISK] ⚠️ Detector {ap.id} failed, skipped: {e}")
                continue
            if introduced:
                factors.append(RiskFactor(
                    "ANTIPATTERN_INTRODUCED", RiskLevel.HIGH,
                    f"안티패턴이 도입되었습니다: {ap.name_ko} ({ap.id})",
                    details=ap.id,
                ))
        return factors

    def _dependency_factors(self, before: InfraSpec, after: InfraSpec) -> List[RiskFactor]:
        before_types, after_types = before.type_set(), after.type_set()
        seen: Set[Tuple[str, str]] = set()
        factors = []

        for node in after.nodes:
            for target in self.knowledge_base.mandatory_dependencies(node.type):
                if target in after_types or target not in before_types:
                    continue
                if (node.type, target) in seen:
                    continue
                seen.add((node.type, target))
                factors.append(RiskFactor(
                    "MANDATORY_DEP_BROKEN", RiskLevel.HIGH,
                    f"필수 의존성이 깨졌습니다: {node.type}은(는) {target}이(가) 필요합니다.",
                    details=f"{node.type} -> {target}",
                ))
        return factors

    def _redundancy_factors(self, before: InfraSpec, after: InfraSpec) -> List[RiskFactor]:
        before_counts = Counter(n.type for n in before.nodes)
        after_counts = Counter(n.type for n in after.nodes)
        factors = []

        for node_type, count in before_counts.items():
            if count >= 2 and after_counts.get(node_type, 0) == 1:
                factors.append(RiskFactor(
                    "REDUNDANCY_REMOVED", RiskLevel.MEDIUM,
                    f"이중화가 제거되었습니다: {node_type}이(가) {count}개에서 1개로 줄었습니다 (단일 장애점 위험).",
                    details=node_type,
                ))
        return factors

    def _exposure_factors(self, before: InfraSpec, after: InfraSpec) -> List[RiskFactor]:
        internet_ids = {n.id for n in after.nodes if n.type == "internet"}
        if not internet_ids:
            return []

        internal = {n.id: n.type for n in after.nodes if n.type in INTERNAL_ONLY_TYPES}
        before_keys = before.connection_keys()
        factors = []

        for conn in after.connections:
            if conn.key in before_keys:
                continue
            if conn.source in internet_ids and conn.target in internal:
                factors.append(RiskFactor(
                    "INTERNET_EXPOSED", RiskLevel.CRITICAL,
                    f"내부 전용 컴포넌트가 인터넷에 직접 노출되었습니다: {internal[conn.target]}",
                    details=f"internet -> {conn.target}",
                ))
            if conn.target in internet_ids and conn.source in internal:
                factors.append(RiskFactor(
                    "INTERNET_EXPOSED", RiskLevel.CRITICAL,
                    f"내부 전용 컴포넌트가 인터넷에 직접 노출되었습니다: {internal[conn.source]}",
                    details=f"{conn.source} -> internet",
                ))
        return factors


def assess_change_risk(before: InfraSpec, after: InfraSpec) -> RiskAssessment:
    return ChangeRiskAssessor().assess(before, after)
