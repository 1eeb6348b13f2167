# backend/infraflow/knowledge/base.py
"""
Knowledge Base - read-only view over relationship and antipattern tables.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from infraflow.ir import InfraSpec
from infraflow.knowledge.antipatterns import ANTI_PATTERNS, AntiPattern
from infraflow.knowledge.relationships import get_conflicts, get_mandatory_dependencies


class KnowledgeBase(ABC):
    @abstractmethod
    def conflicting_types(self, component_type: str) -> List[str]:
        """Types that must not coexist with `component_type`"""
        pass

    @abstractmethod
    def mandatory_dependencies(self, component_type: str) -> List[str]:
        """Types `component_type` requires to be present"""
        pass

    @abstractmethod
    def antipatterns(self) -> Sequence[AntiPattern]:
        pass

    def detect_antipatterns(self, spec: InfraSpec) -> List[AntiPattern]:
        """Antipatterns active on `spec`. A failing detector counts as not detected."""
        detected = []
        for ap in self.antipatterns():
            if safe_detect(ap, spec):
                detected.append(ap)
        return detected


def safe_detect(ap: AntiPattern, spec: InfraSpec) -> bool:
    try:
        return bool(ap.detect(spec))
    except Exception as e:
        print(f"[KNOWLEDGE] ⚠️ Detector {ap.id} failed: {e}")
        return False


class StaticKnowledgeBase(KnowledgeBase):
    """Knowledge base backed by the in-process tables."""

    def __init__(self, antipatterns: Optional[Sequence[AntiPattern]] = None):
        self._antipatterns = tuple(antipatterns if antipatterns is not None else ANTI_PATTERNS)

    def conflicting_types(self, component_type: str) -> List[str]:
        others = []
        for rel in get_conflicts(component_type):
            other = rel.target if rel.source == component_type else rel.source
            if other not in others:
                others.append(other)
        return others

    def mandatory_dependencies(self, component_type: str) -> List[str]:
        targets = []
        for rel in get_mandatory_dependencies(component_type):
            if rel.target not in targets:
                targets.append(rel.target)
        return targets

    def antipatterns(self) -> Sequence[AntiPattern]:
        return self._antipatterns


# Global knowledge base instance
_global_kb: Optional[KnowledgeBase] = None


def get_knowledge_base() -> KnowledgeBase:
    """Get or create the global knowledge base"""
    global _global_kb
    if _global_kb is None:
        _global_kb = StaticKnowledgeBase()
    return _global_kb
