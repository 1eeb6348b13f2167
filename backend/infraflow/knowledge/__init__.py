"""
Knowledge module - relationships, antipatterns and the validator built on them.
"""

from infraflow.knowledge.antipatterns import ANTI_PATTERNS, AntiPattern
from infraflow.knowledge.base import (
    KnowledgeBase,
    StaticKnowledgeBase,
    get_knowledge_base,
)
from infraflow.knowledge.relationships import (
    RELATIONSHIPS,
    Relationship,
    RelationshipType,
    get_conflicts,
    get_mandatory_dependencies,
    get_recommendations,
    get_relationships_for_component,
)
from infraflow.knowledge.validator import (
    KnowledgeSuggestion,
    KnowledgeValidationResult,
    KnowledgeValidator,
    KnowledgeWarning,
    validate_with_knowledge,
)
