"""
Parser module - prompt to graph.

Components:
- PatternRegistry / ComponentDetector: ordered trigger rules, cached detection
- CommandClassifier: create/add/remove/modify/connect/disconnect/query
- TemplateMatcher: keyword -> template id -> components -> fallback
- SpecBuilder / UnifiedParser: command handlers and the conversation entry point
- DiffApplier: typed graph operations
- ChangeRiskAssessor: before/after risk factors
"""

from infraflow.parser.cache import LRUCache
from infraflow.parser.classifier import CommandClassifier, classify_command
from infraflow.parser.context import ConversationContext, PromptHistoryItem
from infraflow.parser.detector import ComponentDetector, generate_node_id, get_component_detector
from infraflow.parser.diff_applier import ApplyResult, DiffApplier, apply_operations, find_node
from infraflow.parser.matcher import ParseResult, TemplateMatcher
from infraflow.parser.patterns import (
    COMMAND_PATTERNS,
    NODE_TYPE_PATTERNS,
    CommandType,
    NodeTypePattern,
    PatternRegistry,
    get_pattern_registry,
)
from infraflow.parser.risk import (
    ChangeRiskAssessor,
    RiskAssessment,
    RiskFactor,
    RiskLevel,
    assess_change_risk,
    get_recommendation,
)
from infraflow.parser.spec_builder import SmartParseResult, SpecBuilder, SpecModification
from infraflow.parser.templates import get_available_templates, get_template
from infraflow.parser.unified import UnifiedParser, smart_parse
