# backend/infraflow/parser/unified.py
"""
Unified Parser - single entry point for prompt parsing.

Pipeline:
    prompt → CommandClassifier → SpecBuilder (→ TemplateMatcher / ComponentDetector)
           → KnowledgeValidator → SmartParseResult
"""

from typing import Optional

from infraflow.config import debug_log
from infraflow.ir import InfraSpec
from infraflow.parser.classifier import CommandClassifier
from infraflow.parser.context import ConversationContext
from infraflow.parser.detector import ComponentDetector
from infraflow.parser.matcher import ParseResult, TemplateMatcher
from infraflow.parser.patterns import CommandType
from infraflow.parser.spec_builder import SmartParseResult, SpecBuilder


class UnifiedParser:
    """
    Conversation-level parser.

    Usage:
        parser = UnifiedParser()
        result = parser.parse("3티어 웹 아키텍처 만들어줘")
        parser.update_context("3티어 웹 아키텍처 만들어줘", result)
        result = parser.parse("캐시 추가해줘")
    """

    def __init__(
        self,
        context: Optional[ConversationContext] = None,
        detector: Optional[ComponentDetector] = None,
        classifier: Optional[CommandClassifier] = None,
        builder: Optional[SpecBuilder] = None,
    ):
        self.context = context or ConversationContext()
        self.detector = detector or ComponentDetector()
        self.classifier = classifier or CommandClassifier()
        self.builder = builder or SpecBuilder(detector=self.detector)

    def parse(
        self,
        prompt: str,
        use_templates: bool = True,
        use_component_detection: bool = True,
    ) -> SmartParseResult:
        command = self.classifier.classify(prompt)
        current = self.context.current_spec

        # Without a graph every prompt is a create
        if current is None and command != CommandType.CREATE:
            debug_log("PARSER", f"No current spec, treating {command.value} as create")
            command = CommandType.CREATE

        return self.builder.build(
            command,
            prompt,
            current,
            use_templates=use_templates,
            use_component_detection=use_component_detection,
        )

    def parse_simple(self, prompt: str) -> ParseResult:
        """Template/component matching only, no context."""
        return self.builder.matcher.match(prompt)

    def update_context(self, prompt: str, result: SmartParseResult) -> None:
        self.context.update(prompt, result)

    def reset_context(self) -> None:
        self.context.reset()

    def set_current_spec(self, spec: Optional[InfraSpec]) -> None:
        self.context.set_current_spec(spec)


def smart_parse(
    prompt: str,
    current_spec: Optional[InfraSpec] = None,
    detector: Optional[ComponentDetector] = None,
) -> SmartParseResult:
    """Stateless parse against an optional current graph."""
    parser = UnifiedParser(ConversationContext(current_spec=current_spec), detector=detector)
    return parser.parse(prompt)
