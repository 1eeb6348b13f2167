# backend/infraflow/parser/matcher.py
"""
Template/Component Matcher - turns a create prompt into a graph.

Tiers, first hit wins:
    1. template keyword      (0.8)
    2. template id substring (0.8)
    3. component detection   (0.5)
    4. fallback template     (0.3, success=False, is_fallback=True)
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from infraflow.config import debug_log
from infraflow.ir import InfraSpec
from infraflow.ir.errors import (
    CONFIDENCE_COMPONENTS,
    CONFIDENCE_FALLBACK,
    CONFIDENCE_TEMPLATE,
    MSG_NOT_RECOGNIZED,
)
from infraflow.parser.detector import ComponentDetector, build_spec_from_components
from infraflow.parser.explanation import build_explanation
from infraflow.parser.templates import (
    FALLBACK_TEMPLATE_ID,
    get_available_templates,
    get_template,
    template_keywords,
)


@dataclass
class ParseResult:
    """
    Outcome of a parse.

    A fallback result carries success=False AND a usable graph.
    """
    success: bool
    confidence: float
    spec: Optional[InfraSpec] = None
    template_used: Optional[str] = None
    error: Optional[str] = None
    is_fallback: bool = False
    explanation: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "confidence": self.confidence,
        }
        if self.spec is not None:
            data["spec"] = self.spec.to_dict()
        if self.template_used is not None:
            data["templateUsed"] = self.template_used
        if self.error is not None:
            data["error"] = self.error
        if self.is_fallback:
            data["isFallback"] = True
        if self.explanation is not None:
            data["explanation"] = self.explanation
        return data


class TemplateMatcher:
    """Resolves a create prompt to a template or a detected-component graph."""

    def __init__(self, detector: Optional[ComponentDetector] = None):
        self.detector = detector or ComponentDetector()

    def match(
        self,
        prompt: str,
        use_templates: bool = True,
        use_component_detection: bool = True,
    ) -> ParseResult:
        normalized = (prompt or "").lower().strip()

        if use_templates:
            result = self._match_keywords(normalized) or self._match_template_id(normalized)
            if result:
                return result

        if use_component_detection:
            spec = build_spec_from_components(self.detector.detect_all(normalized))
            if spec is not None:
                debug_log("MATCHER", f"Component detection: {len(spec.nodes)} nodes")
                return ParseResult(
                    success=True,
                    spec=spec,
                    confidence=CONFIDENCE_COMPONENTS,
                    explanation=build_explanation(spec),
                )

        debug_log("MATCHER", f"Fallback for '{normalized[:40]}'")
        return ParseResult(
            success=False,
            spec=get_template(FALLBACK_TEMPLATE_ID),
            template_used=FALLBACK_TEMPLATE_ID,
            confidence=CONFIDENCE_FALLBACK,
            error=MSG_NOT_RECOGNIZED,
            is_fallback=True,
        )

    def _template_result(self, template_id: str) -> ParseResult:
        spec = get_template(template_id)
        return ParseResult(
            success=True,
            spec=spec,
            template_used=template_id,
            confidence=CONFIDENCE_TEMPLATE,
            explanation=build_explanation(spec, template_id),
        )

    def _match_keywords(self, normalized: str) -> Optional[ParseResult]:
        for template_id, keyword in template_keywords():
            if keyword.lower() in normalized:
                debug_log("MATCHER", f"Keyword '{keyword}' -> {template_id}")
                return self._template_result(template_id)
        return None

    def _match_template_id(self, normalized: str) -> Optional[ParseResult]:
        for template_id in get_available_templates():
            if template_id.lower() in normalized:
                debug_log("MATCHER", f"Template id -> {template_id}")
                return self._template_result(template_id)
        return None
