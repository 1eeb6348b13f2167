# backend/infraflow/parser/explanation.py
"""
Explanation Builder - Korean summary of why a graph was generated.
"""

from typing import List, Optional

from infraflow.catalog import get_label_for_type
from infraflow.ir import InfraSpec
from infraflow.parser.templates import get_template_info


def _unique_labels(spec: InfraSpec) -> List[str]:
    labels: List[str] = []
    for node in spec.nodes:
        label = node.label or get_label_for_type(node.type)
        if label not in labels:
            labels.append(label)
    return labels


def build_explanation(spec: Optional[InfraSpec], template_used: Optional[str] = None) -> Optional[str]:
    """
    Template hit: template name, description and component list.
    Component detection: detected component list with a count.
    Empty or missing graph: None.
    """
    if spec is None or spec.is_empty():
        return None

    labels = _unique_labels(spec)
    lines: List[str] = []

    if template_used:
        info = get_template_info(template_used)
        name = info.name if info else template_used
        lines.append(f"「{name}」 템플릿이 적용되었습니다.")
        if info and info.description:
            lines.append(info.description)
        if labels:
            lines.append(f"구성: {', '.join(labels)}")
    else:
        lines.append("요청하신 내용에서 다음 구성요소를 감지하여 인프라를 생성했습니다.")
        if labels:
            lines.append(f"구성: {', '.join(labels)} ({len(labels)}개 컴포넌트)")

    return "\n".join(lines)
