"""
Pattern registry and command classifier checks.
Run with: pytest test_patterns.py
"""

import pytest

from infraflow.parser.classifier import CommandClassifier, classify_command
from infraflow.parser.patterns import (
    NODE_TYPE_PATTERNS,
    CommandType,
    NodeTypePattern,
    PatternRegistry,
    required_literal,
    word,
)


def test_registry_preserves_order():
    registry = PatternRegistry()
    assert registry.types() == [p.type for p in NODE_TYPE_PATTERNS]

    # More specific rules come first
    types = registry.types()
    assert types.index("waf") < types.index("firewall")
    assert types.index("switch-l3") < types.index("switch-l2")


def test_register_appends_and_bumps_version():
    registry = PatternRegistry()
    version = registry.version
    rule = NodeTypePattern(type="siem", label="SIEM", label_ko="SIEM", triggers=("siem",))

    registry.register(rule)

    assert registry.version == version + 1
    assert registry.types()[-1] == "siem"
    assert registry.find_by_type("siem") is rule


def test_register_at_index_takes_priority():
    registry = PatternRegistry()
    rule = NodeTypePattern(type="siem", label="SIEM", label_ko="SIEM", triggers=("siem",))
    registry.register(rule, index=0)
    assert registry.rules[0] is rule
    assert len(registry) == len(NODE_TYPE_PATTERNS) + 1


def test_global_registry_is_not_mutated_by_local_registry():
    registry = PatternRegistry()
    registry.register(NodeTypePattern(type="siem", label="SIEM", label_ko="SIEM", triggers=("siem",)))
    assert "siem" not in [p.type for p in NODE_TYPE_PATTERNS]


@pytest.mark.parametrize("trigger, expected", [
    ("firewall", "firewall"),
    (r"웹 ?서버", "웹"),
    (r"load ?balancer", "load"),
    (r"sd-?wan", "sd"),
    (r"침입.*탐지", "침입"),
    (word("fw"), "fw"),
    (r"(abc|def)", ""),
])
def test_required_literal(trigger, expected):
    assert required_literal(trigger) == expected


def test_short_tokens_need_word_boundaries():
    ldap = next(p for p in NODE_TYPE_PATTERNS if p.type == "ldap-ad")
    assert not ldap.matches("load balancer")
    assert ldap.matches("ad 서버")
    assert ldap.matches("active directory")


@pytest.mark.parametrize("prompt, expected", [
    ("WAF 추가해줘", CommandType.ADD),
    ("방화벽 뒤에 WAF", CommandType.ADD),
    ("add cache after web server", CommandType.ADD),
    ("방화벽 삭제해줘", CommandType.REMOVE),
    ("remove the firewall", CommandType.REMOVE),
    ("로드밸런서 이름 변경해", CommandType.MODIFY),
    ("웹서버와 DB 연결해줘", CommandType.CONNECT),
    ("웹서버와 DB 연결 해제해줘", CommandType.DISCONNECT),
    ("disconnect web and db", CommandType.DISCONNECT),
    ("이 구성은 뭐야", CommandType.QUERY),
    ("3티어 웹 아키텍처", CommandType.CREATE),
    ("", CommandType.CREATE),
])
def test_classify(prompt, expected):
    assert classify_command(prompt) == expected


def test_disconnect_rule_precedes_connect_rule():
    classifier = CommandClassifier()
    kinds = [r.type for r in classifier.rules]
    assert kinds.index(CommandType.DISCONNECT) < kinds.index(CommandType.CONNECT)
