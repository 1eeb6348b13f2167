# backend/infraflow/parser/classifier.py
"""
Command Classifier - picks the command kind for a prompt.
"""

from typing import List, Optional, Sequence

from infraflow.config import debug_log
from infraflow.parser.patterns import COMMAND_PATTERNS, CommandPattern, CommandType


class CommandClassifier:
    """
    First matching rule wins, CREATE when nothing matches.

    Rule order is part of the contract: disconnect triggers sit before
    connect triggers because "연결 해제" also contains "연결".
    """

    def __init__(self, rules: Optional[Sequence[CommandPattern]] = None):
        self.rules: List[CommandPattern] = list(rules if rules is not None else COMMAND_PATTERNS)

    def classify(self, text: str) -> CommandType:
        normalized = (text or "").strip().lower()
        for rule in self.rules:
            if rule.matches(normalized):
                debug_log("CLASSIFIER", f"'{normalized[:40]}' -> {rule.type.value} ({rule.trigger})")
                return rule.type
        return CommandType.CREATE


_default_classifier = CommandClassifier()


def classify_command(text: str) -> CommandType:
    return _default_classifier.classify(text)
