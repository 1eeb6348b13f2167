# backend/infraflow/parser/context.py
"""
Conversation context - bounded prompt history plus the current graph.

Owned by the caller of the parser. All mutation goes through update()
under a lock so readers never observe a half-applied change.
"""

import time
from collections import deque
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Deque, List, Optional, Tuple

from infraflow.config import settings
from infraflow.ir import InfraSpec


@dataclass
class PromptHistoryItem:
    prompt: str
    result: Any  # ParseResult / SmartParseResult
    timestamp: float = field(default_factory=time.time)


class ConversationContext:
    def __init__(self, current_spec: Optional[InfraSpec] = None, history_limit: Optional[int] = None):
        self.history_limit = history_limit or settings.history_limit
        self._history: Deque[PromptHistoryItem] = deque(maxlen=self.history_limit)
        self._current_spec = current_spec
        self._lock = RLock()

    @property
    def current_spec(self) -> Optional[InfraSpec]:
        with self._lock:
            return self._current_spec

    @property
    def history(self) -> List[PromptHistoryItem]:
        with self._lock:
            return list(self._history)

    def snapshot(self) -> Tuple[List[PromptHistoryItem], Optional[InfraSpec]]:
        """History and graph read together, consistent with each other."""
        with self._lock:
            spec = self._current_spec.copy() if self._current_spec is not None else None
            return list(self._history), spec

    def update(self, prompt: str, result: Any) -> None:
        """
        Record a successful parse. A result that produced a graph also
        replaces the current one; the oldest entry is evicted past the
        history limit. Failed results leave the context untouched.
        """
        if not getattr(result, "success", False):
            return
        with self._lock:
            self._history.append(PromptHistoryItem(prompt=prompt, result=result))
            if getattr(result, "spec", None) is not None:
                self._current_spec = result.spec

    def set_current_spec(self, spec: Optional[InfraSpec]) -> None:
        with self._lock:
            self._current_spec = spec

    def reset(self) -> None:
        with self._lock:
            self._history.clear()
            self._current_spec = None
