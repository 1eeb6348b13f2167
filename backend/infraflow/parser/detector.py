# backend/infraflow/parser/detector.py
"""
Component Detector - finds infrastructure components in free text.

Matching runs against the ordered Pattern Registry over the whole input.
Results of `detect_all` are cached in a bounded LRU; the key is the
lower-cased input, or for long inputs its truncated prefix plus a digest
of the full text.
"""

import hashlib
import re
import uuid
from threading import Lock
from typing import Hashable, List, Optional, Sequence, Tuple

from infraflow.config import debug_log, settings
from infraflow.ir import Connection, InfraNode, InfraSpec
from infraflow.parser.cache import LRUCache
from infraflow.parser.patterns import (
    NodeTypePattern,
    PatternRegistry,
    get_pattern_registry,
)

# (marker, insertion key, side of the marker the anchor component sits on)
_POSITION_MARKERS = (
    (re.compile(r"뒤에|다음에"), "after_node", "left"),
    (re.compile(r"\bafter\b", re.IGNORECASE), "after_node", "right"),
    (re.compile(r"앞에|이전에"), "before_node", "left"),
    (re.compile(r"\bbefore\b", re.IGNORECASE), "before_node", "right"),
)


def normalize_text(text: str) -> str:
    return (text or "").lower()


def detect_with_rules(text: str, rules: Sequence[NodeTypePattern]) -> List[NodeTypePattern]:
    """Uncached scan of `text` against `rules`, in rule order."""
    normalized = normalize_text(text)
    return [rule for rule in rules if rule.matches(normalized)]


class ComponentDetector:
    """
    Detects component rules in text.

    Each detector owns its cache; two detectors never share entries.
    Safe to share between request threads.
    """

    def __init__(
        self,
        registry: Optional[PatternRegistry] = None,
        cache: Optional[LRUCache] = None,
        key_length: Optional[int] = None,
    ):
        self.registry = registry or get_pattern_registry()
        self.cache = cache if cache is not None else LRUCache(settings.detector_cache_size)
        self.key_length = key_length or settings.detector_cache_key_length
        self._state_lock = Lock()
        self._registry_version = -1
        self._keywords: Tuple[str, ...] = ()
        self._prefilter_enabled = True
        self._sync_registry()

    # ============================================================
    # REGISTRY STATE
    # ============================================================

    def _sync_registry(self) -> Tuple[bool, Tuple[str, ...]]:
        """
        Rebuild keyword set and drop cached results when the registry
        changed. Returns (prefilter enabled, keywords) read together.
        """
        with self._state_lock:
            if self._registry_version != self.registry.version:
                keywords = self.registry.keywords()
                self._prefilter_enabled = "" not in keywords
                self._keywords = tuple(sorted(k for k in keywords if k))
                if self._registry_version != -1:
                    self.cache.clear()
                    debug_log("DETECTOR", f"Registry changed, cache cleared ({len(self._keywords)} keywords)")
                self._registry_version = self.registry.version
            return self._prefilter_enabled, self._keywords

    def _cache_key(self, normalized: str) -> Hashable:
        if len(normalized) <= self.key_length:
            return normalized
        digest = hashlib.sha1(normalized.encode("utf-8")).hexdigest()
        return (normalized[: self.key_length], digest)

    def has_keyword(self, text: str) -> bool:
        """Cheap pre-filter: could any rule match this text at all?"""
        prefilter_enabled, keywords = self._sync_registry()
        if not prefilter_enabled:
            return True
        normalized = normalize_text(text)
        return any(k in normalized for k in keywords)

    # ============================================================
    # DETECTION
    # ============================================================

    def detect_all(self, text: str) -> List[NodeTypePattern]:
        """All matching rules in registry order."""
        prefilter_enabled, keywords = self._sync_registry()
        normalized = normalize_text(text)
        key = self._cache_key(normalized)

        cached = self.cache.get(key)
        if cached is not None:
            return list(cached)

        if not prefilter_enabled or any(k in normalized for k in keywords):
            result = tuple(detect_with_rules(normalized, self.registry.rules))
        else:
            result = ()

        self.cache.put(key, result)
        debug_log("DETECTOR", f"{len(result)} component(s) in '{normalized[:40]}'")
        return list(result)

    def detect_first(self, text: str) -> Optional[NodeTypePattern]:
        """First matching rule in registry order, or None."""
        matches = self.detect_all(text)
        return matches[0] if matches else None

    def detect_types(self, text: str) -> List[str]:
        """Detected component types, de-duplicated, in registry order."""
        seen = []
        for rule in self.detect_all(text):
            if rule.type not in seen:
                seen.append(rule.type)
        return seen

    def stats(self):
        return self.cache.stats()

    def clear_cache(self) -> None:
        self.cache.clear()


# Shared detector instance for request handlers
_global_detector: Optional[ComponentDetector] = None


def get_component_detector() -> ComponentDetector:
    """Get or create the shared component detector"""
    global _global_detector
    if _global_detector is None:
        _global_detector = ComponentDetector()
    return _global_detector


# ============================================================
# GRAPH HELPERS
# ============================================================

def generate_node_id(node_type: str) -> str:
    """Fresh node id embedding its type: `firewall-1a2b3c4d`."""
    return f"{node_type}-{uuid.uuid4().hex[:8]}"


def _anchor_node(window: str, side: str, spec: InfraSpec, rules: Sequence[NodeTypePattern]) -> Optional[str]:
    """
    Node named next to a position marker. On the "left" side the mention
    ending closest to the marker wins, on the "right" side the one starting
    closest. Ties go to registry order; types absent from the graph are skipped.
    """
    mentions = []
    for index, rule in enumerate(rules):
        for match in rule.pattern.finditer(window):
            distance = len(window) - match.end() if side == "left" else match.start()
            mentions.append((distance, index, rule.type))

    for _, _, node_type in sorted(mentions):
        node = spec.first_of_type(node_type)
        if node:
            return node.id
    return None


def find_insertion_point(
    prompt: str,
    spec: InfraSpec,
    fallback_to_last: bool = True,
    registry: Optional[PatternRegistry] = None,
) -> Optional[dict]:
    """
    Where new nodes attach: {"after_node": id} or {"before_node": id}.

    "X 뒤에" / "after X" wins over "X 앞에" / "before X". Without a
    position phrase new nodes go after the last node unless
    `fallback_to_last` is off. None on an empty graph.
    """
    rules = (registry or get_pattern_registry()).rules
    text = prompt or ""
    for marker, key, side in _POSITION_MARKERS:
        match = marker.search(text)
        if not match:
            continue
        window = text[: match.start()] if side == "left" else text[match.end():]
        node_id = _anchor_node(window, side, spec, rules)
        if node_id:
            return {key: node_id}

    if fallback_to_last and spec.nodes:
        return {"after_node": spec.nodes[-1].id}
    return None


def build_spec_from_components(rules: Sequence[NodeTypePattern]) -> Optional[InfraSpec]:
    """
    Synthesize a chain graph from detected rules.

    One node per distinct type with stable `<type>-<index>` ids, a `user`
    node prepended when none was detected, and `request` edges linking
    consecutive nodes.
    """
    nodes: List[InfraNode] = []
    seen = set()
    for rule in rules:
        if rule.type in seen:
            continue
        seen.add(rule.type)
        nodes.append(InfraNode(id=f"{rule.type}-{len(nodes)}", type=rule.type, label=rule.label))

    if not nodes:
        return None

    if "user" not in seen:
        nodes.insert(0, InfraNode(id="user", type="user", label="User"))

    connections = [
        Connection(source=nodes[i].id, target=nodes[i + 1].id, flow_type="request")
        for i in range(len(nodes) - 1)
    ]
    return InfraSpec(nodes=nodes, connections=connections)
