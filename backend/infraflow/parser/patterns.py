# backend/infraflow/parser/patterns.py
"""
Pattern Registry - ordered trigger rules for component and command detection.

Order matters: the first matching rule wins in single-match mode, so
more specific rules are registered before general ones
(WAF before Firewall, L3 switch before generic switch, ...).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Pattern, Sequence, Set, Tuple
import re


class CommandType(Enum):
    CREATE = "create"            # build a new architecture
    ADD = "add"                  # add nodes/connections
    REMOVE = "remove"            # remove nodes
    MODIFY = "modify"            # change node attributes
    CONNECT = "connect"          # add a connection
    DISCONNECT = "disconnect"    # remove a connection
    QUERY = "query"              # question / information request


_REGEX_META = set(".^$*+?{}[]()|\\")
_OPTIONAL_QUANTIFIERS = set("?*{")
_LOOKBEHIND_PREFIX = "(?<![a-z])"


def word(token: str) -> str:
    """Latin token that must not be glued to other latin letters ('ad' must not hit 'load')."""
    return f"{_LOOKBEHIND_PREFIX}{re.escape(token)}(?![a-z])"


def required_literal(alternative: str) -> str:
    """
    Leading literal every match of a trigger alternative must contain.

    Used to build the keyword pre-filter. Returns "" when no literal can be
    guaranteed, which disables the pre-filter for the owning registry.
    """
    text = alternative
    if text.startswith(_LOOKBEHIND_PREFIX):
        text = text[len(_LOOKBEHIND_PREFIX):]

    literal: List[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text) and not text[i + 1].isalnum():
            literal.append(text[i + 1])
            i += 2
            continue
        if ch in _REGEX_META:
            if ch in _OPTIONAL_QUANTIFIERS and literal:
                literal.pop()
            break
        literal.append(ch)
        i += 1
    return "".join(literal).strip().lower()


@dataclass(frozen=True)
class NodeTypePattern:
    """A component detection rule"""
    type: str
    label: str
    label_ko: str
    triggers: Tuple[str, ...]
    pattern: Pattern = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        compiled = re.compile("|".join(self.triggers), re.IGNORECASE)
        object.__setattr__(self, "pattern", compiled)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None

    def keywords(self) -> List[str]:
        return [required_literal(t) for t in self.triggers]


@dataclass(frozen=True)
class CommandPattern:
    """A command classification rule"""
    type: CommandType
    trigger: str
    pattern: Pattern = field(init=False, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "pattern", re.compile(self.trigger, re.IGNORECASE))

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


def _p(type_: str, label: str, label_ko: str, *triggers: str) -> NodeTypePattern:
    return NodeTypePattern(type=type_, label=label, label_ko=label_ko, triggers=tuple(triggers))


# ============================================================
# COMPONENT PATTERNS (order is significant)
# ============================================================

NODE_TYPE_PATTERNS: List[NodeTypePattern] = [
    # External
    _p("user", "User", "사용자", "user", "사용자", "유저", "client", "클라이언트"),
    _p("internet", "Internet", "인터넷", "internet", "인터넷", "외부망"),

    # Security - DMZ
    _p("waf", "WAF", "웹방화벽", "waf", "웹방화벽", r"웹 ?애플리케이션 ?방화벽"),
    _p("firewall", "Firewall", "방화벽", "firewall", "방화벽", word("fw")),
    _p("ids-ips", "IDS/IPS", "IDS/IPS", word("ids"), word("ips"), r"침입.*탐지", r"침입.*방지", "intrusion"),
    _p("vpn-gateway", "VPN Gateway", "VPN 게이트웨이", "vpn", "가상사설망"),
    _p("nac", "NAC", "NAC", word("nac"), r"네트워크.*접근.*제어"),
    _p("dlp", "DLP", "DLP", "dlp", r"데이터.*유출.*방지"),

    # Network
    _p("cdn", "CDN", "CDN", "cdn", r"content.*delivery"),
    _p("load-balancer", "Load Balancer", "로드밸런서", r"load ?balancer", r"로드 ?밸런서", word("lb"), "부하분산"),
    _p("router", "Router", "라우터", "router", "라우터"),
    _p("switch-l3", "L3 Switch", "L3 스위치", r"switch.*l3", r"l3.*switch", r"레이어 ?3", r"스위치.*l3"),
    _p("switch-l2", "L2 Switch", "L2 스위치", "switch", "스위치"),
    _p("sd-wan", "SD-WAN", "SD-WAN", r"sd-?wan", r"software.*defined.*wan"),
    _p("dns", "DNS", "DNS", "dns", r"도메인.*네임"),

    # Compute
    _p("web-server", "Web Server", "웹서버", r"web ?server", r"웹 ?서버"),
    _p("app-server", "App Server", "앱서버", r"app ?server", r"앱 ?서버", r"애플리케이션.*서버", word("was")),
    _p("db-server", "Database", "데이터베이스", word("db"), "database", "데이터베이스", "디비"),
    _p("kubernetes", "Kubernetes", "쿠버네티스", "kubernetes", "k8s", "쿠버네티스"),
    _p("container", "Container", "컨테이너", "container", "컨테이너", "docker", "도커"),
    _p("vm", "VM", "가상머신", word("vm"), r"virtual.*machine", r"가상.*머신", r"가상.*서버"),

    # Cloud
    _p("aws-vpc", "AWS VPC", "AWS VPC", r"aws.*vpc", r"vpc.*aws"),
    _p("azure-vnet", "Azure VNet", "Azure VNet", r"azure.*vnet", r"vnet.*azure"),
    _p("gcp-network", "GCP Network", "GCP 네트워크", "gcp", r"google.*cloud"),
    _p("private-cloud", "Private Cloud", "프라이빗 클라우드", r"private.*cloud", r"사설.*클라우드"),

    # Storage
    _p("san-nas", "SAN/NAS", "SAN/NAS", word("san"), word("nas"), r"스토리지.*영역", r"네트워크.*스토리지"),
    _p("object-storage", "Object Storage", "오브젝트 스토리지", r"object.*storage", r"오브젝트.*스토리지", word("s3")),
    _p("backup", "Backup", "백업", "backup", "백업"),
    _p("cache", "Cache", "캐시", "cache", "캐시", "redis", "memcached"),
    _p("storage", "Storage", "스토리지", "storage", "스토리지", "저장소"),

    # Auth
    _p("ldap-ad", "LDAP/AD", "LDAP/AD", "ldap", word("ad"), r"active.*directory", r"액티브.*디렉토리"),
    _p("sso", "SSO", "SSO", "sso", r"single.*sign.*on", r"싱글.*사인온"),
    _p("mfa", "MFA", "MFA", "mfa", r"multi.*factor", r"다중.*인증"),
    _p("iam", "IAM", "IAM", word("iam"), r"identity.*access"),

    # Telecom / WAN
    _p("central-office", "Central Office", "국사", r"central.*office", "국사"),
    _p("base-station", "Base Station", "기지국", r"base.*station", "기지국", "gnb", "enb"),
    _p("olt", "OLT", "광선로 단말", word("olt"), r"광선로.*단말"),
    _p("mpls-network", "MPLS Network", "MPLS 망", "mpls"),
    _p("dedicated-line", "Dedicated Line", "전용회선", r"dedicated.*line", "전용회선"),
    _p("private-5g", "Private 5G", "5G 특화망", r"private.*5g", r"5g.*특화망"),
]


# ============================================================
# COMMAND PATTERNS (order is significant)
# ============================================================

def _cmd(type_: CommandType, trigger: str) -> CommandPattern:
    return CommandPattern(type=type_, trigger=trigger)


COMMAND_PATTERNS: List[CommandPattern] = [
    # Add commands
    _cmd(CommandType.ADD, r"^(추가|붙여|넣어|더해|add|insert)"),
    _cmd(CommandType.ADD, r"(추가해줘|추가해|붙여줘|넣어줘|더해줘)$"),
    _cmd(CommandType.ADD, r"앞에|뒤에|사이에|위에|아래에"),
    _cmd(CommandType.ADD, r"\b(in front of|after|before|between)\b"),

    # Remove commands
    _cmd(CommandType.REMOVE, r"^(삭제|제거|없애|빼|remove|delete)"),
    _cmd(CommandType.REMOVE, r"(삭제해줘|삭제해|제거해줘|제거해|없애줘|빼줘)$"),

    # Modify commands
    _cmd(CommandType.MODIFY, r"^(수정|변경|바꿔|modify|change|update)"),
    _cmd(CommandType.MODIFY, r"(수정해|변경해|바꿔줘)$"),

    # Disconnect before connect: "연결 해제" also contains "연결"
    _cmd(CommandType.DISCONNECT, r"연결.*해제|끊어|disconnect|unlink"),

    # Connect commands
    _cmd(CommandType.CONNECT, r"연결|connect|link"),

    # Query commands
    _cmd(CommandType.QUERY, r"\?$|뭐야|뭔가요|알려줘|설명해"),
]


class PatternRegistry:
    """
    Ordered registry of component detection rules.

    Backed by a list, never a dict: registration order is the match
    priority. `version` increases on every change so detectors can
    invalidate derived state (keyword sets, caches).
    """

    def __init__(self, rules: Optional[Sequence[NodeTypePattern]] = None):
        self._rules: List[NodeTypePattern] = list(rules if rules is not None else NODE_TYPE_PATTERNS)
        self.version = 0

    @property
    def rules(self) -> Tuple[NodeTypePattern, ...]:
        return tuple(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(tuple(self._rules))

    def register(self, rule: NodeTypePattern, index: Optional[int] = None) -> None:
        """Register a rule; without an index it gets the lowest priority."""
        if index is None:
            self._rules.append(rule)
        else:
            self._rules.insert(index, rule)
        self.version += 1

    def find_by_type(self, node_type: str) -> Optional[NodeTypePattern]:
        for rule in self._rules:
            if rule.type == node_type:
                return rule
        return None

    def types(self) -> List[str]:
        return [r.type for r in self._rules]

    def keywords(self) -> Set[str]:
        """
        Keyword pre-filter set. Empty string inside the set means some
        trigger has no guaranteed literal and the pre-filter must be skipped.
        """
        found: Set[str] = set()
        for rule in self._rules:
            found.update(rule.keywords())
        return found


# Global registry instance
_global_registry: Optional[PatternRegistry] = None


def get_pattern_registry() -> PatternRegistry:
    """Get or create the global pattern registry"""
    global _global_registry
    if _global_registry is None:
        _global_registry = PatternRegistry()
    return _global_registry
