# backend/infraflow/knowledge/relationships.py
"""
Component relationships - requires / recommends / conflicts / protects / enhances.

Versioned knowledge table. Adding entries is backward-compatible;
removing or renaming entries is breaking for consumers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class RelationshipType(Enum):
    REQUIRES = "requires"
    RECOMMENDS = "recommends"
    CONFLICTS = "conflicts"
    PROTECTS = "protects"
    ENHANCES = "enhances"


class Strength(Enum):
    MANDATORY = "mandatory"
    STRONG = "strong"
    WEAK = "weak"


@dataclass(frozen=True)
class Relationship:
    id: str
    source: str
    target: str
    relationship_type: RelationshipType
    strength: Strength
    reason: str
    reason_ko: str

    def to_dict(self):
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "relationshipType": self.relationship_type.value,
            "strength": self.strength.value,
            "reason": self.reason,
            "reasonKo": self.reason_ko,
        }


_REQ = RelationshipType.REQUIRES
_REC = RelationshipType.RECOMMENDS
_CON = RelationshipType.CONFLICTS
_PRO = RelationshipType.PROTECTS
_ENH = RelationshipType.ENHANCES

_M = Strength.MANDATORY
_S = Strength.STRONG
_W = Strength.WEAK


def _r(id_, source, target, kind, strength, reason, reason_ko) -> Relationship:
    return Relationship(id_, source, target, kind, strength, reason, reason_ko)


RELATIONSHIPS: Tuple[Relationship, ...] = (
    # ----- requires -----
    _r("REL-REQ-001", "db-server", "firewall", _REQ, _M,
       "Databases must sit behind a network firewall.",
       "데이터베이스는 반드시 방화벽 뒤에 위치해야 합니다."),
    _r("REL-REQ-002", "sso", "ldap-ad", _REQ, _M,
       "SSO needs a directory service as its identity source.",
       "SSO는 사용자 저장소로 디렉터리 서비스가 필요합니다."),
    _r("REL-REQ-003", "vpn-gateway", "firewall", _REQ, _M,
       "VPN traffic must be filtered after decryption.",
       "VPN 복호화 이후 트래픽은 방화벽으로 통제해야 합니다."),
    _r("REL-REQ-004", "load-balancer", "web-server", _REQ, _S,
       "A load balancer needs backends to distribute traffic to.",
       "로드밸런서는 트래픽을 분산할 백엔드 서버가 필요합니다."),
    _r("REL-REQ-005", "mfa", "sso", _REQ, _S,
       "MFA is enforced through a central identity provider.",
       "MFA는 중앙 인증 시스템(SSO)을 통해 적용됩니다."),
    _r("REL-REQ-006", "kubernetes", "container", _REQ, _M,
       "A Kubernetes cluster schedules container workloads.",
       "쿠버네티스 클러스터는 컨테이너 워크로드를 실행합니다."),
    _r("REL-REQ-007", "backup", "storage", _REQ, _S,
       "Backups need a storage target.",
       "백업 데이터를 저장할 스토리지가 필요합니다."),
    _r("REL-REQ-008", "object-storage", "iam", _REQ, _S,
       "Bucket access is governed by IAM policies.",
       "오브젝트 스토리지 접근은 IAM 정책으로 통제해야 합니다."),
    _r("REL-REQ-009", "iam", "ldap-ad", _REQ, _S,
       "IAM policies are bound to directory identities.",
       "IAM 정책은 디렉터리 계정과 연동되어야 합니다."),
    _r("REL-REQ-010", "nac", "ldap-ad", _REQ, _S,
       "NAC authenticates endpoints against a directory.",
       "NAC는 디렉터리 서비스로 단말을 인증합니다."),

    # ----- recommends -----
    _r("REL-REC-001", "web-server", "waf", _REC, _S,
       "Internet-facing web servers should be protected by a WAF.",
       "인터넷에 노출된 웹서버는 WAF로 보호하는 것이 좋습니다."),
    _r("REL-REC-002", "web-server", "load-balancer", _REC, _S,
       "Run at least two web servers behind a load balancer.",
       "웹서버는 2대 이상을 로드밸런서 뒤에 두는 것이 좋습니다."),
    _r("REL-REC-003", "db-server", "backup", _REC, _S,
       "Databases need regular backups.",
       "데이터베이스는 정기 백업이 필요합니다."),
    _r("REL-REC-004", "app-server", "cache", _REC, _W,
       "A cache reduces database load.",
       "캐시는 데이터베이스 부하를 줄여줍니다."),
    _r("REL-REC-005", "web-server", "cdn", _REC, _W,
       "A CDN offloads static content.",
       "CDN은 정적 콘텐츠 부하를 분산합니다."),
    _r("REL-REC-006", "firewall", "ids-ips", _REC, _S,
       "IDS/IPS complements firewall filtering.",
       "IDS/IPS는 방화벽의 탐지 한계를 보완합니다."),
    _r("REL-REC-007", "vpn-gateway", "mfa", _REC, _S,
       "Remote access should require multi-factor authentication.",
       "원격 접속에는 다중 인증을 적용하는 것이 좋습니다."),
    _r("REL-REC-008", "ldap-ad", "mfa", _REC, _W,
       "Directory logins should be hardened with MFA.",
       "디렉터리 로그인에 MFA를 적용하는 것이 좋습니다."),
    _r("REL-REC-009", "kubernetes", "load-balancer", _REC, _S,
       "Expose cluster services through an ingress load balancer.",
       "클러스터 서비스는 인그레스 로드밸런서로 노출하는 것이 좋습니다."),
    _r("REL-REC-010", "cdn", "dns", _REC, _S,
       "CDN routing depends on DNS.",
       "CDN의 지리적 라우팅은 DNS에 의존합니다."),
    _r("REL-REC-011", "container", "kubernetes", _REC, _W,
       "Many containers are easier to run with an orchestrator.",
       "컨테이너가 많아지면 오케스트레이터 사용이 좋습니다."),
    _r("REL-REC-012", "db-server", "cache", _REC, _W,
       "Hot reads can be served from a cache.",
       "자주 읽는 데이터는 캐시로 처리하는 것이 좋습니다."),
    _r("REL-REC-013", "san-nas", "backup", _REC, _S,
       "Shared storage should be backed up.",
       "공유 스토리지는 백업이 필요합니다."),
    _r("REL-REC-014", "object-storage", "backup", _REC, _W,
       "Critical objects should be replicated or backed up.",
       "중요 객체는 복제 또는 백업하는 것이 좋습니다."),
    _r("REL-REC-015", "app-server", "load-balancer", _REC, _W,
       "Scale application servers horizontally behind a load balancer.",
       "앱서버는 로드밸런서 뒤에서 수평 확장하는 것이 좋습니다."),
    _r("REL-REC-016", "dlp", "firewall", _REC, _W,
       "DLP works best alongside perimeter filtering.",
       "DLP는 경계 방화벽과 함께 사용하는 것이 좋습니다."),
    _r("REL-REC-017", "sd-wan", "firewall", _REC, _S,
       "Branch breakouts need local firewalling.",
       "지사 인터넷 브레이크아웃에는 방화벽이 필요합니다."),
    _r("REL-REC-018", "router", "firewall", _REC, _W,
       "Filter traffic at the network edge.",
       "네트워크 경계에서 트래픽을 필터링하는 것이 좋습니다."),

    # ----- conflicts -----
    _r("REL-CON-001", "db-server", "internet", _CON, _M,
       "Databases must never be directly reachable from the internet.",
       "데이터베이스는 인터넷에서 직접 접근할 수 없어야 합니다."),
    _r("REL-CON-002", "cache", "internet", _CON, _M,
       "Cache servers must not be exposed to the internet.",
       "캐시 서버는 인터넷에 노출되면 안 됩니다."),
    _r("REL-CON-003", "ldap-ad", "internet", _CON, _M,
       "Directory services must stay internal.",
       "디렉터리 서비스는 내부망에만 있어야 합니다."),
    _r("REL-CON-004", "san-nas", "internet", _CON, _M,
       "Storage networks must stay internal.",
       "스토리지 네트워크는 내부망에만 있어야 합니다."),
    _r("REL-CON-005", "backup", "internet", _CON, _M,
       "Backup systems must not be exposed to the internet.",
       "백업 시스템은 인터넷에 노출되면 안 됩니다."),
    _r("REL-CON-006", "switch-l2", "internet", _CON, _S,
       "Access switches should not face the internet directly.",
       "L2 스위치는 인터넷과 직접 연결하지 않아야 합니다."),

    # ----- protects -----
    _r("REL-PRO-001", "firewall", "db-server", _PRO, _S,
       "Firewalls restrict database access to known hosts.",
       "방화벽은 데이터베이스 접근을 허용된 호스트로 제한합니다."),
    _r("REL-PRO-002", "waf", "web-server", _PRO, _S,
       "A WAF blocks OWASP Top 10 attacks.",
       "WAF는 OWASP Top 10 공격을 차단합니다."),
    _r("REL-PRO-003", "ids-ips", "app-server", _PRO, _W,
       "IDS/IPS detects lateral movement.",
       "IDS/IPS는 내부 확산 공격을 탐지합니다."),
    _r("REL-PRO-004", "dlp", "storage", _PRO, _W,
       "DLP prevents sensitive data from leaving storage.",
       "DLP는 민감 데이터 유출을 방지합니다."),
    _r("REL-PRO-005", "firewall", "app-server", _PRO, _S,
       "Firewalls segment application tiers.",
       "방화벽은 애플리케이션 계층을 분리합니다."),

    # ----- enhances -----
    _r("REL-ENH-001", "cache", "db-server", _ENH, _S,
       "A cache lowers database read latency.",
       "캐시는 데이터베이스 읽기 지연을 줄입니다."),
    _r("REL-ENH-002", "cdn", "web-server", _ENH, _S,
       "A CDN improves global response times.",
       "CDN은 전 세계 응답 속도를 개선합니다."),
    _r("REL-ENH-003", "load-balancer", "app-server", _ENH, _S,
       "Load balancing improves availability.",
       "로드밸런싱은 가용성을 높입니다."),
    _r("REL-ENH-004", "mfa", "vpn-gateway", _ENH, _S,
       "MFA hardens remote access.",
       "MFA는 원격 접속 보안을 강화합니다."),
    _r("REL-ENH-005", "dns", "load-balancer", _ENH, _W,
       "DNS-based balancing spreads traffic across sites.",
       "DNS 기반 분산으로 사이트 간 트래픽을 나눕니다."),
    _r("REL-ENH-006", "sso", "app-server", _ENH, _W,
       "SSO unifies application logins.",
       "SSO는 애플리케이션 로그인을 통합합니다."),
)


def get_relationships_for_component(component_type: str) -> List[Relationship]:
    return [r for r in RELATIONSHIPS if r.source == component_type or r.target == component_type]


def get_mandatory_dependencies(component_type: str) -> List[Relationship]:
    """`requires` relationships whose source is `component_type`."""
    return [
        r for r in RELATIONSHIPS
        if r.source == component_type and r.relationship_type == RelationshipType.REQUIRES
    ]


def get_recommendations(component_type: str) -> List[Relationship]:
    return [
        r for r in RELATIONSHIPS
        if r.source == component_type and r.relationship_type == RelationshipType.RECOMMENDS
    ]


def get_conflicts(component_type: str) -> List[Relationship]:
    """`conflicts` relationships touching `component_type` from either side."""
    return [
        r for r in RELATIONSHIPS
        if r.relationship_type == RelationshipType.CONFLICTS
        and (r.source == component_type or r.target == component_type)
    ]
