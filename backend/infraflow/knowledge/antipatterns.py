# backend/infraflow/knowledge/antipatterns.py
"""
Infrastructure antipatterns with detector functions.

Categories:
    AP-SEC  - security
    AP-HA   - availability
    AP-PERF - performance
    AP-ARCH - architecture
"""

from dataclasses import dataclass
from typing import Callable, Tuple

from infraflow.ir import InfraSpec


@dataclass(frozen=True)
class AntiPattern:
    id: str
    name: str
    name_ko: str
    severity: str  # critical | high | medium
    detect: Callable[[InfraSpec], bool]
    problem_ko: str = ""

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "nameKo": self.name_ko,
            "severity": self.severity,
            "problemKo": self.problem_ko,
        }


# ============================================================
# HELPERS
# ============================================================

COMPUTE_TYPES = ("web-server", "app-server", "db-server", "container", "vm", "kubernetes")
AUTH_TYPES = ("ldap-ad", "sso", "mfa", "iam")
INTERNAL_ONLY_TYPES = ("ldap-ad", "san-nas", "backup", "cache", "db-server")
STORAGE_TYPES = ("san-nas", "object-storage", "backup", "cache", "storage")
LB_FRONTEND_TYPES = ("internet", "user", "firewall", "waf", "cdn", "dns", "router")


def is_directly_connected(spec: InfraSpec, type_a: str, type_b: str) -> bool:
    """Any edge, in either direction, between a node of type_a and a node of type_b."""
    a_ids = {n.id for n in spec.nodes_of_type(type_a)}
    b_ids = {n.id for n in spec.nodes_of_type(type_b)}
    return any(
        (c.source in a_ids and c.target in b_ids) or (c.source in b_ids and c.target in a_ids)
        for c in spec.connections
    )


def _internet_facing(spec: InfraSpec) -> bool:
    return spec.has_type("internet") or spec.has_type("user")


# ============================================================
# DETECTORS
# ============================================================

def _db_internet_exposure(spec: InfraSpec) -> bool:
    if not spec.has_type("db-server") or not spec.has_type("internet"):
        return False
    return is_directly_connected(spec, "db-server", "internet")


def _no_firewall(spec: InfraSpec) -> bool:
    return spec.has_any_type(COMPUTE_TYPES) and not spec.has_type("firewall")


def _web_without_waf(spec: InfraSpec) -> bool:
    return spec.has_type("web-server") and _internet_facing(spec) and not spec.has_type("waf")


def _internal_services_exposed(spec: InfraSpec) -> bool:
    if not spec.has_type("internet"):
        return False
    return any(
        spec.has_type(t) and is_directly_connected(spec, t, "internet")
        for t in INTERNAL_ONLY_TYPES
    )


def _no_encryption_gateway(spec: InfraSpec) -> bool:
    if not spec.has_type("internet"):
        return False
    if not spec.has_any_type(("web-server", "app-server", "load-balancer", "cdn")):
        return False
    has_encrypted_flow = any(c.flow_type == "encrypted" for c in spec.connections)
    return not spec.has_type("vpn-gateway") and not has_encrypted_flow


def _unprotected_database(spec: InfraSpec) -> bool:
    return any(db.tier in ("dmz", "external") for db in spec.nodes_of_type("db-server"))


def _no_access_control(spec: InfraSpec) -> bool:
    return spec.has_any_type(COMPUTE_TYPES) and not spec.has_any_type(AUTH_TYPES)


def _single_lb_for_many_webs(spec: InfraSpec) -> bool:
    return spec.count_type("load-balancer") == 1 and spec.count_type("web-server") >= 2


def _no_backup(spec: InfraSpec) -> bool:
    return spec.has_type("db-server") and not spec.has_type("backup")


def _no_disaster_recovery(spec: InfraSpec) -> bool:
    if len(spec.nodes) < 3:
        return False
    return not spec.has_type("backup") and not spec.has_type("cache")


def _single_database(spec: InfraSpec) -> bool:
    multi_tier = spec.has_type("web-server") and spec.has_type("app-server")
    return spec.count_type("db-server") == 1 and multi_tier


def _lb_single_backend(spec: InfraSpec) -> bool:
    lb_ids = {n.id for n in spec.nodes_of_type("load-balancer")}
    if not lb_ids:
        return False
    backends = 0
    for conn in spec.connections:
        if conn.source in lb_ids:
            other_id = conn.target
        elif conn.target in lb_ids:
            other_id = conn.source
        else:
            continue
        other = spec.find_node(other_id)
        if other is not None and other.type not in LB_FRONTEND_TYPES:
            backends += 1
    return backends <= 1


def _no_cache(spec: InfraSpec) -> bool:
    return spec.has_type("db-server") and spec.has_type("app-server") and not spec.has_type("cache")


def _no_cdn(spec: InfraSpec) -> bool:
    return spec.has_type("web-server") and _internet_facing(spec) and not spec.has_type("cdn")


def _no_load_balancing(spec: InfraSpec) -> bool:
    return spec.count_type("web-server") >= 2 and not spec.has_type("load-balancer")


def _web_to_db_direct(spec: InfraSpec) -> bool:
    if not spec.has_type("web-server") or not spec.has_type("db-server"):
        return False
    if spec.has_type("app-server"):
        return False
    return is_directly_connected(spec, "web-server", "db-server")


def _no_dns(spec: InfraSpec) -> bool:
    if not spec.has_type("cdn") and not spec.has_type("web-server"):
        return False
    return _internet_facing(spec) and not spec.has_type("dns")


def _flat_network(spec: InfraSpec) -> bool:
    if len(spec.nodes) < 3:
        return False
    tiers = {n.tier for n in spec.nodes if n.tier is not None}
    if not tiers:
        return False
    return len(tiers) <= 1


def _missing_app_tier(spec: InfraSpec) -> bool:
    return spec.has_type("web-server") and spec.has_type("db-server") and not spec.has_type("app-server")


def _oversized_without_orchestration(spec: InfraSpec) -> bool:
    if len(spec.nodes) <= 15:
        return False
    return not spec.has_type("kubernetes") and not spec.has_type("container")


def _no_segmentation(spec: InfraSpec) -> bool:
    compute_tiers = {n.tier for n in spec.nodes if n.type in COMPUTE_TYPES and n.tier is not None}
    storage_tiers = {n.tier for n in spec.nodes if n.type in STORAGE_TYPES and n.tier is not None}
    if not compute_tiers or not storage_tiers:
        return False
    return storage_tiers.issubset(compute_tiers)


def _monolith(spec: InfraSpec) -> bool:
    if not (spec.count_type("web-server") == 1
            and spec.count_type("app-server") == 1
            and spec.count_type("db-server") == 1):
        return False
    return not spec.has_any_type(("load-balancer", "container", "kubernetes"))


# ============================================================
# CATALOG
# ============================================================

ANTI_PATTERNS: Tuple[AntiPattern, ...] = (
    # Security
    AntiPattern("AP-SEC-001", "DB Direct Internet Exposure", "데이터베이스 인터넷 직접 노출", "critical",
                _db_internet_exposure, "데이터베이스가 인터넷에 직접 노출되면 데이터 탈취 위험이 있습니다."),
    AntiPattern("AP-SEC-002", "No Firewall", "방화벽 부재", "critical",
                _no_firewall, "방화벽 없이 서버를 운영하면 네트워크 접근 제어가 없습니다."),
    AntiPattern("AP-SEC-003", "Web Server Without WAF", "WAF 없는 웹 서버", "critical",
                _web_without_waf, "WAF 없이 웹 서버를 노출하면 OWASP Top 10 공격에 취약합니다."),
    AntiPattern("AP-SEC-004", "Internal Services Exposed", "내부 서비스 인터넷 노출", "critical",
                _internal_services_exposed, "내부 전용 서비스가 인터넷에 노출되면 핵심 인프라가 위험합니다."),
    AntiPattern("AP-SEC-005", "No Encryption Gateway", "암호화 게이트웨이 부재", "critical",
                _no_encryption_gateway, "암호화 없는 인터넷 통신은 중간자 공격에 취약합니다."),
    AntiPattern("AP-SEC-006", "Unprotected Database", "보호되지 않은 데이터베이스", "critical",
                _unprotected_database, "DMZ나 외부 티어의 데이터베이스는 직접 공격 대상이 됩니다."),
    AntiPattern("AP-SEC-007", "No Access Control", "접근 제어 부재", "critical",
                _no_access_control, "인증 구성요소 없이 서비스를 운영하면 누구나 접근할 수 있습니다."),

    # Availability
    AntiPattern("AP-HA-001", "Single Point of Failure - Load Balancer", "단일 장애점 - 로드 밸런서", "high",
                _single_lb_for_many_webs, "단일 로드 밸런서 장애 시 전체 서비스가 중단됩니다."),
    AntiPattern("AP-HA-002", "No Backup System", "백업 시스템 부재", "high",
                _no_backup, "백업 없이 데이터베이스를 운영하면 장애 시 복구할 수 없습니다."),
    AntiPattern("AP-HA-003", "No Disaster Recovery", "재해 복구 미구성", "high",
                _no_disaster_recovery, "재해 복구 체계가 없으면 장애 복구가 어렵습니다."),
    AntiPattern("AP-HA-004", "Single Database", "단일 데이터베이스 (이중화 없음)", "high",
                _single_database, "단일 데이터베이스는 치명적인 단일 장애점입니다."),
    AntiPattern("AP-HA-005", "No Health Check Path", "헬스 체크 경로 없음", "high",
                _lb_single_backend, "백엔드가 하나뿐인 로드 밸런서는 장애 조치를 할 수 없습니다."),

    # Performance
    AntiPattern("AP-PERF-001", "No Caching Layer", "캐시 계층 부재", "medium",
                _no_cache, "캐시 없이 모든 요청이 DB로 가면 부하가 급증합니다."),
    AntiPattern("AP-PERF-002", "No CDN", "CDN 부재", "medium",
                _no_cdn, "CDN 없이 정적 콘텐츠가 오리진에 집중됩니다."),
    AntiPattern("AP-PERF-003", "No Load Balancing", "로드 밸런싱 부재", "high",
                _no_load_balancing, "복수 웹 서버에 로드 밸런서가 없으면 트래픽 분산이 불가능합니다."),
    AntiPattern("AP-PERF-004", "Direct DB Connection from Web", "웹 서버의 DB 직접 연결", "high",
                _web_to_db_direct, "웹 서버가 DB에 직접 접근하면 비즈니스 로직 분리가 불가능합니다."),
    AntiPattern("AP-PERF-005", "No DNS", "DNS 부재", "medium",
                _no_dns, "DNS 없이는 도메인 기반 접근과 CDN 라우팅이 불가능합니다."),

    # Architecture
    AntiPattern("AP-ARCH-001", "Flat Network", "플랫 네트워크 (티어 미분리)", "high",
                _flat_network, "모든 시스템이 같은 보안 영역에 있으면 침해가 전체로 확산됩니다."),
    AntiPattern("AP-ARCH-002", "Missing Application Tier", "애플리케이션 티어 누락", "medium",
                _missing_app_tier, "앱 티어 없이 웹 서버가 DB에 접근하면 확장과 보안에 문제가 생깁니다."),
    AntiPattern("AP-ARCH-003", "Oversized Architecture", "과대 아키텍처 (오케스트레이션 부재)", "medium",
                _oversized_without_orchestration, "대규모 인프라를 수동으로 관리하면 운영 복잡도가 급증합니다."),
    AntiPattern("AP-ARCH-004", "No Network Segmentation", "네트워크 세그먼테이션 부재", "high",
                _no_segmentation, "컴퓨팅과 스토리지가 같은 세그먼트에 있으면 침해가 바로 확산됩니다."),
    AntiPattern("AP-ARCH-005", "Monolithic Everything", "모놀리식 아키텍처 (확장성 없음)", "medium",
                _monolith, "모든 계층이 단일 인스턴스면 수평 확장이 불가능합니다."),
)
