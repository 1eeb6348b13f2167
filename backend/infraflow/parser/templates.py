# backend/infraflow/parser/templates.py
"""
Template Catalog - curated, pre-built infrastructure graphs.

Templates are looked up by id or by keyword. Callers always receive
deep copies; the catalog itself is never handed out.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from infraflow.ir import Connection, InfraNode, InfraSpec, Zone


@dataclass
class InfraTemplate:
    """A named template graph"""
    id: str
    name: str
    description: str
    spec: InfraSpec
    keywords: List[str] = field(default_factory=list)


def _n(id_: str, type_: str, label: str, zone: Optional[str] = None) -> InfraNode:
    return InfraNode(id=id_, type=type_, label=label, zone=zone)


def _e(source: str, target: str, flow: str = "request", label: Optional[str] = None) -> Connection:
    return Connection(source=source, target=target, flow_type=flow, label=label)


def _z(id_: str, label: str, type_: str) -> Zone:
    return Zone(id=id_, label=label, type=type_)


# ============================================================
# TEMPLATE GRAPHS
# ============================================================

_TEMPLATES: List[InfraTemplate] = [
    InfraTemplate(
        id="3tier",
        name="3티어 웹 아키텍처",
        description="CDN, 보안 계층, 웹/앱 이중화, 데이터베이스로 구성된 표준 웹 구조입니다.",
        keywords=["3티어", "3-tier", "3tier", "웹 아키텍처", "web architecture", "3계층"],
        spec=InfraSpec(
            nodes=[
                _n("user", "user", "User"),
                _n("cdn", "cdn", "CDN", "external"),
                _n("firewall", "firewall", "Firewall", "dmz"),
                _n("waf", "waf", "WAF", "dmz"),
                _n("lb", "load-balancer", "Load Balancer", "dmz"),
                _n("web1", "web-server", "Web Server 1", "web"),
                _n("web2", "web-server", "Web Server 2", "web"),
                _n("app1", "app-server", "App Server 1", "app"),
                _n("app2", "app-server", "App Server 2", "app"),
                _n("db", "db-server", "Database", "db"),
            ],
            connections=[
                _e("user", "cdn"),
                _e("cdn", "firewall"),
                _e("firewall", "waf"),
                _e("waf", "lb"),
                _e("lb", "web1"),
                _e("lb", "web2"),
                _e("web1", "app1"),
                _e("web2", "app2"),
                _e("app1", "db"),
                _e("app2", "db"),
            ],
            zones=[
                _z("external", "External", "external"),
                _z("dmz", "DMZ", "dmz"),
                _z("web", "Web Tier", "internal"),
                _z("app", "App Tier", "internal"),
                _z("db", "DB Tier", "data"),
            ],
        ),
    ),
    InfraTemplate(
        id="vpn",
        name="VPN 내부망 접속",
        description="원격 사용자가 VPN을 거쳐 내부 서버에 접근하는 구조입니다.",
        keywords=["vpn", "내부망", "internal network", "원격 접속", "remote access", "사내망"],
        spec=InfraSpec(
            nodes=[
                _n("user", "user", "Remote User"),
                _n("internet", "internet", "Internet", "external"),
                _n("vpn", "vpn-gateway", "VPN Gateway", "dmz"),
                _n("firewall", "firewall", "Internal Firewall", "dmz"),
                _n("router", "router", "Core Router", "internal"),
                _n("server1", "app-server", "Internal Server 1", "internal"),
                _n("server2", "app-server", "Internal Server 2", "internal"),
                _n("ldap", "ldap-ad", "LDAP/AD", "internal"),
            ],
            connections=[
                _e("user", "internet", "encrypted"),
                _e("internet", "vpn", "encrypted"),
                _e("vpn", "firewall"),
                _e("firewall", "router"),
                _e("router", "server1"),
                _e("router", "server2"),
                _e("vpn", "ldap", "request", "Auth"),
            ],
            zones=[
                _z("external", "External", "external"),
                _z("dmz", "DMZ", "dmz"),
                _z("internal", "Internal Network", "internal"),
            ],
        ),
    ),
    InfraTemplate(
        id="k8s",
        name="쿠버네티스 클러스터",
        description="Ingress, 서비스, Pod와 영구 스토리지로 구성된 컨테이너 플랫폼입니다.",
        keywords=["kubernetes", "k8s", "쿠버네티스", "container", "컨테이너", "pod"],
        spec=InfraSpec(
            nodes=[
                _n("user", "user", "User"),
                _n("ingress", "load-balancer", "Ingress Controller", "k8s"),
                _n("svc", "kubernetes", "Service", "k8s"),
                _n("pod1", "container", "Pod 1", "k8s"),
                _n("pod2", "container", "Pod 2", "k8s"),
                _n("pod3", "container", "Pod 3", "k8s"),
                _n("pv", "storage", "Persistent Volume", "storage"),
                _n("db", "db-server", "Database", "storage"),
            ],
            connections=[
                _e("user", "ingress"),
                _e("ingress", "svc"),
                _e("svc", "pod1"),
                _e("svc", "pod2"),
                _e("svc", "pod3"),
                _e("pod1", "pv", "sync"),
                _e("pod2", "db"),
            ],
            zones=[
                _z("k8s", "Kubernetes Cluster", "internal"),
                _z("storage", "Storage Layer", "data"),
            ],
        ),
    ),
    InfraTemplate(
        id="simple-waf",
        name="WAF 기본 웹 구성",
        description="WAF와 로드밸런서 뒤에 웹서버 두 대를 둔 기본 구성입니다.",
        # Bare component words (waf, 웹서버, ...) are left to component detection.
        keywords=["simple waf", "기본 웹 구성", "간단한 웹 구성"],
        spec=InfraSpec(
            nodes=[
                _n("user", "user", "User"),
                _n("waf", "waf", "WAF", "dmz"),
                _n("lb", "load-balancer", "Load Balancer", "dmz"),
                _n("web1", "web-server", "Web Server 1", "web"),
                _n("web2", "web-server", "Web Server 2", "web"),
            ],
            connections=[
                _e("user", "waf"),
                _e("waf", "lb"),
                _e("lb", "web1"),
                _e("lb", "web2"),
            ],
            zones=[
                _z("dmz", "DMZ", "dmz"),
                _z("web", "Web Tier", "internal"),
            ],
        ),
    ),
    InfraTemplate(
        id="hybrid",
        name="하이브리드 클라우드",
        description="퍼블릭 클라우드 워크로드와 온프레미스 데이터베이스를 VPN으로 연결합니다.",
        keywords=["hybrid", "하이브리드", "cloud", "클라우드", "aws", "azure", "on-premise"],
        spec=InfraSpec(
            nodes=[
                _n("user", "user", "User"),
                _n("cdn", "cdn", "CDN"),
                _n("aws", "aws-vpc", "AWS VPC", "cloud"),
                _n("alb", "load-balancer", "ALB", "cloud"),
                _n("ec2", "vm", "EC2 Instance", "cloud"),
                _n("vpn", "vpn-gateway", "VPN Gateway", "hybrid"),
                _n("onprem-fw", "firewall", "On-Premise FW", "onprem"),
                _n("onprem-db", "db-server", "On-Premise DB", "onprem"),
            ],
            connections=[
                _e("user", "cdn"),
                _e("cdn", "alb"),
                _e("alb", "ec2"),
                _e("ec2", "vpn", "encrypted"),
                _e("vpn", "onprem-fw", "encrypted"),
                _e("onprem-fw", "onprem-db"),
            ],
            zones=[
                _z("cloud", "AWS Cloud", "external"),
                _z("hybrid", "Hybrid Connection", "dmz"),
                _z("onprem", "On-Premise", "internal"),
            ],
        ),
    ),
    InfraTemplate(
        id="microservices",
        name="마이크로서비스 아키텍처",
        description="API 게이트웨이 뒤에 서비스별 컨테이너와 전용 데이터베이스를 둡니다.",
        keywords=["마이크로서비스", "microservice", "msa", "api gateway", "서비스 메시"],
        spec=InfraSpec(
            nodes=[
                _n("user", "user", "User"),
                _n("api-gw", "load-balancer", "API Gateway", "gateway"),
                _n("auth-svc", "container", "Auth Service", "services"),
                _n("user-svc", "container", "User Service", "services"),
                _n("order-svc", "container", "Order Service", "services"),
                _n("payment-svc", "container", "Payment Service", "services"),
                _n("msg-queue", "cache", "Message Queue", "infra"),
                _n("user-db", "db-server", "User DB", "data"),
                _n("order-db", "db-server", "Order DB", "data"),
            ],
            connections=[
                _e("user", "api-gw"),
                _e("api-gw", "auth-svc"),
                _e("api-gw", "user-svc"),
                _e("api-gw", "order-svc"),
                _e("order-svc", "msg-queue", "sync"),
                _e("msg-queue", "payment-svc", "sync"),
                _e("user-svc", "user-db"),
                _e("order-svc", "order-db"),
            ],
            zones=[
                _z("gateway", "Gateway", "dmz"),
                _z("services", "Services", "internal"),
                _z("infra", "Infrastructure", "internal"),
                _z("data", "Data Layer", "data"),
            ],
        ),
    ),
    InfraTemplate(
        id="zero-trust",
        name="제로 트러스트",
        description="인증, MFA, 정책 검사를 모든 접근 경로에 강제하는 구조입니다.",
        keywords=["제로트러스트", "zero trust", "ztna", "제로 트러스트", "identity"],
        spec=InfraSpec(
            nodes=[
                _n("user", "user", "User"),
                _n("idp", "sso", "Identity Provider", "identity"),
                _n("mfa", "mfa", "MFA", "identity"),
                _n("ztna", "vpn-gateway", "ZTNA Gateway", "access"),
                _n("policy", "firewall", "Policy Engine", "access"),
                _n("dlp", "dlp", "DLP", "security"),
                _n("app", "app-server", "Application", "workload"),
                _n("data", "db-server", "Data Store", "workload"),
            ],
            connections=[
                _e("user", "idp", "request", "1. Authenticate"),
                _e("idp", "mfa", "request", "2. MFA"),
                _e("mfa", "ztna", "encrypted", "3. Verify"),
                _e("ztna", "policy", "request", "4. Policy Check"),
                _e("policy", "dlp", "request", "5. DLP Scan"),
                _e("dlp", "app", "encrypted", "6. Access"),
                _e("app", "data", "encrypted"),
            ],
            zones=[
                _z("identity", "Identity", "external"),
                _z("access", "Access Control", "dmz"),
                _z("security", "Security", "dmz"),
                _z("workload", "Workload", "internal"),
            ],
        ),
    ),
    InfraTemplate(
        id="dr",
        name="재해복구(DR) 아키텍처",
        description="주 사이트와 DR 사이트를 DNS로 전환하고 DB를 복제합니다.",
        keywords=["disaster recovery", "재해복구", "이중화", "failover", "high availability"],
        spec=InfraSpec(
            nodes=[
                _n("user", "user", "User"),
                _n("dns", "dns", "Global DNS", "global"),
                _n("lb-primary", "load-balancer", "Primary LB", "primary"),
                _n("app-primary", "app-server", "Primary App", "primary"),
                _n("db-primary", "db-server", "Primary DB", "primary"),
                _n("lb-dr", "load-balancer", "DR LB", "dr"),
                _n("app-dr", "app-server", "DR App", "dr"),
                _n("db-dr", "db-server", "DR DB", "dr"),
            ],
            connections=[
                _e("user", "dns"),
                _e("dns", "lb-primary", "request", "Active"),
                _e("dns", "lb-dr", "blocked", "Standby"),
                _e("lb-primary", "app-primary"),
                _e("app-primary", "db-primary"),
                _e("lb-dr", "app-dr"),
                _e("app-dr", "db-dr"),
                _e("db-primary", "db-dr", "sync", "Replication"),
            ],
            zones=[
                _z("global", "Global", "external"),
                _z("primary", "Primary Site", "internal"),
                _z("dr", "DR Site", "internal"),
            ],
        ),
    ),
    InfraTemplate(
        id="api",
        name="API 백엔드",
        description="Edge, WAF, 속도 제한, API 게이트웨이와 캐시를 갖춘 API 서비스 구조입니다.",
        keywords=["api", "rest", "backend", "백엔드", "restful", "graphql"],
        spec=InfraSpec(
            nodes=[
                _n("client", "user", "API Client"),
                _n("cdn", "cdn", "CDN/Edge", "edge"),
                _n("waf", "waf", "WAF", "security"),
                _n("rate-limit", "firewall", "Rate Limiter", "security"),
                _n("api-gw", "load-balancer", "API Gateway", "gateway"),
                _n("api-v1", "app-server", "API v1", "api"),
                _n("api-v2", "app-server", "API v2", "api"),
                _n("cache", "cache", "Redis Cache", "data"),
                _n("db", "db-server", "PostgreSQL", "data"),
            ],
            connections=[
                _e("client", "cdn"),
                _e("cdn", "waf"),
                _e("waf", "rate-limit"),
                _e("rate-limit", "api-gw"),
                _e("api-gw", "api-v1"),
                _e("api-gw", "api-v2"),
                _e("api-v1", "cache"),
                _e("api-v2", "cache"),
                _e("cache", "db"),
            ],
            zones=[
                _z("edge", "Edge", "external"),
                _z("security", "Security", "dmz"),
                _z("gateway", "Gateway", "dmz"),
                _z("api", "API Layer", "internal"),
                _z("data", "Data Layer", "data"),
            ],
        ),
    ),
    InfraTemplate(
        id="iot",
        name="IoT 데이터 플랫폼",
        description="디바이스 데이터를 MQTT로 수집해 스트림 처리와 분석을 거쳐 시각화합니다.",
        keywords=["iot", "사물인터넷", "mqtt", "sensor", "센서", "edge"],
        spec=InfraSpec(
            nodes=[
                _n("device", "user", "IoT Device"),
                _n("gateway", "router", "IoT Gateway", "edge"),
                _n("mqtt", "cache", "MQTT Broker", "messaging"),
                _n("stream", "app-server", "Stream Processor", "processing"),
                _n("analytics", "app-server", "Analytics Engine", "processing"),
                _n("timeseries", "db-server", "TimeSeries DB", "data"),
                _n("storage", "storage", "Data Lake", "data"),
                _n("dashboard", "web-server", "Dashboard", "presentation"),
            ],
            connections=[
                _e("device", "gateway"),
                _e("gateway", "mqtt", "sync"),
                _e("mqtt", "stream", "sync"),
                _e("stream", "timeseries"),
                _e("stream", "analytics", "sync"),
                _e("analytics", "storage"),
                _e("timeseries", "dashboard", "response"),
                _e("storage", "dashboard", "response"),
            ],
            zones=[
                _z("edge", "Edge", "external"),
                _z("messaging", "Messaging", "dmz"),
                _z("processing", "Processing", "internal"),
                _z("data", "Data", "data"),
                _z("presentation", "Presentation", "internal"),
            ],
        ),
    ),
    InfraTemplate(
        id="vdi-openclaw",
        name="VDI + 비서AI",
        description="VPN과 2차 인증을 거친 VDI 세션에서 내부망 LLM 비서를 사용하는 구조입니다.",
        keywords=["openclaw", "오픈클로", "비서ai", "의회 ai", "vdi llm", "의정 ai", "클로드봇", "몰트봇"],
        spec=InfraSpec(
            nodes=[
                _n("member", "user", "의원 (외부단말)"),
                _n("vpn-2fa", "vpn-gateway", "VPN + 2FA/DID", "access"),
                _n("vdi-gw", "load-balancer", "VDI Gateway", "dmz"),
                _n("vdi-session", "vm", "VDI 세션 (가상PC)", "vdi"),
                _n("openclaw", "container", "OpenClaw 비서AI", "vdi"),
                _n("llm", "app-server", "내부망 LLM", "internal"),
                _n("rag", "app-server", "RAG Engine", "internal"),
                _n("vectordb", "db-server", "Vector DB", "data"),
                _n("docs", "storage", "의정자료/회의록", "data"),
            ],
            connections=[
                _e("member", "vpn-2fa", "encrypted", "VPN 접속"),
                _e("vpn-2fa", "vdi-gw", "encrypted", "DID 인증"),
                _e("vdi-gw", "vdi-session"),
                _e("vdi-session", "openclaw", "request", "비서AI 호출"),
                _e("openclaw", "llm", "request", "LLM 추론"),
                _e("openclaw", "rag", "request", "RAG 검색"),
                _e("rag", "vectordb"),
                _e("rag", "docs"),
            ],
            zones=[
                _z("access", "접근제어", "external"),
                _z("dmz", "DMZ", "dmz"),
                _z("vdi", "VDI 영역", "internal"),
                _z("internal", "내부망", "internal"),
                _z("data", "데이터", "data"),
            ],
        ),
    ),
    InfraTemplate(
        id="assembly-vdi",
        name="다중 PC 통합 VDI",
        description="여러 장소의 단말을 하나의 VDI 포털로 통합하고 프로파일을 동기화합니다.",
        keywords=["의원 vdi", "다중 pc", "의회 vdi", "의원실", "본회의장", "상임위", "지역상담소", "의원 업무환경"],
        spec=InfraSpec(
            nodes=[
                _n("member", "user", "의원"),
                _n("main-hall", "user", "본회의장 PC"),
                _n("committee", "user", "상임위 PC"),
                _n("office", "user", "의원실 PC"),
                _n("local", "user", "지역상담소 PC"),
                _n("laptop", "user", "지급 노트북"),
                _n("vdi-portal", "load-balancer", "VDI 포털", "dmz"),
                _n("vdi-server", "vm", "VDI 서버팜", "vdi"),
                _n("profile", "storage", "프로파일 동기화", "vdi"),
                _n("file-server", "storage", "통합 파일서버", "data"),
            ],
            connections=[
                _e("main-hall", "vdi-portal"),
                _e("committee", "vdi-portal"),
                _e("office", "vdi-portal"),
                _e("local", "vdi-portal", "encrypted"),
                _e("laptop", "vdi-portal", "encrypted"),
                _e("vdi-portal", "vdi-server"),
                _e("vdi-server", "profile", "sync", "프로파일 로밍"),
                _e("vdi-server", "file-server", "request", "자료 동기화"),
            ],
            zones=[
                _z("dmz", "DMZ", "dmz"),
                _z("vdi", "VDI 인프라", "internal"),
                _z("data", "데이터 센터", "data"),
            ],
        ),
    ),
    InfraTemplate(
        id="network-separation-llm",
        name="망분리 환경 LLM 접근",
        description="인터넷망에서 중계서버와 DLP를 거쳐 내부망 LLM에 접근합니다.",
        keywords=["망분리 llm", "내부망 llm", "인터넷망 llm", "망분리 ai", "중계서버"],
        spec=InfraSpec(
            nodes=[
                _n("user", "user", "사용자 (인터넷망)"),
                _n("internet-pc", "web-server", "인터넷망 PC", "internet"),
                _n("firewall", "firewall", "망분리 방화벽", "dmz"),
                _n("relay", "app-server", "API 중계서버", "dmz"),
                _n("dlp", "dlp", "DLP", "dmz"),
                _n("internal-pc", "web-server", "내부망 PC", "internal"),
                _n("llm-server", "app-server", "LLM 서버", "internal"),
                _n("gpu", "container", "GPU 클러스터", "internal"),
                _n("knowledge", "db-server", "지식베이스", "internal"),
            ],
            connections=[
                _e("user", "internet-pc"),
                _e("internet-pc", "firewall", "blocked", "직접접근 차단"),
                _e("internet-pc", "relay", "request", "API 호출"),
                _e("relay", "dlp", "request", "데이터 검사"),
                _e("dlp", "llm-server", "encrypted"),
                _e("llm-server", "gpu", "request", "추론"),
                _e("llm-server", "knowledge", "request", "RAG"),
                _e("llm-server", "internal-pc", "response"),
            ],
            zones=[
                _z("internet", "인터넷망", "external"),
                _z("dmz", "DMZ (중계)", "dmz"),
                _z("internal", "내부업무망", "internal"),
            ],
        ),
    ),
    InfraTemplate(
        id="hybrid-vdi",
        name="하이브리드 클라우드 VDI",
        description="클라우드 VDI와 온프레미스 VDI가 인증과 스토리지를 공유합니다.",
        keywords=["하이브리드 vdi", "클라우드 vdi", "온프레미스 vdi", "vdi 통합"],
        spec=InfraSpec(
            nodes=[
                _n("user", "user", "원격 사용자"),
                _n("cloud-gw", "load-balancer", "클라우드 VDI GW", "cloud"),
                _n("cloud-vdi", "vm", "클라우드 VDI", "cloud"),
                _n("vpn", "vpn-gateway", "Site-to-Site VPN", "hybrid"),
                _n("onprem-gw", "load-balancer", "온프레미스 VDI GW", "onprem"),
                _n("onprem-vdi", "vm", "온프레미스 VDI", "onprem"),
                _n("ad", "ldap-ad", "AD/LDAP", "onprem"),
                _n("storage", "storage", "통합 스토리지", "onprem"),
            ],
            connections=[
                _e("user", "cloud-gw", "request", "클라우드 접속"),
                _e("user", "onprem-gw", "encrypted", "VPN 접속"),
                _e("cloud-gw", "cloud-vdi"),
                _e("onprem-gw", "onprem-vdi"),
                _e("cloud-vdi", "vpn", "encrypted"),
                _e("vpn", "ad", "request", "인증"),
                _e("vpn", "storage", "sync", "데이터 동기화"),
                _e("onprem-vdi", "ad"),
                _e("onprem-vdi", "storage"),
            ],
            zones=[
                _z("cloud", "퍼블릭 클라우드", "external"),
                _z("hybrid", "하이브리드 연결", "dmz"),
                _z("onprem", "온프레미스", "internal"),
            ],
        ),
    ),
]

# Insertion order is keyword-match priority
TEMPLATE_CATALOG: Dict[str, InfraTemplate] = {t.id: t for t in _TEMPLATES}

FALLBACK_TEMPLATE_ID = "simple-waf"


def get_available_templates() -> List[str]:
    return list(TEMPLATE_CATALOG.keys())


def get_template(template_id: str) -> Optional[InfraSpec]:
    """Deep copy of a template graph, or None for an unknown id."""
    template = TEMPLATE_CATALOG.get(template_id)
    if template is None:
        return None
    return template.spec.copy()


def get_template_info(template_id: str) -> Optional[InfraTemplate]:
    return TEMPLATE_CATALOG.get(template_id)


def template_keywords() -> List[tuple]:
    """(template_id, keyword) pairs in priority order."""
    return [(t.id, kw) for t in _TEMPLATES for kw in t.keywords]
