# backend/infraflow/catalog/components.py
"""
Component Catalog - every infrastructure kind a graph node may carry.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class ComponentCategory(Enum):
    """Categories of infrastructure components"""
    SECURITY = "security"
    NETWORK = "network"
    COMPUTE = "compute"
    CLOUD = "cloud"
    STORAGE = "storage"
    AUTH = "auth"
    TELECOM = "telecom"
    WAN = "wan"
    EXTERNAL = "external"


@dataclass(frozen=True)
class ComponentInfo:
    type: str
    name: str
    name_ko: str
    category: ComponentCategory
    tier: str  # external | dmz | internal | data


def _c(type_: str, name: str, name_ko: str, category: ComponentCategory, tier: str) -> ComponentInfo:
    return ComponentInfo(type=type_, name=name, name_ko=name_ko, category=category, tier=tier)


_S = ComponentCategory.SECURITY
_N = ComponentCategory.NETWORK
_C = ComponentCategory.COMPUTE
_CL = ComponentCategory.CLOUD
_ST = ComponentCategory.STORAGE
_A = ComponentCategory.AUTH
_T = ComponentCategory.TELECOM
_W = ComponentCategory.WAN
_E = ComponentCategory.EXTERNAL


# ============================================================
# CATALOG
# ============================================================

_COMPONENTS: List[ComponentInfo] = [
    # External
    _c("user", "User", "사용자", _E, "external"),
    _c("internet", "Internet", "인터넷", _E, "external"),
    _c("zone", "Zone", "영역", _E, "internal"),

    # Security
    _c("firewall", "Firewall", "방화벽", _S, "dmz"),
    _c("waf", "WAF", "웹방화벽", _S, "dmz"),
    _c("ids-ips", "IDS/IPS", "IDS/IPS", _S, "dmz"),
    _c("vpn-gateway", "VPN Gateway", "VPN 게이트웨이", _S, "dmz"),
    _c("nac", "NAC", "NAC", _S, "internal"),
    _c("dlp", "DLP", "DLP", _S, "internal"),

    # Network
    _c("router", "Router", "라우터", _N, "internal"),
    _c("switch-l2", "L2 Switch", "L2 스위치", _N, "internal"),
    _c("switch-l3", "L3 Switch", "L3 스위치", _N, "internal"),
    _c("load-balancer", "Load Balancer", "로드밸런서", _N, "dmz"),
    _c("sd-wan", "SD-WAN", "SD-WAN", _N, "external"),
    _c("dns", "DNS", "DNS", _N, "dmz"),
    _c("cdn", "CDN", "CDN", _N, "external"),

    # Compute
    _c("web-server", "Web Server", "웹서버", _C, "dmz"),
    _c("app-server", "App Server", "앱서버", _C, "internal"),
    _c("db-server", "Database", "데이터베이스", _C, "data"),
    _c("container", "Container", "컨테이너", _C, "internal"),
    _c("vm", "VM", "가상머신", _C, "internal"),
    _c("kubernetes", "Kubernetes", "쿠버네티스", _C, "internal"),

    # Cloud
    _c("aws-vpc", "AWS VPC", "AWS VPC", _CL, "external"),
    _c("azure-vnet", "Azure VNet", "Azure VNet", _CL, "external"),
    _c("gcp-network", "GCP Network", "GCP 네트워크", _CL, "external"),
    _c("private-cloud", "Private Cloud", "프라이빗 클라우드", _CL, "internal"),

    # Storage
    _c("san-nas", "SAN/NAS", "SAN/NAS", _ST, "data"),
    _c("object-storage", "Object Storage", "오브젝트 스토리지", _ST, "data"),
    _c("backup", "Backup", "백업", _ST, "data"),
    _c("cache", "Cache", "캐시", _ST, "data"),
    _c("storage", "Storage", "스토리지", _ST, "data"),

    # Auth
    _c("ldap-ad", "LDAP/AD", "LDAP/AD", _A, "internal"),
    _c("sso", "SSO", "SSO", _A, "internal"),
    _c("mfa", "MFA", "MFA", _A, "internal"),
    _c("iam", "IAM", "IAM", _A, "internal"),

    # Telecom
    _c("central-office", "Central Office", "국사", _T, "external"),
    _c("base-station", "Base Station", "기지국", _T, "external"),
    _c("olt", "OLT", "광선로 단말", _T, "external"),
    _c("customer-premise", "Customer Premise", "고객 구내", _T, "external"),
    _c("idc", "IDC", "IDC", _T, "internal"),

    # WAN
    _c("pe-router", "PE Router", "PE 라우터", _W, "external"),
    _c("p-router", "P Router", "P 라우터", _W, "external"),
    _c("mpls-network", "MPLS Network", "MPLS 망", _W, "external"),
    _c("dedicated-line", "Dedicated Line", "전용회선", _W, "external"),
    _c("metro-ethernet", "Metro Ethernet", "메트로 이더넷", _W, "external"),
    _c("corporate-internet", "Corporate Internet", "기업인터넷", _W, "external"),
    _c("vpn-service", "VPN Service", "VPN 서비스", _W, "external"),
    _c("sd-wan-service", "SD-WAN Service", "SD-WAN 서비스", _W, "external"),
    _c("private-5g", "Private 5G", "5G 특화망", _W, "external"),
    _c("core-network", "Core Network", "모바일 코어망", _W, "external"),
    _c("upf", "UPF", "5G UPF", _W, "external"),
    _c("ring-network", "Ring Network", "링 네트워크", _W, "external"),
]

COMPONENT_CATALOG: Dict[str, ComponentInfo] = {c.type: c for c in _COMPONENTS}


def get_component(node_type: str) -> Optional[ComponentInfo]:
    return COMPONENT_CATALOG.get(node_type)


def is_known_type(node_type: str) -> bool:
    return node_type in COMPONENT_CATALOG


def get_label_for_type(node_type: str) -> str:
    """Display label for a type; unknown types are title-cased from their id."""
    info = COMPONENT_CATALOG.get(node_type)
    if info:
        return info.name
    return " ".join(part.capitalize() for part in node_type.split("-"))


def get_tier_for_type(node_type: str) -> str:
    info = COMPONENT_CATALOG.get(node_type)
    return info.tier if info else "internal"


def types_in_category(category: ComponentCategory) -> List[str]:
    return [c.type for c in _COMPONENTS if c.category == category]
