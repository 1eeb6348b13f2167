"""Change risk assessor checks"""

from infraflow.ir import Connection, InfraNode, InfraSpec
from infraflow.knowledge import StaticKnowledgeBase
from infraflow.knowledge.antipatterns import AntiPattern
from infraflow.parser.risk import ChangeRiskAssessor, RiskLevel, get_recommendation


def node(id_, type_):
    return InfraNode(id=id_, type=type_, label=id_)


def eleven_nodes() -> InfraSpec:
    nodes = [
        node("user", "user"),
        node("internet", "internet"),
        node("fw", "firewall"),
        node("waf", "waf"),
        node("lb", "load-balancer"),
        node("web1", "web-server"),
        node("web2", "web-server"),
        node("app", "app-server"),
        node("db", "db-server"),
        node("backup", "backup"),
        node("ldap", "ldap-ad"),
    ]
    connections = [
        Connection(source="user", target="internet"),
        Connection(source="internet", target="fw"),
        Connection(source="fw", target="waf"),
        Connection(source="waf", target="lb"),
        Connection(source="lb", target="web1"),
        Connection(source="lb", target="web2"),
        Connection(source="web1", target="app"),
        Connection(source="web2", target="app"),
        Connection(source="app", target="db"),
    ]
    return InfraSpec(nodes=nodes, connections=connections)


def assess(before, after, **kwargs):
    return ChangeRiskAssessor(**kwargs).assess(before, after)


def test_identical_graphs_have_no_risk():
    spec = eleven_nodes()
    result = assess(spec, spec.copy())

    assert result.codes == ["NO_RISK"]
    assert result.level == RiskLevel.LOW
    assert result.recommendation == "auto-apply"
    assert result.summary["totalChanges"] == 0


def test_redundancy_removed():
    before = eleven_nodes()
    after = before.copy()
    after.remove_nodes(["web2"])

    result = assess(before, after)
    redundancy = [f for f in result.factors if f.code == "REDUNDANCY_REMOVED"]
    assert len(redundancy) == 1
    assert redundancy[0].details == "web-server"
    assert redundancy[0].level == RiskLevel.MEDIUM
    assert "NO_RISK" not in result.codes


def test_internet_exposure_is_critical():
    before = InfraSpec(
        nodes=[node("internet", "internet"), node("fw", "firewall"), node("web", "web-server")],
        connections=[Connection(source="internet", target="fw"), Connection(source="fw", target="web")],
    )
    after = before.copy()
    after.nodes.append(node("db", "db-server"))
    after.connections.append(Connection(source="internet", target="db"))

    result = assess(before, after)
    exposed = [f for f in result.factors if f.code == "INTERNET_EXPOSED"]
    assert exposed[0].details == "internet -> db"
    assert result.level == RiskLevel.CRITICAL
    assert result.recommendation == "review-required"


def test_existing_exposure_is_not_reported_again():
    spec = InfraSpec(
        nodes=[node("internet", "internet"), node("db", "db-server")],
        connections=[Connection(source="db", target="internet")],
    )
    assert "INTERNET_EXPOSED" not in assess(spec, spec.copy()).codes


def test_removing_everything_is_critical():
    result = assess(eleven_nodes(), InfraSpec())
    assert "ALL_NODES_REMOVED" in result.codes
    assert "MASSIVE_CHANGE" in result.codes
    assert result.level == RiskLevel.CRITICAL
    assert result.summary["removedNodes"] == 11


def test_security_auth_and_backup_removal():
    before = eleven_nodes()
    after = before.copy()
    after.remove_nodes(["waf", "ldap", "backup"])

    result = assess(before, after)
    codes = result.codes
    assert "SECURITY_NODE_REMOVED" in codes
    assert "AUTH_NODE_REMOVED" in codes
    assert "BACKUP_REMOVED" in codes
    assert result.level == RiskLevel.HIGH
    backup = next(f for f in result.factors if f.code == "BACKUP_REMOVED")
    assert backup.details == "backup"


def test_change_ratio_tiers():
    before = eleven_nodes()

    # 4 of 11 removed -> 36%
    large = before.copy()
    large.remove_nodes(["user", "internet", "web1", "app"])
    codes = assess(before, large).codes
    assert "LARGE_CHANGE" in codes and "MASSIVE_CHANGE" not in codes

    # 5 added to a big graph -> moderate only
    bigger = before.copy()
    for i in range(20):
        bigger.nodes.append(node(f"vm{i}", "vm"))
    grown = bigger.copy()
    for i in range(5):
        grown.nodes.append(node(f"extra{i}", "vm"))
    codes = assess(bigger, grown).codes
    assert "MODERATE_CHANGE" in codes
    assert "LARGE_CHANGE" not in codes


def test_mandatory_dependency_broken():
    before = InfraSpec(nodes=[node("fw", "firewall"), node("db", "db-server")])
    after = InfraSpec(nodes=[node("db", "db-server")])

    result = assess(before, after)
    broken = [f for f in result.factors if f.code == "MANDATORY_DEP_BROKEN"]
    assert [f.details for f in broken] == ["db-server -> firewall"]


def test_antipattern_introduced_and_throwing_detector():
    def boom(spec):
        raise RuntimeError("broken detector")

    def has_cache(spec):
        return spec.has_type("cache")

    kb = StaticKnowledgeBase(antipatterns=[
        AntiPattern("AP-TEST-001", "Boom", "폭발", "high", boom),
        AntiPattern("AP-TEST-002", "Cache", "캐시", "medium", has_cache),
    ])
    before = eleven_nodes()
    after = before.copy()
    after.nodes.append(node("cache", "cache"))

    result = assess(before, after, knowledge_base=kb)
    introduced = [f.details for f in result.factors if f.code == "ANTIPATTERN_INTRODUCED"]
    assert introduced == ["AP-TEST-002"]


def test_recommendation_is_a_function_of_level():
    assert get_recommendation(RiskLevel.LOW)[0] == "auto-apply"
    assert get_recommendation(RiskLevel.MEDIUM)[0] == "confirm"
    assert get_recommendation(RiskLevel.HIGH)[0] == "review-required"
    assert get_recommendation(RiskLevel.CRITICAL)[0] == "review-required"


def test_to_dict_shape():
    data = assess(eleven_nodes(), InfraSpec()).to_dict()
    assert data["level"] == "critical"
    assert data["recommendation"] == "review-required"
    assert data["recommendationKo"]
    assert set(data["summary"]) == {
        "addedNodes", "removedNodes", "addedConnections", "removedConnections", "totalChanges",
    }
