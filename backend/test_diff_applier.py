"""Diff applier checks"""

from infraflow.ir import Connection, InfraNode, InfraSpec
from infraflow.parser.diff_applier import DiffApplier, find_node
from infraflow.schemas import AddData, AddOperation, RemoveOperation


def base_spec() -> InfraSpec:
    return InfraSpec(
        nodes=[
            InfraNode(id="user", type="user", label="User"),
            InfraNode(id="firewall-1", type="firewall", label="Firewall", tier="dmz"),
            InfraNode(id="web-1", type="web-server", label="Web", tier="internal"),
        ],
        connections=[
            Connection(source="user", target="firewall-1", flow_type="request"),
            Connection(source="firewall-1", target="web-1", flow_type="request"),
        ],
    )


def apply(ops):
    return DiffApplier().apply(base_spec(), ops)


def test_find_node_fallback_order():
    spec = base_spec()
    assert find_node(spec, "web-1").id == "web-1"
    assert find_node(spec, "firewall").id == "firewall-1"
    assert find_node(spec, "web").id == "web-1"
    assert find_node(spec, "cache") is None


def test_replace_preserves_connections():
    result = apply([{"type": "replace", "target": "firewall", "data": {"newType": "waf"}}])

    assert result.success
    new_id = result.id_remap["firewall-1"]
    assert new_id.startswith("waf-")
    node = result.spec.find_node(new_id)
    assert node.type == "waf"
    assert node.label == "WAF"
    assert node.tier == "dmz"
    assert result.spec.connection_keys() == {f"user->{new_id}", f"{new_id}->web-1"}


def test_replace_can_drop_connections():
    result = apply([{
        "type": "replace",
        "target": "firewall-1",
        "data": {"newType": "waf", "preserveConnections": False},
    }])
    assert result.spec.connections == []


def test_add_between_nodes():
    result = apply([{"type": "add", "target": "ids-ips", "data": {"betweenNodes": ["firewall-1", "web-1"]}}])

    new = result.spec.first_of_type("ids-ips")
    keys = result.spec.connection_keys()
    assert "firewall-1->web-1" not in keys
    assert f"firewall-1->{new.id}" in keys
    assert f"{new.id}->web-1" in keys


def test_add_after_and_before():
    result = apply([
        {"type": "add", "target": "cache", "data": {"afterNode": "web-1"}},
        {"type": "add", "target": "cdn", "data": {"beforeNode": "firewall"}},
    ])
    cache = result.spec.first_of_type("cache")
    cdn = result.spec.first_of_type("cdn")
    assert result.spec.has_connection("web-1", cache.id)
    assert result.spec.has_connection(cdn.id, "firewall-1")
    assert cache.tier == "data"


def test_add_between_unknown_node_leaves_graph_untouched():
    result = apply([{"type": "add", "target": "waf", "data": {"betweenNodes": ["nope", "web-1"]}}])
    assert not result.success
    assert result.applied_ops == 0
    assert not result.spec.has_type("waf")


def test_remove_node_and_edges():
    result = apply([{"type": "remove", "target": "firewall-1"}])
    assert result.spec.node_ids() == {"user", "web-1"}
    assert result.spec.connections == []


def test_modify_merges_only_given_fields():
    result = apply([{"type": "modify", "target": "web-1", "data": {"label": "Frontend"}}])
    node = result.spec.find_node("web-1")
    assert node.label == "Frontend"
    assert node.tier == "internal"
    assert node.type == "web-server"


def test_connect_twice_equals_once():
    op = {"type": "connect", "data": {"source": "user", "target": "web-1"}}
    once = apply([op])
    twice = apply([op, op])

    assert once.spec.to_dict() == twice.spec.to_dict()
    assert once.spec.connections[-1].flow_type == "request"


def test_connect_unknown_source():
    result = apply([{"type": "connect", "data": {"source": "cache", "target": "web-1"}}])
    assert result.errors == ["소스 노드를 찾을 수 없습니다: cache"]


def test_disconnect():
    result = apply([{"type": "disconnect", "data": {"source": "firewall", "target": "web"}}])
    assert result.spec.connection_keys() == {"user->firewall-1"}


def test_blank_targets_are_rejected():
    result = apply([
        {"type": "remove", "target": ""},
        {"type": "modify", "target": "  ", "data": {"label": "x"}},
        {"type": "disconnect", "data": {"source": "", "target": "web-1"}},
    ])

    assert result.applied_ops == 0
    assert result.errors == ["대상 노드가 지정되지 않았습니다"] * 3
    assert result.spec.node_ids() == {"user", "firewall-1", "web-1"}
    assert len(result.spec.connections) == 2
    assert find_node(base_spec(), "") is None


def test_errors_do_not_abort_batch():
    result = apply([
        {"type": "remove", "target": "missing"},
        {"type": "explode", "target": "web-1"},
        {"type": "replace", "target": "web-1"},
        {"type": "add", "target": "cache"},
    ])

    assert result.applied_ops == 1
    assert len(result.errors) == 3
    assert result.errors[0] == "노드를 찾을 수 없습니다: missing"
    assert result.spec.has_type("cache")
    assert not result.success


def test_input_graph_is_not_mutated():
    spec = base_spec()
    DiffApplier().apply(spec, [{"type": "remove", "target": "web-1"}])
    assert spec.node_ids() == {"user", "firewall-1", "web-1"}


def test_accepts_typed_operations():
    result = DiffApplier().apply(base_spec(), [
        AddOperation(type="add", target="cache", data=AddData(after_node="web-1")),
        RemoveOperation(type="remove", target="user"),
    ])
    assert result.applied_ops == 2
    assert not result.spec.has_type("user")


def test_to_dict_shape():
    data = apply([{"type": "remove", "target": "user"}]).to_dict()
    assert set(data) == {"success", "spec", "appliedOps", "errors", "idRemap"}
    assert data["appliedOps"] == 1
