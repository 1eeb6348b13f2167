"""Spec builder, unified parser and conversation context checks"""

import pytest

from infraflow.ir import Connection, InfraNode, InfraSpec
from infraflow.ir.errors import MSG_CREATE_FIRST, MSG_REMOVE_NOT_FOUND
from infraflow.parser.context import ConversationContext
from infraflow.parser.detector import ComponentDetector
from infraflow.parser.patterns import CommandType, PatternRegistry
from infraflow.parser.spec_builder import SmartParseResult, SpecBuilder
from infraflow.parser.unified import UnifiedParser, smart_parse


def make_builder() -> SpecBuilder:
    return SpecBuilder(detector=ComponentDetector(registry=PatternRegistry()))


def web_stack() -> InfraSpec:
    return InfraSpec(
        nodes=[
            InfraNode(id="fw", type="firewall", label="Firewall"),
            InfraNode(id="web", type="web-server", label="Web"),
            InfraNode(id="db", type="db-server", label="DB"),
        ],
        connections=[
            Connection(source="fw", target="web", flow_type="request"),
            Connection(source="web", target="db", flow_type="request"),
        ],
    )


@pytest.mark.parametrize("command", [
    CommandType.ADD,
    CommandType.REMOVE,
    CommandType.MODIFY,
    CommandType.CONNECT,
    CommandType.DISCONNECT,
    CommandType.QUERY,
])
def test_commands_require_a_graph(command):
    result = make_builder().build(command, "방화벽 웹서버", None)
    assert not result.success
    assert result.confidence == 0.0
    assert result.error == MSG_CREATE_FIRST
    assert result.command_type == command
    assert result.warnings is None and result.suggestions is None


def test_create_attaches_knowledge():
    result = make_builder().build(CommandType.CREATE, "WAF 로드밸런서 웹서버", None)
    assert result.success
    assert result.confidence == 0.5
    assert result.command_type == CommandType.CREATE
    # No firewall in the graph
    assert any(w.antipattern_id == "AP-SEC-002" for w in result.warnings)


def test_add_after_named_node():
    current = web_stack()
    result = make_builder().build(CommandType.ADD, "방화벽 뒤에 WAF 추가해줘", current)

    assert result.success
    assert result.confidence == 0.8
    added = [n for n in result.spec.nodes if n.type == "waf"]
    assert len(added) == 1
    assert result.spec.count_type("firewall") == 1
    assert result.spec.has_connection("fw", added[0].id)
    assert [m.type for m in result.modifications] == ["add-node", "add-connection"]
    # Caller's graph untouched
    assert len(current.nodes) == 3


def test_add_without_position_goes_after_last_node():
    result = make_builder().build(CommandType.ADD, "캐시 추가해줘", web_stack())
    cache = result.spec.first_of_type("cache")
    assert cache is not None
    assert result.spec.has_connection("db", cache.id)


def test_add_before_multi_word_anchor():
    result = make_builder().build(CommandType.ADD, "add waf before web server", web_stack())

    waf = result.spec.first_of_type("waf")
    assert result.spec.count_type("web-server") == 1
    assert result.spec.has_connection(waf.id, "web")
    assert len(result.spec.nodes) == 4


def test_add_after_korean_multi_word_anchor():
    result = make_builder().build(CommandType.ADD, "웹 서버 뒤에 캐시 추가해줘", web_stack())

    cache = result.spec.first_of_type("cache")
    assert result.spec.count_type("web-server") == 1
    assert result.spec.has_connection("web", cache.id)


def test_add_component_named_at_end_of_long_prompt():
    prompt = "이 구성은 매우 중요한 시스템입니다. " * 40 + "캐시 추가해줘"
    result = make_builder().build(CommandType.ADD, prompt, web_stack())

    assert result.success
    assert result.spec.has_type("cache")


def test_add_unrecognized():
    result = make_builder().build(CommandType.ADD, "뭔가 추가해줘", web_stack())
    assert not result.success
    assert result.confidence == 0.3


def test_remove_deletes_nodes_and_edges():
    result = make_builder().build(CommandType.REMOVE, "웹서버 삭제해줘", web_stack())

    assert result.success
    assert result.spec.node_ids() == {"fw", "db"}
    assert result.spec.connections == []
    assert [m.to_dict() for m in result.modifications] == [{"type": "remove-node", "target": "web"}]


def test_remove_without_recognizable_type():
    single = InfraSpec(nodes=[InfraNode(id="fw", type="firewall", label="Firewall")])
    result = make_builder().build(CommandType.REMOVE, "이거 삭제해줘", single)

    assert not result.success
    assert result.confidence == 0.3
    assert result.error == MSG_REMOVE_NOT_FOUND


def test_modify_keeps_id_and_type():
    current = web_stack()
    current.nodes[1].label = "Custom"
    result = make_builder().build(CommandType.MODIFY, "웹서버 수정해", current)

    assert result.success
    node = result.spec.find_node("web")
    assert node.type == "web-server"
    assert node.label == "Web Server"
    assert current.find_node("web").label == "Custom"


def test_modify_missing_target():
    result = make_builder().build(CommandType.MODIFY, "캐시 수정해", web_stack())
    assert not result.success
    assert result.confidence == 0.3


def test_connect_is_idempotent():
    builder = make_builder()
    once = builder.build(CommandType.CONNECT, "방화벽과 DB 연결", web_stack())
    twice = builder.build(CommandType.CONNECT, "방화벽과 DB 연결", once.spec)

    assert once.success and twice.success
    assert once.spec.has_connection("fw", "db")
    assert len(twice.spec.connections) == len(once.spec.connections)
    assert twice.modifications == []


def test_connect_needs_two_types():
    result = make_builder().build(CommandType.CONNECT, "방화벽 연결", web_stack())
    assert not result.success
    assert result.confidence == 0.3


def test_connect_missing_node_names_the_type():
    result = make_builder().build(CommandType.CONNECT, "방화벽과 캐시 연결", web_stack())
    assert not result.success
    assert "cache" in result.error


def test_disconnect_removes_both_directions():
    current = web_stack()
    current.connections.append(Connection(source="db", target="web"))
    result = make_builder().build(CommandType.DISCONNECT, "웹서버와 DB 연결 해제", current)

    assert result.success
    assert result.spec.connection_keys() == {"fw->web"}
    assert sorted(m.target for m in result.modifications) == ["db->web", "web->db"]


def test_query_is_read_only():
    current = web_stack()
    result = make_builder().build(CommandType.QUERY, "이 구성은 뭐야?", current)
    assert result.success
    assert result.confidence == 1.0
    assert result.spec is current
    assert result.modifications is None


def test_result_to_dict_shape():
    data = make_builder().build(CommandType.REMOVE, "웹서버 삭제해줘", web_stack()).to_dict()
    assert data["commandType"] == "remove"
    assert data["modifications"] == [{"type": "remove-node", "target": "web"}]
    assert "warnings" not in data


# ============================================================
# UNIFIED PARSER / CONTEXT
# ============================================================

def test_unified_parser_treats_edit_as_create_without_graph():
    parser = UnifiedParser(detector=ComponentDetector(registry=PatternRegistry()))
    result = parser.parse("방화벽 추가해줘")
    assert result.command_type == CommandType.CREATE
    assert result.success


def test_unified_parser_conversation():
    parser = UnifiedParser(detector=ComponentDetector(registry=PatternRegistry()))

    first = parser.parse("방화벽 웹서버")
    parser.update_context("방화벽 웹서버", first)
    second = parser.parse("캐시 추가해줘")
    parser.update_context("캐시 추가해줘", second)

    assert second.command_type == CommandType.ADD
    assert parser.context.current_spec.has_type("cache")
    assert len(parser.context.history) == 2

    parser.reset_context()
    assert parser.context.current_spec is None
    assert parser.context.history == []


def test_failed_result_leaves_context_untouched():
    context = ConversationContext(current_spec=web_stack())
    context.update("x", SmartParseResult(success=False, confidence=0.3, spec=InfraSpec()))
    assert len(context.current_spec.nodes) == 3
    assert context.history == []


def test_history_evicts_oldest_past_limit():
    context = ConversationContext(history_limit=10)
    for i in range(12):
        context.update(f"prompt {i}", SmartParseResult(success=True, confidence=0.8, spec=web_stack()))

    prompts = [item.prompt for item in context.history]
    assert len(prompts) == 10
    assert prompts[0] == "prompt 2"
    assert prompts[-1] == "prompt 11"


def test_smart_parse_is_stateless():
    result = smart_parse("웹서버 삭제해줘", web_stack())
    assert result.command_type == CommandType.REMOVE
    assert result.success
