"""LLM modification path checks (network stubbed)"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from infraflow.ir import Connection, InfraNode, InfraSpec
from infraflow.llm import LLMClient, LLMModifier, ModifyError, ModifyErrorCode
from infraflow.llm.prompt import build_user_message, detect_architecture_type, summarize_spec
from infraflow.parser.risk import RiskLevel
from infraflow.utils.json_extract import extract_json_object


def small_spec() -> InfraSpec:
    return InfraSpec(
        nodes=[
            InfraNode(id="fw", type="firewall", label="Firewall", tier="dmz"),
            InfraNode(id="web", type="web-server", label="Web", tier="dmz"),
        ],
        connections=[Connection(source="fw", target="web", flow_type="request")],
    )


def modifier_returning(content: str) -> LLMModifier:
    client = MagicMock(spec=LLMClient)
    client.chat.return_value = content
    return LLMModifier(client=client)


# ============================================================
# JSON EXTRACTION
# ============================================================

@pytest.mark.parametrize("text", [
    '{"reasoning": "r", "operations": []}',
    'Here you go:\n```json\n{"reasoning": "r", "operations": []}\n```',
    'prefix {"reasoning": "r", "operations": []} suffix',
])
def test_extract_json_object(text):
    assert extract_json_object(text) == {"reasoning": "r", "operations": []}


@pytest.mark.parametrize("text", ["", "no json here", "[1, 2, 3]", "{broken"])
def test_extract_json_object_gives_none(text):
    assert extract_json_object(text) is None


# ============================================================
# PROMPT
# ============================================================

def test_architecture_type_detection():
    def spec_of(*types):
        return InfraSpec(nodes=[InfraNode(id=t, type=t, label=t) for t in types])

    assert detect_architecture_type(spec_of("web-server", "app-server", "db-server")) == "3티어 웹 아키텍처"
    assert detect_architecture_type(spec_of("kubernetes")) == "컨테이너 기반 아키텍처"
    assert detect_architecture_type(spec_of("web-server", "db-server")) == "2티어 웹 아키텍처"
    assert detect_architecture_type(spec_of("load-balancer", "web-server")) == "로드밸런싱 아키텍처"
    assert detect_architecture_type(spec_of("firewall")) == "보안 중심 아키텍처"
    assert detect_architecture_type(spec_of("dns")) == "인프라 다이어그램"


def test_summary_and_user_message():
    spec = small_spec()
    summary = summarize_spec(spec)
    assert summary.startswith("보안 중심 아키텍처 (총 2개 노드)")
    assert summarize_spec(InfraSpec()) == "빈 다이어그램"

    message = build_user_message(spec, "<script>WAF 추가</script>")
    assert "- fw (firewall)" in message
    assert "- fw → web" in message
    assert "&lt;script&gt;WAF 추가&lt;/script&gt;" in message
    assert message.rstrip().endswith("</user_request>")


# ============================================================
# MODIFIER
# ============================================================

def test_modify_applies_operations_and_assesses_risk():
    content = json.dumps({
        "reasoning": "웹 앞에 WAF 추가",
        "operations": [{"type": "add", "target": "waf", "data": {"betweenNodes": ["fw", "web"]}}],
    })
    result = modifier_returning(content).modify(small_spec(), "WAF 추가해줘")

    assert result.applied_ops == 1
    assert result.errors == []
    assert result.spec.has_type("waf")
    assert result.reasoning == "웹 앞에 WAF 추가"
    assert result.risk.level in (RiskLevel.HIGH, RiskLevel.CRITICAL)
    assert result.to_dict()["risk"]["level"] == result.risk.level.value


def test_modify_rejects_empty_diagram():
    modifier = modifier_returning("{}")
    with pytest.raises(ModifyError) as exc:
        modifier.modify(InfraSpec(), "WAF 추가")
    assert exc.value.code == ModifyErrorCode.EMPTY_DIAGRAM
    assert not exc.value.recoverable
    modifier.client.chat.assert_not_called()


def test_modify_invalid_json():
    with pytest.raises(ModifyError) as exc:
        modifier_returning("sorry, I cannot").modify(small_spec(), "x")
    assert exc.value.code == ModifyErrorCode.INVALID_JSON


@pytest.mark.parametrize("payload", [
    {"reasoning": "nothing", "operations": []},
    {"reasoning": "bad", "operations": [{"type": "explode", "target": "fw"}]},
])
def test_modify_invalid_response(payload):
    with pytest.raises(ModifyError) as exc:
        modifier_returning(json.dumps(payload)).modify(small_spec(), "x")
    assert exc.value.code == ModifyErrorCode.INVALID_RESPONSE


def test_modify_all_operations_failed():
    content = json.dumps({"reasoning": "r", "operations": [{"type": "remove", "target": "cache"}]})
    with pytest.raises(ModifyError) as exc:
        modifier_returning(content).modify(small_spec(), "캐시 삭제")
    assert exc.value.code == ModifyErrorCode.OPERATION_FAILED
    assert exc.value.to_dict()["userMessage"] == "변경 사항을 적용할 수 없습니다. 다시 시도해주세요."


# ============================================================
# CLIENT
# ============================================================

def test_client_returns_message_content():
    response = MagicMock(status_code=200)
    response.json.return_value = {"message": {"content": "{}"}}
    with patch("infraflow.llm.client.requests.post", return_value=response) as post:
        assert LLMClient(base_url="http://llm:11434/", model="m").chat("sys", "user") == "{}"

    url = post.call_args[0][0]
    body = post.call_args[1]["json"]
    assert url == "http://llm:11434/api/chat"
    assert body["model"] == "m"
    assert [m["role"] for m in body["messages"]] == ["system", "user"]


def test_client_timeout():
    with patch("infraflow.llm.client.requests.post", side_effect=requests.Timeout()):
        with pytest.raises(ModifyError) as exc:
            LLMClient().chat("sys", "user")
    assert exc.value.code == ModifyErrorCode.API_TIMEOUT


def test_client_http_error():
    response = MagicMock(status_code=500, text="boom")
    with patch("infraflow.llm.client.requests.post", return_value=response):
        with pytest.raises(ModifyError) as exc:
            LLMClient().chat("sys", "user")
    assert exc.value.code == ModifyErrorCode.API_ERROR


def test_client_connection_error():
    with patch("infraflow.llm.client.requests.post", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(ModifyError) as exc:
            LLMClient().chat("sys", "user")
    assert exc.value.code == ModifyErrorCode.API_ERROR
