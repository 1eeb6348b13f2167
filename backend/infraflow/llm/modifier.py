# backend/infraflow/llm/modifier.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from infraflow.config import debug_log
from infraflow.ir import InfraSpec
from infraflow.llm.client import LLMClient
from infraflow.llm.prompt import SYSTEM_PROMPT, build_user_message
from infraflow.llm.response import ModifyError
from infraflow.parser.diff_applier import DiffApplier
from infraflow.parser.risk import ChangeRiskAssessor, RiskAssessment
from infraflow.schemas import LLMModifyResponse
from infraflow.utils.json_extract import extract_json_object


@dataclass
class ModifyResult:
    spec: InfraSpec
    reasoning: str
    risk: RiskAssessment
    applied_ops: int = 0
    errors: List[str] = field(default_factory=list)
    id_remap: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": not self.errors,
            "spec": self.spec.to_dict(),
            "reasoning": self.reasoning,
            "appliedOps": self.applied_ops,
            "errors": list(self.errors),
            "idRemap": dict(self.id_remap),
            "risk": self.risk.to_dict(),
        }


class LLMModifier:
    """
    Natural-language graph edits through an LLM.

    Pipeline:
    1. Render the current graph and the request into a chat prompt
    2. Extract and validate {reasoning, operations} from the reply
    3. Apply the operations with the diff applier
    4. Assess the risk of (before, after)

    Raises ModifyError for every failure before step 3. Per-operation
    failures in step 3 are reported in the result; only a batch where
    nothing applied raises OPERATION_FAILED.
    """

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        applier: Optional[DiffApplier] = None,
        assessor: Optional[ChangeRiskAssessor] = None,
    ):
        self.client = client or LLMClient()
        self.applier = applier or DiffApplier()
        self.assessor = assessor or ChangeRiskAssessor()

    def modify(self, spec: InfraSpec, prompt: str) -> ModifyResult:
        if spec.is_empty():
            raise ModifyError.empty_diagram()

        raw = self.client.chat(SYSTEM_PROMPT, build_user_message(spec, prompt))
        debug_log("LLM", f"Raw response: {raw[:300]}")

        response = self.parse_response(raw)

        applied = self.applier.apply(spec, response.operations)
        if applied.applied_ops == 0:
            raise ModifyError.operation_failed("; ".join(applied.errors))

        risk = self.assessor.assess(spec, applied.spec)
        print(f"[LLM] Applied {applied.applied_ops} operation(s), risk={risk.level.value}")

        return ModifyResult(
            spec=applied.spec,
            reasoning=response.reasoning,
            risk=risk,
            applied_ops=applied.applied_ops,
            errors=applied.errors,
            id_remap=applied.id_remap,
        )

    @staticmethod
    def parse_response(raw: str) -> LLMModifyResponse:
        data = extract_json_object(raw)
        if data is None:
            raise ModifyError.invalid_json("no JSON object in response")
        try:
            return LLMModifyResponse.model_validate(data)
        except ValidationError as e:
            raise ModifyError.invalid_response(f"{e.error_count()} validation error(s)") from e
