from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from infraflow.api.serializers import error_payload, spec_from_model
from infraflow.db.models import ParseLog, UnrecognizedQuery
from infraflow.db.session import SessionLocal
from infraflow.llm import LLMModifier, ModifyError, ModifyErrorCode
from infraflow.parser import (
    ChangeRiskAssessor,
    ConversationContext,
    DiffApplier,
    UnifiedParser,
    get_available_templates,
    get_component_detector,
    get_template,
)
from infraflow.parser.spec_builder import SmartParseResult
from infraflow.parser.templates import get_template_info
from infraflow.schemas import (
    DiffApplyRequest,
    ModifyRequest,
    ParseOptions,
    ParseRequest,
    RiskAssessRequest,
)

router = APIRouter()


# ============================================================
# PERSISTENCE (best effort)
# ============================================================

def record_parse(prompt: str, result: SmartParseResult) -> None:
    """Log the parse; fallbacks also go to the unrecognized-query table."""
    db = SessionLocal()
    try:
        db.add(ParseLog(
            prompt=prompt,
            command_type=result.command_type.value,
            template_used=result.template_used,
            confidence=result.confidence,
            success=result.success,
        ))
        if result.is_fallback:
            db.add(UnrecognizedQuery(prompt=prompt, confidence=result.confidence))
        db.commit()
    except Exception as e:
        db.rollback()
        print(f"[API] ⚠️ Parse log not persisted: {e}")
    finally:
        db.close()


# ============================================================
# PARSE
# ============================================================

@router.post("/parse")
def parse_prompt(request: ParseRequest):
    options = request.options or ParseOptions()
    context = ConversationContext(current_spec=spec_from_model(request.current_spec))
    parser = UnifiedParser(context, detector=get_component_detector())

    result = parser.parse(
        request.prompt,
        use_templates=options.use_templates,
        use_component_detection=options.use_component_detection,
    )
    record_parse(request.prompt, result)
    return result.to_dict()


# ============================================================
# DIFF / RISK
# ============================================================

@router.post("/diff/apply")
def apply_diff(request: DiffApplyRequest):
    result = DiffApplier().apply(spec_from_model(request.spec), request.operations)
    return result.to_dict()


@router.post("/risk/assess")
def assess_risk(request: RiskAssessRequest):
    assessment = ChangeRiskAssessor().assess(
        spec_from_model(request.before),
        spec_from_model(request.after),
    )
    return assessment.to_dict()


# ============================================================
# LLM MODIFICATION
# ============================================================

_CLIENT_ERRORS = (ModifyErrorCode.EMPTY_DIAGRAM, ModifyErrorCode.OPERATION_FAILED)


def get_modifier() -> LLMModifier:
    return LLMModifier()


@router.post("/modify")
def modify_spec(request: ModifyRequest):
    spec = spec_from_model(request.spec)
    try:
        result = get_modifier().modify(spec, request.prompt)
    except ModifyError as e:
        print(f"[API] Modify failed ({e.code.value}): {e}")
        status = 422 if e.code in _CLIENT_ERRORS else 502
        return JSONResponse(
            status_code=status,
            content=error_payload(e.user_message, error=e.to_dict()),
        )
    return result.to_dict()


# ============================================================
# TEMPLATES
# ============================================================

@router.get("/templates")
def list_templates():
    return {"templates": get_available_templates()}


@router.get("/templates/{template_id}")
def get_template_detail(template_id: str):
    spec = get_template(template_id)
    if spec is None:
        raise HTTPException(status_code=404, detail=f"Template '{template_id}' not found")

    info = get_template_info(template_id)
    return {
        "id": info.id,
        "name": info.name,
        "description": info.description,
        "keywords": list(info.keywords),
        "spec": spec.to_dict(),
    }
