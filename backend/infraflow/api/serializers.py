from typing import Optional

from infraflow.ir import InfraSpec
from infraflow.schemas import GraphModel


def spec_from_model(model: Optional[GraphModel]) -> Optional[InfraSpec]:
    """Wire graph -> IR. None stays None."""
    if model is None:
        return None
    return InfraSpec.from_dict(model.to_payload())


def error_payload(message: str, **extra) -> dict:
    payload = {"status": "error", "message": message}
    payload.update(extra)
    return payload
