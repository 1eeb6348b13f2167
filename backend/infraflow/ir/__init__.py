from infraflow.ir.infra_spec import (
    FLOW_TYPES,
    TIER_TYPES,
    Connection,
    InfraNode,
    InfraSpec,
    Zone,
)

__all__ = [
    "FLOW_TYPES",
    "TIER_TYPES",
    "Connection",
    "InfraNode",
    "InfraSpec",
    "Zone",
]
