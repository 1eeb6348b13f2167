from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(populate_by_name=True)


# ============================================================
# GRAPH PAYLOADS
# ============================================================

class NodeModel(_WireModel):
    id: str
    type: str
    label: Optional[str] = None
    tier: Optional[str] = None
    zone: Optional[str] = None
    description: Optional[str] = None


class ConnectionModel(_WireModel):
    source: str
    target: str
    flow_type: Optional[str] = Field(default=None, alias="flowType")
    label: Optional[str] = None


class ZoneModel(_WireModel):
    id: str
    label: Optional[str] = None
    type: Optional[str] = None


class GraphModel(_WireModel):
    nodes: List[NodeModel] = Field(default_factory=list)
    connections: List[ConnectionModel] = Field(default_factory=list)
    zones: List[ZoneModel] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


# ============================================================
# DIFF OPERATIONS
# ============================================================

class ReplaceData(_WireModel):
    new_type: str = Field(alias="newType")
    label: Optional[str] = None
    description: Optional[str] = None
    preserve_connections: bool = Field(default=True, alias="preserveConnections")


class ReplaceOperation(_WireModel):
    type: Literal["replace"]
    target: str
    data: ReplaceData


class AddData(_WireModel):
    label: Optional[str] = None
    description: Optional[str] = None
    tier: Optional[str] = None
    after_node: Optional[str] = Field(default=None, alias="afterNode")
    before_node: Optional[str] = Field(default=None, alias="beforeNode")
    between_nodes: Optional[Tuple[str, str]] = Field(default=None, alias="betweenNodes")


class AddOperation(_WireModel):
    type: Literal["add"]
    target: str  # component type to add
    data: AddData = Field(default_factory=AddData)


class RemoveOperation(_WireModel):
    type: Literal["remove"]
    target: str


class ModifyData(_WireModel):
    label: Optional[str] = None
    description: Optional[str] = None
    tier: Optional[str] = None


class ModifyOperation(_WireModel):
    type: Literal["modify"]
    target: str
    data: ModifyData = Field(default_factory=ModifyData)


class ConnectData(_WireModel):
    source: str
    target: str
    flow_type: Optional[str] = Field(default=None, alias="flowType")
    label: Optional[str] = None


class ConnectOperation(_WireModel):
    type: Literal["connect"]
    data: ConnectData


class DisconnectData(_WireModel):
    source: str
    target: str


class DisconnectOperation(_WireModel):
    type: Literal["disconnect"]
    data: DisconnectData


Operation = Annotated[
    Union[
        ReplaceOperation,
        AddOperation,
        RemoveOperation,
        ModifyOperation,
        ConnectOperation,
        DisconnectOperation,
    ],
    Field(discriminator="type"),
]

OPERATION_TYPES = ("replace", "add", "remove", "modify", "connect", "disconnect")

operation_adapter = TypeAdapter(Operation)


class LLMModifyResponse(_WireModel):
    """Shape the LLM must answer with"""
    reasoning: str = ""
    operations: List[Operation] = Field(min_length=1)


# ============================================================
# HTTP REQUESTS
# ============================================================

class ParseOptions(_WireModel):
    use_templates: bool = Field(default=True, alias="useTemplates")
    use_component_detection: bool = Field(default=True, alias="useComponentDetection")


class ParseRequest(_WireModel):
    prompt: str
    current_spec: Optional[GraphModel] = Field(default=None, alias="currentSpec")
    options: Optional[ParseOptions] = None


class DiffApplyRequest(_WireModel):
    spec: GraphModel
    # Validated one by one so a malformed operation only fails itself
    operations: List[Dict[str, Any]] = Field(default_factory=list)


class RiskAssessRequest(_WireModel):
    before: GraphModel
    after: GraphModel


class ModifyRequest(_WireModel):
    prompt: str
    spec: GraphModel
