# backend/infraflow/llm/response.py
"""
Typed errors for the LLM modification path.

Each error carries a machine code, a Korean message safe to show to the
user and whether retrying the same request can succeed.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ModifyErrorCode(Enum):
    API_ERROR = "API_ERROR"
    API_TIMEOUT = "API_TIMEOUT"
    INVALID_JSON = "INVALID_JSON"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    EMPTY_DIAGRAM = "EMPTY_DIAGRAM"
    OPERATION_FAILED = "OPERATION_FAILED"


class ModifyError(Exception):
    def __init__(
        self,
        message: str,
        code: ModifyErrorCode,
        user_message: str,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.code = code
        self.user_message = user_message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "userMessage": self.user_message,
            "technicalMessage": str(self),
            "recoverable": self.recoverable,
        }

    # ------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------

    @classmethod
    def api_error(cls, status: Optional[int] = None, detail: Optional[str] = None) -> "ModifyError":
        return cls(
            f"API error: {status if status is not None else '-'} - {detail or 'unknown'}",
            ModifyErrorCode.API_ERROR,
            "AI 서비스에 문제가 발생했습니다. 잠시 후 다시 시도해주세요.",
        )

    @classmethod
    def timeout(cls) -> "ModifyError":
        return cls(
            "API request timed out",
            ModifyErrorCode.API_TIMEOUT,
            "AI 응답 시간이 초과되었습니다. 다시 시도해주세요.",
        )

    @classmethod
    def invalid_json(cls, detail: Optional[str] = None) -> "ModifyError":
        return cls(
            f"Failed to parse JSON: {detail or 'unknown error'}",
            ModifyErrorCode.INVALID_JSON,
            "AI 응답을 처리할 수 없습니다. 다시 시도해주세요.",
        )

    @classmethod
    def invalid_response(cls, detail: Optional[str] = None) -> "ModifyError":
        return cls(
            f"Invalid LLM response: {detail or 'unknown error'}",
            ModifyErrorCode.INVALID_RESPONSE,
            "AI 응답 형식이 올바르지 않습니다. 다시 시도해주세요.",
        )

    @classmethod
    def empty_diagram(cls) -> "ModifyError":
        return cls(
            "Cannot modify empty diagram",
            ModifyErrorCode.EMPTY_DIAGRAM,
            "수정할 다이어그램이 없습니다. 먼저 다이어그램을 생성해주세요.",
            recoverable=False,
        )

    @classmethod
    def operation_failed(cls, detail: Optional[str] = None) -> "ModifyError":
        return cls(
            f"Operation failed: {detail or 'unknown error'}",
            ModifyErrorCode.OPERATION_FAILED,
            "변경 사항을 적용할 수 없습니다. 다시 시도해주세요.",
        )
