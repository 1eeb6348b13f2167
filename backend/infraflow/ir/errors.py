


# Confidence tiers - how a result was derived, not a probability
CONFIDENCE_PRECONDITION = 0.0
CONFIDENCE_FALLBACK = 0.3
CONFIDENCE_COMPONENTS = 0.5
CONFIDENCE_TEMPLATE = 0.8
CONFIDENCE_QUERY = 1.0

MSG_CREATE_FIRST = "먼저 아키텍처를 생성해주세요."
MSG_NOT_RECOGNIZED = "입력하신 내용을 정확히 인식하지 못했습니다."
MSG_ADD_NOT_RECOGNIZED = "추가할 컴포넌트를 인식하지 못했습니다."
MSG_REMOVE_NOT_FOUND = "제거할 컴포넌트를 찾지 못했습니다."
MSG_MODIFY_NOT_RECOGNIZED = "수정할 컴포넌트를 인식하지 못했습니다."
MSG_MODIFY_NOT_FOUND = "수정할 컴포넌트를 찾지 못했습니다."
MSG_CONNECT_NEED_TWO = "연결할 두 컴포넌트를 지정해주세요."
MSG_DISCONNECT_NEED_TWO = "연결 해제할 두 컴포넌트를 지정해주세요."
MSG_COMPONENT_NOT_FOUND = "해당 컴포넌트를 찾을 수 없습니다: {target}"


class OperationError(Exception):
    """Raised inside the diff applier for a single failing operation."""
