# agora/core/exceptions.py
"""
서비스 계층에서 발생시키는 도메인 예외.
create_app에 등록된 에러 핸들러가 각 예외를 HTTP 상태 코드와
{"error_code", "message"} 형식의 JSON 응답으로 변환합니다.
"""


class AgoraError(Exception):
    status_code = 500
    error_code = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code

    def to_dict(self) -> dict:
        return {"error_code": self.error_code, "message": self.message}


class AuthenticationError(AgoraError):
    status_code = 401
    error_code = "UNAUTHORIZED"


class InvalidRequestError(AgoraError):
    status_code = 400
    error_code = "INVALID_REQUEST"


class NotFoundError(AgoraError):
    status_code = 404
    error_code = "NOT_FOUND"


class ForbiddenError(AgoraError):
    status_code = 403
    error_code = "FORBIDDEN"


class ConflictError(AgoraError):
    status_code = 409
    error_code = "CONFLICT"


class PushDeliveryError(AgoraError):
    """푸시 제공자가 발송을 거부한 경우. 이미 저장된 상태는 되돌리지 않습니다."""
    status_code = 502
    error_code = "PUSH_DELIVERY_FAILED"


class QueryTimeoutError(AgoraError):
    """검색처럼 여러 조회를 기다리는 작업에서 개별 조회가 제한 시간을 넘긴 경우"""
    status_code = 504
    error_code = "QUERY_TIMEOUT"
