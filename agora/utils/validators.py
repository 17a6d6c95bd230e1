# agora/utils/validators.py
import re

from agora.core.exceptions import InvalidRequestError

# UUID4 문자열과 'general' 같은 고정 ID를 모두 허용하는 문서 ID 형식
_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{1,128}$')


def validate_id(value, name: str = "_id") -> str:
    """경로/본문으로 전달된 문서 ID의 형식을 검사합니다. 형식이 틀리면 400."""
    if not isinstance(value, str) or not _ID_PATTERN.match(value):
        raise InvalidRequestError(f"'{name}' 값의 형식이 올바르지 않습니다: {value}", "INVALID_ID")
    return value
