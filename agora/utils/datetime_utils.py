# agora/utils/datetime_utils.py
"""
게시글/댓글/알림의 시간 필드를 일관되게 다루기 위한 유틸리티 모듈

- 서버는 모든 시간을 UTC timezone-aware datetime으로 저장합니다.
- 응답에서는 ISO 8601 문자열('Z' 접미사)로 내보냅니다.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 UTC datetime 객체로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00
        """
        if not iso_string:
            raise ValueError("빈 문자열은 파싱할 수 없습니다")
        try:
            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'
            dt = dateutil_parser.isoparse(iso_string)
        except (ValueError, OverflowError) as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")

        # timezone-naive인 경우 UTC로 가정
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def to_utc(value: Any) -> Optional[datetime]:
        """
        DB에서 읽은 시간 값(datetime, ISO 문자열)을
        UTC datetime으로 정규화합니다. None은 그대로 둡니다.
        """
        if value is None:
            return None
        if isinstance(value, str):
            return DateTimeUtils.parse_iso_datetime(value)
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=timezone.utc)
            return value.astimezone(timezone.utc)
        raise ValueError(f"datetime으로 변환할 수 없는 값입니다: {value!r}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime 객체를 'Z' 접미사의 ISO 포맷 문자열로 변환"""
        dt = DateTimeUtils.to_utc(dt)
        return dt.isoformat().replace('+00:00', 'Z')

    @staticmethod
    def to_card_date(dt: datetime) -> str:
        """임베드 카드에 표시할 'dd-Mon-YYYY' 형식의 날짜 (예: 05-Mar-2024)"""
        return DateTimeUtils.to_utc(dt).strftime('%d-%b-%Y')

    @staticmethod
    def for_storage(obj: Any) -> Any:
        """
        MongoDB에 저장하기 전에 객체의 datetime 필드를 UTC로 맞춥니다.
        dict/list 내부는 재귀적으로 변환합니다.
        """
        if isinstance(obj, datetime):
            return DateTimeUtils.to_utc(obj)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.for_storage(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.for_storage(item) for item in obj]
        return obj


# 편의를 위한 글로벌 함수들
def now() -> datetime:
    """현재 UTC 시간 반환"""
    return DateTimeUtils.now()

def parse_iso(iso_string: str) -> datetime:
    """ISO 문자열을 datetime으로 파싱"""
    return DateTimeUtils.parse_iso_datetime(iso_string)

def to_iso(dt: datetime) -> str:
    """datetime을 ISO 문자열로 변환"""
    return DateTimeUtils.to_iso_string(dt)

def for_storage(obj: Any) -> Any:
    """저장용 변환"""
    return DateTimeUtils.for_storage(obj)
