# agora/core/queries.py
"""
페이지 단위 조회를 위한 파라미터 객체.

조건 -> 정렬 -> skip -> limit 순서를 고정해 두고, 피드/댓글/커뮤니티 목록이
같은 방식으로 커서를 조립하도록 합니다.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, List, Tuple

from pymongo import ASCENDING, DESCENDING
from pymongo.errors import ExecutionTimeout

from agora.core.exceptions import InvalidRequestError, QueryTimeoutError

# Mongo 내부 _id는 응답에 노출하지 않음
HIDE_OBJECT_ID = {"_id": 0}


@dataclass(frozen=True)
class PageQuery:
    criteria: Tuple[Tuple[str, Any], ...] = ()
    sort: Tuple[Tuple[str, int], ...] = ()
    page: int = 1
    page_size: int = 10
    # 서버 측 실행 시간 제한(ms). 0이면 제한 없음
    max_time_ms: int = 0

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size

    def where(self, field_path: str, condition: Any) -> "PageQuery":
        return replace(self, criteria=self.criteria + ((field_path, condition),))

    def order_by(self, field_path: str, direction: int = DESCENDING) -> "PageQuery":
        return replace(self, sort=self.sort + ((field_path, direction),))

    def filter_document(self) -> dict:
        return {field_path: condition for field_path, condition in self.criteria}

    def apply(self, collection):
        """컬렉션에 조건, 정렬, skip, limit을 선언된 순서대로 적용한 커서를 반환합니다."""
        cursor = collection.find(self.filter_document(), HIDE_OBJECT_ID)
        if self.sort:
            cursor = cursor.sort(list(self.sort))
        if self.skip:
            cursor = cursor.skip(self.skip)
        if self.page_size:
            cursor = cursor.limit(self.page_size)
        if self.max_time_ms:
            cursor = cursor.max_time_ms(self.max_time_ms)
        return cursor

    def fetch(self, collection) -> List[dict]:
        try:
            return list(self.apply(collection))
        except ExecutionTimeout as e:
            logging.error(f"{collection.name} 조회 시간 초과 ({self.max_time_ms}ms): {e}")
            raise QueryTimeoutError(f"{collection.name} 조회가 {self.max_time_ms}ms 안에 끝나지 않았습니다.")


def deadline_ms(seconds: float) -> int:
    """설정값(초)을 max_time_ms에 넣을 정수 밀리초로 바꿉니다."""
    return int(seconds * 1000)


def parse_page(raw) -> int:
    """경로 파라미터의 페이지 번호를 1 이상의 정수로 변환합니다."""
    try:
        page = int(raw)
    except (TypeError, ValueError):
        raise InvalidRequestError(f"페이지 번호가 올바르지 않습니다: {raw}", "INVALID_PAGE")
    if page < 1:
        raise InvalidRequestError(f"페이지 번호는 1 이상이어야 합니다: {raw}", "INVALID_PAGE")
    return page
