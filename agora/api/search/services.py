# agora/api/search/services.py
"""
키워드 검색. 사용자/게시글/커뮤니티 세 조회를 스레드 풀에서 동시에 실행하고
세 결과가 모두 도착하면 하나의 응답으로 합칩니다.
"""
import logging
import re
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Dict, Any, List

from agora.core.exceptions import QueryTimeoutError

USER_FIELDS = {"_id": 0, "user_id": 1, "username": 1, "fullname": 1, "image": 1, "verified": 1}
POST_FIELDS = {"_id": 0, "post_id": 1, "title": 1, "author": 1, "community": 1, "tags": 1, "images": 1, "upvotes": 1, "created_at": 1}
COMMUNITY_FIELDS = {"_id": 0, "community_id": 1, "title": 1, "bio": 1, "image": 1, "member_count": 1}


class SearchService:
    def __init__(self, db, timeout: float = 10, result_limit: int = 50):
        self.db = db
        self.timeout = timeout
        self.result_limit = result_limit

    @staticmethod
    def _contains(query: str) -> Dict[str, str]:
        # 검색어는 정규식이 아닌 문자 그대로 비교
        return {"$regex": re.escape(query), "$options": "i"}

    def search_users(self, query: str) -> List[Dict[str, Any]]:
        condition = {"$or": [{"username": self._contains(query)}, {"fullname": self._contains(query)}]}
        return list(self.db.users.find(condition, USER_FIELDS).limit(self.result_limit))

    def search_posts(self, query: str) -> List[Dict[str, Any]]:
        condition = {"$or": [{"title": self._contains(query)}, {"tags": query}]}
        cursor = self.db.posts.find(condition, POST_FIELDS).sort([("created_at", -1)])
        return list(cursor.limit(self.result_limit))

    def search_communities(self, query: str) -> List[Dict[str, Any]]:
        condition = {"title": self._contains(query)}
        cursor = self.db.communities.find(condition, COMMUNITY_FIELDS).sort([("member_count", -1)])
        return list(cursor.limit(self.result_limit))

    def search(self, query: str) -> Dict[str, Any]:
        """
        세 조회를 동시에 실행합니다. 가장 느린 조회가 끝날 때까지 기다리며,
        각 조회는 timeout 초를 넘기면 실패로 처리됩니다.
        """
        lookups = {
            "users": self.search_users,
            "posts": self.search_posts,
            "communities": self.search_communities,
        }
        executor = ThreadPoolExecutor(max_workers=len(lookups))
        try:
            futures = {name: executor.submit(fn, query) for name, fn in lookups.items()}
            results = {}
            for name, future in futures.items():
                try:
                    results[name] = future.result(timeout=self.timeout)
                except FutureTimeoutError:
                    logging.error(f"검색 조회 시간 초과 ({name}, query: {query})")
                    raise QueryTimeoutError(f"{name} 검색이 {self.timeout}초 안에 끝나지 않았습니다.")
        finally:
            # 시간 초과된 조회를 기다리지 않음
            executor.shutdown(wait=False)

        results["length"] = sum(len(results[name]) for name in lookups)
        logging.info(f"검색 완료 (query: {query}, 결과 {results['length']}건)")
        return results
