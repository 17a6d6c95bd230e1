# agora/models/post.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Any

@dataclass
class Post:
    """
    MongoDB 'posts' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    upvote_count는 upvotes 목록과 함께 갱신되어 추천순 정렬에 사용됩니다.
    """
    post_id: str
    title: str
    content: List[Any]
    author: str      # user_id
    community: str   # community_id
    tags: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    upvotes: List[str] = field(default_factory=list)
    upvote_count: int = 0
    answers: List[str] = field(default_factory=list)  # comment_id 목록
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
