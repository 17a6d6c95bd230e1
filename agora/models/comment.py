# agora/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

@dataclass
class Comment:
    """
    MongoDB 'comments' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    comment_id: str
    post_id: str
    author: str
    content: List[Any]
    parent: Optional[str] = None  # 대댓글인 경우 부모 comment_id
    upvotes: List[str] = field(default_factory=list)
    upvote_count: int = 0
    answers: List[Dict[str, Any]] = field(default_factory=list)  # 내장된 대댓글 요약
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
