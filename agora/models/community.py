# agora/models/community.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List

@dataclass
class Community:
    """
    MongoDB 'communities' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    community_id: str
    title: str
    bio: str
    founder: str
    image: str
    banner: str
    mods: List[str] = field(default_factory=list)
    members: List[str] = field(default_factory=list)
    member_count: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
