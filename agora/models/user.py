# agora/models/user.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

@dataclass
class User:
    """
    MongoDB 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    팔로워/팔로잉/커뮤니티는 사용자 ID 목록, 알림은 문서 안에 내장됩니다.
    """
    user_id: str
    username: str
    fullname: str
    email: str
    password_hash: str
    image: str
    language: str
    bio: str = ""
    verified: bool = False
    rank: int = 0
    type: int = 0
    fcm_token: Optional[str] = None
    followers: List[str] = field(default_factory=list)
    follows: List[str] = field(default_factory=list)
    communities: List[str] = field(default_factory=list)
    notifications: List[Dict[str, Any]] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
