# agora/models/notification.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any

class NotificationType(Enum):
    """서버가 자동으로 발송하는 알림 유형"""
    NEW_FOLLOWER = "NEW_FOLLOWER"
    POST_UPVOTE = "POST_UPVOTE"
    POST_COMMENT = "POST_COMMENT"
    COMMENT_UPVOTE = "COMMENT_UPVOTE"

@dataclass
class Notification:
    """
    'users' 문서의 notifications 배열에 내장되는 알림 구조.
    """
    notification_id: str
    title: str
    body: str
    data: Dict[str, Any] = field(default_factory=dict)
    opened: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
