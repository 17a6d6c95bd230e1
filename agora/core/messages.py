# agora/core/messages.py
"""알림 제목/본문의 언어별 문구. 수신자의 language 필드에 맞춰 선택합니다."""

FALLBACK_LANGUAGE = 'en'

NOTIFICATION_MESSAGES = {
    'en': {
        'NEW_FOLLOWER': ("A New Follower!", "{actor} started following you"),
        'POST_UPVOTE': ("An Upvote!", "{actor} upvoted your post"),
        'POST_COMMENT': ("A Comment!", "{actor} commented on your post"),
        'COMMENT_UPVOTE': ("An Upvote!", "{actor} upvoted your comment"),
    },
    'tr': {
        'NEW_FOLLOWER': ("Yeni Bir Takipçi!", "{actor} seni takip etmeye başladı"),
        'POST_UPVOTE': ("Bir Oylama!", "{actor} paylaşımını oyladı"),
        'POST_COMMENT': ("Bir Yorum!", "{actor} paylaşımına yorum yaptı"),
        'COMMENT_UPVOTE': ("Bir Oylama!", "{actor} yorumunu oyladı"),
    },
    'ko': {
        'NEW_FOLLOWER': ("새 팔로워!", "{actor}님이 회원님을 팔로우하기 시작했습니다"),
        'POST_UPVOTE': ("추천!", "{actor}님이 회원님의 게시글을 추천했습니다"),
        'POST_COMMENT': ("새 댓글!", "{actor}님이 회원님의 게시글에 댓글을 남겼습니다"),
        'COMMENT_UPVOTE': ("추천!", "{actor}님이 회원님의 댓글을 추천했습니다"),
    },
}


def format_actor(user: dict) -> str:
    """알림에 표시할 행위자 이름. 예: 'Jane Doe (@jane)'"""
    return f"{user.get('fullname', '')} (@{user.get('username', '')})"


def render_notification(language: str, event: str, actor: str):
    """(title, body) 튜플을 반환합니다. 지원하지 않는 언어는 영어로 대체합니다."""
    messages = NOTIFICATION_MESSAGES.get(language) or NOTIFICATION_MESSAGES[FALLBACK_LANGUAGE]
    title, body = messages[event]
    return title, body.format(actor=actor)
