# agora/api/users/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, Iterable

from flask import current_app
from pymongo.errors import DuplicateKeyError
from werkzeug.security import generate_password_hash

from agora.core.exceptions import NotFoundError, InvalidRequestError, ConflictError
from agora.models.user import User
from agora.models.notification import NotificationType

# 요청마다 다시 읽는 현재 사용자 문서. 비밀번호 해시와 알림 목록은 제외
CURRENT_USER_PROJECTION = {"_id": 0, "password_hash": 0, "notifications": 0}
SUMMARY_PROJECTION = {"_id": 0, "user_id": 1, "fullname": 1, "username": 1, "image": 1, "verified": 1}
EXISTS_FIELDS = ("username", "email")


def to_profile(user: Dict[str, Any], viewer_id: Optional[str] = None) -> Dict[str, Any]:
    """사용자 문서를 공개 프로필 형태로 변환합니다. 관계 목록은 개수로 바뀝니다."""
    profile = {
        "user_id": user.get('user_id'),
        "username": user.get('username'),
        "fullname": user.get('fullname'),
        "email": user.get('email'),
        "image": user.get('image'),
        "bio": user.get('bio', ""),
        "verified": user.get('verified', False),
        "type": user.get('type', 0),
        "followers": len(user.get('followers') or []),
        "follows": len(user.get('follows') or []),
    }
    if viewer_id is not None:
        profile["followed"] = viewer_id in (user.get('followers') or [])
    return profile


class UserService:
    """
    사용자 프로필, 회원가입, 팔로우 관계를 담당하는 서비스 클래스.
    """
    def __init__(self, db, notification_service):
        self.users_ref = db.users
        self.notification_service = notification_service

    def get_user_document(self, user_id: str) -> Optional[Dict[str, Any]]:
        """인증 미들웨어가 매 요청마다 호출합니다. 사용자가 없으면 None."""
        return self.users_ref.find_one({"user_id": user_id}, CURRENT_USER_PROJECTION)

    def get_profile(self, user_id: str, viewer_id: str) -> Dict[str, Any]:
        user = self.users_ref.find_one({"user_id": user_id}, CURRENT_USER_PROJECTION)
        if not user:
            raise NotFoundError(f"사용자를 찾을 수 없습니다: {user_id}", "USER_NOT_FOUND")
        return to_profile(user, viewer_id)

    def get_summaries(self, user_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """작성자 정보 조인용. 여러 사용자의 요약을 한 번의 $in 조회로 가져옵니다."""
        ids = list({uid for uid in user_ids if uid})
        if not ids:
            return {}
        docs = self.users_ref.find({"user_id": {"$in": ids}}, SUMMARY_PROJECTION)
        return {doc['user_id']: doc for doc in docs}

    def exists(self, field: str, value: str) -> bool:
        if field not in EXISTS_FIELDS:
            raise InvalidRequestError(f"'{field}'은(는) 확인할 수 없는 항목입니다. (username, email)", "INVALID_EXISTS_TYPE")
        return self.users_ref.find_one({field: value}, {"_id": 1}) is not None

    def _ensure_unique(self, username: Optional[str], email: Optional[str], exclude_user_id: Optional[str] = None):
        for field, value in (("username", username), ("email", email)):
            if value is None:
                continue
            query = {field: value}
            if exclude_user_id:
                query["user_id"] = {"$ne": exclude_user_id}
            if self.users_ref.find_one(query, {"_id": 1}):
                raise ConflictError(f"이미 사용 중인 {field}입니다: {value}", f"DUPLICATE_{field.upper()}")

    def signup(self, data: Dict[str, Any]) -> str:
        """비밀번호를 해시하고 기본값을 채워 새 사용자를 생성합니다. 생성된 user_id를 반환합니다."""
        self._ensure_unique(data['username'], data['email'])

        new_user = User(
            user_id=str(uuid.uuid4()),
            username=data['username'],
            fullname=data['fullname'],
            email=data['email'],
            password_hash=generate_password_hash(data['password']),
            image=current_app.config['DEFAULT_USER_IMAGE'],
            language=current_app.config['DEFAULT_LANGUAGE'],
        )
        try:
            self.users_ref.insert_one(asdict(new_user))
        except DuplicateKeyError:
            # 동시에 같은 이름으로 가입한 경우
            raise ConflictError("이미 사용 중인 사용자명 또는 이메일입니다.", "DUPLICATE_USER")

        logging.info(f"신규 사용자 가입: {new_user.username} ({new_user.user_id})")
        return new_user.user_id

    def edit(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        """전달된 필드만 갱신합니다. 비밀번호는 다시 해시해서 저장합니다."""
        if not changes:
            raise InvalidRequestError("수정할 항목이 없습니다.", "EMPTY_UPDATE")

        self._ensure_unique(changes.get('username'), changes.get('email'), exclude_user_id=user_id)

        update = dict(changes)
        if 'password' in update:
            update['password_hash'] = generate_password_hash(update.pop('password'))

        result = self.users_ref.update_one({"user_id": user_id}, {"$set": update})
        if result.matched_count == 0:
            raise NotFoundError(f"사용자를 찾을 수 없습니다: {user_id}", "USER_NOT_FOUND")
        logging.info(f"사용자 정보 수정 완료 (user_id: {user_id}, fields: {sorted(changes)})")
        return to_profile(self.get_user_document(user_id))

    def update_fcm_token(self, user_id: str, token: str):
        if not token:
            raise InvalidRequestError("token은 비어 있을 수 없습니다.", "INVALID_TOKEN_VALUE")
        self.users_ref.update_one({"user_id": user_id}, {"$set": {"fcm_token": token}})
        logging.info(f"FCM 토큰 업데이트 완료 (user_id: {user_id})")

    def follow(self, actor: Dict[str, Any], target_id: str):
        """
        actor가 target을 팔로우합니다.
        - 자기 자신 팔로우는 아무것도 하지 않습니다.
        - 이미 팔로우 중이면 ConflictError.
        - 두 문서 갱신은 원자적이지 않습니다.
        """
        actor_id = actor['user_id']
        if target_id == actor_id:
            return

        target = self.users_ref.find_one({"user_id": target_id}, {"_id": 0, "user_id": 1, "followers": 1})
        if not target:
            raise NotFoundError(f"팔로우할 사용자를 찾을 수 없습니다: {target_id}", "USER_NOT_FOUND")
        if target_id in (actor.get('follows') or []) or actor_id in (target.get('followers') or []):
            raise ConflictError("이미 팔로우 중인 사용자입니다.", "ALREADY_FOLLOWING")

        self.users_ref.update_one({"user_id": actor_id}, {"$addToSet": {"follows": target_id}})
        self.users_ref.update_one({"user_id": target_id}, {"$addToSet": {"followers": actor_id}})
        logging.info(f"팔로우: {actor_id} -> {target_id}")

        self.notification_service.notify_event(target_id, actor, NotificationType.NEW_FOLLOWER, {"user": actor_id})

    def unfollow(self, actor: Dict[str, Any], target_id: str):
        actor_id = actor['user_id']
        if target_id == actor_id:
            return

        target = self.users_ref.find_one({"user_id": target_id}, {"_id": 0, "user_id": 1, "followers": 1})
        if not target:
            raise NotFoundError(f"언팔로우할 사용자를 찾을 수 없습니다: {target_id}", "USER_NOT_FOUND")
        if target_id not in (actor.get('follows') or []) and actor_id not in (target.get('followers') or []):
            raise ConflictError("팔로우하지 않은 사용자입니다.", "NOT_FOLLOWING")

        self.users_ref.update_one({"user_id": actor_id}, {"$pull": {"follows": target_id}})
        self.users_ref.update_one({"user_id": target_id}, {"$pull": {"followers": actor_id}})
        logging.info(f"언팔로우: {actor_id} -> {target_id}")

    def add_community(self, user_id: str, community_id: str):
        self.users_ref.update_one({"user_id": user_id}, {"$addToSet": {"communities": community_id}})

    def remove_community(self, user_id: str, community_id: str):
        self.users_ref.update_one({"user_id": user_id}, {"$pull": {"communities": community_id}})
