# agora/api/auth/services.py
import logging
from typing import Dict, Any, Tuple

from werkzeug.security import check_password_hash

from agora.core.exceptions import NotFoundError, AuthenticationError
from agora.core.security import create_access_token
from agora.api.users.services import to_profile


class AuthService:
    """
    아이디/비밀번호 로그인을 처리하고 access token을 발급하는 서비스 클래스.
    """
    def __init__(self, db):
        self.users_ref = db.users

    def login(self, username: str, password: str) -> Tuple[str, Dict[str, Any]]:
        """
        사용자명으로 계정을 찾아 비밀번호를 확인합니다.

        :return: (access token, 비밀번호가 제거된 프로필)
        :raises NotFoundError: 사용자명이 없는 경우
        :raises AuthenticationError: 비밀번호가 틀린 경우
        """
        user = self.users_ref.find_one({"username": username}, {"_id": 0, "notifications": 0})
        if not user:
            raise NotFoundError(f"사용자를 찾을 수 없습니다: {username}", "USER_NOT_FOUND")

        if not check_password_hash(user.get('password_hash', ''), password):
            logging.warning(f"로그인 실패 (비밀번호 불일치): {username}")
            raise AuthenticationError("사용자명 또는 비밀번호가 올바르지 않습니다.", "INVALID_CREDENTIALS")

        token = create_access_token(user['user_id'])
        logging.info(f"로그인 성공: {username} ({user['user_id']})")
        return token, to_profile(user)
