# agora/core/security.py
"""
Bearer 토큰 인증 미들웨어.

- 토큰에는 사용자 ID(sub)만 담습니다. 프로필은 요청마다 DB에서 다시 읽어
  `g.current_user`로 핸들러에 전달합니다.
- 헤더 누락, 서명 오류, 만료, 삭제된 사용자는 핸들러에 도달하기 전에 401로 거부됩니다.
"""
import logging
import jwt
from functools import wraps
from flask import request, g, current_app

from agora.core.exceptions import AuthenticationError
from agora.utils.datetime_utils import now


def create_access_token(user_id: str) -> str:
    """사용자 ID만을 subject로 담은 access token을 발급합니다. 만료 설정이 없으면 exp를 넣지 않습니다."""
    issued_at = now()
    payload = {"sub": user_id, "iat": issued_at, "type": "access"}
    lifetime = current_app.config.get('JWT_ACCESS_TOKEN_EXPIRES')
    if lifetime:
        payload["exp"] = issued_at + lifetime
    return jwt.encode(payload, current_app.config['JWT_SECRET_KEY'], algorithm=current_app.config['JWT_ALGORITHM'])


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            token,
            current_app.config['JWT_SECRET_KEY'],
            algorithms=[current_app.config['JWT_ALGORITHM']],
            options={"require": ["sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise AuthenticationError("토큰이 만료되었습니다.", "TOKEN_EXPIRED")
    except jwt.InvalidTokenError:
        raise AuthenticationError("유효하지 않은 토큰입니다.", "INVALID_TOKEN")

    if payload.get("type") != "access":
        raise AuthenticationError("유효하지 않은 토큰입니다.", "INVALID_TOKEN")
    return payload


def jwt_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth_header = request.headers.get("Authorization")
        if not auth_header or not auth_header.startswith("Bearer "):
            raise AuthenticationError("Authorization 헤더가 없거나 올바르지 않습니다.")

        payload = decode_access_token(auth_header.split(" ", 1)[1].strip())

        # 토큰 발급 이후 변경된 프로필을 반영하기 위해 매 요청마다 다시 조회
        user = current_app.services['users'].get_user_document(payload["sub"])
        if user is None:
            logging.warning(f"토큰의 사용자를 찾을 수 없음 (sub: {payload['sub']})")
            raise AuthenticationError("토큰에 해당하는 사용자를 찾을 수 없습니다.")

        g.user_id = payload["sub"]
        g.current_user = user
        return f(*args, **kwargs)

    return decorated_function
