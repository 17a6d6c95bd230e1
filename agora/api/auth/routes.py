# agora/api/auth/routes.py
from flask import Blueprint, request, jsonify, current_app

from agora.api.auth.schemas import LoginSchema
from agora.api.users.schemas import UserProfileSchema

auth_bp = Blueprint('auth_bp', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """사용자명/비밀번호로 로그인하고 토큰과 프로필을 반환합니다."""
    auth_service = current_app.services['auth']
    credentials = LoginSchema().load(request.get_json(silent=True) or {})
    token, profile = auth_service.login(credentials['username'], credentials['password'])
    return jsonify({"token": token, "user": UserProfileSchema().dump(profile)}), 200
