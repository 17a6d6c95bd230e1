# agora/api/users/routes.py
from flask import Blueprint, request, jsonify, current_app, g

from agora.core.exceptions import NotFoundError
from agora.core.security import jwt_required
from agora.schemas.common import IdBodySchema
from agora.utils.validators import validate_id
from agora.api.users.schemas import SignupSchema, UserEditSchema, FCMTokenSchema, UserProfileSchema

users_bp = Blueprint('users_bp', __name__)


@users_bp.route('/find/<string:user_id>', methods=['GET'])
@jwt_required
def find_user(user_id: str):
    """특정 사용자의 프로필과 조회자 기준 팔로우 여부를 반환합니다."""
    user_service = current_app.services['users']
    validate_id(user_id)
    profile = user_service.get_profile(user_id, g.user_id)
    return jsonify(UserProfileSchema().dump(profile)), 200


@users_bp.route('/exists/<string:field>/<string:query>', methods=['GET'])
def user_exists(field: str, query: str):
    """username 또는 email이 이미 사용 중인지 확인합니다. (회원가입 화면용)"""
    user_service = current_app.services['users']
    return jsonify({"found": user_service.exists(field, query)}), 200


@users_bp.route('/signup', methods=['POST'])
def signup():
    user_service = current_app.services['users']
    data = SignupSchema().load(request.get_json(silent=True) or {})
    user_id = user_service.signup(data)
    return jsonify({"_id": user_id}), 201


@users_bp.route('/edit', methods=['POST'])
@jwt_required
def edit_user():
    """
    현재 로그인된 사용자의 프로필을 부분 수정합니다.
    비밀번호가 포함되면 새로 해시해서 저장합니다.
    """
    user_service = current_app.services['users']
    changes = UserEditSchema().load(request.get_json(silent=True) or {})
    profile = user_service.edit(g.user_id, changes)
    return jsonify(UserProfileSchema().dump(profile)), 200


@users_bp.route('/updateFCMToken', methods=['POST'])
@jwt_required
def update_fcm_token():
    """클라이언트의 FCM 토큰을 등록/업데이트합니다."""
    user_service = current_app.services['users']
    data = FCMTokenSchema().load(request.get_json(silent=True) or {})
    user_service.update_fcm_token(g.user_id, data['token'])
    return jsonify({"message": "OK"}), 200


@users_bp.route('/action/<string:action>', methods=['POST'])
@jwt_required
def user_action(action: str):
    """팔로우/언팔로우. 본문의 _id가 대상 사용자입니다."""
    user_service = current_app.services['users']
    handlers = {"follow": user_service.follow, "unfollow": user_service.unfollow}
    if action not in handlers:
        raise NotFoundError(f"지원하지 않는 동작입니다: {action}", "UNKNOWN_ACTION")

    data = IdBodySchema().load(request.get_json(silent=True) or {})
    handlers[action](g.current_user, data['target_id'])
    return jsonify({"message": "OK"}), 200
