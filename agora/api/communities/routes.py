# agora/api/communities/routes.py
from flask import Blueprint, request, jsonify, current_app, g

from agora.core.exceptions import NotFoundError
from agora.core.security import jwt_required
from agora.schemas.common import IdBodySchema
from agora.utils.validators import validate_id
from agora.api.communities.schemas import CommunityCreateSchema, CommunityResponseSchema

communities_bp = Blueprint('communities_bp', __name__)


@communities_bp.route('/create', methods=['POST'])
@jwt_required
def create_community():
    """새 커뮤니티를 만듭니다. 요청자가 창설자이자 운영자가 됩니다."""
    community_service = current_app.services['communities']
    data = CommunityCreateSchema().load(request.get_json(silent=True) or {})
    community_id = community_service.create_community(g.user_id, data)
    return jsonify({"_id": community_id}), 201


@communities_bp.route('/find/<string:community_id>', methods=['GET'])
@jwt_required
def find_community(community_id: str):
    community_service = current_app.services['communities']
    validate_id(community_id)
    community = community_service.get_community(community_id, g.user_id)
    return jsonify(CommunityResponseSchema().dump(community)), 200


@communities_bp.route('/of/<string:user_id>', methods=['GET'])
@jwt_required
def communities_of_user(user_id: str):
    """특정 사용자가 가입한 커뮤니티 목록을 멤버 수 내림차순으로 반환합니다."""
    community_service = current_app.services['communities']
    validate_id(user_id)
    communities = community_service.get_user_communities(user_id, g.user_id)
    return jsonify(CommunityResponseSchema(many=True).dump(communities)), 200


@communities_bp.route('/action/<string:action>', methods=['POST'])
@jwt_required
def community_action(action: str):
    """가입/탈퇴. 커뮤니티와 사용자 문서를 함께 갱신합니다."""
    community_service = current_app.services['communities']
    handlers = {"join": community_service.join, "leave": community_service.leave}
    if action not in handlers:
        raise NotFoundError(f"지원하지 않는 동작입니다: {action}", "UNKNOWN_ACTION")

    data = IdBodySchema().load(request.get_json(silent=True) or {})
    handlers[action](g.current_user, data['target_id'])
    return jsonify({"message": "OK"}), 200
