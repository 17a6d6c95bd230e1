# agora/api/posts/routes.py
from flask import Blueprint, request, jsonify, current_app, g

from agora.core.exceptions import NotFoundError
from agora.core.queries import parse_page
from agora.core.security import jwt_required
from agora.schemas.common import IdBodySchema
from agora.utils.validators import validate_id
from agora.api.posts.schemas import PostCreateSchema, PostResponseSchema

posts_bp = Blueprint('posts_bp', __name__)


@posts_bp.route('/create', methods=['POST'])
@jwt_required
def create_post():
    """
    새 게시글을 작성합니다.
    - 작성자, 작성 시각, 커뮤니티(미지정 시 기본 커뮤니티)는 서버에서 채웁니다.
    """
    post_service = current_app.services['posts']
    data = PostCreateSchema().load(request.get_json(silent=True) or {})
    post_id = post_service.create_post(g.user_id, data)
    return jsonify({"_id": post_id}), 201


@posts_bp.route('/find/<string:post_id>', methods=['GET'])
@jwt_required
def find_post(post_id: str):
    post_service = current_app.services['posts']
    validate_id(post_id)
    post = post_service.get_post(post_id, g.user_id)
    return jsonify(PostResponseSchema().dump(post)), 200


@posts_bp.route('/<string:feed_type>/<page>', methods=['GET'])
@jwt_required
def get_feed(feed_type: str, page):
    """personal/new/liked 피드를 페이지 단위(POST_LIMIT개)로 조회합니다."""
    post_service = current_app.services['posts']
    posts = post_service.get_feed(feed_type, g.current_user, parse_page(page))
    return jsonify(PostResponseSchema(many=True).dump(posts)), 200


@posts_bp.route('/delete/<string:post_id>', methods=['GET', 'DELETE'])
@jwt_required
def delete_post(post_id: str):
    """게시글과 그 댓글을 모두 삭제합니다. (작성자 본인만 가능)"""
    post_service = current_app.services['posts']
    validate_id(post_id)
    post_service.delete_post(post_id, g.user_id)
    return jsonify({"message": "OK"}), 200


@posts_bp.route('/action/<string:action>', methods=['POST'])
@jwt_required
def post_action(action: str):
    """추천/추천 취소. 본문의 _id가 대상 게시글입니다."""
    post_service = current_app.services['posts']
    handlers = {"upvote": post_service.upvote, "downvote": post_service.downvote}
    if action not in handlers:
        raise NotFoundError(f"지원하지 않는 동작입니다: {action}", "UNKNOWN_ACTION")

    data = IdBodySchema().load(request.get_json(silent=True) or {})
    handlers[action](g.current_user, data['target_id'])
    return jsonify({"message": "OK"}), 200
