# agora/api/comments/routes.py
from flask import Blueprint, request, jsonify, current_app, g

from agora.core.exceptions import NotFoundError
from agora.core.queries import parse_page
from agora.core.security import jwt_required
from agora.schemas.common import IdBodySchema
from agora.utils.validators import validate_id
from agora.api.comments.schemas import CommentCreateSchema, CommentResponseSchema

comments_bp = Blueprint('comments_bp', __name__)


@comments_bp.route('/of/<string:post_id>/<page>', methods=['GET'])
@jwt_required
def get_comments(post_id: str, page):
    """특정 게시글의 댓글 목록을 페이지네이션으로 조회합니다."""
    comment_service = current_app.services['comments']
    validate_id(post_id)
    comments = comment_service.get_comments_for_post(post_id, g.user_id, parse_page(page))
    return jsonify(CommentResponseSchema(many=True).dump(comments)), 200


@comments_bp.route('/create', methods=['POST'])
@jwt_required
def create_comment():
    """
    특정 게시글에 새로운 댓글을 작성합니다.
    - answer.parent를 지정하면 대댓글로 저장됩니다.
    - 댓글 생성 후 게시물 작성자에게 알림이 생성됩니다.
    """
    comment_service = current_app.services['comments']
    data = CommentCreateSchema().load(request.get_json(silent=True) or {})
    answer = data['answer']
    comment_id = comment_service.create_comment(g.current_user, data['post_id'], answer['content'], answer.get('parent'))
    return jsonify({"_id": comment_id}), 201


@comments_bp.route('/delete/<string:comment_id>', methods=['GET', 'DELETE'])
@jwt_required
def delete_comment(comment_id: str):
    """특정 댓글을 삭제합니다. (작성자 본인만 가능)"""
    comment_service = current_app.services['comments']
    validate_id(comment_id)
    comment_service.delete_comment(comment_id, g.user_id)
    return jsonify({"message": "OK"}), 200


@comments_bp.route('/action/<string:action>', methods=['POST'])
@jwt_required
def comment_action(action: str):
    """특정 댓글을 추천하거나 추천을 취소합니다."""
    comment_service = current_app.services['comments']
    handlers = {"upvote": comment_service.upvote, "downvote": comment_service.downvote}
    if action not in handlers:
        raise NotFoundError(f"지원하지 않는 동작입니다: {action}", "UNKNOWN_ACTION")

    data = IdBodySchema().load(request.get_json(silent=True) or {})
    handlers[action](g.current_user, data['target_id'])
    return jsonify({"message": "OK"}), 200
