# agora/api/embed/routes.py
from flask import Blueprint, current_app, render_template

from agora.utils.datetime_utils import DateTimeUtils
from agora.utils.validators import validate_id

embed_bp = Blueprint('embed_bp', __name__)


@embed_bp.route('/post/<string:post_id>', methods=['GET'])
def embed_post(post_id: str):
    """외부 페이지에 삽입할 수 있는 게시글 카드(HTML)를 반환합니다. 인증이 필요 없습니다."""
    post_service = current_app.services['posts']
    validate_id(post_id)
    post = post_service.get_post(post_id, viewer_id=None)

    created_at = post.get('created_at')
    return render_template(
        'post_embed.html',
        post=post,
        author=post.get('author') or {},
        date=DateTimeUtils.to_card_date(created_at) if created_at else "",
        image=(post.get('images') or [None])[0],
    )
