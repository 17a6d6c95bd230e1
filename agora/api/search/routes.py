# agora/api/search/routes.py
from flask import Blueprint, jsonify, current_app

from agora.api.search.schemas import SearchResponseSchema

search_bp = Blueprint('search_bp', __name__)


@search_bp.route('/content/<path:query>', methods=['GET'])
def search_content(query: str):
    """사용자, 게시글, 커뮤니티를 동시에 검색합니다."""
    search_service = current_app.services['search']
    results = search_service.search(query)
    return jsonify(SearchResponseSchema().dump(results)), 200
