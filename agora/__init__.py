# agora/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import atexit
import logging
from flask import Flask, jsonify, request
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

# - 설정 및 공용 구성 요소
from agora.core.config import config_by_name
from agora.core.database import connect, ensure_indexes
from agora.core.exceptions import AgoraError

# - API 블루프린트
from agora.api.auth.routes import auth_bp
from agora.api.users.routes import users_bp
from agora.api.posts.routes import posts_bp
from agora.api.comments.routes import comments_bp
from agora.api.communities.routes import communities_bp
from agora.api.search.routes import search_bp
from agora.api.notifications.routes import notifications_bp
from agora.api.uploads.routes import uploads_bp
from agora.api.embed.routes import embed_bp

# - 서비스 모듈
from agora.services.push_service import PushService
from agora.services.storage_service import StorageService
from agora.services.notification_service import NotificationService
from agora.api.auth.services import AuthService
from agora.api.users.services import UserService
from agora.api.posts.services import PostService
from agora.api.comments.services import CommentService
from agora.api.communities.services import CommunityService
from agora.api.search.services import SearchService


def create_app(config_name=None, db=None, push_service=None, storage_service=None):
    """
    Flask 애플리케이션 팩토리 함수.
    테스트에서는 db/push_service/storage_service를 주입해 외부 연결 없이 앱을 만듭니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.config.get('JWT_SECRET_KEY'):
        raise ValueError("JWT_SECRET_KEY 환경 변수가 설정되지 않았습니다.")

    # =====================================================================================
    # 4. 외부 서비스 초기화 (실패 시 앱 시작 중단)
    # =====================================================================================
    if db is None:
        db = connect(app)
    ensure_indexes(db)

    if push_service is None:
        push_service = PushService()
        push_service.init_app(app)
        atexit.register(push_service.close)

    if storage_service is None:
        storage_service = StorageService()
        storage_service.init_app(app)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 공용 서비스
    app.services['push'] = push_service
    app.services['storage'] = storage_service
    app.services['notifications'] = NotificationService(db, push_service)

    # 5-2. 도메인 서비스
    app.services['users'] = UserService(db, app.services['notifications'])
    app.services['auth'] = AuthService(db)
    app.services['communities'] = CommunityService(db, app.services['users'])
    app.services['posts'] = PostService(
        db,
        user_service=app.services['users'],
        community_service=app.services['communities'],
        notification_service=app.services['notifications']
    )
    app.services['comments'] = CommentService(
        db,
        post_service=app.services['posts'],
        user_service=app.services['users'],
        notification_service=app.services['notifications']
    )
    app.services['search'] = SearchService(db, timeout=app.config['DB_QUERY_TIMEOUT'])

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(users_bp, url_prefix='/users')
    app.register_blueprint(posts_bp, url_prefix='/posts')
    app.register_blueprint(comments_bp, url_prefix='/comments')
    app.register_blueprint(communities_bp, url_prefix='/communities')
    app.register_blueprint(search_bp, url_prefix='/search')
    app.register_blueprint(notifications_bp, url_prefix='/notification')
    app.register_blueprint(uploads_bp, url_prefix='/upload')
    app.register_blueprint(embed_bp, url_prefix='/embed')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(AgoraError)
    def handle_agora_error(err):
        if err.status_code >= 500:
            logging.error(f"{err.error_code}: {err.message}")
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "message": "요청 본문이 올바르지 않습니다.", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        # 존재하지 않는 경로, 허용되지 않은 메서드 등
        response = {"error_code": err.name.upper().replace(" ", "_"), "message": err.description}
        return jsonify(response), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": f"서버 내부에서 예상치 못한 오류가 발생했습니다: {err}"}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    @app.after_request
    def log_request(response):
        logging.info(f"{request.method} {request.full_path.rstrip('?')} {response.status_code}")
        return response

    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
