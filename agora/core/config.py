# agora/core/config.py

import os # 환경 변수를 읽기 위해 사용합니다.
from datetime import timedelta


def _token_lifetime():
    """JWT_ACCESS_TOKEN_EXPIRES_HOURS가 비어 있거나 0이면 만료 없는 토큰(False)을 사용합니다."""
    hours = os.getenv('JWT_ACCESS_TOKEN_EXPIRES_HOURS')
    if not hours or int(hours) <= 0:
        return False
    return timedelta(hours=int(hours))


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # 토큰 서명에 사용되는 키. 토큰 위변조를 방지합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ALGORITHM = 'HS256'
    JWT_ACCESS_TOKEN_EXPIRES = _token_lifetime()

    # 문서 데이터베이스 접속 정보
    MONGO_URI = os.getenv('MONGO_URI', 'mongodb://localhost:27017')
    MONGO_DB_NAME = os.getenv('MONGO_DB_NAME', 'agora')

    # 푸시/스토리지에 사용하는 서비스 계정 키 파일
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')

    # 피드/댓글 한 페이지 크기
    POST_LIMIT = int(os.getenv('POST_LIMIT', 10))
    UPLOAD_IMAGE_HEIGHT = int(os.getenv('UPLOAD_IMAGE_HEIGHT', 512))
    DB_QUERY_TIMEOUT = float(os.getenv('DB_QUERY_TIMEOUT', 10))
    # 피드/댓글/커뮤니티 목록 조회의 서버 측 실행 시간 제한(초)
    FEED_QUERY_TIMEOUT = float(os.getenv('FEED_QUERY_TIMEOUT', 2))

    DEFAULT_COMMUNITY_ID = os.getenv('DEFAULT_COMMUNITY_ID', 'general')
    DEFAULT_LANGUAGE = os.getenv('DEFAULT_LANGUAGE', 'en')
    DEFAULT_USER_IMAGE = os.getenv('DEFAULT_USER_IMAGE', 'https://storage.googleapis.com/agora-public/default-user.png')
    DEFAULT_COMMUNITY_IMAGE = os.getenv('DEFAULT_COMMUNITY_IMAGE', 'https://storage.googleapis.com/agora-public/default-community.png')
    DEFAULT_COMMUNITY_BANNER = os.getenv('DEFAULT_COMMUNITY_BANNER', 'https://storage.googleapis.com/agora-public/default-community-banner.png')


class DevelopmentConfig(Config):
    """개발 환경 설정. 코드 변경 시 자동 재시작과 상세 에러 페이지를 사용합니다."""
    DEBUG = True


class TestingConfig(Config):
    """테스트 환경 설정. 데이터베이스/푸시/스토리지는 테스트에서 주입합니다."""
    TESTING = True
    DEBUG = False
    JWT_SECRET_KEY = 'testing-secret-key-that-is-long-enough'
    JWT_ACCESS_TOKEN_EXPIRES = False
    MONGO_DB_NAME = 'agora_test'
    POST_LIMIT = 3
    DEFAULT_COMMUNITY_ID = 'general'
    DEFAULT_LANGUAGE = 'en'


class ProductionConfig(Config):
    """운영 환경 설정."""
    DEBUG = False


# FLASK_ENV 값에 따라 create_app에서 적절한 설정을 선택하는 데 사용됩니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
