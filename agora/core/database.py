# agora/core/database.py
"""
MongoDB 연결과 컬렉션 인덱스 설정.
"""
import logging
from pymongo import MongoClient, ASCENDING, DESCENDING


def connect(app):
    """설정값으로 MongoClient를 만들고 사용할 데이터베이스 핸들을 반환합니다."""
    timeout_ms = int(app.config['DB_QUERY_TIMEOUT'] * 1000)
    client = MongoClient(
        app.config['MONGO_URI'],
        serverSelectionTimeoutMS=timeout_ms,
        connectTimeoutMS=timeout_ms,
        socketTimeoutMS=timeout_ms,
        tz_aware=True,
    )
    logging.info(f"MongoDB 연결 설정 완료 (db: {app.config['MONGO_DB_NAME']})")
    return client[app.config['MONGO_DB_NAME']]


def ensure_indexes(db):
    """앱 시작 시 한 번 호출됩니다. 이미 있는 인덱스는 그대로 둡니다."""
    db.users.create_index("user_id", unique=True)
    db.users.create_index("username", unique=True)
    db.users.create_index("email", unique=True)

    db.posts.create_index("post_id", unique=True)
    db.posts.create_index([("created_at", DESCENDING), ("post_id", DESCENDING)])
    db.posts.create_index([("author", ASCENDING), ("created_at", DESCENDING), ("post_id", DESCENDING)])
    db.posts.create_index([("upvote_count", DESCENDING), ("created_at", DESCENDING), ("post_id", DESCENDING)])

    db.comments.create_index("comment_id", unique=True)
    db.comments.create_index("parent")
    db.comments.create_index([("post_id", ASCENDING), ("created_at", ASCENDING), ("comment_id", ASCENDING)])

    db.communities.create_index("community_id", unique=True)
    db.communities.create_index([("members", ASCENDING), ("member_count", DESCENDING)])
    logging.info("MongoDB 인덱스 확인 완료")
