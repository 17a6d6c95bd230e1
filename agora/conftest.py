# agora/conftest.py
"""
테스트 공용 fixture.
MongoDB는 mongomock으로, 푸시/스토리지는 MagicMock으로 대체합니다.
"""
import uuid
from dataclasses import asdict
from unittest.mock import MagicMock

import mongomock
import pytest
from werkzeug.security import generate_password_hash

from agora import create_app
from agora.core.security import create_access_token
from agora.models.user import User
from agora.models.post import Post
from agora.models.community import Community

TEST_PASSWORD = "password123"


@pytest.fixture
def db():
    return mongomock.MongoClient()['agora_test']


@pytest.fixture
def push_service():
    push = MagicMock()
    push.send.return_value = "projects/agora-test/messages/0:1"
    return push


@pytest.fixture
def storage_service():
    storage = MagicMock()
    storage.upload_image.side_effect = (
        lambda data, object_name, content_type="image/jpeg": f"https://storage.googleapis.com/agora-test/{object_name}"
    )
    return storage


@pytest.fixture
def app(db, push_service, storage_service):
    return create_app('testing', db=db, push_service=push_service, storage_service=storage_service)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(db):
    """사용자 문서를 직접 저장합니다. 비밀번호는 TEST_PASSWORD입니다."""
    def _make_user(username, **overrides):
        user = asdict(User(
            user_id=str(uuid.uuid4()),
            username=username,
            fullname=username.capitalize(),
            email=f"{username}@example.com",
            password_hash=generate_password_hash(TEST_PASSWORD),
            image="https://example.com/default.png",
            language="en",
        ))
        user.update(overrides)
        db.users.insert_one(dict(user))
        return user
    return _make_user


@pytest.fixture
def make_post(db):
    def _make_post(author_id, title="A post", created_at=None, **overrides):
        post = asdict(Post(
            post_id=str(uuid.uuid4()),
            title=title,
            content=[{"type": "text", "value": title}],
            author=author_id,
            community="general",
        ))
        if created_at is not None:
            post['created_at'] = created_at
        post.update(overrides)
        db.posts.insert_one(dict(post))
        return post
    return _make_post


@pytest.fixture
def make_community(db):
    def _make_community(founder_id, title="Community", members=None, **overrides):
        members = members if members is not None else [founder_id]
        community = asdict(Community(
            community_id=str(uuid.uuid4()),
            title=title,
            bio=f"About {title}",
            founder=founder_id,
            image="https://example.com/c.png",
            banner="https://example.com/b.png",
            mods=[founder_id],
            members=list(members),
            member_count=len(members),
        ))
        community.update(overrides)
        db.communities.insert_one(dict(community))
        for member in members:
            db.users.update_one({"user_id": member}, {"$addToSet": {"communities": community['community_id']}})
        return community
    return _make_community


@pytest.fixture
def auth_headers(app):
    """user_id로 access token을 발급해 Authorization 헤더를 만듭니다."""
    def _auth_headers(user_id):
        with app.app_context():
            token = create_access_token(user_id)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
