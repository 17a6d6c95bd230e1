# agora/api/users/test_users.py
"""
사용자 API 테스트: 회원가입, 프로필 조회/수정, 팔로우

사용법: python -m pytest agora/api/users/test_users.py -v
"""
from werkzeug.security import check_password_hash


def _signup_body(username="carol", **overrides):
    body = {
        "username": username,
        "fullname": "Carol Kim",
        "email": f"{username}@example.com",
        "password": "secret-pass",
    }
    body.update(overrides)
    return body


# --- 회원가입 ---

def test_signup_stores_hashed_password_and_defaults(app, client, db):
    response = client.post('/users/signup', json=_signup_body())

    assert response.status_code == 201
    user_id = response.get_json()['_id']
    stored = db.users.find_one({"user_id": user_id})
    assert stored['username'] == "carol"
    assert stored['password_hash'] != "secret-pass"
    assert check_password_hash(stored['password_hash'], "secret-pass")
    assert stored['language'] == app.config['DEFAULT_LANGUAGE']
    assert stored['image'] == app.config['DEFAULT_USER_IMAGE']
    assert stored['followers'] == [] and stored['follows'] == []


def test_signup_then_login(client):
    client.post('/users/signup', json=_signup_body())

    response = client.post('/auth/login', json={"username": "carol", "password": "secret-pass"})

    assert response.status_code == 200
    assert response.get_json()['user']['email'] == "carol@example.com"


def test_signup_duplicate_username(client, make_user):
    make_user("carol")

    response = client.post('/users/signup', json=_signup_body(email="other@example.com"))

    assert response.status_code == 409
    assert response.get_json()['error_code'] == "DUPLICATE_USERNAME"


def test_signup_duplicate_email(client, make_user):
    make_user("carol")

    response = client.post('/users/signup', json=_signup_body(username="carol2", email="carol@example.com"))

    assert response.status_code == 409
    assert response.get_json()['error_code'] == "DUPLICATE_EMAIL"


def test_signup_validation(client):
    response = client.post('/users/signup', json=_signup_body(username="x!", email="not-an-email", password="123"))

    assert response.status_code == 400
    details = response.get_json()['details']
    assert {'username', 'email', 'password'} <= set(details)


# --- 중복 확인 ---

def test_exists(client, make_user):
    make_user("dave")

    assert client.get('/users/exists/username/dave').get_json() == {"found": True}
    assert client.get('/users/exists/email/dave@example.com').get_json() == {"found": True}
    assert client.get('/users/exists/username/erin').get_json() == {"found": False}


def test_exists_rejects_unknown_field(client):
    response = client.get('/users/exists/password/whatever')

    assert response.status_code == 400
    assert response.get_json()['error_code'] == "INVALID_EXISTS_TYPE"


# --- 프로필 ---

def test_find_user_profile(client, make_user, auth_headers):
    viewer = make_user("alice")
    target = make_user("bob", followers=[viewer['user_id']], bio="hello")

    response = client.get(f"/users/find/{target['user_id']}", headers=auth_headers(viewer['user_id']))

    assert response.status_code == 200
    profile = response.get_json()
    assert profile['_id'] == target['user_id']
    assert profile['followers'] == 1
    assert profile['follows'] == 0
    assert profile['followed'] is True
    assert profile['bio'] == "hello"
    assert 'password_hash' not in profile
    assert 'fcm_token' not in profile


def test_find_unknown_user(client, make_user, auth_headers):
    viewer = make_user("alice")

    response = client.get('/users/find/does-not-exist', headers=auth_headers(viewer['user_id']))

    assert response.status_code == 404


def test_find_rejects_malformed_id(client, make_user, auth_headers):
    viewer = make_user("alice")

    response = client.get('/users/find/bad$id', headers=auth_headers(viewer['user_id']))

    assert response.status_code == 400
    assert response.get_json()['error_code'] == "INVALID_ID"


def test_edit_updates_only_given_fields(client, db, make_user, auth_headers):
    user = make_user("alice", bio="old bio")

    response = client.post('/users/edit', json={"fullname": "Alice Park"}, headers=auth_headers(user['user_id']))

    assert response.status_code == 200
    assert response.get_json()['fullname'] == "Alice Park"
    stored = db.users.find_one({"user_id": user['user_id']})
    assert stored['fullname'] == "Alice Park"
    assert stored['bio'] == "old bio"
    assert stored['username'] == "alice"


def test_edit_password_is_rehashed(client, db, make_user, auth_headers):
    user = make_user("alice")

    client.post('/users/edit', json={"password": "brand-new-pass"}, headers=auth_headers(user['user_id']))

    stored = db.users.find_one({"user_id": user['user_id']})
    assert check_password_hash(stored['password_hash'], "brand-new-pass")
    assert 'password' not in stored


def test_edit_rejects_empty_body(client, make_user, auth_headers):
    user = make_user("alice")

    response = client.post('/users/edit', json={}, headers=auth_headers(user['user_id']))

    assert response.status_code == 400


def test_edit_rejects_taken_username(client, make_user, auth_headers):
    user = make_user("alice")
    make_user("bob")

    response = client.post('/users/edit', json={"username": "bob"}, headers=auth_headers(user['user_id']))

    assert response.status_code == 409


def test_update_fcm_token(client, db, make_user, auth_headers):
    user = make_user("alice")

    response = client.post('/users/updateFCMToken', json={"token": "device-token-1"}, headers=auth_headers(user['user_id']))

    assert response.status_code == 200
    assert db.users.find_one({"user_id": user['user_id']})['fcm_token'] == "device-token-1"


def test_update_fcm_token_requires_token(client, make_user, auth_headers):
    user = make_user("alice")

    response = client.post('/users/updateFCMToken', json={}, headers=auth_headers(user['user_id']))

    assert response.status_code == 400


# --- 팔로우 ---

def test_follow_updates_both_users_and_notifies(client, db, make_user, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")

    response = client.post('/users/action/follow', json={"_id": bob['user_id']}, headers=auth_headers(alice['user_id']))

    assert response.status_code == 200
    assert db.users.find_one({"user_id": alice['user_id']})['follows'] == [bob['user_id']]
    stored_bob = db.users.find_one({"user_id": bob['user_id']})
    assert stored_bob['followers'] == [alice['user_id']]
    assert len(stored_bob['notifications']) == 1
    assert stored_bob['notifications'][0]['data']['type'] == "NEW_FOLLOWER"


def test_follow_twice_is_conflict(client, make_user, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")
    headers = auth_headers(alice['user_id'])

    client.post('/users/action/follow', json={"_id": bob['user_id']}, headers=headers)
    response = client.post('/users/action/follow', json={"_id": bob['user_id']}, headers=headers)

    assert response.status_code == 409
    assert response.get_json()['error_code'] == "ALREADY_FOLLOWING"


def test_follow_self_is_noop(client, db, make_user, auth_headers):
    alice = make_user("alice")

    response = client.post('/users/action/follow', json={"_id": alice['user_id']}, headers=auth_headers(alice['user_id']))

    assert response.status_code == 200
    stored = db.users.find_one({"user_id": alice['user_id']})
    assert stored['follows'] == [] and stored['followers'] == []
    assert stored['notifications'] == []


def test_follow_unknown_user(client, make_user, auth_headers):
    alice = make_user("alice")

    response = client.post('/users/action/follow', json={"_id": "ghost"}, headers=auth_headers(alice['user_id']))

    assert response.status_code == 404


def test_unfollow(client, db, make_user, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")
    headers = auth_headers(alice['user_id'])
    client.post('/users/action/follow', json={"_id": bob['user_id']}, headers=headers)

    response = client.post('/users/action/unfollow', json={"_id": bob['user_id']}, headers=headers)

    assert response.status_code == 200
    assert db.users.find_one({"user_id": alice['user_id']})['follows'] == []
    assert db.users.find_one({"user_id": bob['user_id']})['followers'] == []


def test_unfollow_without_following_is_conflict(client, make_user, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")

    response = client.post('/users/action/unfollow', json={"_id": bob['user_id']}, headers=auth_headers(alice['user_id']))

    assert response.status_code == 409


def test_unknown_action(client, make_user, auth_headers):
    alice = make_user("alice")

    response = client.post('/users/action/block', json={"_id": "x"}, headers=auth_headers(alice['user_id']))

    assert response.status_code == 404
    assert response.get_json()['error_code'] == "UNKNOWN_ACTION"


def test_action_requires_target_id(client, make_user, auth_headers):
    alice = make_user("alice")

    response = client.post('/users/action/follow', json={}, headers=auth_headers(alice['user_id']))

    assert response.status_code == 400
