# agora/api/communities/test_communities.py
"""
커뮤니티 API 테스트: 생성, 조회, 가입/탈퇴

사용법: python -m pytest agora/api/communities/test_communities.py -v
"""
import pytest

from agora.core.exceptions import ConflictError


def test_create_community_registers_founder(app, client, db, make_user, auth_headers):
    alice = make_user("alice")

    response = client.post('/communities/create', json={"title": "Python", "bio": "All about Python"}, headers=auth_headers(alice['user_id']))

    assert response.status_code == 201
    community_id = response.get_json()['_id']
    stored = db.communities.find_one({"community_id": community_id})
    assert stored['founder'] == alice['user_id']
    assert stored['mods'] == [alice['user_id']]
    assert stored['members'] == [alice['user_id']]
    assert stored['member_count'] == 1
    assert stored['image'] == app.config['DEFAULT_COMMUNITY_IMAGE']
    assert community_id in db.users.find_one({"user_id": alice['user_id']})['communities']


def test_create_community_validation(client, make_user, auth_headers):
    alice = make_user("alice")

    response = client.post('/communities/create', json={"title": ""}, headers=auth_headers(alice['user_id']))

    assert response.status_code == 400
    assert {'title', 'bio'} <= set(response.get_json()['details'])


def test_find_community(client, make_user, make_community, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")
    community = make_community(alice['user_id'], title="Python")

    response = client.get(f"/communities/find/{community['community_id']}", headers=auth_headers(bob['user_id']))

    assert response.status_code == 200
    body = response.get_json()
    assert body['_id'] == community['community_id']
    assert body['founder']['username'] == "alice"
    assert body['members'] == 1
    assert body['joined'] is False


def test_find_unknown_community(client, make_user, auth_headers):
    alice = make_user("alice")

    response = client.get('/communities/find/missing', headers=auth_headers(alice['user_id']))

    assert response.status_code == 404
    assert response.get_json()['error_code'] == "COMMUNITY_NOT_FOUND"


def test_communities_of_user_sorted_by_member_count(client, make_user, make_community, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    make_community(alice['user_id'], title="Small")
    make_community(bob['user_id'], title="Big", members=[bob['user_id'], alice['user_id'], carol['user_id']])
    make_community(bob['user_id'], title="Not joined")

    response = client.get(f"/communities/of/{alice['user_id']}", headers=auth_headers(carol['user_id']))

    assert response.status_code == 200
    body = response.get_json()
    assert [c['title'] for c in body] == ["Big", "Small"]
    assert [c['joined'] for c in body] == [True, False]


def test_communities_of_unknown_user(client, make_user, auth_headers):
    alice = make_user("alice")

    response = client.get('/communities/of/ghost', headers=auth_headers(alice['user_id']))

    assert response.status_code == 404


def test_join_and_leave(client, db, make_user, make_community, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")
    community = make_community(alice['user_id'])
    community_id = community['community_id']
    headers = auth_headers(bob['user_id'])

    join = client.post('/communities/action/join', json={"_id": community_id}, headers=headers)
    stored = db.communities.find_one({"community_id": community_id})
    assert join.status_code == 200
    assert bob['user_id'] in stored['members']
    assert stored['member_count'] == 2
    assert community_id in db.users.find_one({"user_id": bob['user_id']})['communities']

    leave = client.post('/communities/action/leave', json={"_id": community_id}, headers=headers)
    stored = db.communities.find_one({"community_id": community_id})
    assert leave.status_code == 200
    assert stored['members'] == [alice['user_id']]
    assert stored['member_count'] == 1
    assert community_id not in db.users.find_one({"user_id": bob['user_id']})['communities']


def test_join_twice_is_conflict(client, make_user, make_community, auth_headers):
    alice = make_user("alice")
    community = make_community(alice['user_id'])

    response = client.post('/communities/action/join', json={"_id": community['community_id']}, headers=auth_headers(alice['user_id']))

    assert response.status_code == 409
    assert response.get_json()['error_code'] == "ALREADY_JOINED"


def test_leave_without_joining_is_conflict(client, make_user, make_community, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")
    community = make_community(alice['user_id'])

    response = client.post('/communities/action/leave', json={"_id": community['community_id']}, headers=auth_headers(bob['user_id']))

    assert response.status_code == 409


def test_mod_leaving_loses_mod_role(client, db, make_user, make_community, auth_headers):
    alice = make_user("alice")
    community = make_community(alice['user_id'])

    client.post('/communities/action/leave', json={"_id": community['community_id']}, headers=auth_headers(alice['user_id']))

    stored = db.communities.find_one({"community_id": community['community_id']})
    assert stored['mods'] == []
    assert stored['members'] == []


def test_join_unknown_community(client, make_user, auth_headers):
    alice = make_user("alice")

    response = client.post('/communities/action/join', json={"_id": "missing"}, headers=auth_headers(alice['user_id']))

    assert response.status_code == 404


def test_join_with_stale_read_keeps_member_count_in_step(app, db, make_user, make_community, monkeypatch):
    alice = make_user("alice")
    bob = make_user("bob")
    community = make_community(alice['user_id'])
    service = app.services['communities']
    snapshot = service.get_document(community['community_id'])
    monkeypatch.setattr(service, "get_document", lambda community_id: dict(snapshot))

    service.join(bob, community['community_id'])
    with pytest.raises(ConflictError):
        service.join(bob, community['community_id'])

    stored = db.communities.find_one({"community_id": community['community_id']})
    assert stored['members'] == [alice['user_id'], bob['user_id']]
    assert stored['member_count'] == 2


def test_leave_with_stale_read_keeps_member_count_in_step(app, db, make_user, make_community, monkeypatch):
    alice = make_user("alice")
    bob = make_user("bob")
    community = make_community(alice['user_id'], members=[alice['user_id'], bob['user_id']])
    service = app.services['communities']
    snapshot = service.get_document(community['community_id'])
    monkeypatch.setattr(service, "get_document", lambda community_id: dict(snapshot))

    service.leave(bob, community['community_id'])
    with pytest.raises(ConflictError):
        service.leave(bob, community['community_id'])

    stored = db.communities.find_one({"community_id": community['community_id']})
    assert stored['members'] == [alice['user_id']]
    assert stored['member_count'] == 1
