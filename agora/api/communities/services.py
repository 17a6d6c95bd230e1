# agora/api/communities/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Dict, Any, Iterable, List, Optional

from flask import current_app

from agora.core.exceptions import NotFoundError, ConflictError
from agora.core.queries import PageQuery, ASCENDING, DESCENDING, HIDE_OBJECT_ID, deadline_ms
from agora.models.community import Community

SUMMARY_PROJECTION = {"_id": 0, "community_id": 1, "title": 1, "image": 1}


class CommunityService:
    """
    커뮤니티 생성, 조회, 가입/탈퇴를 담당하는 서비스 클래스.
    가입 상태는 커뮤니티의 members와 사용자의 communities 양쪽에 기록됩니다.
    """
    def __init__(self, db, user_service):
        self.communities_ref = db.communities
        self.user_service = user_service

    def _present(self, community: Dict[str, Any], viewer_id: Optional[str], founders: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        members = community.get('members') or []
        return {
            "community_id": community['community_id'],
            "title": community.get('title'),
            "bio": community.get('bio'),
            "image": community.get('image'),
            "banner": community.get('banner'),
            "founder": founders.get(community.get('founder')),
            "members": len(members),
            "joined": viewer_id in members,
            "created_at": community.get('created_at'),
        }

    def create_community(self, founder_id: str, data: Dict[str, Any]) -> str:
        """창설자를 운영자이자 첫 멤버로 등록한 커뮤니티를 만듭니다."""
        community = Community(
            community_id=str(uuid.uuid4()),
            title=data['title'],
            bio=data['bio'],
            founder=founder_id,
            image=data.get('image') or current_app.config['DEFAULT_COMMUNITY_IMAGE'],
            banner=data.get('banner') or current_app.config['DEFAULT_COMMUNITY_BANNER'],
            mods=[founder_id],
            members=[founder_id],
            member_count=1,
        )
        self.communities_ref.insert_one(asdict(community))
        self.user_service.add_community(founder_id, community.community_id)
        logging.info(f"커뮤니티 생성: {community.title} ({community.community_id}) by {founder_id}")
        return community.community_id

    def get_document(self, community_id: str) -> Optional[Dict[str, Any]]:
        return self.communities_ref.find_one({"community_id": community_id}, HIDE_OBJECT_ID)

    def get_community(self, community_id: str, viewer_id: str) -> Dict[str, Any]:
        community = self.get_document(community_id)
        if not community:
            raise NotFoundError(f"커뮤니티를 찾을 수 없습니다: {community_id}", "COMMUNITY_NOT_FOUND")
        founders = self.user_service.get_summaries([community.get('founder')])
        return self._present(community, viewer_id, founders)

    def get_user_communities(self, user_id: str, viewer_id: str) -> List[Dict[str, Any]]:
        """사용자가 가입한 커뮤니티 목록 (멤버 수 내림차순)"""
        if self.user_service.get_user_document(user_id) is None:
            raise NotFoundError(f"사용자를 찾을 수 없습니다: {user_id}", "USER_NOT_FOUND")

        # page_size=0은 limit 없이 전체 조회
        query = (
            PageQuery(page_size=0, max_time_ms=deadline_ms(current_app.config['FEED_QUERY_TIMEOUT']))
            .where("members", user_id)
            .order_by("member_count", DESCENDING)
            .order_by("community_id", ASCENDING)
        )
        communities = query.fetch(self.communities_ref)
        founders = self.user_service.get_summaries(c.get('founder') for c in communities)
        return [self._present(c, viewer_id, founders) for c in communities]

    def get_summaries(self, community_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
        """게시글 응답의 커뮤니티 정보 조인용"""
        ids = list({cid for cid in community_ids if cid})
        if not ids:
            return {}
        docs = self.communities_ref.find({"community_id": {"$in": ids}}, SUMMARY_PROJECTION)
        return {doc['community_id']: doc for doc in docs}

    def join(self, actor: Dict[str, Any], community_id: str):
        user_id = actor['user_id']
        community = self.get_document(community_id)
        if not community:
            raise NotFoundError(f"커뮤니티를 찾을 수 없습니다: {community_id}", "COMMUNITY_NOT_FOUND")
        if user_id in (community.get('members') or []):
            raise ConflictError("이미 가입한 커뮤니티입니다.", "ALREADY_JOINED")

        result = self.communities_ref.update_one(
            {"community_id": community_id, "members": {"$ne": user_id}},
            {"$addToSet": {"members": user_id}, "$inc": {"member_count": 1}}
        )
        if result.modified_count == 0:
            raise ConflictError("이미 가입한 커뮤니티입니다.", "ALREADY_JOINED")
        self.user_service.add_community(user_id, community_id)
        logging.info(f"커뮤니티 가입: {user_id} -> {community_id}")

    def leave(self, actor: Dict[str, Any], community_id: str):
        user_id = actor['user_id']
        community = self.get_document(community_id)
        if not community:
            raise NotFoundError(f"커뮤니티를 찾을 수 없습니다: {community_id}", "COMMUNITY_NOT_FOUND")
        if user_id not in (community.get('members') or []):
            raise ConflictError("가입하지 않은 커뮤니티입니다.", "NOT_JOINED")

        result = self.communities_ref.update_one(
            {"community_id": community_id, "members": user_id},
            {"$pull": {"members": user_id, "mods": user_id}, "$inc": {"member_count": -1}}
        )
        if result.modified_count == 0:
            raise ConflictError("가입하지 않은 커뮤니티입니다.", "NOT_JOINED")
        self.user_service.remove_community(user_id, community_id)
        logging.info(f"커뮤니티 탈퇴: {user_id} -> {community_id}")
