# agora/api/posts/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, List

from flask import current_app

from agora.core.exceptions import NotFoundError, ForbiddenError, ConflictError
from agora.core.queries import PageQuery, DESCENDING, HIDE_OBJECT_ID, deadline_ms
from agora.models.post import Post
from agora.utils.datetime_utils import for_storage
from agora.models.notification import NotificationType

FEED_TYPES = ("personal", "new", "liked")


class PostService:
    """
    게시글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    작성자/커뮤니티 정보는 조회 후 한 번에 조인해서 응답에 붙입니다.
    """
    def __init__(self, db, user_service, community_service, notification_service):
        self.posts_ref = db.posts
        self.comments_ref = db.comments
        self.user_service = user_service
        self.community_service = community_service
        self.notification_service = notification_service

    def _present(self, posts: List[Dict[str, Any]], viewer_id: Optional[str]) -> List[Dict[str, Any]]:
        """게시글 목록에 작성자/커뮤니티 요약과 조회자 기준 추천 여부를 붙입니다."""
        authors = self.user_service.get_summaries(p.get('author') for p in posts)
        communities = self.community_service.get_summaries(p.get('community') for p in posts)

        presented = []
        for post in posts:
            upvotes = post.get('upvotes') or []
            presented.append({
                "post_id": post['post_id'],
                "title": post.get('title'),
                "content": post.get('content') or [],
                "author": authors.get(post.get('author')),
                "community": communities.get(post.get('community')),
                "tags": post.get('tags') or [],
                "images": post.get('images') or [],
                "upvotes": len(upvotes),
                "answers": len(post.get('answers') or []),
                "upvoted": viewer_id in upvotes if viewer_id else False,
                "created_at": post.get('created_at'),
            })
        return presented

    def create_post(self, author_id: str, data: Dict[str, Any]) -> str:
        """새로운 게시글을 생성하고 저장합니다. 커뮤니티를 지정하지 않으면 기본 커뮤니티에 올립니다."""
        community_id = data.get('community')
        if community_id:
            if self.community_service.get_document(community_id) is None:
                raise NotFoundError(f"커뮤니티를 찾을 수 없습니다: {community_id}", "COMMUNITY_NOT_FOUND")
        else:
            community_id = current_app.config['DEFAULT_COMMUNITY_ID']

        new_post = Post(
            post_id=str(uuid.uuid4()),
            title=data['title'],
            content=data['content'],
            author=author_id,
            community=community_id,
            tags=data.get('tags') or [],
            images=data.get('images') or [],
        )
        self.posts_ref.insert_one(for_storage(asdict(new_post)))
        logging.info(f"게시글 생성 완료 (post_id: {new_post.post_id}, author: {author_id})")
        return new_post.post_id

    def get_document(self, post_id: str) -> Optional[Dict[str, Any]]:
        return self.posts_ref.find_one({"post_id": post_id}, HIDE_OBJECT_ID)

    def get_post(self, post_id: str, viewer_id: Optional[str]) -> Dict[str, Any]:
        post = self.get_document(post_id)
        if not post:
            raise NotFoundError(f"게시글을 찾을 수 없습니다: {post_id}", "POST_NOT_FOUND")
        return self._present([post], viewer_id)[0]

    def feed_query(self, feed_type: str, viewer: Dict[str, Any], page: int) -> Optional[PageQuery]:
        """
        피드 종류별 조회 조건을 만듭니다.
        - personal: 팔로우한 사용자의 글, 최신순 (팔로우가 없으면 None)
        - new: 전체 글, 최신순
        - liked: 추천 수 내림차순, 같으면 최신순
        """
        query = PageQuery(
            page=page,
            page_size=current_app.config['POST_LIMIT'],
            max_time_ms=deadline_ms(current_app.config['FEED_QUERY_TIMEOUT']),
        )
        if feed_type == "personal":
            follows = viewer.get('follows') or []
            if not follows:
                return None
            query = query.where("author", {"$in": follows}).order_by("created_at", DESCENDING)
        elif feed_type == "new":
            query = query.order_by("created_at", DESCENDING)
        elif feed_type == "liked":
            query = query.order_by("upvote_count", DESCENDING).order_by("created_at", DESCENDING)
        else:
            raise NotFoundError(f"지원하지 않는 피드입니다: {feed_type}", "UNKNOWN_FEED")
        # 같은 시각, 같은 추천 수끼리는 post_id로 순서를 고정
        return query.order_by("post_id", DESCENDING)

    def get_feed(self, feed_type: str, viewer: Dict[str, Any], page: int) -> List[Dict[str, Any]]:
        query = self.feed_query(feed_type, viewer, page)
        if query is None:
            return []
        return self._present(query.fetch(self.posts_ref), viewer['user_id'])

    def delete_post(self, post_id: str, user_id: str) -> int:
        """
        작성자 본인만 삭제할 수 있습니다. 게시글에 달린 댓글을 모두 지운 뒤 게시글을 삭제합니다.

        :return: 함께 삭제된 댓글 수
        """
        post = self.get_document(post_id)
        if not post:
            raise NotFoundError(f"게시글을 찾을 수 없습니다: {post_id}", "POST_NOT_FOUND")
        if post.get('author') != user_id:
            raise ForbiddenError("작성자만 게시글을 삭제할 수 있습니다.")

        deleted_comments = self.comments_ref.delete_many({"post_id": post_id}).deleted_count
        self.posts_ref.delete_one({"post_id": post_id})
        logging.info(f"게시글 삭제 완료 (post_id: {post_id}, 댓글 {deleted_comments}개 포함)")
        return deleted_comments

    def upvote(self, actor: Dict[str, Any], post_id: str):
        """게시글을 추천하고, 본인 글이 아니면 작성자에게 알림을 보냅니다."""
        user_id = actor['user_id']
        post = self.get_document(post_id)
        if not post:
            raise NotFoundError(f"게시글을 찾을 수 없습니다: {post_id}", "POST_NOT_FOUND")
        if user_id in (post.get('upvotes') or []):
            raise ConflictError("이미 추천한 게시글입니다.", "ALREADY_UPVOTED")

        # 조회 이후 다른 요청이 먼저 추천했다면 필터에 걸려 upvote_count가 늘지 않음
        result = self.posts_ref.update_one(
            {"post_id": post_id, "upvotes": {"$ne": user_id}},
            {"$addToSet": {"upvotes": user_id}, "$inc": {"upvote_count": 1}}
        )
        if result.modified_count == 0:
            raise ConflictError("이미 추천한 게시글입니다.", "ALREADY_UPVOTED")
        logging.info(f"게시글 추천: {user_id} -> {post_id}")
        self.notification_service.notify_event(post.get('author'), actor, NotificationType.POST_UPVOTE, {"post": post_id})

    def downvote(self, actor: Dict[str, Any], post_id: str):
        user_id = actor['user_id']
        post = self.get_document(post_id)
        if not post:
            raise NotFoundError(f"게시글을 찾을 수 없습니다: {post_id}", "POST_NOT_FOUND")
        if user_id not in (post.get('upvotes') or []):
            raise ConflictError("추천하지 않은 게시글입니다.", "NOT_UPVOTED")

        result = self.posts_ref.update_one(
            {"post_id": post_id, "upvotes": user_id},
            {"$pull": {"upvotes": user_id}, "$inc": {"upvote_count": -1}}
        )
        if result.modified_count == 0:
            raise ConflictError("추천하지 않은 게시글입니다.", "NOT_UPVOTED")
        logging.info(f"게시글 추천 취소: {user_id} -> {post_id}")

    def add_answer(self, post_id: str, comment_id: str):
        self.posts_ref.update_one({"post_id": post_id}, {"$addToSet": {"answers": comment_id}})

    def remove_answers(self, post_id: str, comment_ids: List[str]):
        self.posts_ref.update_one({"post_id": post_id}, {"$pullAll": {"answers": comment_ids}})
