# agora/api/comments/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, List

from flask import current_app

from agora.core.exceptions import NotFoundError, ForbiddenError, ConflictError
from agora.core.queries import PageQuery, ASCENDING, HIDE_OBJECT_ID, deadline_ms
from agora.models.comment import Comment
from agora.utils.datetime_utils import for_storage
from agora.models.notification import NotificationType


class CommentService:
    """
    댓글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    게시글의 answers에는 댓글 ID를, 부모 댓글의 answers에는 대댓글 요약을 기록합니다.
    """
    def __init__(self, db, post_service, user_service, notification_service):
        self.comments_ref = db.comments
        self.post_service = post_service
        self.user_service = user_service
        self.notification_service = notification_service

    def _present(self, comments: List[Dict[str, Any]], viewer_id: Optional[str]) -> List[Dict[str, Any]]:
        authors = self.user_service.get_summaries(c.get('author') for c in comments)
        presented = []
        for comment in comments:
            upvotes = comment.get('upvotes') or []
            presented.append({
                "comment_id": comment['comment_id'],
                "post_id": comment.get('post_id'),
                "parent": comment.get('parent'),
                "author": authors.get(comment.get('author')),
                "content": comment.get('content') or [],
                "upvotes": len(upvotes),
                "answers": len(comment.get('answers') or []),
                "upvoted": viewer_id in upvotes if viewer_id else False,
                "created_at": comment.get('created_at'),
            })
        return presented

    def _get_post_or_404(self, post_id: str) -> Dict[str, Any]:
        post = self.post_service.get_document(post_id)
        if not post:
            raise NotFoundError(f"게시글을 찾을 수 없습니다: {post_id}", "POST_NOT_FOUND")
        return post

    def get_document(self, comment_id: str) -> Optional[Dict[str, Any]]:
        return self.comments_ref.find_one({"comment_id": comment_id}, HIDE_OBJECT_ID)

    def get_comments_for_post(self, post_id: str, viewer_id: str, page: int) -> List[Dict[str, Any]]:
        """게시글의 댓글을 작성 순서대로 페이지 단위 조회합니다."""
        self._get_post_or_404(post_id)
        query = (
            PageQuery(
                page=page,
                page_size=current_app.config['POST_LIMIT'],
                max_time_ms=deadline_ms(current_app.config['FEED_QUERY_TIMEOUT']),
            )
            .where("post_id", post_id)
            .order_by("created_at", ASCENDING)
            .order_by("comment_id", ASCENDING)
        )
        return self._present(query.fetch(self.comments_ref), viewer_id)

    def create_comment(self, actor: Dict[str, Any], post_id: str, content: List[Any], parent_id: Optional[str] = None) -> str:
        """
        게시글에 댓글을 작성합니다.
        - 게시글의 answers에 댓글 ID를 추가한 뒤 댓글을 저장합니다.
        - parent가 있으면 같은 게시글의 댓글이어야 하며, 부모에 대댓글 요약을 추가합니다.
        - 게시글 작성자에게 알림을 보냅니다. (본인 글이면 생략)
        """
        post = self._get_post_or_404(post_id)

        if parent_id:
            parent = self.get_document(parent_id)
            if not parent or parent.get('post_id') != post_id:
                raise NotFoundError(f"부모 댓글을 찾을 수 없습니다: {parent_id}", "PARENT_COMMENT_NOT_FOUND")

        comment = Comment(
            comment_id=str(uuid.uuid4()),
            post_id=post_id,
            author=actor['user_id'],
            content=content,
            parent=parent_id,
        )
        self.post_service.add_answer(post_id, comment.comment_id)
        self.comments_ref.insert_one(for_storage(asdict(comment)))

        if parent_id:
            summary = {
                "comment_id": comment.comment_id,
                "author": comment.author,
                "content": comment.content,
                "created_at": comment.created_at,
            }
            self.comments_ref.update_one({"comment_id": parent_id}, {"$push": {"answers": summary}})

        logging.info(f"댓글 생성 완료 (comment_id: {comment.comment_id}, post_id: {post_id})")
        self.notification_service.notify_event(
            post.get('author'), actor, NotificationType.POST_COMMENT,
            {"post": post_id, "comment": comment.comment_id}
        )
        return comment.comment_id

    def _collect_replies(self, comment_id: str) -> List[str]:
        """comment_id 아래에 달린 모든 대댓글 ID (깊이 제한 없음)"""
        reply_ids = []
        frontier = [comment_id]
        while frontier:
            children = self.comments_ref.find({"parent": {"$in": frontier}}, {"_id": 0, "comment_id": 1})
            frontier = [child['comment_id'] for child in children]
            reply_ids.extend(frontier)
        return reply_ids

    def delete_comment(self, comment_id: str, user_id: str) -> int:
        """
        댓글을 삭제합니다. (작성자 본인만 가능)
        그 아래의 대댓글도 함께 지우고 게시글의 answers에서도 빼냅니다.

        :return: 함께 삭제된 대댓글 수
        """
        comment = self.get_document(comment_id)
        if not comment:
            raise NotFoundError(f"댓글을 찾을 수 없습니다: {comment_id}", "COMMENT_NOT_FOUND")
        if comment.get('author') != user_id:
            raise ForbiddenError("작성자만 댓글을 삭제할 수 있습니다.")

        reply_ids = self._collect_replies(comment_id)
        removed_ids = [comment_id] + reply_ids
        self.post_service.remove_answers(comment.get('post_id'), removed_ids)
        if comment.get('parent'):
            self.comments_ref.update_one(
                {"comment_id": comment['parent']},
                {"$pull": {"answers": {"comment_id": comment_id}}}
            )
        self.comments_ref.delete_many({"comment_id": {"$in": removed_ids}})
        logging.info(f"댓글 삭제 완료 (comment_id: {comment_id}, 대댓글 {len(reply_ids)}개 포함)")
        return len(reply_ids)

    def upvote(self, actor: Dict[str, Any], comment_id: str):
        """댓글을 추천하고, 본인 댓글이 아니면 작성자에게 알림을 보냅니다."""
        user_id = actor['user_id']
        comment = self.get_document(comment_id)
        if not comment:
            raise NotFoundError(f"댓글을 찾을 수 없습니다: {comment_id}", "COMMENT_NOT_FOUND")
        if user_id in (comment.get('upvotes') or []):
            raise ConflictError("이미 추천한 댓글입니다.", "ALREADY_UPVOTED")

        result = self.comments_ref.update_one(
            {"comment_id": comment_id, "upvotes": {"$ne": user_id}},
            {"$addToSet": {"upvotes": user_id}, "$inc": {"upvote_count": 1}}
        )
        if result.modified_count == 0:
            raise ConflictError("이미 추천한 댓글입니다.", "ALREADY_UPVOTED")
        self.notification_service.notify_event(
            comment.get('author'), actor, NotificationType.COMMENT_UPVOTE,
            {"post": comment.get('post_id'), "comment": comment_id}
        )

    def downvote(self, actor: Dict[str, Any], comment_id: str):
        user_id = actor['user_id']
        comment = self.get_document(comment_id)
        if not comment:
            raise NotFoundError(f"댓글을 찾을 수 없습니다: {comment_id}", "COMMENT_NOT_FOUND")
        if user_id not in (comment.get('upvotes') or []):
            raise ConflictError("추천하지 않은 댓글입니다.", "NOT_UPVOTED")

        result = self.comments_ref.update_one(
            {"comment_id": comment_id, "upvotes": user_id},
            {"$pull": {"upvotes": user_id}, "$inc": {"upvote_count": -1}}
        )
        if result.modified_count == 0:
            raise ConflictError("추천하지 않은 댓글입니다.", "NOT_UPVOTED")
