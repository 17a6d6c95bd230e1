# agora/api/comments/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from agora.schemas.common import AuthorSummarySchema, ID_VALIDATOR


class AnswerSchema(Schema):
    """댓글 본문. parent를 지정하면 해당 댓글의 대댓글이 됩니다."""
    class Meta:
        unknown = EXCLUDE

    content = fields.List(fields.Raw(), required=True, validate=validate.Length(min=1))
    parent = fields.Str(allow_none=True, load_default=None, validate=ID_VALIDATOR)


class CommentCreateSchema(Schema):
    """POST /comments/create 요청 본문: {"_id": <post_id>, "answer": {...}}"""
    post_id = fields.Str(
        required=True,
        data_key="_id",
        validate=ID_VALIDATOR,
        error_messages={"required": "게시글 _id는 필수 항목입니다."},
    )
    answer = fields.Nested(AnswerSchema, required=True)


class CommentResponseSchema(Schema):
    """댓글 응답. upvotes/answers는 개수, upvoted는 조회자 기준 추천 여부입니다."""
    comment_id = fields.Str(data_key="_id")
    post_id = fields.Str(data_key="post")
    parent = fields.Str(allow_none=True)
    author = fields.Nested(AuthorSummarySchema, allow_none=True)
    content = fields.List(fields.Raw())
    upvotes = fields.Int()
    answers = fields.Int()
    upvoted = fields.Bool()
    created_at = fields.DateTime(data_key="date")
