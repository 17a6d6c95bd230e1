# agora/api/posts/schemas.py
from marshmallow import Schema, fields, validate, EXCLUDE

from agora.schemas.common import AuthorSummarySchema, CommunitySummarySchema, ID_VALIDATOR


class PostCreateSchema(Schema):
    """
    POST /posts/create 요청 본문의 유효성을 검사합니다.
    작성자/작성 시각은 서버에서 채우므로 본문에 있어도 무시합니다.
    """
    class Meta:
        unknown = EXCLUDE

    title = fields.Str(required=True, validate=validate.Length(min=1, max=300))
    # 리치 텍스트 블록. 구조는 클라이언트가 정의하며 서버는 그대로 저장합니다.
    content = fields.List(fields.Raw(), required=True, validate=validate.Length(min=1))
    tags = fields.List(fields.Str(validate=validate.Length(min=1, max=50)), load_default=list)
    images = fields.List(fields.Str(), load_default=list)
    community = fields.Str(allow_none=True, load_default=None, validate=ID_VALIDATOR)


class PostResponseSchema(Schema):
    """게시글 정보 응답을 위한 최종 JSON 형식을 정의합니다."""
    post_id = fields.Str(data_key="_id")
    title = fields.Str()
    content = fields.List(fields.Raw())
    author = fields.Nested(AuthorSummarySchema, allow_none=True)
    community = fields.Nested(CommunitySummarySchema, allow_none=True)
    tags = fields.List(fields.Str())
    images = fields.List(fields.Str())
    upvotes = fields.Int()
    answers = fields.Int()
    upvoted = fields.Bool()
    created_at = fields.DateTime(data_key="date")
