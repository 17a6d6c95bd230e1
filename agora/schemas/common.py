# agora/schemas/common.py
"""여러 컴포넌트가 함께 쓰는 요청/응답 스키마"""
from marshmallow import Schema, fields, validate

ID_VALIDATOR = validate.Regexp(r'^[A-Za-z0-9_-]{1,128}$', error="ID 형식이 올바르지 않습니다.")


class IdBodySchema(Schema):
    """{"_id": "..."} 형태로 대상 문서를 지정하는 요청 본문 (follow, upvote, join 등)"""
    target_id = fields.Str(
        required=True,
        data_key="_id",
        validate=ID_VALIDATOR,
        error_messages={"required": "_id는 필수 항목입니다."},
    )


class AuthorSummarySchema(Schema):
    """게시글/댓글 응답에 포함될 작성자 요약"""
    user_id = fields.Str(data_key="_id")
    fullname = fields.Str()
    username = fields.Str()
    image = fields.Str(allow_none=True)
    verified = fields.Bool()


class CommunitySummarySchema(Schema):
    """게시글 응답에 포함될 커뮤니티 요약"""
    community_id = fields.Str(data_key="_id")
    title = fields.Str()
    image = fields.Str(allow_none=True)
