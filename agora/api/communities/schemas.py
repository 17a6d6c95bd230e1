# agora/api/communities/schemas.py
from marshmallow import Schema, fields, validate

from agora.schemas.common import AuthorSummarySchema


class CommunityCreateSchema(Schema):
    """POST /communities/create 요청 본문. 이미지를 생략하면 기본 이미지를 사용합니다."""
    title = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    bio = fields.Str(required=True, validate=validate.Length(min=1, max=1000))
    image = fields.Str(allow_none=True, load_default=None)
    banner = fields.Str(allow_none=True, load_default=None)


class CommunityResponseSchema(Schema):
    """커뮤니티 정보 응답. members는 멤버 수, joined는 조회자 기준 가입 여부입니다."""
    community_id = fields.Str(data_key="_id")
    title = fields.Str()
    bio = fields.Str()
    image = fields.Str(allow_none=True)
    banner = fields.Str(allow_none=True)
    founder = fields.Nested(AuthorSummarySchema, allow_none=True)
    members = fields.Int()
    joined = fields.Bool()
    created_at = fields.DateTime(data_key="date")
