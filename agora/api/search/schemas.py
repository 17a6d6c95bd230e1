# agora/api/search/schemas.py
from marshmallow import Schema, fields


class UserResultSchema(Schema):
    user_id = fields.Str(data_key="_id")
    username = fields.Str()
    fullname = fields.Str()
    image = fields.Str(allow_none=True)
    verified = fields.Bool()


class PostResultSchema(Schema):
    post_id = fields.Str(data_key="_id")
    title = fields.Str()
    author = fields.Str()
    community = fields.Str(allow_none=True)
    tags = fields.List(fields.Str())
    images = fields.List(fields.Str())
    upvotes = fields.Function(lambda post: len(post.get('upvotes') or []))
    created_at = fields.DateTime(data_key="date")


class CommunityResultSchema(Schema):
    community_id = fields.Str(data_key="_id")
    title = fields.Str()
    bio = fields.Str()
    image = fields.Str(allow_none=True)
    members = fields.Int(attribute="member_count")


class SearchResponseSchema(Schema):
    """GET /search/content/<query> 응답. length는 세 결과 목록 길이의 합입니다."""
    length = fields.Int()
    users = fields.List(fields.Nested(UserResultSchema))
    posts = fields.List(fields.Nested(PostResultSchema))
    communities = fields.List(fields.Nested(CommunityResultSchema))
