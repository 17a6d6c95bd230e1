# agora/api/auth/schemas.py
from marshmallow import Schema, fields, validate


class LoginSchema(Schema):
    """POST /auth/login 요청 본문의 유효성을 검사합니다."""
    username = fields.Str(required=True, validate=validate.Length(min=1))
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=1))
