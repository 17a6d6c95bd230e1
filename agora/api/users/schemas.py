# agora/api/users/schemas.py
from marshmallow import Schema, fields, validate, validates_schema, ValidationError

USERNAME_VALIDATOR = validate.Regexp(
    r'^[A-Za-z0-9_.]{3,30}$',
    error="사용자명은 3~30자의 영문, 숫자, '_', '.'만 사용할 수 있습니다."
)


class SignupSchema(Schema):
    """
    POST /users/signup
    회원가입 요청 본문의 유효성을 검사합니다.
    """
    username = fields.Str(required=True, validate=USERNAME_VALIDATOR)
    fullname = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6, max=128))


class UserEditSchema(Schema):
    """
    POST /users/edit
    전달된 필드만 수정합니다. 비어 있는 본문은 거부합니다.
    """
    fullname = fields.Str(validate=validate.Length(min=1, max=100))
    username = fields.Str(validate=USERNAME_VALIDATOR)
    email = fields.Email()
    image = fields.Str(validate=validate.Length(min=1))
    bio = fields.Str(validate=validate.Length(max=500))
    language = fields.Str(validate=validate.Length(min=2, max=8))
    password = fields.Str(load_only=True, validate=validate.Length(min=6, max=128))

    @validates_schema
    def require_any_field(self, data, **kwargs):
        if not data:
            raise ValidationError("수정할 항목이 하나 이상 필요합니다.")


class FCMTokenSchema(Schema):
    """
    POST /users/updateFCMToken
    FCM 토큰 등록/업데이트 요청 본문의 유효성을 검사하는 스키마.
    """
    token = fields.Str(
        required=True,
        validate=validate.Length(min=1),
        error_messages={"required": "token은 필수 항목입니다."}
    )


class UserProfileSchema(Schema):
    """
    사용자 프로필 응답. 비밀번호 해시와 푸시 토큰은 포함하지 않습니다.
    followers/follows는 목록 대신 개수로 내보내며, followed는 조회자 기준 값입니다.
    """
    user_id = fields.Str(data_key="_id")
    username = fields.Str()
    fullname = fields.Str()
    email = fields.Str()
    image = fields.Str(allow_none=True)
    bio = fields.Str()
    verified = fields.Bool()
    type = fields.Int()
    followers = fields.Int()
    follows = fields.Int()
    followed = fields.Bool()
