# agora/api/notifications/schemas.py
from marshmallow import Schema, fields, validate


class SendNotificationSchema(Schema):
    """POST /notification/send/... 요청 본문. data는 푸시의 data 페이로드로 그대로 전달됩니다."""
    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    body = fields.Str(required=True, validate=validate.Length(min=1, max=2000))
    data = fields.Dict(keys=fields.Str(), values=fields.Raw(), load_default=dict)


class NotificationResponseSchema(Schema):
    notification_id = fields.Str(data_key="_id")
    title = fields.Str()
    body = fields.Str()
    data = fields.Dict()
    opened = fields.Bool()
    created_at = fields.DateTime(data_key="date")
