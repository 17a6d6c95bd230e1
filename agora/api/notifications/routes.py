# agora/api/notifications/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, g
from marshmallow import ValidationError

from agora.core.exceptions import NotFoundError, PushDeliveryError
from agora.core.security import jwt_required
from agora.utils.validators import validate_id
from agora.api.notifications.schemas import SendNotificationSchema, NotificationResponseSchema

notifications_bp = Blueprint('notifications_bp', __name__)


@notifications_bp.route('/', methods=['GET'])
@jwt_required
def list_notifications():
    """현재 로그인된 사용자의 알림 목록을 최신순으로 반환합니다."""
    notification_service = current_app.services['notifications']
    notifications = notification_service.get_notifications(g.user_id)
    return jsonify(NotificationResponseSchema(many=True).dump(notifications)), 200


def _send(send_fn, target: str):
    """
    알림 저장 후 푸시를 발송합니다.
    - 푸시 실패 시 502를 반환하지만, 이미 저장된 알림은 남아 있습니다.
    """
    try:
        data = SendNotificationSchema().load(request.get_json(silent=True) or {})
        message_id = send_fn(target, data['title'], data['body'], data['data'])
        return jsonify({"message": message_id}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except NotFoundError as e:
        return jsonify(e.to_dict()), 404
    except PushDeliveryError as e:
        logging.error(f"알림 푸시 발송 실패 (target: {target}, sender: {g.user_id}): {e.message}")
        return jsonify(e.to_dict()), 502


@notifications_bp.route('/send/u/<string:username>', methods=['POST'])
@jwt_required
def send_to_username(username: str):
    notification_service = current_app.services['notifications']
    return _send(notification_service.send_to_username, username)


@notifications_bp.route('/send/id/<string:user_id>', methods=['POST'])
@jwt_required
def send_to_id(user_id: str):
    notification_service = current_app.services['notifications']
    validate_id(user_id)
    return _send(notification_service.send_notification, user_id)
