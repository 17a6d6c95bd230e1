# agora/services/notification_service.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, List, Dict, Any

from agora.core.exceptions import NotFoundError, PushDeliveryError
from agora.core.messages import render_notification, format_actor
from agora.models.notification import Notification, NotificationType
from agora.utils.datetime_utils import DateTimeUtils

# 알림 발송에 필요한 사용자 필드만 조회
_RECIPIENT_PROJECTION = {"_id": 0, "user_id": 1, "username": 1, "language": 1, "fcm_token": 1}


class NotificationService:
    """
    알림 관련 비즈니스 로직을 담당하는 공용 서비스 클래스.
    알림은 수신자 문서의 notifications 배열에 먼저 저장한 뒤 푸시로 발송합니다.
    """
    def __init__(self, db, push_service):
        self.users_ref = db.users
        self.push_service = push_service

    def _deliver(self, recipient: dict, title: str, body: str, data: Optional[Dict[str, Any]]) -> str:
        notification = Notification(
            notification_id=str(uuid.uuid4()),
            title=title,
            body=body,
            data=data or {},
        )
        self.users_ref.update_one(
            {"user_id": recipient['user_id']},
            {"$push": {"notifications": asdict(notification)}}
        )

        token = recipient.get('fcm_token')
        if not token:
            logging.info(f"푸시 토큰이 없어 저장만 완료 (user_id: {recipient['user_id']})")
            return "OK"
        # 발송 실패 시에도 저장된 알림은 되돌리지 않음
        return self.push_service.send(token, title, body, data)

    def send_notification(self, target_user_id: str, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> str:
        """
        대상 사용자에게 알림을 저장하고 푸시를 발송합니다.

        :return: 푸시 제공자의 메시지 ID, 토큰이 없으면 "OK"
        :raises NotFoundError: 대상 사용자가 없는 경우
        :raises PushDeliveryError: 푸시 제공자가 발송을 거부한 경우
        """
        recipient = self.users_ref.find_one({"user_id": target_user_id}, _RECIPIENT_PROJECTION)
        if not recipient:
            raise NotFoundError(f"알림 대상 사용자를 찾을 수 없습니다: {target_user_id}", "USER_NOT_FOUND")
        return self._deliver(recipient, title, body, data)

    def send_to_username(self, username: str, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> str:
        recipient = self.users_ref.find_one({"username": username}, _RECIPIENT_PROJECTION)
        if not recipient:
            raise NotFoundError(f"알림 대상 사용자를 찾을 수 없습니다: {username}", "USER_NOT_FOUND")
        return self._deliver(recipient, title, body, data)

    def notify_event(self, recipient_id: str, sender: dict, n_type: NotificationType, data: Optional[Dict[str, Any]] = None) -> Optional[str]:
        """
        팔로우/추천/댓글 등 사용자 행동으로 생기는 알림을 수신자의 언어로 발송합니다.
        - 자기 자신에게 보내는 알림은 생성하지 않습니다.
        - 발송 실패는 로그만 남기고, 알림을 유발한 요청은 그대로 성공합니다.

        :param recipient_id: 알림을 받을 사용자 ID
        :param sender: 알림을 유발한 사용자 문서
        :param n_type: 알림 유형 (NotificationType Enum)
        :param data: 클라이언트가 이동할 대상 ID 등 추가 페이로드
        """
        if not recipient_id or recipient_id == sender.get('user_id'):
            return None  # 자기 자신에게는 알림을 생성하지 않음

        recipient = self.users_ref.find_one({"user_id": recipient_id}, _RECIPIENT_PROJECTION)
        if not recipient:
            logging.warning(f"알림 생성 실패: 수신자를 찾을 수 없음 (ID: {recipient_id})")
            return None

        title, body = render_notification(recipient.get('language'), n_type.value, format_actor(sender))
        payload = {"type": n_type.value, "sender": sender.get('user_id'), **(data or {})}
        try:
            message_id = self._deliver(recipient, title, body, payload)
        except PushDeliveryError as e:
            logging.warning(f"{n_type.value} 알림 푸시 실패: {sender.get('user_id')} -> {recipient_id} ({e.message})")
            return None

        logging.info(f"{n_type.value} 알림 생성 완료: {sender.get('user_id')} -> {recipient_id}")
        return message_id

    def get_notifications(self, user_id: str) -> List[Dict[str, Any]]:
        """사용자의 알림을 최신순으로 반환합니다."""
        user = self.users_ref.find_one({"user_id": user_id}, {"_id": 0, "notifications": 1})
        if not user:
            raise NotFoundError(f"사용자를 찾을 수 없습니다: {user_id}", "USER_NOT_FOUND")
        notifications = list(user.get('notifications') or [])
        notifications.sort(key=lambda n: DateTimeUtils.to_utc(n.get('created_at')), reverse=True)
        return notifications
