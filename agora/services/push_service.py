# agora/services/push_service.py
import json
import logging
import requests
from flask import Flask
from google.oauth2 import service_account
from google.auth.transport.requests import AuthorizedSession

from agora.core.exceptions import PushDeliveryError

FCM_SCOPES = ["https://www.googleapis.com/auth/firebase.messaging"]
FCM_SEND_URL = "https://fcm.googleapis.com/v1/projects/{project_id}/messages:send"


class PushService:
    """
    Firebase Cloud Messaging(HTTP v1)으로 푸시 알림을 발송하는 서비스 클래스입니다.
    init_app에서 인증 세션을 만들고, 앱 종료 시 close로 정리합니다.
    """

    def __init__(self):
        self.session = None
        self.project_id = None
        self.timeout = 10

    def init_app(self, app: Flask):
        """
        서비스 계정 키 파일로 인증된 세션을 생성합니다.
        이 메서드는 create_app에서 단 한 번만 호출됩니다.
        """
        cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
        if not cred_path:
            raise ValueError("FIREBASE_CREDENTIALS_PATH 설정이 .env 또는 설정 파일에 필요합니다.")

        credentials = service_account.Credentials.from_service_account_file(cred_path, scopes=FCM_SCOPES)
        self.project_id = app.config.get('FIREBASE_PROJECT_ID') or credentials.project_id
        if not self.project_id:
            raise ValueError("푸시 발송에 사용할 FIREBASE_PROJECT_ID를 확인할 수 없습니다.")

        self.session = AuthorizedSession(credentials)
        self.timeout = app.config.get('DB_QUERY_TIMEOUT', 10)
        logging.info(f"PushService: FCM 세션이 초기화되었습니다. (project: {self.project_id})")

    def build_message(self, token: str, title: str, body: str, data: dict = None) -> dict:
        # FCM data 페이로드는 문자열 값만 허용
        payload = {k: v if isinstance(v, str) else json.dumps(v, ensure_ascii=False) for k, v in (data or {}).items()}
        payload.setdefault("click_action", "FLUTTER_NOTIFICATION_CLICK")
        return {
            "message": {
                "token": token,
                "notification": {"title": title, "body": body},
                "data": payload,
                "android": {
                    "priority": "high",
                    "notification": {"sound": "default", "click_action": "FLUTTER_NOTIFICATION_CLICK"},
                },
                "apns": {"payload": {"aps": {"sound": "default"}}},
            }
        }

    def send(self, token: str, title: str, body: str, data: dict = None) -> str:
        """
        단일 기기로 푸시를 발송하고 FCM이 부여한 메시지 이름을 반환합니다.
        제공자가 거부하거나 통신에 실패하면 PushDeliveryError를 발생시킵니다.
        """
        if self.session is None:
            raise RuntimeError("PushService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        try:
            response = self.session.post(
                FCM_SEND_URL.format(project_id=self.project_id),
                json=self.build_message(token, title, body, data),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logging.error(f"FCM 발송 실패: {e}", exc_info=True)
            raise PushDeliveryError(f"푸시 알림 발송에 실패했습니다: {e}")

        message_id = response.json().get("name", "OK")
        logging.info(f"FCM 발송 완료: {message_id}")
        return message_id

    def close(self):
        if self.session is not None:
            self.session.close()
            self.session = None
            logging.info("PushService: FCM 세션을 종료했습니다.")
