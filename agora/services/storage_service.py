# agora/services/storage_service.py
import logging
from flask import Flask
from google.cloud import storage


class StorageService:
    """
    Cloud Storage 버킷에 이미지를 올리고 공개 URL을 돌려주는 서비스 클래스입니다.
    """

    def __init__(self):
        """
        클래스 인스턴스 생성 시 버킷을 None으로 초기화합니다.
        실제 버킷 객체는 init_app 메서드를 통해 주입됩니다.
        """
        self.bucket = None

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 Storage 버킷을 설정합니다.

        :param app: Flask 애플리케이션 객체
        """
        bucket_name = app.config.get('FIREBASE_STORAGE_BUCKET')
        if not bucket_name:
            raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")

        cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
        client = storage.Client.from_service_account_json(cred_path) if cred_path else storage.Client()
        self.bucket = client.bucket(bucket_name)
        logging.info("StorageService: Cloud Storage 서비스가 성공적으로 초기화되었습니다.")

    def upload_image(self, data: bytes, object_name: str, content_type: str = "image/jpeg") -> str:
        """
        바이트 데이터를 업로드하고 공개(public)로 전환한 뒤 URL을 반환합니다.

        :param data: 업로드할 파일 내용
        :param object_name: 버킷 안에서 사용할 객체 이름
        :return: 공개적으로 접근 가능한 URL
        """
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        blob = self.bucket.blob(object_name)
        blob.upload_from_string(data, content_type=content_type)
        blob.make_public()
        logging.info(f"이미지 업로드 완료: {object_name}")
        return blob.public_url
