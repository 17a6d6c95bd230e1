# agora/api/uploads/routes.py

import logging
from flask import request, jsonify, Blueprint, current_app

from agora.core.exceptions import InvalidRequestError
from agora.core.security import jwt_required
from agora.utils.datetime_utils import now, to_iso
from agora.utils.image_utils import resize_to_jpeg, sanitize_upload_name

# 이미지 업로드 API. '/upload' 접두사로 등록됩니다.
uploads_bp = Blueprint('uploads', __name__)


@uploads_bp.route('/', methods=['POST'])
@jwt_required
def upload_image():
    """
    multipart 'image' 필드로 받은 이미지를 리사이즈해 스토리지에 올리고 공개 URL을 반환합니다.
    - UPLOAD_IMAGE_HEIGHT보다 크면 비율을 유지하며 줄입니다.
    - 저장 이름은 원본 파일명과 업로드 시각으로 만듭니다.
    """
    image_file = request.files.get('image')
    if image_file is None or not image_file.filename:
        return jsonify({"error_code": "IMAGE_REQUIRED", "message": "'image' 파일이 필요합니다."}), 400

    storage_service = current_app.services['storage']

    try:
        data = resize_to_jpeg(image_file.read(), current_app.config['UPLOAD_IMAGE_HEIGHT'])
        object_name = sanitize_upload_name(image_file.filename, to_iso(now()))
        public_url = storage_service.upload_image(data, object_name, content_type="image/jpeg")
        return jsonify({"path": public_url}), 200

    except InvalidRequestError as e:
        return jsonify(e.to_dict()), 400

    except Exception as e:
        # 스토리지 오류 등 예측하지 못한 서버 내부 오류
        logging.error(f"이미지 업로드 중 서버 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "UPLOAD_FAILED", "message": f"이미지 업로드 중 오류가 발생했습니다: {e}"}), 500
