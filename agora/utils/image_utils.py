# agora/utils/image_utils.py
"""
업로드 이미지 처리: 디코딩, 높이 기준 축소, JPEG 재인코딩, 저장 파일명 정리.
"""
import io
import logging
import re

from PIL import Image, UnidentifiedImageError

from agora.core.exceptions import InvalidRequestError

# 저장 파일명에서 제거할 문자: 공백, '+', '=', '.', ':', '-'
_UNSAFE_NAME_CHARS = re.compile(r'[\s+=.:-]')


def sanitize_upload_name(filename: str, timestamp: str) -> str:
    """원본 파일명과 업로드 시각으로 '<정리된 이름><시각>.jpeg' 형식의 객체 이름을 만듭니다."""
    return _UNSAFE_NAME_CHARS.sub('', f"{filename or ''}{timestamp}") + ".jpeg"


def resize_to_jpeg(data: bytes, target_height: int) -> bytes:
    """
    이미지 바이트를 디코딩해 target_height보다 크면 비율을 유지하며 축소하고
    JPEG 바이트로 반환합니다. 디코딩할 수 없는 데이터는 InvalidRequestError(400).
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        logging.warning(f"이미지 디코딩 실패: {e}")
        raise InvalidRequestError("이미지 파일을 읽을 수 없습니다.", "INVALID_IMAGE")

    if target_height and image.height > target_height:
        width = max(1, round(image.width * target_height / image.height))
        image = image.resize((width, target_height), Image.LANCZOS)

    # JPEG은 알파 채널을 지원하지 않음
    if image.mode != 'RGB':
        image = image.convert('RGB')

    buffer = io.BytesIO()
    image.save(buffer, format='JPEG', quality=90)
    return buffer.getvalue()
