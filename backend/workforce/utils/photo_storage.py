"""출퇴근 인증 사진 저장 헬퍼입니다. data URI(base64)를 디코딩해 업로드 디렉터리에 저장합니다."""

import base64
import binascii
import logging
import os
import re
import uuid
from datetime import date

from workforce.config import settings
from workforce.exceptions import InvalidPhoto

logger = logging.getLogger(__name__)

DATA_URI_RE = re.compile(r"^data:image/(?P<subtype>[a-zA-Z0-9.+-]+);base64,(?P<payload>.+)$", re.DOTALL)
ALLOWED_IMAGE_SUBTYPES = {"jpeg": "jpg", "jpg": "jpg", "png": "png", "webp": "webp"}


def decode_photo(data_uri: str) -> tuple[bytes, str]:
    match = DATA_URI_RE.match((data_uri or "").strip())
    if not match:
        raise InvalidPhoto()
    ext = ALLOWED_IMAGE_SUBTYPES.get(match.group("subtype").lower())
    if ext is None:
        raise InvalidPhoto("jpg, png, webp 이미지만 허용됩니다.")
    try:
        content = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError):
        raise InvalidPhoto()
    if not content:
        raise InvalidPhoto()
    if len(content) > settings.MAX_PHOTO_SIZE:
        raise InvalidPhoto("사진 용량이 허용 한도를 초과했습니다.")
    return content, ext


def save_attendance_photo(data_uri: str, employee_id: int, attendance_date: date, kind: str) -> str:
    content, ext = decode_photo(data_uri)

    subfolder = f"attendance/{employee_id}"
    folder = os.path.join(settings.UPLOAD_DIR, subfolder)
    os.makedirs(folder, exist_ok=True)

    filename = f"{attendance_date.isoformat()}-{kind}-{uuid.uuid4().hex}.{ext}"
    with open(os.path.join(folder, filename), "wb") as f:
        f.write(content)

    return f"/uploads/{subfolder}/{filename}"


def delete_attendance_photo(photo_ref: str | None) -> None:
    if not photo_ref or not photo_ref.startswith("/uploads/"):
        return
    rel_path = photo_ref[len("/uploads/"):]
    path = os.path.join(settings.UPLOAD_DIR, rel_path)
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("failed to remove orphan attendance photo %s: %s", path, exc)
