from pathlib import Path
from typing import Optional
import logging
import secrets
import string
import time

from fastapi import UploadFile

from noitro.core.config import Settings
from noitro.core.exceptions import InternalError, NotFoundError, ValidationError
from noitro.core.storage import ObjectStorage

logger = logging.getLogger(__name__)

ALLOWED_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"]
CLOUD_PREFIX = "blog_uploads"
_ALPHABET = string.ascii_lowercase + string.digits

class MediaService:
    def __init__(self, settings: Settings, object_storage: ObjectStorage):
        self.upload_dir = Path(settings.UPLOAD_DIRECTORY)
        self.max_local_size = settings.MAX_UPLOAD_SIZE
        self.max_cloud_size = settings.MAX_CLOUD_UPLOAD_SIZE
        self.object_storage = object_storage

    @staticmethod
    def _validate_type(file: UploadFile) -> None:
        if file.content_type not in ALLOWED_TYPES:
            raise ValidationError("Định dạng file không được hỗ trợ. Chỉ chấp nhận: JPG, PNG, GIF, WebP")

    @staticmethod
    async def _read_limited(file: UploadFile, max_size: int) -> bytes:
        content = await file.read(max_size + 1)
        if len(content) > max_size:
            raise ValidationError(f"File quá lớn. Kích thước tối đa là {max_size // (1024 * 1024)}MB")
        return content

    @staticmethod
    def _unique_filename(original: Optional[str]) -> str:
        suffix = Path(original or "").suffix.lower()
        random_str = "".join(secrets.choice(_ALPHABET) for _ in range(13))
        return f"{int(time.time() * 1000)}_{random_str}{suffix}"

    async def upload_local(self, file: Optional[UploadFile]) -> dict:
        """Save an image under the upload directory, served from /uploads"""
        if file is None:
            raise ValidationError("Không có file được tải lên")
        self._validate_type(file)
        content = await self._read_limited(file, self.max_local_size)

        filename = self._unique_filename(file.filename)
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        local_path = self.upload_dir / filename
        try:
            local_path.write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to save file locally: {e}")
            raise InternalError("Lỗi khi upload hình ảnh")

        logger.info(f"Saved upload at {local_path}")
        return {
            "filename": filename,
            "url": f"/uploads/{filename}",
            "size": len(content),
            "type": file.content_type,
        }

    async def upload_cloud(self, file: Optional[UploadFile]) -> dict:
        """Push an image to object storage"""
        if file is None:
            raise ValidationError("Không có file được tải lên")
        self._validate_type(file)
        content = await self._read_limited(file, self.max_cloud_size)

        stored = self.object_storage.upload_bytes(content, file.filename, file.content_type, CLOUD_PREFIX)
        return {
            "url": stored["url"],
            "public_id": stored["key"],
            "size": len(content),
            "format": file.content_type.split("/")[-1],
        }

    def _local_path(self, filename: str) -> Path:
        name = Path(filename).name
        if not name or name != filename or name in (".", ".."):
            raise ValidationError("Tên file không hợp lệ")
        return self.upload_dir / name

    def delete_local(self, filename: Optional[str]) -> None:
        if not filename:
            raise ValidationError("Tên file không được cung cấp")
        path = self._local_path(filename)
        if not path.is_file():
            raise NotFoundError("File không tồn tại")
        path.unlink()
        logger.info(f"Deleted upload {path}")

    def delete_cloud(self, public_id: str) -> None:
        if not public_id.startswith(f"{CLOUD_PREFIX}/") or ".." in public_id:
            raise ValidationError("publicId không hợp lệ")
        if not self.object_storage.delete_file(public_id):
            raise InternalError("Lỗi khi xóa hình ảnh")
