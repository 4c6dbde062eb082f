# File: infrastructure/storage/file_store.py

from pathlib import Path
from typing import Optional
from uuid import uuid4

from common.config.settings import settings
from common.exceptions.base_exception import StorageUnavailableException, ValidationException
from common.logging.logger import log_info, log_error
from common.translations.messages import get_message
from common.utils.date_utils import utc_now


class LocalFileStore:
    """Stores report images on local disk and hands back an opaque reference."""

    def __init__(self, root: Optional[Path] = None, max_bytes: Optional[int] = None):
        self.root = Path(root or settings.UPLOAD_DIR)
        self.max_bytes = max_bytes or settings.MAX_UPLOAD_BYTES

    def validate(self, content: bytes, content_type: Optional[str]) -> None:
        if not content_type or not content_type.startswith("image/"):
            raise ValidationException(get_message("upload.invalid_type"), error_code="INVALID_FILE_TYPE")
        if len(content) > self.max_bytes:
            raise ValidationException(
                get_message("upload.too_large", variables={"max_mb": self.max_bytes // (1024 * 1024)}),
                error_code="FILE_TOO_LARGE",
            )

    def save(self, content: bytes, content_type: Optional[str], filename: Optional[str] = None) -> str:
        self.validate(content, content_type)

        extension = Path(filename).suffix.lower() if filename else ""
        reference = f"report-{int(utc_now().timestamp())}-{uuid4().hex}{extension}"
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            (self.root / reference).write_bytes(content)
        except OSError as e:
            log_error("Image write failed", extra={"reference": reference, "error": str(e)}, exc_info=True)
            raise StorageUnavailableException("Failed to store image")

        log_info("Image stored", extra={"reference": reference, "size": len(content), "content_type": content_type})
        return reference

    def path_for(self, reference: str) -> Path:
        return self.root / Path(reference).name

    def delete(self, reference: str) -> bool:
        """Remove a stored image; a missing file counts as already removed."""
        try:
            self.path_for(reference).unlink(missing_ok=True)
        except OSError as e:
            log_error("Image delete failed", extra={"reference": reference, "error": str(e)}, exc_info=True)
            return False
        log_info("Image removed", extra={"reference": reference})
        return True
