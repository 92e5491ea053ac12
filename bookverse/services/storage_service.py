import logging
import os
import uuid
from typing import Optional
from urllib.parse import unquote, urlparse

from bookverse.core.config import settings
from bookverse.core.exceptions import BadRequestError

logger = logging.getLogger(__name__)


class StorageService:
    """Stores book cover images on local disk, served back under /uploads."""

    def __init__(self):
        self.folder = settings.UPLOAD_FOLDER
        self.url_path = settings.UPLOAD_URL_PATH.rstrip("/")
        self.max_size = settings.MAX_UPLOAD_SIZE
        self.allowed_extensions = [ext.lower() for ext in settings.ALLOWED_IMAGE_EXTENSIONS]

    def ensure_folder(self) -> None:
        os.makedirs(self.folder, exist_ok=True)

    def validate_image(
        self, file_content: bytes, file_name: str, content_type: Optional[str]
    ) -> str:
        """Check type and size; return the lower-cased extension."""
        extension = os.path.splitext(file_name or "")[1].lower().lstrip(".")
        subtype = (content_type or "").lower().split("/")[-1]
        if extension not in self.allowed_extensions or subtype not in self.allowed_extensions:
            raise BadRequestError(
                f"Only image files are allowed ({', '.join(self.allowed_extensions)})"
            )
        if len(file_content) > self.max_size:
            raise BadRequestError(
                f"File too large. Maximum size is {self.max_size // (1024 * 1024)}MB"
            )
        return extension

    def save_cover(
        self,
        file_content: bytes,
        file_name: str,
        content_type: Optional[str],
        base_url: str,
    ) -> str:
        """Validate and write a cover image, returning its public URL."""
        extension = self.validate_image(file_content, file_name, content_type)

        unique_filename = f"coverImage-{uuid.uuid4().hex}.{extension}"
        self.ensure_folder()
        with open(os.path.join(self.folder, unique_filename), "wb") as f:
            f.write(file_content)

        logger.info(f"Saved cover image: {unique_filename}")
        return f"{base_url.rstrip('/')}{self.url_path}/{unique_filename}"

    def delete_file(self, file_url: Optional[str]) -> bool:
        """Remove a previously saved cover. Placeholders and foreign URLs are left alone."""
        file_name = self._extract_file_name(file_url)
        if not file_name:
            return False

        path = os.path.join(self.folder, file_name)
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.info(f"File not found in storage (already deleted): {file_name}")
            return True
        except OSError as e:
            logger.error(f"Error deleting file {file_name}: {str(e)}")
            return False

        logger.info(f"File successfully deleted: {file_name}")
        return True

    def _extract_file_name(self, file_url: Optional[str]) -> Optional[str]:
        if not file_url:
            return None

        clean_path = unquote(urlparse(file_url).path)
        prefix = f"{self.url_path}/"
        if prefix not in clean_path:
            return None

        # basename keeps deletes inside the upload folder
        file_name = os.path.basename(clean_path.split(prefix, 1)[1])
        return file_name or None


# Singleton instance
storage_service = StorageService()
