"""
Profile use cases: account summary, display name and avatar image.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import io
import logging
import secrets

from PIL import Image, ImageOps, UnidentifiedImageError

from notes_api.core.errors import NotFound, StorageUnavailable, ValidationError
from notes_api.domain.entities import Account
from notes_api.repositories.document_repository import DocumentRepository

logger = logging.getLogger(__name__)

UPLOADS_URL_PREFIX = "/uploads/"
AVATAR_MAX_SIZE = (512, 512)


@dataclass
class ProfileSummary:
    account: Account
    total_notes: int


@dataclass
class ProfileService:
    repository: DocumentRepository
    uploads_dir: Path
    max_upload_bytes: int = 5 * 1024 * 1024

    def _require_account(self, account_id: int) -> Account:
        account = self.repository.find_account_by_id(account_id)
        if not account:
            raise NotFound("Account not found")
        return account

    def get_profile(self, account_id: int) -> ProfileSummary:
        account = self._require_account(account_id)
        return ProfileSummary(account=account, total_notes=self.repository.count_notes_for_account(account_id))

    def update_name(self, account_id: int, name: str | None) -> Account:
        name_value = (name or "").strip()
        if not name_value:
            raise ValidationError("Name is required")
        account = self.repository.update_account_name(account_id, name_value)
        if not account:
            raise NotFound("Account not found")
        return account

    # -------------------------------------- avatar --------------------------------------
    def _normalize_image(self, data: bytes) -> bytes:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise ValidationError("Please upload a valid image file") from exc
        image = ImageOps.exif_transpose(image)
        image = image.convert("RGB")
        image.thumbnail(AVATAR_MAX_SIZE, Image.LANCZOS)
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG", quality=85, optimize=True)
        return buffer.getvalue()

    def _file_for(self, reference: str | None) -> Path | None:
        if not reference or not reference.startswith(UPLOADS_URL_PREFIX):
            return None
        name = Path(reference[len(UPLOADS_URL_PREFIX):]).name
        return self.uploads_dir / name if name else None

    def replace_avatar(self, account_id: int, data: bytes, content_type: str | None) -> Account:
        """Store a new avatar, record it on the account and drop the previous file."""
        ct = (content_type or "").lower()
        if not ct.startswith("image/"):
            raise ValidationError("Only image files are allowed")
        if not data:
            raise ValidationError("Image file is empty")
        if len(data) > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise ValidationError(f"Image must be {limit_mb} MB or smaller")
        self._require_account(account_id)
        payload = self._normalize_image(data)

        filename = f"avatar_{account_id}_{secrets.token_hex(8)}.jpg"
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        dest = self.uploads_dir / filename
        dest.write_bytes(payload)

        try:
            swapped = self.repository.swap_account_profile_image(account_id, UPLOADS_URL_PREFIX + filename)
        except StorageUnavailable:
            dest.unlink(missing_ok=True)
            raise
        if not swapped:
            dest.unlink(missing_ok=True)
            raise NotFound("Account not found")
        account, previous = swapped
        old_file = self._file_for(previous)
        if old_file and old_file != dest:
            old_file.unlink(missing_ok=True)
            logger.info("Replaced avatar for account %s", account_id)
        return account
