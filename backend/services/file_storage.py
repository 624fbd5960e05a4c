"""Local directory store for uploaded document bytes."""

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from backend.core import config
from backend.core.errors import ValidationFailedError
from backend.models.enums import DocumentType

logger = logging.getLogger(__name__)

ALLOWED_TYPES = {
    'application/pdf': '.pdf',
    'application/msword': '.doc',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document': '.docx',
    'text/plain': '.txt',
    'image/jpeg': '.jpg',
    'image/png': '.png',
    'image/gif': '.gif',
}

DOCUMENT_TYPE_KEYWORDS = [
    (DocumentType.TRANSCRIPT, ('transcript',)),
    (DocumentType.ESSAY, ('essay',)),
    (DocumentType.PERSONAL_STATEMENT, ('personal', 'statement')),
    (DocumentType.RECOMMENDATION_LETTER, ('recommendation',)),
    (DocumentType.TEST_SCORES, ('test', 'score')),
    (DocumentType.RESUME, ('resume',)),
    (DocumentType.PORTFOLIO, ('portfolio',)),
]


@dataclass(frozen=True)
class StoredFile:
    filename: str
    original_name: str
    mime_type: str
    size: int
    path: str


def infer_document_type(original_name: str) -> DocumentType:
    name = (original_name or '').lower()
    for document_type, keywords in DOCUMENT_TYPE_KEYWORDS:
        if all(keyword in name for keyword in keywords):
            return document_type
    if 'financial' in name or 'aid' in name:
        return DocumentType.FINANCIAL_AID
    return DocumentType.OTHER


def validate_upload(mime_type: str | None, size: int, original_name: str) -> str:
    """Return the storage extension for an acceptable upload."""
    extension = ALLOWED_TYPES.get((mime_type or '').lower())
    if extension is None:
        raise ValidationFailedError(f'File type {mime_type} is not allowed.')
    if size > config.MAX_UPLOAD_BYTES:
        limit_mb = config.MAX_UPLOAD_BYTES // (1024 * 1024)
        raise ValidationFailedError(f'File {original_name} is too large. Maximum size is {limit_mb}MB.')
    if size == 0:
        raise ValidationFailedError(f'File {original_name} is empty.')
    return extension


class LocalFileStorage:
    def __init__(self, base_dir: str | Path | None = None):
        self.base_dir = Path(base_dir or config.UPLOAD_DIR)

    def _resolve(self, path: str) -> Path | None:
        base = self.base_dir.resolve()
        candidate = (base / path).resolve()
        if base not in candidate.parents:
            return None
        return candidate

    def save(self, data: bytes, student_id: int, mime_type: str, original_name: str) -> StoredFile:
        extension = validate_upload(mime_type, len(data), original_name)

        student_dir = self.base_dir / str(student_id)
        student_dir.mkdir(parents=True, exist_ok=True)

        filename = f'{int(time.time() * 1000)}-{secrets.token_hex(6)}{extension}'
        (student_dir / filename).write_bytes(data)
        logger.info('Stored %s (%d bytes) for student %s', filename, len(data), student_id)

        return StoredFile(
            filename=filename,
            original_name=original_name,
            mime_type=mime_type.lower(),
            size=len(data),
            path=f'{student_id}/{filename}',
        )

    def read(self, path: str) -> bytes | None:
        resolved = self._resolve(path)
        if resolved is None or not resolved.is_file():
            return None
        return resolved.read_bytes()

    def delete(self, path: str) -> bool:
        """Best-effort removal; failures are logged, never raised."""
        resolved = self._resolve(path)
        if resolved is None:
            logger.warning('Refusing to delete path outside upload dir: %s', path)
            return False
        try:
            resolved.unlink()
        except OSError:
            logger.exception('Failed to delete stored file %s', path)
            return False
        return True


def get_file_storage() -> LocalFileStorage:
    return LocalFileStorage()
