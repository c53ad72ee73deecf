import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from coursehub.core.config import ALLOWED_MIME_TYPES, MAX_UPLOAD_BYTES, settings
from coursehub.core.errors import ValidationError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
CHUNK_SIZE = 1024 * 1024


@dataclass
class AttachmentUpload:
    file_name: str
    mime_type: str
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)


def read_limited(stream: BinaryIO) -> bytes:
    """
    Read an upload in chunks, stopping one byte past MAX_UPLOAD_BYTES.

    That is enough for `validate_attachment` to reject it without pulling
    an oversized file into memory.
    """
    limit = MAX_UPLOAD_BYTES + 1
    chunks = []
    total = 0
    while total < limit:
        chunk = stream.read(min(CHUNK_SIZE, limit - total))
        if not chunk:
            break
        chunks.append(chunk)
        total += len(chunk)
    return b"".join(chunks)


def validate_attachment(upload: AttachmentUpload) -> None:
    if upload.size_bytes > MAX_UPLOAD_BYTES:
        limit_mb = MAX_UPLOAD_BYTES // (1024 * 1024)
        raise ValidationError(f"File size must be less than {limit_mb}MB")

    if upload.mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationError("Unsupported file type. Please select a document, image, or zip file.")


def save_attachment(upload: AttachmentUpload) -> dict:
    """
    Write the upload under UPLOAD_DIR and return the attachment fields.

    Stored names are prefixed with a millisecond timestamp so two students
    uploading ``essay.pdf`` never collide.
    """
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    stored_name = f"{int(time.time() * 1000)}_{_UNSAFE_CHARS.sub('_', upload.file_name)}"
    (upload_dir / stored_name).write_bytes(upload.data)

    logger.info("stored attachment %s (%d bytes)", stored_name, upload.size_bytes)

    return {
        "file_name": upload.file_name,
        "file_url": f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{stored_name}",
        "size_bytes": upload.size_bytes,
        "mime_type": upload.mime_type,
    }


def discard_attachment(attachment: dict) -> None:
    """Remove a stored file whose submission never made it to the database."""
    stored_name = attachment["file_url"].rsplit("/", 1)[-1]
    (Path(settings.UPLOAD_DIR) / stored_name).unlink(missing_ok=True)
    logger.info("discarded attachment %s", stored_name)
