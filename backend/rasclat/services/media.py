"""Staging and normalisation of uploaded media.

Uploaded parts are first written to a temporary file. Images are then
decoded, shrunk to fit ``IMAGE_MAX_SIZE`` and re-encoded as JPEG, and the
result overwrites the staged file, so the upload stage always sends a file
from disk whether or not it was transformed. Audio is never transformed.
"""
from __future__ import annotations

import logging
import os
import uuid
from dataclasses import dataclass
from io import BytesIO

import aiofiles
from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from ..core.config import get_settings
from ..core.errors import DecodeError

logger = logging.getLogger(__name__)

AUDIO = 'audio'
IMAGES = 'images'

_CONTENT_TYPES = {
    '.mp3': 'audio/mpeg',
    '.wav': 'audio/wav',
    '.ogg': 'audio/ogg',
    '.flac': 'audio/flac',
    '.m4a': 'audio/mp4',
    '.aac': 'audio/aac',
}


@dataclass
class StagedFile:
    field: str
    path: str
    filename: str
    content_type: str | None = None

    @property
    def category(self) -> str:
        return AUDIO if self.field == 'audio' else IMAGES

    def remove(self) -> None:
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass


async def stage_upload(field: str, upload: UploadFile, tmp_dir: str | None = None) -> StagedFile:
    """Copy an uploaded part to a temporary file and describe it."""
    tmp_dir = tmp_dir or get_settings().upload_tmp_dir
    os.makedirs(tmp_dir, exist_ok=True)
    path = os.path.join(tmp_dir, uuid.uuid4().hex)
    async with aiofiles.open(path, 'wb') as f:
        while True:
            chunk = await upload.read(1024 * 1024)
            if not chunk:
                break
            await f.write(chunk)
    filename = upload.filename or f'{field}'
    content_type = upload.content_type
    if field == 'audio':
        ext = os.path.splitext(filename)[1].lower()
        content_type = _CONTENT_TYPES.get(ext, content_type or 'application/octet-stream')
    return StagedFile(field=field, path=path, filename=filename, content_type=content_type)


def resize_image(data: bytes, max_size: int | None = None, quality: int | None = None) -> bytes:
    """Return ``data`` re-encoded as JPEG with neither side above ``max_size``."""
    settings = get_settings()
    max_size = max_size or settings.image_max_size
    quality = quality or settings.image_quality
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            img.thumbnail((max_size, max_size), Image.LANCZOS)
            if img.mode != 'RGB':
                img = img.convert('RGB')
            out = BytesIO()
            img.save(out, format='JPEG', quality=quality)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise DecodeError('Image resizing went wrong. Please view log files!', exc) from exc
    return out.getvalue()


def transform_in_place(staged: StagedFile) -> StagedFile:
    """Resize a staged image and overwrite its temporary file; audio passes through."""
    if staged.category != IMAGES:
        return staged
    with open(staged.path, 'rb') as fh:
        original = fh.read()
    resized = resize_image(original)
    with open(staged.path, 'wb') as fh:
        fh.write(resized)
    logger.info("resized %s: %d -> %d bytes", staged.filename, len(original), len(resized))
    base = os.path.splitext(staged.filename)[0] or 'image'
    staged.filename = f'{base}.jpg'
    staged.content_type = 'image/jpeg'
    return staged
