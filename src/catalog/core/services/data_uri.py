"""Encode uploaded image bytes as data URIs."""

from __future__ import annotations

import base64
import mimetypes
from typing import TYPE_CHECKING

from loguru import logger

from src.catalog.core.errors import ImageReadError

if TYPE_CHECKING:
    from fastapi import UploadFile

# Leading bytes of the image formats browsers render inline
_SIGNATURES: tuple[tuple[bytes, str], ...] = (
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"BM", "image/bmp"),
)


def sniff_image_type(data: bytes) -> str | None:
    """Guess an image MIME type from the leading bytes of ``data``."""
    for signature, mime in _SIGNATURES:
        if data.startswith(signature):
            return mime
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return None


def _resolve_mime(data: bytes, content_type: str | None, filename: str | None) -> str | None:
    if content_type and content_type != "application/octet-stream":
        return content_type.split(";", 1)[0].strip().lower()
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    return sniff_image_type(data)


def encode_data_uri(
    data: bytes, content_type: str | None = None, filename: str | None = None
) -> str:
    """Encode image bytes as ``data:<mime>;base64,<payload>``.

    The MIME type comes from ``content_type`` when given, else from the
    filename extension, else from the file signature.

    Raises:
        ImageReadError: If ``data`` is empty or is not an image
    """
    if not data:
        raise ImageReadError("Uploaded file is empty")

    mime = _resolve_mime(data, content_type, filename)
    if mime is None or not mime.startswith("image/"):
        raise ImageReadError(f"Uploaded file is not an image ({mime or 'unknown type'})")

    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{payload}"


async def read_upload(upload: UploadFile) -> str:
    """Read an uploaded file and encode it as a data URI.

    Raises:
        ImageReadError: If the upload cannot be read or is not an image
    """
    try:
        data = await upload.read()
    except Exception as e:
        logger.warning("Failed to read upload {}: {}", upload.filename, e)
        raise ImageReadError(f"Could not read uploaded file: {e}") from e
    return encode_data_uri(data, upload.content_type, upload.filename)
