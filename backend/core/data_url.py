"""Helpers for base64 image data URLs (``data:<mime>;base64,<payload>``)."""
import base64
import binascii
import math
import re
from typing import Optional, Tuple

from core.errors import InvalidImage, UnsupportedType

DATA_URL_PATTERN = re.compile(r"data:(.+?);base64,(.+)")

# The upstream API infers the content type from the upload's extension
EXTENSION_MAP = {
    'image/png': 'png',
    'image/jpeg': 'jpg',
    'image/webp': 'webp'
}


def estimate_decoded_size(data_url: str) -> int:
    """Approximate decoded byte size from the encoded length (4 chars -> 3 bytes)."""
    return math.floor(len(data_url) * 0.75)


def split_data_url(data_url: Optional[str]) -> Tuple[str, str]:
    """Split a data URL into (mime_type, base64_payload) without decoding."""
    match = DATA_URL_PATTERN.fullmatch(data_url or "")
    if not match:
        raise InvalidImage("Invalid image data URL.")
    return match.group(1), match.group(2)


def extension_for(mime_type: str) -> str:
    extension = EXTENSION_MAP.get(mime_type)
    if not extension:
        raise UnsupportedType("Unsupported image type. Use PNG/JPEG/WEBP.")
    return extension


def decode_data_url(data_url: Optional[str]) -> Tuple[bytes, str, str]:
    """
    Decode an image data URL.

    Returns:
        (image_bytes, mime_type, filename) where filename is ``upload.<ext>``

    Raises:
        InvalidImage: the string is not a base64 data URL
        UnsupportedType: the MIME type is not PNG, JPEG or WEBP
    """
    mime_type, payload = split_data_url(data_url)
    extension = extension_for(mime_type)

    try:
        image_bytes = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidImage("Invalid image data URL.")

    return image_bytes, mime_type, f"upload.{extension}"


def encode_data_url(image_bytes: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"
