"""Validation helpers for images sent over the chat socket."""

import base64
import binascii
import re

ALLOWED_IMAGE_TYPES = {
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/gif",
    "image/webp",
    "image/bmp",
    "image/svg+xml",
    "image/heic",
    "image/avif",
}

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?P<params>(?:;[\w.+-]+=[\w.+-]+)*);base64,(?P<data>.*)$", re.S)


def decoded_size(b64_text: str) -> int:
    """Return the byte length a base64 string decodes to, without decoding it."""
    stripped = b64_text.rstrip("=")
    return (len(stripped) * 3) // 4


def validate_image_data_uri(value: str, max_bytes: int) -> str:
    """Return ``value`` unchanged if it is a base64 image data URI within ``max_bytes``.

    Clients read the picked file with ``FileReader.readAsDataURL`` so the
    payload looks like ``data:image/png;base64,iVBORw0...``. The image itself
    is relayed as-is; only the envelope and size are checked here.

    Raises:
        ValueError: if the payload is not a supported image data URI or is too large.
    """
    if not value:
        raise ValueError("Image data is required.")
    match = _DATA_URI.match(value)
    if match is None:
        raise ValueError("Image must be a base64 data URI.")
    mime = match.group("mime").lower()
    if mime not in ALLOWED_IMAGE_TYPES:
        raise ValueError(f"Unsupported image content type: {mime}")
    data = match.group("data")
    if not data:
        raise ValueError("Image data is empty.")
    if decoded_size(data) > max_bytes:
        raise ValueError(f"Image exceeds {max_bytes} bytes.")
    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("Image data is not valid base64.") from exc
    return value
