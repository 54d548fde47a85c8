"""Image intake filter.

Files dropped on (or picked in) the UI pass through this module before a
flow request is built.  Only JPEG and PNG images are accepted; everything
else is rejected with :class:`RequestValidationError` and no request is made.

Two checks are applied:

1. **Extension / MIME type** — the filename must end in ``.jpeg``, ``.jpg``
   or ``.png`` (and a declared MIME type, when present, must be
   ``image/jpeg`` or ``image/png``).
2. **Content** — the bytes must decode as a JPEG or PNG image with Pillow.
   A text file renamed to ``.png`` is still rejected.

Accepted files are returned as base64 data URLs, which both the browser
preview and the prompt flow understand.
"""

from __future__ import annotations

import base64
import io
import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .errors import RequestValidationError

logger = logging.getLogger(__name__)

ACCEPTED_EXTENSIONS: tuple[str, ...] = (".jpeg", ".png", ".jpg")
ACCEPTED_MIME_TYPES: dict[str, str] = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
}
_FORMAT_TO_MIME = {fmt: mime for mime, fmt in ACCEPTED_MIME_TYPES.items()}


def is_accepted_image(filename: str, mime_type: str | None = None) -> bool:
    """Return ``True`` if *filename* (and *mime_type*, if given) pass the filter.

    Args:
        filename: Original file name, only its extension is inspected.
        mime_type: Optional declared MIME type (e.g. from a multipart upload).
            Parameters such as ``; charset=...`` are ignored.
    """
    if Path(filename).suffix.lower() not in ACCEPTED_EXTENSIONS:
        return False
    if mime_type:
        base_type = mime_type.split(";", 1)[0].strip().lower()
        if base_type not in ACCEPTED_MIME_TYPES:
            return False
    return True


def detect_image_mime(data: bytes) -> str:
    """Identify the MIME type of image *data* by decoding it.

    Raises:
        RequestValidationError: If the bytes are not a JPEG or PNG image.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise RequestValidationError("File is not a readable image") from e

    mime_type = _FORMAT_TO_MIME.get(image_format or "")
    if mime_type is None:
        raise RequestValidationError(
            f"Unsupported image format: {image_format}. Use JPEG or PNG."
        )
    return mime_type


def encode_data_url(data: bytes, mime_type: str) -> str:
    """Encode raw bytes as a base64 ``data:`` URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def image_bytes_to_data_url(
    data: bytes,
    filename: str,
    *,
    mime_type: str | None = None,
    max_bytes: int | None = None,
) -> str:
    """Run the intake filter on in-memory bytes and return a data URL.

    Args:
        data: File content.
        filename: Original file name (for the extension check).
        mime_type: Declared MIME type, if the transport supplied one.
        max_bytes: Optional size limit.

    Raises:
        RequestValidationError: If the file is rejected for any reason.
    """
    if not is_accepted_image(filename, mime_type):
        raise RequestValidationError(
            f"Unsupported file '{Path(filename).name}'. "
            f"Accepted types: {', '.join(ACCEPTED_EXTENSIONS)}"
        )
    if not data:
        raise RequestValidationError("File is empty")
    if max_bytes is not None and len(data) > max_bytes:
        raise RequestValidationError(
            f"File is too large ({len(data)} bytes). Maximum is {max_bytes} bytes."
        )

    detected = detect_image_mime(data)
    logger.debug(f"Accepted {filename} as {detected} ({len(data)} bytes)")
    return encode_data_url(data, detected)


def read_image_as_data_url(path: str | Path, max_bytes: int | None = None) -> str:
    """Read an image file from disk through the intake filter.

    Args:
        path: File to read.
        max_bytes: Optional size limit.

    Returns:
        A ``data:image/...;base64,...`` URL of the file content.

    Raises:
        RequestValidationError: If the file is missing or rejected.
    """
    path = Path(path)
    if not is_accepted_image(path.name):
        raise RequestValidationError(
            f"Unsupported file '{path.name}'. Accepted types: {', '.join(ACCEPTED_EXTENSIONS)}"
        )
    if not path.is_file():
        raise RequestValidationError(f"File not found: {path.name}")

    return image_bytes_to_data_url(path.read_bytes(), path.name, max_bytes=max_bytes)
