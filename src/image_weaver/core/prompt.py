"""Variation prompt template for the Image Weaver prompt flow.

The flow sends exactly one natural-language instruction to the model
provider.  The instruction embeds the requested number of variations and a
reference to the source image, and asks for a JSON array of image URLs.

Image References
----------------
Two kinds of image reference are supported:

- **Remote URLs** (``http://`` / ``https://``) are embedded in the prompt
  verbatim so the model can address the image directly.
- **Data URLs** (``data:image/png;base64,...``) are produced by the UI when a
  user drops a local file.  Embedding megabytes of base64 text in the prompt
  would be wasteful, so the prompt carries a short description instead and the
  decoded bytes travel alongside the prompt as an inline image part (see
  :mod:`image_weaver.core.providers`).

Usage
-----
::

    request = VariationRequest(image_url="https://example.com/cat.png")
    text = render_variation_prompt(request)
"""

from __future__ import annotations

import base64
import binascii
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from image_weaver.core.flow import VariationRequest

PROMPT_NAME = "generateImageVariationsPrompt"

_VARIATION_TEMPLATE = """You are an AI that generates creative variations of a given image.

Given the URL of an image, generate creative and visually appealing variations of the image.
Return a JSON array of image URLs.

Number of variations to generate: {number_of_variations}
Image URL: {image_reference}

Ensure that the generated variations are creative and different from the original image, \
while still maintaining a visual relationship."""

# data:[<mime>][;base64],<payload>
_DATA_URL_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(?:;[\w.+-]+=[^;,]*)*)"
    r"(?P<base64>;base64)?,(?P<payload>.*)$",
    re.DOTALL,
)


def is_data_url(url: str) -> bool:
    """Return ``True`` if *url* uses the ``data:`` scheme."""
    return url[:5].lower() == "data:"


def parse_data_url(url: str) -> tuple[str, bytes] | None:
    """Decode a base64 ``data:`` URL into its MIME type and raw bytes.

    Args:
        url: Candidate data URL.

    Returns:
        ``(mime_type, data)`` for a well-formed base64 data URL, or ``None``
        if *url* is not a data URL or its payload cannot be decoded.  Data
        URLs without an explicit MIME type default to
        ``application/octet-stream``.
    """
    if not is_data_url(url):
        return None

    match = _DATA_URL_RE.match(url)
    if not match or not match.group("base64"):
        return None

    try:
        data = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError):
        return None

    mime_type = (match.group("mime") or "application/octet-stream").lower()
    return mime_type, data


def describe_image_reference(image_url: str) -> str:
    """Return the text used for the image inside the prompt.

    Remote URLs are returned unchanged.  Decodable data URLs are summarised
    as ``attached inline image (<mime>, <n> bytes)``.  Anything else is
    returned unchanged so the model still sees what the caller supplied.
    """
    inline = parse_data_url(image_url)
    if inline is None:
        return image_url
    mime_type, data = inline
    return f"attached inline image ({mime_type}, {len(data)} bytes)"


def render_variation_prompt(request: VariationRequest) -> str:
    """Render the variation instruction for a validated request.

    Args:
        request: The validated flow input.

    Returns:
        The complete prompt text sent to the model provider.
    """
    return _VARIATION_TEMPLATE.format(
        number_of_variations=request.number_of_variations,
        image_reference=describe_image_reference(request.image_url),
    )
