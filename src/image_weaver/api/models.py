"""Pydantic request and response models for the Image Weaver API.

These models define the JSON schema for the API endpoints.  FastAPI uses
them for automatic request validation, serialisation, and OpenAPI
documentation generation.

Models
------
VariationsRequest
    Payload for ``POST /api/variations``.  Same fields as the flow's
    :class:`~image_weaver.core.flow.VariationRequest`, validated at the HTTP
    boundary so out-of-range counts are rejected with 422 before the flow
    runs.
VariationsResponse
    Body returned by both variation endpoints.
ConfigResponse
    Body of ``GET /api/config``.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from image_weaver.core.config import DEFAULT_VARIATIONS, MAX_VARIATIONS, MIN_VARIATIONS


class VariationsRequest(BaseModel):
    """Request body for the ``POST /api/variations`` endpoint.

    Attributes:
        image_url: Remote (``https://``) or embedded (``data:``) image URL.
        number_of_variations: Variation count, 1–5.  Defaults to 3.
    """

    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("image_url", "imageUrl"),
        description="The URL of the image to generate variations from.",
    )
    number_of_variations: int = Field(
        default=DEFAULT_VARIATIONS,
        ge=MIN_VARIATIONS,
        le=MAX_VARIATIONS,
        validation_alias=AliasChoices("number_of_variations", "numberOfVariations"),
        description="The number of image variations to generate (1–5).",
    )


class VariationsResponse(BaseModel):
    """Response body for the variation endpoints.

    Attributes:
        success: Always ``True``; failures are reported as HTTP errors.
        count: Number of URLs in ``images``.
        images: Variation URLs in provider order.
    """

    success: bool = True
    count: int
    images: list[str]


class ConfigResponse(BaseModel):
    """Response body for ``GET /api/config``."""

    version: str
    provider: str
    min_variations: int = MIN_VARIATIONS
    max_variations: int = MAX_VARIATIONS
    default_variations: int = DEFAULT_VARIATIONS
    accepted_extensions: list[str]
    accepted_mime_types: list[str]
    max_upload_bytes: int
