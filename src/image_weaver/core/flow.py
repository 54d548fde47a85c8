"""The image-variation prompt flow.

A *flow* is a named, schema-validated request/response function wrapping a
single call to a generative model.  Image Weaver has exactly one:
``generateImageVariationsFlow``.

Pipeline
--------
1. Validate the input into a :class:`VariationRequest` (image reference and a
   variation count in [1, 5], default 3).  Invalid input raises
   :class:`RequestValidationError` before anything leaves the process.
2. Render the variation prompt (:mod:`image_weaver.core.prompt`).
3. Invoke the model provider exactly once.
4. Parse the reply as JSON and validate it against the output schema (an
   array of http(s) or base64 image data URLs).  Anything else raises
   :class:`OutputValidationError`.
5. Return a :class:`VariationResult` with at most ``number_of_variations``
   URLs.

There is no retry, backoff or caching: one invocation, one outbound call.

Usage
-----
::

    from image_weaver.core.flow import generate_image_variations

    urls = generate_image_variations("https://example.com/cat.png", 2)
    for url in urls:
        print(url)
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from typing import Annotated, Any

import pydantic
from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    RootModel,
    TypeAdapter,
)

from .config import DEFAULT_VARIATIONS, MAX_VARIATIONS, MIN_VARIATIONS, WeaverConfig, config
from .errors import FlowError, OutputValidationError, ProviderError, RequestValidationError
from .prompt import PROMPT_NAME, is_data_url, parse_data_url, render_variation_prompt
from .providers import ModelProviderBase, provider_registry

logger = logging.getLogger(__name__)

FLOW_NAME = "generateImageVariationsFlow"

_HTTP_URL_ADAPTER: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
    """Accept http(s) URLs with a host, or base64 ``data:image/...`` URLs.

    Every other scheme (``javascript:``, ``mailto:``, ``file:``, ...) is
    rejected. The original spelling is returned, since ``HttpUrl``
    normalises (e.g. appends a trailing slash to bare hosts).
    """
    if is_data_url(value):
        inline = parse_data_url(value)
        if inline is None or not inline[0].startswith("image/"):
            raise ValueError("data URLs must be base64-encoded images")
        return value

    try:
        _HTTP_URL_ADAPTER.validate_python(value)
    except pydantic.ValidationError as e:
        raise ValueError(f"not an http(s) URL: {value!r}") from e
    return value


VariationUrl = Annotated[str, AfterValidator(_check_url)]


class VariationRequest(BaseModel):
    """Input of the image-variation flow.

    Attributes:
        image_url: URL of the source image, either remote (``https://...``)
            or embedded (``data:image/png;base64,...``).
        number_of_variations: How many variations to ask for (1–5).
            Defaults to 3.

    The camelCase names ``imageUrl`` and ``numberOfVariations`` are accepted
    as aliases so JavaScript clients can post their natural field names.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

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
        description="The number of image variations to generate.",
    )


class VariationResult(RootModel[list[VariationUrl]]):
    """Output of the image-variation flow: an ordered list of image URLs."""

    model_config = ConfigDict(frozen=True)

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> str:
        return self.root[index]

    @property
    def urls(self) -> list[str]:
        """The variation URLs as a plain list."""
        return list(self.root)


class PromptFlow:
    """Schema-validated wrapper around one model provider call.

    Attributes:
        name: Flow name, used in logs.
        provider: The provider that performs the outbound call.
    """

    def __init__(self, provider: ModelProviderBase, name: str = FLOW_NAME) -> None:
        self.name = name
        self.provider = provider

    def validate_input(
        self, request: VariationRequest | Mapping[str, Any] | None = None, **kwargs: Any
    ) -> VariationRequest:
        """Coerce *request* (or keyword arguments) into a :class:`VariationRequest`.

        Raises:
            RequestValidationError: If the input does not satisfy the schema.
        """
        if isinstance(request, VariationRequest) and not kwargs:
            return request

        payload: dict[str, Any] = {}
        if isinstance(request, VariationRequest):
            payload.update(request.model_dump())
        elif request is not None:
            payload.update(request)
        payload.update(kwargs)

        try:
            return VariationRequest.model_validate(payload)
        except pydantic.ValidationError as e:
            raise RequestValidationError(_summarise(e)) from e

    def validate_output(self, raw: str, limit: int) -> VariationResult:
        """Parse and validate the provider reply.

        Args:
            raw: Raw reply text from the provider.
            limit: Maximum number of URLs to keep.

        Raises:
            OutputValidationError: If *raw* is not a JSON array of URLs.
        """
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise OutputValidationError("Model reply was not valid JSON") from e

        try:
            result = VariationResult.model_validate(data)
        except pydantic.ValidationError as e:
            raise OutputValidationError(
                f"Model reply did not match the output schema: {_summarise(e)}"
            ) from e

        if len(result) > limit:
            logger.warning(
                f"{self.name}: provider returned {len(result)} URLs for a request of "
                f"{limit}; keeping the first {limit}"
            )
            result = VariationResult(result.root[:limit])
        return result

    def run(
        self, request: VariationRequest | Mapping[str, Any] | None = None, **kwargs: Any
    ) -> VariationResult:
        """Execute the flow once.

        Raises:
            RequestValidationError: Input rejected; no outbound call made.
            OutputValidationError: Provider reply failed schema validation.
            ProviderError: The provider call failed.
        """
        request = self.validate_input(request, **kwargs)
        prompt = render_variation_prompt(request)
        inline_image = parse_data_url(request.image_url)

        logger.info(
            f"{self.name}: requesting {request.number_of_variations} variation(s) "
            f"with prompt '{PROMPT_NAME}' via '{self.provider.name}'"
        )

        try:
            raw = self.provider.generate(prompt, image=inline_image)
        except FlowError:
            raise
        except Exception as e:
            logger.error(f"{self.name}: provider '{self.provider.name}' failed", exc_info=True)
            raise ProviderError(f"Model provider request failed: {e}") from e

        result = self.validate_output(raw, request.number_of_variations)
        logger.info(f"{self.name}: received {len(result)} variation(s)")
        return result


def _summarise(error: pydantic.ValidationError) -> str:
    """Flatten a pydantic error into one human-readable line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ())) or "value"
        parts.append(f"{location}: {item.get('msg', 'invalid')}")
    return "; ".join(parts)


def get_default_flow(settings: WeaverConfig | None = None) -> PromptFlow:
    """Build a flow bound to the configured default provider."""
    settings = settings or config
    provider = provider_registry.instantiate(settings.default_provider, settings)
    return PromptFlow(provider)


def generate_image_variations(
    image_url: str,
    number_of_variations: int | None = None,
    *,
    provider: ModelProviderBase | None = None,
) -> VariationResult:
    """Generate variations of an image.

    Args:
        image_url: Remote or data URL of the source image.
        number_of_variations: Variation count (1–5).  ``None`` uses the
            flow default of 3.
        provider: Provider to call.  Defaults to ``config.default_provider``.

    Returns:
        The validated variation URLs.
    """
    payload: dict[str, Any] = {"image_url": image_url}
    if number_of_variations is not None:
        payload["number_of_variations"] = number_of_variations

    flow = PromptFlow(provider) if provider is not None else get_default_flow()
    return flow.run(payload)
