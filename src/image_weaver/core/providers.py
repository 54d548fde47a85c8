"""Base classes and registry for model providers.

A provider performs the single outbound call of a prompt flow: it receives
the rendered prompt text (plus an optional inline image) and returns the raw
reply text of the generative model.  Parsing and schema validation of that
reply are the flow's job, not the provider's.

Provider Pattern
----------------
Each provider encapsulates:
- Client construction and credentials
- Model-specific request options (JSON output mode, response schema)
- Translation of SDK/network failures into :class:`ProviderError`

Usage Example
-------------
    >>> from image_weaver.core.providers import provider_registry
    >>> from image_weaver.core.config import config
    >>>
    >>> provider_registry.list_available()
    ['gemini']
    >>> provider = provider_registry.instantiate("gemini", config)
    >>> reply = provider.generate("Return a JSON array of image URLs.")
"""

import logging
from abc import ABC, abstractmethod
from typing import Any

from google import genai
from google.genai import types

from .config import WeaverConfig
from .errors import ProviderError

logger = logging.getLogger(__name__)


class ModelProviderBase(ABC):
    """Abstract base class for all model providers.

    Attributes
    ----------
    name : str
        Registry name of the provider (e.g., "gemini")
    description : str
        Brief description of the backing model service
    config : WeaverConfig
        Configuration object containing provider settings

    Notes
    -----
    - Providers make exactly one outbound call per :meth:`generate`
    - Providers never retry; failures surface as :class:`ProviderError`
    """

    name: str = "base"
    description: str = "Base class for model providers"

    def __init__(self, config: WeaverConfig) -> None:
        self.config = config
        logger.info(f"Initialized {self.name} provider")

    @abstractmethod
    def generate(self, prompt: str, *, image: tuple[str, bytes] | None = None) -> str:
        """Send one prompt to the model and return its raw reply text.

        Args:
            prompt: Rendered prompt text.
            image: Optional ``(mime_type, data)`` attached as an inline part.

        Returns
        -------
        str
            The model's reply, expected to be a JSON document

        Raises
        ------
        ProviderError
            If the call fails or the model returns no content
        """

    def get_provider_info(self) -> dict[str, Any]:
        """Get information about this provider instance."""
        return {
            "name": self.name,
            "description": self.description,
        }


class GeminiProvider(ModelProviderBase):
    """Google Gemini provider backed by the ``google-genai`` SDK.

    The request asks for ``application/json`` output constrained to a list of
    strings, which is the shape the variation flow validates against.  The
    SDK client is created lazily on first use so that configuration problems
    surface as :class:`ProviderError` at call time rather than at import.
    """

    name = "gemini"
    description = "Google Gemini via the google-genai SDK"

    def __init__(self, config: WeaverConfig) -> None:
        super().__init__(config)
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        if self._client is None:
            if not self.config.gemini_api_key:
                raise ProviderError(
                    "Gemini API key is not configured. "
                    "Set WEAVER_GEMINI_API_KEY or GEMINI_API_KEY."
                )
            self._client = genai.Client(api_key=self.config.gemini_api_key)
        return self._client

    def generate(self, prompt: str, *, image: tuple[str, bytes] | None = None) -> str:
        client = self._get_client()

        contents: list[Any] = []
        if image is not None:
            mime_type, data = image
            contents.append(types.Part.from_bytes(data=data, mime_type=mime_type))
        contents.append(prompt)

        logger.info(
            f"Calling {self.config.gemini_model} "
            f"(inline image: {'yes' if image is not None else 'no'})"
        )

        try:
            response = client.models.generate_content(
                model=self.config.gemini_model,
                contents=contents,
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=list[str],
                ),
            )
        except Exception as e:
            logger.error(f"Gemini request failed: {e}", exc_info=True)
            raise ProviderError(f"Model provider request failed: {e}") from e

        text = response.text
        if not text:
            raise ProviderError("Model provider returned no content")
        return text

    def get_provider_info(self) -> dict[str, Any]:
        info = super().get_provider_info()
        info["model"] = self.config.gemini_model
        return info


class ProviderRegistry:
    """Registry for discovering and instantiating model providers.

    Usage
    -----
    Registering a new provider:

        >>> provider_registry.register(MyProvider)

    Instantiating a provider:

        >>> provider = provider_registry.instantiate("gemini", config)
    """

    def __init__(self) -> None:
        self._providers: dict[str, type[ModelProviderBase]] = {}

    def register(self, provider_class: type[ModelProviderBase]) -> None:
        """Register a provider class under its ``name``.

        Re-registering a name replaces the previous class.
        """
        provider_name = provider_class.name

        if provider_name in self._providers:
            logger.warning(f"Model provider '{provider_name}' is already registered, overwriting")

        self._providers[provider_name] = provider_class
        logger.debug(f"Registered model provider: {provider_name}")

    def unregister(self, provider_name: str) -> None:
        """Remove a provider class from the registry if present."""
        self._providers.pop(provider_name, None)

    def instantiate(self, provider_name: str, config: WeaverConfig) -> ModelProviderBase:
        """Create an instance of a registered provider.

        Raises
        ------
        KeyError
            If provider_name is not registered
        """
        if provider_name not in self._providers:
            available = ", ".join(self.list_available())
            raise KeyError(
                f"Model provider '{provider_name}' not found. Available providers: {available}"
            )

        instance = self._providers[provider_name](config=config)
        logger.info(f"Instantiated model provider: {provider_name}")
        return instance

    def list_available(self) -> list[str]:
        """List all registered provider names."""
        return list(self._providers.keys())

    def get_provider_info(self, provider_name: str) -> dict[str, Any] | None:
        """Get class-level metadata for a registered provider, or ``None``."""
        provider_class = self._providers.get(provider_name)
        if provider_class is None:
            return None
        return {
            "name": provider_class.name,
            "description": provider_class.description,
        }


# Global provider registry instance
provider_registry = ProviderRegistry()
provider_registry.register(GeminiProvider)
