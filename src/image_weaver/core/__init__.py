"""Core functionality for image variation generation.

This module provides the core components for Image Weaver:

- **Prompt Flow** (flow.py): schema-validated wrapper around a single model call
- **Prompt template** (prompt.py): the variation instruction and data-URL helpers
- **Model Providers** (providers.py): provider base class, Gemini provider, registry
- **Image intake** (intake.py): JPEG/PNG filter and data-URL encoding
- **WeaverConfig** (config.py): configuration management using Pydantic Settings
- **Errors** (errors.py): FlowError hierarchy shared by the UI and the API

Usage Example
-------------
    from image_weaver.core import PromptFlow, provider_registry, config

    provider = provider_registry.instantiate("gemini", config)
    result = PromptFlow(provider).run(image_url="https://example.com/a.png")
"""

from image_weaver.core.config import WeaverConfig, config
from image_weaver.core.errors import (
    FlowError,
    OutputValidationError,
    ProviderError,
    RequestValidationError,
    ValidationError,
)
from image_weaver.core.flow import (
    PromptFlow,
    VariationRequest,
    VariationResult,
    generate_image_variations,
)
from image_weaver.core.providers import ModelProviderBase, provider_registry

__all__ = [
    "FlowError",
    "ModelProviderBase",
    "OutputValidationError",
    "PromptFlow",
    "ProviderError",
    "RequestValidationError",
    "ValidationError",
    "VariationRequest",
    "VariationResult",
    "WeaverConfig",
    "config",
    "generate_image_variations",
    "provider_registry",
]
