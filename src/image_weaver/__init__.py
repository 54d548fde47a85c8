"""Image Weaver - drop an image, get AI-generated variations back."""

__version__ = "0.1.0"

from image_weaver.core.config import WeaverConfig, config
from image_weaver.core.flow import VariationRequest, VariationResult, generate_image_variations

__all__ = [
    "VariationRequest",
    "VariationResult",
    "WeaverConfig",
    "config",
    "generate_image_variations",
]
