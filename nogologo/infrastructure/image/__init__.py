"""Image Provider Infrastructure"""

from .gemini_image_provider import GeminiImageProvider
from .openai_image_provider import OpenAIImageProvider
from .xai_image_provider import XAIImageProvider

__all__ = ["XAIImageProvider", "OpenAIImageProvider", "GeminiImageProvider"]
