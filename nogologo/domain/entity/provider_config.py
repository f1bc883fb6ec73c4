"""Provider Configuration Entities - Domain Layer

Each provider has its own frozen settings object. The settings UI (or the
command line) replaces a config with ``dataclasses.replace``; the generation
use case takes a snapshot at dispatch time so in-flight calls never observe a
change.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, FrozenSet, Type, TypeVar, Union

from .image import ProviderId

C = TypeVar("C", bound="BaseProviderConfig")


class ResponseFormat(str, Enum):
    URL = "url"
    B64_JSON = "b64_json"


class OpenAIModel(str, Enum):
    GPT_IMAGE_1 = "gpt-image-1"
    DALL_E_3 = "dall-e-3"
    DALL_E_2 = "dall-e-2"


class ImageSize(str, Enum):
    AUTO = "auto"
    SQUARE = "1024x1024"
    PORTRAIT = "1024x1536"
    LANDSCAPE = "1536x1024"


class ImageQuality(str, Enum):
    AUTO = "auto"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ImageFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"


class Background(str, Enum):
    OPAQUE = "opaque"
    TRANSPARENT = "transparent"


class GeminiModel(str, Enum):
    GEMINI_1_5_FLASH = "gemini-1.5-flash"
    GEMINI_1_5_PRO = "gemini-1.5-pro"
    GEMINI_1_0_PRO = "gemini-1.0-pro"


class SafetySetting(str, Enum):
    BLOCK_NONE = "BLOCK_NONE"
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_HIGH_AND_ABOVE = "BLOCK_HIGH_AND_ABOVE"


@dataclass(frozen=True)
class ModelCapabilities:
    """What an OpenAI image model accepts in the request payload."""

    supports_quality: bool
    supports_background: bool
    supports_output_format: bool
    # dall-e models return URLs unless asked for b64_json; gpt-image-1 rejects the field
    supports_response_format: bool
    supports_auto_size: bool
    supported_sizes: FrozenSet[ImageSize]
    max_images_per_call: int = 10

    def resolve_size(self, size: ImageSize) -> ImageSize:
        """Map a requested size onto one the model accepts."""
        if size not in self.supported_sizes:
            return ImageSize.SQUARE
        if size is ImageSize.AUTO and not self.supports_auto_size:
            return ImageSize.SQUARE
        return size


OPENAI_CAPABILITIES: Dict[OpenAIModel, ModelCapabilities] = {
    OpenAIModel.GPT_IMAGE_1: ModelCapabilities(
        supports_quality=True,
        supports_background=True,
        supports_output_format=True,
        supports_response_format=False,
        supports_auto_size=True,
        supported_sizes=frozenset(ImageSize),
    ),
    OpenAIModel.DALL_E_3: ModelCapabilities(
        supports_quality=False,
        supports_background=False,
        supports_output_format=False,
        supports_response_format=True,
        supports_auto_size=False,
        supported_sizes=frozenset(ImageSize),
        max_images_per_call=1,
    ),
    OpenAIModel.DALL_E_2: ModelCapabilities(
        supports_quality=False,
        supports_background=False,
        supports_output_format=False,
        supports_response_format=True,
        supports_auto_size=False,
        supported_sizes=frozenset({ImageSize.SQUARE}),
    ),
}


@dataclass(frozen=True)
class BaseProviderConfig:
    """Shared dict conversion for provider configs."""

    provider_id: ClassVar[ProviderId]

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.value if isinstance(value, Enum) else value
        return data

    @classmethod
    def from_dict(cls: Type[C], data: Dict[str, Any]) -> C:
        """Build a config from a plain dict.

        Missing keys take their defaults, unknown keys are ignored.

        Raises:
            ValueError: a value is not valid for its field
        """
        defaults = cls()
        kwargs = {}
        for f in fields(cls):
            if f.name not in data or data[f.name] is None:
                continue
            current = getattr(defaults, f.name)
            value = data[f.name]
            if isinstance(current, Enum):
                value = type(current)(value)
            elif isinstance(current, int):
                value = int(value)
            else:
                value = str(value)
            kwargs[f.name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class XAIConfig(BaseProviderConfig):
    provider_id: ClassVar[ProviderId] = ProviderId.XAI

    model: str = "grok-2-image"
    response_format: ResponseFormat = ResponseFormat.B64_JSON
    image_endpoint: str = "https://api.x.ai/v1/images/generations"
    chat_endpoint: str = "https://api.x.ai/v1/chat/completions"
    chat_model: str = "grok-3-mini"


@dataclass(frozen=True)
class OpenAIConfig(BaseProviderConfig):
    provider_id: ClassVar[ProviderId] = ProviderId.OPENAI

    model: OpenAIModel = OpenAIModel.GPT_IMAGE_1
    size: ImageSize = ImageSize.AUTO
    quality: ImageQuality = ImageQuality.AUTO
    output_format: ImageFormat = ImageFormat.PNG
    background: Background = Background.OPAQUE
    output_compression: int = 50
    image_endpoint: str = "https://api.openai.com/v1/images/generations"

    def __post_init__(self) -> None:
        if not (0 <= self.output_compression <= 100):
            raise ValueError("Output compression must be between 0 and 100")

    @property
    def capabilities(self) -> ModelCapabilities:
        return OPENAI_CAPABILITIES[self.model]


@dataclass(frozen=True)
class GeminiConfig(BaseProviderConfig):
    provider_id: ClassVar[ProviderId] = ProviderId.GEMINI

    model: GeminiModel = GeminiModel.GEMINI_1_5_FLASH
    safety: SafetySetting = SafetySetting.BLOCK_NONE
    base_endpoint: str = "https://generativelanguage.googleapis.com/v1beta"


ProviderConfig = Union[XAIConfig, OpenAIConfig, GeminiConfig]

CONFIG_TYPES: Dict[ProviderId, Type[BaseProviderConfig]] = {
    ProviderId.XAI: XAIConfig,
    ProviderId.OPENAI: OpenAIConfig,
    ProviderId.GEMINI: GeminiConfig,
}


def default_config(provider_id: ProviderId) -> ProviderConfig:
    """Return the default config for a provider."""
    return CONFIG_TYPES[ProviderId(provider_id)]()
