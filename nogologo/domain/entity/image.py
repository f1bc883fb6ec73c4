"""Image Entities - Domain Layer"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple
from uuid import uuid4

from ..exceptions import ImageGenerationError

MIN_IMAGE_COUNT = 1
MAX_IMAGE_COUNT = 10


class ProviderId(str, Enum):
    """Image generation providers"""

    XAI = "xai"
    OPENAI = "openai"
    GEMINI = "gemini"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: str) -> "ProviderId":
        """Parse a provider id case-insensitively."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ValueError(f"Unknown provider '{value}', expected one of: {valid}")


_DISPLAY_NAMES = {
    ProviderId.XAI: "xAI",
    ProviderId.OPENAI: "OpenAI",
    ProviderId.GEMINI: "Gemini",
}


@dataclass(frozen=True)
class GenerationRequest:
    """One user-triggered generation round."""

    prompt: str
    image_count: int = 1
    providers: FrozenSet[ProviderId] = frozenset(ProviderId)
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        """Validate the request"""
        if not self.prompt or not self.prompt.strip():
            raise ValueError("Prompt cannot be empty")

        if not (MIN_IMAGE_COUNT <= self.image_count <= MAX_IMAGE_COUNT):
            raise ValueError(
                f"Image count must be between {MIN_IMAGE_COUNT} and {MAX_IMAGE_COUNT}"
            )

        # Accept any iterable of ids but store an immutable set
        providers = frozenset(ProviderId(p) for p in self.providers)
        if not providers:
            raise ValueError("At least one provider must be selected")
        object.__setattr__(self, "providers", providers)


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of one provider's call: all images or an error, never both."""

    provider_id: ProviderId
    images: Tuple[bytes, ...] = ()
    error: Optional[ImageGenerationError] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "images", tuple(self.images))

        if self.images and self.error is not None:
            raise ValueError("A result cannot carry both images and an error")

        if not self.images and self.error is None:
            raise ValueError("A result without images must carry an error")

    @classmethod
    def success(cls, provider_id: ProviderId, images: Iterable[bytes]) -> "GenerationResult":
        return cls(provider_id=provider_id, images=tuple(images))

    @classmethod
    def failure(cls, provider_id: ProviderId, error: ImageGenerationError) -> "GenerationResult":
        return cls(provider_id=provider_id, error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        """User-visible summary of the result."""
        name = self.provider_id.display_name
        if self.error is not None:
            return f"{name} Error: {self.error}"
        noun = "image" if len(self.images) == 1 else "images"
        return f"{len(self.images)} {name} {noun} generated"
