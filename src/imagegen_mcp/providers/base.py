from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, Union


class ModelVariant(str, Enum):
    GPT_IMAGE_1 = "gpt-image-1"
    GPT_IMAGE_1_MINI = "gpt-image-1-mini"
    DALL_E_3 = "dall-e-3"
    DALL_E_2 = "dall-e-2"


# Advisory only; longer prompts are logged and still sent upstream.
PROMPT_LIMITS: dict[ModelVariant, int] = {
    ModelVariant.GPT_IMAGE_1: 32000,
    ModelVariant.GPT_IMAGE_1_MINI: 32000,
    ModelVariant.DALL_E_3: 4000,
    ModelVariant.DALL_E_2: 1000,
}


@dataclass(frozen=True)
class GptImageParameters:
    """Parameters shared by gpt-image-1 and gpt-image-1-mini."""

    model: ModelVariant = ModelVariant.GPT_IMAGE_1
    n: int | None = None
    size: str | None = None
    quality: str | None = None
    background: str | None = None
    moderation: str | None = None
    output_compression: int | None = None
    output_format: str | None = None
    user: str | None = None

    def __post_init__(self) -> None:
        if self.model not in (ModelVariant.GPT_IMAGE_1, ModelVariant.GPT_IMAGE_1_MINI):
            raise ValueError(f"GptImageParameters cannot carry model {self.model!r}")


@dataclass(frozen=True)
class DallE3Parameters:
    size: str | None = None
    quality: str | None = None
    style: str | None = None
    user: str | None = None

    @property
    def model(self) -> ModelVariant:
        return ModelVariant.DALL_E_3

    @property
    def n(self) -> int:
        # dall-e-3 only ever produces a single image per call.
        return 1


@dataclass(frozen=True)
class DallE2Parameters:
    n: int | None = None
    size: str | None = None
    user: str | None = None

    @property
    def model(self) -> ModelVariant:
        return ModelVariant.DALL_E_2


GenerationParameters = Union[GptImageParameters, DallE3Parameters, DallE2Parameters]


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    output_path: str
    parameters: GenerationParameters


@dataclass(frozen=True)
class ImagePayload:
    """One upstream image entry: inline base64, a remote URL, or neither."""

    b64_json: str | None = None
    url: str | None = None

    @classmethod
    def from_upstream(cls, item: Any) -> ImagePayload:
        if isinstance(item, dict):
            return cls(b64_json=item.get("b64_json") or None, url=item.get("url") or None)
        return cls(
            b64_json=getattr(item, "b64_json", None) or None,
            url=getattr(item, "url", None) or None,
        )


@dataclass(frozen=True)
class GenerationResult:
    # Raw upstream response, kept as a plain dict so callers can serialize it.
    response: dict[str, Any]
    saved_files: list[str]


class ImageProvider(Protocol):
    name: str

    async def generate_image(
        self,
        prompt: str,
        output_path: str,
        parameters: GenerationParameters,
    ) -> GenerationResult: ...
