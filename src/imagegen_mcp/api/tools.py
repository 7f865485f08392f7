"""
Tool catalog for the image generation server.

Each tool targets one model and declares, per argument, the JSON type and the
legal values. The same declarations drive the advertised input schemas and
the whitelist applied to incoming arguments, so the two cannot drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from imagegen_mcp.providers.base import PROMPT_LIMITS, ModelVariant

REQUIRED_ARGUMENTS = ("prompt", "output")

_JSON_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "integer": (int,),
}


@dataclass(frozen=True)
class ToolArgument:
    name: str
    type: str
    description: str
    enum: tuple[str, ...] | None = None
    minimum: int | None = None
    maximum: int | None = None
    default: Any = None

    def schema(self) -> dict[str, Any]:
        out: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.enum is not None:
            out["enum"] = list(self.enum)
        if self.minimum is not None:
            out["minimum"] = self.minimum
        if self.maximum is not None:
            out["maximum"] = self.maximum
        if self.default is not None:
            out["default"] = self.default
        return out

    def accepts(self, value: Any) -> bool:
        # bool is an int subclass; never take True for a count.
        if isinstance(value, bool) or not isinstance(value, _JSON_TYPES[self.type]):
            return False
        if self.enum is not None and value not in self.enum:
            return False
        if self.minimum is not None and value < self.minimum:
            return False
        if self.maximum is not None and value > self.maximum:
            return False
        return True


@dataclass(frozen=True)
class ToolSpec:
    name: str
    variant: ModelVariant
    description: str
    arguments: tuple[ToolArgument, ...]

    @property
    def optional_arguments(self) -> tuple[ToolArgument, ...]:
        return tuple(a for a in self.arguments if a.name not in REQUIRED_ARGUMENTS)

    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {a.name: a.schema() for a in self.arguments},
            "required": list(REQUIRED_ARGUMENTS),
        }

    def as_dict(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema()}


def _prompt(variant: ModelVariant) -> ToolArgument:
    return ToolArgument(
        "prompt",
        "string",
        f"A text description of the desired image (max {PROMPT_LIMITS[variant]} characters)",
    )


_OUTPUT = ToolArgument(
    "output",
    "string",
    "Path where the image should be saved. Several images are saved as <name>_1.<ext>, <name>_2.<ext>, ...",
)

_USER = ToolArgument(
    "user",
    "string",
    "A unique identifier representing your end-user, which can help OpenAI monitor and detect abuse",
)


def _count(description: str = "Number of images to generate") -> ToolArgument:
    return ToolArgument("n", "integer", description, minimum=1, maximum=10, default=1)


def _gpt_image_arguments(variant: ModelVariant) -> tuple[ToolArgument, ...]:
    return (
        _prompt(variant),
        _OUTPUT,
        _count(),
        ToolArgument(
            "size",
            "string",
            "Size of the generated image",
            enum=("1024x1024", "1536x1024", "1024x1536", "auto"),
            default="auto",
        ),
        ToolArgument(
            "quality",
            "string",
            "Quality of the generated image",
            enum=("low", "medium", "high", "auto"),
            default="auto",
        ),
        ToolArgument(
            "background",
            "string",
            "Background transparency (transparent requires png or webp output)",
            enum=("transparent", "opaque", "auto"),
            default="auto",
        ),
        ToolArgument(
            "moderation",
            "string",
            "Content moderation level",
            enum=("low", "auto"),
            default="auto",
        ),
        ToolArgument(
            "output_compression",
            "integer",
            "Compression level (0-100%) for webp or jpeg output",
            minimum=0,
            maximum=100,
            default=100,
        ),
        ToolArgument(
            "output_format",
            "string",
            "Format of the generated image",
            enum=("png", "jpeg", "webp"),
            default="png",
        ),
        _USER,
    )


TOOLS: dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            name="generate_image_gpt",
            variant=ModelVariant.GPT_IMAGE_1,
            description="Generate an image with OpenAI's gpt-image-1 model and save it to a file",
            arguments=_gpt_image_arguments(ModelVariant.GPT_IMAGE_1),
        ),
        ToolSpec(
            name="generate_image_gpt_mini",
            variant=ModelVariant.GPT_IMAGE_1_MINI,
            description="Generate an image with OpenAI's gpt-image-1-mini model (faster, cheaper) and save it to a file",
            arguments=_gpt_image_arguments(ModelVariant.GPT_IMAGE_1_MINI),
        ),
        ToolSpec(
            name="generate_image_dalle3",
            variant=ModelVariant.DALL_E_3,
            description="Generate a single image with OpenAI's DALL-E 3 model and save it to a file",
            arguments=(
                _prompt(ModelVariant.DALL_E_3),
                _OUTPUT,
                ToolArgument(
                    "size",
                    "string",
                    "Size of the generated image",
                    enum=("1024x1024", "1792x1024", "1024x1792"),
                    default="1024x1024",
                ),
                ToolArgument(
                    "quality",
                    "string",
                    "Quality of the generated image",
                    enum=("standard", "hd"),
                    default="standard",
                ),
                ToolArgument(
                    "style",
                    "string",
                    "Style of the generated image",
                    enum=("vivid", "natural"),
                    default="vivid",
                ),
                _USER,
            ),
        ),
        ToolSpec(
            name="generate_image_dalle2",
            variant=ModelVariant.DALL_E_2,
            description="Generate one or more images with OpenAI's DALL-E 2 model and save them to files",
            arguments=(
                _prompt(ModelVariant.DALL_E_2),
                _OUTPUT,
                _count(),
                ToolArgument(
                    "size",
                    "string",
                    "Size of the generated image",
                    enum=("256x256", "512x512", "1024x1024"),
                    default="1024x1024",
                ),
                _USER,
            ),
        ),
    )
}
