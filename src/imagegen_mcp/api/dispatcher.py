from __future__ import annotations

import json
import logging
from typing import Any, assert_never

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData

from imagegen_mcp.api.tools import REQUIRED_ARGUMENTS, TOOLS, ToolSpec
from imagegen_mcp.logging_config import get_logger
from imagegen_mcp.providers.base import (
    DallE2Parameters,
    DallE3Parameters,
    GenerationParameters,
    GptImageParameters,
    ImageProvider,
    ModelVariant,
)


def build_parameters(spec: ToolSpec, arguments: dict[str, Any], log: logging.Logger | None = None) -> GenerationParameters:
    """
    Copy the arguments the tool declares into the model's parameter record.

    Undeclared arguments and values outside the declared type/range/enum are
    dropped, never rejected.
    """
    log = log or get_logger(__name__)
    values: dict[str, Any] = {}
    for arg in spec.optional_arguments:
        if arg.name not in arguments:
            continue
        value = arguments[arg.name]
        if arg.accepts(value):
            values[arg.name] = value
        else:
            log.debug("Dropping %s=%r for %s: outside the declared values", arg.name, value, spec.name)

    declared = {a.name for a in spec.arguments}
    ignored = sorted(k for k in arguments if k not in declared)
    if ignored:
        log.debug("Ignoring arguments not accepted by %s: %s", spec.name, ", ".join(ignored))

    variant = spec.variant
    match variant:
        case ModelVariant.GPT_IMAGE_1 | ModelVariant.GPT_IMAGE_1_MINI:
            return GptImageParameters(model=variant, **values)
        case ModelVariant.DALL_E_3:
            # Always a single image; any caller-supplied n is not declared and never reaches here.
            return DallE3Parameters(**values)
        case ModelVariant.DALL_E_2:
            return DallE2Parameters(**values)
        case _:
            assert_never(variant)


def _text_result(text: str, is_error: bool = False) -> dict[str, Any]:
    result: dict[str, Any] = {"content": [{"type": "text", "text": text}]}
    if is_error:
        result["isError"] = True
    return result


class ToolDispatcher:
    """Routes tool calls to the image provider."""

    def __init__(self, provider: ImageProvider, logger: logging.Logger | None = None) -> None:
        self.provider = provider
        self.log = logger or get_logger(__name__)

    def list_tools(self) -> list[dict[str, Any]]:
        return [spec.as_dict() for spec in TOOLS.values()]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> dict[str, Any]:
        """
        Invoke a tool.

        Unknown tools and missing `prompt`/`output` raise McpError so the
        transport answers with a protocol error. Generation failures never
        raise; they come back as a text result flagged `isError`.
        """
        spec = TOOLS.get(name)
        if spec is None:
            raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))

        arguments = arguments or {}
        for key in REQUIRED_ARGUMENTS:
            value = arguments.get(key)
            if not isinstance(value, str) or not value.strip():
                raise McpError(ErrorData(code=INVALID_PARAMS, message=f"{key.capitalize()} is required"))

        parameters = build_parameters(spec, arguments, log=self.log)
        self.log.info("Calling %s -> %s", name, arguments["output"])

        try:
            result = await self.provider.generate_image(arguments["prompt"], arguments["output"], parameters)
        except Exception as exc:
            self.log.exception("Error generating image with %s", spec.variant.value)
            return _text_result(f"Error generating image: {str(exc) or type(exc).__name__}", is_error=True)

        payload = {
            "success": True,
            "model": spec.variant.value,
            "savedFiles": result.saved_files,
            "response": result.response,
        }
        return _text_result(json.dumps(payload, indent=2, default=str))
