from __future__ import annotations

import logging
from typing import Any, assert_never

from imagegen_mcp.config import Settings
from imagegen_mcp.logging_config import get_logger
from imagegen_mcp.providers.base import (
    PROMPT_LIMITS,
    DallE2Parameters,
    DallE3Parameters,
    GenerationParameters,
    GenerationRequest,
    GenerationResult,
    GptImageParameters,
    ImagePayload,
)
from imagegen_mcp.storage import ImageStore, ensure_parent_dir, resolve_output_paths


class OpenAIImageProvider:
    name = "openai"

    def __init__(
        self,
        settings: Settings,
        client: Any | None = None,
        store: ImageStore | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.log = logger or get_logger(__name__)
        if client is None:
            from openai import AsyncOpenAI  # type: ignore

            # No retries here: one upstream failure is one reported failure.
            client_kwargs: dict[str, Any] = {
                "api_key": settings.openai_api_key,
                "base_url": settings.openai_api_url or None,
                "max_retries": 0,
            }
            if settings.request_timeout is not None:
                client_kwargs["timeout"] = settings.request_timeout
            client = AsyncOpenAI(**client_kwargs)
        self.client = client
        self.store = store or ImageStore(timeout=settings.request_timeout, logger=self.log)

    async def generate_image(
        self,
        prompt: str,
        output_path: str,
        parameters: GenerationParameters,
    ) -> GenerationResult:
        """
        Generate images with the model named by `parameters` and save them.

        Every entry of the upstream response becomes one file. An empty
        response still yields one (placeholder) file so callers always get
        at least one path back.
        """
        request = GenerationRequest(prompt=prompt, output_path=output_path, parameters=parameters)
        model = parameters.model.value

        limit = PROMPT_LIMITS[parameters.model]
        if len(prompt) > limit:
            self.log.warning(
                "Prompt is %d characters; %s documents a limit of %d",
                len(prompt),
                model,
                limit,
            )

        params = build_request_params(request)
        self.log.info(
            "Generating image with %s (%s)",
            model,
            ", ".join(f"{k}={v}" for k, v in params.items() if k != "prompt"),
        )

        try:
            response = await self.client.images.generate(**params)
        except Exception as exc:
            self.log.error("Image generation failed: %s", exc)
            raise

        saved_files = await self._save_images(request, response)
        return GenerationResult(response=_raw_response(response), saved_files=saved_files)

    async def _save_images(self, request: GenerationRequest, response: Any) -> list[str]:
        payloads = [ImagePayload.from_upstream(item) for item in (_response_data(response) or [])]
        if not payloads:
            self.log.warning("Upstream response contained no images; substituting a placeholder entry")
            payloads = [ImagePayload()]

        paths = resolve_output_paths(request.output_path, len(payloads))
        ensure_parent_dir(paths[0])

        output_format = getattr(request.parameters, "output_format", None)
        saved: list[str] = []
        for payload, path in zip(payloads, paths):
            saved.append(await self.store.save(payload, path, output_format=output_format))
        return saved


def build_request_params(request: GenerationRequest) -> dict[str, Any]:
    """
    Translate a parameter record into `images.generate` keyword arguments.

    Unset fields are left out so the API applies its own defaults.
    """
    p = request.parameters
    params: dict[str, Any]
    match p:
        case GptImageParameters():
            # gpt-image models always answer with base64 and reject response_format.
            params = {
                "model": p.model.value,
                "prompt": request.prompt,
                "n": p.n,
                "size": p.size,
                "quality": p.quality,
                "background": p.background,
                "moderation": p.moderation,
                "output_compression": p.output_compression,
                "output_format": p.output_format,
                "user": p.user,
            }
        case DallE3Parameters():
            params = {
                "model": p.model.value,
                "prompt": request.prompt,
                "n": 1,
                "size": p.size,
                "quality": p.quality,
                "style": p.style,
                "response_format": "b64_json",
                "user": p.user,
            }
        case DallE2Parameters():
            params = {
                "model": p.model.value,
                "prompt": request.prompt,
                "n": p.n,
                "size": p.size,
                "response_format": "b64_json",
                "user": p.user,
            }
        case _:
            assert_never(p)

    return {k: v for k, v in params.items() if v is not None}


def _response_data(response: Any) -> list[Any] | None:
    if isinstance(response, dict):
        return response.get("data")
    return getattr(response, "data", None)


def _raw_response(response: Any) -> dict[str, Any]:
    if isinstance(response, dict):
        return response
    if hasattr(response, "model_dump"):
        return response.model_dump(mode="json", exclude_none=True)
    # Fallback: best-effort
    return {"response": str(response)}
