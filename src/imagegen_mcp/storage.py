from __future__ import annotations

import base64
import logging
from pathlib import Path

import httpx

from imagegen_mcp.assembly.render import image_format_for, render_placeholder
from imagegen_mcp.logging_config import get_logger
from imagegen_mcp.providers.base import ImagePayload


def resolve_output_paths(output_path: str, count: int) -> list[str]:
    """
    One image keeps the requested path as given. Several images get
    `<stem>_<i><suffix>` siblings in the same directory, numbered from 1.
    """
    if count <= 1:
        return [output_path]
    p = Path(output_path)
    return [str(p.with_name(f"{p.stem}_{i}{p.suffix}")) for i in range(1, count + 1)]


def ensure_parent_dir(path: str | Path) -> Path:
    out_dir = Path(path).parent
    out_dir.mkdir(parents=True, exist_ok=True)
    return out_dir


class ImageStore:
    """Writes upstream image payloads to local files."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._http_client = http_client
        self._timeout = timeout
        self.log = logger or get_logger(__name__)

    async def save(self, payload: ImagePayload, path: str, output_format: str | None = None) -> str:
        if payload.b64_json:
            self.log.debug("Decoding base64 image to %s", path)
            content = base64.b64decode(payload.b64_json)
        elif payload.url:
            self.log.debug("Downloading image %s to %s", payload.url, path)
            content = await self.fetch(payload.url)
        else:
            fmt = image_format_for(path, output_format)
            self.log.warning("Upstream returned no image data; writing a 1x1 %s placeholder to %s", fmt, path)
            content = render_placeholder(fmt)

        Path(path).write_bytes(content)
        self.log.info("Image saved to: %s", path)
        return path

    async def fetch(self, url: str) -> bytes:
        if self._http_client is not None:
            resp = await self._http_client.get(url)
            resp.raise_for_status()
            return resp.content

        async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.content
