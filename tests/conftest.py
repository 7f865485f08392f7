import base64
import io
from unittest.mock import AsyncMock, MagicMock

import PIL.Image
import pytest
from openai.types import Image, ImagesResponse

from imagegen_mcp.config import Settings
from imagegen_mcp.providers.openai_provider import OpenAIImageProvider


def png_bytes(color=(255, 0, 0)) -> bytes:
    buf = io.BytesIO()
    PIL.Image.new("RGB", (4, 4), color).save(buf, format="PNG")
    return buf.getvalue()


def images_response(*entries: Image) -> ImagesResponse:
    return ImagesResponse(created=1700000000, data=list(entries))


def inline_image(content: bytes | None = None) -> Image:
    return Image(b64_json=base64.b64encode(content or png_bytes()).decode("ascii"))


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_URL", raising=False)
    return Settings(_env_file=None, openai_api_key="sk-test")


@pytest.fixture
def openai_client():
    client = MagicMock()
    client.images.generate = AsyncMock(return_value=images_response(inline_image()))
    return client


@pytest.fixture
def provider(settings, openai_client):
    return OpenAIImageProvider(settings, client=openai_client)
