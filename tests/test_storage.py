import base64
import io

import httpx
import PIL.Image
import pytest

from imagegen_mcp.providers.base import ImagePayload
from imagegen_mcp.storage import ImageStore, ensure_parent_dir, resolve_output_paths


class TestResolveOutputPaths:
    def test_single_image_keeps_path_verbatim(self):
        assert resolve_output_paths("out/./cat.png", 1) == ["out/./cat.png"]

    def test_multiple_images_get_numbered_siblings(self):
        assert resolve_output_paths("/tmp/x/img.png", 3) == [
            "/tmp/x/img_1.png",
            "/tmp/x/img_2.png",
            "/tmp/x/img_3.png",
        ]

    def test_path_without_extension(self):
        assert resolve_output_paths("/tmp/x/img", 2) == ["/tmp/x/img_1", "/tmp/x/img_2"]


def test_ensure_parent_dir_creates_nested_directories(tmp_path):
    target = tmp_path / "a" / "b" / "c" / "img.png"

    ensure_parent_dir(target)

    assert target.parent.is_dir()


class TestImageStore:
    @pytest.mark.asyncio
    async def test_inline_payload_is_decoded(self, tmp_path):
        path = str(tmp_path / "inline.png")
        payload = ImagePayload(b64_json=base64.b64encode(b"not really a png").decode())

        saved = await ImageStore().save(payload, path)

        assert saved == path
        assert (tmp_path / "inline.png").read_bytes() == b"not really a png"

    @pytest.mark.asyncio
    async def test_inline_payload_wins_over_url(self, tmp_path):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("url should not be fetched")

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        path = str(tmp_path / "both.png")
        payload = ImagePayload(b64_json=base64.b64encode(b"inline").decode(), url="https://example.com/x.png")

        await ImageStore(http_client=client).save(payload, path)

        assert (tmp_path / "both.png").read_bytes() == b"inline"

    @pytest.mark.asyncio
    async def test_url_payload_is_fetched(self, tmp_path):
        requested = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, content=b"remote bytes")

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        path = str(tmp_path / "remote.png")

        await ImageStore(http_client=client).save(ImagePayload(url="https://images.example.com/a.png"), path)

        assert requested == ["https://images.example.com/a.png"]
        assert (tmp_path / "remote.png").read_bytes() == b"remote bytes"

    @pytest.mark.asyncio
    async def test_url_fetch_failure_propagates(self, tmp_path):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
        path = tmp_path / "missing.png"

        with pytest.raises(httpx.HTTPStatusError):
            await ImageStore(http_client=client).save(ImagePayload(url="https://images.example.com/gone.png"), str(path))

        assert not path.exists()

    @pytest.mark.asyncio
    async def test_empty_payload_writes_placeholder_in_requested_format(self, tmp_path):
        path = tmp_path / "placeholder.png"

        await ImageStore().save(ImagePayload(), str(path), output_format="webp")

        with PIL.Image.open(io.BytesIO(path.read_bytes())) as img:
            assert img.format == "WEBP"
            assert img.size == (1, 1)
