"""
Shared pytest fixtures and configuration for all tests
"""
import base64
import io
import json
import pytest
import sys
from pathlib import Path

import httpx
from PIL import Image

# Add backend to Python path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

FAKE_PNG_B64 = base64.b64encode(b"generated-png-bytes").decode("ascii")


def make_image_bytes(width, height, fmt="PNG", mode="RGB"):
    """Render a solid image in memory"""
    color = (120, 180, 240, 255) if mode == "RGBA" else (120, 180, 240)
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format=fmt)
    return buffer.getvalue()


class FakeUpstream:
    """Records requests to the image API and answers with a canned response"""

    def __init__(self, status_code=200, json_body=None, text=None, content_type=None, exc=None):
        self.status_code = status_code
        self.json_body = json_body if json_body is not None else {"data": [{"b64_json": FAKE_PNG_B64}]}
        self.text = text
        self.content_type = content_type
        self.exc = exc
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.text is not None:
            return httpx.Response(
                self.status_code,
                content=self.text.encode("utf-8"),
                headers={"content-type": self.content_type or "text/html"}
            )
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def transport(self):
        return httpx.MockTransport(self)

    @property
    def called(self):
        return len(self.requests) > 0


@pytest.fixture
def settings():
    """Settings with a fake credential and no analytics storage"""
    from config.settings import Settings
    return Settings(OPENAI_API_KEY="sk-test", SUPABASE_URL=None, SUPABASE_KEY=None, _env_file=None)


@pytest.fixture
def fake_upstream():
    return FakeUpstream()


@pytest.fixture
def make_proxy(settings):
    """Build a TransformProxy wired to a fake upstream"""
    from services.transform_service import TransformProxy
    from services.upstream_service import ImageEditService

    def _make(upstream, **overrides):
        proxy_settings = settings.model_copy(update=overrides) if overrides else settings
        service = ImageEditService(
            api_key=proxy_settings.OPENAI_API_KEY,
            base_url=proxy_settings.OPENAI_BASE_URL,
            transport=upstream.transport
        )
        return TransformProxy(settings=proxy_settings, upstream=service)

    return _make


@pytest.fixture
def png_bytes():
    return make_image_bytes(64, 48, "PNG")


@pytest.fixture
def png_data_url(png_bytes):
    return f"data:image/png;base64,{base64.b64encode(png_bytes).decode('ascii')}"


@pytest.fixture
def json_body():
    def _body(payload):
        return json.dumps(payload).encode("utf-8")
    return _body
