"""
Transform proxy core.

Turns a raw ``POST /api/transform`` body into a ProxyResponse. It knows nothing
about the web framework that received the request; adapters in ``api/`` only
convert their runtime's request into ``dispatch(method, body)`` and the
returned ProxyResponse back into a runtime response.
"""
import json
import time
from typing import Optional, Union

from config.settings import Settings, get_settings
from core.data_url import decode_data_url, estimate_decoded_size
from core.errors import BadRequest, ConfigError, MethodNotAllowed, PayloadTooLarge, TransformError
from models.transform import DecodedImage, ProxyResponse
from services.upstream_service import ImageEditService, prompt_for_style

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Vary": "Origin",
}

class TransformProxy:
    def __init__(self, settings: Optional[Settings] = None, upstream: Optional[ImageEditService] = None):
        self.settings = settings or get_settings()
        self.upstream = upstream or ImageEditService(
            api_key=self.settings.OPENAI_API_KEY,
            base_url=self.settings.OPENAI_BASE_URL,
            timeout=self.settings.UPSTREAM_TIMEOUT_SECONDS
        )

    async def dispatch(self, method: str, body: Union[bytes, str, None]) -> ProxyResponse:
        method = method.upper()
        if method == "OPTIONS":
            return ProxyResponse(status_code=204, headers=dict(CORS_HEADERS))
        if method != "POST":
            return self._error(MethodNotAllowed())
        return await self.handle(body)

    async def handle(self, body: Union[bytes, str, None]) -> ProxyResponse:
        """Validate the payload, call the upstream API once and normalize the outcome"""
        start_time = time.time()
        try:
            if not self.settings.OPENAI_API_KEY:
                raise ConfigError()
            prompt = prompt_for_style(self.settings.TRANSFORM_STYLE)

            image_data_url = self._parse_body(body)
            image = self._decode(image_data_url)

            print(f"[TRANSFORM] Forwarding {image.filename} ({image.mime_type}, {len(image.data)} bytes), style={self.settings.TRANSFORM_STYLE}")
            b64_image = await self.upstream.edit_image(image, prompt)

            print(f"[TRANSFORM] Completed in {time.time() - start_time:.2f}s")
            return ProxyResponse(
                status_code=200,
                body={"image": f"data:image/png;base64,{b64_image}"},
                headers=dict(CORS_HEADERS)
            )

        except TransformError as error:
            print(f"[TRANSFORM] Failed with {error.status_code}: {error.message}")
            return self._error(error)
        except Exception as error:
            print(f"[TRANSFORM] Unexpected error: {type(error).__name__}: {error}")
            return self._error(TransformError(str(error) or None))

    def _parse_body(self, body: Union[bytes, str, None]) -> str:
        try:
            payload = json.loads(body or b"")
        except ValueError:
            raise BadRequest("Invalid JSON body.")

        # Only imageDataURL is read; a client-supplied prompt is ignored
        image_data_url = payload.get("imageDataURL") if isinstance(payload, dict) else None
        if not image_data_url:
            raise BadRequest("Missing imageDataURL")
        if not isinstance(image_data_url, str):
            raise BadRequest("imageDataURL must be a string")

        # Bound the work done on oversized input before decoding anything
        if estimate_decoded_size(image_data_url) > self.settings.MAX_PAYLOAD_BYTES:
            raise PayloadTooLarge(
                f"Image too large. Please upload ≤ {self.settings.MAX_PAYLOAD_BYTES // (1024 * 1024)}MB."
            )

        return image_data_url

    def _decode(self, image_data_url: str) -> DecodedImage:
        image_bytes, mime_type, filename = decode_data_url(image_data_url)
        return DecodedImage(data=image_bytes, mime_type=mime_type, filename=filename)

    def _error(self, error: TransformError) -> ProxyResponse:
        return ProxyResponse(
            status_code=error.status_code,
            body={"error": error.message},
            headers=dict(CORS_HEADERS)
        )

def get_transform_proxy() -> TransformProxy:
    return TransformProxy()
