import httpx
from typing import Optional, Dict

from core.errors import ConfigError, UpstreamError, UpstreamProtocolError, NoImageReturned
from models.transform import DecodedImage

MODEL = "gpt-image-1"
# Allowed sizes: "1024x1024", "1024x1536", "1536x1024", "auto"; square keeps PFPs consistent
OUTPUT_SIZE = "1024x1024"
ERROR_EXCERPT_LENGTH = 400

# Prompts are compiled in and selected per deployment, never taken from the request
STYLE_PROMPTS: Dict[str, str] = {
    "cloud": (
        "I will send you pictures of fictional characters and you will recreate them "
        "like they are made of clouds in the sky, realistic style"
    ),
    "angel": (
        "I will send you pictures of fictional characters and you will recreate them "
        "as radiant angels with feathered wings and a soft halo, heavenly light, realistic style"
    ),
}

def prompt_for_style(style: str) -> str:
    prompt = STYLE_PROMPTS.get(style)
    if not prompt:
        raise ConfigError(f"Server not configured: unknown TRANSFORM_STYLE '{style}'.")
    return prompt

class ImageEditService:
    """Client for the OpenAI Images Edit endpoint"""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._transport = transport

    async def edit_image(self, image: DecodedImage, prompt: str) -> str:
        """
        Send one image edit request.

        Args:
            image: Decoded upload with a filename matching its MIME type
            prompt: The fixed style prompt

        Returns:
            The base64-encoded PNG produced by the model

        Raises:
            ConfigError: no API key
            UpstreamProtocolError: the response was not JSON
            UpstreamError: the API reported a failure or could not be reached
            NoImageReturned: success response without an image
        """
        if not self.api_key:
            raise ConfigError()

        data = {
            "model": MODEL,
            "prompt": prompt,
            "size": OUTPUT_SIZE,
        }
        files = {
            "image": (image.filename, image.data, image.mime_type)
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}"
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/images/edits",
                    data=data,
                    files=files,
                    headers=headers
                )
        except httpx.TimeoutException:
            raise UpstreamError("Request timeout - image API may be slow", status_code=504)
        except httpx.HTTPError as error:
            raise UpstreamError(f"Error calling image API: {str(error)}", status_code=502)

        print(f"[UPSTREAM] {response.status_code} from images/edits ({response.headers.get('content-type', 'no content-type')})")

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            # Relay the status but never a 2xx for a response we could not read
            status_code = response.status_code if response.status_code >= 400 else 502
            raise UpstreamProtocolError(
                f"Upstream error: {response.text[:ERROR_EXCERPT_LENGTH]}",
                status_code=status_code
            )

        try:
            payload = response.json()
        except ValueError:
            raise UpstreamProtocolError("Upstream error: malformed JSON response")

        if not response.is_success:
            message = None
            if isinstance(payload, dict) and isinstance(payload.get('error'), dict):
                message = payload['error'].get('message')
                if not isinstance(message, str):
                    message = None
            raise UpstreamError(message, status_code=response.status_code)

        b64_image = None
        if isinstance(payload, dict):
            results = payload.get('data') or [{}]
            if isinstance(results, list) and isinstance(results[0], dict):
                b64_image = results[0].get('b64_json')

        if not isinstance(b64_image, str) or not b64_image:
            raise NoImageReturned()

        return b64_image
