import base64
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

import httpx

from core.data_url import split_data_url
from core.errors import TransformError
from models.analytics import UsageEventType
from models.transform import SelectedFile, TransformRequest, TransformResult, UploadedImage
from services.intake_service import JPEG_QUALITY, MAX_SIDE, resize_and_encode, validate

# Beacons never block the transform path
_beacon_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="beacon")

class TransformClient:
    """HTTP client for the transform proxy"""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: Optional[httpx.Client] = None,
        timeout: float = 180.0,
        send_analytics: bool = True
    ):
        self.base_url = base_url.rstrip('/')
        self.http_client = http_client or httpx.Client(timeout=timeout)
        self.send_analytics = send_analytics

    @property
    def transform_url(self) -> str:
        return f"{self.base_url}/api/transform"

    @property
    def analytics_url(self) -> str:
        return f"{self.base_url}/api/analytics"

    def submit(self, image_data_url: str) -> TransformResult:
        """POST an encoded image to the proxy and return the image or a readable error"""
        try:
            response = self.http_client.post(self.transform_url, json=TransformRequest(imageDataURL=image_data_url).model_dump())
        except httpx.HTTPError as error:
            return TransformResult(success=False, error=f"Could not reach the transform service: {error}")

        data = {}
        if "application/json" in response.headers.get("content-type", ""):
            try:
                data = response.json()
            except ValueError:
                data = {}
        if not isinstance(data, dict):
            data = {}

        image = data.get("image")
        error = data.get("error")
        if not response.is_success or not isinstance(image, str) or not image:
            return TransformResult(
                success=False,
                error=error if isinstance(error, str) and error else f"Failed to transform (status {response.status_code})."
            )

        return TransformResult(success=True, image=image)

    def send_beacon(self) -> Optional[Future]:
        """Fire-and-forget usage beacon. The returned future never raises."""
        if not self.send_analytics:
            return None

        payload = {
            "type": UsageEventType.GENERATION.value,
            "ts": int(time.time() * 1000),
            "day": datetime.now(timezone.utc).strftime('%Y-%m-%d'),
        }
        return _beacon_executor.submit(self._post_beacon, payload)

    def _post_beacon(self, payload: dict) -> bool:
        try:
            self.http_client.post(self.analytics_url, json=payload)
            return True
        except Exception:
            return False

class TransformSession:
    """
    One user's intake flow: pick a file, transform it, save the result.

    At most one transform runs at a time per session. Each new attempt clears
    the previous result before anything else happens.
    """

    def __init__(self, client: TransformClient, max_side: int = MAX_SIDE, quality: float = JPEG_QUALITY):
        self.client = client
        self.max_side = max_side
        self.quality = quality
        self.file: Optional[UploadedImage] = None
        self.result: Optional[str] = None
        self.error: Optional[str] = None
        self._busy = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._busy.locked()

    def select(self, file: SelectedFile) -> bool:
        """Validate and keep a picked file. A rejected file leaves the current selection as is."""
        try:
            uploaded = validate(file)
        except TransformError as error:
            self.error = error.message
            return False

        self.error = None
        self.file = uploaded
        self.result = None
        return True

    def transform(self) -> TransformResult:
        if not self.file:
            self.error = "Upload an image first."
            return TransformResult(success=False, error=self.error)

        if not self._busy.acquire(blocking=False):
            return TransformResult(success=False, error="A transform is already in progress.")

        try:
            self.error = None
            self.result = None

            try:
                image_data_url = resize_and_encode(self.file.data, self.max_side, self.quality)
            except TransformError as error:
                self.error = error.message
                return TransformResult(success=False, error=self.error)

            result = self.client.submit(image_data_url)
            if not result.success:
                self.error = result.error or "Something went wrong."
                return result

            self.result = result.image
            self.client.send_beacon()
            return result
        finally:
            self._busy.release()

    def save_result(self, path: Union[str, Path]) -> Path:
        """Write the generated image to disk (the download action)"""
        if not self.result:
            raise ValueError("No result to save yet")

        _, payload = split_data_url(self.result)
        path = Path(path)
        path.write_bytes(base64.b64decode(payload))
        return path
