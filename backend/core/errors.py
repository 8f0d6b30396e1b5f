"""Error taxonomy for the transform pipeline.

Every error carries the HTTP status it maps to, so the proxy boundary can
normalize it into a ``{"error": message}`` body without a lookup table.
"""
from typing import Optional


class TransformError(Exception):
    """Base class for all pipeline errors."""

    status_code: int = 500
    default_message: str = "Failed to generate image."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class BadRequest(TransformError):
    status_code = 400
    default_message = "Bad request."


class InvalidImage(BadRequest):
    default_message = "Invalid image data URL."


class PayloadTooLarge(TransformError):
    status_code = 413
    default_message = "Image too large. Please upload ≤ 4MB."


class ConfigError(TransformError):
    status_code = 500
    default_message = "Server not configured: OPENAI_API_KEY missing."


class MethodNotAllowed(TransformError):
    status_code = 405
    default_message = "Method not allowed. Use POST."


class UpstreamError(TransformError):
    status_code = 502
    default_message = "Upstream image API error."


class UpstreamProtocolError(UpstreamError):
    """Upstream answered with something other than JSON."""


class NoImageReturned(UpstreamError):
    default_message = "No image returned from model."


# Client-side intake errors. They block submission and never reach the network.

class ValidationError(BadRequest):
    default_message = "Invalid image file."


class UnsupportedType(ValidationError):
    default_message = "Please choose a PNG, JPEG, or WEBP image."


class TooLarge(ValidationError):
    status_code = 413
    default_message = "Please use an image up to ~6MB."


class DecodeError(ValidationError):
    default_message = "Could not read the image. Please try another file."
