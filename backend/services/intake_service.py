"""
Client-side intake: validate a picked file, then downsample and re-encode it
for transport.

Everything is normalized to JPEG on the way out, whatever the input format,
so payloads stay small and consistent.
"""
import io
import mimetypes
from pathlib import Path
from typing import Tuple, Union

from PIL import Image, ImageOps, UnidentifiedImageError

from core.data_url import encode_data_url
from core.errors import DecodeError, TooLarge, UnsupportedType
from models.transform import SelectedFile, UploadedImage

ALLOWED_IMAGE_TYPES = ["image/png", "image/jpeg", "image/webp"]
MAX_UPLOAD_SIZE = 6 * 1024 * 1024  # 6MB, before resizing
MAX_SIDE = 1024
JPEG_QUALITY = 0.9

# Older mime tables do not know .webp
mimetypes.add_type("image/webp", ".webp")

def load_file(path: Union[str, Path]) -> SelectedFile:
    """Read a file from disk, declaring its MIME type from the name like a browser picker does"""
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    return SelectedFile(
        name=path.name,
        mime_type=mime_type or "application/octet-stream",
        data=path.read_bytes()
    )

def validate(file: SelectedFile, max_size: int = MAX_UPLOAD_SIZE) -> UploadedImage:
    if file.mime_type not in ALLOWED_IMAGE_TYPES:
        raise UnsupportedType()
    if file.size > max_size:
        raise TooLarge()
    return UploadedImage(data=file.data, mime_type=file.mime_type, size=file.size)

def scaled_dimensions(width: int, height: int, max_side: int = MAX_SIDE) -> Tuple[int, int]:
    """Fit (width, height) inside a max_side square, keeping aspect ratio. Never upscales."""
    if width >= height:
        if width > max_side:
            return max_side, max(1, round(height * max_side / width))
    elif height > max_side:
        return max(1, round(width * max_side / height)), max_side
    return width, height

def resize_and_encode(data: bytes, max_side: int = MAX_SIDE, quality: float = JPEG_QUALITY) -> str:
    """
    Downsample an image and encode it as a JPEG data URL.

    Args:
        data: Raw bytes of a PNG, JPEG or WEBP image
        max_side: Longest side allowed in the output
        quality: JPEG quality between 0 and 1

    Returns:
        A ``data:image/jpeg;base64,...`` string

    Raises:
        DecodeError: if the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(data)) as source:
            source.load()
            # Respect EXIF rotation, as browsers do when drawing to a canvas
            image = ImageOps.exif_transpose(source)
    except Image.DecompressionBombError:
        raise DecodeError("Image dimensions are too large. Please use a smaller image.")
    except (UnidentifiedImageError, OSError, ValueError) as error:
        raise DecodeError(f"Could not read the image: {error}")

    width, height = scaled_dimensions(image.width, image.height, max_side)
    if (width, height) != image.size:
        image = image.resize((width, height), Image.Resampling.LANCZOS)

    if image.mode != "RGB":
        image = image.convert("RGB")

    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=min(95, max(1, round(quality * 100))))
    return encode_data_url(buffer.getvalue(), "image/jpeg")
