from pydantic import BaseModel
from typing import Optional, Dict, Any

class TransformRequest(BaseModel):
    imageDataURL: str  # data:<mime>;base64,<payload>

class TransformResponse(BaseModel):
    image: str  # data:image/png;base64,<b64>

class ErrorResponse(BaseModel):
    error: str

class TransformResult(BaseModel):
    success: bool
    image: Optional[str] = None
    error: Optional[str] = None

class SelectedFile(BaseModel):
    """A file picked by the user, before validation"""
    name: str
    mime_type: str  # as declared by the picker, not sniffed
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

class UploadedImage(BaseModel):
    data: bytes
    mime_type: str
    size: int

class DecodedImage(BaseModel):
    data: bytes
    mime_type: str
    filename: str

class ProxyResponse(BaseModel):
    status_code: int
    body: Optional[Dict[str, Any]] = None
    headers: Dict[str, str] = {}
