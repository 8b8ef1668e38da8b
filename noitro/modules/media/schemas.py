from typing import Optional

from noitro.core.schemas import CamelModel, Envelope

class LocalUpload(CamelModel):
    filename: str
    url: str
    size: int
    type: str

class LocalUploadResponse(Envelope):
    message: str
    data: LocalUpload

class CloudUploadResponse(Envelope):
    url: str
    public_id: str
    size: int
    format: str

class UploadDelete(CamelModel):
    filename: Optional[str] = None
    public_id: Optional[str] = None
