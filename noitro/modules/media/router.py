from fastapi import APIRouter, Depends, File, Request, UploadFile
import logging

from noitro.core.schemas import MessageResponse
from noitro.modules.media.schemas import CloudUploadResponse, LocalUploadResponse, UploadDelete
from noitro.modules.media.service import MediaService

logger = logging.getLogger(__name__)

router = APIRouter()

def get_media_service(request: Request) -> MediaService:
    return MediaService(request.app.state.settings, request.app.state.object_storage)

@router.post("/upload", response_model=LocalUploadResponse)
async def upload_image(
    image: UploadFile = File(None),
    media_service: MediaService = Depends(get_media_service),
):
    """Upload an image to local disk"""
    data = await media_service.upload_local(image)
    return LocalUploadResponse(message="Upload hình ảnh thành công", data=data)

@router.post("/upload-cloud", response_model=CloudUploadResponse)
@router.post("/upload-cloudinary", response_model=CloudUploadResponse, include_in_schema=False)
async def upload_image_cloud(
    file: UploadFile = File(None),
    media_service: MediaService = Depends(get_media_service),
):
    """Upload an image to object storage"""
    return CloudUploadResponse(**await media_service.upload_cloud(file))

@router.delete("/upload", response_model=MessageResponse)
def delete_image(
    body: UploadDelete,
    media_service: MediaService = Depends(get_media_service),
):
    """Delete an uploaded image by local filename or storage public id"""
    if body.public_id:
        media_service.delete_cloud(body.public_id)
    else:
        media_service.delete_local(body.filename)
    return MessageResponse(message="Xóa hình ảnh thành công")
