"""
Resize and thumbnail endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ...processors import ImageResizer
from ...processors.resizer import DEFAULT_THUMBNAIL_SIZE
from ...sizing import ResizeMode
from ...validators import ValueValidator
from ..file_service import FileService, get_file_service
from ..models import ApiError, ApiResponse

router = APIRouter()


@router.post("", response_model=ApiResponse)
async def resize_image(
    file: UploadFile = File(...),
    width: Optional[int] = Form(None),
    height: Optional[int] = Form(None),
    resize_mode: str = Form("keep"),
    quality: int = Form(90),
    service: FileService = Depends(get_file_service),
):
    try:
        mode = ResizeMode.parse(resize_mode)
    except ValueError as e:
        raise ApiError(400, str(e))
    quality = ValueValidator.clamp_quality(quality)
    return await service.process(file, lambda s, t: ImageResizer().resize(s, t, width, height, mode, quality))


@router.post("/thumbnail", response_model=ApiResponse)
async def create_thumbnail(
    file: UploadFile = File(...),
    max_size: int = Form(DEFAULT_THUMBNAIL_SIZE),
    quality: int = Form(90),
    service: FileService = Depends(get_file_service),
):
    quality = ValueValidator.clamp_quality(quality)
    return await service.process(file, lambda s, t: ImageResizer().thumbnail(s, t, max_size, quality))
