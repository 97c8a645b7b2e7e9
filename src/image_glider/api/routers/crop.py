"""
Crop endpoints: absolute, centered and percentage based.
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile

from ...crop_geometry import AbsoluteCrop, CenteredCrop, CropIntent, PercentCrop
from ...processors import ImageCropper
from ...validators import ValueValidator
from ..file_service import FileService, get_file_service
from ..models import ApiResponse

router = APIRouter()


async def _crop(service: FileService, file: UploadFile, intent: CropIntent, quality: int) -> ApiResponse:
    quality = ValueValidator.clamp_quality(quality)
    return await service.process(file, lambda s, t: ImageCropper().crop(s, t, intent, quality))


@router.post("", response_model=ApiResponse)
async def crop_image(
    file: UploadFile = File(...),
    x: int = Form(...),
    y: int = Form(...),
    width: int = Form(...),
    height: int = Form(...),
    quality: int = Form(90),
    service: FileService = Depends(get_file_service),
):
    return await _crop(service, file, AbsoluteCrop(x, y, width, height), quality)


@router.post("/center", response_model=ApiResponse)
async def crop_center(
    file: UploadFile = File(...),
    width: int = Form(...),
    height: int = Form(...),
    quality: int = Form(90),
    service: FileService = Depends(get_file_service),
):
    return await _crop(service, file, CenteredCrop(width, height), quality)


@router.post("/percent", response_model=ApiResponse)
async def crop_percent(
    file: UploadFile = File(...),
    x: float = Form(...),
    y: float = Form(...),
    width: float = Form(...),
    height: float = Form(...),
    quality: int = Form(90),
    service: FileService = Depends(get_file_service),
):
    return await _crop(service, file, PercentCrop(x, y, width, height), quality)
