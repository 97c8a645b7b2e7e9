"""
Format conversion endpoint.
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile

from ...processors import FormatConverter
from ...validators import ValueValidator
from ..file_service import FileService, get_file_service
from ..models import ApiResponse

router = APIRouter()


@router.post("", response_model=ApiResponse)
async def convert_image(
    file: UploadFile = File(...),
    file_ext: str = Form(...),
    quality: int = Form(90),
    service: FileService = Depends(get_file_service),
):
    """Convert the uploaded image to the format named by file_ext."""
    target_ext = service.normalize_extension(file_ext)
    quality = ValueValidator.clamp_quality(quality)
    return await service.process(
        file,
        lambda s, t: FormatConverter().convert(s, t, quality),
        target_extension=target_ext,
    )
