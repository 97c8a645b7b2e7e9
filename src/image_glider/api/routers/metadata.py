"""
Metadata stripping endpoint.
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile

from ...processors import MetadataStripper, StripOptions
from ...validators import ValueValidator
from ..file_service import FileService, get_file_service
from ..models import ApiResponse

router = APIRouter()


@router.post("/strip", response_model=ApiResponse)
async def strip_metadata(
    file: UploadFile = File(...),
    strip_all: bool = Form(True),
    strip_exif: bool = Form(True),
    strip_icc: bool = Form(False),
    strip_xmp: bool = Form(True),
    quality: int = Form(90),
    service: FileService = Depends(get_file_service),
):
    options = StripOptions(strip_all=strip_all, strip_exif=strip_exif, strip_icc=strip_icc, strip_xmp=strip_xmp)
    quality = ValueValidator.clamp_quality(quality)
    return await service.process(file, lambda s, t: MetadataStripper().strip(s, t, options, quality))
