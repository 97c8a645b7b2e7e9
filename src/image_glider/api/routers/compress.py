"""
Compression endpoint.
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile

from ...processors import ImageCompressor
from ...processors.compressor import DEFAULT_COMPRESSION_LEVEL
from ..file_service import FileService, get_file_service
from ..models import ApiResponse

router = APIRouter()


@router.post("", response_model=ApiResponse)
async def compress_image(
    file: UploadFile = File(...),
    compression_level: int = Form(DEFAULT_COMPRESSION_LEVEL),
    preserve_metadata: bool = Form(False),
    service: FileService = Depends(get_file_service),
):
    return await service.process(
        file, lambda s, t: ImageCompressor().compress(s, t, compression_level, preserve_metadata)
    )
