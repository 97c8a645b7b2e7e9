"""
Watermark endpoints: text and image overlays.
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile

from ...anchor import AnchorPosition
from ...processors import WatermarkProcessor
from ...processors.watermark import DEFAULT_FONT_COLOR, DEFAULT_FONT_SIZE, DEFAULT_OPACITY
from ...validators import ValueValidator
from ..file_service import FileService, get_file_service
from ..models import ApiError, ApiResponse

router = APIRouter()


def _parse_position(position: str) -> AnchorPosition:
    try:
        return AnchorPosition.parse(position)
    except ValueError as e:
        raise ApiError(400, str(e))


@router.post("/text", response_model=ApiResponse)
async def add_text_watermark(
    file: UploadFile = File(...),
    text: str = Form(...),
    position: str = Form("BottomRight"),
    opacity: float = Form(DEFAULT_OPACITY),
    font_size: int = Form(DEFAULT_FONT_SIZE),
    font_color: str = Form(DEFAULT_FONT_COLOR),
    quality: int = Form(90),
    service: FileService = Depends(get_file_service),
):
    anchor = _parse_position(position)
    quality = ValueValidator.clamp_quality(quality)
    return await service.process(
        file,
        lambda s, t: WatermarkProcessor().add_text(s, t, text, anchor, opacity, font_size, font_color, quality),
    )


@router.post("/image", response_model=ApiResponse)
async def add_image_watermark(
    file: UploadFile = File(...),
    watermark: UploadFile = File(...),
    position: str = Form("BottomRight"),
    opacity: float = Form(DEFAULT_OPACITY),
    scale: float = Form(1.0),
    quality: int = Form(90),
    service: FileService = Depends(get_file_service),
):
    anchor = _parse_position(position)
    quality = ValueValidator.clamp_quality(quality)
    mark_path = await service.save_upload(watermark)
    try:
        return await service.process(
            file,
            lambda s, t: WatermarkProcessor().add_image(s, t, mark_path, anchor, opacity, scale, quality),
        )
    finally:
        service.delete(mark_path)
