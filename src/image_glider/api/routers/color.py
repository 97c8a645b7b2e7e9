"""
Color adjustment endpoint.
"""
from fastapi import APIRouter, Depends, File, Form, UploadFile

from ...processors import ColorAdjuster
from ...tone_curve import ToneAdjustment
from ...validators import ValueValidator
from ..file_service import FileService, get_file_service
from ..models import ApiResponse

router = APIRouter()


@router.post("/adjust", response_model=ApiResponse)
async def adjust_color(
    file: UploadFile = File(...),
    brightness: float = Form(0.0),
    contrast: float = Form(0.0),
    saturation: float = Form(0.0),
    hue: float = Form(0.0),
    gamma: float = Form(1.0),
    quality: int = Form(90),
    service: FileService = Depends(get_file_service),
):
    """Out of range values are clamped, never rejected."""
    adjustment = ToneAdjustment(brightness, contrast, saturation, hue, gamma).clamped()
    quality = ValueValidator.clamp_quality(quality)
    return await service.process(file, lambda s, t: ColorAdjuster().adjust(s, t, adjustment, quality))
