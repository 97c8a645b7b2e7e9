"""単体処理と、それをディレクトリに適用する一括処理。"""

from .base import ImageProcessor
from .color_adjuster import ColorAdjuster
from .compressor import ImageCompressor
from .cropper import ImageCropper
from .format_converter import FormatConverter
from .info_extractor import ImageInfo, InfoExtractor
from .metadata_stripper import MetadataStripper, StripOptions
from .resizer import ImageResizer
from .watermark import WatermarkProcessor

__all__ = [
    "ColorAdjuster",
    "FormatConverter",
    "ImageCompressor",
    "ImageCropper",
    "ImageInfo",
    "ImageProcessor",
    "ImageResizer",
    "InfoExtractor",
    "MetadataStripper",
    "StripOptions",
    "WatermarkProcessor",
]
