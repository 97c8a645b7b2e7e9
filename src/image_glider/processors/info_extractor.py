"""画像情報（サイズ・形式・色空間・メタデータ・EXIF要約）の取得。"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from PIL import ExifTags, Image

from ..batch_runner import discover_source_files
from ..codec import open_image
from ..validators import PathValidator
from .base import PathLike

_BIT_DEPTHS = {
    "1": 1, "L": 8, "P": 8, "LA": 16, "PA": 16, "RGB": 24, "YCbCr": 24, "LAB": 24, "HSV": 24,
    "RGBA": 32, "CMYK": 32, "I": 32, "F": 32, "I;16": 16, "I;16B": 16, "I;16L": 16,
}
_COLOR_SPACES = {
    "1": "Bilevel", "L": "Grayscale", "LA": "Grayscale", "I": "Grayscale", "I;16": "Grayscale",
    "P": "Palette", "PA": "Palette", "RGB": "RGB", "RGBA": "RGB", "CMYK": "CMYK",
    "YCbCr": "YCbCr", "LAB": "Lab", "HSV": "HSV",
}
_FORMAT_COMPRESSION = {
    "JPEG": "JPEG (DCT)",
    "PNG": "Deflate",
    "GIF": "LZW",
    "BMP": "None",
    "WEBP": "WebP",
    "AVIF": "AV1",
}
_EXIF_SUMMARY_BASE = ("Make", "Model", "DateTime")
_EXIF_SUMMARY_IFD = ("ISOSpeedRatings", "FNumber", "ExposureTime", "FocalLength")


@dataclass(frozen=True)
class ImageInfo:
    file_path: str
    file_name: str
    file_size: int
    width: int
    height: int
    format: Optional[str]
    mode: str
    bit_depth: int
    color_space: str
    has_alpha: bool
    compression: Optional[str]
    dpi: Optional[tuple[float, float]]
    has_metadata: bool
    metadata_size: int
    created_at: str
    modified_at: str
    exif_summary: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["dpi"] = list(self.dpi) if self.dpi else None
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)


class InfoExtractor:
    def extract(self, path: PathLike) -> ImageInfo:
        """画像情報を取得する。読めない画像は OSError 系の例外。"""
        path = Path(path)
        stat = path.stat()
        with open_image(path) as decoded:
            img = decoded.image
            dpi = img.info.get("dpi")
            return ImageInfo(
                file_path=str(path.resolve()),
                file_name=path.name,
                file_size=stat.st_size,
                width=img.width,
                height=img.height,
                format=decoded.format,
                mode=img.mode,
                bit_depth=_BIT_DEPTHS.get(img.mode, 8 * len(img.getbands())),
                color_space=_COLOR_SPACES.get(img.mode, img.mode),
                has_alpha="A" in img.getbands() or "transparency" in img.info,
                compression=_describe_compression(img, decoded.format),
                dpi=(float(dpi[0]), float(dpi[1])) if dpi else None,
                has_metadata=decoded.has_metadata,
                metadata_size=decoded.metadata_size(),
                created_at=datetime.fromtimestamp(stat.st_ctime).isoformat(timespec="seconds"),
                modified_at=datetime.fromtimestamp(stat.st_mtime).isoformat(timespec="seconds"),
                exif_summary=_exif_summary(img),
            )

    def batch_extract(self, directory: PathLike, pattern: str = "*", recursive: bool = False) -> list[ImageInfo]:
        """ディレクトリ内の画像情報をまとめて取得する。読めないファイルは読み飛ばす。"""
        directory = Path(directory)
        if not directory.is_dir():
            raise FileNotFoundError(f"ディレクトリが存在しません: {directory}")

        infos = []
        for path in discover_source_files(directory, pattern, recursive=recursive):
            if not PathValidator.is_valid_image(path):
                continue
            try:
                infos.append(self.extract(path))
            except (OSError, ValueError, Image.DecompressionBombError) as e:
                logger.warning(f"画像情報を取得できません: {path.name}: {e}")
        return infos


def _describe_compression(img: Image.Image, fmt: Optional[str]) -> Optional[str]:
    compression = img.info.get("compression")
    if isinstance(compression, str):
        return compression
    if fmt == "WEBP" and img.info.get("lossless"):
        return "WebP (lossless)"
    return _FORMAT_COMPRESSION.get(fmt or "")


def _exif_summary(img: Image.Image) -> dict[str, str]:
    try:
        exif = img.getexif()
    except (OSError, SyntaxError, ValueError):
        return {}
    if not exif:
        return {}

    summary: dict[str, str] = {}
    for name in _EXIF_SUMMARY_BASE:
        value = exif.get(ExifTags.Base[name].value)
        if value is not None:
            summary[name] = str(value).strip("\x00 ")

    ifd = exif.get_ifd(ExifTags.IFD.Exif)
    for name in _EXIF_SUMMARY_IFD:
        value = ifd.get(ExifTags.Base[name].value)
        if value is not None:
            summary[name] = str(value)
    return summary
