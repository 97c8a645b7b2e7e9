"""テキスト透かし・画像透かしの合成。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from loguru import logger
from PIL import Image, ImageDraw, ImageFont

from ..anchor import DEFAULT_MARGIN, AnchorPosition, place
from ..batch_runner import build_search_pattern, run_batch, suffixed_target
from ..codec import DEFAULT_QUALITY, open_image, save_image
from ..results import BatchResult, OperationResult
from ..validators import ValueValidator
from .base import PathLike, execute, rejected_batch, validation_failure

WATERMARKED_SUFFIX = "_watermarked"
DEFAULT_FONT_SIZE = 24
DEFAULT_FONT_COLOR = "#FFFFFF"
DEFAULT_OPACITY = 50

# 見つかった順に使う。どれもなければ Pillow 内蔵フォント
_FONT_CANDIDATES = (
    "arial.ttf",
    "Arial.ttf",
    "DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
)


def load_font(size: int) -> ImageFont.ImageFont:
    """候補フォントを順に試し、最初に読めたものを返す。"""
    for candidate in _FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    logger.debug("TrueTypeフォントが見つからないため内蔵フォントを使用します")
    return ImageFont.load_default(size=size)


def parse_color(value: Optional[str]) -> tuple[int, int, int, int]:
    """`#RRGGBB` / `#AARRGGBB` を RGBA に変換する。解釈できない値は白。"""
    text = (value or "").strip().lstrip("#")
    try:
        if len(text) == 6:
            return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16), 255)
        if len(text) == 8:
            return (int(text[2:4], 16), int(text[4:6], 16), int(text[6:8], 16), int(text[0:2], 16))
    except ValueError:
        pass
    return (255, 255, 255, 255)


def text_argument_error(text: str, position: Union[AnchorPosition, str], font_size: int) -> Optional[str]:
    """テキスト透かしの引数の問題を返す。問題がなければ None。"""
    if not text or not text.strip():
        return "透かしテキストが空です"
    try:
        AnchorPosition.parse(position)
    except ValueError as e:
        return str(e)
    if font_size <= 0:
        return f"フォントサイズは1以上が必要です: {font_size}"
    return None


def image_argument_error(position: Union[AnchorPosition, str], scale: float) -> Optional[str]:
    if not ValueValidator.in_range(scale, "watermark_scale"):
        return f"透かしの縮尺は0.1から2.0の範囲で指定してください: {scale}"
    try:
        AnchorPosition.parse(position)
    except ValueError as e:
        return str(e)
    return None


class WatermarkProcessor:
    def __init__(self, margin: int = DEFAULT_MARGIN) -> None:
        self.margin = margin

    def add_text(
        self,
        source_path: PathLike,
        target_path: PathLike,
        text: str,
        position: Union[AnchorPosition, str] = AnchorPosition.BOTTOM_RIGHT,
        opacity: float = DEFAULT_OPACITY,
        font_size: int = DEFAULT_FONT_SIZE,
        font_color: str = DEFAULT_FONT_COLOR,
        quality: int = DEFAULT_QUALITY,
    ) -> OperationResult:
        """テキスト透かしを合成する。空のテキストは失敗。"""
        error = text_argument_error(text, position, font_size)
        if error:
            return validation_failure(source_path, target_path, error, label="テキスト透かし")
        anchor = AnchorPosition.parse(position)

        red, green, blue, base_alpha = parse_color(font_color)
        alpha = int(base_alpha * ValueValidator.clamp(opacity, "opacity") / 100)

        def _action(source: Path, target: Path) -> None:
            with open_image(source) as decoded:
                base = decoded.image.convert("RGBA")
                layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
                draw = ImageDraw.Draw(layer)
                font = load_font(font_size)
                left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
                x, y = place(base.width, base.height, right - left, bottom - top, anchor, self.margin)
                draw.text((x - left, y - top), text, font=font, fill=(red, green, blue, alpha))
                composed = _restore_mode(Image.alpha_composite(base, layer), decoded.image)
                save_image(decoded.with_image(composed), target, quality)

        return execute(source_path, target_path, _action, label="テキスト透かし")

    def add_image(
        self,
        source_path: PathLike,
        target_path: PathLike,
        watermark_path: PathLike,
        position: Union[AnchorPosition, str] = AnchorPosition.BOTTOM_RIGHT,
        opacity: float = DEFAULT_OPACITY,
        scale: float = 1.0,
        quality: int = DEFAULT_QUALITY,
    ) -> OperationResult:
        """画像透かしを縮尺・不透明度を適用して合成する。縮尺は0.1から2.0。"""
        error = image_argument_error(position, scale)
        if error:
            return validation_failure(source_path, target_path, error, label="画像透かし")
        anchor = AnchorPosition.parse(position)
        opacity = ValueValidator.clamp(opacity, "opacity")

        def _action(source: Path, target: Path) -> None:
            with open_image(watermark_path) as mark_decoded:
                mark = mark_decoded.image.convert("RGBA")
            if scale != 1.0:
                mark = mark.resize(
                    (max(1, int(mark.width * scale)), max(1, int(mark.height * scale))),
                    Image.Resampling.LANCZOS,
                )
            mark.putalpha(mark.getchannel("A").point(lambda a: int(a * opacity / 100)))

            with open_image(source) as decoded:
                base = decoded.image.convert("RGBA")
                x, y = place(base.width, base.height, mark.width, mark.height, anchor, self.margin)
                layer = Image.new("RGBA", base.size, (0, 0, 0, 0))
                # 負の座標ははみ出した分が切り取られる
                layer.paste(mark, (x, y))
                composed = _restore_mode(Image.alpha_composite(base, layer), decoded.image)
                save_image(decoded.with_image(composed), target, quality)

        return execute(source_path, target_path, _action, label="画像透かし")

    def batch_text(
        self,
        source_dir: PathLike,
        output_dir: PathLike,
        text: str,
        position: Union[AnchorPosition, str] = AnchorPosition.BOTTOM_RIGHT,
        opacity: float = DEFAULT_OPACITY,
        font_size: int = DEFAULT_FONT_SIZE,
        font_color: str = DEFAULT_FONT_COLOR,
        quality: int = DEFAULT_QUALITY,
        extension: Optional[str] = None,
        **batch_options,
    ) -> BatchResult:
        error = text_argument_error(text, position, font_size)
        if error:
            return rejected_batch(error, label="一括テキスト透かし")
        return run_batch(
            source_dir,
            output_dir,
            build_search_pattern(extension),
            lambda s, t: self.add_text(s, t, text, position, opacity, font_size, font_color, quality),
            suffixed_target(WATERMARKED_SUFFIX),
            empty_is_error=True,
            label="一括テキスト透かし",
            **batch_options,
        )

    def batch_image(
        self,
        source_dir: PathLike,
        output_dir: PathLike,
        watermark_path: PathLike,
        position: Union[AnchorPosition, str] = AnchorPosition.BOTTOM_RIGHT,
        opacity: float = DEFAULT_OPACITY,
        scale: float = 1.0,
        quality: int = DEFAULT_QUALITY,
        extension: Optional[str] = None,
        **batch_options,
    ) -> BatchResult:
        error = image_argument_error(position, scale)
        if error:
            return rejected_batch(error, label="一括画像透かし")
        return run_batch(
            source_dir,
            output_dir,
            build_search_pattern(extension),
            lambda s, t: self.add_image(s, t, watermark_path, position, opacity, scale, quality),
            suffixed_target(WATERMARKED_SUFFIX),
            empty_is_error=True,
            label="一括画像透かし",
            **batch_options,
        )


def _restore_mode(composed: Image.Image, original: Image.Image) -> Image.Image:
    if "A" in original.getbands() or "transparency" in original.info:
        return composed
    if original.mode == "L":
        return composed.convert("L")
    return composed.convert("RGB")
