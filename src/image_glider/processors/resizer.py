"""リサイズとサムネイル生成。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from PIL import Image

from ..batch_runner import build_search_pattern, run_batch, suffixed_target
from ..codec import DEFAULT_QUALITY, open_image, save_image
from ..crop_geometry import CenteredCrop, resolve_crop
from ..results import BatchResult, OperationResult
from ..sizing import ResizeMode, resolve_target_size, thumbnail_size
from .base import PathLike, execute, rejected_batch, validation_failure

DEFAULT_THUMBNAIL_SIZE = 150
RESIZED_SUFFIX = "_resized"
THUMBNAIL_SUFFIX = "_thumb"


def resize_argument_error(
    width: Optional[int], height: Optional[int], mode: Union[ResizeMode, str]
) -> Optional[str]:
    """リサイズ引数の問題を文字列で返す。問題がなければ None。"""
    try:
        resize_mode = ResizeMode.parse(mode)
    except ValueError as e:
        return str(e)
    if any(v is not None and v <= 0 for v in (width, height)):
        return f"幅と高さは1以上で指定してください: {width}x{height}"
    if resize_mode is ResizeMode.CROP and (width is None or height is None):
        return "切り抜きモードでは幅と高さの両方を指定する必要があります"
    return None


def thumbnail_argument_error(max_size: int) -> Optional[str]:
    if max_size <= 0:
        return f"サムネイルサイズは1以上が必要です: {max_size}"
    return None


class ImageResizer:
    """モード指定のリサイズと長辺基準のサムネイル生成。"""

    def __init__(self, resample: Image.Resampling = Image.Resampling.LANCZOS) -> None:
        self.resample = resample

    def resize(
        self,
        source_path: PathLike,
        target_path: PathLike,
        width: Optional[int] = None,
        height: Optional[int] = None,
        mode: Union[ResizeMode, str] = ResizeMode.KEEP_ASPECT_RATIO,
        quality: int = DEFAULT_QUALITY,
    ) -> OperationResult:
        """画像をリサイズして保存する。

        CROP モードは目標を覆うサイズへ拡縮した後、中央を目標サイズで切り抜く。
        """
        error = resize_argument_error(width, height, mode)
        if error:
            return validation_failure(source_path, target_path, error, label="リサイズ")
        resize_mode = ResizeMode.parse(mode)

        def _action(source: Path, target: Path) -> None:
            with open_image(source) as decoded:
                size = resolve_target_size(decoded.width, decoded.height, width, height, resize_mode)
                resized = decoded.image.resize(size.as_tuple(), self.resample)
                if resize_mode is ResizeMode.CROP:
                    assert width is not None and height is not None
                    rect = resolve_crop(size.width, size.height, CenteredCrop(width, height))
                    resized = resized.crop(rect.as_box())
                save_image(decoded.with_image(resized), target, quality)

        return execute(source_path, target_path, _action, label="リサイズ")

    def thumbnail(
        self,
        source_path: PathLike,
        target_path: PathLike,
        max_size: int = DEFAULT_THUMBNAIL_SIZE,
        quality: int = DEFAULT_QUALITY,
    ) -> OperationResult:
        """長辺が max_size になるサムネイルを作る。"""
        error = thumbnail_argument_error(max_size)
        if error:
            return validation_failure(source_path, target_path, error, label="サムネイル生成")

        def _action(source: Path, target: Path) -> None:
            with open_image(source) as decoded:
                size = thumbnail_size(decoded.width, decoded.height, max_size)
                thumb = decoded.image.resize(size.as_tuple(), self.resample)
                save_image(decoded.with_image(thumb), target, quality)

        return execute(source_path, target_path, _action, label="サムネイル生成")

    def process_image(
        self,
        source_path: PathLike,
        target_path: PathLike,
        quality: int = DEFAULT_QUALITY,
    ) -> OperationResult:
        """サイズを変えずに再エンコードする。"""
        return self.resize(source_path, target_path, quality=quality)

    def batch_resize(
        self,
        source_dir: PathLike,
        output_dir: PathLike,
        width: Optional[int] = None,
        height: Optional[int] = None,
        mode: Union[ResizeMode, str] = ResizeMode.KEEP_ASPECT_RATIO,
        quality: int = DEFAULT_QUALITY,
        extension: Optional[str] = None,
        **batch_options,
    ) -> BatchResult:
        error = resize_argument_error(width, height, mode)
        if error:
            return rejected_batch(error, label="一括リサイズ")
        return run_batch(
            source_dir,
            output_dir,
            build_search_pattern(extension),
            lambda s, t: self.resize(s, t, width, height, mode, quality),
            suffixed_target(RESIZED_SUFFIX),
            empty_is_error=False,
            label="一括リサイズ",
            **batch_options,
        )

    def batch_thumbnail(
        self,
        source_dir: PathLike,
        output_dir: PathLike,
        max_size: int = DEFAULT_THUMBNAIL_SIZE,
        quality: int = DEFAULT_QUALITY,
        extension: Optional[str] = None,
        **batch_options,
    ) -> BatchResult:
        error = thumbnail_argument_error(max_size)
        if error:
            return rejected_batch(error, label="一括サムネイル生成")
        return run_batch(
            source_dir,
            output_dir,
            build_search_pattern(extension),
            lambda s, t: self.thumbnail(s, t, max_size, quality),
            suffixed_target(THUMBNAIL_SUFFIX),
            empty_is_error=False,
            label="一括サムネイル生成",
            **batch_options,
        )
