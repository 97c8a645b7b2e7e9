"""切り抜き（絶対座標・パーセント・中央）。"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..batch_runner import build_search_pattern, run_batch, same_name_target
from ..codec import DEFAULT_QUALITY, open_image, save_image
from ..crop_geometry import AbsoluteCrop, CenteredCrop, CropIntent, PercentCrop, resolve_crop
from ..results import BatchResult, OperationResult
from .base import PathLike, execute


class ImageCropper:
    """切り抜き指定を解決して保存する。出力ファイル名は元と同じ。"""

    def crop(self, source_path: PathLike, target_path: PathLike, intent: CropIntent, quality: int = DEFAULT_QUALITY) -> OperationResult:
        def _action(source: Path, target: Path) -> None:
            with open_image(source) as decoded:
                rect = resolve_crop(decoded.width, decoded.height, intent)
                cropped = decoded.image.crop(rect.as_box())
                save_image(decoded.with_image(cropped), target, quality)

        return execute(source_path, target_path, _action, label="切り抜き")

    def crop_absolute(
        self, source_path: PathLike, target_path: PathLike, x: int, y: int, width: int, height: int,
        quality: int = DEFAULT_QUALITY,
    ) -> OperationResult:
        return self.crop(source_path, target_path, AbsoluteCrop(x, y, width, height), quality)

    def crop_percent(
        self, source_path: PathLike, target_path: PathLike, x: float, y: float, width: float, height: float,
        quality: int = DEFAULT_QUALITY,
    ) -> OperationResult:
        return self.crop(source_path, target_path, PercentCrop(x, y, width, height), quality)

    def crop_center(
        self, source_path: PathLike, target_path: PathLike, width: int, height: int,
        quality: int = DEFAULT_QUALITY,
    ) -> OperationResult:
        return self.crop(source_path, target_path, CenteredCrop(width, height), quality)

    def process_image(self, source_path: PathLike, target_path: PathLike, quality: int = DEFAULT_QUALITY) -> OperationResult:
        """全体を切り抜く（＝そのまま再エンコードする）。"""
        return self.crop(source_path, target_path, PercentCrop(0, 0, 100, 100), quality)

    def batch_crop(
        self,
        source_dir: PathLike,
        output_dir: PathLike,
        intent: CropIntent,
        quality: int = DEFAULT_QUALITY,
        extension: Optional[str] = None,
        **batch_options,
    ) -> BatchResult:
        return run_batch(
            source_dir,
            output_dir,
            build_search_pattern(extension),
            lambda s, t: self.crop(s, t, intent, quality),
            same_name_target,
            empty_is_error=True,
            label="一括切り抜き",
            **batch_options,
        )
