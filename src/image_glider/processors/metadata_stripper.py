"""メタデータ（EXIF / ICC / XMP / IPTC）の除去。"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..batch_runner import build_search_pattern, run_batch, same_name_target
from ..codec import DEFAULT_QUALITY, open_image, save_image
from ..results import BatchResult, OperationResult
from .base import PathLike, execute


@dataclass(frozen=True)
class StripOptions:
    """strip_all=True ならすべて除去。False のときは個別指定に従う。

    IPTC は保存時に書き戻せないため、個別指定でも常に除去される。
    """

    strip_all: bool = True
    strip_exif: bool = True
    strip_icc: bool = False
    strip_xmp: bool = True


class MetadataStripper:
    def strip(
        self,
        source_path: PathLike,
        target_path: PathLike,
        options: StripOptions = StripOptions(),
        quality: int = DEFAULT_QUALITY,
    ) -> OperationResult:
        def _action(source: Path, target: Path) -> None:
            with open_image(source) as decoded:
                if options.strip_all or options.strip_exif:
                    decoded.exif = None
                if options.strip_all or options.strip_icc:
                    decoded.icc_profile = None
                if options.strip_all or options.strip_xmp:
                    decoded.xmp = None
                decoded.iptc = None
                save_image(decoded, target, quality)

        return execute(source_path, target_path, _action, label="メタデータ除去")

    def process_image(self, source_path: PathLike, target_path: PathLike, quality: int = DEFAULT_QUALITY) -> OperationResult:
        return self.strip(source_path, target_path, StripOptions(), quality)

    def batch_strip(
        self,
        source_dir: PathLike,
        output_dir: PathLike,
        options: StripOptions = StripOptions(),
        quality: int = DEFAULT_QUALITY,
        extension: Optional[str] = None,
        **batch_options,
    ) -> BatchResult:
        return run_batch(
            source_dir,
            output_dir,
            build_search_pattern(extension),
            lambda s, t: self.strip(s, t, options, quality),
            same_name_target,
            empty_is_error=True,
            label="一括メタデータ除去",
            **batch_options,
        )
