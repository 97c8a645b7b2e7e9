"""
画像一括処理ツールのコマンドラインインターフェース

各サブコマンドは単体処理（-s/-t）またはディレクトリ一括処理（-sd/-od）に対応します。
終了コードは成功時 0、失敗・引数エラー時 1 です。
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from loguru import logger

from . import __version__
from .anchor import AnchorPosition
from .batch_runner import build_search_pattern
from .crop_geometry import AbsoluteCrop, CenteredCrop, CropIntent, PercentCrop
from .processors import (
    ColorAdjuster,
    FormatConverter,
    ImageCompressor,
    ImageCropper,
    ImageResizer,
    InfoExtractor,
    MetadataStripper,
    StripOptions,
    WatermarkProcessor,
)
from .results import BatchResult, OperationResult
from .runtime_logging import console_level_for, create_run_log_artifacts, setup_logging, write_run_summary
from .settings_store import ToolSettingsStore
from .tone_curve import ToneAdjustment
from .validators import ValueValidator

EXIT_OK = 0
EXIT_FAILURE = 1


class _CliArgumentParser(argparse.ArgumentParser):
    """引数エラーを終了コード 1 で報告するパーサー。"""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"引数エラー: {message}\n")


# ----------------------------------------------------------------------
# 引数定義
# ----------------------------------------------------------------------

def _single_parent() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(add_help=False)
    p.add_argument("-s", "--source", required=True, type=Path, help="入力ファイル")
    p.add_argument("-t", "--target", required=True, type=Path, help="出力ファイル")
    return p


def _batch_parent() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(add_help=False)
    p.add_argument("-sd", "--source-dir", type=Path, default=Path.cwd(), help="入力フォルダー")
    p.add_argument("-od", "--output-dir", type=Path, default=Path.cwd() / "output", help="出力フォルダー")
    p.add_argument(
        "-se", "--source-ext", "--extension", dest="source_ext", default=None,
        help="対象拡張子 (例: jpg) またはパターン (例: *.png)。省略時は全ファイル",
    )
    p.add_argument("--recursive", action="store_true", default=None, help="サブフォルダーも処理する")
    p.add_argument("--workers", type=int, default=None, help="並列処理数")
    p.add_argument("--no-progress", action="store_true", help="進捗バーを表示しない")
    p.add_argument("--json", action="store_true", help="実行結果サマリーをJSONで標準出力へ出す")
    p.add_argument("--failures-file", type=Path, default=None, help="失敗ファイル一覧(JSON)の保存先")
    return p


def _quality_parent() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(add_help=False)
    p.add_argument("-q", "--quality", type=int, default=None, help="JPEG/WebP 品質 (1-100)")
    return p


def _resize_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("-w", "--width", type=int, default=None, help="目標幅(px)")
    p.add_argument("-H", "--height", type=int, default=None, help="目標高さ(px)")
    p.add_argument("-m", "--mode", default="keep", choices=["keep", "stretch", "crop"], help="リサイズモード")


def _crop_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--x", type=int, default=0, help="切り抜き開始X(px)")
    p.add_argument("--y", type=int, default=0, help="切り抜き開始Y(px)")
    p.add_argument("-w", "--width", type=int, default=None, help="切り抜き幅(px)")
    p.add_argument("-H", "--height", type=int, default=None, help="切り抜き高さ(px)")
    p.add_argument("-xp", "--x-percent", type=float, default=None, help="切り抜き開始X(%%)")
    p.add_argument("-yp", "--y-percent", type=float, default=None, help="切り抜き開始Y(%%)")
    p.add_argument("-wp", "--width-percent", type=float, default=None, help="切り抜き幅(%%)")
    p.add_argument("-hp", "--height-percent", type=float, default=None, help="切り抜き高さ(%%)")
    p.add_argument("-c", "--center", action="store_true", help="中央を切り抜く（幅と高さのみ指定）")


def _compress_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("-l", "--level", type=int, default=None, help="圧縮レベル (1-100、高いほど高品質)")
    p.add_argument("--preserve-meta", action="store_true", help="メタデータを保持する")


def _watermark_args(p: argparse.ArgumentParser) -> None:
    source = p.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", default=None, help="透かしテキスト")
    source.add_argument("-i", "--image", type=Path, default=None, help="透かし画像")
    p.add_argument("-p", "--position", default="BottomRight", help="配置位置 (TopLeft〜BottomRight の9方向)")
    p.add_argument("-o", "--opacity", type=float, default=None, help="不透明度 (0-100)")
    p.add_argument("-fs", "--font-size", type=int, default=None, help="フォントサイズ")
    p.add_argument("-fc", "--font-color", default=None, help="文字色 (#RRGGBB / #AARRGGBB)")
    p.add_argument("--scale", type=float, default=1.0, help="透かし画像の縮尺 (0.1-2.0)")


def _adjust_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--brightness", type=float, default=0.0, help="明るさ (-100〜100)")
    p.add_argument("--contrast", type=float, default=0.0, help="コントラスト (-100〜100)")
    p.add_argument("--saturation", type=float, default=0.0, help="彩度 (-100〜100)")
    p.add_argument("--hue", type=float, default=0.0, help="色相 (-180〜180)")
    p.add_argument("--gamma", type=float, default=1.0, help="ガンマ (0.1〜3.0)")


def _strip_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--all", dest="strip_all", action="store_true", help="すべてのメタデータを除去する（既定）")
    p.add_argument("--exif", action=argparse.BooleanOptionalAction, default=None, help="EXIFを除去する")
    p.add_argument("--icc", action=argparse.BooleanOptionalAction, default=None, help="ICCプロファイルを除去する")
    p.add_argument("--xmp", action=argparse.BooleanOptionalAction, default=None, help="XMPを除去する")


def _build_arg_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI use."""
    p = _CliArgumentParser(
        prog="image-glider",
        description="画像の形式変換・リサイズ・切り抜き・透かし・色調整を行うコマンドラインツール",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--verbose", "-v", action="count", default=0, help="詳細ログを増やす (重ね掛け可)")
    p.add_argument("--quiet", action="store_true", help="警告以上のみ表示する")
    p.add_argument("-ld", "--log-dir", type=Path, default=None, help="実行ログの保存先")
    p.add_argument("--no-log-file", action="store_true", help="実行ログをファイルへ保存しない")
    p.add_argument("--config", type=Path, default=None, help="設定ファイルのパス")

    sub = p.add_subparsers(dest="command", metavar="<command>", required=True)
    single, batch, quality = _single_parent(), _batch_parent(), _quality_parent()

    def add(name: str, help_text: str, parents: list, handler: Callable, extra: Optional[Callable] = None):
        cmd = sub.add_parser(
            name, help=help_text, description=help_text, parents=parents,
            formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        )
        if extra is not None:
            extra(cmd)
        cmd.set_defaults(handler=handler)
        return cmd

    add("convert", "画像形式を変換する（出力の拡張子で形式を決定）", [single, quality], _cmd_convert)
    add(
        "batch-convert", "フォルダー内の画像形式を一括変換する", [batch, quality], _cmd_batch_convert,
        lambda c: c.add_argument("-te", "--target-ext", required=True, help="出力拡張子 (例: png)"),
    )
    add("resize", "画像をリサイズする", [single, quality], _cmd_resize, _resize_args)
    add("batch-resize", "フォルダー内の画像を一括リサイズする", [batch, quality], _cmd_batch_resize, _resize_args)
    add(
        "thumbnail", "長辺を指定サイズにしたサムネイルを作る", [single, quality], _cmd_thumbnail,
        lambda c: c.add_argument("--max-size", type=int, default=None, help="サムネイルの長辺(px)"),
    )
    add(
        "batch-thumbnail", "フォルダー内の画像のサムネイルを一括作成する", [batch, quality], _cmd_batch_thumbnail,
        lambda c: c.add_argument("--max-size", type=int, default=None, help="サムネイルの長辺(px)"),
    )
    add("crop", "画像を切り抜く", [single, quality], _cmd_crop, _crop_args)
    add("batch-crop", "フォルダー内の画像を一括で切り抜く", [batch, quality], _cmd_batch_crop, _crop_args)
    add("compress", "圧縮レベルを指定して再保存する", [single], _cmd_compress, _compress_args)
    add("batch-compress", "フォルダー内の画像を一括圧縮する", [batch], _cmd_batch_compress, _compress_args)
    add("watermark", "テキストまたは画像の透かしを入れる", [single, quality], _cmd_watermark, _watermark_args)
    add("batch-watermark", "フォルダー内の画像に一括で透かしを入れる", [batch, quality], _cmd_batch_watermark, _watermark_args)
    add("adjust", "明るさ・コントラスト・彩度・色相・ガンマを調整する", [single, quality], _cmd_adjust, _adjust_args)
    add("batch-adjust", "フォルダー内の画像の色を一括調整する", [batch, quality], _cmd_batch_adjust, _adjust_args)
    add("strip-metadata", "メタデータを除去する", [single, quality], _cmd_strip, _strip_args)
    add("batch-strip-metadata", "フォルダー内の画像のメタデータを一括除去する", [batch, quality], _cmd_batch_strip, _strip_args)

    info = add("info", "画像情報を表示する", [], _cmd_info)
    info.add_argument("-s", "--source", required=True, type=Path, help="入力ファイル")
    info.add_argument("-j", "--json", action="store_true", help="JSONで出力する")
    info.add_argument("--output", type=Path, default=None, help="結果の保存先")

    batch_info = add("batch-info", "フォルダー内の画像情報をまとめて表示する", [], _cmd_batch_info)
    batch_info.add_argument("-sd", "--source-dir", type=Path, default=Path.cwd(), help="入力フォルダー")
    batch_info.add_argument("-p", "--pattern", default="*", help="対象パターン (例: *.jpg)")
    batch_info.add_argument("--recursive", action="store_true", help="サブフォルダーも対象にする")
    batch_info.add_argument("-j", "--json", action="store_true", help="JSONで出力する")
    batch_info.add_argument("--output", type=Path, default=None, help="結果の保存先")
    return p


# ----------------------------------------------------------------------
# 補助関数
# ----------------------------------------------------------------------

def _pick(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value


def _quality(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    return ValueValidator.clamp_quality(_pick(getattr(args, "quality", None), settings["quality"]))


def _batch_options(args: argparse.Namespace, settings: dict[str, Any]) -> dict[str, Any]:
    return {
        "recursive": bool(_pick(args.recursive, settings["recursive"])),
        "max_workers": max(1, int(_pick(args.workers, settings["max_workers"]))),
        "show_progress": bool(settings["show_progress"]) and not args.no_progress,
    }


def _crop_intent_from_args(args: argparse.Namespace) -> CropIntent:
    """切り抜き指定を組み立てる。幅と高さが足りなければ ValueError。"""
    percents = (args.x_percent, args.y_percent, args.width_percent, args.height_percent)
    if args.center:
        if args.width is None or args.height is None:
            raise ValueError("中央切り抜きには --width と --height が必要です")
        return CenteredCrop(args.width, args.height)
    if any(v is not None for v in percents):
        if args.width_percent is None or args.height_percent is None:
            raise ValueError("パーセント指定には --width-percent と --height-percent が必要です")
        return PercentCrop(args.x_percent or 0.0, args.y_percent or 0.0, args.width_percent, args.height_percent)
    if args.width is None or args.height is None:
        raise ValueError("切り抜きには --width と --height が必要です")
    return AbsoluteCrop(args.x, args.y, args.width, args.height)


def _strip_options_from_args(args: argparse.Namespace) -> StripOptions:
    selective = (args.exif, args.icc, args.xmp)
    if args.strip_all or all(v is None for v in selective):
        return StripOptions(strip_all=True)
    defaults = StripOptions(strip_all=False)
    return StripOptions(
        strip_all=False,
        strip_exif=_pick(args.exif, defaults.strip_exif),
        strip_icc=_pick(args.icc, defaults.strip_icc),
        strip_xmp=_pick(args.xmp, defaults.strip_xmp),
    )


def _tone_from_args(args: argparse.Namespace) -> ToneAdjustment:
    return ToneAdjustment(
        brightness=args.brightness,
        contrast=args.contrast,
        saturation=args.saturation,
        hue=args.hue,
        gamma=args.gamma,
    ).clamped()


def _report_single(result: OperationResult) -> int:
    if result.success:
        print(f"✔ {result.source_path} → {result.target_path}")
        return EXIT_OK
    print(f"❌ {result.source_path}: {result.error}", file=sys.stderr)
    if result.error_guidance:
        print(f"   {result.error_guidance}", file=sys.stderr)
    return EXIT_FAILURE


def _batch_status(result: BatchResult) -> str:
    if result.is_success:
        return "success"
    if result.success_count > 0:
        return "partial"
    return "failed"


def _build_cli_summary(
    *,
    command: str,
    status: str,
    source: Path,
    dest: Path,
    result: BatchResult,
    options: dict[str, Any],
    elapsed_seconds: float,
    failures_file: str,
) -> dict[str, Any]:
    """一括処理の実行結果サマリーを作る。"""
    return {
        "command": command,
        "status": status,
        "source": str(source),
        "dest": str(dest),
        "total_files": result.total_files,
        "processed_count": result.success_count,
        "failed_count": result.failure_count,
        "options": options,
        "elapsed_seconds": round(elapsed_seconds, 3),
        "failed_files": result.failed_files(),
        "failures_file": failures_file,
        "message": result.error_message or "",
    }


def _write_failures_file(path: Path, *, source: Path, dest: Path, failed_files: list[dict[str, str]]) -> None:
    """失敗ファイル一覧を JSON で保存する。"""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "source": str(source),
        "dest": str(dest),
        "failed_count": len(failed_files),
        "failed_files": failed_files,
    }
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, ensure_ascii=False, indent=2)


def _finish_batch(
    args: argparse.Namespace,
    result: BatchResult,
    started_at: float,
    options: dict[str, Any],
) -> int:
    failures_file = ""
    if args.failures_file is not None and result.failure_count:
        _write_failures_file(
            args.failures_file, source=args.source_dir, dest=args.output_dir, failed_files=result.failed_files()
        )
        failures_file = str(args.failures_file)

    summary = _build_cli_summary(
        command=args.command,
        status=_batch_status(result),
        source=args.source_dir,
        dest=args.output_dir,
        result=result,
        options=options,
        elapsed_seconds=time.perf_counter() - started_at,
        failures_file=failures_file,
    )
    args.summary = summary

    if args.json:
        print(json.dumps(summary, ensure_ascii=False, indent=2))
    else:
        if result.error_message:
            print(f"❌ {result.error_message}", file=sys.stderr)
        print(f"合計: {result.total_files} / 成功: {result.success_count} / 失敗: {result.failure_count}")
    return EXIT_OK if result.is_success else EXIT_FAILURE


def _write_text_output(text: str, output: Optional[Path]) -> None:
    if output is None:
        print(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    logger.info(f"結果を保存しました: {output}")


# ----------------------------------------------------------------------
# コマンド
# ----------------------------------------------------------------------

def _cmd_convert(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    return _report_single(FormatConverter().convert(args.source, args.target, _quality(args, settings)))


def _cmd_batch_convert(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    started = time.perf_counter()
    quality = _quality(args, settings)
    result = FormatConverter().batch_convert(
        args.source_dir, args.output_dir, args.target_ext, quality, args.source_ext, **_batch_options(args, settings)
    )
    return _finish_batch(args, result, started, {"target_ext": args.target_ext, "quality": quality})


def _cmd_resize(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    result = ImageResizer().resize(args.source, args.target, args.width, args.height, args.mode, _quality(args, settings))
    return _report_single(result)


def _cmd_batch_resize(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    started = time.perf_counter()
    quality = _quality(args, settings)
    result = ImageResizer().batch_resize(
        args.source_dir, args.output_dir, args.width, args.height, args.mode, quality, args.source_ext,
        **_batch_options(args, settings),
    )
    options = {"width": args.width, "height": args.height, "mode": args.mode, "quality": quality}
    return _finish_batch(args, result, started, options)


def _cmd_thumbnail(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    max_size = _pick(args.max_size, settings["thumbnail_size"])
    return _report_single(ImageResizer().thumbnail(args.source, args.target, max_size, _quality(args, settings)))


def _cmd_batch_thumbnail(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    started = time.perf_counter()
    quality = _quality(args, settings)
    max_size = _pick(args.max_size, settings["thumbnail_size"])
    result = ImageResizer().batch_thumbnail(
        args.source_dir, args.output_dir, max_size, quality, args.source_ext, **_batch_options(args, settings)
    )
    return _finish_batch(args, result, started, {"max_size": max_size, "quality": quality})


def _cmd_crop(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    intent = _crop_intent_from_args(args)
    return _report_single(ImageCropper().crop(args.source, args.target, intent, _quality(args, settings)))


def _cmd_batch_crop(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    started = time.perf_counter()
    intent = _crop_intent_from_args(args)
    quality = _quality(args, settings)
    result = ImageCropper().batch_crop(
        args.source_dir, args.output_dir, intent, quality, args.source_ext, **_batch_options(args, settings)
    )
    return _finish_batch(args, result, started, {"crop": repr(intent), "quality": quality})


def _cmd_compress(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    level = _pick(args.level, settings["compression_level"])
    return _report_single(ImageCompressor().compress(args.source, args.target, level, args.preserve_meta))


def _cmd_batch_compress(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    started = time.perf_counter()
    level = _pick(args.level, settings["compression_level"])
    result = ImageCompressor().batch_compress(
        args.source_dir, args.output_dir, level, args.preserve_meta, args.source_ext, **_batch_options(args, settings)
    )
    return _finish_batch(args, result, started, {"level": level, "preserve_meta": args.preserve_meta})


def _watermark_kwargs(args: argparse.Namespace, settings: dict[str, Any]) -> dict[str, Any]:
    return {
        "position": AnchorPosition.parse(args.position),
        "opacity": _pick(args.opacity, settings["watermark_opacity"]),
        "quality": _quality(args, settings),
    }


def _cmd_watermark(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    processor = WatermarkProcessor(margin=settings["watermark_margin"])
    common = _watermark_kwargs(args, settings)
    if args.text is not None:
        result = processor.add_text(
            args.source, args.target, args.text,
            font_size=_pick(args.font_size, settings["watermark_font_size"]),
            font_color=_pick(args.font_color, settings["watermark_font_color"]),
            **common,
        )
    else:
        result = processor.add_image(args.source, args.target, args.image, scale=args.scale, **common)
    return _report_single(result)


def _cmd_batch_watermark(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    started = time.perf_counter()
    processor = WatermarkProcessor(margin=settings["watermark_margin"])
    common = _watermark_kwargs(args, settings)
    batch_options = _batch_options(args, settings)
    if args.text is not None:
        result = processor.batch_text(
            args.source_dir, args.output_dir, args.text,
            font_size=_pick(args.font_size, settings["watermark_font_size"]),
            font_color=_pick(args.font_color, settings["watermark_font_color"]),
            extension=args.source_ext,
            **common,
            **batch_options,
        )
    else:
        result = processor.batch_image(
            args.source_dir, args.output_dir, args.image, scale=args.scale, extension=args.source_ext,
            **common,
            **batch_options,
        )
    options = {"position": common["position"].name, "opacity": common["opacity"], "quality": common["quality"]}
    return _finish_batch(args, result, started, options)


def _cmd_adjust(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    result = ColorAdjuster().adjust(args.source, args.target, _tone_from_args(args), _quality(args, settings))
    return _report_single(result)


def _cmd_batch_adjust(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    started = time.perf_counter()
    tone = _tone_from_args(args)
    quality = _quality(args, settings)
    result = ColorAdjuster().batch_adjust(
        args.source_dir, args.output_dir, tone, quality, args.source_ext, **_batch_options(args, settings)
    )
    options = {
        "brightness": tone.brightness,
        "contrast": tone.contrast,
        "saturation": tone.saturation,
        "hue": tone.hue,
        "gamma": tone.gamma,
        "quality": quality,
    }
    return _finish_batch(args, result, started, options)


def _cmd_strip(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    options = _strip_options_from_args(args)
    return _report_single(MetadataStripper().strip(args.source, args.target, options, _quality(args, settings)))


def _cmd_batch_strip(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    started = time.perf_counter()
    options = _strip_options_from_args(args)
    result = MetadataStripper().batch_strip(
        args.source_dir, args.output_dir, options, _quality(args, settings), args.source_ext,
        **_batch_options(args, settings),
    )
    return _finish_batch(args, result, started, {"strip_all": options.strip_all})


def _cmd_info(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    info = InfoExtractor().extract(args.source)
    if args.json:
        _write_text_output(info.to_json(), args.output)
    else:
        lines = [f"{key}: {value}" for key, value in info.to_dict().items()]
        _write_text_output("\n".join(lines), args.output)
    return EXIT_OK


def _cmd_batch_info(args: argparse.Namespace, settings: dict[str, Any]) -> int:
    infos = InfoExtractor().batch_extract(args.source_dir, build_search_pattern(args.pattern), args.recursive)
    if args.json:
        text = json.dumps([info.to_dict() for info in infos], ensure_ascii=False, indent=2)
    else:
        text = "\n".join(
            f"{info.file_name}: {info.width}x{info.height} {info.format} {info.file_size} bytes" for info in infos
        )
    _write_text_output(text, args.output)
    logger.info(f"画像情報を取得しました: {len(infos)} 件")
    return EXIT_OK


# ----------------------------------------------------------------------
# CLI Entry Point
# ----------------------------------------------------------------------

def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI を実行して終了コードを返す。"""
    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    settings = ToolSettingsStore(settings_path=args.config).load()
    console_level = console_level_for(args.verbose, args.quiet)

    artifacts = None
    if args.no_log_file:
        setup_logging(console_level=console_level)
    else:
        artifacts = create_run_log_artifacts(
            log_dir=args.log_dir,
            retention_days=settings["log_retention_days"],
            max_files=settings["log_max_files"],
        )
        setup_logging(console_level=console_level, log_file=artifacts.run_log_path)

    logger.debug(f"コマンド: {args.command}")
    try:
        exit_code = args.handler(args, settings)
    except ValueError as e:
        logger.error(f"引数エラー: {e}")
        print(f"引数エラー: {e}", file=sys.stderr)
        exit_code = EXIT_FAILURE
    except OSError as e:
        logger.error(f"実行失敗: {e}")
        print(f"実行失敗: {e}", file=sys.stderr)
        exit_code = EXIT_FAILURE

    summary = getattr(args, "summary", None)
    if artifacts is not None and summary is not None:
        write_run_summary(artifacts.summary_path, summary)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
