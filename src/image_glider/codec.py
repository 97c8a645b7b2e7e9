"""画像の読み込み・メタデータ保持・保存をまとめたコーデック層。

ピクセルのデコード/エンコードは Pillow に任せ、ここでは
エンコーダ設定の組み立て・メタデータの引き回し・一時ファイル経由の保存を扱う。
"""

from __future__ import annotations

import os
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from loguru import logger
from PIL import Image, IptcImagePlugin, UnidentifiedImageError

try:
    import pillow_avif  # noqa: F401

    AVIF_ENABLED = True
except ImportError:
    AVIF_ENABLED = False

from .validators import ValueValidator

DEFAULT_QUALITY = 90

# 透過を保存できない形式
_OPAQUE_FORMATS = {"JPEG"}
_EXIF_FORMATS = {"JPEG", "PNG", "WEBP", "TIFF", "AVIF"}
_ICC_FORMATS = {"JPEG", "PNG", "WEBP", "TIFF", "AVIF"}
_XMP_FORMATS = {"JPEG", "WEBP"}

_WINDOWS_RETRYABLE_CODES = {32, 33}


@dataclass
class DecodedImage:
    """読み込んだ画像と、保存時に書き戻すメタデータ。

    exif / icc_profile / xmp / iptc に None を設定すると、そのメタデータは保存されない。
    IPTC は Pillow で書き戻せないため、保存時には常に失われる。
    """

    image: Image.Image
    source_path: Path
    format: Optional[str] = None
    exif: Optional[bytes] = None
    icc_profile: Optional[bytes] = None
    xmp: Optional[bytes] = None
    iptc: Optional[dict] = None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def has_metadata(self) -> bool:
        return any(v for v in (self.exif, self.icc_profile, self.xmp, self.iptc))

    def metadata_size(self) -> int:
        size = sum(len(v) for v in (self.exif, self.icc_profile, self.xmp) if v)
        if self.iptc:
            size += sum(len(v) if isinstance(v, bytes) else 0 for v in self.iptc.values())
        return size

    def with_image(self, image: Image.Image) -> "DecodedImage":
        """メタデータを引き継いだまま画像だけ差し替えたコピーを返す。"""
        return DecodedImage(
            image=image,
            source_path=self.source_path,
            format=self.format,
            exif=self.exif,
            icc_profile=self.icc_profile,
            xmp=self.xmp,
            iptc=self.iptc,
        )


@contextmanager
def open_image(path: Union[str, Path]) -> Iterator[DecodedImage]:
    """画像を読み込み、ブロックを抜けたら確実に閉じる。

    Raises:
        FileNotFoundError: ファイルが存在しない
        UnidentifiedImageError: 画像として認識できない
        OSError: 読み込み中の破損など
    """
    path = Path(path)
    with Image.open(path) as img:
        img.load()
        decoded = DecodedImage(
            image=img,
            source_path=path,
            format=img.format,
            exif=img.info.get("exif"),
            icc_profile=img.info.get("icc_profile"),
            xmp=_read_xmp(img),
            iptc=_read_iptc(img),
        )
        logger.debug(f"読み込み: {path.name} ({img.format} {img.width}x{img.height} {img.mode})")
        yield decoded


def format_for_path(path: Union[str, Path]) -> str:
    """拡張子から Pillow の保存形式名を返す。未知の拡張子は ValueError。"""
    suffix = Path(path).suffix.lower()
    if suffix in (".jpg", ".jpeg", ".jfif"):
        return "JPEG"
    fmt = Image.registered_extensions().get(suffix)
    if not fmt:
        raise ValueError(f"未対応の出力形式です: {suffix or '(拡張子なし)'}")
    return fmt


def build_encoder_save_kwargs(
    output_format: str,
    quality: int = DEFAULT_QUALITY,
    *,
    compress_level: Optional[int] = None,
    webp_method: int = 6,
    avif_speed: int = 6,
) -> Dict[str, Any]:
    """出力形式に応じたエンコーダ設定を返す。"""
    fmt = output_format.upper()
    normalized_quality = ValueValidator.clamp_quality(quality)
    if fmt == "JPEG":
        return {
            "format": "JPEG",
            "quality": normalized_quality,
            "optimize": True,
            "progressive": True,
        }
    if fmt == "PNG":
        # PNGはロスレス。圧縮レベル指定がなければ optimize に任せる
        if compress_level is None:
            return {"format": "PNG", "optimize": True}
        return {"format": "PNG", "compress_level": max(0, min(9, int(compress_level)))}
    if fmt == "WEBP":
        return {
            "format": "WEBP",
            "quality": normalized_quality,
            "method": max(0, min(6, int(webp_method))),
        }
    if fmt == "AVIF":
        return {
            "format": "AVIF",
            "quality": normalized_quality,
            "speed": max(0, min(10, int(avif_speed))),
        }
    return {"format": fmt}


def save_image(
    source: Union[DecodedImage, Image.Image],
    output_path: Union[str, Path],
    quality: int = DEFAULT_QUALITY,
    *,
    compress_level: Optional[int] = None,
    keep_metadata: bool = True,
) -> Path:
    """画像を保存する（DecodedImage なら保持しているメタデータも付与）。

    形式は出力先の拡張子で決まる。保存は一時ファイル→置換で行う。
    """
    final_path = Path(output_path)
    output_format = format_for_path(final_path)
    save_kwargs = build_encoder_save_kwargs(output_format, quality, compress_level=compress_level)

    if isinstance(source, DecodedImage):
        save_img = _drop_info_metadata(source, keep_metadata)
        if keep_metadata:
            save_kwargs.update(_metadata_kwargs(source, output_format))
    else:
        save_img = source

    save_img = _prepare_mode(save_img, output_format)
    final_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        _save_with_atomic_replace(save_img, final_path, save_kwargs)
    except (OSError, ValueError, TypeError) as e:
        metadata_keys = {"exif", "icc_profile", "xmp"} & save_kwargs.keys()
        if not metadata_keys:
            raise
        # メタデータ付与に失敗した場合は、メタデータなし保存へフォールバックする。
        logger.warning(f"メタデータ付きの保存に失敗したため除外して再保存します: {final_path.name} ({e})")
        without_metadata = {k: v for k, v in save_kwargs.items() if k not in metadata_keys}
        _save_with_atomic_replace(save_img, final_path, without_metadata)

    logger.debug(f"保存: {final_path} ({output_format})")
    return final_path


def analyze_file_error(error: BaseException) -> Tuple[Optional[int], str, bool, str]:
    """ファイル処理の失敗を分類する。

    Returns:
        (error_code, error_category, retryable, guidance)
    """
    if isinstance(error, UnidentifiedImageError):
        return None, "unreadable", False, "画像として認識できません。ファイルの破損や形式を確認してください。"
    if isinstance(error, FileNotFoundError):
        return error.errno, "not_found", False, "ファイルまたはフォルダが見つかりません。パスを確認してください。"
    if isinstance(error, PermissionError):
        return error.errno, "permission_denied", False, "権限設定をご確認ください。"
    if isinstance(error, ValueError):
        return None, "validation", False, "指定値を確認してください。"
    if not isinstance(error, OSError):
        return None, "unknown", False, "再試行しても解決しない場合は画像ファイルの破損や権限を確認してください。"

    win_error = getattr(error, "winerror", None)
    if os.name == "nt" and win_error:
        code = int(win_error)
        if code in _WINDOWS_RETRYABLE_CODES:
            return (
                code,
                "sharing_violation",
                True,
                "他のアプリによるロックが疑われます。数秒後に再試行するか、関連アプリを閉じてください。",
            )
        if code == 206:
            return code, "path_too_long", False, "保存先のパスが長すぎる可能性があります。保存先を短いパスに変更してください。"

    code = error.errno if isinstance(error.errno, int) else None
    if code in {28, 122, 112}:
        return code, "no_space", False, "保存先の空き容量不足が疑われます。空き容量を確認してください。"
    if code in {13, 5, 30}:
        return code, "permission_denied", False, "権限設定をご確認ください。"
    if code is None:
        # Pillow のデコード失敗は errno を持たない OSError になる
        return None, "unreadable", False, "画像ファイルの破損が疑われます。"
    return code, "io_error", False, "再試行しても解決しない場合は保存先を変更してください。"


def _metadata_kwargs(decoded: DecodedImage, output_format: str) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {}
    if decoded.exif and output_format in _EXIF_FORMATS:
        kwargs["exif"] = decoded.exif
    if decoded.icc_profile and output_format in _ICC_FORMATS:
        kwargs["icc_profile"] = decoded.icc_profile
    if decoded.xmp and output_format in _XMP_FORMATS:
        kwargs["xmp"] = decoded.xmp
    return kwargs


def _drop_info_metadata(decoded: DecodedImage, keep_metadata: bool) -> Image.Image:
    # 一部のエンコーダは image.info のメタデータを暗黙に書き出すため、除外分を取り除く
    removed = set()
    if not keep_metadata or decoded.exif is None:
        removed.add("exif")
    if not keep_metadata or decoded.icc_profile is None:
        removed.add("icc_profile")
    if not keep_metadata or decoded.xmp is None:
        removed.update({"xmp", "XML:com.adobe.xmp"})
    if not keep_metadata or decoded.iptc is None:
        removed.add("photoshop")

    image = decoded.image
    if not removed & image.info.keys():
        return image
    image = image.copy()
    for key in removed:
        image.info.pop(key, None)
    return image


def _prepare_mode(image: Image.Image, output_format: str) -> Image.Image:
    if output_format in _OPAQUE_FORMATS:
        if image.mode in {"RGBA", "LA", "PA"} or (image.mode == "P" and "transparency" in image.info):
            # 透過を持つ画像は白背景へ合成して保存する
            rgba = image.convert("RGBA")
            background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
            background.alpha_composite(rgba)
            return background.convert("RGB")
        if image.mode not in {"RGB", "L", "CMYK"}:
            return image.convert("RGB")
    return image


def _build_temp_save_path(target_path: Path) -> Path:
    """同一ディレクトリ内の一時保存パスを作る。"""
    base_name = target_path.name or "glider_output"
    token = f"{os.getpid()}_{time.time_ns()}_{uuid.uuid4().hex[:10]}"
    return target_path.with_name(f".{base_name}.{token}.tmp")


def _save_with_atomic_replace(
    save_img: Image.Image,
    final_path: Path,
    save_kwargs: Dict[str, Any],
) -> None:
    """保存を一時ファイル→置換で実行し、壊れた最終ファイルを防ぐ。"""
    tmp_path = _build_temp_save_path(final_path)
    try:
        # 一時ファイルの拡張子に依存しないよう format を明示しておく
        save_img.save(tmp_path, **save_kwargs)
        os.replace(str(tmp_path), str(final_path))
    finally:
        if tmp_path.exists():
            try:
                tmp_path.unlink()
            except OSError:
                logger.warning(f"一時保存ファイルの削除に失敗: {tmp_path}")


def _read_xmp(img: Image.Image) -> Optional[bytes]:
    xmp = img.info.get("xmp") or img.info.get("XML:com.adobe.xmp")
    if isinstance(xmp, str):
        return xmp.encode("utf-8")
    return xmp


def _read_iptc(img: Image.Image) -> Optional[dict]:
    try:
        return IptcImagePlugin.getiptcinfo(img)
    except (OSError, SyntaxError, ValueError, TypeError):
        return None
