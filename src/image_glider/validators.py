"""
入力値検証のためのユーティリティモジュール
"""
from pathlib import Path
from typing import Union

# ファイル先頭のマジックバイトと対応する形式
_SIGNATURES = (
    (b"\xff\xd8\xff", "JPEG"),
    (b"\x89PNG\r\n\x1a\n", "PNG"),
    (b"GIF87a", "GIF"),
    (b"GIF89a", "GIF"),
    (b"BM", "BMP"),
    (b"II*\x00", "TIFF"),
    (b"MM\x00*", "TIFF"),
)


class PathValidator:
    """パス検証クラス"""

    # Windowsの予約語
    WINDOWS_RESERVED_NAMES = {
        "CON", "PRN", "AUX", "NUL", "COM1", "COM2", "COM3", "COM4",
        "COM5", "COM6", "COM7", "COM8", "COM9", "LPT1", "LPT2",
        "LPT3", "LPT4", "LPT5", "LPT6", "LPT7", "LPT8", "LPT9"
    }

    # 無効な文字（Windows）
    INVALID_CHARS = '<>:"|?*'

    IMAGE_EXTENSIONS = {
        ".jpg", ".jpeg", ".jfif", ".png", ".gif", ".bmp", ".tiff", ".tif", ".webp", ".avif"
    }

    @classmethod
    def validate_filename(cls, filename: str) -> str:
        """ファイル名の妥当性を検証"""
        if not filename:
            raise ValueError("ファイル名が空です")

        name_part = Path(filename).stem
        if name_part.upper() in cls.WINDOWS_RESERVED_NAMES:
            raise ValueError(f"Windowsの予約語は使用できません: {name_part}")

        for char in cls.INVALID_CHARS:
            if char in filename:
                raise ValueError(f"ファイル名に無効な文字が含まれています: {char}")
        if "/" in filename or "\\" in filename:
            raise ValueError("ファイル名にパス区切り文字は使用できません")

        # 長さチェック（Windowsの制限）
        if len(filename) > 255:
            raise ValueError("ファイル名が長すぎます（最大255文字）")

        return filename

    @classmethod
    def is_image_file(cls, filepath: Union[str, Path]) -> bool:
        """画像ファイルかチェック（拡張子のみ）"""
        return Path(filepath).suffix.lower() in cls.IMAGE_EXTENSIONS

    @classmethod
    def detect_signature(cls, filepath: Union[str, Path]) -> Union[str, None]:
        """先頭バイトから画像形式を推定する。判別できなければ None"""
        try:
            with open(filepath, "rb") as fh:
                header = fh.read(16)
        except OSError:
            return None

        for magic, name in _SIGNATURES:
            if header.startswith(magic):
                return name
        if len(header) >= 12 and header[:4] == b"RIFF" and header[8:12] == b"WEBP":
            return "WEBP"
        if len(header) >= 12 and header[4:8] == b"ftyp" and header[8:12] in (b"avif", b"avis"):
            return "AVIF"
        return None

    @classmethod
    def is_valid_image(cls, filepath: Union[str, Path], deep: bool = False) -> bool:
        """拡張子とシグネチャで画像かを判定する。deep=True で実際に読み込んで確認"""
        path = Path(filepath)
        if not path.is_file() or not cls.is_image_file(path):
            return False
        if cls.detect_signature(path) is None:
            return False
        if not deep:
            return True

        from PIL import Image, UnidentifiedImageError

        try:
            with Image.open(path) as img:
                img.verify()
        except (OSError, UnidentifiedImageError, SyntaxError):
            return False
        return True


class ValueValidator:
    """数値検証クラス"""

    LIMITS = {
        "width": (1, 10000),
        "height": (1, 10000),
        "quality": (1, 100),
        "compression_level": (1, 100),
        "brightness": (-100, 100),
        "contrast": (-100, 100),
        "saturation": (-100, 100),
        "hue": (-180, 180),
        "gamma": (0.1, 3.0),
        "opacity": (0, 100),
        "watermark_scale": (0.1, 2.0),
        "font_size": (1, 1000),
    }

    @classmethod
    def clamp(cls, value: Union[int, float], name: str) -> float:
        """範囲外の値を上下限へ丸める"""
        min_val, max_val = cls.LIMITS[name]
        return max(min_val, min(max_val, value))

    @classmethod
    def clamp_quality(cls, value: Union[int, float, str]) -> int:
        """品質値を1-100へ丸める"""
        return int(cls.clamp(int(float(value)), "quality"))

    @classmethod
    def clamp_compression_level(cls, value: Union[int, float, str]) -> int:
        """圧縮レベルを1-100へ丸める"""
        return int(cls.clamp(int(float(value)), "compression_level"))

    @classmethod
    def in_range(cls, value: Union[int, float], name: str) -> bool:
        min_val, max_val = cls.LIMITS[name]
        return min_val <= value <= max_val

