from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from image_glider.validators import PathValidator, ValueValidator


@pytest.mark.parametrize("name", ["CON.jpg", "a<b.png", "dir/evil.png", "..\\up.png", ""])
def test_validate_filename_rejects(name: str) -> None:
    with pytest.raises(ValueError):
        PathValidator.validate_filename(name)


def test_validate_filename_accepts_plain_name() -> None:
    assert PathValidator.validate_filename("0f3a.png") == "0f3a.png"


def test_detect_signature(tmp_path: Path) -> None:
    for fmt, name in [("PNG", "a.png"), ("JPEG", "a.jpg"), ("GIF", "a.gif"), ("WEBP", "a.webp"), ("BMP", "a.bmp")]:
        Image.new("RGB", (4, 4)).save(tmp_path / name, format=fmt)
        assert PathValidator.detect_signature(tmp_path / name) == fmt

    (tmp_path / "text.jpg").write_bytes(b"hello")
    assert PathValidator.detect_signature(tmp_path / "text.jpg") is None
    assert PathValidator.detect_signature(tmp_path / "missing.jpg") is None


def test_is_valid_image(tmp_path: Path) -> None:
    Image.new("RGB", (4, 4)).save(tmp_path / "ok.png")
    (tmp_path / "bad.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 8)
    (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

    assert PathValidator.is_valid_image(tmp_path / "ok.png", deep=True)
    assert PathValidator.is_valid_image(tmp_path / "bad.png")
    assert not PathValidator.is_valid_image(tmp_path / "bad.png", deep=True)
    assert not PathValidator.is_valid_image(tmp_path / "notes.txt")


def test_value_clamping() -> None:
    assert ValueValidator.clamp_quality(0) == 1
    assert ValueValidator.clamp_quality("150") == 100
    assert ValueValidator.clamp_compression_level(55.7) == 55
    assert ValueValidator.clamp(250, "hue") == 180
    assert ValueValidator.in_range(0.1, "watermark_scale")
    assert not ValueValidator.in_range(2.5, "watermark_scale")

