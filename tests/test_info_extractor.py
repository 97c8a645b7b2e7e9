from __future__ import annotations

import json
from pathlib import Path

import pytest
from PIL import Image

from image_glider.processors import InfoExtractor


def test_extract_basic_fields(make_image) -> None:
    path = make_image("photo.png", (64, 32), mode="RGBA", color=(1, 2, 3, 4))
    info = InfoExtractor().extract(path)

    assert info.file_name == "photo.png"
    assert (info.width, info.height) == (64, 32)
    assert info.format == "PNG"
    assert info.mode == "RGBA"
    assert info.bit_depth == 32
    assert info.color_space == "RGB"
    assert info.has_alpha is True
    assert info.file_size == path.stat().st_size
    assert info.has_metadata is False


def test_extract_exif_summary(tmp_path: Path) -> None:
    exif = Image.Exif()
    exif[0x010F] = "Maker"
    exif[0x0110] = "Model-1"
    path = tmp_path / "cam.jpg"
    Image.new("RGB", (8, 8)).save(path, exif=exif.tobytes(), dpi=(300, 300))

    info = InfoExtractor().extract(path)
    assert info.exif_summary["Make"] == "Maker"
    assert info.exif_summary["Model"] == "Model-1"
    assert info.has_metadata is True
    assert info.metadata_size > 0
    assert info.dpi == (300.0, 300.0)

    payload = json.loads(info.to_json())
    assert payload["dpi"] == [300.0, 300.0]
    assert payload["exif_summary"]["Make"] == "Maker"


def test_extract_unreadable_raises(tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.jpg"
    bogus.write_bytes(b"text")
    with pytest.raises(OSError):
        InfoExtractor().extract(bogus)


def test_batch_extract_skips_broken_and_non_images(batch_dir: Path) -> None:
    (batch_dir / "notes.txt").write_text("hello", encoding="utf-8")
    infos = InfoExtractor().batch_extract(batch_dir)
    assert [info.file_name for info in infos] == ["a.jpg", "b.jpg"]


def test_batch_extract_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        InfoExtractor().batch_extract(tmp_path / "missing")
