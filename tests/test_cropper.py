from __future__ import annotations

from pathlib import Path

from PIL import Image

from image_glider.crop_geometry import CenteredCrop
from image_glider.processors import ImageCropper


def test_crop_absolute(make_image, tmp_path: Path) -> None:
    src = make_image("a.png", (200, 100))
    result = ImageCropper().crop_absolute(src, tmp_path / "out.png", 10, 10, 50, 40)
    assert result.success
    with Image.open(tmp_path / "out.png") as img:
        assert img.size == (50, 40)


def test_crop_outside_bounds_is_validation_failure(make_image, tmp_path: Path) -> None:
    src = make_image("a.png", (100, 100))
    result = ImageCropper().crop_absolute(src, tmp_path / "out.png", 50, 50, 100, 100)
    assert not result.success
    assert result.error_category == "validation"
    assert not (tmp_path / "out.png").exists()


def test_crop_percent_and_center(make_image, tmp_path: Path) -> None:
    src = make_image("a.png", (200, 200))
    cropper = ImageCropper()

    assert cropper.crop_percent(src, tmp_path / "p.png", 25, 25, 50, 50).success
    assert cropper.crop_center(src, tmp_path / "c.png", 500, 80).success
    with Image.open(tmp_path / "p.png") as p, Image.open(tmp_path / "c.png") as c:
        assert p.size == (100, 100)
        assert c.size == (200, 80)


def test_crop_picks_correct_region(tmp_path: Path) -> None:
    img = Image.new("RGB", (100, 100), (0, 0, 255))
    img.paste((255, 0, 0), (50, 50, 100, 100))
    src = tmp_path / "quad.png"
    img.save(src)

    assert ImageCropper().crop_absolute(src, tmp_path / "out.png", 50, 50, 50, 50).success
    with Image.open(tmp_path / "out.png") as out:
        assert set(out.convert("RGB").getdata()) == {(255, 0, 0)}


def test_batch_crop_keeps_file_names(batch_dir: Path, tmp_path: Path) -> None:
    output = tmp_path / "cropped"
    result = ImageCropper().batch_crop(batch_dir, output, CenteredCrop(50, 50), extension=".jpg")

    assert (result.total_files, result.success_count, result.failure_count) == (3, 2, 1)
    assert (output / "a.jpg").exists()
    assert (output / "b.jpg").exists()


def test_batch_crop_with_no_matches_reports_error(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    result = ImageCropper().batch_crop(tmp_path / "src", tmp_path / "out", CenteredCrop(10, 10), extension="jpg")
    assert result.total_files == 0
    assert result.error_message
