from __future__ import annotations

from pathlib import Path

from PIL import Image, ImageCms, ImageStat

from image_glider.processors import ColorAdjuster, MetadataStripper, StripOptions
from image_glider.tone_curve import ToneAdjustment


def _srgb_profile() -> bytes:
    return ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()


def _jpeg_with_exif_and_icc(path: Path) -> Path:
    exif = Image.Exif()
    exif[0x010F] = "Maker"  # Make
    Image.new("RGB", (40, 30), (90, 90, 90)).save(path, format="JPEG", exif=exif.tobytes(), icc_profile=_srgb_profile())
    return path


def test_adjust_brightens_and_suffixes(make_image, tmp_path: Path) -> None:
    src_dir = tmp_path / "src"
    make_image("gray.png", (20, 20), color=(100, 100, 100), directory=src_dir)

    result = ColorAdjuster().batch_adjust(src_dir, tmp_path / "out", ToneAdjustment(brightness=40))

    assert result.is_success
    with Image.open(tmp_path / "out" / "gray_adjusted.png") as img:
        assert ImageStat.Stat(img).mean[0] > 100


def test_adjust_clamps_out_of_range_values(make_image, tmp_path: Path) -> None:
    src = make_image("gray.png", (10, 10), color=(100, 100, 100))
    result = ColorAdjuster().adjust(src, tmp_path / "out.png", ToneAdjustment(gamma=50, contrast=-999))
    assert result.success


def test_adjust_unreadable_source_is_failure(tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.png"
    bogus.write_bytes(b"nope")
    result = ColorAdjuster().adjust(bogus, tmp_path / "out.png", ToneAdjustment(brightness=10))
    assert not result.success
    assert result.error_category == "unreadable"


def test_strip_all_removes_exif_and_icc(tmp_path: Path) -> None:
    src = _jpeg_with_exif_and_icc(tmp_path / "meta.jpg")
    out = tmp_path / "out.jpg"

    assert MetadataStripper().strip(src, out).success
    with Image.open(out) as img:
        assert not img.info.get("exif")
        assert not img.info.get("icc_profile")
        assert img.size == (40, 30)


def test_selective_strip_keeps_icc(tmp_path: Path) -> None:
    src = _jpeg_with_exif_and_icc(tmp_path / "meta.jpg")
    out = tmp_path / "out.jpg"
    options = StripOptions(strip_all=False, strip_exif=True, strip_icc=False, strip_xmp=True)

    assert MetadataStripper().strip(src, out, options).success
    with Image.open(out) as img:
        assert not img.info.get("exif")
        assert img.info.get("icc_profile")


def test_selective_strip_keeps_exif(tmp_path: Path) -> None:
    src = _jpeg_with_exif_and_icc(tmp_path / "meta.jpg")
    out = tmp_path / "out.jpg"
    options = StripOptions(strip_all=False, strip_exif=False, strip_icc=True)

    assert MetadataStripper().strip(src, out, options).success
    with Image.open(out) as img:
        assert img.getexif().get(0x010F) == "Maker"
        assert not img.info.get("icc_profile")


def test_batch_strip_keeps_names_and_errors_on_empty(batch_dir: Path, tmp_path: Path) -> None:
    result = MetadataStripper().batch_strip(batch_dir, tmp_path / "out", extension="jpg")
    assert (result.success_count, result.failure_count) == (2, 1)
    assert (tmp_path / "out" / "a.jpg").exists()

    (tmp_path / "empty").mkdir()
    empty = MetadataStripper().batch_strip(tmp_path / "empty", tmp_path / "out2")
    assert empty.error_message
