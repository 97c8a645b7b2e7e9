from __future__ import annotations

import pytest

from image_glider.crop_geometry import (
    AbsoluteCrop,
    CenteredCrop,
    CropRectangle,
    CropValidationError,
    PercentCrop,
    resolve_crop,
)


def test_absolute_crop_inside_image() -> None:
    rect = resolve_crop(200, 100, AbsoluteCrop(10, 20, 50, 30))
    assert rect == CropRectangle(10, 20, 50, 30)
    assert rect.as_box() == (10, 20, 60, 50)


def test_absolute_crop_exceeding_bounds_fails() -> None:
    with pytest.raises(CropValidationError):
        resolve_crop(100, 100, AbsoluteCrop(50, 50, 100, 100))


@pytest.mark.parametrize(
    "intent",
    [
        AbsoluteCrop(-1, 0, 10, 10),
        AbsoluteCrop(0, -1, 10, 10),
        AbsoluteCrop(0, 0, 0, 10),
        AbsoluteCrop(0, 0, 10, 0),
        AbsoluteCrop(100, 0, 1, 1),
        AbsoluteCrop(0, 100, 1, 1),
    ],
)
def test_absolute_crop_invalid_values(intent: AbsoluteCrop) -> None:
    with pytest.raises(CropValidationError):
        resolve_crop(100, 100, intent)


def test_full_image_absolute_crop_is_allowed() -> None:
    assert resolve_crop(100, 80, AbsoluteCrop(0, 0, 100, 80)) == CropRectangle(0, 0, 100, 80)


def test_percent_crop_matches_equivalent_absolute_crop() -> None:
    percent = resolve_crop(200, 200, PercentCrop(25, 25, 50, 50))
    absolute = resolve_crop(200, 200, AbsoluteCrop(50, 50, 100, 100))
    assert percent == absolute == CropRectangle(50, 50, 100, 100)


def test_percent_crop_floors_to_pixels() -> None:
    assert resolve_crop(99, 99, PercentCrop(10, 10, 50, 50)) == CropRectangle(9, 9, 49, 49)


@pytest.mark.parametrize(
    "intent",
    [
        PercentCrop(-1, 0, 10, 10),
        PercentCrop(0, 0, 101, 10),
        PercentCrop(0, 0, 0, 10),
        PercentCrop(60, 0, 50, 10),
        PercentCrop(0, 60, 10, 50),
    ],
)
def test_percent_crop_invalid_values(intent: PercentCrop) -> None:
    with pytest.raises(CropValidationError):
        resolve_crop(200, 200, intent)


def test_percent_crop_that_floors_to_zero_pixels_fails() -> None:
    with pytest.raises(CropValidationError):
        resolve_crop(10, 10, PercentCrop(0, 0, 5, 5))


def test_centered_crop_is_centered() -> None:
    assert resolve_crop(200, 100, CenteredCrop(100, 50)) == CropRectangle(50, 25, 100, 50)


def test_centered_crop_shrinks_oversized_request() -> None:
    assert resolve_crop(100, 100, CenteredCrop(200, 200)) == CropRectangle(0, 0, 100, 100)
    assert resolve_crop(100, 60, CenteredCrop(40, 200)) == CropRectangle(30, 0, 40, 60)


def test_centered_crop_rejects_non_positive_size() -> None:
    with pytest.raises(CropValidationError):
        resolve_crop(100, 100, CenteredCrop(0, 10))


def test_every_resolved_rectangle_stays_inside_source() -> None:
    intents = [
        AbsoluteCrop(3, 7, 11, 13),
        PercentCrop(12.5, 33.3, 50, 66.6),
        CenteredCrop(77, 5),
        CenteredCrop(500, 500),
    ]
    for intent in intents:
        rect = resolve_crop(97, 61, intent)
        assert rect.x >= 0 and rect.y >= 0
        assert rect.x + rect.width <= 97
        assert rect.y + rect.height <= 61


def test_crop_validation_error_is_value_error() -> None:
    assert issubclass(CropValidationError, ValueError)
