from __future__ import annotations

from pathlib import Path

from PIL import Image

from image_glider.batch_runner import (
    build_search_pattern,
    discover_source_files,
    extension_target,
    normalize_extensions,
    run_batch,
    same_name_target,
    suffixed_target,
)
from image_glider.codec import open_image, save_image
from image_glider.results import OperationResult


def _reencode(source: Path, target: Path) -> OperationResult:
    with open_image(source) as decoded:
        save_image(decoded, target)
    return OperationResult.ok(source, target)


def test_build_search_pattern() -> None:
    assert build_search_pattern("jpg") == "*.jpg"
    assert build_search_pattern(".PNG") == "*.PNG"
    assert build_search_pattern("*.webp") == "*.webp"
    assert build_search_pattern("") == "*"
    assert build_search_pattern(None) == "*"


def test_normalize_extensions() -> None:
    assert normalize_extensions("jpg, .png, JPEG") == [".jpeg", ".jpg", ".png"]


def test_discover_is_case_insensitive_and_sorted(tmp_path: Path) -> None:
    for name in ["b.JPG", "a.jpg", "c.png"]:
        (tmp_path / name).write_bytes(b"x")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "d.jpg").write_bytes(b"x")

    found = discover_source_files(tmp_path, "*.jpg")
    assert [p.name for p in found] == ["a.jpg", "b.JPG"]

    recursive = discover_source_files(tmp_path, "*.jpg", recursive=True)
    assert {p.relative_to(tmp_path).as_posix() for p in recursive} == {"a.jpg", "b.JPG", "sub/d.jpg"}


def test_target_namers() -> None:
    out = Path("out")
    assert suffixed_target("_resized")(Path("in/photo.jpg"), out) == out / "photo_resized.jpg"
    assert same_name_target(Path("in/photo.jpg"), out) == out / "photo.jpg"
    assert extension_target("PNG")(Path("in/photo.jpg"), out) == out / "photo.png"


def test_batch_isolates_failures_and_counts_totals(batch_dir: Path, tmp_path: Path) -> None:
    output = tmp_path / "output"
    result = run_batch(batch_dir, output, "*.jpg", _reencode, same_name_target)

    assert result.total_files == 3
    assert result.success_count == 2
    assert result.failure_count == 1
    assert result.success_count + result.failure_count == result.total_files
    assert [p.name for p in result.failed_paths] == ["broken.jpg"]
    assert sorted(p.name for p in result.successful_paths) == ["a.jpg", "b.jpg"]
    assert result.error_message is None
    assert result.is_success is False
    assert (output / "a.jpg").exists() and (output / "b.jpg").exists()
    assert not (output / "broken.jpg").exists()


def test_batch_catches_exceptions_from_operation(batch_dir: Path, tmp_path: Path) -> None:
    def explode(source: Path, target: Path) -> OperationResult:
        if source.name == "a.jpg":
            raise RuntimeError("boom")
        return OperationResult.ok(source, target)

    result = run_batch(batch_dir, tmp_path / "out", "*.jpg", explode, same_name_target)
    assert result.total_files == 3
    assert result.failure_count == 1
    failed = [o for o in result.outcomes if not o.success]
    assert failed[0].error_message == "boom"


def test_missing_source_dir_is_terminal_error(tmp_path: Path) -> None:
    result = run_batch(tmp_path / "nope", tmp_path / "out", "*", _reencode, same_name_target)
    assert result.total_files == 0
    assert result.error_message is not None
    assert result.is_success is False


def test_zero_matches_follows_empty_convention(tmp_path: Path) -> None:
    source = tmp_path / "empty"
    source.mkdir()

    as_error = run_batch(source, tmp_path / "o1", "*.jpg", _reencode, same_name_target, empty_is_error=True)
    assert as_error.total_files == 0
    assert as_error.error_message is not None

    as_success = run_batch(source, tmp_path / "o2", "*.jpg", _reencode, same_name_target, empty_is_error=False)
    assert as_success.total_files == 0
    assert as_success.error_message is None
    assert as_success.is_success is True


def test_parallel_batch_aggregates_all_items(tmp_path: Path) -> None:
    source = tmp_path / "many"
    source.mkdir()
    for i in range(8):
        Image.new("RGB", (20, 10), (i * 20, 0, 0)).save(source / f"img{i}.png")

    result = run_batch(source, tmp_path / "out", "*.png", _reencode, suffixed_target("_x"), max_workers=4)
    assert result.total_files == 8
    assert result.success_count == 8
    assert len(list((tmp_path / "out").glob("*_x.png"))) == 8


def test_recursive_batch_mirrors_subdirectories(tmp_path: Path) -> None:
    source = tmp_path / "tree"
    (source / "nested").mkdir(parents=True)
    Image.new("RGB", (10, 10)).save(source / "top.png")
    Image.new("RGB", (10, 10)).save(source / "nested" / "inner.png")

    result = run_batch(source, tmp_path / "out", "*.png", _reencode, same_name_target, recursive=True)
    assert result.success_count == 2
    assert (tmp_path / "out" / "nested" / "inner.png").exists()


def test_batch_result_to_dict() -> None:
    from image_glider.results import BatchItemOutcome, BatchResult

    result = BatchResult(total_files=2)
    result.record(BatchItemOutcome(Path("a.jpg"), Path("o/a.jpg"), True))
    result.record(BatchItemOutcome(Path("b.jpg"), Path("o/b.jpg"), False, "broken"))

    payload = result.to_dict()
    assert payload["successful_files"] == ["a.jpg"]
    assert payload["failed_files"] == ["b.jpg"]
    assert payload["is_success"] is False
    assert result.failed_files() == [{"file": "b.jpg", "error": "broken"}]


def test_failing_namer_only_fails_that_file(batch_dir: Path, tmp_path: Path) -> None:
    def picky_namer(source: Path, output_dir: Path) -> Path:
        if source.name == "b.jpg":
            raise ValueError("出力名を決められません")
        return same_name_target(source, output_dir)

    result = run_batch(batch_dir, tmp_path / "out", "*.jpg", _reencode, picky_namer)

    assert (result.total_files, result.success_count, result.failure_count) == (3, 1, 2)
    assert sorted(p.name for p in result.failed_paths) == ["b.jpg", "broken.jpg"]
    assert (tmp_path / "out" / "a.jpg").exists()
