from __future__ import annotations

import logging
from pathlib import Path

import pytest

from hcmigrate.errors import StageIOError
from hcmigrate.files.rename import canonical_filename, normalize_filenames
from hcmigrate.links.patterns import canonical_id


def test_canonical_filename_keeps_only_digits() -> None:
    assert canonical_filename("abc123456789-desc.html") == "123456789.html"
    assert canonical_filename("360001234567-How-to-ship.html") == "360001234567.html"
    assert canonical_filename("about-us.html") is None


def test_renamer_keeps_digit_runs_the_link_matcher_rejects() -> None:
    # The renamer strips non-digits whatever the run length; links only
    # accept 9-14 digit ids.
    assert canonical_filename("12345678-x.html") == "12345678.html"
    assert canonical_id("12345678-x.html") is None

    assert canonical_filename("1234567890123456-x.html") == "1234567890123456.html"
    assert canonical_id("1234567890123456-x.html") is None

    assert canonical_filename("v2-123456789-x.html") == "2123456789.html"


def test_normalize_filenames_is_non_recursive_and_reports_each_file(tmp_path: Path) -> None:
    (tmp_path / "abc123456789-desc.html").write_text("one", encoding="utf-8")
    (tmp_path / "987654321.html").write_text("two", encoding="utf-8")
    (tmp_path / "readme.html").write_text("three", encoding="utf-8")
    (tmp_path / "notes-111111111.txt").write_text("four", encoding="utf-8")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "x111111111-y.html").write_text("five", encoding="utf-8")

    report = normalize_filenames(tmp_path)

    assert [(old.name, new.name) for old, new in report.renamed] == [
        ("abc123456789-desc.html", "123456789.html")
    ]
    assert [path.name for path in report.unchanged] == ["987654321.html"]
    assert [(path.name, reason) for path, reason in report.skipped] == [("readme.html", "no digits in filename")]
    assert (tmp_path / "123456789.html").read_text(encoding="utf-8") == "one"
    assert (tmp_path / "readme.html").exists()
    assert (tmp_path / "notes-111111111.txt").exists()
    assert (nested / "x111111111-y.html").exists()


def test_normalize_filenames_second_run_is_a_no_op(tmp_path: Path) -> None:
    (tmp_path / "360001234567-How-to.html").write_text("a", encoding="utf-8")
    (tmp_path / "360007654321-Returns.html").write_text("b", encoding="utf-8")

    normalize_filenames(tmp_path)
    second = normalize_filenames(tmp_path)

    assert second.renamed == []
    assert sorted(path.name for path in second.unchanged) == ["360001234567.html", "360007654321.html"]


def test_normalize_filenames_refuses_to_overwrite(tmp_path: Path) -> None:
    (tmp_path / "a123456789.html").write_text("first", encoding="utf-8")
    (tmp_path / "b123456789.html").write_text("second", encoding="utf-8")

    with pytest.raises(StageIOError) as excinfo:
        normalize_filenames(tmp_path)

    assert excinfo.value.completed == 1
    assert excinfo.value.path == tmp_path / "b123456789.html"
    assert (tmp_path / "123456789.html").read_text(encoding="utf-8") == "first"
    assert (tmp_path / "b123456789.html").read_text(encoding="utf-8") == "second"


def test_normalize_filenames_warns_on_out_of_bound_ids(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    (tmp_path / "short-12345678.html").write_text("x", encoding="utf-8")

    with caplog.at_level(logging.WARNING, logger="hcmigrate.files.rename"):
        report = normalize_filenames(tmp_path)

    assert [new.name for _old, new in report.renamed] == ["12345678.html"]
    assert "8-digit id" in caplog.text
