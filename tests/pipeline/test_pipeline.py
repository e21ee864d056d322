from __future__ import annotations

import csv
import io
from pathlib import Path

import pytest

from hcmigrate.config import MigrationSettings
from hcmigrate.errors import DirectoryValidationError
from hcmigrate.pipeline import Step, run_pipeline, run_step

_OLD = "https://help.shopsettings.com/hc/en-us/articles/"


def _build_root(tmp_path: Path) -> tuple[Path, Path, MigrationSettings]:
    root = tmp_path / "hc" / "es"
    section = root / "orders"
    section.mkdir(parents=True)
    (section / "360001234567-How-to-order.html").write_text(
        "<html><body>"
        '<ol class="breadcrumbs"><li>Home</li><li>Orders</li></ol>'
        "<h1>How to order</h1>"
        f'<div class="article-body"><p>See <a href="{_OLD}360007654321-Returns.html">returns</a>.</p></div>'
        "</body></html>",
        encoding="utf-8",
    )
    (section / "360007654321-Returns.html").write_text(
        "<html><body><h1>Returns</h1><div class=\"article-body\"><p>Send it back.</p></div></body></html>",
        encoding="utf-8",
    )
    exports = tmp_path / "exports"
    exports.mkdir()
    settings = MigrationSettings(base_dir=root, old_link=_OLD, new_link="/hc/es/articles/", export_dir=exports)
    return root, section, settings


def test_run_pipeline_backs_up_renames_rewrites_and_exports(tmp_path: Path) -> None:
    root, section, settings = _build_root(tmp_path)

    results = run_pipeline(section, settings)

    assert [result.step for result in results] == [Step.BACKUP, Step.RENAME, Step.REWRITE_LINKS, Step.EXPORT]

    backups = sorted(root.glob("orders_backup_*"))
    assert len(backups) == 1
    assert (backups[0] / "360001234567-How-to-order.html").exists()

    assert sorted(path.name for path in section.glob("*.html")) == ["360001234567.html", "360007654321.html"]
    rewritten = (section / "360001234567.html").read_text(encoding="utf-8")
    assert '<a href="360007654321.html">returns</a>' in rewritten

    export_report = results[-1].report
    text = export_report.output_path.read_text(encoding="utf-8-sig")
    rows = list(csv.reader(io.StringIO(text, newline="")))
    assert rows[1] == [
        "360001234567",
        "How to order",
        "Orders",
        '<p>See <a href="360007654321.html">returns</a>.</p>',
    ]
    assert rows[2] == ["360007654321", "Returns", "no breadcrumb found", "<p>Send it back.</p>"]


def test_run_step_rejects_directory_outside_root_before_running(tmp_path: Path) -> None:
    _root, _section, settings = _build_root(tmp_path)
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "123456789-x.html").write_text("<html></html>", encoding="utf-8")

    with pytest.raises(DirectoryValidationError):
        run_step(outside, Step.RENAME, settings)

    assert (outside / "123456789-x.html").exists()


def test_run_step_rejects_unknown_step(tmp_path: Path) -> None:
    _root, section, settings = _build_root(tmp_path)

    with pytest.raises(ValueError, match="Invalid step"):
        run_step(section, 9, settings)


def test_run_step_validate_reports_payload(tmp_path: Path) -> None:
    _root, section, settings = _build_root(tmp_path)

    result = run_step(section, 5, settings)
    payload = result.to_payload()

    assert payload["step"] == 5
    assert payload["stage"] == "validate"
    assert len(payload["valid"]) == 2
    assert payload["invalid"] == []
