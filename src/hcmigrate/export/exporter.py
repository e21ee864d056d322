"""CSV export stage: one row per article found under a directory tree."""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from datetime import datetime
import logging
from pathlib import Path
from typing import Iterable, Iterator, TextIO

from hcmigrate.config import MigrationSettings
from hcmigrate.errors import DocumentParseError, StageIOError
from hcmigrate.extraction.extractor import extract_record

logger = logging.getLogger(__name__)

STAGE = "export"
HEADER = ["Translation_External_ID", "H1", "Category", "Answer"]
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
# utf-8-sig writes the byte-order mark before the header.
OUTPUT_ENCODING = "utf-8-sig"
LINE_TERMINATOR = "\r\n"


@dataclass(slots=True)
class ExportReport:
    """Output artifact plus the rows written and files skipped."""

    directory: Path
    output_path: Path
    exported: list[Path] = field(default_factory=list)
    skipped: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.exported)

    def to_payload(self) -> dict[str, object]:
        return {
            "directory": str(self.directory),
            "output_path": str(self.output_path),
            "rows": self.row_count,
            "exported": [str(path) for path in self.exported],
            "skipped": [{"source_path": str(path), "error": reason} for path, reason in self.skipped],
        }


def output_filename(prefix: str, created_at: datetime) -> str:
    return f"{prefix}_{created_at.strftime(TIMESTAMP_FORMAT)}.csv"


def collect_documents(directory: Path) -> list[Path]:
    """Every ``.html`` file below *directory*, recursively, in path order."""

    return sorted(path for path in directory.rglob("*.html") if path.is_file() and path.suffix == ".html")


def clean_field(value: str) -> str:
    return value.strip()


def write_rows(handle: TextIO, rows: Iterable[list[str]]) -> None:
    writer = csv.writer(handle, quoting=csv.QUOTE_MINIMAL, lineterminator=LINE_TERMINATOR)
    writer.writerow(HEADER)
    for row in rows:
        writer.writerow([clean_field(value) for value in row])


def export_directory(
    directory: Path,
    settings: MigrationSettings | None = None,
    *,
    output_path: Path | None = None,
    now: datetime | None = None,
) -> ExportReport:
    """Extract every article below *directory* into a new CSV file.

    Unparseable documents are skipped and listed in the report. A generated
    output name that is already taken gets a ``_1``, ``_2``, ... suffix; an
    explicit *output_path* that exists is refused. Failing to create or
    write the output file raises :class:`StageIOError`. Source files are
    only read.
    """

    config = settings or MigrationSettings()
    requested = output_path or config.export_dir / output_filename(config.export_prefix, now or datetime.now())
    documents = collect_documents(directory)

    try:
        target, handle = _open_output(requested, disambiguate=output_path is None)
    except FileExistsError as exc:
        raise StageIOError(requested, "Export file already exists", STAGE) from exc
    except OSError as exc:
        logger.error("Failed to create export %s: %s", requested, exc)
        raise StageIOError(requested, f"Failed to create export: {exc}", STAGE) from exc

    report = ExportReport(directory=directory, output_path=target)
    try:
        with handle:
            write_rows(handle, _extract_rows(documents, report))
    except OSError as exc:
        logger.error("Failed to write export %s: %s", target, exc)
        raise StageIOError(target, f"Failed to write export: {exc}", STAGE, report.row_count) from exc

    logger.info(
        "Exported %d documents from %s to %s (%d skipped)",
        report.row_count,
        directory,
        target,
        len(report.skipped),
    )
    return report


def _open_output(requested: Path, *, disambiguate: bool) -> tuple[Path, TextIO]:
    candidate = requested
    attempt = 0
    while True:
        try:
            return candidate, candidate.open("x", encoding=OUTPUT_ENCODING, newline="")
        except FileExistsError:
            if not disambiguate:
                raise
            attempt += 1
            candidate = requested.with_name(f"{requested.stem}_{attempt}{requested.suffix}")


def _extract_rows(documents: list[Path], report: ExportReport) -> Iterator[list[str]]:
    for path in documents:
        try:
            record = extract_record(path)
        except DocumentParseError as exc:
            logger.warning("Skipping %s: %s", path, exc.message)
            report.skipped.append((path, exc.message))
            continue

        yield record.as_row()
        report.exported.append(path)
        logger.info("Processed file: %s", record.id)
