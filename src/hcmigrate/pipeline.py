"""Step routing over the migration stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
import logging
from pathlib import Path
from typing import Protocol

from hcmigrate.config import MigrationSettings
from hcmigrate.export.exporter import export_directory
from hcmigrate.files.backup import backup_directory
from hcmigrate.files.rename import normalize_filenames
from hcmigrate.files.validation import resolve_directory, validate_html_files
from hcmigrate.links.rewriter import rewrite_links

logger = logging.getLogger(__name__)


class Step(IntEnum):
    BACKUP = 1
    RENAME = 2
    REWRITE_LINKS = 3
    EXPORT = 4
    VALIDATE = 5


class _Report(Protocol):
    def to_payload(self) -> dict[str, object]:
        """JSON-ready summary of the stage outcome."""


@dataclass(frozen=True, slots=True)
class StageResult:
    step: Step
    directory: Path
    report: _Report

    @property
    def stage(self) -> str:
        return self.step.name.lower()

    def to_payload(self) -> dict[str, object]:
        return {"step": int(self.step), "stage": self.stage, **self.report.to_payload()}


def run_step(
    directory: str | Path,
    step: int | Step,
    settings: MigrationSettings | None = None,
) -> StageResult:
    """Validate *directory* against the configured root and run one stage.

    Raises :class:`~hcmigrate.errors.DirectoryValidationError` before any
    stage runs when the directory is rejected, ``ValueError`` for an unknown
    step, and lets :class:`~hcmigrate.errors.StageIOError` propagate.
    """

    config = settings or MigrationSettings()
    try:
        selected = Step(int(step))
    except ValueError as exc:
        raise ValueError(f"Invalid step: {step}") from exc

    target = resolve_directory(directory, config.base_dir)
    logger.info("Running step %d (%s) on %s", selected, selected.name.lower(), target)

    if selected is Step.BACKUP:
        report: _Report = backup_directory(target, config)
    elif selected is Step.RENAME:
        report = normalize_filenames(target)
    elif selected is Step.REWRITE_LINKS:
        report = rewrite_links(target, config)
    elif selected is Step.EXPORT:
        report = export_directory(target, config)
    else:
        report = validate_html_files(target)

    logger.info("%s completed", selected.name.capitalize())
    return StageResult(step=selected, directory=target, report=report)


def run_pipeline(
    directory: str | Path,
    settings: MigrationSettings | None = None,
) -> list[StageResult]:
    """Run backup, rename, link rewrite and export in order.

    The first fatal error propagates, so a later stage never runs on a tree
    an earlier stage left half-processed.
    """

    results: list[StageResult] = []
    for step in (Step.BACKUP, Step.RENAME, Step.REWRITE_LINKS, Step.EXPORT):
        results.append(run_step(directory, step, settings))
    return results
