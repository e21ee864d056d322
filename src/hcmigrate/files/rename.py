"""Rename documents to ``<digits>.html``."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import re

from hcmigrate.errors import StageIOError

logger = logging.getLogger(__name__)

STAGE = "rename"
HTML_SUFFIX = ".html"
# Bounds the link rewriter applies to ids; the renamer only warns outside them.
CANONICAL_MIN_DIGITS = 9
CANONICAL_MAX_DIGITS = 14

_NON_DIGIT_RE = re.compile(r"[^0-9]")


def canonical_filename(name: str) -> str | None:
    """Strip every non-digit from *name* and append ``.html``.

    All digits are kept, whatever their count, so ``v2-123456789-x.html``
    becomes ``2123456789.html``. Returns ``None`` when no digit is left.
    """

    digits = _NON_DIGIT_RE.sub("", name)
    if not digits:
        return None
    return digits + HTML_SUFFIX


@dataclass(slots=True)
class RenameReport:
    """Per-file outcome of one normalization pass."""

    directory: Path
    renamed: list[tuple[Path, Path]] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)
    skipped: list[tuple[Path, str]] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return {
            "directory": str(self.directory),
            "renamed": [{"from": str(old), "to": str(new)} for old, new in self.renamed],
            "unchanged": [str(path) for path in self.unchanged],
            "skipped": [{"source_path": str(path), "reason": reason} for path, reason in self.skipped],
        }


def normalize_filenames(directory: Path) -> RenameReport:
    """Rename every ``*.html`` file directly inside *directory*.

    Files without any digit are left in place and reported as skipped.
    A rename failure, including a collision with another existing file,
    raises :class:`StageIOError` and stops the pass.
    """

    report = RenameReport(directory=directory)
    sources = sorted(path for path in directory.glob("*.html") if path.is_file())

    for source in sources:
        new_name = canonical_filename(source.name)
        if new_name is None:
            logger.warning("No digits in %s; leaving it unrenamed", source.name)
            report.skipped.append((source, "no digits in filename"))
            continue

        if new_name == source.name:
            report.unchanged.append(source)
            continue

        digit_count = len(new_name) - len(HTML_SUFFIX)
        if not CANONICAL_MIN_DIGITS <= digit_count <= CANONICAL_MAX_DIGITS:
            logger.warning(
                "%s yields a %d-digit id; links to it will not be treated as canonical",
                source.name,
                digit_count,
            )

        target = directory / new_name
        completed = len(report.renamed)
        if target.exists() and not _same_file(source, target):
            logger.error("Cannot rename %s: %s already exists", source, target)
            raise StageIOError(source, f"Rename target already exists: {target.name}", STAGE, completed)

        try:
            source.rename(target)
        except OSError as exc:
            logger.error("Failed to rename %s: %s", source, exc)
            raise StageIOError(source, f"Failed to rename file: {exc}", STAGE, completed) from exc

        logger.info("Renamed %s -> %s", source.name, new_name)
        report.renamed.append((source, target))

    return report


def _same_file(left: Path, right: Path) -> bool:
    try:
        return left.samefile(right)
    except OSError:
        return False
