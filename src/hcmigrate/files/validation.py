"""Directory scoping checks and the root-element sanity pass."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
import re

from hcmigrate.errors import DirectoryValidationError
from hcmigrate.files.encoding import read_text

logger = logging.getLogger(__name__)

_HTML_OPEN_RE = re.compile(r"<html(?:\s[^>]*)?>", re.IGNORECASE)
_HTML_CLOSE_RE = re.compile(r"</html\s*>", re.IGNORECASE)


def resolve_directory(candidate: str | Path, root: str | Path) -> Path:
    """Resolve *candidate* and make sure it is an existing directory under *root*.

    Symlinks and ``..`` segments are resolved before the containment check,
    so ``root/../elsewhere`` is rejected even though it starts with the root
    prefix textually.
    """

    if candidate is None or str(candidate).strip() == "":
        raise DirectoryValidationError(Path(""), "No directory selected")

    root_path = Path(root).resolve()
    if not root_path.is_dir():
        raise DirectoryValidationError(root_path, "Configured root is not a directory")

    raw = Path(candidate)
    if not raw.is_absolute():
        raw = root_path / raw
    resolved = raw.resolve()

    if not resolved.exists():
        raise DirectoryValidationError(resolved, "Directory does not exist")
    if not resolved.is_dir():
        raise DirectoryValidationError(resolved, "Path is not a directory")
    if not resolved.is_relative_to(root_path):
        raise DirectoryValidationError(resolved, f"Directory is outside permitted root {root_path}")
    return resolved


def list_directories(root: str | Path) -> list[Path]:
    """List every directory below *root* (root excluded), sorted."""

    root_path = Path(root).resolve()
    if not root_path.is_dir():
        raise DirectoryValidationError(root_path, "Configured root is not a directory")
    return sorted(path for path in root_path.rglob("*") if path.is_dir())


def has_root_element_pair(content: str) -> bool:
    """True when *content* contains an opening ``<html>`` tag and ``</html>``."""

    opening = _HTML_OPEN_RE.search(content)
    if opening is None:
        return False
    return _HTML_CLOSE_RE.search(content, opening.end()) is not None


@dataclass(slots=True)
class ValidationReport:
    """Outcome of the root-element pass over one directory."""

    directory: Path
    valid: list[Path] = field(default_factory=list)
    invalid: list[tuple[Path, str]] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return {
            "directory": str(self.directory),
            "valid": [str(path) for path in self.valid],
            "invalid": [{"source_path": str(path), "error": reason} for path, reason in self.invalid],
        }


def validate_html_files(directory: Path) -> ValidationReport:
    """Check every ``*.html`` file directly in *directory*; never raises per file."""

    report = ValidationReport(directory=directory)
    for path in sorted(directory.glob("*.html")):
        if not path.is_file():
            continue
        try:
            content, _encoding = read_text(path)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s: %s", path, exc)
            report.invalid.append((path, f"unreadable: {exc}"))
            continue

        if has_root_element_pair(content):
            logger.info("%s is valid HTML", path)
            report.valid.append(path)
        else:
            logger.warning("%s is not valid HTML", path)
            report.invalid.append((path, "missing <html> root element pair"))
    return report
