"""Link-rewrite stage: host prefix swap plus id-only link targets."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

from hcmigrate.config import MigrationSettings
from hcmigrate.errors import StageIOError
from hcmigrate.files.encoding import read_text, write_text
from hcmigrate.links.patterns import (
    DEFAULT_MATCHER,
    LinkTargetMatcher,
    replace_host_prefix,
)

logger = logging.getLogger(__name__)

STAGE = "rewrite_links"


@dataclass(slots=True)
class FileRewrite:
    """Counts of each transform applied to one file."""

    path: Path
    host_replacements: int = 0
    href_updates: int = 0
    target_truncations: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.host_replacements or self.href_updates or self.target_truncations)


@dataclass(slots=True)
class RewriteReport:
    """Per-file outcome of one rewrite pass."""

    directory: Path
    rewritten: list[FileRewrite] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return {
            "directory": str(self.directory),
            "rewritten": [
                {
                    "source_path": str(item.path),
                    "host_replacements": item.host_replacements,
                    "href_updates": item.href_updates,
                    "target_truncations": item.target_truncations,
                }
                for item in self.rewritten
            ],
            "unchanged": [str(path) for path in self.unchanged],
        }


def rewrite_content(
    content: str,
    settings: MigrationSettings | None = None,
    *,
    matcher: LinkTargetMatcher = DEFAULT_MATCHER,
    path: Path | None = None,
) -> tuple[str, FileRewrite]:
    """Apply the three transforms, in order, to one document's text."""

    config = settings or MigrationSettings()
    outcome = FileRewrite(path=path or Path(""))

    content, outcome.host_replacements = replace_host_prefix(content, config.old_link, config.new_link)
    content, outcome.href_updates = matcher.update_hrefs(content)
    content, outcome.target_truncations = matcher.truncate(content)
    return content, outcome


def rewrite_links(
    directory: Path,
    settings: MigrationSettings | None = None,
    *,
    matcher: LinkTargetMatcher = DEFAULT_MATCHER,
) -> RewriteReport:
    """Rewrite links in every ``*.html`` file directly inside *directory*.

    Files are only written back when something changed. Any read or write
    failure raises :class:`StageIOError` and stops the pass.
    """

    report = RewriteReport(directory=directory)
    sources = sorted(path for path in directory.glob("*.html") if path.is_file())

    for source in sources:
        completed = len(report.rewritten) + len(report.unchanged)
        try:
            content, encoding = read_text(source)
        except (OSError, ValueError) as exc:
            logger.error("Failed to read %s: %s", source, exc)
            raise StageIOError(source, f"Failed to read file: {exc}", STAGE, completed) from exc

        updated, outcome = rewrite_content(content, settings, matcher=matcher, path=source)
        if updated == content:
            logger.info("No matching link found in %s", source)
            report.unchanged.append(source)
            continue

        try:
            write_text(source, updated, encoding)
        except (OSError, UnicodeEncodeError) as exc:
            logger.error("Failed to write %s: %s", source, exc)
            raise StageIOError(source, f"Failed to write file: {exc}", STAGE, completed) from exc

        logger.info(
            "Processed links in %s (%d host, %d href, %d truncated)",
            source,
            outcome.host_replacements,
            outcome.href_updates,
            outcome.target_truncations,
        )
        report.rewritten.append(outcome)

    return report
