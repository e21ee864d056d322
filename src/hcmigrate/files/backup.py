"""Timestamped recursive snapshots taken before destructive stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import logging
from pathlib import Path
import re
import shutil

from hcmigrate.config import MigrationSettings
from hcmigrate.errors import StageIOError

logger = logging.getLogger(__name__)

STAGE = "backup"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
_SNAPSHOT_STAMP_RE = re.compile(r"(?P<stamp>\d{8}_\d{6})(?:_(?P<counter>\d+))?")


@dataclass(slots=True)
class BackupSnapshot:
    """One full copy of a source tree."""

    source_root: Path
    path: Path
    created_at: datetime
    files_copied: int = 0
    directories_created: int = 0
    pruned: list[Path] = field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        return {
            "source_root": str(self.source_root),
            "snapshot": str(self.path),
            "created_at": self.created_at.isoformat(timespec="seconds"),
            "files_copied": self.files_copied,
            "directories_created": self.directories_created,
            "pruned": [str(path) for path in self.pruned],
        }


def snapshot_path(source: Path, suffix: str, created_at: datetime) -> Path:
    """Return ``<source><suffix><YYYYMMDD_HHMMSS>`` as a sibling of *source*."""

    return source.with_name(f"{source.name}{suffix}{created_at.strftime(TIMESTAMP_FORMAT)}")


def list_snapshots(source: Path, settings: MigrationSettings | None = None) -> list[Path]:
    """Existing snapshots of *source*, oldest first."""

    config = settings or MigrationSettings()
    prefix = f"{source.name}{config.backup_suffix}"
    if not source.parent.is_dir():
        return []

    snapshots: list[tuple[str, int, Path]] = []
    for candidate in source.parent.iterdir():
        if not candidate.is_dir() or not candidate.name.startswith(prefix):
            continue
        stamp = _SNAPSHOT_STAMP_RE.fullmatch(candidate.name[len(prefix) :])
        if stamp:
            snapshots.append((stamp.group("stamp"), int(stamp.group("counter") or 0), candidate))
    return [path for _, _, path in sorted(snapshots)]


def backup_directory(
    source: Path,
    settings: MigrationSettings | None = None,
    *,
    now: datetime | None = None,
) -> BackupSnapshot:
    """Copy every file and subdirectory of *source* into a new snapshot.

    The walk is sorted, so a directory always precedes its own contents and
    the destination tree is built before files land in it. The first
    failure aborts the copy and raises :class:`StageIOError` carrying the
    number of files already copied. An existing snapshot directory is never
    reused: a second run within the same second gets a ``_1``, ``_2``, ... suffix.
    """

    config = settings or MigrationSettings()
    created_at = now or datetime.now()
    try:
        destination = _create_snapshot_dir(snapshot_path(source, config.backup_suffix, created_at))
    except OSError as exc:
        raise StageIOError(source, f"Failed to create backup directory: {exc}", STAGE) from exc
    snapshot = BackupSnapshot(source_root=source, path=destination, created_at=created_at)

    try:
        entries = sorted(source.rglob("*"))
    except OSError as exc:
        raise StageIOError(source, f"Failed to walk source tree: {exc}", STAGE) from exc

    for entry in entries:
        target = destination / entry.relative_to(source)
        if entry.is_dir():
            try:
                target.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StageIOError(
                    target, f"Failed to create directory: {exc}", STAGE, snapshot.files_copied
                ) from exc
            snapshot.directories_created += 1
            continue

        try:
            shutil.copy2(entry, target)
        except OSError as exc:
            logger.error("Failed to copy %s: %s", entry, exc)
            raise StageIOError(entry, f"Failed to copy file: {exc}", STAGE, snapshot.files_copied) from exc
        snapshot.files_copied += 1
        logger.debug("Backed up %s", entry)

    logger.info(
        "Backed up %s to %s (%d files, %d directories)",
        source,
        destination,
        snapshot.files_copied,
        snapshot.directories_created,
    )

    if config.max_backups is not None:
        snapshot.pruned = _prune_snapshots(source, config, keep=config.max_backups)
    return snapshot


def _prune_snapshots(source: Path, settings: MigrationSettings, *, keep: int) -> list[Path]:
    snapshots = list_snapshots(source, settings)
    excess = snapshots[: max(len(snapshots) - keep, 0)]
    for stale in excess:
        try:
            shutil.rmtree(stale)
        except OSError as exc:
            raise StageIOError(stale, f"Failed to remove old snapshot: {exc}", STAGE) from exc
        logger.info("Removed old snapshot %s", stale)
    return excess


def _create_snapshot_dir(base: Path) -> Path:
    candidate = base
    attempt = 0
    while True:
        try:
            candidate.mkdir(parents=True, exist_ok=False)
        except FileExistsError:
            attempt += 1
            candidate = base.with_name(f"{base.name}_{attempt}")
            continue
        return candidate
