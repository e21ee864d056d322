"""Runtime configuration for the migration pipeline."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping


DEFAULT_BASE_DIR = "hc/es"
DEFAULT_OLD_LINK = "https://help.shopsettings.com/hc/en-us/articles/"
DEFAULT_NEW_LINK = "/hc/es/articles/"
DEFAULT_BACKUP_SUFFIX = "_backup_"
DEFAULT_EXPORT_DIR = "."
DEFAULT_EXPORT_PREFIX = "ECWIDHC"


def _parse_optional_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int | None:
    if not raw_value:
        return None
    value = int(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class MigrationSettings:
    """Validated settings passed explicitly into every pipeline stage."""

    base_dir: Path = Path(DEFAULT_BASE_DIR)
    old_link: str = DEFAULT_OLD_LINK
    new_link: str = DEFAULT_NEW_LINK
    backup_suffix: str = DEFAULT_BACKUP_SUFFIX
    export_dir: Path = Path(DEFAULT_EXPORT_DIR)
    export_prefix: str = DEFAULT_EXPORT_PREFIX
    max_backups: int | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "MigrationSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        base_dir_raw = source.get("HCMIGRATE_BASE_DIR", DEFAULT_BASE_DIR).strip()
        old_link = source.get("HCMIGRATE_OLD_LINK", DEFAULT_OLD_LINK).strip()
        new_link = source.get("HCMIGRATE_NEW_LINK", DEFAULT_NEW_LINK).strip()
        backup_suffix = source.get("HCMIGRATE_BACKUP_SUFFIX", DEFAULT_BACKUP_SUFFIX).strip()
        export_dir_raw = source.get("HCMIGRATE_EXPORT_DIR", DEFAULT_EXPORT_DIR).strip()
        export_prefix = source.get("HCMIGRATE_EXPORT_PREFIX", DEFAULT_EXPORT_PREFIX).strip()
        max_backups_raw = source.get("HCMIGRATE_MAX_BACKUPS", "").strip()

        if not base_dir_raw:
            raise ValueError("HCMIGRATE_BASE_DIR cannot be empty")
        if not old_link:
            raise ValueError("HCMIGRATE_OLD_LINK cannot be empty")
        if not backup_suffix:
            raise ValueError("HCMIGRATE_BACKUP_SUFFIX cannot be empty")
        if any(sep in backup_suffix for sep in ("/", "\\")):
            raise ValueError("HCMIGRATE_BACKUP_SUFFIX cannot contain path separators")
        if not export_dir_raw:
            raise ValueError("HCMIGRATE_EXPORT_DIR cannot be empty")
        if not export_prefix:
            raise ValueError("HCMIGRATE_EXPORT_PREFIX cannot be empty")

        max_backups = _parse_optional_positive_int(
            name="HCMIGRATE_MAX_BACKUPS",
            raw_value=max_backups_raw,
            minimum=1,
        )

        return cls(
            base_dir=Path(base_dir_raw),
            old_link=old_link,
            new_link=new_link,
            backup_suffix=backup_suffix,
            export_dir=Path(export_dir_raw),
            export_prefix=export_prefix,
            max_backups=max_backups,
        )
