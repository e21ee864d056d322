"""Filesystem stages: directory scoping, backup, rename and validation."""

from .backup import BackupSnapshot, backup_directory, list_snapshots
from .rename import RenameReport, canonical_filename, normalize_filenames
from .validation import ValidationReport, list_directories, resolve_directory, validate_html_files

__all__ = [
    "BackupSnapshot",
    "RenameReport",
    "ValidationReport",
    "backup_directory",
    "canonical_filename",
    "list_directories",
    "list_snapshots",
    "normalize_filenames",
    "resolve_directory",
    "validate_html_files",
]
