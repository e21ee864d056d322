"""Help-center HTML migration: backup, rename, link rewrite and CSV export."""

from hcmigrate.config import MigrationSettings
from hcmigrate.errors import DirectoryValidationError, DocumentParseError, StageIOError
from hcmigrate.pipeline import Step, StageResult, run_pipeline, run_step

__all__ = [
    "DirectoryValidationError",
    "DocumentParseError",
    "MigrationSettings",
    "StageIOError",
    "StageResult",
    "Step",
    "run_pipeline",
    "run_step",
]
