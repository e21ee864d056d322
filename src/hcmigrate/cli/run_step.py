"""CLI command that runs one migration step (or all of them) on a directory."""

from __future__ import annotations

import argparse
from dataclasses import replace
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from hcmigrate.config import MigrationSettings
from hcmigrate.errors import DirectoryValidationError, StageIOError
from hcmigrate.files.validation import list_directories
from hcmigrate.pipeline import Step, run_step

load_dotenv()

LOGGER = logging.getLogger(__name__)

_PIPELINE_STEPS = (Step.BACKUP, Step.RENAME, Step.REWRITE_LINKS, Step.EXPORT)
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Normalize help-center HTML and export it to CSV")
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--directory", help="Directory to process, inside the configured base dir")
    target.add_argument(
        "--list-directories",
        action="store_true",
        help="List selectable directories under the base dir and exit",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--step",
        type=int,
        choices=[int(step) for step in Step],
        help="1 backup, 2 rename, 3 rewrite links, 4 export CSV, 5 validate",
    )
    mode.add_argument("--all", action="store_true", help="Run steps 1-4 in order")
    parser.add_argument("--base-dir", help="Override HCMIGRATE_BASE_DIR")
    parser.add_argument("--export-dir", help="Override HCMIGRATE_EXPORT_DIR")
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=_LOG_LEVELS,
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)
    if args.directory and args.step is None and not args.all:
        parser.error("one of --step or --all is required with --directory")
    return args


def _settings_from_args(args: argparse.Namespace) -> MigrationSettings:
    settings = MigrationSettings.from_env()
    overrides: dict[str, Path] = {}
    if args.base_dir:
        overrides["base_dir"] = Path(args.base_dir)
    if args.export_dir:
        overrides["export_dir"] = Path(args.export_dir)
    return replace(settings, **overrides)


def _has_soft_failures(payload: dict[str, object]) -> bool:
    return bool(payload.get("skipped")) and payload.get("stage") == "export"


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(message)s")

    try:
        settings = _settings_from_args(args)
    except ValueError as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2

    if args.list_directories:
        try:
            directories = list_directories(settings.base_dir)
        except DirectoryValidationError as exc:
            LOGGER.error("%s", exc)
            return 2
        print(json.dumps({"base_dir": str(settings.base_dir), "directories": [str(d) for d in directories]}, indent=2))
        return 0

    steps = _PIPELINE_STEPS if args.all else (Step(args.step),)
    stages: list[dict[str, object]] = []
    payload: dict[str, object] = {"directory": args.directory, "stages": stages, "error": None}
    exit_code = 0

    for step in steps:
        try:
            result = run_step(args.directory, step, settings)
        except DirectoryValidationError as exc:
            LOGGER.error("Invalid folder selection: %s", exc)
            payload["error"] = {"type": "validation", "path": str(exc.path), "message": exc.message}
            exit_code = 2
            break
        except StageIOError as exc:
            LOGGER.error("Step %d failed: %s", int(step), exc)
            payload["error"] = {
                "type": "io",
                "step": int(step),
                "stage": exc.stage,
                "path": str(exc.path),
                "message": exc.message,
                "completed": exc.completed,
            }
            exit_code = 1
            break

        stage_payload = result.to_payload()
        stages.append(stage_payload)
        if _has_soft_failures(stage_payload):
            exit_code = 1

    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
