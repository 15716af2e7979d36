from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..excel.reader import TableReadError, read_table
from ..logging.init import log_summary, setup_logging
from ..models.config_models import IngestConfig
from ..services.header_resolver import MissingColumnsError, resolve
from ..services.orchestrator import ProcessingError, process_all, scan_roster_files
from ..services.profiles import build_field_specs
from ..services.summary import render_summary_line

"""CLI entrypoint: batch roster ingestion.

Flow:
- load .env (ROSTER_CONFIG may point at the config file)
- load + validate the YAML config
- normalize every roster file in source_directory, write JSON per file
- print the SUMMARY line and exit with the contract exit code
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2


def _load_env_file(path: Path) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="roster-ingest", description="Normalize roster spreadsheets into team records")
    p.add_argument("--config", type=Path, default=None, help="Config file (default: $ROSTER_CONFIG or config/roster.yml)")
    p.add_argument("--profile", choices=["team", "student", "faculty"], help="Override the configured field profile")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print resolved columns & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(cfg: IngestConfig) -> int:
    try:
        files = scan_roster_files(Path(cfg.source_directory))
        specs = build_field_specs(cfg.profile, cfg.fields)
    except (ProcessingError, KeyError) as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no roster files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            table = read_table(f, keep_na_strings=cfg.keep_na_strings)
        except TableReadError as e:
            print(f"  read_error: {e}")
            continue
        print(f"  columns={table.columns}")
        try:
            binding = resolve(table.columns, specs)
        except MissingColumnsError as e:
            print(f"  binding_error: {e}")
        else:
            print(f"  binding={binding.columns}")
        # datetime セルなどは JSON 化できないので str で逃がす
        print("  sample_rows=", json.dumps(table.rows[:3], ensure_ascii=False, default=str))
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # [] が渡された場合に sys.argv (pytest の引数) を読まないよう None のときだけ参照
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")
    _load_env_file(Path(".env"))

    config_path = args.config or Path(os.getenv("ROSTER_CONFIG") or DEFAULT_CONFIG_PATH)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.profile:
        cfg = replace(cfg, profile=args.profile)

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    logger.info(f"Processing rosters from: {directory} (profile={cfg.profile})")
    try:
        result = process_all(cfg)
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    log_summary(render_summary_line(result).removeprefix("SUMMARY "))

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
