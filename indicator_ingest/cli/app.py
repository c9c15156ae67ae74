from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, UploadConfig, load_config
from ..logging.init import log_summary, set_debug, setup_logging
from ..models.header_mapping import HeaderMapping
from ..parsing.tokenizer import tokenize
from ..services.orchestrator import UploadError, process_all, read_upload_text, scan_upload_files
from ..services.submission import records_to_frame
from ..services.summary import render_diagnostics, render_summary_line

"""CLI entrypoint.

Flow:
- load .env, then the YAML config
- validate every upload file (explicit paths or the configured directory)
- print diagnostics of failed files (capped), then one SUMMARY line
- optionally export accepted records as CSV

Exit codes: 0 all files validated, 2 some file failed, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2

ENV_CONFIG = "INDICATOR_INGEST_CONFIG"
ENV_USER = "INDICATOR_INGEST_USER"
DEFAULT_USER = "cli"
INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env via python-dotenv; values override the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Validate indicator data uploads (CSV)")
    p.add_argument("files", nargs="*", type=Path, help="Upload files (default: scan source_directory)")
    p.add_argument("--indicator", help="Indicator id the uploads are filed against")
    p.add_argument("--config", type=Path, default=None, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--uploaded-by", default=None, help="Uploader id recorded on submissions")
    p.add_argument("--output", type=Path, default=None, help="Write accepted records to this CSV file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print headers, role mapping & first rows then exit")
    return p.parse_args(argv)


def _resolve_files(cfg: UploadConfig, files: list[Path]) -> list[Path]:
    if files:
        return files
    return scan_upload_files(Path(cfg.source_directory))


def _inspect_data(cfg: UploadConfig, files: list[Path]) -> int:
    if not files:
        print("inspect: no upload files")
        return EXIT_SUCCESS_ALL
    for f in files:
        print(f"FILE: {f.name}")
        try:
            grid = tokenize(read_upload_text(f, cfg.encoding))
        except UploadError as e:
            print(f"  read_error: {e}")
            continue
        headers = grid[0]
        mapping = HeaderMapping.from_headers(headers)
        print(f"  headers={headers}")
        print(f"  roles={mapping.describe(headers)}")
        if not mapping.has_any_role:
            print("  warning: no year/state/value column recognized; rows will not be validated")
        print("  sample_rows=", grid[1:1 + INSPECT_SAMPLE_ROWS])
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    config_path = args.config or Path(os.getenv(ENV_CONFIG, str(DEFAULT_CONFIG_PATH)))
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    try:
        files = _resolve_files(cfg, args.files)
    except UploadError as e:
        logger.error(f"source: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg, files)

    if not args.indicator:
        logger.error("indicator: --indicator is required")
        return EXIT_FATAL

    uploaded_by = args.uploaded_by or os.getenv(ENV_USER) or DEFAULT_USER
    logger.info(f"Validating {len(files)} file(s) for indicator {args.indicator}")
    try:
        result, outcomes = process_all(cfg, args.indicator, uploaded_by, files)
    except UploadError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    for outcome in outcomes:
        name = outcome.path.name
        if outcome.error is not None:
            logger.error(f"{name}: {outcome.error}")
        elif outcome.succeeded:
            logger.info(f"{name}: validated rows={len(outcome.records)}")
        else:
            diagnostics = outcome.result.diagnostics if outcome.result is not None else []
            logger.warning(f"{name}: found {len(diagnostics)} error(s); fix and re-upload")
            for line in render_diagnostics(diagnostics, cfg.max_displayed_errors):
                logger.warning(f"  {line}")

    if args.output is not None:
        try:
            records_to_frame(result.records).to_csv(args.output, index=False)
        except OSError as e:
            logger.error(f"output: {e}")
            return EXIT_FATAL
        logger.info(f"accepted records written: {args.output}")

    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
