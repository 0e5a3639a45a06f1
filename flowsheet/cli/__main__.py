from __future__ import annotations

import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from flowsheet.api.client import ApiError, MessagingApiClient, download_message_history
from flowsheet.config.loader import DEFAULT_CONFIG_PATH, ConfigError, ExportConfig, load_config
from flowsheet.excel.reader import RecordSourceError, read_frame
from flowsheet.logging.init import enable_debug, log_summary, setup_logging
from flowsheet.services.orchestrator import EXPORT_MODES, ProcessingError, run_export
from flowsheet.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env (API credentials) and the YAML config
- Optionally download the message history through the API (--fetch)
- Export the input file to a flattened workbook and print a SUMMARY line

Exit codes: 0 every record exported, 2 some records failed to parse,
1 fatal (config, input, API or write error).
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

API_KEY_ENV = "MESSAGING_API_KEY"
API_URL_ENV = "MESSAGING_API_URL"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env with python-dotenv; .env values override the process environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Message history -> flattened spreadsheet exporter")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--mode", choices=EXPORT_MODES, help="Override export mode")
    p.add_argument("--input", type=Path, help="Override input file")
    p.add_argument("--output", type=Path, help="Override output file")
    p.add_argument("--fetch", action="store_true", help="Download message history into the input path first")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print input headers & first rows then exit")
    return p.parse_args(argv)


def _apply_overrides(cfg: ExportConfig, args: argparse.Namespace) -> ExportConfig:
    overrides: dict[str, str] = {}
    if args.mode:
        overrides["mode"] = args.mode
    if args.input:
        overrides["input_path"] = str(args.input)
    if args.output:
        overrides["output_path"] = str(args.output)
    return replace(cfg, **overrides) if overrides else cfg


def _fetch(cfg: ExportConfig) -> Path:
    """Download the configured date range into cfg.input_path.

    Raises:
        ApiError: Missing API settings or request failure
    """
    api = cfg.api
    base_url = os.getenv(API_URL_ENV) or api.base_url
    if not base_url:
        raise ApiError(f"api base_url not configured (config api.base_url or {API_URL_ENV})")
    if api.application_id is None or not api.date_from or not api.date_to:
        raise ApiError("api.application_id, api.date_from and api.date_to are required for --fetch")
    client = MessagingApiClient(base_url, os.getenv(API_KEY_ENV), timeout=api.timeout_seconds)
    return download_message_history(
        client, api.application_id, api.date_from, api.date_to, Path(cfg.input_path)
    )


def _inspect_data(cfg: ExportConfig) -> int:
    path = Path(cfg.input_path)
    try:
        df = read_frame(path)
    except RecordSourceError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    print(f"FILE: {path.name} rows={len(df)} cols={list(df.columns)}")
    # datetime cells are not JSON friendly; isoformat them for display
    for r in df.head(3).to_dict(orient="records"):
        print("    sample_row=", {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in r.items()})
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not pick up pytest's own argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    if args.debug:
        enable_debug()
    _load_env_file(Path(".env"), override=True)

    try:
        cfg = _apply_overrides(load_config(args.config), args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.fetch:
        try:
            fetched = _fetch(cfg)
        except (ApiError, OSError) as e:
            logger.error(f"fetch: {e}")
            return EXIT_FATAL
        logger.info(f"fetched message history: {fetched}")

    if args.inspect_data:
        return _inspect_data(cfg)

    logger.info(f"Exporting {cfg.input_path} (mode={cfg.mode})")
    try:
        result = run_export(cfg)
    except ProcessingError as e:
        logger.error(f"export: {e}")
        return EXIT_FATAL

    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line.removeprefix("SUMMARY "))

    if result.has_failures:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
