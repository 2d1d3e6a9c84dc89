from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from xlsx2resx.config.loader import DEFAULT_CONFIG_PATH, ConfigError, ConverterConfig, load_config
from xlsx2resx.errors import ConversionError, InputNotFound, OutputPathNotFound
from xlsx2resx.logging.error_log import ErrorLogBuffer
from xlsx2resx.logging.init import TRACE_LEVEL, log_summary, set_level, setup_logging
from xlsx2resx.models.conversion_result import ConversionResult
from xlsx2resx.models.error_record import ErrorRecord
from xlsx2resx.services.forward import convert_workbook, scan_workbooks
from xlsx2resx.services.inverse import invert_documents
from xlsx2resx.services.summary import render_summary_line
from xlsx2resx.services.watcher import XlsxWatcher

"""CLI entrypoint.

Flow:
- Load .env, then the optional YAML config
- Resolve input / output (flag > environment > config) and expand ``~``
- Pre-flight checks (input exists, output directory exists)
- Run the inverse conversion once (--invert), the forward conversion once,
  or the forward conversion on every workbook change (--watch)
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2
EXIT_INPUT_NOT_FOUND = 3
EXIT_OUTPUT_NOT_FOUND = 4

ENV_INPUT = "XLSX2RESX_INPUT"
ENV_OUTPUT = "XLSX2RESX_OUTPUT"


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv (existing variables win unless override)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="xlsx2resx",
        description="Convert an Excel translation sheet to .resx resource files and back",
    )
    p.add_argument(
        "--output",
        help="Path to output the resource files, or the Excel file when using --invert",
    )
    p.add_argument(
        "--input",
        help="Excel file or directory to watch. All .xlsx files will be parsed. "
        "With --invert this is the neutral .resx file",
    )
    p.add_argument("--watch", action="store_true", default=None, help="Watch for file changes")
    p.add_argument(
        "--invert",
        action="store_true",
        default=None,
        help="Input file is .resx; generate an Excel file as output",
    )
    p.add_argument("-v", dest="verbose", action="store_true", help="Verbose")
    p.add_argument("-vv", dest="trace", action="store_true", help="Very verbose")
    p.add_argument("--debug", action="store_true", help="Enable debug logging (same as -v)")
    p.add_argument("--config", type=Path, help=f"YAML config file (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--poll-interval", type=float, help="Watch mode polling interval in seconds")
    return p.parse_args(argv)


def _load_cfg(config_path: Path | None) -> ConverterConfig:
    # 既定パスは任意, 明示指定は必須
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ConverterConfig()
        config_path = DEFAULT_CONFIG_PATH
    return load_config(config_path)


def expand_user_directory(path: str) -> str:
    """Expand ``~`` and ``~/...`` to the invoking user's home directory."""
    if path == "~" or path.startswith("~/"):
        return os.path.expanduser(path)
    return path


def _resolve(flag: str | None, env_name: str, configured: str | None) -> str | None:
    return flag or os.getenv(env_name) or configured


def preflight(input_path: Path, output_path: Path) -> None:
    """Raise InputNotFound / OutputPathNotFound before any conversion starts."""
    if not input_path.exists():
        raise InputNotFound(f"Given Excel file/path does not exist: {input_path}")
    if not output_path.is_dir():
        raise OutputPathNotFound(f"Given output path does not exist: {output_path}")


def _report(result: ConversionResult) -> None:
    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " prefix
    log_summary(summary_line[len("SUMMARY "):])


def _record_failure(error_log: ErrorLogBuffer, source: Path, error: ConversionError) -> None:
    error_log.append(
        ErrorRecord.create(
            file=source.name,
            sheet="",
            locale=None,
            error_type=error.error_type,
            message=str(error),
        )
    )


def _run_invert(input_path: Path, output_path: Path, error_log: ErrorLogBuffer, logger) -> int:
    try:
        result = invert_documents(input_path, output_path)
    except ConversionError as e:
        logger.error("invert: %s", e)
        _record_failure(error_log, input_path, e)
        return EXIT_FATAL
    logger.info("Successfully converted the RESX to Excel")
    _report(result)
    return EXIT_SUCCESS_ALL


def _convert_once(workbook: Path, output_path: Path, error_log: ErrorLogBuffer) -> ConversionResult:
    result = convert_workbook(workbook, output_path, error_log)
    _report(result)
    return result


def _run_forward(input_path: Path, output_path: Path, error_log: ErrorLogBuffer, logger) -> int:
    workbooks = scan_workbooks(input_path) if input_path.is_dir() else [input_path]
    if not workbooks:
        logger.info("no .xlsx files in %s", input_path)
        return EXIT_SUCCESS_ALL

    aborted = 0
    failed_writes = 0
    for workbook in workbooks:
        try:
            result = _convert_once(workbook, output_path, error_log)
        except ConversionError as e:
            logger.error("convert: %s", e)
            _record_failure(error_log, workbook, e)
            aborted += 1
            continue
        failed_writes += result.failed_writes

    if aborted == len(workbooks):
        return EXIT_FATAL
    if aborted or failed_writes:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


def _run_watch(
    input_path: Path, output_path: Path, error_log: ErrorLogBuffer, poll_interval: float
) -> int:
    def on_change(workbook: Path) -> None:
        try:
            _convert_once(workbook, output_path, error_log)
        except ConversionError as e:
            _record_failure(error_log, workbook, e)
            raise
        finally:
            error_log.flush()

    XlsxWatcher(input_path, on_change, poll_interval=poll_interval).run()
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む ([] はテストから渡される)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    try:
        cfg = _load_cfg(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.trace:
        set_level("trace")
        logger.log(TRACE_LEVEL, "very verbose mode")
    elif args.verbose or args.debug:
        set_level("debug")
        logger.debug("debug mode enabled")
    else:
        set_level(cfg.log_level)

    output = _resolve(args.output, ENV_OUTPUT, cfg.output)
    input_ = _resolve(args.input, ENV_INPUT, cfg.input)
    if not output:
        logger.error("Specify the output path for resource files: --output=PATH")
        return EXIT_FATAL
    if not input_:
        logger.error("Specify the Excel file or path: --input=PATH")
        return EXIT_FATAL

    input_path = Path(expand_user_directory(input_))
    output_path = Path(expand_user_directory(output))
    try:
        preflight(input_path, output_path)
    except InputNotFound as e:
        logger.error(f"{e}")
        return EXIT_INPUT_NOT_FOUND
    except OutputPathNotFound as e:
        logger.error(f"{e}")
        return EXIT_OUTPUT_NOT_FOUND

    invert = args.invert if args.invert is not None else cfg.invert
    watch = args.watch if args.watch is not None else cfg.watch
    poll_interval = args.poll_interval if args.poll_interval is not None else cfg.poll_interval

    error_log = ErrorLogBuffer(Path(cfg.log_dir))
    try:
        if invert:
            return _run_invert(input_path, output_path, error_log, logger)
        if watch:
            return _run_watch(input_path, output_path, error_log, poll_interval)
        return _run_forward(input_path, output_path, error_log, logger)
    finally:
        written = error_log.flush()
        if written is not None:
            logger.info(f"error log: {written}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
