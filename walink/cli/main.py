from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_env_file, load_settings, save_settings
from ..export.csv_export import write_links_txt, write_result_csvs, write_template_csv
from ..export.project import ProjectBundleError, load_project, save_project
from ..logging.init import log_summary, setup_logging
from ..logging.issue_log import IssueLogBuffer
from ..models.fields import REQUIRED_COLUMNS
from ..models.run_result import RunResult
from ..models.settings import Settings
from ..services.headers import resolve_headers
from ..services.orchestrator import InputSource, process_sources
from ..services.summary import render_summary_line
from ..sheets.reader import SAMPLE_ROWS, SourceReadError

"""CLI entrypoint.

Flow:
- load .env, then settings (config/settings.yml), then command-line overrides
- collect inputs (files, '-' for pasted CSV/TSV on stdin, --sample, --project-in)
- run the pipeline once over every input
- export the buckets as CSV, the links as text, optionally a project bundle
- print the SUMMARY line and exit with the status code contract below
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

LINKS_FILE = "whatsapp_links.txt"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="walink",
        description="Generate personalized WhatsApp links from candidate spreadsheets",
    )
    p.add_argument("inputs", nargs="*", help="CSV/TSV/Excel files; '-' reads pasted CSV/TSV from stdin")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="Settings YAML (default: %(default)s)")
    p.add_argument("--out-dir", default="output", help="Directory for exported files (default: %(default)s)")
    p.add_argument("--country-code", help="Default country code prefixed to 10-digit numbers")
    p.add_argument("--template-file", help="Read the message template from this file")
    p.add_argument("--no-dedupe", action="store_true", help="Keep rows sharing a phone number")
    p.add_argument("--no-auto-detect", action="store_true", help="Always use the configured country code")
    p.add_argument("--strict-phone", action="store_true", help="Parse phones with the phonenumbers library first")
    p.add_argument(
        "--map",
        action="append",
        default=[],
        metavar="CANONICAL=HEADER",
        help="Map a source header onto a canonical column (repeatable)",
    )
    p.add_argument("--query", default="", help="Only export rows whose name or role contains this text")
    p.add_argument("--strict-columns", action="store_true", help="Check required columns on every row")
    p.add_argument("--sample", action="store_true", help="Add two sample candidates to the input")
    p.add_argument("--write-template", metavar="PATH", help="Write a candidate template CSV and exit")
    p.add_argument("--save-settings", action="store_true", help="Persist the effective settings to --config")
    p.add_argument("--project-out", metavar="PATH", help="Save settings, mapping and rows as a project bundle")
    p.add_argument("--project-in", metavar="PATH", help="Load a project bundle as settings + input rows")
    p.add_argument("--print-links", action="store_true", help="Print every generated link to stdout")
    p.add_argument("--inspect-data", action="store_true", help="Print headers, mapping and first rows then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _parse_mapping(items: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for item in items:
        key, sep, header = item.partition("=")
        key, header = key.strip(), header.strip()
        if not sep or not header:
            raise ConfigError(f"invalid --map {item!r}: expected CANONICAL=HEADER")
        if key not in REQUIRED_COLUMNS:
            raise ConfigError(f"invalid --map {item!r}: {key!r} is not one of {', '.join(REQUIRED_COLUMNS)}")
        mapping[key] = header
    return mapping


def _apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    changes: dict[str, object] = {}
    if args.country_code:
        changes["country_code"] = args.country_code
    if args.template_file:
        path = Path(args.template_file)
        try:
            changes["template"] = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"template file: {e}") from e
    if args.no_dedupe:
        changes["dedupe_by_phone"] = False
    if args.no_auto_detect:
        changes["auto_detect_country"] = False
    if args.strict_phone:
        changes["phone_strategy"] = "strict"
    if args.strict_columns:
        changes["strict_required_columns"] = True
    if args.map:
        changes["column_mapping"] = {**settings.column_mapping, **_parse_mapping(args.map)}
    return settings.replace(**changes) if changes else settings


def _collect_sources(args: argparse.Namespace, project_rows: list[dict] | None) -> list[InputSource]:
    sources: list[InputSource] = []
    if project_rows is not None:
        sources.append(InputSource(name="<project>", rows=project_rows))
    for item in args.inputs:
        if item == "-":
            sources.append(InputSource(name="<stdin>", text=sys.stdin.read()))
        else:
            sources.append(InputSource.from_path(Path(item)))
    if args.sample:
        sources.append(InputSource(name="<sample>", rows=SAMPLE_ROWS))
    return sources


def _inspect_data(sources: list[InputSource], settings: Settings) -> int:
    for source in sources:
        print(f"SOURCE: {source.name}")
        try:
            rows = source.load()
        except SourceReadError as e:
            print(f"  read_error: {e}")
            continue
        if not rows:
            print("  (no rows)")
            continue
        mapping = resolve_headers(rows[0].keys(), settings.column_mapping)
        print(f"  headers={list(rows[0].keys())}")
        print(f"  mapping={mapping}")
        print(f"  rows={len(rows)} sample_rows={rows[:3]}")
    return EXIT_SUCCESS_ALL


def _export(result: RunResult, out_dir: Path, logger) -> None:
    for bucket, path in write_result_csvs(result.result, out_dir).items():
        logger.info(f"export {bucket}: {path}")
    count = write_links_txt(result.result.usable, out_dir / LINKS_FILE)
    if count:
        logger.info(f"export links: {out_dir / LINKS_FILE} ({count} links)")


def main(argv: list[str] | None = None) -> int:
    # None のときのみ sys.argv を読む (テストで main([]) を渡すケース)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    if args.write_template:
        path = write_template_csv(Path(args.write_template))
        logger.info(f"template written: {path}")
        return EXIT_SUCCESS_ALL

    load_env_file(Path(".env"), override=True)
    config_path = Path(args.config)
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    project_rows = None
    if args.project_in:
        try:
            settings, project_rows = load_project(Path(args.project_in))
        except ProjectBundleError as e:
            logger.error(f"project: {e}")
            return EXIT_FATAL
        logger.info(f"project loaded: {args.project_in} rows={len(project_rows)}")

    try:
        settings = _apply_cli_overrides(settings, args)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    sources = _collect_sources(args, project_rows)
    if not sources:
        logger.error("no input: pass files, '-' for stdin, --sample or --project-in")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(sources, settings)

    issue_log = IssueLogBuffer()
    result = process_sources(sources, settings, query=args.query, issue_log=issue_log)

    _export(result, Path(args.out_dir), logger)
    if args.print_links:
        for link in result.result.links():
            print(link)
    if args.project_out:
        path = save_project(Path(args.project_out), settings, result.raw_rows)
        logger.info(f"project saved: {path}")
    if args.save_settings:
        save_settings(config_path, settings)
        logger.info(f"settings saved: {config_path}")

    try:
        log_path = issue_log.flush()
    except OSError as e:
        logger.warning(f"issue log not written: {e}")
        log_path = None
    if log_path is not None:
        logger.info(f"issues logged: {log_path}")

    # log_summary が "SUMMARY " を付与するので先頭ラベルを外す
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.failed_sources > 0 or result.missing_columns:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
