# sqlreview/cli.py
"""
Command line entry point.

    sql-reviewer migration.sql --config config/checks.json --catalog schema.json

Exit status: 0 clean or only warnings, 1 when an ERROR advice or a rule
failure was reported, 2 on usage or configuration problems.
"""
import argparse
import json
import logging
import sys

from .catalog import InMemoryCatalog
from .engine import DEFAULT_CHECKS_PATH, RuleEngine
from .errors import ReviewError
from .logging_config import configure_logging
from .parser import DEFAULT_DIALECT
from .reviewer import review_sql_text

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FINDINGS = 1
EXIT_USAGE = 2


def build_parser():
    parser = argparse.ArgumentParser(prog="sql-reviewer", description="Review a SQL script against schema rules.")
    parser.add_argument("file", help="SQL script to review ('-' reads stdin)")
    parser.add_argument("--config", default=DEFAULT_CHECKS_PATH, help="rule configuration (checks.json)")
    parser.add_argument("--catalog", help="JSON schema catalog describing existing tables")
    parser.add_argument("--dialect", default=DEFAULT_DIALECT, help="SQL dialect (default: %(default)s)")
    parser.add_argument("--format", choices=("text", "json"), default="text", dest="output_format")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    parser.add_argument("--json-logs", action="store_true", help="emit logs as JSON lines")
    return parser


def _read_script(path):
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def render_text(result, out):
    for advice in result.advices:
        print(str(advice), file=out)
    for error in result.rule_errors:
        print(f"[RULE FAILURE] {error}", file=out)
    summary = result.summary
    print(f"{summary['total']} advice(s): {summary['errors']} error(s), "
          f"{summary['warnings']} warning(s), {summary['infos']} info(s)", file=out)


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(level="DEBUG" if args.verbose else "WARNING", json_logs=args.json_logs)

    try:
        script = _read_script(args.file)
        catalog = InMemoryCatalog.from_file(args.catalog) if args.catalog else None
        engine = RuleEngine(checks_config_path=args.config, strict=True)
        # surface payload problems before reviewing anything
        engine.build_rules(catalog=catalog, dialect=args.dialect)
    except (OSError, ValueError, ReviewError) as e:
        logger.error("%s", e)
        print(f"sql-reviewer: {e}", file=sys.stderr)
        return EXIT_USAGE

    result = review_sql_text(script, catalog=catalog, dialect=args.dialect, engine=engine)

    if args.output_format == "json":
        print(json.dumps(result.to_dict(), indent=2))
    else:
        render_text(result, sys.stdout)

    if result.has_errors() or result.rule_errors:
        return EXIT_FINDINGS
    return EXIT_OK
