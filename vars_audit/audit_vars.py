"""Audit layered YAML variables for undefined values, overrides and naming.

Layer files are given in precedence order, lowest first, e.g.::

    vars-audit group_vars/all.yml group_vars/web.yml host_vars/web1.yml

Missing layer files are ignored, so optional layers can always be listed.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from vars_audit.errors import ConfigError
from vars_audit.load_config import load_config
from vars_audit.run_audit import fatal_concerns, run_audit

EXIT_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    ap = argparse.ArgumentParser(
        description="Audit layered YAML variables (undefined, overridden, badly named).",
    )
    ap.add_argument(
        "layers",
        nargs="+",
        type=Path,
        help="Layer files in precedence order, lowest first",
    )
    ap.add_argument("--config", help="Path to a YAML configuration file")
    ap.add_argument(
        "--facts",
        type=Path,
        help="YAML file of host facts, used only with --remote-facts",
    )
    ap.add_argument(
        "--remote-facts",
        action="store_true",
        default=None,
        help="Make facts available when resolving variables",
    )
    ap.add_argument(
        "--check-vars",
        help="Comma or space separated variables to check (default: all)",
    )
    ap.add_argument("--from-pattern", help="Only check variables matching this regex")
    ap.add_argument(
        "--regex-filter",
        help="Tolerate undefined variables whose name matches this regex",
    )
    ap.add_argument(
        "--assume-error",
        type=int,
        help="Number of undefined variables tolerated (default: 0)",
    )
    ap.add_argument("--workers", type=int, help="Parallel variable evaluations")
    ap.add_argument(
        "--fatal-overrides",
        action="store_true",
        help="Fail the run when the override audit fails",
    )
    ap.add_argument(
        "--fatal-namespace",
        action="store_true",
        help="Fail the run when the namespace audit fails",
    )
    ap.add_argument("--report", help="Write a JSON report to this path")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def apply_shortcuts(config: dict[str, Any], args: argparse.Namespace) -> None:
    """Override configuration values with the command line flags given."""
    rules, thresholds, run = config["rules"], config["thresholds"], config["run"]
    if args.check_vars is not None:
        rules["from_list"] = args.check_vars
    if args.from_pattern is not None:
        rules["from_pattern"] = args.from_pattern
    if args.regex_filter is not None:
        rules["error_filter"] = args.regex_filter
    if args.assume_error is not None:
        thresholds["error_assume"] = args.assume_error
    if args.workers is not None:
        run["workers"] = args.workers
    if args.remote_facts is not None:
        run["remote_facts"] = args.remote_facts
    if args.fatal_overrides:
        config["fatal"]["override"] = True
    if args.fatal_namespace:
        config["fatal"]["namespace"] = True


def load_facts(path: Path | None) -> dict[str, Any] | None:
    """Load a YAML mapping of facts."""
    if path is None:
        return None
    try:
        facts = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Cannot read facts {path}: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(facts, dict):
        msg = f"Facts file {path} must be a mapping"
        raise ConfigError(msg)
    return facts


def main(argv: list[str] | None = None) -> int:
    """Run the audit and return the process exit code."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        apply_shortcuts(config, args)
        report = run_audit(args.layers, config, facts=load_facts(args.facts))
    except ConfigError as exc:
        msg = f"Configuration error: {exc}"
        raise SystemExit(msg) from exc

    for line in report.summary_lines():
        print(line)

    if args.report:
        report.generate_report(args.report)
        print(f"Report written to {args.report}")

    failures = report.failures(fatal_concerns(config))
    for failure in failures:
        print(f"FATAL [{failure.concern}]: {failure}", file=sys.stderr)
    return EXIT_FAILED if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())
