from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO


def _ensure_backend_on_path() -> None:
    backend_dir = Path(__file__).resolve().parents[1]
    if str(backend_dir) not in sys.path:
        sys.path.insert(0, str(backend_dir))


_ensure_backend_on_path()

from common.rules_engine.config import RuleConfigError, resolve_rule_set  # noqa: E402
from common.rules_engine.models import ReviewReport, Severity  # noqa: E402
from common.rules_engine.runner import RulesRunner  # noqa: E402
from common.rules_engine.severity import EXIT_CODES  # noqa: E402
from connectors.helm import HelmRenderError, get_helm_config  # noqa: E402
from pipelines.discovery import InputError, discover_inputs  # noqa: E402
from pipelines.manifest_review import review_files  # noqa: E402
from scripts.reporting import Palette, TextReporter, write_json, write_markdown  # noqa: E402

logger = logging.getLogger("kubecheck")

USAGE_EXIT = EXIT_CODES[Severity.ERROR]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kubecheck",
        description="Validate Kubernetes manifests against policy rules without touching a cluster.",
    )
    parser.add_argument("target", nargs="?", help="File, directory, Helm chart directory, or '-' for stdin.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output.")
    parser.add_argument("--config", default=None, help="Rules config YAML (default: built-in rules).")
    parser.add_argument(
        "--format",
        choices=("text", "json", "markdown"),
        default="text",
        help="Output format (default: text).",
    )
    parser.add_argument("--workers", type=int, default=1, help="Files to review in parallel (default: 1).")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors in text output.")
    return parser


def _configure_logging(verbose: bool, stream: TextIO) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=stream,
    )


def _write_report(
    report: ReviewReport,
    args: argparse.Namespace,
    runner: RulesRunner,
    *,
    directory_mode: bool,
    out: TextIO,
) -> None:
    if args.format == "json":
        write_json(report, out)
        return
    if args.format == "markdown":
        write_markdown(report, out)
        return
    use_color = not args.no_color and hasattr(out, "isatty") and out.isatty()
    TextReporter(
        out,
        runner.rule_set,
        directory_mode=directory_mode,
        verbose=args.verbose,
        palette=Palette.ansi() if use_color else None,
    ).write(report, target=args.target if Path(args.target).is_dir() else "")


def main(
    argv: list[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> int:
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose, stderr)

    if not args.target:
        parser.print_usage(stderr)
        stderr.write("kubecheck: error: a file, directory, helm chart or '-' is required\n")
        return USAGE_EXIT
    if args.workers < 1:
        stderr.write("kubecheck: error: --workers must be >= 1\n")
        return USAGE_EXIT

    try:
        rule_set = resolve_rule_set(args.config)
    except RuleConfigError as exc:
        stderr.write(f"Error loading rules: {exc}\n")
        return USAGE_EXIT
    runner = RulesRunner(rule_set)

    try:
        helm_config = get_helm_config()
    except ValueError as exc:
        stderr.write(f"Error loading helm config: {exc}\n")
        return USAGE_EXIT

    try:
        with discover_inputs(args.target, stdin=stdin, helm_config=helm_config) as inputs:
            logger.debug("Reviewing %d files from %s with %d rules", len(inputs.files), args.target, len(rule_set.rules))
            report = review_files(inputs.files, runner, workers=args.workers)
            directory_mode = inputs.directory_mode or len(inputs.files) > 1
    except (InputError, HelmRenderError) as exc:
        stderr.write(f"Error processing input: {exc}\n")
        return USAGE_EXIT

    _write_report(report, args, runner, directory_mode=directory_mode, out=stdout)
    return report.exit_code


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
