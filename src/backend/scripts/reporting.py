from __future__ import annotations

import json
from dataclasses import dataclass
from typing import List, TextIO

from common.rules_engine.models import DocumentResult, ReviewReport, RuleSeverity, Severity, Violation
from common.rules_engine.rule import RuleSet

RULE_WIDTH = 70


@dataclass(frozen=True)
class Palette:
    reset: str = ""
    red: str = ""
    green: str = ""
    yellow: str = ""
    cyan: str = ""
    gray: str = ""
    bold: str = ""

    @classmethod
    def ansi(cls) -> "Palette":
        return cls(
            reset="\033[0m",
            red="\033[31m",
            green="\033[32m",
            yellow="\033[33m",
            cyan="\033[36m",
            gray="\033[90m",
            bold="\033[1m",
        )


class TextReporter:
    """Human-readable report.

    Single-file mode prints a box per document with errors before warnings;
    directory mode prints one line per document plus a summary block.
    """

    def __init__(
        self,
        out: TextIO,
        rule_set: RuleSet,
        *,
        directory_mode: bool = False,
        verbose: bool = False,
        palette: Palette | None = None,
    ):
        self._out = out
        self._rule_set = rule_set
        self._directory_mode = directory_mode
        self._verbose = verbose
        self._c = palette or Palette()

    def _print(self, line: str = "") -> None:
        self._out.write(line + "\n")

    def write(self, report: ReviewReport, *, target: str = "") -> None:
        if self._directory_mode and target:
            self._print()
            self._print(f"  Scanning directory: {target}")
            self._print(f"  {'━' * RULE_WIDTH}")
            self._print()

        for doc in report.documents:
            if self._directory_mode:
                self._write_compact(doc)
            else:
                self._write_detailed(doc)

        for err in report.errors:
            self._print(f"  {self._c.red}✖{self._c.reset}  {err.source} could not be parsed: {err.message}")

        self._write_summary(report)

    def _help_for(self, violation: Violation) -> str | None:
        rule = self._rule_set.get(violation.rule)
        return rule.help if rule is not None else None

    def _write_detailed(self, doc: DocumentResult) -> None:
        c = self._c
        self._print()
        self._print(f"  {c.bold}● File: {doc.source}{c.reset}")
        title = f" {doc.kind}: {doc.name} "
        if not doc.violations:
            self._print(f"  {c.green}┌─{title}{'─' * max(1, RULE_WIDTH - 2 - len(title))}┐{c.reset}")
            self._print(f"  {c.green}│{c.reset}  {c.green}✔ All checks passed{c.reset}")
            self._print(f"  {c.green}└{'─' * (RULE_WIDTH - 1)}┘{c.reset}")
            return

        self._print(f"  {c.cyan}┌─{title}{'─' * max(1, RULE_WIDTH - 2 - len(title))}┐{c.reset}")
        ordered = [v for v in doc.violations if v.severity == RuleSeverity.ERROR] + [
            v for v in doc.violations if v.severity != RuleSeverity.ERROR
        ]
        for i, violation in enumerate(ordered):
            if i:
                self._print(f"  {c.cyan}│{c.reset}")
            self._write_violation(violation)

        summary = f" [ {doc.error_count} errors | {doc.warn_count} warns ] "
        self._print(f"  {c.cyan}└{'─' * max(1, RULE_WIDTH - 1 - len(summary))}{summary}┘{c.reset}")

    def _write_violation(self, violation: Violation) -> None:
        c = self._c
        if violation.severity == RuleSeverity.ERROR:
            symbol, color = "✖", c.red
        else:
            symbol, color = "⚠", c.yellow
        self._print(f"  {c.cyan}│{c.reset}  {color}{symbol}  {violation.severity.value} [{violation.rule}]{c.reset}")
        self._print(f"  {c.cyan}│{c.reset}     {c.bold}{violation.message}{c.reset}")
        help_text = self._help_for(violation)
        if help_text:
            self._print(f"  {c.cyan}│{c.reset}     {c.gray}help: {help_text}{c.reset}")

    def _write_compact(self, doc: DocumentResult) -> None:
        c = self._c
        dots = "." * max(1, 50 - len(doc.source))
        if doc.severity == Severity.OK:
            if self._verbose:
                self._print(f"  {c.green}✔{c.reset}  {doc.source} {dots} PASSED")
                self._print(f"     {c.gray}Resource: {doc.kind}/{doc.name}{c.reset}")
            return

        if doc.severity == Severity.ERROR:
            self._print(f"  {c.red}✖{c.reset}  {doc.source} {dots} {doc.error_count} ERR")
        else:
            self._print(f"  {c.yellow}⚠{c.reset}  {doc.source} {dots} {doc.warn_count} WARN")
        for i, violation in enumerate(doc.violations):
            if i == 0:
                self._print(f"     {c.gray}└─ [{doc.name}] {violation.message}{c.reset}")
            else:
                self._print(f"        {c.gray}{violation.message}{c.reset}")

    def _write_summary(self, report: ReviewReport) -> None:
        c = self._c
        checked = len(report.documents)
        if checked == 0 and not report.errors:
            self._print()
            self._print("  Summary ➔ no resources found.")
            return

        self._print()
        if not self._directory_mode:
            count = report.violation_count
            plural = "" if count == 1 else "s"
            self._print(f"  Summary ➔ {checked} resource{'' if checked == 1 else 's'} checked. "
                        f"{c.bold}{count} violation{plural} found.{c.reset}")
            return

        ok = report.totals.get(Severity.OK, 0)
        warn = report.totals.get(Severity.WARN, 0)
        err = report.totals.get(Severity.ERROR, 0)
        parts: List[str] = []
        if ok:
            parts.append(f"{c.green}{ok} OK{c.reset}")
        if warn:
            parts.append(f"{c.yellow}{warn} Warning{c.reset}")
        if err:
            parts.append(f"{c.red}{err} Error{c.reset}")
        if report.errors:
            parts.append(f"{c.red}{len(report.errors)} Unparseable{c.reset}")

        self._print(f"  {'━' * RULE_WIDTH}")
        self._print()
        self._print(f"  Summary ➔ {checked} resources checked")
        self._print(f"  Result  ➔ {'  |  '.join(parts)}")
        if report.severity == Severity.ERROR:
            status = f"{c.red}{c.bold}FAILED{c.reset}"
        elif report.severity == Severity.WARN:
            status = f"{c.yellow}{c.bold}PASSED WITH WARNINGS{c.reset}"
        else:
            status = f"{c.green}{c.bold}PASSED{c.reset}"
        self._print(f"  Status  ➔ {status} Exit code: {report.exit_code}")
        self._print()
        self._print(f"  {'━' * RULE_WIDTH}")


def write_json(report: ReviewReport, out: TextIO) -> None:
    out.write(json.dumps(report.model_dump(mode="json"), indent=2) + "\n")


def write_markdown(report: ReviewReport, out: TextIO) -> None:
    lines = [
        "# Manifest Check",
        "",
        f"Generated at: {report.generated_at.isoformat()}",
        f"Result: {report.severity.value} (exit code {report.exit_code})",
        "",
        "## Totals",
    ]
    for severity, count in report.totals.items():
        lines.append(f"- {severity.value}: {count}")
    lines.append("")
    lines.append("## Documents")
    for doc in report.documents:
        lines.append("")
        lines.append(f"### {doc.kind}/{doc.name} ({doc.source}) - {doc.severity.value}")
        if doc.namespace:
            lines.append(f"- Namespace: {doc.namespace}")
        if not doc.violations:
            lines.append("- All checks passed")
        for v in doc.violations:
            lines.append(f"- {v.severity.value} `{v.rule}`: {v.message}")
    if report.errors:
        lines.append("")
        lines.append("## Unparseable files")
        for err in report.errors:
            lines.append(f"- {err.source}: {err.message}")
    out.write("\n".join(lines) + "\n")
