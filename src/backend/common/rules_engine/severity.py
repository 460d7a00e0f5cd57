from __future__ import annotations

from typing import Dict, Iterable

from .models import Severity, Violation

# Process boundary: run severity -> exit status.
EXIT_CODES: Dict[Severity, int] = {
    Severity.OK: 0,
    Severity.WARN: 1,
    Severity.ERROR: 2,
}


def combine(a: Severity, b: Severity) -> Severity:
    return a if a.rank >= b.rank else b


def worst(severities: Iterable[Severity]) -> Severity:
    result = Severity.OK
    for sev in severities:
        result = combine(result, sev)
    return result


def document_severity(violations: Iterable[Violation]) -> Severity:
    return worst(v.severity.as_severity() for v in violations)


def run_severity(document_severities: Iterable[Severity]) -> Severity:
    return worst(document_severities)


def exit_code_for(severity: Severity) -> int:
    return EXIT_CODES[severity]


def count_by_severity(document_severities: Iterable[Severity]) -> Dict[Severity, int]:
    totals = {sev: 0 for sev in Severity}
    for sev in document_severities:
        totals[sev] += 1
    return totals
