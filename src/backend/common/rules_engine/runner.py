from __future__ import annotations

from typing import List, Optional

from .config import default_rule_set
from .extractor import extract_containers
from .models import DocumentResult, Resource, Violation
from .rule import RuleSet
from .severity import document_severity


def evaluate_resource(resource: Resource, rule_set: RuleSet) -> List[Violation]:
    """
    Evaluate every rule against every container of one document.

    Output is rule-major, container-minor: all violations of the first rule
    come before any violation of the second. A rule yields at most one
    violation per container.
    """
    containers = extract_containers(resource)
    violations: List[Violation] = []
    for rule in rule_set.rules:
        for container in containers:
            violation = rule.evaluate(container)
            if violation is not None:
                violations.append(violation)
    return violations


class RulesRunner:
    def __init__(self, rule_set: Optional[RuleSet] = None):
        self._rule_set = rule_set if rule_set is not None else default_rule_set()

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def evaluate(self, resource: Resource) -> List[Violation]:
        return evaluate_resource(resource, self._rule_set)

    def review(self, resource: Resource, *, source: str = "") -> DocumentResult:
        violations = self.evaluate(resource)
        return DocumentResult(
            source=source,
            kind=resource.kind,
            name=resource.name,
            namespace=resource.namespace,
            violations=violations,
            severity=document_severity(violations),
        )
