from __future__ import annotations

import argparse
import json
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field

from .conditions import ConditionKind, registry
from .config import resolve_rule_set
from .rule import RuleSet


class ConditionCatalogEntry(BaseModel):
    identifier: str
    takes_parameter: bool = False
    evaluator: str


class RuleCatalogEntry(BaseModel):
    name: str
    description: str = ""
    severity: str
    type: str = ""
    conditions: List[str] = Field(default_factory=list)
    unrecognized_conditions: List[str] = Field(default_factory=list)
    message: str
    help: Optional[str] = None


def build_condition_catalog() -> List[ConditionCatalogEntry]:
    entries: List[ConditionCatalogEntry] = []
    for kind in registry.kinds():
        fn = registry.get(kind)
        entries.append(
            ConditionCatalogEntry(
                identifier=kind.value,
                takes_parameter=kind == ConditionKind.IMAGE_TAG_EQUALS,
                evaluator=f"{getattr(fn, '__module__', '')}.{getattr(fn, '__name__', '')}",
            )
        )
    entries.sort(key=lambda e: e.identifier)
    return entries


def build_rule_catalog(rule_set: RuleSet) -> List[RuleCatalogEntry]:
    # Declaration order is evaluation order; keep it.
    return [
        RuleCatalogEntry(
            name=rule.name,
            description=rule.description,
            severity=rule.severity.value,
            type=rule.type,
            conditions=list(rule.conditions),
            unrecognized_conditions=[c.expression for c in rule.compiled_conditions if not c.recognized],
            message=rule.message,
            help=rule.help,
        )
        for rule in rule_set.rules
    ]


def build_catalog(rule_set: RuleSet) -> Dict[str, Any]:
    return {
        "rules": [e.model_dump(exclude_none=True) for e in build_rule_catalog(rule_set)],
        "conditions": [e.model_dump() for e in build_condition_catalog()],
    }


def _dump_json(catalog: Dict[str, Any]) -> str:
    return json.dumps(catalog, indent=2)


def _dump_yaml(catalog: Dict[str, Any]) -> str:
    return yaml.safe_dump(catalog, sort_keys=False)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Print the active rule set and the condition vocabulary.")
    parser.add_argument(
        "--format",
        choices=("yaml", "json"),
        default="yaml",
        help="Output format (default: yaml).",
    )
    parser.add_argument("--config", default=None, help="Rules config file (default: built-in rules).")
    args = parser.parse_args(argv)

    catalog = build_catalog(resolve_rule_set(args.config))
    if args.format == "json":
        print(_dump_json(catalog))
    else:
        print(_dump_yaml(catalog))


if __name__ == "__main__":
    main()
