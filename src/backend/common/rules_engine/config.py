from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from .models import RuleSeverity
from .rule import Rule, RuleSet

logger = logging.getLogger(__name__)

RULES_CONFIG_ENV = "KUBECHECK_RULES_CONFIG"
LOCAL_CONFIG_NAME = ".kubecheck.yaml"


class RuleConfigError(ValueError):
    pass


def default_rule_set() -> RuleSet:
    return RuleSet(
        rules=[
            Rule(
                name="no-latest-image",
                description="Disallow latest image tags",
                severity=RuleSeverity.ERROR,
                type="image",
                conditions=["image_tag_equals:latest", "image_tag_missing"],
                message="Container '{container}' uses 'latest' image tag",
                help="use a specific version or digest",
            ),
            Rule(
                name="require-resource-requests",
                description="Require CPU and memory requests",
                severity=RuleSeverity.WARN,
                type="resources",
                conditions=["missing_cpu_requests", "missing_memory_requests"],
                message="Container '{container}' missing resource requests",
                help="set requests.cpu and requests.memory",
            ),
            Rule(
                name="require-resource-limits",
                description="Require CPU and memory limits",
                severity=RuleSeverity.WARN,
                type="resources",
                conditions=["missing_cpu_limits", "missing_memory_limits"],
                message="Container '{container}' missing resource limits",
                help="set limits.cpu and limits.memory",
            ),
            Rule(
                name="no-root-containers",
                description="Containers must not run as root",
                severity=RuleSeverity.ERROR,
                type="security",
                conditions=["missing_security_context", "run_as_non_root_false", "run_as_user_zero"],
                message="Container '{container}' running as root or missing securityContext",
                help="set runAsNonRoot: true and runAsUser to non-zero value",
            ),
        ]
    )


def parse_rule_set(raw: Any, *, source: str = "<config>") -> RuleSet:
    """
    Validate a decoded rules document.

    Accepted shapes:
    - {"rules": [ {...}, ... ]}
    - [ {...}, ... ]                (bare list of rules)
    """
    if isinstance(raw, list):
        raw = {"rules": raw}
    if not isinstance(raw, dict):
        raise RuleConfigError(f"{source}: rules config must be a mapping with a 'rules' list.")
    if not isinstance(raw.get("rules"), list):
        raise RuleConfigError(f"{source}: missing 'rules' list.")
    try:
        rule_set = RuleSet.model_validate(raw)
    except ValidationError as exc:
        raise RuleConfigError(f"{source}: invalid rules config: {exc}") from exc

    for rule in rule_set.rules:
        unknown = [c.expression for c in rule.compiled_conditions if not c.recognized]
        if unknown:
            # Not fatal: unknown conditions never match.
            logger.warning("Rule %s has unrecognized conditions: %s", rule.name, ", ".join(unknown))
    return rule_set


def load_rule_set(path: Union[str, Path]) -> RuleSet:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RuleConfigError(f"failed to read config file {path}: {exc}") from exc
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuleConfigError(f"failed to parse config file {path}: {exc}") from exc
    rule_set = parse_rule_set(raw, source=str(path))
    logger.debug("Loaded %d rules from %s", len(rule_set.rules), path)
    return rule_set


def resolve_rule_set(path: Optional[Union[str, Path]] = None, *, cwd: Optional[Path] = None) -> RuleSet:
    """Explicit path, then $KUBECHECK_RULES_CONFIG, then ./.kubecheck.yaml, then built-in defaults."""
    if path:
        return load_rule_set(path)
    env_path = os.getenv(RULES_CONFIG_ENV, "").strip()
    if env_path:
        return load_rule_set(env_path)
    local = (cwd or Path.cwd()) / LOCAL_CONFIG_NAME
    if local.is_file():
        return load_rule_set(local)
    return default_rule_set()
