"""Static policy checks for Kubernetes manifests.

This package contains only evaluation logic:
- Inputs are decoded manifest documents + a rule set.
- No file discovery, YAML parsing, helm, or cluster access lives here.
"""

from .conditions import Condition, ConditionKind, interpret, parse_condition
from .config import RuleConfigError, default_rule_set, load_rule_set, resolve_rule_set
from .extractor import extract_containers
from .models import (
    Container,
    DocumentResult,
    FileError,
    Resource,
    Resources,
    ResourceSpec,
    ReviewReport,
    RuleSeverity,
    SecurityContext,
    Severity,
    Violation,
)
from .rule import Rule, RuleSet
from .runner import RulesRunner, evaluate_resource
from .severity import document_severity, exit_code_for, run_severity
