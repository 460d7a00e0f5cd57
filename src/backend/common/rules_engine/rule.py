from __future__ import annotations

from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from .conditions import Condition, parse_condition
from .models import Container, RuleSeverity, Violation

CONTAINER_PLACEHOLDER = "{container}"


class Rule(BaseModel):
    """A named policy check: ordered conditions, a severity and a message template.

    Conditions are OR'd; the first one that matches a container produces the
    rule's single violation for that container.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    description: str = ""
    severity: RuleSeverity
    type: str = ""
    conditions: Tuple[str, ...] = Field(min_length=1)
    message: str
    help: Optional[str] = None

    _compiled: Tuple[Condition, ...] = PrivateAttr(default=())

    @field_validator("severity", mode="before")
    @classmethod
    def _normalize_severity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def model_post_init(self, __context: Any) -> None:
        self._compiled = tuple(parse_condition(expr) for expr in self.conditions)

    @property
    def compiled_conditions(self) -> Tuple[Condition, ...]:
        return self._compiled

    def render_message(self, container_name: str) -> str:
        return self.message.replace(CONTAINER_PLACEHOLDER, container_name)

    def evaluate(self, container: Container) -> Optional[Violation]:
        for condition in self._compiled:
            if condition.matches(container):
                return Violation(
                    severity=self.severity,
                    message=self.render_message(container.name),
                    rule=self.name,
                )
        return None


class RuleSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    rules: List[Rule] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_names(self) -> "RuleSet":
        seen: set[str] = set()
        for rule in self.rules:
            if rule.name in seen:
                raise ValueError(f"Duplicate rule name: {rule.name}")
            seen.add(rule.name)
        return self

    def get(self, name: str) -> Optional[Rule]:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def names(self) -> List[str]:
        return [rule.name for rule in self.rules]
