from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Tuple

from .models import Container

ConditionFn = Callable[[Container, Optional[str]], bool]


class ConditionKind(str, Enum):
    IMAGE_TAG_EQUALS = "image_tag_equals"
    IMAGE_TAG_MISSING = "image_tag_missing"
    MISSING_CPU_REQUESTS = "missing_cpu_requests"
    MISSING_MEMORY_REQUESTS = "missing_memory_requests"
    MISSING_CPU_LIMITS = "missing_cpu_limits"
    MISSING_MEMORY_LIMITS = "missing_memory_limits"
    MISSING_SECURITY_CONTEXT = "missing_security_context"
    RUN_AS_NON_ROOT_FALSE = "run_as_non_root_false"
    RUN_AS_USER_ZERO = "run_as_user_zero"
    # Anything outside the vocabulary; never matches.
    UNKNOWN = "unknown"

    @classmethod
    def lookup(cls, identifier: str) -> "ConditionKind":
        try:
            return cls(identifier)
        except ValueError:
            return cls.UNKNOWN


class ConditionRegistry:
    def __init__(self):
        self._evaluators: Dict[ConditionKind, ConditionFn] = {}

    def register(self, kind: ConditionKind, fn: ConditionFn) -> None:
        if kind in self._evaluators:
            raise ValueError(f"Duplicate condition registered: {kind.value}")
        self._evaluators[kind] = fn

    def get(self, kind: ConditionKind) -> ConditionFn:
        return self._evaluators.get(kind, _never)

    def kinds(self) -> Iterable[ConditionKind]:
        return self._evaluators.keys()


registry = ConditionRegistry()


def register_condition(kind: ConditionKind) -> Callable[[ConditionFn], ConditionFn]:
    def _decorator(fn: ConditionFn) -> ConditionFn:
        registry.register(kind, fn)
        return fn

    return _decorator


def _never(container: Container, parameter: Optional[str]) -> bool:
    return False


@dataclass(frozen=True)
class Condition:
    """A parsed `identifier[:parameter]` expression bound to its evaluator."""

    expression: str
    kind: ConditionKind
    parameter: Optional[str] = None

    @property
    def recognized(self) -> bool:
        return self.kind != ConditionKind.UNKNOWN

    def matches(self, container: Container) -> bool:
        return registry.get(self.kind)(container, self.parameter)


def parse_condition(expression: str) -> Condition:
    identifier, sep, parameter = expression.partition(":")
    return Condition(
        expression=expression,
        kind=ConditionKind.lookup(identifier),
        parameter=parameter if sep else None,
    )


def interpret(expression: str, container: Container) -> bool:
    return parse_condition(expression).matches(container)


def split_image(image: str) -> Tuple[str, ...]:
    """
    Split an image reference on every ':'.

    - "nginx"                     -> ("nginx",)              no tag, implicit latest
    - "nginx:1.21"                -> ("nginx", "1.21")       tag "1.21"
    - "registry.local:5000/app:v1" -> three parts            not understood as a tag

    Registry hosts with a port therefore never compare equal to any tag; this
    is a known limitation kept for compatibility with existing rule sets.
    """
    return tuple(image.split(":"))


@register_condition(ConditionKind.IMAGE_TAG_EQUALS)
def image_tag_equals(container: Container, parameter: Optional[str]) -> bool:
    tag = parameter or ""
    parts = split_image(container.image)
    if len(parts) == 1:
        return tag == "latest"
    return len(parts) == 2 and parts[1] == tag


@register_condition(ConditionKind.IMAGE_TAG_MISSING)
def image_tag_missing(container: Container, parameter: Optional[str]) -> bool:
    return ":" not in container.image


@register_condition(ConditionKind.MISSING_CPU_REQUESTS)
def missing_cpu_requests(container: Container, parameter: Optional[str]) -> bool:
    requests = container.resources.requests if container.resources else None
    return requests is None or not requests.cpu


@register_condition(ConditionKind.MISSING_MEMORY_REQUESTS)
def missing_memory_requests(container: Container, parameter: Optional[str]) -> bool:
    requests = container.resources.requests if container.resources else None
    return requests is None or not requests.memory


@register_condition(ConditionKind.MISSING_CPU_LIMITS)
def missing_cpu_limits(container: Container, parameter: Optional[str]) -> bool:
    limits = container.resources.limits if container.resources else None
    return limits is None or not limits.cpu


@register_condition(ConditionKind.MISSING_MEMORY_LIMITS)
def missing_memory_limits(container: Container, parameter: Optional[str]) -> bool:
    limits = container.resources.limits if container.resources else None
    return limits is None or not limits.memory


@register_condition(ConditionKind.MISSING_SECURITY_CONTEXT)
def missing_security_context(container: Container, parameter: Optional[str]) -> bool:
    return container.security_context is None


@register_condition(ConditionKind.RUN_AS_NON_ROOT_FALSE)
def run_as_non_root_false(container: Container, parameter: Optional[str]) -> bool:
    sc = container.security_context
    return sc is not None and sc.run_as_non_root is False


@register_condition(ConditionKind.RUN_AS_USER_ZERO)
def run_as_user_zero(container: Container, parameter: Optional[str]) -> bool:
    sc = container.security_context
    return sc is not None and sc.run_as_user == 0
