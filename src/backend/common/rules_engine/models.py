from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .values import as_mapping, as_str


class Severity(str, Enum):
    """Ordinal verdict for a document or a whole run (OK < WARN < ERROR).

    Comparisons go through `rank`; the str base would otherwise compare the
    values alphabetically.
    """

    OK = "OK"
    WARN = "WARN"
    ERROR = "ERROR"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK = {Severity.OK: 0, Severity.WARN: 1, Severity.ERROR: 2}


class RuleSeverity(str, Enum):
    WARN = "WARN"
    ERROR = "ERROR"

    def as_severity(self) -> Severity:
        return Severity(self.value)


class Resource(BaseModel):
    """One decoded manifest document.

    `spec` is kept as the raw nested mapping; the extractor walks it with the
    helpers in `values` so unknown or ill-typed fields never raise.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    api_version: str = Field(default="", alias="apiVersion")
    kind: str = ""
    metadata: Dict[str, Any] = Field(default_factory=dict)
    spec: Dict[str, Any] = Field(default_factory=dict)

    @property
    def name(self) -> str:
        return as_str(self.metadata.get("name"))

    @property
    def namespace(self) -> str:
        return as_str(self.metadata.get("namespace"))

    @classmethod
    def from_document(cls, doc: Any) -> "Resource":
        body = as_mapping(doc) or {}
        return cls(
            api_version=as_str(body.get("apiVersion")),
            kind=as_str(body.get("kind")),
            metadata=_str_keyed(body.get("metadata")),
            spec=_str_keyed(body.get("spec")),
        )


def _str_keyed(value: Any) -> Dict[str, Any]:
    return {k: v for k, v in (as_mapping(value) or {}).items() if isinstance(k, str)}


class ResourceSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    cpu: Optional[str] = None
    memory: Optional[str] = None


class Resources(BaseModel):
    model_config = ConfigDict(frozen=True)

    requests: Optional[ResourceSpec] = None
    limits: Optional[ResourceSpec] = None


class SecurityContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    run_as_non_root: Optional[bool] = None
    run_as_user: Optional[int] = None


class Container(BaseModel):
    # None vs. an empty object is significant: several conditions key off
    # "object absent" rather than "field empty".
    model_config = ConfigDict(frozen=True)

    name: str = ""
    image: str = ""
    resources: Optional[Resources] = None
    security_context: Optional[SecurityContext] = None


class Violation(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: RuleSeverity
    message: str
    rule: str


class DocumentResult(BaseModel):
    source: str = ""
    kind: str
    name: str = ""
    namespace: str = ""
    violations: List[Violation] = Field(default_factory=list)
    severity: Severity = Severity.OK

    @property
    def error_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == RuleSeverity.ERROR)

    @property
    def warn_count(self) -> int:
        return sum(1 for v in self.violations if v.severity == RuleSeverity.WARN)


class FileError(BaseModel):
    source: str
    message: str


class ReviewReport(BaseModel):
    run_id: str
    generated_at: datetime

    documents: List[DocumentResult] = Field(default_factory=list)
    errors: List[FileError] = Field(default_factory=list)
    totals: Dict[Severity, int] = Field(default_factory=dict)
    severity: Severity = Severity.OK
    exit_code: int = 0

    @field_validator("totals")
    @classmethod
    def _fill_totals(cls, value: Dict[Severity, int]) -> Dict[Severity, int]:
        return {sev: int(value.get(sev, 0)) for sev in Severity}

    @property
    def violation_count(self) -> int:
        return sum(len(doc.violations) for doc in self.documents)
