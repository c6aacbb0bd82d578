"""Pydantic models for primitive results and the harness report."""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


# === Primitive Models ===

class PrimitiveResult(BaseModel):
    """
    Outcome of a single primitive call.

    Only ``passed`` (serialized as ``pass``) takes part in node scoring.
    Everything else is evidence and is kept as reported, whatever its
    shape; primitive-specific fields such as ``screenshotPath`` or
    ``sessionId`` are kept as extras.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    passed: bool = Field(default=False, alias="pass")
    sub_scores: Any = Field(default=None, alias="subScores")
    reasoning: Any = None
    error: Any = None

    @classmethod
    def coerce(cls, value: Any) -> "PrimitiveResult":
        """Accept a model or a plain mapping returned by a handler."""
        if isinstance(value, PrimitiveResult):
            return value
        if isinstance(value, dict):
            return cls.model_validate(value)
        raise TypeError(
            f"Primitive returned {type(value).__name__}, expected a mapping"
        )

    @classmethod
    def failure(cls, error: str, **extra: Any) -> "PrimitiveResult":
        return cls.model_validate({"pass": False, "error": error, **extra})

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class EvidenceEntry(BaseModel):
    """One attempted primitive call and its result."""
    type: str
    result: PrimitiveResult


# === Node Models ===

class NodeStatus(str, Enum):
    PASSED = "PASSED"
    FAILED = "FAILED"
    SKIPPED_DEPENDENCY = "SKIPPED_DEPENDENCY"


class NodeResult(BaseModel):
    """Outcome of one node, created exactly once per scheduled node."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    status: NodeStatus
    score: Number = 0
    max_score: Number = Field(default=0, alias="maxScore")
    evidence: list[EvidenceEntry] = Field(default_factory=list)
    reason: str | None = None


class ScoreTotals(BaseModel):
    """Aggregated points across all node results."""
    model_config = ConfigDict(populate_by_name=True)

    total_score: Number = Field(default=0, alias="totalScore")
    max_score: Number = Field(default=0, alias="maxScore")
    normalized_score: int = Field(default=0, alias="normalizedScore")


# === Report ===

class ExcludedNode(BaseModel):
    """A node the sorter could not schedule."""
    id: str
    reason: str
    prereqs: list[str] = Field(default_factory=list)


class Report(BaseModel):
    """The single persisted artifact of a harness run."""
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str
    score: int
    total_score: Number = Field(alias="totalScore")
    max_score: Number = Field(alias="maxScore")
    results: list[NodeResult] = Field(default_factory=list)
    scoring_config: dict[str, Any] = Field(default_factory=dict, alias="scoringConfig")
    duration_seconds: float = Field(default=0.0, alias="durationSeconds")
    excluded: list[ExcludedNode] = Field(default_factory=list)
    errors: list[dict[str, Any]] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)
