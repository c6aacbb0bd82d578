"""Declarative node and scoring specifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import NodeSpecError


@dataclass(frozen=True)
class PrimitiveCall:
    """A request to run one registered primitive with its inputs."""
    type: str
    inputs: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "PrimitiveCall":
        if not isinstance(data, dict):
            return cls(type=str(data))
        return cls(type=str(data.get("type", "")), inputs=data.get("inputs") or {})


@dataclass(frozen=True)
class NodeSpec:
    """
    One verification step of the evaluation graph.

    Built leniently from the raw JSON object: only ``id`` is read eagerly.
    A missing or non-numeric ``scoring.maxScore`` is reported when the
    executor first asks for it, not at load time.
    """
    id: str
    description: str = ""
    prereqs: tuple[str, ...] = ()
    primitive_chain: tuple[PrimitiveCall, ...] = ()
    scoring: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NodeSpec":
        return cls(
            id=str(data.get("id", "")),
            description=data.get("description") or "",
            prereqs=tuple(data.get("prereqs") or ()),
            primitive_chain=tuple(
                PrimitiveCall.from_dict(call) for call in data.get("primitive_chain") or ()
            ),
            scoring=data.get("scoring") or {},
        )

    @property
    def max_score(self) -> int | float:
        value = self.scoring.get("maxScore") if isinstance(self.scoring, dict) else None
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise NodeSpecError(
                f"Node '{self.id}' has no numeric scoring.maxScore (got {value!r})",
                node_id=self.id,
            )
        if value < 0:
            raise NodeSpecError(
                f"Node '{self.id}' has negative scoring.maxScore ({value})",
                node_id=self.id,
            )
        return value


@dataclass(frozen=True)
class ScoringConfig:
    """Rubric metadata, passed through opaquely into the report."""
    categories: dict[str, Any] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScoringConfig":
        categories = data.get("categories")
        return cls(
            categories=categories if isinstance(categories, dict) else {},
            raw=dict(data),
        )

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)
