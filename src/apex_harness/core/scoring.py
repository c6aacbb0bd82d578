"""Node scoring strategies and score aggregation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..models import EvidenceEntry, NodeResult, ScoreTotals
from .spec import NodeSpec


class ScoringStrategy(ABC):
    """Turns a node's evidence into points out of its maxScore."""

    name: str = ""

    @abstractmethod
    def score(self, node: NodeSpec, evidence: list[EvidenceEntry]) -> int | float:
        pass


class BinaryScoring(ScoringStrategy):
    """
    All-or-nothing: maxScore if every primitive that ran passed, else 0.

    Fractional subScores stay in the evidence but never change the points.
    """

    name = "binary"

    def score(self, node: NodeSpec, evidence: list[EvidenceEntry]) -> int | float:
        if all(entry.result.passed for entry in evidence):
            return node.max_score
        return 0


class PartialCreditScoring(ScoringStrategy):
    """
    maxScore scaled by the mean sub-score of the evidence, once the chain
    completed. Results without numeric subScores count as 1.0.
    """

    name = "partial"

    @staticmethod
    def _numeric(sub_scores: Any) -> list[float]:
        if not isinstance(sub_scores, dict):
            return []
        return [
            float(v) for v in sub_scores.values()
            if isinstance(v, (int, float)) and not isinstance(v, bool)
        ]

    def score(self, node: NodeSpec, evidence: list[EvidenceEntry]) -> int | float:
        if not all(entry.result.passed for entry in evidence):
            return 0
        values = []
        for entry in evidence:
            numbers = self._numeric(entry.result.sub_scores)
            if numbers:
                values.append(sum(numbers) / len(numbers))
            else:
                values.append(1.0)
        if not values or all(v == 1.0 for v in values):
            return node.max_score
        return node.max_score * (sum(values) / len(values))


STRATEGIES: dict[str, type[ScoringStrategy]] = {
    BinaryScoring.name: BinaryScoring,
    PartialCreditScoring.name: PartialCreditScoring,
}


def get_strategy(name: str) -> ScoringStrategy:
    """Look up a strategy by config name."""
    strategy_class = STRATEGIES.get(name)
    if strategy_class is None:
        raise ValueError(f"Unknown scoring strategy: {name!r} (choose from {sorted(STRATEGIES)})")
    return strategy_class()


def normalize_score(total_score: int | float, max_score: int | float) -> int:
    """Scale to 0-100, rounding half up; 0 when there is nothing to score."""
    if max_score == 0:
        return 0
    return int((total_score / max_score) * 100 + 0.5)


def aggregate(results: list[NodeResult]) -> ScoreTotals:
    """
    Sum points across all results regardless of status.

    Skipped nodes add nothing to the total but their full maxScore to the
    denominator, so skipped work costs as much as failed work.
    """
    total_score = sum(r.score for r in results)
    max_score = sum(r.max_score for r in results)
    return ScoreTotals(
        total_score=total_score,
        max_score=max_score,
        normalized_score=normalize_score(total_score, max_score),
    )
