"""Node executor: prerequisite gating, chain short-circuit, node scoring."""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Union

from ..models import EvidenceEntry, NodeResult, NodeStatus
from .errors import NodeSpecError
from .registry import PrimitiveRegistry
from .scoring import BinaryScoring, ScoringStrategy
from .spec import NodeSpec
from .tracing import ExecutionTracer

StatusLookup = Union[Mapping[str, NodeStatus], Callable[[str], "NodeStatus | None"]]


class NodeExecutor:
    """
    Runs one node at a time against a running map of earlier statuses.

    The executor never raises for a failing or unknown primitive; those
    become evidence and a FAILED status. A malformed NodeSpec raises
    NodeSpecError, which the engine records and recovers from.
    """

    def __init__(
        self,
        registry: PrimitiveRegistry,
        strategy: ScoringStrategy | None = None,
        tracer: ExecutionTracer | None = None,
        logger: logging.Logger | None = None,
    ):
        self.registry = registry
        self.strategy = strategy or BinaryScoring()
        self.tracer = tracer or ExecutionTracer()
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _status(status_of: StatusLookup, node_id: str) -> NodeStatus | None:
        if callable(status_of):
            return status_of(node_id)
        return status_of.get(node_id)

    def unmet_prereqs(self, node: NodeSpec, status_of: StatusLookup) -> list[str]:
        """Prerequisites that have not reached PASSED, including never-run ids."""
        return [
            prereq for prereq in node.prereqs
            if self._status(status_of, prereq) != NodeStatus.PASSED
        ]

    async def execute_node(self, node: NodeSpec, status_of: StatusLookup) -> NodeResult:
        """
        Execute a single node.

        1. Skip without running anything if any prerequisite is not PASSED.
        2. Run the primitive chain in order, stopping at the first failure.
        3. Score with the configured strategy; PASSED iff score == maxScore.

        A skipped node with no usable scoring.maxScore is still skipped and
        contributes 0 to the denominator.

        Raises:
            NodeSpecError: If a node that would run has no usable scoring.maxScore
        """
        self.logger.info(f"Executing: {node.id}")
        if node.description:
            self.logger.info(f"  Description: {node.description}")

        unmet = self.unmet_prereqs(node, status_of)
        if unmet:
            reason = f"Unmet prerequisites: {', '.join(unmet)}"
            self.logger.info(f"  ⏭️  SKIPPED: {reason}")
            try:
                max_score = node.max_score
            except NodeSpecError as e:
                self.logger.warning(f"  {e}; counting maxScore as 0")
                max_score = 0
            return NodeResult(
                id=node.id,
                status=NodeStatus.SKIPPED_DEPENDENCY,
                score=0,
                max_score=max_score,
                evidence=[],
                reason=reason,
            )

        max_score = node.max_score

        evidence: list[EvidenceEntry] = []
        for call in node.primitive_chain:
            self.logger.info(f"  Running primitive: {call.type}")
            trace = self.tracer.start_call(node.id, call.type, call.inputs)
            outcome = await self.registry.dispatch(call)
            result = outcome.result
            self.tracer.end_call(
                trace,
                passed=result.passed,
                dispatch_status=outcome.status.value,
                result=result.to_dict(),
                error=None if result.error is None else str(result.error),
            )
            evidence.append(EvidenceEntry(type=call.type, result=result))

            if not result.passed:
                why = result.error or result.reasoning or "Unknown reason"
                self.logger.info(f"  ❌ Primitive failed: {why}")
                break
            self.logger.info("  ✅ Primitive passed")

        score = self.strategy.score(node, evidence)
        status = NodeStatus.PASSED if score == max_score else NodeStatus.FAILED

        self.logger.info(f"  Result: {status.value} ({score}/{max_score} points)")

        return NodeResult(
            id=node.id,
            status=status,
            score=score,
            max_score=max_score,
            evidence=evidence,
        )
