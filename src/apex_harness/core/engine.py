"""Harness engine: load, sort, execute, aggregate, report."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from ..models import NodeResult, NodeStatus, Report
from .context import ConsoleWriter
from .errors import ConfigError, ErrorRecord, NodeSpecError
from .executor import NodeExecutor
from .graph import SortResult, topological_sort
from .loader import load_specs
from .registry import PrimitiveRegistry
from .report import (
    STATUS_ICONS,
    PersistResult,
    build_report,
    format_execution_order,
    persist_report,
    print_summary,
)
from .scoring import ScoringStrategy, aggregate
from .spec import NodeSpec, ScoringConfig
from .tracing import ExecutionTracer, PrimitiveTrace, TraceLevel


@dataclass
class HarnessRun:
    """Everything produced by one harness run."""
    report: Report
    sort_result: SortResult
    artifact: PersistResult | None = None
    errors: list[ErrorRecord] = field(default_factory=list)
    traces: list[PrimitiveTrace] = field(default_factory=list)

    @property
    def score(self) -> int:
        return self.report.score


class HarnessEngine:
    """
    Executes an evaluation graph.

    The engine:

    1. Loads NodeSpecs and the ScoringConfig (fatal ConfigError on failure)
    2. Orders nodes by prerequisites
    3. Runs nodes one at a time, gating each on its prerequisites
    4. Aggregates points and builds, persists and prints the report

    Nothing below the loader aborts a run: failing, unknown or raising
    primitives and malformed nodes are recorded and the run continues.
    """

    def __init__(
        self,
        registry: PrimitiveRegistry,
        strategy: ScoringStrategy | None = None,
        report_dir: Path | str | None = None,
        latest_link: bool = True,
        fail_on_unschedulable: bool = False,
        writer: ConsoleWriter | None = None,
        trace_level: TraceLevel = TraceLevel.FAILURES,
        logger: logging.Logger | None = None,
    ):
        self.registry = registry
        self.strategy = strategy
        self.report_dir = Path(report_dir) if report_dir is not None else None
        self.latest_link = latest_link
        self.fail_on_unschedulable = fail_on_unschedulable
        self.writer = writer or ConsoleWriter()
        self.trace_level = trace_level
        self.logger = logger or logging.getLogger(__name__)

        self.nodes: list[NodeSpec] = []
        self.scoring_config = ScoringConfig()

    def load(self, node_specs_path: Path | str, scoring_config_path: Path | str) -> None:
        """
        Load the two spec documents.

        Raises:
            ConfigError: If either document is missing or malformed
        """
        self.nodes, self.scoring_config = load_specs(node_specs_path, scoring_config_path)

    def plan(self, nodes: list[NodeSpec] | None = None) -> SortResult:
        """Sort nodes and log anything that cannot be scheduled."""
        sort_result = topological_sort(self.nodes if nodes is None else nodes)
        for excluded in sort_result.excluded:
            self.logger.warning(
                f"Node '{excluded.id}' will not run ({excluded.reason}); "
                f"prereqs: {', '.join(excluded.prereqs) or 'none'}"
            )
        return sort_result

    async def execute(
        self,
        nodes: list[NodeSpec] | None = None,
        scoring_config: ScoringConfig | None = None,
    ) -> HarnessRun:
        """
        Run every schedulable node and produce the report.

        Raises:
            ConfigError: If ``fail_on_unschedulable`` is set and the sorter
                excluded any node
        """
        if nodes is not None:
            self.nodes = list(nodes)
        if scoring_config is not None:
            self.scoring_config = scoring_config

        start_time = time.time()
        self.registry.freeze()

        sort_result = self.plan()
        if sort_result.excluded and self.fail_on_unschedulable:
            raise ConfigError(
                "Unschedulable nodes in graph",
                errors=[f"{n.id}: {n.reason}" for n in sort_result.excluded],
            )

        for line in format_execution_order(sort_result.ordered):
            self.writer.write(line)
        self.writer.write()

        tracer = ExecutionTracer(level=self.trace_level)
        executor = NodeExecutor(
            self.registry,
            strategy=self.strategy,
            tracer=tracer,
            logger=self.logger,
        )

        results: list[NodeResult] = []
        errors: list[ErrorRecord] = []
        node_status: dict[str, NodeStatus] = {}

        for node in sort_result.ordered:
            try:
                result = await executor.execute_node(node, node_status)
            except NodeSpecError as e:
                self.logger.error(f"Node '{node.id}' is malformed: {e}")
                errors.append(ErrorRecord(
                    error_type=type(e).__name__,
                    message=str(e),
                    node_id=node.id,
                ))
                result = NodeResult(
                    id=node.id,
                    status=NodeStatus.FAILED,
                    score=0,
                    max_score=0,
                    reason=str(e),
                )
            node_status[node.id] = result.status
            results.append(result)

            icon = STATUS_ICONS[result.status]
            self.writer.write(f"{icon} {result.id}: {result.status.value} ({result.score}/{result.max_score})")

        totals = aggregate(results)
        report = build_report(
            results,
            totals,
            self.scoring_config,
            excluded=sort_result.excluded,
            errors=errors,
            duration_seconds=time.time() - start_time,
        )

        artifact = None
        if self.report_dir is not None:
            artifact = persist_report(report, self.report_dir, latest_link=self.latest_link)

        print_summary(report, self.writer, artifact)
        if tracer.traces:
            if self.trace_level == TraceLevel.DETAILED:
                for trace in tracer.traces:
                    self.writer.debug(trace.format_detailed())
            self.writer.debug(tracer.format_summary())

        return HarnessRun(
            report=report,
            sort_result=sort_result,
            artifact=artifact,
            errors=errors,
            traces=list(tracer.traces),
        )

    async def run(self, node_specs_path: Path | str, scoring_config_path: Path | str) -> HarnessRun:
        """Load both documents and execute."""
        self.load(node_specs_path, scoring_config_path)
        return await self.execute()
