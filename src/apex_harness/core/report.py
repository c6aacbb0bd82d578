"""Report assembly, persistence and console summary."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from ..models import ExcludedNode, NodeResult, NodeStatus, Report, ScoreTotals
from .context import ConsoleWriter
from .errors import ErrorRecord
from .spec import NodeSpec, ScoringConfig

logger = logging.getLogger(__name__)

STATUS_ICONS = {
    NodeStatus.PASSED: "✅",
    NodeStatus.FAILED: "❌",
    NodeStatus.SKIPPED_DEPENDENCY: "⏭️",
}


@dataclass
class PersistResult:
    """Outcome of writing the report artifact."""
    ok: bool
    path: Path | None = None
    error: str | None = None


def build_report(
    results: list[NodeResult],
    totals: ScoreTotals,
    scoring_config: ScoringConfig,
    excluded: list[ExcludedNode] | None = None,
    errors: list[ErrorRecord] | None = None,
    duration_seconds: float = 0.0,
    timestamp: datetime | None = None,
) -> Report:
    """Assemble the structured report for a finished run."""
    timestamp = timestamp or datetime.now(timezone.utc)
    return Report(
        timestamp=timestamp.isoformat().replace("+00:00", "Z"),
        score=totals.normalized_score,
        total_score=totals.total_score,
        max_score=totals.max_score,
        results=list(results),
        scoring_config=scoring_config.to_dict(),
        duration_seconds=round(duration_seconds, 3),
        excluded=list(excluded or []),
        errors=[e.to_dict() for e in errors or []],
    )


def report_filename(epoch_ms: int | None = None) -> str:
    """Timestamp-qualified artifact name, e.g. harness-report-1700000000000.json."""
    if epoch_ms is None:
        epoch_ms = int(time.time() * 1000)
    return f"harness-report-{epoch_ms}.json"


def _update_latest_link(path: Path) -> None:
    latest_link = path.parent / "latest.json"
    try:
        if latest_link.is_symlink() or latest_link.exists():
            latest_link.unlink()
        latest_link.symlink_to(path.name)
    except OSError as e:
        logger.debug(f"Could not update {latest_link}: {e}")


def persist_report(
    report: Report,
    directory: Path | str,
    filename: str | None = None,
    latest_link: bool = True,
) -> PersistResult:
    """
    Write the report as JSON into ``directory``.

    Best-effort: failures are logged and returned, never raised, and do
    not change the run's score.
    """
    path = Path(directory) / (filename or report_filename())
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(report.to_json())
    except OSError as e:
        logger.error(f"Failed to write report to {path}: {e}")
        return PersistResult(ok=False, path=path, error=str(e))

    if latest_link:
        _update_latest_link(path)

    return PersistResult(ok=True, path=path)


def format_execution_order(nodes: list[NodeSpec]) -> list[str]:
    """Numbered execution order with prerequisite hints."""
    lines = ["Execution order (topologically sorted):"]
    for idx, node in enumerate(nodes, 1):
        prereqs = f" (depends on: {', '.join(node.prereqs)})" if node.prereqs else ""
        lines.append(f"  {idx}. {node.id}{prereqs}")
    return lines


def format_summary(report: Report, artifact: PersistResult | None = None) -> list[str]:
    """Human-readable summary lines for a report."""
    lines = [
        "═" * 60,
        "EVALUATION HARNESS COMPLETE",
        "═" * 60,
        "",
        f"Normalized Score: {report.score}/100",
        f"Raw Score: {report.total_score}/{report.max_score}",
        f"Duration: {report.duration_seconds:.2f}s",
        "",
        "Node Results:",
    ]
    for result in report.results:
        icon = STATUS_ICONS.get(result.status, "•")
        line = f"  {icon} {result.id}: {result.status.value} ({result.score}/{result.max_score})"
        if result.reason:
            line += f" - {result.reason}"
        lines.append(line)

    if report.excluded:
        lines.append("")
        lines.append(f"Not scheduled ({len(report.excluded)}):")
        for node in report.excluded:
            lines.append(f"  ⚠ {node.id}: {node.reason}")

    if report.errors:
        lines.append("")
        lines.append(f"Errors ({len(report.errors)}):")
        for err in report.errors:
            lines.append(f"  ✗ {err.get('message')}")

    if artifact is not None:
        lines.append("")
        if artifact.ok:
            lines.append(f"Detailed report: {artifact.path}")
        else:
            lines.append(f"Report not saved: {artifact.error}")

    return lines


def print_summary(
    report: Report,
    writer: ConsoleWriter | None = None,
    artifact: PersistResult | None = None,
) -> None:
    """Render the summary through ``writer`` (stdout by default)."""
    writer = writer or ConsoleWriter()
    writer.write()
    for line in format_summary(report, artifact):
        writer.write(line)
    writer.write()
