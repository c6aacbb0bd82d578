"""Tests for report assembly, persistence and the console summary."""
import json
from datetime import datetime, timezone

from apex_harness.core import (
    ErrorRecord,
    ScoringConfig,
    aggregate,
    build_report,
    format_summary,
    persist_report,
    print_summary,
)
from apex_harness.core.report import format_execution_order, report_filename
from apex_harness.models import (
    EvidenceEntry,
    ExcludedNode,
    NodeResult,
    NodeStatus,
    PrimitiveResult,
)


def sample_results():
    return [
        NodeResult(
            id="A", status=NodeStatus.PASSED, score=10, max_score=10,
            evidence=[EvidenceEntry(
                type="screenshotEval",
                result=PrimitiveResult.model_validate({
                    "pass": True,
                    "subScores": {"layout": 0.8, "clarity": 0.9, "polish": 0.7},
                    "screenshotPath": "/tmp/a.png",
                }),
            )],
        ),
        NodeResult(
            id="B", status=NodeStatus.FAILED, score=0, max_score=20,
            evidence=[EvidenceEntry(type="networkIntercept", result=PrimitiveResult.failure("timeout"))],
        ),
        NodeResult(
            id="C", status=NodeStatus.SKIPPED_DEPENDENCY, score=0, max_score=5,
            reason="Unmet prerequisites: B",
        ),
    ]


def sample_report(**kwargs):
    results = sample_results()
    return build_report(
        results,
        aggregate(results),
        ScoringConfig.from_dict({"categories": {"visual": {"weight": 1}}}),
        timestamp=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        **kwargs,
    )


def test_build_report_fields():
    report = sample_report(duration_seconds=1.23456)
    assert report.timestamp == "2024-05-01T12:30:00Z"
    assert report.score == 29
    assert report.total_score == 10
    assert report.max_score == 35
    assert [r.id for r in report.results] == ["A", "B", "C"]
    assert report.scoring_config == {"categories": {"visual": {"weight": 1}}}
    assert report.duration_seconds == 1.235


def test_report_filename_is_timestamped():
    assert report_filename(1700000000000) == "harness-report-1700000000000.json"
    assert report_filename().startswith("harness-report-")


def test_persist_writes_json_with_wire_names(tmp_path):
    report = sample_report(
        excluded=[ExcludedNode(id="X", reason="cycle", prereqs=["Y"])],
        errors=[ErrorRecord(error_type="NodeSpecError", message="bad", node_id="D")],
    )
    artifact = persist_report(report, tmp_path / "reports", filename="r.json")
    assert artifact.ok
    assert artifact.path == tmp_path / "reports" / "r.json"

    data = json.loads(artifact.path.read_text())
    assert {"timestamp", "score", "totalScore", "maxScore", "results", "scoringConfig"} <= set(data)
    assert data["score"] == 29
    first = data["results"][0]
    assert first["maxScore"] == 10
    assert first["status"] == "PASSED"
    assert first["evidence"][0]["type"] == "screenshotEval"
    assert first["evidence"][0]["result"]["pass"] is True
    assert first["evidence"][0]["result"]["subScores"]["layout"] == 0.8
    assert first["evidence"][0]["result"]["screenshotPath"] == "/tmp/a.png"
    assert data["results"][2]["status"] == "SKIPPED_DEPENDENCY"
    assert data["results"][2]["evidence"] == []
    assert data["excluded"] == [{"id": "X", "reason": "cycle", "prereqs": ["Y"]}]
    assert data["errors"][0]["nodeId"] == "D"


def test_persist_updates_latest_link(tmp_path):
    artifact = persist_report(sample_report(), tmp_path, filename="harness-report-1.json")
    latest = tmp_path / "latest.json"
    assert latest.is_symlink()
    assert latest.resolve() == artifact.path.resolve()

    second = persist_report(sample_report(), tmp_path, filename="harness-report-2.json")
    assert latest.resolve() == second.path.resolve()


def test_persist_failure_is_returned_not_raised(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    artifact = persist_report(sample_report(), blocker)
    assert not artifact.ok
    assert artifact.error


def test_summary_lines():
    lines = format_summary(sample_report())
    text = "\n".join(lines)
    assert "EVALUATION HARNESS COMPLETE" in text
    assert "Normalized Score: 29/100" in lines
    assert "Raw Score: 10/35" in lines
    assert "  ✅ A: PASSED (10/10)" in lines
    assert "  ❌ B: FAILED (0/20)" in lines
    assert "  ⏭️ C: SKIPPED_DEPENDENCY (0/5) - Unmet prerequisites: B" in lines


def test_summary_mentions_artifact_outcome(tmp_path):
    report = sample_report()
    saved = persist_report(report, tmp_path, filename="r.json")
    assert f"Detailed report: {saved.path}" in format_summary(report, saved)

    failed = persist_report(report, tmp_path / "r.json")
    assert any(line.startswith("Report not saved:") for line in format_summary(report, failed))


def test_summary_lists_unscheduled_and_errors():
    report = sample_report(
        excluded=[ExcludedNode(id="X", reason="cycle")],
        errors=[ErrorRecord(error_type="NodeSpecError", message="Node 'D' is broken", node_id="D")],
    )
    text = "\n".join(format_summary(report))
    assert "Not scheduled (1):" in text
    assert "X: cycle" in text
    assert "Node 'D' is broken" in text


def test_print_summary_respects_output_mode(writer, quiet_writer):
    report = sample_report()
    print_summary(report, writer)
    print_summary(report, quiet_writer)
    assert "Normalized Score: 29/100" in writer.lines
    assert quiet_writer.lines == []


def test_execution_order_lines(make_node):
    lines = format_execution_order([make_node("a"), make_node("b", prereqs=["a"])])
    assert lines[1:] == ["  1. a", "  2. b (depends on: a)"]
