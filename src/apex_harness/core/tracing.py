"""Per-primitive execution traces."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class TraceLevel(Enum):
    """Level of tracing detail."""
    NONE = 0      # No tracing
    FAILURES = 1  # Only failed primitive calls
    CALLS = 2     # Every primitive call
    DETAILED = 3  # Every call with inputs and result fields


@dataclass
class PrimitiveTrace:
    """Record of a single primitive call inside a node."""
    call_index: int
    node_id: str
    primitive_type: str
    timestamp: float
    duration_ms: float = 0.0

    inputs: dict[str, Any] = field(default_factory=dict)
    result: dict[str, Any] = field(default_factory=dict)

    passed: bool = False
    dispatch_status: str = ""
    error: str | None = None

    def __str__(self) -> str:
        status = "✓" if self.passed else "✗"
        time_str = f"{self.duration_ms:.1f}ms" if self.duration_ms > 0 else ""
        return f"{status} Call {self.call_index}: {self.node_id} → {self.primitive_type} {time_str}".rstrip()

    def format_detailed(self) -> str:
        """Format trace with inputs and result fields."""
        lines = [str(self)]

        if self.inputs:
            lines.append("  Inputs:")
            for k, v in self.inputs.items():
                v_str = str(v)[:80] + "..." if len(str(v)) > 80 else str(v)
                lines.append(f"    {k}: {v_str}")

        if self.result:
            lines.append("  Result:")
            for k, v in self.result.items():
                v_str = str(v)[:80] + "..." if len(str(v)) > 80 else str(v)
                lines.append(f"    {k}: {v_str}")

        if self.error:
            lines.append(f"  Error: {self.error}")

        return "\n".join(lines)


@dataclass
class ExecutionTracer:
    """Collects primitive call traces during a harness run."""
    level: TraceLevel = TraceLevel.FAILURES
    traces: list[PrimitiveTrace] = field(default_factory=list)
    _call_counter: int = 0

    def start_call(
        self,
        node_id: str,
        primitive_type: str,
        inputs: dict[str, Any] | None = None,
    ) -> PrimitiveTrace:
        """Start tracing a primitive call."""
        trace = PrimitiveTrace(
            call_index=self._call_counter,
            node_id=node_id,
            primitive_type=primitive_type,
            timestamp=time.time(),
            inputs=dict(inputs or {}) if self.level == TraceLevel.DETAILED else {},
        )
        self._call_counter += 1
        return trace

    def end_call(
        self,
        trace: PrimitiveTrace,
        passed: bool,
        dispatch_status: str = "",
        result: dict[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        """Complete a call trace and keep it if the level asks for it."""
        trace.duration_ms = (time.time() - trace.timestamp) * 1000
        trace.passed = passed
        trace.dispatch_status = dispatch_status
        trace.error = error
        if self.level == TraceLevel.DETAILED:
            trace.result = dict(result or {})

        if self.level == TraceLevel.NONE:
            return
        elif self.level == TraceLevel.FAILURES and passed:
            return

        self.traces.append(trace)

    def get_failed_traces(self) -> list[PrimitiveTrace]:
        return [t for t in self.traces if not t.passed]

    def traces_for(self, node_id: str) -> list[PrimitiveTrace]:
        return [t for t in self.traces if t.node_id == node_id]

    def format_summary(self) -> str:
        """Format a summary of all traces."""
        if not self.traces:
            return "No traces recorded"

        failed = self.get_failed_traces()
        total_ms = sum(t.duration_ms for t in self.traces)

        lines = [
            "Primitive Trace Summary:",
            f"  Calls traced: {len(self.traces)}",
            f"  Failed: {len(failed)}",
            f"  Time in primitives: {total_ms:.0f}ms",
        ]

        if failed:
            lines.append("\nFailed calls:")
            for t in failed:
                lines.append(f"  {t}")
                if t.error:
                    lines.append(f"    {t.error}")

        return "\n".join(lines)
