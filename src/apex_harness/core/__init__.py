"""Core evaluation harness."""

from .primitive import Primitive, PrimitiveManifest, InputSpec
from .registry import (
    PrimitiveRegistry,
    PrimitiveKind,
    DispatchOutcome,
    DispatchStatus,
    register_primitive,
    primitive_catalog,
)
from .context import ConsoleWriter, CapturingWriter, OutputMode
from .errors import (
    HarnessError,
    ConfigError,
    NodeSpecError,
    RegistryFrozenError,
    ErrorRecord,
)
from .spec import NodeSpec, PrimitiveCall, ScoringConfig
from .loader import load_specs, load_json
from .graph import SortResult, topological_sort
from .scoring import (
    ScoringStrategy,
    BinaryScoring,
    PartialCreditScoring,
    get_strategy,
    aggregate,
    normalize_score,
)
from .executor import NodeExecutor
from .tracing import ExecutionTracer, TraceLevel, PrimitiveTrace
from .report import (
    PersistResult,
    build_report,
    persist_report,
    format_summary,
    print_summary,
)
from .engine import HarnessEngine, HarnessRun

__all__ = [
    # Primitive
    "Primitive",
    "PrimitiveManifest",
    "InputSpec",
    # Registry
    "PrimitiveRegistry",
    "PrimitiveKind",
    "DispatchOutcome",
    "DispatchStatus",
    "register_primitive",
    "primitive_catalog",
    # Context
    "ConsoleWriter",
    "CapturingWriter",
    "OutputMode",
    # Errors
    "HarnessError",
    "ConfigError",
    "NodeSpecError",
    "RegistryFrozenError",
    "ErrorRecord",
    # Spec
    "NodeSpec",
    "PrimitiveCall",
    "ScoringConfig",
    "load_specs",
    "load_json",
    # Graph
    "SortResult",
    "topological_sort",
    # Scoring
    "ScoringStrategy",
    "BinaryScoring",
    "PartialCreditScoring",
    "get_strategy",
    "aggregate",
    "normalize_score",
    # Execution
    "NodeExecutor",
    "ExecutionTracer",
    "TraceLevel",
    "PrimitiveTrace",
    # Report
    "PersistResult",
    "build_report",
    "persist_report",
    "format_summary",
    "print_summary",
    # Engine
    "HarnessEngine",
    "HarnessRun",
]
