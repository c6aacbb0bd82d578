"""APEX evaluation harness: gated dependency graphs of verifier primitives."""

from .core import (
    HarnessEngine,
    HarnessRun,
    NodeExecutor,
    NodeSpec,
    PrimitiveCall,
    PrimitiveKind,
    PrimitiveRegistry,
    ScoringConfig,
    load_specs,
    topological_sort,
)
from .models import NodeResult, NodeStatus, PrimitiveResult, Report

__version__ = "0.1.0"

__all__ = [
    "HarnessEngine",
    "HarnessRun",
    "NodeExecutor",
    "NodeResult",
    "NodeSpec",
    "NodeStatus",
    "PrimitiveCall",
    "PrimitiveKind",
    "PrimitiveRegistry",
    "PrimitiveResult",
    "Report",
    "ScoringConfig",
    "load_specs",
    "topological_sort",
]
