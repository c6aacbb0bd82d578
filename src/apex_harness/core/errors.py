"""Error types raised and recorded by the harness."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class HarnessError(Exception):
    """Base exception for all harness errors."""
    pass


class ConfigError(HarnessError):
    """
    Spec or configuration could not be loaded.

    This is the only fatal error class: the run aborts before any node
    executes.
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        cause: Exception | None = None,
        errors: list[str] | None = None,
    ):
        super().__init__(message)
        self.path = Path(path) if path is not None else None
        self.cause = cause
        self.errors = errors or []


class NodeSpecError(HarnessError):
    """A loaded NodeSpec is malformed in a way only execution discovers."""

    def __init__(self, message: str, node_id: str | None = None):
        super().__init__(message)
        self.node_id = node_id


class RegistryFrozenError(HarnessError):
    """Attempt to change the primitive registry after a run started."""
    pass


@dataclass
class ErrorRecord:
    """Record of a recovered node-level error, carried into the report."""
    error_type: str
    message: str
    node_id: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.error_type,
            "message": self.message,
            "nodeId": self.node_id,
            "context": self.context,
        }
