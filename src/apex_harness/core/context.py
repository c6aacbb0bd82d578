"""Console output mode and the writer used for human-readable output."""

from __future__ import annotations

import sys
from enum import Enum
from typing import Callable, TextIO


class OutputMode(Enum):
    """Controls what the harness prints to console."""
    QUIET = 0   # Nothing (for tests, scripts, piped output)
    NORMAL = 1  # Summary and per-node lines (default)
    DEBUG = 2   # Everything + trace details

    @classmethod
    def from_name(cls, name: str | None) -> "OutputMode":
        name = (name or "normal").lower()
        if name == "quiet":
            return cls.QUIET
        if name == "debug":
            return cls.DEBUG
        return cls.NORMAL


class ConsoleWriter:
    """
    Line-oriented console sink.

    The report generator and runner print through this instead of calling
    ``print`` directly, so tests can capture or silence output.
    """

    def __init__(
        self,
        output_mode: OutputMode = OutputMode.NORMAL,
        stream: TextIO | None = None,
        sink: Callable[[str], None] | None = None,
    ):
        self.output_mode = output_mode
        self._stream = stream
        self._sink = sink

    def write(self, line: str = "") -> None:
        """Print a line in NORMAL and DEBUG modes."""
        if self.output_mode in (OutputMode.NORMAL, OutputMode.DEBUG):
            self._emit(line)

    def debug(self, line: str) -> None:
        """Print a line only in DEBUG mode."""
        if self.output_mode == OutputMode.DEBUG:
            self._emit(line)

    def _emit(self, line: str) -> None:
        if self._sink is not None:
            self._sink(line)
        else:
            print(line, file=self._stream or sys.stdout, flush=True)


class CapturingWriter(ConsoleWriter):
    """ConsoleWriter that keeps lines in memory."""

    def __init__(self, output_mode: OutputMode = OutputMode.NORMAL):
        self.lines: list[str] = []
        super().__init__(output_mode, sink=self.lines.append)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)
