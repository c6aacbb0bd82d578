import json

import pytest

from apex_harness.core import (
    CapturingWriter,
    NodeSpec,
    OutputMode,
    PrimitiveKind,
    PrimitiveRegistry,
)

# Tests bind the two real kinds to stub handlers: one always passes, one always fails.
PASS = PrimitiveKind.SCREENSHOT_EVAL.value
FAIL = PrimitiveKind.NETWORK_INTERCEPT.value


class RecordingHandler:
    """Stub primitive that records its inputs and returns a fixed result."""

    def __init__(self, result):
        self.result = result
        self.calls = []

    def __call__(self, inputs):
        self.calls.append(inputs)
        return dict(self.result)


@pytest.fixture
def pass_handler():
    return RecordingHandler({"pass": True, "reasoning": "looks fine"})


@pytest.fixture
def fail_handler():
    return RecordingHandler({"pass": False, "error": "selector not found"})


@pytest.fixture
def registry(pass_handler, fail_handler):
    registry = PrimitiveRegistry()
    registry.register(PrimitiveKind.SCREENSHOT_EVAL, pass_handler)
    registry.register(PrimitiveKind.NETWORK_INTERCEPT, fail_handler)
    return registry


@pytest.fixture
def make_node():
    """Factory for NodeSpecs; ``chain`` is a list of primitive type strings."""
    def _make(node_id, prereqs=(), chain=(PASS,), max_score=10, description=""):
        return NodeSpec.from_dict({
            "id": node_id,
            "description": description or f"{node_id} check",
            "prereqs": list(prereqs),
            "primitive_chain": [{"type": t, "inputs": {"step": i}} for i, t in enumerate(chain)],
            "scoring": {"maxScore": max_score},
        })
    return _make


@pytest.fixture
def abc_nodes(make_node):
    """A passes (10), B fails after A (20), C depends on B (5)."""
    return [
        make_node("A", chain=[PASS], max_score=10),
        make_node("B", prereqs=["A"], chain=[FAIL, PASS, PASS], max_score=20),
        make_node("C", prereqs=["B"], chain=[PASS], max_score=5),
    ]


@pytest.fixture
def quiet_writer():
    return CapturingWriter(OutputMode.QUIET)


@pytest.fixture
def writer():
    return CapturingWriter(OutputMode.NORMAL)


@pytest.fixture
def spec_files(tmp_path):
    """Write node-specs.json and scoring-config.json for the A/B/C graph."""
    nodes = [
        {"id": "A", "description": "root", "prereqs": [],
         "primitive_chain": [{"type": PASS, "inputs": {"url": "/"}}],
         "scoring": {"maxScore": 10}},
        {"id": "B", "description": "fails", "prereqs": ["A"],
         "primitive_chain": [{"type": FAIL, "inputs": {}}, {"type": PASS, "inputs": {"url": "/"}}],
         "scoring": {"maxScore": 20}},
        {"id": "C", "description": "downstream", "prereqs": ["B"],
         "primitive_chain": [{"type": PASS, "inputs": {"url": "/"}}],
         "scoring": {"maxScore": 5}},
    ]
    scoring = {"categories": {"visual": {"weight": 0.5}, "robustness": {"weight": 0.5}}}

    node_path = tmp_path / "node-specs.json"
    scoring_path = tmp_path / "scoring-config.json"
    node_path.write_text(json.dumps(nodes))
    scoring_path.write_text(json.dumps(scoring))
    return node_path, scoring_path
