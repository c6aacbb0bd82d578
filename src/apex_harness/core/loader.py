"""Spec loader for node specifications and the scoring config."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .spec import NodeSpec, ScoringConfig

logger = logging.getLogger(__name__)


def load_json(path: Path | str) -> Any:
    """Read and deserialize a JSON document, raising ConfigError on failure."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path=path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed JSON in {path}: {e}", path=path, cause=e) from e
    except OSError as e:
        raise ConfigError(f"Could not read {path}: {e}", path=path, cause=e) from e


def parse_node_specs(data: Any, path: Path | str | None = None) -> list[NodeSpec]:
    """Turn a deserialized NodeSpec document into NodeSpec objects."""
    if not isinstance(data, list):
        raise ConfigError(
            f"Node spec document must be a JSON array, got {type(data).__name__}",
            path=path,
        )
    nodes = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ConfigError(
                f"Node spec [{i}] must be a JSON object, got {type(item).__name__}",
                path=path,
            )
        nodes.append(NodeSpec.from_dict(item))
    return nodes


def parse_scoring_config(data: Any, path: Path | str | None = None) -> ScoringConfig:
    """Turn a deserialized scoring document into a ScoringConfig."""
    if not isinstance(data, dict):
        raise ConfigError(
            f"Scoring config must be a JSON object, got {type(data).__name__}",
            path=path,
        )
    return ScoringConfig.from_dict(data)


def load_specs(
    node_specs_path: Path | str,
    scoring_config_path: Path | str,
) -> tuple[list[NodeSpec], ScoringConfig]:
    """
    Load the NodeSpec array and the ScoringConfig object.

    Only deserialization is checked here. Per-node problems such as a
    missing ``scoring.maxScore`` surface during execution.

    Raises:
        ConfigError: If either document is missing or malformed
    """
    nodes = parse_node_specs(load_json(node_specs_path), node_specs_path)
    scoring_config = parse_scoring_config(load_json(scoring_config_path), scoring_config_path)

    logger.info(f"Loaded {len(nodes)} node specifications")
    logger.info(f"Loaded scoring config with {len(scoring_config.categories)} categories")

    return nodes, scoring_config
