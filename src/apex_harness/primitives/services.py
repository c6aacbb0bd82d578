"""External collaborators shared by the concrete primitives."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .auth_api import AuthApiClient
from .browser import BrowserLauncher
from .vision import VisionScorer


@dataclass
class PrimitiveServices:
    browser: BrowserLauncher | None = None
    vision: VisionScorer | None = None
    auth: AuthApiClient | None = None

    @classmethod
    def from_config(cls, config: dict[str, Any], browser: BrowserLauncher | None = None) -> "PrimitiveServices":
        """HTTP collaborators from config; the browser must be supplied."""
        return cls(
            browser=browser,
            vision=VisionScorer.from_config(config),
            auth=AuthApiClient(config.get("app", {}).get("backend_url", "http://localhost:3001")),
        )
