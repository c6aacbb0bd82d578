"""Concrete primitives. Importing this package declares every kind."""

from __future__ import annotations

import logging
from typing import Any

from ..core.registry import PrimitiveRegistry
from .browser import BrowserLauncher, BrowserSession
from .network_intercept import NetworkInterceptPrimitive
from .screenshot_eval import ScreenshotEvalPrimitive
from .services import PrimitiveServices


def build_default_registry(
    config: dict[str, Any],
    browser: BrowserLauncher | None = None,
    services: PrimitiveServices | None = None,
    logger: logging.Logger | None = None,
) -> PrimitiveRegistry:
    """Registry with one instance of every declared primitive kind."""
    services = services or PrimitiveServices.from_config(config, browser=browser)
    return PrimitiveRegistry.from_catalog(logger=logger, config=config, services=services)


__all__ = [
    "BrowserLauncher",
    "BrowserSession",
    "NetworkInterceptPrimitive",
    "PrimitiveServices",
    "ScreenshotEvalPrimitive",
    "build_default_registry",
]
