#!/usr/bin/env python3
"""
APEX Evaluation Harness Runner

Usage:
    apex-harness                         # Run with config.local.yaml / defaults
    apex-harness --config harness.yaml   # Run with an explicit config file
    apex-harness --dry-run               # Load and sort only

Exit code is 0 whenever the run completes, even with failed or skipped
nodes, and 1 when the specs or config cannot be loaded.
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import logging
import sys
from pathlib import Path
from typing import Any

from .config import load_config
from .core import (
    ConfigError,
    ConsoleWriter,
    HarnessEngine,
    OutputMode,
    TraceLevel,
    get_strategy,
)
from .core.report import format_execution_order
from .primitives import BrowserLauncher, build_default_registry

logger = logging.getLogger(__name__)


def setup_logging(output_mode: OutputMode) -> None:
    """Configure logging based on output mode."""
    if output_mode == OutputMode.QUIET:
        level = logging.WARNING
    elif output_mode == OutputMode.DEBUG:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )

    # Suppress library loggers unless in debug mode
    if output_mode != OutputMode.DEBUG:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


def resolve_browser_launcher(config: dict[str, Any]) -> BrowserLauncher | None:
    """
    Build the browser launcher named by ``browser.launcher``.

    The value is "package.module:factory"; the factory is called with the
    resolved config and must return a BrowserLauncher.

    Raises:
        ConfigError: If the factory cannot be imported or called
    """
    target = config.get("browser", {}).get("launcher")
    if not target:
        return None

    module_name, _, attr = target.partition(":")
    if not module_name or not attr:
        raise ConfigError(f"browser.launcher must look like 'module:factory', got {target!r}")
    try:
        factory = getattr(importlib.import_module(module_name), attr)
        return factory(config)
    except Exception as e:
        raise ConfigError(f"Could not create browser launcher {target!r}: {e}", cause=e) from e


def _trace_level(output_mode: OutputMode) -> TraceLevel:
    if output_mode == OutputMode.DEBUG:
        return TraceLevel.DETAILED
    if output_mode == OutputMode.NORMAL:
        return TraceLevel.CALLS
    return TraceLevel.FAILURES


async def run_harness(
    config: dict[str, Any],
    output_mode: OutputMode = OutputMode.NORMAL,
    dry_run: bool = False,
    browser: BrowserLauncher | None = None,
    writer: ConsoleWriter | None = None,
) -> int:
    """Run the harness once and return the process exit code."""
    writer = writer or ConsoleWriter(output_mode)

    try:
        if browser is None:
            browser = resolve_browser_launcher(config)
        registry = build_default_registry(config, browser=browser)

        try:
            strategy = get_strategy(config["scoring"]["strategy"])
        except ValueError as e:
            raise ConfigError(str(e), cause=e) from e

        engine = HarnessEngine(
            registry,
            strategy=strategy,
            report_dir=config["report"]["dir"],
            latest_link=config["report"]["latest_link"],
            fail_on_unschedulable=config["execution"]["fail_on_unschedulable"],
            writer=writer,
            trace_level=_trace_level(output_mode),
        )

        writer.write()
        writer.write("🚀 Starting APEX Evaluation Harness...")
        writer.write()

        engine.load(config["specs"]["node_specs"], config["specs"]["scoring_config"])

        if dry_run:
            for line in format_execution_order(engine.plan().ordered):
                writer.write(line)
            logger.info("Dry run - skipping execution")
            return 0

        await engine.execute()

    except ConfigError as e:
        logger.exception(f"❌ Harness execution failed: {e}")
        for err in e.errors:
            logger.error(f"  - {err}")
        return 1

    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Run the APEX evaluation harness",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument("--config", "-c", type=Path, help="YAML config file")
    parser.add_argument("--dry-run", action="store_true", help="Load and sort only")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--quiet", "-q", action="store_true", help="Only warnings and errors")
    verbosity.add_argument("--debug", action="store_true", help="Verbose output with traces")

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        setup_logging(OutputMode.NORMAL)
        logger.exception(f"❌ Could not load configuration: {e}")
        for err in e.errors:
            logger.error(f"  - {err}")
        sys.exit(1)

    if args.quiet:
        output_mode = OutputMode.QUIET
    elif args.debug:
        output_mode = OutputMode.DEBUG
    else:
        output_mode = OutputMode.from_name(config["execution"]["output_mode"])

    setup_logging(output_mode)

    exit_code = asyncio.run(run_harness(config, output_mode=output_mode, dry_run=args.dry_run))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
