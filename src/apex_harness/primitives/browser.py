"""Browser collaborator interfaces used by the concrete primitives.

Browser driving lives outside the harness. Anything that offers the
Playwright-style async page API below can be plugged in through a
``BrowserLauncher``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Awaitable, Callable, Protocol

logger = logging.getLogger(__name__)


class BrowserElement(Protocol):
    async def fill(self, value: str) -> None: ...

    async def click(self) -> None: ...


class BrowserRoute(Protocol):
    async def fulfill(self, status: int, headers: dict[str, str], body: str) -> None: ...


class BrowserKeyboard(Protocol):
    async def press(self, key: str) -> None: ...


class BrowserPage(Protocol):
    keyboard: BrowserKeyboard

    async def goto(self, url: str) -> Any: ...

    async def wait_for_load_state(self, state: str) -> None: ...

    async def wait_for_url(self, url: str, timeout: float) -> None: ...

    async def query_selector(self, selector: str) -> BrowserElement | None: ...

    async def route(self, url: str, handler: Callable[[BrowserRoute], Awaitable[None]]) -> None: ...

    async def screenshot(self, path: str, full_page: bool) -> Any: ...


@dataclass
class BrowserSession:
    """An open browser page plus the id the launcher uses to track it."""
    page: BrowserPage
    session_id: str | None = None
    handle: Any = None  # launcher-specific browser object


class BrowserLauncher(Protocol):
    async def launch(self) -> BrowserSession: ...

    async def close(self, session: BrowserSession) -> None: ...


class NoBrowserError(RuntimeError):
    """Raised when a primitive needs a browser and none is configured."""

    def __init__(self) -> None:
        super().__init__("No browser launcher configured")


def ensure_dir(directory: Path | str) -> Path:
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


async def capture_screenshot(page: BrowserPage, label: str, directory: Path | str) -> str:
    """Capture a full-page screenshot named harness-<label>-<ms>.png."""
    path = ensure_dir(directory) / f"harness-{label}-{int(time.time() * 1000)}.png"
    await page.screenshot(path=str(path), full_page=True)
    return str(path)


async def screenshot_on_failure(page: BrowserPage, label: str, directory: Path | str) -> str | None:
    """Best-effort screenshot after a failure; never raises."""
    try:
        return await capture_screenshot(page, label, directory)
    except Exception as e:
        logger.debug(f"Failure screenshot '{label}' not captured: {e}")
        return None


async def close_session(launcher: BrowserLauncher, session: BrowserSession | None) -> None:
    """Close a session if one was opened; close errors are logged."""
    if session is None:
        return
    try:
        await launcher.close(session)
    except Exception as e:
        logger.warning(f"Failed to close browser session {session.session_id}: {e}")
