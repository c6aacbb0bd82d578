"""Network intercept primitive - robustness check under injected HTTP failures."""

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.primitive import InputSpec, Primitive, PrimitiveManifest
from ..core.registry import PrimitiveKind, register_primitive
from ..models import PrimitiveResult
from .browser import (
    BrowserPage,
    BrowserRoute,
    BrowserSession,
    NoBrowserError,
    capture_screenshot,
    close_session,
    screenshot_on_failure,
)
from .services import PrimitiveServices

DEFAULT_SELECTOR = ".dashboard"
EMAIL_SELECTOR = 'input[type="email"], input[name="email"]'
PASSWORD_SELECTOR = 'input[type="password"], input[name="password"]'
SUBMIT_SELECTOR = (
    'button[type="submit"], button:has-text("Log In"), '
    'button:has-text("Login"), button:has-text("Sign In")'
)


@register_primitive(PrimitiveKind.NETWORK_INTERCEPT)
class NetworkInterceptPrimitive(Primitive):
    """
    Log a fresh account in and assert the dashboard renders.

    Modes:
    - "observe": normal network conditions
    - "fail": fulfil requests matching ``intercept.route`` with an injected
      error response before logging in
    """

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        services: PrimitiveServices | None = None,
        logger: logging.Logger | None = None,
    ):
        super().__init__(config, logger)
        self.services = services or PrimitiveServices()

    @classmethod
    def describe(cls) -> PrimitiveManifest:
        return PrimitiveManifest(
            type=PrimitiveKind.NETWORK_INTERCEPT.value,
            description="Drive login under observed or failing network conditions",
            inputs={
                "url": InputSpec(
                    type="string",
                    required=False,
                    description="Target URL under test (informational)"
                ),
                "mode": InputSpec(
                    type="string",
                    required=False,
                    default="observe",
                    description="'observe' or 'fail'"
                ),
                "intercept": InputSpec(
                    type="dict",
                    required=False,
                    description="Failure injection: {route, status, body}"
                ),
                "expectation": InputSpec(
                    type="dict",
                    required=False,
                    description="Expected UI state: {selector}"
                ),
            },
            evidence={
                "mode": "Network mode used",
                "selector": "Selector that was asserted",
                "screenshotPath": "Screenshot after login",
                "sessionId": "Browser session identifier",
            },
        )

    @staticmethod
    async def _inject_failure(page: BrowserPage, intercept: dict[str, Any]) -> None:
        status = intercept.get("status") or 500
        body = json.dumps(intercept.get("body") or {"error": "Injected failure"})

        async def handler(route: BrowserRoute) -> None:
            await route.fulfill(
                status=status,
                headers={"Content-Type": "application/json"},
                body=body,
            )

        await page.route(intercept["route"], handler)

    @staticmethod
    async def _log_in(page: BrowserPage, email: str, password: str) -> None:
        email_input = await page.query_selector(EMAIL_SELECTOR)
        if email_input:
            await email_input.fill(email)

        password_input = await page.query_selector(PASSWORD_SELECTOR)
        if password_input:
            await password_input.fill(password)

        submit_button = await page.query_selector(SUBMIT_SELECTOR)
        if submit_button:
            await submit_button.click()
        else:
            await page.keyboard.press("Enter")

    async def execute(self, inputs: dict[str, Any]) -> PrimitiveResult:
        mode = inputs.get("mode") or "observe"
        intercept = inputs.get("intercept") or {}
        selector = (inputs.get("expectation") or {}).get("selector") or DEFAULT_SELECTOR
        screenshot_dir = self.get_config("verification.screenshot_dir", "screenshots")
        frontend_url = self.get_config("app.frontend_url", "")
        launcher = self.services.browser
        session: BrowserSession | None = None

        try:
            if launcher is None:
                raise NoBrowserError()
            if self.services.auth is None:
                raise RuntimeError("No auth API client configured")

            account = await self.services.auth.create_test_account()
            session = await launcher.launch()
            page = session.page

            if mode == "fail" and intercept.get("route"):
                await self._inject_failure(page, intercept)

            await page.goto(f"{frontend_url}/login")
            await page.wait_for_load_state("networkidle")
            await self._log_in(page, account.email, account.password)
            await page.wait_for_url("**/dashboard**", timeout=10000)

            element = await page.query_selector(selector)
            screenshot_path = await capture_screenshot(page, "network-intercept", screenshot_dir)

            return PrimitiveResult.model_validate({
                "pass": element is not None,
                "mode": mode,
                "selector": selector,
                "screenshotPath": screenshot_path,
                "sessionId": session.session_id,
            })

        except Exception as e:
            self.logger.warning(f"networkIntercept failed ({mode}): {e}")
            if session is not None:
                await screenshot_on_failure(session.page, "network-intercept-error", screenshot_dir)
            return PrimitiveResult.model_validate({
                "pass": False,
                "mode": mode,
                "selector": selector,
                "screenshotPath": None,
                "sessionId": session.session_id if session else None,
                "error": str(e),
            })
        finally:
            if launcher is not None:
                await close_session(launcher, session)
