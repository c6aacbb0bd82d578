"""Screenshot evaluation primitive - visual quality check via a vision model."""

from __future__ import annotations

import logging
from typing import Any

from ..core.primitive import InputSpec, Primitive, PrimitiveManifest
from ..core.registry import PrimitiveKind, register_primitive
from ..models import PrimitiveResult
from .browser import (
    BrowserSession,
    NoBrowserError,
    capture_screenshot,
    close_session,
    screenshot_on_failure,
)
from .services import PrimitiveServices
from .vision import zero_scores


@register_primitive(PrimitiveKind.SCREENSHOT_EVAL)
class ScreenshotEvalPrimitive(Primitive):
    """
    Navigate to a page, capture a full-page screenshot and have a vision
    model score it for layout, clarity and polish.

    Passes only if every sub-score clears the configured threshold.
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
            type=PrimitiveKind.SCREENSHOT_EVAL.value,
            description="Score a page screenshot with a vision model",
            inputs={
                "url": InputSpec(
                    type="string",
                    required=True,
                    description="Path on the frontend to open (e.g. '/login')"
                ),
                "schema": InputSpec(
                    type="string",
                    required=False,
                    description="What the page is, used in the prompt and file name"
                ),
            },
            evidence={
                "screenshotPath": "Saved screenshot file",
                "sessionId": "Browser session identifier",
            },
        )

    async def execute(self, inputs: dict[str, Any]) -> PrimitiveResult:
        schema = inputs.get("schema")
        screenshot_dir = self.get_config("verification.screenshot_dir", "screenshots")
        frontend_url = self.get_config("app.frontend_url", "")
        launcher = self.services.browser
        session: BrowserSession | None = None

        try:
            if launcher is None:
                raise NoBrowserError()
            if self.services.vision is None:
                raise RuntimeError("No vision scorer configured")

            session = await launcher.launch()
            page = session.page
            await page.goto(f"{frontend_url}{inputs['url']}")
            await page.wait_for_load_state("networkidle")

            screenshot_path = await capture_screenshot(page, schema or "screenshot", screenshot_dir)
            evaluation = await self.services.vision.score(screenshot_path, schema or "page")

            result = {
                "pass": evaluation["pass"],
                "subScores": evaluation["subScores"],
                "reasoning": evaluation["reasoning"],
                "screenshotPath": screenshot_path,
                "sessionId": session.session_id,
            }
            if evaluation.get("error"):
                result["error"] = evaluation["error"]
            return PrimitiveResult.model_validate(result)

        except Exception as e:
            self.logger.warning(f"screenshotEval failed for {inputs.get('url')}: {e}")
            if session is not None:
                await screenshot_on_failure(session.page, "screenshot-eval-error", screenshot_dir)
            return PrimitiveResult.model_validate({
                "pass": False,
                "subScores": zero_scores(),
                "reasoning": str(e),
                "error": str(e),
                "screenshotPath": None,
                "sessionId": session.session_id if session else None,
            })
        finally:
            if launcher is not None:
                await close_session(launcher, session)
