"""Vision-model screenshot scoring over an OpenAI-compatible API."""

from __future__ import annotations

import base64
import json
import logging
import re
import time
from pathlib import Path
from typing import Any

import httpx

logger = logging.getLogger(__name__)

SUB_SCORE_KEYS = ("layout", "clarity", "polish")

PROMPT_TEMPLATE = """You are evaluating a {schema} screenshot for a web application.

Rate the following aspects on a scale from 0 to 1 (where 1 is perfect):

1. **layout** (0-1): Is the page layout coherent, well-organized, and visually balanced?
   - 0.9-1.0: Excellent grid alignment, clear visual hierarchy, professional spacing
   - 0.7-0.89: Good layout with minor alignment or spacing issues
   - 0.5-0.69: Functional but has noticeable layout problems
   - 0.0-0.49: Broken layout, overlapping elements, or confusing structure

2. **clarity** (0-1): Are CTAs (calls-to-action) and key elements clearly visible and understandable?
   - 0.9-1.0: Primary actions immediately obvious, clear labels, strong visual hierarchy
   - 0.7-0.89: Clear but could be more prominent or better labeled
   - 0.5-0.69: Some confusion about what actions to take
   - 0.0-0.49: Unclear, hidden, or missing CTAs

3. **polish** (0-1): Does the design look professionally crafted and enterprise-ready?
   - 0.9-1.0: Polished, modern design with consistent styling and attention to detail
   - 0.7-0.89: Professional with minor rough edges or inconsistencies
   - 0.5-0.69: Functional but basic styling, lacks refinement
   - 0.0-0.49: Unprofessional appearance, looks unfinished

Return ONLY valid JSON in this exact format (no markdown, no code blocks):
{{
  "layout": 0.XX,
  "clarity": 0.XX,
  "polish": 0.XX,
  "reasoning": "Detailed explanation of scores with specific observations"
}}"""


def _clamp(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if number != number:  # NaN
        return 0.0
    return max(0.0, min(1.0, number))


def zero_scores() -> dict[str, float]:
    return {key: 0.0 for key in SUB_SCORE_KEYS}


def parse_evaluation(content: str, threshold: float) -> dict[str, Any]:
    """
    Parse the model's JSON answer into pass/subScores/reasoning.

    Markdown code fences are stripped and every sub-score is clamped to
    [0, 1]; a missing or non-numeric score counts as 0.

    Raises:
        ValueError: If the content is not a JSON object
    """
    cleaned = re.sub(r"```(?:json)?\n?", "", content).strip()
    evaluation = json.loads(cleaned)
    if not isinstance(evaluation, dict):
        raise ValueError("Vision model did not return a JSON object")

    sub_scores = {key: _clamp(evaluation.get(key)) for key in SUB_SCORE_KEYS}
    return {
        "pass": all(score >= threshold for score in sub_scores.values()),
        "subScores": sub_scores,
        "reasoning": evaluation.get("reasoning") or "No reasoning provided",
    }


class VisionScorer:
    """
    Scores a screenshot with a vision-capable chat completions model.

    Errors never escape ``score``: any failure yields zeroed sub-scores,
    ``pass: false`` and the error message.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o",
        base_url: str = "https://api.openai.com/v1",
        threshold: float = 0.7,
        max_tokens: int = 500,
        temperature: float = 0.3,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.threshold = threshold
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "VisionScorer":
        vision = config.get("vision", {})
        return cls(
            api_key=vision.get("api_key"),
            model=vision.get("model", "gpt-4o"),
            base_url=vision.get("base_url", "https://api.openai.com/v1"),
            threshold=vision.get("threshold", 0.7),
            max_tokens=vision.get("max_tokens", 500),
            temperature=vision.get("temperature", 0.3),
        )

    def build_messages(self, image_b64: str, schema: str) -> list[dict[str, Any]]:
        return [{
            "role": "user",
            "content": [
                {"type": "text", "text": PROMPT_TEMPLATE.format(schema=schema)},
                {"type": "image_url", "image_url": {"url": f"data:image/png;base64,{image_b64}"}},
            ],
        }]

    async def _complete(self, messages: list[dict[str, Any]]) -> str:
        if not self.api_key:
            raise ValueError(
                "No API key provided. Set via:\n"
                "  1. Config 'vision.api_key'\n"
                "  2. OPENAI_API_KEY environment variable"
            )

        start_time = time.time()
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model,
                    "messages": messages,
                    "max_tokens": self.max_tokens,
                    "temperature": self.temperature,
                },
            )
            if response.status_code != 200:
                raise RuntimeError(
                    f"Vision API error ({response.status_code}): {response.text}"
                )
            data = response.json()

        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug(f"Vision API: {self.model} ({elapsed_ms:.0f}ms)")

        choice = data.get("choices", [{}])[0]
        return (choice.get("message", {}).get("content") or "").strip()

    async def score(self, screenshot_path: str, schema: str = "page") -> dict[str, Any]:
        """Score a screenshot file; returns pass, subScores, reasoning[, error]."""
        try:
            image_b64 = base64.b64encode(Path(screenshot_path).read_bytes()).decode("ascii")
            content = await self._complete(self.build_messages(image_b64, schema))
            return parse_evaluation(content, self.threshold)
        except Exception as e:
            logger.error(f"Error evaluating screenshot: {e}")
            return {
                "pass": False,
                "subScores": zero_scores(),
                "reasoning": f"Evaluation failed: {e}",
                "error": str(e),
            }
