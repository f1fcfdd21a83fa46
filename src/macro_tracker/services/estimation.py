"""Meal nutrition estimation via a remote text flow."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from macro_tracker.domain.estimation import MealEstimate
from macro_tracker.domain.meals import MACRO_FIELDS

ESTIMATION_FAILED_MESSAGE = "Failed to calculate meal nutrients. Please try again."

_OPENING_FENCE = re.compile(r"\A```[\w-]*[ \t]*\n")
_CLOSING_FENCE = re.compile(r"\n?```\s*\Z")

# Bold values (``Calories: **450 kcal**``) and the older plain form
# (``Calories: 450``) both match.
_MACRO_PATTERNS = {
    "calories": re.compile(r"Calories:\s*\**\s*(\d+(?:\.\d+)?)"),
    "protein": re.compile(r"Protein:\s*\**\s*(\d+(?:\.\d+)?)\s*g"),
    "carbs": re.compile(r"Carbs:\s*\**\s*(\d+(?:\.\d+)?)\s*g"),
    "fats": re.compile(r"Fats:\s*\**\s*(\d+(?:\.\d+)?)\s*g"),
}

_logger = logging.getLogger(__name__)


class EstimationError(RuntimeError):
    """Raised when the remote estimation call or its payload fails."""


class EstimationClient(Protocol):
    """Interface for the remote text-to-nutrition flow."""

    async def estimate(self, description: str) -> str:
        """Return the raw markdown reply for a meal description."""


@dataclass
class EstimationService:
    """Service that calls the estimation flow and parses its reply."""

    client: EstimationClient
    debug: bool = False

    async def estimate(self, description: str) -> MealEstimate:
        """Estimate macros for a free-text meal description."""
        if not description.strip():
            raise ValueError("Meal description must not be empty")
        try:
            raw = await self.client.estimate(description)
        except Exception as exc:
            _logger.exception("Estimation request failed")
            raise EstimationError(ESTIMATION_FAILED_MESSAGE) from exc
        if not isinstance(raw, str):
            _logger.error("Estimation reply is not text: %r", type(raw).__name__)
            raise EstimationError(ESTIMATION_FAILED_MESSAGE)

        estimate = parse_estimate(description, raw)
        missing = estimate.missing_fields()
        if missing:
            _logger.warning("Estimation reply missing fields: %s", ", ".join(missing))
        if self.debug:
            _logger.info(
                "Estimation parsed: calories=%s protein=%s carbs=%s fats=%s",
                estimate.calories,
                estimate.protein,
                estimate.carbs,
                estimate.fats,
            )
        return estimate


def strip_code_fence(text: str) -> str:
    """Remove a wrapping markdown code fence, if present."""
    text = _OPENING_FENCE.sub("", text, count=1)
    return _CLOSING_FENCE.sub("", text, count=1)


def parse_estimate(description: str, raw_text: str) -> MealEstimate:
    """Extract macros from an estimation reply.

    Fields that are not found resolve to 0 and are flagged absent in
    ``present``. Fractional values are truncated.
    """
    analysis = strip_code_fence(raw_text)
    values: dict[str, int] = dict.fromkeys(MACRO_FIELDS, 0)
    present: dict[str, bool] = dict.fromkeys(MACRO_FIELDS, False)
    for name, pattern in _MACRO_PATTERNS.items():
        match = pattern.search(analysis)
        if match is None:
            continue
        values[name] = int(float(match.group(1)))
        present[name] = True
    return MealEstimate(
        description=description,
        analysis=analysis,
        present=present,
        **values,
    )
