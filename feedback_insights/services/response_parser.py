"""Parsing and validation of classification service replies.

Replies are free text that should contain one JSON object (single item) or
one JSON array (batch). Nothing about their shape is trusted: the first
JSON structure is decoded, then validated with pydantic before use.
"""

import json
import logging
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from ..constants import AI_DEFAULT_REASONING
from ..exceptions import ResponseParseError
from ..models.classification import CategoryResult, FeedbackCategory

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


class CategoryPayload(BaseModel):
    """Schema for a single-item classification reply."""

    category: FeedbackCategory = Field(description="One of the fixed feedback categories")
    confidence: float = Field(ge=0.0, le=1.0, strict=True, description="Confidence between 0 and 1")
    reasoning: str | None = Field(default=None, description="Brief explanation of the category")

    def to_result(self) -> CategoryResult:
        return CategoryResult(
            category=self.category,
            confidence=round(self.confidence, 2),
            reasoning=self.reasoning or AI_DEFAULT_REASONING,
        )


def extract_json(text: str, opening: str) -> Any:
    """Decode the first JSON structure starting with ``opening`` in text.

    Args:
        text: Raw reply text, possibly wrapped in prose or markdown fences
        opening: "{" for an object, "[" for an array

    Raises:
        ResponseParseError: If no decodable structure is found

    """
    start = text.find(opening)
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
            return value
        except json.JSONDecodeError:
            start = text.find(opening, start + 1)
    kind = "object" if opening == "{" else "array"
    raise ResponseParseError(f"No JSON {kind} found in response: {text[:200]!r}")


def validate_category(data: Any) -> CategoryResult:
    """Validate one decoded category payload.

    Raises:
        ResponseParseError: If the category or confidence is invalid

    """
    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected a JSON object, got {type(data).__name__}")
    try:
        return CategoryPayload.model_validate(data).to_result()
    except PydanticValidationError as e:
        raise ResponseParseError(
            f"Invalid classification payload: {e.error_count()} error(s): {data!r:.200}"
        ) from e


def parse_single_response(text: str) -> CategoryResult:
    """Parse a single-item reply into a CategoryResult.

    Raises:
        ResponseParseError: If the reply is unusable

    """
    return validate_category(extract_json(text, "{"))


def parse_batch_response(text: str, expected: int) -> list[CategoryResult | ResponseParseError]:
    """Parse a batch reply into one entry per requested item.

    The reply as a whole must be an array of exactly ``expected`` elements.
    Elements are validated independently: an invalid element is returned as
    its ResponseParseError so the caller can substitute a fallback for that
    item alone.

    When the ``index`` fields form exactly 1..expected, elements are placed
    by index; otherwise they are taken in array order.

    Raises:
        ResponseParseError: If the reply is not an array of the right length

    """
    items = extract_json(text, "[")
    if not isinstance(items, list):
        raise ResponseParseError("Batch response is not a JSON array")
    if len(items) != expected:
        raise ResponseParseError(
            f"Batch response has {len(items)} items, expected {expected}"
        )

    indices = [item.get("index") if isinstance(item, dict) else None for item in items]
    if sorted(i for i in indices if isinstance(i, int)) == list(range(1, expected + 1)):
        items = sorted(items, key=lambda item: item["index"])

    results: list[CategoryResult | ResponseParseError] = []
    for position, item in enumerate(items, 1):
        try:
            results.append(validate_category(item))
        except ResponseParseError as e:
            logger.warning(f"Batch item {position} invalid: {e}")
            results.append(e)
    return results
