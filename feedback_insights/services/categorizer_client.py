"""Client for the LLM feedback categorization service.

Single-item calls never raise: every failure becomes a keyword fallback.
Batch calls raise on batch-level failure so the orchestrator can decide how
to degrade.
"""

import asyncio
import json
import logging
from typing import Any

from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from langchain_openai import ChatOpenAI

from ..analysis.fallback_classifier import classify_fallback
from ..config import BATCH_CONFIG, MODEL_CONFIG, get_api_key
from ..exceptions import (
    BatchClassificationError,
    ClassificationError,
    RateLimitExceededError,
    ResponseParseError,
    ValidationError,
)
from ..models.classification import ClassificationOutcome, FeedbackCategory
from .rate_limiter import RateLimiter, get_shared_rate_limiter
from .response_parser import parse_batch_response, parse_single_response

logger = logging.getLogger(__name__)

CATEGORY_DESCRIPTIONS: dict[FeedbackCategory, str] = {
    FeedbackCategory.FEATURE_REQUEST: "Requests for new features or improvements",
    FeedbackCategory.BUG_REPORT: "Reports of technical issues, errors, or malfunctions",
    FeedbackCategory.SHIPPING_COMPLAINT: "Issues related to delivery, packaging, or shipping",
    FeedbackCategory.PRODUCT_QUALITY: "Concerns about product quality, materials, or build",
    FeedbackCategory.CUSTOMER_SERVICE: "Feedback about customer support or service experience",
    FeedbackCategory.GENERAL_INQUIRY: "General questions or neutral feedback",
    FeedbackCategory.REFUND_REQUEST: "Requests for refunds, returns, or billing issues",
    FeedbackCategory.COMPLIMENT: "Positive feedback, praise, or compliments",
}

SYSTEM_PROMPT = """You are an AI assistant specialized in categorizing customer feedback.

Categorize feedback into exactly one of these categories:
{categories}

Be concise and accurate. Confidence should reflect how certain you are about the categorization."""

SINGLE_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SYSTEM_PROMPT),
        (
            "user",
            """Feedback text: {feedback}

Respond with a JSON object containing:
{{
  "category": "one of the categories above",
  "confidence": number between 0 and 1,
  "reasoning": "brief explanation of why this category was chosen"
}}""",
        ),
    ]
)

BATCH_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", SYSTEM_PROMPT),
        (
            "user",
            """Categorize each of these {count} feedback items independently.

{items}

Respond with a JSON array of exactly {count} objects, one per item, in the same order:
[
  {{
    "index": item number,
    "category": "one of the categories above",
    "confidence": number between 0 and 1,
    "reasoning": "brief explanation"
  }}
]""",
        ),
    ]
)


def format_categories() -> str:
    """List every category with its description for the prompt."""
    return "\n".join(
        f"- {category.value}: {description}"
        for category, description in CATEGORY_DESCRIPTIONS.items()
    )


def escape_feedback(text: str, max_chars: int) -> str:
    """Quote feedback as a JSON string so it can't break out of the prompt."""
    return json.dumps(text[:max_chars], ensure_ascii=False)


def response_text(response: Any) -> str:
    """Pull the text out of a chat model reply."""
    content = getattr(response, "content", response)
    if isinstance(content, list):
        # Content blocks: keep the text parts
        return "".join(
            block.get("text", "") if isinstance(block, dict) else str(block)
            for block in content
        )
    return str(content)


class ExternalCategorizerClient:
    """Categorizes feedback with a chat model, falling back to keywords."""

    def __init__(
        self,
        llm: BaseChatModel | None = None,
        rate_limiter: RateLimiter | None = None,
        api_key: str | None = None,
        model: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            llm: Chat model to use; built from configuration when omitted
            rate_limiter: Limiter shared across calls (defaults to the
                process-wide limiter)
            api_key: Service credential (defaults to OPENAI_API_KEY)
            model: Model name (defaults to the configured classification model)
            timeout_seconds: Upper bound for each service call

        """
        self.model = model or str(MODEL_CONFIG["classification_model"])
        self.rate_limiter = rate_limiter or get_shared_rate_limiter()
        self.timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else float(MODEL_CONFIG["request_timeout"])
        )
        self.max_item_chars = BATCH_CONFIG["max_item_chars"]

        if llm is not None:
            self.llm: BaseChatModel | None = llm
        else:
            self.llm = self._create_llm(api_key or get_api_key())

    def _create_llm(self, api_key: str | None) -> BaseChatModel | None:
        if not api_key:
            logger.warning("Classification API key not set, using fallback categorization")
            return None
        try:
            return ChatOpenAI(
                model=self.model,
                temperature=float(MODEL_CONFIG["temperature"]),
                max_tokens=int(MODEL_CONFIG["max_tokens"]),
                api_key=api_key,
            )
        except Exception as e:
            logger.error(f"Failed to initialize classification model: {e}")
            return None

    @property
    def is_available(self) -> bool:
        """True if a chat model is configured."""
        return self.llm is not None

    def get_usage_stats(self) -> dict[str, Any]:
        """Get current API usage statistics."""
        return {**self.rate_limiter.usage(), "isAIAvailable": self.is_available}

    async def _invoke(self, messages: list) -> str:
        if self.llm is None:
            raise ClassificationError("Classification service not configured")
        response = await asyncio.wait_for(
            self.llm.ainvoke(messages), timeout=self.timeout_seconds
        )
        return response_text(response)

    async def classify(self, text: str) -> ClassificationOutcome:
        """Categorize one feedback text.

        Falls back to keyword classification when the service is not
        configured, the rate limit is exhausted, the call fails or times out,
        or the reply is invalid.

        Raises:
            ValidationError: If text is empty or blank

        """
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Invalid feedback text provided")

        if self.llm is None:
            return ClassificationOutcome.fallback(classify_fallback(text))

        if not self.rate_limiter.acquire():
            logger.warning("Rate limit exceeded, using fallback categorization")
            return ClassificationOutcome.fallback(classify_fallback(text))

        messages = SINGLE_PROMPT.format_messages(
            categories=format_categories(),
            feedback=escape_feedback(text, self.max_item_chars),
        )

        try:
            reply = await self._invoke(messages)
            return ClassificationOutcome.ai(parse_single_response(reply))
        except asyncio.TimeoutError:
            logger.error(f"Categorization timed out after {self.timeout_seconds}s")
        except ResponseParseError as e:
            logger.error(f"Invalid categorization response: {e}")
        except Exception as e:
            logger.error(f"Categorization failed: {e!s}")

        return ClassificationOutcome.fallback(classify_fallback(text))

    async def classify_batch(self, texts: list[str]) -> list[ClassificationOutcome]:
        """Categorize several texts with one service call.

        Items the model answers badly get a keyword fallback individually.

        Returns:
            One outcome per text, in input order

        Raises:
            ValidationError: If texts is empty
            RateLimitExceededError: If no request slot is available
            BatchClassificationError: If the call fails or the reply is
                not an array of the right length

        """
        if not texts:
            raise ValidationError("Invalid feedback texts array provided")

        if self.llm is None:
            raise BatchClassificationError("Classification service not configured")

        if not self.rate_limiter.acquire():
            raise RateLimitExceededError("Rate limit exceeded for batch categorization")

        items = "\n".join(
            f"{i}. {escape_feedback(text, self.max_item_chars)}"
            for i, text in enumerate(texts, 1)
        )
        messages = BATCH_PROMPT.format_messages(
            categories=format_categories(), count=len(texts), items=items
        )

        try:
            reply = await self._invoke(messages)
            parsed = parse_batch_response(reply, expected=len(texts))
        except asyncio.TimeoutError as e:
            raise BatchClassificationError(
                f"Batch categorization timed out after {self.timeout_seconds}s"
            ) from e
        except Exception as e:
            raise BatchClassificationError(f"Batch categorization failed: {e!s}") from e

        outcomes = []
        for text, result in zip(texts, parsed):
            if isinstance(result, ResponseParseError):
                outcomes.append(ClassificationOutcome.fallback(classify_fallback(text)))
            else:
                outcomes.append(ClassificationOutcome.ai(result))

        fallback_count = sum(1 for outcome in outcomes if outcome.is_fallback)
        logger.info(
            f"Batch of {len(texts)} categorized"
            + (f" ({fallback_count} item fallbacks)" if fallback_count else "")
        )
        return outcomes
