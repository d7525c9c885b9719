"""Command line entry point for Feedback Insights.

Usage:
    feedback-insights classify "The package arrived late and damaged"
    feedback-insights import ./feedback.csv --batch-size 15
    feedback-insights usage
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .analysis.aggregator import FeedbackAnalyzer
from .analysis.fallback_classifier import classify_fallback
from .analysis.sentiment_scorer import score_sentiment
from .config import BATCH_CONFIG, LOG_FORMAT, LOG_LEVEL
from .exceptions import FeedbackInsightsError
from .models.classification import ClassificationMethod, ClassificationOutcome
from .models.progress import BatchProgress
from .processing.batch_orchestrator import BatchOrchestrator
from .processing.csv_import import load_feedback_csv
from .services.categorizer_client import ExternalCategorizerClient

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else LOG_LEVEL,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )

    # Suppress HTTP request logging from OpenAI/httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


async def classify_command(args: argparse.Namespace) -> list[dict]:
    analyzer = FeedbackAnalyzer(use_ai=not args.keyword_only)
    records = []
    for text in args.texts:
        record = await analyzer.analyze_and_categorize(text)
        records.append(record.to_dict())
    return records


async def import_command(args: argparse.Namespace) -> list[dict]:
    rows = load_feedback_csv(args.file)
    texts = [row.content for row in rows]

    if args.keyword_only:
        categories = [
            ClassificationOutcome(
                result=classify_fallback(text), method=ClassificationMethod.KEYWORD_BASED
            )
            for text in texts
        ]
    else:
        orchestrator = BatchOrchestrator(ExternalCategorizerClient())

        def report(progress: BatchProgress) -> None:
            logger.info(
                f"Batch {progress.batches_completed}/{progress.total_batches}: "
                f"{progress.processed}/{progress.total} ({progress.percentage}%)"
            )

        categories = await orchestrator.classify_batch(texts, args.batch_size, report)

    results = []
    for row, outcome in zip(rows, categories):
        sentiment = score_sentiment(row.content)
        entry = {
            "content": row.content,
            "source": row.source,
            "feedbackDate": row.feedback_date,
            "sentimentScore": sentiment.score,
            "sentimentLabel": sentiment.label.value,
            "topics": sentiment.topics,
            "category": outcome.category.value,
            "aiCategoryConfidence": outcome.confidence,
            "aiReasoning": outcome.reasoning,
            "method": outcome.method.value,
        }
        results.append(entry)
    return results


def usage_command(args: argparse.Namespace) -> dict:
    return ExternalCategorizerClient().get_usage_stats()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feedback-insights", description="Analyze customer feedback"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    classify = subparsers.add_parser("classify", help="Analyze one or more feedback texts")
    classify.add_argument("texts", nargs="+", help="Feedback text")
    classify.add_argument("--keyword-only", action="store_true", help="Skip the AI service")

    import_parser = subparsers.add_parser("import", help="Analyze feedback from a CSV file")
    import_parser.add_argument("file", type=Path, help="CSV file with a content column")
    import_parser.add_argument(
        "--batch-size",
        type=int,
        default=BATCH_CONFIG["default_batch_size"],
        help="Maximum items per AI request",
    )
    import_parser.add_argument("--keyword-only", action="store_true", help="Skip the AI service")

    subparsers.add_parser("usage", help="Show classification API usage")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the Feedback Insights command line."""
    # Load environment variables from .env file
    load_dotenv()

    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == "classify":
            output = asyncio.run(classify_command(args))
        elif args.command == "import":
            output = asyncio.run(import_command(args))
        else:
            output = usage_command(args)
    except FeedbackInsightsError as e:
        logger.error(str(e))
        return 1

    print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
