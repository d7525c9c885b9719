"""Custom exceptions for Feedback Insights."""


class FeedbackInsightsError(Exception):
    """Base exception for Feedback Insights."""

    pass


class ValidationError(FeedbackInsightsError):
    """Raised when input validation fails."""

    pass


class ClassificationError(FeedbackInsightsError):
    """Raised when feedback classification fails."""

    pass


class ResponseParseError(ClassificationError):
    """Raised when the classification service reply cannot be used."""

    pass


class RateLimitExceededError(ClassificationError):
    """Raised when the request cap for the current window is exhausted."""

    pass


class BatchClassificationError(ClassificationError):
    """Raised when a whole batch request fails."""

    pass


class WorkflowError(FeedbackInsightsError):
    """Raised when workflow execution fails."""

    pass
