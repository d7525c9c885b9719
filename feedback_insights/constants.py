"""Constants used throughout the feedback analysis pipeline."""

# Version stamped on every analysis record
ANALYSIS_VERSION = "2.1.0"

# Sentiment thresholds (score is the positive share of sentiment words)
POSITIVE_THRESHOLD = 0.6
NEGATIVE_THRESHOLD = 0.4
NEUTRAL_SCORE = 0.5
NO_SIGNAL_CONFIDENCE = 0.1
CONFIDENCE_PER_MATCH = 0.2

# Topic assigned when no topic keyword matches
DEFAULT_TOPIC = "general"

# Fallback classifier never claims more than this
FALLBACK_CONFIDENCE_CAP = 0.8

# Degraded record produced when the aggregator hits an unexpected error
DEGRADED_CONFIDENCE = 0.3
DEGRADED_REASONING = "AI service unavailable"
DEGRADED_AI_REASONING = "Fallback classification due to AI service unavailability"

# Default reasoning when the model omits one
AI_DEFAULT_REASONING = "AI-based categorization"

# Source label for imported rows
CSV_IMPORT_SOURCE = "csv_import"
