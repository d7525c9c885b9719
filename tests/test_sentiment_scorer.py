"""Tests for keyword sentiment scoring."""

import pytest

from feedback_insights.analysis.sentiment_scorer import (
    label_for_score,
    score_sentiment,
    tokenize,
)
from feedback_insights.models.classification import SentimentLabel


class TestSentimentScorer:
    """Test suite for score_sentiment."""

    def test_neutral_default(self):
        """Text without sentiment words is neutral with low confidence."""
        result = score_sentiment("xyz qwerty")

        assert result.score == 0.5
        assert result.label == SentimentLabel.NEUTRAL
        assert result.confidence == 0.1
        assert result.topics == ["general"]

    def test_all_positive(self):
        """Only positive words gives a score of 1."""
        result = score_sentiment("Great service, fast and helpful")

        # "service," keeps its comma, so only great/fast/helpful count
        assert result.score == 1.0
        assert result.label == SentimentLabel.POSITIVE
        assert result.positive_count == 3
        assert result.negative_count == 0
        assert result.confidence == pytest.approx(0.6)

    def test_ratio_exactly_point_six_is_positive(self):
        """Three positive and two negative words sits on the positive threshold."""
        result = score_sentiment("great good love bad awful")

        assert result.score == pytest.approx(0.6)
        assert result.label == SentimentLabel.POSITIVE
        assert result.confidence == 1.0

    def test_ratio_exactly_point_four_is_negative(self):
        """Two positive and three negative words sits on the negative threshold."""
        result = score_sentiment("great good bad awful terrible")

        assert result.score == pytest.approx(0.4)
        assert result.label == SentimentLabel.NEGATIVE

    def test_ratio_between_thresholds_is_neutral(self):
        """An even split is neutral."""
        result = score_sentiment("great but slow")

        assert result.score == 0.5
        assert result.label == SentimentLabel.NEUTRAL
        assert result.confidence == pytest.approx(0.4)

    def test_confidence_capped_at_one(self):
        """Many sentiment words never push confidence past 1."""
        result = score_sentiment("great " * 10)

        assert result.confidence == 1.0

    def test_exact_token_matching(self):
        """Words are matched as whole tokens, not substrings."""
        result = score_sentiment("goodness greatly")

        assert result.positive_count == 0
        assert result.label == SentimentLabel.NEUTRAL

    def test_topics_in_fixed_order(self):
        """Topics are reported in their fixed order, each once."""
        result = score_sentiment("payment failed on the website and delivery was slow")

        assert result.topics == ["delivery", "website", "payment"]

    def test_word_in_two_topics(self):
        """A keyword can put text under more than one topic."""
        result = score_sentiment("too expensive")

        assert result.topics == ["price"]
        assert result.label == SentimentLabel.NEGATIVE

    def test_empty_text_is_neutral(self):
        """Empty input behaves as zero sentiment words."""
        result = score_sentiment("")

        assert result.score == 0.5
        assert result.label == SentimentLabel.NEUTRAL
        assert result.topics == ["general"]

    def test_punctuation_only(self):
        """Punctuation-only input still tokenizes."""
        assert tokenize("!!! ?") == ["!!!", "?"]
        assert score_sentiment("!!! ?").label == SentimentLabel.NEUTRAL

    def test_deterministic(self):
        """Same text always yields the same result."""
        text = "The app is confusing but support was helpful"

        assert score_sentiment(text) == score_sentiment(text)


@pytest.mark.parametrize(
    "score,label",
    [
        (1.0, SentimentLabel.POSITIVE),
        (0.6, SentimentLabel.POSITIVE),
        (0.59, SentimentLabel.NEUTRAL),
        (0.41, SentimentLabel.NEUTRAL),
        (0.4, SentimentLabel.NEGATIVE),
        (0.0, SentimentLabel.NEGATIVE),
    ],
)
def test_label_for_score(score, label):
    """Labels follow the fixed thresholds."""
    assert label_for_score(score) == label
