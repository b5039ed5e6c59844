import pytest

from app.features.seo_analysis.schemas.report import DimensionScore, Impact
from app.features.seo_analysis.services.analysis.score_aggregator import ScoreAggregator


def _score(value, impact=Impact.NEUTRAL, category="Dim", context="ctx"):
    return DimensionScore(score=value, category=category, value=value, impact=impact, context=context)


class TestScoreAggregator:
    def test_mean_is_rounded_half_up(self):
        result = ScoreAggregator.aggregate([_score(90), _score(91)])
        assert result.score == 91  # 90.5 rounds up

    def test_out_of_range_inputs_are_not_clamped(self):
        result = ScoreAggregator.aggregate([_score(-40), _score(105), _score(0)])
        assert result.score == 22  # 65 / 3 = 21.67

        result = ScoreAggregator.aggregate([_score(105), _score(105)])
        assert result.score == 105

    def test_empty_input(self):
        result = ScoreAggregator.aggregate([])
        assert result.score == 0
        assert result.penalties == []
        assert result.bonuses == []

    @pytest.mark.parametrize(
        "score,label",
        [
            (100, "Excellent SEO optimization"),
            (90, "Excellent SEO optimization"),
            (89, "Good SEO, with room for improvement"),
            (80, "Good SEO, with room for improvement"),
            (79, "Average SEO, needs attention"),
            (70, "Average SEO, needs attention"),
            (69, "Poor SEO, requires significant improvements"),
            (-5, "Poor SEO, requires significant improvements"),
        ],
    )
    def test_interpretation_bands(self, score, label):
        assert ScoreAggregator.interpret(score) == label

    def test_penalties_and_bonuses_partition_non_neutral(self):
        scores = [
            _score(0, Impact.NEGATIVE, "Title Tag", "Missing title"),
            _score(100, Impact.POSITIVE, "Mobile-Friendliness", "Viewport ok"),
            _score(85, Impact.NEUTRAL, "Technical SEO", "Some issues"),
            _score(70, Impact.NEGATIVE, "Heading Structure", "No H1"),
        ]
        result = ScoreAggregator.aggregate(scores)

        assert result.penalties == ["Title Tag: Missing title", "Heading Structure: No H1"]
        assert result.bonuses == ["Mobile-Friendliness: Viewport ok"]
        non_neutral = [s for s in scores if s.impact != Impact.NEUTRAL]
        assert len(result.penalties) + len(result.bonuses) == len(non_neutral)
        assert not set(result.penalties) & set(result.bonuses)

    def test_deterministic(self):
        scores = [_score(50, Impact.NEGATIVE), _score(95, Impact.POSITIVE)]
        assert ScoreAggregator.aggregate(scores) == ScoreAggregator.aggregate(list(scores))
