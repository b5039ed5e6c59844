from typing import Iterable, List, Union

from app.features.seo_analysis.schemas.report import (
    DetailedScores,
    DimensionScore,
    Impact,
    OverallScore,
)
from app.features.seo_analysis.utils.rounding import round_half_up

INTERPRETATION_BANDS = [
    (90, "Excellent SEO optimization"),
    (80, "Good SEO, with room for improvement"),
    (70, "Average SEO, needs attention"),
]
POOR_INTERPRETATION = "Poor SEO, requires significant improvements"


class ScoreAggregator:
    @staticmethod
    def interpret(score: int) -> str:
        for threshold, label in INTERPRETATION_BANDS:
            if score >= threshold:
                return label
        return POOR_INTERPRETATION

    @staticmethod
    def aggregate(scores: Union[DetailedScores, Iterable[DimensionScore]]) -> OverallScore:
        """
        Combine dimension scores into the overall score.

        The overall score is the half-up rounded mean of the raw dimension
        scores; neither the inputs nor the result are clamped. Penalties and
        bonuses keep the order the scores were given in.
        """
        if isinstance(scores, DetailedScores):
            dimension_scores: List[DimensionScore] = scores.scores()
        else:
            dimension_scores = list(scores)

        if dimension_scores:
            overall = round_half_up(
                sum(s.score for s in dimension_scores) / len(dimension_scores)
            )
        else:
            overall = 0

        penalties = [
            f"{s.category}: {s.context}" for s in dimension_scores if s.impact == Impact.NEGATIVE
        ]
        bonuses = [
            f"{s.category}: {s.context}" for s in dimension_scores if s.impact == Impact.POSITIVE
        ]

        return OverallScore(
            score=overall,
            interpretation=ScoreAggregator.interpret(overall),
            penalties=penalties,
            bonuses=bonuses,
        )
