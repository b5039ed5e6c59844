from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

REPORT_SCHEMA_VERSION = 1


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts either spelling on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Impact(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class RecommendationImpact(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class FetchMethod(str, Enum):
    STATIC = "static"
    RENDERED = "rendered"


class DimensionScore(CamelModel):
    """Output of one markup analyzer. Scores are not clamped to 0-100."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    score: int
    category: str
    value: Union[int, float, str]
    impact: Impact
    context: str = ""


class OverallScore(CamelModel):
    score: int
    interpretation: str
    penalties: List[str] = Field(default_factory=list)
    bonuses: List[str] = Field(default_factory=list)


class Recommendation(CamelModel):
    id: str
    category: str
    impact: RecommendationImpact
    title: str
    description: str
    steps: List[str] = Field(default_factory=list)
    additional_context: Optional[str] = None


class DetailedScores(CamelModel):
    """All eight dimensions as named fields, declared in iteration order."""
    title: DimensionScore
    meta_description: DimensionScore
    headings: DimensionScore
    image_optimization: DimensionScore
    content: DimensionScore
    technical: DimensionScore
    mobile_friendliness: DimensionScore
    linking_structure: DimensionScore

    def items(self) -> Iterator[Tuple[str, DimensionScore]]:
        """(field name, score) pairs in the fixed dimension order."""
        for name in type(self).model_fields:
            yield name, getattr(self, name)

    def scores(self) -> List[DimensionScore]:
        return [score for _, score in self.items()]


class SEOReport(CamelModel):
    schema_version: int = REPORT_SCHEMA_VERSION
    url: str
    fetch_method: FetchMethod
    overall_score: OverallScore
    detailed_scores: DetailedScores
    recommendations: List[Recommendation] = Field(default_factory=list)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "schemaVersion": 1,
                "url": "https://example.com/",
                "fetchMethod": "static",
                "overallScore": {
                    "score": 72,
                    "interpretation": "Average SEO, needs attention",
                    "penalties": ["Title Tag: Title is too short. Aim for 30-60 characters."],
                    "bonuses": ["Mobile-Friendliness: Viewport meta tag is properly configured for mobile devices."],
                },
                "detailedScores": {"title": {"score": 70, "category": "Title Tag", "value": 14, "impact": "negative", "context": "Title is too short. Aim for 30-60 characters."}},
                "recommendations": [],
            }
        },
    )


class AnalyzeRequest(BaseModel):
    """Request schema for a single-page analysis"""
    url: Optional[str] = Field(None, description="The URL of the page to analyze")

    class Config:
        json_schema_extra = {
            "example": {
                "url": "example.com"
            }
        }


class ErrorBody(BaseModel):
    status_code: int
    status: str = "error"
    error: str
    details: Optional[str] = None
    suggestions: Optional[List[str]] = None
