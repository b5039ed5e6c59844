import uuid
from typing import Optional

from app.features.seo_analysis.schemas.report import SEOReport
from app.features.seo_analysis.services.analysis.markup_analyzer import (
    MarkupAnalyzer,
    parse_markup,
)
from app.features.seo_analysis.services.analysis.recommendations import RecommendationGenerator
from app.features.seo_analysis.services.analysis.score_aggregator import ScoreAggregator
from app.features.seo_analysis.services.retrieval.content_retriever import ContentRetriever
from app.platform.exceptions import InvalidURL
from app.platform.logger import StageLogger, get_logger
from app.platform.utils.url_validator import normalize_url

logger = get_logger(__name__)


class SEOAnalyzerService:
    """
    Single-page SEO analysis.

    Process:
    1. Normalize the URL
    2. Retrieve HTML (static fetch, rendered fetch as fallback)
    3. Parse and run the eight markup analyzers
    4. Aggregate the overall score
    5. Generate recommendations

    Holds no per-request state; one instance can serve concurrent requests.
    """

    def __init__(self, retriever: Optional[ContentRetriever] = None):
        self.retriever = retriever or ContentRetriever()

    async def analyze(
        self,
        raw_url: str,
        request_id: Optional[str] = None,
        stage_logger: Optional[StageLogger] = None,
    ) -> SEOReport:
        """
        Raises:
            InvalidURL: the input cannot be normalized
            ContentRetrievalError: both fetch stages failed
        """
        stages = stage_logger or StageLogger(request_id or str(uuid.uuid4()))

        stages.started("normalize")
        try:
            url = normalize_url(raw_url)
        except InvalidURL as e:
            stages.failure("normalize", e.message)
            raise
        stages.success("normalize", url)

        retrieval = await self.retriever.retrieve(url, stage_logger=stages)
        if not retrieval.ok:
            raise retrieval.to_error(url)

        stages.started("analyze")
        soup = parse_markup(retrieval.html)
        detailed_scores = MarkupAnalyzer.analyze_document(soup)
        stages.success("analyze")

        stages.started("aggregate")
        overall_score = ScoreAggregator.aggregate(detailed_scores)
        stages.success("aggregate", f"{overall_score.score}/100")

        stages.started("recommend")
        recommendations = RecommendationGenerator.generate(detailed_scores)
        stages.success("recommend", f"{len(recommendations)} recommendations")

        logger.info(
            f"SEO analysis complete: {overall_score.score}/100 for {url} "
            f"via {retrieval.method.value} fetch"
        )
        return SEOReport(
            url=url,
            fetch_method=retrieval.method,
            overall_score=overall_score,
            detailed_scores=detailed_scores,
            recommendations=recommendations,
        )
