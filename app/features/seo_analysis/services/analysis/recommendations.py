from dataclasses import dataclass
from typing import Dict, List, Tuple

from app.features.seo_analysis.schemas.report import (
    DetailedScores,
    DimensionScore,
    Recommendation,
    RecommendationImpact,
)

HIGH_IMPACT_BELOW = 70


@dataclass(frozen=True)
class RecommendationRule:
    id: str
    category: str
    title: str
    fallback_description: str
    threshold: int
    steps: Tuple[str, ...]
    additional_context: str


# Keyed by DetailedScores field name
RULES: Dict[str, RecommendationRule] = {
    "title": RecommendationRule(
        id="title-optimization",
        category="Meta Tags",
        title="Optimize Title Tag",
        fallback_description="Title needs improvement",
        threshold=90,
        steps=(
            "Keep title length between 30-60 characters",
            "Include primary keyword near the beginning",
            "Make it compelling and relevant to the page content",
            "Ensure each page has a unique title",
        ),
        additional_context="Title tags are crucial for SEO and click-through rates.",
    ),
    "meta_description": RecommendationRule(
        id="meta-description-optimization",
        category="Meta Tags",
        title="Improve Meta Description",
        fallback_description="Meta description needs optimization",
        threshold=90,
        steps=(
            "Write a compelling description between 120-160 characters",
            "Include relevant keywords naturally",
            "Make it actionable and aligned with the page content",
            "Ensure each page has a unique meta description",
        ),
        additional_context="Meta descriptions impact click-through rates from search results.",
    ),
    "headings": RecommendationRule(
        id="heading-structure-optimization",
        category="Content Structure",
        title="Optimize Heading Structure",
        fallback_description="Heading structure needs improvement",
        threshold=100,
        steps=(
            "Ensure there is exactly one H1 heading per page",
            "Use H2 and H3 subheadings to structure your content logically",
            "Include relevant keywords in headings naturally",
            "Check that headings in noscript content are properly structured",
        ),
        additional_context=(
            "Proper heading structure improves both SEO and user experience, "
            "including for users with JavaScript disabled."
        ),
    ),
    "image_optimization": RecommendationRule(
        id="image-optimization",
        category="Media Optimization",
        title="Optimize Images",
        fallback_description="Image optimization needed",
        threshold=90,
        steps=(
            "Add descriptive alt text to all images",
            "Compress images to reduce file size",
            "Use descriptive file names for images",
            "Implement lazy loading for images below the fold",
        ),
        additional_context="Optimized images improve page load speed and accessibility.",
    ),
    "content": RecommendationRule(
        id="content-optimization",
        category="Content Quality",
        title="Enhance Content Quality",
        fallback_description="Content needs improvement",
        threshold=100,
        steps=(
            "Aim for at least 600 words of quality content, including noscript content",
            "Ensure content is valuable and relevant to users with and without JavaScript",
            "Incorporate relevant keywords naturally throughout the content",
            "Add internal and external links to provide additional value",
        ),
        additional_context=(
            "High-quality, comprehensive content is essential for SEO success, "
            "regardless of whether JavaScript is enabled."
        ),
    ),
    "technical": RecommendationRule(
        id="technical-seo-optimization",
        category="Technical SEO",
        title="Improve Technical SEO",
        fallback_description="Technical improvements needed",
        threshold=90,
        steps=(
            "Add a canonical tag to prevent duplicate content issues",
            "Implement a responsive design with proper viewport meta tag",
            "Add a robots meta tag to guide search engines",
            "Ensure proper XML sitemap implementation",
        ),
        additional_context="Technical SEO provides the foundation for overall SEO success.",
    ),
    "mobile_friendliness": RecommendationRule(
        id="mobile-optimization",
        category="Mobile-Friendliness",
        title="Improve Mobile-Friendliness",
        fallback_description="Mobile optimization needed",
        threshold=90,
        steps=(
            "Ensure viewport meta tag is properly set",
            "Use responsive design techniques",
            "Test on various mobile devices and screen sizes",
            "Optimize touch targets for mobile users",
        ),
        additional_context="Mobile-friendliness is crucial for both user experience and SEO.",
    ),
    "linking_structure": RecommendationRule(
        id="linking-structure-optimization",
        category="Content and Navigation",
        title="Enhance Linking Structure",
        fallback_description="Linking structure needs improvement",
        threshold=90,
        steps=(
            "Increase internal linking to relevant pages",
            "Add external links to authoritative sources",
            "Use descriptive anchor text for links",
            "Ensure all links are functional and relevant",
        ),
        additional_context=(
            "A good linking structure improves navigation and helps search engines "
            "understand your site."
        ),
    ),
}


class RecommendationGenerator:
    @staticmethod
    def build(rule: RecommendationRule, score: DimensionScore) -> Recommendation:
        impact = (
            RecommendationImpact.HIGH
            if score.score < HIGH_IMPACT_BELOW
            else RecommendationImpact.MEDIUM
        )
        return Recommendation(
            id=rule.id,
            category=rule.category,
            impact=impact,
            title=rule.title,
            description=score.context or rule.fallback_description,
            steps=list(rule.steps),
            additional_context=rule.additional_context,
        )

    @staticmethod
    def generate(scores: DetailedScores) -> List[Recommendation]:
        """
        One recommendation per dimension scoring below its threshold,
        in the fixed dimension order.
        """
        recommendations: List[Recommendation] = []
        for name, score in scores.items():
            rule = RULES[name]
            if score.score < rule.threshold:
                recommendations.append(RecommendationGenerator.build(rule, score))
        return recommendations
