import copy
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from app.features.seo_analysis.schemas.report import DetailedScores, DimensionScore, Impact
from app.features.seo_analysis.services.analysis.keywords import (
    contains_any_keyword,
    extract_title_keywords,
    keyword_density,
)
from app.features.seo_analysis.utils.rounding import round_half_up

NON_VISIBLE_TAGS = ("script", "style", "noscript", "template")


def parse_markup(html: str) -> BeautifulSoup:
    """Queryable document handle for the analyzers."""
    return BeautifulSoup(html or "", "html.parser")


def _attr(soup: BeautifulSoup, selector: str, attribute: str) -> Optional[str]:
    """Stripped attribute of the first match, None when absent or blank."""
    element = soup.select_one(selector)
    if element is None:
        return None
    value = element.get(attribute)
    if isinstance(value, list):
        value = " ".join(value)
    value = (value or "").strip()
    return value or None


def _title_text(soup: BeautifulSoup) -> str:
    title = soup.find("title")
    return title.get_text().strip() if title else ""


class MarkupAnalyzer:
    """
    Eight stateless SEO analyzers over a parsed document.

    Each analyzer starts from 100 and subtracts penalties per detected issue.
    Scores are returned unclamped.
    """

    # SEO Best Practice Constants
    TITLE_MIN_LENGTH = 30
    TITLE_MAX_LENGTH = 60
    DESCRIPTION_MIN_LENGTH = 120
    DESCRIPTION_MAX_LENGTH = 160
    CONTENT_MIN_WORDS = 300
    CONTENT_GOOD_WORDS = 600
    KEYWORD_DENSITY_MIN = 0.01
    KEYWORD_DENSITY_MAX = 0.03
    MAX_AVG_WORDS_PER_SENTENCE = 20
    MIN_INTERNAL_LINKS = 5

    @staticmethod
    def analyze_title(soup: BeautifulSoup) -> DimensionScore:
        title = _title_text(soup)

        if not title:
            return DimensionScore(
                score=0,
                category="Title Tag",
                value="Missing",
                impact=Impact.NEGATIVE,
                context="A title tag is crucial for SEO and user experience.",
            )

        title_length = len(title)
        score = 100

        if title_length < MarkupAnalyzer.TITLE_MIN_LENGTH:
            score -= 30
            impact = Impact.NEGATIVE
            context = "Title is too short. Aim for 30-60 characters."
        elif title_length > MarkupAnalyzer.TITLE_MAX_LENGTH:
            score -= 15
            impact = Impact.NEGATIVE
            context = "Title may be truncated in search results."
        else:
            impact = Impact.POSITIVE
            context = "Title length is optimal."

        return DimensionScore(
            score=score, category="Title Tag", value=title_length, impact=impact, context=context
        )

    @staticmethod
    def analyze_meta_description(
        soup: BeautifulSoup, keywords: Optional[List[str]] = None
    ) -> DimensionScore:
        description = _attr(soup, 'meta[name="description"]', "content") or ""

        if not description:
            return DimensionScore(
                score=0,
                category="Meta Description",
                value="Missing",
                impact=Impact.NEGATIVE,
                context="A meta description is crucial for SEO and click-through rates.",
            )

        if keywords is None:
            keywords = extract_title_keywords(_title_text(soup))

        desc_length = len(description)
        score = 100
        notes: List[str] = []

        if desc_length < MarkupAnalyzer.DESCRIPTION_MIN_LENGTH:
            score -= 20
            impact = Impact.NEGATIVE
            notes.append("Meta description is too short. Aim for 120-160 characters.")
        elif desc_length > MarkupAnalyzer.DESCRIPTION_MAX_LENGTH:
            score -= 10
            impact = Impact.NEUTRAL
            notes.append(
                "Meta description exceeds 160 characters. Consider shortening it for "
                "optimal display in search results."
            )
        else:
            impact = Impact.POSITIVE
            notes.append("Meta description length is optimal.")

        if keywords and not contains_any_keyword(description, keywords):
            score -= 10
            notes.append(
                "Consider including a relevant keyword from the title in the meta description."
            )

        return DimensionScore(
            score=score,
            category="Meta Description",
            value=desc_length,
            impact=impact,
            context=" ".join(notes),
        )

    @staticmethod
    def analyze_headings(
        soup: BeautifulSoup, keywords: Optional[List[str]] = None
    ) -> DimensionScore:
        # html.parser keeps noscript children as markup, so noscript headings count too
        scope = soup.body or soup
        h1_elements = scope.select("h1")
        h1_count = len(h1_elements)
        h2_count = len(scope.select("h2"))
        h3_count = len(scope.select("h3"))

        if keywords is None:
            keywords = extract_title_keywords(_title_text(soup))

        score = 100
        notes: List[str] = []

        if h1_count == 0:
            score -= 30
            impact = Impact.NEGATIVE
            notes.append("Missing H1 heading. Each page should have exactly one H1 tag.")
        elif h1_count > 1:
            score -= 15
            impact = Impact.NEGATIVE
            notes.append(
                f"Multiple H1 headings found ({h1_count}). Consider using only one H1 tag per page."
            )
        else:
            impact = Impact.POSITIVE
            notes.append("Proper H1 usage.")

        if h2_count == 0:
            score -= 10
            notes.append("No H2 headings found. Consider using H2 tags to structure your content.")
        else:
            notes.append(f"Good use of H2 headings ({h2_count} found).")

        h1_text = " ".join(h1.get_text(" ", strip=True) for h1 in h1_elements)
        if h1_count > 0 and keywords and not contains_any_keyword(h1_text, keywords):
            score -= 10
            notes.append("Consider including a relevant keyword from the title in the H1 tag.")

        return DimensionScore(
            score=score,
            category="Heading Structure",
            value=f"H1: {h1_count}, H2: {h2_count}, H3: {h3_count}",
            impact=impact,
            context=" ".join(notes),
        )

    @staticmethod
    def analyze_images(soup: BeautifulSoup) -> DimensionScore:
        images = soup.find_all("img")
        total_images = len(images)

        if total_images == 0:
            return DimensionScore(
                score=100,
                category="Image Optimization",
                value=0,
                impact=Impact.NEUTRAL,
                context="No images found on the page.",
            )

        with_alt = sum(1 for img in images if (img.get("alt") or "").strip())
        alt_percentage = (with_alt / total_images) * 100
        score = 100

        if alt_percentage < 100:
            score -= round_half_up((100 - alt_percentage) / 2)
            impact = Impact.NEGATIVE
            context = f"{total_images - with_alt} out of {total_images} images missing alt text."
        else:
            impact = Impact.POSITIVE
            context = "All images have alt text."

        return DimensionScore(
            score=score,
            category="Image Optimization",
            value=round(alt_percentage, 2),
            impact=impact,
            context=context,
        )

    @staticmethod
    def _visible_body_text(soup: BeautifulSoup) -> str:
        # html.parser only builds a <body> when the markup spells one out
        if soup.body is not None:
            scope = copy.copy(soup.body)
            hidden = NON_VISIBLE_TAGS
        else:
            scope = copy.copy(soup)
            hidden = ("head", "title") + NON_VISIBLE_TAGS
        for tag in hidden:
            for element in scope.find_all(tag):
                element.decompose()
        return scope.get_text(" ", strip=True)

    @staticmethod
    def analyze_content(
        soup: BeautifulSoup, keywords: Optional[List[str]] = None
    ) -> DimensionScore:
        """
        Word count, noscript fallback, keyword density and sentence length.

        Word count covers the visible body text plus any noscript text;
        sentences are counted on the visible body text only.
        """
        body_text = MarkupAnalyzer._visible_body_text(soup)
        noscript_text = " ".join(
            element.get_text(" ", strip=True) for element in soup.select("noscript")
        ).strip()
        combined_text = f"{body_text} {noscript_text}"

        word_count = len(combined_text.split())

        if keywords is None:
            keywords = extract_title_keywords(_title_text(soup))

        score = 100
        notes: List[str] = []

        if word_count < MarkupAnalyzer.CONTENT_MIN_WORDS:
            score -= 30
            impact = Impact.NEGATIVE
            notes.append("Content length is too short. Aim for at least 300 words of quality content.")
        elif word_count < MarkupAnalyzer.CONTENT_GOOD_WORDS:
            score -= 15
            impact = Impact.NEUTRAL
            notes.append(
                "Content length is moderate. Consider expanding to at least 600 words "
                "for more comprehensive coverage."
            )
        else:
            impact = Impact.POSITIVE
            notes.append("Good content length.")

        if noscript_text:
            score += 5
            notes.append("Noscript content present, which is good for accessibility and SEO.")

        density = keyword_density(combined_text, keywords, word_count)
        if density < MarkupAnalyzer.KEYWORD_DENSITY_MIN:
            score -= 10
            notes.append(
                "Keyword density is low. Consider naturally incorporating more relevant keywords."
            )
        elif density > MarkupAnalyzer.KEYWORD_DENSITY_MAX:
            score -= 5
            notes.append(
                "Keyword density is high. Ensure the content reads naturally and isn't over-optimized."
            )
        else:
            notes.append("Good keyword usage and density.")

        sentences = [s for s in re.split(r"[.!?]+", body_text) if s.strip()]
        avg_words_per_sentence = word_count / max(1, len(sentences))
        if avg_words_per_sentence > MarkupAnalyzer.MAX_AVG_WORDS_PER_SENTENCE:
            score -= 10
            notes.append(
                "Average sentence length is high. Consider shortening sentences for better readability."
            )

        return DimensionScore(
            score=score,
            category="Content Quality",
            value=f"Word count: {word_count}, Avg words per sentence: {avg_words_per_sentence:.1f}",
            impact=impact,
            context=" ".join(notes),
        )

    @staticmethod
    def analyze_technical(soup: BeautifulSoup) -> DimensionScore:
        score = 100
        issues: List[str] = []

        if not _attr(soup, 'link[rel="canonical"]', "href"):
            score -= 10
            issues.append("No canonical tag found")

        if not _attr(soup, 'meta[name="viewport"]', "content"):
            score -= 10
            issues.append("No viewport meta tag found")

        if not _attr(soup, 'meta[name="robots"]', "content"):
            score -= 5
            issues.append("No robots meta tag found")

        open_graph = [
            _attr(soup, f'meta[property="og:{prop}"]', "content")
            for prop in ("title", "description", "image")
        ]
        if not all(open_graph):
            score -= 5
            issues.append("Incomplete Open Graph tags")

        if not _attr(soup, 'meta[name="twitter:card"]', "content"):
            score -= 5
            issues.append("No Twitter Card meta tag found")

        if soup.select_one('script[type="application/ld+json"]') is None:
            score -= 10
            issues.append("No structured data (JSON-LD) found")

        if score < 70:
            impact = Impact.NEGATIVE
        elif score < 90:
            impact = Impact.NEUTRAL
        else:
            impact = Impact.POSITIVE

        return DimensionScore(
            score=score,
            category="Technical SEO",
            value=score,
            impact=impact,
            context=f"Issues found: {', '.join(issues)}" if issues else "No major technical issues found",
        )

    @staticmethod
    def analyze_mobile_friendliness(soup: BeautifulSoup) -> DimensionScore:
        viewport = _attr(soup, 'meta[name="viewport"]', "content")
        score = 100

        if not viewport:
            score -= 50
            impact = Impact.NEGATIVE
            context = "No viewport meta tag found. This is crucial for mobile responsiveness."
        else:
            compact = re.sub(r"\s+", "", viewport.lower())
            if "width=device-width" not in compact or "initial-scale=1" not in compact:
                score -= 25
                impact = Impact.NEGATIVE
                context = (
                    "Viewport meta tag is present but may not be optimally configured "
                    "for mobile devices."
                )
            else:
                impact = Impact.POSITIVE
                context = "Viewport meta tag is properly configured for mobile devices."

        return DimensionScore(
            score=score,
            category="Mobile-Friendliness",
            value=viewport or "Not found",
            impact=impact,
            context=context,
        )

    @staticmethod
    def analyze_linking_structure(soup: BeautifulSoup) -> DimensionScore:
        og_url = _attr(soup, 'meta[property="og:url"]', "content")
        internal_links = 0
        external_links = 0

        for anchor in soup.select("a[href]"):
            href = (anchor.get("href") or "").strip()
            same_site = bool(og_url) and href.startswith(og_url)
            if href.startswith("/") or same_site:
                internal_links += 1
            elif href.startswith("http"):
                external_links += 1

        score = 100
        notes: List[str] = []

        if internal_links == 0:
            score -= 20
            impact = Impact.NEGATIVE
            notes.append("No internal links found. Consider adding links to other pages on your site.")
        elif internal_links < MarkupAnalyzer.MIN_INTERNAL_LINKS:
            score -= 10
            impact = Impact.NEUTRAL
            notes.append("Few internal links found. Consider increasing internal linking.")
        else:
            impact = Impact.POSITIVE
            notes.append("Good use of internal linking.")

        if external_links == 0:
            score -= 10
            notes.append("No external links found. Consider adding links to authoritative sources.")
        else:
            notes.append("Good use of external linking.")

        return DimensionScore(
            score=score,
            category="Linking Structure",
            value=f"Internal: {internal_links}, External: {external_links}",
            impact=impact,
            context=" ".join(notes),
        )

    @staticmethod
    def analyze_document(soup: BeautifulSoup) -> DetailedScores:
        """Run every analyzer against the same document."""
        keywords = extract_title_keywords(_title_text(soup))

        return DetailedScores(
            title=MarkupAnalyzer.analyze_title(soup),
            meta_description=MarkupAnalyzer.analyze_meta_description(soup, keywords),
            headings=MarkupAnalyzer.analyze_headings(soup, keywords),
            image_optimization=MarkupAnalyzer.analyze_images(soup),
            content=MarkupAnalyzer.analyze_content(soup, keywords),
            technical=MarkupAnalyzer.analyze_technical(soup),
            mobile_friendliness=MarkupAnalyzer.analyze_mobile_friendliness(soup),
            linking_structure=MarkupAnalyzer.analyze_linking_structure(soup),
        )
