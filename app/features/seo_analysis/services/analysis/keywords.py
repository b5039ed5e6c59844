import re
from typing import Iterable, List

MIN_KEYWORD_LENGTH = 4


def extract_title_keywords(title: str) -> List[str]:
    """
    Lowercase the title, split on whitespace and keep tokens longer than
    three characters. Duplicates are dropped, first occurrence wins.
    """
    keywords: List[str] = []
    for token in (title or "").lower().split():
        if len(token) >= MIN_KEYWORD_LENGTH and token not in keywords:
            keywords.append(token)
    return keywords


def _word_pattern(keyword: str) -> "re.Pattern[str]":
    # Lookarounds instead of \b so tokens with trailing punctuation ("tools,") still match
    return re.compile(rf"(?<!\w){re.escape(keyword.lower())}(?!\w)")


def count_keyword(text: str, keyword: str) -> int:
    """Whole-word, case-insensitive occurrences of ``keyword`` in ``text``."""
    if not keyword:
        return 0
    return len(_word_pattern(keyword).findall((text or "").lower()))


def contains_keyword(text: str, keyword: str) -> bool:
    if not keyword:
        return False
    return _word_pattern(keyword).search((text or "").lower()) is not None


def contains_any_keyword(text: str, keywords: Iterable[str]) -> bool:
    return any(contains_keyword(text, keyword) for keyword in keywords)


def keyword_density(text: str, keywords: Iterable[str], word_count: int) -> float:
    """Sum over keywords of occurrences / word_count, 0.0 for empty text."""
    if word_count <= 0:
        return 0.0
    return sum(count_keyword(text, keyword) / word_count for keyword in keywords)
