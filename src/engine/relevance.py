import logging
from typing import List, Sequence

from src.core.models import SceneCandidate

logger = logging.getLogger("SceneEngine")

TITLE_TYPE_SCORE = 10
TITLE_STYLE_SCORE = 5
KEYWORD_SCORE = 3


def _haystack(candidate: SceneCandidate) -> str:
    # Extracted keywords are tokens of title + description, so the text itself
    # covers them; the merged list also echoes the caller's keywords back and
    # would make every candidate match.
    return f"{candidate.title} {candidate.description}".lower()


def matches_any_keyword(candidate: SceneCandidate, keywords: Sequence[str]) -> bool:
    text = _haystack(candidate)
    return any(k.lower() in text for k in keywords if k and k.strip())


def filter_by_relevance(candidates: List[SceneCandidate], keywords: Sequence[str]) -> List[SceneCandidate]:
    """
    Keeps candidates mentioning at least one caller keyword.
    An imperfect match beats an empty page: when nothing matches, everything is kept.
    """
    if not keywords or not any(k and k.strip() for k in keywords):
        return list(candidates)

    kept = [c for c in candidates if matches_any_keyword(c, keywords)]
    if not kept:
        logger.info(f"🟡 Relevance filter would drop all {len(candidates)} scenes, keeping unfiltered set.")
        return list(candidates)

    if len(kept) < len(candidates):
        logger.info(f"🔎 Relevance filter kept {len(kept)}/{len(candidates)} scenes.")
    return kept


def relevance_score(candidate: SceneCandidate, product_type: str, product_style: str, keywords: Sequence[str]) -> int:
    title = candidate.title.lower()
    text = _haystack(candidate)
    score = 0
    if product_type and product_type.lower() in title:
        score += TITLE_TYPE_SCORE
    if product_style and product_style.lower() in title:
        score += TITLE_STYLE_SCORE
    for keyword in keywords:
        if keyword and keyword.strip() and keyword.lower() in text:
            score += KEYWORD_SCORE
    return score


def rank_by_relevance(
    candidates: List[SceneCandidate],
    product_type: str,
    product_style: str,
    keywords: Sequence[str],
) -> List[SceneCandidate]:
    """Stable sort, best match first; ties keep the source's order."""
    return sorted(
        candidates,
        key=lambda c: relevance_score(c, product_type, product_style, keywords),
        reverse=True,
    )
