import re
from typing import Iterable, List

MAX_KEYWORDS = 5

# Domain terms worth surfacing even when the caller did not ask for them
DOMAIN_VOCABULARY = ("cgi", "3d", "render", "design", "mockup")

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def tokenize(text: str) -> List[str]:
    return [t for t in _TOKEN_RE.findall((text or "").lower()) if len(t) >= 2]


def extract_keywords(title: str, description: str, search_keywords: Iterable[str] = ()) -> List[str]:
    """
    Tokens from title + description that contain a caller keyword or a
    domain vocabulary term, in order of appearance.
    """
    needles = [k.lower() for k in search_keywords if k and k.strip()]
    found: List[str] = []
    for token in tokenize(f"{title or ''} {description or ''}"):
        if any(term in token for term in DOMAIN_VOCABULARY) or any(n in token for n in needles):
            found.append(token)
    return found


def merge_keywords(search_keywords: Iterable[str], extracted: Iterable[str], limit: int = MAX_KEYWORDS) -> List[str]:
    """Caller keywords first, then extracted ones; de-duplicated, capped."""
    merged: List[str] = []
    for keyword in list(search_keywords) + list(extracted):
        keyword = (keyword or "").strip()
        if not keyword or keyword in merged:
            continue
        merged.append(keyword)
        if len(merged) >= limit:
            break
    return merged
