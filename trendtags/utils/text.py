from __future__ import annotations

import re
import warnings
from collections import Counter
from typing import Dict, List

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

HASHTAG_RE = re.compile(r"#([A-Za-z0-9_]+)")
WORD_RE = re.compile(r"\w+")
WS_RE = re.compile(r"\s+")
MIN_TOKEN_LENGTH = 3
# Elements whose text is dropped entirely rather than kept.
NON_TEXT_TAGS = ["script", "style", "textarea", "option", "noscript"]


def sanitize_text(text: str) -> str:
    """Strip markup, collapse whitespace and lowercase."""

    if not text:
        return ""
    with warnings.catch_warnings():
        # Short plain text such as "example.com" reads as a URL to bs4.
        warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)
        soup = BeautifulSoup(text, "lxml")
    for node in soup.find_all(NON_TEXT_TAGS):
        node.decompose()
    return WS_RE.sub(" ", soup.get_text()).strip().lower()


def tokenize(text: str) -> List[str]:
    return [token for token in WORD_RE.findall(text) if len(token) >= MIN_TOKEN_LENGTH]


def extract_keywords(text: str, top: int = 10) -> List[str]:
    """Return the ``top`` most frequent tokens of ``text``.

    Tokens of two characters or fewer are dropped. Tokens with the same count
    keep the order in which they first appear in the text.
    """

    tokens = tokenize(sanitize_text(text))
    if not tokens:
        return []
    counts = Counter(tokens)
    first_seen: Dict[str, int] = {}
    for position, token in enumerate(tokens):
        first_seen.setdefault(token, position)
    ranking = sorted(counts, key=lambda token: (-counts[token], first_seen[token]))
    return ranking[:top]


def count_hashtags(text: str) -> Dict[str, int]:
    """Count ``#tag`` occurrences, keyed by the lowercased tag with its ``#``."""

    counts: Dict[str, int] = {}
    if not text:
        return counts
    for match in HASHTAG_RE.findall(text):
        tag = "#" + match.lower()
        counts[tag] = counts.get(tag, 0) + 1
    return counts


def strip_hash(tag: str) -> str:
    """Remove a single leading ``#``."""

    return tag[1:] if tag.startswith("#") else tag
