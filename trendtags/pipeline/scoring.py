from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

from ..models import HashtagScore


def rank_hashtags(
    text_counts: Mapping[str, int],
    dom_tags: Iterable[str],
    dom_weight: int = 5,
    cap: int = 150,
) -> List[HashtagScore]:
    """Merge page-text counts with DOM hits and rank by score.

    Every DOM hit adds ``dom_weight`` to its lowercased tag. Ties keep the
    order in which tags were first counted.
    """

    scores: Dict[str, int] = dict(text_counts)
    for tag in dom_tags:
        key = tag.lower()
        scores[key] = scores.get(key, 0) + dom_weight
    ranked = sorted(scores.items(), key=lambda kv: kv[1], reverse=True)
    return [HashtagScore(tag=tag, score=score) for tag, score in ranked[:cap]]
