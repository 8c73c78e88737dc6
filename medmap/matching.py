"""
Fuzzy matching для подсказок по названиям регионов.

Важное правило проекта:
matching НЕ принимает решений "какой это регион".
Он только считает похожесть и предлагает кандидатов для отчета.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from rapidfuzz import fuzz, process


def top_n_from_norm_map(
    query_norm: Optional[str],
    norm_to_key: Dict[str, str],
    n: int = 5,
    cutoff: float = 0.0,
) -> List[Tuple[str, float]]:
    """
    Return top-N canonical keys with scores (0..1), WRatio scorer.

    Several names map to the same key; each key is reported once with its best score.
    """
    if not query_norm or not norm_to_key:
        return []
    matches = process.extract(
        query_norm,
        list(norm_to_key.keys()),
        scorer=fuzz.WRatio,
        limit=None,
        score_cutoff=cutoff * 100,
    )
    out: List[Tuple[str, float]] = []
    seen = set()
    for norm_key, sc, _ in matches:
        key = norm_to_key[norm_key]
        if key in seen:
            continue
        seen.add(key)
        out.append((key, sc / 100.0))
        if len(out) >= n:
            break
    return out
