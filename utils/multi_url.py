# utils/multi_url.py
# =============================================================================
# 🎲 Multi-URL: gewichtete Zufallsauswahl (A/B-Tests)
# =============================================================================

from __future__ import annotations

import random
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

DEFAULT_WEIGHT = 1.0


def candidate_weight(candidate: Dict[str, Any]) -> float:
    """Fehlendes, nicht-numerisches oder nicht-positives Gewicht → 1."""
    raw = candidate.get("weight")
    try:
        weight = float(raw)
    except (TypeError, ValueError):
        return DEFAULT_WEIGHT
    # NaN fällt hier ebenfalls durch (NaN > 0 ist False)
    if not weight > 0 or weight == float("inf"):
        return DEFAULT_WEIGHT
    return weight


def _usable(candidates: Iterable[Dict[str, Any]]) -> List[Tuple[str, float]]:
    pool = []
    for candidate in candidates or []:
        if not isinstance(candidate, dict):
            continue
        url = str(candidate.get("url") or "").strip()
        if not url:
            continue
        pool.append((url, candidate_weight(candidate)))
    return pool


def select_url(
    candidates: Iterable[Dict[str, Any]],
    rand: Optional[Callable[[], float]] = None,
) -> Optional[str]:
    """
    Zieht pro Aufruf neu eine URL, Wahrscheinlichkeit ∝ Gewicht.
    Leere Liste → None (Aufrufer macht daraus eine Failure).
    """
    pool = _usable(candidates)
    if not pool:
        return None

    rand = rand or random.random
    total = sum(weight for _, weight in pool)
    r = rand() * total
    for url, weight in pool:
        r -= weight
        if r <= 0:
            return url
    # Rundungsfehler: letzter Kandidat
    return pool[-1][0]
