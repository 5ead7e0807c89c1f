"""
Nearby-guide ranking
====================

1. **Filter**  -- guides without a usable location are skipped.
2. **Measure** -- Haversine distance from the tourist to each guide.
3. **Sort**    -- ascending by distance; ties keep input order (stable sort).
4. **Slice**   -- keep the first ``top_k``.

Result-size randomisation (the "show 4 or 5 guides" behaviour of the mobile
app) is *not* done here: callers that want it draw a size with
``choose_result_size`` and pass it as ``top_k``.

Complexity: O(n log n) for n guides.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .distance import haversine_km
from .entities import Location


@dataclass(frozen=True)
class GuideCandidate:
    guide_id: int
    location: Optional[Location]
    payload: Any = None  # opaque record handed back to the caller


@dataclass(frozen=True)
class RankedGuide:
    guide_id: int
    location: Location
    distance_km: float
    payload: Any = None


def rank_nearby(
    tourist: Location,
    guides: Iterable[GuideCandidate],
    top_k: Optional[int] = None,
) -> list[RankedGuide]:
    """Rank located guides by distance from *tourist*, closest first."""
    ranked = [
        RankedGuide(
            guide_id=g.guide_id,
            location=g.location,
            distance_km=haversine_km(
                tourist.latitude,
                tourist.longitude,
                g.location.latitude,
                g.location.longitude,
            ),
            payload=g.payload,
        )
        for g in guides
        if g.location is not None
    ]
    ranked.sort(key=lambda r: r.distance_km)
    if top_k is not None:
        ranked = ranked[: max(top_k, 0)]
    return ranked


def within_radius(ranked: list[RankedGuide], radius_km: float) -> list[RankedGuide]:
    """Keep only guides no farther than *radius_km*.  Order is preserved."""
    return [r for r in ranked if r.distance_km <= radius_km]


def choose_result_size(
    min_results: int, max_results: int, rng: Optional[random.Random] = None
) -> int:
    """Draw a result-list size uniformly from ``[min_results, max_results]``."""
    if min_results < 0 or max_results < min_results:
        raise ValueError(
            f"Invalid result range: {min_results}..{max_results}"
        )
    rng = rng or random
    return rng.randint(min_results, max_results)
