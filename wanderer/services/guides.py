"""
Nearby-guide lookup
===================

Per request:

1. Pick candidates -- all located guides, or only those whose H3 cell lies
   within the search radius (``wanderer.domain.spatial``).
2. In demo mode (``simulate_guide_locations``) every guide, located or not,
   is placed at a random point near the tourist instead.
3. Rank by Haversine distance and cut to ``top_k`` / radius.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from wanderer.config import settings
from wanderer.domain.entities import Location
from wanderer.domain.jitter import nearby_point
from wanderer.domain.ranking import (
    GuideCandidate,
    RankedGuide,
    choose_result_size,
    rank_nearby,
    within_radius,
)
from wanderer.domain.spatial import cells_within_radius
from wanderer.infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)


class NearbyGuideFinder:
    def __init__(
        self,
        session: AsyncSession,
        *,
        simulate: Optional[bool] = None,
        rng: Optional[random.Random] = None,
    ):
        self.users = UserRepository(session)
        self.simulate = (
            settings.simulate_guide_locations if simulate is None else simulate
        )
        self.rng = rng

    async def find(
        self,
        tourist: Location,
        *,
        top_k: Optional[int] = None,
        radius_km: Optional[float] = None,
        min_results: Optional[int] = None,
        max_results: Optional[int] = None,
    ) -> list[RankedGuide]:
        """
        Closest guides to *tourist*.

        A ``min_results``/``max_results`` range overrides ``top_k`` with a
        size drawn from that range.
        """
        if min_results is not None and max_results is not None:
            top_k = choose_result_size(min_results, max_results, self.rng)
        elif top_k is None:
            top_k = settings.nearby_top_k

        if self.simulate:
            candidates = await self._simulated_candidates(tourist)
        else:
            candidates = await self._stored_candidates(tourist, radius_km)

        ranked = rank_nearby(tourist, candidates)
        if radius_km is not None:
            ranked = within_radius(ranked, radius_km)
        logger.debug(
            "Nearby guides: %d candidates, %d returned", len(candidates), min(top_k, len(ranked))
        )
        return ranked[:top_k]

    async def _stored_candidates(
        self, tourist: Location, radius_km: Optional[float]
    ) -> list[GuideCandidate]:
        cells = None
        if radius_km is not None:
            cells = cells_within_radius(
                tourist.latitude, tourist.longitude, radius_km, settings.h3_resolution
            )
        guides = await self.users.get_located_guides(cells)
        return [
            GuideCandidate(
                guide_id=g.id,
                location=Location.maybe(g.current_lat, g.current_lng),
                payload=g,
            )
            for g in guides
        ]

    async def _simulated_candidates(self, tourist: Location) -> list[GuideCandidate]:
        guides = await self.users.get_guides()
        return [
            GuideCandidate(
                guide_id=g.id,
                location=nearby_point(
                    tourist.latitude,
                    tourist.longitude,
                    settings.jitter_max_km,
                    self.rng,
                ),
                payload=g,
            )
            for g in guides
        ]
