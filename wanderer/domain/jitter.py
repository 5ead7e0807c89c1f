"""
Synthetic guide positions for demos.

Guides rarely publish live GPS in a demo environment, so the nearby-guides
endpoint can scatter them around the tourist instead (``simulate_guide_locations``
setting).  Offsets are uniform in *degree* space, which is not uniform in
area; that approximation is acceptable for demo data and must never feed
real matching.
"""

from __future__ import annotations

import math
import random
from typing import Optional

from .entities import Location

KM_PER_DEGREE_LAT = 111.32


def nearby_point(
    base_lat: float,
    base_lng: float,
    max_km: float = 5.0,
    rng: Optional[random.Random] = None,
) -> Location:
    """Return a random point within ``max_km`` degree-offsets of the base."""
    rng = rng or random
    max_dlat = max_km / KM_PER_DEGREE_LAT
    # longitude degrees shrink towards the poles
    max_dlng = max_km / (KM_PER_DEGREE_LAT * math.cos(math.radians(base_lat)))

    dlat = (rng.random() * 2 - 1) * max_dlat
    dlng = (rng.random() * 2 - 1) * max_dlng
    return Location(base_lat + dlat, base_lng + dlng)
