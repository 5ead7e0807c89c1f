"""
Distance calculation using the Haversine formula.

Assumption
----------
Guide proximity is ranked by great-circle (Haversine) distance rather than
road distance.  Tourists usually walk or take local transport to meet a
guide, so straight-line distance is a good enough ordering key and keeps the
service free of routing-API dependencies.

NaN coordinates propagate to a NaN result; callers filter them beforehand.

Complexity: O(1) per call.
"""

import math

EARTH_RADIUS_KM = 6_371.0


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    # float drift near antipodes can push ``a`` just above 1
    if a > 1.0:
        a = 1.0
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))
