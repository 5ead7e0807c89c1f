"""
Spatial binning of user locations
=================================

Every location ping stores the H3 cell of the user's position (resolution
7, ~5.16 km² hexagons).  A nearby-guide search with a radius then only
loads guides whose cell lies in the ``k``-ring around the tourist's cell,
and the exact Haversine check in the ranker does the rest.

Choosing ``k``
--------------
Cell centres on the outer ring ``k`` are at least ``1.5 x k x edge`` from
the origin centre, and the tourist can sit up to one ``edge`` away from
that centre.  A guide within ``r`` km is therefore covered by

    k = ceil((r + edge) / (1.5 x edge)) + 1

``edge`` is the shortest edge of the tourist's own cell, shrunk by
``EDGE_MARGIN``.  H3 cell sizes vary by latitude and icosahedron face, so
the global average edge overestimates the local one in many places.
Rings that touch a pentagon are distorted; those searches skip the
pre-filter.

Complexity: O(k²) cells per lookup.
"""

from __future__ import annotations

import math
from typing import Optional

import h3

# Past this ring size the IN (...) list outgrows a plain scan of all guides
MAX_RING = 40

# Neighbouring cells may be somewhat smaller than the origin cell
EDGE_MARGIN = 0.85


def location_h3_cell(lat: float, lng: float, resolution: int = 7) -> str:
    """Map a geo-point to an H3 hexagonal cell index.  O(1)."""
    return h3.latlng_to_cell(lat, lng, resolution)


def local_edge_km(cell: str) -> float:
    """Shortest edge of *cell* in km."""
    return min(
        h3.edge_length(edge, unit="km") for edge in h3.origin_to_directed_edges(cell)
    )


def ring_size_for_radius(radius_km: float, origin: str) -> int:
    edge = local_edge_km(origin) * EDGE_MARGIN
    return math.ceil((radius_km + edge) / (1.5 * edge)) + 1


def cells_within_radius(
    lat: float, lng: float, radius_km: float, resolution: int = 7
) -> Optional[set[str]]:
    """
    Return the set of cells that may contain points within *radius_km*.

    ``None`` means the pre-filter cannot help (radius too large, or a
    pentagon inside the ring); the caller should scan every located guide.
    """
    origin = location_h3_cell(lat, lng, resolution)
    k = ring_size_for_radius(radius_km, origin)
    if k > MAX_RING:
        return None
    cells = set(h3.grid_disk(origin, k))
    if any(h3.is_pentagon(cell) for cell in cells):
        return None
    return cells
