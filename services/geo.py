"""Great-circle distance and nearest-city selection."""

import heapq
import math
from typing import Iterable, List

from services.records import CityRecord, NearbyCity

EARTH_RADIUS_MILES = 3958.8


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles between two (lat, lon) points in decimal degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push `a` a hair past 1.0 for antipodal points
    a = min(1.0, max(0.0, a))
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(a))


def nearest_cities(
    reference_id: int,
    lat: float,
    lon: float,
    candidates: Iterable[CityRecord],
    limit: int,
) -> List[NearbyCity]:
    """
    Return up to `limit` candidates closest to (lat, lon), nearest first.
    The reference city is skipped. Equal distances fall back to population
    (largest first), then city slug, then state slug.
    """
    if limit <= 0:
        return []

    scored = (
        NearbyCity(city=c, distance_miles=haversine_miles(lat, lon, c.latitude, c.longitude))
        for c in candidates
        if c.id != reference_id
    )
    return heapq.nsmallest(
        limit,
        scored,
        key=lambda n: (n.distance_miles, -n.city.population, n.city.city_slug, n.city.state_slug),
    )
