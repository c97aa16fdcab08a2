"""
National size-to-price reference data and the regional pricing model.

The reference table is a read-only resource: `load_pricing_reference()`
returns the built-in national averages, or the contents of a JSON file
when PRICING_REFERENCE_PATH is set:

    {"10": {"low": 250, "high": 325}, "20": {"low": 375, "high": 475}}
"""

import json
import logging
from decimal import Decimal, ROUND_HALF_UP
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from utils.config import PRICING_REFERENCE_PATH

logger = logging.getLogger(__name__)

STANDARD_SIZES = (10, 15, 20, 30, 40)
DEFAULT_RENTAL_DAYS = 7

# National average, mid-size city
NATIONAL_BASE_PRICING: Dict[int, Tuple[int, int]] = {
    10: (250, 325),
    15: (305, 395),
    20: (375, 475),
    30: (455, 575),
    40: (555, 710),
}

# Regional cost-of-living multiplier by state slug; unlisted states use 1.0
STATE_MULTIPLIERS: Dict[str, float] = {
    # Northeast
    "new-york": 1.22, "new-jersey": 1.18, "connecticut": 1.16,
    "massachusetts": 1.16, "rhode-island": 1.14, "maryland": 1.12,
    "delaware": 1.10, "pennsylvania": 1.06, "new-hampshire": 1.08,
    "maine": 1.05, "vermont": 1.05,
    # West Coast
    "california": 1.22, "washington": 1.12, "oregon": 1.10,
    "hawaii": 1.30, "alaska": 1.25,
    # Mountain / Southwest
    "colorado": 1.06, "arizona": 1.04, "nevada": 1.04,
    "utah": 1.00, "new-mexico": 0.95, "idaho": 0.96, "montana": 0.95,
    "wyoming": 0.94,
    # Midwest
    "illinois": 0.96, "minnesota": 0.95, "wisconsin": 0.94,
    "michigan": 0.93, "ohio": 0.93, "indiana": 0.91, "iowa": 0.91,
    "missouri": 0.91, "nebraska": 0.90, "kansas": 0.90,
    "north-dakota": 0.90, "south-dakota": 0.88,
    # South
    "florida": 1.00, "virginia": 0.97, "georgia": 0.91,
    "texas": 0.94, "north-carolina": 0.91, "south-carolina": 0.90,
    "tennessee": 0.89, "kentucky": 0.87, "louisiana": 0.89,
    "alabama": 0.86, "mississippi": 0.84, "arkansas": 0.85,
    "west-virginia": 0.85, "oklahoma": 0.88,
}

# (population floor, multiplier), checked top-down
POPULATION_MULTIPLIERS: List[Tuple[int, float]] = [
    (1_000_000, 1.18),
    (500_000, 1.10),
    (200_000, 1.05),
    (75_000, 1.00),
    (25_000, 0.97),
]
SMALL_TOWN_MULTIPLIER = 0.94


def load_pricing_reference(path: Optional[str] = None) -> Mapping[int, Tuple[int, int]]:
    """Return the size -> (low, high) national reference as a read-only mapping."""
    path = path if path is not None else PRICING_REFERENCE_PATH
    if not path:
        return MappingProxyType(dict(NATIONAL_BASE_PRICING))

    with open(path, "r", encoding="utf-8") as fh:
        raw = json.load(fh)

    table: Dict[int, Tuple[int, int]] = {}
    for size, bounds in raw.items():
        size_yards = int(size)
        low, high = int(bounds["low"]), int(bounds["high"])
        if size_yards not in STANDARD_SIZES:
            raise ValueError(f"Unsupported container size in pricing reference: {size_yards}")
        if low <= 0 or low > high:
            raise ValueError(f"Invalid price range for {size_yards} yd: {low}-{high}")
        table[size_yards] = (low, high)

    logger.info(f"Loaded pricing reference for {len(table)} sizes from {path}")
    return MappingProxyType(table)


def population_multiplier(population: int) -> float:
    for floor, mult in POPULATION_MULTIPLIERS:
        if population > floor:
            return mult
    return SMALL_TOWN_MULTIPLIER


def regional_multiplier(state_slug: str, population: int) -> float:
    return STATE_MULTIPLIERS.get(state_slug, 1.0) * population_multiplier(population)


def _round_to_five(amount: float) -> int:
    return int((Decimal(str(amount)) / 5).quantize(Decimal("1"), rounding=ROUND_HALF_UP) * 5)


def compute_city_pricing(
    state_slug: str,
    population: int,
    reference: Optional[Mapping[int, Tuple[int, int]]] = None,
) -> List[Dict[str, int]]:
    """
    Price ranges for one city, scaled from the national reference by region
    and city size and rounded to the nearest $5.
    """
    reference = reference if reference is not None else load_pricing_reference()
    mult = regional_multiplier(state_slug, population)

    rows = []
    for size in sorted(reference):
        low, high = reference[size]
        rows.append({
            "size_yards": size,
            "price_low": _round_to_five(low * mult),
            "price_high": _round_to_five(high * mult),
            "rental_days_included": DEFAULT_RENTAL_DAYS,
        })
    return rows
