"""Display ordering for business listings.

Paid tiers come first, then rated listings by rating and review volume.
The id is the final key so the order is fully deterministic.
"""

from typing import Iterable, List, Tuple

from services.records import BusinessRecord

# Higher rank sorts first
TIER_RANK = {
    "featured": 2,
    "verified": 1,
    "free": 0,
}
UNKNOWN_TIER_RANK = -1


def tier_rank(tier: str) -> int:
    return TIER_RANK.get((tier or "").lower(), UNKNOWN_TIER_RANK)


def business_sort_key(business: BusinessRecord) -> Tuple[int, int, float, int, int]:
    return (
        -tier_rank(business.tier),
        0 if business.is_rated else 1,
        -(business.rating or 0.0),
        -business.review_count,
        business.id,
    )


def order_businesses(businesses: Iterable[BusinessRecord]) -> List[BusinessRecord]:
    return sorted(businesses, key=business_sort_key)
