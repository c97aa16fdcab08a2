"""
City directory view: one city plus its listings, pricing and nearby cities.

The city is resolved first. The three dependent reads then run concurrently,
each in its own worker thread with its own session and timeout. A dependent
read that fails or times out leaves its field empty and is recorded in
`failed_fetches`; only a failure to resolve the city fails the whole view.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, FrozenSet, Optional, Tuple

from sqlalchemy.orm import Session

from db.init import SessionLocal
from services import registry
from services.errors import StoreUnavailable
from services.records import BusinessRecord, CityRecord, NearbyCity, PricingRow
from utils.config import NEARBY_CITIES_LIMIT, STORE_READ_WORKERS, STORE_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

BUSINESSES = "businesses"
PRICING = "pricing"
NEARBY_CITIES = "nearby_cities"

# A read abandoned on timeout keeps its worker until the query returns, so the
# pool size caps how many stuck reads can pile up.
_read_pool = ThreadPoolExecutor(max_workers=STORE_READ_WORKERS, thread_name_prefix="directory-read")


@dataclass(frozen=True)
class DirectoryView:
    city: CityRecord
    businesses: Tuple[BusinessRecord, ...] = ()
    pricing: Tuple[PricingRow, ...] = ()
    nearby_cities: Tuple[NearbyCity, ...] = ()
    failed_fetches: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def has_listings(self) -> bool:
        return bool(self.businesses)

    @property
    def rated_count(self) -> int:
        return sum(1 for b in self.businesses if b.is_rated)

    @property
    def average_rating(self) -> Optional[float]:
        """Mean of the ratings that exist, to one decimal; None when nothing is rated."""
        ratings = [b.rating for b in self.businesses if b.is_rated]
        if not ratings:
            return None
        mean = sum(Decimal(str(r)) for r in ratings) / len(ratings)
        return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))

    @property
    def is_degraded(self) -> bool:
        return bool(self.failed_fetches)


def _read(session_factory: Callable[[], Session], fn, *args):
    db = session_factory()
    try:
        return fn(db, *args)
    finally:
        db.close()


async def _timed_read(session_factory, timeout: float, operation: str, fn, *args):
    loop = asyncio.get_running_loop()
    try:
        return await asyncio.wait_for(
            loop.run_in_executor(_read_pool, _read, session_factory, fn, *args),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        raise StoreUnavailable(operation, f"timed out after {timeout}s") from e


async def get_city_directory_view(
    state_slug: str,
    city_slug: str,
    session_factory: Callable[[], Session] = SessionLocal,
    timeout: float = STORE_TIMEOUT_SECONDS,
    nearby_limit: int = NEARBY_CITIES_LIMIT,
) -> Optional[DirectoryView]:
    """
    Build the directory view for one city.

    Returns None when the city does not exist. Raises StoreUnavailable when
    the city itself cannot be read.
    """
    city = await _timed_read(
        session_factory, timeout, "get_city_by_slug",
        registry.get_city_by_slug, state_slug, city_slug,
    )
    if city is None:
        logger.info(f"No city for {state_slug}/{city_slug}")
        return None

    names = (BUSINESSES, PRICING, NEARBY_CITIES)
    results = await asyncio.gather(
        _timed_read(session_factory, timeout, "get_businesses_by_city",
                    registry.get_businesses_by_city, city.id),
        _timed_read(session_factory, timeout, "get_city_pricing",
                    registry.get_city_pricing, city.id),
        _timed_read(session_factory, timeout, "get_nearby_cities",
                    registry.get_nearby_cities, city.id, city.latitude, city.longitude, nearby_limit),
        return_exceptions=True,
    )

    fields = {}
    failed = set()
    for name, result in zip(names, results):
        if isinstance(result, Exception):
            logger.error(f"{name} fetch failed for city {city.id}: {result}")
            failed.add(name)
            fields[name] = ()
        else:
            fields[name] = tuple(result)

    if failed:
        logger.warning(
            f"Degraded directory view for {state_slug}/{city_slug}: "
            f"failed={sorted(failed)}"
        )

    return DirectoryView(
        city=city,
        businesses=fields[BUSINESSES],
        pricing=fields[PRICING],
        nearby_cities=fields[NEARBY_CITIES],
        failed_fetches=frozenset(failed),
    )
