"""
Read-side queries for cities, businesses, pricing and nearby cities.

Every function takes an open Session and returns immutable records.
"Not found" is an ordinary return value (None or an empty list); only a
store failure raises, as StoreUnavailable.
"""

import logging
import re
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from models.business import Business
from models.city import City
from models.city_pricing import CityPricing
from services.errors import store_errors
from services.geo import nearest_cities
from services.ordering import order_businesses
from services.records import BusinessRecord, CityRecord, NearbyCity, PricingRow

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# Integer primary keys are 32-bit
MAX_ROW_ID = 2**31 - 1


def is_valid_slug(slug: Optional[str]) -> bool:
    return bool(slug) and bool(SLUG_PATTERN.match(slug))


def is_valid_id(row_id: int) -> bool:
    return 1 <= row_id <= MAX_ROW_ID


# ─── City queries ────────────────────────────────────────────────────────────

def get_city_by_slug(db: Session, state_slug: str, city_slug: str) -> Optional[CityRecord]:
    if not (is_valid_slug(state_slug) and is_valid_slug(city_slug)):
        return None

    with store_errors("get_city_by_slug"):
        row = (
            db.query(City)
            .filter(City.state_slug == state_slug, City.city_slug == city_slug)
            .first()
        )
    return CityRecord.from_row(row) if row else None


def get_city_by_id(db: Session, city_id: int) -> Optional[CityRecord]:
    if not is_valid_id(city_id):
        return None

    with store_errors("get_city_by_id"):
        row = db.get(City, city_id)
    return CityRecord.from_row(row) if row else None


def get_cities_by_state(db: Session, state_slug: str) -> List[CityRecord]:
    if not is_valid_slug(state_slug):
        return []

    with store_errors("get_cities_by_state"):
        rows = (
            db.query(City)
            .filter(City.state_slug == state_slug)
            .order_by(City.population.desc(), City.city_slug.asc())
            .all()
        )
    return [CityRecord.from_row(r) for r in rows]


def get_all_states(db: Session) -> List[Dict[str, str]]:
    with store_errors("get_all_states"):
        rows = (
            db.query(City.state, City.state_slug)
            .distinct()
            .order_by(City.state.asc(), City.state_slug.asc())
            .all()
        )

    seen = set()
    states = []
    for state, state_slug in rows:
        if state_slug in seen:
            continue
        seen.add(state_slug)
        states.append({"state": state, "state_slug": state_slug})
    return states


def get_popular_cities(db: Session, limit: int = 10) -> List[CityRecord]:
    with store_errors("get_popular_cities"):
        rows = (
            db.query(City)
            .order_by(City.population.desc(), City.city_slug.asc())
            .limit(limit)
            .all()
        )
    return [CityRecord.from_row(r) for r in rows]


def get_all_city_slugs(db: Session) -> List[Dict[str, str]]:
    with store_errors("get_all_city_slugs"):
        rows = (
            db.query(City.state_slug, City.city_slug)
            .order_by(City.state_slug.asc(), City.city_slug.asc())
            .all()
        )
    return [{"state_slug": s, "city_slug": c} for s, c in rows]


# ─── Business queries ────────────────────────────────────────────────────────

def get_businesses_by_city(db: Session, city_id: int) -> List[BusinessRecord]:
    """All active listings for a city in display order (see services.ordering)."""
    if not is_valid_id(city_id):
        return []

    with store_errors("get_businesses_by_city"):
        rows = (
            db.query(Business)
            .filter(Business.city_id == city_id, Business.is_active.is_(True))
            .all()
        )
    return order_businesses(BusinessRecord.from_row(r) for r in rows)


def get_all_business_slugs(db: Session) -> List[Dict[str, str]]:
    """(state_slug, city_slug, slug) for every active listing, for sitemaps and page generation."""
    with store_errors("get_all_business_slugs"):
        rows = (
            db.query(City.state_slug, City.city_slug, Business.slug)
            .select_from(Business)
            .join(City, Business.city_id == City.id)
            .filter(Business.is_active.is_(True))
            .order_by(City.state_slug.asc(), City.city_slug.asc(), Business.slug.asc())
            .all()
        )
    return [{"state_slug": s, "city_slug": c, "slug": b} for s, c, b in rows]


def get_business_by_path(
    db: Session, state_slug: str, city_slug: str, business_slug: str
) -> Optional[BusinessRecord]:
    city = get_city_by_slug(db, state_slug, city_slug)
    if not city or not is_valid_slug(business_slug):
        return None

    with store_errors("get_business_by_path"):
        row = (
            db.query(Business)
            .filter(
                Business.city_id == city.id,
                Business.slug == business_slug,
                Business.is_active.is_(True),
            )
            .first()
        )
    return BusinessRecord.from_row(row) if row else None


# ─── Pricing queries ─────────────────────────────────────────────────────────

def get_city_pricing(db: Session, city_id: int) -> List[PricingRow]:
    if not is_valid_id(city_id):
        return []

    with store_errors("get_city_pricing"):
        rows = (
            db.query(CityPricing)
            .filter(CityPricing.city_id == city_id)
            .order_by(CityPricing.size_yards.asc())
            .all()
        )
    return [PricingRow.from_row(r) for r in rows]


# ─── Geo queries ─────────────────────────────────────────────────────────────

def get_nearby_cities(
    db: Session, city_id: int, lat: float, lon: float, limit: int
) -> List[NearbyCity]:
    """
    The `limit` cities closest to (lat, lon), excluding `city_id`.
    Full scan of the city table; the selection itself lives in services.geo.
    """
    if limit <= 0:
        return []

    with store_errors("get_nearby_cities"):
        rows = db.query(City).filter(City.id != city_id).all()
    candidates = [CityRecord.from_row(r) for r in rows]
    return nearest_cities(city_id, lat, lon, candidates, limit)
