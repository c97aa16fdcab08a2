"""Immutable read-model records returned by the directory registries.

ORM rows are copied into these before leaving a session, so they can be
passed between worker threads and composed into a view after the session
that produced them is closed.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True)
class CityRecord:
    id: int
    city_name: str
    state: str
    state_slug: str
    city_slug: str
    population: int
    latitude: float
    longitude: float
    county: Optional[str] = None
    metro_area: Optional[str] = None
    intro: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "CityRecord":
        return cls(
            id=row.id,
            city_name=row.city_name,
            state=row.state,
            state_slug=row.state_slug,
            city_slug=row.city_slug,
            population=row.population or 0,
            latitude=float(row.latitude),
            longitude=float(row.longitude),
            county=row.county,
            metro_area=row.metro_area,
            intro=row.intro,
        )


@dataclass(frozen=True)
class BusinessRecord:
    id: int
    city_id: int
    name: str
    slug: str
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    email: Optional[str] = None
    rating: Optional[float] = None
    review_count: int = 0
    tier: str = "free"
    description: Optional[str] = None
    sizes_available: Tuple[str, ...] = ()
    service_area_miles: int = 25

    @property
    def is_rated(self) -> bool:
        return self.rating is not None

    @classmethod
    def from_row(cls, row) -> "BusinessRecord":
        return cls(
            id=row.id,
            city_id=row.city_id,
            name=row.name,
            slug=row.slug,
            address=row.address,
            phone=row.phone,
            website=row.website,
            email=row.email,
            rating=float(row.rating) if row.rating is not None else None,
            review_count=row.review_count or 0,
            tier=row.tier,
            description=row.description,
            sizes_available=tuple(row.sizes_available or ()),
            service_area_miles=row.service_area_miles if row.service_area_miles is not None else 25,
        )


@dataclass(frozen=True)
class PricingRow:
    city_id: int
    size_yards: int
    price_low: Decimal
    price_high: Decimal
    rental_days_included: int = 7

    @classmethod
    def from_row(cls, row) -> "PricingRow":
        return cls(
            city_id=row.city_id,
            size_yards=row.size_yards,
            price_low=Decimal(row.price_low),
            price_high=Decimal(row.price_high),
            rental_days_included=row.rental_days_included,
        )


@dataclass(frozen=True)
class NearbyCity:
    """A city plus its great-circle distance from a reference point."""
    city: CityRecord
    distance_miles: float
