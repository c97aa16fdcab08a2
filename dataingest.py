# dataingest.py
"""
Faker-based Data Ingestion for the Dumpster Rental Directory

Usage:
  # (optional) tune volumes and seed via env
  export FAKER_SEED=42
  export NUM_CITIES=40
  export BUSINESSES_PER_CITY_MAX=8
  export PRICING_COVERAGE=0.8

  python dataingest.py

Notes:
- Cities get real US coordinates from Faker's local_latlng, so nearby-city
  lookups return sensible neighbours.
- Pricing rows are derived from the national reference table scaled by the
  state and population multipliers in services.pricing.
- A fraction of cities is left without businesses and/or pricing on purpose,
  to exercise the "no listings yet" and reference-pricing fallbacks.
"""

import os
import random
import re
from typing import Dict, List

from faker import Faker
from sqlalchemy.orm import Session

from db.init import init_db, SessionLocal
from models.business import Business
from models.city import City
from models.city_pricing import CityPricing
from services.pricing import STANDARD_SIZES, compute_city_pricing, load_pricing_reference


# ----------------------- Config -----------------------
FAKER_SEED = int(os.getenv("FAKER_SEED", "42"))

NUM_CITIES = int(os.getenv("NUM_CITIES", "40"))
BUSINESSES_PER_CITY_MAX = int(os.getenv("BUSINESSES_PER_CITY_MAX", "8"))

# Fraction of cities that get curated pricing / any listings at all
PRICING_COVERAGE = float(os.getenv("PRICING_COVERAGE", "0.8"))
LISTING_COVERAGE = float(os.getenv("LISTING_COVERAGE", "0.85"))

TIER_WEIGHTS = {"free": 0.7, "verified": 0.2, "featured": 0.1}

STATE_ABBR: Dict[str, str] = {
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR",
    "california": "CA", "colorado": "CO", "connecticut": "CT", "delaware": "DE",
    "florida": "FL", "georgia": "GA", "hawaii": "HI", "idaho": "ID",
    "illinois": "IL", "indiana": "IN", "iowa": "IA", "kansas": "KS",
    "kentucky": "KY", "louisiana": "LA", "maine": "ME", "maryland": "MD",
    "massachusetts": "MA", "michigan": "MI", "minnesota": "MN", "mississippi": "MS",
    "missouri": "MO", "montana": "MT", "nebraska": "NE", "nevada": "NV",
    "new-hampshire": "NH", "new-jersey": "NJ", "new-mexico": "NM", "new-york": "NY",
    "north-carolina": "NC", "north-dakota": "ND", "ohio": "OH", "oklahoma": "OK",
    "oregon": "OR", "pennsylvania": "PA", "rhode-island": "RI", "south-carolina": "SC",
    "south-dakota": "SD", "tennessee": "TN", "texas": "TX", "utah": "UT",
    "vermont": "VT", "virginia": "VA", "washington": "WA", "west-virginia": "WV",
    "wisconsin": "WI", "wyoming": "WY",
}


# ----------------------- Faker setup -----------------------
faker = Faker("en_US")
random.seed(FAKER_SEED)
Faker.seed(FAKER_SEED)


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def _bool_biased(true_prob: float = 0.5) -> bool:
    return random.random() < true_prob


def _pick_tier() -> str:
    return random.choices(list(TIER_WEIGHTS), weights=list(TIER_WEIGHTS.values()))[0]


# ----------------------- Seeders -----------------------
def seed_cities(db: Session) -> List[City]:
    cities: List[City] = []
    seen = set()
    attempts = 0
    while len(cities) < max(1, NUM_CITIES) and attempts < NUM_CITIES * 20:
        attempts += 1
        lat, lon, place, _country, _tz = faker.local_latlng(country_code="US")
        state_slug = random.choice(list(STATE_ABBR))
        city_slug = slugify(place)
        if not city_slug or (state_slug, city_slug) in seen:
            continue
        seen.add((state_slug, city_slug))

        exists = (
            db.query(City)
            .filter(City.state_slug == state_slug, City.city_slug == city_slug)
            .first()
        )
        if exists:
            cities.append(exists)
            continue

        city = City(
            city_name=place,
            state=STATE_ABBR[state_slug],
            state_slug=state_slug,
            city_slug=city_slug,
            population=random.randint(5_000, 1_500_000),
            latitude=float(lat),
            longitude=float(lon),
            county=f"{faker.last_name()} County",
            metro_area=f"{place} Metro" if _bool_biased(0.4) else None,
        )
        db.add(city)
        cities.append(city)
    db.commit()
    print(f"[seed] cities: {len(cities)}")
    return cities


def seed_businesses(db: Session, cities: List[City]) -> List[Business]:
    businesses: List[Business] = []
    for city in cities:
        if db.query(Business).filter(Business.city_id == city.id).first():
            continue
        if not _bool_biased(LISTING_COVERAGE):
            continue

        used_slugs = set()
        for _ in range(random.randint(1, max(1, BUSINESSES_PER_CITY_MAX))):
            name = f"{faker.last_name()} {random.choice(['Dumpster Rental', 'Roll-Off', 'Waste Services', 'Disposal'])}"
            slug = slugify(name)
            if slug in used_slugs:
                continue
            used_slugs.add(slug)

            rated = _bool_biased(0.8)
            biz = Business(
                city_id=city.id,
                name=name,
                slug=slug,
                address=f"{faker.street_address()}, {city.city_name}, {city.state}",
                phone=faker.numerify("(###) ###-####") if _bool_biased(0.9) else None,
                website=f"https://www.{slug}.com" if _bool_biased(0.6) else None,
                email=faker.company_email() if _bool_biased(0.5) else None,
                rating=round(random.uniform(3.0, 5.0), 1) if rated else None,
                review_count=random.randint(1, 400) if rated else 0,
                tier=_pick_tier(),
                sizes_available=[
                    f"{s} yard" for s in sorted(random.sample(STANDARD_SIZES, random.randint(1, len(STANDARD_SIZES))))
                ],
                service_area_miles=random.choice([15, 25, 30, 40, 50]),
                is_active=_bool_biased(0.95),
            )
            db.add(biz)
            businesses.append(biz)
    db.commit()
    print(f"[seed] businesses: {len(businesses)}")
    return businesses


def seed_city_pricing(db: Session, cities: List[City]) -> List[CityPricing]:
    reference = load_pricing_reference()
    rows: List[CityPricing] = []
    for city in cities:
        if db.query(CityPricing).filter(CityPricing.city_id == city.id).first():
            continue
        if not _bool_biased(PRICING_COVERAGE):
            continue
        for row in compute_city_pricing(city.state_slug, city.population, reference):
            cp = CityPricing(city_id=city.id, **row)
            db.add(cp)
            rows.append(cp)
    db.commit()
    print(f"[seed] city_pricing: {len(rows)}")
    return rows


# ----------------------- Main -----------------------
def main():
    init_db()

    db = SessionLocal()
    try:
        cities = seed_cities(db)
        seed_businesses(db, cities)
        seed_city_pricing(db, cities)

        print("\n✅ Faker ingestion completed.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
