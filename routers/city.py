from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from db.init import get_db
from services import registry
from services.errors import StoreUnavailable
from utils.config import NEARBY_CITIES_LIMIT

router = APIRouter()


def _store_down(e: StoreUnavailable) -> HTTPException:
    return HTTPException(status_code=503, detail={"error": "store_unavailable", "operation": e.operation})


@router.get("/popular")
def get_popular(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    try:
        return registry.get_popular_cities(db, limit=limit)
    except StoreUnavailable as e:
        raise _store_down(e) from e


@router.get("/slugs")
def get_slugs(db: Session = Depends(get_db)):
    """
    Every (state_slug, city_slug) pair, for static page generation.
    """
    try:
        return registry.get_all_city_slugs(db)
    except StoreUnavailable as e:
        raise _store_down(e) from e


@router.get("/{city_id:int}/nearby")
def get_nearby(
    city_id: int,
    limit: int = Query(NEARBY_CITIES_LIMIT, ge=0, le=50),
    db: Session = Depends(get_db),
):
    """
    Closest other cities by great-circle distance, nearest first.
    Uses the stored coordinates of `city_id` as the reference point.
    """
    try:
        city = registry.get_city_by_id(db, city_id)
        if not city:
            raise HTTPException(status_code=404, detail="City not found")
        nearby = registry.get_nearby_cities(db, city.id, city.latitude, city.longitude, limit)
    except StoreUnavailable as e:
        raise _store_down(e) from e

    return [
        {**asdict(n.city), "distance_miles": round(n.distance_miles, 1)}
        for n in nearby
    ]


@router.get("/{state_slug}/{city_slug}")
def get_by_slug(state_slug: str, city_slug: str, db: Session = Depends(get_db)):
    try:
        city = registry.get_city_by_slug(db, state_slug, city_slug)
    except StoreUnavailable as e:
        raise _store_down(e) from e
    if not city:
        raise HTTPException(status_code=404, detail="City not found")
    return city
