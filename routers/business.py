from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from db.init import get_db
from services import registry
from services.errors import StoreUnavailable

router = APIRouter()

@router.get("/city/{city_id}")
def get_by_city(city_id: int, db: Session = Depends(get_db)):
    """
    Active listings for a city: featured, then verified, then free;
    within a tier by rating, review count and id.
    An empty list means the city has no listings yet.
    """
    try:
        return registry.get_businesses_by_city(db, city_id)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail={"error": "store_unavailable", "operation": e.operation}) from e

@router.get("/slugs")
def get_all_slugs(db: Session = Depends(get_db)):
    try:
        return registry.get_all_business_slugs(db)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail={"error": "store_unavailable", "operation": e.operation}) from e

@router.get("/{state_slug}/{city_slug}/{business_slug}")
def get_by_path(state_slug: str, city_slug: str, business_slug: str, db: Session = Depends(get_db)):
    try:
        business = registry.get_business_by_path(db, state_slug, city_slug, business_slug)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail={"error": "store_unavailable", "operation": e.operation}) from e
    if not business:
        raise HTTPException(status_code=404, detail="Business not found")
    return business
