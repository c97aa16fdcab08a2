from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from db.init import get_db
from services import registry
from services.errors import StoreUnavailable
from services.pricing import load_pricing_reference

router = APIRouter()

@router.get("/city/{city_id}")
def get_city_pricing(city_id: int, db: Session = Depends(get_db)):
    """
    Curated price ranges for a city, one row per container size.
    An empty list means no curated pricing; use /pricing/reference instead.
    """
    try:
        return registry.get_city_pricing(db, city_id)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail={"error": "store_unavailable", "operation": e.operation}) from e

@router.get("/reference")
def get_reference():
    reference = load_pricing_reference()
    return [
        {"size_yards": size, "price_low": low, "price_high": high}
        for size, (low, high) in sorted(reference.items())
    ]
