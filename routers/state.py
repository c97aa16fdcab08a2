from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from db.init import get_db
from services import registry
from services.errors import StoreUnavailable

router = APIRouter()

@router.get("/")
def get_all(db: Session = Depends(get_db)):
    try:
        return registry.get_all_states(db)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail={"error": "store_unavailable", "operation": e.operation}) from e

@router.get("/{state_slug}/cities")
def get_cities(state_slug: str, db: Session = Depends(get_db)):
    """
    Cities in a state, largest first.
    Returns empty list if the state has no cities (don't 404 - empty is valid).
    """
    try:
        return registry.get_cities_by_state(db, state_slug)
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail={"error": "store_unavailable", "operation": e.operation}) from e
