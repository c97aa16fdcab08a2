import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException

from db.init import get_session_factory
from services.directory import get_city_directory_view
from services.errors import StoreUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{state_slug}/{city_slug}")
async def get_directory(
    state_slug: str,
    city_slug: str,
    session_factory = Depends(get_session_factory),
):
    """
    Everything a city page needs in one call.

    `failed_fetches` names any part (businesses, pricing, nearby_cities)
    that could not be loaded; those parts come back empty.
    """
    try:
        view = await get_city_directory_view(state_slug, city_slug, session_factory=session_factory)
    except StoreUnavailable as e:
        logger.error(f"Directory view unavailable for {state_slug}/{city_slug}: {e}")
        raise HTTPException(status_code=503, detail={"error": "store_unavailable", "operation": e.operation}) from e

    if view is None:
        raise HTTPException(status_code=404, detail="No listings yet: city not found")

    return {
        "city": view.city,
        "businesses": list(view.businesses),
        "has_listings": view.has_listings,
        "average_rating": view.average_rating,
        "rated_count": view.rated_count,
        "pricing": list(view.pricing),
        "nearby_cities": [
            {**asdict(n.city), "distance_miles": round(n.distance_miles, 1)}
            for n in view.nearby_cities
        ],
        "failed_fetches": sorted(view.failed_fetches),
    }
