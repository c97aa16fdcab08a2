from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from db.init import get_db
from services.errors import StoreUnavailable, SubmissionFailed, ValidationFailed
from services.leads import dispatch_lead, submit_lead
from typing import Dict, Any
import logging


logger = logging.getLogger(__name__)

router = APIRouter()


def get_lead_dispatcher():
    return dispatch_lead


@router.post("/", status_code=201)
def create_lead(
    data: Dict[str, Any],
    db: Session = Depends(get_db),
    dispatch = Depends(get_lead_dispatcher),
):
    """
    Payload:
    {
        "name": "John Smith",
        "email": "john@example.com",
        "phone": "(555) 123-4567",
        "city_id": 12,
        "city_name": "Austin",
        "state_abbr": "TX",
        "message": "Kitchen remodel, need a 20 yard next week"
    }
    Optional: project_type, dumpster_size_needed, project_start, zip_code.
    """
    try:
        receipt = submit_lead(db, data, dispatch=dispatch)
    except ValidationFailed as e:
        raise HTTPException(
            status_code=400,
            detail={"error": "validation_failed", "fields": e.errors},
        ) from e
    except SubmissionFailed as e:
        # Never report an undelivered lead as sent
        raise HTTPException(
            status_code=502,
            detail={"error": "submission_failed", "message": "Your request could not be delivered. Please try again."},
        ) from e
    except StoreUnavailable as e:
        raise HTTPException(status_code=503, detail={"error": "store_unavailable", "operation": e.operation}) from e

    return {"success": True, "id": receipt.lead_id, "status": receipt.state.value}
