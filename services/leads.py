"""
Lead intake: validate a quote request and hand it to the CRM collaborator.

    RECEIVED -> VALIDATED -> SUBMITTED
    RECEIVED -> REJECTED                      (ValidationFailed)
    RECEIVED -> VALIDATED -> SUBMISSION_FAILED (SubmissionFailed)

A rejected lead and an undelivered lead raise different exceptions so the
caller can tell "fix your input" apart from "we could not take it".
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.init import SessionLocal
from models.lead import Lead
from services.errors import SubmissionFailed, ValidationFailed
from services.registry import get_city_by_id, is_valid_id
from utils.config import LEADS_NOTIFY_EMAIL
from utils.email import send_lead_notification_email

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ZIP_PATTERN = re.compile(r"^[0-9]{5}$")
CITY_ID_PATTERN = re.compile(r"^[0-9]+$")

# Field order of the downstream payload; notification tooling keys on these names
PAYLOAD_FIELDS = ("name", "email", "phone", "city_id", "city_name", "state_abbr", "message")


class LeadState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    SUBMITTED = "submitted"
    REJECTED = "rejected"
    SUBMISSION_FAILED = "submission_failed"


@dataclass(frozen=True)
class LeadSubmission:
    name: str
    email: str
    phone: str
    city_id: int
    city_name: str
    state_abbr: str
    message: Optional[str] = None
    project_type: Optional[str] = None
    dumpster_size_needed: str = "Not Sure"
    project_start: str = "ASAP"
    zip_code: Optional[str] = None
    received_at: Optional[datetime] = None

    def to_payload(self) -> Dict[str, Any]:
        return {f: getattr(self, f) for f in PAYLOAD_FIELDS}


@dataclass(frozen=True)
class LeadReceipt:
    state: LeadState
    lead_id: Any
    lead: LeadSubmission


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    return value.strip() if isinstance(value, str) else ""


def _parse_city_id(value: Any) -> Optional[int]:
    """A positive id that fits the cities.id column, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        city_id = value
    elif isinstance(value, str) and CITY_ID_PATTERN.match(value.strip()):
        city_id = int(value.strip())
    else:
        return None
    return city_id if is_valid_id(city_id) else None


def validate_lead(db: Session, payload: Mapping[str, Any]) -> LeadSubmission:
    """
    Check a raw lead payload and return a normalized LeadSubmission.

    Raises ValidationFailed with one message per bad field. The target city is
    looked up only once every other field is well-formed. StoreUnavailable
    from that lookup propagates unchanged.
    """
    errors: Dict[str, str] = {}

    name = _text(payload, "name")
    email = _text(payload, "email").lower()
    phone = _text(payload, "phone")
    zip_code = _text(payload, "zip_code")
    city_id = _parse_city_id(payload.get("city_id"))

    if not name:
        errors["name"] = "Full name is required."
    if not email:
        errors["email"] = "Email is required."
    elif not EMAIL_PATTERN.match(email):
        errors["email"] = "Enter a valid email address."
    if not phone:
        errors["phone"] = "Phone number is required."
    if zip_code and not ZIP_PATTERN.match(zip_code):
        errors["zip_code"] = "Enter a valid 5-digit zip code."
    if city_id is None:
        errors["city_id"] = "A valid city is required."

    if errors:
        raise ValidationFailed(errors)

    city = get_city_by_id(db, city_id)
    if city is None:
        raise ValidationFailed({"city_id": f"Unknown city: {city_id}."})

    return LeadSubmission(
        name=name,
        email=email,
        phone=phone,
        city_id=city.id,
        city_name=_text(payload, "city_name") or city.city_name,
        state_abbr=_text(payload, "state_abbr") or city.state,
        message=_text(payload, "message") or None,
        project_type=_text(payload, "project_type") or None,
        dumpster_size_needed=_text(payload, "dumpster_size_needed") or "Not Sure",
        project_start=_text(payload, "project_start") or "ASAP",
        zip_code=zip_code or None,
        received_at=datetime.now(timezone.utc),
    )


def dispatch_lead(
    lead: LeadSubmission,
    session_factory: Callable[[], Session] = SessionLocal,
    notify_email: str = LEADS_NOTIFY_EMAIL,
) -> int:
    """
    Default CRM collaborator: record the lead with status "new", then email
    the directory inbox. The stored row id is the acknowledgment; a failed
    email is logged but does not un-acknowledge a stored lead.
    """
    db = session_factory()
    try:
        row = Lead(
            city_id=lead.city_id,
            name=lead.name,
            email=lead.email,
            phone=lead.phone,
            message=lead.message,
            project_type=lead.project_type,
            dumpster_size_needed=lead.dumpster_size_needed,
            project_start=lead.project_start,
            zip_code=lead.zip_code,
            status="new",
        )
        db.add(row)
        db.commit()
        db.refresh(row)
        lead_id = row.id
    except SQLAlchemyError as e:
        db.rollback()
        raise SubmissionFailed(f"could not record lead: {e}") from e
    finally:
        db.close()

    if notify_email:
        sent, error = send_lead_notification_email(notify_email, lead_id, lead.to_payload())
        if not sent:
            logger.warning(f"Lead {lead_id} stored but notification failed: {error}")
    else:
        logger.warning(f"LEADS_NOTIFY_EMAIL not set; lead {lead_id} stored without notification")

    return lead_id


def submit_lead(
    db: Session,
    payload: Mapping[str, Any],
    dispatch: Callable[[LeadSubmission], Any] = dispatch_lead,
) -> LeadReceipt:
    logger.info(f"Lead {LeadState.RECEIVED.value} for city_id={payload.get('city_id')!r}")

    try:
        lead = validate_lead(db, payload)
    except ValidationFailed as e:
        logger.info(f"Lead {LeadState.REJECTED.value}: {sorted(e.errors)}")
        raise

    logger.info(f"Lead {LeadState.VALIDATED.value} for city {lead.city_id}")

    try:
        lead_id = dispatch(lead)
    except SubmissionFailed as e:
        logger.error(f"Lead {LeadState.SUBMISSION_FAILED.value} for city {lead.city_id}: {e.reason}")
        raise
    except Exception as e:
        logger.error(f"Lead {LeadState.SUBMISSION_FAILED.value} for city {lead.city_id}: {e}")
        raise SubmissionFailed(str(e)) from e

    logger.info(f"Lead {LeadState.SUBMITTED.value}: id={lead_id}")
    return LeadReceipt(state=LeadState.SUBMITTED, lead_id=lead_id, lead=lead)
