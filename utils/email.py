import os
import html
import requests
import logging
from typing import Any, Dict, Optional

from utils.config import NOTIFY_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

# Brevo (Sendinblue) Configuration (from environment variables)
BREVO_API_KEY = os.getenv("BREVO_API_KEY", "")
BREVO_FROM_EMAIL = os.getenv("BREVO_FROM_EMAIL", "")
BREVO_FROM_NAME = os.getenv("BREVO_FROM_NAME", "Dumpster Rental Directory")
BREVO_API_URL = "https://api.brevo.com/v3/smtp/email"


def send_email(
    to_email: str,
    subject: str,
    body: str,
    is_html: bool = True,
    reply_to: Optional[dict] = None,
    timeout: float = NOTIFY_TIMEOUT_SECONDS,
) -> tuple[bool, Optional[str]]:
    """
    Send a single email using Brevo API.
    Returns (success: bool, error_message: Optional[str])
    """
    if not BREVO_API_KEY:
        error_msg = "Brevo API key is missing. Set BREVO_API_KEY env var."
        logger.error(error_msg)
        return False, error_msg

    payload = {
        "sender": {
            "name": BREVO_FROM_NAME,
            "email": BREVO_FROM_EMAIL
        },
        "to": [
            {
                "email": to_email
            }
        ],
        "subject": subject
    }

    if is_html:
        payload["htmlContent"] = body
    else:
        payload["textContent"] = body

    if reply_to:
        payload["replyTo"] = reply_to

    headers = {
        "accept": "application/json",
        "api-key": BREVO_API_KEY,
        "content-type": "application/json"
    }

    try:
        response = requests.post(
            BREVO_API_URL,
            json=payload,
            headers=headers,
            timeout=timeout
        )
    except requests.exceptions.RequestException as e:
        error_msg = f"Network error sending to {to_email}: {str(e)}"
        logger.error(error_msg)
        return False, error_msg

    if response.status_code == 201:
        return True, None

    error_data = response.json() if response.content else {}
    error_msg = f"Brevo API error for {to_email}: {response.status_code} - {error_data.get('message', response.text)}"
    logger.error(error_msg)
    return False, error_msg


def send_lead_notification_email(
    to_email: str,
    lead_id: Any,
    payload: Dict[str, Any],
) -> tuple[bool, Optional[str]]:
    """
    Notify the directory inbox about a new lead.
    `payload` is the lead wire payload (name, email, phone, city_id, city_name, state_abbr, message).
    """
    city_label = f"{payload.get('city_name') or ''}, {payload.get('state_abbr') or ''}".strip(", ")
    subject = f"New dumpster rental lead #{lead_id} - {city_label}"

    rows = "".join(
        f"<tr><td style='font-weight:bold;padding:4px 12px 4px 0'>{html.escape(k)}</td>"
        f"<td style='padding:4px 0'>{html.escape(str(v)) if v is not None else ''}</td></tr>"
        for k, v in payload.items()
    )
    html_body = f"""
    <!DOCTYPE html>
    <html>
    <body style="font-family: Arial, sans-serif; color: #333;">
        <h2 style="margin: 0 0 12px 0;">New quote request in {html.escape(city_label)}</h2>
        <table>{rows}</table>
    </body>
    </html>
    """

    # Replying goes straight to the requester
    reply_to = {"email": payload.get("email"), "name": payload.get("name")}

    return send_email(to_email, subject, html_body, is_html=True, reply_to=reply_to)
