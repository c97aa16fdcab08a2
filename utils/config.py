import os

from dotenv import load_dotenv

load_dotenv()

# ---- Store / downstream timeouts (seconds) ----
STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", "5"))
NOTIFY_TIMEOUT_SECONDS = float(os.getenv("NOTIFY_TIMEOUT_SECONDS", "10"))
STORE_READ_WORKERS = int(os.getenv("STORE_READ_WORKERS", "16"))

# ---- Directory ----
NEARBY_CITIES_LIMIT = int(os.getenv("NEARBY_CITIES_LIMIT", "5"))
PRICING_REFERENCE_PATH = os.getenv("PRICING_REFERENCE_PATH", "")

# ---- Leads ----
LEADS_NOTIFY_EMAIL = os.getenv("LEADS_NOTIFY_EMAIL", "")

# ---- App ----
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",
    ).split(",")
    if o.strip()
]
