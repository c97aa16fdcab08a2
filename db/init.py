# db/init.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from dotenv import load_dotenv
import os

from utils.config import STORE_TIMEOUT_SECONDS

load_dotenv()

# ---- Database engine & Session ----
DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set in environment (.env)")


def _connect_args(url: str) -> dict:
    # Directory reads run in worker threads, so sqlite connections must be shareable
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    if url.startswith("postgres"):
        timeout_ms = int(STORE_TIMEOUT_SECONDS * 1000)
        return {
            "connect_timeout": max(1, int(STORE_TIMEOUT_SECONDS)),
            "options": f"-c statement_timeout={timeout_ms}",
        }
    return {}


engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(DATABASE_URL),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ---- Base for ORM models ----
Base = declarative_base()


# ---- DB session dependency ----
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ---- Session factory dependency (for handlers that open their own sessions) ----
def get_session_factory():
    return SessionLocal


# ---- Initialization ----
def init_db(bind=None):
    """
    Imports all model modules to register tables and creates them.
    City, business and pricing rows come from the offline ingestion
    process (see dataingest.py); nothing is seeded here.
    """
    # Import models so their metadata is registered on Base
    from models import (  # noqa: F401
        city,
        business,
        city_pricing,
        lead,
    )

    Base.metadata.create_all(bind=bind or engine)
