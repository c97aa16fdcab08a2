import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from db.init import init_db
from dotenv import load_dotenv

load_dotenv()

from routers import (
    state, city, business, pricing, directory, lead
)
from services.errors import StoreUnavailable
from utils.config import CORS_ORIGINS, LOG_LEVEL
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(title="Dumpster Rental Directory API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

@app.on_event("startup")
def startup():
    init_db()

@app.exception_handler(StoreUnavailable)
async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    logger.error(f"Unhandled store outage on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=503,
        content={"detail": {"error": "store_unavailable", "operation": exc.operation}},
    )

@app.get("/health")
def health_check():
    return {"status": "ok"}

# Routers
app.include_router(state.router, prefix="/states", tags=["States"])
app.include_router(city.router, prefix="/cities", tags=["Cities"])
app.include_router(business.router, prefix="/businesses", tags=["Businesses"])
app.include_router(pricing.router, prefix="/pricing", tags=["Pricing"])
app.include_router(directory.router, prefix="/directory", tags=["Directory"])
app.include_router(lead.router, prefix="/leads", tags=["Leads"])


@app.get("/")
def root():
    return {"message": "Dumpster Rental Directory API running successfully"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000)
