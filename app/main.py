import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from app.config import settings
from app.schemas.train_schema import TrainLiveStatus
from app.services.train_service import get_train_live_status

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("train_track")

app = FastAPI(
    title="Train Live Status API",
    version="0.1.0",
    description="FastAPI service returning display-ready Indian Railways running status.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/running/status", response_model=TrainLiveStatus)
async def running_status(
    train_number: str = Query(..., description="Train number, e.g. 12301"),
    journey_date: str = Query(..., description="Journey date as YYYY-MM-DD"),
) -> TrainLiveStatus:
    """Get the live running status of a train for the given journey date."""
    log.info("Fetching train status for %s on date %s", train_number, journey_date)
    return await run_in_threadpool(get_train_live_status, train_number, journey_date)


# Mounted last so the API routes above take precedence.
if Path(settings.STATIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
