from __future__ import annotations

import logging
import re
from datetime import date

from fastapi import HTTPException

from app.config import settings
from app.helpers.train_helper import InvalidBitmask, build_live_status
from app.schemas.train_schema import TrainError, TrainLiveStatus
from app.utils.train_util import (
    MissingApiKeyError,
    UpstreamTransportError,
    decode_envelope,
    fetch_train_status,
)

log = logging.getLogger("train_service")

_TRAIN_NUMBER_RE = re.compile(r"\d+", re.ASCII)
_JOURNEY_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def _validate_train_number(train_number: str) -> str:
    train_number = train_number.strip()
    if not _TRAIN_NUMBER_RE.fullmatch(train_number):
        raise HTTPException(
            status_code=422,
            detail="train_number must contain digits only",
        )
    return train_number


def _validate_journey_date(journey_date: str) -> str:
    journey_date = journey_date.strip()
    try:
        if not _JOURNEY_DATE_RE.fullmatch(journey_date):
            raise ValueError(journey_date)
        date.fromisoformat(journey_date)
    except ValueError as e:
        raise HTTPException(
            status_code=422,
            detail=f"Invalid journey_date: '{journey_date}'. Use YYYY-MM-DD.",
        ) from e
    return journey_date


def error_status_code(error: TrainError) -> int:
    """HTTP status to answer with for a structured upstream error."""
    code = error.status_code
    if code is None or not 400 <= code <= 599:
        return settings.DEFAULT_ERROR_STATUS_CODE
    return code


def get_train_live_status(
    train_number: str,
    journey_date: str,
    now: int | None = None,
) -> TrainLiveStatus:
    """Fetch one train run upstream and derive its display-ready live status."""
    train_number = _validate_train_number(train_number)
    journey_date = _validate_journey_date(journey_date)

    try:
        envelope = fetch_train_status(train_number, journey_date)
        result = decode_envelope(envelope)
    except MissingApiKeyError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    except UpstreamTransportError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    if isinstance(result, TrainError):
        log.error("Error: %s", result.model_dump_json(by_alias=True))
        raise HTTPException(status_code=error_status_code(result), detail=result.message)

    try:
        return build_live_status(result, now)
    except InvalidBitmask as e:
        raise HTTPException(
            status_code=502,
            detail=f"Upstream returned a malformed schedule: {e}",
        ) from e
