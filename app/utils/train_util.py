from __future__ import annotations

import logging

import requests
from pydantic import ValidationError

from app.config import settings
from app.schemas.train_schema import TrainError, TrainStatusData, TrainStatusResponse

log = logging.getLogger("rail_radar")

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Accept-Encoding": "gzip, deflate",
}


class UpstreamTransportError(RuntimeError):
    """Raised when the upstream call fails or its response cannot be decoded."""


class MissingApiKeyError(RuntimeError):
    """Raised when no RailRadar API key is configured."""


def _api_key() -> str:
    key = (settings.RAIL_RADAR_API_KEY or "").strip()
    if not key:
        raise MissingApiKeyError("RAIL_RADAR_API_KEY is not configured")
    return key


def fetch_train_status(
    train_number: str,
    journey_date: str,
    *,
    timeout_s: float | None = None,
) -> TrainStatusResponse:
    """Fetch the schedule + live tracking envelope for one train run."""
    session = requests.Session()
    session.headers.update(DEFAULT_HEADERS)
    session.headers["X-Api-Key"] = _api_key()

    url = f"{settings.RAIL_RADAR_BASE_URL.rstrip('/')}/trains/{train_number}"
    params = {"journeyDate": journey_date}
    timeout = timeout_s if timeout_s is not None else settings.RAIL_RADAR_HTTP_TIMEOUT

    try:
        r = session.get(url, params=params, timeout=timeout)
    except requests.RequestException as e:
        raise UpstreamTransportError(f"Upstream request failed: {e}") from e
    finally:
        session.close()

    # Error envelopes come back with non-2xx codes, so the body is parsed regardless.
    txt = r.text
    try:
        return TrainStatusResponse.model_validate_json(txt)
    except ValidationError as e:
        log.error("Response from railradar API: %s, error: %s", txt, e)
        raise UpstreamTransportError("Upstream returned an unreadable response") from e


def decode_envelope(envelope: TrainStatusResponse) -> TrainStatusData | TrainError:
    """Pick the success or error branch of an envelope using its ``success`` flag."""
    if envelope.success:
        if envelope.data is None:
            raise UpstreamTransportError("Upstream reported success without data")
        return envelope.data

    if envelope.error is None:
        raise UpstreamTransportError("Upstream reported failure without error details")
    return envelope.error
