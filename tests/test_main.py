"""Tests for the HTTP surface."""

from unittest.mock import patch

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from app.config import settings
from app.helpers.train_helper import InvalidBitmask
from app.main import app
from app.schemas.train_schema import TrainStatusResponse
from app.services import train_service
from app.utils.train_util import UpstreamTransportError

T = 1_759_681_800


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def fixed_now():
    with patch("app.helpers.train_helper.now_epoch", return_value=T):
        yield T


def _patch_fetch(envelope):
    return patch.object(train_service, "fetch_train_status", return_value=envelope)


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_running_status_success(client: TestClient, envelope_factory, fixed_now) -> None:
    with _patch_fetch(envelope_factory("train_data1.json")) as fetch:
        r = client.get("/running/status", params={"train_number": "12301", "journey_date": "2025-10-05"})

    assert r.status_code == 200
    fetch.assert_called_once_with("12301", "2025-10-05")
    body = r.json()
    assert body["train"]["runningDays"] == "Mo Sa"
    assert body["train"]["type"] == "Rajdhani"
    route = body["live_data"]["route"]
    assert [s["status"] for s in route] == ["Departed", "Arrived", "None"]
    assert route[1]["station"] == {"code": "DHN", "name": "Dhanbad Jn"}


def test_running_status_without_live_data(client: TestClient, envelope_factory) -> None:
    with _patch_fetch(envelope_factory("train_data2.json")):
        r = client.get("/running/status", params={"train_number": "22691", "journey_date": "2025-10-05"})

    assert r.status_code == 200
    assert r.json()["live_data"] is None


def test_upstream_error_uses_its_status_code(client: TestClient, envelope_factory) -> None:
    with _patch_fetch(envelope_factory("error1.json")):
        r = client.get("/running/status", params={"train_number": "99999", "journey_date": "2025-10-05"})

    assert r.status_code == 404
    assert r.json() == {"detail": "Train 99999 was not found"}


def test_upstream_error_without_status_uses_default(
    client: TestClient, envelope_factory, monkeypatch: pytest.MonkeyPatch
) -> None:
    with _patch_fetch(envelope_factory("error2.json")):
        r = client.get("/running/status", params={"train_number": "12301", "journey_date": "2025-10-05"})
    assert r.status_code == 401

    monkeypatch.setattr(settings, "DEFAULT_ERROR_STATUS_CODE", 503)
    with _patch_fetch(envelope_factory("error2.json")):
        r = client.get("/running/status", params={"train_number": "12301", "journey_date": "2025-10-05"})
    assert r.status_code == 503
    assert r.json() == {"detail": "Invalid or missing API key"}


def test_transport_failure_is_bad_gateway(client: TestClient) -> None:
    with patch.object(
        train_service, "fetch_train_status", side_effect=UpstreamTransportError("timeout")
    ):
        r = client.get("/running/status", params={"train_number": "12301", "journey_date": "2025-10-05"})

    assert r.status_code == 502


def test_malformed_bitmask_is_bad_gateway(envelope_factory) -> None:
    envelope = envelope_factory("train_data2.json")
    envelope.data.train.running_days_bitmap = 0x80

    with _patch_fetch(envelope):
        with pytest.raises(HTTPException) as exc:
            train_service.get_train_live_status("22691", "2025-10-05", now=T)

    assert exc.value.status_code == 502
    assert isinstance(exc.value.__cause__, InvalidBitmask)


@pytest.mark.parametrize(
    "params",
    [
        {"train_number": "12301", "journey_date": "05-10-2025"},
        {"train_number": "12A01", "journey_date": "2025-10-05"},
        {"train_number": "12301", "journey_date": "20251005"},
        {"train_number": "12301", "journey_date": "2025-W41-1"},
        {"train_number": "12301", "journey_date": "2025-02-30"},
        {"train_number": "\uff11\uff12\uff13\uff10\uff11", "journey_date": "2025-10-05"},
        {"train_number": "\u00b2", "journey_date": "2025-10-05"},
        {"train_number": "12301"},
    ],
)
def test_bad_parameters_rejected_before_fetch(client: TestClient, params: dict) -> None:
    with patch.object(train_service, "fetch_train_status") as fetch:
        r = client.get("/running/status", params=params)

    assert r.status_code == 422
    fetch.assert_not_called()


def test_unknown_upstream_status_still_answers(client: TestClient, envelope_factory, fixed_now) -> None:
    envelope = envelope_factory("train_data1.json")
    raw = envelope.model_dump(by_alias=True, mode="json")
    raw["data"]["liveData"]["route"][2]["status"] = "RUNNING"

    with _patch_fetch(TrainStatusResponse.model_validate(raw)):
        r = client.get("/running/status", params={"train_number": "12301", "journey_date": "2025-10-05"})

    assert r.status_code == 200
    assert [s["status"] for s in r.json()["live_data"]["route"]] == ["Departed", "Arrived", "None"]
