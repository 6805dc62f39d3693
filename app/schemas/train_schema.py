from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class UpstreamModel(BaseModel):
    """Base for records exchanged with the upstream provider (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Train(UpstreamModel):
    train_number: str = Field(..., description="Train number, e.g. '12301'")
    train_name: str
    train_type: str = Field("", alias="type", description="Service type reported upstream")
    zone: str = ""
    source_station_code: str
    source_station_name: str
    destination_station_code: str
    destination_station_name: str
    running_days_bitmap: int = Field(
        0, ge=0, le=255, description="Bit 0 = Sunday ... bit 6 = Saturday"
    )
    running_days: str = Field("", description="Decoded running days, e.g. 'Mo We Fr'")
    return_train_number: str | None = None
    travel_time_minutes: int | None = None
    total_halts: int | None = None
    distance_km: int | None = None
    avg_speed_kmph: int | None = None

    @field_validator("running_days", mode="before")
    @classmethod
    def _running_days_is_derived(cls, v):
        # Filled from the bitmap by the normalizer.
        return v if isinstance(v, str) else ""


class RouteInfo(UpstreamModel):
    id: int | None = None
    sequence: int
    station_code: str
    station_name: str
    is_halt: int = 0
    scheduled_arrival: int | None = Field(None, description="Minutes from journey start")
    scheduled_departure: int | None = Field(None, description="Minutes from journey start")
    halt_duration_minutes: int = 0
    platform: str | None = None
    day: int = 1
    speed_on_section_kmph: int | None = None
    track_type: str | None = None


class Station(UpstreamModel):
    code: str
    name: str | None = None


class LiveStatus(str, Enum):
    DEPARTED = "Departed"
    ARRIVED = "Arrived"
    UPCOMING = "Upcoming"
    NONE = "None"


class LiveRouteInfo(UpstreamModel):
    station: Station
    scheduled_arrival: int | None = Field(None, description="Epoch seconds")
    scheduled_departure: int | None = Field(None, description="Epoch seconds")
    actual_arrival: int | None = Field(None, description="Epoch seconds")
    actual_departure: int | None = Field(None, description="Epoch seconds")
    delay_arrival_minutes: int | None = None
    delay_departure_minutes: int | None = None
    platform: str | None = None
    status: LiveStatus = Field(
        LiveStatus.NONE, description="Derived per request; unknown upstream values read as None"
    )

    @field_validator("status", mode="before")
    @classmethod
    def _unknown_status_is_none(cls, v):
        try:
            return LiveStatus(v)
        except (TypeError, ValueError):
            return LiveStatus.NONE


class CurrentLocation(UpstreamModel):
    latitude: float
    longitude: float
    station_code: str
    status: str
    distance_from_origin_km: float | None = None
    distance_from_last_station_km: float | None = None


class TrainLiveData(UpstreamModel):
    train_number: str
    journey_date: str
    last_updated_at: str | None = None
    current_location: CurrentLocation | None = None
    data_source: str | None = None
    status_summary: str | None = None
    route: list[LiveRouteInfo] = Field(default_factory=list)


class TrainStatusData(UpstreamModel):
    train: Train
    route: list[RouteInfo] = Field(default_factory=list)
    live_data: TrainLiveData | None = None


class TrainError(UpstreamModel):
    code: str
    message: str
    status_code: int | None = None
    timestamp: str | None = None
    retryable: bool | None = None


class TrainStatusResponse(UpstreamModel):
    """Envelope returned by the upstream provider."""

    success: bool
    data: TrainStatusData | None = None
    error: TrainError | None = None


class TrainLiveStatus(BaseModel):
    """Display-ready view returned by ``GET /running/status``."""

    train: Train
    live_data: TrainLiveData | None = None
