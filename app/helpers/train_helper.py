from __future__ import annotations

import time

from app.schemas.train_schema import (
    LiveRouteInfo,
    LiveStatus,
    RouteInfo,
    Train,
    TrainLiveStatus,
    TrainStatusData,
)

# (bit index, label), Sunday first.
RUNNING_DAYS: tuple[tuple[int, str], ...] = (
    (0, "Su"),
    (1, "Mo"),
    (2, "Tu"),
    (3, "We"),
    (4, "Th"),
    (5, "Fr"),
    (6, "Sa"),
)

_VALID_DAY_BITS = 0x7F


class InvalidBitmask(ValueError):
    """Raised when a running-days bitmask has bits set outside Sunday..Saturday."""


def now_epoch() -> int:
    """Return the current time as whole epoch seconds."""
    return int(time.time())


def decode_running_days(bitmap: int) -> str:
    if bitmap < 0 or bitmap & ~_VALID_DAY_BITS:
        raise InvalidBitmask(f"running days bitmap out of range: {bitmap:#x}")

    days = ""
    for bit, label in RUNNING_DAYS:
        if bitmap & (1 << bit):
            days += f"{label} "
    return days.rstrip()


def normalize_train(train: Train) -> Train:
    """Return a copy of ``train`` with ``running_days`` decoded from its bitmap."""
    return train.model_copy(
        update={"running_days": decode_running_days(train.running_days_bitmap)}
    )


def station_name_index(route: list[RouteInfo]) -> dict[str, str]:
    # Later entries overwrite earlier ones for a repeated station code.
    return {stop.station_code: stop.station_name for stop in route}


def classify_stop(stop: LiveRouteInfo, now: int) -> LiveStatus:
    """Classify a live stop against ``now``.

    Rules are checked top to bottom and the first match wins:

    1. actual departure before ``now``    -> Departed
    2. actual arrival at or before ``now`` -> Arrived
    3. actual arrival after ``now``       -> Upcoming
    4. anything else                      -> None

    Scheduled times never take part in the decision.
    """
    if stop.actual_departure is not None and stop.actual_departure < now:
        return LiveStatus.DEPARTED
    if stop.actual_arrival is not None and stop.actual_arrival <= now:
        return LiveStatus.ARRIVED
    if stop.actual_arrival is not None and stop.actual_arrival > now:
        return LiveStatus.UPCOMING
    return LiveStatus.NONE


def derive_live_route(
    tracking: list[LiveRouteInfo],
    schedule: list[RouteInfo],
    now: int,
) -> list[LiveRouteInfo]:
    """Annotate live stops with station names and statuses.

    Returns new records in the same order as ``tracking``; inputs are left untouched.
    """
    names = station_name_index(schedule)

    derived: list[LiveRouteInfo] = []
    for stop in tracking:
        station = stop.station
        if station.name is None and station.code in names:
            station = station.model_copy(update={"name": names[station.code]})
        derived.append(
            stop.model_copy(update={"station": station, "status": classify_stop(stop, now)})
        )
    return derived


def build_live_status(data: TrainStatusData, now: int | None = None) -> TrainLiveStatus:
    """Turn a successful upstream payload into the display view."""
    if now is None:
        now = now_epoch()

    train = normalize_train(data.train)

    live_data = data.live_data
    if live_data is not None:
        live_data = live_data.model_copy(
            update={"route": derive_live_route(live_data.route, data.route, now)}
        )

    return TrainLiveStatus(train=train, live_data=live_data)
