"""Latest-departure search against a time-varying travel duration.

The search bisects the window [now, adjusted deadline] for a fixed number of
iterations, where the adjusted deadline is the arrival deadline minus all fixed
delays (cab buffer and weather). Bisection assumes feasibility is monotonic in
the departure time, i.e. leaving earlier never makes you arrive later. Real
traffic does not always behave that way (a rush-hour peak between two quiet
periods), so the result is a good approximation rather than a guaranteed
optimum. `scan_latest_departure` does a sampled-grid search over the same
window for comparison.

Probes run strictly one after another: each result decides the next interval.
A ProviderError from any probe aborts the search.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from depart_mcp.models.trip import Coordinate, Origin

logger = logging.getLogger(__name__)

# 2**22 halvings resolve a window of several days to well under a minute
SEARCH_ITERATIONS = 22


class TravelDurationProvider(Protocol):
    """Source of driving durations for a departure instant."""

    async def duration(self, departure: datetime, origin: Origin, destination: Coordinate) -> int:
        """Travel time in whole minutes; raises ProviderError on failure."""
        ...


@dataclass
class DepartureChoice:
    """Outcome of a departure search."""

    leave_at: datetime
    base_travel_minutes: int


def adjusted_deadline(arrival_deadline: datetime, fixed_delay_minutes: int) -> datetime:
    """The time the traveler must reach the destination so buffers still fit."""
    return arrival_deadline - timedelta(minutes=fixed_delay_minutes)


def _arrives_in_time(departure: datetime, minutes: int, deadline: datetime) -> bool:
    return departure + timedelta(minutes=minutes) <= deadline


async def find_latest_departure(
    now: datetime,
    arrival_deadline: datetime,
    fixed_delay_minutes: int,
    origin: Origin,
    destination: Coordinate,
    provider: TravelDurationProvider,
    iterations: int = SEARCH_ITERATIONS,
) -> DepartureChoice:
    """Find the latest departure that still reaches the destination on time.

    Args:
        now: Current instant; the earliest possible departure.
        arrival_deadline: When the traveler must be at the airport.
        fixed_delay_minutes: Cab buffer plus weather penalty.
        origin: Trip origin, passed through to the provider.
        destination: Airport coordinate.
        provider: Duration source probed once per iteration.
        iterations: Number of bisection steps.

    Returns:
        DepartureChoice with the recommended instant and the travel minutes
        measured for it. When the adjusted deadline has already passed the
        recommendation is to leave now.

    Raises:
        ProviderError: If any duration lookup fails.
    """
    target = adjusted_deadline(arrival_deadline, fixed_delay_minutes)

    if target <= now:
        minutes = await provider.duration(now, origin, destination)
        logger.info(f"Adjusted deadline {target.isoformat()} already passed, leave now")
        return DepartureChoice(leave_at=now, base_travel_minutes=minutes)

    lo, hi = now, target
    best: DepartureChoice | None = None

    for i in range(iterations):
        mid = lo + (hi - lo) / 2
        minutes = await provider.duration(mid, origin, destination)

        if _arrives_in_time(mid, minutes, target):
            lo = mid
            best = DepartureChoice(leave_at=mid, base_travel_minutes=minutes)
        else:
            hi = mid

        logger.debug(f"Probe {i + 1}/{iterations}: depart {mid.isoformat()} takes {minutes} min")

    if best is None:
        # even the earliest probes arrive too late; leaving now is all we can do
        logger.warning("No feasible departure found in search window, falling back to now")
        minutes = await provider.duration(now, origin, destination)
        best = DepartureChoice(leave_at=now, base_travel_minutes=minutes)

    logger.info(f"Recommended departure {best.leave_at.isoformat()} ({best.base_travel_minutes} min)")
    return best


async def scan_latest_departure(
    now: datetime,
    arrival_deadline: datetime,
    fixed_delay_minutes: int,
    origin: Origin,
    destination: Coordinate,
    provider: TravelDurationProvider,
    step: timedelta = timedelta(minutes=5),
) -> DepartureChoice:
    """Sampled-grid variant of find_latest_departure.

    Probes every `step` from now up to the adjusted deadline and keeps the
    latest feasible sample. Costs one provider call per step, so it is meant
    for checking the bisection on short windows, not for serving requests.
    """
    if step <= timedelta(0):
        raise ValueError("step must be positive")

    target = adjusted_deadline(arrival_deadline, fixed_delay_minutes)
    best: DepartureChoice | None = None

    departure = now
    while departure <= target:
        minutes = await provider.duration(departure, origin, destination)
        if _arrives_in_time(departure, minutes, target):
            best = DepartureChoice(leave_at=departure, base_travel_minutes=minutes)
        departure += step

    if best is None:
        minutes = await provider.duration(now, origin, destination)
        best = DepartureChoice(leave_at=now, base_travel_minutes=minutes)
    return best
