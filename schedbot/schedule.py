from __future__ import annotations

import bisect
import datetime as dt
import logging
import threading
from typing import Callable, Iterator

from schedbot import filters
from schedbot.domain import Appointment, InvalidArgument

logger = logging.getLogger(__name__)

Clock = Callable[[], dt.datetime]

_NULL_APPOINTMENT = "Parameter 'appointment' cannot be None"


def _require_appointment(appointment: Appointment | None) -> Appointment:
    if appointment is None:
        raise InvalidArgument(_NULL_APPOINTMENT)
    if not isinstance(appointment, Appointment):
        raise InvalidArgument(f"Parameter 'appointment' must be an Appointment, got {type(appointment).__name__}")
    return appointment


class Schedule:
    """In-memory appointment book ordered by start time.

    Stored appointments never overlap. The store is keyed on start time only,
    so removal checks full (type, start) equality explicitly.
    """

    def __init__(self, *, clock: Clock = dt.datetime.now) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        # Parallel sorted lists: _starts[i] == _appointments[i].start
        self._starts: list[dt.datetime] = []
        self._appointments: list[Appointment] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._appointments)

    def __iter__(self) -> Iterator[Appointment]:
        with self._lock:
            snapshot = list(self._appointments)
        return iter(snapshot)

    def __contains__(self, appointment: object) -> bool:
        if not isinstance(appointment, Appointment):
            return False
        with self._lock:
            floor = self._floor_index(appointment.start)
            return floor is not None and self._appointments[floor] == appointment

    def list_all_appointments(self) -> list[Appointment]:
        return self._list(filters.accept_all())

    def list_upcoming_appointments(self) -> list[Appointment]:
        now = self._clock()
        return self._list(filters.not_(filters.elapsed_before(now)))

    def list_conflicting_appointments(self, appointment: Appointment | None) -> list[Appointment]:
        candidate = _require_appointment(appointment)
        return self._list(filters.conflicts_with(candidate))

    def schedule_appointment(self, appointment: Appointment | None) -> bool:
        candidate = _require_appointment(appointment)

        with self._lock:
            # Neighbours are the only entries that can overlap the candidate,
            # since stored appointments are sorted and mutually disjoint.
            floor = self._floor_index(candidate.start)
            if floor is not None and candidate.conflicts_with(self._appointments[floor]):
                logger.info("Rejected %s: conflicts with %s", candidate, self._appointments[floor])
                return False

            higher = floor + 1 if floor is not None else 0
            if higher < len(self._appointments) and candidate.conflicts_with(self._appointments[higher]):
                logger.info("Rejected %s: conflicts with %s", candidate, self._appointments[higher])
                return False

            self._starts.insert(higher, candidate.start)
            self._appointments.insert(higher, candidate)

        logger.info("Scheduled %s", candidate)
        return True

    def cancel_appointment(self, appointment: Appointment | None) -> bool:
        candidate = _require_appointment(appointment)

        with self._lock:
            floor = self._floor_index(candidate.start)
            if floor is None or self._starts[floor] != candidate.start:
                logger.debug("Cancel miss: nothing starts at %s", candidate.start)
                return False
            if self._appointments[floor] != candidate:
                logger.debug("Cancel miss: %s holds the slot, not %s", self._appointments[floor], candidate)
                return False

            del self._starts[floor]
            del self._appointments[floor]

        logger.info("Cancelled %s", candidate)
        return True

    def _floor_index(self, start: dt.datetime) -> int | None:
        # Greatest stored start <= start.
        i = bisect.bisect_right(self._starts, start) - 1
        return i if i >= 0 else None

    def _list(self, accept: filters.Filter) -> list[Appointment]:
        with self._lock:
            return [a for a in self._appointments if accept(a)]
