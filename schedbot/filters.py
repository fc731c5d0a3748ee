"""Composable appointment filters.

A filter is any callable taking an Appointment and returning a bool. The
schedule applies one filter per listing while walking its ordered store.
"""

from __future__ import annotations

import datetime as dt
from typing import Callable

from schedbot.domain import Appointment

Filter = Callable[[Appointment], bool]


def accept_all() -> Filter:
    def _accept(appointment: Appointment) -> bool:
        return True

    return _accept


def elapsed_before(moment: dt.datetime) -> Filter:
    """True when the appointment has ended at or before ``moment``."""

    def _accept(appointment: Appointment) -> bool:
        return appointment.end <= moment

    return _accept


def conflicts_with(candidate: Appointment) -> Filter:
    def _accept(appointment: Appointment) -> bool:
        return candidate.conflicts_with(appointment)

    return _accept


def and_(first: Filter, second: Filter) -> Filter:
    def _accept(appointment: Appointment) -> bool:
        return first(appointment) and second(appointment)

    return _accept


def or_(first: Filter, second: Filter) -> Filter:
    def _accept(appointment: Appointment) -> bool:
        return first(appointment) or second(appointment)

    return _accept


def not_(inner: Filter) -> Filter:
    def _accept(appointment: Appointment) -> bool:
        return not inner(appointment)

    return _accept
