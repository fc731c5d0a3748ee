from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum

from schedbot import dateutils


class InvalidArgument(ValueError):
    """A required appointment argument is missing or has the wrong type."""


class AppointmentType(Enum):
    """Appointment kinds and their fixed durations in minutes."""

    HAIRCUT = 30
    SHAMPOO = 60

    @property
    def duration_minutes(self) -> int:
        return self.value

    @property
    def duration(self) -> dt.timedelta:
        return dt.timedelta(minutes=self.value)

    @classmethod
    def from_token(cls, token: str) -> AppointmentType:
        try:
            return cls[token.strip().upper()]
        except KeyError as e:
            raise ValueError(f"Unknown appointment type: {token!r}") from e


@dataclass(frozen=True)
class Appointment:
    """A single booked appointment.

    Equality is (type, start). The end time is derived from the type's
    duration once, at construction.
    """

    type: AppointmentType
    start: dt.datetime
    end: dt.datetime = field(init=False, compare=False)

    def __post_init__(self) -> None:
        if self.type is None:
            raise InvalidArgument("Parameter 'type' cannot be None")
        if self.start is None:
            raise InvalidArgument("Parameter 'start' cannot be None")
        if not isinstance(self.type, AppointmentType):
            raise InvalidArgument(f"Parameter 'type' must be an AppointmentType, got {type(self.type).__name__}")
        if not isinstance(self.start, dt.datetime):
            raise InvalidArgument(f"Parameter 'start' must be a datetime, got {type(self.start).__name__}")
        if self.start.tzinfo is not None:
            raise InvalidArgument("Parameter 'start' must be a naive local datetime")
        object.__setattr__(self, "end", self.start + self.type.duration)

    def conflicts_with(self, other: Appointment) -> bool:
        # Half-open intervals [start, end); equal starts always overlap.
        if self.start > other.start:
            return self.start < other.end
        return self.end > other.start

    def __str__(self) -> str:
        return f"{self.type.name} {dateutils.format(self.start)} - {dateutils.format(self.end)}"
