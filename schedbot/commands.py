from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from schedbot import dateutils
from schedbot.config import Settings
from schedbot.domain import Appointment, AppointmentType
from schedbot.schedule import Schedule
from schedbot.telegram_notifier import broadcast

logger = logging.getLogger(__name__)


class Command(Enum):
    LIST = "Usage: LIST"
    SCHEDULE = "Usage: SCHEDULE type date time"
    CANCEL = "Usage: CANCEL type date time"
    EXIT = "Usage: EXIT"

    @property
    def usage(self) -> str:
        return self.value


class Message(str, Enum):
    CANCEL_ERROR = "Could not cancel appointment"
    EMPTY_SCHEDULE = "No appointments scheduled"
    IO_ERROR = "There was an error processing your request"
    PARSE_DATE_ERROR = "Unable to parse date"
    SCHEDULE_CONFLICT = "Schedule conflict"
    UNRECOGNIZED_APPOINTMENT = "Unrecognized appointment"
    UNRECOGNIZED_COMMAND = "Unrecognized command"


@dataclass(frozen=True)
class Result:
    message: str | None = None
    keep_going: bool = True


def format_appointments(appointments: Iterable[Appointment]) -> str:
    return "\n".join(str(a) for a in appointments)


class CommandInterpreter:
    """Turns one console line into one Schedule operation."""

    def __init__(self, schedule: Schedule, settings: Settings | None = None) -> None:
        self.schedule = schedule
        self.settings = settings or Settings()

    def execute(self, line: str) -> Result:
        tokens = line.upper().split()
        if not tokens:
            return Result()

        try:
            command = Command[tokens[0]]
        except KeyError:
            return Result(Message.UNRECOGNIZED_COMMAND.value)

        if command is Command.LIST:
            return Result(self._list(tokens))
        if command is Command.SCHEDULE:
            return Result(self._schedule(tokens))
        if command is Command.CANCEL:
            return Result(self._cancel(tokens))

        if len(tokens) != 1:
            return Result(Command.EXIT.usage)
        return Result(keep_going=False)

    def _list(self, tokens: list[str]) -> str:
        if len(tokens) != 1:
            return Command.LIST.usage
        appointments = self.schedule.list_upcoming_appointments()
        if not appointments:
            return Message.EMPTY_SCHEDULE.value
        return format_appointments(appointments)

    def _schedule(self, tokens: list[str]) -> str | None:
        if len(tokens) < 3:
            return Command.SCHEDULE.usage
        appointment = _parse_appointment(tokens)
        if isinstance(appointment, Message):
            return appointment.value

        if not self.schedule.schedule_appointment(appointment):
            conflicts = self.schedule.list_conflicting_appointments(appointment)
            return f"{Message.SCHEDULE_CONFLICT.value}\n{format_appointments(conflicts)}"

        self._notify(f"Appointment scheduled: {appointment}")
        return None

    def _cancel(self, tokens: list[str]) -> str | None:
        if len(tokens) < 3:
            return Command.CANCEL.usage
        appointment = _parse_appointment(tokens)
        if isinstance(appointment, Message):
            return appointment.value

        if not self.schedule.cancel_appointment(appointment):
            return Message.CANCEL_ERROR.value

        self._notify(f"Appointment cancelled: {appointment}")
        return None

    def _notify(self, text: str) -> None:
        # Best-effort: the schedule has already changed.
        try:
            broadcast(self.settings, text)
        except Exception:
            logger.warning("Failed to send schedule notification", exc_info=True)


def _parse_appointment(tokens: list[str]) -> Appointment | Message:
    try:
        appointment_type = AppointmentType.from_token(tokens[1])
    except ValueError:
        return Message.UNRECOGNIZED_APPOINTMENT

    try:
        start = dateutils.parse(" ".join(tokens[2:]))
    except ValueError:
        return Message.PARSE_DATE_ERROR

    return Appointment(appointment_type, start)
