from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from ..core.enums import AttendanceStatus, ClockAction


class ClockState(str, Enum):
    """Where an employee stands for the current day."""

    NO_RECORD = "no_record"
    CLOCKED_IN = "clocked_in"
    CLOCKED_OUT = "clocked_out"


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per employee per day."""

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[str] = None  # HH:MM
    check_out_time: Optional[str] = None  # HH:MM

    @property
    def state(self) -> ClockState:
        if self.check_out_time:
            return ClockState.CLOCKED_OUT
        return ClockState.CLOCKED_IN


def state_of(record: Optional[AttendanceRecord]) -> ClockState:
    return record.state if record else ClockState.NO_RECORD


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class ClockResult:
    record: AttendanceRecord
    action: ClockAction
    # True only for the first clock-in of the day.
    celebrate: bool = False


@dataclass(frozen=True)
class ClockButton:
    label: str
    disabled: bool
    loading: bool = False
