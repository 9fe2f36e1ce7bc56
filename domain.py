# domain.py
from __future__ import annotations
from dataclasses import dataclass


DEFAULT_CONTRACT_HOURS = 40.0
DEFAULT_HOURLY_RATE = 7.65
DEFAULT_EXTRA_HOURLY_RATE = 9.0


class TrackerError(Exception):
    """Base class for work hours tracker errors."""


class ValidationError(TrackerError):
    """A required field is missing or a value is out of range."""


class NotFoundError(TrackerError):
    """No shift entry exists for the given key."""

    def __init__(self, key):
        super().__init__(f"No existe ninguna entrada con clave {key!r}")
        self.key = key


@dataclass
class ShiftEntry:
    """Represents a single recorded work period."""
    key: int
    date: str
    start: str
    end: str
    hours_worked: float = 0.0

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "date": self.date,
            "start": self.start,
            "end": self.end,
            "hoursWorked": self.hours_worked,
        }


@dataclass(frozen=True)
class ContractConfig:
    """Monthly contract threshold and the two hourly rates."""
    contract_hours_per_month: float = DEFAULT_CONTRACT_HOURS
    hourly_rate: float = DEFAULT_HOURLY_RATE
    extra_hourly_rate: float = DEFAULT_EXTRA_HOURLY_RATE

    def to_dict(self) -> dict:
        return {
            "contractHoursPerMonth": self.contract_hours_per_month,
            "hourlyRate": self.hourly_rate,
            "extraHourlyRate": self.extra_hourly_rate,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ContractConfig:
        return cls(
            contract_hours_per_month=data["contractHoursPerMonth"],
            hourly_rate=data["hourlyRate"],
            extra_hourly_rate=data["extraHourlyRate"],
        )


@dataclass(frozen=True)
class PayBreakdown:
    regular_hours: float
    extra_hours: float
    regular_pay: float
    extra_pay: float
    total_pay: float


@dataclass(frozen=True)
class Summary:
    """Reporting snapshot derived from the entries and the contract."""
    total_hours: float
    regular_hours: float
    extra_hours: float
    unique_days_worked: int
    regular_pay: float
    extra_pay: float
    total_pay: float


@dataclass
class EditDraft:
    """Form values of the entry currently being edited."""
    key: int
    date: str
    start: str
    end: str
