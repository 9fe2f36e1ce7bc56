# services.py
from __future__ import annotations
from datetime import datetime, date, time, timedelta
from typing import Iterable

from domain import ContractConfig, PayBreakdown, ShiftEntry, Summary, ValidationError


def parse_hhmm(value) -> time | None:
    """Accepts a ``time`` or an ``HH:MM`` string. Returns None when unusable."""
    if isinstance(value, time):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        hh, mm = value.strip().split(":")[:2]
        return time(int(hh), int(mm))
    except ValueError:
        return None


def entry_fields(day, start, end) -> tuple[str, str, str]:
    """
    Checks the three required entry fields and returns them as
    (``YYYY-MM-DD``, ``HH:MM``, ``HH:MM``) strings.
    """
    if not day or not start or not end:
        raise ValidationError("Todos los campos son obligatorios")
    if isinstance(day, date):
        day = day.isoformat()
    if isinstance(start, time):
        start = start.strftime("%H:%M")
    if isinstance(end, time):
        end = end.strftime("%H:%M")
    return str(day), str(start), str(end)


def calculate_hours_worked(start, end) -> float:
    """Returns worked hours (2 decimals). Supports overnight shifts.

    Missing or unparseable times count as 0 hours; an end earlier than the
    start means the shift passed midnight.
    """
    t_start = parse_hhmm(start)
    t_end = parse_hhmm(end)
    if t_start is None or t_end is None:
        return 0.0
    today = date.today()
    t0 = datetime.combine(today, t_start.replace(second=0, microsecond=0))
    t1 = datetime.combine(today, t_end.replace(second=0, microsecond=0))
    if t1 < t0:
        t1 += timedelta(days=1)  # passed midnight
    minutes = int((t1 - t0).total_seconds()) // 60
    return round(minutes / 60.0, 2)


def validate_config(config: ContractConfig) -> ContractConfig:
    """Raises ValidationError unless every contract field is a non-negative number."""
    for name, value in (
        ("horas contratadas", config.contract_hours_per_month),
        ("tarifa hora normal", config.hourly_rate),
        ("tarifa hora extra", config.extra_hourly_rate),
    ):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"El campo '{name}' debe ser un número")
        if value < 0:
            raise ValidationError(f"El campo '{name}' no puede ser negativo")
    return config


def compute_pay(total_hours: float, config: ContractConfig) -> PayBreakdown:
    """Splits hours at the monthly contract threshold and prices each part."""
    contract = config.contract_hours_per_month
    regular_hours = min(total_hours, contract)
    extra_hours = max(0.0, total_hours - contract)
    regular_pay = regular_hours * config.hourly_rate
    extra_pay = extra_hours * config.extra_hourly_rate
    return PayBreakdown(
        regular_hours=regular_hours,
        extra_hours=extra_hours,
        regular_pay=regular_pay,
        extra_pay=extra_pay,
        total_pay=regular_pay + extra_pay,
    )


def summarize(entries: Iterable[ShiftEntry], config: ContractConfig) -> Summary:
    """
    Aggregates the entries into a reporting snapshot.
    Always a full recomputation; nothing is cached between calls.
    """
    total_hours = 0.0
    days: set[str] = set()
    for e in entries:
        total_hours += e.hours_worked
        days.add(e.date)

    pay = compute_pay(total_hours, config)
    return Summary(
        total_hours=total_hours,
        regular_hours=pay.regular_hours,
        extra_hours=pay.extra_hours,
        unique_days_worked=len(days),
        regular_pay=pay.regular_pay,
        extra_pay=pay.extra_pay,
        total_pay=pay.total_pay,
    )


def hours_to_minutes(hours: float) -> int:
    return int(round(float(hours) * 60))


def format_duration(hours: float) -> str:
    """Decimal hours as ``H:MM``. Rounded minutes carry into the hour (2.999 -> 3:00)."""
    h, m = divmod(max(0, hours_to_minutes(hours)), 60)
    return f"{h}:{m:02d}"


def format_money(amount: float, symbol: str = "€") -> str:
    return f"{symbol}{amount:.2f}"
