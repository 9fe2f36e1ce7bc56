from datetime import time

import pytest

from domain import ContractConfig, ShiftEntry, ValidationError
from services import (
    calculate_hours_worked,
    compute_pay,
    format_duration,
    format_money,
    parse_hhmm,
    summarize,
    validate_config,
)


def make_entry(key: int, day: str, start: str, end: str) -> ShiftEntry:
    return ShiftEntry(key=key, date=day, start=start, end=end,
                      hours_worked=calculate_hours_worked(start, end))


def test_parse_hhmm():
    assert parse_hhmm("09:30") == time(9, 30)
    assert parse_hhmm(" 7:05 ") == time(7, 5)
    assert parse_hhmm(time(22, 0)) == time(22, 0)
    assert parse_hhmm("") is None
    assert parse_hhmm(None) is None
    assert parse_hhmm("25:00") is None
    assert parse_hhmm("abc") is None


def test_hours_same_day():
    assert calculate_hours_worked("09:00", "13:00") == 4.0
    assert calculate_hours_worked("09:00", "17:00") == 8.0
    assert calculate_hours_worked("14:00", "18:30") == 4.5


def test_hours_overnight():
    assert calculate_hours_worked("22:00", "02:00") == 4.0
    assert calculate_hours_worked("23:45", "00:15") == 0.5


def test_hours_zero_length():
    assert calculate_hours_worked("09:00", "09:00") == 0.0


def test_hours_rounded_to_two_decimals():
    assert calculate_hours_worked("09:00", "09:01") == 0.02
    assert calculate_hours_worked("09:00", "09:20") == 0.33
    assert calculate_hours_worked("09:00", "09:40") == 0.67
    assert calculate_hours_worked("09:01", "09:00") == 23.98


def test_hours_accept_time_objects():
    assert calculate_hours_worked(time(8, 0), time(14, 30)) == 6.5


@pytest.mark.parametrize("start,end", [("", "10:00"), ("09:00", None), ("9h", "10:00"), (None, None)])
def test_hours_missing_or_unparseable_is_zero(start, end):
    assert calculate_hours_worked(start, end) == 0.0


def test_hours_always_within_a_day():
    for sh in range(0, 24, 3):
        for eh in range(0, 24, 5):
            for m in (0, 17, 59):
                hours = calculate_hours_worked(f"{sh:02d}:{m:02d}", f"{eh:02d}:00")
                assert 0 <= hours <= 24


def test_pay_below_contract(default_config):
    pay = compute_pay(12.0, default_config)
    assert pay.regular_hours == 12.0
    assert pay.extra_hours == 0.0
    assert pay.regular_pay == pytest.approx(91.80)
    assert pay.extra_pay == 0.0
    assert pay.total_pay == pytest.approx(91.80)


def test_pay_above_contract(default_config):
    pay = compute_pay(45.0, default_config)
    assert pay.regular_hours == 40
    assert pay.extra_hours == 5
    assert pay.regular_pay == pytest.approx(306.00)
    assert pay.extra_pay == pytest.approx(45.00)
    assert pay.total_pay == pytest.approx(351.00)


def test_pay_zero_contract_is_all_extra():
    config = ContractConfig(contract_hours_per_month=0, hourly_rate=10, extra_hourly_rate=12)
    pay = compute_pay(7.5, config)
    assert pay.regular_hours == 0
    assert pay.extra_hours == 7.5
    assert pay.total_pay == pytest.approx(90.0)


@pytest.mark.parametrize("total", [0.0, 0.01, 12.33, 39.99, 40.0, 40.01, 123.45])
@pytest.mark.parametrize("contract", [0, 20, 40, 160.5])
def test_pay_split_adds_up(total, contract):
    config = ContractConfig(contract_hours_per_month=contract)
    pay = compute_pay(total, config)
    assert pay.regular_hours + pay.extra_hours == pytest.approx(total)
    assert pay.regular_hours <= contract
    assert pay.extra_hours >= 0


def test_summarize_example(default_config):
    entries = [
        make_entry(1, "2024-01-01", "09:00", "13:00"),
        make_entry(2, "2024-01-02", "09:00", "17:00"),
    ]
    assert [e.hours_worked for e in entries] == [4.0, 8.0]
    s = summarize(entries, default_config)
    assert s.total_hours == pytest.approx(12.0)
    assert s.regular_hours == pytest.approx(12.0)
    assert s.extra_hours == 0.0
    assert s.regular_pay == pytest.approx(91.80)
    assert s.extra_pay == 0.0
    assert s.total_pay == pytest.approx(91.80)
    assert s.unique_days_worked == 2


def test_summarize_counts_each_date_once(default_config):
    entries = [
        make_entry(1, "2024-01-01", "08:00", "12:00"),
        make_entry(2, "2024-01-01", "16:00", "20:00"),
        make_entry(3, "2024-01-03", "22:00", "02:00"),
    ]
    s = summarize(entries, default_config)
    assert s.unique_days_worked == 2
    assert s.total_hours == pytest.approx(12.0)


def test_summarize_empty(default_config):
    s = summarize([], default_config)
    assert s.total_hours == 0
    assert s.unique_days_worked == 0
    assert s.total_pay == 0


def test_format_duration():
    assert format_duration(2.5) == "2:30"
    assert format_duration(0) == "0:00"
    assert format_duration(12) == "12:00"
    assert format_duration(0.33) == "0:20"
    assert format_duration(45.25) == "45:15"


def test_format_duration_carries_rounded_minutes():
    assert format_duration(2.999) == "3:00"
    assert format_duration(0.9999) == "1:00"


def test_format_money():
    assert format_money(91.8) == "€91.80"
    assert format_money(0) == "€0.00"


def test_validate_config_rejects_negative_and_non_numbers():
    with pytest.raises(ValidationError):
        validate_config(ContractConfig(contract_hours_per_month=-1))
    with pytest.raises(ValidationError):
        validate_config(ContractConfig(hourly_rate="7.65"))
    with pytest.raises(ValidationError):
        validate_config(ContractConfig(extra_hourly_rate=True))
    assert validate_config(ContractConfig(0, 0, 0)) == ContractConfig(0, 0, 0)
