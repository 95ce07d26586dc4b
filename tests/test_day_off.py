# tests/test_day_off.py
from datetime import date, datetime, timedelta

import pytest

from services.day_off import day_off_reason, is_day_off, is_same_day
from services.models import AbsenceInterval, HolidayRecord

HOLIDAYS = [
    HolidayRecord(date=date(2025, 12, 25), name="Navidad"),
    HolidayRecord(date=date(2025, 1, 1), name="Año Nuevo"),
]
ABSENCES = [
    AbsenceInterval(
        start_date=date(2025, 9, 20),
        end_date=date(2025, 9, 22),
        is_full_day=True,
        is_presence=False,
    ),
]


def _absence(start, end, is_presence=False):
    return AbsenceInterval(
        start_date=start, end_date=end, is_full_day=True, is_presence=is_presence
    )


@pytest.mark.parametrize("d", [date(2025, 9, 20), date(2025, 9, 27), date(2026, 2, 21)])
def test_saturday_is_day_off(d):
    """土曜日は休日判定されること"""
    assert is_day_off(d, [], []) is True
    assert day_off_reason(d, [], []) == "土曜日"


@pytest.mark.parametrize("d", [date(2025, 9, 21), date(2025, 9, 28), date(2026, 2, 22)])
def test_sunday_is_day_off(d):
    """日曜日は休日判定されること"""
    assert is_day_off(d, [], []) is True
    assert day_off_reason(d, [], []) == "日曜日"


def test_weekday_without_data_is_workday():
    """平日で祝日・申請がなければ出勤日であること"""
    assert is_day_off(date(2025, 9, 23), [], []) is False
    assert day_off_reason(date(2025, 9, 23), [], []) is None


def test_holiday_on_weekday():
    """平日でも祝日なら休日判定されること"""
    assert is_day_off(date(2025, 12, 25), HOLIDAYS, []) is True
    assert day_off_reason(date(2025, 12, 25), HOLIDAYS, []) == "Navidad"


def test_holiday_ignores_time_of_day():
    """時刻付きの日付でも同じ日なら祝日として扱うこと"""
    target = datetime(2025, 12, 25, 23, 59)
    assert is_day_off(target, HOLIDAYS, []) is True


def test_holiday_without_name():
    """名前のない祝日は汎用の理由になること"""
    holidays = [HolidayRecord(date=date(2025, 10, 13))]
    assert day_off_reason(date(2025, 10, 13), holidays, []) == "祝日"


def test_inside_absence_interval():
    """休暇申請の期間内は休日判定されること"""
    absences = [_absence(date(2025, 10, 6), date(2025, 10, 10))]
    assert is_day_off(date(2025, 10, 8), [], absences) is True
    assert day_off_reason(date(2025, 10, 8), [], absences) == "休暇申請"


def test_presence_interval_is_not_day_off():
    """IsPresence=Trueの申請は休日扱いしないこと"""
    absences = [_absence(date(2025, 10, 6), date(2025, 10, 10), is_presence=True)]
    assert is_day_off(date(2025, 10, 8), [], absences) is False


def test_presence_does_not_cancel_absence():
    """出勤申請が重なっても休暇申請の判定は変わらないこと"""
    absences = [
        _absence(date(2025, 10, 6), date(2025, 10, 10)),
        _absence(date(2025, 10, 8), date(2025, 10, 8), is_presence=True),
    ]
    assert is_day_off(date(2025, 10, 8), [], absences) is True


def test_interval_bounds_are_inclusive():
    """期間の開始日・終了日を含み、その前後は含まないこと"""
    absences = [_absence(date(2025, 10, 7), date(2025, 10, 9))]
    assert is_day_off(date(2025, 10, 7), [], absences) is True
    assert is_day_off(date(2025, 10, 9), [], absences) is True
    assert is_day_off(date(2025, 10, 7) - timedelta(days=1), [], absences) is False
    assert is_day_off(date(2025, 10, 9) + timedelta(days=1), [], absences) is False


def test_single_day_interval():
    """開始日と終了日が同じ申請は1日分として扱うこと"""
    absences = [_absence(date(2025, 10, 8), date(2025, 10, 8))]
    assert is_day_off(date(2025, 10, 8), [], absences) is True
    assert is_day_off(date(2025, 10, 9), [], absences) is False


def test_interval_ignores_time_of_day():
    """時刻付きの対象日でも終了日当日は期間内であること"""
    absences = [_absence(date(2025, 10, 7), date(2025, 10, 9))]
    assert is_day_off(datetime(2025, 10, 9, 18, 30), [], absences) is True


def test_overlapping_intervals():
    """重複する申請があっても判定できること"""
    absences = [
        _absence(date(2025, 10, 6), date(2025, 10, 8)),
        _absence(date(2025, 10, 7), date(2025, 10, 9)),
    ]
    assert is_day_off(date(2025, 10, 9), [], absences) is True
    assert is_day_off(date(2025, 10, 10), [], absences) is False


@pytest.mark.parametrize(
    "target, expected",
    [
        (date(2025, 9, 21), True),   # 日曜日かつ申請期間内
        (date(2025, 9, 22), True),   # 月曜日・申請期間内
        (date(2025, 9, 23), False),  # 火曜日・期間外
        (date(2025, 12, 25), True),  # 祝日
        (date(2025, 12, 24), False),
    ],
)
def test_worked_example(target, expected):
    assert is_day_off(target, HOLIDAYS, ABSENCES) is expected


def test_worked_example_presence():
    """出勤申請だけの平日は出勤日であること"""
    absences = [_absence(date(2025, 10, 1), date(2025, 10, 1), is_presence=True)]
    assert is_day_off(date(2025, 10, 1), HOLIDAYS, absences) is False


def test_is_same_day():
    assert is_same_day(datetime(2025, 9, 15, 0, 0), datetime(2025, 9, 15, 23, 59)) is True
    assert is_same_day(date(2025, 9, 15), datetime(2025, 9, 15, 12, 0)) is True
    assert is_same_day(date(2025, 9, 15), date(2025, 9, 16)) is False
    assert is_same_day(date(2024, 9, 15), date(2025, 9, 15)) is False
