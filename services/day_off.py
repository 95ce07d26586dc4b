"""休日判定（土日・会社カレンダーの祝日・休暇申請）"""
import datetime as dt
from typing import Iterable, Optional, Union

from services.models import AbsenceInterval, HolidayRecord

DateLike = Union[dt.date, dt.datetime]

WEEKEND_NAMES = {5: "土曜日", 6: "日曜日"}
ABSENCE_REASON = "休暇申請"


def _as_date(value: DateLike) -> dt.date:
    # datetimeはdateのサブクラスなので先に判定する
    if isinstance(value, dt.datetime):
        return value.date()
    return value


def is_same_day(a: DateLike, b: DateLike) -> bool:
    """時刻を無視して年・月・日だけで比較する"""
    a, b = _as_date(a), _as_date(b)
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def day_off_reason(
    target: DateLike,
    holidays: Iterable[HolidayRecord],
    absences: Iterable[AbsenceInterval],
) -> Optional[str]:
    """休日ならその理由、出勤日ならNoneを返す

    判定順は土日 → 祝日 → 休暇申請。IsPresence=Trueの申請は休日扱いしない。
    """
    day = _as_date(target)

    if day.weekday() in WEEKEND_NAMES:
        return WEEKEND_NAMES[day.weekday()]

    for holiday in holidays:
        if is_same_day(holiday.date, day):
            return holiday.name or "祝日"

    for absence in absences:
        if absence.is_presence:
            continue
        if _as_date(absence.start_date) <= day <= _as_date(absence.end_date):
            return ABSENCE_REASON

    return None


def is_day_off(
    target: DateLike,
    holidays: Iterable[HolidayRecord],
    absences: Iterable[AbsenceInterval],
) -> bool:
    return day_off_reason(target, holidays, absences) is not None
