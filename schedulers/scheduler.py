# schedulers/scheduler.py
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from datetime import date, datetime, timezone as dt_timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from services.check_coordinator import CheckAction
from services.errors import ConfigurationError

WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

# 曜日(月=0) → 出勤種別。土日は休日判定でスキップされる。
DEFAULT_CHECK_IN_LOCATIONS = {
    0: CheckAction.CHECK_IN_OFFICE,
    1: CheckAction.CHECK_IN_HOME,
    2: CheckAction.CHECK_IN_OFFICE,
    3: CheckAction.CHECK_IN_HOME,
    4: CheckAction.CHECK_IN_HOME,
    5: CheckAction.CHECK_IN_HOME,
    6: CheckAction.CHECK_IN_HOME,
}

_LOCATION_ACTIONS = {
    "home": CheckAction.CHECK_IN_HOME,
    "office": CheckAction.CHECK_IN_OFFICE,
}


def build_check_in_table(overrides: Optional[dict] = None) -> dict[int, CheckAction]:
    """設定の {曜日名: home/office} でデフォルト表を上書きする"""
    table = dict(DEFAULT_CHECK_IN_LOCATIONS)
    for day_name, location in (overrides or {}).items():
        key = str(day_name).lower()
        if key not in WEEKDAY_NAMES:
            raise ConfigurationError(f"不明な曜日です: {day_name}")
        if location not in _LOCATION_ACTIONS:
            raise ConfigurationError(f"不明な勤務地です: {location}")
        table[WEEKDAY_NAMES.index(key)] = _LOCATION_ACTIONS[location]
    return table


def check_in_action_for(weekday: int, table: Optional[dict[int, CheckAction]] = None) -> CheckAction:
    """曜日(月=0)から出勤種別を決める"""
    if table is None:
        table = DEFAULT_CHECK_IN_LOCATIONS
    return table[weekday]


def today_in(timezone: Optional[str] = None, now: Optional[datetime] = None) -> date:
    """スケジューラのタイムゾーンでの今日の日付（未指定ならホストのローカル日付）"""
    if now is None:
        now = datetime.now(dt_timezone.utc)
    if not timezone:
        return now.astimezone().date()
    try:
        return now.astimezone(ZoneInfo(timezone)).date()
    except (ValueError, ZoneInfoNotFoundError) as e:
        raise ConfigurationError(f"不明なタイムゾーンです: {timezone}") from e


class AttendanceScheduler:
    """APSchedulerによる出勤・退勤の定期実行管理"""

    def __init__(
        self,
        check_in_cron: str,
        check_out_cron: str,
        check_in_job: Callable,
        check_out_job: Callable,
        timezone: Optional[str] = None,
    ):
        try:
            self._check_in_trigger = CronTrigger.from_crontab(check_in_cron, timezone=timezone)
            self._check_out_trigger = CronTrigger.from_crontab(check_out_cron, timezone=timezone)
        except (ValueError, KeyError) as e:
            raise ConfigurationError(f"cron式が不正です: {e}") from e

        self._scheduler = BackgroundScheduler(timezone=timezone) if timezone else BackgroundScheduler()
        self._scheduler.add_job(
            check_in_job,
            trigger=self._check_in_trigger,
            id="check_in",
            replace_existing=True,
        )
        self._scheduler.add_job(
            check_out_job,
            trigger=self._check_out_trigger,
            id="check_out",
            replace_existing=True,
        )

    def start(self):
        """スケジューラ開始"""
        self._scheduler.start()

    def stop(self):
        """スケジューラ停止"""
        self._scheduler.shutdown(wait=False)
