import datetime as dt
from dataclasses import dataclass
from typing import Annotated, Optional, Sequence

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def parse_woffu_date(value):
    """Woffuの日時文字列(2025-09-15T00:00:00.000)を日付部分だけに切り詰める

    時刻はローカル時刻の解釈を避けるため捨てる。
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, str):
        return dt.date.fromisoformat(value.split("T")[0])
    return value


WoffuDate = Annotated[dt.date, BeforeValidator(parse_woffu_date)]


class _WoffuModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class HolidayRecord(_WoffuModel):
    date: WoffuDate = Field(alias="Date")
    name: str = Field(default="", alias="Name")


class AbsenceInterval(_WoffuModel):
    start_date: WoffuDate = Field(alias="StartDate")
    end_date: WoffuDate = Field(alias="EndDate")
    is_full_day: bool = Field(alias="IsFullDay")
    is_presence: bool = Field(alias="IsPresence")


class SignEvent(_WoffuModel):
    sign_in: bool = Field(alias="SignIn")
    date: Optional[dt.datetime] = Field(default=None, alias="Date")


@dataclass(frozen=True)
class SignState:
    is_signed_in: bool

    @classmethod
    def from_events(cls, events: Sequence[SignEvent]) -> "SignState":
        """時系列順の打刻履歴の最後の1件から状態を求める（履歴なし＝未出勤）"""
        if not events:
            return cls(is_signed_in=False)
        return cls(is_signed_in=events[-1].sign_in)
