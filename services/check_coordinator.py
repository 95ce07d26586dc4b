"""打刻状態を確認してから出勤・退勤を送信する（重複打刻防止）"""
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from services.models import SignState
from services.woffu_interface import WoffuInterface, WoffuSession

logger = logging.getLogger(__name__)

# Woffu側には固定値を送る
DEVICE_ID = "WebApp"
REQUEST_ID = None
LATITUDE = None
LONGITUDE = None


class CheckAction(str, Enum):
    CHECK_IN_HOME = "check_in_home"
    CHECK_IN_OFFICE = "check_in_office"
    CHECK_OUT = "check_out"

    @property
    def is_check_in(self) -> bool:
        return self is not CheckAction.CHECK_OUT


@dataclass(frozen=True)
class CheckKind:
    """打刻種別。出勤は勤務地ごとのagreement IDを持ち、退勤は持たない。"""

    action: CheckAction
    agreement_event_id: Optional[int] = None

    def __post_init__(self):
        if self.action.is_check_in and self.agreement_event_id is None:
            raise ValueError(f"{self.action.value}にはagreement IDが必要です")
        if not self.action.is_check_in and self.agreement_event_id is not None:
            raise ValueError("退勤にagreement IDは指定できません")

    @classmethod
    def check_in_home(cls, agreement_event_id: int) -> "CheckKind":
        return cls(CheckAction.CHECK_IN_HOME, agreement_event_id)

    @classmethod
    def check_in_office(cls, agreement_event_id: int) -> "CheckKind":
        return cls(CheckAction.CHECK_IN_OFFICE, agreement_event_id)

    @classmethod
    def check_out(cls) -> "CheckKind":
        return cls(CheckAction.CHECK_OUT)

    @property
    def is_check_in(self) -> bool:
        return self.action.is_check_in


@dataclass
class CheckResult:
    performed: bool
    is_signed_in: bool
    message: str


def timezone_offset_minutes(now: Optional[datetime] = None) -> int:
    """ブラウザと同じ符号のタイムゾーンオフセット（UTC+2 → -120）"""
    if now is None:
        now = datetime.now()
    if now.tzinfo is None:
        now = now.astimezone()
    return -int(now.utcoffset().total_seconds() // 60)


def build_sign_payload(kind: CheckKind, now: Optional[datetime] = None) -> dict[str, Any]:
    return {
        "agreementEventId": kind.agreement_event_id,
        "requestId": REQUEST_ID,
        "deviceId": DEVICE_ID,
        "latitude": LATITUDE,
        "longitude": LONGITUDE,
        "timezoneOffset": timezone_offset_minutes(now),
    }


class CheckCoordinator:
    """Woffuの打刻履歴を唯一の正とし、必要なときだけ打刻する

    ローカルに状態は持たない。毎回送信直前に最新の打刻を問い合わせる。
    """

    def __init__(self, client: WoffuInterface):
        self._client = client

    async def current_state(self, session: WoffuSession) -> SignState:
        events = await self._client.fetch_sign_events(session)
        return SignState.from_events(events)

    async def perform(self, session: WoffuSession, kind: CheckKind) -> CheckResult:
        state = await self.current_state(session)

        if kind.is_check_in and state.is_signed_in:
            logger.info("出勤済みのためスキップします (%s)", kind.action.value)
            return CheckResult(performed=False, is_signed_in=True, message="already signed in")

        if not kind.is_check_in and not state.is_signed_in:
            logger.info("退勤済みのためスキップします")
            return CheckResult(performed=False, is_signed_in=False, message="already signed out")

        payload = build_sign_payload(kind)
        await self._client.submit_sign(session, payload)
        logger.info("打刻しました (%s)", kind.action.value)

        if kind.is_check_in:
            return CheckResult(performed=True, is_signed_in=True, message="signed in")
        return CheckResult(performed=True, is_signed_in=False, message="signed out")
