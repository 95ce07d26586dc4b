import logging
from datetime import datetime
from typing import Any, Optional

from services.models import AbsenceInterval, HolidayRecord, SignEvent
from services.woffu_interface import WoffuInterface, WoffuSession

logger = logging.getLogger(__name__)


class DummyWoffuClient(WoffuInterface):
    """ダミークライアント（メモリ上で打刻履歴を保持し、ログ出力のみ）。--dry-run用。"""

    def __init__(
        self,
        holidays: Optional[list[HolidayRecord]] = None,
        requests: Optional[list[AbsenceInterval]] = None,
        signed_in: bool = False,
    ):
        self.holidays = list(holidays or [])
        self.requests = list(requests or [])
        self.sign_events: list[SignEvent] = []
        self.submitted: list[dict[str, Any]] = []
        if signed_in:
            self.sign_events.append(SignEvent(sign_in=True, date=datetime.now()))

    async def login(self) -> WoffuSession:
        return WoffuSession(company="dummy", token="dummy-token")

    async def fetch_holidays(self, session: WoffuSession) -> list[HolidayRecord]:
        return list(self.holidays)

    async def fetch_requests(self, session: WoffuSession) -> list[AbsenceInterval]:
        return list(self.requests)

    async def fetch_sign_events(self, session: WoffuSession) -> list[SignEvent]:
        return list(self.sign_events)

    async def submit_sign(
        self, session: WoffuSession, payload: dict[str, Any]
    ) -> Optional[dict]:
        # 打刻のたびに出勤/退勤が反転する
        signed_in = not (self.sign_events and self.sign_events[-1].sign_in)
        self.sign_events.append(SignEvent(sign_in=signed_in, date=datetime.now()))
        self.submitted.append(payload)
        logger.info("[DummyWoffuClient] 打刻（シミュレーション）: %s", payload)
        return None
