import asyncio
import logging
from datetime import date
from typing import Optional

from services.day_off import day_off_reason
from services.woffu_interface import WoffuInterface, WoffuSession

logger = logging.getLogger(__name__)


class WoffuCalendarService:
    """Woffuの祝日・休暇申請による休日判定サービス"""

    def __init__(self, client: WoffuInterface):
        self._client = client

    async def is_holiday(
        self, session: WoffuSession, target_date: Optional[date] = None
    ) -> tuple[bool, str]:
        """指定日が休日かどうかを判定する（祝日と申請は並行取得）"""
        if target_date is None:
            target_date = date.today()

        # 土日は取得不要
        weekend = day_off_reason(target_date, [], [])
        if weekend is not None:
            return (True, weekend)

        holidays, requests = await asyncio.gather(
            self._client.fetch_holidays(session),
            self._client.fetch_requests(session),
        )
        logger.debug("祝日%d件・申請%d件を取得", len(holidays), len(requests))

        reason = day_off_reason(target_date, holidays, requests)
        if reason is None:
            return (False, "")
        return (True, reason)
