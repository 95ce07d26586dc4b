from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from services.models import AbsenceInterval, HolidayRecord, SignEvent


@dataclass(frozen=True)
class WoffuSession:
    """ログイン済みセッション（Bearerトークンを保持）"""

    company: str
    token: str = field(repr=False)

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class WoffuInterface(ABC):
    """Woffu APIクライアントの抽象インターフェース"""

    @abstractmethod
    async def login(self) -> WoffuSession:
        """認証してセッションを取得"""
        ...

    @abstractmethod
    async def fetch_holidays(self, session: WoffuSession) -> list[HolidayRecord]:
        """会社カレンダーの祝日一覧"""
        ...

    @abstractmethod
    async def fetch_requests(self, session: WoffuSession) -> list[AbsenceInterval]:
        """休暇・出勤申請の一覧（先頭ページのみ）"""
        ...

    @abstractmethod
    async def fetch_sign_events(self, session: WoffuSession) -> list[SignEvent]:
        """時系列順の打刻履歴"""
        ...

    @abstractmethod
    async def submit_sign(
        self, session: WoffuSession, payload: dict[str, Any]
    ) -> Optional[dict]:
        """打刻を送信"""
        ...
