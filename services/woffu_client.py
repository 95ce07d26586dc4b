import logging
from typing import Any, Optional, Type

import httpx
from pydantic import TypeAdapter, ValidationError

from services.errors import AuthenticationError, RemoteMutationError, RemoteQueryError
from services.models import AbsenceInterval, HolidayRecord, SignEvent
from services.woffu_interface import WoffuInterface, WoffuSession

logger = logging.getLogger(__name__)

TOKEN_PATH = "/token"
HOLIDAYS_PATH = "/api/users/calendar-events/next"
REQUESTS_PATH = "/api/users/requests/list"
SIGNS_PATH = "/api/signs"
SIGN_SUBMIT_PATH = "/api/svc/signs/signs"

# 先頭ページのみ取得する
REQUESTS_PARAMS = {"pageIndex": 0, "pageSize": 10, "statusType": "null"}

_DEFAULT_TIMEOUT = 30.0


class WoffuClient(WoffuInterface):
    """Woffu REST APIで認証・打刻状態取得・打刻を行う"""

    def __init__(
        self,
        company: str,
        email: str,
        password: str,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._company = company
        self._email = email
        self._password = password
        self._timeout = timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return f"https://{self._company}.woffu.com"

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            return await client.request(method, path, **kwargs)

    async def login(self) -> WoffuSession:
        """パスワードグラントでアクセストークンを取得"""
        form = {
            "grant_type": "password",
            "username": self._email,
            "password": self._password,
        }
        try:
            response = await self._request("POST", TOKEN_PATH, data=form)
        except httpx.HTTPError as e:
            raise AuthenticationError(f"トークン取得に失敗しました: {e}") from e

        if not response.is_success:
            raise AuthenticationError(
                f"トークン取得に失敗しました: {response.status_code} {response.reason_phrase}"
            )

        try:
            body = response.json()
        except ValueError as e:
            raise AuthenticationError("トークン応答がJSONではありません") from e
        token = body.get("access_token") if isinstance(body, dict) else None
        if not isinstance(token, str):
            raise AuthenticationError("access_tokenが文字列ではありません")

        logger.info("Woffuにログインしました (%s)", self._company)
        return WoffuSession(company=self._company, token=token)

    async def _get_list(
        self,
        session: WoffuSession,
        path: str,
        model: Type,
        what: str,
        params: Optional[dict] = None,
    ) -> list:
        try:
            response = await self._request(
                "GET", path, headers=session.headers, params=params
            )
        except httpx.HTTPError as e:
            raise RemoteQueryError(f"{what}の取得に失敗しました: {e}") from e

        if not response.is_success:
            raise RemoteQueryError(
                f"{what}の取得に失敗しました: {response.status_code} {response.reason_phrase}"
            )

        try:
            data = response.json()
            return TypeAdapter(list[model]).validate_python(data)
        except (ValueError, ValidationError) as e:
            logger.error("%sの応答を解析できません: %s", what, response.text)
            raise RemoteQueryError(f"{what}の応答形式が不正です") from e

    async def fetch_holidays(self, session: WoffuSession) -> list[HolidayRecord]:
        return await self._get_list(session, HOLIDAYS_PATH, HolidayRecord, "祝日")

    async def fetch_requests(self, session: WoffuSession) -> list[AbsenceInterval]:
        return await self._get_list(
            session, REQUESTS_PATH, AbsenceInterval, "申請", params=REQUESTS_PARAMS
        )

    async def fetch_sign_events(self, session: WoffuSession) -> list[SignEvent]:
        return await self._get_list(session, SIGNS_PATH, SignEvent, "打刻履歴")

    async def submit_sign(
        self, session: WoffuSession, payload: dict[str, Any]
    ) -> Optional[dict]:
        try:
            response = await self._request(
                "POST", SIGN_SUBMIT_PATH, headers=session.headers, json=payload
            )
        except httpx.HTTPError as e:
            raise RemoteMutationError(f"打刻の送信に失敗しました: {e}") from e

        if not response.is_success:
            raise RemoteMutationError(
                f"打刻の送信に失敗しました: {response.status_code} {response.reason_phrase}"
            )

        try:
            return response.json()
        except ValueError:
            return None
