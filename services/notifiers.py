import logging
import sys
from typing import Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

ERROR_TEMPLATE = "❌ 打刻に失敗しました。手動確認をお願いします（エラー: {error}）"


@runtime_checkable
class Notifier(Protocol):
    """通知先の共通インターフェース。失敗時は例外ではなくFalseを返す。"""

    def send(self, message: str) -> bool: ...

    def send_error(self, error: str) -> bool: ...


class ConsoleNotifier:
    """コンソール出力による通知（フォールバック用）"""

    def send(self, message: str) -> bool:
        print(f"[勤怠通知] {message}", file=sys.stdout)
        return True

    def send_error(self, error: str) -> bool:
        print(f"[勤怠エラー] {error}", file=sys.stderr)
        return True


class SlackNotifier:
    """Slack APIによる通知サービス"""

    def __init__(self, token: str, channel: str):
        self._channel = channel
        self._client = None
        self._fallback = ConsoleNotifier()

        if token:
            from slack_sdk import WebClient
            self._client = WebClient(token=token)

    def send(self, message: str) -> bool:
        """メッセージ送信（失敗しても例外は投げない）"""
        if self._client is None:
            return self._fallback.send(message)

        try:
            self._client.chat_postMessage(channel=self._channel, text=message)
            return True
        except Exception as e:
            logger.warning("Slack通知に失敗しました: %s", e)
            return False

    def send_error(self, error: str) -> bool:
        """エラー通知"""
        return self.send(ERROR_TEMPLATE.format(error=error))


class DiscordNotifier:
    """Discord Webhookによる通知サービス"""

    def __init__(self, webhook_url: str, timeout: float = 10.0, transport=None):
        self._webhook_url = webhook_url
        self._timeout = timeout
        self._transport = transport
        self._fallback = ConsoleNotifier()

    def send(self, message: str) -> bool:
        """メッセージ送信（失敗しても例外は投げない）"""
        if not self._webhook_url:
            return self._fallback.send(message)

        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(self._webhook_url, json={"content": message})
            response.raise_for_status()
            return True
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Discord通知に失敗しました: %s", e)
            return False

    def send_error(self, error: str) -> bool:
        return self.send(ERROR_TEMPLATE.format(error=error))
