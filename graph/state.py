from typing import Any, Optional, TypedDict

from services.check_coordinator import CheckKind
from services.woffu_interface import WoffuSession


class CheckState(TypedDict):
    today: str                          # YYYY-MM-DD
    check_kind: CheckKind               # 要求された打刻種別
    session: Optional[WoffuSession]     # ログイン済みセッション
    is_day_off: bool                    # 土日・祝日・休暇フラグ
    day_off_reason: Optional[str]       # 理由
    is_signed_in: Optional[bool]        # 処理後の打刻状態
    action_taken: Optional[str]         # "check_in" / "check_out" / "skipped" / "day_off"
    message: Optional[str]              # 打刻結果の詳細
    extra: dict[str, Any]               # 任意の追加データ
