import logging

from graph.state import CheckState
from services.check_coordinator import CheckAction

logger = logging.getLogger(__name__)

LOCATION_LABELS = {
    CheckAction.CHECK_IN_HOME: "在宅",
    CheckAction.CHECK_IN_OFFICE: "出社",
}

MESSAGES = {
    "check_in": "✅ 出勤打刻しました（{location}・{today}）",
    "check_out": "🕐 退勤打刻しました（{today}）",
    "already_signed_in": "ℹ️ 既に出勤済みのため打刻しませんでした（{today}）",
    "already_signed_out": "ℹ️ 既に退勤済みのため打刻しませんでした（{today}）",
    "day_off": "🏖️ 本日は休日のため出勤打刻しません（{reason}・{today}）",
}


def build_message(state: CheckState) -> str:
    action = state["action_taken"]
    kind = state["check_kind"]
    today = state["today"]

    if action == "day_off":
        return MESSAGES["day_off"].format(reason=state["day_off_reason"], today=today)
    if action == "check_in":
        return MESSAGES["check_in"].format(
            location=LOCATION_LABELS[kind.action], today=today
        )
    if action == "check_out":
        return MESSAGES["check_out"].format(today=today)
    if kind.is_check_in:
        return MESSAGES["already_signed_in"].format(today=today)
    return MESSAGES["already_signed_out"].format(today=today)


def notify_node(state: CheckState, notifier=None) -> dict:
    """打刻結果（スキップ含む）を通知するノード。通知失敗は処理結果に影響しない。"""
    msg = build_message(state)
    if not notifier.send(msg):
        logger.warning("通知を送信できませんでした: %s", msg)
    return {}
