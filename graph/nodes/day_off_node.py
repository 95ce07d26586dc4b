# graph/nodes/day_off_node.py
from datetime import date
from graph.state import CheckState


async def day_off_node(
    state: CheckState,
    calendar_service=None,
) -> dict:
    """今日が出勤対象日かをWoffuのカレンダーで確認するノード"""
    today = date.fromisoformat(state["today"])
    is_day_off, reason = await calendar_service.is_holiday(state["session"], today)

    if is_day_off:
        return {
            "is_day_off": True,
            "day_off_reason": reason,
            "action_taken": "day_off",
        }
    return {"is_day_off": False, "day_off_reason": None}
