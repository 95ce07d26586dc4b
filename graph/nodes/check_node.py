from graph.state import CheckState
from services.check_coordinator import CheckCoordinator


async def check_node(state: CheckState, coordinator: CheckCoordinator = None) -> dict:
    """打刻状態を確認し、必要なら出勤・退勤を送信するノード"""
    kind = state["check_kind"]
    result = await coordinator.perform(state["session"], kind)

    if not result.performed:
        action = "skipped"
    elif kind.is_check_in:
        action = "check_in"
    else:
        action = "check_out"

    return {
        "is_signed_in": result.is_signed_in,
        "action_taken": action,
        "message": result.message,
    }
