# graph/graph.py
from datetime import date
from typing import Optional

from langgraph.graph import StateGraph, END
from graph.state import CheckState
from services.check_coordinator import CheckKind


def route_after_login(state: CheckState) -> str:
    # 休日判定は出勤時のみ
    if state["check_kind"].is_check_in:
        return "day_off_check"
    return "check"


def route_after_day_off_check(state: CheckState) -> str:
    if state["is_day_off"]:
        return "notify"
    return "check"


def initial_state(kind: CheckKind, today: Optional[date] = None) -> CheckState:
    if today is None:
        today = date.today()
    return {
        "today": today.isoformat(),
        "check_kind": kind,
        "session": None,
        "is_day_off": False,
        "day_off_reason": None,
        "is_signed_in": None,
        "action_taken": None,
        "message": None,
        "extra": {},
    }


def build_graph(
    client=None,
    calendar_service=None,
    coordinator=None,
    notifier=None,
):
    """LangGraphのグラフを構築して返す

    各ノード関数はサービス依存を持つため、functools.partialでラップして
    LangGraphが期待する (state) -> dict シグネチャに合わせる。
    """
    from functools import partial
    from graph.nodes.login_node import login_node
    from graph.nodes.day_off_node import day_off_node
    from graph.nodes.check_node import check_node
    from graph.nodes.notify_node import notify_node

    workflow = StateGraph(CheckState)

    workflow.add_node("login", partial(login_node, client=client))
    workflow.add_node(
        "day_off_check", partial(day_off_node, calendar_service=calendar_service)
    )
    workflow.add_node("check", partial(check_node, coordinator=coordinator))
    workflow.add_node("notify", partial(notify_node, notifier=notifier))

    workflow.set_entry_point("login")

    workflow.add_conditional_edges(
        "login",
        route_after_login,
        {"day_off_check": "day_off_check", "check": "check"},
    )
    workflow.add_conditional_edges(
        "day_off_check",
        route_after_day_off_check,
        {"notify": "notify", "check": "check"},
    )

    workflow.add_edge("check", "notify")
    workflow.add_edge("notify", END)

    return workflow.compile()
