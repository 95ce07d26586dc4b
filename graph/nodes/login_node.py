from graph.state import CheckState
from services.woffu_interface import WoffuInterface


async def login_node(state: CheckState, client: WoffuInterface = None) -> dict:
    """Woffuにログインしてセッションを取得するノード"""
    session = await client.login()
    return {"session": session}
