"""WebSocket endpoint for live chat."""

from fastapi import APIRouter, WebSocket

from src.realtime.hub import MessagingHub

router = APIRouter(tags=["Realtime"])


def get_hub(websocket: WebSocket) -> MessagingHub:
    return websocket.app.state.hub


@router.websocket("/ws")
async def chat_socket(websocket: WebSocket):
    """Authenticate with ``{"type": "authenticate", "token": ...}``, then send ``sendMessage`` frames."""
    await get_hub(websocket).serve(websocket)
