# sheetchat/api/deps.py

from fastapi import HTTPException, Request

from sheetchat.services.chat_session import ChatSession


def get_chat(request: Request) -> ChatSession:
    """FastAPI dependency: the connected session or 409."""
    chat = getattr(request.app.state, "chat", None)
    if chat is None or not chat.connected:
        raise HTTPException(status_code=409, detail="Not connected")
    return chat
