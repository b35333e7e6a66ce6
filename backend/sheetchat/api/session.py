# sheetchat/api/session.py

import logging

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from sheetchat.core.errors import ConfigurationError, ConnectError
from sheetchat.services.chat_session import ChatSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session")


class ConnectSchema(BaseModel):
    service_key: str
    user_name: str
    seed: str


@router.post("/connect")
def connect(payload: ConnectSchema, request: Request):
    """Open the room, replacing any session that is already connected"""
    state = request.app.state
    try:
        chat = ChatSession.connect(
            payload.service_key,
            payload.user_name,
            payload.seed,
            store_factory=state.store_factory,
        )
    except ConnectError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    # Only drop the old session once the new one is up
    if state.chat is not None:
        state.chat.disconnect()
    state.chat = chat
    if state.settings.poll_interval > 0:
        chat.start_polling(state.settings.poll_interval)

    return {
        "status": "connected",
        "author": chat.author,
        "messages": [m.to_payload() for m in chat.messages],
    }


@router.post("/disconnect")
def disconnect(request: Request):
    state = request.app.state
    if state.chat is None:
        return {"status": "already_disconnected"}

    state.chat.disconnect()
    state.chat = None
    return {"status": "disconnected"}
