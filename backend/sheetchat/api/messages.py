from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from sheetchat.api.deps import get_chat
from sheetchat.core.errors import ConfigurationError, TransportError
from sheetchat.core.message import MessageType, spin_text
from sheetchat.core.rate_limit import SEND_LIMIT, limiter
from sheetchat.services.chat_session import ChatSession

router = APIRouter(prefix="/messages")


class SendSchema(BaseModel):
    text: str


def _send(chat: ChatSession, text: str, type: MessageType):
    try:
        message = chat.send(text, type)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransportError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if message is None:
        return {"status": "ignored"}
    return {"status": "sent", "message": message.to_payload()}


@router.get("")
def list_messages(chat: ChatSession = Depends(get_chat)):
    return {
        "messages": [m.to_payload() for m in chat.messages],
        "error": chat.last_error,
        "last_seen_count": chat.last_seen_count,
    }


@router.post("/send")
@limiter.limit(SEND_LIMIT)
def send_message(request: Request, payload: SendSchema, chat: ChatSession = Depends(get_chat)):
    return _send(chat, payload.text, MessageType.TEXT)


@router.post("/spin")
@limiter.limit(SEND_LIMIT)
def spin(request: Request, chat: ChatSession = Depends(get_chat)):
    return _send(chat, spin_text(), MessageType.SPIN)


@router.post("/poll")
def poll(chat: ChatSession = Depends(get_chat)):
    """Run one sync tick now instead of waiting for the timer"""
    new = chat.poll()
    return {
        "new_messages": [m.to_payload() for m in new],
        "error": chat.last_error,
        "last_seen_count": chat.last_seen_count,
    }
