"""Chat companion endpoint — canned keyword replies.

The conversation is stateless on the server: the client echoes back the
``last_context`` it received so follow-up rules can see it.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from mindcheck_assessment.chat import GREETING, ChatResponder

from mindcheck_server.dependencies import get_chat

router = APIRouter(tags=["chat"])


class ChatRequest(BaseModel):
    """Body for POST /chat."""
    message: str = Field(min_length=1)
    last_context: str = ""


class ChatResponse(BaseModel):
    reply: str
    last_context: str


@router.get("/chat/greeting")
async def get_greeting() -> dict:
    return {"reply": GREETING}


@router.post("/chat")
async def send_message(
    body: ChatRequest,
    chat: ChatResponder = Depends(get_chat),
) -> ChatResponse:
    """Answer one message.  400 for a whitespace-only message."""
    result = chat.respond(body.message, body.last_context)
    return ChatResponse(reply=result.reply, last_context=result.last_context)
