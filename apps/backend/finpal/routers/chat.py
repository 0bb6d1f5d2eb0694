import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from finpal.agent.chat_agent import FinancialChatAgent
from finpal.db import get_db
from finpal.orm_models import ChatMessage, User
from finpal.schemas.chat import (
    ChatHistoryResponse,
    ChatMessageRequest,
    ChatMessageResponse,
)
from finpal.services.context import UserNotFound, load_chat_context
from finpal.services.llm import get_llm_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


def current_user_id(x_user_id: Optional[int] = Header(default=None)) -> int:
    """Caller identity; authentication happens upstream and forwards X-User-Id."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id


def get_chat_agent() -> FinancialChatAgent:
    # One agent per request: its session log must never mix users.
    return FinancialChatAgent(llm=get_llm_client())


@router.get("/history", response_model=ChatHistoryResponse)
def get_history(
    limit: int = Query(50, ge=1, le=500),
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    rows = db.scalars(
        select(ChatMessage)
        .where(ChatMessage.user_id == user_id)
        .order_by(ChatMessage.created_at, ChatMessage.id)
        .limit(limit)
    ).all()
    return {"messages": rows}


@router.post("/message", response_model=ChatMessageResponse)
async def send_message(
    req: ChatMessageRequest,
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
    agent: FinancialChatAgent = Depends(get_chat_agent),
):
    if db.get(User, user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")

    try:
        db.add(ChatMessage(user_id=user_id, role="user", message=req.message))
        db.commit()

        context = load_chat_context(db, user_id)
        reply = await agent.chat(req.message, context)

        assistant = ChatMessage(
            user_id=user_id,
            role="assistant",
            message=reply.text,
            intent=reply.intent.value,
        )
        db.add(assistant)
        db.commit()
        db.refresh(assistant)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    except SQLAlchemyError:
        db.rollback()
        logger.exception("chat message failed", extra={"user_id": user_id})
        raise HTTPException(status_code=500, detail="Failed to process message")

    return {
        "response": reply.text,
        "message_id": assistant.id,
        "intent": reply.intent.value,
    }


@router.delete("/history")
def clear_history(
    user_id: int = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    db.execute(delete(ChatMessage).where(ChatMessage.user_id == user_id))
    db.commit()
    return {"message": "Chat history cleared"}
