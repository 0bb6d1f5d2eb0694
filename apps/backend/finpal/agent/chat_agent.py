"""
Financial chat agent: classify a message, run the matching mode, return text.

All modes except `general` are deterministic templates over the context
bundle. The general mode asks a text-generation service and falls back to a
canned reply on any failure, so `chat()` never raises.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional, Protocol

from finpal.agent.context import ChatContext, build_context_summary
from finpal.agent.intent import Intent, classify_intent
from finpal.agent.modes import (
    mode_advice_request,
    mode_budget_query,
    mode_goal_query,
    mode_investment_query,
    mode_spending_query,
)
from finpal.agent.prompts import FALLBACK_RESPONSES, build_general_prompt
from finpal.agent.finance_utils import to_datetime, utc_now
from finpal.config import settings

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


@dataclass(frozen=True)
class ChatReply:
    text: str
    intent: Intent
    used_fallback: bool = False


class SessionLog:
    """Last `max_pairs` user/assistant exchanges. Written, never used for routing."""

    def __init__(self, max_pairs: int = 10):
        self.max_pairs = max_pairs
        self._items: Deque[Dict[str, str]] = deque(maxlen=max_pairs * 2)

    def append(self, user_message: str, reply: str) -> None:
        self._items.append({"role": "user", "content": user_message})
        self._items.append({"role": "assistant", "content": reply})

    def messages(self) -> List[Dict[str, str]]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


class FinancialChatAgent:
    def __init__(
        self,
        llm: Optional[TextGenerator] = None,
        session_log: Optional[SessionLog] = None,
        timeout_sec: Optional[float] = None,
        rng: Optional[random.Random] = None,
        include_emergency_tip: Optional[bool] = None,
    ):
        if llm is None:
            from finpal.services.llm import get_llm_client

            llm = get_llm_client()
        self.llm = llm
        self.session_log = (
            session_log if session_log is not None else SessionLog(settings.CHAT_HISTORY_PAIRS)
        )
        self.timeout_sec = timeout_sec if timeout_sec is not None else settings.LLM_TIMEOUT_SEC
        self.rng = rng if rng is not None else random.Random()
        self.include_emergency_tip = (
            settings.ADVICE_EMERGENCY_TIP
            if include_emergency_tip is None
            else include_emergency_tip
        )

    async def chat(
        self,
        message: str,
        context: ChatContext | Dict[str, Any],
        now: Optional[datetime] = None,
    ) -> ChatReply:
        if not isinstance(context, ChatContext):
            context = ChatContext.model_validate(context)
        # naive values are read as UTC, like stored dates
        now = to_datetime(now) or utc_now()

        intent = classify_intent(message)
        logger.debug("chat intent classified", extra={"intent": intent.value})

        used_fallback = False
        if intent is Intent.SPENDING_QUERY:
            text = mode_spending_query(message, context.transactions)
        elif intent is Intent.GOAL_QUERY:
            text = mode_goal_query(message, context.goals, now=now)
        elif intent is Intent.BUDGET_QUERY:
            text = mode_budget_query(message, context.budgets, context.transactions, now=now)
        elif intent is Intent.INVESTMENT_QUERY:
            text = mode_investment_query(message, context.user)
        elif intent is Intent.ADVICE_REQUEST:
            text = mode_advice_request(
                message, context, include_emergency_tip=self.include_emergency_tip
            )
        else:
            text, used_fallback = await self._general_reply(message, context)

        self.session_log.append(message, text)
        return ChatReply(text=text, intent=intent, used_fallback=used_fallback)

    async def reply(
        self,
        message: str,
        context: ChatContext | Dict[str, Any],
        now: Optional[datetime] = None,
    ) -> str:
        return (await self.chat(message, context, now=now)).text

    async def _general_reply(self, message: str, context: ChatContext) -> tuple[str, bool]:
        prompt = build_general_prompt(message, build_context_summary(context))
        try:
            text = await asyncio.wait_for(self.llm.generate(prompt), timeout=self.timeout_sec)
        except asyncio.TimeoutError:
            logger.warning(
                "general reply timed out after %.1fs; using fallback",
                self.timeout_sec,
                extra={"fallback": True},
            )
            return self.fallback_response(), True
        except Exception as e:  # any provider failure degrades to a canned reply
            logger.warning(
                "general reply failed (%s: %s); using fallback",
                type(e).__name__,
                e,
                extra={"fallback": True},
            )
            return self.fallback_response(), True
        if not isinstance(text, str) or not text.strip():
            logger.warning("general reply was empty; using fallback", extra={"fallback": True})
            return self.fallback_response(), True
        return text.strip(), False

    def fallback_response(self) -> str:
        return self.rng.choice(FALLBACK_RESPONSES)
