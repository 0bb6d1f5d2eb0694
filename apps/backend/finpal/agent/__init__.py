from finpal.agent.chat_agent import ChatReply, FinancialChatAgent, SessionLog
from finpal.agent.context import ChatContext
from finpal.agent.intent import Intent, classify_intent

__all__ = [
    "ChatContext",
    "ChatReply",
    "FinancialChatAgent",
    "Intent",
    "SessionLog",
    "classify_intent",
]
