"""
Prompt template and canned replies for the general (free-form) chat path.
"""

from typing import Any, Dict

GENERAL_ADVISOR_PROMPT = """You are FinPal, a friendly financial advisor AI. The user's context:
- Name: {user_name}
- Monthly Income: ₹{monthly_income:.0f}
- Income Type: {income_type}
- Recent Expenses: ₹{total_recent_expenses:.0f}
- Active Goals: {active_goals}

User question: {message}

Provide a helpful, concise response focused on practical financial advice. Keep it friendly and under 150 words."""

# Used whenever text generation fails or is disabled.
FALLBACK_RESPONSES = (
    "I'm here to help with your finances! You can ask me about your spending, goals, budgets, or investment options.",
    "Let me help you with that! Try asking about your spending patterns, savings goals, or how to reduce expenses.",
    "I can help you analyze your finances, track goals, and provide investment suggestions. What would you like to know?",
    "As your financial coach, I can help with budgeting, saving tips, and investment advice. How can I assist you today?",
)


def build_general_prompt(message: str, summary: Dict[str, Any]) -> str:
    return GENERAL_ADVISOR_PROMPT.format(
        user_name=summary.get("user_name") or "there",
        monthly_income=float(summary.get("monthly_income") or 0.0),
        income_type=summary.get("income_type") or "unknown",
        total_recent_expenses=float(summary.get("total_recent_expenses") or 0.0),
        active_goals=int(summary.get("active_goals") or 0),
        message=message,
    )
