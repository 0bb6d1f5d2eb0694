"""
Deterministic chat modes - one reply builder per intent.

Every function here is pure: it reads the context slice it is given and
returns the reply text. Spending summaries use two-decimal currency; goal,
budget and investment summaries use whole rupees.
"""

import math
import re
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from finpal.agent.context import (
    BudgetRecord,
    ChatContext,
    GoalRecord,
    TransactionRecord,
    UserProfile,
    category_breakdown,
)
from finpal.agent.finance_utils import (
    format_currency,
    month_key,
    safe_pct,
    to_datetime,
    utc_now,
)

# ---------------------------------------------------------------------------
# Spending
# ---------------------------------------------------------------------------

# Message keyword -> stored category labels it stands for (lower-case).
# Order matters: the first keyword found in the message is used.
SPENDING_CATEGORY_LABELS: Dict[str, Tuple[str, ...]] = {
    "food": ("food & dining",),
    "shopping": ("shopping",),
    "groceries": ("groceries",),
    "transport": ("transportation",),
    "subscription": ("subscriptions",),
    "entertainment": ("entertainment",),
    "healthcare": ("healthcare",),
    "education": ("education",),
    "bills": ("bills & utilities",),
    "emi": ("emi",),
}

_KNOWN_LABELS = {label for labels in SPENDING_CATEGORY_LABELS.values() for label in labels}
_WORD_SPLIT = re.compile(r"[^a-z0-9]+")

NO_SPENDING_REPLY = (
    "I don't see any spending in your recent transactions yet. "
    "Once you add a few, I can break down where your money goes."
)


def match_spending_keyword(message: str) -> Optional[str]:
    text = (message or "").lower()
    for keyword in SPENDING_CATEGORY_LABELS:
        if keyword in text:
            return keyword
    return None


def category_matches(keyword: str, category: Optional[str]) -> bool:
    """
    True when a stored category belongs to a spending keyword.

    Known labels map exactly (see SPENDING_CATEGORY_LABELS). A custom label
    matches when one of its words starts with the keyword, so "Food delivery"
    is food but "Insurance Premium" is not emi.
    """
    if not category:
        return False
    label = category.strip().lower()
    if label in SPENDING_CATEGORY_LABELS.get(keyword, ()):
        return True
    if label in _KNOWN_LABELS:
        return False
    return any(word.startswith(keyword) for word in _WORD_SPLIT.split(label) if word)


def top_categories(
    transactions: Sequence[TransactionRecord], limit: int = 3
) -> List[Tuple[str, float]]:
    """Highest-spend debit categories; ties keep the category seen first."""
    breakdown = category_breakdown(list(transactions))
    # sorted() is stable and the breakdown preserves first-seen order
    return sorted(breakdown.items(), key=lambda kv: kv[1], reverse=True)[:limit]


def mode_spending_query(message: str, transactions: Sequence[TransactionRecord]) -> str:
    expenses = [t for t in transactions if t.is_debit]
    total = sum(t.amount for t in expenses)

    keyword = match_spending_keyword(message)
    if keyword:
        matched = [t for t in expenses if category_matches(keyword, t.category)]
        cat_total = sum(t.amount for t in matched)
        share = round(safe_pct(cat_total, total), 1)
        return (
            f"You've spent {format_currency(cat_total)} on {keyword} across "
            f"{len(matched)} transactions recently. "
            f"This accounts for {share:.1f}% of your total spending."
        )

    if not expenses:
        return NO_SPENDING_REPLY

    lines = [f"Your total spending is {format_currency(total)}. Top spending categories:"]
    for cat, amt in top_categories(expenses):
        lines.append(
            f"• {cat}: {format_currency(amt)} ({safe_pct(amt, total):.0f}%)"
        )
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

NO_GOALS_REPLY = (
    "You don't have any active goals yet! Would you like me to help you set one? "
    "Popular goals include: Emergency Fund, Vacation, New Gadget, or Investment Portfolio."
)


def days_until(target: Optional[datetime], now: datetime) -> Optional[int]:
    """Whole days left, rounded up; negative once the date has passed."""
    if target is None:
        return None
    return math.ceil((target - now).total_seconds() / 86400)


def _deadline_text(remaining: float, days_left: Optional[int]) -> str:
    if days_left is None:
        return f"Remaining: {format_currency(remaining, 0)} (no target date)"
    if days_left < 0:
        return f"Remaining: {format_currency(remaining, 0)} (overdue by {-days_left} days)"
    return f"Remaining: {format_currency(remaining, 0)} in {days_left} days"


def mode_goal_query(
    message: str, goals: Sequence[GoalRecord], now: Optional[datetime] = None
) -> str:
    now = to_datetime(now) or utc_now()
    active = [g for g in goals if g.is_active]
    if not active:
        return NO_GOALS_REPLY

    out = f"You have {len(active)} active goal(s):\n\n"
    for goal in active:
        progress = safe_pct(goal.current_amount, goal.target_amount)
        remaining = goal.target_amount - goal.current_amount
        out += f"🎯 **{goal.name}**\n"
        out += (
            f"   Progress: {format_currency(goal.current_amount, 0)} / "
            f"{format_currency(goal.target_amount, 0)} ({progress:.0f}%)\n"
        )
        out += f"   {_deadline_text(remaining, days_until(goal.target_date, now))}\n"
        out += f"   Monthly needed: {format_currency(goal.monthly_saving_needed, 0)}\n\n"
    return out


# ---------------------------------------------------------------------------
# Budgets
# ---------------------------------------------------------------------------

NO_BUDGETS_REPLY = (
    "You haven't set any budgets yet! Setting budgets helps you control spending. "
    "I recommend starting with categories where you spend the most."
)

BUDGET_RED = "🔴"
BUDGET_YELLOW = "🟡"
BUDGET_GREEN = "🟢"


def budget_used_pct(spent: float, limit: float) -> float:
    if limit <= 0:
        return 100.0 if spent > 0 else 0.0
    return spent / limit * 100


def traffic_light(pct: float) -> str:
    if pct >= 100:
        return BUDGET_RED
    if pct >= 80:
        return BUDGET_YELLOW
    return BUDGET_GREEN


def mode_budget_query(
    message: str,
    budgets: Sequence[BudgetRecord],
    transactions: Sequence[TransactionRecord],
    now: Optional[datetime] = None,
) -> str:
    if not budgets:
        return NO_BUDGETS_REPLY

    current_month = month_key(to_datetime(now) or utc_now())
    expenses = [
        t
        for t in transactions
        if t.is_debit
        and t.transaction_date is not None
        and month_key(t.transaction_date) == current_month
    ]

    out = "📊 **Budget Status:**\n\n"
    for budget in budgets:
        spent = sum(t.amount for t in expenses if t.category == budget.category)
        pct = budget_used_pct(spent, budget.monthly_limit)
        out += (
            f"{traffic_light(pct)} **{budget.category}**: {format_currency(spent, 0)} / "
            f"{format_currency(budget.monthly_limit, 0)} ({pct:.0f}%)\n"
        )
    return out


# ---------------------------------------------------------------------------
# Investments
# ---------------------------------------------------------------------------

INVESTMENT_SUGGESTIONS: Dict[str, Tuple[str, ...]] = {
    "low": (
        "Fixed Deposits (6-7% returns)",
        "PPF (7-8% tax-free)",
        "Debt Mutual Funds (6-9%)",
        "Sovereign Gold Bonds",
    ),
    "medium": (
        "Index Funds (10-15% long-term)",
        "Large Cap Funds",
        "ELSS for tax saving",
        "Mix of equity and debt",
    ),
    "high": (
        "Small & Mid Cap Funds (12-25%)",
        "Direct Equity",
        "ELSS Funds",
        "Thematic/Sectoral Funds",
    ),
}

SUGGESTED_INVESTMENT_SHARE = 0.2


def normalize_risk(value: Optional[str]) -> str:
    risk = (value or "").strip().lower()
    return risk if risk in INVESTMENT_SUGGESTIONS else "medium"


def mode_investment_query(message: str, user: UserProfile) -> str:
    risk = normalize_risk(user.risk_tolerance)
    income = user.monthly_income
    suggested = income * SUGGESTED_INVESTMENT_SHARE

    out = (
        f"Based on your {risk} risk tolerance and monthly income of "
        f"{format_currency(income, 0)}:\n\n"
    )
    out += "**Recommended for you:**\n"
    for item in INVESTMENT_SUGGESTIONS[risk]:
        out += f"• {item}\n"
    out += "\n"
    out += (
        f"💡 Consider investing {format_currency(suggested, 0)}/month "
        "(20% of income) as a starting point."
    )
    return out


# ---------------------------------------------------------------------------
# Advice
# ---------------------------------------------------------------------------

TARGET_SAVINGS_RATE = 20.0
DISCRETIONARY_SHARE_LIMIT = 0.15
SUBSCRIPTIONS_LIMIT = 1000.0

TIP_DINING = "Consider reducing dining out expenses. Cooking at home can save 40-60%."
TIP_SUBSCRIPTIONS = "Review your subscriptions. Cancel unused ones or share family plans."
TIP_SHOPPING = "Use the 24-hour rule before purchases to avoid impulse buying."
TIP_GOALS = "Set financial goals! Having clear targets increases savings by 30%."
TIP_EMERGENCY_FUND = (
    "Ensure you have 6 months of expenses as an emergency fund before investing."
)
TIP_DOING_GREAT = "You're doing great! Keep maintaining your financial discipline."


def savings_rate(monthly_income: float, expenses: float) -> Optional[float]:
    """Percent of income left after expenses; None without an income."""
    if monthly_income <= 0:
        return None
    return (monthly_income - expenses) * 100 / monthly_income


def advice_tips(context: ChatContext, include_emergency_tip: bool = True) -> List[str]:
    """Run the fixed heuristic checklist and return the triggered tips in order."""
    expenses = context.debits
    total_expenses = sum(t.amount for t in expenses)
    income = context.user.monthly_income
    breakdown = category_breakdown(expenses)

    tips: List[str] = []
    rate = savings_rate(income, total_expenses)
    if rate is not None and rate < TARGET_SAVINGS_RATE:
        tips.append(
            f"Your savings rate is {rate:.1f}%. Try to save at least 20% of your income."
        )
    if breakdown.get("Food & Dining", 0.0) > income * DISCRETIONARY_SHARE_LIMIT:
        tips.append(TIP_DINING)
    if breakdown.get("Subscriptions", 0.0) > SUBSCRIPTIONS_LIMIT:
        tips.append(TIP_SUBSCRIPTIONS)
    if breakdown.get("Shopping", 0.0) > income * DISCRETIONARY_SHARE_LIMIT:
        tips.append(TIP_SHOPPING)
    if not context.active_goals:
        tips.append(TIP_GOALS)
    if include_emergency_tip:
        tips.append(TIP_EMERGENCY_FUND)
    return tips


def mode_advice_request(
    message: str, context: ChatContext, include_emergency_tip: bool = True
) -> str:
    tips = advice_tips(context, include_emergency_tip=include_emergency_tip)
    if not tips:
        tips = [TIP_DOING_GREAT]
    numbered = "\n\n".join(f"{i}. {tip}" for i, tip in enumerate(tips, start=1))
    return "💡 **Financial Tips for You:**\n\n" + numbered
