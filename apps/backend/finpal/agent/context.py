"""
In-memory context bundle handed to the chat agent.

Records are read-only snapshots of the stored user, transactions, goals and
budgets. Numeric fields are coerced leniently (see `to_amount`) so a single
malformed row can never break a reply.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finpal.agent.finance_utils import to_amount, to_datetime


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore", frozen=True)


class UserProfile(_Record):
    name: str = ""
    monthly_income: float = 0.0
    income_type: str = "salaried"
    risk_tolerance: str = "medium"

    @field_validator("monthly_income", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> float:
        return to_amount(v)

    @field_validator("name", "income_type", "risk_tolerance", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str:
        return "" if v is None else str(v)


class TransactionRecord(_Record):
    amount: float = 0.0
    type: str = "debit"
    category: Optional[str] = None
    transaction_date: Optional[datetime] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> float:
        return to_amount(v)

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return str(v).strip() or None

    @field_validator("type", mode="before")
    @classmethod
    def _type(cls, v: Any) -> str:
        return str(v or "").strip().lower()

    @field_validator("transaction_date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> Optional[datetime]:
        return to_datetime(v)

    @property
    def is_debit(self) -> bool:
        return self.type == "debit"

    @property
    def is_credit(self) -> bool:
        return self.type == "credit"

    @property
    def category_label(self) -> str:
        return self.category or "Other"


class GoalRecord(_Record):
    name: str = ""
    target_amount: float = 0.0
    current_amount: float = 0.0
    target_date: Optional[datetime] = None
    status: str = "active"
    monthly_saving_needed: float = 0.0

    @field_validator(
        "target_amount", "current_amount", "monthly_saving_needed", mode="before"
    )
    @classmethod
    def _amount(cls, v: Any) -> float:
        return to_amount(v)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("target_date", mode="before")
    @classmethod
    def _date(cls, v: Any) -> Optional[datetime]:
        return to_datetime(v)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v: Any) -> str:
        return str(v or "").strip().lower()

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class BudgetRecord(_Record):
    category: str = ""
    monthly_limit: float = 0.0

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("monthly_limit", mode="before")
    @classmethod
    def _amount(cls, v: Any) -> float:
        return to_amount(v)


class ChatContext(BaseModel):
    """The four inputs for one reply: who is asking and what their data looks like."""

    user: UserProfile = Field(default_factory=UserProfile)
    transactions: List[TransactionRecord] = Field(default_factory=list)
    goals: List[GoalRecord] = Field(default_factory=list)
    budgets: List[BudgetRecord] = Field(default_factory=list)

    @property
    def debits(self) -> List[TransactionRecord]:
        return [t for t in self.transactions if t.is_debit]

    @property
    def active_goals(self) -> List[GoalRecord]:
        return [g for g in self.goals if g.is_active]


def category_breakdown(transactions: List[TransactionRecord]) -> Dict[str, float]:
    """Debit totals per category label, in first-seen order."""
    out: Dict[str, float] = {}
    for tx in transactions:
        if not tx.is_debit:
            continue
        out[tx.category_label] = out.get(tx.category_label, 0.0) + tx.amount
    return out


def build_context_summary(context: ChatContext) -> Dict[str, Any]:
    """Compact view of the bundle, used to prompt the text-generation fallback."""
    debits = context.debits
    income = sum(t.amount for t in context.transactions if t.is_credit)
    return {
        "user_name": context.user.name,
        "monthly_income": context.user.monthly_income,
        "income_type": context.user.income_type,
        "risk_tolerance": context.user.risk_tolerance,
        "total_recent_expenses": sum(t.amount for t in debits),
        "total_recent_income": income,
        "category_breakdown": category_breakdown(debits),
        "active_goals": len(context.active_goals),
        "goals": [
            {"name": g.name, "target": g.target_amount, "current": g.current_amount}
            for g in context.goals
        ],
        "budgets": [
            {"category": b.category, "limit": b.monthly_limit} for b in context.budgets
        ],
    }
