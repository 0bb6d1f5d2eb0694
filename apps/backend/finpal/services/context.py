from __future__ import annotations
from datetime import datetime
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from finpal.agent.context import (
    BudgetRecord,
    ChatContext,
    GoalRecord,
    TransactionRecord,
    UserProfile,
)
from finpal.agent.finance_utils import month_key, utc_now
from finpal.config import settings
from finpal.orm_models import Budget, Goal, Transaction, User


class UserNotFound(LookupError):
    pass


def ctx_user(db: Session, user_id: int) -> UserProfile:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFound(user_id)
    return UserProfile.model_validate(user)


def ctx_recent_transactions(
    db: Session, user_id: int, limit: Optional[int] = None
) -> List[TransactionRecord]:
    rows = db.scalars(
        select(Transaction)
        .where(Transaction.user_id == user_id)
        .order_by(desc(Transaction.transaction_date), desc(Transaction.id))
        .limit(limit or settings.CHAT_CONTEXT_TXN_LIMIT)
    ).all()
    return [TransactionRecord.model_validate(r) for r in rows]


def ctx_active_goals(db: Session, user_id: int) -> List[GoalRecord]:
    rows = db.scalars(
        select(Goal)
        .where(Goal.user_id == user_id, Goal.status == "active")
        .order_by(Goal.target_date, Goal.id)
    ).all()
    return [
        GoalRecord(
            name=g.name,
            target_amount=g.target_amount,
            current_amount=g.current_amount,
            target_date=g.target_date,
            status=g.status,
            monthly_saving_needed=g.monthly_contribution,
        )
        for g in rows
    ]


def ctx_month_budgets(db: Session, user_id: int, month: str) -> List[BudgetRecord]:
    rows = db.scalars(
        select(Budget)
        .where(Budget.user_id == user_id, Budget.month == month)
        .order_by(Budget.category)
    ).all()
    return [BudgetRecord.model_validate(b) for b in rows]


def load_chat_context(
    db: Session, user_id: int, now: Optional[datetime] = None
) -> ChatContext:
    """
    Gather the agent's inputs for one user: profile, most recent transactions,
    active goals only and this month's budgets only.
    Raises UserNotFound when the user does not exist.
    """
    month = month_key(now or utc_now())
    return ChatContext(
        user=ctx_user(db, user_id),
        transactions=ctx_recent_transactions(db, user_id),
        goals=ctx_active_goals(db, user_id),
        budgets=ctx_month_budgets(db, user_id, month),
    )
