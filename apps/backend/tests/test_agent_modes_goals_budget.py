from datetime import datetime, timezone

from finpal.agent.context import BudgetRecord
from finpal.agent.modes import (
    BUDGET_GREEN,
    BUDGET_RED,
    BUDGET_YELLOW,
    NO_BUDGETS_REPLY,
    NO_GOALS_REPLY,
    budget_used_pct,
    days_until,
    mode_budget_query,
    mode_goal_query,
    traffic_light,
)
from tests.helpers.records import credit, debit, goal

NOW = datetime(2025, 9, 15, 12, 0, tzinfo=timezone.utc)


class TestGoals:
    def test_no_active_goals_is_exact_string(self):
        expected = (
            "You don't have any active goals yet! Would you like me to help you set one? "
            "Popular goals include: Emergency Fund, Vacation, New Gadget, or Investment Portfolio."
        )
        assert NO_GOALS_REPLY == expected
        assert mode_goal_query("my goals?", [], now=NOW) == expected
        done = [goal(status="completed"), goal(status="cancelled")]
        assert mode_goal_query("my goals?", done, now=NOW) == expected

    def test_goal_block(self):
        out = mode_goal_query(
            "goal progress",
            [goal("Vacation", 50000, 12500, "2025-12-31", monthly=12500)],
            now=NOW,
        )
        assert out == (
            "You have 1 active goal(s):\n\n"
            "🎯 **Vacation**\n"
            "   Progress: ₹12500 / ₹50000 (25%)\n"
            "   Remaining: ₹37500 in 107 days\n"
            "   Monthly needed: ₹12500\n\n"
        )

    def test_monthly_needed_defaults_to_zero(self):
        out = mode_goal_query("goal", [goal(monthly=None)], now=NOW)
        assert "Monthly needed: ₹0\n" in out

    def test_only_active_goals_are_listed(self):
        out = mode_goal_query(
            "goal",
            [goal("Bike"), goal("Phone", status="completed"), goal("Laptop")],
            now=NOW,
        )
        assert out.startswith("You have 2 active goal(s):")
        assert "Bike" in out and "Laptop" in out
        assert "Phone" not in out

    def test_overdue_goal(self):
        out = mode_goal_query("goal", [goal(when="2025-09-10")], now=NOW)
        # 5.5 days past -> ceil(-5.5) == -5
        assert "(overdue by 5 days)" in out

    def test_zero_target_has_zero_progress(self):
        out = mode_goal_query("goal", [goal(target=0, current=0)], now=NOW)
        assert "(0%)" in out

    def test_days_until_rounds_up(self):
        assert days_until(datetime(2025, 9, 16, tzinfo=timezone.utc), NOW) == 1
        assert days_until(datetime(2025, 9, 15, 12, 0, tzinfo=timezone.utc), NOW) == 0
        assert days_until(None, NOW) is None


class TestBudgets:
    def test_no_budgets(self):
        assert mode_budget_query("budget?", [], [debit(10)], now=NOW) == NO_BUDGETS_REPLY

    def test_traffic_light_thresholds(self):
        assert traffic_light(100.0) == BUDGET_RED
        assert traffic_light(140.0) == BUDGET_RED
        assert traffic_light(99.99) == BUDGET_YELLOW
        assert traffic_light(80.0) == BUDGET_YELLOW
        assert traffic_light(79.9) == BUDGET_GREEN

    def test_exactly_at_limit_is_red(self):
        out = mode_budget_query(
            "budget",
            [BudgetRecord(category="Shopping", monthly_limit=5000)],
            [debit(2000, "Shopping", "2025-09-02"), debit(3000, "Shopping", "2025-09-14")],
            now=NOW,
        )
        assert out == (
            "📊 **Budget Status:**\n\n"
            "🔴 **Shopping**: ₹5000 / ₹5000 (100%)\n"
        )

    def test_only_current_month_debits_in_exact_category(self):
        budgets = [
            BudgetRecord(category="Food & Dining", monthly_limit=1000),
            BudgetRecord(category="Groceries", monthly_limit=4000),
        ]
        txns = [
            debit(850, "Food & Dining", "2025-09-03"),
            debit(900, "Food & Dining", "2025-08-30"),  # last month
            credit(500, "Food & Dining", "2025-09-05"),  # refund, not spend
            debit(100, "food & dining", "2025-09-05"),  # different label
            debit(1000, "Groceries", "2025-09-01T00:00:00Z"),
        ]
        out = mode_budget_query("budget", budgets, txns, now=NOW)
        assert "🟡 **Food & Dining**: ₹850 / ₹1000 (85%)" in out
        assert "🟢 **Groceries**: ₹1000 / ₹4000 (25%)" in out

    def test_undated_transactions_are_skipped(self):
        out = mode_budget_query(
            "budget",
            [BudgetRecord(category="Rent", monthly_limit=100)],
            [debit(500, "Rent", when="not a date")],
            now=NOW,
        )
        assert "🟢 **Rent**: ₹0 / ₹100 (0%)" in out

    def test_zero_limit(self):
        assert budget_used_pct(0, 0) == 0.0
        assert budget_used_pct(1, 0) == 100.0
        assert budget_used_pct(50, 200) == 25.0


def test_modes_accept_naive_now():
    naive = datetime(2025, 9, 15, 12, 0)
    assert mode_goal_query("goal", [goal()], now=naive) == mode_goal_query(
        "goal", [goal()], now=NOW
    )
    out = mode_budget_query(
        "budget",
        [BudgetRecord(category="Rent", monthly_limit=100)],
        [debit(50, "Rent", "2025-09-30T23:00:00")],
        now=datetime(2025, 9, 30, 23, 30),
    )
    assert "₹50 / ₹100 (50%)" in out
