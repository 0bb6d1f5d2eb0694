import pytest

from finpal.agent.modes import (
    NO_SPENDING_REPLY,
    category_matches,
    match_spending_keyword,
    mode_spending_query,
    top_categories,
)
from tests.helpers.records import credit, debit


class TestCategoryMatching:
    @pytest.mark.parametrize(
        "keyword,stored",
        [
            ("food", "Food & Dining"),
            ("shopping", "Shopping"),
            ("groceries", "Groceries"),
            ("transport", "Transportation"),
            ("subscription", "Subscriptions"),
            ("entertainment", "Entertainment"),
            ("healthcare", "Healthcare"),
            ("education", "Education"),
            ("bills", "Bills & Utilities"),
            ("emi", "EMI"),
        ],
    )
    def test_known_labels(self, keyword, stored):
        assert category_matches(keyword, stored)
        assert category_matches(keyword, stored.upper())

    def test_known_label_of_other_keyword_never_matches(self):
        assert not category_matches("food", "Groceries")
        assert not category_matches("shopping", "Groceries")

    def test_custom_labels_match_on_word_prefix(self):
        assert category_matches("food", "Food delivery")
        assert category_matches("transport", "Public transport")
        assert not category_matches("emi", "Insurance Premium")
        assert not category_matches("food", "Seafood")

    def test_missing_category(self):
        assert not category_matches("food", None)
        assert not category_matches("food", "")

    def test_first_keyword_in_table_order_wins(self):
        assert match_spending_keyword("food and shopping") == "food"
        assert match_spending_keyword("shopping and food") == "food"
        assert match_spending_keyword("what did I spend") is None


def test_category_summary_share_is_rounded_to_one_decimal():
    txns = [
        debit(300, "Food & Dining"),
        debit(700, "Shopping"),
        debit(1000, "Rent"),
        credit(50000),
    ]
    out = mode_spending_query("How much did I spend on food?", txns)
    assert out == (
        "You've spent ₹300.00 on food across 1 transactions recently. "
        "This accounts for 15.0% of your total spending."
    )


def test_category_share_uses_round_of_ratio():
    txns = [debit(1, "Groceries"), debit(2, "Rent")]
    out = mode_spending_query("groceries spend", txns)
    # 1 / 3 * 100 = 33.33.. -> 33.3
    assert f"{round(1 / 3 * 100, 1):.1f}%" in out
    assert "33.3%" in out


def test_category_summary_with_no_debits_reports_zero_percent():
    out = mode_spending_query("what did I spend on food", [credit(1000)])
    assert "₹0.00 on food across 0 transactions" in out
    assert "0.0% of your total spending" in out


def test_overall_summary_lists_top_three():
    txns = [
        debit(100, "Food & Dining"),
        debit(500, "Shopping"),
        debit(250, "Groceries"),
        debit(150, "Transportation"),
        debit(1234.5, "Rent"),
        credit(9999),
    ]
    out = mode_spending_query("show my expenses", txns)
    lines = out.split("\n")
    assert lines[0] == "Your total spending is ₹2234.50. Top spending categories:"
    assert lines[1] == "• Rent: ₹1234.50 (55%)"
    assert lines[2] == "• Shopping: ₹500.00 (22%)"
    assert lines[3] == "• Groceries: ₹250.00 (11%)"
    assert len(lines) == 4


def test_uncategorized_debits_are_other():
    out = mode_spending_query("expenses?", [debit(40), debit(60, None)])
    assert "• Other: ₹100.00 (100%)" in out


def test_top_categories_ties_keep_first_seen():
    txns = [debit(100, "B"), debit(100, "A"), debit(100, "C"), debit(100, "D")]
    assert top_categories(txns) == [("B", 100.0), ("A", 100.0), ("C", 100.0)]


def test_overall_summary_empty_state():
    assert mode_spending_query("what did I spend", []) == NO_SPENDING_REPLY
    assert mode_spending_query("what did I spend", [credit(500)]) == NO_SPENDING_REPLY


def test_malformed_amounts_count_as_zero():
    txns = [debit("abc", "Shopping"), debit("12.5xyz", "Shopping"), debit(None, "Food & Dining")]
    out = mode_spending_query("shopping spend", txns)
    assert "₹12.50 on shopping across 2 transactions" in out
    assert "100.0%" in out
