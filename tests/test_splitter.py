"""Tests for balance calculation."""

import pytest

from trip_ledger.splitter import compute_balances, equal_share
from tests.conftest import make_expense


def _by_uid(balances):
    return {b["uid"]: b for b in balances}


class TestComputeBalances:
    """Tests for compute_balances()."""

    def test_two_members_multi_currency(self, names):
        """A pays 110 USD; A is owed 50 EUR and B owes 50 EUR."""
        rates = {"EUR": 1, "USD": 1.1}
        expenses = [make_expense(110, paid_by="A", currency="USD")]

        balances = compute_balances(["A", "B"], expenses, names, rates)

        assert [b["uid"] for b in balances] == ["A", "B"]
        assert balances[0]["paid"] == pytest.approx(100.0)
        assert balances[0]["balance"] == pytest.approx(50.0)
        assert balances[1]["paid"] == 0
        assert balances[1]["balance"] == pytest.approx(-50.0)

    def test_three_members_single_currency(self, names):
        """A pays 30; equal share 10; A +20, B -10, C -10."""
        rates = {"EUR": 1}
        balances = compute_balances(["A", "B", "C"], [make_expense(30, paid_by="A")], names, rates)

        by_uid = _by_uid(balances)
        assert by_uid["A"]["balance"] == pytest.approx(20.0)
        assert by_uid["B"]["balance"] == pytest.approx(-10.0)
        assert by_uid["C"]["balance"] == pytest.approx(-10.0)

    def test_no_expenses_gives_zero_balances(self, names, rates):
        """Members without expenses are all listed at zero."""
        balances = compute_balances(["A", "B", "C"], [], names, rates)

        assert [b["uid"] for b in balances] == ["A", "B", "C"]
        assert all(b["paid"] == 0 and b["balance"] == 0 for b in balances)

    def test_unattributed_expense_raises_baseline_only(self, names, rates):
        """An expense with an empty payer counts toward the share but nobody's paid total."""
        expenses = [make_expense(30, paid_by="A"), make_expense(30, paid_by="")]

        balances = compute_balances(["A", "B", "C"], expenses, names, rates)

        assert equal_share(["A", "B", "C"], expenses, rates) == pytest.approx(20.0)
        by_uid = _by_uid(balances)
        assert by_uid["A"]["paid"] == pytest.approx(30.0)
        assert by_uid["B"]["paid"] == 0
        assert by_uid["C"]["paid"] == 0
        assert by_uid["A"]["balance"] == pytest.approx(10.0)
        assert by_uid["B"]["balance"] == pytest.approx(-20.0)

    def test_no_members_returns_empty(self, names, rates):
        """Zero members is guarded against division by zero."""
        assert compute_balances([], [make_expense(10, paid_by="A")], names, rates) == []

    def test_sorted_descending_with_stable_ties(self, names, rates):
        """Largest creditor first; equal balances keep member order."""
        balances = compute_balances(["C", "B", "A"], [make_expense(30, paid_by="A")], names, rates)
        assert [b["uid"] for b in balances] == ["A", "C", "B"]

    def test_unknown_name_defaults(self, rates):
        """Members missing from the names map are shown as Unknown."""
        balances = compute_balances(["X"], [], {}, rates)
        assert balances[0]["name"] == "Unknown"

    def test_missing_rates_use_raw_amounts(self, names):
        """With no rate table, amounts are aggregated unconverted."""
        expenses = [make_expense(110, paid_by="A", currency="USD")]
        balances = compute_balances(["A", "B"], expenses, names, {})
        assert _by_uid(balances)["A"]["balance"] == pytest.approx(55.0)

    def test_expense_order_does_not_matter(self, names, rates):
        """Reversing expense order gives the same balances."""
        expenses = [
            make_expense(12.5, paid_by="A", currency="GBP"),
            make_expense(300, paid_by="B", currency="THB"),
            make_expense(7, paid_by="C"),
        ]
        forward = _by_uid(compute_balances(["A", "B", "C"], expenses, names, rates))
        backward = _by_uid(compute_balances(["A", "B", "C"], expenses[::-1], names, rates))
        for uid in forward:
            assert forward[uid]["balance"] == pytest.approx(backward[uid]["balance"])

    @pytest.mark.parametrize("expenses", [
        [],
        [make_expense(99.99, paid_by="A")],
        [
            make_expense(110, paid_by="A", currency="USD"),
            make_expense(17.3, paid_by="B", currency="GBP"),
            make_expense(1234, paid_by="C", currency="THB"),
        ],
        [make_expense(0.01 * i, paid_by="ABC"[i % 3], currency="USD") for i in range(1, 200)],
    ])
    def test_balances_sum_to_zero(self, expenses, names, rates):
        """Balances always sum to (almost exactly) zero when every expense has a payer."""
        balances = compute_balances(["A", "B", "C"], expenses, names, rates)
        assert abs(sum(b["balance"] for b in balances)) < 1e-9

    def test_inputs_not_modified(self, names, rates):
        """Inputs are left untouched."""
        members = ["A", "B"]
        expenses = [make_expense(10, paid_by="A")]
        compute_balances(members, expenses, names, rates)
        assert members == ["A", "B"]
        assert expenses == [make_expense(10, paid_by="A")]
