"""
Splitter Module

This module handles the balance calculation for the trip ledger.

Every member of a trip is assumed to owe an equal share of the total trip
spend. A member's balance is what they paid minus that equal share.

Features:
    - Multi-currency aggregation (all amounts normalized first)
    - Equal-share baseline across all trip members
    - Members without expenses still get a (negative) balance
    - Unattributed expenses raise the baseline for everyone

Data Model:
    Input - members: list of member ids (ordered)

    Input - expenses (list of dicts):
        - amount: float
        - currency: string (defaults to the reporting currency)
        - paid_by: string or None (member id of the payer)

    Input - names: dict of member id -> display name

    Input - rates: dict of currency code -> rate vs. reporting currency

    Output - balances (list of dicts, largest balance first):
        - uid: string
        - name: string
        - paid: float (total paid, normalized)
        - balance: float (paid - equal share)
            - Positive = member is owed money
            - Negative = member owes money

Functions:
    compute_balances: Calculate per-member balances from expenses.
    equal_share: Calculate the per-member share of the total spend.
"""

from typing import Optional

from trip_ledger.currency import REPORTING_CURRENCY, RateTable, to_reporting

UNKNOWN_MEMBER_NAME = "Unknown"


def _accumulate_paid(
    members: list[str],
    expenses: list[dict],
    rates: Optional[RateTable],
    reporting_currency: str
) -> tuple[dict, float]:
    """
    Normalize every expense and sum it per payer and overall.

    Returns:
        tuple: (paid totals keyed by payer id, total normalized spend)
    """
    paid_totals = {uid: 0.0 for uid in members}
    total_expenses = 0.0

    for expense in expenses:
        amount = to_reporting(
            expense["amount"], expense.get("currency"), rates, reporting_currency
        )
        total_expenses += amount

        # Expenses without a payer count toward the total only
        payer_id = expense.get("paid_by")
        if payer_id:
            paid_totals[payer_id] = paid_totals.get(payer_id, 0.0) + amount

    return paid_totals, total_expenses


def equal_share(
    members: list[str],
    expenses: list[dict],
    rates: Optional[RateTable],
    reporting_currency: str = REPORTING_CURRENCY
) -> float:
    """
    Calculate the equal share each member is assumed to owe.

    Returns:
        float: Total normalized spend divided by member count (0.0 with no members).
    """
    if not members:
        return 0.0
    _, total_expenses = _accumulate_paid(members, expenses, rates, reporting_currency)
    return total_expenses / len(members)


def compute_balances(
    members: list[str],
    expenses: list[dict],
    names: Optional[dict],
    rates: Optional[RateTable],
    reporting_currency: str = REPORTING_CURRENCY
) -> list[dict]:
    """
    Calculate per-member balances against an equal-share baseline.

    For each expense:
        1. The amount is normalized into the reporting currency
        2. It is added to the trip total
        3. If it has a payer, it is added to that payer's paid total

    Then for each member:
        balance = paid - (total / number of members)

    Args:
        members: Ordered list of member ids.
        expenses: List of expense dicts with amount, currency, paid_by.
        names: Dict mapping member id to display name.
        rates: Rate table relative to the reporting currency.
        reporting_currency: Currency all amounts are normalized into.

    Returns:
        list[dict]: One dict per member with uid, name, paid, balance,
                    sorted by balance descending (ties keep member order).

    Notes:
        - No members returns an empty list
        - Expense order does not matter
        - Payers who are not members are ignored in the output
        - Does NOT modify its inputs
    """
    if not members:
        return []

    names = names or {}
    paid_totals, total_expenses = _accumulate_paid(
        members, expenses, rates, reporting_currency
    )
    per_person_share = total_expenses / len(members)

    balances = [
        {
            "uid": uid,
            "name": names.get(uid) or UNKNOWN_MEMBER_NAME,
            "paid": paid_totals[uid],
            "balance": paid_totals[uid] - per_person_share
        }
        for uid in members
    ]

    # sorted() is stable, so equal balances keep the member order
    return sorted(balances, key=lambda b: b["balance"], reverse=True)
