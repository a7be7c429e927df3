"""
Settlement Module

This module turns member balances into a list of suggested payments for
the trip ledger.

Features:
    - Convert net balances into settlement transactions
    - Keep the number of transactions low using a greedy algorithm
    - Treat near-zero balances (< 0.01) as settled

Data Model:
    Input - balances (list of dicts, as returned by compute_balances):
        - uid: string
        - name: string
        - balance: float (positive = owed money, negative = owes money)

    Output - list of settlement transactions:
        - from: string (display name of the debtor who pays)
        - to: string (display name of the creditor who receives)
        - from_uid: string
        - to_uid: string
        - amount: float (always > 0, not rounded)

Functions:
    compute_settlements: Convert balances into settlement transactions.
"""

# Balances closer to zero than this are considered settled
SETTLEMENT_EPSILON = 0.01


def compute_settlements(balances: list[dict]) -> list[dict]:
    """
    Convert member balances into settlement transactions.

    Uses a greedy two-pointer walk:
        1. Creditors (balance > 0.01) sorted largest credit first
        2. Debtors (balance < -0.01) sorted largest debt first
        3. Match the current debtor with the current creditor:
           - Transfer the minimum of the debt and the credit
           - Stop if that amount is below 0.01
           - Move on from whichever side (or both) is now settled
        4. Stop when either list runs out

    The result zeroes every balance (within 0.01) but is not guaranteed
    to use the globally minimal number of transfers.

    Args:
        balances: List of balance dicts with uid, name and balance.

    Returns:
        list[dict]: Settlement transactions with from, to, from_uid,
                    to_uid and amount.

    Notes:
        - Does NOT modify input balances
        - No balances (or all settled) returns an empty list
    """
    # Work on copies; the running balances are mutated below
    working = [dict(b) for b in balances]

    creditors = sorted(
        (b for b in working if b["balance"] > SETTLEMENT_EPSILON),
        key=lambda b: b["balance"],
        reverse=True
    )
    debtors = sorted(
        (b for b in working if b["balance"] < -SETTLEMENT_EPSILON),
        key=lambda b: b["balance"]
    )

    settlements = []
    i = 0
    j = 0

    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]

        amount = min(abs(debtor["balance"]), creditor["balance"])
        if amount < SETTLEMENT_EPSILON:
            break

        settlements.append({
            "from": debtor.get("name"),
            "to": creditor.get("name"),
            "from_uid": debtor.get("uid"),
            "to_uid": creditor.get("uid"),
            "amount": amount
        })

        debtor["balance"] += amount
        creditor["balance"] -= amount

        if abs(debtor["balance"]) < SETTLEMENT_EPSILON:
            j += 1
        if creditor["balance"] < SETTLEMENT_EPSILON:
            i += 1

    return settlements
