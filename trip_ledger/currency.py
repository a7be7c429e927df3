"""
Currency Module

This module converts expense amounts between currencies for the trip
ledger, using a rate table expressed against the reporting currency.

Features:
    - Convert any (amount, currency) pair into another currency
    - Identity fast path for same-currency conversions
    - Fail-open fallback: unknown rates return the amount unchanged
    - Trip-wide total in the reporting currency

Data Model:
    Input - rates (RateTable): dict of currency code -> float
        - Value is the amount of that currency equal to 1 unit of the
          reporting currency (e.g. {"EUR": 1.0, "USD": 1.1})

Functions:
    normalize: Convert an amount between two currencies.
    to_reporting: Convert an amount into the reporting currency.
    trip_total: Sum expense amounts in the reporting currency.
"""

from typing import Optional

RateTable = dict[str, float]

# Default currency every amount is normalized into before aggregation
REPORTING_CURRENCY = "EUR"

# Currencies the expense form offers
SUPPORTED_CURRENCIES = ("EUR", "USD", "GBP", "THB")


def normalize(
    amount: float,
    from_currency: str,
    to_currency: str,
    rates: Optional[RateTable],
    reporting_currency: str = REPORTING_CURRENCY
) -> float:
    """
    Convert an amount from one currency to another.

    Rates are "units of currency per 1 unit of the reporting currency", so:
        - into the reporting currency: amount / rates[from_currency]
        - into any other currency: amount / rates[from_currency] * rates[to_currency]

    Args:
        amount: Amount to convert.
        from_currency: Currency code of the amount.
        to_currency: Currency code to convert into.
        rates: Rate table relative to the reporting currency.
        reporting_currency: Currency the rate table is based on.

    Returns:
        float: Converted amount.

    Notes:
        - Same currency returns the amount unchanged
        - Empty/missing rate table returns the amount unchanged
        - A missing rate for either currency returns the amount unchanged
        - Never raises for a missing rate; totals may be wrong instead
    """
    if from_currency == to_currency:
        return amount

    if not rates:
        return amount

    rate_from = rates.get(from_currency)
    if not rate_from:
        return amount

    if to_currency == reporting_currency:
        return amount / rate_from

    rate_to = rates.get(to_currency)
    if not rate_to:
        return amount

    amount_in_base = amount / rate_from
    return amount_in_base * rate_to


def to_reporting(
    amount: float,
    currency: Optional[str],
    rates: Optional[RateTable],
    reporting_currency: str = REPORTING_CURRENCY
) -> float:
    """Convert an amount into the reporting currency (a missing currency means the reporting one)."""
    return normalize(
        amount, currency or reporting_currency, reporting_currency, rates, reporting_currency
    )


def trip_total(
    expenses: list[dict],
    rates: Optional[RateTable],
    reporting_currency: str = REPORTING_CURRENCY
) -> float:
    """
    Sum all expense amounts in the reporting currency.

    Args:
        expenses: List of expense dicts with amount and currency.
        rates: Rate table relative to the reporting currency.
        reporting_currency: Currency to total in.

    Returns:
        float: Total normalized spend (0.0 for no expenses).
    """
    total = 0.0
    for expense in expenses:
        total += to_reporting(
            expense["amount"], expense.get("currency"), rates, reporting_currency
        )
    return total
