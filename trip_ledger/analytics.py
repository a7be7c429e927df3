"""
Analytics Module

This module provides the spending-by-category breakdown for the trip
ledger and the geometry needed to draw it as a pie chart.

Features:
    - Category-wise expense breakdown in the reporting currency
    - Percentage of total spend per category
    - Pie-chart slices (cumulative fractions, angles, arc end points)

Data Model:
    Input - expenses: list of dicts with:
        - amount: float
        - currency: string
        - category: string

    Output - categories: list of dicts, largest amount first:
        - category: string
        - amount: float
        - percentage: float (0-100)

Functions:
    aggregate_by_category: Group normalized spend by category.
    pie_slices: Convert a category breakdown into pie-chart slices.
"""

import math
from typing import Optional

from trip_ledger.categories import category_color
from trip_ledger.currency import REPORTING_CURRENCY, RateTable, to_reporting


def aggregate_by_category(
    expenses: list[dict],
    rates: Optional[RateTable],
    reporting_currency: str = REPORTING_CURRENCY
) -> list[dict]:
    """
    Group normalized spend by category.

    Args:
        expenses: List of expense dicts with amount, currency, category.
        rates: Rate table relative to the reporting currency.
        reporting_currency: Currency all amounts are normalized into.

    Returns:
        list[dict]: One dict per category present with category, amount
                    and percentage, sorted by amount descending.

    Notes:
        - Percentages are 0 when there is no spend
        - Categories are kept as given; colour lookup handles unknown ones
    """
    totals = {}
    total = 0.0

    for expense in expenses:
        amount = to_reporting(
            expense["amount"], expense.get("currency"), rates, reporting_currency
        )
        category = expense.get("category")
        totals[category] = totals.get(category, 0.0) + amount
        total += amount

    categories = [
        {
            "category": category,
            "amount": amount,
            "percentage": (amount / total) * 100 if total > 0 else 0.0
        }
        for category, amount in totals.items()
    ]
    return sorted(categories, key=lambda c: c["amount"], reverse=True)


def _point_for_fraction(fraction: float) -> tuple[float, float]:
    """Get the (x, y) point on the unit circle for a fraction of a full turn."""
    return (math.cos(2 * math.pi * fraction), math.sin(2 * math.pi * fraction))


def pie_slices(categories: list[dict]) -> list[dict]:
    """
    Convert a category breakdown into pie-chart slices.

    Each slice starts where the previous one ended. A slice covering the
    whole chart has identical start and end points, so it is flagged as
    full_circle and should be drawn as a circle rather than an arc.

    Args:
        categories: Output of aggregate_by_category().

    Returns:
        list[dict]: One slice per category with:
            - category, color
            - start_fraction, end_fraction (0-1)
            - start_angle, end_angle (radians)
            - start_point, end_point ((x, y) on the unit circle)
            - large_arc: True if the slice is more than half the chart
            - full_circle: True if the slice is the whole chart
    """
    slices = []
    cumulative = 0.0

    for entry in categories:
        fraction = entry["percentage"] / 100
        start = cumulative
        cumulative += fraction
        end = cumulative

        slices.append({
            "category": entry["category"],
            "color": category_color(entry["category"]),
            "start_fraction": start,
            "end_fraction": end,
            "start_angle": 2 * math.pi * start,
            "end_angle": 2 * math.pi * end,
            "start_point": _point_for_fraction(start),
            "end_point": _point_for_fraction(end),
            "large_arc": fraction > 0.5,
            "full_circle": fraction == 1
        })

    return slices
