"""
Categories Module

This module defines the expense categories used by the trip ledger and the
colour table used to draw them in charts.

Features:
    - Fixed set of expense categories
    - Colour per category for the pie-chart breakdown
    - Total lookups: any unknown key resolves to "Other"

Functions:
    parse_category: Map a raw category string to an ExpenseCategory.
    category_color: Get the chart colour for a category key.
"""

from enum import Enum


class ExpenseCategory(str, Enum):
    """Expense categories offered when recording an expense."""

    FOOD = "Food"
    TRANSPORT = "Transport"
    HOTEL = "Hotel"
    ACTIVITY = "Activity"
    SHOPPING = "Shopping"
    OTHER = "Other"


VALID_CATEGORIES = {category.value for category in ExpenseCategory}

CATEGORY_COLORS = {
    ExpenseCategory.FOOD: "#F97316",       # orange-500
    ExpenseCategory.TRANSPORT: "#3B82F6",  # blue-500
    ExpenseCategory.HOTEL: "#A855F7",      # purple-500
    ExpenseCategory.ACTIVITY: "#10B981",   # emerald-500
    ExpenseCategory.SHOPPING: "#EC4899",   # pink-500
    ExpenseCategory.OTHER: "#6B7280",      # gray-500
}


def parse_category(value) -> ExpenseCategory:
    """
    Map a raw category value to an ExpenseCategory.

    Args:
        value: Category name (e.g. "Food"), an ExpenseCategory, or anything else.

    Returns:
        ExpenseCategory: The matching category, or OTHER when nothing matches.
    """
    if isinstance(value, ExpenseCategory):
        return value
    try:
        return ExpenseCategory(value)
    except ValueError:
        return ExpenseCategory.OTHER


def category_color(value) -> str:
    """Get the hex chart colour for a category key (defaults to the "Other" colour)."""
    return CATEGORY_COLORS[parse_category(value)]
