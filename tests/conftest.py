"""Shared fixtures for Trip Ledger tests."""

import pytest


@pytest.fixture
def rates():
    """Rate table relative to EUR."""
    return {"EUR": 1.0, "USD": 1.1, "GBP": 0.85, "THB": 38.5}


@pytest.fixture
def names():
    return {"A": "Alice", "B": "Bob", "C": "Carla"}


def make_expense(amount, paid_by=None, currency="EUR", category="Food"):
    """Build an expense dict in the shape the calculators consume."""
    return {
        "amount": amount,
        "currency": currency,
        "category": category,
        "paid_by": paid_by,
    }
