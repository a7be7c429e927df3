"""Tests for report formatting."""

import pytest

from trip_ledger.report import build_report_html, format_currency, format_percentage


class TestFormatting:

    @pytest.mark.parametrize("amount, expected", [
        (1234.5, "€1,234.50"),
        (0.005, "€0.01"),
        (-10, "-€10.00"),
    ])
    def test_format_currency(self, amount, expected):
        assert format_currency(amount) == expected

    def test_format_currency_signed(self):
        assert format_currency(50, "$", signed=True) == "+$50.00"

    def test_format_percentage(self):
        assert format_percentage(76.923) == "76.9%"


class TestReportHtml:

    def test_contains_balances_and_settlements(self):
        html = build_report_html(
            trip_name="Rome <2024>",
            balances=[
                {"uid": "A", "name": "Alice", "paid": 30.0, "balance": 20.0},
                {"uid": "B", "name": "Bob", "paid": 0.0, "balance": -20.0},
            ],
            settlements=[{"from": "Bob", "to": "Alice", "amount": 20.0}],
            categories=[{"category": "Food", "amount": 30.0, "percentage": 100.0}],
            total=30.0,
        )

        assert "Rome &lt;2024&gt;" in html
        assert "+€20.00" in html
        assert "<strong>Bob</strong> pays <strong>Alice</strong> €20.00" in html
        assert "100.0%" in html

    def test_empty_trip(self):
        html = build_report_html("Empty", [], [], [], 0.0, currency="CHF")

        assert "Everyone is settled up." in html
        assert "No expenses recorded" in html
        assert "CHF 0.00" in html
