"""
Report Module

This module formats trip-ledger results for display and exports them as a
PDF report.

Features:
    - Currency and percentage formatting (2-decimal, half-up rounding)
    - HTML report with balances, settlements and category breakdown
    - HTML to PDF conversion using xhtml2pdf

Functions:
    format_currency: Format an amount with a currency symbol.
    format_percentage: Format a percentage with one decimal.
    build_report_html: Build the HTML of a trip report.
    render_pdf: Convert report HTML into PDF bytes.

Exceptions:
    ReportRenderError: PDF rendering failed.
"""

import io
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from html import escape

from xhtml2pdf import pisa


class ReportRenderError(Exception):
    """Raised when the PDF report cannot be rendered."""


CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£", "THB": "฿"}


def _round_decimal(value: float, places: str = "0.01") -> float:
    """Round a value half-up to the given places and convert to float."""
    return float(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def format_currency(amount: float, symbol: str = "€", signed: bool = False) -> str:
    """
    Format a monetary amount with a currency symbol.

    Args:
        amount: The amount to format.
        symbol: Currency symbol (default: €).
        signed: Prefix non-negative amounts with "+".

    Returns:
        str: Formatted string like "€1,234.56", "+€50.00" or "-€10.00".
    """
    rounded = _round_decimal(amount)
    sign = "-" if rounded < 0 else ("+" if signed else "")
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def format_percentage(value: float) -> str:
    """Format a percentage like "42.5%"."""
    return f"{_round_decimal(value, '0.1'):.1f}%"


def build_report_html(
    trip_name: str,
    balances: list[dict],
    settlements: list[dict],
    categories: list[dict],
    total: float,
    currency: str = "EUR"
) -> str:
    """
    Build the HTML of a trip report.

    Args:
        trip_name: Display name of the trip.
        balances: Output of compute_balances().
        settlements: Output of compute_settlements().
        categories: Output of aggregate_by_category().
        total: Total normalized spend.
        currency: Reporting currency code.

    Returns:
        str: Complete HTML document.
    """
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")

    balance_rows = "".join(
        f"<tr><td>{escape(b['name'])}</td>"
        f"<td>{format_currency(b['paid'], symbol)}</td>"
        f"<td>{format_currency(b['balance'], symbol, signed=True)}</td></tr>"
        for b in balances
    ) or '<tr><td colspan="3">No members</td></tr>'

    settlement_lines = "<br>".join(
        f"<strong>{escape(str(s['from']))}</strong> pays "
        f"<strong>{escape(str(s['to']))}</strong> {format_currency(s['amount'], symbol)}"
        for s in settlements
    ) or "<p>Everyone is settled up.</p>"

    category_rows = "".join(
        f"<tr><td>{escape(str(c['category']))}</td>"
        f"<td>{format_currency(c['amount'], symbol)}</td>"
        f"<td>{format_percentage(c['percentage'])}</td></tr>"
        for c in categories
    ) or '<tr><td colspan="3">No expenses recorded</td></tr>'

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <style>
            body {{ font-family: Arial, sans-serif; padding: 20px; color: #333; }}
            h1 {{ color: #3B82F6; border-bottom: 2px solid #3B82F6; padding-bottom: 10px; }}
            h2 {{ color: #444; margin-top: 25px; }}
            table {{ width: 100%; border-collapse: collapse; margin: 15px 0; }}
            th, td {{ border: 1px solid #ddd; padding: 10px; text-align: left; }}
            th {{ background: #3B82F6; color: white; }}
            .footer {{ margin-top: 30px; text-align: center; color: #888; font-size: 12px; }}
        </style>
    </head>
    <body>
        <h1>{escape(trip_name)}</h1>
        <p><strong>Generated:</strong> {date.today().strftime('%B %d, %Y')}</p>
        <p><strong>Total spent:</strong> {format_currency(total, symbol)}</p>

        <h2>Balances</h2>
        <table>
            <tr><th>Member</th><th>Paid</th><th>Balance</th></tr>
            {balance_rows}
        </table>

        <h2>Who Pays Whom</h2>
        {settlement_lines}

        <h2>Spending by Category</h2>
        <table>
            <tr><th>Category</th><th>Amount</th><th>Share</th></tr>
            {category_rows}
        </table>

        <div class="footer">
            <p>Generated by Trip Ledger</p>
        </div>
    </body>
    </html>
    """


def render_pdf(html_content: str) -> bytes:
    """
    Convert report HTML into PDF bytes.

    Raises:
        ReportRenderError: If xhtml2pdf reports an error.
    """
    pdf_buffer = io.BytesIO()
    result = pisa.CreatePDF(io.StringIO(html_content), dest=pdf_buffer)
    if result.err:
        raise ReportRenderError("PDF generation failed")
    return pdf_buffer.getvalue()
