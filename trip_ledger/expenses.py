"""
Expenses Module

This module handles expense records for the trip ledger: the record type
the calculators consume and the Firestore reads/writes behind it.

Features:
    - Expense record with dict conversion for the calculators
    - Read all expenses of a trip (newest first)
    - Add a validated expense to a trip
    - Multi-currency amounts (converted later, never on write)

Data Model:
    Expense stored at: expenses/{expense_id} (auto id)
    Fields:
        - amount: float (must be > 0)
        - currency: string (EUR, USD, GBP, THB)
        - category: string (Food, Transport, Hotel, Activity, Shopping, Other)
        - description: string
        - paidBy: string (member uid) or empty
        - date: timestamp
        - tripId: string
        - createdAt: server timestamp

Functions:
    add_expense: Add a new expense to a trip.
    get_expenses: Get all expenses for a trip.
"""

from datetime import date as date_type
from datetime import datetime, timezone
from typing import Optional

import structlog
from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from trip_ledger.categories import VALID_CATEGORIES
from trip_ledger.config.firebase_config import get_db
from trip_ledger.currency import REPORTING_CURRENCY, SUPPORTED_CURRENCIES

logger = structlog.get_logger(__name__)

EXPENSES_COLLECTION = "expenses"


def _parse_date(value) -> Optional[str]:
    """
    Convert a stored date into a YYYY-MM-DD string.

    Accepts Firestore timestamps (datetime subclasses), dates and strings.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date_type):
        return value.isoformat()
    return str(value)[:10]


class ExpenseRecord:
    """
    Represents a single expense of a trip.

    Attributes:
        expense_id (str): Firestore document id.
        amount (float): Amount in the expense currency (> 0).
        currency (str): ISO-4217-like currency code.
        category (str): One of the expense categories.
        description (str): Free-text description.
        paid_by (str | None): Member uid of the payer, may be empty.
        date (str | None): Date of the expense (YYYY-MM-DD).
        trip_id (str | None): Owning trip id.
    """

    def __init__(
        self,
        amount: float,
        currency: str = REPORTING_CURRENCY,
        category: str = "Other",
        description: str = "",
        paid_by: Optional[str] = None,
        date: Optional[str] = None,
        trip_id: Optional[str] = None,
        expense_id: Optional[str] = None
    ):
        self.expense_id = expense_id
        self.amount = amount
        self.currency = currency
        self.category = category
        self.description = description
        self.paid_by = paid_by
        self.date = date
        self.trip_id = trip_id

    def to_dict(self) -> dict:
        """Convert expense to the dictionary shape used by the calculators."""
        return {
            "expense_id": self.expense_id,
            "amount": self.amount,
            "currency": self.currency,
            "category": self.category,
            "description": self.description,
            "paid_by": self.paid_by,
            "date": self.date,
            "trip_id": self.trip_id
        }

    @classmethod
    def from_dict(cls, data: dict, expense_id: Optional[str] = None) -> "ExpenseRecord":
        """
        Create an ExpenseRecord from a dictionary.

        Accepts both the calculator keys (paid_by, trip_id) and the stored
        Firestore field names (paidBy, tripId, id).
        """
        return cls(
            expense_id=expense_id or data.get("expense_id") or data.get("id"),
            amount=float(data.get("amount") or 0),
            currency=data.get("currency") or REPORTING_CURRENCY,
            category=data.get("category") or "Other",
            description=data.get("description") or "",
            paid_by=data.get("paid_by", data.get("paidBy")) or None,
            date=_parse_date(data.get("date")),
            trip_id=data.get("trip_id", data.get("tripId"))
        )

    def __repr__(self) -> str:
        """Return string representation of expense."""
        return (
            f"ExpenseRecord(id='{self.expense_id}', amount={self.amount} {self.currency}, "
            f"category='{self.category}', paid_by='{self.paid_by}')"
        )


def _validate_non_empty_string(value: str, field_name: str) -> bool:
    """
    Validate that a string is non-empty.

    Raises:
        ValueError: If string is empty or not a string.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return True


def _validate_date(date_str: str, field_name: str) -> datetime:
    """
    Parse a YYYY-MM-DD date string into a UTC datetime.

    Raises:
        ValueError: If date format is invalid.
    """
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except (TypeError, ValueError):
        raise ValueError(f"{field_name} must be in YYYY-MM-DD format, got: {date_str}")


def add_expense(
    trip_id: str,
    amount: float,
    currency: str,
    category: str,
    date: str,
    paid_by: Optional[str] = None,
    description: str = "",
    members: Optional[list[str]] = None
) -> ExpenseRecord:
    """
    Add a new expense to a trip.

    Args:
        trip_id: The ID of the trip.
        amount: Amount of the expense (must be > 0).
        currency: Currency code of the amount.
        category: Expense category.
        date: Date of the expense (YYYY-MM-DD).
        paid_by: Member uid of the payer (optional).
        description: Optional free-text description.
        members: Trip member uids; when given, paid_by must be one of them.

    Returns:
        ExpenseRecord: The created expense.

    Raises:
        ValueError: If input validation fails.
        RuntimeError: If Firestore is not available.

    Notes:
        - Amount is stored in its own currency; conversion happens on read
        - An expense without a payer is allowed
    """
    _validate_non_empty_string(trip_id, "trip_id")
    expense_date = _validate_date(date, "date")

    if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
        raise ValueError(f"amount must be a positive number, got: {amount}")

    if currency not in SUPPORTED_CURRENCIES:
        raise ValueError(f"currency must be one of {SUPPORTED_CURRENCIES}, got: {currency}")

    if category not in VALID_CATEGORIES:
        raise ValueError(f"category must be one of {sorted(VALID_CATEGORIES)}, got: {category}")

    if paid_by and members is not None and paid_by not in members:
        raise ValueError(f"paid_by '{paid_by}' is not a member of trip {trip_id}")

    db = get_db()
    if db is None:
        raise RuntimeError("Firestore is not available")

    doc_ref = db.collection(EXPENSES_COLLECTION).document()
    doc_ref.set({
        "amount": float(amount),
        "currency": currency,
        "category": category,
        "description": description.strip() if description else "",
        "paidBy": paid_by or "",
        "date": expense_date,
        "tripId": trip_id,
        "createdAt": firestore.SERVER_TIMESTAMP
    })
    logger.info("expense_added", trip_id=trip_id, expense_id=doc_ref.id)

    return ExpenseRecord(
        expense_id=doc_ref.id,
        amount=float(amount),
        currency=currency,
        category=category,
        description=description.strip() if description else "",
        paid_by=paid_by or None,
        date=expense_date.date().isoformat(),
        trip_id=trip_id
    )


def get_expenses(trip_id: str) -> list[ExpenseRecord]:
    """
    Get all expenses for a trip, newest first.

    Args:
        trip_id: The ID of the trip.

    Returns:
        list[ExpenseRecord]: List of all expenses for the trip.

    Raises:
        ValueError: If trip_id is invalid.
        RuntimeError: If Firestore is not available.
    """
    _validate_non_empty_string(trip_id, "trip_id")

    db = get_db()
    if db is None:
        raise RuntimeError("Firestore is not available")

    docs = db.collection(EXPENSES_COLLECTION) \
             .where(filter=FieldFilter("tripId", "==", trip_id)) \
             .order_by("date", direction=firestore.Query.DESCENDING) \
             .stream()

    return [ExpenseRecord.from_dict(doc.to_dict(), expense_id=doc.id) for doc in docs]
