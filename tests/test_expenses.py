"""Tests for expense records and expense validation."""

from datetime import datetime, timezone

import pytest
from firebase_admin import firestore

from trip_ledger import expenses as expenses_module
from trip_ledger.expenses import ExpenseRecord, add_expense


class TestExpenseRecord:
    """Tests for ExpenseRecord conversion."""

    def test_from_firestore_fields(self):
        """Stored field names and timestamps are read into the record."""
        record = ExpenseRecord.from_dict(
            {
                "amount": 12.5,
                "currency": "GBP",
                "category": "Food",
                "description": "Fish and chips",
                "paidBy": "uid-1",
                "tripId": "trip-1",
                "date": datetime(2024, 5, 3, 18, 30, tzinfo=timezone.utc),
            },
            expense_id="exp-1",
        )

        assert record.expense_id == "exp-1"
        assert record.paid_by == "uid-1"
        assert record.trip_id == "trip-1"
        assert record.date == "2024-05-03"
        assert record.to_dict()["paid_by"] == "uid-1"

    def test_empty_payer_becomes_none(self):
        """An empty paidBy is read as no payer."""
        record = ExpenseRecord.from_dict({"amount": 5, "paidBy": ""})
        assert record.paid_by is None
        assert record.currency == "EUR"
        assert record.category == "Other"


class TestAddExpenseValidation:
    """Validation happens before Firestore is touched."""

    @pytest.fixture(autouse=True)
    def no_db(self, monkeypatch):
        monkeypatch.setattr(expenses_module, "get_db", lambda: None)

    def _add(self, **overrides):
        data = {
            "trip_id": "trip-1",
            "amount": 10.0,
            "currency": "EUR",
            "category": "Food",
            "date": "2024-05-03",
            "paid_by": "A",
            "members": ["A", "B"],
        }
        data.update(overrides)
        return add_expense(**data)

    @pytest.mark.parametrize("overrides, message", [
        ({"amount": 0}, "amount"),
        ({"amount": -3}, "amount"),
        ({"currency": "JPY"}, "currency"),
        ({"category": "Souvenirs"}, "category"),
        ({"date": "03/05/2024"}, "date"),
        ({"paid_by": "Z"}, "paid_by"),
        ({"trip_id": " "}, "trip_id"),
    ])
    def test_rejects_invalid_input(self, overrides, message):
        with pytest.raises(ValueError, match=message):
            self._add(**overrides)

    def test_requires_firestore(self):
        """Valid input without a database raises RuntimeError."""
        with pytest.raises(RuntimeError, match="Firestore is not available"):
            self._add()

    def test_payer_optional(self):
        """An expense without a payer passes validation."""
        with pytest.raises(RuntimeError):
            self._add(paid_by=None)


class FakeNewDocument:
    """Auto-id document reference that records what was written."""

    def __init__(self, doc_id):
        self.id = doc_id
        self.written = None

    def set(self, data):
        self.written = data


class FakeWriteDb:
    def __init__(self):
        self.collections = []
        self.document_ref = FakeNewDocument("exp-new")

    def collection(self, name):
        self.collections.append(name)
        return self

    def document(self):
        return self.document_ref


class TestAddExpenseWrite:
    """Tests for the Firestore write of a valid expense."""

    @pytest.fixture
    def db(self, monkeypatch):
        fake = FakeWriteDb()
        monkeypatch.setattr(expenses_module, "get_db", lambda: fake)
        return fake

    def test_writes_stored_field_names(self, db):
        add_expense(
            trip_id="trip-1",
            amount=25,
            currency="THB",
            category="Transport",
            date="2024-05-03",
            paid_by="A",
            description="  tuk-tuk  ",
            members=["A", "B"],
        )

        written = db.document_ref.written
        assert db.collections == ["expenses"]
        assert written["amount"] == 25.0
        assert isinstance(written["amount"], float)
        assert written["currency"] == "THB"
        assert written["category"] == "Transport"
        assert written["description"] == "tuk-tuk"
        assert written["paidBy"] == "A"
        assert written["tripId"] == "trip-1"
        assert written["date"] == datetime(2024, 5, 3, tzinfo=timezone.utc)
        assert written["createdAt"] is firestore.SERVER_TIMESTAMP

    def test_returns_created_record(self, db):
        record = add_expense(
            trip_id="trip-1",
            amount=12.5,
            currency="EUR",
            category="Food",
            date="2024-05-03",
            description="  lunch ",
        )

        assert record.expense_id == "exp-new"
        assert record.trip_id == "trip-1"
        assert record.amount == 12.5
        assert record.description == "lunch"
        assert record.paid_by is None
        assert record.date == "2024-05-03"

    def test_missing_payer_stored_as_empty_string(self, db):
        add_expense(
            trip_id="trip-1",
            amount=5,
            currency="EUR",
            category="Other",
            date="2024-05-03",
        )

        assert db.document_ref.written["paidBy"] == ""
