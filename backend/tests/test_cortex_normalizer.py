"""Tests for rendering grounded data as LLM context."""

from __future__ import annotations

import unittest
from datetime import date, datetime, timezone
from decimal import Decimal

from hostpilot.cortex.normalizer import NO_DATA_SENTINEL, format_amount, normalize_for_llm
from hostpilot.cortex.types import DataDomain, GroundedData, GroundingMetadata, SourceRecord
from hostpilot.schemas.records import (
    BookingRecord,
    FinanceRecord,
    PropertyRecord,
    TaskRecord,
    UtilityBillRecord,
)

ORG = "org-samui"


def _finance(record_id: int, kind: str, amount: str, currency: str = "THB") -> FinanceRecord:
    return FinanceRecord(
        id=record_id,
        organization_id=ORG,
        property_id=1,
        type=kind,
        category="general",
        amount=Decimal(amount),
        currency=currency,
        transaction_date=date(2025, 1, 10),
        status="paid",
    )


class NormalizerTests(unittest.TestCase):
    def test_empty_data_is_exact_sentinel(self) -> None:
        self.assertEqual(
            normalize_for_llm(GroundedData()),
            "NO DATA FOUND - The system could not find any relevant data for this query.",
        )
        self.assertEqual(NO_DATA_SENTINEL, normalize_for_llm(GroundedData()))

    def test_failed_sources_alone_render_sentinel(self) -> None:
        data = GroundedData(
            metadata=GroundingMetadata(
                sources=(SourceRecord("tasks.fetch", {"organization_id": ORG}, False, 1.5),),
                total_latency_ms=2.0,
            )
        )

        self.assertEqual(normalize_for_llm(data), NO_DATA_SENTINEL)

    def test_sections_dates_and_amounts(self) -> None:
        data = GroundedData(
            properties=(
                PropertyRecord(id=1, organization_id=ORG, name="Villa Aruna", status="active", currency="THB"),
            ),
            utility_bills=(
                UtilityBillRecord(
                    id=7,
                    organization_id=ORG,
                    property_id=1,
                    type="electricity",
                    amount=Decimal("2450"),
                    currency="THB",
                    due_date=date(2025, 2, 5),
                    billing_month="2025-01",
                    status="paid",
                    receipt_url="https://files.example.com/r.pdf",
                ),
            ),
            tasks=(
                TaskRecord(
                    id=3,
                    organization_id=ORG,
                    property_id=1,
                    title="Pool cleaning",
                    type="cleaning",
                    status="pending",
                    priority="medium",
                    due_date=datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc),
                ),
            ),
            bookings=(
                BookingRecord(
                    id=4,
                    organization_id=ORG,
                    property_id=1,
                    guest_name="John Smith",
                    check_in=date(2025, 1, 10),
                    check_out=date(2025, 1, 15),
                    guests=4,
                    currency="THB",
                    status="confirmed",
                ),
            ),
        )

        text = normalize_for_llm(data)

        self.assertTrue(text.startswith("PROPERTIES DATA:\n- Villa Aruna"))
        self.assertIn("UTILITY BILLS DATA:", text)
        self.assertIn("Electricity bill for January 2025", text)
        self.assertIn("Amount ฿2,450.00", text)
        self.assertIn("Proof uploaded", text)
        self.assertIn("TASKS DATA:\n- Pool cleaning (ID: 3", text)
        self.assertIn("Assigned to: Unassigned", text)
        self.assertIn("Due: January 15, 2025", text)
        self.assertIn("Check-in: January 10, 2025", text)
        self.assertNotIn("FINANCE DATA:", text)
        self.assertLess(text.index("PROPERTIES DATA:"), text.index("BOOKINGS DATA:"))

    def test_finance_totals_use_exact_decimal_arithmetic(self) -> None:
        data = GroundedData(
            finances=(
                _finance(1, "income", "10000000000000000.10"),
                _finance(2, "income", "0.20"),
                _finance(3, "expense", "0.10"),
            )
        )

        text = normalize_for_llm(data)

        self.assertIn("- Total Income: ฿10,000,000,000,000,000.30 (2 transactions)", text)
        self.assertIn("- Total Expenses: ฿0.10 (1 transactions)", text)
        self.assertIn("- Net Profit: ฿10,000,000,000,000,000.20", text)
        self.assertIn("Transactions:", text)

    def test_net_profit_needs_both_income_and_expenses(self) -> None:
        text = normalize_for_llm(GroundedData(finances=(_finance(1, "income", "100.00"),)))

        self.assertIn("Total Income", text)
        self.assertNotIn("Net Profit", text)

    def test_totals_are_kept_per_currency(self) -> None:
        text = normalize_for_llm(
            GroundedData(finances=(_finance(1, "income", "100"), _finance(2, "income", "50", currency="USD")))
        )

        self.assertIn("Total Income: ฿100.00", text)
        self.assertIn("Total Income: $50.00", text)

    def test_capped_finances_are_labelled_as_partial_totals(self) -> None:
        data = GroundedData(
            finances=(_finance(1, "income", "100"), _finance(2, "income", "100")),
            truncated=frozenset({DataDomain.FINANCES}),
        )

        text = normalize_for_llm(data)

        self.assertIn(
            "FINANCE DATA:\n- Note: totals cover the 2 most recent transactions only; "
            "more transactions exist, so these are not complete period totals.\n- Total Income: ฿200.00",
            text,
        )

    def test_complete_finances_carry_no_note(self) -> None:
        text = normalize_for_llm(GroundedData(finances=(_finance(1, "income", "100"),)))

        self.assertNotIn("Note:", text)

    def test_capped_bookings_are_labelled(self) -> None:
        booking = BookingRecord(
            id=4,
            organization_id=ORG,
            property_id=1,
            guest_name="John Smith",
            check_in=date(2025, 1, 10),
            check_out=date(2025, 1, 15),
            guests=4,
            currency="THB",
            status="confirmed",
        )

        text = normalize_for_llm(GroundedData(bookings=(booking,), truncated=frozenset({DataDomain.BOOKINGS})))

        self.assertTrue(text.endswith("- Note: only the first 1 matching records are shown; more exist."))

    def test_output_is_deterministic(self) -> None:
        data = GroundedData(finances=(_finance(1, "income", "100"), _finance(2, "expense", "40")))

        self.assertEqual(normalize_for_llm(data), normalize_for_llm(data))

    def test_format_amount(self) -> None:
        self.assertEqual(format_amount(Decimal("1234.5"), "THB"), "฿1,234.50")
        self.assertEqual(format_amount(Decimal("-20"), "EUR"), "-€20.00")
        self.assertEqual(format_amount(Decimal("1000"), "SGD"), "1,000.00 SGD")
        self.assertEqual(format_amount(Decimal("5"), None), "฿5.00")


if __name__ == "__main__":
    unittest.main()
