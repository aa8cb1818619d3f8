"""Render grounded data as plain text for the LLM prompt."""

from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal

from hostpilot.cortex.types import DataDomain, GroundedData
from hostpilot.schemas.records import FinanceRecord

NO_DATA_SENTINEL = "NO DATA FOUND - The system could not find any relevant data for this query."

DEFAULT_CURRENCY = "THB"

CURRENCY_SYMBOLS: dict[str, str] = {
    "THB": "฿",
    "USD": "$",
    "AUD": "A$",
    "EUR": "€",
    "GBP": "£",
}


def normalize_for_llm(data: GroundedData) -> str:
    """Return one labeled section per non-empty domain, or the sentinel.

    The output is a pure function of `data`, so identical inputs always
    render identically.
    """

    sections: list[list[str]] = []

    if data.properties:
        lines = ["PROPERTIES DATA:"]
        for item in data.properties:
            details = [f"ID: {item.id}", f"Status: {item.status}"]
            if item.bedrooms is not None:
                details.append(f"Bedrooms: {item.bedrooms}")
            if item.price_per_night is not None:
                details.append(f"Nightly rate: {format_amount(item.price_per_night, item.currency)}")
            details.append(f"Owner: {item.owner_id or 'N/A'}")
            location = f", {item.address}" if item.address else ""
            lines.append(f"- {item.name}{location} ({', '.join(details)})")
        sections.append(_with_truncation_note(lines, data, DataDomain.PROPERTIES))

    if data.utility_bills:
        lines = ["UTILITY BILLS DATA:"]
        for bill in data.utility_bills:
            amount = format_amount(bill.amount, bill.currency) if bill.amount is not None else "not entered"
            proof = "Proof uploaded" if bill.receipt_url else "No proof"
            provider = f" ({bill.provider})" if bill.provider else ""
            lines.append(
                f"- {bill.type.capitalize()} bill{provider} for {format_billing_month(bill.billing_month)} "
                f"(Property ID: {bill.property_id}): Amount {amount}, Status: {bill.status}, "
                f"Due: {format_date(bill.due_date)}, {proof}"
            )
        sections.append(_with_truncation_note(lines, data, DataDomain.UTILITY_BILLS))

    if data.tasks:
        lines = ["TASKS DATA:"]
        for task in data.tasks:
            due = format_date(task.due_date) if task.due_date else "no due date"
            lines.append(
                f"- {task.title} (ID: {task.id}, Type: {task.type}, Status: {task.status}, "
                f"Priority: {task.priority}, Assigned to: {task.assigned_to or 'Unassigned'}, Due: {due})"
            )
        sections.append(_with_truncation_note(lines, data, DataDomain.TASKS))

    if data.bookings:
        lines = ["BOOKINGS DATA:"]
        for booking in data.bookings:
            total = (
                f", Total: {format_amount(booking.total_amount, booking.currency)}"
                if booking.total_amount is not None
                else ""
            )
            lines.append(
                f"- Guest: {booking.guest_name} (Property ID: {booking.property_id}), "
                f"Check-in: {format_date(booking.check_in)}, Check-out: {format_date(booking.check_out)}, "
                f"Guests: {booking.guests}, Status: {booking.status}{total}"
            )
        sections.append(_with_truncation_note(lines, data, DataDomain.BOOKINGS))

    if data.finances:
        lines = ["FINANCE DATA:"]
        if DataDomain.FINANCES in data.truncated:
            lines.append(
                f"- Note: totals cover the {len(data.finances)} most recent transactions only; "
                "more transactions exist, so these are not complete period totals."
            )
        sections.append([*lines, *_finance_summary(data.finances), *_finance_lines(data.finances)])

    if not sections:
        return NO_DATA_SENTINEL
    return "\n\n".join("\n".join(lines) for lines in sections)


def _with_truncation_note(lines: list[str], data: GroundedData, domain: DataDomain) -> list[str]:
    if domain in data.truncated:
        lines.append(f"- Note: only the first {len(lines) - 1} matching records are shown; more exist.")
    return lines


def _finance_summary(records: tuple[FinanceRecord, ...]) -> list[str]:
    """Totals per currency; amounts never pass through float."""

    income: dict[str, Decimal] = defaultdict(Decimal)
    expenses: dict[str, Decimal] = defaultdict(Decimal)
    income_count: dict[str, int] = defaultdict(int)
    expense_count: dict[str, int] = defaultdict(int)
    currencies: list[str] = []

    for record in records:
        currency = (record.currency or DEFAULT_CURRENCY).upper()
        if currency not in currencies:
            currencies.append(currency)
        if record.type == "income":
            income[currency] += record.amount
            income_count[currency] += 1
        elif record.type == "expense":
            expenses[currency] += record.amount
            expense_count[currency] += 1

    lines: list[str] = []
    for currency in currencies:
        if income_count[currency]:
            lines.append(
                f"- Total Income: {format_amount(income[currency], currency)} "
                f"({income_count[currency]} transactions)"
            )
        if expense_count[currency]:
            lines.append(
                f"- Total Expenses: {format_amount(expenses[currency], currency)} "
                f"({expense_count[currency]} transactions)"
            )
        if income_count[currency] and expense_count[currency]:
            lines.append(f"- Net Profit: {format_amount(income[currency] - expenses[currency], currency)}")
    return lines


def _finance_lines(records: tuple[FinanceRecord, ...]) -> list[str]:
    lines = ["Transactions:"]
    for record in records:
        description = f" - {record.description}" if record.description else ""
        lines.append(
            f"- {format_date(record.transaction_date)}: {record.type} / {record.category} "
            f"{format_amount(record.amount, record.currency)} (Property ID: {record.property_id or 'N/A'}, "
            f"Status: {record.status}){description}"
        )
    return lines


def format_amount(amount: Decimal, currency: str | None = None) -> str:
    code = (currency or DEFAULT_CURRENCY).upper()
    symbol = CURRENCY_SYMBOLS.get(code)
    quantized = Decimal(amount).quantize(Decimal("0.01"))
    sign = "-" if quantized < 0 else ""
    digits = f"{abs(quantized):,.2f}"
    return f"{sign}{symbol}{digits}" if symbol else f"{sign}{digits} {code}"


def format_date(value: date | datetime) -> str:
    if isinstance(value, datetime):
        value = value.date()
    return f"{calendar.month_name[value.month]} {value.day}, {value.year}"


def format_billing_month(value: str) -> str:
    """'2025-01' -> 'January 2025'; anything unparseable is shown as stored."""

    year_text, _, month_text = value.partition("-")
    if year_text.isdigit() and month_text.isdigit() and 1 <= int(month_text) <= 12:
        return f"{calendar.month_name[int(month_text)]} {int(year_text)}"
    return value
