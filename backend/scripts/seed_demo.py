"""Seed a demo tenant with properties, bills, tasks, bookings and finances.

Usage (from repository root):
    python backend/scripts/seed_demo.py

Usage (from backend directory):
    python scripts/seed_demo.py
    # or
    python -m scripts.seed_demo
"""

from __future__ import annotations

import argparse
import sys
from datetime import date, datetime, timezone
from decimal import Decimal
from pathlib import Path

from sqlalchemy import delete

# Make `hostpilot` imports work whether the script is run from repo root or backend/.
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from hostpilot.db.session import SessionLocal
from hostpilot.models import Booking, Finance, Property, Task, UtilityBill
from hostpilot.services.cortex import answer_question


DEFAULT_ORGANIZATION_ID = "demo-org"


def reset_organization(db, organization_id: str) -> None:
    """Remove existing records for the demo tenant."""

    for model in (Finance, Booking, Task, UtilityBill, Property):
        db.execute(delete(model).where(model.organization_id == organization_id))
    db.commit()


def seed_organization(db, organization_id: str) -> dict[str, int]:
    """Insert a deterministic portfolio and return per-table row counts."""

    aruna = Property(
        organization_id=organization_id,
        name="Villa Aruna",
        address="Bophut, Koh Samui",
        status="active",
        bedrooms=4,
        bathrooms=4,
        max_guests=8,
        price_per_night=Decimal("12500.00"),
        currency="THB",
        owner_id="owner-aruna",
    )
    sunset = Property(
        organization_id=organization_id,
        name="Villa Sunset",
        address="Chaweng, Koh Samui",
        status="active",
        bedrooms=3,
        bathrooms=2,
        max_guests=6,
        price_per_night=Decimal("8900.00"),
        currency="THB",
        owner_id="owner-sunset",
    )
    db.add_all([aruna, sunset])
    db.flush()

    bills = [
        UtilityBill(
            organization_id=organization_id,
            property_id=aruna.id,
            type="electricity",
            provider="PEA",
            amount=Decimal("2450.00"),
            currency="THB",
            due_date=date(2025, 2, 5),
            billing_month="2025-01",
            status="paid",
            receipt_url="https://files.example.com/receipts/aruna-2025-01-electricity.pdf",
        ),
        UtilityBill(
            organization_id=organization_id,
            property_id=aruna.id,
            type="water",
            provider="PWA",
            amount=Decimal("680.00"),
            currency="THB",
            due_date=date(2025, 3, 5),
            billing_month="2025-02",
            status="pending",
        ),
        UtilityBill(
            organization_id=organization_id,
            property_id=sunset.id,
            type="internet",
            provider="3BB",
            amount=Decimal("1200.00"),
            currency="THB",
            due_date=date(2025, 2, 1),
            billing_month="2025-01",
            status="overdue",
        ),
    ]
    tasks = [
        Task(
            organization_id=organization_id,
            property_id=aruna.id,
            title="Pool cleaning",
            type="cleaning",
            status="pending",
            priority="medium",
            assigned_to="Somchai",
            due_date=datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc),
        ),
        Task(
            organization_id=organization_id,
            property_id=aruna.id,
            title="Repair bedroom AC",
            type="maintenance",
            status="in-progress",
            priority="high",
            assigned_to="Niran",
            due_date=datetime(2025, 1, 20, 14, 0, tzinfo=timezone.utc),
            estimated_cost=Decimal("3500.00"),
        ),
        Task(
            organization_id=organization_id,
            property_id=sunset.id,
            title="Garden trim",
            type="maintenance",
            status="completed",
            priority="low",
            due_date=datetime(2025, 1, 8, 8, 0, tzinfo=timezone.utc),
            completed_at=datetime(2025, 1, 8, 11, 30, tzinfo=timezone.utc),
        ),
    ]
    bookings = [
        Booking(
            organization_id=organization_id,
            property_id=aruna.id,
            guest_name="John Smith",
            guest_email="john.smith@example.com",
            check_in=date(2025, 1, 10),
            check_out=date(2025, 1, 15),
            guests=4,
            total_amount=Decimal("62500.00"),
            currency="THB",
            status="confirmed",
        ),
        Booking(
            organization_id=organization_id,
            property_id=sunset.id,
            guest_name="Maria Garcia",
            check_in=date(2025, 2, 1),
            check_out=date(2025, 2, 5),
            guests=2,
            total_amount=Decimal("35600.00"),
            currency="THB",
            status="confirmed",
        ),
    ]
    db.add_all([*bills, *tasks, *bookings])
    db.flush()

    finances = [
        Finance(
            organization_id=organization_id,
            property_id=aruna.id,
            booking_id=bookings[0].id,
            type="income",
            source="booking",
            category="rental",
            amount=Decimal("62500.00"),
            currency="THB",
            description="Stay of John Smith",
            transaction_date=date(2025, 1, 10),
            status="paid",
        ),
        Finance(
            organization_id=organization_id,
            property_id=aruna.id,
            type="expense",
            category="utilities",
            amount=Decimal("2450.00"),
            currency="THB",
            description="January electricity",
            transaction_date=date(2025, 2, 3),
            status="paid",
        ),
        Finance(
            organization_id=organization_id,
            property_id=aruna.id,
            type="expense",
            category="maintenance",
            amount=Decimal("3500.00"),
            currency="THB",
            description="Bedroom AC repair",
            transaction_date=date(2025, 1, 21),
            status="pending",
        ),
    ]
    db.add_all(finances)
    db.commit()

    return {
        "properties": 2,
        "utility_bills": len(bills),
        "tasks": len(tasks),
        "bookings": len(bookings),
        "finances": len(finances),
    }


def parse_args() -> argparse.Namespace:
    """Parse script CLI arguments."""

    parser = argparse.ArgumentParser(description="Seed a demo HostPilot tenant.")
    parser.add_argument(
        "--organization-id",
        default=DEFAULT_ORGANIZATION_ID,
        help=f"Organization ID to seed (default: {DEFAULT_ORGANIZATION_ID})",
    )
    parser.add_argument(
        "--no-reset",
        action="store_true",
        help="Do not delete existing records for the organization before seeding.",
    )
    parser.add_argument(
        "--ask",
        metavar="QUESTION",
        help="Ask Captain Cortex a question against the seeded tenant after seeding.",
    )
    return parser.parse_args()


def main() -> None:
    """Seed demo data and print a short summary."""

    args = parse_args()
    organization_id: str = args.organization_id

    with SessionLocal() as db:
        if not args.no_reset:
            reset_organization(db, organization_id)
        counts = seed_organization(db, organization_id)
        result = answer_question(db, args.ask, organization_id) if args.ask else None

    print("Seed complete")
    print(f"organization_id={organization_id}")
    for table, count in counts.items():
        print(f"{table}_created={count}")
    print()
    if result is not None:
        print(f"intent={result.intent} confidence={result.confidence}")
        for source in result.sources:
            print(f"source={source.route} params={source.params}")
        print(result.answer)
        print()
    print("Try:")
    print(
        "  curl -X POST http://localhost:8000/api/cortex/ask "
        f"-H 'X-Organization-Id: {organization_id}' -H 'X-User-Role: admin' "
        "-H 'Content-Type: application/json' "
        "-d '{\"question\": \"What is the Villa Aruna utility bill status for January 2025?\"}'"
    )


if __name__ == "__main__":
    main()
