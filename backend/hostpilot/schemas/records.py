"""Read-only domain records returned by the grounding connectors."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)


class PropertyRecord(_Record):
    """Serialized property."""

    id: int
    organization_id: str
    name: str
    address: str = ""
    status: str
    bedrooms: int | None = None
    bathrooms: int | None = None
    max_guests: int | None = None
    price_per_night: Decimal | None = None
    currency: str
    owner_id: str | None = None


class UtilityBillRecord(_Record):
    """Serialized utility bill."""

    id: int
    organization_id: str
    property_id: int
    type: str
    provider: str | None = None
    amount: Decimal | None = None
    currency: str
    due_date: date
    billing_month: str
    status: str
    receipt_url: str | None = None


class TaskRecord(_Record):
    """Serialized task."""

    id: int
    organization_id: str
    property_id: int | None = None
    title: str
    type: str
    status: str
    priority: str
    assigned_to: str | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None


class BookingRecord(_Record):
    """Serialized booking."""

    id: int
    organization_id: str
    property_id: int | None = None
    guest_name: str
    check_in: date
    check_out: date
    guests: int
    total_amount: Decimal | None = None
    currency: str
    status: str


class FinanceRecord(_Record):
    """Serialized finance ledger line."""

    id: int
    organization_id: str
    property_id: int | None = None
    type: str
    category: str
    amount: Decimal
    currency: str
    description: str | None = None
    transaction_date: date
    status: str
