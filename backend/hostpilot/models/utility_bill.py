"""Utility bill ORM model."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hostpilot.models.base import Base, CreatedAtMixin, IdMixin


class UtilityBill(Base, IdMixin, CreatedAtMixin):
    """Monthly utility bill for a property."""

    __tablename__ = "utility_bills"

    organization_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    provider: Mapped[str | None] = mapped_column(String(255), nullable=True)
    account_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    currency: Mapped[str] = mapped_column(String(8), default="THB", nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False)
    billing_month: Mapped[str] = mapped_column(String(7), index=True, nullable=False)
    status: Mapped[str] = mapped_column(String(32), default="pending", nullable=False)
    receipt_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
