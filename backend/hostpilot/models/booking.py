"""Guest booking ORM model."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from hostpilot.models.base import Base, CreatedAtMixin, IdMixin


class Booking(Base, IdMixin, CreatedAtMixin):
    """Guest stay at a property."""

    __tablename__ = "bookings"

    organization_id: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    property_id: Mapped[int | None] = mapped_column(
        ForeignKey("properties.id", ondelete="SET NULL"),
        index=True,
        nullable=True,
    )
    guest_name: Mapped[str] = mapped_column(String(255), nullable=False)
    guest_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    check_in: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    guests: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    currency: Mapped[str] = mapped_column(String(8), default="THB", nullable=False)
    status: Mapped[str] = mapped_column(String(32), default="confirmed", nullable=False)
