"""SQLAlchemy metadata registry import for Alembic."""

from hostpilot.models import Booking, Finance, Property, Task, UtilityBill
from hostpilot.models.base import Base

__all__ = ["Base", "Property", "UtilityBill", "Task", "Booking", "Finance"]
