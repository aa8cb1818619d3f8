"""ORM models package exports."""

from hostpilot.models.booking import Booking
from hostpilot.models.finance import Finance
from hostpilot.models.property import Property
from hostpilot.models.task import Task
from hostpilot.models.utility_bill import UtilityBill

__all__ = [
    "Property",
    "UtilityBill",
    "Task",
    "Booking",
    "Finance",
]
