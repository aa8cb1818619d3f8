"""Typed intermediate values passed between Captain Cortex pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import date
from enum import Enum
from typing import Any, Generic, TypeVar

from hostpilot.schemas.records import (
    BookingRecord,
    FinanceRecord,
    PropertyRecord,
    TaskRecord,
    UtilityBillRecord,
)

T = TypeVar("T")


class QueryType(str, Enum):
    """Closed set of question categories."""

    PROPERTY = "property_query"
    UTILITY = "utility_query"
    TASK = "task_query"
    BOOKING = "booking_query"
    FINANCE = "finance_query"
    UNKNOWN = "unknown"


class DataDomain(str, Enum):
    """Tenant data domains, one connector each."""

    PROPERTIES = "properties"
    UTILITY_BILLS = "utility_bills"
    TASKS = "tasks"
    BOOKINGS = "bookings"
    FINANCES = "finances"


@dataclass(frozen=True, slots=True)
class DetectedIntent:
    """Question category with a confidence in [0, 1]."""

    type: QueryType
    confidence: float


@dataclass(frozen=True, slots=True)
class ExtractedEntities:
    """Structured fields pulled out of a question; unset fields stay None."""

    property_name: str | None = None
    property_id: int | None = None
    utility_type: str | None = None
    status: str | None = None
    month: int | None = None
    year: int | None = None
    date_from: date | None = None
    date_to: date | None = None
    finance_type: str | None = None

    def populated(self) -> dict[str, Any]:
        """Return only the fields that were found."""

        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }


@dataclass(frozen=True)
class ConnectorResult(Generic[T]):
    """Outcome of one connector invocation."""

    route: str
    params: dict[str, Any]
    success: bool
    latency_ms: float
    data: list[T] | None = None
    truncated: bool = False


@dataclass(frozen=True, slots=True)
class SourceRecord:
    """Provenance for one connector call, without its payload."""

    route: str
    params: dict[str, Any]
    success: bool
    latency_ms: float
    truncated: bool = False


@dataclass(frozen=True, slots=True)
class GroundingMetadata:
    sources: tuple[SourceRecord, ...] = ()
    total_latency_ms: float = 0.0
    cache_hit: bool = False


@dataclass(frozen=True, slots=True)
class GroundedData:
    """Tenant data fetched for one question.

    A domain field is set only when its connector ran, succeeded, and returned
    at least one record. "Not invoked", "failed" and "empty" all leave it None.
    `truncated` names the domains whose rows were cut off at the row cap.
    """

    properties: tuple[PropertyRecord, ...] | None = None
    utility_bills: tuple[UtilityBillRecord, ...] | None = None
    tasks: tuple[TaskRecord, ...] | None = None
    bookings: tuple[BookingRecord, ...] | None = None
    finances: tuple[FinanceRecord, ...] | None = None
    metadata: GroundingMetadata = field(default_factory=GroundingMetadata)
    truncated: frozenset[DataDomain] = frozenset()

    def record_counts(self) -> dict[str, int]:
        return {domain.value: len(getattr(self, domain.value) or ()) for domain in DataDomain}


@dataclass(frozen=True, slots=True)
class GroundingOutcome:
    """Grounded data plus the entities as resolved during grounding."""

    entities: ExtractedEntities
    data: GroundedData
