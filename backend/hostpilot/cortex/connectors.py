"""Tenant-scoped read connectors, one per data domain.

Every connector filters by `organization_id`, times itself, caps its rows, and
converts persistence and record validation errors into an unsuccessful
`ConnectorResult` instead of raising.
"""

from __future__ import annotations

import calendar
import logging
from collections.abc import Callable
from datetime import date, datetime, time, timezone
from time import perf_counter
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import Select, extract, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hostpilot.cortex.types import ConnectorResult, DataDomain
from hostpilot.models.booking import Booking
from hostpilot.models.finance import Finance
from hostpilot.models.property import Property
from hostpilot.models.task import Task
from hostpilot.models.utility_bill import UtilityBill
from hostpilot.schemas.records import (
    BookingRecord,
    FinanceRecord,
    PropertyRecord,
    TaskRecord,
    UtilityBillRecord,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 50

ROUTES: dict[DataDomain, str] = {
    DataDomain.PROPERTIES: "properties.fetch",
    DataDomain.UTILITY_BILLS: "utility_bills.fetch",
    DataDomain.TASKS: "tasks.fetch",
    DataDomain.BOOKINGS: "bookings.fetch",
    DataDomain.FINANCES: "finances.fetch",
}

RecordT = TypeVar("RecordT", bound=BaseModel)


def fetch_properties(
    db: Session,
    *,
    organization_id: str,
    name: str | None = None,
    property_id: int | None = None,
    limit: int = DEFAULT_LIMIT,
) -> ConnectorResult[PropertyRecord]:
    """Return properties matching a case-insensitive name fragment."""

    params = _params(organization_id=organization_id, name=name, property_id=property_id)

    def _query() -> Select:
        stmt = select(Property).where(Property.organization_id == organization_id)
        if property_id is not None:
            stmt = stmt.where(Property.id == property_id)
        if name:
            stmt = stmt.where(Property.name.ilike(_contains(name), escape="\\"))
        return stmt.order_by(Property.name.asc(), Property.id.asc())

    return _run(db, DataDomain.PROPERTIES, params, _query, PropertyRecord, limit)


def fetch_utility_bills(
    db: Session,
    *,
    organization_id: str,
    property_id: int | None = None,
    property_name: str | None = None,
    utility_type: str | None = None,
    status: str | None = None,
    month: int | None = None,
    year: int | None = None,
    limit: int = DEFAULT_LIMIT,
) -> ConnectorResult[UtilityBillRecord]:
    """Return utility bills, optionally narrowed by property, type, status and billing month."""

    params = _params(
        organization_id=organization_id,
        property_id=property_id,
        property_name=property_name if property_id is None else None,
        utility_type=utility_type,
        status=status,
        month=month,
        year=year,
    )

    def _query() -> Select:
        stmt = select(UtilityBill).where(UtilityBill.organization_id == organization_id)
        stmt = _scope_to_property(stmt, UtilityBill.property_id, organization_id, property_id, property_name)
        if utility_type:
            stmt = stmt.where(UtilityBill.type == utility_type.lower())
        if status:
            stmt = stmt.where(UtilityBill.status == status.lower())
        if month is not None and year is not None:
            stmt = stmt.where(UtilityBill.billing_month == f"{year:04d}-{month:02d}")
        elif year is not None:
            stmt = stmt.where(UtilityBill.billing_month.like(f"{year:04d}-%"))
        elif month is not None:
            stmt = stmt.where(UtilityBill.billing_month.like(f"%-{month:02d}"))
        return stmt.order_by(UtilityBill.billing_month.desc(), UtilityBill.id.asc())

    return _run(db, DataDomain.UTILITY_BILLS, params, _query, UtilityBillRecord, limit)


def fetch_tasks(
    db: Session,
    *,
    organization_id: str,
    property_id: int | None = None,
    property_name: str | None = None,
    status: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = DEFAULT_LIMIT,
) -> ConnectorResult[TaskRecord]:
    """Return tasks filtered by status, property and due-date window."""

    params = _params(
        organization_id=organization_id,
        property_id=property_id,
        property_name=property_name if property_id is None else None,
        status=status,
        date_from=date_from,
        date_to=date_to,
    )

    def _query() -> Select:
        stmt = select(Task).where(Task.organization_id == organization_id)
        stmt = _scope_to_property(stmt, Task.property_id, organization_id, property_id, property_name)
        if status:
            stmt = stmt.where(Task.status == status.lower())
        if date_from is not None:
            stmt = stmt.where(Task.due_date >= datetime.combine(date_from, time.min, tzinfo=timezone.utc))
        if date_to is not None:
            stmt = stmt.where(Task.due_date <= datetime.combine(date_to, time.max, tzinfo=timezone.utc))
        return stmt.order_by(Task.due_date.is_(None), Task.due_date.asc(), Task.id.asc())

    return _run(db, DataDomain.TASKS, params, _query, TaskRecord, limit)


def fetch_bookings(
    db: Session,
    *,
    organization_id: str,
    property_id: int | None = None,
    property_name: str | None = None,
    status: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = DEFAULT_LIMIT,
) -> ConnectorResult[BookingRecord]:
    """Return bookings whose stay overlaps the requested window."""

    params = _params(
        organization_id=organization_id,
        property_id=property_id,
        property_name=property_name if property_id is None else None,
        status=status,
        date_from=date_from,
        date_to=date_to,
    )

    def _query() -> Select:
        stmt = select(Booking).where(Booking.organization_id == organization_id)
        stmt = _scope_to_property(stmt, Booking.property_id, organization_id, property_id, property_name)
        if status:
            stmt = stmt.where(Booking.status == status.lower())
        if date_from is not None:
            stmt = stmt.where(Booking.check_out >= date_from)
        if date_to is not None:
            stmt = stmt.where(Booking.check_in <= date_to)
        return stmt.order_by(Booking.check_in.asc(), Booking.id.asc())

    return _run(db, DataDomain.BOOKINGS, params, _query, BookingRecord, limit)


def fetch_finances(
    db: Session,
    *,
    organization_id: str,
    property_id: int | None = None,
    property_name: str | None = None,
    finance_type: str | None = None,
    status: str | None = None,
    month: int | None = None,
    year: int | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    limit: int = DEFAULT_LIMIT,
) -> ConnectorResult[FinanceRecord]:
    """Return finance ledger lines for a period, type and property."""

    params = _params(
        organization_id=organization_id,
        property_id=property_id,
        property_name=property_name if property_id is None else None,
        finance_type=finance_type,
        status=status,
        month=month,
        year=year,
        date_from=date_from,
        date_to=date_to,
    )

    def _query() -> Select:
        stmt = select(Finance).where(Finance.organization_id == organization_id)
        stmt = _scope_to_property(stmt, Finance.property_id, organization_id, property_id, property_name)
        if finance_type:
            stmt = stmt.where(Finance.type == finance_type.lower())
        if status:
            stmt = stmt.where(Finance.status == status.lower())
        if year is not None:
            first_month, last_month = (month, month) if month is not None else (1, 12)
            stmt = stmt.where(
                Finance.transaction_date >= date(year, first_month, 1),
                Finance.transaction_date
                <= date(year, last_month, calendar.monthrange(year, last_month)[1]),
            )
        elif month is not None:
            stmt = stmt.where(extract("month", Finance.transaction_date) == month)
        if date_from is not None:
            stmt = stmt.where(Finance.transaction_date >= date_from)
        if date_to is not None:
            stmt = stmt.where(Finance.transaction_date <= date_to)
        return stmt.order_by(Finance.transaction_date.desc(), Finance.id.asc())

    return _run(db, DataDomain.FINANCES, params, _query, FinanceRecord, limit)


def _run(
    db: Session,
    domain: DataDomain,
    params: dict[str, Any],
    build_query: Callable[[], Select],
    record_type: type[RecordT],
    limit: int,
) -> ConnectorResult[RecordT]:
    """Execute a connector query capped at `limit` rows.

    One extra row is fetched so a cut-off result is reported as `truncated`
    instead of passing for the complete set.
    """

    route = ROUTES[domain]
    started = perf_counter()
    try:
        rows = list(db.scalars(build_query().limit(limit + 1)))
        truncated = len(rows) > limit
        records = [record_type.model_validate(row) for row in rows[:limit]]
    except SQLAlchemyError:
        db.rollback()
        return _failed(route, params, started)
    except ValidationError:
        return _failed(route, params, started)

    latency_ms = (perf_counter() - started) * 1000.0
    logger.debug(
        "cortex.connector_timing route=%s rows=%d truncated=%s elapsed_ms=%.2f",
        route,
        len(records),
        truncated,
        latency_ms,
    )
    return ConnectorResult(
        route=route,
        params=params,
        success=True,
        latency_ms=latency_ms,
        data=records,
        truncated=truncated,
    )


def _failed(route: str, params: dict[str, Any], started: float) -> ConnectorResult[Any]:
    latency_ms = (perf_counter() - started) * 1000.0
    logger.exception(
        "cortex.connector_failed route=%s organization_id=%s elapsed_ms=%.2f",
        route,
        params.get("organization_id"),
        latency_ms,
    )
    return ConnectorResult(route=route, params=params, success=False, latency_ms=latency_ms)


def _scope_to_property(
    stmt: Select,
    column: Any,
    organization_id: str,
    property_id: int | None,
    property_name: str | None,
) -> Select:
    """Narrow by resolved property id, else by property name within the same tenant."""

    if property_id is not None:
        return stmt.where(column == property_id)
    if property_name:
        matching_ids = select(Property.id).where(
            Property.organization_id == organization_id,
            Property.name.ilike(_contains(property_name), escape="\\"),
        )
        return stmt.where(column.in_(matching_ids))
    return stmt


def _contains(fragment: str) -> str:
    escaped = fragment.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _params(**values: Any) -> dict[str, Any]:
    """Keep only the filters actually sent, in JSON-friendly form."""

    return {
        key: value.isoformat() if isinstance(value, date) else value
        for key, value in values.items()
        if value is not None
    }
