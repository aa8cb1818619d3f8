"""Data grounding: choose connectors, resolve the property, merge results."""

from __future__ import annotations

import calendar
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import date
from time import perf_counter
from typing import Any

from sqlalchemy.orm import Session

from hostpilot.cortex.connectors import (
    DEFAULT_LIMIT,
    fetch_bookings,
    fetch_finances,
    fetch_properties,
    fetch_tasks,
    fetch_utility_bills,
)
from hostpilot.cortex.types import (
    ConnectorResult,
    DataDomain,
    DetectedIntent,
    ExtractedEntities,
    GroundedData,
    GroundingMetadata,
    GroundingOutcome,
    QueryType,
    SourceRecord,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConnectorTrigger:
    """When a connector runs: its intent, or any of its domain-specific entity fields."""

    domain: DataDomain
    query_type: QueryType
    entity_fields: tuple[str, ...] = ()
    resolves_property: bool = False


# Invocation order; the property lookup must stay first.
CONNECTOR_TRIGGERS: tuple[ConnectorTrigger, ...] = (
    ConnectorTrigger(DataDomain.PROPERTIES, QueryType.PROPERTY, ("property_name",), resolves_property=True),
    ConnectorTrigger(DataDomain.UTILITY_BILLS, QueryType.UTILITY, ("utility_type",)),
    ConnectorTrigger(DataDomain.TASKS, QueryType.TASK),
    ConnectorTrigger(DataDomain.BOOKINGS, QueryType.BOOKING),
    ConnectorTrigger(DataDomain.FINANCES, QueryType.FINANCE, ("finance_type",)),
)


def plan_connectors(
    intent: DetectedIntent,
    entities: ExtractedEntities,
    *,
    allowed_domains: frozenset[DataDomain] | None = None,
    entity_triggers: bool = True,
) -> list[DataDomain]:
    """Return the domains to query, in invocation order.

    A connector is selected when the intent names its domain or, with
    `entity_triggers` on, when a field specific to its domain was extracted.
    A property name always selects the property lookup because the other
    connectors depend on the id it resolves.
    """

    planned: list[DataDomain] = []
    for trigger in CONNECTOR_TRIGGERS:
        if allowed_domains is not None and trigger.domain not in allowed_domains:
            continue
        entity_hit = any(getattr(entities, name) is not None for name in trigger.entity_fields)
        if intent.type == trigger.query_type or (entity_hit and (entity_triggers or trigger.resolves_property)):
            planned.append(trigger.domain)
    return planned


def ground_question(
    db: Session,
    intent: DetectedIntent,
    entities: ExtractedEntities,
    organization_id: str,
    *,
    allowed_domains: frozenset[DataDomain] | None = None,
    entity_triggers: bool = True,
    limit: int = DEFAULT_LIMIT,
) -> GroundingOutcome:
    """Fetch tenant data for a question.

    The property lookup runs first; when it matches exactly one property the
    returned entities carry its id and every later connector is scoped to it.
    Connector failures are recorded in the sources and contribute no data.
    """

    if not organization_id:
        raise ValueError("organization_id is required for grounding")

    started = perf_counter()
    try:
        plan = plan_connectors(
            intent,
            entities,
            allowed_domains=allowed_domains,
            entity_triggers=entity_triggers,
        )
        sources: list[SourceRecord] = []
        collected: dict[str, tuple[Any, ...]] = {}
        truncated: set[DataDomain] = set()
        resolved = entities

        for domain in plan:
            result = _CONNECTOR_CALLS[domain](db, resolved, organization_id, limit)
            sources.append(
                SourceRecord(
                    route=result.route,
                    params=result.params,
                    success=result.success,
                    latency_ms=result.latency_ms,
                    truncated=result.truncated,
                )
            )
            if result.success and result.data:
                collected[domain.value] = tuple(result.data)
                if result.truncated:
                    truncated.add(domain)
            if domain is DataDomain.PROPERTIES:
                resolved = _resolve_property(resolved, result)

        data = GroundedData(
            **collected,
            metadata=GroundingMetadata(
                sources=tuple(sources),
                total_latency_ms=(perf_counter() - started) * 1000.0,
                cache_hit=False,
            ),
            truncated=frozenset(truncated),
        )
    except Exception:
        logger.exception(
            "cortex.grounding_failed intent=%s organization_id=%s elapsed_ms=%.2f",
            intent.type.value,
            organization_id,
            (perf_counter() - started) * 1000.0,
        )
        raise

    logger.info(
        "cortex.grounding intent=%s organization_id=%s routes=%s counts=%s truncated=%s property_id=%s "
        "total_ms=%.2f",
        intent.type.value,
        organization_id,
        ",".join(source.route for source in data.metadata.sources) or "-",
        data.record_counts(),
        sorted(domain.value for domain in data.truncated),
        resolved.property_id,
        data.metadata.total_latency_ms,
    )
    return GroundingOutcome(entities=resolved, data=data)


def _resolve_property(entities: ExtractedEntities, result: ConnectorResult[Any]) -> ExtractedEntities:
    """Pin the property id only on an unambiguous name match."""

    if entities.property_name and result.success and result.data and len(result.data) == 1:
        return replace(entities, property_id=result.data[0].id)
    return entities


def period_window(entities: ExtractedEntities) -> tuple[date | None, date | None]:
    """Date window for connectors that filter on dates only.

    An explicit date range wins. Otherwise a month and year cover that month
    and a bare year covers the whole year. A month without a year gives no
    window.
    """

    if entities.date_from is not None or entities.date_to is not None:
        return entities.date_from, entities.date_to
    if entities.year is None:
        return None, None
    if entities.month is None:
        return date(entities.year, 1, 1), date(entities.year, 12, 31)
    last_day = calendar.monthrange(entities.year, entities.month)[1]
    return date(entities.year, entities.month, 1), date(entities.year, entities.month, last_day)


def _call_properties(db: Session, entities: ExtractedEntities, organization_id: str, limit: int) -> ConnectorResult[Any]:
    return fetch_properties(
        db,
        organization_id=organization_id,
        name=entities.property_name,
        limit=limit,
    )


def _call_utility_bills(db: Session, entities: ExtractedEntities, organization_id: str, limit: int) -> ConnectorResult[Any]:
    return fetch_utility_bills(
        db,
        organization_id=organization_id,
        property_id=entities.property_id,
        property_name=entities.property_name,
        utility_type=entities.utility_type,
        status=entities.status,
        month=entities.month,
        year=entities.year,
        limit=limit,
    )


def _call_tasks(db: Session, entities: ExtractedEntities, organization_id: str, limit: int) -> ConnectorResult[Any]:
    date_from, date_to = period_window(entities)
    return fetch_tasks(
        db,
        organization_id=organization_id,
        property_id=entities.property_id,
        property_name=entities.property_name,
        status=entities.status,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
    )


def _call_bookings(db: Session, entities: ExtractedEntities, organization_id: str, limit: int) -> ConnectorResult[Any]:
    date_from, date_to = period_window(entities)
    return fetch_bookings(
        db,
        organization_id=organization_id,
        property_id=entities.property_id,
        property_name=entities.property_name,
        status=entities.status,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
    )


def _call_finances(db: Session, entities: ExtractedEntities, organization_id: str, limit: int) -> ConnectorResult[Any]:
    return fetch_finances(
        db,
        organization_id=organization_id,
        property_id=entities.property_id,
        property_name=entities.property_name,
        finance_type=entities.finance_type,
        status=entities.status,
        month=entities.month,
        year=entities.year,
        date_from=entities.date_from,
        date_to=entities.date_to,
        limit=limit,
    )


_CONNECTOR_CALLS: dict[
    DataDomain,
    Callable[[Session, ExtractedEntities, str, int], ConnectorResult[Any]],
] = {
    DataDomain.PROPERTIES: _call_properties,
    DataDomain.UTILITY_BILLS: _call_utility_bills,
    DataDomain.TASKS: _call_tasks,
    DataDomain.BOOKINGS: _call_bookings,
    DataDomain.FINANCES: _call_finances,
}
