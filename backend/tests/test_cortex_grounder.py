"""Tests for connector selection, property resolution and provenance."""

from __future__ import annotations

import unittest
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.orm import Session, sessionmaker

from cortex_fixtures import ORG_PHUKET, ORG_SAMUI, clear_tables, make_sqlite_engine, seed_portfolio
from hostpilot.cortex.connectors import DEFAULT_LIMIT, ROUTES
from hostpilot.cortex.extract import extract_entities
from hostpilot.cortex.grounder import ground_question, period_window, plan_connectors
from hostpilot.cortex.intent import detect_intent
from hostpilot.cortex.normalizer import normalize_for_llm
from hostpilot.cortex.types import DataDomain, DetectedIntent, ExtractedEntities, QueryType
from hostpilot.models import Booking, Finance, UtilityBill
from hostpilot.models.base import Base

TODAY = date(2025, 3, 10)


class ConnectorPlanTests(unittest.TestCase):
    def test_unknown_intent_without_entities_calls_nothing(self) -> None:
        plan = plan_connectors(DetectedIntent(QueryType.UNKNOWN, 0.1), ExtractedEntities())

        self.assertEqual(plan, [])

    def test_domain_entities_add_connectors(self) -> None:
        plan = plan_connectors(
            DetectedIntent(QueryType.FINANCE, 0.8),
            ExtractedEntities(utility_type="water"),
        )

        self.assertEqual(plan, [DataDomain.UTILITY_BILLS, DataDomain.FINANCES])

    def test_entity_triggers_can_be_disabled(self) -> None:
        entities = ExtractedEntities(property_name="Villa Aruna", utility_type="water")
        plan = plan_connectors(DetectedIntent(QueryType.FINANCE, 0.8), entities, entity_triggers=False)

        # The property lookup still runs so later connectors can be scoped.
        self.assertEqual(plan, [DataDomain.PROPERTIES, DataDomain.FINANCES])

    def test_shared_fields_do_not_trigger_connectors(self) -> None:
        entities = ExtractedEntities(status="pending", month=1, year=2025)
        plan = plan_connectors(DetectedIntent(QueryType.TASK, 0.65), entities)

        self.assertEqual(plan, [DataDomain.TASKS])

    def test_allowed_domains_filter_plan(self) -> None:
        plan = plan_connectors(
            DetectedIntent(QueryType.FINANCE, 0.8),
            ExtractedEntities(property_name="Villa Aruna"),
            allowed_domains=frozenset({DataDomain.PROPERTIES, DataDomain.TASKS}),
        )

        self.assertEqual(plan, [DataDomain.PROPERTIES])


class PeriodWindowTests(unittest.TestCase):
    def test_month_and_year_cover_the_month(self) -> None:
        self.assertEqual(
            period_window(ExtractedEntities(month=2, year=2024)),
            (date(2024, 2, 1), date(2024, 2, 29)),
        )

    def test_year_covers_the_whole_year(self) -> None:
        self.assertEqual(period_window(ExtractedEntities(year=2025)), (date(2025, 1, 1), date(2025, 12, 31)))

    def test_explicit_range_wins(self) -> None:
        entities = ExtractedEntities(month=1, year=2025, date_from=date(2025, 1, 10), date_to=date(2025, 1, 12))

        self.assertEqual(period_window(entities), (date(2025, 1, 10), date(2025, 1, 12)))

    def test_month_without_year_has_no_window(self) -> None:
        self.assertEqual(period_window(ExtractedEntities(month=3)), (None, None))


class GrounderTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.engine = make_sqlite_engine()
        cls.SessionLocal = sessionmaker(bind=cls.engine, autoflush=False, autocommit=False, future=True)
        Base.metadata.create_all(cls.engine)

    @classmethod
    def tearDownClass(cls) -> None:
        Base.metadata.drop_all(cls.engine)
        cls.engine.dispose()

    def setUp(self) -> None:
        self.db: Session = self.SessionLocal()
        clear_tables(self.db)
        self.ids = seed_portfolio(self.db)

    def tearDown(self) -> None:
        self.db.close()

    def _ground(self, question: str, organization_id: str = ORG_SAMUI, **kwargs):
        intent = detect_intent(question)
        entities = extract_entities(question, today=TODAY)
        return entities, ground_question(self.db, intent, entities, organization_id, **kwargs)

    def test_single_property_match_scopes_later_connectors(self) -> None:
        entities, outcome = self._ground("What is the Villa Aruna utility bill status for January 2025?")

        self.assertIsNone(entities.property_id)
        self.assertEqual(outcome.entities.property_id, self.ids["aruna"])
        self.assertEqual(
            [source.route for source in outcome.data.metadata.sources],
            ["properties.fetch", "utility_bills.fetch"],
        )
        bill_params = outcome.data.metadata.sources[1].params
        self.assertEqual(bill_params["property_id"], self.ids["aruna"])
        self.assertEqual((bill_params["month"], bill_params["year"]), (1, 2025))
        self.assertEqual(len(outcome.data.properties), 1)
        self.assertEqual(len(outcome.data.utility_bills), 1)
        self.assertEqual(outcome.data.utility_bills[0].type, "electricity")
        self.assertIsNone(outcome.data.tasks)
        self.assertIsNone(outcome.data.finances)
        self.assertFalse(outcome.data.metadata.cache_hit)

    def test_ambiguous_name_leaves_property_unresolved(self) -> None:
        _, outcome = self._ground('Show tasks for "Villa"')

        self.assertIsNone(outcome.entities.property_id)
        self.assertEqual(len(outcome.data.properties), 2)
        self.assertEqual(outcome.data.metadata.sources[1].params["property_name"], "Villa")

    def test_unmatched_name_yields_no_data(self) -> None:
        _, outcome = self._ground("Show me finances for Nonexistent Villa")

        self.assertIsNone(outcome.entities.property_id)
        self.assertIsNone(outcome.data.properties)
        self.assertIsNone(outcome.data.finances)
        self.assertEqual(len(outcome.data.metadata.sources), 2)
        self.assertTrue(all(source.success for source in outcome.data.metadata.sources))

    def test_tenant_isolation(self) -> None:
        _, outcome = self._ground("Show electricity bills for Villa Aruna", organization_id=ORG_PHUKET)

        self.assertEqual(outcome.entities.property_id, self.ids["other_aruna"])
        for record in outcome.data.utility_bills:
            self.assertEqual(record.organization_id, ORG_PHUKET)
        for record in outcome.data.properties:
            self.assertEqual(record.organization_id, ORG_PHUKET)

    def test_provenance_matches_invoked_connectors(self) -> None:
        _, outcome = self._ground("Revenue and cleaning tasks with water bills and guest bookings for Villa Aruna")

        routes = [source.route for source in outcome.data.metadata.sources]
        self.assertEqual(len(routes), len(set(routes)))
        self.assertTrue(set(routes) <= set(ROUTES.values()))
        self.assertEqual(routes[0], "properties.fetch")
        self.assertGreaterEqual(outcome.data.metadata.total_latency_ms, 0.0)

    def test_role_restriction_limits_connectors(self) -> None:
        _, outcome = self._ground(
            "Show me finances for Villa Aruna",
            allowed_domains=frozenset({DataDomain.PROPERTIES, DataDomain.TASKS}),
        )

        self.assertEqual([source.route for source in outcome.data.metadata.sources], ["properties.fetch"])
        self.assertIsNone(outcome.data.finances)

    def test_failed_connector_is_recorded_without_data(self) -> None:
        broken_engine = make_sqlite_engine()
        broken_db = sessionmaker(bind=broken_engine, future=True)()
        try:
            with self.assertLogs("hostpilot.cortex.connectors", level="ERROR"):
                outcome = ground_question(
                    broken_db,
                    DetectedIntent(QueryType.TASK, 0.65),
                    ExtractedEntities(),
                    ORG_SAMUI,
                )
        finally:
            broken_db.close()
            broken_engine.dispose()

        self.assertIsNone(outcome.data.tasks)
        self.assertEqual(len(outcome.data.metadata.sources), 1)
        self.assertFalse(outcome.data.metadata.sources[0].success)

    def test_capped_finance_rows_are_flagged_for_totals(self) -> None:
        self.db.add_all(
            [
                Finance(
                    organization_id=ORG_SAMUI,
                    property_id=self.ids["aruna"],
                    type="income",
                    category="rental",
                    amount=Decimal("100.00"),
                    currency="THB",
                    transaction_date=date(2025, 1, 1) + timedelta(days=index * 3),
                    status="paid",
                )
                for index in range(120)
            ]
        )
        self.db.commit()

        _, outcome = self._ground("What was the total income in 2025?")

        self.assertEqual(len(outcome.data.finances), DEFAULT_LIMIT)
        self.assertEqual(outcome.data.truncated, frozenset({DataDomain.FINANCES}))
        self.assertTrue(outcome.data.metadata.sources[-1].truncated)
        text = normalize_for_llm(outcome.data)
        self.assertIn("totals cover the 50 most recent transactions only", text)
        self.assertIn("not complete period totals", text)

    def test_complete_results_are_not_flagged(self) -> None:
        _, outcome = self._ground("What was the total income in 2025?")

        self.assertEqual(outcome.data.truncated, frozenset())
        self.assertFalse(any(source.truncated for source in outcome.data.metadata.sources))

    def test_bookings_follow_the_requested_month(self) -> None:
        self.db.add_all(
            [
                Booking(
                    organization_id=ORG_SAMUI,
                    property_id=self.ids["aruna"],
                    guest_name=f"Weekly guest {index}",
                    check_in=date(2024, 1, 1) + timedelta(weeks=index),
                    check_out=date(2024, 1, 4) + timedelta(weeks=index),
                    guests=2,
                    currency="THB",
                    status="confirmed",
                )
                for index in range(60)
            ]
        )
        self.db.commit()

        _, outcome = self._ground("Show bookings in February 2025")

        params = outcome.data.metadata.sources[0].params
        self.assertEqual((params["date_from"], params["date_to"]), ("2025-02-01", "2025-02-28"))
        self.assertEqual(
            [booking.guest_name for booking in outcome.data.bookings],
            ["Maria Garcia", "Weekly guest 57", "Weekly guest 58", "Weekly guest 59"],
        )
        self.assertEqual(outcome.data.truncated, frozenset())

    def test_tasks_follow_the_requested_year(self) -> None:
        _, outcome = self._ground("Which tasks were due in 2024?")

        params = outcome.data.metadata.sources[0].params
        self.assertEqual((params["date_from"], params["date_to"]), ("2024-01-01", "2024-12-31"))
        self.assertIsNone(outcome.data.tasks)

    def test_pending_tasks_question_returns_only_pending_tasks(self) -> None:
        _, outcome = self._ground("what tasks are pending")

        self.assertEqual(outcome.data.metadata.sources[0].params["status"], "pending")
        self.assertEqual([task.title for task in outcome.data.tasks], ["Pool cleaning"])

    def test_pending_bill_status_reaches_rendered_context(self) -> None:
        self.db.execute(
            update(UtilityBill)
            .where(UtilityBill.property_id == self.ids["aruna"], UtilityBill.billing_month == "2025-01")
            .values(status="pending", receipt_url=None)
        )
        self.db.commit()

        _, outcome = self._ground("What's the utility bill status for Villa Aruna in January 2025?")

        self.assertEqual(outcome.entities.property_id, self.ids["aruna"])
        self.assertEqual(len(outcome.data.utility_bills), 1)
        text = normalize_for_llm(outcome.data)
        self.assertIn("Amount ฿2,450.00, Status: pending", text)
        self.assertIn("No proof", text)

    def test_missing_tenant_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ground_question(self.db, DetectedIntent(QueryType.TASK, 0.65), ExtractedEntities(), "")


if __name__ == "__main__":
    unittest.main()
