"""
Tests for coach travel updates and the finance transactions they keep in step.
"""

from datetime import date

import pytest
from sqlmodel import Session, select

from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.finance_transaction import FinanceTransaction
from tournament_hub.models.tournament import Tournament
from tournament_hub.services.errors import NotFoundError
from tournament_hub.services.finance_sync import (
    filter_transactions,
    summarize_transactions,
    update_coach_travel,
)

TODAY = date(2026, 3, 10)


@pytest.fixture
def jane(session: Session) -> CoachTravel:
    tournament = Tournament(name="Spring Classic")
    session.add(tournament)
    session.commit()
    session.refresh(tournament)

    coach = CoachTravel(coach_name="Jane Doe", tournament_id=tournament.id, flight_cost=0, flight_booked=False)
    session.add(coach)
    session.commit()
    session.refresh(coach)
    return coach


def _transactions(session: Session):
    return session.exec(select(FinanceTransaction)).all()


class TestUpdateCoachTravel:
    def test_booking_flight_creates_then_unbooking_deletes(self, session: Session, jane: CoachTravel):
        update_coach_travel(session, jane.id, {"flight_cost": 250, "flight_booked": True}, today=TODAY)

        transactions = _transactions(session)
        assert len(transactions) == 1
        tx = transactions[0]
        assert tx.category == "Flight"
        assert tx.amount == 250
        assert "Jane Doe" in tx.description
        assert tx.date == TODAY
        assert tx.tournament_id == jane.tournament_id

        update_coach_travel(session, jane.id, {"flight_booked": False}, today=TODAY)
        assert _transactions(session) == []

    def test_cost_change_updates_existing_transaction(self, session: Session, jane: CoachTravel):
        update_coach_travel(session, jane.id, {"hotel_cost": 300, "hotel_booked": True}, today=TODAY)
        update_coach_travel(
            session, jane.id, {"hotel_cost": "420.50", "hotel_confirmation": "HX-1"}, today=date(2026, 3, 12)
        )

        transactions = _transactions(session)
        assert len(transactions) == 1
        assert transactions[0].category == "Hotel"
        assert transactions[0].description == "Hotel for Jane Doe"
        assert transactions[0].amount == 420.5
        assert transactions[0].notes == "HX-1"
        assert transactions[0].date == date(2026, 3, 12)

    def test_zero_or_invalid_cost_deletes(self, session: Session, jane: CoachTravel):
        update_coach_travel(session, jane.id, {"flight_cost": 250, "flight_booked": True}, today=TODAY)
        coach = update_coach_travel(session, jane.id, {"flight_cost": ""}, today=TODAY)

        assert coach.flight_cost == 0
        assert _transactions(session) == []

    def test_cost_without_booking_creates_nothing(self, session: Session, jane: CoachTravel):
        update_coach_travel(session, jane.id, {"flight_cost": 180}, today=TODAY)
        assert _transactions(session) == []

    def test_unrelated_fields_leave_finance_alone(self, session: Session, jane: CoachTravel):
        update_coach_travel(session, jane.id, {"flight_cost": 250, "flight_booked": True}, today=TODAY)
        coach = update_coach_travel(session, jane.id, {"notes": "Aisle seat"}, today=TODAY)

        assert coach.notes == "Aisle seat"
        assert len(_transactions(session)) == 1

    def test_coach_without_tournament_skips_finance(self, session: Session):
        coach = CoachTravel(coach_name="Team Level")
        session.add(coach)
        session.commit()
        session.refresh(coach)

        updated = update_coach_travel(session, coach.id, {"flight_cost": 99, "flight_booked": True})
        assert updated.flight_booked is True
        assert _transactions(session) == []

    def test_missing_coach(self, session: Session):
        with pytest.raises(NotFoundError):
            update_coach_travel(session, 9999, {"notes": "x"})


class TestReporting:
    def _rows(self):
        return [
            FinanceTransaction(id=1, tournament_id=1, team_id=5, category="Flight", description="Flight for Jane Doe",
                               amount=250, date=date(2026, 3, 1)),
            FinanceTransaction(id=2, tournament_id=1, category="Hotel", description="Hotel for Jane Doe",
                               amount=300, date=date(2026, 3, 5)),
            FinanceTransaction(id=3, tournament_id=2, category="Meals", description="Team dinner",
                               amount=80, date=date(2026, 4, 1)),
            FinanceTransaction(id=4, tournament_id=2, category="Misc", description="Parking",
                               amount=20, date=date(2026, 4, 2)),
        ]

    def test_filters(self):
        rows = self._rows()
        assert [t.id for t in filter_transactions(rows, tournament_id=2)] == [3, 4]
        assert [t.id for t in filter_transactions(rows, team_id=5)] == [1]
        assert [t.id for t in filter_transactions(rows, coach_name="jane")] == [1, 2]
        assert [t.id for t in filter_transactions(rows, date_from=date(2026, 3, 2), date_to=date(2026, 4, 1))] == [2, 3]

    def test_summary_buckets(self):
        totals = summarize_transactions(self._rows())

        assert totals.total == 650
        assert totals.flights == 250
        assert totals.hotels == 300
        assert totals.misc == 100
        assert totals.count == 4
        assert totals.by_tournament == {1: 550, 2: 100}
