"""
Tests for bulk import: row parsing, extraction gating, reconciliation and
idempotence.
"""

from datetime import date

import pytest
from sqlmodel import Session, select

from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.team import Team
from tournament_hub.models.tournament import Tournament
from tournament_hub.services.bulk_import import (
    ExtractionResult,
    ImportExtractionError,
    entries_from_extraction,
    import_coach_rows,
    import_tournament_rows,
    parse_import_rows,
)

COACH_CSV = """Tournament Name,Tournament Location,Tournament Date,Team Name,Coach Name,Gender
Spring Classic,Orlando,2026-04-10,Vipers 12U,Jane Doe,F
Spring Classic,,,Vipers 12U,Bob Smith,M

spring classic ,N/A,,vipers 12u, jane doe ,F
"""


class TestParseImportRows:
    def test_csv_header_and_placeholders(self):
        rows = parse_import_rows(COACH_CSV)

        assert len(rows) == 3
        assert rows[0]["tournament_name"] == "Spring Classic"
        assert rows[0]["tournament_date"] == "2026-04-10"
        assert rows[1]["tournament_location"] is None
        assert rows[2]["tournament_location"] is None
        assert rows[2]["coach_name"] == "jane doe"

    def test_tab_separated(self):
        rows = parse_import_rows("tournament_name\tlocation\nDesert Cup\tPhoenix\n")
        assert rows == [{"tournament_name": "Desert Cup", "location": "Phoenix"}]

    def test_empty_text(self):
        assert parse_import_rows("   ") == []


class TestExtractionGate:
    def test_success_unlocks_entries(self):
        result = ExtractionResult(status="success", output={"entries": [{"tournament_name": "X"}]})
        assert entries_from_extraction(result) == [{"tournament_name": "X"}]

    def test_failure_raises_with_details(self):
        result = ExtractionResult(status="error", details="Could not read file")
        with pytest.raises(ImportExtractionError, match="Could not read file"):
            entries_from_extraction(result)


class TestCoachImport:
    def test_creates_and_dedups_within_file(self, session: Session):
        summary = import_coach_rows(session, parse_import_rows(COACH_CSV))

        assert summary.total == 3
        assert summary.created == 2
        assert summary.skipped == 1
        assert summary.errors == 0
        assert "Created 2 new coach record(s), skipped 1 duplicate(s)." in summary.message

        assert len(session.exec(select(Tournament)).all()) == 1
        assert len(session.exec(select(Team)).all()) == 1
        coaches = session.exec(select(CoachTravel)).all()
        assert sorted(c.coach_name for c in coaches) == ["Bob Smith", "Jane Doe"]
        for coach in coaches:
            assert coach.flight_booked is False
            assert coach.hotel_booked is False
            assert coach.flight_cost == 0
            assert coach.hotel_cost == 0

    def test_new_tournament_gets_location_and_date(self, session: Session):
        import_coach_rows(session, parse_import_rows(COACH_CSV))
        tournament = session.exec(select(Tournament)).one()

        assert tournament.location == "Orlando"
        assert tournament.start_date == date(2026, 4, 10)
        assert tournament.end_date == date(2026, 4, 10)
        assert tournament.status == "Not Started"

    def test_second_run_creates_nothing(self, session: Session):
        entries = parse_import_rows(COACH_CSV)
        import_coach_rows(session, entries)
        counts = (
            len(session.exec(select(Tournament)).all()),
            len(session.exec(select(Team)).all()),
            len(session.exec(select(CoachTravel)).all()),
        )

        summary = import_coach_rows(session, entries)

        assert summary.created == 0
        assert summary.skipped == 3
        assert counts == (
            len(session.exec(select(Tournament)).all()),
            len(session.exec(select(Team)).all()),
            len(session.exec(select(CoachTravel)).all()),
        )

    def test_existing_tournament_location_is_overwritten(self, session: Session):
        existing = Tournament(name="Desert Cup", location="Tucson")
        session.add(existing)
        session.commit()

        import_coach_rows(
            session,
            [
                {
                    "tournament_name": "  DESERT cup",
                    "tournament_location": "Phoenix",
                    "team_name": "Hawks",
                    "coach_name": "Sam",
                }
            ],
        )

        tournaments = session.exec(select(Tournament)).all()
        assert len(tournaments) == 1
        assert tournaments[0].location == "Phoenix"
        assert tournaments[0].name == "Desert Cup"

    def test_rows_missing_required_fields_are_errors(self, session: Session):
        summary = import_coach_rows(
            session,
            [
                {"tournament_name": "Cup", "team_name": "Hawks"},
                {"tournament_name": "Cup", "team_name": "Hawks", "coach_name": "Sam", "tournament_date": "soon"},
                {"tournament_name": "Cup", "team_name": "Hawks", "coach_name": "Sam"},
            ],
        )

        assert summary.errors == 2
        assert summary.created == 1
        assert len(summary.error_messages) == 2
        assert "Row 1" in summary.error_messages[0]


class TestTournamentImport:
    def test_skip_or_create_with_defaults(self, session: Session):
        session.add(Tournament(name="Existing Open"))
        session.commit()

        rows = parse_import_rows(
            "tournament_name,location,start_date,housing_required\n"
            "existing open,Somewhere,2026-05-01,\n"
            "New Invitational,Dallas,2026-06-01,no\n"
            "Plain Cup,,,\n"
        )
        summary = import_tournament_rows(session, rows)

        assert summary.created == 2
        assert summary.skipped == 1
        assert "Created 2 new tournament(s), skipped 1 duplicate(s)." in summary.message

        invitational = session.exec(select(Tournament).where(Tournament.name == "New Invitational")).one()
        assert invitational.location == "Dallas"
        assert invitational.start_date == date(2026, 6, 1)
        assert invitational.housing_required is False

        plain = session.exec(select(Tournament).where(Tournament.name == "Plain Cup")).one()
        assert plain.gender_focus == "Boys"
        assert plain.housing_required is True
        assert plain.stay_play_required is False
        assert plain.status == "Not Started"
