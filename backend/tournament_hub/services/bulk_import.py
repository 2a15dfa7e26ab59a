"""Bulk import of coach and tournament rows.

Rows come from one of two places:
  - the upstream file-extraction integration, as an ExtractionResult whose
    output.entries is only trusted when status == "success";
  - CSV/TSV text pasted from Excel/Google Sheets (header row required).

Coach importer, per row:
  1. find Tournament by trimmed, case-insensitive name; create it, or overwrite
     location / dates with any non-empty incoming value
  2. find-or-create Team the same way (teams are global)
  3. skip if a CoachTravel already exists for (team, tournament, coach name),
     otherwise create it with every flag false and costs 0

The "existing" lists are kept up to date while looping, so repeated rows in
the same upload are skipped as well. Each write commits on its own; a failure
part way through leaves the earlier rows in place.
"""

import csv
import io
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from sqlmodel import Session, select

from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.team import Team
from tournament_hub.models.tournament import GenderFocus, Tournament, TournamentStatus
from tournament_hub.utils.dates import coerce_date
from tournament_hub.utils.names import clean_value, normalize_name

logger = logging.getLogger(__name__)


class ImportExtractionError(Exception):
    """The extraction integration did not return usable entries."""


class ImportRowError(Exception):
    """A row is missing a required column or carries an unparseable value."""


# ---------------------------------------------------------------------------
# Row models
# ---------------------------------------------------------------------------


class CoachImportRow(BaseModel):
    """One row of a coach upload."""

    model_config = ConfigDict(extra="ignore")

    tournament_name: Optional[str] = None  # required
    tournament_location: Optional[str] = None
    tournament_date: Optional[str] = None  # YYYY-MM-DD
    team_name: Optional[str] = None  # required
    coach_name: Optional[str] = None  # required
    gender: Optional[str] = None
    preferred_airport: Optional[str] = None
    flight_confirmation: Optional[str] = None
    hotel_confirmation: Optional[str] = None
    notes: Optional[str] = None


class TournamentImportRow(BaseModel):
    """One row of a tournament upload."""

    model_config = ConfigDict(extra="ignore")

    tournament_name: Optional[str] = None  # required
    league_id: Optional[int] = None
    age_division_focus: Optional[str] = None
    gender_focus: Optional[str] = None
    housing_required: Optional[bool] = None
    location: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    housing_partner: Optional[str] = None
    contact_info: Optional[str] = None
    stay_play_requirements: Optional[str] = None
    club_location: Optional[str] = None
    stay_play_required: Optional[bool] = None


class ExtractionOutput(BaseModel):
    entries: List[Dict[str, Any]] = []


class ExtractionResult(BaseModel):
    """Response shape of the file-extraction integration."""

    status: str
    output: Optional[ExtractionOutput] = None
    details: Optional[str] = None


class ImportSummary(BaseModel):
    total: int = 0
    created: int = 0
    skipped: int = 0
    errors: int = 0
    error_messages: List[str] = []
    message: str = ""


# JSON schemas handed to the extraction integration, one per import type
COACH_IMPORT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "entries": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {name: {"type": "string"} for name in CoachImportRow.model_fields},
                "required": ["tournament_name", "team_name", "coach_name"],
            },
        }
    },
}

TOURNAMENT_IMPORT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "entries": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    name: {"type": "boolean" if name in ("housing_required", "stay_play_required") else "string"}
                    for name in TournamentImportRow.model_fields
                },
                "required": ["tournament_name"],
            },
        }
    },
}


# ---------------------------------------------------------------------------
# Row sources
# ---------------------------------------------------------------------------


def entries_from_extraction(result: ExtractionResult) -> List[Dict[str, Any]]:
    """Gate on status == "success"; anything else aborts the whole batch."""
    if result.status != "success" or result.output is None:
        raise ImportExtractionError(result.details or "Failed to extract data from file")
    return list(result.output.entries)


_TRUE_VALUES = ("true", "yes", "y", "1")
_FALSE_VALUES = ("false", "no", "n", "0")


def _parse_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    v = value.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    return None


def parse_import_rows(raw_text: str) -> List[Dict[str, Any]]:
    """
    Parse pasted CSV or TSV with a header row into dicts.

    - Delimiter is tab if the header line contains one, otherwise comma
    - Header names are lowercased, spaces become underscores
    - Blank lines are skipped; placeholder cells ("", "-", "N/A") become None
    - true/false style cells stay strings here; row models coerce them
    """
    text = (raw_text or "").strip()
    if not text:
        return []

    header_line = text.splitlines()[0]
    delimiter = "\t" if "\t" in header_line else ","
    reader = csv.reader(io.StringIO(text), delimiter=delimiter)

    rows: List[Dict[str, Any]] = []
    header: Optional[List[str]] = None
    for fields in reader:
        if not fields or all(not f.strip() for f in fields):
            continue
        if header is None:
            header = [f.strip().lower().replace(" ", "_") for f in fields]
            continue
        row: Dict[str, Any] = {}
        for key, value in zip(header, fields):
            if key:
                row[key] = clean_value(value)
        rows.append(row)
    return rows


def _coerce_tournament_row(entry: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(entry)
    for key in ("housing_required", "stay_play_required"):
        if isinstance(data.get(key), str):
            data[key] = _parse_bool(data[key])
    if data.get("league_id") in ("", None):
        data["league_id"] = None
    return data


# ---------------------------------------------------------------------------
# Importers
# ---------------------------------------------------------------------------


def _find_by_name(records, name: str):
    key = normalize_name(name)
    for record in records:
        if normalize_name(record.name) == key:
            return record
    return None


def _save(session: Session, record):
    session.add(record)
    session.commit()
    session.refresh(record)
    return record


def _parse_date_field(value: Optional[str], line: int):
    try:
        return coerce_date(value)
    except ValueError:
        raise ImportRowError(f"Row {line}: invalid date '{value}'")


def import_coach_rows(session: Session, entries: List[Dict[str, Any]]) -> ImportSummary:
    """Reconcile coach rows against existing tournaments, teams and coach records."""
    summary = ImportSummary(total=len(entries))

    existing_tournaments: List[Tournament] = list(session.exec(select(Tournament)).all())
    existing_teams: List[Team] = list(session.exec(select(Team)).all())
    existing_coaches: List[CoachTravel] = list(session.exec(select(CoachTravel)).all())

    for line, entry in enumerate(entries, start=1):
        try:
            row = CoachImportRow(**entry)
            if not (clean_value(row.tournament_name) and clean_value(row.team_name) and clean_value(row.coach_name)):
                raise ImportRowError(f"Row {line}: tournament_name, team_name and coach_name are required")
            row_date = _parse_date_field(row.tournament_date, line)
        except (ImportRowError, ValueError) as e:
            summary.errors += 1
            summary.error_messages.append(str(e))
            logger.warning(f"Coach import row {line} rejected: {e}")
            continue

        location = clean_value(row.tournament_location)

        tournament = _find_by_name(existing_tournaments, row.tournament_name)
        if tournament is None:
            tournament = _save(
                session,
                Tournament(
                    name=row.tournament_name.strip(),
                    location=location or "",
                    start_date=row_date,
                    end_date=row_date,
                    status=TournamentStatus.not_started,
                ),
            )
            existing_tournaments.append(tournament)
        elif location or row_date:
            # Any non-empty incoming value overwrites what the tournament had
            if location:
                tournament.location = location
            if row_date:
                tournament.start_date = row_date
                tournament.end_date = row_date
            _save(session, tournament)

        team = _find_by_name(existing_teams, row.team_name)
        if team is None:
            team = _save(session, Team(name=row.team_name.strip(), notes=""))
            existing_teams.append(team)

        coach_key = normalize_name(row.coach_name)
        exists = any(
            c.team_id == team.id and c.tournament_id == tournament.id and normalize_name(c.coach_name) == coach_key
            for c in existing_coaches
        )
        if exists:
            summary.skipped += 1
            continue

        coach = _save(
            session,
            CoachTravel(
                tournament_id=tournament.id,
                team_id=team.id,
                coach_name=row.coach_name.strip(),
                gender=row.gender or "",
                preferred_airport=row.preferred_airport or "",
                flight_confirmation=row.flight_confirmation or "",
                hotel_confirmation=row.hotel_confirmation or "",
                notes=row.notes or "",
                flight_booked=False,
                hotel_booked=False,
                travel_complete=False,
                attendance_confirmed=False,
                flight_cost=0,
                hotel_cost=0,
            ),
        )
        existing_coaches.append(coach)
        summary.created += 1

    summary.message = (
        f"Successfully processed! Created {summary.created} new coach record(s), "
        f"skipped {summary.skipped} duplicate(s)."
    )
    logger.info(f"Coach import: {summary.created} created, {summary.skipped} skipped, {summary.errors} errors")
    return summary


def import_tournament_rows(session: Session, entries: List[Dict[str, Any]]) -> ImportSummary:
    """Create tournaments whose name is not already taken; skip the rest."""
    summary = ImportSummary(total=len(entries))
    existing_tournaments: List[Tournament] = list(session.exec(select(Tournament)).all())

    for line, entry in enumerate(entries, start=1):
        try:
            row = TournamentImportRow(**_coerce_tournament_row(entry))
            if not clean_value(row.tournament_name):
                raise ImportRowError(f"Row {line}: tournament_name is required")
            start = _parse_date_field(row.start_date, line)
            end = _parse_date_field(row.end_date, line)
        except (ImportRowError, ValueError) as e:
            summary.errors += 1
            summary.error_messages.append(str(e))
            logger.warning(f"Tournament import row {line} rejected: {e}")
            continue

        if _find_by_name(existing_tournaments, row.tournament_name) is not None:
            summary.skipped += 1
            continue

        tournament = _save(
            session,
            Tournament(
                name=row.tournament_name.strip(),
                league_id=row.league_id,
                age_division_focus=row.age_division_focus or "",
                gender_focus=row.gender_focus or GenderFocus.boys,
                housing_required=row.housing_required if row.housing_required is not None else True,
                location=row.location or "",
                start_date=start,
                end_date=end,
                housing_partner=row.housing_partner or "",
                contact_info=row.contact_info or "",
                stay_play_requirements=row.stay_play_requirements or "",
                club_location=row.club_location or "",
                stay_play_required=row.stay_play_required if row.stay_play_required is not None else False,
                status=TournamentStatus.not_started,
            ),
        )
        existing_tournaments.append(tournament)
        summary.created += 1

    summary.message = (
        f"Successfully processed! Created {summary.created} new tournament(s), "
        f"skipped {summary.skipped} duplicate(s)."
    )
    logger.info(f"Tournament import: {summary.created} created, {summary.skipped} skipped, {summary.errors} errors")
    return summary
