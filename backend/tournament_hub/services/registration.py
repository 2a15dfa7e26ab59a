"""
Team saves and tournament registration.

Registering a team for a tournament also seeds that tournament's coach
travel: every distinct coach name already on file for the team gets a fresh
CoachTravel row (gender and airport carried over, costs 0, flags false).
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlmodel import Session, select

from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.team import Team
from tournament_hub.models.tournament import Tournament
from tournament_hub.models.tournament_team import RegistrationStatus, TournamentTeam
from tournament_hub.services.errors import ConflictError, NotFoundError
from tournament_hub.utils.names import normalize_name

logger = logging.getLogger(__name__)


def fresh_coach_travel(
    coach_name: str,
    tournament_id: Optional[int],
    team_id: Optional[int],
    template: Optional[CoachTravel] = None,
) -> CoachTravel:
    """A CoachTravel row with every flag false and costs reset to 0."""
    return CoachTravel(
        tournament_id=tournament_id,
        team_id=team_id,
        coach_name=coach_name,
        gender=(template.gender if template else None) or "",
        preferred_airport=(template.preferred_airport if template else None) or "",
        flight_booked=False,
        hotel_booked=False,
        travel_complete=False,
        attendance_confirmed=False,
        flight_confirmation="",
        hotel_confirmation="",
        flight_cost=0,
        hotel_cost=0,
        rooming_notes="",
        notes="",
    )


def register_teams(
    session: Session,
    tournament_id: int,
    team_ids: Sequence[int],
    age_division_playing: Optional[str] = None,
    team_location: Optional[str] = None,
    roster_url: Optional[str] = None,
    registration_status: RegistrationStatus = RegistrationStatus.registered,
    notes: Optional[str] = None,
) -> List[TournamentTeam]:
    """
    Register several teams for a tournament and copy their coaches in.

    Raises ConflictError if any team is already registered (nothing is written).
    """
    if not session.get(Tournament, tournament_id):
        raise NotFoundError(f"Tournament {tournament_id} not found")

    ids = list(dict.fromkeys(team_ids))
    for team_id in ids:
        if not session.get(Team, team_id):
            raise NotFoundError(f"Team {team_id} not found")

    already = session.exec(
        select(TournamentTeam).where(
            TournamentTeam.tournament_id == tournament_id,
            TournamentTeam.team_id.in_(ids),
        )
    ).all()
    if already:
        taken = sorted(tt.team_id for tt in already)
        raise ConflictError(f"Teams already registered for tournament {tournament_id}: {taken}")

    created = [
        TournamentTeam(
            tournament_id=tournament_id,
            team_id=team_id,
            age_division_playing=age_division_playing,
            team_location=team_location,
            roster_url=roster_url,
            registration_status=registration_status,
            notes=notes,
        )
        for team_id in ids
    ]
    session.add_all(created)
    session.commit()

    coach_rows = 0
    for team_id in ids:
        existing = session.exec(select(CoachTravel).where(CoachTravel.team_id == team_id)).all()
        seen: Dict[str, CoachTravel] = {}
        for record in existing:
            # Exact name match; first record for a name is the template
            if record.coach_name not in seen:
                seen[record.coach_name] = record
        for name, template in seen.items():
            session.add(fresh_coach_travel(name, tournament_id, team_id, template))
            coach_rows += 1
        session.commit()

    for tt in created:
        session.refresh(tt)
    logger.info(f"Registered {len(created)} team(s) for tournament {tournament_id}, {coach_rows} coach row(s) seeded")
    return created


def save_team(
    session: Session,
    data: Dict[str, Any],
    team_id: Optional[int] = None,
    coach_names: Optional[Sequence[str]] = None,
) -> Team:
    """
    Create or update a team.

    Without team_id, a team whose trimmed, case-insensitive name matches is
    updated instead of creating a duplicate. When coach_names is given, the
    team-level coach roster is synced to it.
    """
    if team_id is not None:
        team = session.get(Team, team_id)
        if not team:
            raise NotFoundError(f"Team {team_id} not found")
    else:
        key = normalize_name(data.get("name"))
        team = next((t for t in session.exec(select(Team)).all() if normalize_name(t.name) == key), None)
        if team is None:
            team = Team(name=data["name"])

    for field, value in data.items():
        setattr(team, field, value)
    session.add(team)
    session.commit()
    session.refresh(team)

    if coach_names is not None:
        sync_team_coaches(session, team.id, coach_names)
    return team


def sync_team_coaches(session: Session, team_id: int, coach_names: Sequence[str]) -> Dict[str, int]:
    """Make the team-level coach rows (no tournament) match coach_names exactly."""
    wanted = [n for n in dict.fromkeys(n.strip() for n in coach_names) if n]
    current = session.exec(
        select(CoachTravel).where(CoachTravel.team_id == team_id, CoachTravel.tournament_id.is_(None))
    ).all()
    current_names = {c.coach_name for c in current}

    removed = 0
    for coach in current:
        if coach.coach_name not in wanted:
            session.delete(coach)
            removed += 1

    added = 0
    for name in wanted:
        if name not in current_names:
            session.add(fresh_coach_travel(name, None, team_id))
            added += 1

    session.commit()
    return {"added": added, "removed": removed}
