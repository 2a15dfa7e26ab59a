"""
Application-level cascade deletes.

The schema declares foreign keys but no ON DELETE CASCADE, so dependents are
enumerated here, child records first. Each delete is its own statement; a
failure part way leaves the remaining children and the parent in place.
"""
import logging
from typing import Dict, Sequence

from sqlmodel import Session, select

from tournament_hub.models.action_reminder import ActionReminder
from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.finance_transaction import FinanceTransaction
from tournament_hub.models.league import League
from tournament_hub.models.room import Room
from tournament_hub.models.team import Team
from tournament_hub.models.tournament import Tournament
from tournament_hub.models.tournament_team import TournamentTeam
from tournament_hub.services.errors import NotFoundError
from tournament_hub.services.room_occupancy import strip_coaches_from_rooms

logger = logging.getLogger(__name__)

# Dependents removed with a tournament, in delete order
TOURNAMENT_DEPENDENTS = (TournamentTeam, Room, ActionReminder, FinanceTransaction, CoachTravel)


def _delete_where(session: Session, model, column, value) -> int:
    rows = session.exec(select(model).where(column == value)).all()
    for row in rows:
        session.delete(row)
    return len(rows)


def delete_tournament_cascade(session: Session, tournament_id: int) -> Dict[str, int]:
    """
    Delete a tournament and its registrations, rooms, reminders, transactions
    and coach travel rows. Returns per-table delete counts.
    """
    tournament = session.get(Tournament, tournament_id)
    if not tournament:
        raise NotFoundError(f"Tournament {tournament_id} not found")

    coach_ids = session.exec(select(CoachTravel.id).where(CoachTravel.tournament_id == tournament_id)).all()
    strip_coaches_from_rooms(session, coach_ids)

    counts: Dict[str, int] = {}
    for model in TOURNAMENT_DEPENDENTS:
        counts[model.__table__.name] = _delete_where(session, model, model.tournament_id, tournament_id)
    session.flush()

    session.delete(tournament)
    session.commit()
    counts["tournament"] = 1

    logger.info(f"Deleted tournament {tournament_id} with dependents {counts}")
    return counts


def bulk_delete_tournaments(session: Session, tournament_ids: Sequence[int]) -> int:
    """Cascade-delete each tournament in turn. Unknown ids raise before anything else is touched."""
    ids = list(dict.fromkeys(tournament_ids))
    missing = [tid for tid in ids if session.get(Tournament, tid) is None]
    if missing:
        raise NotFoundError(f"Tournaments not found: {missing}")

    for tid in ids:
        delete_tournament_cascade(session, tid)
    return len(ids)


def delete_team_cascade(session: Session, team_id: int) -> Dict[str, int]:
    """Delete a team along with its coach travel rows and tournament registrations."""
    team = session.get(Team, team_id)
    if not team:
        raise NotFoundError(f"Team {team_id} not found")

    coach_ids = session.exec(select(CoachTravel.id).where(CoachTravel.team_id == team_id)).all()
    strip_coaches_from_rooms(session, coach_ids)

    counts = {
        "coachtravel": _delete_where(session, CoachTravel, CoachTravel.team_id, team_id),
        "tournamentteam": _delete_where(session, TournamentTeam, TournamentTeam.team_id, team_id),
    }
    session.flush()
    session.delete(team)
    session.commit()

    logger.info(f"Deleted team {team_id} with dependents {counts}")
    return counts


def delete_league(session: Session, league_id: int) -> None:
    """Leagues delete alone; their tournaments keep a dangling league_id."""
    league = session.get(League, league_id)
    if not league:
        raise NotFoundError(f"League {league_id} not found")
    session.delete(league)
    session.commit()
