"""Create a league round: one tournament per age division."""
import logging
from datetime import date
from typing import Dict, List, Optional

from pydantic import BaseModel
from sqlmodel import Session

from tournament_hub.models.league import League
from tournament_hub.models.tournament import Tournament, TournamentStatus
from tournament_hub.services.errors import NotFoundError

logger = logging.getLogger(__name__)


class DivisionDates(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Optional[str] = None


def create_round_tournaments(
    session: Session,
    league_id: int,
    round_name: str,
    dates_by_division: Dict[str, DivisionDates],
    date_tentative: bool = False,
) -> List[Tournament]:
    """
    Divisions without a start date are skipped. end_date defaults to start_date.
    Tournaments are named "<round> - <division>".
    """
    league = session.get(League, league_id)
    if not league:
        raise NotFoundError(f"League {league_id} not found")

    created = []
    for division, dates in dates_by_division.items():
        if not dates.start_date:
            continue
        tournament = Tournament(
            name=f"{round_name} - {division}",
            league_id=league_id,
            round_name=round_name,
            age_division_focus=division,
            start_date=dates.start_date,
            end_date=dates.end_date or dates.start_date,
            location=dates.location or "",
            status=TournamentStatus.not_started,
            date_tentative=date_tentative,
        )
        session.add(tournament)
        created.append(tournament)

    session.commit()
    for t in created:
        session.refresh(t)
    logger.info(f"League {league_id}: created {len(created)} tournament(s) for round '{round_name}'")
    return created
