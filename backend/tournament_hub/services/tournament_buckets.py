"""
Tournament list shaping: buckets, sort orders, search, league rounds and
Stay & Play housing alerts.

Bucket precedence for each league-less tournament (order matters):
  1. status Complete                           -> past
  2. start_date inside the current month       -> this_month
  3. start_date today or later                 -> upcoming
  4. otherwise                                 -> past
  No start_date: not Complete -> upcoming, Complete -> past.

A Complete tournament dated this month therefore lands in past.
"""
import os
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from tournament_hub.models.league import DEFAULT_LEAGUE_ROUNDS, League
from tournament_hub.models.tournament import GenderFocus, Tournament, TournamentStatus
from tournament_hub.utils.dates import coerce_date, days_until, month_bounds
from tournament_hub.utils.names import name_sort_key

NO_AGE_DIVISION = "No Age Division"
UNASSIGNED_ROUND = "Unassigned"

HOUSING_ALERT_DAYS = int(os.getenv("HOUSING_ALERT_DAYS", "3"))

STATUS_RANK = {
    TournamentStatus.not_started.value: 1,
    TournamentStatus.in_progress.value: 2,
    TournamentStatus.complete.value: 3,
}

SORT_OPTIONS = ("date-asc", "date-desc", "name-asc", "name-desc", "status")


@dataclass
class TournamentBuckets:
    upcoming: List[Tournament] = field(default_factory=list)
    this_month: List[Tournament] = field(default_factory=list)
    past: List[Tournament] = field(default_factory=list)
    boys_by_age: Dict[str, List[Tournament]] = field(default_factory=dict)
    girls_by_age: Dict[str, List[Tournament]] = field(default_factory=dict)


def _status(t: Tournament) -> str:
    # Enum members and raw strings from the DB compare equal; normalize for dict lookups
    s = t.status
    return s.value if isinstance(s, TournamentStatus) else (s or "")


def _gender(t: Tournament) -> str:
    g = t.gender_focus
    return g.value if isinstance(g, GenderFocus) else (g or "")


def bucket_tournaments(tournaments: Sequence[Tournament], today: date) -> TournamentBuckets:
    """Partition league-less tournaments into upcoming / this month / past and by age+gender."""
    month_start, month_end = month_bounds(today)
    buckets = TournamentBuckets()

    for t in tournaments:
        if t.league_id:
            continue

        is_complete = _status(t) == TournamentStatus.complete.value
        start = coerce_date(t.start_date)

        if start is not None:
            if is_complete:
                buckets.past.append(t)
            elif month_start <= start <= month_end:
                buckets.this_month.append(t)
            elif start >= today:
                buckets.upcoming.append(t)
            else:
                buckets.past.append(t)
        elif not is_complete:
            buckets.upcoming.append(t)
        else:
            buckets.past.append(t)

        age = t.age_division_focus or NO_AGE_DIVISION
        gender = _gender(t)
        if gender == GenderFocus.boys.value:
            buckets.boys_by_age.setdefault(age, []).append(t)
        elif gender == GenderFocus.girls.value:
            buckets.girls_by_age.setdefault(age, []).append(t)

    return buckets


def sort_tournaments(tournaments: Sequence[Tournament], sort_by: str = "date-asc") -> List[Tournament]:
    """
    Sort a flat tournament list.

    - date-asc:  oldest first, undated last
    - date-desc: newest first, undated first
    - name-asc / name-desc
    - status:    Not Started < In Progress < Complete (unknown statuses first)
    Unknown sort keys return the input order.
    """
    items = list(tournaments)

    if sort_by == "date-asc":
        dated = [t for t in items if coerce_date(t.start_date) is not None]
        undated = [t for t in items if coerce_date(t.start_date) is None]
        return sorted(dated, key=lambda t: coerce_date(t.start_date)) + undated
    if sort_by == "date-desc":
        dated = [t for t in items if coerce_date(t.start_date) is not None]
        undated = [t for t in items if coerce_date(t.start_date) is None]
        return undated + sorted(dated, key=lambda t: coerce_date(t.start_date), reverse=True)
    if sort_by == "name-asc":
        return sorted(items, key=lambda t: name_sort_key(t.name))
    if sort_by == "name-desc":
        return sorted(items, key=lambda t: name_sort_key(t.name), reverse=True)
    if sort_by == "status":
        return sorted(items, key=lambda t: STATUS_RANK.get(_status(t), 0))
    return items


def filter_tournaments(
    tournaments: Sequence[Tournament], show_no_housing: bool = False, search: Optional[str] = None
) -> List[Tournament]:
    """Hide no-housing tournaments unless asked; substring search over name/location/division/partner."""
    result = list(tournaments)
    if not show_no_housing:
        result = [t for t in result if t.housing_required is not False]

    if search and search.strip():
        query = search.lower()
        result = [
            t
            for t in result
            if query in (t.name or "").lower()
            or query in (t.location or "").lower()
            or query in (t.age_division_focus or "").lower()
            or query in (t.housing_partner or "").lower()
        ]
    return result


# ============================================================================
# League rounds
# ============================================================================


@dataclass
class RoundGroup:
    round_name: str
    tournaments: List[Tournament] = field(default_factory=list)


def group_league_rounds(league: League, tournaments: Sequence[Tournament]) -> List[RoundGroup]:
    """
    Group a league's tournaments by round, in the league's round order.

    Tournaments are ordered by start date (undated treated as 9999-12-31), then
    name. Tournaments with no round, or a round the league doesn't list, go to a
    trailing "Unassigned" group that is only present when non-empty.
    """
    rounds = list(league.rounds) if league.rounds else list(DEFAULT_LEAGUE_ROUNDS)
    ordered = sorted(
        tournaments,
        key=lambda t: (coerce_date(t.start_date) or date(9999, 12, 31), name_sort_key(t.name)),
    )

    groups = [RoundGroup(round_name=r, tournaments=[t for t in ordered if t.round_name == r]) for r in rounds]
    leftovers = [t for t in ordered if not t.round_name or t.round_name not in rounds]
    if leftovers:
        groups.append(RoundGroup(round_name=UNASSIGNED_ROUND, tournaments=leftovers))
    return groups


def upcoming_league_tournaments(
    tournaments: Sequence[Tournament], league_id: int, today: date, limit: int = 3
) -> List[Tournament]:
    """Next dated tournaments of a league: starting today or later, or already In Progress."""
    candidates = [
        t
        for t in tournaments
        if t.league_id == league_id
        and coerce_date(t.start_date) is not None
        and (coerce_date(t.start_date) >= today or _status(t) == TournamentStatus.in_progress.value)
    ]
    candidates.sort(key=lambda t: coerce_date(t.start_date))
    return candidates[:limit]


# ============================================================================
# Stay & Play housing
# ============================================================================


def housing_alerts(tournaments: Sequence[Tournament], now: datetime) -> List[Tournament]:
    """Stay & Play tournaments whose housing opens within the alert window and no email has gone out."""
    alerts = []
    for t in tournaments:
        if t.stay_play_required is not True:
            continue
        if not t.housing_opens_date or t.housing_email_sent:
            continue
        remaining = days_until(t.housing_opens_date, now)
        if 0 <= remaining <= HOUSING_ALERT_DAYS:
            alerts.append(t)
    return alerts


def housing_status(tournament: Tournament, now: datetime) -> Optional[str]:
    if not tournament.housing_opens_date:
        return None
    if tournament.housing_opens_date < now:
        return "Housing Open"
    remaining = days_until(tournament.housing_opens_date, now)
    if remaining <= HOUSING_ALERT_DAYS and not tournament.housing_email_sent:
        return f"Opens in {remaining} days - Send Email!"
    return "Housing Opens Soon"
