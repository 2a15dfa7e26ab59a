"""
Coach travel updates and the finance transactions they drive.

A coach's flight/hotel spend is mirrored as one FinanceTransaction per
category. The link between a coach and its transactions is heuristic:
same tournament, same category, and the coach's name appearing inside the
transaction description ("Flight for Jane Doe"). Renaming a coach, or two
coaches whose names contain one another, will confuse the match.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from sqlmodel import Session, select

from tournament_hub.models.coach_travel import CoachTravel
from tournament_hub.models.finance_transaction import FinanceTransaction, TransactionCategory
from tournament_hub.services.errors import NotFoundError

logger = logging.getLogger(__name__)

# (category, cost field, booked field, confirmation field, description prefix)
_TRAVEL_LEGS = (
    (TransactionCategory.flight, "flight_cost", "flight_booked", "flight_confirmation", "Flight for"),
    (TransactionCategory.hotel, "hotel_cost", "hotel_booked", "hotel_confirmation", "Hotel for"),
)


def _parse_cost(value: Any) -> float:
    """Lenient float parse: None, "" and unparseable text become 0."""
    if value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _category_value(category) -> str:
    return category.value if isinstance(category, TransactionCategory) else category


def find_coach_transaction(
    transactions: Sequence[FinanceTransaction], coach_name: str, category: TransactionCategory
) -> Optional[FinanceTransaction]:
    for tx in transactions:
        if _category_value(tx.category) == category.value and coach_name in (tx.description or ""):
            return tx
    return None


def update_coach_travel(
    session: Session, coach_id: int, changes: Dict[str, Any], today: Optional[date] = None
) -> CoachTravel:
    """
    Apply a partial update to a CoachTravel row, then reconcile its spend.

    For each leg (flight, hotel) whose cost is in `changes`, or whose booked flag
    is in `changes`:
      - cost > 0 and booked -> create or update the matching transaction
      - otherwise           -> delete the matching transaction if there is one
    Legs not mentioned in `changes` are left alone.
    """
    coach = session.get(CoachTravel, coach_id)
    if not coach:
        raise NotFoundError(f"Coach travel record {coach_id} not found")

    # Identity as stored before the update; transactions were written under it
    tournament_id = coach.tournament_id
    team_id = coach.team_id
    coach_name = coach.coach_name
    before = {leg[1]: getattr(coach, leg[1]) for leg in _TRAVEL_LEGS}
    before.update({leg[2]: getattr(coach, leg[2]) for leg in _TRAVEL_LEGS})

    cost_fields = {leg[1] for leg in _TRAVEL_LEGS}
    for key, value in changes.items():
        setattr(coach, key, _parse_cost(value) if key in cost_fields else value)
    session.add(coach)
    session.commit()
    session.refresh(coach)

    touched = [leg for leg in _TRAVEL_LEGS if leg[1] in changes or leg[2] in changes]
    if not touched:
        return coach

    if tournament_id is None:
        logger.warning(f"Coach {coach_id} ({coach_name}) has no tournament; finance transactions skipped")
        return coach

    today = today or date.today()
    tournament_transactions = session.exec(
        select(FinanceTransaction).where(FinanceTransaction.tournament_id == tournament_id)
    ).all()
    coach_transactions = [t for t in tournament_transactions if coach_name in (t.description or "")]

    for category, cost_field, booked_field, confirmation_field, prefix in touched:
        cost = _parse_cost(changes[cost_field]) if cost_field in changes else _parse_cost(before[cost_field])
        booked = changes[booked_field] if booked_field in changes else before[booked_field]
        existing = find_coach_transaction(coach_transactions, coach_name, category)

        if cost > 0 and booked:
            notes = changes.get(confirmation_field) or ""
            if existing:
                existing.amount = cost
                existing.date = today
                existing.notes = notes
                session.add(existing)
            else:
                session.add(
                    FinanceTransaction(
                        tournament_id=tournament_id,
                        team_id=team_id,
                        category=category,
                        description=f"{prefix} {coach_name}",
                        amount=cost,
                        date=today,
                        notes=notes,
                    )
                )
            session.commit()
        elif existing:
            tx_id = existing.id
            session.delete(existing)
            session.commit()
            logger.info(f"Removed {category.value} transaction {tx_id} for {coach_name}")

    session.refresh(coach)
    return coach


# ============================================================================
# Reporting
# ============================================================================


@dataclass
class FinanceTotals:
    total: float = 0.0
    flights: float = 0.0
    hotels: float = 0.0
    misc: float = 0.0
    count: int = 0
    by_tournament: Dict[int, float] = field(default_factory=dict)


def filter_transactions(
    transactions: Sequence[FinanceTransaction],
    tournament_id: Optional[int] = None,
    team_id: Optional[int] = None,
    coach_name: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[FinanceTransaction]:
    """Dashboard filters; coach_name is a case-insensitive description match."""
    result = []
    coach_key = coach_name.lower() if coach_name else None
    for t in transactions:
        if tournament_id is not None and t.tournament_id != tournament_id:
            continue
        if team_id is not None and t.team_id != team_id:
            continue
        if coach_key and coach_key not in (t.description or "").lower():
            continue
        if date_from and t.date < date_from:
            continue
        if date_to and t.date > date_to:
            continue
        result.append(t)
    return result


def summarize_transactions(transactions: Sequence[FinanceTransaction]) -> FinanceTotals:
    """Totals by bucket. Meals and Misc both count toward misc."""
    totals = FinanceTotals()
    for t in transactions:
        amount = t.amount or 0.0
        totals.total += amount
        totals.count += 1
        category = _category_value(t.category)
        if category == TransactionCategory.flight.value:
            totals.flights += amount
        elif category == TransactionCategory.hotel.value:
            totals.hotels += amount
        else:
            totals.misc += amount
        totals.by_tournament[t.tournament_id] = totals.by_tournament.get(t.tournament_id, 0.0) + amount
    return totals
