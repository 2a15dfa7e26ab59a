"""
Finance API Routes
Transactions per tournament plus dashboard filters and totals. Flight and
hotel transactions for coaches are also written by the coach update route.
"""
import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from sqlmodel import Session, select

from tournament_hub.database import get_session
from tournament_hub.models.finance_transaction import FinanceTransaction, TransactionCategory
from tournament_hub.models.tournament import Tournament
from tournament_hub.services.finance_sync import filter_transactions, summarize_transactions

router = APIRouter()


class TransactionCreate(BaseModel):
    tournament_id: int
    team_id: Optional[int] = None
    category: TransactionCategory = TransactionCategory.misc
    description: str
    amount: float = 0
    date: Optional[datetime.date] = None
    notes: Optional[str] = None


class TransactionUpdate(BaseModel):
    team_id: Optional[int] = None
    category: Optional[TransactionCategory] = None
    description: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[datetime.date] = None
    notes: Optional[str] = None


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tournament_id: int
    team_id: Optional[int] = None
    category: str
    description: str
    amount: float
    date: datetime.date
    notes: Optional[str] = None


class FinanceSummaryResponse(BaseModel):
    total: float
    flights: float
    hotels: float
    misc: float
    count: int
    by_tournament: Dict[int, float]


def _filtered(
    session: Session,
    tournament_id: Optional[int],
    team_id: Optional[int],
    coach_name: Optional[str],
    date_from: Optional[datetime.date],
    date_to: Optional[datetime.date],
) -> List[FinanceTransaction]:
    transactions = session.exec(select(FinanceTransaction)).all()
    return filter_transactions(transactions, tournament_id, team_id, coach_name, date_from, date_to)


@router.get("/finance/transactions", response_model=List[TransactionResponse])
def list_transactions(
    tournament_id: Optional[int] = Query(None),
    team_id: Optional[int] = Query(None),
    coach_name: Optional[str] = Query(None, description="Substring of the description"),
    date_from: Optional[datetime.date] = Query(None),
    date_to: Optional[datetime.date] = Query(None),
    session: Session = Depends(get_session),
):
    """Transactions newest first"""
    transactions = _filtered(session, tournament_id, team_id, coach_name, date_from, date_to)
    return sorted(transactions, key=lambda t: (t.date, t.id), reverse=True)


@router.get("/finance/summary", response_model=FinanceSummaryResponse)
def get_finance_summary(
    tournament_id: Optional[int] = Query(None),
    team_id: Optional[int] = Query(None),
    coach_name: Optional[str] = Query(None),
    date_from: Optional[datetime.date] = Query(None),
    date_to: Optional[datetime.date] = Query(None),
    session: Session = Depends(get_session),
):
    totals = summarize_transactions(_filtered(session, tournament_id, team_id, coach_name, date_from, date_to))
    return FinanceSummaryResponse(
        total=totals.total,
        flights=totals.flights,
        hotels=totals.hotels,
        misc=totals.misc,
        count=totals.count,
        by_tournament=totals.by_tournament,
    )


@router.post("/finance/transactions", response_model=TransactionResponse, status_code=201)
def create_transaction(request: TransactionCreate, session: Session = Depends(get_session)):
    if not session.get(Tournament, request.tournament_id):
        raise HTTPException(status_code=404, detail="Tournament not found")
    data = request.model_dump()
    data["date"] = data["date"] or datetime.date.today()
    transaction = FinanceTransaction(**data)
    session.add(transaction)
    session.commit()
    session.refresh(transaction)
    return transaction


@router.patch("/finance/transactions/{transaction_id}", response_model=TransactionResponse)
def update_transaction(transaction_id: int, request: TransactionUpdate, session: Session = Depends(get_session)):
    transaction = session.get(FinanceTransaction, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    for field, value in request.model_dump(exclude_unset=True).items():
        setattr(transaction, field, value)
    session.add(transaction)
    session.commit()
    session.refresh(transaction)
    return transaction


@router.delete("/finance/transactions/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: int, session: Session = Depends(get_session)):
    transaction = session.get(FinanceTransaction, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    session.delete(transaction)
    session.commit()
    return None
