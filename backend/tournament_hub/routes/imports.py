"""
Bulk Import API Routes
Accepts rows three ways: pasted CSV/TSV text, the extraction integration's
response, or already-parsed entries.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from tournament_hub.database import get_session
from tournament_hub.services.bulk_import import (
    COACH_IMPORT_SCHEMA,
    TOURNAMENT_IMPORT_SCHEMA,
    ExtractionResult,
    ImportExtractionError,
    ImportSummary,
    entries_from_extraction,
    import_coach_rows,
    import_tournament_rows,
    parse_import_rows,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class ImportRequest(BaseModel):
    raw_text: Optional[str] = None
    extraction: Optional[ExtractionResult] = None
    entries: Optional[List[Dict[str, Any]]] = None


def _entries(request: ImportRequest) -> List[Dict[str, Any]]:
    sources = [s for s in (request.raw_text, request.extraction, request.entries) if s is not None]
    if len(sources) != 1:
        raise HTTPException(status_code=400, detail="Provide exactly one of raw_text, extraction or entries")
    try:
        if request.extraction is not None:
            return entries_from_extraction(request.extraction)
    except ImportExtractionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if request.raw_text is not None:
        return parse_import_rows(request.raw_text)
    return list(request.entries)


@router.get("/imports/schemas")
def get_import_schemas():
    """JSON schemas handed to the extraction integration"""
    return {"coaches": COACH_IMPORT_SCHEMA, "tournaments": TOURNAMENT_IMPORT_SCHEMA}


@router.post("/imports/coaches", response_model=ImportSummary)
def import_coaches(request: ImportRequest, session: Session = Depends(get_session)):
    """
    Create missing tournaments, teams and coach travel records.

    Rows already on file are counted as skipped. Rows are committed one by
    one, so an unexpected failure leaves the rows before it in place.
    """
    entries = _entries(request)
    try:
        return import_coach_rows(session, entries)
    except Exception as e:
        session.rollback()
        logger.error(f"Coach import failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to import coaches: {str(e)}")


@router.post("/imports/tournaments", response_model=ImportSummary)
def import_tournaments(request: ImportRequest, session: Session = Depends(get_session)):
    entries = _entries(request)
    try:
        return import_tournament_rows(session, entries)
    except Exception as e:
        session.rollback()
        logger.error(f"Tournament import failed: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to import tournaments: {str(e)}")
