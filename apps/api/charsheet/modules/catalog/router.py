from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlmodel import Session

from charsheet.core.db import get_session
from charsheet.core.observability import emit

from .repository import BackgroundRepository, CharacterClassRepository, SpeciesRepository
from .schemas import BackgroundOut, CharacterClassOut, SpeciesOut

router = APIRouter(tags=["catalog"])


def _rid(request: Request) -> Optional[str]:
    return getattr(getattr(request, "state", None), "request_id", None) or request.headers.get("X-Request-Id")


def _fetch_failed(what: str, e: Exception, rid: Optional[str]) -> HTTPException:
    emit("error", "catalog.fetch_failed", f"Error fetching {what}: {e}", rid, __name__)
    return HTTPException(status_code=500, detail=f"Error fetching {what}: {e}")


@router.get("/species", response_model=List[SpeciesOut])
def api_list_species(request: Request, session: Session = Depends(get_session)) -> List[SpeciesOut]:
    try:
        rows = SpeciesRepository(session).find_all_with_children()
        out = [SpeciesOut.from_model(s) for s in rows]
    except Exception as e:
        raise _fetch_failed("species", e, _rid(request))
    emit("info", "catalog.species", f"Found {len(out)} species", _rid(request), __name__)
    return out


@router.get("/backgrounds", response_model=List[BackgroundOut])
def api_list_backgrounds(request: Request, session: Session = Depends(get_session)) -> List[BackgroundOut]:
    try:
        rows = BackgroundRepository(session).find_all_with_children()
        out = [BackgroundOut.from_model(b) for b in rows]
    except Exception as e:
        raise _fetch_failed("backgrounds", e, _rid(request))
    emit("info", "catalog.backgrounds", f"Found {len(out)} backgrounds", _rid(request), __name__)
    return out


@router.get("/classes", response_model=List[CharacterClassOut])
def api_list_classes(request: Request, session: Session = Depends(get_session)) -> List[CharacterClassOut]:
    try:
        rows = CharacterClassRepository(session).find_all_with_children()
        out = [CharacterClassOut.from_model(c) for c in rows]
    except Exception as e:
        raise _fetch_failed("classes", e, _rid(request))
    emit("info", "catalog.classes", f"Found {len(out)} classes", _rid(request), __name__)
    return out
