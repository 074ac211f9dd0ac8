from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Request, Response
from sqlmodel import Session

from charsheet.core.db import get_session
from charsheet.core.observability import emit

from .schemas import CharacterOut
from .service import (
    create_character,
    create_debug_character,
    delete_character,
    get_character,
    list_characters,
    update_character,
    update_details,
    update_inventory,
    update_json_field,
)

router = APIRouter(tags=["characters"])

# ids are sqlite INTEGER (signed 64-bit)
CHARACTER_ID_MIN = -(2**63)
CHARACTER_ID_MAX = 2**63 - 1


def _character_id() -> Any:
    return Path(..., ge=CHARACTER_ID_MIN, le=CHARACTER_ID_MAX)


def _rid(request: Request) -> Optional[str]:
    return getattr(getattr(request, "state", None), "request_id", None) or request.headers.get("X-Request-Id")


@contextmanager
def _internal_errors(action: str, rid: Optional[str]) -> Iterator[None]:
    # validation / not-found pass through; anything else is a 500 carrying the cause
    try:
        yield
    except HTTPException as e:
        emit("error", "character.rejected", str(e.detail), rid, __name__, status_code=e.status_code, action=action)
        raise
    except Exception as e:
        emit("error", "character.internal_error", f"Error {action}: {e}", rid, __name__, type=type(e).__name__)
        raise HTTPException(status_code=500, detail=f"Error {action}: {e}")


@router.get("/characters", response_model=List[CharacterOut])
def api_list_characters(request: Request, session: Session = Depends(get_session)) -> List[CharacterOut]:
    with _internal_errors("fetching characters", _rid(request)):
        return [CharacterOut.from_model(c) for c in list_characters(session)]


@router.get("/characters/{character_id}", response_model=CharacterOut)
def api_get_character(
    request: Request, character_id: int = _character_id(), session: Session = Depends(get_session)
) -> CharacterOut:
    with _internal_errors("fetching character", _rid(request)):
        return CharacterOut.from_model(get_character(session, character_id))


@router.post("/characters", response_model=CharacterOut)
def api_create_character(
    request: Request, body: Dict[str, Any] = Body(...), session: Session = Depends(get_session)
) -> CharacterOut:
    rid = _rid(request)
    with _internal_errors("creating character", rid):
        return CharacterOut.from_model(create_character(session, body, request_id=rid))


@router.put("/characters/{character_id}", response_model=CharacterOut)
def api_update_character(
    request: Request,
    character_id: int = _character_id(),
    body: Dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
) -> CharacterOut:
    rid = _rid(request)
    with _internal_errors("updating character", rid):
        return CharacterOut.from_model(update_character(session, character_id, body, request_id=rid))


@router.put("/characters/{character_id}/inventory", response_model=CharacterOut)
def api_update_inventory(
    request: Request,
    character_id: int = _character_id(),
    body: Dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
) -> CharacterOut:
    with _internal_errors("updating character inventory", _rid(request)):
        return CharacterOut.from_model(update_inventory(session, character_id, body))


@router.put("/characters/{character_id}/details", response_model=CharacterOut)
def api_update_details(
    request: Request,
    character_id: int = _character_id(),
    body: Dict[str, Any] = Body(...),
    session: Session = Depends(get_session),
) -> CharacterOut:
    with _internal_errors("updating character details", _rid(request)):
        return CharacterOut.from_model(update_details(session, character_id, body))


def _json_field_route(path: str, key: str, action: str):
    def endpoint(
        request: Request,
        character_id: int = _character_id(),
        body: Dict[str, Any] = Body(...),
        session: Session = Depends(get_session),
    ) -> CharacterOut:
        rid = _rid(request)
        with _internal_errors(action, rid):
            return CharacterOut.from_model(update_json_field(session, character_id, body, key, request_id=rid))

    endpoint.__name__ = "api_update_" + path.replace("-", "_")
    router.add_api_route(f"/characters/{{character_id}}/{path}", endpoint, methods=["PUT"], response_model=CharacterOut)


_json_field_route("skills", "skills", "updating character skills")
_json_field_route("class-actions", "classActions", "updating character class actions")
_json_field_route("spell-slots", "spellSlots", "updating character spell slots")
_json_field_route("spells", "spells", "updating character spells")
_json_field_route("weapons", "weapons", "updating character weapons")


@router.delete("/characters/{character_id}")
def api_delete_character(
    request: Request, character_id: int = _character_id(), session: Session = Depends(get_session)
) -> Response:
    rid = _rid(request)
    with _internal_errors("deleting character", rid):
        delete_character(session, character_id, request_id=rid)
    return Response(status_code=200)


@router.post("/debug/character", response_model=CharacterOut)
def api_create_debug_character(request: Request, session: Session = Depends(get_session)) -> CharacterOut:
    rid = _rid(request)
    with _internal_errors("creating debug character", rid):
        return CharacterOut.from_model(create_debug_character(session, request_id=rid))
