from __future__ import annotations

from typing import List, Optional

from sqlalchemy.orm import selectinload
from sqlmodel import select

from charsheet.core.repository import Repository
from charsheet.modules.catalog.models import Background, CharacterClass, Species

from .models import Character


def _with_catalog_graph():
    return (
        selectinload(Character.species).selectinload(Species.traits),
        selectinload(Character.background).selectinload(Background.features),
        selectinload(Character.character_class).selectinload(CharacterClass.features),
    )


class CharacterRepository(Repository[Character]):
    model = Character

    def find_all(self) -> List[Character]:
        stmt = select(Character).options(*_with_catalog_graph()).order_by(Character.id)
        return list(self.session.exec(stmt).all())

    def find_by_id(self, character_id: int) -> Optional[Character]:
        stmt = select(Character).where(Character.id == character_id).options(*_with_catalog_graph())
        return self.session.exec(stmt).first()
