from __future__ import annotations

import uuid
from typing import Any, List, Optional, TypeVar

from sqlalchemy.orm import selectinload
from sqlmodel import select

from charsheet.core.repository import Repository

from .models import Background, CharacterClass, Species

CatalogT = TypeVar("CatalogT", Species, Background, CharacterClass)


class CatalogRepository(Repository[CatalogT]):
    """
    Catalog store with "fetch with children" reads.

    The *_with_children reads load the owned child collection in the same
    round trip so the whole graph can be serialized after the session is gone.
    """

    children_attr: str

    def _children(self) -> Any:
        return getattr(self.model, self.children_attr)

    def find_all_with_children(self) -> List[CatalogT]:
        stmt = select(self.model).options(selectinload(self._children()))
        return list(self.session.exec(stmt).all())

    def find_by_id_with_children(self, entity_id: uuid.UUID) -> Optional[CatalogT]:
        # None means "no such row"; transport/store errors still raise
        stmt = select(self.model).where(self.model.id == entity_id).options(selectinload(self._children()))
        return self.session.exec(stmt).first()

    def find_by_name(self, name: str) -> Optional[CatalogT]:
        return self.session.exec(select(self.model).where(self.model.name == name)).first()


class SpeciesRepository(CatalogRepository[Species]):
    model = Species
    children_attr = "traits"


class BackgroundRepository(CatalogRepository[Background]):
    model = Background
    children_attr = "features"


class CharacterClassRepository(CatalogRepository[CharacterClass]):
    model = CharacterClass
    children_attr = "features"
