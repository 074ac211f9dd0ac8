from __future__ import annotations

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import func
from sqlmodel import Session, SQLModel, select

ModelT = TypeVar("ModelT", bound=SQLModel)


class Repository(Generic[ModelT]):
    """
    Store-and-retrieve for one table model.

    Every write commits on its own; callers never span two writes in one
    transaction.
    """

    model: Type[ModelT]

    def __init__(self, session: Session) -> None:
        self.session = session

    def save(self, entity: ModelT) -> ModelT:
        # insert-or-update keyed by primary key
        self.session.add(entity)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return entity

    def find_by_id(self, entity_id: Any) -> Optional[ModelT]:
        return self.session.get(self.model, entity_id)

    def find_all(self) -> List[ModelT]:
        return list(self.session.exec(select(self.model)).all())

    def count(self) -> int:
        return int(self.session.exec(select(func.count()).select_from(self.model)).one())

    def delete(self, entity: ModelT) -> None:
        self.session.delete(entity)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
