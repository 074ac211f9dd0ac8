import uuid
from typing import Optional

from sqlalchemy import Column, Text
from sqlmodel import Field, Relationship, SQLModel

from charsheet.core.observability import now_iso
from charsheet.modules.catalog.models import Background, CharacterClass, Species

DEFAULT_COINS = '{"platinum":0,"gold":0,"electrum":0,"silver":0,"copper":0}'


def _json_text(default: str):
    return Field(default=default, sa_column=Column(Text, nullable=False, default=default))


def ability_modifier(score: Optional[int]) -> int:
    if score is None:
        return 0
    return (score - 10) // 2


# Catalog associations are references only; deleting a character never touches them.
class Character(SQLModel, table=True):
    __tablename__ = "characters"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str

    species_id: uuid.UUID = Field(foreign_key="species.id", index=True)
    background_id: uuid.UUID = Field(foreign_key="backgrounds.id", index=True)
    class_id: uuid.UUID = Field(foreign_key="character_classes.id", index=True)

    level: int = Field(default=1)  # 1..20
    temporary_hp: int = Field(default=0)
    current_hp: int = Field(default=0)
    max_hp: int = Field(default=0)
    speed: int = Field(default=0)

    strength: int = Field(default=0)
    dexterity: int = Field(default=0)
    constitution: int = Field(default=0)
    intelligence: int = Field(default=0)
    wisdom: int = Field(default=0)
    charisma: int = Field(default=0)

    # opaque JSON text, stored verbatim
    coins: str = _json_text(DEFAULT_COINS)
    items: str = _json_text("[]")
    details: str = _json_text("{}")
    skills: str = _json_text("[]")
    class_actions: str = _json_text("[]")
    spell_slots: str = _json_text("[]")
    spells: str = _json_text("[]")
    weapons: str = _json_text("[]")

    created_at: str = Field(default_factory=now_iso)

    species: Optional[Species] = Relationship()
    background: Optional[Background] = Relationship()
    character_class: Optional[CharacterClass] = Relationship()
