import uuid
from typing import List, Optional

from sqlalchemy import Column, Text
from sqlmodel import Field, Relationship, SQLModel


# Catalog rows are seeded once and read-only afterwards.
# Children are owned by exactly one parent; `position` keeps definition order.
class Species(SQLModel, table=True):
    __tablename__ = "species"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True)

    traits: List["Trait"] = Relationship(
        back_populates="species",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Trait.position"},
    )


class Trait(SQLModel, table=True):
    __tablename__ = "traits"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str
    description: str = Field(sa_column=Column(Text, nullable=False))
    position: int = Field(default=0)
    species_id: Optional[uuid.UUID] = Field(default=None, foreign_key="species.id", index=True)

    species: Optional[Species] = Relationship(back_populates="traits")


class Background(SQLModel, table=True):
    __tablename__ = "backgrounds"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    features: List["BackgroundFeature"] = Relationship(
        back_populates="background",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "BackgroundFeature.position"},
    )


class BackgroundFeature(SQLModel, table=True):
    __tablename__ = "background_features"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str
    description: str = Field(sa_column=Column(Text, nullable=False))
    position: int = Field(default=0)
    background_id: Optional[uuid.UUID] = Field(default=None, foreign_key="backgrounds.id", index=True)

    background: Optional[Background] = Relationship(back_populates="features")


class CharacterClass(SQLModel, table=True):
    __tablename__ = "character_classes"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(unique=True, index=True)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    hit_die: str  # d6|d8|d10

    features: List["ClassFeature"] = Relationship(
        back_populates="character_class",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "ClassFeature.position"},
    )


class ClassFeature(SQLModel, table=True):
    __tablename__ = "class_features"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str
    description: str = Field(sa_column=Column(Text, nullable=False))
    level: int  # minimum class level the feature applies from
    position: int = Field(default=0)
    class_id: Optional[uuid.UUID] = Field(default=None, foreign_key="character_classes.id", index=True)

    character_class: Optional[CharacterClass] = Relationship(back_populates="features")
