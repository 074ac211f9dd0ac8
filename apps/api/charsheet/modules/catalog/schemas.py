from __future__ import annotations

import uuid
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Background, CharacterClass, Species


class TraitOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    title: str
    description: str
    species_id: Optional[uuid.UUID] = Field(None, alias="speciesId")


class SpeciesOut(BaseModel):
    id: uuid.UUID
    name: str
    traits: List[TraitOut] = Field(default_factory=list)

    @classmethod
    def from_model(cls, species: Species) -> "SpeciesOut":
        return cls(
            id=species.id,
            name=species.name,
            traits=[
                TraitOut(id=t.id, title=t.title, description=t.description, species_id=t.species_id)
                for t in species.traits
            ],
        )


class BackgroundFeatureOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    title: str
    description: str
    background_id: Optional[uuid.UUID] = Field(None, alias="backgroundId")


class BackgroundOut(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    features: List[BackgroundFeatureOut] = Field(default_factory=list)

    @classmethod
    def from_model(cls, background: Background) -> "BackgroundOut":
        return cls(
            id=background.id,
            name=background.name,
            description=background.description,
            features=[
                BackgroundFeatureOut(id=f.id, title=f.title, description=f.description, background_id=f.background_id)
                for f in background.features
            ],
        )


class ClassFeatureOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    title: str
    description: str
    level: int
    class_id: Optional[uuid.UUID] = Field(None, alias="classId")


class CharacterClassOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    name: str
    description: Optional[str] = None
    hit_die: str = Field(..., alias="hitDie")
    features: List[ClassFeatureOut] = Field(default_factory=list)

    @classmethod
    def from_model(cls, character_class: CharacterClass) -> "CharacterClassOut":
        return cls(
            id=character_class.id,
            name=character_class.name,
            description=character_class.description,
            hit_die=character_class.hit_die,
            features=[
                ClassFeatureOut(
                    id=f.id, title=f.title, description=f.description, level=f.level, class_id=f.class_id
                )
                for f in character_class.features
            ],
        )
