from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from charsheet.modules.catalog.schemas import BackgroundOut, CharacterClassOut, SpeciesOut

from .models import Character, ability_modifier


class CharacterOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    species: Optional[SpeciesOut] = None
    background: Optional[BackgroundOut] = None
    character_class: Optional[CharacterClassOut] = Field(None, alias="characterClass")

    level: int = 1
    temporary_hp: int = Field(0, alias="temporaryHp")
    current_hp: int = Field(0, alias="currentHp")
    max_hp: int = Field(0, alias="maxHp")
    speed: int = 0

    strength: int = 0
    dexterity: int = 0
    constitution: int = 0
    intelligence: int = 0
    wisdom: int = 0
    charisma: int = 0

    strength_modifier: int = Field(0, alias="strengthModifier")
    dexterity_modifier: int = Field(0, alias="dexterityModifier")
    constitution_modifier: int = Field(0, alias="constitutionModifier")
    intelligence_modifier: int = Field(0, alias="intelligenceModifier")
    wisdom_modifier: int = Field(0, alias="wisdomModifier")
    charisma_modifier: int = Field(0, alias="charismaModifier")

    coins: str
    items: str
    details: str
    skills: str
    class_actions: str = Field(..., alias="classActions")
    spell_slots: str = Field(..., alias="spellSlots")
    spells: str
    weapons: str

    created_at: Optional[str] = Field(None, alias="createdAt")

    @classmethod
    def from_model(cls, c: Character) -> "CharacterOut":
        return cls(
            id=c.id,
            name=c.name,
            species=SpeciesOut.from_model(c.species) if c.species else None,
            background=BackgroundOut.from_model(c.background) if c.background else None,
            character_class=CharacterClassOut.from_model(c.character_class) if c.character_class else None,
            level=c.level,
            temporary_hp=c.temporary_hp,
            current_hp=c.current_hp,
            max_hp=c.max_hp,
            speed=c.speed,
            strength=c.strength,
            dexterity=c.dexterity,
            constitution=c.constitution,
            intelligence=c.intelligence,
            wisdom=c.wisdom,
            charisma=c.charisma,
            strength_modifier=ability_modifier(c.strength),
            dexterity_modifier=ability_modifier(c.dexterity),
            constitution_modifier=ability_modifier(c.constitution),
            intelligence_modifier=ability_modifier(c.intelligence),
            wisdom_modifier=ability_modifier(c.wisdom),
            charisma_modifier=ability_modifier(c.charisma),
            coins=c.coins,
            items=c.items,
            details=c.details,
            skills=c.skills,
            class_actions=c.class_actions,
            spell_slots=c.spell_slots,
            spells=c.spells,
            weapons=c.weapons,
            created_at=c.created_at,
        )
