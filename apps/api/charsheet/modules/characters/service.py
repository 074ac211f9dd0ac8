from __future__ import annotations

import json
import re
import time
import uuid
from typing import Any, Dict, List, Optional, Tuple

from fastapi import HTTPException
from sqlmodel import Session

from charsheet.core.observability import emit
from charsheet.modules.catalog.models import Background, CharacterClass, Species
from charsheet.modules.catalog.repository import (
    BackgroundRepository,
    CharacterClassRepository,
    SpeciesRepository,
)

from .models import Character
from .repository import CharacterRepository

# request key -> (model attribute, label used in messages)
ABILITY_FIELDS: List[Tuple[str, str, str]] = [
    ("strength", "strength", "Strength"),
    ("dexterity", "dexterity", "Dexterity"),
    ("constitution", "constitution", "Constitution"),
    ("intelligence", "intelligence", "Intelligence"),
    ("wisdom", "wisdom", "Wisdom"),
    ("charisma", "charisma", "Charisma"),
]

VITAL_FIELDS: List[Tuple[str, str, str]] = [
    ("temporaryHp", "temporary_hp", "Temporary HP"),
    ("currentHp", "current_hp", "Current HP"),
    ("maxHp", "max_hp", "Maximum HP"),
    ("speed", "speed", "Speed"),
]

# blobs checked for JSON syntax before they are stored
JSON_FIELDS: Dict[str, Tuple[str, str]] = {
    "skills": ("skills", "skills"),
    "classActions": ("class_actions", "class actions"),
    "spellSlots": ("spell_slots", "spell slots"),
    "spells": ("spells", "spells"),
    "weapons": ("weapons", "weapons"),
}

# blobs stored verbatim
RAW_TEXT_FIELDS: Dict[str, str] = {
    "coins": "coins",
    "items": "items",
    "details": "details",
}

LEVEL_MIN = 1
LEVEL_MAX = 20

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

SAMPLE_SKILLS = (
    '[{"name":"Athletics","ability":"Strength","proficiency":"proficient","other":0},'
    '{"name":"Perception","ability":"Wisdom","proficiency":"proficient","other":0},'
    '{"name":"Stealth","ability":"Dexterity","proficiency":"none","other":0}]'
)
SAMPLE_COINS = '{"platinum":0,"gold":150,"electrum":0,"silver":25,"copper":0}'
SAMPLE_ITEMS = (
    '[{"id":"1","name":"Longsword","description":"A well-crafted longsword","quantity":1,"weight":3.0},'
    '{"id":"2","name":"Healing Potion","description":"Restores 2d4+2 hit points","quantity":3,"weight":0.5}]'
)


# --- input helpers ---
def _reject(status_code: int, message: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail=message)


def _text(body: Dict[str, Any], key: str) -> Optional[str]:
    """Read a body value as text; absent and null are the same thing."""
    v = body.get(key)
    if v is None:
        return None
    if isinstance(v, str):
        return v
    return json.dumps(v, ensure_ascii=False)


def _lower_first(label: str) -> str:
    return label[:1].lower() + label[1:]


def parse_int(raw: str, label: str) -> int:
    """Base-10 only: optional sign, ASCII digits, 32-bit range. No whitespace or underscores."""
    if not _INT_RE.fullmatch(raw):
        raise _reject(400, f"Invalid {_lower_first(label)} format")
    v = int(raw, 10)
    if v < _INT32_MIN or v > _INT32_MAX:
        raise _reject(400, f"Invalid {_lower_first(label)} format")
    return v


def _non_negative(body: Dict[str, Any], key: str, label: str) -> Optional[int]:
    raw = _text(body, key)
    if raw is None:
        return None
    v = parse_int(raw, label)
    if v < 0:
        raise _reject(400, f"{label} cannot be negative")
    return v


def _level(body: Dict[str, Any]) -> Optional[int]:
    raw = _text(body, "level")
    if raw is None:
        return None
    v = parse_int(raw, "level")
    if v < LEVEL_MIN or v > LEVEL_MAX:
        raise _reject(400, f"Level must be between {LEVEL_MIN} and {LEVEL_MAX}")
    return v


def _strict_json(raw: str) -> None:
    def no_constants(token: str) -> Any:
        raise ValueError(f"{token} is not valid JSON")

    json.loads(raw, parse_constant=no_constants)


def validate_json_text(raw: str, label: str) -> str:
    try:
        _strict_json(raw)
    except (ValueError, RecursionError) as e:
        # RecursionError: nesting deeper than the decoder can follow
        raise _reject(400, f"Invalid {label} JSON format: {e}")
    return raw


def _parse_uuid(raw: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except (ValueError, TypeError, AttributeError):
        raise _reject(400, "Invalid UUID format")


# --- shared validation for create / full update ---
def _required_fields(body: Dict[str, Any]) -> Tuple[str, uuid.UUID, uuid.UUID, uuid.UUID]:
    name = _text(body, "name")
    if name is None or not name.strip():
        raise _reject(400, "Character name cannot be empty")

    raw_ids = []
    for key, label in (("speciesId", "Species"), ("backgroundId", "Background"), ("classId", "Class")):
        raw = _text(body, key)
        if raw is None:
            raise _reject(400, f"{label} ID cannot be null")
        raw_ids.append(raw)

    species_id, background_id, class_id = (_parse_uuid(r) for r in raw_ids)
    return name, species_id, background_id, class_id


def _ability_changes(body: Dict[str, Any]) -> Dict[str, int]:
    changes: Dict[str, int] = {}
    for key, attr, label in ABILITY_FIELDS:
        v = _non_negative(body, key, label)
        if v is not None:
            changes[attr] = v
    return changes


def _resolve_catalog(
    session: Session, species_id: uuid.UUID, background_id: uuid.UUID, class_id: uuid.UUID
) -> Tuple[Species, Background, CharacterClass]:
    species = SpeciesRepository(session).find_by_id_with_children(species_id)
    if species is None:
        raise _reject(400, f"Species not found with ID: {species_id}")

    background = BackgroundRepository(session).find_by_id_with_children(background_id)
    if background is None:
        raise _reject(400, f"Background not found with ID: {background_id}")

    character_class = CharacterClassRepository(session).find_by_id_with_children(class_id)
    if character_class is None:
        raise _reject(400, f"Class not found with ID: {class_id}")

    return species, background, character_class


def _assign_catalog(c: Character, species: Species, background: Background, character_class: CharacterClass) -> None:
    c.species = species
    c.species_id = species.id
    c.background = background
    c.background_id = background.id
    c.character_class = character_class
    c.class_id = character_class.id


def _get_or_404(session: Session, character_id: int) -> Character:
    c = CharacterRepository(session).find_by_id(character_id)
    if c is None:
        raise _reject(404, "Character not found")
    return c


# -------------------------
# Characters
# -------------------------
def list_characters(session: Session) -> List[Character]:
    return CharacterRepository(session).find_all()


def get_character(session: Session, character_id: int) -> Character:
    return _get_or_404(session, character_id)


def create_character(session: Session, body: Dict[str, Any], request_id: Optional[str] = None) -> Character:
    emit("info", "character.create", "character creation request", request_id, __name__)

    name, species_id, background_id, class_id = _required_fields(body)
    abilities = _ability_changes(body)
    species, background, character_class = _resolve_catalog(session, species_id, background_id, class_id)

    c = Character(name=name, **abilities)
    _assign_catalog(c, species, background, character_class)

    saved = CharacterRepository(session).save(c)
    emit("info", "character.created", f"created character {saved.id}", request_id, __name__, character_id=saved.id)
    return saved


def update_character(
    session: Session, character_id: int, body: Dict[str, Any], request_id: Optional[str] = None
) -> Character:
    c = _get_or_404(session, character_id)

    name, species_id, background_id, class_id = _required_fields(body)

    # collect every change first; the character is only touched once all fields pass
    changes: Dict[str, Any] = {}
    for key, attr in RAW_TEXT_FIELDS.items():
        raw = _text(body, key)
        if raw is not None:
            changes[attr] = raw

    level = _level(body)
    if level is not None:
        changes["level"] = level

    for key, attr, label in VITAL_FIELDS:
        v = _non_negative(body, key, label)
        if v is not None:
            changes[attr] = v

    changes.update(_ability_changes(body))

    species, background, character_class = _resolve_catalog(session, species_id, background_id, class_id)

    for attr, value in changes.items():
        setattr(c, attr, value)
    c.name = name
    _assign_catalog(c, species, background, character_class)

    saved = CharacterRepository(session).save(c)
    emit(
        "info", "character.updated", f"updated character {saved.id}", request_id, __name__,
        character_id=saved.id, fields=sorted(changes),
    )
    return saved


def update_inventory(session: Session, character_id: int, body: Dict[str, Any]) -> Character:
    c = _get_or_404(session, character_id)

    coins = _text(body, "coins")
    items = _text(body, "items")
    if coins is not None:
        c.coins = coins
    if items is not None:
        c.items = items

    return CharacterRepository(session).save(c)


def update_details(session: Session, character_id: int, body: Dict[str, Any]) -> Character:
    c = _get_or_404(session, character_id)

    details = _text(body, "details")
    if details is not None:
        c.details = details

    return CharacterRepository(session).save(c)


def update_json_field(
    session: Session, character_id: int, body: Dict[str, Any], key: str, request_id: Optional[str] = None
) -> Character:
    """Replace one JSON blob (skills, classActions, spellSlots, spells, weapons)."""
    attr, label = JSON_FIELDS[key]
    c = _get_or_404(session, character_id)

    raw = _text(body, key)
    if raw is not None:
        setattr(c, attr, validate_json_text(raw, label))

    saved = CharacterRepository(session).save(c)
    emit("info", "character.field_updated", f"updated {label}", request_id, __name__, character_id=saved.id)
    return saved


def delete_character(session: Session, character_id: int, request_id: Optional[str] = None) -> None:
    c = _get_or_404(session, character_id)
    CharacterRepository(session).delete(c)
    emit("info", "character.deleted", f"deleted character {character_id}", request_id, __name__)


# -------------------------
# Sample character
# -------------------------
def build_sample_character(
    name: str, species: Species, background: Background, character_class: CharacterClass
) -> Character:
    c = Character(
        name=name,
        level=3,
        temporary_hp=0,
        current_hp=25,
        max_hp=25,
        speed=30,
        strength=16,
        dexterity=14,
        constitution=15,
        intelligence=12,
        wisdom=13,
        charisma=10,
        skills=SAMPLE_SKILLS,
        coins=SAMPLE_COINS,
        items=SAMPLE_ITEMS,
    )
    _assign_catalog(c, species, background, character_class)
    return c


def first_catalog_entries(session: Session) -> Optional[Tuple[Species, Background, CharacterClass]]:
    species = SpeciesRepository(session).find_all()
    backgrounds = BackgroundRepository(session).find_all()
    classes = CharacterClassRepository(session).find_all()
    if not species or not backgrounds or not classes:
        return None
    return species[0], backgrounds[0], classes[0]


def create_debug_character(session: Session, request_id: Optional[str] = None) -> Character:
    firsts = first_catalog_entries(session)
    if firsts is None:
        raise _reject(400, "Cannot create debug character: missing species, background, or class data")

    c = build_sample_character(f"Debug Character {int(time.time() * 1000)}", *firsts)
    saved = CharacterRepository(session).save(c)
    emit("info", "character.debug_created", f"created debug character {saved.id}", request_id, __name__)
    return saved
