from __future__ import annotations

import os
from typing import Dict

from sqlmodel import Session

from charsheet.core.observability import emit
from charsheet.modules.characters.repository import CharacterRepository
from charsheet.modules.characters.service import build_sample_character, first_catalog_entries

from . import definitions
from .repository import (
    BackgroundRepository,
    CatalogRepository,
    CharacterClassRepository,
    SpeciesRepository,
)

SAMPLE_CHARACTER_NAME = "Tom(Debug Character)"


def is_sample_character_enabled(*, default: bool = True) -> bool:
    """
    Feature flag:
      SEED_SAMPLE_CHARACTER=0 -> no sample character at startup
      SEED_SAMPLE_CHARACTER=1 -> create it when the character table is empty
    """
    v = os.environ.get("SEED_SAMPLE_CHARACTER")
    if v is None:
        return default
    v = v.strip().lower()
    return v not in ("0", "false", "no", "")


def seed_catalog(repo: CatalogRepository, catalog: str) -> int:
    """Populate one catalog table if it is empty. Returns the number of rows created."""
    if repo.count() != 0:
        emit("info", "seed.skipped", f"{catalog} already exist, skipping initialization", None, __name__)
        return 0

    emit("info", "seed.start", f"Initializing {catalog} data...", None, __name__)
    created = 0
    for name in definitions.list_names(catalog):
        try:
            saved = repo.save(definitions.instantiate(catalog, name))
        except Exception as e:
            # one bad entry never blocks the rest
            emit("error", "seed.entry_failed", f"Error creating {catalog} {name}: {e}", None, __name__)
            continue
        created += 1
        emit("info", "seed.created", f"Created {name} {catalog} with ID: {saved.id}", None, __name__)
    emit("info", "seed.done", f"{catalog} initialization complete", None, __name__, created=created)
    return created


def seed_sample_character(session: Session) -> bool:
    """Best-effort: never raises."""
    try:
        repo = CharacterRepository(session)
        if repo.count() != 0:
            emit("info", "seed.skipped", "Characters already exist, skipping debug character creation", None, __name__)
            return False

        firsts = first_catalog_entries(session)
        if firsts is None:
            emit("warning", "seed.sample_skipped", "Cannot create debug character: missing species, background, or class data", None, __name__)
            return False

        saved = repo.save(build_sample_character(SAMPLE_CHARACTER_NAME, *firsts))
        emit("info", "seed.sample_created", f"Created debug character with ID: {saved.id}", None, __name__)
        return True
    except Exception as e:
        emit("error", "seed.sample_failed", f"Error creating debug character: {e}", None, __name__)
        return False


def seed_all(session: Session) -> Dict[str, int]:
    """Species -> Background -> CharacterClass -> sample Character, in that order."""
    out = {
        definitions.CATALOG_SPECIES: seed_catalog(SpeciesRepository(session), definitions.CATALOG_SPECIES),
        definitions.CATALOG_BACKGROUND: seed_catalog(BackgroundRepository(session), definitions.CATALOG_BACKGROUND),
        definitions.CATALOG_CLASS: seed_catalog(CharacterClassRepository(session), definitions.CATALOG_CLASS),
    }
    if is_sample_character_enabled():
        out["sample_character"] = int(seed_sample_character(session))
    return out
