"""
Static catalog tables: species traits, background features, class features.

Each table maps a catalog entry name to its ordered feature definitions.
`instantiate()` turns one entry into a fresh, unsaved model graph; nothing
here touches the database.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Tuple, Union

from .models import Background, BackgroundFeature, CharacterClass, ClassFeature, Species, Trait

FeatureDef = Tuple[str, str]  # (title, description)
ClassFeatureDef = Tuple[str, str, int]  # (title, description, level)

CATALOG_SPECIES = "species"
CATALOG_BACKGROUND = "background"
CATALOG_CLASS = "class"

CatalogEntity = Union[Species, Background, CharacterClass]


class CatalogNotFoundError(KeyError):
    """Unknown catalog kind or entry name."""

    def __init__(self, catalog: str, name: str) -> None:
        super().__init__(f"Unknown {catalog}: {name}")
        self.catalog = catalog
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


SPECIES_TRAITS: Dict[str, List[FeatureDef]] = {
    "Aasimar": [
        ("Ability Score Increase.", "When determining your character's ability scores, increase one score by 2 and increase a different score by 1, or increase three different scores by 1. You can't raise any of your scores above 20."),
        ("Creature Type.", "You are a Humanoid."),
        ("Size.", "You are Medium or Small. You choose the size when you select this race."),
        ("Speed.", "Your walking speed is 30 feet."),
        ("Darkvision. ", "You can see in dim light within 60 feet of you as if it were bright light and in darkness as if it were dim light. You discern colors in that darkness only as shades of gray."),
        ("Celestial Resistance.", "You have resistance to necrotic damage and radiant damage."),
        ("Healing Hands.", "As an action, you can touch a creature and roll a number of d4s equal to your proficiency bonus. The creature regains a number of hit points equal to the total rolled. Once you use this trait, you can't use it again until you finish a long rest."),
        ("Light Bearer.", "You know the Light cantrip. Charisma is your spellcasting ability for it."),
        ("Celestial Revelation.", "When you reach 3rd level, choose one of the revelation options below. Thereafter, you can use a bonus action to unleash the celestial energy within yourself, gaining the benefits of that revelation. Your transformation lasts for 1 minute or until you end it as a bonus action. Once you transform using your revelation below, you can't use it again until you finish a long rest. Necrotic Shroud. Your eyes briefly become pools of darkness, and ghostly, flightless wings sprout from your back temporarily. Creatures other than your allies within 10 feet of you that can see you must succeed on a Charisma saving throw (DC 8 + your proficiency bonus + your Charisma modifier) or become frightened of you until the end of your next turn. Until the transformation ends, once on each of your turns, you can deal extra necrotic damage to one target when you deal damage to it with an attack or a spell. The extra damage equals your proficiency bonus. Radiant Consumption. Searing light temporarily radiates from your eyes and mouth. For the duration, you shed bright light in a 10-foot radius and dim light for an additional 10 feet, and at the end of each of your turns, each creature within 10 feet of you takes radiant damage equal to your proficiency bonus. Until the transformation ends, once on each of your turns, you can deal extra radiant damage to one target when you deal damage to it with an attack or a spell. The extra damage equals your proficiency bonus. Radiant Soul. Two luminous, spectral wings sprout from your back temporarily. Until the transformation ends, you have a flying speed equal to your walking speed, and once on each of your turns, you can deal extra radiant damage to one target when you deal damage to it with an attack or a spell. The extra damage equals your proficiency bonus."),
        ("Languages.", "Your character can speak, read, and write Common and one other language that you and your DM agree is appropriate for the character. The Player's Handbook offers a list of languages to choose from. The DM is free to modify that list for a campaign."),
    ],
    "Dragonborn": [
        ("Ability Score Increase.", "When determining your character's ability scores, increase one score by 2 and increase a different score by 1, or increase three different scores by 1. You can't raise any of your scores above 20."),
        ("Creature Type.", "You are a Humanoid."),
        ("Size.", "Medium (about 5–7 feet tall)"),
        ("Speed.", "Your walking speed is 30 feet."),
        ("Dragon Ancestry.", "Your lineage stems from a dragon progenitor. Choose the kind of dragon from the Draconic Ancestors table. Your choice affects your Breath Weapon and Damage Resistance traits as well as your appearance."),
        ("Breath Weapon.", "When you take the Attack action on your turn, you can replace one of your attacks with an exhalation of magical energy in either a 15-foot Cone or a 30-foot Line that is 5 feet wide (choose the shape each time). Each creature in that area must make a Dexterity saving throw (DC 8 plus your Constitution modifier and Proficiency Bonus). On a failed save, a creature takes 1d10 damage of the type determined by your Draconic Ancestry trait. On a successful save, a creature takes half as much damage. This damage increases by 1d10 when you reach character levels 5 (2d10), 11 (3d10), and 17 (4d10). You can use this Breath Weapon a number of times equal to your Proficiency Bonus, and you regain all expended uses when you finish a Long Rest."),
        ("Damage Resistance.", "You have resistance to the type of damage associated with your Draconic Ancestry trait."),
        ("Darkvision.", "You have Darkvision with a range of 60 feet."),
        ("Draconic Flight.", "When you reach character level 5, you can channel draconic magic to give yourself temporary flight. As a Bonus Action, you sprout spectral wings on your back that last for 10 minutes or until you retract the wings (no action required) or have the Incapacitated condition. During that time, you have a Fly Speed equal to your Speed. Your wings appear to be made of the same energy as your Breath Weapon. Once you use this trait, you can't use it again until you finish a Long Rest."),
        ("Languages.", "Your character can speak, read, and write Common and one other language that you and your DM agree is appropriate for the character. The Player's Handbook offers a list of languages to choose from. The DM is free to modify that list for a campaign."),
    ],
    "Dwarf": [
        ("Creature Type.", "Humanoid."),
        ("Size.", "Medium (about 4–5 feet tall)."),
        ("Speed.", "30 feet."),
        ("Darkvision.", "You have Darkvision with a range of 120 feet."),
        ("Dwarven Resilience.", "You have Resistance to Poison damage. You also have Advantage on saving throws you make to avoid or end the Poisoned condition."),
        ("Dwarven Toughness.", "Your Hit Point maximum increases by 1, and it increases by 1 again whenever you gain a level."),
        ("Stonecunning", "As a Bonus Action, you gain Tremorsense with a range of 60 feet for 10 minutes. You must be on a stone surface or touching a stone surface to use this Tremorsense. The stone can be natural or worked. You can use this Bonus Action a number of times equal to your Proficiency Bonus, and you regain all expended uses when you finish a Long Rest."),
    ],
    "Halfling": [
        ("Creature Type.", "Humanoid."),
        ("Size.", "Small (about 2–3 feet tall)."),
        ("Speed.", "30 feet."),
        ("Brave.", "You have Advantage on saving throws you make to avoid or end the Frightened condition."),
        ("Halfling Nimbleness.", "You can move through the space of any creature that is a size larger than you, but you can't stop in the same space."),
        ("Luck.", "When you roll a 1 on the d20 of a D20 Test, you can reroll the die, and you must use the new roll."),
        ("Naturally Stealthy.", "You can take the Hide action even when you are obscured only by a creature that is at least one size larger than you."),
    ],
    "Human": [
        ("Creature Type.", "Humanoid."),
        ("Size.", "Medium (about 4–7 feet tall) or Small (about 2–4 feet tall), chosen when you select this species."),
        ("Speed.", "30 feet."),
        ("Resourceful", "You gain Heroic Inspiration whenever you finish a Long Rest."),
        ("Skillful", "You gain proficiency in one skill of your choice."),
        ("Versatile", "You gain an Origin feat of your choice."),
    ],
}


BACKGROUND_FEATURES: Dict[str, List[FeatureDef]] = {
    "Acolyte": [
        ("Skill Proficiencies", "Insight, Religion"),
        ("Tool Proficiencies", "Calligrapher's Supplies"),
        ("Feat", "Magic initiate(Cleric)"),
        ("Equipment", "Choose A or B: (A) Calligrapher's Supplies, Book (prayers), Holy Symbol, Parchment (10 sheets), Robe, 8 GP; or (B) 50 GP"),
        ("Ability Scores", "Intelligence, Wisdom, Charisma"),
    ],
    "Criminal": [
        ("Equipment", "Choose A or B: (A) 2 Daggers, Thieves’ Tools, Crowbar, 2 Pouches, Traveler’s Clothes, 16 GP; or (B) 50 GP"),
        ("Ability Scores", "Dexterity, Constitution, Intelligence"),
        ("Feat", "Alert"),
    ],
}


CLASS_FEATURES: Dict[str, List[ClassFeatureDef]] = {
    "Fighter": [
        ("Fighting Style", "You have honed your martial prowess and gain a Fighting Style feat of your choice.\nWhenever you gain a Fighter level, you can replace the feat you chose with a different Fighting Style feat.", 1),
        ("Second Wind", "You have a limited well of physical and mental stamina that you can draw on. As a Bonus Action, you can use it to regain Hit Points equal to 1d10 plus your Fighter level.\nYou can use this feature twice. You regain one expended use when you finish a Short Rest, and you regain all expended uses when you finish a Long Rest.\nWhen you reach certain Fighter levels, you gain more uses of this feature, as shown in the Second Wind column of the Fighter Features table.", 1),
        ("Action Surge", "You can push yourself beyond your normal limits for a moment. On your turn, you can take one additional action, except the Magic action.\nOnce you use this feature, you can’t do so again until you finish a Short or Long Rest. Starting at level 17, you can use it twice before a rest but only once on a turn.", 2),
        ("Weapon Mastery", "Your training with weapons allows you to use the mastery properties of three kinds of Simple or Martial weapons of your choice. Whenever you finish a Long Rest, you can practice weapon drills and change one of those weapon choices.\nWhen you reach certain Fighter levels, you gain the ability to use the mastery properties of more kinds of weapons, as shown in the Weapon Mastery column of the Fighter Features table.", 1),
        ("Tactical Mind", "You have a mind for tactics on and off the battlefield. When you fail an ability check, you can expend a use of your Second Wind to push yourself toward success. Rather than regaining Hit Points, you roll 1d10 and add the number rolled to the ability check, potentially turning it into a success. If the check still fails, this use of Second Wind isn’t expended.", 2),
    ],
    "Wizard": [
        ("Spellcasting", "As a student of arcane magic, you have learned to cast spells.\nCantrips. You know three Wizard cantrips of your choice. Whenever you finish a Long Rest, you can replace one of your cantrips from this feature with another Wizard cantrip of your choice.\nWhen you reach Wizard levels 4 and 10, you learn another Wizard cantrip of your choice, as shown in the Cantrips column of the Wizard Features table.\nSpellbook. Your wizardly apprenticeship culminated in the creation of a unique book: your spellbook. It is a Tiny object that weighs 3 pounds, contains 100 pages, and can be read only by you or someone casting Identify. You determine the book’s appearance and materials, such as a gilt-edged tome or a collection of vellum bound with twine.\nThe book contains the level 1+ spells you know. It starts with six level 1 Wizard spells of your choice.\nWhenever you gain a Wizard level after 1, add two Wizard spells of your choice to your spellbook. Each of these spells must be of a level for which you have spell slots, as shown in the Wizard Features table. The spells are the culmination of arcane research you do regularly.\nSpell Slots. The Wizard Features table shows how many spell slots you have to cast your level 1+ spells. You regain all expended slots when you finish a Long Rest.\nPrepared Spells of Level 1+. You prepare the list of level 1+ spells that are available for you to cast with this feature. To do so, choose four spells from your spellbook. The chosen spells must be of a level for which you have spell slots.\nThe number of spells on your list increases as you gain Wizard levels, as shown in the Prepared Spells column of the Wizard Features table. Whenever that number increases, choose additional Wizard spells until the number of spells on your list matches the number in the table. The chosen spells must be of a level for which you have spell slots. For example, if you’re a level 3 Wizard, your list of prepared spells can include six spells of levels 1 and 2 in any combination, chosen from your spellbook.\nIf another Wizard feature gives you spells that you always have prepared, those spells don’t count against the number of spells you can prepare with this feature, but those spells otherwise count as Wizard spells for you.\nChanging Your Prepared Spells. Whenever you finish a Long Rest, you can change your list of prepared spells, replacing any of the spells there with spells from your spellbook.\nSpellcasting Ability. Intelligence is your spellcasting ability for your Wizard spells.\nSpellcasting Focus. You can use an Arcane Focus or your spellbook as a Spellcasting Focus for your Wizard spells.", 1),
        ("Arcane Recovery", "You can regain some of your magical energy by studying your spellbook. When you finish a Short Rest, you can choose expended spell slots to recover. The spell slots can have a combined level equal to no more than half your Wizard level (round up), and none of the slots can be level 6 or higher. For example, if you’re a level 4 Wizard, you can recover up to two levels’ worth of spell slots, regaining either one level 2 spell slot or two level 1 spell slots.\nOnce you use this feature, you can’t do so again until you finish a Long Rest.", 1),
        ("Ritual Adept", "You can cast any spell as a Ritual if that spell has the Ritual tag and the spell is in your spellbook. You needn’t have the spell prepared, but you must read from the book to cast a spell in this way.", 1),
        ("Scholar", "While studying magic, you also specialized in another field of study. Choose one of the following skills in which you have proficiency: Arcana, History, Investigation, Medicine, Nature, or Religion. You have Expertise in the chosen skill.", 2),
    ],
}


def hit_die_for(class_name: str) -> str:
    if class_name in ("Fighter", "Paladin", "Ranger"):
        return "d10"
    if class_name in ("Wizard", "Sorcerer"):
        return "d6"
    return "d8"


def _create_species(name: str) -> Species:
    species = Species(name=name)
    species.traits = [
        Trait(title=title, description=description, position=i)
        for i, (title, description) in enumerate(SPECIES_TRAITS[name])
    ]
    return species


def _create_background(name: str) -> Background:
    background = Background(name=name)
    background.features = [
        BackgroundFeature(title=title, description=description, position=i)
        for i, (title, description) in enumerate(BACKGROUND_FEATURES[name])
    ]
    return background


def _create_class(name: str) -> CharacterClass:
    character_class = CharacterClass(name=name, hit_die=hit_die_for(name))
    character_class.features = [
        ClassFeature(title=title, description=description, level=level, position=i)
        for i, (title, description, level) in enumerate(CLASS_FEATURES[name])
    ]
    return character_class


_CATALOGS: Dict[str, Tuple[Dict[str, list], Callable[[str], CatalogEntity]]] = {
    CATALOG_SPECIES: (SPECIES_TRAITS, _create_species),
    CATALOG_BACKGROUND: (BACKGROUND_FEATURES, _create_background),
    CATALOG_CLASS: (CLASS_FEATURES, _create_class),
}


def list_names(catalog: str) -> List[str]:
    if catalog not in _CATALOGS:
        raise CatalogNotFoundError("catalog", catalog)
    table, _ = _CATALOGS[catalog]
    return list(table.keys())


def instantiate(catalog: str, name: str) -> CatalogEntity:
    """Build a new entity with its children; each call returns fresh objects."""
    if catalog not in _CATALOGS:
        raise CatalogNotFoundError("catalog", catalog)
    table, factory = _CATALOGS[catalog]
    if name not in table:
        raise CatalogNotFoundError(catalog, name)
    return factory(name)
