"""
Deterministic normalization rules.

Fixed tables and markers the roster pipeline relies on. Nothing here is
configurable at runtime; the same export always yields the same unit cards.
"""

# Profile discriminators (profile.typeName)
UNIT_PROFILE = "Unit"
ABILITIES_PROFILE = "Abilities"
TRANSPORT_PROFILE = "Transport"
RANGED_WEAPONS = "Ranged Weapons"
MELEE_WEAPONS = "Melee Weapons"
WEAPON_PROFILES = (RANGED_WEAPONS, MELEE_WEAPONS)

CAPACITY_CHARACTERISTIC = "Capacity"
DESCRIPTION_CHARACTERISTIC = "Description"
POINTS_COST = "pts"
ENHANCEMENT_GROUP = "enhancement"

# Leading marker the list builder puts in front of multi-profile weapons
MULTI_PROFILE_MARKER = "➤"

# Separates a base weapon from its profile variant ("Plasma gun - supercharge")
WEAPON_VARIANT_SEPARATOR = " - "

FRAGMENT_PREFIX = "#/listforge-json/"
DOWNLOAD_FILENAME = "cleaned_roster.json"

KEYWORD_SHORTHAND = {
    "Assault": "As",
    "Rapid Fire": "RF",
    "Ignores Cover": "IC",
    "Twin-linked": "TL",
    "Pistol": "Pi",
    "Torrent": "To",
    "Lethal Hits": "Lethal",
    "Lance": "La",
    "Indirect Fire": "IF",
    "Precision": "Pr",
    "Blast": "Bl",
    "Melta": "M",
    "Heavy": "H",
    "Hazardous": "Hz",
    "Devastating Wounds": "Dev",
    "Sustained Hits": "Sus",
    "Extra Attacks": "EA",
    "Anti": "A",
    "One Shot": "OS",
    "Psychic": "Psy",
    "Conversion": "Cv",
}

ANTI_TARGETS = {
    "Infantry": "I",
    "Vehicle": "V",
    "Monster": "M",
    "Fly": "F",
    "Character": "C",
    "Psyker": "P",
    "Beast": "B",
    "Swarm": "S",
    "Titanic": "T",
}

# Non-breaking hyphen, figure dash, en dash, em dash
DASH_VARIANTS = "‑‒–—"
