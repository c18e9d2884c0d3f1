"""
Card view of a normalized unit.

Everything a card renderer needs beyond the raw record: save badges,
filtered ability lists, weapons split into ranged/melee and grouped by base
weapon, and keyword shorthand per weapon profile.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from .models import Ability, UnitCard, UnitRecord, WeaponEntry, WeaponGroup, WeaponProfileRow
from .rules import MELEE_WEAPONS, WEAPON_VARIANT_SEPARATOR
from .shorthand import encode_keywords

_INVULN = re.compile(r"Invulnerable Save\s*(\d\+)", re.IGNORECASE)
_FNP = re.compile(r"Feel No Pain\s*(\d\+)", re.IGNORECASE)
_BADGE_ABILITIES = (re.compile(r"^Invulnerable Save", re.IGNORECASE), re.compile(r"^Feel No Pain", re.IGNORECASE))
_MARKUP = re.compile(r"\^\^|\*\*|__")


def clean_description(text: Optional[str]) -> str:
    if not text:
        return ""
    return _MARKUP.sub("", text).strip()


def _last_match(pattern: re.Pattern, abilities: List[Ability]) -> Optional[str]:
    found = None
    for a in abilities:
        match = pattern.search(a.name)
        if match:
            found = match.group(1)
    return found


def invulnerable_save(record: UnitRecord) -> Optional[str]:
    return _last_match(_INVULN, record.unique_abilities)


def feel_no_pain(record: UnitRecord) -> Optional[str]:
    return _last_match(_FNP, record.unique_abilities) or _last_match(_FNP, record.generic_abilities)


def filter_abilities(abilities: List[Ability]) -> List[Ability]:
    """Drop the abilities shown as badges instead."""
    return [
        Ability(name=a.name, description=clean_description(a.description) or None)
        for a in abilities
        if not any(r.search(a.name) for r in _BADGE_ABILITIES)
    ]


def split_weapon_name(name: str) -> Tuple[str, str]:
    """``"Plasma gun - supercharge"`` -> ``("Plasma gun", "supercharge")``."""
    if WEAPON_VARIANT_SEPARATOR in name:
        parts = name.split(WEAPON_VARIANT_SEPARATOR)
        return parts[0], parts[1]
    return name, ""


def _profile_row(weapon: WeaponEntry, melee: bool, label: str) -> WeaponProfileRow:
    chars = weapon.characteristics
    return WeaponProfileRow(
        label=label,
        range="M" if melee else chars.get("Range"),
        attacks=chars.get("A"),
        skill=chars.get("WS") if melee else chars.get("BS"),
        strength=chars.get("S"),
        ap=chars.get("AP"),
        damage=chars.get("D"),
        count=weapon.count,
        keywords=encode_keywords(chars.get("Keywords")),
    )


def group_weapons(weapons: List[WeaponEntry], melee: bool) -> List[WeaponGroup]:
    grouped: Dict[str, List[WeaponEntry]] = {}
    for w in weapons:
        base, _ = split_weapon_name(w.name)
        grouped.setdefault(base, []).append(w)

    groups = []
    for base, entries in grouped.items():
        if len(entries) > 1:
            rows = [_profile_row(w, melee, split_weapon_name(w.name)[1]) for w in entries]
        else:
            rows = [_profile_row(entries[0], melee, "")]
        groups.append(WeaponGroup(name=base, profiles=rows))
    return groups


def wargear_labels(record: UnitRecord) -> List[str]:
    return [w.name if w.count <= 1 else f"{w.name} ×{w.count}" for w in record.wargear]


def build_card(record: UnitRecord) -> UnitCard:
    melee = [w for w in record.weapons if w.type == MELEE_WEAPONS]
    ranged = [w for w in record.weapons if w.type != MELEE_WEAPONS]

    return UnitCard(
        name=record.name,
        invulnerable_save=invulnerable_save(record),
        feel_no_pain=feel_no_pain(record),
        show_profile_names=len(record.characteristics) > 1,
        characteristics=record.characteristics,
        ranged_weapons=group_weapons(ranged, melee=False),
        melee_weapons=group_weapons(melee, melee=True),
        unique_abilities=filter_abilities(record.unique_abilities),
        generic_abilities=filter_abilities(record.generic_abilities),
        wargear=wargear_labels(record),
        enhancements=[
            Ability(name=e.name, description=clean_description(e.description) or None)
            for e in record.enhancements
        ],
        keywords=record.keywords,
        composition=record.composition,
    )


def build_cards(records: List[UnitRecord]) -> List[UnitCard]:
    return [build_card(r) for r in records]
