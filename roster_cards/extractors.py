"""
Per-facet extraction for one discovered unit.

Every extractor takes the typed unit node and re-walks whatever part of its
subtree it needs. A unit is either a lone model (``kind == "model"``) or a
squad whose direct selections contain the constituent models.
"""

from __future__ import annotations

import json
import re
from typing import Callable, Dict, Iterator, List, Optional

from .models import (
    Ability,
    EnhancementEntry,
    Profile,
    SelectionNode,
    StatProfile,
    WargearEntry,
    WeaponEntry,
)
from .rules import (
    ABILITIES_PROFILE,
    CAPACITY_CHARACTERISTIC,
    DESCRIPTION_CHARACTERISTIC,
    ENHANCEMENT_GROUP,
    MULTI_PROFILE_MARKER,
    POINTS_COST,
    TRANSPORT_PROFILE,
    UNIT_PROFILE,
    WEAPON_PROFILES,
)

_MARKER = re.compile(r"^%s\s*" % re.escape(MULTI_PROFILE_MARKER))
_LEADING_INT = re.compile(r"(\d+)")


# --- profiles ------------------------------------------------------------------


def characteristic_map(profile: Profile) -> Dict[str, Optional[str]]:
    return {ch.name: ch.text for ch in profile.characteristics}


def convert_profile(profile: Profile) -> StatProfile:
    """Flatten a "Unit" profile into ``{name, M, T, SV, W, LD, OC}``."""
    return StatProfile.model_validate({**characteristic_map(profile), "name": profile.name})


def profile_key(profile: Profile) -> str:
    """Identity of a statline: sorted ``name:value`` pairs, order independent."""
    parts = sorted("%s:%s" % (ch.name, ch.text) for ch in profile.characteristics)
    return "|".join(parts)


def weapon_key(name: str, characteristics: Dict[str, Optional[str]]) -> str:
    return name + "|" + json.dumps(characteristics, ensure_ascii=False)


def profile_description(profile: Profile) -> Optional[str]:
    ch = profile.characteristic(DESCRIPTION_CHARACTERISTIC)
    return ch.text if ch is not None else None


def _first_description(node: SelectionNode) -> Optional[str]:
    profiles = node.profiles_of(ABILITIES_PROFILE)
    return profile_description(profiles[0]) if profiles else None


# --- traversal -----------------------------------------------------------------


def constituent_models(unit: SelectionNode) -> List[SelectionNode]:
    if unit.is_model:
        return [unit]
    return [s for s in unit.selections if s.is_model]


def iter_selections(selections: List[SelectionNode]) -> Iterator[SelectionNode]:
    """Every selection below ``selections``, parents before children."""
    for sel in selections:
        yield sel
        yield from iter_selections(sel.selections)


def _scan(unit: SelectionNode, qualifies: Callable[[SelectionNode], bool]) -> Iterator[SelectionNode]:
    for model in constituent_models(unit):
        for sel in iter_selections(model.selections):
            if qualifies(sel):
                yield sel


def _is_enhancement_group(sel: SelectionNode) -> bool:
    return sel.group is not None and ENHANCEMENT_GROUP in sel.group.lower()


# --- extractors ----------------------------------------------------------------


def extract_keywords(unit: SelectionNode) -> List[str]:
    return [c.name for c in unit.categories]


def extract_generic_abilities(unit: SelectionNode) -> List[Ability]:
    abilities = [
        Ability(name=r.name.strip(), description=r.description)
        for r in unit.rules
        if not r.hidden
    ]

    transports = unit.profiles_of(TRANSPORT_PROFILE)
    capacity = transports[0].characteristic(CAPACITY_CHARACTERISTIC) if transports else None
    if capacity is not None and capacity.text:
        match = _LEADING_INT.search(capacity.text)
        if match:
            abilities.append(Ability(name="Capacity: %s" % match.group(1)))

    return abilities


def extract_unique_abilities(unit: SelectionNode) -> List[Ability]:
    return [
        Ability(name=p.name.strip(), description=profile_description(p))
        for p in unit.profiles_of(ABILITIES_PROFILE)
    ]


def extract_characteristics(unit: SelectionNode) -> List[StatProfile]:
    if unit.is_model:
        return [convert_profile(p) for p in unit.profiles_of(UNIT_PROFILE)[:1]]

    seen: Dict[str, StatProfile] = {}

    def collect(profiles: List[Profile]) -> None:
        for p in profiles:
            key = profile_key(p)
            if key not in seen:
                seen[key] = convert_profile(p)

    for model in constituent_models(unit):
        collect(model.profiles_of(UNIT_PROFILE))

    if not seen:
        collect(unit.profiles_of(UNIT_PROFILE))

    return list(seen.values())


def extract_weapons(unit: SelectionNode) -> List[WeaponEntry]:
    weapons: Dict[str, WeaponEntry] = {}

    for sel in _scan(unit, lambda s: s.is_upgrade):
        for profile in sel.profiles_of(*WEAPON_PROFILES):
            name = _MARKER.sub("", profile.name)
            chars = characteristic_map(profile)
            key = weapon_key(name, chars)

            if key not in weapons:
                weapons[key] = WeaponEntry(name=name, type=profile.type_name, characteristics=chars)
            weapons[key].count += sel.multiplicity

    return list(weapons.values())


def extract_wargear(unit: SelectionNode) -> List[WargearEntry]:
    # Identical selections are listed separately, never merged like weapons.
    def qualifies(sel: SelectionNode) -> bool:
        return sel.is_upgrade and not _is_enhancement_group(sel) and sel.has_profile(ABILITIES_PROFILE)

    return [
        WargearEntry(name=sel.name, count=sel.multiplicity, description=_first_description(sel))
        for sel in _scan(unit, qualifies)
    ]


def extract_enhancements(unit: SelectionNode) -> List[EnhancementEntry]:
    def qualifies(sel: SelectionNode) -> bool:
        return sel.is_upgrade and _is_enhancement_group(sel)

    return [
        EnhancementEntry(
            name=sel.name,
            count=1,
            cost=sel.cost(POINTS_COST) or None,
            description=_first_description(sel),
        )
        for sel in _scan(unit, qualifies)
    ]


def extract_composition(unit: SelectionNode) -> str:
    if unit.is_model:
        return "1 model"

    total = sum(m.model_count for m in constituent_models(unit))
    return "%d models" % total
