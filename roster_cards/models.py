from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

NodeKind = Literal["unit", "model", "upgrade"]
NODE_KINDS = ("unit", "model", "upgrade")

Number = Union[int, float]


# --- Raw list-builder export -------------------------------------------------


class RawNode(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _null_as_absent(cls, data: Any) -> Any:
        # a null field falls back to its default, same as a missing one
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Characteristic(RawNode):
    name: str = ""
    text: Optional[str] = Field(default=None, alias="$text")

    @field_validator("text", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)


class Profile(RawNode):
    name: str = ""
    type_name: Optional[str] = Field(default=None, alias="typeName")
    characteristics: List[Characteristic] = Field(default_factory=list)

    def characteristic(self, name: str) -> Optional[Characteristic]:
        for ch in self.characteristics:
            if ch.name == name:
                return ch
        return None


class Rule(RawNode):
    name: str = ""
    hidden: bool = False
    description: Optional[str] = None


class Category(RawNode):
    name: str = ""


class Cost(RawNode):
    name: str = ""
    value: Optional[Number] = None


class SelectionNode(RawNode):
    """
    One unit, model or upgrade choice from the export.

    Every field is optional: a null field reads as absent, absent lists
    are empty, and an unrecognised ``type`` leaves the node unclassified (``kind is None``).
    """

    kind: Optional[NodeKind] = Field(default=None, alias="type")
    name: str = ""
    number: Optional[int] = None
    group: Optional[str] = None
    categories: List[Category] = Field(default_factory=list)
    rules: List[Rule] = Field(default_factory=list)
    profiles: List[Profile] = Field(default_factory=list)
    selections: List[SelectionNode] = Field(default_factory=list)
    costs: List[Cost] = Field(default_factory=list)

    @field_validator("kind", mode="before")
    @classmethod
    def _known_kind(cls, value: Any) -> Optional[str]:
        return value if value in NODE_KINDS else None

    @property
    def is_unit(self) -> bool:
        return self.kind == "unit"

    @property
    def is_model(self) -> bool:
        return self.kind == "model"

    @property
    def is_upgrade(self) -> bool:
        return self.kind == "upgrade"

    @property
    def multiplicity(self) -> int:
        # absent and 0 both count once
        return self.number or 1

    @property
    def model_count(self) -> int:
        return self.number or 0

    def profiles_of(self, *type_names: str) -> List[Profile]:
        return [p for p in self.profiles if p.type_name in type_names]

    def has_profile(self, type_name: str) -> bool:
        return any(p.type_name == type_name for p in self.profiles)

    def cost(self, name: str) -> Optional[Number]:
        for c in self.costs:
            if c.name == name:
                return c.value
        return None


# --- Normalized unit record ----------------------------------------------------


class StatProfile(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    M: Optional[str] = None
    T: Optional[str] = None
    SV: Optional[str] = None
    W: Optional[str] = None
    LD: Optional[str] = None
    OC: Optional[str] = None


class Ability(BaseModel):
    name: str
    description: Optional[str] = None


class WeaponEntry(BaseModel):
    name: str
    count: int = 0
    type: Optional[str] = None
    characteristics: Dict[str, Optional[str]] = Field(default_factory=dict)


class WargearEntry(BaseModel):
    name: str
    count: int = 1
    description: Optional[str] = None


class EnhancementEntry(BaseModel):
    name: str
    count: int = 1
    cost: Optional[Number] = None
    description: Optional[str] = None


class UnitRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    keywords: List[str] = Field(default_factory=list)
    generic_abilities: List[Ability] = Field(default_factory=list, alias="genericAbilities")
    unique_abilities: List[Ability] = Field(default_factory=list, alias="uniqueAbilities")
    characteristics: List[StatProfile] = Field(default_factory=list)
    weapons: List[WeaponEntry] = Field(default_factory=list)
    wargear: List[WargearEntry] = Field(default_factory=list)
    enhancements: List[EnhancementEntry] = Field(default_factory=list)
    composition: str = ""


# --- Card view -------------------------------------------------------------------


class WeaponProfileRow(BaseModel):
    label: str = ""
    range: Optional[str] = None
    attacks: Optional[str] = None
    skill: Optional[str] = None
    strength: Optional[str] = None
    ap: Optional[str] = None
    damage: Optional[str] = None
    count: int = 0
    keywords: List[str] = Field(default_factory=list)


class WeaponGroup(BaseModel):
    name: str
    profiles: List[WeaponProfileRow] = Field(default_factory=list)


class UnitCard(BaseModel):
    name: str
    invulnerable_save: Optional[str] = None
    feel_no_pain: Optional[str] = None
    show_profile_names: bool = False
    characteristics: List[StatProfile] = Field(default_factory=list)
    ranged_weapons: List[WeaponGroup] = Field(default_factory=list)
    melee_weapons: List[WeaponGroup] = Field(default_factory=list)
    unique_abilities: List[Ability] = Field(default_factory=list)
    generic_abilities: List[Ability] = Field(default_factory=list)
    wargear: List[str] = Field(default_factory=list)
    enhancements: List[Ability] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    composition: str = ""


# --- API envelopes -------------------------------------------------------------


class RosterSummary(BaseModel):
    units: int = 0
    models: int = 0
    profiles: int = 0
    weapons: int = 0
    wargear: int = 0
    enhancements: int = 0


class NormalizeResponse(BaseModel):
    units: List[UnitRecord]
    summary: RosterSummary


class FragmentRequest(BaseModel):
    fragment: str


class CardsResponse(BaseModel):
    cards: List[UnitCard]


class HealthResponse(BaseModel):
    ok: bool = True
