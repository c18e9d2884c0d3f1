from factories import ability_profile, chars, melee_profile, model, ranged_profile, squad, unit_profile, upgrade
from roster_cards.extractors import (
    extract_characteristics,
    extract_composition,
    extract_enhancements,
    extract_generic_abilities,
    extract_unique_abilities,
    extract_wargear,
    extract_weapons,
    profile_key,
)
from roster_cards.models import Profile, SelectionNode


def node(raw):
    return SelectionNode.model_validate(raw)


def test_profile_key_ignores_characteristic_order():
    a = Profile.model_validate({"name": "A", "characteristics": chars(T="4", W="2")})
    b = Profile.model_validate({"name": "B", "characteristics": [{"name": "W", "$text": "2"}, {"name": "T", "$text": "4"}]})
    assert profile_key(a) == profile_key(b) == "T:4|W:2"


def test_identical_statlines_collapse(intercessors):
    profiles = extract_characteristics(node(intercessors))
    assert len(profiles) == 1
    p = profiles[0]
    assert p.name == "Intercessor Sergeant"
    assert (p.M, p.T, p.SV, p.W, p.LD, p.OC) == ('6"', "4", "3+", "2", "6+", "2")


def test_distinct_statlines_keep_first_seen_order():
    unit = squad(
        "Mixed",
        model("Leader", profiles=[unit_profile("Leader", W="3")]),
        model("Trooper", number=4),
        model("Leader 2", profiles=[unit_profile("Leader 2", W="3")]),
    )
    assert [p.name for p in extract_characteristics(node(unit))] == ["Leader", "Trooper"]


def test_characteristics_fall_back_to_unit_profiles():
    unit = squad("Swarm", model("Mite", profiles=[]), profiles=[unit_profile("Swarm", W="4")])
    profiles = extract_characteristics(node(unit))
    assert [p.name for p in profiles] == ["Swarm"]
    assert profiles[0].W == "4"


def test_characteristics_missing_profile_is_empty():
    assert extract_characteristics(node(squad("Nothing"))) == []
    assert extract_characteristics(node(model("Ghost", profiles=[]))) == []


def test_characteristics_keep_extra_fields():
    hero = model("Hero", profiles=[{"name": "Hero", "typeName": "Unit", "characteristics": chars(M='6"', Sh="2")}])
    profile = extract_characteristics(node(hero))[0]
    assert profile.M == '6"'
    assert profile.model_dump()["Sh"] == "2"


def test_weapon_counts_aggregate_across_models(intercessors):
    weapons = extract_weapons(node(intercessors))
    assert [(w.name, w.count, w.type) for w in weapons] == [
        ("Bolt rifle", 5, "Ranged Weapons"),
        ("Close combat weapon", 5, "Melee Weapons"),
    ]
    assert weapons[0].characteristics["Keywords"] == "Assault, Heavy"


def test_weapons_scan_nested_selections_and_default_number():
    gun = ranged_profile("Storm bolter")
    unit = squad(
        "Squad",
        model("A", upgrade("Storm bolter", gun, number=0)),
        model("B", upgrade("Pack", selections=[upgrade("Storm bolter", gun, number=2)])),
    )
    weapons = extract_weapons(node(unit))
    assert len(weapons) == 1
    assert weapons[0].count == 3


def test_weapons_with_different_stats_are_distinct():
    unit = squad(
        "Squad",
        model("A", upgrade("Gun", ranged_profile("Gun", S="4"))),
        model("B", upgrade("Gun", ranged_profile("Gun", S="5"))),
    )
    assert [w.characteristics["S"] for w in extract_weapons(node(unit))] == ["4", "5"]


def test_multi_profile_weapon(captain):
    weapons = extract_weapons(node(captain))
    assert [w.name for w in weapons] == [
        "Master-crafted power weapon",
        "Plasma pistol - standard",
        "Plasma pistol - supercharge",
    ]


def test_weapons_ignore_non_upgrades_and_other_profiles():
    unit = model(
        "Hero",
        {"type": "model", "name": "Familiar", "profiles": [ranged_profile("Bite")]},
        upgrade("Cloak", ability_profile("Cloak")),
    )
    assert extract_weapons(node(unit)) == []


def test_wargear_is_not_merged():
    unit = squad(
        "Squad",
        model("A", upgrade("Medikit", ability_profile("Medikit"))),
        model("B", upgrade("Medikit", ability_profile("Medikit"), number=2)),
    )
    wargear = extract_wargear(node(unit))
    assert [(w.name, w.count) for w in wargear] == [("Medikit", 1), ("Medikit", 2)]


def test_wargear_excludes_enhancements(captain):
    wargear = extract_wargear(node(captain))
    assert [(w.name, w.count) for w in wargear] == [("Relic Shield", 1)]
    assert wargear[0].description == "Some rule text."


def test_enhancements(captain):
    enhancements = extract_enhancements(node(captain))
    assert len(enhancements) == 1
    e = enhancements[0]
    assert (e.name, e.count, e.cost) == ("Artificer Armour", 1, 10)


def test_enhancement_group_is_case_insensitive_and_cost_optional():
    unit = model("Hero", upgrade("Relic", group="Detachment ENHANCEMENTS", number=3))
    enhancements = extract_enhancements(node(unit))
    assert [(e.name, e.count, e.cost) for e in enhancements] == [("Relic", 1, None)]


def test_generic_abilities_skip_hidden(intercessors):
    abilities = extract_generic_abilities(node(intercessors))
    assert [a.name for a in abilities] == ["Oath of Moment"]
    assert abilities[0].description == "Re-roll hits."


def test_generic_abilities_transport_capacity(impulsor):
    abilities = extract_generic_abilities(node(impulsor))
    assert [a.name for a in abilities] == ["Deadly Demise D3", "Capacity: 6"]


def test_transport_without_number_adds_nothing():
    unit = model("Rhino", profiles=[{"typeName": "Transport", "characteristics": chars(Capacity="See rules")}])
    assert extract_generic_abilities(node(unit)) == []


def test_unique_abilities(captain):
    abilities = extract_unique_abilities(node(captain))
    assert [a.name for a in abilities] == ["Rites of Battle", "Invulnerable Save 4+"]


def test_unique_abilities_are_not_recursive(intercessors):
    assert [a.name for a in extract_unique_abilities(node(intercessors))] == ["Objective Secured"]


def test_composition():
    unit = squad("Squad", model("A", number=3), model("B", number=2), model("C", number=0))
    assert extract_composition(node(unit)) == "5 models"
    assert extract_composition(node(model("Hero"))) == "1 model"
    assert extract_composition(node({"type": "unit", "name": "Odd", "selections": [{"type": "model"}]})) == "0 models"


def test_zero_point_enhancement_has_no_cost():
    unit = model("Hero", upgrade("Free Relic", group="Enhancements", costs=[{"name": "pts", "value": 0}]))
    assert [e.cost for e in extract_enhancements(node(unit))] == [None]


def test_lone_model_takes_first_unit_profile():
    hero = model("Hero", profiles=[unit_profile("Hero", W="5"), unit_profile("Hero Mounted", W="7")])
    profiles = extract_characteristics(node(hero))
    assert [(p.name, p.W) for p in profiles] == [("Hero", "5")]
