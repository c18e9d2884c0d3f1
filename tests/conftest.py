import pytest

from factories import (
    ability_profile,
    chars,
    melee_profile,
    model,
    ranged_profile,
    squad,
    unit_profile,
    upgrade,
)


@pytest.fixture
def intercessors():
    bolt_rifle = ranged_profile("Bolt rifle", keywords="Assault, Heavy")
    ccw = melee_profile("Close combat weapon")
    return squad(
        "Intercessor Squad",
        model(
            "Intercessor Sergeant",
            upgrade("Bolt rifle", bolt_rifle),
            upgrade("Close combat weapon", ccw),
        ),
        model(
            "Intercessor",
            upgrade("Bolt rifle", bolt_rifle, number=4),
            upgrade("Close combat weapon", ccw, number=4),
            number=4,
        ),
        categories=[{"name": "Infantry"}, {"name": "Battleline"}, {"name": "Imperium"}],
        rules=[
            {"name": "Oath of Moment ", "hidden": False, "description": "Re-roll hits."},
            {"name": "Secret Rule", "hidden": True},
        ],
        profiles=[ability_profile("Objective Secured")],
    )


@pytest.fixture
def captain():
    return model(
        "Captain",
        upgrade(
            "Artificer Armour",
            ability_profile("Artificer Armour", "**Feel No Pain 5+** against mortal wounds."),
            group="Enhancements",
            costs=[{"name": "pts", "value": 10}],
        ),
        upgrade("Relic Shield", ability_profile("Relic Shield")),
        upgrade("Master-crafted power weapon", melee_profile("Master-crafted power weapon", A="6", S="5")),
        upgrade(
            "Plasma pistol",
            ranged_profile("➤ Plasma pistol - standard", keywords="Pistol, Rapid Fire 1", Range='12"'),
            ranged_profile("➤ Plasma pistol - supercharge", keywords="Hazardous, Pistol", Range='12"', S="8", D="2"),
        ),
        profiles=[
            unit_profile("Captain", W="5", OC="1"),
            ability_profile("Rites of Battle"),
            ability_profile("Invulnerable Save 4+"),
        ],
    )


@pytest.fixture
def impulsor():
    node = model(
        "Impulsor",
        upgrade("Storm bolters", ranged_profile("Storm bolter", keywords="Rapid Fire 2"), number=2),
        profiles=[
            unit_profile("Impulsor", M='12"', T="9", W="11", OC="2"),
            {"name": "Impulsor", "typeName": "Transport", "characteristics": chars(Capacity="6 (see rules)")},
        ],
    )
    node["rules"] = [{"name": "Deadly Demise D3", "hidden": False}]
    return node


@pytest.fixture
def roster(intercessors, captain, impulsor):
    return {
        "roster": {
            "name": "Strike Force",
            "costs": [{"name": "pts", "value": 500}],
            "forces": [
                {
                    "name": "Army Roster",
                    "selections": [
                        {"type": "upgrade", "name": "Detachment", "selections": []},
                        intercessors,
                        captain,
                        impulsor,
                    ],
                }
            ],
        }
    }
