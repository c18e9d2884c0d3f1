"""
Roster normalization.

Turns a decoded list-builder export into one flat ``UnitRecord`` per unit:
- discover unit-like nodes anywhere in the tree
- type each node (all fields optional)
- run every facet extractor against it
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .extractors import (
    extract_characteristics,
    extract_composition,
    extract_enhancements,
    extract_generic_abilities,
    extract_keywords,
    extract_unique_abilities,
    extract_wargear,
    extract_weapons,
)
from .models import RosterSummary, SelectionNode, UnitRecord
from .walker import extract_units

logger = logging.getLogger(__name__)


def parse_unit(unit: SelectionNode) -> UnitRecord:
    return UnitRecord(
        name=unit.name,
        keywords=extract_keywords(unit),
        generic_abilities=extract_generic_abilities(unit),
        unique_abilities=extract_unique_abilities(unit),
        characteristics=extract_characteristics(unit),
        weapons=extract_weapons(unit),
        wargear=extract_wargear(unit),
        enhancements=extract_enhancements(unit),
        composition=extract_composition(unit),
    )


def _typed_unit(node: Dict[str, Any]) -> Optional[SelectionNode]:
    try:
        return SelectionNode.model_validate(node)
    except ValidationError as exc:
        logger.warning("Skipping unit %r: %s", node.get("name"), exc)
        return None


def normalize(root: Dict[str, Any]) -> List[UnitRecord]:
    """
    Normalize one export into unit records, in document order.

    The input is never mutated; calling this twice on the same document
    yields equal output. A unit node that cannot be typed is logged and
    skipped rather than failing the roster.
    """
    nodes = extract_units(root)
    logger.debug("Discovered %d unit nodes", len(nodes))

    records = []
    for node in nodes:
        unit = _typed_unit(node)
        if unit is None:
            continue
        record = parse_unit(unit)
        logger.debug(
            "Unit %r: %d profiles, %d weapons, %d wargear, %d enhancements",
            record.name,
            len(record.characteristics),
            len(record.weapons),
            len(record.wargear),
            len(record.enhancements),
        )
        records.append(record)

    return records


def _model_total(record: UnitRecord) -> int:
    # composition always reads "<N> model(s)"
    count = record.composition.split(" ", 1)[0]
    return int(count) if count.isdigit() else 0


def summarize(records: List[UnitRecord]) -> RosterSummary:
    return RosterSummary(
        units=len(records),
        models=sum(_model_total(r) for r in records),
        profiles=sum(len(r.characteristics) for r in records),
        weapons=sum(len(r.weapons) for r in records),
        wargear=sum(len(r.wargear) for r in records),
        enhancements=sum(len(r.enhancements) for r in records),
    )
