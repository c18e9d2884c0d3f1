"""
Unit discovery over the raw export tree.

The export nests units under forces, under other selections, and sometimes
wraps a character in nothing but a model node. The walker visits every
object reachable from the root and collects the unit-like ones in document
order.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .rules import UNIT_PROFILE


def _has_unit_profile(node: Dict[str, Any]) -> bool:
    profiles = node.get("profiles") or []
    return any(isinstance(p, dict) and p.get("typeName") == UNIT_PROFILE for p in profiles)


def _walk(node: Any, inside_unit: bool, found: List[Dict[str, Any]]) -> None:
    if isinstance(node, list):
        for child in node:
            _walk(child, inside_unit, found)
        return
    if not isinstance(node, dict):
        return

    kind = node.get("type")
    if kind == "unit":
        found.append(node)
        inside_unit = True
    elif kind == "model" and not inside_unit and _has_unit_profile(node):
        # a standalone character with no wrapping unit node
        found.append(node)

    for value in node.values():
        _walk(value, inside_unit, found)


def extract_units(root: Any) -> List[Dict[str, Any]]:
    """Return the unit-like nodes under ``root``, depth first, in document order."""
    found: List[Dict[str, Any]] = []
    _walk(root, False, found)
    return found
