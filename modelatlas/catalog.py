from __future__ import annotations

import re
from typing import Any, List, Optional, Sequence, Tuple

from .models import CatalogStats, Entity

MISSING_MARKERS = {"", "—", "N/A", "null"}
NUMBER_PATTERN = re.compile(r"^(\d+)(\+?)$")
PAREN_LABEL_PATTERN = re.compile(r"^([^(]+)\s*\(([^)]+)\)")
YEAR_PATTERN = re.compile(r"^\d+")

KNOWN_DATASETS: Tuple[str, ...] = (
    "Open X-Embodiment", "OXE", "Open-X",
    "DROID",
    "BridgeData", "BridgeData V2", "Bridge V2", "Bridge",
    "RoboSet",
    "RoboMimic",
    "MimicGen",
    "DexMimicGen",
    "RH20T",
    "LIBERO",
    "RoboCasa",
    "Ego4D",
    "Something-Something", "Something Something",
    "Kinetics",
    "Epic-Kitchens", "EPIC-KITCHENS",
    "RoboTurk",
    "RoboNet",
    "BC-Z",
    "Language Table",
    "CALVIN",
    "MetaWorld",
    "RLBench",
    "Franka Kitchen",
    "ALOHA",
    "Mobile ALOHA",
    "RT-1",
    "RT-2",
    "Google Robot",
    "UR5",
    "Franka",
    "xArm",
    "Sawyer",
    "Kuka",
    "HumanoidBench",
    "DexArt",
    "Maniskill", "ManiSkill",
    "Isaac", "Isaac Gym", "IsaacGym",
    "Habitat",
    "AI2-THOR",
    "Ravens",
    "CLIPort",
)


def has_value(value: Any) -> bool:
    if value is None:
        return False
    return str(value).strip() not in MISSING_MARKERS


def format_number(value: Any) -> Any:
    """Add thousands separators to plain integers of 10,000 or more ("920000+" -> "920,000+")."""
    if not value:
        return value
    match = NUMBER_PATTERN.match(str(value))
    if match and int(match.group(1)) >= 10_000:
        return f"{int(match.group(1)):,}{match.group(2)}"
    return value


def access_level(availability: Optional[str]) -> str:
    lowered = (availability or "").lower()
    if "partial" in lowered:
        return "partial"
    if "open" in lowered:
        return "open"
    return "closed"


def access_label(availability: Any) -> Optional[Tuple[str, Optional[str]]]:
    """Split ``"Open (weights only)"`` into a short label and the full text."""
    if not has_value(availability):
        return None
    text = str(availability)
    match = PAREN_LABEL_PATTERN.match(text)
    if match:
        return match.group(1).strip(), text
    return text, None


def extract_datasets(text: Optional[str], known: Sequence[str] = KNOWN_DATASETS) -> List[str]:
    """Known dataset names mentioned in ``text``, longest names first.

    A name is dropped when it contains, or is contained in, one already found
    ("Bridge" after "BridgeData V2").
    """

    if not has_value(text):
        return []

    lowered_text = str(text).casefold()
    found: List[str] = []
    for dataset in sorted(known, key=len, reverse=True):
        lowered = dataset.casefold()
        if lowered not in lowered_text:
            continue
        if any(lowered in f.casefold() or f.casefold() in lowered for f in found):
            continue
        found.append(dataset)
    return found


def _release_year(raw_date: str) -> Optional[int]:
    parts = raw_date.split(" ")
    token = parts[1] if len(parts) > 1 else raw_date[-4:]
    match = YEAR_PATTERN.match(token)
    return int(match.group()) if match else None


def summarize(entities: Sequence[Entity]) -> CatalogStats:
    orgs = {entity.org for entity in entities}
    years = [year for year in (_release_year(e.date) for e in entities if e.date) if year is not None]

    date_range = "—"
    if years:
        low, high = min(years), max(years)
        date_range = str(low) if low == high else f"{low}–{high}"

    return CatalogStats(total_models=len(entities), total_orgs=len(orgs), date_range=date_range)


__all__ = [
    "KNOWN_DATASETS",
    "access_label",
    "access_level",
    "extract_datasets",
    "format_number",
    "has_value",
    "summarize",
]
