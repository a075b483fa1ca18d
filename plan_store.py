"""
Local storage for the crop rotation plan.
A small JSON file holding a key -> value map; the plan lives under
CROP_PLAN_STORAGE_KEY as a list of entry records.

Editing helpers return NEW lists - the analyzer never sees a plan change under it.
"""

import json
import os
import sys
import time
from dataclasses import replace
from typing import List, Optional

from agricultural_config import STORAGE_PATH, CROP_PLAN_STORAGE_KEY
from crop_rotation import CropEntry

EDITABLE_FIELDS = ("year", "season", "crop", "category")


def _read_storage(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            print(f"⚠️ Storage file {path} is not valid UTF-8 JSON ({e}), starting empty", file=sys.stderr)
            return {}
    if not isinstance(data, dict):
        print(f"⚠️ Storage file {path} does not hold an object, starting empty", file=sys.stderr)
        return {}
    return data


def load_plan(path: Optional[str] = None) -> List[CropEntry]:
    """
    Load the saved rotation plan.

    Args:
        path: Storage file (defaults to STORAGE_PATH)

    Returns:
        List of CropEntry, empty when nothing was saved
    """
    path = path or STORAGE_PATH
    records = _read_storage(path).get(CROP_PLAN_STORAGE_KEY, [])
    if not isinstance(records, list):
        print(f"⚠️ Saved plan in {path} is not a list, ignoring it", file=sys.stderr)
        return []
    return [CropEntry.from_dict(r) for r in records if isinstance(r, dict)]


def save_plan(plan: List[CropEntry], path: Optional[str] = None) -> None:
    """Save the plan, keeping any other keys already in the storage file."""
    path = path or STORAGE_PATH
    data = _read_storage(path)
    data[CROP_PLAN_STORAGE_KEY] = [entry.to_dict() for entry in plan]

    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    print(f"✓ Crop rotation plan saved ({len(plan)} entries) → {path}", file=sys.stderr)


def add_crop_entry(
    plan: List[CropEntry],
    year: int,
    season: str = "",
    crop: str = "",
    category: str = "",
    entry_id: Optional[str] = None
) -> List[CropEntry]:
    """Append a new (possibly blank) entry; the id defaults to a millisecond timestamp."""
    if entry_id is None:
        entry_id = str(int(time.time() * 1000))
        while any(entry.id == entry_id for entry in plan):
            entry_id = str(int(entry_id) + 1)
    return list(plan) + [CropEntry(id=entry_id, year=year, season=season, crop=crop, category=category)]


def remove_crop_entry(plan: List[CropEntry], entry_id: str) -> List[CropEntry]:
    return [entry for entry in plan if entry.id != entry_id]


def update_crop_entry(plan: List[CropEntry], entry_id: str, field: str, value) -> List[CropEntry]:
    """
    Change one field of one entry.

    Raises:
        ValueError: If field is not one of EDITABLE_FIELDS
    """
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"Unknown crop entry field: {field}. Must be one of {list(EDITABLE_FIELDS)}")
    if field == "year":
        value = int(value)
    return [replace(entry, **{field: value}) if entry.id == entry_id else entry for entry in plan]
