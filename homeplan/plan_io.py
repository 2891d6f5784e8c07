"""Plan file reading, writing and room schedule export.

The persisted plan is a JSON array of room records with camelCase keys.
Loading validates the whole file before anything is applied: a single
malformed record rejects the file with one ``PlanFormatError``.
"""

# Homeplan imports
from homeplan import config
from homeplan.geometry_utils import to_fraction, to_int
from homeplan.models import FEATURE_TYPES, ROOM_KEYS, WALLS, Plan, Room, WallFeature

# Standard library imports
import json
import logging
from pathlib import Path
from typing import Optional, Union

# Third-party imports
import pandas as pd

logger = logging.getLogger(__name__)


class PlanFormatError(ValueError):
    """Raised when a plan file is not a valid list of room records."""

    USER_MESSAGE = "Could not load the plan. The file may be corrupted or in an incorrect format."

    def __init__(self, detail: str):
        super().__init__(f"{self.USER_MESSAGE} ({detail})")
        self.detail = detail


def _parse_feature(raw, room_id: str) -> WallFeature:
    if not isinstance(raw, dict):
        raise PlanFormatError(f"feature in room '{room_id}' is not an object")
    missing = [k for k in ("id", "type", "wall") if k not in raw]
    if missing:
        raise PlanFormatError(f"feature in room '{room_id}' is missing {', '.join(missing)}")
    if raw["type"] not in FEATURE_TYPES:
        raise PlanFormatError(f"feature '{raw['id']}' has unknown type '{raw['type']}'")
    if raw["wall"] not in WALLS:
        raise PlanFormatError(f"feature '{raw['id']}' has unknown wall '{raw['wall']}'")
    return WallFeature(
        id=str(raw["id"]),
        type=raw["type"],
        wall=raw["wall"],
        position=to_fraction(raw.get("position", config.DEFAULT_FEATURE_POSITION)),
        width=to_int(raw.get("width", config.FEATURE_WIDTHS[raw["type"]]), minimum=1),
    )


def _parse_room(raw, index: int) -> Room:
    if not isinstance(raw, dict):
        raise PlanFormatError(f"record {index} is not an object")
    missing = [k for k in ROOM_KEYS if k not in raw]
    if missing:
        raise PlanFormatError(f"record {index} is missing {', '.join(missing)}")

    room_id = str(raw["id"])
    features = raw.get("features") or []
    if not isinstance(features, list):
        raise PlanFormatError(f"room '{room_id}' has non-list features")
    parsed = tuple(_parse_feature(f, room_id) for f in features)
    ids = [f.id for f in parsed]
    if len(set(ids)) != len(ids):
        raise PlanFormatError(f"room '{room_id}' has duplicate feature ids")

    return Room(
        id=room_id,
        x=to_int(raw["x"]),
        y=to_int(raw["y"]),
        width=to_int(raw["width"], minimum=config.GRID_SIZE),
        height=to_int(raw["height"], minimum=config.GRID_SIZE),
        name=str(raw["name"]),
        color=str(raw["color"]),
        z_index=to_int(raw["zIndex"], minimum=0),
        locked=bool(raw.get("locked", False)),
        features=parsed,
    )


def parse_plan(text: str) -> Plan:
    """
    Parse and sanitise the JSON text of a plan file.

    Args:
        text (str): File contents.

    Returns:
        tuple: The rooms, in file order.

    Raises:
        PlanFormatError: The content is not a JSON array of complete room records.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PlanFormatError(f"invalid JSON: {exc.msg}") from exc
    if not isinstance(data, list):
        raise PlanFormatError("top-level value is not a list of rooms")
    return plan_from_records(data)


def plan_from_records(records: list) -> Plan:
    """Build rooms from already-decoded records (used for defaults and tests)."""
    rooms = tuple(_parse_room(raw, i) for i, raw in enumerate(records))
    seen = set()
    for room in rooms:
        if room.id in seen:
            raise PlanFormatError(f"duplicate room id '{room.id}'")
        seen.add(room.id)
    return rooms


def load_plan(path: Union[Path, str]) -> Plan:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise PlanFormatError("file content is not text") from exc
    rooms = parse_plan(text)
    logger.info("Loaded %d rooms from %s", len(rooms), path)
    return rooms


def dump_plan(rooms: Plan) -> str:
    return json.dumps([room.to_dict() for room in rooms], indent=2)


def save_plan(rooms: Plan, path: Optional[Union[Path, str]] = None) -> Path:
    """Write the plan as indented JSON. Defaults to ``config.PLAN_PATH``."""
    path = Path(path) if path is not None else config.PLAN_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_plan(rooms), encoding="utf-8")
    logger.info("Saved %d rooms to %s", len(rooms), path)
    return path


def room_schedule(rooms: Plan) -> pd.DataFrame:
    """
    Tabulate the plan, one row per room in draw order.

    Columns: name, x, y, width, height, area, doors, windows, locked.
    """
    columns = ["name", "x", "y", "width", "height", "area", "doors", "windows", "locked"]
    rows = [
        {
            "name":     r.name,
            "x":        r.x,
            "y":        r.y,
            "width":    r.width,
            "height":   r.height,
            "area":     r.width * r.height,
            "doors":    sum(1 for f in r.features if f.type == "door"),
            "windows":  sum(1 for f in r.features if f.type == "window"),
            "locked":   r.locked,
            "_z":       r.z_index,
        }
        for r in rooms
    ]
    if not rows:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame(rows).sort_values("_z", kind="stable")
    return df[columns].reset_index(drop=True)


def export_room_schedule(rooms: Plan, path: Optional[Union[Path, str]] = None) -> Path:
    """Write the room schedule as CSV. Defaults to ``config.SCHEDULE_PATH``."""
    path = Path(path) if path is not None else config.SCHEDULE_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    room_schedule(rooms).to_csv(path, index=False)
    logger.info("Exported schedule for %d rooms to %s", len(rooms), path)
    return path
