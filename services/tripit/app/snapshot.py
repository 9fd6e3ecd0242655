"""Import/export of the trip as a JSON file (``trip-config.json``)."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from . import schemas


class SnapshotError(Exception):
    """The snapshot file exists but cannot be read as a trip."""


def read_snapshot(path: str | Path) -> schemas.TripSnapshot | None:
    """Return the snapshot stored at ``path``, or ``None`` if there is no file."""

    file = Path(path)
    if not file.exists():
        return None
    try:
        text = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SnapshotError(f"Cannot read snapshot {file}: {exc}") from exc
    try:
        return schemas.TripSnapshot.model_validate_json(text)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid snapshot {file}: {exc.error_count()} error(s)") from exc


def write_snapshot(path: str | Path, snapshot: schemas.TripSnapshot) -> Path:
    file = Path(path)
    file.parent.mkdir(parents=True, exist_ok=True)
    data = snapshot.model_dump()
    file.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    return file
