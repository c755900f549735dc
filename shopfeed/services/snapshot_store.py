"""
Persisted catalog snapshot (JSON file written by the fetch command)
"""

from pathlib import Path
from typing import Union

import orjson
from pydantic import ValidationError

from shopfeed.core.exceptions import SnapshotInvalidError, SnapshotNotFoundError
from shopfeed.core.logging import log
from shopfeed.schemas.catalog import CatalogSnapshot


def load_snapshot(path: Union[str, Path]) -> CatalogSnapshot:
    """Read and validate a snapshot file"""
    path = Path(path)

    try:
        raw = orjson.loads(path.read_bytes())
    except FileNotFoundError as exc:
        raise SnapshotNotFoundError(f"Snapshot file not found: {path}", path=str(path)) from exc
    except orjson.JSONDecodeError as exc:
        raise SnapshotInvalidError(f"Snapshot file is not valid JSON: {path}", path=str(path)) from exc

    if not isinstance(raw, dict):
        raise SnapshotInvalidError(f"Snapshot file must contain an object at the top level: {path}", path=str(path))

    try:
        snapshot = CatalogSnapshot.model_validate(raw)
    except ValidationError as exc:
        raise SnapshotInvalidError(
            f"Snapshot file does not match the catalog schema: {path}",
            path=str(path),
            errors=exc.error_count(),
        ) from exc

    log.info(
        f"Loaded snapshot {path} ({len(snapshot.catalog_objects)} catalog objects, "
        f"{len(snapshot.inventory_counts)} inventory counts)"
    )
    return snapshot


def save_snapshot(snapshot: CatalogSnapshot, path: Union[str, Path]) -> Path:
    """Write a snapshot in the camelCase export format"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = snapshot.model_dump(mode="json", by_alias=True, exclude_none=True)
    path.write_bytes(orjson.dumps(payload, option=orjson.OPT_INDENT_2))

    log.info(f"Wrote snapshot {path}")
    return path
