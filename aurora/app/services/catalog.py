import json
import logging
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".jpg", ".jpeg", ".png", ".gif", ".webp")


def load_catalog(path: str | Path) -> list[dict[str, Any]]:
    """Load the static room catalog; an unreadable file yields an empty catalog."""
    try:
        rooms = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log.warning("Could not load room catalog from %s: %s", path, exc)
        return []
    if not isinstance(rooms, list):
        log.warning("Room catalog %s is not a list; ignoring it", path)
        return []
    log.info("Loaded %d room types from %s", len(rooms), path)
    return rooms


def find_room(catalog: list[dict[str, Any]], room_id: str) -> dict[str, Any] | None:
    return next((room for room in catalog if str(room.get("room_id")) == room_id), None)


def resolve_image(images_dir: str | Path, filename: str) -> Path | None:
    """Return the image path if the name is a plain image file that exists."""
    if not filename.lower().endswith(IMAGE_SUFFIXES):
        return None
    root = Path(images_dir).resolve()
    candidate = (root / filename).resolve()
    if candidate.parent != root or not candidate.is_file():
        return None
    return candidate
