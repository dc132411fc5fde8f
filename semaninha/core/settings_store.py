"""Persist and load per-user collage preferences (JSON)."""
import json
from dataclasses import asdict, fields
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from semaninha.config import USER_SETTINGS_PATH
from semaninha.models.collage import GridSpec
from semaninha.models.settings import UserSettings

_FIELDS = {f.name for f in fields(UserSettings)}
# Fields callers may change; identity and timestamps are managed here
_MUTABLE_FIELDS = _FIELDS - {"user_id", "created_at", "updated_at"}


def _path() -> Path:
    USER_SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    return USER_SETTINGS_PATH


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def load_all_settings() -> Dict[str, UserSettings]:
    """Load every user's settings from disk, keyed by user_id."""
    p = _path()
    if not p.exists():
        return {}
    try:
        data = json.loads(p.read_text())
    except (json.JSONDecodeError, OSError):
        return {}
    out: Dict[str, UserSettings] = {}
    for item in data.get("settings", []):
        try:
            settings = UserSettings(**{k: v for k, v in item.items() if k in _FIELDS})
        except TypeError:
            continue
        out[settings.user_id] = settings
    return out


def save_all_settings(all_settings: Dict[str, UserSettings]) -> None:
    """Save every user's settings to disk."""
    data = {"settings": [asdict(s) for s in all_settings.values()]}
    _path().write_text(json.dumps(data, indent=2))


def get_settings(user_id: str) -> UserSettings:
    """Return settings for user_id, creating and saving defaults if missing."""
    all_settings = load_all_settings()
    existing = all_settings.get(user_id)
    if existing is not None:
        return existing
    now = _now()
    settings = UserSettings(user_id=user_id, created_at=now, updated_at=now)
    all_settings[user_id] = settings
    save_all_settings(all_settings)
    return settings


def update_settings(user_id: str, **changes: Any) -> UserSettings:
    """Apply non-None changes and save. Raises InvalidGridSpec for a bad grid size."""
    unknown = set(changes) - _MUTABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
    grid_size: Optional[str] = changes.get("default_grid_size")
    if grid_size is not None:
        changes["default_grid_size"] = str(GridSpec.parse(grid_size))

    current = get_settings(user_id)
    values = asdict(current)
    values.update({k: v for k, v in changes.items() if v is not None})
    values["updated_at"] = _now()
    updated = UserSettings(**values)

    all_settings = load_all_settings()
    all_settings[user_id] = updated
    save_all_settings(all_settings)
    return updated


def delete_settings(user_id: str) -> bool:
    """Remove settings for user_id; save. Returns True if found and removed."""
    all_settings = load_all_settings()
    if all_settings.pop(user_id, None) is None:
        return False
    save_all_settings(all_settings)
    return True
