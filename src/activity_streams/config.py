"""Settings models and loading helpers."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from activity_streams.errors import SettingsError
from activity_streams.rules import RangePolicy


class StreamsSettings(BaseModel):
    """Defaults applied by a StreamsContext."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    strict: bool = True
    pretty: bool = False
    indent: int = Field(default=2, ge=0, le=8)
    ensure_ascii: bool = False
    bounded_numbers: RangePolicy = RangePolicy.REJECT
    catalog_paths: tuple[Path, ...] = ()


def _decode_settings_payload(path: Path) -> dict[str, object]:
    """Decode settings payload from JSON or YAML.

    Args:
        path: Settings file path.

    Returns:
        Parsed mapping payload.

    Raises:
        SettingsError: If decode fails or payload is not an object.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SettingsError(f"Cannot read settings {path}: {exc}") from exc
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SettingsError(f"Invalid settings JSON: {exc}") from exc
    else:
        try:
            payload = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise SettingsError(f"Invalid settings YAML: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise SettingsError("Invalid settings payload: root must be an object")
    return payload


def load_settings(path: Path) -> StreamsSettings:
    """Load settings from disk, defaulting when missing.

    Relative ``catalog_paths`` resolve against the settings file's directory.

    Args:
        path: Settings file path.

    Returns:
        Parsed settings, or defaults when file does not exist.

    Raises:
        SettingsError: If payload decode or validation fails.
    """
    if not path.exists():
        return StreamsSettings()
    payload = _decode_settings_payload(path)
    try:
        settings = StreamsSettings.model_validate(payload)
    except ValidationError as exc:
        raise SettingsError(f"Invalid settings payload: {exc}") from exc
    resolved = tuple(
        item if item.is_absolute() else path.parent / item
        for item in settings.catalog_paths
    )
    return settings.model_copy(update={"catalog_paths": resolved})
