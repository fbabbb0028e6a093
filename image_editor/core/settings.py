from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .history import HISTORY_CAPACITY


class SettingsError(RuntimeError):
    pass


@dataclass
class HistorySettings:
    capacity: int = HISTORY_CAPACITY
    clear_redo_on_edit: bool = True


@dataclass
class ControlDefaults:
    resize_width: int = 100
    resize_height: int = 100
    hue_rotation: int = 90
    blur_sigma: float = 2.0
    brightness: int = 0
    brightness_range: tuple[int, int] = (-100, 100)
    contrast: float = 1.0
    contrast_range: tuple[float, float] = (-100.0, 100.0)


@dataclass
class ExportSettings:
    preview_name: str = "output_preview.png"
    format: str = "PNG"


@dataclass
class UiSettings:
    tick_interval_ms: int = 16


@dataclass
class AppSettings:
    history: HistorySettings
    controls: ControlDefaults
    export: ExportSettings
    ui: UiSettings


DEFAULT_SETTINGS = {
    "history": {
        "capacity": HISTORY_CAPACITY,
        "clear_redo_on_edit": True,
    },
    "controls": {
        "resize_width": 100,
        "resize_height": 100,
        "hue_rotation": 90,
        "blur_sigma": 2.0,
        "brightness": 0,
        "brightness_range": [-100, 100],
        "contrast": 1.0,
        "contrast_range": [-100.0, 100.0],
    },
    "export": {
        "preview_name": "output_preview.png",
        "format": "PNG",
    },
    "ui": {
        "tick_interval_ms": 16,
    },
}


def default_settings() -> AppSettings:
    return _build_settings(DEFAULT_SETTINGS)


def load_settings(path: Path | None = None) -> AppSettings:
    base_path = path or Path(__file__).resolve().parents[1] / "config" / "settings.json"
    data = DEFAULT_SETTINGS
    if base_path.exists():
        try:
            with base_path.open("r", encoding="utf-8") as fh:
                file_data = json.load(fh)
        except json.JSONDecodeError as exc:
            raise SettingsError(f"Settings-Datei ungültig: {exc}") from exc
        if not isinstance(file_data, dict):
            raise SettingsError("Settings-Datei muss ein JSON-Objekt enthalten.")
        data = _merge_settings(DEFAULT_SETTINGS, file_data)
    return _build_settings(data)


def _build_settings(data: dict[str, Any]) -> AppSettings:
    history = data["history"]
    controls = data["controls"]
    export = data["export"]
    ui = data["ui"]

    try:
        history_settings = HistorySettings(
            capacity=int(history.get("capacity", HISTORY_CAPACITY)),
            clear_redo_on_edit=bool(history.get("clear_redo_on_edit", True)),
        )
        control_defaults = ControlDefaults(
            resize_width=int(controls.get("resize_width", 100)),
            resize_height=int(controls.get("resize_height", 100)),
            hue_rotation=int(controls.get("hue_rotation", 90)),
            blur_sigma=float(controls.get("blur_sigma", 2.0)),
            brightness=int(controls.get("brightness", 0)),
            brightness_range=_pair(controls.get("brightness_range", [-100, 100]), int),
            contrast=float(controls.get("contrast", 1.0)),
            contrast_range=_pair(controls.get("contrast_range", [-100.0, 100.0]), float),
        )
        export_settings = ExportSettings(
            preview_name=str(export.get("preview_name", "output_preview.png")),
            format=str(export.get("format", "PNG")),
        )
        ui_settings = UiSettings(tick_interval_ms=max(1, int(ui.get("tick_interval_ms", 16))))
    except (AttributeError, TypeError, ValueError) as exc:
        raise SettingsError(f"Ungültiger Wert in den Einstellungen: {exc}") from exc

    if history_settings.capacity < 1:
        raise SettingsError("history.capacity muss mindestens 1 sein.")

    return AppSettings(
        history=history_settings,
        controls=control_defaults,
        export=export_settings,
        ui=ui_settings,
    )


def _pair(value: Any, cast) -> tuple:
    low, high = value
    return cast(low), cast(high)


def _merge_settings(default: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged: dict[str, Any] = {}
    for key, value in default.items():
        if key in overrides:
            if isinstance(value, dict) and isinstance(overrides[key], dict):
                merged[key] = _merge_settings(value, overrides[key])
            else:
                merged[key] = overrides[key]
        else:
            merged[key] = value
    # Include extra keys from overrides
    for key, value in overrides.items():
        if key not in merged:
            merged[key] = value
    return merged
