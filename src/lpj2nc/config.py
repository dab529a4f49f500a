from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .store import OUTPUT_MODES

DEFAULT_UNIT = "unknown"


@dataclass
class ConversionConfig:
    input_path: Path
    grid: str
    output_path: Optional[Path] = None
    unit: str = DEFAULT_UNIT
    year: Optional[int] = None
    monthly: bool = False
    invert_latitude: bool = False
    cell_centered: bool = False
    mode: str = "create"
    validate_order: bool = True
    command: Optional[str] = None

    def __post_init__(self) -> None:
        if self.mode not in OUTPUT_MODES:
            raise ValueError(f"Unknown output mode '{self.mode}'. Expected one of {OUTPUT_MODES}.")
        self.input_path = Path(self.input_path)
        if self.output_path is None:
            self.output_path = default_output_path(self.input_path)
        else:
            self.output_path = Path(self.output_path)


def default_output_path(input_path: str | Path) -> Path:
    """Input name up to its first dot, with a ``.nc`` suffix."""
    input_path = Path(input_path)
    stem = input_path.name.split(".", 1)[0] or input_path.name
    return input_path.with_name(stem + ".nc")


def _parse_bool(key: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("true", "yes", "1"):
        return True
    if value in ("false", "no", "0"):
        return False
    raise ValueError(f"Config key '{key}' expects true/false, got '{raw}'.")


def parse_config_file(path: str | Path) -> ConversionConfig:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    values: Dict[str, str] = {}
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        values[key.strip().lower()] = value.strip()

    required = ["input"]
    missing = [key for key in required if key not in values]
    if missing:
        raise ValueError(f"Missing required config keys: {missing}")

    def _maybe_int(key: str) -> Optional[int]:
        raw = values.get(key)
        return int(raw) if raw else None

    def _flag(key: str, default: bool = False) -> bool:
        raw = values.get(key)
        return _parse_bool(key, raw) if raw else default

    output = values.get("output")
    mode = values.get("mode", "create").lower()

    return ConversionConfig(
        input_path=Path(values["input"]),
        output_path=Path(output) if output else None,
        grid=values.get("grid", ""),
        unit=values.get("unit") or DEFAULT_UNIT,
        year=_maybe_int("year"),
        monthly=_flag("monthly"),
        invert_latitude=_flag("invert_latitude"),
        cell_centered=_flag("cell_centered"),
        mode=mode,
        validate_order=_flag("validate_order", default=True),
    )
