"""Load the rate schedule and industry efficiency bands from YAML.

The config file is found via AURORA_TARIFF_CONFIG (also read from a .env
file), falling back to config/tariffs.yaml in the working directory, the
repository, then ~/.config/aurora-energy/tariffs.yaml.
"""

import os
from dataclasses import fields
from pathlib import Path

import yaml
from dotenv import load_dotenv

from .models import INDUSTRY_TYPES, EfficiencyBands, RateSchedule, ValidationError
from .tariffs import validate_schedule

# Load environment variables from .env file
load_dotenv()

CONFIG_ENV_VAR = "AURORA_TARIFF_CONFIG"


def get_config_path() -> Path:
    """Find the tariffs.yaml config file."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override).expanduser()
        if not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to a missing file: {path}")
        return path

    candidates = [
        Path.cwd() / "config" / "tariffs.yaml",
        Path(__file__).resolve().parents[2] / "config" / "tariffs.yaml",
        Path.home() / ".config" / "aurora-energy" / "tariffs.yaml",
    ]
    for path in candidates:
        if path.exists():
            return path
    raise FileNotFoundError(
        "Could not find config/tariffs.yaml (looked in: " + ", ".join(str(p) for p in candidates) + ")"
    )


def load_config(config_path: Path | None = None) -> dict:
    """Load raw config data from YAML."""
    path = config_path or get_config_path()
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_rate_schedule(data: dict) -> RateSchedule:
    """Build and validate a RateSchedule from the 'rate_schedule' section."""
    section = data.get("rate_schedule")
    if not isinstance(section, dict):
        raise ValidationError("rate_schedule", "missing section")

    values = {}
    for f in fields(RateSchedule):
        if f.name not in section:
            raise ValidationError(f"rate_schedule.{f.name}", "missing key")
        values[f.name] = section[f.name]

    schedule = RateSchedule(**values)
    validate_schedule(schedule)
    return schedule


def parse_efficiency_bands(data: dict) -> dict[str, EfficiencyBands]:
    """Read per-industry-type bands from the 'industry_efficiency' section.

    Each entry looks like:
        heavyduty:
          steps: [[200, 85], [500, 75]]
          fallback: 65
    """
    bands = {}
    for industry_type, entry in (data.get("industry_efficiency") or {}).items():
        key = f"industry_efficiency.{industry_type}"
        if industry_type not in INDUSTRY_TYPES:
            raise ValidationError(key, f"unknown industry type, expected one of {', '.join(INDUSTRY_TYPES)}")
        try:
            steps = tuple((float(limit), int(score)) for limit, score in entry["steps"])
            fallback = int(entry["fallback"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(key, f"expected 'steps' pairs and a 'fallback' score ({e})") from e
        try:
            bands[industry_type] = EfficiencyBands(steps=steps, fallback=fallback)
        except ValidationError as e:
            raise ValidationError(f"{key}.{e.field}", e.message) from e
    return bands


def load_rate_schedule(config_path: Path | None = None) -> RateSchedule:
    """Load the configured rate schedule."""
    return parse_rate_schedule(load_config(config_path))


def load_efficiency_bands(config_path: Path | None = None) -> dict[str, EfficiencyBands]:
    """Load the configured industry efficiency bands, keyed by industry type."""
    return parse_efficiency_bands(load_config(config_path))
