"""Tests for YAML tariff configuration."""

from pathlib import Path

import pytest
from aurora_energy import config
from aurora_energy.models import EfficiencyBands, RateSchedule, ValidationError

REPO_CONFIG = Path(__file__).resolve().parents[1] / "config" / "tariffs.yaml"

SCHEDULE_YAML = """
rate_schedule:
  energy_rate_per_kwh: 25
  fuel_levy_rate_per_kwh: 2
  forex_levy_rate_per_kwh: 0.5
  inflation_adjustment_rate_per_kwh: 0.3
  epra_levy_rate_per_kwh: 0.1
  wra_levy_rate_per_kwh: 0.05
  rep_levy_rate_per_kwh: 0.08
  vat_rate: 0.16
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "tariffs.yaml"
    path.write_text(SCHEDULE_YAML)
    return path


def test_load_rate_schedule(config_file, schedule):
    assert config.load_rate_schedule(config_file) == schedule


def test_repo_config_loads():
    """The shipped config is valid."""
    schedule = config.load_rate_schedule(REPO_CONFIG)
    bands = config.load_efficiency_bands(REPO_CONFIG)

    assert isinstance(schedule, RateSchedule)
    assert schedule.vat_rate == 0.16
    assert set(bands) == {"heavyduty", "medium", "light"}
    assert bands["heavyduty"] == EfficiencyBands(steps=((200.0, 85), (500.0, 75)), fallback=65)


def test_missing_key(tmp_path):
    path = tmp_path / "tariffs.yaml"
    path.write_text(SCHEDULE_YAML.replace("  vat_rate: 0.16\n", ""))

    with pytest.raises(ValidationError, match="rate_schedule.vat_rate") as exc:
        config.load_rate_schedule(path)
    assert exc.value.field == "rate_schedule.vat_rate"


def test_missing_section(tmp_path):
    path = tmp_path / "tariffs.yaml"
    path.write_text("")

    with pytest.raises(ValidationError, match="rate_schedule"):
        config.load_rate_schedule(path)


def test_invalid_rate_rejected_at_load(tmp_path):
    path = tmp_path / "tariffs.yaml"
    path.write_text(SCHEDULE_YAML.replace("epra_levy_rate_per_kwh: 0.1", "epra_levy_rate_per_kwh: -1"))

    with pytest.raises(ValidationError, match="schedule.epra_levy_rate_per_kwh"):
        config.load_rate_schedule(path)


def test_env_override(config_file, monkeypatch):
    monkeypatch.setenv(config.CONFIG_ENV_VAR, str(config_file))

    assert config.get_config_path() == config_file
    assert config.load_rate_schedule().energy_rate_per_kwh == 25


def test_env_override_missing_file(tmp_path, monkeypatch):
    monkeypatch.setenv(config.CONFIG_ENV_VAR, str(tmp_path / "nope.yaml"))

    with pytest.raises(FileNotFoundError, match=config.CONFIG_ENV_VAR):
        config.get_config_path()


def test_cwd_config_found(tmp_path, monkeypatch):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "tariffs.yaml").write_text(SCHEDULE_YAML)
    monkeypatch.delenv(config.CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)

    assert config.get_config_path() == tmp_path / "config" / "tariffs.yaml"


def test_parse_efficiency_bands():
    data = {
        "industry_efficiency": {
            "medium": {"steps": [[100, 88], [250, 78]], "fallback": 68},
        }
    }

    bands = config.parse_efficiency_bands(data)

    assert bands["medium"].score_for(99) == 88
    assert bands["medium"].score_for(250) == 68
    assert config.parse_efficiency_bands({}) == {}


def test_parse_efficiency_bands_errors():
    with pytest.raises(ValidationError, match="industry_efficiency.mining"):
        config.parse_efficiency_bands({"industry_efficiency": {"mining": {"steps": [], "fallback": 1}}})

    with pytest.raises(ValidationError, match="industry_efficiency.light"):
        config.parse_efficiency_bands({"industry_efficiency": {"light": {"steps": [[50, 90]]}}})

    with pytest.raises(ValidationError, match=r"industry_efficiency\.light\.steps"):
        config.parse_efficiency_bands(
            {"industry_efficiency": {"light": {"steps": [[120, 80], [50, 90]], "fallback": 70}}}
        )


def test_band_scores_must_be_percentages():
    """Scores outside 0-100 are rejected at load, naming the entry."""
    with pytest.raises(ValidationError, match=r"industry_efficiency\.light\.steps: score must be within \[0, 100\]"):
        config.parse_efficiency_bands(
            {"industry_efficiency": {"light": {"steps": [[50, 150]], "fallback": 70}}}
        )

    with pytest.raises(ValidationError, match=r"industry_efficiency\.light\.fallback") as exc:
        config.parse_efficiency_bands(
            {"industry_efficiency": {"light": {"steps": [[50, 90]], "fallback": -20}}}
        )
    assert exc.value.field == "industry_efficiency.light.fallback"


def test_band_limits_must_be_non_negative():
    with pytest.raises(ValidationError, match=r"industry_efficiency\.medium\.steps"):
        config.parse_efficiency_bands(
            {"industry_efficiency": {"medium": {"steps": [[-10, 90], [100, 80]], "fallback": 70}}}
        )


def test_efficiency_bands_validated_on_construction():
    with pytest.raises(ValidationError, match="steps"):
        EfficiencyBands(steps=((50.0, 150),), fallback=70)
    with pytest.raises(ValidationError, match="fallback"):
        EfficiencyBands(steps=((50.0, 90),), fallback=101)

    # Boundaries are allowed
    assert EfficiencyBands(steps=((0.0, 100),), fallback=0).score_for(5) == 0


def test_dotenv_not_reloaded_on_lookup(tmp_path, monkeypatch):
    """.env is read once at import; looking up the path leaves os.environ alone."""

    def fail():
        raise AssertionError("load_dotenv called during lookup")

    monkeypatch.setattr(config, "load_dotenv", fail)
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "tariffs.yaml").write_text(SCHEDULE_YAML)
    monkeypatch.delenv(config.CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)

    assert config.get_config_path() == tmp_path / "config" / "tariffs.yaml"
