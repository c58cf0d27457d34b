"""Tests for flat config validation and the runtime config wrapper."""
import pytest

import fleet_manager.config as cfg
from fleet_manager.api.config import RuntimeConfig
from fleet_manager.config_structured import FuelConfig, SystemConfig, get_config


@pytest.fixture
def restore_config():
    saved = {k: getattr(cfg, k) for k in RuntimeConfig().get_adjustable()}
    yield
    for key, value in saved.items():
        setattr(cfg, key, value)


def test_structured_defaults():
    config = get_config()
    assert isinstance(config, SystemConfig)
    assert config.fuel.mpg_decimals == 2
    assert config.fuel.default_avg_mpg == 8.5
    assert config.dashboard.stats_ttl == 300
    assert config.dashboard.chart_ttl == 600


def test_fuel_config_rejects_non_positive_min_gallons():
    with pytest.raises(ValueError):
        FuelConfig(min_gallons=0)


def test_validate_config_returns_issue_dicts():
    issues = cfg.validate_config()
    assert isinstance(issues, list)
    for issue in issues:
        assert issue["level"] in ("WARNING", "ERROR")
        assert issue["message"]


def test_runtime_patch_applies(restore_config):
    rc = RuntimeConfig()
    state = rc.patch({"DEFAULT_AVG_MPG": 12, "RECENT_ISSUES_LIMIT": "7"})
    assert state["DEFAULT_AVG_MPG"] == 12.0
    assert state["RECENT_ISSUES_LIMIT"] == 7
    assert cfg.RECENT_ISSUES_LIMIT == 7


def test_runtime_patch_unknown_key():
    with pytest.raises(KeyError):
        RuntimeConfig().patch({"DB_PATH": "/tmp/x.db"})


@pytest.mark.parametrize("updates", [
    {"DEFAULT_AVG_MPG": 0},
    {"RECENT_ISSUES_LIMIT": 500},
    {"DASHBOARD_STATS_TTL": True},
    {"DASHBOARD_STATS_TTL": 1.5},
    {"LICENSE_RENEWAL_WINDOW_DAYS": "soon"},
])
def test_runtime_patch_rejects_bad_values(updates, restore_config):
    before = RuntimeConfig().get_adjustable()
    with pytest.raises(ValueError):
        RuntimeConfig().patch(updates)
    assert RuntimeConfig().get_adjustable() == before


def test_runtime_patch_is_all_or_nothing(restore_config):
    before = RuntimeConfig().get_adjustable()
    with pytest.raises(ValueError):
        RuntimeConfig().patch({"RECENT_ISSUES_LIMIT": 9, "DEFAULT_AVG_MPG": -1})
    assert RuntimeConfig().get_adjustable() == before
