from __future__ import annotations

import importlib

import pytest

from household_budget import settings
from household_budget.settings import defaults


def test_budget_config_thresholds() -> None:
    config = settings.get_budget_config()
    assert config['alerts']['warning_percentage'] == 80
    assert config['alerts']['exceeded_percentage'] == 100


def test_get_config_value_defaults() -> None:
    assert settings.get_config_value('budget', 'analytics', 'top_categories_limit') == 5
    assert settings.get_config_value('budget', 'missing', default='x') == 'x'
    assert settings.get_config_value('nope', 'anything', default=1) == 1


def test_load_missing_config_raises() -> None:
    with pytest.raises(FileNotFoundError):
        settings.load_config('does-not-exist')


def test_currency_symbol() -> None:
    assert settings.currency_symbol('NGN') == '₦'
    assert settings.currency_symbol('GBP') == '£'
    assert settings.currency_symbol(None) == '$'
    assert settings.currency_symbol('XYZ') == '$'


def test_custom_config_dir(tmp_path, monkeypatch) -> None:
    (tmp_path / 'budget.json').write_text('{"alerts": {"warning_percentage": 70}}', encoding='utf-8')
    monkeypatch.setattr(defaults, 'CONFIG_DIR', tmp_path)

    assert settings.get_config_value('budget', 'alerts', 'warning_percentage') == 70
    assert settings.get_config_value('budget', 'alerts', 'exceeded_percentage', default=100) == 100


def test_settings_file_is_read_once(tmp_path, monkeypatch) -> None:
    settings_file = tmp_path / 'budget.json'
    settings_file.write_text('{"alerts": {"warning_percentage": 70}}', encoding='utf-8')
    monkeypatch.setattr(defaults, 'CONFIG_DIR', tmp_path)
    settings.clear_config_cache()

    assert settings.get_config_value('budget', 'alerts', 'warning_percentage') == 70
    settings_file.write_text('{"alerts": {"warning_percentage": 60}}', encoding='utf-8')
    assert settings.get_config_value('budget', 'alerts', 'warning_percentage') == 70

    settings.clear_config_cache()
    assert settings.get_config_value('budget', 'alerts', 'warning_percentage') == 60


def test_loaded_config_is_a_copy() -> None:
    config = settings.load_config('budget')
    config['alerts']['warning_percentage'] = 1

    assert settings.get_config_value('budget', 'alerts', 'warning_percentage') == 80


def test_data_dir_env_override(tmp_path, monkeypatch) -> None:
    from household_budget import config

    monkeypatch.setenv('HOUSEHOLD_BUDGET_DATA_DIR', str(tmp_path))
    monkeypatch.delenv('HOUSEHOLD_BUDGET_STORE_DIR', raising=False)
    try:
        reloaded = importlib.reload(config)
        assert reloaded.DATA_DIR == tmp_path
        assert reloaded.STORE_DIR == tmp_path / 'store'
        reloaded.ensure_data_directories()
        assert (tmp_path / 'reports').is_dir()
    finally:
        monkeypatch.undo()
        importlib.reload(config)
