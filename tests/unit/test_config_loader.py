from __future__ import annotations

from pathlib import Path

import pytest

from indicator_ingest.config.loader import ConfigError, load_config
from indicator_ingest.models.validation import DEFAULT_STATES


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.source_directory == "./data"
    assert [i.id for i in cfg.indicators] == ["ind-literacy", "ind-imr"]
    assert cfg.indicators[0].unit == "%"
    assert cfg.indicators[1].enabled is False
    assert cfg.states == DEFAULT_STATES
    assert cfg.max_displayed_errors == 10
    assert cfg.encoding == "utf-8-sig"


def test_rules_built_from_config(write_config: Path):
    text = write_config.read_text(encoding="utf-8")
    text = text.replace("  min: 1947\n  max: 2030\n", "  min: 2000\n  max: 2024\n")
    text += "states: [Goa, Assam]\n"
    write_config.write_text(text, encoding="utf-8")
    rules = load_config(write_config).rules()
    assert rules.min_year == 2000
    assert rules.max_year == 2024
    assert rules.is_known_state("goa")
    assert not rules.is_known_state("Kerala")


def test_find_indicator(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.find_indicator("ind-imr").name == "Infant Mortality Rate"
    assert cfg.find_indicator("nope") is None


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_invalid_yaml(temp_workdir: Path):
    cfg = temp_workdir / "config" / "upload.yml"
    cfg.write_text("source_directory: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(cfg)


def test_load_config_missing_required(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("source_directory: ./data\n", "")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value) and "required property" in str(e.value)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_indicator_without_name(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("    name: Literacy Rate\n", "")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(write_config)


def test_load_config_inverted_year_range(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("  min: 1947\n", "  min: 2040\n")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="year_range.min"):
        load_config(write_config)


def test_load_config_duplicate_indicator_ids(write_config: Path):
    text = write_config.read_text(encoding="utf-8").replace("id: ind-imr", "id: ind-literacy")
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="duplicate indicator ids"):
        load_config(write_config)


def test_load_config_empty_file(temp_workdir: Path):
    cfg = temp_workdir / "config" / "upload.yml"
    cfg.write_text("", encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(cfg)
