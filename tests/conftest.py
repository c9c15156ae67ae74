# Shared pytest fixtures
from __future__ import annotations

from pathlib import Path

import pytest

from indicator_ingest.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch, tmp_path: Path) -> Path:
    (tmp_path / "config").mkdir()
    (tmp_path / "data").mkdir()
    (tmp_path / "logs").mkdir()
    monkeypatch.chdir(tmp_path)
    # stray environment from a developer shell must not leak into CLI runs
    monkeypatch.delenv("INDICATOR_INGEST_CONFIG", raising=False)
    monkeypatch.delenv("INDICATOR_INGEST_USER", raising=False)
    return tmp_path


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
indicators:
  - id: ind-literacy
    name: Literacy Rate
    unit: "%"
    source: Census
    category: Education
  - id: ind-imr
    name: Infant Mortality Rate
    unit: per 1000 live births
    source: SRS
    category: Health
    enabled: false
year_range:
  min: 1947
  max: 2030
max_displayed_errors: 10
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "upload.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def valid_csv_text() -> str:
    return "Year,State,Value\n2023,Kerala,96.2\n2023,Bihar,61.8\n2022,India,77.7\n"


@pytest.fixture()
def invalid_csv_text() -> str:
    return "Year,State,Rate\nabcd,Atlantis,-5\n2021,Goa,88.7\n"


@pytest.fixture()
def write_upload(temp_workdir: Path):
    def _write(name: str, text: str) -> Path:
        p = temp_workdir / "data" / name
        p.write_text(text, encoding="utf-8")
        return p
    return _write
