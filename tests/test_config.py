import logging

import pytest

from gridparts.config import Settings, configure_logging, get_settings, reload_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for name in ("GRIDPARTS_TOLERANCE", "GRIDPARTS_SEAM_OFFSET_DEG",
                 "GRIDPARTS_EDGE_SAMPLES", "GRIDPARTS_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    reload_settings()
    yield
    get_settings.cache_clear()


def test_defaults():
    assert get_settings() == Settings()


def test_settings_are_cached_until_reloaded(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("GRIDPARTS_SEAM_OFFSET_DEG", "5")
    assert get_settings() is first
    assert reload_settings().seam_offset_deg == 5.0


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GRIDPARTS_TOLERANCE", "1e-4")
    monkeypatch.setenv("GRIDPARTS_EDGE_SAMPLES", "8")
    monkeypatch.setenv("GRIDPARTS_LOG_LEVEL", "debug")
    settings = reload_settings()
    assert settings.tolerance == 1e-4
    assert settings.edge_samples == 8
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("name,value", [
    ("GRIDPARTS_TOLERANCE", "fine"),
    ("GRIDPARTS_TOLERANCE", "-1"),
    ("GRIDPARTS_EDGE_SAMPLES", "1"),
    ("GRIDPARTS_EDGE_SAMPLES", "2.5"),
])
def test_bad_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        reload_settings()


def test_configure_logging_adds_one_handler():
    logger = logging.getLogger("gridparts")
    before = list(logger.handlers)
    try:
        configure_logging("info")
        configure_logging("debug")
        added = [h for h in logger.handlers if h not in before]
        assert len(added) == 1
        assert logger.level == logging.DEBUG
    finally:
        logger.handlers[:] = before
        logger.setLevel(logging.NOTSET)
