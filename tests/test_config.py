"""
Testing env-driven settings helpers.
"""

import pytest

from codebreaker import config

def test_int_setting_defaults_when_unset_or_blank(monkeypatch):
    monkeypatch.delenv("SOLVER_SAMPLE_SIZE", raising=False)
    assert config._int_setting("SOLVER_SAMPLE_SIZE", 800) == 800

    monkeypatch.setenv("SOLVER_SAMPLE_SIZE", "  ")
    assert config._int_setting("SOLVER_SAMPLE_SIZE", 800) == 800

def test_int_setting_reads_env(monkeypatch):
    monkeypatch.setenv("SOLVER_SEED", "17")
    assert config._int_setting("SOLVER_SEED", None) == 17

def test_bad_numbers_raise(monkeypatch):
    monkeypatch.setenv("SOLVER_FULL_SEARCH_THRESHOLD", "lots")
    with pytest.raises(RuntimeError):
        config._int_setting("SOLVER_FULL_SEARCH_THRESHOLD", 1200)

    monkeypatch.setenv("RANDOM_ORG_TIMEOUT", "soon")
    with pytest.raises(RuntimeError):
        config._float_setting("RANDOM_ORG_TIMEOUT", 3.0)
