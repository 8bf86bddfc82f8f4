"""Test environment-backed configuration."""

import pytest

from brand_intelligence.config import EnvConfig, env_name


def test_env_name():
    assert env_name("features.mention_analysis.enabled") == "FEATURES_MENTION_ANALYSIS_ENABLED"
    assert env_name("runner.timeout-seconds") == "RUNNER_TIMEOUT_SECONDS"


@pytest.mark.parametrize("raw, expected", [
    ("true", True), ("1", True), ("YES", True),
    ("false", False), ("0", False), ("off", False),
    ("maybe", True),
])
def test_bool_coercion(raw, expected):
    config = EnvConfig(environ={"FLAG": raw})

    assert config.get("flag", True) is expected


def test_numeric_coercion():
    config = EnvConfig(environ={"LIMIT": "25", "RATIO": "0.5", "BROKEN": "x"})

    assert config.get("limit", 10) == 25
    assert config.get("ratio", 1.0) == 0.5
    assert config.get("broken", 3) == 3
    assert config.get("missing", "fallback") == "fallback"


def test_overrides_win_over_environment():
    config = EnvConfig(overrides={"limit": 7}, environ={"LIMIT": "25"})
    assert config.get("limit", 10) == 7

    config.set("limit", 8)
    assert config.get("limit", 10) == 8


def test_get_list():
    config = EnvConfig(overrides={"names": ["a", "b"]}, environ={"BRAND_IDS": " x, y ,,z"})

    assert config.get_list("brand_ids") == ["x", "y", "z"]
    assert config.get_list("names") == ["a", "b"]
    assert config.get_list("absent") == []


def test_reads_process_environment_by_default(monkeypatch):
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")

    assert EnvConfig().get("openai.model", "gpt-4o-mini") == "gpt-4o"
