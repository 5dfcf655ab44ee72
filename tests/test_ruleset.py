"""Tests for variant rule configuration."""

import pytest

from trainyard.models.ruleset import RULESETS, TrainBuyRules


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "TRAINYARD_RULESET",
        "TRAINYARD_EBUY_OTHER_VALUE",
        "TRAINYARD_EBUY_PRES_SWAP",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    rules = TrainBuyRules.from_env()
    assert rules == TrainBuyRules()
    assert rules.ebuy_other_value
    assert rules.ebuy_pres_swap


def test_preset(monkeypatch):
    monkeypatch.setenv("TRAINYARD_RULESET", "1889")

    rules = TrainBuyRules.from_env()

    assert rules == RULESETS["1889"]
    assert not rules.ebuy_other_value
    assert rules.ebuy_pres_swap


def test_flag_overrides_preset(monkeypatch):
    monkeypatch.setenv("TRAINYARD_RULESET", "1889")
    monkeypatch.setenv("TRAINYARD_EBUY_OTHER_VALUE", "yes")
    monkeypatch.setenv("TRAINYARD_EBUY_PRES_SWAP", " Off ")

    rules = TrainBuyRules.from_env()

    assert rules.ebuy_other_value
    assert not rules.ebuy_pres_swap


def test_unknown_preset(monkeypatch):
    monkeypatch.setenv("TRAINYARD_RULESET", "18XX")
    with pytest.raises(ValueError, match="Unknown ruleset"):
        TrainBuyRules.from_env()


def test_invalid_flag(monkeypatch):
    monkeypatch.setenv("TRAINYARD_EBUY_PRES_SWAP", "maybe")
    with pytest.raises(ValueError, match="ebuy_pres_swap"):
        TrainBuyRules.from_env()


def test_rules_are_frozen():
    rules = TrainBuyRules()
    with pytest.raises(AttributeError):
        rules.ebuy_other_value = False
