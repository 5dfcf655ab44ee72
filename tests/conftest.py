"""Shared fixtures for Trainyard tests."""

from collections.abc import Callable

import pytest

from trainyard.engine.operating_round import OperatingRound
from trainyard.engine.train_manager import TrainManager
from trainyard.models.company import Company
from trainyard.models.game_state import GameState
from trainyard.models.player import Player
from trainyard.models.train import Train, TrainDepot

# A short train list where the diesel is next after a single 4
DIESEL_DEFINITIONS = [
    {"name": "4", "distance": 4, "price": 300, "num": 1},
    {
        "name": "D",
        "distance": 999,
        "price": 1100,
        "num": 3,
        "discount": {"4": 300, "5": 300, "6": 300},
    },
]


@pytest.fixture
def make_state() -> Callable[..., GameState]:
    """Build a game where Alice runs AR (par 100) and Bob runs IR (par 70)."""

    def _make(definitions: list[dict] | None = None) -> GameState:
        state = GameState(id="test_game", train_depot=TrainDepot(definitions))
        state.add_player(Player(id="p1", name="Alice", cash=420))
        state.add_player(Player(id="p2", name="Bob", cash=420))
        state.start_company("p1", "AR", 100)
        state.start_company("p2", "IR", 70)
        return state

    return _make


@pytest.fixture
def state(make_state) -> GameState:
    return make_state()


@pytest.fixture
def alice(state) -> Player:
    return state.players["p1"]


@pytest.fixture
def bob(state) -> Player:
    return state.players["p2"]


@pytest.fixture
def ar(state) -> Company:
    return state.companies["AR"]


@pytest.fixture
def ir(state) -> Company:
    return state.companies["IR"]


@pytest.fixture
def operating_round(state) -> OperatingRound:
    return OperatingRound(state)


@pytest.fixture
def manager(operating_round) -> TrainManager:
    return operating_round.train_manager


@pytest.fixture
def give_train() -> Callable[[GameState, Company, str], Train]:
    """Hand an upcoming train to a company without paying for it."""

    def _give(state: GameState, company: Company, name: str) -> Train:
        train = next(t for t in state.train_depot.upcoming if t.name == name)
        state.train_depot.remove_train(train)
        company.add_train(train)
        return train

    return _give
