"""Game engine for Trainyard."""

from .actions import BuyTrainAction, SellSharesAction
from .errors import GameError
from .game_engine import GameEngine
from .operating_round import OperatingRound
from .train_manager import BuyTrainContext, TrainManager

__all__ = [
    "BuyTrainAction",
    "SellSharesAction",
    "GameError",
    "GameEngine",
    "OperatingRound",
    "BuyTrainContext",
    "TrainManager",
]
