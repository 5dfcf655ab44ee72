"""Game models for Trainyard."""

from .player import Player
from .company import Company, CompanyStatus
from .train import DiscountOffer, Train, TrainDepot, TrainVariant
from .phase import Phase
from .stock import ShareBundle, Stock, StockMarket
from .ruleset import TrainBuyRules
from .game_state import GameState, GamePhase

__all__ = [
    "Player",
    "Company",
    "CompanyStatus",
    "DiscountOffer",
    "Train",
    "TrainDepot",
    "TrainVariant",
    "Phase",
    "ShareBundle",
    "Stock",
    "StockMarket",
    "TrainBuyRules",
    "GameState",
    "GamePhase",
]
