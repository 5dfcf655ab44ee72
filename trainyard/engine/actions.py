"""Actions submitted to the train buying engine."""

from dataclasses import dataclass

from trainyard.models.company import Company
from trainyard.models.player import Player
from trainyard.models.stock import ShareBundle
from trainyard.models.train import Train


@dataclass
class BuyTrainAction:
    """A company offers to buy a train.

    Attributes:
        company: The buying company.
        train: Train from the depot, the discard pile or another company.
        price: Offered price.
        variant: Variant to buy the train as (None keeps the current one).
        exchange: Owned train traded in for a discount.
    """

    company: Company
    train: Train
    price: int
    variant: str | None = None
    exchange: Train | None = None


@dataclass
class SellSharesAction:
    """A player sells shares to raise money for a train."""

    player: Player
    bundle: ShareBundle
