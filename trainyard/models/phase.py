"""Game phase model for Trainyard."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .train import Train


# Phase table for 1889: the train that starts each phase, the train limit
# and the number of operating rounds per stock round.
PHASES_1889: list[dict[str, Any]] = [
    {"name": "2", "on": None, "train_limit": 4, "operating_rounds": 1},
    {"name": "3", "on": "3", "train_limit": 4, "operating_rounds": 2},
    {"name": "4", "on": "4", "train_limit": 3, "operating_rounds": 2},
    {"name": "5", "on": "5", "train_limit": 3, "operating_rounds": 3},
    {"name": "6", "on": "6", "train_limit": 2, "operating_rounds": 3},
    {"name": "D", "on": "D", "train_limit": 2, "operating_rounds": 3},
]


@dataclass
class PhaseInfo:
    """One row of the phase table."""

    name: str
    on: str | None
    train_limit: int
    operating_rounds: int


class Phase:
    """Tracks the current game phase.

    Attributes:
        phases: Ordered phase table.
        index: Position of the current phase in the table.
    """

    def __init__(self, phases: list[dict[str, Any]] | None = None) -> None:
        self.phases = [PhaseInfo(**row) for row in (phases or PHASES_1889)]
        self.index = 0

    @property
    def current(self) -> PhaseInfo:
        return self.phases[self.index]

    @property
    def name(self) -> str:
        return self.current.name

    @property
    def train_limit(self) -> int:
        """Get the maximum number of active trains a company can own."""
        return self.current.train_limit

    @property
    def operating_rounds(self) -> int:
        return self.current.operating_rounds

    def buying_train(self, train: "Train") -> bool:
        """Advance the phase if the bought train starts a later one.

        Args:
            train: The train being bought.

        Returns:
            True if the phase changed.
        """
        advanced = False
        for index in range(self.index + 1, len(self.phases)):
            if self.phases[index].on == train.name:
                self.index = index
                advanced = True
        return advanced
