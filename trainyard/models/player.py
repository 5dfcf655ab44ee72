"""Player model for Trainyard."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .company import Company


@dataclass
class Player:
    """A shareholder who may have to fund a company's train.

    Attributes:
        id: Player identifier.
        name: Name shown in messages.
        cash: Personal cash in yen.
    """

    id: str
    name: str
    cash: int = 0

    def receive(self, amount: int) -> None:
        self.cash += amount

    def pay(self, amount: int) -> None:
        """Take cash from the player.

        Raises:
            ValueError: If the player has less than amount.
        """
        if not self.can_afford(amount):
            raise ValueError(f"{self.name} has only {self.cash}, needs {amount}")
        self.cash -= amount

    def can_afford(self, amount: int) -> bool:
        return amount <= self.cash

    def spend(self, amount: int, company: "Company") -> None:
        """Contribute personal cash to a company treasury."""
        self.pay(amount)
        company.treasury += amount
