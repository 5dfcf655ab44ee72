"""Company model for Trainyard."""

from dataclasses import dataclass, field
from enum import Enum

from .train import Train


class CompanyStatus(Enum):
    """Whether a company has been floated."""

    UNSTARTED = "unstarted"
    ACTIVE = "active"


COMPANIES_1889 = {
    "AR": "Awa Railroad",
    "IR": "Iyo Railway",
    "SR": "Sanuki Railway",
    "KO": "Kotohira Railway",
    "TR": "Tosa Railway",
    "KU": "Takamatsu Railway",
    "UR": "Uwajima Railway",
}

# Share prices in order along the market; selling moves a company left
STOCK_PRICES_1889 = [
    0, 5, 10, 15, 20, 25, 30, 35, 40, 45,
    50, 55, 60, 65, 70, 75, 80, 85, 90, 95,
    100, 110, 120, 130, 140, 150, 160, 170, 180, 190,
    200, 220, 240, 260, 280, 300, 330, 360, 400,
]  # fmt: skip

PAR_VALUES_1889 = [65, 70, 75, 80, 85, 90, 95, 100]

# A floated company receives ten shares' worth of its par value
FLOAT_SHARES = 10


@dataclass
class Company:
    """A railroad company that owns trains and a treasury.

    Attributes:
        id: Short company code, e.g. 'AR'.
        name: Full company name.
        status: Whether the company has floated.
        president_id: Player holding the president's certificate.
        treasury: Company cash.
        stock_price_index: Position on STOCK_PRICES_1889.
        trains: Trains the company owns, obsolete ones included.
        operated_this_round: Whether the company has finished its turn in
            the current operating round.
    """

    id: str
    name: str
    status: CompanyStatus = CompanyStatus.UNSTARTED
    president_id: str | None = None
    treasury: int = 0
    stock_price_index: int = 0
    trains: list[Train] = field(default_factory=list)
    operated_this_round: bool = False

    @property
    def stock_price(self) -> int:
        index = min(self.stock_price_index, len(STOCK_PRICES_1889) - 1)
        return STOCK_PRICES_1889[index]

    @property
    def active_trains(self) -> list[Train]:
        """Get trains that count against the train limit."""
        return [t for t in self.trains if not t.obsolete and not t.rusted]

    def is_president(self, player_id: str) -> bool:
        return self.president_id == player_id

    def float_at(self, par_value: int) -> None:
        """Float the company and fund its treasury from the par value.

        Raises:
            ValueError: If par_value is not a legal par price.
        """
        if par_value not in PAR_VALUES_1889:
            raise ValueError(f"{par_value} is not a par value")

        self.status = CompanyStatus.ACTIVE
        self.stock_price_index = STOCK_PRICES_1889.index(par_value)
        self.treasury = par_value * FLOAT_SHARES

    def add_train(self, train: Train) -> None:
        train.owner_id = self.id
        self.trains.append(train)

    def remove_train(self, train: Train) -> None:
        """Drop a train from the fleet if the company has it."""
        if train in self.trains:
            self.trains.remove(train)

    def drop_stock_price(self, steps: int = 1) -> None:
        """Move the share price left on the market, stopping at zero."""
        self.stock_price_index = max(0, self.stock_price_index - steps)

    def buy_train(self, train: Train, cost: int) -> None:
        """Pay for a train out of the treasury and add it to the fleet.

        Raises:
            ValueError: If the treasury cannot cover the cost.
        """
        if cost > self.treasury:
            raise ValueError(
                f"{self.name} cannot pay {cost} for a {train.name} train"
            )
        self.treasury -= cost
        self.add_train(train)


def create_1889_companies() -> dict[str, Company]:
    return {
        company_id: Company(id=company_id, name=name)
        for company_id, name in COMPANIES_1889.items()
    }
