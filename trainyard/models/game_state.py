"""Game state model for Trainyard."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .company import Company, CompanyStatus, create_1889_companies
from .phase import Phase
from .player import Player
from .stock import PRESIDENT_SHARES, ShareBundle, StockMarket
from .train import Train, TrainDepot


class GamePhase(Enum):
    """Phases of the game."""

    SETUP = "setup"
    OPERATING_ROUND = "operating_round"
    EMERGENCY_TRAIN_BUY = "emergency_train_buy"


@dataclass
class GameState:
    """Game state shared by the train buying rules.

    This class is the ledger the rules read and mutate: cash, share
    ownership and train ownership, plus the depot and phase.

    Attributes:
        id: Unique game identifier.
        players: Dictionary of player_id to Player.
        companies: Dictionary of company_id to Company.
        stock_market: Stock market state.
        train_depot: Train supply.
        phase: Current train phase.
        current_phase: Current game phase.
        bank_cash: Cash remaining in the bank.
        game_log: Log of game events.
    """

    id: str
    players: dict[str, Player] = field(default_factory=dict)
    companies: dict[str, Company] = field(default_factory=create_1889_companies)
    stock_market: StockMarket = field(default_factory=StockMarket)
    train_depot: TrainDepot = field(default_factory=TrainDepot)
    phase: Phase = field(default_factory=Phase)
    current_phase: GamePhase = GamePhase.SETUP
    bank_cash: int = 12000  # 1889 bank size
    game_log: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.logger = logging.getLogger(__name__)
        for company_id in self.companies:
            if company_id not in self.stock_market.stocks:
                self.stock_market.add_company(company_id)

    @property
    def active_companies(self) -> list[Company]:
        """Get floated companies."""
        return [
            company
            for company in self.companies.values()
            if company.status is CompanyStatus.ACTIVE
        ]

    def add_player(self, player: Player) -> None:
        self.players[player.id] = player
        self.logger.info(f"{player.name} joins game {self.id}")

    def start_company(self, player_id: str, company_id: str, par_value: int) -> None:
        """Float a company with the player buying the president's certificate."""
        player = self.players[player_id]
        company = self.companies[company_id]
        if company.status != CompanyStatus.UNSTARTED:
            raise ValueError(f"{company.name} already started")

        cost = par_value * PRESIDENT_SHARES
        if not player.can_afford(cost):
            raise ValueError(f"{player.name} cannot afford the {company.id} certificate")
        company.float_at(par_value)
        player.pay(cost)
        self.bank_cash += cost
        company.president_id = player.id
        self.stock_market.stocks[company_id].buy_from_ipo(player.id, PRESIDENT_SHARES)

        self.log_event(
            "company_started",
            {"company_id": company_id, "president": player.id, "par_value": par_value},
        )

    def buy_ipo_share(self, player_id: str, company_id: str, count: int = 1) -> None:
        """Buy shares from the IPO at the current price."""
        player = self.players[player_id]
        company = self.companies[company_id]
        stock = self.stock_market.stocks[company_id]
        price = company.stock_price * count
        if count > stock.ipo_shares:
            raise ValueError(f"Only {stock.ipo_shares} {company_id} shares in IPO")

        player.pay(price)
        company.treasury += price
        stock.buy_from_ipo(player.id, count)
        self._check_president_change(company)

        self.log_event(
            "buy_ipo",
            {"player": player.id, "company_id": company_id, "count": count},
        )

    def president_of(self, company: Company) -> Player | None:
        """Get the player who presides over a company."""
        if company.president_id is None:
            return None
        return self.players.get(company.president_id)

    def must_buy_train(self, company: Company) -> bool:
        """Check if a company is obliged to own a train.

        A company without trains must buy one while the bank still sells
        trains.
        """
        return not company.trains and bool(self.train_depot.depot_trains())

    def transfer_train(self, company: Company, train: Train, price: int) -> None:
        """Move a train to a company and pay its seller.

        Args:
            company: The buying company.
            train: Train bought from the bank or another company.
            price: Agreed price.
        """
        seller = self.companies.get(train.owner_id) if train.owner_id else None

        company.buy_train(train, price)
        if seller is not None:
            seller.remove_train(train)
            seller.treasury += price
        else:
            self.train_depot.remove_train(train)
            self.bank_cash += price

    def buying_train(self, company: Company, train: Train) -> list[Train]:
        """Apply phase changes triggered by a train purchase.

        Args:
            company: The buying company.
            train: The train being bought.

        Returns:
            Trains that rusted because of this purchase.
        """
        if self.phase.buying_train(train):
            self.logger.info(f"Phase {self.phase.name} begins")
            self.log_event("phase_change", {"phase": self.phase.name})

        rusted = self.train_depot.rust_trains(train.name)
        for rusted_train in rusted:
            for c in self.companies.values():
                c.remove_train(rusted_train)
        if rusted:
            self.log_event(
                "rust", {"trigger": train.name, "trains": [t.id for t in rusted]}
            )

        self.train_depot.obsolete_trains(train.name)
        return rusted

    def sell_shares_and_change_price(self, bundle: ShareBundle) -> None:
        """Sell a bundle to the market pool and drop the share price."""
        company = self.companies[bundle.company_id]
        stock = self.stock_market.stocks[bundle.company_id]
        player = self.players[bundle.owner_id]

        if not stock.sell_to_market(player.id, bundle.shares):
            raise ValueError(f"{player.name} does not own {bundle.shares} shares")

        player.receive(bundle.price)
        self.bank_cash -= bundle.price
        company.drop_stock_price(bundle.shares)

        self._check_president_change(company)

        self.log_event(
            "sell_shares",
            {
                "player": player.id,
                "company_id": company.id,
                "count": bundle.shares,
                "price": bundle.price,
            },
        )

    def _check_president_change(self, company: Company) -> None:
        """Hand the presidency to a player who now holds strictly more shares.

        Ties keep the sitting president.
        """
        stock = self.stock_market.get_stock(company.id)
        if stock is None or company.president_id is None:
            return

        leader = company.president_id
        most = stock.get_player_shares(leader)
        for player_id, shares in stock.player_shares.items():
            if shares >= PRESIDENT_SHARES and shares > most:
                leader, most = player_id, shares

        if leader != company.president_id:
            company.president_id = leader
            self.log_event(
                "president_change", {"company_id": company.id, "president": leader}
            )
            self.logger.info(f"{leader} becomes president of {company.name}")

    def format_currency(self, amount: int) -> str:
        return f"¥{amount}"

    def log_event(self, event_type: str, data: dict[str, Any]) -> None:
        """Log a game event."""
        self.game_log.append({"type": event_type, "data": data})
