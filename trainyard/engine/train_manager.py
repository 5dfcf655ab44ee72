"""Train buying and emergency share selling for Trainyard."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trainyard.engine.operating_round import OperatingRound
    from trainyard.models.company import Company
    from trainyard.models.game_state import GameState
    from trainyard.models.player import Player

from trainyard.engine.actions import BuyTrainAction, SellSharesAction
from trainyard.engine.errors import (
    ContributionDuringExchangeError,
    IllegalSaleError,
    IllegalTrainError,
    InsufficientFundsError,
    InvalidPriceError,
    MustBuyCheapestError,
    OverpayError,
)
from trainyard.models.ruleset import TrainBuyRules
from trainyard.models.stock import ShareBundle
from trainyard.models.train import Train, TrainVariant


@dataclass
class BuyTrainContext:
    """State kept across the actions of one company's train buying turn.

    Attributes:
        last_share_sold_price: Per-share price of the latest emergency
            sale this turn, None until a share is sold.
    """

    last_share_sold_price: int | None = None

    def reset(self) -> None:
        self.last_share_sold_price = None


class TrainManager:
    """Decides which trains a company may buy and applies purchases.

    Also validates share sales a president makes to raise money for a
    train the company must buy.

    Attributes:
        state: Reference to game state.
        round: The operating round sequencing companies.
        rules: Variant rules for emergency buying.
        depot: The train depot.
        context: Per-turn state, reset by setup().
        passed: Whether the current company is done buying trains.
    """

    def __init__(
        self,
        state: "GameState",
        round_: "OperatingRound",
        rules: TrainBuyRules | None = None,
    ) -> None:
        """Initialize train manager.

        Args:
            state: The game state.
            round_: The round to notify about order changes.
            rules: Variant rules. Defaults to TrainBuyRules().
        """
        self.state = state
        self.round = round_
        self.rules = rules or TrainBuyRules()
        self.depot = state.train_depot
        self.context = BuyTrainContext()
        self.passed = False
        self.logger = logging.getLogger(__name__)

    def setup(self, context: BuyTrainContext | None = None) -> None:
        """Start a new train buying turn.

        Args:
            context: Turn state owned by the round. A fresh one is used
                if omitted.
        """
        self.depot = self.state.train_depot
        self.context = context or BuyTrainContext()
        self.context.reset()
        self.passed = False

    @property
    def current_company(self) -> "Company | None":
        return self.round.get_current_company()

    def room(self, company: "Company") -> bool:
        """Check if a company is below the phase train limit."""
        return len(company.active_trains) < self.state.phase.train_limit

    def can_buy_train(self, company: "Company") -> bool:
        """Check if a company can buy any train right now.

        Args:
            company: The company to check.

        Returns:
            True if it has room and can afford the cheapest depot train,
            or can afford a discounted exchange regardless of room.
        """
        can_buy_normal = (
            self.room(company)
            and self.depot.min_depot_train() is not None
            and company.treasury >= self.depot.min_depot_price()
        )

        return can_buy_normal or any(
            company.treasury >= offer.price
            for offer in self.depot.discountable_trains_for(company)
        )

    def must_buy_train(self, company: "Company") -> bool:
        return self.state.must_buy_train(company)

    def should_buy_train(self, company: "Company") -> str | None:
        """Recommend a purchase. Variant rule sets may override this."""
        return None

    def buyable_trains(self, company: "Company") -> list[Train]:
        """Get trains a company may buy right now.

        A company that cannot afford the cheapest depot train may only buy
        that train, topped up by its president. Once a share has been sold
        this turn, trains from other companies stay available only down to
        the cash the company and president had before the sale.

        Args:
            company: The buying company.

        Returns:
            Depot trains followed by other companies' trains.
        """
        depot_trains = self.depot.depot_trains()
        other_trains = self.depot.other_trains(company)

        min_depot_train = self.depot.min_depot_train()
        if min_depot_train is not None and min_depot_train.price > company.treasury:
            depot_trains = [min_depot_train]

            last_price = self.context.last_share_sold_price
            if last_price is not None:
                if not self.rules.ebuy_other_value:
                    return depot_trains

                # e.g. with ¥40 cash and a share sold for ¥80 there is now
                # ¥120, and a ¥100 train is still within reach
                president = self.state.president_of(company)
                owner_cash = president.cash if president else 0
                min_available_cash = company.treasury + owner_cash - last_price
                return depot_trains + [
                    t for t in other_trains if t.price >= min_available_cash
                ]

        return depot_trains + other_trains

    def buyable_train_variants(
        self, train: Train, company: "Company"
    ) -> list[TrainVariant]:
        """Get the variants of a train a company may buy."""
        if train not in self.buyable_trains(company):
            return []
        return list(train.variants.values())

    def buy_train_action(self, action: BuyTrainAction) -> str:
        """Validate and carry out a train purchase.

        Args:
            action: The purchase to make.

        Returns:
            Description of the purchase.

        Raises:
            GameError: If the purchase breaks a rule, including a purchase
                that would take the fleet past the train limit. Nothing is
                changed.
        """
        company = action.company
        train = action.train
        price = action.price
        exchange = action.exchange
        variant_name = action.variant or train.variant

        buyable = [v.name for v in self.buyable_train_variants(train, company)]
        if variant_name not in buyable:
            raise IllegalTrainError(f"Not a buyable train: {train.name}")
        variant = train.variants[variant_name]
        if exchange is not None:
            self._check_exchange(company, train, exchange)
        elif not self.room(company):
            raise IllegalTrainError(f"{company.name} is at its train limit")

        president = self.state.president_of(company)
        contribution = 0
        remaining = price - company.treasury
        if remaining > 0 and self.must_buy_train(company):
            cheapest = self.depot.min_depot_train()
            if train is not cheapest and (
                not self.rules.ebuy_other_value or train.from_depot
            ):
                raise MustBuyCheapestError(
                    f"Cannot purchase {variant.name} train: "
                    f"{cheapest.name} train available"
                )
            if exchange is not None:
                raise ContributionDuringExchangeError(
                    "Cannot contribute funds when exchanging"
                )
            if price > variant.price:
                raise OverpayError("Cannot buy for more than cost")
            if president is None or not president.can_afford(remaining):
                raise InsufficientFundsError(
                    f"President cannot contribute {self.state.format_currency(remaining)}"
                )
            contribution = remaining
        elif remaining > 0:
            raise InsufficientFundsError(
                f"{company.name} cannot afford {self.state.format_currency(price)}"
            )

        self._check_price(train, variant, price, exchange)

        if contribution:
            president.spend(contribution, company)
            self.logger.info(
                f"{president.name} contributes {self.state.format_currency(contribution)}"
            )
            self.state.log_event(
                "contribute",
                {"player": president.id, "company": company.id, "amount": contribution},
            )

        source = self._source_name(train)
        train.select_variant(variant_name)

        if exchange is not None:
            verb = f"exchanges a {exchange.name} for"
            company.remove_train(exchange)
            self.depot.reclaim_train(exchange)
        else:
            verb = "buys"

        self.state.transfer_train(company, train, price)
        rusted = self.state.buying_train(company, train)

        message = (
            f"{company.name} {verb} a {train.name} train for "
            f"{self.state.format_currency(price)} from {source}"
        )
        self.logger.info(message)
        self.state.log_event(
            "buy_train",
            {
                "company": company.id,
                "train": train.id,
                "name": train.name,
                "price": price,
                "source": source,
                "exchange": exchange.id if exchange else None,
                "rusted": len(rusted),
            },
        )

        if not self.can_buy_train(company):
            self.pass_step()
        return message

    def _check_exchange(self, company: "Company", train: Train, exchange: Train) -> None:
        if exchange not in company.trains:
            raise IllegalTrainError(
                f"{company.name} does not own the {exchange.name} train"
            )
        if not train.from_depot or exchange.name not in train.discount:
            raise IllegalTrainError(
                f"Cannot exchange a {exchange.name} for a {train.name} train"
            )

    def _check_price(
        self,
        train: Train,
        variant: TrainVariant,
        price: int,
        exchange: Train | None,
    ) -> None:
        """Check the offered price against what the seller may accept."""
        if train.from_depot:
            expected = variant.price
            if exchange is not None:
                expected -= train.discount[exchange.name]
            if price != expected:
                raise InvalidPriceError(
                    f"{variant.name} train costs {self.state.format_currency(expected)}"
                )
        elif price < 1:
            raise InvalidPriceError("Trains must be bought for at least ¥1")

    def _source_name(self, train: Train) -> str:
        if train in self.depot.discarded:
            return "The Discard"
        if train.from_depot:
            return "The Depot"
        return self.state.companies[train.owner_id].name

    def pass_step(self) -> None:
        """Finish train buying for the current company."""
        self.passed = True
        company = self.current_company
        if company:
            self.logger.debug(f"{company.name} is done buying trains")

    def process_sell_shares(self, action: SellSharesAction) -> None:
        """Sell shares to raise money for a train.

        Args:
            action: The sale to make.

        Raises:
            IllegalSaleError: If the seller is not the operating company's
                president or the sale is not allowed.
        """
        bundle = action.bundle
        company = self.state.companies[bundle.company_id]
        operating = self.current_company
        if operating is None or not operating.is_president(action.player.id):
            raise IllegalSaleError(
                f"{action.player.name} does not preside over the operating company"
            )
        if bundle.owner_id != action.player.id or not self.can_sell(
            action.player, bundle
        ):
            raise IllegalSaleError(f"Cannot sell shares of {company.name}")

        self.context.last_share_sold_price = bundle.price_per_share
        self.state.sell_shares_and_change_price(bundle)
        self.logger.info(
            f"{action.player.name} sells {bundle.shares} {company.id} for "
            f"{self.state.format_currency(bundle.price)}"
        )
        self.round.recalculate_order()

    def can_sell(self, player: "Player", bundle: ShareBundle) -> bool:
        """Check if a share sale is allowed during emergency buying.

        Args:
            player: The player offering the sale.
            bundle: Shares offered.

        Returns:
            True if the sale is allowed.
        """
        seller = self.state.players[bundle.owner_id]
        market = self.state.stock_market
        operating = self.current_company
        if operating is None:
            return False

        # Can't sell president's share
        if not market.can_dump(bundle):
            return False

        # Can only sell as much as you need to afford the train
        total_cash = bundle.price + seller.cash + operating.treasury
        if total_cash >= self.depot.min_depot_price() + bundle.price_per_share:
            return False

        # Can't swap presidency
        company = self.state.companies[bundle.company_id]
        if company.is_president(seller.id) and (
            not self.rules.ebuy_pres_swap or company is operating
        ):
            holders = market.stocks[company.id].player_share_holders()
            remaining = holders.get(seller.id, 0) - bundle.percent
            next_highest = max(
                (p for pid, p in holders.items() if pid != seller.id), default=0
            )
            if remaining < next_highest:
                return False

        # Can't oversaturate the market
        return market.fits_in_pool(bundle)

    def issuable_shares(self, company: "Company") -> list[ShareBundle]:
        """Get shares a company could issue to pay for a train."""
        return []
