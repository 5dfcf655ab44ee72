"""Operating round handling for Trainyard."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from trainyard.models.company import Company
    from trainyard.models.game_state import GameState

from trainyard.engine.actions import BuyTrainAction, SellSharesAction
from trainyard.engine.errors import GameError
from trainyard.engine.train_manager import BuyTrainContext, TrainManager
from trainyard.models.game_state import GamePhase
from trainyard.models.ruleset import TrainBuyRules
from trainyard.models.train import Train


@dataclass
class OperatingAction:
    """A train-step action a company took this round.

    Attributes:
        action_type: Type of action.
        company_id: Company performing action.
        details: Additional action details.
    """

    action_type: str
    company_id: str
    details: dict[str, Any]


class OperatingRound:
    """Sequences companies through their train buying turns.

    Attributes:
        state: Reference to game state.
        train_manager: Rules for buying trains and raising money.
        context: Train buying state for the current company's turn.
        current_company_index: Position of the operating company in
            company_order.
        company_order: Company ids in operating order.
        actions_this_round: Accepted actions, in order.
    """

    def __init__(self, state: "GameState", rules: TrainBuyRules | None = None) -> None:
        """Start the round with the highest-priced company.

        Args:
            state: The game state.
            rules: Variant rules for emergency buying.
        """
        self.state = state
        self.train_manager = TrainManager(state, self, rules)
        self.context = BuyTrainContext()
        self.current_company_index = 0
        self.company_order: list[str] = []
        self.actions_this_round: list[OperatingAction] = []
        self.logger = logging.getLogger(__name__)
        self._set_company_order()
        self._start_company_turn()

    def _set_company_order(self) -> None:
        """Order companies by share price, highest first."""
        sorted_companies = sorted(
            self.state.active_companies, key=lambda c: c.stock_price, reverse=True
        )
        self.company_order = [c.id for c in sorted_companies]

    def recalculate_order(self) -> None:
        """Re-sort companies still to operate after a share price change."""
        start = self.current_company_index + 1
        waiting = [self.state.companies[cid] for cid in self.company_order[start:]]
        waiting.sort(key=lambda c: c.stock_price, reverse=True)
        self.company_order[start:] = [c.id for c in waiting]

    def get_current_company(self) -> "Company | None":
        """Get the company whose turn it is, or None once all have operated."""
        if self.current_company_index >= len(self.company_order):
            return None
        company_id = self.company_order[self.current_company_index]
        return self.state.companies.get(company_id)

    @property
    def finished(self) -> bool:
        return self.get_current_company() is None

    def _start_company_turn(self) -> None:
        """Reset train buying state for the next company.

        Companies that can neither buy a train nor are obliged to are
        passed over.
        """
        manager = self.train_manager
        company = self.get_current_company()
        while company and not (
            manager.can_buy_train(company) or manager.must_buy_train(company)
        ):
            self.logger.info(f"{company.name} cannot buy a train")
            company.operated_this_round = True
            self.current_company_index += 1
            company = self.get_current_company()
        if company is None:
            self.logger.info("Operating round complete")

        self.context = BuyTrainContext()
        self.train_manager.setup(self.context)
        self._update_game_phase()

    def _update_game_phase(self) -> None:
        company = self.get_current_company()
        if (
            company
            and self.train_manager.must_buy_train(company)
            and company.treasury < self.state.train_depot.min_depot_price()
        ):
            self.state.current_phase = GamePhase.EMERGENCY_TRAIN_BUY
        else:
            self.state.current_phase = GamePhase.OPERATING_ROUND

    def get_valid_actions(self, company: "Company") -> list[dict[str, Any]]:
        """List the train-step actions open to the operating company.

        Args:
            company: The operating company.

        Returns:
            Action dicts a client can send back to execute_action.
        """
        manager = self.train_manager
        actions: list[dict[str, Any]] = []

        if manager.can_buy_train(company) or manager.must_buy_train(company):
            for train in manager.buyable_trains(company):
                for variant in manager.buyable_train_variants(train, company):
                    actions.append(
                        {
                            "type": "buy_train",
                            "train_id": train.id,
                            "variant": variant.name,
                            "price": variant.price,
                            "from_depot": train.from_depot,
                            "description": f"Buy a {variant.name} train",
                        }
                    )

        for offer in self.state.train_depot.discountable_trains_for(company):
            if company.treasury >= offer.price:
                actions.append(
                    {
                        "type": "buy_train",
                        "train_id": offer.train.id,
                        "variant": offer.variant,
                        "price": offer.price,
                        "exchange_id": offer.exchange.id,
                        "description": (
                            f"Exchange a {offer.exchange.name} for a "
                            f"{offer.variant} train"
                        ),
                    }
                )

        president = self.state.president_of(company)
        if president and manager.must_buy_train(company):
            for other in self.state.active_companies:
                for bundle in self.state.stock_market.bundles_for(president.id, other):
                    if manager.can_sell(president, bundle):
                        actions.append(
                            {
                                "type": "sell_shares",
                                "company_id": other.id,
                                "count": bundle.shares,
                                "price": bundle.price,
                                "description": (
                                    f"Sell {bundle.shares} {other.id} for "
                                    f"{self.state.format_currency(bundle.price)}"
                                ),
                            }
                        )

        if not manager.must_buy_train(company):
            actions.append({"type": "done", "description": "Done buying trains"})

        return actions

    def execute_action(
        self, company: "Company", action: dict[str, Any]
    ) -> dict[str, Any]:
        """Run an action dict for the operating company.

        Args:
            company: Company taking action.
            action: Action dictionary.

        Returns:
            Result dictionary.
        """
        if company is not self.get_current_company():
            return {"success": False, "error": f"{company.name} is not operating"}

        action_type = action.get("type")
        try:
            if action_type == "buy_train":
                result = self._buy_train(company, action)
            elif action_type == "sell_shares":
                result = self._sell_shares(company, action)
            elif action_type == "done":
                result = self._done(company)
            else:
                return {"success": False, "error": f"Unknown action: {action_type}"}
        except GameError as e:
            self.logger.info(f"{company.name} rejected {action_type}: {e}")
            return {"success": False, "error": str(e)}

        self.actions_this_round.append(
            OperatingAction(
                action_type=action_type, company_id=company.id, details=dict(action)
            )
        )

        if self.train_manager.passed:
            self._finish_company(company)
            result["company_done"] = True
        else:
            self._update_game_phase()
        result["round_complete"] = self.finished
        return result

    def _find_train(self, train_id: str | None) -> Train:
        for train in self.state.train_depot.trains:
            if train.id == train_id:
                return train
        raise GameError(f"Unknown train: {train_id}")

    def _buy_train(self, company: "Company", action: dict[str, Any]) -> dict[str, Any]:
        """Buy a train."""
        manager = self.train_manager
        if not manager.can_buy_train(company) and not manager.must_buy_train(company):
            raise GameError(f"{company.name} cannot buy a train")
        train = self._find_train(action.get("train_id"))
        exchange_id = action.get("exchange_id")
        exchange = self._find_train(exchange_id) if exchange_id else None
        price = action.get("price")
        if price is None:
            price = train.price_with_exchange(exchange)

        message = self.train_manager.buy_train_action(
            BuyTrainAction(
                company=company,
                train=train,
                price=price,
                variant=action.get("variant"),
                exchange=exchange,
            )
        )
        return {"success": True, "train": train.name, "message": message}

    def _sell_shares(
        self, company: "Company", action: dict[str, Any]
    ) -> dict[str, Any]:
        """Sell a president's shares to raise money for a train."""
        if not self.train_manager.must_buy_train(company):
            raise GameError(f"{company.name} does not need to raise money")
        president = self.state.president_of(company)
        other = self.state.companies.get(action.get("company_id", ""))
        if president is None or other is None:
            raise GameError("Nothing to sell")

        count = action.get("count", 1)
        bundles = self.state.stock_market.bundles_for(president.id, other)
        bundle = next((b for b in bundles if b.shares == count), None)
        if bundle is None:
            raise GameError(f"{president.name} does not own {count} {other.id} shares")

        self.train_manager.process_sell_shares(
            SellSharesAction(player=president, bundle=bundle)
        )
        return {
            "success": True,
            "message": f"{president.name} sold {count} {other.id}",
        }

    def _done(self, company: "Company") -> dict[str, Any]:
        """Finish buying trains."""
        if self.train_manager.must_buy_train(company):
            raise GameError(f"{company.name} must buy a train")
        self.train_manager.pass_step()
        return {"success": True, "message": f"{company.name} finished operating"}

    def _finish_company(self, company: "Company") -> None:
        company.operated_this_round = True
        self.current_company_index += 1
        self._start_company_turn()
