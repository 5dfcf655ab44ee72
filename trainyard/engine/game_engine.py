"""Game engine for Trainyard."""

from __future__ import annotations

from typing import Any

from trainyard.engine.operating_round import OperatingRound
from trainyard.models.game_state import GamePhase, GameState
from trainyard.models.player import Player
from trainyard.models.ruleset import TrainBuyRules
from trainyard.models.train import TrainDepot

# 1889 starting money based on player count
STARTING_MONEY_1889 = {
    2: 420,
    3: 420,
    4: 420,
    5: 390,
    6: 390,
}


class GameEngine:
    """Entry point for setting up a game and playing its operating rounds.

    Attributes:
        state: The current game state.
        rules: Variant rules for emergency buying.
        operating_round: The running operating round, if any.
    """

    def __init__(
        self,
        game_id: str,
        rules: TrainBuyRules | None = None,
        depot: TrainDepot | None = None,
    ) -> None:
        """Create a game with no players and no floated companies.

        Args:
            game_id: Unique identifier for this game.
            rules: Variant rules. Defaults to TrainBuyRules().
            depot: Train supply. Defaults to the 1889 trains.
        """
        self.state = GameState(id=game_id, train_depot=depot or TrainDepot())
        self.rules = rules or TrainBuyRules()
        self.operating_round: OperatingRound | None = None

    def add_player(self, player_id: str, name: str, cash: int | None = None) -> Player:
        """Seat a player.

        Args:
            player_id: Unique identifier for the player.
            name: Display name of the player.
            cash: Starting cash. Defaults to the 1889 amount for the
                player count once the player is seated.

        Returns:
            The seated player.
        """
        player = Player(id=player_id, name=name)
        self.state.add_player(player)
        if cash is None:
            cash = STARTING_MONEY_1889.get(len(self.state.players), 420)
        player.cash = cash
        return player

    def start_company(self, player_id: str, company_id: str, par_value: int) -> None:
        self.state.start_company(player_id, company_id, par_value)

    def buy_ipo_share(self, player_id: str, company_id: str, count: int = 1) -> None:
        self.state.buy_ipo_share(player_id, company_id, count)

    def start_operating_round(self) -> OperatingRound:
        """Start an operating round over all active companies."""
        if not self.state.active_companies:
            raise ValueError("No active companies to operate")
        for company in self.state.companies.values():
            company.operated_this_round = False
        self.operating_round = OperatingRound(self.state, self.rules)
        return self.operating_round

    def get_available_actions(self) -> list[dict[str, Any]]:
        """Get list of available actions for the operating company.

        Returns:
            Action dicts for the operating company, empty outside a round.
        """
        if self.operating_round is None:
            return []
        company = self.operating_round.get_current_company()
        if company is None:
            return []
        return self.operating_round.get_valid_actions(company)

    def execute_action(self, action_type: str, **kwargs: Any) -> dict[str, Any]:
        """Execute an action for the operating company.

        Args:
            action_type: Type of action to execute.
            **kwargs: Action-specific parameters.

        Returns:
            Result dict with a "success" flag and either details or "error".
        """
        if self.state.current_phase == GamePhase.SETUP or self.operating_round is None:
            return {"success": False, "error": "Invalid game phase"}

        company = self.operating_round.get_current_company()
        if company is None:
            return {"success": False, "error": "No operating company"}

        return self.operating_round.execute_action(
            company, {"type": action_type, **kwargs}
        )
