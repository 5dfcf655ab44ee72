"""Rule violations raised by the train buying engine."""


class GameError(ValueError):
    """An action breaks the rules of the game.

    Raised before anything is changed, so the action can be corrected and
    submitted again.
    """


class IllegalTrainError(GameError):
    """The requested train or variant cannot be bought right now."""


class MustBuyCheapestError(GameError):
    """A cash-short forced purchase targets something other than the cheapest train."""


class ContributionDuringExchangeError(GameError):
    """The president would have to contribute cash to an exchange purchase."""


class OverpayError(GameError):
    """A forced purchase offers more than the train's listed price."""


class InsufficientFundsError(GameError):
    """The buyer cannot cover the price, even with contributions."""


class InvalidPriceError(GameError):
    """The offered price does not match what the seller may accept."""


class IllegalSaleError(GameError):
    """A share sale is not allowed while raising money for a train."""
