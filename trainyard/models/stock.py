"""Stock model for Trainyard."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .company import Company

# Every share is 10% of a company; the president's certificate is two shares.
SHARE_PERCENT = 10
PRESIDENT_SHARES = 2
# The bank pool can never hold more than 50% of a company.
MARKET_SHARE_LIMIT = 5


@dataclass
class ShareBundle:
    """A sellable slice of one player's holding in a company.

    Attributes:
        company_id: Company the shares belong to.
        owner_id: Player selling the shares.
        shares: Number of shares in the bundle.
        price_per_share: Market price of one share.
        presidents_share: Whether the bundle digs into the president's
            certificate.
    """

    company_id: str
    owner_id: str
    shares: int
    price_per_share: int
    presidents_share: bool = False

    @property
    def percent(self) -> int:
        return self.shares * SHARE_PERCENT

    @property
    def price(self) -> int:
        return self.shares * self.price_per_share


@dataclass
class Stock:
    """Who holds the shares of one company.

    Attributes:
        company_id: Company the shares belong to.
        player_shares: Shares held by each player, by player id.
        ipo_shares: Unsold shares still with the company.
        market_shares: Shares sitting in the bank pool.
    """

    company_id: str
    player_shares: dict[str, int] = field(default_factory=dict)
    ipo_shares: int = 10
    market_shares: int = 0

    def get_player_shares(self, player_id: str) -> int:
        return self.player_shares.get(player_id, 0)

    def player_share_holders(self) -> dict[str, int]:
        """Get the percent held by each player."""
        return {
            player_id: shares * SHARE_PERCENT
            for player_id, shares in self.player_shares.items()
        }

    def buy_from_ipo(self, player_id: str, count: int = 1) -> bool:
        """Move shares from the IPO to a player.

        Returns:
            False if the IPO holds fewer than count shares.
        """
        if self.ipo_shares < count:
            return False
        self.ipo_shares -= count
        self.player_shares[player_id] = self.get_player_shares(player_id) + count
        return True

    def sell_to_market(self, player_id: str, count: int = 1) -> bool:
        """Move shares from a player to the bank pool.

        Returns:
            False if the player holds fewer than count shares.
        """
        left = self.get_player_shares(player_id) - count
        if left < 0:
            return False
        if left:
            self.player_shares[player_id] = left
        else:
            self.player_shares.pop(player_id, None)
        self.market_shares += count
        return True


class StockMarket:
    """Share holdings and bank pool for every company.

    Attributes:
        stocks: Holdings keyed by company id.
    """

    def __init__(self) -> None:
        self.stocks: dict[str, Stock] = {}

    def add_company(self, company_id: str) -> None:
        self.stocks[company_id] = Stock(company_id=company_id)

    def get_stock(self, company_id: str) -> Stock | None:
        return self.stocks.get(company_id)

    def bundles_for(self, player_id: str, company: "Company") -> list[ShareBundle]:
        """Get every bundle size a player could offer for sale.

        Args:
            player_id: The selling player.
            company: Company whose shares are sold.

        Returns:
            Bundles from one share up to the player's whole holding.
        """
        stock = self.stocks.get(company.id)
        if not stock:
            return []

        held = stock.get_player_shares(player_id)
        bundles = []
        for count in range(1, held + 1):
            bundles.append(
                ShareBundle(
                    company_id=company.id,
                    owner_id=player_id,
                    shares=count,
                    price_per_share=company.stock_price,
                    presidents_share=company.is_president(player_id)
                    and held - count < PRESIDENT_SHARES,
                )
            )
        return bundles

    def can_dump(self, bundle: ShareBundle) -> bool:
        """Check if a bundle can leave its owner's hands.

        A bundle holding the president's certificate can only be sold if
        another player holds enough to take the presidency over.
        """
        if not bundle.presidents_share:
            return True
        stock = self.stocks.get(bundle.company_id)
        if not stock:
            return False
        others = [
            percent
            for player_id, percent in stock.player_share_holders().items()
            if player_id != bundle.owner_id
        ]
        return max(others, default=0) >= PRESIDENT_SHARES * SHARE_PERCENT

    def fits_in_pool(self, bundle: ShareBundle) -> bool:
        """Check if the market pool has room for a bundle."""
        stock = self.stocks.get(bundle.company_id)
        if not stock:
            return False
        return stock.market_shares + bundle.shares <= MARKET_SHARE_LIMIT
