"""Train and depot models for Trainyard."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .company import Company


# Train definitions for 1889
TRAIN_DEFINITIONS_1889: list[dict[str, Any]] = [
    {"name": "2", "distance": 2, "price": 80, "rusts_on": "4", "num": 6},
    {"name": "3", "distance": 3, "price": 180, "rusts_on": "6", "num": 5},
    {"name": "4", "distance": 4, "price": 300, "rusts_on": "D", "num": 4},
    {"name": "5", "distance": 5, "price": 450, "num": 3},
    {"name": "6", "distance": 6, "price": 630, "num": 2},
    {
        "name": "D",
        "distance": 999,  # Unlimited
        "price": 1100,
        "num": 20,
        "discount": {"4": 300, "5": 300, "6": 300},
    },
]


@dataclass
class TrainVariant:
    """A priced offer under which a physical train can be bought.

    Attributes:
        name: Name the train carries when bought as this variant.
        price: Listed price of this variant.
        distance: Number of stops the train can run.
        rusts_on: Name of the train whose first purchase rusts this one.
        obsolete_on: Name of the train whose first purchase obsoletes this one.
    """

    name: str
    price: int
    distance: int
    rusts_on: str | None = None
    obsolete_on: str | None = None


@dataclass(eq=False)
class Train:
    """Represents a physical train.

    Attributes:
        id: Unique identifier for this train.
        variants: Variant offers keyed by variant name.
        variant: Name of the currently selected variant.
        discount: Price reduction keyed by the name of a traded-in train.
        owner_id: Company ID that owns this train, or None if in the depot.
        rusted: Whether the train has rusted.
        obsolete: Whether the train is obsolete (owned, but no longer
            counted against the train limit).
    """

    id: str
    variants: dict[str, TrainVariant]
    variant: str
    discount: dict[str, int] = field(default_factory=dict)
    owner_id: str | None = None
    rusted: bool = False
    obsolete: bool = False

    @property
    def current(self) -> TrainVariant:
        """Get the selected variant."""
        return self.variants[self.variant]

    @property
    def name(self) -> str:
        return self.current.name

    @property
    def price(self) -> int:
        return self.current.price

    @property
    def distance(self) -> int:
        return self.current.distance

    @property
    def rusts_on(self) -> str | None:
        return self.current.rusts_on

    @property
    def obsolete_on(self) -> str | None:
        return self.current.obsolete_on

    @property
    def min_price(self) -> int:
        """Get the cheapest price across all variants."""
        return min(v.price for v in self.variants.values())

    @property
    def from_depot(self) -> bool:
        """Check if the train is sold by the bank (depot or discard)."""
        return self.owner_id is None

    def select_variant(self, name: str | None) -> None:
        """Switch to another variant of this train."""
        if name is None:
            return
        if name not in self.variants:
            raise ValueError(f"{self.name} train has no variant {name}")
        self.variant = name

    def price_with_exchange(self, exchange: "Train | None") -> int:
        """Get the price after trading in another train."""
        if exchange is None:
            return self.price
        return self.price - self.discount.get(exchange.name, 0)

    def rust(self) -> None:
        """Mark this train as rusted (removed from game)."""
        self.rusted = True
        self.owner_id = None


@dataclass
class DiscountOffer:
    """A discounted depot offer obtained by trading in an owned train.

    Attributes:
        train: The depot train on offer.
        variant: Variant name the offer applies to.
        price: Price after the discount.
        exchange: The owned train that must be traded in.
    """

    train: Train
    variant: str
    price: int
    exchange: Train


class TrainDepot:
    """Manages the supply of trains available from the bank.

    Attributes:
        trains: Every train in the game, whoever owns it.
        upcoming: Unsold trains, in purchase order.
        discarded: Trains returned to the bank, available again.
    """

    def __init__(self, definitions: list[dict[str, Any]] | None = None) -> None:
        """Initialize the train depot.

        Args:
            definitions: Train table to build from. Defaults to 1889.
        """
        self.trains: list[Train] = []
        self.upcoming: list[Train] = []
        self.discarded: list[Train] = []
        self._next_train_id: int = 1
        self._initialize_trains(definitions or TRAIN_DEFINITIONS_1889)

    def _initialize_trains(self, definitions: list[dict[str, Any]]) -> None:
        """Create all trains for the game."""
        for definition in definitions:
            for _ in range(definition.get("num", 1)):
                train = self._build_train(definition)
                self.trains.append(train)
                self.upcoming.append(train)

    def _build_train(self, definition: dict[str, Any]) -> Train:
        base = TrainVariant(
            name=definition["name"],
            price=definition["price"],
            distance=definition["distance"],
            rusts_on=definition.get("rusts_on"),
            obsolete_on=definition.get("obsolete_on"),
        )
        variants = {base.name: base}
        for extra in definition.get("variants", []):
            variant = TrainVariant(
                name=extra["name"],
                price=extra["price"],
                distance=extra.get("distance", base.distance),
                rusts_on=extra.get("rusts_on", base.rusts_on),
                obsolete_on=extra.get("obsolete_on", base.obsolete_on),
            )
            variants[variant.name] = variant

        train = Train(
            id=f"train_{self._next_train_id}",
            variants=variants,
            variant=base.name,
            discount=dict(definition.get("discount", {})),
        )
        self._next_train_id += 1
        return train

    def depot_trains(self) -> list[Train]:
        """Get trains the bank sells right now.

        Only the next upcoming train can be bought, plus one of each
        discarded train type.
        """
        trains = self.upcoming[:1]
        seen: set[str] = set()
        for train in self.discarded:
            if train.name not in seen:
                trains.append(train)
                seen.add(train.name)
        return trains

    def other_trains(self, company: "Company") -> list[Train]:
        """Get trains owned by companies other than the given one."""
        return [
            t
            for t in self.trains
            if t.owner_id is not None and t.owner_id != company.id and not t.rusted
        ]

    def min_depot_train(self) -> Train | None:
        """Get the cheapest train the bank sells."""
        trains = self.depot_trains()
        if not trains:
            return None
        return min(trains, key=lambda t: t.min_price)

    def min_depot_price(self) -> int:
        """Get the cheapest variant price of the cheapest depot train."""
        train = self.min_depot_train()
        if train is None:
            return 0
        return train.min_price

    def discountable_trains_for(self, company: "Company") -> list[DiscountOffer]:
        """Get discounted offers available to a company by trading in.

        Args:
            company: The company that would trade in one of its trains.

        Returns:
            One offer per owned train, discounted depot train and variant.
        """
        offers = []
        discountable = [t for t in self.depot_trains() if t.discount]
        for owned in company.trains:
            if owned.rusted:
                continue
            for train in discountable:
                discount = train.discount.get(owned.name, 0)
                if not discount:
                    continue
                for variant in train.variants.values():
                    offers.append(
                        DiscountOffer(
                            train=train,
                            variant=variant.name,
                            price=variant.price - discount,
                            exchange=owned,
                        )
                    )
        return offers

    def remove_train(self, train: Train) -> None:
        """Take a sold train out of the bank's supply."""
        if train in self.upcoming:
            self.upcoming.remove(train)
        elif train in self.discarded:
            self.discarded.remove(train)

    def reclaim_train(self, train: Train) -> None:
        """Return a traded-in train to the discard pile."""
        train.owner_id = None
        self.discarded.append(train)

    def rust_trains(self, trigger_name: str) -> list[Train]:
        """Rust all trains that should rust when trigger_name is bought."""
        rusted_trains = []
        for train in self.trains:
            if not train.rusted and train.rusts_on == trigger_name:
                self.remove_train(train)
                train.rust()
                rusted_trains.append(train)
        return rusted_trains

    def obsolete_trains(self, trigger_name: str) -> list[Train]:
        """Mark owned trains obsolete when trigger_name is bought."""
        obsoleted = []
        for train in self.trains:
            if (
                train.owner_id is not None
                and not train.rusted
                and not train.obsolete
                and train.obsolete_on == trigger_name
            ):
                train.obsolete = True
                obsoleted.append(train)
        return obsoleted
