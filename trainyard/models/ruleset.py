"""Game-variant rules for emergency train buying."""

import os
from dataclasses import dataclass, replace

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class TrainBuyRules:
    """Variant flags that change emergency train buying.

    Attributes:
        ebuy_other_value: A cash-short company may buy another company's
            train using money contributed by its president, including cash
            raised by selling shares this turn.
        ebuy_pres_swap: A president raising money may sell shares of a
            company other than the operating one even if that hands the
            presidency to another player.
    """

    ebuy_other_value: bool = True
    ebuy_pres_swap: bool = True

    @classmethod
    def from_env(cls) -> "TrainBuyRules":
        """Build rules from environment variables.

        TRAINYARD_RULESET picks a preset from RULESETS, then
        TRAINYARD_EBUY_OTHER_VALUE and TRAINYARD_EBUY_PRES_SWAP override
        single flags.

        Returns:
            The configured rules.
        """
        preset = os.getenv("TRAINYARD_RULESET", "default")
        if preset not in RULESETS:
            raise ValueError(f"Unknown ruleset: {preset}")

        rules = RULESETS[preset]
        overrides = {}
        for flag in ("ebuy_other_value", "ebuy_pres_swap"):
            value = os.getenv(f"TRAINYARD_{flag.upper()}")
            if value is not None:
                overrides[flag] = _parse_flag(flag, value)
        return replace(rules, **overrides)


def _parse_flag(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    raise ValueError(f"Invalid value for {name}: {value!r}")


RULESETS = {
    "default": TrainBuyRules(),
    # 1889: a player cannot contribute to buy a train from another company
    "1889": TrainBuyRules(ebuy_other_value=False),
}
