"""Main entry point for Trainyard."""

import logging
import sys

from dotenv import load_dotenv

from trainyard.engine.game_engine import GameEngine
from trainyard.models.ruleset import TrainBuyRules


def setup_logging() -> None:
    """Configure logging for the application."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


def run_demo(rules: TrainBuyRules) -> GameEngine:
    """Play an emergency train buy with a share sale and a contribution."""
    print("🚂 Trainyard 1889 Emergency Buy Demo 🚂")
    print("=" * 40)

    engine = GameEngine("demo_game", rules=rules)
    alice = engine.add_player("p1", "Alice")
    engine.add_player("p2", "Bob")

    engine.start_company("p1", "AR", par_value=65)
    engine.start_company("p2", "IR", par_value=100)
    engine.buy_ipo_share("p1", "IR", count=2)

    # AR spent its treasury on track; Alice spent her cash elsewhere
    engine.state.companies["AR"].treasury = 30
    alice.cash = 20

    engine.start_operating_round()

    # IR operates first and buys a train normally
    print(engine.execute_action("buy_train", train_id="train_1")["message"])
    print(engine.execute_action("done")["message"])

    print(f"Phase: {engine.state.current_phase.value}")
    for action in engine.get_available_actions():
        print(f"  - {action['description']}")

    print(engine.execute_action("sell_shares", company_id="IR", count=1)["message"])
    result = engine.execute_action("buy_train", train_id="train_2")
    print(result["message"])

    for event in engine.state.game_log:
        print(f"  {event['type']}: {event['data']}")
    return engine


def main() -> None:
    """Run the Trainyard demo with rules from the environment."""
    load_dotenv()
    setup_logging()
    logger = logging.getLogger(__name__)

    try:
        rules = TrainBuyRules.from_env()
    except ValueError as e:
        logger.error(f"Invalid rules configuration: {e}")
        sys.exit(1)

    logger.info(f"Using rules: {rules}")
    run_demo(rules)


if __name__ == "__main__":
    main()
