"""Tests for share sales made to pay for a train."""

import pytest

from trainyard.engine.actions import SellSharesAction
from trainyard.engine.errors import IllegalSaleError
from trainyard.engine.operating_round import OperatingRound
from trainyard.models.ruleset import TrainBuyRules


def _bundle(state, player_id, company_id, count=1):
    company = state.companies[company_id]
    bundles = state.stock_market.bundles_for(player_id, company)
    return next(b for b in bundles if b.shares == count)


@pytest.fixture
def alice_owns_ir(state, alice, ar):
    """Alice holds one IR share while AR must find money for a train."""
    state.buy_ipo_share("p1", "IR")
    alice.cash = 0
    ar.treasury = 0
    return _bundle(state, "p1", "IR")


def test_can_sell_share_of_another_company(manager, alice, alice_owns_ir):
    assert manager.can_sell(alice, alice_owns_ir)


def test_cannot_sell_more_than_needed(manager, alice, alice_owns_ir):
    # ¥70 share, cheapest train ¥80: the sale is allowed below ¥150 in total
    alice.cash = 79
    assert manager.can_sell(alice, alice_owns_ir)

    alice.cash = 80
    assert not manager.can_sell(alice, alice_owns_ir)


def test_sole_president_share_cannot_be_sold(state, manager, bob, ar):
    bob.cash = 0
    ar.treasury = 0

    for count in (1, 2):
        bundle = _bundle(state, "p2", "IR", count)
        assert bundle.presidents_share
        assert not manager.can_sell(bob, bundle)


def test_presidency_can_pass_in_another_company(state, alice, bob, ar):
    state.buy_ipo_share("p1", "IR", 2)
    bob.cash = 0
    ar.treasury = 0
    bundle = _bundle(state, "p2", "IR", 2)

    assert OperatingRound(state).train_manager.can_sell(bob, bundle)

    no_swap = OperatingRound(state, TrainBuyRules(ebuy_pres_swap=False))
    assert not no_swap.train_manager.can_sell(bob, bundle)


def test_operating_company_keeps_its_president(state, manager, alice, bob, ar):
    depot = state.train_depot
    for train in [t for t in depot.upcoming if t.name == "2"]:
        depot.remove_train(train)
    bob.cash = 300
    state.buy_ipo_share("p1", "AR", 2)
    state.buy_ipo_share("p2", "AR", 3)
    alice.cash = 0
    ar.treasury = 0

    assert manager.can_sell(alice, _bundle(state, "p1", "AR", 1))
    # Selling two would leave Alice behind Bob
    assert not manager.can_sell(alice, _bundle(state, "p1", "AR", 2))


def test_market_pool_limit(state, manager, alice, alice_owns_ir):
    stock = state.stock_market.stocks["IR"]

    stock.market_shares = 4
    assert manager.can_sell(alice, alice_owns_ir)

    stock.market_shares = 5
    assert not manager.can_sell(alice, alice_owns_ir)


def test_process_sell_shares(state, manager, alice, ir, alice_owns_ir):
    bank_before = state.bank_cash

    manager.process_sell_shares(SellSharesAction(player=alice, bundle=alice_owns_ir))

    assert alice.cash == 70
    assert state.bank_cash == bank_before - 70
    assert ir.stock_price == 65
    assert state.stock_market.stocks["IR"].market_shares == 1
    assert state.stock_market.stocks["IR"].get_player_shares("p1") == 0
    assert manager.context.last_share_sold_price == 70
    assert state.game_log[-1]["type"] == "sell_shares"


def test_illegal_sale_changes_nothing(state, manager, alice, bob, alice_owns_ir):
    alice.cash = 200

    with pytest.raises(IllegalSaleError):
        manager.process_sell_shares(
            SellSharesAction(player=alice, bundle=alice_owns_ir)
        )
    with pytest.raises(IllegalSaleError):
        manager.process_sell_shares(SellSharesAction(player=bob, bundle=alice_owns_ir))

    assert alice.cash == 200
    assert state.stock_market.stocks["IR"].market_shares == 0
    assert manager.context.last_share_sold_price is None


def test_sale_reorders_waiting_companies(state, alice, ar):
    state.start_company("p2", "KO", 75)
    operating_round = OperatingRound(state)
    assert operating_round.company_order == ["AR", "KO", "IR"]

    state.buy_ipo_share("p1", "KO", 2)
    alice.cash = 0
    ar.treasury = 0
    operating_round.train_manager.process_sell_shares(
        SellSharesAction(player=alice, bundle=_bundle(state, "p1", "KO", 2))
    )

    assert state.companies["KO"].stock_price == 65
    assert operating_round.company_order == ["AR", "IR", "KO"]


def test_only_operating_president_may_sell(state, manager, bob, ar):
    state.buy_ipo_share("p2", "AR")
    bob.cash = 0
    ar.treasury = 0
    bundle = _bundle(state, "p2", "AR")
    assert manager.can_sell(bob, bundle)

    with pytest.raises(IllegalSaleError, match="does not preside"):
        manager.process_sell_shares(SellSharesAction(player=bob, bundle=bundle))

    assert bob.cash == 0
    assert state.stock_market.stocks["AR"].market_shares == 0
    assert manager.context.last_share_sold_price is None


def test_round_sells_shares_for_forced_buy(operating_round, alice, ar, alice_owns_ir):
    result = operating_round.execute_action(
        ar, {"type": "sell_shares", "company_id": "IR", "count": 1}
    )

    assert result["success"]
    assert alice.cash == 70
    assert operating_round.train_manager.context.last_share_sold_price == 70


def test_round_refuses_sale_without_train_obligation(
    state, operating_round, alice, ar, give_train
):
    state.buy_ipo_share("p1", "IR")
    alice.cash = 0
    give_train(state, ar, "2")

    result = operating_round.execute_action(
        ar, {"type": "sell_shares", "company_id": "IR", "count": 1}
    )

    assert not result["success"]
    assert result["error"] == "Awa Railroad does not need to raise money"
    assert alice.cash == 0
    assert state.stock_market.stocks["IR"].market_shares == 0
