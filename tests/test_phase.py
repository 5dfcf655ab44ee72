"""Tests for the phase tracker."""

from trainyard.models.phase import Phase
from trainyard.models.train import TrainDepot


def _train(depot: TrainDepot, name: str):
    return next(t for t in depot.trains if t.name == name)


def test_starts_in_phase_two():
    phase = Phase()
    assert phase.name == "2"
    assert phase.train_limit == 4
    assert phase.operating_rounds == 1


def test_first_train_of_a_type_advances_phase():
    depot = TrainDepot()
    phase = Phase()

    assert not phase.buying_train(_train(depot, "2"))
    assert phase.buying_train(_train(depot, "3"))
    assert phase.name == "3"
    assert phase.train_limit == 4

    assert phase.buying_train(_train(depot, "4"))
    assert phase.train_limit == 3
    assert phase.operating_rounds == 2


def test_repeat_purchase_does_not_advance():
    depot = TrainDepot()
    phase = Phase()
    phase.buying_train(_train(depot, "5"))

    assert not phase.buying_train(_train(depot, "5"))
    assert not phase.buying_train(_train(depot, "3"))
    assert phase.name == "5"


def test_custom_phase_table():
    phase = Phase(
        [
            {"name": "A", "on": None, "train_limit": 2, "operating_rounds": 1},
            {"name": "B", "on": "D", "train_limit": 1, "operating_rounds": 2},
        ]
    )
    depot = TrainDepot()

    phase.buying_train(_train(depot, "D"))
    assert phase.name == "B"
    assert phase.train_limit == 1
