import random

from dotsgame.ai.capture_strategy import (
    ChainedCaptureStrategy,
    PriorityCaptureStrategy,
    RandomCaptureStrategy,
)
from dotsgame.models import DotColor


def test_priority_prefers_dots_next_to_opponent_captures(game_factory, place):
    state = game_factory(size=5)
    strategy = PriorityCaptureStrategy(DotColor.RED)

    for dot in place(state, DotColor.BLACK, (3, 3), (3, 4)):
        strategy.observe_capture(state, dot)

    assert strategy.priorities[state.board.dots[7].id] == 2  # (2, 3)
    assert state.board.dots[13].id not in strategy.priorities  # (3, 4) itself
    assert strategy.pick(state).position == (2, 3)


def test_own_captures_do_not_raise_priority(game_factory, place):
    state = game_factory(size=5)
    strategy = PriorityCaptureStrategy(DotColor.RED)

    for dot in place(state, DotColor.RED, (3, 3)):
        strategy.observe_capture(state, dot)

    assert strategy.priorities == {}
    assert strategy.pick(state) is None


def test_priority_drops_dots_that_are_no_longer_free(game_factory, place):
    state = game_factory(size=5)
    strategy = PriorityCaptureStrategy(DotColor.RED)
    for dot in place(state, DotColor.BLACK, (3, 3), (3, 4)):
        strategy.observe_capture(state, dot)

    place(state, DotColor.RED, (2, 3))
    pick = strategy.pick(state)

    assert pick.position == (2, 4)
    assert state.board.dots[7].id not in strategy.priorities


def test_random_strategy_is_seeded(game_factory):
    state = game_factory(size=5)

    first = RandomCaptureStrategy(random.Random(5)).pick(state)
    second = RandomCaptureStrategy(random.Random(5)).pick(state)

    assert first is second
    assert first.is_free


def test_random_strategy_on_full_board(game_factory, place):
    state = game_factory(size=3)
    place(state, DotColor.RED, *[(r, c) for r in (1, 2, 3) for c in (1, 2, 3)])

    assert RandomCaptureStrategy(random.Random(1)).pick(state) is None


def test_chain_asks_strategies_in_order(game_factory, stub_strategy):
    state = game_factory(size=5)
    empty = stub_strategy(None)
    fixed = stub_strategy((4, 4))
    chain = ChainedCaptureStrategy(empty, fixed)

    chain.observe_capture(state, state.board.dots[0])

    assert chain.name == "stub+stub"
    assert chain.pick(state).position == (4, 4)
    assert empty.observed == fixed.observed == [1]
