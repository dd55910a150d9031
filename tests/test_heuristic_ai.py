import pytest

from dotsgame.ai.base import ActionKind
from dotsgame.ai.heuristic_ai import HeuristicAI
from dotsgame.board_manager import BoardManager
from dotsgame.errors import AIFallbackError, NoEnclosingPathError
from dotsgame.models import DotColor


@pytest.fixture
def make_ai(ai_config_deterministic, stub_strategy):
    def _make(color=DotColor.RED, position=None, config=None):
        return HeuristicAI(
            color,
            config or ai_config_deterministic,
            capture_strategy=stub_strategy(position),
        )
    return _make


def test_encircles_a_sealed_group(game_factory, place, make_ai):
    state = game_factory(size=7, ai_color=DotColor.RED)
    (target,) = place(state, DotColor.BLACK, (4, 4))
    place(state, DotColor.RED, (3, 4), (4, 3), (4, 5), (5, 4))
    ai = make_ai()

    action = ai.select_action(state)

    assert action.kind == ActionKind.ENCIRCLE
    assert action.reason == "encircle"
    assert action.target.dot_ids == frozenset({target.id})
    assert action.path[0] is action.path[-1]
    assert ai.last_failure is None
    assert ai.move_count == 1


def test_seals_the_last_breakout(game_factory, place, make_ai):
    state = game_factory(size=7, ai_color=DotColor.RED)
    place(state, DotColor.BLACK, (4, 4))
    place(state, DotColor.RED, (3, 4), (4, 3), (4, 5))

    action = make_ai().select_action(state)

    assert action.kind == ActionKind.CAPTURE
    assert action.reason == "seal"
    assert action.dot.position == (5, 4)


def test_defends_own_endangered_dot(game_factory, place, make_ai):
    state = game_factory(size=7, ai_color=DotColor.RED)
    place(state, DotColor.RED, (4, 4))
    place(state, DotColor.BLACK, (3, 4), (4, 3), (4, 5))

    action = make_ai().select_action(state)

    assert action.reason == "defend"
    assert action.dot.position == (5, 4)


def test_defends_when_own_group_is_at_least_as_large(game_factory, place, make_ai):
    state = game_factory(size=9, ai_color=DotColor.RED)
    place(state, DotColor.RED, (3, 3))
    place(state, DotColor.BLACK, (2, 3), (3, 2), (3, 4))
    place(state, DotColor.BLACK, (6, 6))
    place(state, DotColor.RED, (5, 6), (6, 5), (6, 7))

    action = make_ai().select_action(state)

    assert action.reason == "defend"
    assert action.dot.position == (4, 3)


def test_attacks_a_larger_enemy_group(game_factory, place, make_ai):
    state = game_factory(size=9, ai_color=DotColor.RED)
    place(state, DotColor.RED, (3, 3))
    place(state, DotColor.BLACK, (2, 3), (3, 2), (3, 4))
    place(state, DotColor.BLACK, (6, 6), (6, 7))
    place(state, DotColor.RED, (5, 6), (5, 7), (6, 5), (6, 8), (7, 6))

    action = make_ai().select_action(state)

    assert action.reason == "seal"
    assert action.dot.position == (7, 7)


def test_falls_back_to_capture_strategy(game_factory, make_ai):
    state = game_factory(size=5, ai_color=DotColor.RED)

    action = make_ai(position=(2, 2)).select_action(state)

    assert action.kind == ActionKind.CAPTURE
    assert action.reason == "stub"
    assert action.dot.position == (2, 2)


def test_nothing_to_play_returns_none(game_factory, make_ai):
    state = game_factory(size=5, ai_color=DotColor.RED)

    assert make_ai(position=None).select_action(state) is None


def test_randomness_takes_a_random_free_dot(game_factory, make_ai, ai_config_random):
    state = game_factory(size=5, ai_color=DotColor.RED)

    action = make_ai(config=ai_config_random).select_action(state)

    assert action.reason == "randomness"
    assert action.dot.is_free


def test_unenclosable_group_is_remembered(game_factory, place, make_ai):
    state = game_factory(size=7, ai_color=DotColor.RED)
    (target,) = place(state, DotColor.BLACK, (4, 4))
    place(state, DotColor.GRAY, (3, 4))
    place(state, DotColor.RED, (4, 3), (4, 5), (5, 4))
    ai = make_ai(position=(1, 1))

    first = ai.select_action(state)

    assert first.reason == "stub"
    assert isinstance(ai.last_failure, AIFallbackError)
    assert isinstance(ai.last_failure.original_error, NoEnclosingPathError)
    assert ai.last_failure.fallback_method == "stub"
    assert frozenset({target.id}) in ai.unenclosable

    second = ai.select_action(state)

    assert second.reason == "stub"
    assert ai.last_failure is None
    assert ai.most_endangered(state, DotColor.BLACK) is None


def test_observe_capture_reaches_the_strategy(game_factory, make_ai):
    state = game_factory(size=5)
    ai = make_ai()
    dot = BoardManager.get_dot(state.board, 2, 2)

    ai.observe_capture(state, dot)

    assert ai.capture_strategy.observed == [dot.id]


def test_default_strategy_chain(ai_config_deterministic):
    ai = HeuristicAI(DotColor.BLACK, ai_config_deterministic)

    assert ai.capture_strategy.name == "priority+random"


def test_evaluation_breakdown(game_factory, place, make_ai):
    state = game_factory(size=7, ai_color=DotColor.RED)
    place(state, DotColor.BLACK, (4, 4))
    place(state, DotColor.RED, (3, 4), (4, 3), (4, 5))
    state.points[DotColor.RED] = 3

    breakdown = make_ai().get_evaluation_breakdown(state)

    assert breakdown == {
        "total": 3.0,
        "own_endangered": 0.0,
        "opponent_endangered": 1.0,
    }
