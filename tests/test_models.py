from dotsgame.models import (
    PLAYER_COLORS,
    AIConfig,
    Dot,
    DotColor,
    GameConfig,
    Line,
)


def test_player_colors_exclude_neutral_and_gray():
    assert DotColor.NEUTRAL not in PLAYER_COLORS
    assert DotColor.GRAY not in PLAYER_COLORS
    assert DotColor.LIGHTBLUE in PLAYER_COLORS


def test_dot_free_and_position():
    dot = Dot(id=7, row=2, column=2)

    assert dot.is_free
    assert dot.position == (2, 2)
    dot.encircled = True
    assert not dot.is_free


def test_line_accepts_aliases():
    line = Line(startId=1, endId=2, color=DotColor.RED)

    assert (line.start_id, line.end_id) == (1, 2)
    assert line.model_dump(by_alias=True)["startId"] == 1


def test_config_defaults_and_aliases():
    config = GameConfig(boardSize=12, aiColor=DotColor.BLACK)

    assert config.board_size == 12
    assert config.players == [DotColor.RED, DotColor.BLACK]
    assert config.ai_color == DotColor.BLACK
    assert AIConfig(rngSeed=9).rng_seed == 9


def test_opponent_of(game_factory):
    state = game_factory()

    assert state.opponent_of(DotColor.RED) == DotColor.BLACK
    assert state.opponent_of(DotColor.BLACK) == DotColor.RED
