"""
Pydantic Models for the Dots game state
Board arena, drawn lines, game and AI configuration
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List, Dict, Set
from enum import Enum
import os


DEFAULT_BOARD_SIZE = int(os.getenv('DOTS_BOARD_SIZE', '40'))


class DotColor(str, Enum):
    """Dot color enumeration"""
    NEUTRAL = "white"
    BLACK = "black"
    GREEN = "green"
    RED = "red"
    LIGHTBLUE = "lightblue"
    GRAY = "gray"  # dead marker for neutral dots captured inside a loop

    @property
    def is_player_color(self) -> bool:
        return self not in (DotColor.NEUTRAL, DotColor.GRAY)


PLAYER_COLORS = [c for c in DotColor if c.is_player_color]


class GameStatus(str, Enum):
    """Game status enumeration"""
    ACTIVE = "active"
    FINISHED = "finished"


class AIType(str, Enum):
    """AI type enumeration"""
    RANDOM = "random"
    HEURISTIC = "heuristic"


class ThreatLevel(str, Enum):
    """Per-dot classification produced by the threat analyzer"""
    SAFE = "safe"
    ENDANGERED = "endangered"
    ENCIRCLED = "encircled"


class ConnectOutcome(str, Enum):
    """Result of extending an in-progress encirclement"""
    CONTINUE = "continue"
    CLOSED = "closed"


class Dot(BaseModel):
    """Single board dot.

    ``neighbours`` and ``partners`` hold arena ids (see
    ``BoardManager.calculate_id``), never other ``Dot`` objects.
    """
    id: int
    row: int
    column: int
    color: DotColor = DotColor.NEUTRAL
    encircled: bool = False
    connected: bool = False
    neighbours: List[int] = Field(default_factory=list)
    partners: Set[int] = Field(default_factory=set)

    @property
    def position(self) -> tuple[int, int]:
        return (self.row, self.column)

    @property
    def is_free(self) -> bool:
        """True if the dot can still be captured."""
        return self.color == DotColor.NEUTRAL and not self.encircled

    def __repr__(self) -> str:
        return f"Dot(id={self.id}, row={self.row}, col={self.column}, {self.color.value})"


class Line(BaseModel):
    """Drawn connection between two dots of one player"""
    start_id: int = Field(alias="startId")
    end_id: int = Field(alias="endId")
    color: DotColor

    class Config:
        populate_by_name = True
        frozen = True


class BoardState(BaseModel):
    """Dot arena plus every line drawn so far"""
    size: int
    dots: List[Dot] = Field(default_factory=list)
    lines: List[Line] = Field(default_factory=list)

    class Config:
        populate_by_name = True


class GameState(BaseModel):
    """Complete game state.

    ``owned`` is the raw ownership list per color, in capture order; groups
    are always rebuilt from it. ``encirclements`` archives closed paths and
    is append-only.
    """
    id: str
    board: BoardState
    players: List[DotColor]
    current_player: DotColor = Field(alias="currentPlayer")
    turn: int = 1
    points: Dict[DotColor, int] = Field(default_factory=dict)
    owned: Dict[DotColor, List[int]] = Field(default_factory=dict)
    encirclements: Dict[DotColor, List[List[int]]] = Field(default_factory=dict)
    current_encirclement: List[int] = Field(
        default_factory=list, alias="currentEncirclement"
    )
    encircling: bool = False
    path_connected_before: Dict[int, bool] = Field(
        default_factory=dict, alias="pathConnectedBefore"
    )
    game_status: GameStatus = Field(GameStatus.ACTIVE, alias="gameStatus")
    winner: Optional[DotColor] = None
    ai_color: Optional[DotColor] = Field(None, alias="aiColor")

    class Config:
        populate_by_name = True

    def opponent_of(self, color: DotColor) -> DotColor:
        for player in self.players:
            if player != color:
                return player
        raise ValueError(f"No opponent for {color.value}")


class AIConfig(BaseModel):
    """AI configuration"""
    difficulty: int = Field(5, ge=1, le=10)
    think_time: Optional[int] = Field(None, alias="thinkTime")
    randomness: Optional[float] = Field(None, ge=0, le=1)
    rng_seed: Optional[int] = Field(None, alias="rngSeed")

    class Config:
        populate_by_name = True


class GameConfig(BaseModel):
    """Settings for a new game"""
    board_size: int = Field(DEFAULT_BOARD_SIZE, ge=3, alias="boardSize")
    players: List[DotColor] = Field(
        default_factory=lambda: [DotColor.RED, DotColor.BLACK]
    )
    ai_color: Optional[DotColor] = Field(None, alias="aiColor")
    first_player: Optional[DotColor] = Field(None, alias="firstPlayer")

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def _check_players(self) -> "GameConfig":
        if len(self.players) != 2 or self.players[0] == self.players[1]:
            raise ValueError("exactly two distinct player colors are required")
        for color in self.players:
            if not color.is_player_color:
                raise ValueError(f"{color.value} is not a player color")
        if self.ai_color is not None and self.ai_color not in self.players:
            raise ValueError("ai_color must be one of the players")
        if self.first_player is not None and self.first_player not in self.players:
            raise ValueError("first_player must be one of the players")
        return self
