"""2048 - slide and merge tiles on a 4x4 board."""

from dataclasses import dataclass, replace
from typing import List, NamedTuple, Optional, Sequence, Tuple

from pocket_arcade.core.events import notification_event
from pocket_arcade.core.input import DIRECTION_KEYS, ACTION_KEYS, Action
from pocket_arcade.core.rng import RandomSource, chance, pick
from pocket_arcade.core.state import GameStatus
from pocket_arcade.games.base import BaseGame, Label
from pocket_arcade.graphics.primitives import Buffer, draw_rect, fill

GRID = 4
WIN_TILE = 2048

Row = Tuple[int, ...]
Board = Tuple[Row, ...]


class MoveResult(NamedTuple):
    board: Board
    score_gain: int
    moved: bool


@dataclass(frozen=True)
class Game2048State:
    board: Board
    score: int = 0
    moves: int = 0
    won: bool = False


def empty_board(size: int = GRID) -> Board:
    return tuple(tuple(0 for _ in range(size)) for _ in range(size))


def to_board(rows: Sequence[Sequence[int]]) -> Board:
    return tuple(tuple(int(v) for v in row) for row in rows)


def slide_row(row: Sequence[int]) -> Tuple[Row, int]:
    """Slide one row towards index 0, merging each equal pair once.

    Returns:
        (new row, sum of merged tile values)
    """
    values = [v for v in row if v != 0]
    merged: List[int] = []
    gain = 0
    i = 0
    while i < len(values):
        if i + 1 < len(values) and values[i] == values[i + 1]:
            merged.append(values[i] * 2)
            gain += values[i] * 2
            i += 2
        else:
            merged.append(values[i])
            i += 1
    merged.extend([0] * (len(row) - len(merged)))
    return tuple(merged), gain


def _lines(board: Board, direction: Action) -> List[Row]:
    # Each line is ordered so that tiles slide towards index 0
    if direction == Action.LEFT:
        return [row for row in board]
    if direction == Action.RIGHT:
        return [tuple(reversed(row)) for row in board]
    columns = [tuple(col) for col in zip(*board)]
    if direction == Action.UP:
        return columns
    if direction == Action.DOWN:
        return [tuple(reversed(col)) for col in columns]
    raise ValueError(f"Not a direction: {direction}")


def _from_lines(lines: List[Row], direction: Action) -> Board:
    if direction == Action.LEFT:
        return tuple(lines)
    if direction == Action.RIGHT:
        return tuple(tuple(reversed(line)) for line in lines)
    if direction == Action.UP:
        return tuple(tuple(row) for row in zip(*lines))
    return tuple(tuple(row) for row in zip(*[tuple(reversed(line)) for line in lines]))


def move_board(board: Board, direction: Action) -> MoveResult:
    """Apply one move. A move that changes nothing returns the same board."""
    slid = []
    gain = 0
    for line in _lines(board, direction):
        new_line, line_gain = slide_row(line)
        slid.append(new_line)
        gain += line_gain

    new_board = _from_lines(slid, direction)
    if new_board == board:
        return MoveResult(board, 0, False)
    return MoveResult(new_board, gain, True)


def empty_cells(board: Board) -> List[Tuple[int, int]]:
    return [
        (r, c)
        for r, row in enumerate(board)
        for c, value in enumerate(row)
        if value == 0
    ]


def spawn_tile(board: Board, rng: RandomSource) -> Tuple[Board, Optional[Tuple[int, int]]]:
    """Place a 2 (90%) or 4 (10%) on a uniformly chosen empty cell.

    Returns:
        (new board, spawned cell) or (board, None) when full
    """
    cells = empty_cells(board)
    if not cells:
        return board, None
    r, c = pick(rng, cells)
    value = 2 if chance(rng, 0.9) else 4
    rows = [list(row) for row in board]
    rows[r][c] = value
    return to_board(rows), (r, c)


def has_moves(board: Board) -> bool:
    """True while a cell is empty or two neighbours are equal."""
    size = len(board)
    for r in range(size):
        for c in range(size):
            value = board[r][c]
            if value == 0:
                return True
            if c + 1 < size and board[r][c + 1] == value:
                return True
            if r + 1 < size and board[r + 1][c] == value:
                return True
    return False


def max_tile(board: Board) -> int:
    return max(max(row) for row in board)


class Game2048(BaseGame):
    key = "2048"
    display_name = "2048"
    description = "Slide tiles and reach 2048"
    icon = "2048"

    best_score_key = "2048-best-score"

    CELL = 80
    GAP = 8
    CANVAS = (GRID * CELL + (GRID + 1) * GAP, GRID * CELL + (GRID + 1) * GAP)
    KEY_BINDINGS = {**DIRECTION_KEYS, **ACTION_KEYS}

    COLORS = {
        0: (205, 193, 180),
        2: (238, 228, 218),
        4: (237, 224, 200),
        8: (242, 177, 121),
        16: (245, 149, 99),
        32: (246, 124, 95),
        64: (246, 94, 59),
        128: (237, 207, 114),
        256: (237, 204, 97),
        512: (237, 200, 80),
        1024: (237, 197, 63),
        2048: (237, 194, 46),
    }

    @property
    def win_tile(self) -> int:
        return self.context.games.win_tile

    def initial_state(self) -> Game2048State:
        return Game2048State(board=empty_board())

    def on_start(self) -> None:
        board, _ = spawn_tile(empty_board(), self.rng)
        board, _ = spawn_tile(board, self.rng)
        self.state = Game2048State(board=board)

    def on_action(self, action: Action) -> bool:
        if action not in (Action.LEFT, Action.RIGHT, Action.UP, Action.DOWN):
            return False
        return self.move(action)

    def move(self, direction: Action) -> bool:
        """Play one move. Returns False for a no-op move."""
        if self.status != GameStatus.PLAYING:
            return False

        result = move_board(self.state.board, direction)
        if not result.moved:
            return False

        board, _ = spawn_tile(result.board, self.rng)
        state = replace(
            self.state,
            board=board,
            score=self.state.score + result.score_gain,
            moves=self.state.moves + 1,
        )

        reached = not state.won and max_tile(board) >= self.win_tile
        if reached:
            state = replace(state, won=True)
        self.state = state

        if reached:
            points = state.score // 50
            self.award(points, self.award_reason(GameStatus.VICTORY))
            self.context.event_bus.emit(notification_event(
                "You Won!",
                f"You reached {self.win_tile}! Earned {points} points! Keep playing for more.",
                source=self.key,
            ))

        if not has_moves(board):
            self.finish(GameStatus.GAME_OVER)
        return True

    def points_earned(self, status: GameStatus) -> int:
        return self.score // 100

    def award_reason(self, status: GameStatus) -> str:
        return f"2048 game - scored {self.score} points"

    def result_data(self) -> dict:
        return {"max_tile": max_tile(self.state.board), "won": self.state.won}

    def status_text(self) -> str:
        text = super().status_text()
        if self.state.won and self.status == GameStatus.PLAYING:
            text += "  (2048!)"
        return text

    def labels(self) -> List[Label]:
        half = self.CELL / 2
        return [
            (self.GAP + c * (self.CELL + self.GAP) + half,
             self.GAP + r * (self.CELL + self.GAP) + half,
             str(value))
            for r, row in enumerate(self.state.board)
            for c, value in enumerate(row)
            if value
        ]

    def render(self, buffer: Buffer) -> None:
        fill(buffer, (187, 173, 160))
        for r, row in enumerate(self.state.board):
            for c, value in enumerate(row):
                x = self.GAP + c * (self.CELL + self.GAP)
                y = self.GAP + r * (self.CELL + self.GAP)
                color = self.COLORS.get(value, (60, 58, 50))
                draw_rect(buffer, x, y, self.CELL, self.CELL, color)
