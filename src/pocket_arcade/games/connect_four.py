"""Connect Four against a scripted opponent.

The human plays red and always moves first; every human drop is answered
immediately by the AI (yellow) in the same transition.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple
import logging

from pocket_arcade.core.events import Event, EventType, notification_event
from pocket_arcade.core.input import ACTION_KEYS, ARROWS_ONLY, Action
from pocket_arcade.core.rng import RandomSource, pick
from pocket_arcade.core.state import GameStatus
from pocket_arcade.games.base import BaseGame
from pocket_arcade.graphics.primitives import Buffer, draw_circle, draw_rect, fill

logger = logging.getLogger(__name__)

ROWS = 6
COLS = 7
EMPTY = ""
PLAYER = "red"
AI = "yellow"

WINS_KEY = "connect-four-wins"

# horizontal, vertical, diagonal, anti-diagonal
DIRECTIONS = [(0, 1), (1, 0), (1, 1), (1, -1)]

Board = Tuple[Tuple[str, ...], ...]
Cells = List[List[int]]


@dataclass(frozen=True)
class ConnectFourState:
    board: Board = tuple(tuple(EMPTY for _ in range(COLS)) for _ in range(ROWS))
    moves: int = 0
    winner: Optional[str] = None
    winning_cells: Tuple[Tuple[int, int], ...] = ()
    cursor: int = COLS // 2
    last_ai_column: Optional[int] = None


def empty_board() -> Board:
    return tuple(tuple(EMPTY for _ in range(COLS)) for _ in range(ROWS))


def lowest_empty_row(board: Board, col: int) -> int:
    """Row a piece dropped in ``col`` lands on, -1 when the column is full."""
    for row in range(len(board) - 1, -1, -1):
        if board[row][col] == EMPTY:
            return row
    return -1


def place(board: Board, row: int, col: int, color: str) -> Board:
    return tuple(
        tuple(color if (r, c) == (row, col) else cell for c, cell in enumerate(cells))
        for r, cells in enumerate(board)
    )


def is_full(board: Board) -> bool:
    return all(cell != EMPTY for row in board for cell in row)


def check_win(board: Board, row: int, col: int, color: str) -> Cells:
    """Four aligned ``color`` cells through (row, col), or [] when none.

    Cells are ordered from the negative end of the line.
    """
    rows, cols = len(board), len(board[0])
    for dr, dc in DIRECTIONS:
        cells = [[row, col]]

        for i in range(1, 4):
            r, c = row + dr * i, col + dc * i
            if 0 <= r < rows and 0 <= c < cols and board[r][c] == color:
                cells.append([r, c])
            else:
                break

        for i in range(1, 4):
            r, c = row - dr * i, col - dc * i
            if 0 <= r < rows and 0 <= c < cols and board[r][c] == color:
                cells.insert(0, [r, c])
            else:
                break

        if len(cells) >= 4:
            return cells[:4]
    return []


def _winning_column(board: Board, color: str) -> Optional[int]:
    for col in range(len(board[0])):
        row = lowest_empty_row(board, col)
        if row == -1:
            continue
        if check_win(place(board, row, col, color), row, col, color):
            return col
    return None


def column_weight(col: int) -> int:
    if col == 3:
        return 3
    if col in (2, 4):
        return 2
    return 1


def get_ai_move(board: Board, rng: RandomSource) -> int:
    """Winning column, else blocking column, else centre-weighted random."""
    col = _winning_column(board, AI)
    if col is not None:
        return col

    col = _winning_column(board, PLAYER)
    if col is not None:
        return col

    weighted = [
        col
        for col in range(len(board[0]))
        if lowest_empty_row(board, col) != -1
        for _ in range(column_weight(col))
    ]
    if not weighted:
        return 0
    return pick(rng, weighted)


class ConnectFourGame(BaseGame):
    key = "connect-four"
    display_name = "Connect Four"
    description = "Line up four before the AI does"
    icon = "4"

    best_score_key = WINS_KEY

    CELL = 60
    CANVAS = (COLS * CELL, ROWS * CELL)
    KEY_BINDINGS = {**ARROWS_ONLY, **ACTION_KEYS}

    COLORS = {
        EMPTY: (30, 41, 59),
        PLAYER: (239, 68, 68),
        AI: (250, 204, 21),
    }

    def initial_state(self) -> ConnectFourState:
        return ConnectFourState()

    def on_start(self) -> None:
        self.state = ConnectFourState(board=empty_board())

    def on_tap(self, index: int) -> bool:
        return self.drop(index)

    def on_key(self, key: str) -> bool:
        if len(key) == 1 and key.isdigit() and 1 <= int(key) <= COLS:
            return self.drop(int(key) - 1)
        return False

    def on_action(self, action: Action) -> bool:
        if action == Action.LEFT:
            self.state = replace(self.state, cursor=max(0, self.state.cursor - 1))
            return True
        if action == Action.RIGHT:
            self.state = replace(self.state, cursor=min(COLS - 1, self.state.cursor + 1))
            return True
        if action in (Action.FIRE, Action.START):
            return self.drop(self.state.cursor)
        return False

    def drop(self, col: int) -> bool:
        """Human drop followed by the AI reply. Illegal drops are ignored."""
        if self.status != GameStatus.PLAYING or not 0 <= col < COLS:
            return False

        state = self.state
        row = lowest_empty_row(state.board, col)
        if row == -1:
            return False

        board = place(state.board, row, col, PLAYER)
        moves = state.moves + 1
        cells = check_win(board, row, col, PLAYER)
        if cells:
            self.state = replace(
                state, board=board, moves=moves, winner=PLAYER,
                winning_cells=tuple(tuple(c) for c in cells), cursor=col,
            )
            self._notify("You Win!", f"Congratulations! You won in {moves} moves!")
            self.finish(GameStatus.VICTORY)
            return True

        if is_full(board):
            self.state = replace(state, board=board, moves=moves, cursor=col)
            self._notify("It's a Tie!", "The board is full - game over!")
            self.finish(GameStatus.GAME_OVER)
            return True

        ai_col = get_ai_move(board, self.rng)
        ai_row = lowest_empty_row(board, ai_col)
        if ai_row == -1:
            self.state = replace(state, board=board, moves=moves, cursor=col)
            return True

        board = place(board, ai_row, ai_col, AI)
        moves += 1
        cells = check_win(board, ai_row, ai_col, AI)
        self.state = replace(
            state, board=board, moves=moves, cursor=col, last_ai_column=ai_col,
            winner=AI if cells else None,
            winning_cells=tuple(tuple(c) for c in cells),
        )

        if cells:
            self._notify("AI Wins!", "Better luck next time!")
            self.finish(GameStatus.GAME_OVER)
        elif is_full(board):
            self._notify("It's a Tie!", "The board is full - game over!")
            self.finish(GameStatus.GAME_OVER)
        return True

    def points_earned(self, status: GameStatus) -> int:
        if status != GameStatus.VICTORY:
            return 0
        return max(5, 20 - self.moves)

    def award_reason(self, status: GameStatus) -> str:
        outcome = "won" if status == GameStatus.VICTORY else "lost"
        return f"Connect Four - {outcome} game"

    def best_candidate(self, status: GameStatus) -> Optional[int]:
        return None

    def record_best(self, status: GameStatus) -> bool:
        """Wins are a running counter rather than a best."""
        if status != GameStatus.VICTORY:
            return False
        store = self.context.best_scores
        wins = store.read(WINS_KEY) + 1
        store.write(WINS_KEY, wins)
        self.context.event_bus.emit(Event(
            EventType.BEST_SCORE_UPDATED,
            data={"game": self.key, "key": WINS_KEY, "value": wins},
            source=self.key,
        ))
        return True

    def result_data(self) -> dict:
        return {
            "winner": self.state.winner,
            "winning_cells": [list(c) for c in self.state.winning_cells],
        }

    def status_text(self) -> str:
        wins = self.context.best_scores.read(WINS_KEY)
        if self.status == GameStatus.PLAYING:
            return f"{self.display_name}  Your turn  Moves {self.moves}  Wins {wins}"
        if self.status == GameStatus.GAME_OVER:
            outcome = "AI wins!" if self.state.winner == AI else "It's a tie!"
            return f"{self.display_name}  {outcome}  Wins {wins}"
        if self.status == GameStatus.VICTORY:
            return f"{self.display_name}  You win in {self.moves} moves!  Wins {wins}"
        return super().status_text()

    def cell_at(self, x: float, y: float) -> Optional[int]:
        width, height = self.CANVAS
        if not (0 <= x < width and 0 <= y < height):
            return None
        return int(x // self.CELL)

    def _notify(self, title: str, description: str) -> None:
        self.context.event_bus.emit(notification_event(title, description, source=self.key))

    def render(self, buffer: Buffer) -> None:
        fill(buffer, (29, 78, 216))
        winning = set(self.state.winning_cells)
        radius = self.CELL // 2 - 6
        for r, row in enumerate(self.state.board):
            for c, cell in enumerate(row):
                cx = c * self.CELL + self.CELL // 2
                cy = r * self.CELL + self.CELL // 2
                draw_circle(buffer, cx, cy, radius, self.COLORS[cell])
                if (r, c) in winning:
                    draw_circle(buffer, cx, cy, radius, (255, 255, 255), filled=False)

        if self.status == GameStatus.PLAYING:
            draw_rect(buffer, self.state.cursor * self.CELL + 4, 0, self.CELL - 8, 4, (255, 255, 255))
