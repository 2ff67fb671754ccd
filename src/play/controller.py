"""
Game controller for Minesweeper.

Owns the board and the game state, applies manual and solver moves,
and detects wins and losses. It is the only component that mutates
the board.
"""
import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional, Tuple

from game.board import Board, BoardConfig
from game.cell import Cell
from solver.engine import InferenceEngine
from solver.types import Action, EngineStatistics, InferenceKind, InferenceResult

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

FIRST_MOVE_CORNER_CERTAINTY = 0.7


class GameState(Enum):
    """Possible states of the game."""

    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    WON = auto()
    LOST = auto()


@dataclass
class MoveResult:
    """Outcome of a single reveal or flag."""

    success: bool
    message: str


@dataclass
class TurnInfo:
    """What the solver did during one turn."""

    kind: InferenceKind
    certainty: float
    rationale: str
    affected_count: int


@dataclass
class TurnReport:
    """Outcome of one solver turn."""

    success: bool
    message: str
    info: Optional[TurnInfo] = None


# ============================================================================
# Game Controller
# ============================================================================

class GameController:
    """
    Turn-taking controller around a board and an inference engine.

    State machine:
        NOT_STARTED --start_game--> IN_PROGRESS
        IN_PROGRESS --reveal a mine--> LOST
        IN_PROGRESS --every safe cell revealed--> WON

    All move operations return a MoveResult instead of raising;
    acting on a finished game is rejected the same way.
    """

    def __init__(self) -> None:
        self._board: Optional[Board] = None
        self._engine: Optional[InferenceEngine] = None
        self._state = GameState.NOT_STARTED
        self._first_move_pending = True
        self._moves_total = 0
        self._cells_revealed = 0
        self._mines_flagged = 0

    # ========================================================================
    # Game Setup
    # ========================================================================

    def start_game(
        self, rows: int, columns: int, mines: int, seed: Optional[int] = None
    ) -> None:
        """
        Start a new game with randomly placed mines.

        Args:
            rows: Number of rows.
            columns: Number of columns.
            mines: Number of mines.
            seed: Seed for mine placement; random when omitted.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.start_from_config(BoardConfig(rows, columns, mines), seed=seed)

    def start_from_config(
        self, config: BoardConfig, seed: Optional[int] = None
    ) -> None:
        """Start a new game from a BoardConfig or preset."""
        board = Board.from_config(config)
        board.place_mines(config.mines, random.Random(seed))
        self._begin(board)

    def start_with_mines(
        self, rows: int, columns: int, mine_positions: Iterable[Tuple[int, int]]
    ) -> None:
        """Start a new game with mines at fixed coordinates."""
        board = Board(rows=rows, columns=columns)
        board.set_mines(mine_positions)
        self._begin(board)

    def _begin(self, board: Board) -> None:
        """Reset every counter and bind a fresh engine to ``board``."""
        self._board = board
        self._engine = InferenceEngine(board)
        self._state = GameState.IN_PROGRESS
        self._first_move_pending = True
        self._moves_total = 0
        self._cells_revealed = 0
        self._mines_flagged = 0
        logger.info(
            "Started %dx%d game with %d mines",
            board.rows, board.columns, board.total_mines,
        )

    # ========================================================================
    # Move Primitives (Low-level)
    # ========================================================================

    def reveal_cell(self, row: int, col: int) -> MoveResult:
        """
        Reveal one cell, propagating through zero cells.

        Revealing a mine detonates it and loses the game; the result
        is a failure but the transition is a normal one.
        """
        rejected = self._reject_move()
        if rejected is not None:
            return rejected

        cell = self._board.cell_at(row, col)
        if cell is None:
            return MoveResult(False, f"Invalid coordinates ({row},{col})")
        if not cell.is_hidden:
            return MoveResult(False, f"({row},{col}) cannot be revealed")

        if cell.is_mine:
            cell.detonate()
            self._set_state(GameState.LOST)
            return MoveResult(False, f"Detonation at ({row},{col})")

        cell.reveal()
        self._cells_revealed += 1

        if cell.adjacent_mines == 0:
            propagated = self._propagate(cell)
            message = f"({row},{col}) [0] +{propagated} propagated"
        else:
            message = f"({row},{col}) [{cell.adjacent_mines}]"

        self.check_win()
        return MoveResult(True, message)

    def _propagate(self, origin: Cell) -> int:
        """
        Flood-fill reveal from a zero cell.

        Returns:
            Number of cells revealed besides ``origin``.
        """
        revealed = 0
        pending = deque([origin])
        while pending:
            current = pending.popleft()
            for neighbor in current.neighbors:
                if neighbor.is_hidden and not neighbor.is_mine:
                    neighbor.reveal()
                    self._cells_revealed += 1
                    revealed += 1
                    if neighbor.adjacent_mines == 0:
                        pending.append(neighbor)
        return revealed

    def mark_cell(self, row: int, col: int) -> MoveResult:
        """Flag a hidden cell. Correctness is only reported, not enforced."""
        rejected = self._reject_move()
        if rejected is not None:
            return rejected

        cell = self._board.cell_at(row, col)
        if cell is None:
            return MoveResult(False, f"Invalid coordinates ({row},{col})")
        if not cell.flag():
            return MoveResult(False, f"({row},{col}) cannot be flagged")

        self._mines_flagged += 1
        verdict = "correct" if cell.is_mine else "wrong"
        return MoveResult(True, f"Flagged ({row},{col}) [{verdict}]")

    def check_win(self) -> bool:
        """Win once every non-mine cell has been revealed."""
        if self._board is None or self._state != GameState.IN_PROGRESS:
            return self._state == GameState.WON
        safe_cells = self._board.total_cells - self._board.total_mines
        if self._cells_revealed == safe_cells:
            self._set_state(GameState.WON)
        return self._state == GameState.WON

    def _reject_move(self) -> Optional[MoveResult]:
        """Failed result when no game is running, else None."""
        if self._board is None:
            return MoveResult(False, "No game in progress")
        if self._state != GameState.IN_PROGRESS:
            return MoveResult(False, "Game has ended")
        return None

    def _set_state(self, state: GameState) -> None:
        self._state = state
        if state in (GameState.WON, GameState.LOST):
            logger.info(
                "Game %s after %d moves (%d cells revealed)",
                state.name.lower(), self._moves_total, self._cells_revealed,
            )

    # ========================================================================
    # Solver Turns
    # ========================================================================

    def run_ai_turn(self) -> Optional[TurnReport]:
        """
        Let the solver play one turn.

        Returns:
            None if no game is in progress. Otherwise a TurnReport; a
            failed report without info means the solver found nothing
            and automatic play should stop.
        """
        if self._engine is None or self._state != GameState.IN_PROGRESS:
            return None

        if self._first_move_pending:
            return self._first_move()

        result = self._engine.next_inference()
        if result is None:
            return TurnReport(False, "No moves available")

        success, message = self._apply(result)
        self._moves_total += 1
        self.check_win()

        return TurnReport(
            success,
            message,
            TurnInfo(
                kind=result.kind,
                certainty=result.certainty,
                rationale=result.rationale,
                affected_count=len(result.targets),
            ),
        )

    def _first_move(self) -> TurnReport:
        """
        Open the board without spending an inference.

        Prefers a zero cell (guaranteed cascade), then a safe corner.
        """
        board = self._board
        opening = next(
            (
                cell
                for cell in board.all_cells()
                if not cell.is_mine and cell.adjacent_mines == 0 and cell.is_hidden
            ),
            None,
        )
        certainty = 1.0
        rationale = "Cell with no adjacent mines"

        if opening is None:
            corners = [
                board.cell_at(0, 0),
                board.cell_at(0, board.columns - 1),
                board.cell_at(board.rows - 1, 0),
                board.cell_at(board.rows - 1, board.columns - 1),
            ]
            opening = next(
                (c for c in corners if not c.is_mine and c.is_hidden), None
            )
            certainty = FIRST_MOVE_CORNER_CERTAINTY
            rationale = "Corner heuristic"

        if opening is None:
            return TurnReport(False, "No safe opening move")

        self._first_move_pending = False
        before = self._changed_cells()
        move = self.reveal_cell(opening.row, opening.col)
        self._moves_total += 1
        self._engine.invalidate()

        return TurnReport(
            move.success,
            f"First move: {move.message}",
            TurnInfo(
                kind=InferenceKind.HEURISTIC,
                certainty=certainty,
                rationale=rationale,
                affected_count=self._changed_cells() - before,
            ),
        )

    def _apply(self, result: InferenceResult) -> Tuple[bool, str]:
        """Apply an inference's targets in order, stopping on detonation."""
        messages = []
        for row, col in result.targets:
            if self._state != GameState.IN_PROGRESS:
                break
            if result.action == Action.REVEAL:
                move = self.reveal_cell(row, col)
                messages.append(move.message)
                if self._state == GameState.LOST:
                    return False, move.message
            elif result.action == Action.FLAG:
                messages.append(self.mark_cell(row, col).message)

        return True, " | ".join([result.rationale] + messages)

    def _changed_cells(self) -> int:
        return self._cells_revealed + self._mines_flagged

    # ========================================================================
    # Manual Moves
    # ========================================================================

    def reveal_manual(self, row: int, col: int) -> MoveResult:
        """Reveal a cell on behalf of the user."""
        rejected = self._reject_move()
        if rejected is not None:
            return rejected

        self._first_move_pending = False
        result = self.reveal_cell(row, col)
        self._engine.invalidate()
        return result

    def mark_manual(self, row: int, col: int) -> MoveResult:
        """Flag a cell on behalf of the user."""
        rejected = self._reject_move()
        if rejected is not None:
            return rejected

        self._first_move_pending = False
        result = self.mark_cell(row, col)
        self._engine.invalidate()
        return result

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def board(self) -> Optional[Board]:
        return self._board

    @property
    def engine(self) -> Optional[InferenceEngine]:
        return self._engine

    @property
    def state(self) -> GameState:
        """Get current game state."""
        return self._state

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._state == GameState.IN_PROGRESS

    @property
    def first_move_pending(self) -> bool:
        return self._first_move_pending

    @property
    def moves_total(self) -> int:
        return self._moves_total

    @property
    def cells_revealed(self) -> int:
        return self._cells_revealed

    @property
    def mines_flagged(self) -> int:
        return self._mines_flagged

    def cell_at(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid or no game started."""
        if self._board is None:
            return None
        return self._board.cell_at(row, col)

    def get_statistics(self) -> EngineStatistics:
        if self._engine is None:
            return EngineStatistics()
        return self._engine.statistics()

    def get_probability_map(self) -> dict:
        if self._engine is None:
            return {}
        return self._engine.probability_map()
