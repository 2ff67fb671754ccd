"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Callable, Iterable, Tuple

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from game import Board, BoardConfig, Cell
from play import GameController


Position = Tuple[int, int]

# 8x8 layout: a wall of mines in column 4, one mine at (5, 1), one at (0, 7).
# Revealing (0, 0) opens rows 0-4 of columns 0-3 and nothing else.
WALL_MINES = [(row, 4) for row in range(8)] + [(5, 1), (0, 7)]
WALL_OPENING = {(row, col) for row in range(5) for col in range(4)}


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def board_factory() -> Callable[..., Board]:
    """
    Build a board with explicit mines and pre-set cell states.

    Cell states are set directly, bypassing the controller, so rule and
    probability scenarios can be described exactly.
    """
    def build(
        rows: int,
        columns: int,
        mines: Iterable[Position] = (),
        revealed: Iterable[Position] = (),
        flagged: Iterable[Position] = (),
    ) -> Board:
        board = Board(rows=rows, columns=columns)
        board.set_mines(mines)
        for row, col in revealed:
            board.cell_at(row, col).reveal()
        for row, col in flagged:
            board.cell_at(row, col).flag()
        return board

    return build


@pytest.fixture
def easy_board() -> Board:
    """Create an empty 8x8 board without mines placed."""
    return Board.from_config(BoardConfig(8, 8, 10))


@pytest.fixture
def wall_board(board_factory) -> Board:
    """8x8 board with the fixed wall layout, nothing revealed."""
    return board_factory(8, 8, WALL_MINES)


# ============================================================================
# Controller Fixtures
# ============================================================================

@pytest.fixture
def controller() -> GameController:
    """Controller with no game started."""
    return GameController()


@pytest.fixture
def wall_game() -> GameController:
    """Controller running the fixed wall layout."""
    game = GameController()
    game.start_with_mines(8, 8, WALL_MINES)
    return game


@pytest.fixture
def tiny_game() -> GameController:
    """2x2 game with a single mine in the top-left corner."""
    game = GameController()
    game.start_with_mines(2, 2, [(0, 0)])
    return game


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(is_mine=True)
