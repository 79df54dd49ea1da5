"""
Stateless 2048 Game Engine
Pure functional approach with no classes: every function takes a grid and
returns a new one, the caller owns score, level and history.
"""

import random
from typing import List, Tuple


GRID_SIZE = 4
TARGET_NUMBER = 1024
DIRECTIONS = ('up', 'down', 'left', 'right')


def get_target_for_level(level: int) -> int:
    """
    Target tile value for a level: 1024 on level 1, doubling per level after.

    Args:
        level: Current level (1 or more)

    Returns:
        Tile value that advances the player to the next level
    """
    return TARGET_NUMBER if level == 1 else TARGET_NUMBER * 2 ** (level - 1)


def init_grid(size: int = GRID_SIZE, rng=None) -> List[List[int]]:
    """
    Initialize a new grid with two random tiles (2 or 4).

    Args:
        size: Side length of the square grid
        rng: Random source with ``choice`` and ``random`` (defaults to the random module)

    Returns:
        size x size grid (list of lists) with two random tiles placed
    """
    grid = [[0] * size for _ in range(size)]
    grid = add_random_tile(grid, rng)
    grid = add_random_tile(grid, rng)
    return grid


def add_random_tile(grid: List[List[int]], rng=None) -> List[List[int]]:
    """
    Add a random tile (2 with 90% probability or 4 with 10% probability)
    to an empty position in the grid.

    Args:
        grid: Grid to add the tile to (not modified)
        rng: Random source with ``choice`` and ``random`` (defaults to the random module)

    Returns:
        New grid with one more tile, or an unchanged copy when the grid is full
    """
    rng = rng or random
    new_grid = [row[:] for row in grid]

    # Row-major order so a seeded rng always picks the same cell
    empty_positions = [
        (i, j)
        for i in range(len(new_grid))
        for j in range(len(new_grid[i]))
        if new_grid[i][j] == 0
    ]
    if empty_positions:
        i, j = rng.choice(empty_positions)
        new_grid[i][j] = 2 if rng.random() < 0.9 else 4

    return new_grid


def process_line(line: List[int], score: int = 0) -> Tuple[List[int], int, bool]:
    """
    Slide and merge a single line (row or column) toward index 0.

    Zeros are dropped first, then the compacted values are scanned once left
    to right: a value equal to its right-hand neighbour merges with it and the
    pair is consumed. Merged tiles are never re-examined, so ``[2, 2, 2, 2]``
    becomes ``[4, 4, 0, 0]`` and not ``[8, 0, 0, 0]``.

    Args:
        line: Values of the row or column, oriented toward index 0
        score: Score before this line is processed

    Returns:
        Tuple of (new line, updated score, changed flag)
    """
    changed = False

    # Remove zeros
    non_zero = [val for val in line if val != 0]

    # Merge adjacent equal values
    merged = []
    i = 0
    while i < len(non_zero):
        if i + 1 < len(non_zero) and non_zero[i] == non_zero[i + 1]:
            merged_value = non_zero[i] * 2
            merged.append(merged_value)
            score += merged_value
            changed = True
            i += 2
        else:
            merged.append(non_zero[i])
            i += 1

    # Fill with zeros to keep the line length
    merged.extend([0] * (len(line) - len(merged)))

    if merged != list(line):
        changed = True

    return merged, score, changed


def move_grid(grid: List[List[int]], direction: str, score: int = 0) -> Tuple[List[List[int]], int, bool]:
    """
    Shift all values in the given direction. No new tile is added.

    Args:
        grid: Current grid state (not modified)
        direction: One of 'up', 'down', 'left', 'right'
        score: Score before the move

    Returns:
        Tuple of (new grid, updated score, changed flag)
    """
    size = len(grid)
    new_grid = [row[:] for row in grid]
    changed = False

    if direction == 'left':
        for i in range(size):
            new_grid[i], score, line_changed = process_line(new_grid[i], score)
            changed = changed or line_changed

    elif direction == 'right':
        for i in range(size):
            merged, score, line_changed = process_line(new_grid[i][::-1], score)
            new_grid[i] = merged[::-1]
            changed = changed or line_changed

    elif direction == 'up':
        for j in range(size):
            column = [new_grid[i][j] for i in range(size)]
            merged_column, score, line_changed = process_line(column, score)
            for i in range(size):
                new_grid[i][j] = merged_column[i]
            changed = changed or line_changed

    elif direction == 'down':
        for j in range(size):
            column = [new_grid[i][j] for i in range(size)]
            merged, score, line_changed = process_line(column[::-1], score)
            merged_column = merged[::-1]
            for i in range(size):
                new_grid[i][j] = merged_column[i]
            changed = changed or line_changed

    else:
        raise ValueError(f"Invalid direction: {direction}. Must be 'left', 'right', 'up', or 'down'")

    return new_grid, score, changed


def is_game_over(grid: List[List[int]]) -> bool:
    """
    Check if the game is over: no empty cell and no equal neighbours.

    Args:
        grid: Current grid state

    Returns:
        True if no move can change the grid, False otherwise
    """
    size = len(grid)

    for i in range(size):
        for j in range(size):
            if grid[i][j] == 0:
                return False

    for i in range(size):
        for j in range(size - 1):
            if grid[i][j] == grid[i][j + 1]:
                return False

    for i in range(size - 1):
        for j in range(size):
            if grid[i][j] == grid[i + 1][j]:
                return False

    return True


def get_highest_tile(grid: List[List[int]]) -> int:
    """Highest tile value on the grid, 0 when the grid is empty."""
    return max((val for row in grid for val in row), default=0)


def has_reached_target(grid: List[List[int]], target: int = TARGET_NUMBER) -> bool:
    """True if any tile is at least ``target``."""
    return any(val >= target for row in grid for val in row)


def display(grid: List[List[int]]) -> str:
    """
    Display the grid as a markdown table.

    Args:
        grid: Grid state to display
    """
    res = ''
    for row in grid:
        res += "| " + " | ".join(f"{val if val else '':^4}" for val in row) + " |\n"
    return res
