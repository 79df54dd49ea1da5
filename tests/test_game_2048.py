"""
Tests for the stateless grid engine
"""

import random

import pytest

from game_2048 import (
    DIRECTIONS,
    add_random_tile,
    display,
    get_highest_tile,
    get_target_for_level,
    has_reached_target,
    init_grid,
    is_game_over,
    move_grid,
    process_line,
)


@pytest.mark.parametrize("line, expected_line, expected_score", [
    ([2, 2, 4, 0], [4, 4, 0, 0], 4),
    ([4, 2, 2, 0], [4, 4, 0, 0], 4),
    ([2, 2, 2, 2], [4, 4, 0, 0], 8),
    ([2, 2, 2, 0], [4, 2, 0, 0], 4),
    ([0, 0, 0, 2], [2, 0, 0, 0], 0),
    ([2, 0, 2, 0], [4, 0, 0, 0], 4),
    ([4, 4, 8, 8], [8, 16, 0, 0], 24),
    ([8, 4, 2, 2], [8, 4, 4, 0], 4),
    ([0, 0, 0, 0], [0, 0, 0, 0], 0),
])
def test_process_line(line, expected_line, expected_score):
    new_line, score, _ = process_line(line, 0)
    assert new_line == expected_line
    assert score == expected_score


def test_process_line_four_equal_tiles_merge_as_two_pairs():
    new_line, score, changed = process_line([2, 2, 2, 2], 0)
    assert new_line == [4, 4, 0, 0]
    assert score == 8
    assert changed is True


def test_process_line_merged_tile_does_not_merge_again():
    # 4 formed from the pair of 2s must not absorb the following 4
    new_line, score, _ = process_line([2, 2, 4, 0], 10)
    assert new_line == [4, 4, 0, 0]
    assert score == 14


def test_process_line_slide_without_merge_is_a_change():
    new_line, score, changed = process_line([0, 2, 0, 4], 7)
    assert new_line == [2, 4, 0, 0]
    assert score == 7
    assert changed is True


def test_process_line_compacted_line_is_unchanged():
    line = [2, 4, 8, 0]
    new_line, score, changed = process_line(line, 5)
    assert new_line == line
    assert score == 5
    assert changed is False


def test_process_line_does_not_modify_input():
    line = [2, 2, 0, 4]
    process_line(line, 0)
    assert line == [2, 2, 0, 4]


def test_process_line_second_pass_changes_only_by_merging():
    rng = random.Random(7)
    for _ in range(500):
        line = [rng.choice([0, 0, 2, 4, 8]) for _ in range(4)]
        once, score, _ = process_line(line, 0)
        twice, score_twice, changed = process_line(once, score)
        # A second pass can still merge tiles the first pass produced
        if changed:
            assert score_twice > score
        else:
            assert twice == once


def test_process_line_keeps_line_length():
    new_line, _, _ = process_line([2, 2, 0, 0, 0, 2], 0)
    assert new_line == [4, 2, 0, 0, 0, 0]


GRID = [
    [2, 2, 0, 4],
    [0, 4, 4, 0],
    [2, 0, 0, 2],
    [8, 0, 8, 8],
]


def test_move_left():
    new_grid, score, changed = move_grid(GRID, 'left', 0)
    assert new_grid == [
        [4, 4, 0, 0],
        [8, 0, 0, 0],
        [4, 0, 0, 0],
        [16, 8, 0, 0],
    ]
    assert score == 4 + 8 + 4 + 16
    assert changed is True


def test_move_right():
    new_grid, score, changed = move_grid(GRID, 'right', 0)
    assert new_grid == [
        [0, 0, 4, 4],
        [0, 0, 0, 8],
        [0, 0, 0, 4],
        [0, 0, 8, 16],
    ]
    assert score == 4 + 8 + 4 + 16
    assert changed is True


def test_move_up():
    new_grid, score, changed = move_grid(GRID, 'up', 0)
    assert new_grid == [
        [4, 2, 4, 4],
        [8, 4, 8, 2],
        [0, 0, 0, 8],
        [0, 0, 0, 0],
    ]
    assert score == 4
    assert changed is True


def test_move_down():
    new_grid, score, changed = move_grid(GRID, 'down', 0)
    assert new_grid == [
        [0, 0, 0, 0],
        [0, 0, 0, 4],
        [4, 2, 4, 2],
        [8, 4, 8, 8],
    ]
    assert score == 4
    assert changed is True


def test_move_down_merges_bottom_pair_first():
    grid = [
        [2, 0],
        [2, 0],
    ]
    column_of_three = [
        [2, 0, 0],
        [2, 0, 0],
        [2, 0, 0],
    ]
    assert move_grid(grid, 'down', 0)[0] == [[0, 0], [4, 0]]
    assert move_grid(column_of_three, 'down', 0)[0] == [[0, 0, 0], [2, 0, 0], [4, 0, 0]]
    assert move_grid(column_of_three, 'up', 0)[0] == [[4, 0, 0], [2, 0, 0], [0, 0, 0]]


def test_move_accumulates_score():
    _, score, _ = move_grid(GRID, 'left', 100)
    assert score == 132


@pytest.mark.parametrize("direction", DIRECTIONS)
def test_move_does_not_mutate_input(direction):
    grid = [row[:] for row in GRID]
    new_grid, _, _ = move_grid(grid, direction, 0)
    assert grid == GRID
    assert new_grid is not grid
    assert all(new_row is not row for new_row, row in zip(new_grid, grid))


def test_move_blocked_direction_reports_no_change():
    grid = [
        [2, 4, 0, 0],
        [4, 2, 0, 0],
        [8, 0, 0, 0],
        [0, 0, 0, 0],
    ]
    new_grid, score, changed = move_grid(grid, 'left', 12)
    assert changed is False
    assert new_grid == grid
    assert score == 12

    new_grid, score, changed = move_grid(grid, 'up', 12)
    assert changed is False
    assert new_grid == grid


def test_move_does_not_spawn_tiles():
    grid = [
        [0, 0, 0, 2],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
        [0, 0, 0, 0],
    ]
    new_grid, _, changed = move_grid(grid, 'left', 0)
    assert changed is True
    assert sum(1 for row in new_grid for val in row if val) == 1


def test_move_invalid_direction():
    with pytest.raises(ValueError):
        move_grid(GRID, 'diagonal', 0)


def test_is_game_over_full_grid_without_pairs():
    assert is_game_over([[2, 4], [4, 2]]) is True


def test_is_game_over_horizontal_pair():
    assert is_game_over([[2, 2], [4, 8]]) is False


def test_is_game_over_vertical_pair():
    assert is_game_over([[2, 4], [2, 8]]) is False


def test_is_game_over_empty_cell():
    assert is_game_over([[2, 4], [4, 0]]) is False


def test_is_game_over_4x4():
    grid = [
        [2, 4, 2, 4],
        [4, 2, 4, 2],
        [2, 4, 2, 4],
        [4, 2, 4, 2],
    ]
    assert is_game_over(grid) is True
    grid[3][3] = 4
    assert is_game_over(grid) is False


def test_get_highest_tile():
    assert get_highest_tile(GRID) == 8
    assert get_highest_tile([[0, 0], [0, 0]]) == 0


def test_has_reached_target():
    assert has_reached_target([[1024, 0], [0, 0]]) is True
    assert has_reached_target([[2048, 0], [0, 0]], 2048) is True
    assert has_reached_target([[512, 512], [256, 0]]) is False
    assert has_reached_target([[1024, 0], [0, 0]], 2048) is False


def test_get_target_for_level():
    assert get_target_for_level(1) == 1024
    assert get_target_for_level(2) == 2048
    assert get_target_for_level(3) == 4096
    assert get_target_for_level(5) == 16384


def test_add_random_tile_full_grid(rng):
    grid = [[2, 4], [8, 16]]
    assert add_random_tile(grid, rng) == grid


def test_add_random_tile_returns_new_grid(fixed_rng):
    grid = [[2, 0], [0, 0]]
    new_grid = add_random_tile(grid, fixed_rng)
    assert new_grid == [[2, 2], [0, 0]]
    assert grid == [[2, 0], [0, 0]]


def test_add_random_tile_spawns_four(fixed_rng):
    fixed_rng.value = 0.95
    assert add_random_tile([[0, 0], [0, 0]], fixed_rng) == [[4, 0], [0, 0]]


def test_add_random_tile_seeded_is_deterministic():
    grid = [[0] * 4 for _ in range(4)]
    first = add_random_tile(grid, random.Random(99))
    second = add_random_tile(grid, random.Random(99))
    assert first == second


def test_add_random_tile_picks_cells_uniformly():
    rng = random.Random(2024)
    counts = {(i, j): 0 for i in range(2) for j in range(2)}
    trials = 8000
    for _ in range(trials):
        grid = add_random_tile([[0, 0], [0, 0]], rng)
        filled = [(i, j) for i in range(2) for j in range(2) if grid[i][j]]
        assert len(filled) == 1
        counts[filled[0]] += 1

    for cell, count in counts.items():
        assert 0.22 < count / trials < 0.28, cell


class RecordingRng:
    """Remembers the candidates offered to ``choice``."""

    def __init__(self):
        self.candidates = None

    def choice(self, seq):
        self.candidates = list(seq)
        return seq[-1]

    def random(self):
        return 0.0


def test_add_random_tile_offers_empty_cells_in_row_major_order():
    rng = RecordingRng()
    grid = [
        [2, 0, 4],
        [0, 8, 0],
        [0, 0, 16],
    ]
    new_grid = add_random_tile(grid, rng)
    assert rng.candidates == [(0, 1), (1, 0), (1, 2), (2, 0), (2, 1)]
    assert new_grid[2][1] == 2


def test_init_grid_has_two_tiles(rng):
    for _ in range(200):
        grid = init_grid(4, rng)
        assert len(grid) == 4
        assert all(len(row) == 4 for row in grid)
        tiles = [val for row in grid for val in row if val]
        assert len(tiles) == 2
        assert all(val in (2, 4) for val in tiles)


def test_init_grid_custom_size(rng):
    grid = init_grid(6, rng)
    assert len(grid) == 6
    assert sum(1 for row in grid for val in row if val) == 2


def test_init_grid_size_one_holds_single_tile(rng):
    grid = init_grid(1, rng)
    assert len(grid) == 1
    assert grid[0][0] in (2, 4)


def test_spawn_value_distribution(rng):
    values = []
    for _ in range(2000):
        values.extend(val for row in init_grid(4, rng) for val in row if val)
    share_of_twos = values.count(2) / len(values)
    assert 0.86 < share_of_twos < 0.94


def test_display():
    text = display([[2, 0], [0, 1024]])
    lines = text.strip().split('\n')
    assert len(lines) == 2
    assert '2' in lines[0]
    assert '1024' in lines[1]
