"""
Game session bookkeeping around the stateless engine.

A session is a plain JSON-serializable dict holding everything the engine
does not: score, level, high score, best tile and the undo history. Every
function returns a new session and leaves its input untouched.
"""

from game_2048 import (
    GRID_SIZE,
    add_random_tile,
    get_highest_tile,
    get_target_for_level,
    has_reached_target,
    init_grid,
    is_game_over,
    move_grid,
)


def _copy_grid(grid):
    return [row[:] for row in grid]


def _copy_session(session):
    new_session = dict(session)
    new_session['grid'] = _copy_grid(session['grid'])
    new_session['history'] = [
        {'grid': _copy_grid(snapshot['grid']), 'score': snapshot['score']}
        for snapshot in session['history']
    ]
    return new_session


def new_game(level=1, high_score=0, best_tile=2, size=GRID_SIZE, rng=None):
    """
    Start a new session with a fresh grid.

    Args:
        level: Level to play at (carried across games)
        high_score: Best score seen so far
        best_tile: Best tile seen so far
        size: Grid side length
        rng: Random source passed to the engine

    Returns:
        Session dict
    """
    grid = init_grid(size, rng)
    return {
        'grid': grid,
        'score': 0,
        'level': level,
        'high_score': high_score,
        'best_tile': best_tile,
        # A 1x1 grid is full with no neighbours from the start
        'game_over': is_game_over(grid),
        'history': [],
    }


def reset_game(session, rng=None):
    """New grid and zero score; level, high score and best tile are kept."""
    return new_game(
        level=session['level'],
        high_score=session['high_score'],
        best_tile=session['best_tile'],
        size=len(session['grid']),
        rng=rng,
    )


def apply_move(session, direction, rng=None, max_history=None):
    """
    Apply one move and everything that follows from it.

    An unchanged grid means the move is rejected: no tile is spawned and
    nothing is pushed onto the history.

    Args:
        session: Current session
        direction: One of 'up', 'down', 'left', 'right'
        rng: Random source for the spawned tile
        max_history: Keep at most this many undo snapshots (None for unbounded)

    Returns:
        Tuple of (new session, events dict)
    """
    events = {
        'changed': False,
        'new_high_score': False,
        'new_best_tile': False,
        'level_up': False,
        'reached_target': None,
        'game_over': session['game_over'],
    }

    new_grid, new_score, changed = move_grid(session['grid'], direction, session['score'])
    if not changed:
        return session, events

    new_session = _copy_session(session)
    new_session['history'].append({'grid': _copy_grid(session['grid']), 'score': session['score']})
    if max_history is not None and len(new_session['history']) > max_history:
        new_session['history'] = new_session['history'][-max_history:] if max_history > 0 else []

    new_session['grid'] = add_random_tile(new_grid, rng)
    new_session['score'] = new_score
    events['changed'] = True

    if new_score > new_session['high_score']:
        new_session['high_score'] = new_score
        events['new_high_score'] = True

    highest_tile = get_highest_tile(new_session['grid'])
    if highest_tile > new_session['best_tile']:
        new_session['best_tile'] = highest_tile
        events['new_best_tile'] = True

    target = get_target_for_level(new_session['level'])
    if has_reached_target(new_session['grid'], target):
        new_session['level'] += 1
        events['level_up'] = True
        events['reached_target'] = target

    new_session['game_over'] = is_game_over(new_session['grid'])
    events['game_over'] = new_session['game_over']

    return new_session, events


def can_undo(session):
    return len(session['history']) > 0


def undo_move(session):
    """Restore the grid and score from before the last accepted move."""
    if not can_undo(session):
        return session

    new_session = _copy_session(session)
    snapshot = new_session['history'].pop()
    new_session['grid'] = snapshot['grid']
    new_session['score'] = snapshot['score']
    new_session['game_over'] = False
    return new_session


def _is_count(value, minimum=0):
    return isinstance(value, int) and not isinstance(value, bool) and value >= minimum


def _is_valid_grid(grid, size=None):
    """Square list of lists of non-negative ints, ``size`` wide when given."""
    if not isinstance(grid, list) or not grid:
        return False
    if size is not None and len(grid) != size:
        return False
    for row in grid:
        if not isinstance(row, list) or len(row) != len(grid):
            return False
        if not all(_is_count(val) for val in row):
            return False
    return True


def is_valid_session(data):
    """Check that a loaded game-state blob looks like a session."""
    if not isinstance(data, dict):
        return False

    grid = data.get('grid')
    if not _is_valid_grid(grid):
        return False

    for key in ('score', 'high_score', 'best_tile'):
        if not _is_count(data.get(key)):
            return False
    if not _is_count(data.get('level'), 1):
        return False

    history = data.get('history', [])
    if not isinstance(history, list):
        return False
    return all(
        isinstance(snapshot, dict)
        and _is_valid_grid(snapshot.get('grid'), len(grid))
        and _is_count(snapshot.get('score'))
        for snapshot in history
    )


def restore_session(data):
    """Turn a validated game-state blob back into a complete session."""
    session = {
        'grid': _copy_grid(data['grid']),
        'score': data['score'],
        'level': data['level'],
        'high_score': data['high_score'],
        'best_tile': data['best_tile'],
        'history': [],
    }
    session['history'] = [
        {'grid': _copy_grid(snapshot['grid']), 'score': snapshot['score']}
        for snapshot in data.get('history', [])
    ]
    session['game_over'] = is_game_over(session['grid'])
    return session
