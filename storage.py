"""
Persistent storage for high score, best tile, level and saved game state.
Every slot lives in a single JSON file. Reads fall back to defaults and
writes return False on any error, so a broken file never stops a game.
"""

import json
import logging
import os
from pathlib import Path


logger = logging.getLogger(__name__)

DEFAULT_STORAGE_PATH = os.getenv('GAME_2048_STORAGE', 'game_data/storage.json')

STORAGE_KEYS = {
    'high_score': 'game2048:high_score',
    'best_tile': 'game2048:best_tile',
    'current_level': 'game2048:current_level',
    'game_state': 'game2048:game_state',
}


def _read_all(path):
    """Load the whole storage file, an empty dict when it does not exist yet."""
    path = Path(path)
    if not path.exists():
        return {}
    with open(path, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Storage file {path} does not contain a JSON object")
    return data


def _write_all(path, data):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    # Serialize before opening so a bad value cannot truncate the file
    payload = json.dumps(data, indent=2)
    with open(path, 'w') as f:
        f.write(payload)


def get_item(path, key):
    """Return the stored value for ``key`` or None when absent."""
    return _read_all(path).get(key)


def set_item(path, key, value):
    data = _read_all(path)
    data[key] = value
    _write_all(path, data)


def remove_items(path, keys):
    data = _read_all(path)
    for key in keys:
        data.pop(key, None)
    _write_all(path, data)


def _save_int(path, slot, value, label):
    try:
        set_item(path, STORAGE_KEYS[slot], str(int(value)))
        return True
    except Exception as e:
        logger.error(f"Error saving {label}: {e}")
        return False


def _load_int(path, slot, default, label):
    try:
        saved = get_item(path, STORAGE_KEYS[slot])
        return int(saved) if saved else default
    except Exception as e:
        logger.error(f"Error loading {label}: {e}")
        return default


def save_high_score(path, score):
    """Save the high score. Returns True on success."""
    return _save_int(path, 'high_score', score, 'high score')


def load_high_score(path):
    """Load the high score, 0 if none is saved."""
    return _load_int(path, 'high_score', 0, 'high score')


def save_best_tile(path, tile_value):
    return _save_int(path, 'best_tile', tile_value, 'best tile')


def load_best_tile(path):
    """Load the best tile value, 2 if none is saved."""
    return _load_int(path, 'best_tile', 2, 'best tile')


def save_current_level(path, level):
    return _save_int(path, 'current_level', level, 'current level')


def load_current_level(path):
    """Load the current level, 1 if none is saved."""
    return _load_int(path, 'current_level', 1, 'current level')


def save_game_state(path, game_state):
    """
    Save the whole game state as a JSON string.

    Args:
        path: Storage file path
        game_state: Any JSON-serializable value (a session dict in practice)

    Returns:
        True on success, False otherwise
    """
    try:
        set_item(path, STORAGE_KEYS['game_state'], json.dumps(game_state))
        return True
    except Exception as e:
        logger.error(f"Error saving game state: {e}")
        return False


def load_game_state(path):
    """Load the saved game state, None if nothing is saved or it is unreadable."""
    try:
        json_value = get_item(path, STORAGE_KEYS['game_state'])
        return json.loads(json_value) if json_value is not None else None
    except Exception as e:
        logger.error(f"Error loading game state: {e}")
        return None


def clear_all_data(path):
    """Remove every saved slot (used for full resets)."""
    try:
        remove_items(path, STORAGE_KEYS.values())
        return True
    except Exception as e:
        logger.error(f"Error clearing data: {e}")
        return False
