"""
Play 2048 in the terminal.
A human plays with w/a/s/d (u undo, r reset, q quit), or a seeded random
player plays until no move is left. Every move is logged to a JSON file and
progress (high score, best tile, level, current game) is saved to storage.
"""

import argparse
import json
import random
from pathlib import Path

from game_2048 import DIRECTIONS, GRID_SIZE, display, get_target_for_level
from game_session import (
    apply_move,
    can_undo,
    is_valid_session,
    new_game,
    reset_game,
    restore_session,
    undo_move,
)
from storage import (
    DEFAULT_STORAGE_PATH,
    load_best_tile,
    load_current_level,
    load_game_state,
    load_high_score,
    save_best_tile,
    save_current_level,
    save_game_state,
    save_high_score,
)


COMMANDS = {
    'w': 'up',
    's': 'down',
    'a': 'left',
    'd': 'right',
    'u': 'undo',
    'r': 'reset',
    'q': 'quit',
}


def get_human_move(input_fn=input):
    """
    Read one command from the keyboard.

    Returns:
        A direction, 'undo', 'reset' or 'quit', or None for an unknown key
    """
    try:
        command = input_fn("\nEnter move (w/a/s/d, u undo, r reset, q quit): ").lower().strip()
    except EOFError:
        return 'quit'
    return COMMANDS.get(command)


def get_random_move(rng):
    """Pick one of the four directions uniformly."""
    return rng.choice(DIRECTIONS)


def default_log_file(strategy, seed=None):
    seed_suffix = f"_seed{seed}" if seed is not None else ""
    return f"game_logs/game_log_{strategy}{seed_suffix}.json"


def write_log(log_file, game_log):
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    with open(log_file, 'w') as f:
        json.dump(game_log, f, indent=2)


def start_session(storage_path, size=GRID_SIZE, rng=None, resume=False):
    """
    Build the session to play: the saved one when resuming, otherwise a new
    game seeded with the stored high score, best tile and level.
    """
    if resume:
        saved = load_game_state(storage_path)
        if saved is not None and is_valid_session(saved):
            session = restore_session(saved)
            if not session['game_over']:
                print("Resuming saved game.")
                return session
        print("No saved game to resume, starting a new one.")

    return new_game(
        level=load_current_level(storage_path),
        high_score=load_high_score(storage_path),
        best_tile=load_best_tile(storage_path),
        size=size,
        rng=rng,
    )


def save_progress(storage_path, session, events):
    """Persist whatever the last accepted move improved, then the game itself."""
    if events['new_high_score'] and session['high_score'] > 0:
        save_high_score(storage_path, session['high_score'])
    if events['new_best_tile'] and session['best_tile'] > 2:
        save_best_tile(storage_path, session['best_tile'])
    if events['level_up']:
        save_current_level(storage_path, session['level'])
    save_game_state(storage_path, None if session['game_over'] else session)


def _log_entry(session, action, **extra):
    entry = {
        "game_state": [row[:] for row in session['grid']],
        "action": action,
        "current_score": session['score'],
        "level": session['level'],
    }
    entry.update(extra)
    return entry


def play_game(strategy='human', seed=None, size=GRID_SIZE, storage_path=DEFAULT_STORAGE_PATH,
              log_file=None, max_moves=10000, max_consecutive_invalid_moves=10, max_history=100,
              resume=False, input_fn=input):
    """
    Play a full game of 2048 and log all moves.

    Args:
        strategy: 'human' for keyboard input or 'random' for the random player
        seed: Seed for tile spawning and the random player
        size: Grid side length for a new game
        storage_path: Path of the JSON storage file
        log_file: Path to the JSON log file (derived from strategy and seed if None)
        max_moves: Maximum number of moves to prevent infinite loops
        max_consecutive_invalid_moves: Maximum consecutive invalid moves before stopping
        max_history: Number of undo snapshots to keep
        resume: Continue the saved game when there is one
        input_fn: Function used to read keyboard commands

    Returns:
        Final score
    """
    if strategy not in ('human', 'random'):
        raise ValueError(f"Invalid strategy: {strategy}. Must be 'human' or 'random'")

    rng = random.Random(seed)
    log_file = log_file or default_log_file(strategy, seed)

    session = start_session(storage_path, size, rng, resume)
    game_log = []
    move_count = 0
    game_end_reason = "unknown"
    consecutive_invalid_moves = 0

    game_log.append(_log_entry(session, "INITIAL", strategy=strategy, seed=seed))

    while not session['game_over'] and move_count < max_moves:
        try:
            if strategy == 'human':
                print(f"\nLevel {session['level']} (target {get_target_for_level(session['level'])}), "
                      f"score {session['score']}, high score {session['high_score']}, best tile {session['best_tile']}")
                print(display(session['grid']))
                command = get_human_move(input_fn)
            else:
                command = get_random_move(rng)

            if command is None:
                print("Invalid command! Use w/a/s/d to move, u to undo, r to reset or q to quit.")
                continue

            if command == 'quit':
                print("Thanks for playing!")
                game_end_reason = "user_quit"
                break

            if command == 'undo':
                if not can_undo(session):
                    print("Nothing to undo.")
                    continue
                session = undo_move(session)
                save_game_state(storage_path, session)
                game_log.append(_log_entry(session, "UNDO"))
                write_log(log_file, game_log)
                continue

            if command == 'reset':
                session = reset_game(session, rng)
                save_game_state(storage_path, session)
                game_log.append(_log_entry(session, "RESET"))
                write_log(log_file, game_log)
                continue

            new_session, events = apply_move(session, command, rng, max_history)

            # Check if move was valid (state changed)
            if not events['changed']:
                consecutive_invalid_moves += 1
                print(f"⚠️  Invalid move {command.upper()}! State didn't change. "
                      f"({consecutive_invalid_moves}/{max_consecutive_invalid_moves})")
                game_log.append(_log_entry(session, command.upper(), invalid_move=True))

                if consecutive_invalid_moves >= max_consecutive_invalid_moves:
                    print(f"\n❌ Too many consecutive invalid moves ({max_consecutive_invalid_moves}). Game stopped.")
                    game_end_reason = f"too_many_invalid_moves_{max_consecutive_invalid_moves}"
                    break
                continue

            # Valid move
            consecutive_invalid_moves = 0
            session = new_session
            move_count += 1

            save_progress(storage_path, session, events)

            if events['level_up']:
                print(f"\n🎉 You've reached {events['reached_target']}! "
                      f"You advanced to level {session['level']}!")

            game_log.append(_log_entry(session, command.upper()))
            write_log(log_file, game_log)

        except Exception as e:
            print(f"\n❌ Error occurred: {e}")
            game_end_reason = f"error: {str(e)}"
            break

    # Determine game end reason if not already set
    if game_end_reason == "unknown":
        if session['game_over']:
            game_end_reason = "no_moves_available"
        elif move_count >= max_moves:
            game_end_reason = "max_moves_reached"

    print("\n" + "=" * 50)
    if game_end_reason == "max_moves_reached":
        print("Maximum moves reached!")
    elif game_end_reason.startswith("too_many_invalid_moves"):
        print("Game stopped due to too many consecutive invalid moves!")
    elif game_end_reason.startswith("error:"):
        print("Game stopped due to error!")
    elif game_end_reason == "user_quit":
        print("Game stopped by the player.")
    else:
        print("Game Over!")
    print("=" * 50)
    print(display(session['grid']))

    final_score = session['score']
    print(f"Final Score: {final_score}")
    print(f"Best Tile: {session['best_tile']}")
    print(f"Level: {session['level']}")
    print(f"Total Moves: {move_count}")
    print(f"Game End Reason: {game_end_reason}")
    print(f"Game log saved to: {log_file}")

    # Add final statistics to the log
    game_log.append({
        "final_score": final_score,
        "best_tile": session['best_tile'],
        "level": session['level'],
        "game_end_reason": game_end_reason,
        "total_moves": move_count,
    })
    write_log(log_file, game_log)

    return final_score


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description='Play the 2048 game')
    parser.add_argument('--strategy', type=str, choices=['human', 'random'], default='human',
                        help='Who plays: keyboard input or the random player (default: human)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for deterministic games')
    parser.add_argument('--size', type=int, default=GRID_SIZE, help=f'Grid side length (default: {GRID_SIZE})')
    parser.add_argument('--storage', type=str, default=DEFAULT_STORAGE_PATH,
                        help='Path of the JSON storage file (env: GAME_2048_STORAGE)')
    parser.add_argument('--log_file', type=str, default=None, help='Path of the JSON game log')
    parser.add_argument('--max_moves', type=int, default=10000, help='Maximum number of moves (default: 10000)')
    parser.add_argument('--max_history', type=int, default=100, help='Number of undo steps kept (default: 100)')
    parser.add_argument('--resume', action='store_true', help='Continue the saved game if there is one')

    args = parser.parse_args()

    play_game(
        strategy=args.strategy,
        seed=args.seed,
        size=args.size,
        storage_path=args.storage,
        log_file=args.log_file,
        max_moves=args.max_moves,
        max_history=args.max_history,
        resume=args.resume,
    )
