"""
Plot scores per turn for each logged 2048 session.
Creates line plots showing score and level progression over moves.
"""

import os
import json
import matplotlib.pyplot as plt
from pathlib import Path

from game_2048 import DIRECTIONS


MOVE_ACTIONS = {direction.upper() for direction in DIRECTIONS}


def is_move_entry(entry):
    """True for an accepted directional move; INITIAL, UNDO, RESET and rejected moves are not moves."""
    return entry.get('action') in MOVE_ACTIONS and not entry.get('invalid_move')


def load_game_log(log_file):
    """Load a game log JSON file and extract scores and levels per accepted move."""
    with open(log_file, 'r') as f:
        data = json.load(f)

    scores = []
    levels = []
    moves = []

    move_number = 0
    for entry in data:
        if 'final_score' in entry:
            # This is the final stats entry
            break
        if entry.get('action') != 'INITIAL' and not is_move_entry(entry):
            continue
        scores.append(entry['current_score'])
        levels.append(entry.get('level', 1))
        moves.append(move_number)
        move_number += 1

    return moves, scores, levels


def get_session_name(filename):
    """Extract session name from log filename."""
    # filename format: game_log_<strategy>[_seed<seed>].json
    return filename.replace('game_log_', '').replace('.json', '')


def plot_all_scores(log_dir='game_logs', output_file='scores_per_turn.png'):
    """Plot scores per turn for all sessions."""
    log_path = Path(log_dir)

    session_data = {}

    for log_file in sorted(log_path.glob('game_log_*.json')):
        session_name = get_session_name(log_file.name)
        try:
            moves, scores, _ = load_game_log(log_file)
            session_data[session_name] = (moves, scores)
            print(f"Loaded {session_name}: {len(moves)} moves, final score {scores[-1] if scores else 0}")
        except Exception as e:
            print(f"Error loading {log_file}: {e}")

    if not session_data:
        print("No game logs found!")
        return

    fig, ax = plt.subplots(figsize=(14, 8))

    for session_name, (moves, scores) in sorted(session_data.items()):
        ax.plot(moves, scores, marker='o', markersize=2, linewidth=1.5, label=session_name, alpha=0.8)

    ax.set_xlabel('Move Number', fontsize=12)
    ax.set_ylabel('Score', fontsize=12)
    ax.set_title('2048 Score Progression by Session', fontsize=14, fontweight='bold')
    ax.legend(bbox_to_anchor=(1.05, 1), loc='upper left', fontsize=9)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"\nPlot saved to {output_file}")
    plt.close()


def plot_individual_scores(log_dir='game_logs', output_dir='plots'):
    """Create individual plots for each session, with the level on a second axis."""
    os.makedirs(output_dir, exist_ok=True)
    log_path = Path(log_dir)

    for log_file in sorted(log_path.glob('game_log_*.json')):
        session_name = get_session_name(log_file.name)
        try:
            moves, scores, levels = load_game_log(log_file)

            fig, ax = plt.subplots(figsize=(10, 6))
            ax.plot(moves, scores, marker='o', markersize=3, linewidth=2, color='#2E86AB')
            ax.fill_between(moves, scores, alpha=0.3, color='#2E86AB')

            level_ax = ax.twinx()
            level_ax.step(moves, levels, where='post', linewidth=1.5, color='#E07A5F')
            level_ax.set_ylabel('Level', fontsize=12, color='#E07A5F')

            ax.set_xlabel('Move Number', fontsize=12)
            ax.set_ylabel('Score', fontsize=12)
            ax.set_title(f'Score Progression: {session_name}', fontsize=14, fontweight='bold')
            ax.grid(True, alpha=0.3)

            plt.tight_layout()
            output_file = os.path.join(output_dir, f'score_progression_{session_name}.png')
            plt.savefig(output_file, dpi=300, bbox_inches='tight')
            plt.close()

            print(f"Saved {output_file}")
        except Exception as e:
            print(f"Error plotting {log_file}: {e}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Plot 2048 game scores per turn')
    parser.add_argument('--log_dir', type=str, default='game_logs',
                        help='Directory containing game log JSON files')
    parser.add_argument('--output', type=str, default='scores_per_turn.png',
                        help='Output filename for combined plot')
    parser.add_argument('--individual', action='store_true',
                        help='Also create individual plots for each session')
    parser.add_argument('--individual_dir', type=str, default='plots',
                        help='Directory for individual plots')

    args = parser.parse_args()

    plot_all_scores(args.log_dir, args.output)

    if args.individual:
        plot_individual_scores(args.log_dir, args.individual_dir)
