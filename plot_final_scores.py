"""
Plot final results for each logged 2048 session.
Creates barplots comparing final score, moves and best tile across sessions.
"""

import json
import matplotlib.pyplot as plt
import numpy as np
from pathlib import Path

from plot_scores_per_turn import get_session_name, is_move_entry


def load_final_score(log_file):
    """Load a game log JSON file and extract final score and stats."""
    with open(log_file, 'r') as f:
        data = json.load(f)

    # The last entry should contain final stats
    final_entry = data[-1]

    if 'final_score' in final_entry:
        return {
            'final_score': final_entry['final_score'],
            'total_moves': final_entry.get('total_moves', 0),
            'best_tile': final_entry.get('best_tile', 0),
            'level': final_entry.get('level', 1),
            'end_reason': final_entry.get('game_end_reason', 'unknown')
        }

    # Unfinished log: the last recorded state is the current one
    state_entries = [entry for entry in data if 'current_score' in entry and not entry.get('invalid_move')]
    if state_entries:
        last = state_entries[-1]
        return {
            'final_score': last['current_score'],
            'total_moves': sum(1 for entry in state_entries if is_move_entry(entry)),
            'best_tile': max(val for entry in state_entries for row in entry['game_state'] for val in row),
            'level': last.get('level', 1),
            'end_reason': 'unknown'
        }

    return None


def load_all_final_scores(log_dir='game_logs'):
    """Final stats of every session log in ``log_dir``, keyed by session name."""
    session_scores = {}

    for log_file in sorted(Path(log_dir).glob('game_log_*.json')):
        session_name = get_session_name(log_file.name)
        try:
            stats = load_final_score(log_file)
            if stats:
                session_scores[session_name] = stats
        except Exception as e:
            print(f"Error loading {log_file}: {e}")

    return session_scores


def summarize(session_scores):
    """Mean and median of score, moves and best tile across sessions."""
    scores = np.array([stats['final_score'] for stats in session_scores.values()])
    moves = np.array([stats['total_moves'] for stats in session_scores.values()])
    tiles = np.array([stats['best_tile'] for stats in session_scores.values()])
    return {
        'mean_score': float(np.mean(scores)),
        'median_score': float(np.median(scores)),
        'mean_moves': float(np.mean(moves)),
        'median_moves': float(np.median(moves)),
        'max_tile': int(np.max(tiles)),
    }


def _bar_panel(ax, names, values, colors, ylabel, title):
    bars = ax.bar(range(len(names)), values, color=colors, alpha=0.8, edgecolor='black', linewidth=1.2)

    ax.set_xlabel('Session', fontsize=12, fontweight='bold')
    ax.set_ylabel(ylabel, fontsize=12, fontweight='bold')
    ax.set_title(title, fontsize=14, fontweight='bold', pad=20)
    ax.set_xticks(range(len(names)))
    ax.set_xticklabels(names, rotation=45, ha='right', fontsize=9)
    ax.grid(True, alpha=0.3, axis='y')

    # Add value labels on bars
    for bar, value in zip(bars, values):
        height = bar.get_height()
        ax.text(bar.get_x() + bar.get_width() / 2., height,
                f'{int(value)}',
                ha='center', va='bottom', fontsize=8, fontweight='bold')


def plot_final_scores(log_dir='game_logs', output_file='final_scores_barplot.png'):
    """Create barplots of final score, total moves and best tile for all sessions."""
    session_scores = load_all_final_scores(log_dir)

    for session_name, stats in session_scores.items():
        print(f"{session_name}: Score={stats['final_score']}, Moves={stats['total_moves']}, "
              f"Best tile={stats['best_tile']}, Reason={stats['end_reason']}")

    if not session_scores:
        print("No game logs found!")
        return

    # Sort by final score (descending)
    sorted_sessions = sorted(session_scores.items(), key=lambda x: x[1]['final_score'], reverse=True)

    names = [name for name, _ in sorted_sessions]
    scores = [stats['final_score'] for _, stats in sorted_sessions]
    moves = [stats['total_moves'] for _, stats in sorted_sessions]
    tiles = [stats['best_tile'] for _, stats in sorted_sessions]

    fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(14, 15))

    _bar_panel(ax1, names, scores, plt.cm.viridis(np.linspace(0, 1, len(names))),
               'Final Score', '2048 Final Scores by Session')
    _bar_panel(ax2, names, moves, plt.cm.plasma(np.linspace(0, 1, len(names))),
               'Total Moves', 'Total Moves by Session')
    _bar_panel(ax3, names, tiles, plt.cm.cividis(np.linspace(0, 1, len(names))),
               'Best Tile', 'Best Tile by Session')
    ax3.set_yscale('log', base=2)

    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"\nBarplot saved to {output_file}")
    plt.close()

    summary = summarize(session_scores)
    print("\n" + "=" * 60)
    print("SUMMARY STATISTICS")
    print("=" * 60)
    print(f"Best Score: {names[0]} with {scores[0]}")
    print(f"Worst Score: {names[-1]} with {scores[-1]}")
    print(f"Average Score: {summary['mean_score']:.1f}")
    print(f"Median Score: {summary['median_score']:.1f}")
    print(f"Average Moves: {summary['mean_moves']:.1f}")
    print(f"Median Moves: {summary['median_moves']:.1f}")
    print(f"Highest Tile: {summary['max_tile']}")
    print("=" * 60)


def plot_score_vs_moves(log_dir='game_logs', output_file='score_vs_moves.png'):
    """Create a scatter plot of final score vs total moves."""
    session_scores = load_all_final_scores(log_dir)

    if not session_scores:
        print("No game logs found!")
        return

    names = list(session_scores.keys())
    scores = [stats['final_score'] for stats in session_scores.values()]
    moves = [stats['total_moves'] for stats in session_scores.values()]

    fig, ax = plt.subplots(figsize=(12, 8))

    ax.scatter(moves, scores, s=200, alpha=0.6, c=range(len(names)),
               cmap='viridis', edgecolors='black', linewidth=2)

    for i, name in enumerate(names):
        ax.annotate(name, (moves[i], scores[i]),
                    xytext=(5, 5), textcoords='offset points',
                    fontsize=8, alpha=0.8)

    ax.set_xlabel('Total Moves', fontsize=12, fontweight='bold')
    ax.set_ylabel('Final Score', fontsize=12, fontweight='bold')
    ax.set_title('Final Score vs Total Moves', fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(output_file, dpi=300, bbox_inches='tight')
    print(f"Scatter plot saved to {output_file}")
    plt.close()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Plot 2048 final scores')
    parser.add_argument('--log_dir', type=str, default='game_logs',
                        help='Directory containing game log JSON files')
    parser.add_argument('--output', type=str, default='final_scores_barplot.png',
                        help='Output filename for barplot')
    parser.add_argument('--scatter', action='store_true',
                        help='Also create scatter plot of score vs moves')
    parser.add_argument('--scatter_output', type=str, default='score_vs_moves.png',
                        help='Output filename for scatter plot')

    args = parser.parse_args()

    plot_final_scores(args.log_dir, args.output)

    if args.scatter:
        plot_score_vs_moves(args.log_dir, args.scatter_output)
