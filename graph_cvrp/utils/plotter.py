# graph_cvrp/utils/plotter.py
from __future__ import annotations
import os
from typing import Dict, List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns


MOVE_TYPE_COLORS = {'new_best': 'gold', 'better': 'limegreen', 'sa_accepted': 'coral', 'rejected': 'lightgrey'}

# ==============================================================================
# SECTION 1: ANNEALING HISTORY
# ==============================================================================

def _plot_convergence(history: dict, save_dir: str, prefix: str):
    """Best and current cost against the temperature curve."""
    fig, ax1 = plt.subplots(figsize=(15, 7))
    color = 'tab:blue'
    ax1.set_xlabel('Iteration')
    ax1.set_ylabel('Distance', color=color)
    ax1.plot(history['iteration'], history['best_cost'], label='Best Cost', color='green', linewidth=2.5)
    ax1.plot(history['iteration'], history['current_cost'], label='Current Cost', color='cornflowerblue', alpha=0.6)
    ax1.tick_params(axis='y', labelcolor=color)
    ax1.legend(loc='upper left')
    ax1.grid(True, linestyle=':', alpha=0.6)

    ax2 = ax1.twinx()
    color = 'tab:red'
    ax2.set_ylabel('Temperature', color=color)
    ax2.plot(history['iteration'], history['temperature'], label='Temperature', color=color, linestyle='--', alpha=0.8)
    ax2.tick_params(axis='y', labelcolor=color)
    ax2.legend(loc='upper right')

    fig.tight_layout()
    plt.title('Annealing Convergence', fontsize=16)
    plt.savefig(os.path.join(save_dir, f"{prefix}1_convergence.png"), dpi=300)
    plt.close(fig)


def _plot_acceptance_criteria(history: dict, save_dir: str, prefix: str):
    move_counts = pd.Series(history['accepted_move_type']).value_counts()
    if move_counts.empty:
        print("  - Skipping acceptance criteria plot (no data).")
        return
    plt.figure(figsize=(8, 8))
    plt.pie(move_counts, labels=move_counts.index, autopct='%1.1f%%', startangle=140,
            colors=[MOVE_TYPE_COLORS.get(key, 'gray') for key in move_counts.index])
    plt.title('Move Acceptance Distribution', fontsize=16)
    plt.ylabel('')
    plt.savefig(os.path.join(save_dir, f"{prefix}2_acceptance_criteria.png"), dpi=300)
    plt.close()


def _plot_move_impact(history: dict, save_dir: str, prefix: str):
    """Candidate cost of every neighbour, coloured by outcome and shaped by move."""
    plt.figure(figsize=(15, 7))
    df = pd.DataFrame(history)
    sns.scatterplot(
        data=df, x='iteration', y='candidate_cost', hue='accepted_move_type',
        style='move', palette=MOVE_TYPE_COLORS, s=30, alpha=0.7,
        edgecolor='black', linewidth=0.3
    )
    plt.title('Neighbour Move Analysis', fontsize=16)
    plt.xlabel('Iteration')
    plt.ylabel('Candidate Distance')
    plt.legend(title='Move Type')
    plt.grid(True, linestyle=':', alpha=0.6)
    plt.tight_layout()
    plt.savefig(os.path.join(save_dir, f"{prefix}3_move_impact.png"), dpi=300)
    plt.close()


def plot_annealing_history(history: dict, save_dir: str, prefix: str = ""):
    if not history or not history.get('iteration'):
        print("  - Skipping history plots (no iterations).")
        return
    os.makedirs(save_dir, exist_ok=True)
    print(f"\nGenerating annealing plots in {save_dir} ...")
    _plot_convergence(history, save_dir, prefix)
    _plot_acceptance_criteria(history, save_dir, prefix)
    _plot_move_impact(history, save_dir, prefix)

# ==============================================================================
# SECTION 2: COMPARISON OF HEURISTICS
# ==============================================================================

def plot_results_comparison(results: List[Dict], save_dir: str):
    """Bar chart of the distance reached by every heuristic, per instance size."""
    if not results:
        return
    df = pd.DataFrame(results)
    plt.figure(figsize=(12, 7))
    sns.barplot(data=df, x='size', y='distance', hue='algorithm', errorbar=None)
    plt.title('Total Distance by Heuristic', fontsize=16)
    plt.xlabel('Instance Size')
    plt.ylabel('Total Distance')
    plt.grid(True, axis='y', linestyle=':', alpha=0.6)
    plt.tight_layout()
    file_path = os.path.join(save_dir, "results_comparison.png")
    plt.savefig(file_path, dpi=300)
    plt.close()
    print(f"  - Comparison plot saved to {file_path}")
