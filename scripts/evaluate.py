import argparse
import logging
import os
import sys

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import numpy as np
import pandas as pd
import seaborn as sns
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from tqdm import tqdm

# Project root on sys.path so the script runs without installing the package
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from agents.ai_player import make_strategy
from agents.match import MatchStalledError, play_game
from splendor_engine.errors import SplendorError
from splendor_engine.session import SetupOptions, create_session

DEFAULT_CONFIG = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "configs",
                              "match_config.yaml")


def load_config(path):
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def run_matches(num_games, num_players, strategy_names, seed, max_turns):
    """
    Plays `num_games` games, rotating the strategy list so every strategy
    takes every seat. Returns one row per game.
    """
    rng = np.random.default_rng(seed)
    rows = []
    for i in tqdm(range(num_games)):
        shift = i % num_players
        seats = [strategy_names[(j + shift) % len(strategy_names)] for j in range(num_players)]
        bots = [make_strategy(name) for name in seats]
        session = create_session(
            SetupOptions(player_count=num_players, player_names=[f"{name}-{j}" for j, name in enumerate(seats)],
                         ai_flags=[True] * num_players),
            rng,
        )
        try:
            record = play_game(session, bots, rng, max_turns=max_turns)
        except MatchStalledError as e:
            logging.getLogger(__name__).warning("Game %d stalled: %s", i, e)
            rows.append({"game": i, "winner": "Stalled", "winner_seat": -1, "turns": max_turns})
            continue
        row = {
            "game": i,
            "winner": seats[record.winner_index],
            "winner_seat": record.winner_index,
            "turns": record.turns,
        }
        for seat, name in enumerate(seats):
            row[f"seat{seat}_strategy"] = name
            row[f"seat{seat}_prestige"] = record.prestige[seat]
            row[f"seat{seat}_nobles"] = record.nobles[seat]
        rows.append(row)
    return pd.DataFrame(rows)


def print_summary(console, df, num_players, strategy_names):
    table = Table(title=f"Results ({len(df)} games, {num_players} players)")
    table.add_column("Strategy", style="cyan")
    table.add_column("Wins", justify="right")
    table.add_column("Win rate", justify="right")
    table.add_column("Avg prestige", justify="right")

    finished = df[df["winner"] != "Stalled"]
    strategies = sorted(set(strategy_names))
    wins = finished["winner"].value_counts()
    for name in strategies:
        scores = []
        for seat in range(num_players if not finished.empty else 0):
            scores.extend(finished.loc[finished[f"seat{seat}_strategy"] == name, f"seat{seat}_prestige"].tolist())
        games_played = len(df)
        table.add_row(
            name,
            str(int(wins.get(name, 0))),
            f"{wins.get(name, 0) / games_played:.1%}" if games_played else "-",
            f"{np.mean(scores):.2f}" if scores else "-",
        )
    console.print(table)
    if len(finished):
        console.print(f"Avg turns: {finished['turns'].mean():.1f}")
        console.print(f"Seat win counts: {finished['winner_seat'].value_counts().sort_index().to_dict()}")
    stalled = len(df) - len(finished)
    if stalled:
        console.print(f"[yellow]Stalled games: {stalled}[/yellow]")


def plot_results(df, save_dir):
    os.makedirs(save_dir, exist_ok=True)
    finished = df[df["winner"] != "Stalled"]
    if finished.empty:
        return

    fig, axes = plt.subplots(1, 2, figsize=(12, 5))
    sns.countplot(data=finished, x="winner", ax=axes[0])
    axes[0].set_title("Wins by strategy")
    sns.histplot(data=finished, x="turns", bins=20, ax=axes[1])
    axes[1].set_title("Game length (turns)")
    fig.tight_layout()
    save_path = os.path.join(save_dir, "match_results.png")
    fig.savefig(save_path)
    plt.close(fig)
    return save_path


def main():
    parser = argparse.ArgumentParser(description="Run Splendor bot matches")
    parser.add_argument("--config", type=str, default=DEFAULT_CONFIG, help="Path to match config YAML")
    parser.add_argument("--games", type=int, default=None, help="Number of games (overrides config)")
    parser.add_argument("--players", type=int, default=None, help="Players per game (overrides config)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the match generator (overrides config)")
    parser.add_argument("--strategies", type=str, nargs="+", default=None,
                        help="Strategy names, e.g. greedy random (overrides config)")
    parser.add_argument("--plot-dir", type=str, default=None, help="Save result plots to this directory")
    parser.add_argument("--verbose", action="store_true", help="Show engine INFO logs")
    args = parser.parse_args()

    console = Console()
    try:
        config = load_config(args.config)
    except (OSError, yaml.YAMLError) as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        sys.exit(1)

    logging.basicConfig(
        level=logging.INFO if args.verbose else config.get("log_level", "WARNING"),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    num_games = args.games if args.games is not None else config.get("games", 100)
    num_players = args.players if args.players is not None else config.get("players", 2)
    seed = args.seed if args.seed is not None else config.get("seed")
    strategies = args.strategies or config.get("strategies", ["greedy", "random"])
    max_turns = config.get("max_turns", 500)
    plot_dir = args.plot_dir or config.get("plot_dir")

    console.print(f"[bold blue]{num_games} games, {num_players} players: {', '.join(strategies)}[/bold blue]")
    try:
        df = run_matches(num_games, num_players, strategies, seed, max_turns)
    except (SplendorError, ValueError) as e:
        console.print(f"[red]Match failed: {e}[/red]")
        sys.exit(1)

    print_summary(console, df, num_players, strategies)
    if plot_dir:
        save_path = plot_results(df, plot_dir)
        if save_path:
            console.print(f"[green]Saved plot to {save_path}[/green]")


if __name__ == "__main__":
    main()
