# splendor_engine/session.py

"""
Defines the Session (the whole state of one game) and its setup.

A Session is created once by create_session(), mutated in place by the
turn engine in game.py, and simply dropped when the game is over.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

import numpy as np

from .constants import SETUP_CONFIG, MIN_PLAYERS, MAX_PLAYERS, TIERS, GEM_COLORS, GemColor
from .card import NobleTile, create_tier_decks, select_nobles, noble_label
from .board import MarketRow
from .player import PlayerState
from .tokens import GemTokens
from .errors import SetupError

logger = logging.getLogger(__name__)


class Phase(Enum):
    PLAYING = "playing"
    FINAL_ROUND = "final-round"
    GAME_OVER = "game-over"


@dataclass(frozen=True)
class SetupOptions:
    """
    Options for a new game.

    Attributes:
        player_count: Number of seats (2-4)
        player_names: One name per seat (defaults to "Player", "AI 1", ...)
        ai_flags: One flag per seat (defaults to every seat but the first)
    """
    player_count: int = 2
    player_names: Optional[Sequence[str]] = None
    ai_flags: Optional[Sequence[bool]] = None

    def __post_init__(self) -> None:
        if not isinstance(self.player_count, int) or not (MIN_PLAYERS <= self.player_count <= MAX_PLAYERS):
            raise SetupError(f"Invalid player count: {self.player_count}. Must be {MIN_PLAYERS}-{MAX_PLAYERS}.")
        if self.player_names is not None and len(self.player_names) != self.player_count:
            raise SetupError(f"Expected {self.player_count} player names, got {len(self.player_names)}.")
        if self.ai_flags is not None and len(self.ai_flags) != self.player_count:
            raise SetupError(f"Expected {self.player_count} AI flags, got {len(self.ai_flags)}.")

    def resolved_names(self) -> List[str]:
        if self.player_names is not None:
            return list(self.player_names)
        return ["Player" if i == 0 else f"AI {i}" for i in range(self.player_count)]

    def resolved_ai_flags(self) -> List[bool]:
        if self.ai_flags is not None:
            return [bool(flag) for flag in self.ai_flags]
        return [i > 0 for i in range(self.player_count)]


@dataclass(eq=False)
class Session:
    players: List[PlayerState]
    market: Dict[int, MarketRow]
    token_supply: GemTokens
    nobles: List[NobleTile]
    rng: np.random.Generator
    phase: Phase = Phase.PLAYING
    current_player_index: int = 0
    # Which player index started the game (for round-completion logic)
    starting_player_index: int = 0
    # Index of the player who first reached WIN_THRESHOLD, or -1
    trigger_player_index: int = -1
    # Token counts handed out at setup, per color
    initial_supply: GemTokens = field(default_factory=GemTokens)

    @property
    def num_players(self) -> int:
        return len(self.players)

    def __repr__(self) -> str:
        rep_str = f"--- Splendor Session ({self.phase.value}) ---\n"
        rep_str += "Supply: " + ", ".join(f"{c.value}: {v}" for c, v in self.token_supply.items()) + "\n"
        rep_str += "Nobles: " + "; ".join(noble_label(n) for n in self.nobles) + "\n"
        for tier in sorted(self.market, reverse=True):
            rep_str += repr(self.market[tier])
        rep_str += f"Current player: {self.current_player_index}\n"
        rep_str += "-----------------------------"
        return rep_str


def create_token_supply(player_count: int) -> GemTokens:
    if player_count not in SETUP_CONFIG:
        raise SetupError(f"Invalid player count: {player_count}. Must be {MIN_PLAYERS}-{MAX_PLAYERS}.")
    config = SETUP_CONFIG[player_count]
    supply = {color: config['gems'] for color in GEM_COLORS}
    supply[GemColor.GOLD] = config['gold']
    return GemTokens(supply)


def create_session(options: Optional[SetupOptions] = None, rng: Optional[np.random.Generator] = None) -> Session:
    """
    Builds the initial session.

    Args:
        options: Setup options (defaults to a 2-player game)
        rng: Random generator driving every shuffle; required

    Raises:
        SetupError: If options are invalid or no generator is supplied
    """
    if options is None:
        options = SetupOptions()
    if rng is None:
        raise SetupError("create_session requires an explicit numpy Generator (rng).")

    players = [
        PlayerState(name, is_ai)
        for name, is_ai in zip(options.resolved_names(), options.resolved_ai_flags())
    ]

    decks = create_tier_decks(rng)
    market = {tier: MarketRow(tier, decks[tier]) for tier in TIERS}
    supply = create_token_supply(options.player_count)

    session = Session(
        players=players,
        market=market,
        token_supply=supply,
        nobles=select_nobles(options.player_count, rng),
        rng=rng,
        initial_supply=supply,
    )
    logger.debug("Created %d-player session with nobles %s", options.player_count, [n.id for n in session.nobles])
    return session
