import numpy as np

from splendor_engine.actions import TurnAction
from splendor_engine.session import Session
from splendor_engine.tokens import GemTokens

from .greedy_bot import GreedyBot
from .random_bot import RandomBot

STRATEGIES = {
    "random": RandomBot,
    "greedy": GreedyBot,
}


def make_strategy(name: str):
    """Builds a strategy from its registry name ("random" or "greedy")."""
    try:
        return STRATEGIES[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown strategy: {name}. Choose from {sorted(STRATEGIES)}.") from None


class AiPlayer:
    """
    Binds a strategy to its own random generator, so callers only pass the
    session and a seat index.
    """

    def __init__(self, rng: np.random.Generator, strategy=None):
        self.rng = rng
        self.strategy = strategy if strategy is not None else GreedyBot()

    @property
    def strategy_name(self) -> str:
        return self.strategy.name

    def choose_turn(self, session: Session, player_index: int) -> TurnAction:
        return self.strategy.choose_turn(session, player_index, self.rng)

    def choose_discard(self, session: Session, player_index: int, excess: int) -> GemTokens:
        return self.strategy.choose_discard(session, player_index, excess, self.rng)

    def __repr__(self) -> str:
        return f"AiPlayer({self.strategy_name})"
