import numpy as np

from splendor_engine.actions import TurnAction, get_legal_actions
from splendor_engine.constants import ALL_TOKEN_COLORS
from splendor_engine.errors import NoLegalActionError
from splendor_engine.session import Session
from splendor_engine.tokens import GemTokens


class RandomBot:
    name = "Random"

    def choose_turn(self, session: Session, player_index: int, rng: np.random.Generator) -> TurnAction:
        """
        Picks uniformly among the legal actions.
        """
        legal_actions = get_legal_actions(session)
        if not legal_actions:
            raise NoLegalActionError(f"No legal actions available for player {player_index}")
        return legal_actions[int(rng.integers(len(legal_actions)))]

    def choose_discard(self, session: Session, player_index: int, excess: int, rng: np.random.Generator) -> GemTokens:
        return build_random_discard(session.players[player_index].tokens, excess, rng)


def build_random_discard(held: GemTokens, excess: int, rng: np.random.Generator) -> GemTokens:
    """Discards one token at a time from a randomly chosen held color."""
    chosen = {}
    remaining = excess
    colors = [c for c in ALL_TOKEN_COLORS if held[c] > 0]
    while remaining > 0 and colors:
        idx = int(rng.integers(len(colors)))
        color = colors[idx]
        chosen[color] = chosen.get(color, 0) + 1
        remaining -= 1
        if held[color] - chosen[color] <= 0:
            colors.pop(idx)
    return GemTokens(chosen)
