"""
Drives a whole session with one strategy per seat, including the token
discard step, and summarizes the result.
"""

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from splendor_engine.actions import get_legal_actions
from splendor_engine.errors import InvalidActionError, SplendorError
from splendor_engine.game import discard_tokens, execute_turn
from splendor_engine.queries import get_winner_index, is_game_over, prestige
from splendor_engine.session import Session

logger = logging.getLogger(__name__)

MAX_GAME_TURNS = 500


class MatchStalledError(SplendorError):
    """The game did not reach game over (turn cap hit or no legal action)."""


@dataclass(frozen=True)
class GameRecord:
    winner_index: int
    turns: int
    prestige: List[int]
    nobles: List[int]
    strategy_names: List[str]


def play_game(session: Session, bots: Sequence, rng: np.random.Generator,
              max_turns: int = MAX_GAME_TURNS) -> GameRecord:
    """
    Plays `session` to the end.

    Args:
        session: A freshly created (or in-progress) session
        bots: One strategy per seat, each with choose_turn / choose_discard
        rng: Generator handed to every strategy call
        max_turns: Turn cap; exceeding it raises MatchStalledError

    Raises:
        MatchStalledError: If the cap is hit or the current player has no legal action
        InvalidActionError: If a strategy picks an illegal action
    """
    if len(bots) != session.num_players:
        raise ValueError(f"Expected {session.num_players} bots, got {len(bots)}.")

    turns = 0
    while not is_game_over(session):
        if turns >= max_turns:
            raise MatchStalledError(f"Game did not finish within {max_turns} turns")

        index = session.current_player_index
        bot = bots[index]
        if not get_legal_actions(session):
            raise MatchStalledError(f"{session.players[index].name} has no legal action on turn {turns}")

        action = bot.choose_turn(session, index, rng)
        try:
            result = execute_turn(session, action)
        except InvalidActionError:
            logger.error("%s chose an illegal action %r", bot.name, action)
            raise

        if result.discard_pending:
            discard = bot.choose_discard(session, index, result.tokens_over_limit, rng)
            logger.debug("%s discards %s", bot.name, discard)
            discard_tokens(session, discard)

        turns += 1

    record = GameRecord(
        winner_index=get_winner_index(session),
        turns=turns,
        prestige=[prestige(p) for p in session.players],
        nobles=[len(p.nobles) for p in session.players],
        strategy_names=[bot.name for bot in bots],
    )
    logger.info("Game finished after %d turns; winner seat %d", turns, record.winner_index)
    return record
