# splendor_engine/game.py

"""
The turn engine: action execution, noble visits, the token discard step
and turn/endgame advancement.

Every entry point validates completely before touching the session, so a
rejected call leaves it exactly as it was.
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from .constants import GemColor, GEM_COLORS, ALL_TOKEN_COLORS, WIN_THRESHOLD
from .card import NobleTile
from .player import PlayerState
from .session import Phase, Session
from .tokens import GemTokens
from .actions import ActionType, TurnAction, validate_action
from .queries import bonuses, effective_cost, find_card_in_market, find_reserved_card, get_current_player, \
    get_winner_index, noble_qualifies, prestige
from .errors import InvalidActionError, InvalidDiscardError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TurnResult:
    """
    Outcome of execute_turn() or discard_tokens().

    Attributes:
        action: The action that was executed (None for a discard)
        noble_visit: Noble awarded this turn, if any
        game_over: Whether the game ended with this turn
        tokens_over_limit: Tokens the player must still discard (0 if the turn completed)
    """
    action: Optional[TurnAction]
    noble_visit: Optional[NobleTile]
    game_over: bool
    tokens_over_limit: int

    @property
    def discard_pending(self) -> bool:
        return self.tokens_over_limit > 0


def execute_turn(session: Session, action: TurnAction) -> TurnResult:
    """
    Validates and executes one turn action for the current player.

    If the result reports tokens_over_limit > 0, the turn is not finished:
    the caller must follow up with discard_tokens().

    Raises:
        InvalidActionError: If the action is not legal; nothing is changed
    """
    error = validate_action(session, action)
    if error:
        raise InvalidActionError(error, action)

    player = get_current_player(session)
    logger.debug("%s plays %r", player.name, action)

    if action.action_type == ActionType.TAKE_DIFFERENT:
        _execute_take_different(session, player, action)
    elif action.action_type == ActionType.TAKE_SAME:
        _execute_take_same(session, player, action)
    elif action.action_type == ActionType.RESERVE:
        _execute_reserve(session, player, action)
    elif action.action_type == ActionType.PURCHASE:
        _execute_purchase(session, player, action)

    noble_visit = _check_noble_visit(session, player)

    over_limit = player.tokens_over_limit()
    if over_limit > 0:
        logger.debug("%s holds %d tokens, must discard %d", player.name, player.token_total(), over_limit)
        return TurnResult(action=action, noble_visit=noble_visit, game_over=False, tokens_over_limit=over_limit)

    return _finish_turn(session, action, noble_visit)


def discard_tokens(session: Session, tokens: Mapping) -> TurnResult:
    """
    Resolves a pending discard for the current player and finishes the turn.

    Args:
        session: The session with a pending discard
        tokens: Bag whose total equals the current overage exactly

    Raises:
        InvalidDiscardError: If no discard is pending, the total is wrong or
            the player does not hold the tokens; nothing is changed
    """
    if session.phase == Phase.GAME_OVER:
        raise InvalidDiscardError("Game is over")

    try:
        discard = tokens if isinstance(tokens, GemTokens) else GemTokens(tokens)
    except (ValueError, TypeError) as e:
        raise InvalidDiscardError(f"Malformed discard {tokens!r}: {e}") from e
    player = get_current_player(session)
    over_limit = player.tokens_over_limit()

    if over_limit <= 0:
        raise InvalidDiscardError(f"{player.name} has no tokens to discard")
    if discard.has_negative():
        raise InvalidDiscardError(f"Cannot discard a negative number of tokens: {discard}")
    if discard.total() != over_limit:
        raise InvalidDiscardError(f"Must discard exactly {over_limit} tokens, got {discard.total()}")
    for color in ALL_TOKEN_COLORS:
        if discard[color] > player.tokens[color]:
            raise InvalidDiscardError(
                f"Cannot discard {discard[color]} {color.value} tokens (only have {player.tokens[color]})"
            )

    _transfer_to_supply(session, player, discard)
    logger.debug("%s discarded %s", player.name, discard)

    # The noble check already ran in execute_turn()
    return _finish_turn(session, None, None)


# --- Private helpers ---

def _transfer_to_player(session: Session, player: PlayerState, tokens: GemTokens) -> None:
    player.tokens = player.tokens + tokens
    session.token_supply = session.token_supply - tokens


def _transfer_to_supply(session: Session, player: PlayerState, tokens: GemTokens) -> None:
    player.tokens = player.tokens - tokens
    session.token_supply = session.token_supply + tokens


def _execute_take_different(session: Session, player: PlayerState, action: TurnAction) -> None:
    _transfer_to_player(session, player, GemTokens({GemColor(c): 1 for c in action.colors}))


def _execute_take_same(session: Session, player: PlayerState, action: TurnAction) -> None:
    _transfer_to_player(session, player, GemTokens({GemColor(action.color): 2}))


def _execute_reserve(session: Session, player: PlayerState, action: TurnAction) -> None:
    if action.card_id is not None:
        tier, index = find_card_in_market(session, action.card_id)
        card = session.market[tier].take_visible(index)
    else:
        card = session.market[action.tier].draw_card_from_deck()

    player.reserved_cards.append(card)

    # Gold only if any is left; running out is not an error
    if session.token_supply[GemColor.GOLD] > 0:
        _transfer_to_player(session, player, GemTokens({GemColor.GOLD: 1}))


def _execute_purchase(session: Session, player: PlayerState, action: TurnAction) -> None:
    found = find_card_in_market(session, action.card_id)
    if found is not None:
        tier, index = found
        card = session.market[tier].take_visible(index)
    else:
        card = player.reserved_cards.pop(find_reserved_card(player, action.card_id))

    eff = effective_cost(card.cost, bonuses(player))
    payment = {}
    gold_used = 0
    for color in GEM_COLORS:
        need = eff[color]
        if need <= 0:
            continue
        from_tokens = min(need, player.tokens[color])
        payment[color] = from_tokens
        gold_used += need - from_tokens
    payment[GemColor.GOLD] = gold_used

    _transfer_to_supply(session, player, GemTokens(payment))
    player.purchased_cards.append(card)


def _check_noble_visit(session: Session, player: PlayerState) -> Optional[NobleTile]:
    """
    Awards the first qualifying noble in list order, if any.
    A player can only attract one noble per turn.
    """
    for i, noble in enumerate(session.nobles):
        if noble_qualifies(player, noble):
            session.nobles.pop(i)
            player.nobles.append(noble)
            logger.info("Noble #%d visits %s", noble.id, player.name)
            return noble
    return None


def _finish_turn(session: Session, action: Optional[TurnAction], noble_visit: Optional[NobleTile]) -> TurnResult:
    player = get_current_player(session)

    if session.trigger_player_index == -1 and prestige(player) >= WIN_THRESHOLD:
        session.trigger_player_index = session.current_player_index
        session.phase = Phase.FINAL_ROUND
        logger.info("%s reached %d prestige; final round begins", player.name, prestige(player))

    next_player = (session.current_player_index + 1) % session.num_players

    # Every player gets the same number of turns once play returns to the starter
    if session.phase == Phase.FINAL_ROUND and next_player == session.starting_player_index:
        session.phase = Phase.GAME_OVER
        logger.info("Game over; winner is player %d", get_winner_index(session))
        return TurnResult(action=action, noble_visit=noble_visit, game_over=True, tokens_over_limit=0)

    session.current_player_index = next_player
    return TurnResult(action=action, noble_visit=noble_visit, game_over=False, tokens_over_limit=0)
