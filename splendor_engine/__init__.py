# splendor_engine/__init__.py

"""
Splendor Turn Engine Package
============================

Pure Python rules for Splendor, with no rendering dependency.

Modules:
- constants.py: Game constants and the fixed card / noble tables.
- tokens.py: GemTokens, the sparse token bag.
- card.py: DevelopmentCard and NobleTile, shuffling, display labels.
- player.py: PlayerState.
- board.py: MarketRow (visible slots + deck of one tier).
- session.py: Session, Phase, SetupOptions, create_session().
- queries.py: Read-only helpers (prestige, bonuses, affordability, winner).
- actions.py: TurnAction, validate_action(), get_legal_actions().
- game.py: execute_turn(), discard_tokens(), noble visits, endgame.
- errors.py: Exception types.

"""

from .constants import GemColor, WIN_THRESHOLD, MAX_TOKENS, MAX_RESERVED, MARKET_SIZE
from .tokens import GemTokens
from .card import DevelopmentCard, NobleTile, ALL_DEVELOPMENT_CARDS, ALL_NOBLES, card_label, noble_label
from .player import PlayerState
from .board import MarketRow
from .session import Phase, Session, SetupOptions, create_session
from .queries import (
    bonuses,
    can_afford,
    effective_cost,
    get_available_cards,
    get_current_player,
    get_winner_index,
    is_game_over,
    noble_qualifies,
    prestige,
)
from .actions import ActionType, TurnAction, validate_action, get_legal_actions
from .game import TurnResult, execute_turn, discard_tokens
from .errors import SplendorError, SetupError, InvalidActionError, InvalidDiscardError, NoLegalActionError

__all__ = [
    'GemColor',
    'GemTokens',
    'DevelopmentCard',
    'NobleTile',
    'ALL_DEVELOPMENT_CARDS',
    'ALL_NOBLES',
    'card_label',
    'noble_label',
    'PlayerState',
    'MarketRow',
    'Phase',
    'Session',
    'SetupOptions',
    'create_session',
    'prestige',
    'bonuses',
    'effective_cost',
    'can_afford',
    'noble_qualifies',
    'get_current_player',
    'get_available_cards',
    'is_game_over',
    'get_winner_index',
    'ActionType',
    'TurnAction',
    'validate_action',
    'get_legal_actions',
    'TurnResult',
    'execute_turn',
    'discard_tokens',
    'SplendorError',
    'SetupError',
    'InvalidActionError',
    'InvalidDiscardError',
    'NoLegalActionError',
    'WIN_THRESHOLD',
    'MAX_TOKENS',
    'MAX_RESERVED',
    'MARKET_SIZE',
]
