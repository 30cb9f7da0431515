# splendor_engine/actions.py

"""
Turn action types, the action validator and the legal action enumerator.

validate_action() never mutates the session; game.execute_turn() only
starts changing state after it has returned None.
"""

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .constants import GemColor, GEM_COLORS, TIERS, MAX_RESERVED
from .card import DevelopmentCard
from .player import PlayerState
from .session import Phase, Session
from .queries import can_afford, find_card_in_market, find_reserved_card, get_affordable_cards, get_current_player


class ActionType(Enum):
    TAKE_DIFFERENT = "take-different"
    TAKE_SAME = "take-same"
    RESERVE = "reserve"
    PURCHASE = "purchase"


@dataclass(frozen=True)
class TurnAction:
    action_type: ActionType
    colors: Tuple[GemColor, ...] = ()
    color: Optional[GemColor] = None
    # Market or reserved card id; None with a tier means "top of that tier's deck"
    card_id: Optional[int] = None
    tier: Optional[int] = None

    @classmethod
    def take_different(cls, *colors) -> "TurnAction":
        return cls(ActionType.TAKE_DIFFERENT, colors=tuple(GemColor(c) for c in colors))

    @classmethod
    def take_same(cls, color) -> "TurnAction":
        return cls(ActionType.TAKE_SAME, color=GemColor(color))

    @classmethod
    def reserve(cls, card_id: Optional[int] = None, tier: Optional[int] = None) -> "TurnAction":
        return cls(ActionType.RESERVE, card_id=card_id, tier=tier if card_id is None else None)

    @classmethod
    def purchase(cls, card_id: int) -> "TurnAction":
        return cls(ActionType.PURCHASE, card_id=card_id)

    def __repr__(self) -> str:
        """Provides a human-readable representation for debugging."""
        if self.action_type == ActionType.TAKE_DIFFERENT:
            return f"Action(TAKE_DIFFERENT: {', '.join(GemColor(c).value for c in self.colors)})"
        if self.action_type == ActionType.TAKE_SAME:
            return f"Action(TAKE_SAME: {GemColor(self.color).value})"
        if self.action_type == ActionType.RESERVE:
            if self.card_id is None:
                return f"Action(RESERVE_DECK: T{self.tier})"
            return f"Action(RESERVE: #{self.card_id})"
        if self.action_type == ActionType.PURCHASE:
            return f"Action(PURCHASE: #{self.card_id})"
        return "Action(Unknown)"


# --- Validation ---

def _as_gem_color(value) -> Optional[GemColor]:
    try:
        return GemColor(value)
    except ValueError:
        return None


def validate_action(session: Session, action: TurnAction) -> Optional[str]:
    """
    Checks whether `action` is legal for the current player.

    Returns:
        A description of the problem, or None if the action is legal
    """
    if session.phase == Phase.GAME_OVER:
        return "Game is over"

    player = get_current_player(session)

    if action.action_type == ActionType.TAKE_DIFFERENT:
        return _validate_take_different(session, action)
    if action.action_type == ActionType.TAKE_SAME:
        return _validate_take_same(session, action)
    if action.action_type == ActionType.RESERVE:
        return _validate_reserve(session, player, action)
    if action.action_type == ActionType.PURCHASE:
        return _validate_purchase(session, player, action)
    return f"Unknown action type: {action.action_type}"


def _validate_take_different(session: Session, action: TurnAction) -> Optional[str]:
    colors = list(action.colors)
    if len(colors) == 0 or len(colors) > 3:
        return "Must take 1-3 tokens of different colors"

    gems = [_as_gem_color(c) for c in colors]
    for raw, color in zip(colors, gems):
        if color is None or color not in GEM_COLORS:
            return f"Invalid gem color: {getattr(raw, 'value', raw)}"

    if len(set(gems)) != len(gems):
        return "Colors must be unique when taking different tokens"

    for color in gems:
        if session.token_supply[color] <= 0:
            return f"No {color.value} tokens available in supply"

    # Fewer than 3 is only allowed when fewer than 3 colors are stocked
    if len(gems) < 3:
        stocked = [c for c in GEM_COLORS if session.token_supply[c] > 0]
        if len(stocked) >= 3:
            return "Must take 3 different colors when 3+ colors are available"

    return None


def _validate_take_same(session: Session, action: TurnAction) -> Optional[str]:
    color = _as_gem_color(action.color)
    if color is None or color not in GEM_COLORS:
        return f"Invalid gem color: {getattr(action.color, 'value', action.color)}"
    available = session.token_supply[color]
    if available < 4:
        return f"Need at least 4 {color.value} tokens in supply to take 2 (only {available} available)"
    return None


def _validate_reserve(session: Session, player: PlayerState, action: TurnAction) -> Optional[str]:
    if len(player.reserved_cards) >= MAX_RESERVED:
        return f"Cannot reserve more than {MAX_RESERVED} cards"

    if action.card_id is not None:
        if find_card_in_market(session, action.card_id) is None:
            return f"Card {action.card_id} not found in market"
        return None

    if action.tier is None:
        return "Must specify tier when reserving from deck"
    if action.tier not in TIERS:
        return f"Invalid tier: {action.tier}"
    if not session.market[action.tier].deck:
        return f"Tier {action.tier} deck is empty"
    return None


def _validate_purchase(session: Session, player: PlayerState, action: TurnAction) -> Optional[str]:
    card = locate_purchasable_card(session, player, action.card_id)
    if card is None:
        return f"Card {action.card_id} not found in market or reserved cards"
    if not can_afford(player, card):
        return "Cannot afford this card"
    return None


def locate_purchasable_card(session: Session, player: PlayerState, card_id: Optional[int]) -> Optional[DevelopmentCard]:
    """The market or reserved card with `card_id`, if the player can reach it."""
    found = find_card_in_market(session, card_id)
    if found is not None:
        tier, index = found
        return session.market[tier].visible[index]
    reserved_index = find_reserved_card(player, card_id)
    if reserved_index != -1:
        return player.reserved_cards[reserved_index]
    return None


# --- Legal action enumeration ---

def get_legal_actions(session: Session) -> List[TurnAction]:
    if session.phase == Phase.GAME_OVER:
        return []
    player = get_current_player(session)
    legal_actions: List[TurnAction] = []
    legal_actions.extend(get_legal_token_actions(session))
    legal_actions.extend(get_legal_reserve_actions(session, player))
    legal_actions.extend(get_legal_purchase_actions(session))
    return legal_actions


def get_legal_token_actions(session: Session) -> List[TurnAction]:
    actions: List[TurnAction] = []

    available_colors = [color for color in GEM_COLORS if session.token_supply[color] > 0]
    if len(available_colors) >= 3:
        for combo in itertools.combinations(available_colors, 3):
            actions.append(TurnAction(ActionType.TAKE_DIFFERENT, colors=combo))
    elif available_colors:
        actions.append(TurnAction(ActionType.TAKE_DIFFERENT, colors=tuple(available_colors)))

    for color in GEM_COLORS:
        if session.token_supply[color] >= 4:
            actions.append(TurnAction(ActionType.TAKE_SAME, color=color))
    return actions


def get_legal_reserve_actions(session: Session, player: PlayerState) -> List[TurnAction]:
    actions: List[TurnAction] = []
    if not player.can_reserve():
        return actions
    for tier in TIERS:
        row = session.market[tier]
        for card in row.cards():
            actions.append(TurnAction(ActionType.RESERVE, card_id=card.id))
        if row.deck:
            actions.append(TurnAction(ActionType.RESERVE, tier=tier))
    return actions


def get_legal_purchase_actions(session: Session) -> List[TurnAction]:
    return [
        TurnAction(ActionType.PURCHASE, card_id=card.id)
        for card in get_affordable_cards(session, session.current_player_index)
    ]
