# splendor_engine/queries.py

"""
Read-only helpers over players and sessions.

Nothing in this module mutates its arguments.
"""

from typing import Dict, List, Optional, Tuple

from .constants import GEM_COLORS, GemColor, TIERS
from .card import DevelopmentCard, NobleTile
from .player import PlayerState
from .session import Phase, Session
from .tokens import GemTokens


def get_current_player(session: Session) -> PlayerState:
    return session.players[session.current_player_index]


def prestige(player: PlayerState) -> int:
    """Card points plus noble points."""
    return sum(card.points for card in player.purchased_cards) + sum(noble.points for noble in player.nobles)


def bonuses(player: PlayerState) -> Dict[GemColor, int]:
    """Count of purchased cards per bonus color; every gem color is present."""
    counts = {color: 0 for color in GEM_COLORS}
    for card in player.purchased_cards:
        counts[card.bonus] += 1
    return counts


def effective_cost(cost: GemTokens, player_bonuses: Dict[GemColor, int]) -> GemTokens:
    """Cost after subtracting bonuses, never below zero per color."""
    return GemTokens({c: cost[c] - player_bonuses.get(c, 0) for c in GEM_COLORS if cost[c] > player_bonuses.get(c, 0)})


def gold_shortfall(player: PlayerState, card: DevelopmentCard) -> int:
    """Number of gold tokens needed on top of the player's colored tokens."""
    eff = effective_cost(card.cost, bonuses(player))
    return sum(max(0, eff[c] - player.tokens[c]) for c in GEM_COLORS)


def can_afford(player: PlayerState, card: DevelopmentCard) -> bool:
    return gold_shortfall(player, card) <= player.tokens[GemColor.GOLD]


def noble_qualifies(player: PlayerState, noble: NobleTile) -> bool:
    player_bonuses = bonuses(player)
    return all(player_bonuses[c] >= noble.requirements[c] for c in GEM_COLORS)


def find_card_in_market(session: Session, card_id: Optional[int]) -> Optional[Tuple[int, int]]:
    """Returns (tier, slot index) of a visible card, or None."""
    if card_id is None:
        return None
    for tier in TIERS:
        index = session.market[tier].index_of(card_id)
        if index != -1:
            return tier, index
    return None


def find_reserved_card(player: PlayerState, card_id: Optional[int]) -> int:
    for index, card in enumerate(player.reserved_cards):
        if card.id == card_id:
            return index
    return -1


def get_available_cards(session: Session, player_index: int) -> List[DevelopmentCard]:
    """Visible market cards (tier 1 to 3) followed by the player's reserved cards."""
    cards: List[DevelopmentCard] = []
    for tier in TIERS:
        cards.extend(session.market[tier].cards())
    cards.extend(session.players[player_index].reserved_cards)
    return cards


def get_affordable_cards(session: Session, player_index: int) -> List[DevelopmentCard]:
    player = session.players[player_index]
    return [card for card in get_available_cards(session, player_index) if can_afford(player, card)]


def is_game_over(session: Session) -> bool:
    return session.phase == Phase.GAME_OVER


def get_winner_index(session: Session) -> int:
    """
    Most prestige wins; ties go to fewer purchased cards, then to the
    lowest seat index.
    """
    best_index = 0
    best_prestige = -1
    best_cards = float('inf')
    for i, player in enumerate(session.players):
        points = prestige(player)
        card_count = len(player.purchased_cards)
        if points > best_prestige or (points == best_prestige and card_count < best_cards):
            best_index = i
            best_prestige = points
            best_cards = card_count
    return best_index
