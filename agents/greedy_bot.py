from typing import Dict, List, Optional

import numpy as np

from splendor_engine.actions import ActionType, TurnAction, get_legal_actions
from splendor_engine.card import DevelopmentCard
from splendor_engine.constants import ALL_TOKEN_COLORS, GEM_COLORS, GemColor
from splendor_engine.errors import NoLegalActionError
from splendor_engine.player import PlayerState
from splendor_engine.queries import bonuses, effective_cost, get_available_cards
from splendor_engine.session import Session
from splendor_engine.tokens import GemTokens

# Reserve only when points * 10 - remaining need is above this
RESERVE_SCORE_THRESHOLD = 5
# Reserve only while holding fewer than this many reserved cards
RESERVE_LIMIT = 2
GOLD_USEFULNESS = 100


class GreedyBot:
    """
    Priority ladder:
      1. buy the best affordable card
      2. reserve a valuable market card while holding fewer than 2 reserves
      3. take the tokens that most help toward the best target card
      4. anything legal, at random
    """
    name = "Greedy"

    def choose_turn(self, session: Session, player_index: int, rng: np.random.Generator) -> TurnAction:
        player = session.players[player_index]
        legal_actions = get_legal_actions(session)
        if not legal_actions:
            raise NoLegalActionError(f"No legal actions available for player {player_index}")

        available = {card.id: card for card in get_available_cards(session, player_index)}

        action = self._best_purchase(session, player, legal_actions, available)
        if action:
            return action

        if len(player.reserved_cards) < RESERVE_LIMIT:
            action = self._best_reserve(player, legal_actions, available)
            if action:
                return action

        action = self._best_token_action(player, legal_actions, list(available.values()))
        if action:
            return action

        return legal_actions[int(rng.integers(len(legal_actions)))]

    def choose_discard(self, session: Session, player_index: int, excess: int, rng: np.random.Generator) -> GemTokens:
        return build_smart_discard(session, player_index, excess)

    def _best_purchase(self, session: Session, player: PlayerState, legal_actions: List[TurnAction],
                       available: Dict[int, DevelopmentCard]) -> Optional[TurnAction]:
        best_action = None
        best_score = -float('inf')
        for action in legal_actions:
            if action.action_type != ActionType.PURCHASE:
                continue
            card = available[action.card_id]
            score = card.points * 10 + score_noble_progress(session, player, card.bonus) + card.tier
            if score > best_score:
                best_score = score
                best_action = action
        return best_action

    def _best_reserve(self, player: PlayerState, legal_actions: List[TurnAction],
                      available: Dict[int, DevelopmentCard]) -> Optional[TurnAction]:
        player_bonuses = bonuses(player)
        best_action = None
        best_score = -1
        for action in legal_actions:
            if action.action_type != ActionType.RESERVE or action.card_id is None:
                continue
            card = available.get(action.card_id)
            if card is None or card.points < 2:
                continue
            score = card.points * 10 - remaining_need(player, card, player_bonuses)
            if score > best_score:
                best_score = score
                best_action = action
        if best_action and best_score > RESERVE_SCORE_THRESHOLD:
            return best_action
        return None

    def _best_token_action(self, player: PlayerState, legal_actions: List[TurnAction],
                           candidates: List[DevelopmentCard]) -> Optional[TurnAction]:
        token_actions = [a for a in legal_actions if a.action_type in (ActionType.TAKE_DIFFERENT, ActionType.TAKE_SAME)]
        if not token_actions:
            return None

        player_bonuses = bonuses(player)
        target = find_target_card(player, candidates, player_bonuses)
        target_cost = effective_cost(target.cost, player_bonuses) if target else GemTokens()

        best_action = token_actions[0]
        best_score = -float('inf')
        for action in token_actions:
            if action.action_type == ActionType.TAKE_DIFFERENT:
                score = 0.0
                for color in action.colors:
                    need = target_cost[color] - player.tokens[color]
                    # Still some value in diversifying
                    score += 2 if need > 0 else 0.5
            else:
                need = target_cost[action.color] - player.tokens[action.color]
                score = 4 if need >= 2 else 2 if need == 1 else 1
            if score > best_score:
                best_score = score
                best_action = action
        return best_action


def remaining_need(player: PlayerState, card: DevelopmentCard, player_bonuses: Dict[GemColor, int]) -> int:
    """Colored tokens still missing for `card`, ignoring gold."""
    eff = effective_cost(card.cost, player_bonuses)
    return sum(max(0, eff[c] - player.tokens[c]) for c in GEM_COLORS)


def find_target_card(player: PlayerState, candidates: List[DevelopmentCard],
                     player_bonuses: Dict[GemColor, int]) -> Optional[DevelopmentCard]:
    """The card with the best points * 10 - remaining need."""
    target = None
    best_value = -float('inf')
    for card in candidates:
        value = card.points * 10 - remaining_need(player, card, player_bonuses)
        if value > best_value:
            best_value = value
            target = card
    return target


def score_noble_progress(session: Session, player: PlayerState, bonus_color: GemColor) -> float:
    """How much one more `bonus_color` bonus moves the player toward a noble (0-3)."""
    player_bonuses = bonuses(player)
    best_score = 0.0
    for noble in session.nobles:
        required = noble.requirements[bonus_color]
        if required > 0 and player_bonuses[bonus_color] < required:
            total_progress = 0
            total_required = 0
            for color in GEM_COLORS:
                r = noble.requirements[color]
                total_required += r
                total_progress += min(player_bonuses[color] + (1 if color == bonus_color else 0), r)
            ratio = total_progress / total_required if total_required > 0 else 0
            best_score = max(best_score, ratio * 3)
    return best_score


def build_smart_discard(session: Session, player_index: int, excess: int) -> GemTokens:
    """Drops the tokens least useful toward the cards the player can see."""
    player = session.players[player_index]
    player_bonuses = bonuses(player)

    usefulness = {color: 0 for color in ALL_TOKEN_COLORS}
    for card in get_available_cards(session, player_index):
        eff = effective_cost(card.cost, player_bonuses)
        for color in GEM_COLORS:
            if eff[color] - player.tokens[color] < 0:
                usefulness[color] += card.points
            else:
                usefulness[color] += card.points * 2
    usefulness[GemColor.GOLD] = GOLD_USEFULNESS

    chosen = {}
    remaining = excess
    held_colors = sorted((c for c in ALL_TOKEN_COLORS if player.tokens[c] > 0), key=lambda c: usefulness[c])
    for color in held_colors:
        if remaining <= 0:
            break
        amount = min(player.tokens[color], remaining)
        chosen[color] = amount
        remaining -= amount
    return GemTokens(chosen)
